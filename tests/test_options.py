"""Tests for traversal options and stopping policies."""

import pytest
from pydantic import ValidationError

from lineagewalk.kernel.graph import Direction
from lineagewalk.kernel.options import (
    AllPolicy,
    MultiPolicy,
    NearestPolicy,
    SpecificPolicy,
    TraversalOptions,
    make_policy,
)


def test_nearest_only_first_generation():
    policy = NearestPolicy()
    assert policy.should_expand(0, 0, Direction.CHILD) is True
    assert policy.should_expand(1, 1, Direction.CHILD) is False


def test_specific_uses_depth_for_direction():
    policy = SpecificPolicy(parent_depth=3, child_depth=1)
    assert policy.should_expand(2, 5, Direction.PARENT) is True
    assert policy.should_expand(3, 5, Direction.PARENT) is False
    assert policy.should_expand(0, 0, Direction.CHILD) is True
    assert policy.should_expand(1, 1, Direction.CHILD) is False


def test_specific_zero_depth_never_expands():
    policy = SpecificPolicy(parent_depth=0, child_depth=0)
    assert policy.should_expand(0, 0, Direction.PARENT) is False
    assert policy.should_expand(0, 0, Direction.CHILD) is False


def test_specific_rejects_negative_depth():
    with pytest.raises(ValidationError):
        SpecificPolicy(parent_depth=-1)


def test_multi_stops_after_branching_layer():
    policy = MultiPolicy()
    assert policy.should_expand(0, 0, Direction.CHILD) is True
    assert policy.should_expand(3, 1, Direction.CHILD) is True
    assert policy.should_expand(4, 2, Direction.CHILD) is False


def test_all_always_expands():
    assert AllPolicy().should_expand(1000, 50, Direction.PARENT) is True


def test_options_defaults_and_discriminator():
    options = TraversalOptions()
    assert options.direction is Direction.CHILD
    assert isinstance(options.policy, AllPolicy)

    parsed = TraversalOptions(direction="parents", policy={"kind": "specific", "parent_depth": 2})
    assert parsed.direction is Direction.PARENT
    assert isinstance(parsed.policy, SpecificPolicy)
    assert parsed.policy.parent_depth == 2


def test_options_reject_unknown_policy_kind():
    with pytest.raises(ValidationError):
        TraversalOptions(policy={"kind": "widest"})


def test_options_are_frozen():
    options = TraversalOptions()
    with pytest.raises(ValidationError):
        options.direction = Direction.PARENT


def test_for_direction_returns_copy():
    options = TraversalOptions(policy=NearestPolicy())
    flipped = options.for_direction("parent")
    assert flipped.direction is Direction.PARENT
    assert options.direction is Direction.CHILD
    assert flipped.policy == options.policy


@pytest.mark.parametrize("kind,expected_type", [
    ("nearest", NearestPolicy),
    ("specific", SpecificPolicy),
    ("multi", MultiPolicy),
    ("all", AllPolicy),
])
def test_make_policy(kind, expected_type):
    assert isinstance(make_policy(kind), expected_type)


def test_make_policy_unknown():
    with pytest.raises(ValueError):
        make_policy("widest")


@pytest.mark.parametrize("spelling,expected", [
    ("parent", Direction.PARENT),
    ("Parents", Direction.PARENT),
    ("child", Direction.CHILD),
    ("CHILDREN", Direction.CHILD),
])
def test_options_accept_direction_spellings(spelling, expected):
    assert TraversalOptions(direction=spelling).direction is expected


def test_options_reject_unknown_direction():
    with pytest.raises(ValidationError):
        TraversalOptions(direction="sideways")
