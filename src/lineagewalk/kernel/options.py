"""Traversal options: direction plus the policy that decides when layering stops.

Policies are a tagged union on `kind`. Each one answers a single question,
`should_expand(current_depth, layer_size_so_far, direction)`, asked before the
layer at `current_depth + 1` is built. `layer_size_so_far` is the number of ids
in the most recently produced layer (0 before the first layer). Adding a policy
means adding a model here; the layering loop does not change.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .graph import Direction


class NearestPolicy(BaseModel):
    """Only the immediate (distance 1) neighbors."""
    kind: Literal["nearest"] = "nearest"

    model_config = ConfigDict(extra="forbid", frozen=True)

    def should_expand(self, current_depth: int, layer_size_so_far: int, direction: Direction) -> bool:
        return current_depth + 1 <= 1


class SpecificPolicy(BaseModel):
    """Expand up to `parent_depth` levels of ancestors or `child_depth` levels of descendants."""
    kind: Literal["specific"] = "specific"
    parent_depth: int = Field(1, ge=0)
    child_depth: int = Field(1, ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)

    def depth_for(self, direction: Direction) -> int:
        if Direction.parse(direction) is Direction.PARENT:
            return self.parent_depth
        return self.child_depth

    def should_expand(self, current_depth: int, layer_size_so_far: int, direction: Direction) -> bool:
        return current_depth + 1 <= self.depth_for(direction)


class MultiPolicy(BaseModel):
    """Follow the single-lineage trunk; stop after the first layer holding more than one id.

    The branching layer itself is kept, nothing beyond it is produced.
    """
    kind: Literal["multi"] = "multi"

    model_config = ConfigDict(extra="forbid", frozen=True)

    def should_expand(self, current_depth: int, layer_size_so_far: int, direction: Direction) -> bool:
        return layer_size_so_far <= 1


class AllPolicy(BaseModel):
    """Every reachable generation; the visited set bounds the walk."""
    kind: Literal["all"] = "all"

    model_config = ConfigDict(extra="forbid", frozen=True)

    def should_expand(self, current_depth: int, layer_size_so_far: int, direction: Direction) -> bool:
        return True


Policy = Annotated[
    Union[NearestPolicy, SpecificPolicy, MultiPolicy, AllPolicy],
    Field(discriminator="kind"),
]

POLICY_KINDS = ("nearest", "specific", "multi", "all")


class TraversalOptions(BaseModel):
    """Which direction to walk and when to stop."""
    direction: Direction = Direction.CHILD
    policy: Policy = Field(default_factory=AllPolicy)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("direction", mode="before")
    @classmethod
    def parse_direction(cls, v):
        """Accept the same spellings as Direction.parse (parent/parents/child/children)."""
        return Direction.parse(v)

    def for_direction(self, direction: Direction) -> "TraversalOptions":
        return self.model_copy(update={"direction": Direction.parse(direction)})


def make_policy(kind: str, parent_depth: int = 1, child_depth: int = 1) -> Policy:
    """Build a policy from its `kind` name (used by the CLI and the dict-based API)."""
    if kind == "nearest":
        return NearestPolicy()
    if kind == "specific":
        return SpecificPolicy(parent_depth=parent_depth, child_depth=child_depth)
    if kind == "multi":
        return MultiPolicy()
    if kind == "all":
        return AllPolicy()
    raise ValueError(f"Unknown grouping policy '{kind}'; expected one of {', '.join(POLICY_KINDS)}")
