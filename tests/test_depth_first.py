"""Tests for the depth-first unrolling (enumerate_depth_first)."""

import threading

import pytest

from lineagewalk.kernel.depth_first import DepthFirstEntry, enumerate_depth_first
from lineagewalk.kernel.diagnostics import (
    TraversalCancelled,
    TraversalDiagnostics,
    TraversalLimitExceeded,
)
from lineagewalk.kernel.graph import Direction, GraphModel, Node, edges_to


def _pairs(entries):
    return [(e.id, e.distance) for e in entries]


def test_concrete_scenario(abc_graph):
    """A->B->C, A->D, maxDistance=2: [A0, B1, C2, D1]."""
    entries = enumerate_depth_first(abc_graph, "A", Direction.CHILD, 2)
    assert entries == (
        DepthFirstEntry("A", 0),
        DepthFirstEntry("B", 1),
        DepthFirstEntry("C", 2),
        DepthFirstEntry("D", 1),
    )


def test_max_distance_zero_is_seed_only(abc_graph):
    assert _pairs(enumerate_depth_first(abc_graph, "A", Direction.CHILD, 0)) == [("A", 0)]


def test_max_distance_bounds_depth(abc_graph):
    assert _pairs(enumerate_depth_first(abc_graph, "A", Direction.CHILD, 1)) == [("A", 0), ("B", 1), ("D", 1)]


def test_parent_direction(abc_graph):
    assert _pairs(enumerate_depth_first(abc_graph, "C", Direction.PARENT, 5)) == [("C", 0), ("B", 1), ("A", 2)]


def test_missing_seed_returns_empty(abc_graph):
    diagnostics = TraversalDiagnostics()
    assert enumerate_depth_first(abc_graph, "missing", Direction.CHILD, 3, diagnostics=diagnostics) == ()
    assert diagnostics.seed_missing is True


def test_negative_max_distance_rejected(abc_graph):
    with pytest.raises(ValueError):
        enumerate_depth_first(abc_graph, "A", Direction.CHILD, -1)


def test_node_emitted_once_per_path(diamond_graph):
    """A -> (B, C) -> D: D appears under B and under C, each at distance 2."""
    entries = enumerate_depth_first(diamond_graph, "A", Direction.CHILD, 2)
    assert _pairs(entries) == [("A", 0), ("B", 1), ("D", 2), ("C", 1), ("D", 2)]


def test_paths_of_different_lengths_keep_their_own_distance():
    """A -> B -> C and A -> C: C at distance 2 (via B) and 1 (direct)."""
    graph = GraphModel.from_child_map({"A": ["B", "C"], "B": ["C"]})
    entries = enumerate_depth_first(graph, "A", Direction.CHILD, 3)
    assert _pairs(entries) == [("A", 0), ("B", 1), ("C", 2), ("C", 1)]


def test_distance_matches_path_length(trunk_then_branch_graph):
    entries = enumerate_depth_first(trunk_then_branch_graph, "seed", Direction.CHILD, 10)
    # Preorder: every entry's parent is the closest earlier entry one level up
    stack = []
    for entry in entries:
        while stack and stack[-1].distance >= entry.distance:
            stack.pop()
        if entry.distance == 0:
            assert entry.id == "seed"
        else:
            parent = stack[-1]
            assert parent.distance == entry.distance - 1
            child_ids = [e.target for e in trunk_then_branch_graph[parent.id].child_edges]
            assert entry.id in child_ids
        stack.append(entry)
    assert max(e.distance for e in entries) == 5


def test_cycle_is_bounded_by_max_distance():
    """A <-> B: the cycle is re-emitted up to max_distance, then stops."""
    graph = GraphModel.from_child_map({"A": ["B"], "B": ["A"]})
    entries = enumerate_depth_first(graph, "A", Direction.CHILD, 4)
    assert _pairs(entries) == [("A", 0), ("B", 1), ("A", 2), ("B", 3), ("A", 4)]


def test_dense_cycle_hits_visit_budget():
    """Every node points at every node: breadth explodes long before distance does."""
    ids = [f"N{i}" for i in range(4)]
    graph = GraphModel.from_child_map({node_id: ids for node_id in ids})

    with pytest.raises(TraversalLimitExceeded) as exc_info:
        enumerate_depth_first(graph, "N0", Direction.CHILD, 50, max_visits=100)

    err = exc_info.value
    assert err.limit == 100
    assert err.seed_id == "N0"
    assert len(err.partial) == 100
    assert err.partial[0] == DepthFirstEntry("N0", 0)


def test_budget_exactly_met_does_not_raise(abc_graph):
    entries = enumerate_depth_first(abc_graph, "A", Direction.CHILD, 2, max_visits=4)
    assert len(entries) == 4
    with pytest.raises(TraversalLimitExceeded):
        enumerate_depth_first(abc_graph, "A", Direction.CHILD, 2, max_visits=3)


def test_default_budget_comes_from_settings(monkeypatch, abc_graph):
    from lineagewalk import settings
    monkeypatch.setattr(settings, "DEFAULT_MAX_VISITS", 2)
    with pytest.raises(TraversalLimitExceeded) as exc_info:
        enumerate_depth_first(abc_graph, "A", Direction.CHILD, 2)
    assert exc_info.value.limit == 2


def test_deep_chain_does_not_hit_recursion_limit():
    depth = 5000
    chain = {f"n{i}": [f"n{i + 1}"] for i in range(depth)}
    graph = GraphModel.from_child_map(chain)
    entries = enumerate_depth_first(graph, "n0", Direction.CHILD, depth)
    assert len(entries) == depth + 1
    assert entries[-1] == DepthFirstEntry(f"n{depth}", depth)


def test_dangling_edge_is_emitted_as_leaf():
    graph = GraphModel.from_nodes([
        Node(id="A", child_edges=edges_to(["ghost", "B"])),
        Node(id="B", parent_edges=edges_to(["A"])),
    ])
    diagnostics = TraversalDiagnostics()
    entries = enumerate_depth_first(graph, "A", Direction.CHILD, 3, diagnostics=diagnostics)

    assert _pairs(entries) == [("A", 0), ("ghost", 1), ("B", 1)]
    assert diagnostics.dangling_edges == [("A", "ghost")]
    assert diagnostics.visits == 3


def test_dangling_beyond_max_distance_not_reported():
    graph = GraphModel.from_nodes([Node(id="A", child_edges=edges_to(["ghost"]))])
    diagnostics = TraversalDiagnostics()
    enumerate_depth_first(graph, "A", Direction.CHILD, 0, diagnostics=diagnostics)
    assert diagnostics.dangling_count == 0


def test_cancel_signal_raises(abc_graph):
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(TraversalCancelled):
        enumerate_depth_first(abc_graph, "A", Direction.CHILD, 2, cancel=cancel)


def test_accepts_direction_strings(abc_graph):
    entries = enumerate_depth_first(abc_graph, "C", "parents", 1)
    assert _pairs(entries) == [("C", 0), ("B", 1)]
