"""Depth-first (preorder) unrolling of a lineage graph for tree-style rendering.

There is no shared visited set: a node reachable along two paths is emitted
once per path, each time with the distance of that path. Distance bounds the
depth of the walk and `max_visits` bounds its total size, so cycles and dense
diamonds cannot make the loop run away.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .diagnostics import (
    CancelSignal,
    TraversalDiagnostics,
    TraversalLimitExceeded,
    check_cancelled,
    note_dangling,
)
from .graph import Direction, GraphModel

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DepthFirstEntry:
    """One row of the unrolled tree: an entity and its distance along this path."""
    id: str
    distance: int


def enumerate_depth_first(
    graph: GraphModel,
    seed_id: str,
    direction: Direction,
    max_distance: int,
    *,
    max_visits: Optional[int] = None,
    cancel: Optional[CancelSignal] = None,
    diagnostics: Optional[TraversalDiagnostics] = None,
) -> Tuple[DepthFirstEntry, ...]:
    """
    Preorder walk from `seed_id`, emitting `(id, distance)` for every path.

    The seed is emitted first at distance 0. A node at distance k is expanded
    only when k < max_distance; its edges are followed in edge order.

    Args:
        graph: Lineage graph to walk (never mutated).
        seed_id: Entity to start from. A seed missing from the graph yields ().
        direction: Parent (ancestors) or Child (descendants).
        max_distance: Inclusive bound on emitted distances (>= 0).
        max_visits: Maximum number of entries to emit; defaults to
            `lineagewalk.settings.DEFAULT_MAX_VISITS`.
        cancel: Optional signal checked before each entry is emitted.
        diagnostics: Optional collector for dangling edges and visit counts.

    Raises:
        ValueError: if max_distance or max_visits is negative.
        TraversalLimitExceeded: if more than `max_visits` entries would be
            emitted; `partial` holds the first `max_visits` entries.
        TraversalCancelled: if `cancel` is set during the walk.
    """
    if max_distance < 0:
        raise ValueError(f"max_distance must be >= 0, got {max_distance}")
    if max_visits is None:
        from lineagewalk.settings import DEFAULT_MAX_VISITS
        max_visits = DEFAULT_MAX_VISITS
    if max_visits < 0:
        raise ValueError(f"max_visits must be >= 0, got {max_visits}")
    direction = Direction.parse(direction)

    if seed_id not in graph:
        _LOGGER.debug("Seed %s not in lineage graph; nothing to enumerate", seed_id)
        if diagnostics is not None:
            diagnostics.seed_missing = True
        return ()

    entries: List[DepthFirstEntry] = []
    # Work stack of (id, distance); children are pushed in reverse so the
    # first edge is popped first and preorder matches edge order.
    stack: List[Tuple[str, int]] = [(seed_id, 0)]

    try:
        while stack:
            check_cancelled(cancel, seed_id, len(entries))
            node_id, distance = stack.pop()

            if len(entries) >= max_visits:
                _LOGGER.warning(
                    "Depth-first walk from %s hit visit budget %d (max_distance=%d)",
                    seed_id, max_visits, max_distance,
                )
                raise TraversalLimitExceeded(max_visits, seed_id, entries)
            entries.append(DepthFirstEntry(id=node_id, distance=distance))

            if distance >= max_distance:
                continue
            node = graph.get(node_id)
            if node is None:
                continue

            edges = node.edges(direction)
            for edge in edges:
                if edge.target not in graph:
                    note_dangling(diagnostics, node_id, edge.target)
            stack.extend((edge.target, distance + 1) for edge in reversed(edges))
    finally:
        if diagnostics is not None:
            diagnostics.visits += len(entries)

    return tuple(entries)
