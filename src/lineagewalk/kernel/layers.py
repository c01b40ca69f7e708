"""Group ancestors or descendants of a seed into depth layers.

Layering is breadth-first, but every level is gated by the traversal policy
before it is built, so it is not a plain BFS:

1. `visited` starts with the seed; the frontier is `[seed]`, depth 0.
2. Ask the policy whether layer `depth + 1` may be built.
3. Walk each frontier node's edges in edge order; every target not yet visited
   is appended to the new layer and marked visited.
4. The new layer becomes the next frontier. Stop when the policy says so or
   the new layer is empty.

An id lands in at most one layer, at the depth it was first discovered, and
the seed never lands in a layer. The visited set doubles as the cycle guard.
Layer order follows edge order, never mapping iteration order.
"""

import logging
from typing import List, Optional, Tuple

from .diagnostics import (
    CancelSignal,
    TraversalDiagnostics,
    check_cancelled,
    note_dangling,
)
from .graph import Direction, GraphModel
from .options import TraversalOptions

_LOGGER = logging.getLogger(__name__)

DepthLayer = Tuple[str, ...]


def compute_layers(
    graph: GraphModel,
    seed_id: str,
    direction: Optional[Direction] = None,
    options: Optional[TraversalOptions] = None,
    *,
    cancel: Optional[CancelSignal] = None,
    diagnostics: Optional[TraversalDiagnostics] = None,
) -> Tuple[DepthLayer, ...]:
    """
    Compute depth layers from `seed_id` in one direction.

    Args:
        graph: Lineage graph to walk (never mutated).
        seed_id: Entity to start from. A seed missing from the graph yields ().
        direction: Parent (ancestors) or Child (descendants); overrides
            `options.direction` when given.
        options: Direction and stopping policy (defaults to all generations).
        cancel: Optional signal checked before every frontier expansion.
        diagnostics: Optional collector for dangling edges and visit counts.

    Returns:
        Tuple of layers; index 0 holds the ids at distance 1.

    Raises:
        TraversalCancelled: if `cancel` is set during the walk.
    """
    options = options or TraversalOptions()
    direction = Direction.parse(direction if direction is not None else options.direction)
    policy = options.policy

    if seed_id not in graph:
        _LOGGER.debug("Seed %s not in lineage graph; no layers", seed_id)
        if diagnostics is not None:
            diagnostics.seed_missing = True
        return ()

    visited = {seed_id}
    frontier: List[str] = [seed_id]
    layers: List[DepthLayer] = []
    visits = 0

    while frontier:
        check_cancelled(cancel, seed_id, visits)

        last_size = len(layers[-1]) if layers else 0
        if not policy.should_expand(len(layers), last_size, direction):
            break

        layer: List[str] = []
        for node_id in frontier:
            node = graph.get(node_id)
            if node is None:
                # Dangling target from the previous layer: leaf
                continue
            visits += 1
            for edge in node.edges(direction):
                target = edge.target
                if target in visited:
                    continue
                visited.add(target)
                layer.append(target)
                if target not in graph:
                    note_dangling(diagnostics, node_id, target)

        if not layer:
            break
        layers.append(tuple(layer))
        frontier = layer

    if diagnostics is not None:
        diagnostics.visits += visits

    return tuple(layers)
