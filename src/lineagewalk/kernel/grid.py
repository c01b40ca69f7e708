"""Paged tree-table view over the depth-first unrolling of a lineage."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .depth_first import DepthFirstEntry, enumerate_depth_first
from .diagnostics import CancelSignal, TraversalDiagnostics
from .filtering import LineageFilter, filter_graph
from .graph import Direction, GraphModel

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineageGridModel:
    """Rows of a lineage tree table plus paging state."""
    entries: Tuple[DepthFirstEntry, ...]
    direction: Direction
    distance: int
    node_counts: Mapping[str, int] = field(default_factory=dict)  # id -> rows it occupies
    page_number: int = 1
    max_rows: int = 20

    @property
    def seed_entry(self) -> Optional[DepthFirstEntry]:
        return self.entries[0] if self.entries else None

    @property
    def total_rows(self) -> int:
        return len(self.entries)

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.max_rows if self.page_number > 1 else 0

    @property
    def max_row_index(self) -> int:
        return min(self.page_number * self.max_rows, self.total_rows)

    @property
    def min_row_index(self) -> int:
        return self.offset + 1

    @property
    def page_count(self) -> int:
        if not self.entries:
            return 0
        return -(-self.total_rows // self.max_rows)

    def page_entries(self) -> Tuple[DepthFirstEntry, ...]:
        return self.entries[self.offset:self.max_row_index]


def count_nodes(entries: Iterable[DepthFirstEntry]) -> Dict[str, int]:
    """How many rows each id occupies in a tree unrolling (insertion-ordered)."""
    counts: Dict[str, int] = {}
    for entry in entries:
        counts[entry.id] = counts.get(entry.id, 0) + 1
    return counts


def resolve_grid_settings(
    direction: Optional[Direction] = None,
    distance: Optional[int] = None,
    page_number: Optional[int] = None,
    max_rows: Optional[int] = None,
) -> Tuple[Direction, int, int, int]:
    """Fill unset grid arguments from lineagewalk.settings and validate paging.

    Returns:
        (direction, distance, page_number, max_rows)

    Raises:
        ValueError: if page_number or max_rows is below 1.
    """
    from lineagewalk import settings

    direction = Direction.parse(direction if direction is not None else settings.DEFAULT_LINEAGE_DIRECTION)
    distance = settings.DEFAULT_LINEAGE_DISTANCE if distance is None else distance
    page_number = 1 if page_number is None else page_number
    max_rows = settings.DEFAULT_GRID_PAGE_SIZE if max_rows is None else max_rows
    if page_number < 1:
        raise ValueError(f"page_number must be >= 1, got {page_number}")
    if max_rows < 1:
        raise ValueError(f"max_rows must be >= 1, got {max_rows}")
    return direction, distance, page_number, max_rows


def build_grid_model(
    graph: GraphModel,
    seed_id: str,
    direction: Optional[Direction] = None,
    distance: Optional[int] = None,
    page_number: Optional[int] = None,
    filters: Optional[Iterable[LineageFilter]] = None,
    max_rows: Optional[int] = None,
    *,
    max_visits: Optional[int] = None,
    cancel: Optional[CancelSignal] = None,
    diagnostics: Optional[TraversalDiagnostics] = None,
) -> LineageGridModel:
    """Filter the lineage, unroll it depth-first from the seed and page the rows.

    Without explicit filters only Sample and Data nodes are listed; nodes in
    between (runs) are pruned and their edges rewired. A seed that exists but
    is removed by the filters gives an empty grid and sets
    `diagnostics.seed_filtered`, not `seed_missing`.
    """
    from lineagewalk import settings

    direction, distance, page_number, max_rows = resolve_grid_settings(
        direction, distance, page_number, max_rows
    )
    if filters is None:
        filters = [LineageFilter(field="type", value=list(settings.DEFAULT_GRID_NODE_TYPES))]

    filtered = filter_graph(graph, filters)
    if seed_id in graph and seed_id not in filtered:
        _LOGGER.debug("Seed %s removed by grid filters; no rows", seed_id)
        if diagnostics is not None:
            diagnostics.seed_filtered = True
        entries: Tuple[DepthFirstEntry, ...] = ()
    else:
        entries = enumerate_depth_first(
            filtered,
            seed_id,
            direction,
            distance,
            max_visits=max_visits,
            cancel=cancel,
            diagnostics=diagnostics,
        )

    return LineageGridModel(
        entries=entries,
        direction=direction,
        distance=distance,
        node_counts=MappingProxyType(count_nodes(entries)),
        page_number=page_number,
        max_rows=max_rows,
    )
