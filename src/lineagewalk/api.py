"""Public API for lineagewalk.

High-level functions that accept a graph (or a lineage JSON payload/path) and
return complete, structured results with diagnostics attached. Callers that
need the raw tuples should use lineagewalk.kernel directly.
"""

import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from lineagewalk.codes import DiagnosticCode
from lineagewalk.kernel.depth_first import DepthFirstEntry, enumerate_depth_first
from lineagewalk.kernel.diagnostics import CancelSignal, TraversalDiagnostics, TraversalLimitExceeded
from lineagewalk.kernel.filtering import LineageFilter
from lineagewalk.kernel.graph import Direction, GraphModel
from lineagewalk.kernel.grid import LineageGridModel, build_grid_model, count_nodes, resolve_grid_settings
from lineagewalk.kernel.layers import compute_layers
from lineagewalk.kernel.options import Policy, TraversalOptions, make_policy
from lineagewalk._internal.io.lineage_json import LineageDocument, load_lineage_from_path, parse_lineage


GraphSource = Union[GraphModel, LineageDocument, Dict, str, os.PathLike]


class DiagnosticIssue(BaseModel):
    """A single diagnostic (error or warning)."""
    code: str  # DiagnosticCode value
    message: str
    element_id: Optional[str] = None  # Node the issue was found on (edge source for DANGLING_EDGE)
    target_id: Optional[str] = None  # Missing edge target for DANGLING_EDGE


class EntryRow(BaseModel):
    id: str
    distance: int


class LayersResult(BaseModel):
    """Stable result model for depth layering."""
    seed: str
    direction: str
    policy: str
    layers: List[List[str]]  # layers[0] holds distance-1 ids, in discovery order
    node_count: int
    warnings: List[DiagnosticIssue] = Field(default_factory=list)


class DepthFirstResult(BaseModel):
    """Stable result model for the depth-first unrolling."""
    seed: str
    direction: str
    max_distance: int
    entries: List[EntryRow]
    node_counts: Dict[str, int] = Field(default_factory=dict)  # id -> occurrences in entries
    truncated: bool = False
    errors: List[DiagnosticIssue] = Field(default_factory=list)
    warnings: List[DiagnosticIssue] = Field(default_factory=list)


class GridResult(BaseModel):
    """Stable result model for one page of the lineage grid."""
    seed: str
    direction: str
    distance: int
    page_number: int
    max_rows: int
    total_rows: int
    page_count: int
    min_row_index: int
    max_row_index: int
    rows: List[EntryRow]
    node_counts: Dict[str, int] = Field(default_factory=dict)
    truncated: bool = False
    errors: List[DiagnosticIssue] = Field(default_factory=list)
    warnings: List[DiagnosticIssue] = Field(default_factory=list)


def load_graph(source: GraphSource) -> LineageDocument:
    """Normalize any accepted graph source into a LineageDocument."""
    if isinstance(source, LineageDocument):
        return source
    if isinstance(source, GraphModel):
        return LineageDocument(graph=source)
    if isinstance(source, dict):
        return parse_lineage(source)
    return load_lineage_from_path(Path(source))


def _resolve(source: GraphSource, seed: Optional[str]) -> Tuple[GraphModel, str]:
    document = load_graph(source)
    seed = seed or document.seed
    if not seed:
        raise ValueError("No seed given and the lineage payload does not name one")
    return document.graph, seed


def _resolve_policy(policy: Union[None, str, Policy], parent_depth: int, child_depth: int) -> Policy:
    if policy is None:
        return make_policy("all")
    if isinstance(policy, str):
        return make_policy(policy.lower(), parent_depth=parent_depth, child_depth=child_depth)
    return policy


def _warnings(diagnostics: TraversalDiagnostics, seed: str) -> List[DiagnosticIssue]:
    warnings: List[DiagnosticIssue] = []
    if diagnostics.seed_missing:
        warnings.append(DiagnosticIssue(
            code=DiagnosticCode.MISSING_SEED.value,
            message=f"Seed '{seed}' is not in the lineage graph",
            element_id=seed,
        ))
    if diagnostics.seed_filtered:
        warnings.append(DiagnosticIssue(
            code=DiagnosticCode.SEED_FILTERED.value,
            message=f"Seed '{seed}' is in the lineage graph but excluded by the grid filters",
            element_id=seed,
        ))
    seen = set()
    for source_id, target_id in diagnostics.dangling_edges:
        if (source_id, target_id) in seen:
            continue
        seen.add((source_id, target_id))
        warnings.append(DiagnosticIssue(
            code=DiagnosticCode.DANGLING_EDGE.value,
            message=f"Edge {source_id} -> {target_id} points outside the lineage graph; treated as leaf",
            element_id=source_id,
            target_id=target_id,
        ))
    return warnings


def _budget_error(exc: TraversalLimitExceeded) -> DiagnosticIssue:
    return DiagnosticIssue(
        code=DiagnosticCode.VISIT_BUDGET_EXCEEDED.value,
        message=str(exc),
        element_id=exc.seed_id,
    )


def _rows(entries: Iterable[DepthFirstEntry]) -> List[EntryRow]:
    return [EntryRow(id=e.id, distance=e.distance) for e in entries]


def layers(
    graph: GraphSource,
    seed: Optional[str] = None,
    direction: Union[str, Direction] = Direction.CHILD,
    policy: Union[None, str, Policy] = None,
    parent_depth: int = 1,
    child_depth: int = 1,
    cancel: Optional[CancelSignal] = None,
) -> LayersResult:
    """
    Group ancestors or descendants of `seed` into depth layers.

    Args:
        graph: GraphModel, LineageDocument, lineage payload dict, or path to lineage JSON.
        seed: Seed lsid; defaults to the payload's seed.
        direction: "parents"/"children" (or Direction).
        policy: "nearest" | "specific" | "multi" | "all", or a policy model.
        parent_depth: Ancestor depth for the "specific" policy.
        child_depth: Descendant depth for the "specific" policy.
        cancel: Optional cancel signal (e.g. threading.Event).

    Returns:
        LayersResult
    """
    graph_model, seed = _resolve(graph, seed)
    direction = Direction.parse(direction)
    options = TraversalOptions(
        direction=direction,
        policy=_resolve_policy(policy, parent_depth, child_depth),
    )
    diagnostics = TraversalDiagnostics()
    result = compute_layers(graph_model, seed, direction, options, cancel=cancel, diagnostics=diagnostics)

    return LayersResult(
        seed=seed,
        direction=direction.value,
        policy=options.policy.kind,
        layers=[list(layer) for layer in result],
        node_count=sum(len(layer) for layer in result),
        warnings=_warnings(diagnostics, seed),
    )


def depth_first(
    graph: GraphSource,
    seed: Optional[str] = None,
    direction: Union[str, Direction] = Direction.CHILD,
    max_distance: Optional[int] = None,
    max_visits: Optional[int] = None,
    truncate: bool = False,
    cancel: Optional[CancelSignal] = None,
) -> DepthFirstResult:
    """
    Unroll the lineage of `seed` depth-first, one entry per path.

    Args:
        graph: GraphModel, LineageDocument, lineage payload dict, or path to lineage JSON.
        seed: Seed lsid; defaults to the payload's seed.
        direction: "parents"/"children" (or Direction).
        max_distance: Inclusive distance bound (defaults to settings.DEFAULT_LINEAGE_DISTANCE).
        max_visits: Visit budget (defaults to settings.DEFAULT_MAX_VISITS).
        truncate: When the budget is exceeded, return the partial walk with a
            VISIT_BUDGET_EXCEEDED error instead of raising.
        cancel: Optional cancel signal (e.g. threading.Event).

    Raises:
        TraversalLimitExceeded: budget exceeded and truncate is False.
    """
    from lineagewalk import settings

    graph_model, seed = _resolve(graph, seed)
    direction = Direction.parse(direction)
    if max_distance is None:
        max_distance = settings.DEFAULT_LINEAGE_DISTANCE

    diagnostics = TraversalDiagnostics()
    errors: List[DiagnosticIssue] = []
    truncated = False
    try:
        entries = enumerate_depth_first(
            graph_model, seed, direction, max_distance,
            max_visits=max_visits, cancel=cancel, diagnostics=diagnostics,
        )
    except TraversalLimitExceeded as e:
        if not truncate:
            raise
        entries = e.partial
        truncated = True
        errors.append(_budget_error(e))

    return DepthFirstResult(
        seed=seed,
        direction=direction.value,
        max_distance=max_distance,
        entries=_rows(entries),
        node_counts=count_nodes(entries),
        truncated=truncated,
        errors=errors,
        warnings=_warnings(diagnostics, seed),
    )


def grid(
    graph: GraphSource,
    seed: Optional[str] = None,
    direction: Union[None, str, Direction] = None,
    distance: Optional[int] = None,
    page_number: Optional[int] = None,
    max_rows: Optional[int] = None,
    filters: Optional[Iterable[LineageFilter]] = None,
    max_visits: Optional[int] = None,
    truncate: bool = False,
    cancel: Optional[CancelSignal] = None,
) -> GridResult:
    """
    Build one page of the lineage tree table for `seed`.

    Without filters only Sample and Data nodes are listed (see build_grid_model).

    Raises:
        TraversalLimitExceeded: budget exceeded and truncate is False.
    """
    graph_model, seed = _resolve(graph, seed)
    direction = Direction.parse(direction) if direction is not None else None

    diagnostics = TraversalDiagnostics()
    errors: List[DiagnosticIssue] = []
    truncated = False
    try:
        model = build_grid_model(
            graph_model, seed, direction, distance, page_number, filters, max_rows,
            max_visits=max_visits, cancel=cancel, diagnostics=diagnostics,
        )
    except TraversalLimitExceeded as e:
        if not truncate:
            raise
        truncated = True
        errors.append(_budget_error(e))
        # Re-page the partial walk with the same defaults build_grid_model applies
        resolved_direction, resolved_distance, resolved_page, resolved_rows = resolve_grid_settings(
            direction, distance, page_number, max_rows
        )
        model = LineageGridModel(
            entries=e.partial,
            direction=resolved_direction,
            distance=resolved_distance,
            node_counts=count_nodes(e.partial),
            page_number=resolved_page,
            max_rows=resolved_rows,
        )

    return GridResult(
        seed=seed,
        direction=model.direction.value,
        distance=model.distance,
        page_number=model.page_number,
        max_rows=model.max_rows,
        total_rows=model.total_rows,
        page_count=model.page_count,
        min_row_index=model.min_row_index,
        max_row_index=model.max_row_index,
        rows=_rows(model.page_entries()),
        node_counts=dict(model.node_counts),
        truncated=truncated,
        errors=errors,
        warnings=_warnings(diagnostics, seed),
    )
