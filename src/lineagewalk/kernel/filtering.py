"""Filter lineage nodes by metadata while keeping the remaining lineage connected.

When a node is removed, every edge pointing at it is replaced by edges to the
nearest retained nodes reachable through removed nodes in the same direction.
This is how runs are hidden from a sample lineage: S1 -> R1 -> S2 becomes
S1 -> S2.
"""

from typing import Dict, Iterable, List, Sequence, Set, Union

from pydantic import BaseModel, ConfigDict

from .graph import Direction, Edge, GraphModel, Node

FilterValue = Union[None, str, int, bool, List[Union[str, int, bool]]]


class LineageFilter(BaseModel):
    """Match nodes on a metadata field.

    value None: the field is present. value list: the field equals any item.
    Otherwise: the field equals value.
    """
    field: str
    value: FilterValue = None

    model_config = ConfigDict(extra="forbid", frozen=True)

    def matches(self, node: Node, keep_matching: bool = True) -> bool:
        """True if the node is retained under this filter."""
        metadata = node.metadata
        if keep_matching:
            if self.value is None:
                return self.field in metadata
            if isinstance(self.value, list):
                return metadata.get(self.field) in self.value
            return metadata.get(self.field) == self.value
        if self.value is None:
            return self.field not in metadata
        if isinstance(self.value, list):
            return metadata.get(self.field) not in self.value
        return metadata.get(self.field) != self.value


def filter_graph(
    graph: GraphModel,
    filters: Iterable[LineageFilter],
    keep_matching: bool = True,
) -> GraphModel:
    """Apply filters in sequence; each pass prunes nodes and rewires edges.

    Args:
        graph: Source graph (left untouched).
        filters: Filters to apply, in order.
        keep_matching: Keep nodes that match (True) or nodes that do not (False).

    Returns:
        A new GraphModel.
    """
    result = graph
    for lineage_filter in filters:
        result = _apply_filter(result, lineage_filter, keep_matching)
    return result


def _apply_filter(graph: GraphModel, lineage_filter: LineageFilter, keep_matching: bool) -> GraphModel:
    retained: Dict[str, Node] = {}
    for node in graph.nodes():
        if not lineage_filter.matches(node, keep_matching):
            continue
        retained[node.id] = Node(
            id=node.id,
            parent_edges=_prune(node, graph, Direction.PARENT, lineage_filter, keep_matching),
            child_edges=_prune(node, graph, Direction.CHILD, lineage_filter, keep_matching),
            metadata=node.metadata,
        )
    return GraphModel(retained)


def _prune(
    node: Node,
    graph: GraphModel,
    direction: Direction,
    lineage_filter: LineageFilter,
    keep_matching: bool,
) -> List[Edge]:
    walked: Set[str] = set()
    kept: List[Edge] = []
    for edge in node.edges(direction):
        kept.extend(_prune_edge(edge, graph, direction, lineage_filter, keep_matching, walked))

    # Renumber positions; a target reached through several removed nodes is kept once
    seen: Set[str] = set()
    result: List[Edge] = []
    for edge in kept:
        if edge.target in seen:
            continue
        seen.add(edge.target)
        result.append(Edge(target=edge.target, position=len(result), role=edge.role))
    return result


def _prune_edge(
    edge: Edge,
    graph: GraphModel,
    direction: Direction,
    lineage_filter: LineageFilter,
    keep_matching: bool,
    walked: Set[str],
) -> Sequence[Edge]:
    # Explicit stack instead of recursion; walked keeps each removed node to one expansion
    heritage: List[Edge] = []
    stack: List[Edge] = [edge]
    while stack:
        current = stack.pop()
        target = graph.get(current.target)
        if target is None:
            # Dangling: keep as-is so traversal still reports it
            heritage.append(current)
            continue
        if lineage_filter.matches(target, keep_matching):
            heritage.append(current)
            continue
        if target.id in walked:
            continue
        walked.add(target.id)
        stack.extend(reversed(target.edges(direction)))
    return heritage
