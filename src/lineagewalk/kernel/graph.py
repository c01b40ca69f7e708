"""Immutable lineage graph: entities keyed by lsid with ordered parent/child edges."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple


class Direction(str, Enum):
    """Traversal direction. Values match the edge-list keys of the lineage JSON."""

    PARENT = "parents"
    CHILD = "children"

    @classmethod
    def parse(cls, value: "str | Direction") -> "Direction":
        """Accept 'parent', 'parents', 'child', 'children' (case-insensitive)."""
        if isinstance(value, Direction):
            return value
        normalized = str(value).strip().lower()
        if normalized in ("parent", "parents"):
            return cls.PARENT
        if normalized in ("child", "children"):
            return cls.CHILD
        raise ValueError(f"Unknown lineage direction: {value!r}")


class GraphValidationError(ValueError):
    """Raised when a graph cannot be constructed from the given nodes."""


_EMPTY_METADATA: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class Edge:
    """Reference to another node, owned by the node that declares it."""

    target: str
    position: int = 0
    role: Optional[str] = None


@dataclass(frozen=True)
class Node:
    """A lineage vertex (sample, material, data, run...)."""

    id: str
    parent_edges: Tuple[Edge, ...] = ()
    child_edges: Tuple[Edge, ...] = ()
    metadata: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        if not self.id:
            raise GraphValidationError("Node id must be a non-empty string")
        # Freeze whatever sequence/mapping the caller handed us
        object.__setattr__(self, "parent_edges", _ordered(self.parent_edges))
        object.__setattr__(self, "child_edges", _ordered(self.child_edges))
        if not isinstance(self.metadata, MappingProxyType):
            object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata or {})))

    def edges(self, direction: Direction) -> Tuple[Edge, ...]:
        """Edges in the given direction, in edge order."""
        if direction is Direction.PARENT:
            return self.parent_edges
        return self.child_edges


def _ordered(edges: Iterable[Edge]) -> Tuple[Edge, ...]:
    # sorted() is stable: equal positions keep declaration order
    return tuple(sorted(edges, key=lambda e: e.position))


def edges_to(targets: Sequence[str], roles: Optional[Sequence[Optional[str]]] = None) -> Tuple[Edge, ...]:
    """Build an edge tuple whose positions follow the order of `targets`."""
    if roles is None:
        return tuple(Edge(target=t, position=i) for i, t in enumerate(targets))
    return tuple(Edge(target=t, position=i, role=r) for i, (t, r) in enumerate(zip(targets, roles)))


class GraphModel:
    """Read-only mapping from lsid to Node.

    Built once from a fetched lineage neighborhood; nothing in the traversal
    kernel mutates it, so one instance can be shared by concurrent callers.
    Edges may reference ids that are not keys (dangling); traversals treat
    those as leaves.
    """

    __slots__ = ("_nodes",)

    def __init__(self, nodes: Mapping[str, Node] | None = None):
        frozen: Dict[str, Node] = {}
        for key, node in (nodes or {}).items():
            if key != node.id:
                raise GraphValidationError(f"Node key '{key}' does not match node id '{node.id}'")
            frozen[key] = node
        self._nodes: Mapping[str, Node] = MappingProxyType(frozen)

    @classmethod
    def from_nodes(cls, nodes: Iterable[Node]) -> "GraphModel":
        """Build a graph from nodes, rejecting duplicate ids."""
        by_id: Dict[str, Node] = {}
        duplicates = set()
        for node in nodes:
            if node.id in by_id:
                duplicates.add(node.id)
            by_id[node.id] = node
        if duplicates:
            raise GraphValidationError(f"Duplicate node ids: {sorted(duplicates)}")
        return cls(by_id)

    @classmethod
    def from_child_map(
        cls,
        children: Mapping[str, Sequence[str]],
        metadata: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ) -> "GraphModel":
        """Build a graph from an adjacency map of `id -> [child ids]`.

        Parent edges are derived from the child lists, ordered by the order in
        which the map declares them. Every id mentioned (as key or child)
        becomes a node; use `GraphModel(...)` directly to model dangling edges.
        """
        order: List[str] = []
        seen = set()
        parents: Dict[str, List[str]] = {}

        def _touch(node_id: str) -> None:
            if node_id not in seen:
                seen.add(node_id)
                order.append(node_id)

        for parent_id, child_ids in children.items():
            _touch(parent_id)
            for child_id in child_ids:
                _touch(child_id)
                parents.setdefault(child_id, []).append(parent_id)

        metadata = metadata or {}
        return cls.from_nodes(
            Node(
                id=node_id,
                parent_edges=edges_to(parents.get(node_id, ())),
                child_edges=edges_to(children.get(node_id, ())),
                metadata=metadata.get(node_id, _EMPTY_METADATA),
            )
            for node_id in order
        )

    def get(self, node_id: str) -> Optional[Node]:
        """Look up a node; None when the id is not part of this graph."""
        return self._nodes.get(node_id)

    def ids(self) -> Tuple[str, ...]:
        return tuple(self._nodes)

    def nodes(self) -> Tuple[Node, ...]:
        return tuple(self._nodes.values())

    def __getitem__(self, node_id: str) -> Node:
        return self._nodes[node_id]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"GraphModel(nodes={len(self._nodes)})"
