"""Traversal errors and the optional diagnostics collector shared by both engines."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence, Tuple

_LOGGER = logging.getLogger(__name__)


class TraversalError(Exception):
    """Base exception for lineage traversal errors."""
    pass


class TraversalLimitExceeded(TraversalError):
    """Raised when a traversal would visit more nodes than its budget allows.

    `partial` holds what was produced before the budget ran out, so a caller
    can decide to render a truncated result instead of failing.
    """
    def __init__(self, limit: int, seed_id: str, partial: Sequence = ()):
        self.limit = limit
        self.seed_id = seed_id
        self.partial = tuple(partial)
        super().__init__(
            f"Traversal from '{seed_id}' exceeded visit budget of {limit} nodes"
        )


class TraversalCancelled(TraversalError):
    """Raised when the caller's cancel signal is set mid-traversal."""
    def __init__(self, seed_id: str, visits: int):
        self.seed_id = seed_id
        self.visits = visits
        super().__init__(f"Traversal from '{seed_id}' cancelled after {visits} visits")


class CancelSignal(Protocol):
    """Anything with `is_set()`; `threading.Event` is the usual implementation."""

    def is_set(self) -> bool:
        ...


def check_cancelled(cancel: Optional[CancelSignal], seed_id: str, visits: int) -> None:
    if cancel is not None and cancel.is_set():
        raise TraversalCancelled(seed_id, visits)


@dataclass
class TraversalDiagnostics:
    """Caller-owned record of what a traversal ran into.

    Pass a fresh instance per call; the engines only append to it.
    """
    seed_missing: bool = False
    seed_filtered: bool = False  # seed exists but a filter removed it (grid only)
    visits: int = 0
    dangling_edges: List[Tuple[str, str]] = field(default_factory=list)  # (source_id, target_id)

    def record_dangling(self, source_id: str, target_id: str) -> None:
        self.dangling_edges.append((source_id, target_id))

    @property
    def dangling_count(self) -> int:
        return len(self.dangling_edges)

    @property
    def dangling_targets(self) -> List[str]:
        """Distinct dangling target ids in first-seen order."""
        seen = set()
        targets = []
        for _, target in self.dangling_edges:
            if target not in seen:
                seen.add(target)
                targets.append(target)
        return targets


def note_dangling(diagnostics: Optional[TraversalDiagnostics], source_id: str, target_id: str) -> None:
    """Record an edge whose target is not in the graph; it is treated as a leaf."""
    _LOGGER.debug("Dangling lineage edge %s -> %s treated as leaf", source_id, target_id)
    if diagnostics is not None:
        diagnostics.record_dangling(source_id, target_id)
