"""Defaults for lineage traversal, overridable through the environment.

Read once at import time. CLI flags and explicit keyword arguments win over
these values.
"""

from __future__ import annotations

import os

from lineagewalk.kernel.graph import Direction


def _int_from_env(var_name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(var_name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if value < minimum:
        return default
    return value


DEFAULT_LINEAGE_DIRECTION = Direction.CHILD

# Depth-first grid distance when the caller does not pass one
DEFAULT_LINEAGE_DISTANCE = _int_from_env("LINEAGEWALK_DEFAULT_DISTANCE", 2)

# Upper bound on entries a single depth-first walk may emit
DEFAULT_MAX_VISITS = _int_from_env("LINEAGEWALK_MAX_VISITS", 100_000, minimum=1)

DEFAULT_GRID_PAGE_SIZE = 20

# Node types listed in the lineage grid (runs and other items are pruned, edges rewired)
DEFAULT_GRID_NODE_TYPES = ("Sample", "Data")
