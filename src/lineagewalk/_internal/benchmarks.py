"""Performance sentinel graphs and budgets for the gated perf tests."""

from __future__ import annotations

import os
from typing import Dict, List

from lineagewalk.kernel.graph import GraphModel


def _budget_from_env(var_name: str, default_ms: float) -> float:
    """Per-sentinel time budget in ms; unset or unparsable values keep the default."""
    raw = os.getenv(var_name)
    if not raw:
        return default_ms
    try:
        return float(raw)
    except ValueError:
        return default_ms


MAX_LONG_CHAIN_LAYERS_MS = _budget_from_env("LINEAGEWALK_MAX_LONG_CHAIN_LAYERS_MS", 500.0)
MAX_WIDE_FANOUT_LAYERS_MS = _budget_from_env("LINEAGEWALK_MAX_WIDE_FANOUT_LAYERS_MS", 500.0)
MAX_LONG_CHAIN_DEPTH_FIRST_MS = _budget_from_env("LINEAGEWALK_MAX_LONG_CHAIN_DEPTH_FIRST_MS", 500.0)
MAX_DIAMOND_LADDER_DEPTH_FIRST_MS = _budget_from_env("LINEAGEWALK_MAX_DIAMOND_LADDER_DEPTH_FIRST_MS", 1000.0)


def long_chain(length: int) -> GraphModel:
    """n0 -> n1 -> ... -> n{length-1}."""
    children = {f"n{i}": [f"n{i + 1}"] for i in range(length - 1)}
    return GraphModel.from_child_map(children)


def wide_fanout(width: int, depth: int = 2) -> GraphModel:
    """root fans out to `width` nodes, each extended by a chain of `depth - 1` nodes."""
    children: Dict[str, List[str]] = {"root": [f"w{i}" for i in range(width)]}
    for i in range(width):
        prev = f"w{i}"
        for d in range(1, depth):
            nxt = f"w{i}.{d}"
            children[prev] = [nxt]
            prev = nxt
    return GraphModel.from_child_map(children)


def diamond_ladder(rungs: int) -> GraphModel:
    """Stacked diamonds: d{i} -> (l{i}, r{i}) -> d{i+1}. Path count doubles per rung."""
    children: Dict[str, List[str]] = {}
    for i in range(rungs):
        children[f"d{i}"] = [f"l{i}", f"r{i}"]
        children[f"l{i}"] = [f"d{i + 1}"]
        children[f"r{i}"] = [f"d{i + 1}"]
    return GraphModel.from_child_map(children)

