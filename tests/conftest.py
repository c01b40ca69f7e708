"""Pytest configuration for tests.

No sys.path hacks - tests should import from installed lineagewalk package.
"""

from pathlib import Path

import pytest

from lineagewalk.kernel.graph import GraphModel

FIXTURES = Path(__file__).resolve().parent.parent / "fixtures" / "lineage"


def pytest_addoption(parser):
    """Add gated perf test option."""
    parser.addoption(
        "--run-perf",
        action="store_true",
        default=False,
        help="Run performance sentinel benchmarks (gated)."
    )


def pytest_collection_modifyitems(config, items):
    """Skip perf-marked tests unless --run-perf is set."""
    if config.getoption("--run-perf"):
        return
    skip_perf = pytest.mark.skip(reason="perf tests gated; pass --run-perf")
    for item in items:
        if "perf" in item.keywords:
            item.add_marker(skip_perf)


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def abc_graph() -> GraphModel:
    """A -> B -> C, A -> D (B declared before D on A)."""
    return GraphModel.from_child_map({"A": ["B", "D"], "B": ["C"]})


@pytest.fixture
def trunk_then_branch_graph() -> GraphModel:
    """Single chain of three descendants, then two branches that keep going.

    seed -> c1 -> c2 -> c3 -> (b1, b2); b1 -> b1x; b2 -> b2x
    """
    return GraphModel.from_child_map({
        "seed": ["c1"],
        "c1": ["c2"],
        "c2": ["c3"],
        "c3": ["b1", "b2"],
        "b1": ["b1x"],
        "b2": ["b2x"],
    })


@pytest.fixture
def diamond_graph() -> GraphModel:
    """A -> (B, C) -> D -> E."""
    return GraphModel.from_child_map({"A": ["B", "C"], "B": ["D"], "C": ["D"], "D": ["E"]})
