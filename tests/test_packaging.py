"""Packaging regression tests.

Tests that verify the installed package structure and behavior.
"""

from pathlib import Path


def test_source_layout():
    """Check the src/ layout that setuptools packages."""
    here = Path(__file__).resolve().parent
    repo_root = here.parent
    src_pkg = repo_root / "src" / "lineagewalk"

    assert src_pkg.exists(), "lineagewalk package should exist in src/"
    assert (src_pkg / "kernel").exists(), "lineagewalk.kernel should exist in src/"
    assert (src_pkg / "_internal").exists(), "lineagewalk._internal should exist"

    # Fixtures live at the repo root and are not packaged
    assert not (repo_root / "src" / "fixtures").exists()


def test_import_boundary():
    import lineagewalk
    import lineagewalk.kernel  # noqa: F401
    import lineagewalk._internal.io.lineage_json  # noqa: F401

    # Check version: in dev mode it's "dev", in installed mode it's "1.0.0"
    assert lineagewalk.__version__ in ("1.0.0", "dev")
