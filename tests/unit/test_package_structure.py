"""Smoke tests for package structure and basic contracts.

These tests run in pre-commit hooks to catch structural issues quickly.
"""

from __future__ import annotations

import importlib.metadata
from pathlib import Path

import pytest


@pytest.mark.smoke
def test_package_metadata_accessible() -> None:
    """Verify package metadata is registered correctly.

    This smoke test catches:
    - Build/install configuration issues
    - Package name mismatches (ffl-standings vs ffl_standings)
    """
    version = importlib.metadata.version("ffl-standings")
    assert version is not None
    assert len(version) > 0


@pytest.mark.smoke
def test_src_directory_structure() -> None:
    """Verify expected src/ directory structure exists."""
    project_root = Path(__file__).parent.parent.parent

    src_dir = project_root / "src" / "ffl_standings"
    assert src_dir.is_dir(), f"Package directory not found: {src_dir}"
    for sub in ("", "cli", "ingest", "standings", "utils"):
        init_file = src_dir / sub / "__init__.py"
        assert init_file.exists(), f"Package __init__.py not found: {init_file}"
