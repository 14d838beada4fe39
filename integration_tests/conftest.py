"""Shared fixtures for integration tests."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

EXAMPLES = Path(__file__).resolve().parents[1] / "examples"


@pytest.fixture
def hello_project(tmp_path: Path) -> Path:
    """Copy of the bundled hello project that builds may write into."""
    root = tmp_path / "hello"
    shutil.copytree(EXAMPLES / "hello", root)
    return root
