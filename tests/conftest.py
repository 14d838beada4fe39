"""Shared test fixtures."""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from cmakeshell.terminals import InProcessHost


@pytest.fixture
def inprocess_host() -> InProcessHost:
    """Provide a scripted terminal host for tests that execute commands."""
    return InProcessHost()


@pytest.fixture
def lists_writer() -> Callable[[Path, str], Path]:
    """Write a dedented `CMakeLists.txt` into a directory, creating it."""
    return _write_lists


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """A small project tree: root lists, two subdirectories and a missing one."""
    root = tmp_path / "project"
    _write_lists(
        root,
        """
        cmake_minimum_required(VERSION 3.10)
        project(sample LANGUAGES C)
        enable_testing()
        add_executable(main main.c)
        set_target_properties(main PROPERTIES
        	RUNTIME_OUTPUT_DIRECTORY_DEBUG ${CMAKE_SOURCE_DIR}/bin/debug/
        	RUNTIME_OUTPUT_DIRECTORY_RELEASE ${CMAKE_SOURCE_DIR}/bin/release/
        	OUTPUT_NAME cmain
        )
        add_subdirectory(libs)
        add_subdirectory(missing)
        add_custom_target(coverage)
        """,
    )
    _write_lists(
        root / "libs",
        """
        add_library(lib lib.c)
        add_executable(lib_test test.c)
        add_subdirectory(nested)
        """,
    )
    _write_lists(root / "libs" / "nested", "add_executable(tool tool.c)\n")
    return root


def _write_lists(directory: Path, text: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "CMakeLists.txt"
    path.write_text(textwrap.dedent(text).lstrip("\n"), encoding="utf-8")
    return path
