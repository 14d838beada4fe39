"""Line-oriented scanner and statement classifier for ``CMakeLists.txt`` files.

A statement is ``name(arg arg ...)`` starting at the beginning of a line and
closing at the end of one. The argument list may not contain ``)``, so nested
calls such as ``if(NOT (A))`` or generator expressions are skipped without
error, as are comments and anything else that does not fit the shape.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from cmakeshell.models import Configuration

STATEMENT_PATTERN = re.compile(r"^\s*(\w+)\s*\(([^)]*)\)\s*$", re.MULTILINE)
PROPERTIES_MARKER = "PROPERTIES"


@dataclass(frozen=True, slots=True)
class Statement:
    name: str
    args: tuple[str, ...] = ()


def scan_statements(text: str) -> Iterator[Statement]:
    """Yield statements from *text* in document order."""
    for match in STATEMENT_PATTERN.finditer(text):
        args = tuple(arg for arg in re.split(r"\s+", match.group(2)) if arg)
        yield Statement(name=match.group(1), args=args)


@dataclass(frozen=True, slots=True)
class Statements:
    """Re-iterable view over the statements of one file's text."""

    text: str

    def __iter__(self) -> Iterator[Statement]:
        return scan_statements(self.text)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AddExecutable:
    name: str


@dataclass(frozen=True, slots=True)
class AddLibrary:
    name: str


@dataclass(frozen=True, slots=True)
class AddCustomTarget:
    name: str


@dataclass(frozen=True, slots=True)
class EnableTesting:
    pass


@dataclass(frozen=True, slots=True)
class AddSubdirectory:
    directory: str


@dataclass(frozen=True, slots=True)
class SetTargetProperties:
    names: tuple[str, ...]
    properties: tuple[tuple[str, str], ...]


@dataclass(frozen=True, slots=True)
class Unrecognized:
    statement: Statement


ClassifiedStatement = (
    AddExecutable
    | AddLibrary
    | AddCustomTarget
    | EnableTesting
    | AddSubdirectory
    | SetTargetProperties
    | Unrecognized
)


def classify(statement: Statement) -> ClassifiedStatement:
    """Map a raw statement onto the closed set of statement kinds we act on."""
    match statement:
        case Statement(name="add_executable", args=(name, *_)):
            return AddExecutable(name=name)
        case Statement(name="add_library", args=(name, *_)):
            return AddLibrary(name=name)
        case Statement(name="add_custom_target", args=(name, *_)):
            return AddCustomTarget(name=name)
        case Statement(name="enable_testing"):
            return EnableTesting()
        case Statement(name="add_subdirectory", args=(directory, *_)):
            return AddSubdirectory(directory=directory)
        case Statement(name="set_target_properties", args=args):
            return _classify_target_properties(statement, args)
        case _:
            return Unrecognized(statement=statement)


def _classify_target_properties(
    statement: Statement,
    args: tuple[str, ...],
) -> SetTargetProperties | Unrecognized:
    if PROPERTIES_MARKER not in args:
        return Unrecognized(statement=statement)
    marker = args.index(PROPERTIES_MARKER)
    values = args[marker + 1 :]
    # A trailing key without a value is dropped.
    pairs = tuple(zip(values[0::2], values[1::2]))
    return SetTargetProperties(names=args[:marker], properties=pairs)


# ---------------------------------------------------------------------------
# Target properties
# ---------------------------------------------------------------------------

RUNTIME_OUTPUT_DIRECTORY: dict[str, Configuration] = {
    "RUNTIME_OUTPUT_DIRECTORY_DEBUG": Configuration.DEBUG,
    "RUNTIME_OUTPUT_DIRECTORY_RELEASE": Configuration.RELEASE,
}

LIBRARY_OUTPUT_DIRECTORY: dict[str, Configuration] = {
    "LIBRARY_OUTPUT_DIRECTORY_DEBUG": Configuration.DEBUG,
    "LIBRARY_OUTPUT_DIRECTORY_RELEASE": Configuration.RELEASE,
}

OUTPUT_NAME = "OUTPUT_NAME"
