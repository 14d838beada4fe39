"""Core typed dataclasses for targets, configurations and launch requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any, ClassVar


class Configuration(StrEnum):
    DEBUG = "Debug"
    RELEASE = "Release"


class Architecture(StrEnum):
    X86 = "x86"
    X64 = "x64"


class TargetKind(StrEnum):
    BUILD = "build"
    RUN = "run"


@dataclass(frozen=True, slots=True)
class TargetKey:
    """Logical target identity that survives a project reload."""

    name: str
    kind: TargetKind


@dataclass(eq=False, slots=True)
class Target:
    """A named build or run unit declared in a ``CMakeLists.txt``.

    Equality and hashing go through :attr:`key` so that a target selected in
    one model generation compares equal to its counterpart in the next.
    """

    kind: ClassVar[TargetKind]

    name: str
    out_dir: dict[Configuration, str] = field(default_factory=dict)
    output_name: str | None = None

    def __post_init__(self) -> None:
        if type(self) is Target:
            raise TypeError("Target is abstract; declare a BuildTarget or a RunTarget.")

    @property
    def key(self) -> TargetKey:
        return TargetKey(name=self.name, kind=self.kind)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Target):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)


@dataclass(eq=False, slots=True)
class BuildTarget(Target):
    kind: ClassVar[TargetKind] = TargetKind.BUILD


@dataclass(eq=False, slots=True)
class RunTarget(Target):
    kind: ClassVar[TargetKind] = TargetKind.RUN

    @classmethod
    def for_output(cls, name: str, *, out_dir: str, output_name: str) -> RunTarget:
        """Create a run target whose output directory is the same for every configuration."""
        return cls(
            name=name,
            out_dir={config: out_dir for config in Configuration},
            output_name=output_name,
        )


@dataclass(frozen=True, slots=True)
class LaunchDescriptor:
    """Debug launch request handed to an external debugger."""

    program: str
    working_directory: Path
    debugger_kind: str

    def to_debug_config(self) -> dict[str, Any]:
        return {
            "type": self.debugger_kind,
            "name": "GDB",
            "request": "launch",
            "program": self.program,
            "stopAtEntry": False,
            "externalConsole": False,
            "cwd": str(self.working_directory),
        }


@dataclass(frozen=True, slots=True)
class CommandResult:
    command: str
    exit_code: int
    output: str = ""
