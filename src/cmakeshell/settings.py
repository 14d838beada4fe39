"""Project settings and validation helpers."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Literal

from cmakeshell.errors import ValidationError
from cmakeshell.models import Architecture, Configuration

PlatformFamily = Literal["windows", "posix"]


def host_platform() -> PlatformFamily:
    return "windows" if sys.platform.startswith("win") else "posix"


@dataclass(frozen=True, slots=True)
class Settings:
    build_dir_name: str = "build"
    cmake: str = "cmake"
    terminal_name: str = "cmake"
    debugger: str = "cppdbg"
    platform: PlatformFamily = field(default_factory=host_platform)
    config: Configuration = Configuration.DEBUG
    arch: Architecture = Architecture.X64

    def __post_init__(self) -> None:
        if not self.build_dir_name:
            raise ValidationError(
                "Build directory name must not be empty.",
                hint="Pass a relative directory name such as 'build'.",
                context={"setting": "build_dir_name"},
            )
        if not self.cmake:
            raise ValidationError(
                "cmake executable must not be empty.",
                context={"setting": "cmake"},
            )
        if self.platform not in ("windows", "posix"):
            raise ValidationError(
                f"Unknown platform family {self.platform!r}.",
                hint="Use 'windows' or 'posix'.",
                context={"setting": "platform"},
            )

    @property
    def multi_config(self) -> bool:
        """Whether the default generator on this platform is multi-config (Visual Studio)."""
        return self.platform == "windows"


def parse_configuration(value: str) -> Configuration:
    for config in Configuration:
        if config.value.lower() == value.lower():
            return config
    raise ValidationError(
        f"Unknown configuration {value!r}.",
        hint=f"Choose one of: {', '.join(c.value for c in Configuration)}.",
        context={"setting": "config"},
    )


def parse_architecture(value: str) -> Architecture:
    try:
        return Architecture(value.lower())
    except ValueError:
        raise ValidationError(
            f"Unknown architecture {value!r}.",
            hint=f"Choose one of: {', '.join(a.value for a in Architecture)}.",
            context={"setting": "arch"},
        ) from None
