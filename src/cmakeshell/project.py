"""In-memory CMake project model and cmake command construction."""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path, PurePath

from cmakeshell.errors import MissingArtifactError
from cmakeshell.models import (
    Architecture,
    BuildTarget,
    Configuration,
    LaunchDescriptor,
    Target,
    TargetKey,
    TargetKind,
)
from cmakeshell.settings import Settings

SOURCE_DIR_PLACEHOLDER = "${CMAKE_SOURCE_DIR}"

# Visual Studio generators expose the logical targets under their own names.
WINDOWS_TARGET_ALIASES: dict[str, str] = {
    "all": "ALL_BUILD",
    "test": "RUN_TESTS",
}

WINDOWS_ARCH_FLAGS: dict[Architecture, str] = {
    Architecture.X86: "Win32",
    Architecture.X64: "x64",
}


def _implicit_targets() -> list[Target]:
    return [BuildTarget(name="all"), BuildTarget(name="clean")]


@dataclass(slots=True)
class ProjectModel:
    """Targets and source files of one load pass over a project tree."""

    root_dir: Path
    source_dir: Path
    build_dir: Path
    settings: Settings = field(default_factory=Settings)
    files: set[Path] = field(default_factory=set)
    targets: list[Target] = field(default_factory=_implicit_targets)

    @classmethod
    def create(cls, root_dir: str | Path, settings: Settings | None = None) -> ProjectModel:
        settings = settings or Settings()
        root = Path(root_dir).resolve()
        return cls(
            root_dir=root,
            source_dir=root,
            build_dir=root / settings.build_dir_name,
            settings=settings,
        )

    # -- queries -----------------------------------------------------------

    def find(self, key: TargetKey | None) -> Target | None:
        if key is None:
            return None
        for target in self.targets:
            if target.key == key:
                return target
        return None

    def named(self, name: str) -> list[Target]:
        return [target for target in self.targets if target.name == name]

    def targets_of(self, kind: TargetKind) -> list[Target]:
        return [target for target in self.targets if target.kind is kind]

    # -- commands ----------------------------------------------------------

    def generate(self, config: Configuration, arch: Architecture) -> str:
        """Return the configure command.

        An existing build tree is discarded by the command itself, ahead of
        the configure step, so nothing on disk changes until it is executed.
        """
        argv = [
            self.settings.cmake,
            "-S",
            str(self.source_dir),
            "-B",
            str(self.build_dir),
            f"-DCMAKE_BUILD_TYPE={config.value}",
            f"-DARCH={arch.value}",
        ]
        if self.settings.multi_config:
            argv.extend(["-A", WINDOWS_ARCH_FLAGS[arch]])
        command = self._command(argv)
        if self.build_dir.exists():
            clear = self._command([self.settings.cmake, "-E", "rm", "-rf", str(self.build_dir)])
            return f"{clear} && {command}"
        return command

    def build(self, target: Target | str, config: Configuration, arch: Architecture) -> tuple[str, ...]:
        """Return the commands needed to build *target*, configuring first if required."""
        name = target.name if isinstance(target, Target) else target
        commands: list[str] = []
        if not self.build_dir.exists():
            commands.append(self.generate(config, arch))

        if self.settings.multi_config:
            name = WINDOWS_TARGET_ALIASES.get(name, name)
        commands.append(
            self._command(
                [
                    self.settings.cmake,
                    "--build",
                    str(self.build_dir),
                    "--target",
                    name,
                    "--config",
                    config.value,
                ]
            )
        )
        return tuple(commands)

    def run(
        self,
        target: Target,
        config: Configuration,
        debugger: str | None = None,
    ) -> LaunchDescriptor | str:
        """Resolve the program of *target*.

        Debug yields a :class:`LaunchDescriptor` for an external debugger,
        Release yields a shell command that starts the program.
        """
        program = self.program_path(target, config)
        if config is Configuration.DEBUG:
            return LaunchDescriptor(
                program=program,
                working_directory=self.build_dir,
                debugger_kind=debugger or self.settings.debugger,
            )
        return self._command([program])

    def program_path(self, target: Target, config: Configuration) -> str:
        out_dir = target.out_dir.get(config)
        if not out_dir or not target.output_name:
            raise MissingArtifactError(
                "No output file",
                hint="Declare the target with add_executable() or set its output directory.",
                context={
                    "target": target.name,
                    "config": config.value,
                    "out_dir": out_dir or "",
                    "output_name": target.output_name or "",
                },
            )
        program = str(PurePath(out_dir, target.output_name))
        return program.replace(SOURCE_DIR_PLACEHOLDER, str(self.source_dir))

    def _command(self, argv: Sequence[str]) -> str:
        if self.settings.platform == "windows":
            return subprocess.list2cmdline(argv)
        return shlex.join(argv)
