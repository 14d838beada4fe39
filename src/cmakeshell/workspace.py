"""Workspace orchestration: selection state plus project and session wiring."""

from __future__ import annotations

import json
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, TextIO

from cmakeshell.errors import MissingArtifactError
from cmakeshell.loader import load_project
from cmakeshell.models import (
    Architecture,
    CommandResult,
    Configuration,
    LaunchDescriptor,
    RunTarget,
    Target,
    TargetKey,
)
from cmakeshell.observability import StructuredLogger
from cmakeshell.project import ProjectModel
from cmakeshell.session import ShellSession
from cmakeshell.settings import Settings


class DebugLauncher(Protocol):
    def start_debugging(self, descriptor: LaunchDescriptor) -> None:
        """Hand *descriptor* to a debugger front end."""


@dataclass(slots=True)
class RecordingLauncher:
    launches: list[LaunchDescriptor] = field(default_factory=list)

    def start_debugging(self, descriptor: LaunchDescriptor) -> None:
        self.launches.append(descriptor)


@dataclass(slots=True)
class JsonLauncher:
    """Print the debugger launch configuration for an external debugger to pick up."""

    stream: TextIO = field(default_factory=lambda: sys.stdout)

    def start_debugging(self, descriptor: LaunchDescriptor) -> None:
        self.stream.write(json.dumps(descriptor.to_debug_config(), indent=2, sort_keys=True) + "\n")


class Workspace:
    """Binds user actions on one project root to the model and the shell session.

    The model is rebuilt on every :meth:`refresh`; the selected target is kept
    as a :class:`TargetKey` and re-resolved against each new model.
    """

    def __init__(
        self,
        root_dir: str | Path,
        *,
        session: ShellSession,
        settings: Settings | None = None,
        launcher: DebugLauncher | None = None,
        logger: StructuredLogger | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.root_dir = Path(root_dir).resolve()
        self.session = session
        self.launcher = launcher or RecordingLauncher()
        self.logger = logger or StructuredLogger()
        self.config: Configuration = self.settings.config
        self.arch: Architecture = self.settings.arch
        self.project = ProjectModel.create(self.root_dir, self.settings)
        self._selected: TargetKey | None = None

    @property
    def target(self) -> Target | None:
        return self.project.find(self._selected)

    def reload(self) -> ProjectModel:
        """Re-read the build description without running anything."""
        self.project = load_project(self.root_dir, self.settings)
        selected = self.project.find(self._selected) or next(iter(self.project.targets), None)
        self._selected = selected.key if selected is not None else None
        self._log(
            "reload",
            None,
            None,
            f"Loaded {len(self.project.targets)} targets from {len(self.project.files)} files.",
        )
        return self.project

    async def refresh(self) -> ProjectModel:
        self.reload()
        await self.generate()
        return self.project

    async def generate(self) -> list[CommandResult]:
        command = self.project.generate(self.config, self.arch)
        return await self._exec_all("generate", None, (command,))

    async def select_config(self, config: Configuration) -> list[CommandResult]:
        self.config = config
        return await self.generate()

    def select_arch(self, arch: Architecture) -> None:
        self.arch = arch

    def select_target(self, target: Target) -> None:
        self._selected = target.key

    async def build(self, target: Target) -> list[CommandResult]:
        self.select_target(target)
        commands = self.project.build(target, self.config, self.arch)
        return await self._exec_all("build", target, commands)

    async def run(self, target: RunTarget) -> list[CommandResult]:
        """Build *target*, then start it: under a debugger for Debug, in the session for Release."""
        self.select_target(target)
        plan = self.project.run(target, self.config, self.settings.debugger)
        results = await self.build(target)
        if isinstance(plan, LaunchDescriptor):
            self._log("run", target, None, f"Starting debugger for {plan.program}.")
            self.launcher.start_debugging(plan)
            return results
        return results + await self._exec_all("run", target, (plan,))

    async def launch(self, target: Target | None = None) -> list[CommandResult]:
        target = target or self.target
        if target is None:
            raise MissingArtifactError(
                "No target selected",
                hint="Pick a build or run target first.",
            )
        if isinstance(target, RunTarget):
            return await self.run(target)
        return await self.build(target)

    def is_project_file(self, path: str | Path) -> bool:
        """Whether saving *path* should trigger a refresh."""
        return Path(path).resolve() in self.project.files

    async def _exec_all(
        self,
        operation: str,
        target: Target | None,
        commands: Sequence[str],
    ) -> list[CommandResult]:
        results: list[CommandResult] = []
        for command in commands:
            self._log(operation, target, command, "Executing.")
            results.append(await self.session.exec(command))
        return results

    def _log(self, operation: str, target: Target | None, command: str | None, message: str) -> None:
        self.logger.log(
            operation=operation,
            target=target.name if target is not None else None,
            config=self.config.value,
            command=command,
            message=message,
        )
