"""In-process terminal host for testing and dry runs.

Nothing is executed. Commands are recorded in send order and completed with
scripted exit codes, which makes the host suitable for:
- Unit tests of the session state machine
- ``--dry-run`` invocations of the CLI
- Environments without cmake installed
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Mapping, Sequence
from dataclasses import dataclass, field

from cmakeshell.terminals.base import TerminalEvents, TerminalListener

ExitScript = Sequence[int | None]


@dataclass(eq=False, slots=True)
class InProcessExecution:
    command: str
    terminal: InProcessTerminal
    output: tuple[str, ...] = ()

    async def read(self) -> AsyncIterator[str]:
        for line in self.output:
            yield line


@dataclass(eq=False, slots=True)
class InProcessTerminal:
    name: str
    host: InProcessHost
    integrated: bool = False
    shown: int = 0
    closed: bool = False
    executions: list[InProcessExecution] = field(default_factory=list)

    def show(self) -> None:
        self.shown += 1
        self.host.activate(self)

    def execute_command(self, command: str) -> InProcessExecution:
        execution = InProcessExecution(
            command=command,
            terminal=self,
            output=tuple(self.host.outputs.get(command, ())),
        )
        self.executions.append(execution)
        self.host.history.append(command)
        if self.host.auto_complete:
            script = self.host.exit_codes.get(command, (0,))
            loop = asyncio.get_running_loop()
            for exit_code in script:
                loop.call_soon(self.host.complete, execution, exit_code)
        return execution

    def dispose(self) -> None:
        self.host.close(self)


@dataclass(slots=True)
class InProcessHost:
    """Host whose terminals complete commands from a script instead of a shell."""

    name: str = "inprocess"
    integrate_on_create: bool = True
    auto_complete: bool = True
    exit_codes: Mapping[str, ExitScript] = field(default_factory=dict)
    outputs: Mapping[str, Sequence[str]] = field(default_factory=dict)
    terminals: list[InProcessTerminal] = field(default_factory=list)
    history: list[str] = field(default_factory=list)
    events: TerminalEvents = field(default_factory=TerminalEvents)

    def create_terminal(self, name: str) -> InProcessTerminal:
        terminal = InProcessTerminal(name=name, host=self, integrated=self.integrate_on_create)
        self.terminals.append(terminal)
        return terminal

    def subscribe(self, listener: TerminalListener) -> None:
        self.events.subscribe(listener)

    # -- test controls -----------------------------------------------------

    def integrate(self, terminal: InProcessTerminal) -> None:
        terminal.integrated = True
        self.events.integration_changed(terminal)

    def activate(self, terminal: InProcessTerminal | None) -> None:
        self.events.active_changed(terminal)

    def complete(self, execution: InProcessExecution, exit_code: int | None) -> None:
        if execution.terminal.closed:
            return
        self.events.execution_ended(execution, exit_code)

    def close(self, terminal: InProcessTerminal) -> None:
        if terminal.closed:
            return
        terminal.closed = True
        self.events.closed(terminal)
