"""Protocols for interactive terminal hosts and their event stream."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Protocol


class Execution(Protocol):
    """Handle for one command sent to a terminal."""

    command: str

    @property
    def terminal(self) -> Terminal: ...

    def read(self) -> AsyncIterator[str]:
        """Yield the output captured for this execution."""


class Terminal(Protocol):
    name: str

    @property
    def integrated(self) -> bool:
        """Whether the terminal can report structured command completion."""

    def show(self) -> None:
        """Bring the terminal to the foreground."""

    def execute_command(self, command: str) -> Execution:
        """Send *command* to the terminal input."""

    def dispose(self) -> None:
        """Close the terminal."""


class TerminalListener(Protocol):
    def terminal_closed(self, terminal: Terminal) -> None: ...

    def active_terminal_changed(self, terminal: Terminal | None) -> None: ...

    def shell_integration_changed(self, terminal: Terminal) -> None: ...

    def execution_ended(self, execution: Execution, exit_code: int | None) -> None:
        """An execution finished; ``None`` means a nested shell took over the prompt."""


class TerminalHost(Protocol):
    name: str

    def create_terminal(self, name: str) -> Terminal:
        """Allocate a new terminal."""

    def subscribe(self, listener: TerminalListener) -> None:
        """Register *listener* for terminal events."""


@dataclass(slots=True)
class TerminalEvents:
    """Fan-out of host events to subscribed listeners."""

    listeners: list[TerminalListener] = field(default_factory=list)

    def subscribe(self, listener: TerminalListener) -> None:
        if listener not in self.listeners:
            self.listeners.append(listener)

    def closed(self, terminal: Terminal) -> None:
        for listener in tuple(self.listeners):
            listener.terminal_closed(terminal)

    def active_changed(self, terminal: Terminal | None) -> None:
        for listener in tuple(self.listeners):
            listener.active_terminal_changed(terminal)

    def integration_changed(self, terminal: Terminal) -> None:
        for listener in tuple(self.listeners):
            listener.shell_integration_changed(terminal)

    def execution_ended(self, execution: Execution, exit_code: int | None) -> None:
        for listener in tuple(self.listeners):
            listener.execution_ended(execution, exit_code)
