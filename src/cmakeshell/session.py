"""Single reused shell session with per-invocation completion tracking."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import StrEnum

from cmakeshell.errors import CommandFailureError, SessionLostError
from cmakeshell.models import CommandResult
from cmakeshell.observability import StructuredLogger
from cmakeshell.terminals.base import Execution, Terminal, TerminalHost


class SessionState(StrEnum):
    ABSENT = "absent"
    CREATED = "created"
    AWAITING_INTEGRATION = "awaiting_integration"
    READY = "ready"
    EXECUTING = "executing"
    AWAITING_SUBSHELL_EXIT = "awaiting_subshell_exit"


_Event = tuple[Execution, int | None]


@dataclass(eq=False, slots=True)
class _Invocation:
    command: str
    execution: Execution
    # None marks the loss of the terminal.
    events: asyncio.Queue[_Event | None] = field(default_factory=asyncio.Queue)
    # Set once a completion without exit code was seen; from then on any
    # execution ending on the session terminal belongs to this invocation.
    subshell: bool = False


class ShellSession:
    """Sends commands to one lazily created terminal and awaits their completion.

    Calls to :meth:`exec` are serialized: a second call waits until the first
    one has completed, failed or lost its terminal before its command is sent.
    """

    def __init__(
        self,
        host: TerminalHost,
        *,
        name: str = "cmake",
        logger: StructuredLogger | None = None,
    ) -> None:
        self._host = host
        self._name = name
        self._logger = logger or StructuredLogger()
        self._terminal: Terminal | None = None
        self._active = False
        self._state = SessionState.ABSENT
        self._integration: asyncio.Future[None] | None = None
        self._pending: _Invocation | None = None
        self._lock = asyncio.Lock()
        host.subscribe(self)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def terminal(self) -> Terminal | None:
        return self._terminal

    async def exec(self, command: str) -> CommandResult:
        """Run *command* in the session terminal.

        Raises :class:`CommandFailureError` for a non-zero exit code and
        :class:`SessionLostError` if the terminal closes before completion.
        """
        async with self._lock:
            terminal = await self._shell()
            execution = terminal.execute_command(command)
            invocation = _Invocation(command=command, execution=execution)
            self._pending = invocation
            self._state = SessionState.EXECUTING
            self._log("exec", command, "Command sent.")
            try:
                return await self._wait(invocation)
            finally:
                self._pending = None

    def close(self) -> None:
        if self._terminal is not None:
            self._terminal.dispose()

    async def _shell(self) -> Terminal:
        if self._terminal is None:
            self._terminal = self._host.create_terminal(self._name)
            self._state = SessionState.CREATED
            self._terminal.show()
            self._active = True
            self._log("create", None, f"Created terminal {self._name!r} on {self._host.name}.")
        elif not self._active:
            self._terminal.show()
            self._active = True

        terminal = self._terminal
        if not terminal.integrated:
            self._state = SessionState.AWAITING_INTEGRATION
            self._integration = asyncio.get_running_loop().create_future()
            try:
                await self._integration
            finally:
                self._integration = None

        self._state = SessionState.READY
        return terminal

    async def _wait(self, invocation: _Invocation) -> CommandResult:
        output: list[str] = []
        while True:
            event = await invocation.events.get()
            if event is None:
                self._log("exec", invocation.command, "Terminal closed.", level="error")
                raise SessionLostError(
                    "Shell session was closed while a command was running.",
                    hint="Re-run the command; a new terminal is created on demand.",
                    context={"command": invocation.command, "terminal": self._name},
                )

            execution, exit_code = event
            async for line in execution.read():
                output.append(line)

            if exit_code is None:
                self._state = SessionState.AWAITING_SUBSHELL_EXIT
                self._log("exec", invocation.command, "Nested shell detected.")
                continue

            self._state = SessionState.READY
            if exit_code != 0:
                self._log(
                    "exec",
                    invocation.command,
                    f"Command failed with exit code {exit_code}.",
                    level="error",
                    exit_code=exit_code,
                )
                raise CommandFailureError(
                    f"Command exited with code {exit_code}.",
                    exit_code=exit_code,
                    hint="Check the terminal output for details.",
                    context={
                        "command": invocation.command,
                        "returncode": str(exit_code),
                        "output": "\n".join(output)[-2000:],
                    },
                )

            self._log("exec", invocation.command, "Command completed.", exit_code=exit_code)
            return CommandResult(
                command=invocation.command,
                exit_code=exit_code,
                output="\n".join(output),
            )

    def _log(
        self,
        operation: str,
        command: str | None,
        message: str,
        *,
        level: str = "info",
        exit_code: int | None = None,
    ) -> None:
        self._logger.log(
            operation=f"session.{operation}",
            target=None,
            config=None,
            command=command,
            message=message,
            level=level,
            exit_code=exit_code,
        )

    # -- TerminalListener --------------------------------------------------

    def terminal_closed(self, terminal: Terminal) -> None:
        if terminal is not self._terminal:
            return
        self._terminal = None
        self._active = False
        self._state = SessionState.ABSENT
        if self._integration is not None and not self._integration.done():
            self._integration.set_exception(
                SessionLostError(
                    "Shell session was closed before it became ready.",
                    context={"terminal": self._name},
                )
            )
        if self._pending is not None:
            self._pending.events.put_nowait(None)

    def active_terminal_changed(self, terminal: Terminal | None) -> None:
        self._active = terminal is not None and terminal is self._terminal

    def shell_integration_changed(self, terminal: Terminal) -> None:
        if terminal is not self._terminal:
            return
        if self._integration is not None and not self._integration.done():
            self._integration.set_result(None)

    def execution_ended(self, execution: Execution, exit_code: int | None) -> None:
        invocation = self._pending
        if invocation is None:
            return
        owned = execution is invocation.execution or (
            invocation.subshell and execution.terminal is self._terminal
        )
        if not owned:
            return
        invocation.subshell = exit_code is None
        invocation.events.put_nowait((execution, exit_code))
