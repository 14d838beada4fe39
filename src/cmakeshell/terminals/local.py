"""Terminal host backed by a local POSIX shell process.

Each terminal is one long-lived ``sh`` process fed through stdin. Every
command runs as a brace group with its stdin taken from ``/dev/null``, so it
cannot read the lines that follow it; a nested shell therefore ends at once
instead of taking over the input. After the group the shell prints a sentinel
line carrying ``$?``, which the reader task turns into an ``execution_ended``
event. The shell is considered integrated once it has answered an initial
handshake sentinel.

The shell leads its own process group; disposing a terminal signals the whole
group and reports the closure right away.
"""

from __future__ import annotations

import asyncio
import os
import signal
import sys
import uuid
from collections import deque
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import TextIO

from cmakeshell.terminals.base import TerminalEvents, TerminalListener


@dataclass(eq=False, slots=True)
class LocalExecution:
    command: str
    terminal: LocalTerminal
    lines: list[str] = field(default_factory=list)

    async def read(self) -> AsyncIterator[str]:
        for line in self.lines:
            yield line


class LocalTerminal:
    def __init__(self, host: LocalShellHost, name: str) -> None:
        self.name = name
        self._host = host
        self._token = f"__cmakeshell_{uuid.uuid4().hex}__"
        self._process: asyncio.subprocess.Process | None = None
        self._queued: list[str] = []
        self._running: deque[LocalExecution] = deque()
        self._integrated = False
        self._closed = False
        self.error: OSError | None = None
        self._reader = asyncio.get_running_loop().create_task(self._start())

    @property
    def integrated(self) -> bool:
        return self._integrated

    def show(self) -> None:
        self._host.events.active_changed(self)

    def execute_command(self, command: str) -> LocalExecution:
        execution = LocalExecution(command=command, terminal=self)
        self._running.append(execution)
        self._send(f"{{ {command}\n}} </dev/null\nprintf '\\n%s %d\\n' {self._token} $?\n")
        return execution

    def dispose(self) -> None:
        if self._process is None:
            self._reader.cancel()
        elif self._process.returncode is None:
            try:
                os.killpg(self._process.pid, signal.SIGTERM)
            except ProcessLookupError:
                pass
        self._mark_closed()

    def _mark_closed(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._host.events.closed(self)

    def _send(self, text: str) -> None:
        if self._process is None or self._process.stdin is None:
            self._queued.append(text)
            return
        self._process.stdin.write(text.encode("utf-8"))

    async def _start(self) -> None:
        try:
            self._process = await asyncio.create_subprocess_exec(
                self._host.shell,
                cwd=self._host.cwd,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                start_new_session=True,
            )
        except OSError as exc:
            # Surfaces to the session as a lost terminal.
            self.error = exc
            self._mark_closed()
            return
        self._send(f"printf '%s ready\\n' {self._token}\n")
        for text in self._queued:
            self._send(text)
        self._queued.clear()
        await self._read_output()

    async def _read_output(self) -> None:
        assert self._process is not None and self._process.stdout is not None
        stdout = self._process.stdout
        while True:
            raw = await stdout.readline()
            if not raw:
                break
            line = raw.decode("utf-8", errors="replace").rstrip("\n")
            if line.startswith(self._token):
                self._handle_sentinel(line[len(self._token) :].strip())
                continue
            if self._running:
                self._running[0].lines.append(line)
            if self._host.echo is not None:
                self._host.echo.write(line + "\n")
                self._host.echo.flush()
        await self._process.wait()
        self._mark_closed()

    def _handle_sentinel(self, payload: str) -> None:
        if self._closed:
            return
        if payload == "ready":
            self._integrated = True
            self._host.events.integration_changed(self)
            return
        if not self._running:
            return
        execution = self._running.popleft()
        # Drop the blank line the sentinel printf emits before itself.
        if execution.lines and execution.lines[-1] == "":
            execution.lines.pop()
        self._host.events.execution_ended(execution, int(payload))


@dataclass(slots=True)
class LocalShellHost:
    """Host that runs commands in a persistent local ``sh`` process."""

    name: str = "local"
    shell: str = "/bin/sh"
    cwd: str | None = None
    echo: TextIO | None = field(default_factory=lambda: sys.stdout)
    events: TerminalEvents = field(default_factory=TerminalEvents)

    def create_terminal(self, name: str) -> LocalTerminal:
        return LocalTerminal(self, name)

    def subscribe(self, listener: TerminalListener) -> None:
        self.events.subscribe(listener)
