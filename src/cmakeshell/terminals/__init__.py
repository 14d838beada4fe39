"""Terminal host interfaces and implementations."""

from .base import Execution, Terminal, TerminalEvents, TerminalHost, TerminalListener
from .inprocess import InProcessExecution, InProcessHost, InProcessTerminal
from .local import LocalExecution, LocalShellHost, LocalTerminal

__all__ = [
    "Execution",
    "InProcessExecution",
    "InProcessHost",
    "InProcessTerminal",
    "LocalExecution",
    "LocalShellHost",
    "LocalTerminal",
    "Terminal",
    "TerminalEvents",
    "TerminalHost",
    "TerminalListener",
]
