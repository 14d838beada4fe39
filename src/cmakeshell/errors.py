"""Errors raised while loading a project or driving its shell session.

Every error carries a stable ``E_*`` code for scripts, an optional hint for
the user, and string context such as the target, configuration or command
involved. Captured command output is kept in the context under ``output`` but
left out of the rendered message.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable codes, printed by the CLI as ``error[CODE]``."""

    VALIDATION = "E_VALIDATION"
    MISSING_ARTIFACT = "E_MISSING_ARTIFACT"
    COMMAND_FAILURE = "E_COMMAND_FAILURE"
    SESSION_LOST = "E_SESSION_LOST"


# Context entries too long for a one-screen message.
DETAIL_KEYS = frozenset({"output"})


class CmakeShellError(Exception):
    """Base for failures surfaced by the loader, the project model and the session."""

    code: str
    message: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.message = message
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        lines = [self.message]
        lines.extend(
            f"  {key}: {value}"
            for key, value in self.context.items()
            if value and key not in DETAIL_KEYS
        )
        if self.hint:
            lines.append(f"Hint: {self.hint}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": self.message,
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class ValidationError(CmakeShellError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.VALIDATION, hint=hint, context=context)


class MissingArtifactError(CmakeShellError):
    """A target lacks the selection or output location needed to launch it."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.MISSING_ARTIFACT, hint=hint, context=context)


class CommandFailureError(CmakeShellError):
    """A command sent to the shell session finished with a non-zero exit code."""

    exit_code: int

    def __init__(
        self,
        message: str,
        *,
        exit_code: int,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.COMMAND_FAILURE, hint=hint, context=context)
        self.exit_code = exit_code

    def to_dict(self) -> dict[str, object]:
        payload = super().to_dict()
        payload["exit_code"] = self.exit_code
        return payload


class SessionLostError(CmakeShellError):
    """The shell session was closed while a command was outstanding."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.SESSION_LOST, hint=hint, context=context)


__all__ = [
    "CmakeShellError",
    "CommandFailureError",
    "ErrorCode",
    "MissingArtifactError",
    "SessionLostError",
    "ValidationError",
]
