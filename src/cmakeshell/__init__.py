"""Public package entrypoint for cmakeshell."""

from .errors import (
    CmakeShellError,
    CommandFailureError,
    ErrorCode,
    MissingArtifactError,
    SessionLostError,
    ValidationError,
)
from .loader import load, load_project
from .models import (
    Architecture,
    BuildTarget,
    CommandResult,
    Configuration,
    LaunchDescriptor,
    RunTarget,
    Target,
    TargetKey,
    TargetKind,
)
from .project import ProjectModel
from .session import SessionState, ShellSession
from .settings import Settings
from .workspace import Workspace

__all__ = [
    "Architecture",
    "BuildTarget",
    "CmakeShellError",
    "CommandFailureError",
    "CommandResult",
    "Configuration",
    "ErrorCode",
    "LaunchDescriptor",
    "MissingArtifactError",
    "ProjectModel",
    "RunTarget",
    "SessionLostError",
    "SessionState",
    "Settings",
    "ShellSession",
    "Target",
    "TargetKey",
    "TargetKind",
    "ValidationError",
    "Workspace",
    "load",
    "load_project",
]
