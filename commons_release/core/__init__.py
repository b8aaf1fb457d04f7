"""Shared core utilities for the commons release steps."""

from .config import (
    DetachmentConfig,
    Settings,
    StagingCleanupConfig,
    get_settings,
)
from .exceptions import (
    BuildFailure,
    FilesystemError,
    ReleasePluginError,
    ScmError,
    ScmFailure,
)
from .logging import configure_logging
from .models import (
    Artifact,
    CheckInResult,
    CleanupOutcome,
    CleanupState,
    DetachmentResult,
    ScmFileSet,
    ScmResult,
    ServerEntry,
)

__all__ = [
    "Settings",
    "DetachmentConfig",
    "StagingCleanupConfig",
    "Artifact",
    "DetachmentResult",
    "ServerEntry",
    "ScmFileSet",
    "ScmResult",
    "CheckInResult",
    "CleanupState",
    "CleanupOutcome",
    "ReleasePluginError",
    "BuildFailure",
    "FilesystemError",
    "ScmFailure",
    "ScmError",
    "get_settings",
    "configure_logging",
]
