"""Custom exception hierarchy for the release tooling."""

from __future__ import annotations

from pathlib import Path


class ReleasePluginError(Exception):
    """Base error for the commons release tooling."""


class BuildFailure(ReleasePluginError):
    """Raised when a release step must fail the surrounding build."""


class FilesystemError(BuildFailure):
    """Raised when a local file or directory cannot be read, copied or created."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class ScmFailure(BuildFailure):
    """Raised when an SCM command reports failure."""

    def __init__(
        self,
        summary: str,
        provider_message: str | None = None,
        command_output: str | None = None,
    ) -> None:
        self.summary = summary
        self.provider_message = provider_message or ""
        self.command_output = command_output or ""
        if provider_message is None and command_output is None:
            message = summary
        else:
            message = f"{summary}: {self.provider_message} [{self.command_output}]"
        super().__init__(message)


class ScmError(ReleasePluginError):
    """Raised inside the SCM layer when a provider cannot run a command at all."""
