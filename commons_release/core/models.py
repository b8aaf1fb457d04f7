"""Shared data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


@dataclass(slots=True, frozen=True)
class Artifact:
    path: Path
    type: str
    classifier: str | None = None

    @property
    def file_name(self) -> str:
        return Path(self.path).name


@dataclass(slots=True)
class DetachmentResult:
    attached: list[Artifact]
    detached: list[Artifact]
    copied_files: list[Path] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class ServerEntry:
    id: str
    username: str | None = None
    password: str | None = None


@dataclass(slots=True)
class ScmFileSet:
    base_directory: Path
    files: list[Path] = field(default_factory=list)


@dataclass(slots=True)
class ScmResult:
    success: bool
    provider_message: str = ""
    command_output: str = ""


@dataclass(slots=True)
class CheckInResult(ScmResult):
    checked_in_files: list[Path] = field(default_factory=list)
    revision: str | None = None


class CleanupState(str, Enum):
    SKIPPED = "skipped"
    CHECKED_OUT = "checked_out"
    COMMITTED = "committed"


@dataclass(slots=True)
class CleanupOutcome:
    state: CleanupState
    reason: str | None = None
    removed_files: list[Path] = field(default_factory=list)
    planned_files: list[Path] = field(default_factory=list)
    revision: str | None = None

    @property
    def skipped(self) -> bool:
        return self.state is CleanupState.SKIPPED
