"""Provider interface shared by every SCM backend."""

from __future__ import annotations

from abc import ABC, abstractmethod

from commons_release.core.models import CheckInResult, ScmFileSet, ScmResult

from .repository import ScmRepository


class ScmProvider(ABC):
    """
    Capability set a provider must implement.

    Commands report failure through the returned result value. A provider
    raises ``ScmError`` only when the command could not be started at all.
    """

    @abstractmethod
    def checkout(self, repository: ScmRepository, file_set: ScmFileSet) -> ScmResult:
        """Check ``repository`` out into ``file_set.base_directory``."""

    @abstractmethod
    def remove(self, repository: ScmRepository, file_set: ScmFileSet, message: str) -> ScmResult:
        """Schedule ``file_set.files`` for removal."""

    @abstractmethod
    def checkin(self, repository: ScmRepository, file_set: ScmFileSet, message: str) -> CheckInResult:
        """Commit pending changes of ``file_set.files``."""
