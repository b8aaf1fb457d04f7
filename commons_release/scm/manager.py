"""Registry selecting an SCM provider by the scheme of a repository url."""

from __future__ import annotations

from commons_release.core.exceptions import ScmError

from .base import ScmProvider
from .repository import ScmRepository, make_repository


class ScmManager:
    def __init__(self) -> None:
        self._providers: dict[str, ScmProvider] = {}

    def set_provider(self, scheme: str, provider: ScmProvider) -> None:
        self._providers[scheme.strip().lower()] = provider

    def make_repository(self, scm_url: str) -> ScmRepository:
        repository = make_repository(scm_url)
        if repository.provider not in self._providers:
            raise ScmError(f"No such provider: '{repository.provider}'.")
        return repository

    def provider_for(self, repository: ScmRepository) -> ScmProvider:
        try:
            return self._providers[repository.provider]
        except KeyError as exc:
            raise ScmError(f"No such provider: '{repository.provider}'.") from exc

    def schemes(self) -> tuple[str, ...]:
        return tuple(sorted(self._providers))


def default_manager(svn_executable: str = "svn") -> ScmManager:
    """Return a manager with the ``svn`` command line provider registered."""
    from .svn import SvnExeScmProvider

    manager = ScmManager()
    manager.set_provider("svn", SvnExeScmProvider(executable=svn_executable))
    return manager
