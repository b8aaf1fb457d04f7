"""SCM repository handles parsed from ``scm:<provider>:<url>`` strings."""

from __future__ import annotations

from dataclasses import dataclass, field

from commons_release.core.exceptions import ScmError

SCM_URL_PREFIX = "scm:"
_DELIMITERS = (":", "|")


@dataclass(slots=True)
class ScmRepository:
    provider: str
    url: str
    username: str | None = None
    password: str | None = field(default=None, repr=False)

    @property
    def has_credentials(self) -> bool:
        return bool(self.username)


def make_repository(scm_url: str) -> ScmRepository:
    """Parse ``scm:svn:https://host/path`` (or ``scm:svn|https://...``) into a repository handle."""
    text = (scm_url or "").strip()
    if not text:
        raise ScmError("The scm url cannot be empty.")
    if not text.startswith(SCM_URL_PREFIX):
        raise ScmError(f"The scm url must start with '{SCM_URL_PREFIX}': {text}")

    remainder = text[len(SCM_URL_PREFIX) :]
    positions = [remainder.find(delimiter) for delimiter in _DELIMITERS]
    positions = [position for position in positions if position > 0]
    if not positions:
        raise ScmError(f"The scm url does not name a provider: {text}")
    split_at = min(positions)
    provider = remainder[:split_at].strip().lower()
    provider_url = remainder[split_at + 1 :].strip()
    if not provider_url:
        raise ScmError(f"The scm url does not contain a provider url: {text}")
    return ScmRepository(provider=provider, url=provider_url)
