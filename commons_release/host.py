"""Server credential lookup, the stand-in for the build tool's settings service."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Protocol

from commons_release.core.config import DEFAULT_SECRETS_PATH, read_toml
from commons_release.core.exceptions import FilesystemError
from commons_release.core.models import ServerEntry

ENV_REFERENCE_RE = re.compile(r"^\$\{env\.(?P<name>[A-Za-z_][A-Za-z0-9_]*)\}$")


class SettingsDecrypter(Protocol):
    def decrypt(self, entry: ServerEntry) -> ServerEntry:
        ...


class PassthroughDecrypter:
    """Return server entries unchanged."""

    def decrypt(self, entry: ServerEntry) -> ServerEntry:
        return entry


class EnvironmentDecrypter:
    """Resolve ``${env.NAME}`` credential values from the process environment."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ if environ is not None else os.environ

    def decrypt(self, entry: ServerEntry) -> ServerEntry:
        return ServerEntry(
            id=entry.id,
            username=self._resolve(entry.username),
            password=self._resolve(entry.password),
        )

    def _resolve(self, value: str | None) -> str | None:
        if value is None:
            return None
        match = ENV_REFERENCE_RE.match(value.strip())
        if not match:
            return value
        return self._environ.get(match.group("name"))


class ServerSettings:
    """Read-only collection of server entries keyed by id."""

    def __init__(self, entries: Iterable[ServerEntry] = ()) -> None:
        self._entries = {entry.id: entry for entry in entries}

    def get_server(self, server_id: str | None) -> ServerEntry | None:
        if not server_id:
            return None
        return self._entries.get(server_id)

    def __iter__(self) -> Iterator[ServerEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ServerSettings":
        """Build from a ``{server_id: {"username": ..., "password": ...}}`` mapping."""
        entries: list[ServerEntry] = []
        for server_id, section in data.items():
            if not isinstance(section, Mapping):
                continue
            entries.append(
                ServerEntry(
                    id=str(server_id),
                    username=_optional_text(section.get("username")),
                    password=_optional_text(section.get("password")),
                )
            )
        return cls(entries)


def load_server_settings(path: Path = DEFAULT_SECRETS_PATH, *, required: bool = False) -> ServerSettings:
    """Load the ``[servers]`` table of the secrets TOML file."""
    if not path.exists():
        if required:
            raise FilesystemError(f"Secrets file not found: {path}", path)
        return ServerSettings()
    data = read_toml(path)
    servers = data.get("servers") or {}
    if not isinstance(servers, Mapping):
        return ServerSettings()
    return ServerSettings.from_mapping(servers)


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text or None
