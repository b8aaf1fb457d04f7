"""Helpers shared by the detachment and staging cleanup flows."""

from __future__ import annotations

import shutil
from pathlib import Path

from commons_release.core.exceptions import FilesystemError
from commons_release.core.logging import get_logger
from commons_release.host import PassthroughDecrypter, ServerSettings, SettingsDecrypter
from commons_release.scm.repository import ScmRepository

LOGGER = get_logger(__name__)


def init_directory(directory: Path) -> Path:
    """Create ``directory`` and its parents when absent. Existing content is left alone."""
    path = Path(directory)
    if path.is_dir():
        return path
    LOGGER.info("shared.init_directory", path=str(path))
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(f"Unable to create directory {path}: {exc}", path) from exc
    return path


def reset_directory(directory: Path) -> Path:
    """Delete ``directory`` and everything below it, if present."""
    path = Path(directory)
    if not path.exists():
        return path
    LOGGER.info("shared.reset_directory", path=str(path))
    try:
        if path.is_dir():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as exc:
        raise FilesystemError(f"Unable to delete {path}: {exc}", path) from exc
    return path


def copy_file(source: Path, target: Path) -> Path:
    """Copy ``source`` byte for byte to ``target``."""
    source = Path(source)
    target = Path(target)
    if not source.is_file():
        raise FilesystemError(f"Unable to copy file: {source} does not exist", source)
    LOGGER.debug("shared.copy_file", source=str(source), target=str(target))
    try:
        shutil.copyfile(source, target)
    except OSError as exc:
        raise FilesystemError(f"Unable to copy file: {exc}", source) from exc
    return target


def set_authentication(
    repository: ScmRepository,
    dist_server: str | None,
    servers: ServerSettings | None,
    decrypter: SettingsDecrypter | None,
    username: str | None,
    password: str | None,
) -> ScmRepository:
    """Attach credentials, preferring the named server over the explicit username/password."""
    server = servers.get_server(dist_server) if servers is not None else None
    if server is not None:
        resolved = (decrypter or PassthroughDecrypter()).decrypt(server)
        LOGGER.debug("shared.authentication", source="server", server=dist_server)
        repository.username = resolved.username
        repository.password = resolved.password
        return repository
    if dist_server:
        LOGGER.warning("shared.authentication_server_missing", server=dist_server)
    repository.username = username
    repository.password = password
    return repository
