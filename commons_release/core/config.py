"""Application configuration primitives."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRETS_PATH = Path(".secrets/secrets.toml")
DEFAULT_ARCHIVE_SUFFIXES: tuple[str, ...] = (".zip", ".tar.gz")
DEFAULT_SIDE_FILE_SUFFIXES: tuple[str, ...] = (".asc", ".md5", ".sha1")
PLUGIN_DIRECTORY_NAME = "commons-release-plugin"
CLEANUP_DIRECTORY_NAME = "scm-cleanup"


@dataclass(slots=True, frozen=True)
class DetachmentConfig:
    """Explicit inputs of the distribution detachment flow."""

    working_directory: Path
    archive_suffixes: tuple[str, ...] = DEFAULT_ARCHIVE_SUFFIXES
    side_file_suffixes: tuple[str, ...] = DEFAULT_SIDE_FILE_SUFFIXES


@dataclass(slots=True, frozen=True)
class StagingCleanupConfig:
    """Explicit inputs of the staging cleanup flow."""

    working_directory: Path
    dist_cleanup_directory: Path
    dist_svn_staging_url: str = ""
    is_dist_module: bool = False
    dry_run: bool = False
    dist_server: str | None = None
    username: str | None = None
    password: str | None = None


class Settings(BaseSettings):
    """Central configuration for the release steps."""

    build_directory: Path = Path("target")
    working_directory: Path | None = Field(
        default=None,
        validation_alias="COMMONS_OUTPUT_DIRECTORY",
    )
    dist_cleanup_directory: Path | None = None
    dry_run: bool = Field(
        default=False,
        validation_alias="COMMONS_RELEASE_DRY_RUN",
    )
    dist_svn_staging_url: str = ""
    is_dist_module: bool = Field(
        default=False,
        validation_alias="COMMONS_RELEASE_IS_DIST_MODULE",
    )
    dist_server: str | None = None
    username: str | None = Field(
        default=None,
        validation_alias=AliasChoices("COMMONS_USERNAME", "USER"),
    )
    password: str | None = Field(
        default=None,
        validation_alias="COMMONS_PASSWORD",
    )

    archive_suffixes: tuple[str, ...] = DEFAULT_ARCHIVE_SUFFIXES
    side_file_suffixes: tuple[str, ...] = DEFAULT_SIDE_FILE_SUFFIXES
    svn_executable: str = "svn"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="COMMONS_",
        env_file=(),
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _derive_directories(self) -> "Settings":
        if self.working_directory is None:
            self.working_directory = self.build_directory / PLUGIN_DIRECTORY_NAME
        if self.dist_cleanup_directory is None:
            self.dist_cleanup_directory = self.working_directory / CLEANUP_DIRECTORY_NAME
        return self

    def detachment_config(self) -> DetachmentConfig:
        """Return the configuration block for the detachment flow."""
        return DetachmentConfig(
            working_directory=Path(self.working_directory),
            archive_suffixes=tuple(self.archive_suffixes),
            side_file_suffixes=tuple(self.side_file_suffixes),
        )

    def cleanup_config(self) -> StagingCleanupConfig:
        """Return the configuration block for the staging cleanup flow."""
        return StagingCleanupConfig(
            working_directory=Path(self.working_directory),
            dist_cleanup_directory=Path(self.dist_cleanup_directory),
            dist_svn_staging_url=self.dist_svn_staging_url.strip(),
            is_dist_module=self.is_dist_module,
            dry_run=self.dry_run,
            dist_server=self.dist_server or None,
            username=self.username,
            password=self.password,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached settings instance."""
    overrides = load_settings_overrides()
    return Settings(**overrides)


def load_settings_overrides(secrets_path: Path = DEFAULT_SECRETS_PATH) -> dict[str, Any]:
    """Load configuration overrides from the ``[commons]`` table of the secrets TOML file."""
    if not secrets_path.exists():
        return {}
    data = read_toml(secrets_path)
    general_cfg = data.get("commons") or {}
    if not isinstance(general_cfg, dict):
        return {}
    overrides = {key: value for key, value in general_cfg.items() if key in Settings.model_fields}
    return {key: value for key, value in overrides.items() if value is not None}


def read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as handle:
        return tomllib.load(handle)
