"""Empty the remote SVN staging area before a release candidate is staged."""

from __future__ import annotations

from pathlib import Path

from commons_release.core.config import StagingCleanupConfig
from commons_release.core.exceptions import FilesystemError, ScmError, ScmFailure
from commons_release.core.logging import get_logger
from commons_release.core.models import CleanupOutcome, CleanupState, ScmFileSet
from commons_release.host import PassthroughDecrypter, ServerSettings, SettingsDecrypter
from commons_release.scm import ScmManager, default_manager
from commons_release.shared import init_directory, reset_directory, set_authentication

LOGGER = get_logger(__name__)

REMOVE_MESSAGE = "Cleaning up staging area"
CHECKIN_MESSAGE_PREFIX = "Cleaning distribution area for: "
SVN_ADMIN_DIRECTORY = ".svn"


class StagingCleanupService:
    def __init__(
        self,
        config: StagingCleanupConfig,
        *,
        manager: ScmManager | None = None,
        servers: ServerSettings | None = None,
        decrypter: SettingsDecrypter | None = None,
    ) -> None:
        self._config = config
        self._manager = manager
        self._servers = servers or ServerSettings()
        self._decrypter = decrypter or PassthroughDecrypter()

    def clean(self, artifact_id: str) -> CleanupOutcome:
        config = self._config
        if not config.is_dist_module:
            LOGGER.info(
                "staging_cleanup.skipped",
                reason="This module is marked as a non distribution or assembly module, and the plugin will not run.",
            )
            return CleanupOutcome(state=CleanupState.SKIPPED, reason="not a distribution module")
        if not config.dist_svn_staging_url:
            LOGGER.warning(
                "staging_cleanup.skipped",
                reason="The staging url is not set, the release plugin will not run.",
            )
            return CleanupOutcome(state=CleanupState.SKIPPED, reason="staging url not set")

        init_directory(config.working_directory)
        try:
            return self._run(artifact_id)
        except ScmError as exc:
            raise ScmFailure(str(exc)) from exc
        except OSError as exc:
            raise ScmFailure(f"SCM command failed: {exc}") from exc

    def _run(self, artifact_id: str) -> CleanupOutcome:
        config = self._config
        manager = self._manager or default_manager()
        repository = manager.make_repository(config.dist_svn_staging_url)
        provider = manager.provider_for(repository)
        set_authentication(
            repository,
            config.dist_server,
            self._servers,
            self._decrypter,
            config.username,
            config.password,
        )

        cleanup_directory = Path(config.dist_cleanup_directory)
        _ensure_disposable(cleanup_directory, Path(config.working_directory))
        # A checkout left by an earlier run may hold uncommitted deletions.
        reset_directory(cleanup_directory)
        LOGGER.info("staging_cleanup.checkout", url=config.dist_svn_staging_url, directory=str(cleanup_directory))
        checkout_result = provider.checkout(repository, ScmFileSet(cleanup_directory))
        if not checkout_result.success:
            raise ScmFailure(
                "Failed to checkout files from SCM",
                checkout_result.provider_message,
                checkout_result.command_output,
            )

        files_to_remove = list_staged_entries(cleanup_directory)
        if not files_to_remove:
            LOGGER.info("staging_cleanup.nothing_to_remove", directory=str(cleanup_directory))
            return CleanupOutcome(state=CleanupState.CHECKED_OUT, reason="staging area already empty")

        if config.dry_run:
            LOGGER.info(
                "staging_cleanup.dry_run",
                artifact_id=artifact_id,
                planned=[path.name for path in files_to_remove],
            )
            return CleanupOutcome(
                state=CleanupState.CHECKED_OUT,
                reason="dry run, remove and commit skipped",
                planned_files=files_to_remove,
            )

        file_set = ScmFileSet(cleanup_directory, files_to_remove)
        remove_result = provider.remove(repository, file_set, REMOVE_MESSAGE)
        if not remove_result.success:
            raise ScmFailure(
                "Failed to remove files from SCM",
                remove_result.provider_message,
                remove_result.command_output,
            )

        message = f"{CHECKIN_MESSAGE_PREFIX}{artifact_id}"
        LOGGER.info("staging_cleanup.checkin", artifact_id=artifact_id, file_count=len(files_to_remove))
        checkin_result = provider.checkin(repository, file_set, message)
        if not checkin_result.success:
            raise ScmFailure(
                "Failed to commit files to SCM",
                checkin_result.provider_message,
                checkin_result.command_output,
            )
        LOGGER.info("staging_cleanup.committed", artifact_id=artifact_id, revision=checkin_result.revision)
        return CleanupOutcome(
            state=CleanupState.COMMITTED,
            removed_files=files_to_remove,
            revision=checkin_result.revision,
        )


def _ensure_disposable(cleanup_directory: Path, working_directory: Path) -> None:
    cleanup = cleanup_directory.resolve()
    working = working_directory.resolve()
    if cleanup == working or cleanup in working.parents:
        raise FilesystemError(
            f"The cleanup directory {cleanup_directory} must not contain the working directory {working_directory}",
            cleanup_directory,
        )


def list_staged_entries(directory: Path) -> list[Path]:
    """Return the immediate children of a checkout, without the SVN admin directory."""
    path = Path(directory)
    if not path.is_dir():
        return []
    return sorted(child for child in path.iterdir() if child.name != SVN_ADMIN_DIRECTORY)


def clean_staging(
    artifact_id: str,
    config: StagingCleanupConfig,
    *,
    manager: ScmManager | None = None,
    servers: ServerSettings | None = None,
    decrypter: SettingsDecrypter | None = None,
) -> CleanupOutcome:
    service = StagingCleanupService(config, manager=manager, servers=servers, decrypter=decrypter)
    return service.clean(artifact_id)
