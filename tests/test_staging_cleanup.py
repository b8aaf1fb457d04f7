"""Tests for the staging cleanup flow."""

from __future__ import annotations

from pathlib import Path

import pytest

from commons_release.core.config import StagingCleanupConfig
from commons_release.core.exceptions import FilesystemError, ScmError, ScmFailure
from commons_release.core.models import CheckInResult, CleanupState, ScmResult, ServerEntry
from commons_release.host import ServerSettings
from commons_release.scm import ScmManager
from commons_release.staging_cleanup import StagingCleanupService, clean_staging
from commons_release.staging_cleanup.service import list_staged_entries

from .conftest import FakeScmProvider

STAGING_URL = "scm:svn:https://dist.apache.org/repos/dist/dev/commons/foo"


def _config(tmp_path: Path, **overrides) -> StagingCleanupConfig:
    working = tmp_path / "commons-release-plugin"
    values = {
        "working_directory": working,
        "dist_cleanup_directory": working / "scm-cleanup",
        "dist_svn_staging_url": STAGING_URL,
        "is_dist_module": True,
    }
    values.update(overrides)
    return StagingCleanupConfig(**values)


def _manager(provider: FakeScmProvider) -> ScmManager:
    manager = ScmManager()
    manager.set_provider("svn", provider)
    return manager


class TestGuards:
    def test_non_distribution_module_is_skipped(self, tmp_path: Path, fake_provider, fake_manager) -> None:
        config = _config(tmp_path, is_dist_module=False)

        outcome = clean_staging("commons-foo", config, manager=fake_manager)

        assert outcome.state is CleanupState.SKIPPED
        assert outcome.skipped is True
        assert fake_provider.calls == []
        assert not config.working_directory.exists()

    def test_empty_staging_url_is_skipped(self, tmp_path: Path, fake_provider, fake_manager) -> None:
        config = _config(tmp_path, dist_svn_staging_url="")

        outcome = clean_staging("commons-foo", config, manager=fake_manager)

        assert outcome.state is CleanupState.SKIPPED
        assert outcome.reason == "staging url not set"
        assert fake_provider.calls == []
        assert not config.working_directory.exists()


class TestMainPath:
    def test_checkout_remove_checkin(self, tmp_path: Path, fake_provider, fake_manager) -> None:
        config = _config(tmp_path)

        outcome = clean_staging("commons-foo", config, manager=fake_manager)

        assert outcome.state is CleanupState.COMMITTED
        assert outcome.revision == "42"
        assert fake_provider.command_names == ["checkout", "remove", "checkin"]
        assert [path.name for path in outcome.removed_files] == ["RELEASE-NOTES.txt", "commons-foo-1.0-bin.zip"]

        _, _, remove_set, remove_message = fake_provider.calls[1]
        assert remove_message == "Cleaning up staging area"
        assert remove_set.base_directory == config.dist_cleanup_directory
        assert ".svn" not in [path.name for path in remove_set.files]

        _, repository, _, checkin_message = fake_provider.calls[2]
        assert checkin_message == "Cleaning distribution area for: commons-foo"
        assert repository.url == "https://dist.apache.org/repos/dist/dev/commons/foo"

    def test_working_directory_is_created(self, tmp_path: Path, fake_manager) -> None:
        config = _config(tmp_path)

        clean_staging("commons-foo", config, manager=fake_manager)

        assert config.working_directory.is_dir()

    def test_dry_run_only_checks_out(self, tmp_path: Path, fake_provider, fake_manager) -> None:
        config = _config(tmp_path, dry_run=True)

        outcome = clean_staging("commons-foo", config, manager=fake_manager)

        assert outcome.state is CleanupState.CHECKED_OUT
        assert fake_provider.command_names == ["checkout"]
        assert outcome.removed_files == []
        assert [path.name for path in outcome.planned_files] == ["RELEASE-NOTES.txt", "commons-foo-1.0-bin.zip"]
        assert (config.dist_cleanup_directory / "commons-foo-1.0-bin.zip").is_file()

    def test_real_run_after_dry_run_still_cleans(self, tmp_path: Path, fake_provider, fake_manager) -> None:
        clean_staging("commons-foo", _config(tmp_path, dry_run=True), manager=fake_manager)

        outcome = clean_staging("commons-foo", _config(tmp_path), manager=fake_manager)

        assert outcome.state is CleanupState.COMMITTED
        assert [path.name for path in outcome.removed_files] == ["RELEASE-NOTES.txt", "commons-foo-1.0-bin.zip"]
        assert fake_provider.command_names == ["checkout", "checkout", "remove", "checkin"]

    def test_leftover_checkout_is_discarded(self, tmp_path: Path) -> None:
        """Deletions left pending by a failed commit do not hide files from the next run."""
        failing = FakeScmProvider(checkin_result=CheckInResult(success=False, provider_message="out of date"))
        with pytest.raises(ScmFailure):
            clean_staging("commons-foo", _config(tmp_path), manager=_manager(failing))
        config = _config(tmp_path)
        (config.dist_cleanup_directory / "stale.txt").write_text("stale", encoding="utf-8")
        provider = FakeScmProvider()

        outcome = clean_staging("commons-foo", config, manager=_manager(provider))

        assert outcome.state is CleanupState.COMMITTED
        assert [path.name for path in outcome.removed_files] == ["RELEASE-NOTES.txt", "commons-foo-1.0-bin.zip"]

    def test_cleanup_directory_must_not_hold_working_directory(
        self, tmp_path: Path, fake_provider, fake_manager
    ) -> None:
        working = tmp_path / "commons-release-plugin"
        working.mkdir()
        (working / "commons-foo-1.0-bin.zip").write_bytes(b"detached copy")
        config = _config(tmp_path, dist_cleanup_directory=tmp_path)

        with pytest.raises(FilesystemError, match="must not contain the working directory"):
            clean_staging("commons-foo", config, manager=fake_manager)

        assert (working / "commons-foo-1.0-bin.zip").is_file()
        assert fake_provider.calls == []

    def test_empty_staging_area_stops_after_checkout(self, tmp_path: Path) -> None:
        provider = FakeScmProvider(remote_files=())

        outcome = clean_staging("commons-foo", _config(tmp_path), manager=_manager(provider))

        assert outcome.state is CleanupState.CHECKED_OUT
        assert provider.command_names == ["checkout"]


class TestFailures:
    def test_checkout_failure_stops_before_remove(self, tmp_path: Path) -> None:
        provider = FakeScmProvider(
            checkout_result=ScmResult(
                success=False,
                provider_message="svn: E170013: Unable to connect",
                command_output="checkout output",
            )
        )

        with pytest.raises(ScmFailure) as excinfo:
            clean_staging("commons-foo", _config(tmp_path), manager=_manager(provider))

        assert provider.command_names == ["checkout"]
        assert str(excinfo.value) == (
            "Failed to checkout files from SCM: svn: E170013: Unable to connect [checkout output]"
        )
        assert excinfo.value.provider_message == "svn: E170013: Unable to connect"

    def test_remove_failure_stops_before_checkin(self, tmp_path: Path) -> None:
        provider = FakeScmProvider(remove_result=ScmResult(success=False, provider_message="locked"))

        with pytest.raises(ScmFailure, match="Failed to remove files from SCM: locked"):
            clean_staging("commons-foo", _config(tmp_path), manager=_manager(provider))

        assert provider.command_names == ["checkout", "remove"]

    def test_checkin_failure_is_fatal(self, tmp_path: Path) -> None:
        provider = FakeScmProvider(
            checkin_result=CheckInResult(success=False, provider_message="out of date", command_output="")
        )

        with pytest.raises(ScmFailure, match="Failed to commit files to SCM: out of date"):
            clean_staging("commons-foo", _config(tmp_path), manager=_manager(provider))

    def test_provider_exception_becomes_build_failure(self, tmp_path: Path) -> None:
        class ExplodingProvider(FakeScmProvider):
            def checkout(self, repository, file_set):
                raise ScmError("Unable to run 'svn': executable not found")

        with pytest.raises(ScmFailure, match="executable not found"):
            clean_staging("commons-foo", _config(tmp_path), manager=_manager(ExplodingProvider()))

    def test_unknown_provider_becomes_build_failure(self, tmp_path: Path, fake_manager) -> None:
        config = _config(tmp_path, dist_svn_staging_url="scm:git:https://example.org/repo.git")

        with pytest.raises(ScmFailure, match="No such provider: 'git'"):
            clean_staging("commons-foo", config, manager=fake_manager)


class TestAuthentication:
    def test_named_server_wins_over_username(self, tmp_path: Path, fake_provider, fake_manager) -> None:
        servers = ServerSettings([ServerEntry(id="apache", username="jdoe", password="secret")])
        config = _config(tmp_path, dist_server="apache", username="someone", password="else")

        StagingCleanupService(config, manager=fake_manager, servers=servers).clean("commons-foo")

        repository = fake_provider.calls[0][1]
        assert repository.username == "jdoe"
        assert repository.password == "secret"

    def test_explicit_credentials_without_server(self, tmp_path: Path, fake_provider, fake_manager) -> None:
        config = _config(tmp_path, username="someone", password="else")

        clean_staging("commons-foo", config, manager=fake_manager)

        repository = fake_provider.calls[0][1]
        assert (repository.username, repository.password) == ("someone", "else")


def test_list_staged_entries_skips_admin_directory(tmp_path: Path) -> None:
    (tmp_path / ".svn").mkdir()
    (tmp_path / "b.zip").write_text("b", encoding="utf-8")
    (tmp_path / "a").mkdir()

    assert [path.name for path in list_staged_entries(tmp_path)] == ["a", "b.zip"]


def test_list_staged_entries_of_missing_directory(tmp_path: Path) -> None:
    assert list_staged_entries(tmp_path / "missing") == []
