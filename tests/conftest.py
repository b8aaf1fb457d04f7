"""Shared fixtures for the release step tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from commons_release.core.models import Artifact, CheckInResult, ScmFileSet, ScmResult
from commons_release.scm import ScmManager, ScmProvider, ScmRepository

SIDE_SUFFIXES = (".asc", ".md5", ".sha1")


class FakeScmProvider(ScmProvider):
    """In-memory provider recording every command it receives."""

    def __init__(
        self,
        *,
        remote_files: tuple[str, ...] = ("commons-foo-1.0-bin.zip", "RELEASE-NOTES.txt"),
        checkout_result: ScmResult | None = None,
        remove_result: ScmResult | None = None,
        checkin_result: CheckInResult | None = None,
    ) -> None:
        self.remote_files = remote_files
        self.checkout_result = checkout_result or ScmResult(success=True)
        self.remove_result = remove_result or ScmResult(success=True)
        self.checkin_result = checkin_result or CheckInResult(success=True, revision="42")
        self.calls: list[tuple[str, ScmRepository, ScmFileSet, str | None]] = []

    def checkout(self, repository: ScmRepository, file_set: ScmFileSet) -> ScmResult:
        self.calls.append(("checkout", repository, file_set, None))
        if self.checkout_result.success:
            base = Path(file_set.base_directory)
            (base / ".svn").mkdir(parents=True, exist_ok=True)
            for name in self.remote_files:
                (base / name).write_text(name, encoding="utf-8")
        return self.checkout_result

    def remove(self, repository: ScmRepository, file_set: ScmFileSet, message: str) -> ScmResult:
        self.calls.append(("remove", repository, file_set, message))
        if self.remove_result.success:
            for path in file_set.files:
                if Path(path).is_file():
                    Path(path).unlink()
        return self.remove_result

    def checkin(self, repository: ScmRepository, file_set: ScmFileSet, message: str) -> CheckInResult:
        self.calls.append(("checkin", repository, file_set, message))
        return self.checkin_result

    @property
    def command_names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def fake_provider() -> FakeScmProvider:
    return FakeScmProvider()


@pytest.fixture
def fake_manager(fake_provider: FakeScmProvider) -> ScmManager:
    manager = ScmManager()
    manager.set_provider("svn", fake_provider)
    return manager


@pytest.fixture
def mock_build(tmp_path: Path) -> tuple[Path, list[Artifact]]:
    """A build directory holding a tarball, a zip and a site page with signatures for the archives."""
    build_dir = tmp_path / "build"
    build_dir.mkdir()
    artifacts: list[Artifact] = []
    for name, artifact_type in (
        ("mockAttachedTar.tar.gz", "tar.gz"),
        ("mockAttachedZip.zip", "zip"),
        ("mockAttachedFile.html", "html"),
    ):
        path = build_dir / name
        path.write_bytes(f"content of {name}".encode("utf-8"))
        artifacts.append(Artifact(path=path, type=artifact_type))
        if artifact_type != "html":
            for suffix in SIDE_SUFFIXES:
                (build_dir / f"{name}{suffix}").write_text(f"{suffix} of {name}", encoding="utf-8")
    return build_dir, artifacts
