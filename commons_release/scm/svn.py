"""SCM provider driving the local ``svn`` command line client."""

from __future__ import annotations

import re
import subprocess
from pathlib import Path
from typing import Sequence

from commons_release.core.exceptions import ScmError
from commons_release.core.logging import get_logger
from commons_release.core.models import CheckInResult, ScmFileSet, ScmResult

from .base import ScmProvider
from .repository import ScmRepository

LOGGER = get_logger(__name__)
COMMITTED_REVISION_RE = re.compile(r"Committed revision (?P<revision>\d+)\.")
COMMIT_ENTRY_RE = re.compile(r"^(?:Adding|Deleting|Sending|Replacing)\s+(?:\(bin\)\s+)?(?P<path>.+)$")
_MASK = "*****"


class SvnExeScmProvider(ScmProvider):
    def __init__(self, executable: str = "svn") -> None:
        self._executable = executable

    def checkout(self, repository: ScmRepository, file_set: ScmFileSet) -> ScmResult:
        target = Path(file_set.base_directory)
        target.parent.mkdir(parents=True, exist_ok=True)
        command = self._command("checkout", repository) + [repository.url, str(target)]
        proc = self._run(command, cwd=None)
        return _result(proc)

    def remove(self, repository: ScmRepository, file_set: ScmFileSet, message: str) -> ScmResult:
        # svn delete on working copy paths only schedules the removal; the message is used at commit.
        if not file_set.files:
            return ScmResult(success=True, provider_message="No files to remove.")
        command = [self._executable, "delete", "--non-interactive"]
        command.extend(_relative_paths(file_set))
        proc = self._run(command, cwd=file_set.base_directory)
        return _result(proc)

    def checkin(self, repository: ScmRepository, file_set: ScmFileSet, message: str) -> CheckInResult:
        command = self._command("commit", repository) + ["-m", message]
        command.extend(_relative_paths(file_set))
        proc = self._run(command, cwd=file_set.base_directory)
        base = _result(proc)
        output = proc.stdout or ""
        revision_match = COMMITTED_REVISION_RE.search(output)
        return CheckInResult(
            success=base.success,
            provider_message=base.provider_message,
            command_output=base.command_output,
            checked_in_files=_committed_files(output, Path(file_set.base_directory)),
            revision=revision_match.group("revision") if revision_match else None,
        )

    def _command(self, subcommand: str, repository: ScmRepository) -> list[str]:
        command = [self._executable, subcommand, "--non-interactive"]
        if repository.username:
            command.extend(["--username", repository.username])
            if repository.password:
                command.extend(["--password", repository.password])
            command.append("--no-auth-cache")
        return command

    def _run(self, command: Sequence[str], *, cwd: Path | None) -> subprocess.CompletedProcess[str]:
        LOGGER.debug("svn.invoke", command=_masked(command), cwd=str(cwd) if cwd else None)
        try:
            return subprocess.run(
                list(command),
                cwd=cwd,
                check=False,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as exc:
            raise ScmError(f"Unable to run '{self._executable}': executable not found") from exc
        except OSError as exc:
            raise ScmError(f"Unable to run '{self._executable}': {exc}") from exc


def _result(proc: subprocess.CompletedProcess[str]) -> ScmResult:
    stdout = (proc.stdout or "").strip()
    stderr = (proc.stderr or "").strip()
    output = "\n".join(piece for piece in (stdout, stderr) if piece)
    if proc.returncode != 0:
        LOGGER.error("svn.exit_nonzero", returncode=proc.returncode)
        return ScmResult(
            success=False,
            provider_message=stderr or f"svn exited with status {proc.returncode}",
            command_output=output,
        )
    return ScmResult(success=True, provider_message="", command_output=output)


def _relative_paths(file_set: ScmFileSet) -> list[str]:
    base = Path(file_set.base_directory)
    paths: list[str] = []
    for file in file_set.files:
        path = Path(file)
        try:
            paths.append(str(path.relative_to(base)) if path.is_absolute() else str(path))
        except ValueError:
            paths.append(str(path))
    return paths


def _committed_files(output: str, base: Path) -> list[Path]:
    files: list[Path] = []
    for line in output.splitlines():
        match = COMMIT_ENTRY_RE.match(line.strip())
        if match:
            files.append(base / match.group("path").strip())
    return files


def _masked(command: Sequence[str]) -> list[str]:
    masked = list(command)
    for index, part in enumerate(masked[:-1]):
        if part == "--password":
            masked[index + 1] = _MASK
    return masked
