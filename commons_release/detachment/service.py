"""Detach distribution archives from the attached artifact list."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

from commons_release.core.config import DetachmentConfig
from commons_release.core.logging import get_logger
from commons_release.core.models import Artifact, DetachmentResult
from commons_release.shared import copy_file, init_directory

LOGGER = get_logger(__name__)


class DistributionDetachmentService:
    """
    Partition attached artifacts into kept and detached sets.

    Detached archives are copied, together with their signature and checksum
    side-files, into the working directory. The caller publishes the returned
    ``attached`` list in place of the one it passed in.
    """

    def __init__(self, config: DetachmentConfig) -> None:
        self._config = config

    def is_detachable(self, artifact: Artifact) -> bool:
        return matches_suffix(artifact.file_name, self._config.archive_suffixes)

    def partition(self, artifacts: Iterable[Artifact]) -> tuple[list[Artifact], list[Artifact]]:
        kept: list[Artifact] = []
        detached: list[Artifact] = []
        for artifact in artifacts:
            (detached if self.is_detachable(artifact) else kept).append(artifact)
        return kept, detached

    def detach(self, artifacts: Sequence[Artifact]) -> DetachmentResult:
        kept, detached = self.partition(artifacts)
        LOGGER.info(
            "detachment.start",
            attached_count=len(artifacts),
            detach_count=len(detached),
            working_directory=str(self._config.working_directory),
        )
        if not detached:
            return DetachmentResult(attached=kept, detached=[], copied_files=[])

        working_directory = init_directory(self._config.working_directory)
        copied: list[Path] = []
        for artifact in detached:
            copied.extend(self._copy_with_side_files(artifact, working_directory))

        LOGGER.info("detachment.complete", detached=[a.file_name for a in detached], copied_count=len(copied))
        return DetachmentResult(attached=kept, detached=detached, copied_files=copied)

    def _copy_with_side_files(self, artifact: Artifact, working_directory: Path) -> list[Path]:
        source = Path(artifact.path)
        copied = [copy_file(source, working_directory / artifact.file_name)]
        for suffix in self._config.side_file_suffixes:
            sibling = source.with_name(source.name + suffix)
            if not sibling.is_file():
                LOGGER.debug("detachment.side_file_missing", path=str(sibling))
                continue
            copied.append(copy_file(sibling, working_directory / sibling.name))
        LOGGER.info("detachment.artifact_detached", artifact=artifact.file_name, copied_count=len(copied))
        return copied


def matches_suffix(file_name: str, suffixes: Iterable[str]) -> bool:
    lowered = file_name.lower()
    return any(lowered.endswith(suffix.lower()) for suffix in suffixes if suffix)


def detach_distributions(artifacts: Sequence[Artifact], config: DetachmentConfig) -> DetachmentResult:
    return DistributionDetachmentService(config).detach(artifacts)
