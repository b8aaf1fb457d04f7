"""Staging cleanup public API."""

from .service import StagingCleanupService, clean_staging

__all__ = ["StagingCleanupService", "clean_staging"]
