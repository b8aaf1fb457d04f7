"""Distribution detachment public API."""

from .service import DistributionDetachmentService, detach_distributions

__all__ = ["DistributionDetachmentService", "detach_distributions"]
