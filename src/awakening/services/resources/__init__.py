"""Resource write pipeline and enrichment collaborators."""

from .enrichment import Enricher, EnrichmentData
from .service import ResourceService, WriteResult, build_update

__all__ = ["Enricher", "EnrichmentData", "ResourceService", "WriteResult", "build_update"]
