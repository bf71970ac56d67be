"""
Enrichment collaborators.

An enricher looks a resource up somewhere else (cover image host, book
metadata API, ...) and returns a patch. The core never trusts the patch
directly: it is turned into ordinary update changes and goes through the
same normalize-then-validate pipeline as any other write.
"""

from typing import Any, Optional, Protocol

from pydantic import BaseModel, Field

from ...models.entities import Resource
from ...registry import describe


class EnrichmentData(BaseModel):
    """Patch returned by an enrichment collaborator."""

    image_url: Optional[str] = Field(default=None, description="Hosted cover or logo image")
    isbn: Optional[str] = Field(default=None, description="ISBN, applied to kinds that carry one")
    links: list[Any] = Field(
        default_factory=list,
        description="Additional raw link entries, canonicalized on write",
    )

    def to_changes(self, resource: Resource) -> dict[str, Any]:
        """
        Express this patch as update changes for resource.

        New links are appended after the existing ones, so existing labels win
        on duplicates. isbn is dropped for kinds whose detail has no isbn.
        """
        spec = describe(resource.kind)
        changes: dict[str, Any] = {}
        detail: dict[str, Any] = {}

        if self.image_url:
            changes["image_url"] = self.image_url
        if self.links:
            existing = [link.model_dump() for link in getattr(resource.detail, spec.link_field)]
            detail[spec.link_field] = existing + list(self.links)
        if self.isbn and "isbn" in spec.detail_model.model_fields:
            detail["isbn"] = self.isbn

        if detail:
            changes["detail"] = detail
        return changes


class Enricher(Protocol):
    """Enrichment collaborator."""

    async def enrich(self, resource: Resource, hints: dict[str, Any]) -> EnrichmentData: ...
