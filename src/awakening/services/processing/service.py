"""
ProcessingService - the moderation queue.

Operators work through pending resources in title order and either mark
them processed (optionally with enrichment applied in the same write) or
skip them with notes. Processed and skipped resources can be re-queued.

All transitions go through awakening.processing.transition, so the legacy
processed/skipped flags are written together with status, and a failed
transition persists nothing.
"""

from typing import Any, Optional

from loguru import logger
from pydantic import BaseModel, Field

from ...models.entities import Resource, ResourceKind, ResourceStatus
from ...normalization import normalize
from ...processing import check_transition, transition
from ...registry import get_kind_registry
from ...validation import check_writable
from ..repositories import ResourceStore
from ..resources import EnrichmentData, ResourceService

QUEUE_ORDER = "title ASC, id ASC"


class ProgressCounts(BaseModel):
    """Queue counts for one kind or overall."""

    total: int = 0
    processed: int = 0
    skipped: int = 0
    remaining: int = 0

    @property
    def completion(self) -> float:
        """Share of resources that have left the queue (0.0 - 1.0)."""
        if not self.total:
            return 0.0
        return (self.processed + self.skipped) / self.total


class ProgressReport(BaseModel):
    overall: ProgressCounts = Field(default_factory=ProgressCounts)
    by_kind: dict[ResourceKind, ProgressCounts] = Field(default_factory=dict)


class ProcessingService:
    """Queue navigation, status transitions and progress for operators."""

    def __init__(self, store: ResourceStore, resources: Optional[ResourceService] = None):
        self.store = store
        self.resources = resources or ResourceService(store)

    async def _write(self, current: Resource, updated: Resource, expected_version: Optional[int]) -> Resource:
        check_writable(updated)
        version = current.version if expected_version is None else expected_version
        stored = await self.store.update(current.id, updated, version)
        logger.info(
            f"Resource {stored.id} ({stored.slug}) {current.status.value} -> {stored.status.value}"
        )
        return stored

    async def mark_processed(
        self,
        resource_id: str,
        enrichment: Optional[EnrichmentData] = None,
        notes: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> Resource:
        """
        Move a pending resource to processed.

        Enrichment (image, ISBN, links) is applied in the same write, so the
        completeness check sees the enriched resource.

        Raises:
            InvalidTransitionError: resource is not pending
            IncompleteResourceError: required fields still missing (nothing persisted)
            VersionConflictError: resource changed since expected_version
        """
        current = await self.resources.get(resource_id)
        check_transition(current.status, ResourceStatus.PROCESSED)

        changes = enrichment.to_changes(current) if enrichment is not None else {}
        if changes:
            candidate = self.resources.prepare_update(current, changes).resource
        else:
            candidate = normalize(current).resource

        updated = transition(candidate, ResourceStatus.PROCESSED, notes)
        return await self._write(current, updated, expected_version)

    async def skip(
        self,
        resource_id: str,
        notes: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> Resource:
        """Move a pending resource to skipped, keeping optional notes."""
        current = await self.resources.get(resource_id)
        updated = transition(current, ResourceStatus.SKIPPED, notes)
        return await self._write(current, updated, expected_version)

    async def requeue(self, resource_id: str, expected_version: Optional[int] = None) -> Resource:
        """Send a processed or skipped resource back to pending."""
        current = await self.resources.get(resource_id)
        updated = transition(current, ResourceStatus.PENDING)
        return await self._write(current, updated, expected_version)

    async def next_pending(self, kind: Optional[ResourceKind | str] = None) -> Optional[Resource]:
        """First pending resource by title (id breaks ties), or None when the queue is empty."""
        filters: dict[str, Any] = {"status": ResourceStatus.PENDING}
        if kind is not None:
            filters["kind"] = ResourceKind(kind)
        rows = await self.store.query(filters, order_by=QUEUE_ORDER, limit=1)
        return rows[0] if rows else None

    async def pending(
        self,
        kind: Optional[ResourceKind | str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Resource]:
        """Pending resources in queue order."""
        filters: dict[str, Any] = {"status": ResourceStatus.PENDING}
        if kind is not None:
            filters["kind"] = ResourceKind(kind)
        return await self.store.query(filters, order_by=QUEUE_ORDER, limit=limit, offset=offset)

    async def progress(self, kind: Optional[ResourceKind | str] = None) -> ProgressReport:
        """
        Queue progress per kind and overall.

        Recomputed from store aggregates on every call.
        """
        base: dict[str, Any] = {}
        kinds = get_kind_registry().kinds()
        if kind is not None:
            base["kind"] = ResourceKind(kind)
            kinds = [ResourceKind(kind)]

        totals = await self.store.aggregate_by_kind(base)
        processed = await self.store.aggregate_by_kind({**base, "status": ResourceStatus.PROCESSED})
        skipped = await self.store.aggregate_by_kind({**base, "status": ResourceStatus.SKIPPED})

        report = ProgressReport()
        for resource_kind in kinds:
            counts = ProgressCounts(
                total=totals.get(resource_kind, 0),
                processed=processed.get(resource_kind, 0),
                skipped=skipped.get(resource_kind, 0),
            )
            counts.remaining = counts.total - counts.processed - counts.skipped
            report.by_kind[resource_kind] = counts
            report.overall.total += counts.total
            report.overall.processed += counts.processed
            report.overall.skipped += counts.skipped
            report.overall.remaining += counts.remaining
        return report
