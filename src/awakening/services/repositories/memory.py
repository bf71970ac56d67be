"""In-memory ResourceStore for tests and file-based tooling."""

import asyncio
from collections import Counter
from typing import Any, Optional
from uuid import uuid4

from loguru import logger

from ...errors import ResourceNotFoundError, SlugConflictError, VersionConflictError
from ...models.core import utcnow
from ...models.entities import Resource, ResourceKind
from .base import DEFAULT_ORDER, check_filters, filter_value, parse_order_by


class InMemoryResourceStore:
    """
    ResourceStore backed by a dict.

    Stored and returned resources are deep copies, so callers can never
    mutate stored state. A single asyncio.Lock serializes writes.
    """

    def __init__(self) -> None:
        self._resources: dict[str, Resource] = {}
        self._lock = asyncio.Lock()

    def _matches(self, resource: Resource, filters: dict[str, Any]) -> bool:
        for key, expected in filters.items():
            actual = filter_value(getattr(resource, key))
            if isinstance(expected, list):
                if actual not in expected:
                    return False
            elif actual != expected:
                return False
        return True

    def _slug_owner(self, slug: str) -> Optional[Resource]:
        for resource in self._resources.values():
            if resource.slug == slug:
                return resource
        return None

    async def get(self, resource_id: str) -> Optional[Resource]:
        resource = self._resources.get(resource_id)
        return resource.model_copy(deep=True) if resource else None

    async def find_by_slug(self, slug: str) -> Optional[Resource]:
        resource = self._slug_owner(slug)
        return resource.model_copy(deep=True) if resource else None

    async def create(self, resource: Resource) -> Resource:
        async with self._lock:
            if resource.slug and self._slug_owner(resource.slug):
                raise SlugConflictError(resource.slug)
            now = utcnow()
            stored = resource.model_copy(
                update={
                    "id": resource.id or str(uuid4()),
                    "version": 1,
                    "created_at": now,
                    "updated_at": now,
                },
                deep=True,
            )
            if stored.id in self._resources:
                raise ValueError(f"Resource id already exists: {stored.id}")
            self._resources[stored.id] = stored
            logger.debug(f"Stored resource {stored.id} ({stored.slug})")
            return stored.model_copy(deep=True)

    async def update(self, resource_id: str, resource: Resource, expected_version: int) -> Resource:
        async with self._lock:
            current = self._resources.get(resource_id)
            if current is None:
                raise ResourceNotFoundError(resource_id)
            if current.version != expected_version:
                raise VersionConflictError(resource_id, expected_version, current.version)
            owner = self._slug_owner(resource.slug) if resource.slug else None
            if owner is not None and owner.id != resource_id:
                raise SlugConflictError(resource.slug)
            stored = resource.model_copy(
                update={
                    "id": resource_id,
                    "version": current.version + 1,
                    "created_at": current.created_at,
                    "updated_at": utcnow(),
                },
                deep=True,
            )
            self._resources[resource_id] = stored
            return stored.model_copy(deep=True)

    async def delete(self, resource_id: str) -> bool:
        async with self._lock:
            return self._resources.pop(resource_id, None) is not None

    async def query(
        self,
        filters: dict[str, Any],
        order_by: str = DEFAULT_ORDER,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Resource]:
        filters = check_filters(filters)
        rows = [r for r in self._resources.values() if self._matches(r, filters)]
        # Stable sorts applied from the last key to the first
        for field, descending in reversed(parse_order_by(order_by)):
            rows.sort(key=lambda r: filter_value(getattr(r, field)), reverse=descending)
        rows = rows[offset:]
        if limit is not None:
            rows = rows[:limit]
        return [r.model_copy(deep=True) for r in rows]

    async def count_by(self, filters: dict[str, Any]) -> int:
        filters = check_filters(filters)
        return sum(1 for r in self._resources.values() if self._matches(r, filters))

    async def aggregate_by_kind(self, filters: dict[str, Any]) -> dict[ResourceKind, int]:
        filters = check_filters(filters)
        counts = Counter(r.kind for r in self._resources.values() if self._matches(r, filters))
        return dict(counts)
