"""
PostgreSQL ResourceStore.

One row per resource: the full resource as a JSONB document, plus the
filterable/sortable columns (slug, kind, status, title, flags) kept in step
on every write. id, version and timestamps are owned by the columns and
override whatever the document carries.

Usage:
    from awakening.services.postgres import PostgresService
    from awakening.services.repositories import PostgresResourceStore

    db = PostgresService()
    await db.connect()
    store = PostgresResourceStore(db)
    resource = await store.get("...")
"""

import json
from typing import Any, Optional
from uuid import uuid4

import asyncpg
from loguru import logger

from ...errors import ResourceNotFoundError, SlugConflictError, VersionConflictError
from ...models.entities import Resource, ResourceKind
from ..postgres import PostgresService
from .base import DEFAULT_ORDER, check_filters, parse_order_by

COLUMNS = "id, slug, kind, title, status, processed, skipped, version, document, created_at, updated_at"


def build_where(filters: dict[str, Any], start: int = 1) -> tuple[str, list[Any]]:
    """
    Build a WHERE clause from equality/IN filters.

    Returns:
        (clause, params) where clause is "" when there are no filters
    """
    filters = check_filters(filters)
    conditions: list[str] = []
    params: list[Any] = []
    for field, value in filters.items():
        params.append(value)
        placeholder = f"${start + len(params) - 1}"
        if isinstance(value, list):
            conditions.append(f"{field} = ANY({placeholder})")
        else:
            conditions.append(f"{field} = {placeholder}")
    clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""
    return clause, params


def build_order(order_by: str) -> str:
    terms = parse_order_by(order_by)
    return ", ".join(f"{field} {'DESC' if desc else 'ASC'}" for field, desc in terms)


class PostgresResourceStore:
    """ResourceStore backed by a PostgreSQL table."""

    def __init__(self, db: PostgresService, table_name: Optional[str] = None):
        from ...settings import settings

        self.db = db
        self.table_name = table_name or settings.postgres.table_name

    async def _ensure_connected(self) -> None:
        if not self.db.pool:
            await self.db.connect()

    def _from_row(self, row: dict[str, Any]) -> Resource:
        document = row["document"]
        # asyncpg returns JSONB as text without a registered codec
        if isinstance(document, str):
            document = json.loads(document)
        document.update(
            id=row["id"],
            version=row["version"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
        return Resource.model_validate(document)

    def _document(self, resource: Resource) -> str:
        return json.dumps(resource.model_dump(mode="json"))

    async def get(self, resource_id: str) -> Optional[Resource]:
        await self._ensure_connected()
        row = await self.db.fetchrow(
            f"SELECT {COLUMNS} FROM {self.table_name} WHERE id = $1", resource_id
        )
        return self._from_row(row) if row else None

    async def find_by_slug(self, slug: str) -> Optional[Resource]:
        await self._ensure_connected()
        row = await self.db.fetchrow(
            f"SELECT {COLUMNS} FROM {self.table_name} WHERE slug = $1", slug
        )
        return self._from_row(row) if row else None

    async def create(self, resource: Resource) -> Resource:
        await self._ensure_connected()
        stored = resource.model_copy(update={"id": resource.id or str(uuid4()), "version": 1})
        query = f"""
            INSERT INTO {self.table_name}
                (id, slug, kind, title, status, processed, skipped, version, document, created_at, updated_at)
            VALUES ($1, $2, $3, $4, $5, $6, $7, 1, $8::jsonb, NOW(), NOW())
            RETURNING {COLUMNS}
        """
        try:
            row = await self.db.fetchrow(
                query,
                stored.id,
                stored.slug,
                stored.kind.value,
                stored.title,
                stored.status.value,
                stored.processed,
                stored.skipped,
                self._document(stored),
            )
        except asyncpg.UniqueViolationError as e:
            if e.constraint_name and "slug" in e.constraint_name:
                raise SlugConflictError(stored.slug) from e
            raise
        logger.debug(f"Inserted resource {stored.id} ({stored.slug})")
        return self._from_row(row)

    async def update(self, resource_id: str, resource: Resource, expected_version: int) -> Resource:
        await self._ensure_connected()
        stored = resource.model_copy(update={"id": resource_id, "version": expected_version + 1})
        query = f"""
            UPDATE {self.table_name}
            SET slug = $3, kind = $4, title = $5, status = $6, processed = $7, skipped = $8,
                document = $9::jsonb, version = version + 1, updated_at = NOW()
            WHERE id = $1 AND version = $2
            RETURNING {COLUMNS}
        """
        try:
            row = await self.db.fetchrow(
                query,
                resource_id,
                expected_version,
                stored.slug,
                stored.kind.value,
                stored.title,
                stored.status.value,
                stored.processed,
                stored.skipped,
                self._document(stored),
            )
        except asyncpg.UniqueViolationError as e:
            raise SlugConflictError(stored.slug) from e

        if row is None:
            actual = await self.db.fetchval(
                f"SELECT version FROM {self.table_name} WHERE id = $1", resource_id
            )
            if actual is None:
                raise ResourceNotFoundError(resource_id)
            raise VersionConflictError(resource_id, expected_version, actual)
        return self._from_row(row)

    async def delete(self, resource_id: str) -> bool:
        await self._ensure_connected()
        status = await self.db.execute(f"DELETE FROM {self.table_name} WHERE id = $1", resource_id)
        return status.endswith(" 1")

    async def query(
        self,
        filters: dict[str, Any],
        order_by: str = DEFAULT_ORDER,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Resource]:
        await self._ensure_connected()
        where, params = build_where(filters)
        sql = f"SELECT {COLUMNS} FROM {self.table_name} {where} ORDER BY {build_order(order_by)}"
        if limit is not None:
            params.append(limit)
            sql += f" LIMIT ${len(params)}"
        if offset:
            params.append(offset)
            sql += f" OFFSET ${len(params)}"
        rows = await self.db.fetch(sql, *params)
        return [self._from_row(row) for row in rows]

    async def count_by(self, filters: dict[str, Any]) -> int:
        await self._ensure_connected()
        where, params = build_where(filters)
        return await self.db.fetchval(f"SELECT COUNT(*) FROM {self.table_name} {where}", *params)

    async def aggregate_by_kind(self, filters: dict[str, Any]) -> dict[ResourceKind, int]:
        await self._ensure_connected()
        where, params = build_where(filters)
        rows = await self.db.fetch(
            f"SELECT kind, COUNT(*) AS count FROM {self.table_name} {where} GROUP BY kind", *params
        )
        return {ResourceKind(row["kind"]): row["count"] for row in rows}
