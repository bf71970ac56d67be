"""
Tests for PostgresResourceStore SQL construction and row mapping.

No database needed: the PostgresService is replaced with a recording fake.
"""

import json
from datetime import datetime, timezone

import pytest

from awakening.errors import ResourceNotFoundError, VersionConflictError
from awakening.models.entities import ResourceKind
from awakening.normalization import prepare
from awakening.services.repositories import InMemoryResourceStore, PostgresResourceStore, get_resource_store
from awakening.services.repositories.resource_repository import build_order, build_where

NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)


class FakePostgres:
    """Records queries and returns canned rows."""

    def __init__(self, rows=None, value=None):
        self.pool = object()
        self.rows = rows or []
        self.value = value
        self.calls = []

    async def fetchrow(self, query, *params):
        self.calls.append((query, params))
        return self.rows[0] if self.rows else None

    async def fetch(self, query, *params):
        self.calls.append((query, params))
        return self.rows

    async def fetchval(self, query, *params):
        self.calls.append((query, params))
        return self.value

    async def execute(self, query, *params):
        self.calls.append((query, params))
        return "DELETE 1"


def row_for(resource, version=1):
    return {
        "id": resource.id or "r-1",
        "slug": resource.slug,
        "kind": resource.kind.value,
        "title": resource.title,
        "status": resource.status.value,
        "processed": resource.processed,
        "skipped": resource.skipped,
        "version": version,
        "document": json.dumps(resource.model_dump(mode="json")),
        "created_at": NOW,
        "updated_at": NOW,
    }


@pytest.fixture
def metta():
    return prepare(
        {"kind": "practice", "title": "Metta", "slug": "metta", "description": "d", "creator": "Buddha"}
    ).resource


class TestSqlBuilding:
    def test_build_where(self):
        clause, params = build_where({"kind": ResourceKind.BOOK, "status": ["pending", "skipped"]})
        assert clause == "WHERE kind = $1 AND status = ANY($2)"
        assert params == ["book", ["pending", "skipped"]]
        assert build_where({}) == ("", [])

    def test_build_order(self):
        assert build_order("title ASC, id") == "title ASC, id ASC"
        with pytest.raises(ValueError):
            build_order("document ASC")


class TestPostgresResourceStore:
    """Store operations against a recording fake."""

    @pytest.mark.asyncio
    async def test_get_maps_row(self, metta):
        db = FakePostgres(rows=[row_for(metta, version=3)])
        store = PostgresResourceStore(db, table_name="resources")
        fetched = await store.get("r-1")
        assert fetched.id == "r-1"
        assert fetched.version == 3
        assert fetched.created_at == NOW
        assert fetched.creator == ["Buddha"]
        assert db.calls[0][1] == ("r-1",)

    @pytest.mark.asyncio
    async def test_update_version_conflict(self, metta):
        db = FakePostgres(rows=[], value=5)
        store = PostgresResourceStore(db, table_name="resources")
        with pytest.raises(VersionConflictError) as exc_info:
            await store.update("r-1", metta, expected_version=4)
        assert exc_info.value.actual_version == 5
        assert "WHERE id = $1 AND version = $2" in db.calls[0][0]

    @pytest.mark.asyncio
    async def test_update_missing(self, metta):
        store = PostgresResourceStore(FakePostgres(rows=[], value=None), table_name="resources")
        with pytest.raises(ResourceNotFoundError):
            await store.update("r-1", metta, expected_version=1)

    @pytest.mark.asyncio
    async def test_query_with_limit_and_offset(self, metta):
        db = FakePostgres(rows=[row_for(metta)])
        store = PostgresResourceStore(db, table_name="resources")
        rows = await store.query({"status": "pending"}, order_by="title ASC, id ASC", limit=10, offset=20)
        assert [r.title for r in rows] == ["Metta"]
        query, params = db.calls[0]
        assert "ORDER BY title ASC, id ASC LIMIT $2 OFFSET $3" in query
        assert params == ("pending", 10, 20)

    @pytest.mark.asyncio
    async def test_aggregate_by_kind(self):
        db = FakePostgres(rows=[{"kind": "book", "count": 2}, {"kind": "app", "count": 1}])
        store = PostgresResourceStore(db, table_name="resources")
        assert await store.aggregate_by_kind({}) == {ResourceKind.BOOK: 2, ResourceKind.APP: 1}
        assert "GROUP BY kind" in db.calls[0][0]

    @pytest.mark.asyncio
    async def test_delete(self):
        store = PostgresResourceStore(FakePostgres(), table_name="resources")
        assert await store.delete("r-1") is True


class TestStoreSelection:
    def test_in_memory_when_postgres_disabled(self, monkeypatch):
        from awakening.settings import settings

        monkeypatch.setattr(settings.postgres, "enabled", False)
        assert isinstance(get_resource_store(), InMemoryResourceStore)

    def test_postgres_when_enabled(self, monkeypatch):
        from awakening.settings import settings

        monkeypatch.setattr(settings.postgres, "enabled", True)
        store = get_resource_store()
        assert isinstance(store, PostgresResourceStore)
        assert store.db.pool is None
