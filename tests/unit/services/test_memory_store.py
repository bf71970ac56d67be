"""
Tests for the in-memory ResourceStore and the shared query helpers.
"""

import pytest

from awakening.errors import ResourceNotFoundError, SlugConflictError, VersionConflictError
from awakening.models.entities import ResourceKind, ResourceStatus
from awakening.normalization import prepare
from awakening.processing import with_status
from awakening.services.repositories import InMemoryResourceStore, parse_order_by


def resource(title: str, kind: str = "practice", status: str = "pending"):
    return prepare(
        {
            "kind": kind,
            "title": title,
            "slug": title.lower().replace(" ", "-"),
            "description": "d",
            "status": status,
        }
    ).resource


class TestParseOrderBy:
    def test_terms(self):
        assert parse_order_by("title ASC, id desc") == [("title", False), ("id", True)]
        assert parse_order_by("created_at") == [("created_at", False)]

    @pytest.mark.parametrize("order_by", ["", "title SIDEWAYS", "description ASC", "title; DROP TABLE"])
    def test_rejected(self, order_by):
        with pytest.raises(ValueError):
            parse_order_by(order_by)


class TestInMemoryStore:
    @pytest.mark.asyncio
    async def test_create_get_and_copies(self):
        store = InMemoryResourceStore()
        created = await store.create(resource("Metta"))
        assert created.version == 1

        fetched = await store.get(created.id)
        fetched.tags.append("mutated")
        assert (await store.get(created.id)).tags == []
        assert (await store.find_by_slug("metta")).id == created.id

    @pytest.mark.asyncio
    async def test_slug_unique(self):
        store = InMemoryResourceStore()
        await store.create(resource("Metta"))
        with pytest.raises(SlugConflictError):
            await store.create(resource("Metta"))

    @pytest.mark.asyncio
    async def test_compare_and_set(self):
        store = InMemoryResourceStore()
        created = await store.create(resource("Metta"))
        updated = await store.update(created.id, created.model_copy(update={"description": "new"}), 1)
        assert updated.version == 2
        with pytest.raises(VersionConflictError):
            await store.update(created.id, created, 1)
        with pytest.raises(ResourceNotFoundError):
            await store.update("missing", created, 1)

    @pytest.mark.asyncio
    async def test_query_filters_and_order(self):
        store = InMemoryResourceStore()
        for title in ("Zazen", "Anapanasati", "Metta"):
            await store.create(resource(title))
        await store.create(resource("Tara Talks", kind="podcast"))

        practices = await store.query({"kind": ResourceKind.PRACTICE}, order_by="title DESC")
        assert [r.title for r in practices] == ["Zazen", "Metta", "Anapanasati"]

        page = await store.query({}, order_by="title ASC", limit=2, offset=1)
        assert [r.title for r in page] == ["Metta", "Tara Talks"]

        both = await store.query({"kind": ["podcast", "practice"], "slug": ["metta", "tara-talks"]})
        assert {r.title for r in both} == {"Metta", "Tara Talks"}

    @pytest.mark.asyncio
    async def test_counts_and_aggregates(self):
        store = InMemoryResourceStore()
        metta = await store.create(resource("Metta"))
        await store.create(resource("Zazen"))
        await store.create(resource("Tara Talks", kind="podcast"))
        await store.update(metta.id, with_status(metta, ResourceStatus.SKIPPED), metta.version)

        assert await store.count_by({"status": "pending"}) == 2
        assert await store.count_by({"skipped": True}) == 1
        assert await store.aggregate_by_kind({}) == {ResourceKind.PRACTICE: 2, ResourceKind.PODCAST: 1}
        assert await store.aggregate_by_kind({"status": ResourceStatus.SKIPPED}) == {ResourceKind.PRACTICE: 1}

    @pytest.mark.asyncio
    async def test_unknown_filter_field(self):
        with pytest.raises(ValueError):
            await InMemoryResourceStore().query({"description": "d"})

    @pytest.mark.asyncio
    async def test_delete(self):
        store = InMemoryResourceStore()
        created = await store.create(resource("Metta"))
        assert await store.delete(created.id) is True
        assert await store.delete(created.id) is False
