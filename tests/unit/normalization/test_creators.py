"""
Tests for creator/name synchronization.
"""

from awakening.models.entities import Resource
from awakening.normalization.creators import sync


def make(kind: str, detail: dict, creator=None, title: str = "Some Title") -> Resource:
    return Resource.model_validate(
        {
            "kind": kind,
            "title": title,
            "description": "Description",
            "creator": creator or [],
            "detail": detail,
        }
    )


class TestCreatorSync:
    """Creator precedence between the canonical list and the detail field."""

    def test_creator_overwrites_detail_field(self):
        """Canonical creator wins over the detail author."""
        resource = sync(make("book", {"author": ["J. Doe"]}, creator=["Jane Doe"]))
        assert resource.creator == ["Jane Doe"]
        assert resource.detail.author == ["Jane Doe"]

    def test_empty_creator_filled_from_detail(self):
        resource = sync(make("podcast", {"hosts": ["Ann Lee", "Bo Chen"]}))
        assert resource.creator == ["Ann Lee", "Bo Chen"]
        assert resource.detail.hosts == ["Ann Lee", "Bo Chen"]

    def test_creator_string_split(self):
        resource = sync(make("practice", {"originator": "Thich Nhat Hanh and Sister Chan Khong & Ann"}))
        assert resource.creator == ["Thich Nhat Hanh", "Sister Chan Khong", "Ann"]

    def test_names_containing_and_not_split(self):
        resource = sync(make("app", {}, creator="Anderson Cooper"))
        assert resource.creator == ["Anderson Cooper"]

    def test_both_empty(self):
        resource = sync(make("website", {}))
        assert resource.creator == []
        assert resource.detail.creator == []


class TestNameMirroring:
    def test_title_mirrored_into_name_field(self):
        resource = sync(make("app", {"appName": "Old Name"}, title="Insight Timer"))
        assert resource.detail.app_name == "Insight Timer"

    def test_book_has_no_name_field(self):
        resource = sync(make("book", {}, creator=["A"], title="A Book"))
        assert not hasattr(resource.detail, "name")


class TestPurity:
    def test_idempotent(self):
        resource = make("videoChannel", {"creator": "Tara Brach", "channelName": "x"}, title="Tara Talks")
        once = sync(resource)
        assert sync(once) == once

    def test_input_untouched(self):
        resource = make("book", {"author": ["J. Doe"]}, creator=["Jane Doe"])
        sync(resource)
        assert resource.detail.author == ["J. Doe"]
