"""
Tests for the resource kind registry.
"""

import pytest

from awakening.errors import UnknownKindError
from awakening.models.entities import BookDetails, PodcastDetails, ResourceKind
from awakening.registry import KindRegistry, KindSpec, Requirement, describe, get_kind_registry


class TestDescribe:
    """describe() returns the shape of every kind."""

    def test_all_kinds_registered(self):
        """Every ResourceKind has a spec."""
        assert set(get_kind_registry().kinds()) == set(ResourceKind)

    def test_describe_accepts_string_value(self):
        spec = describe("videoChannel")
        assert spec.kind is ResourceKind.VIDEO_CHANNEL
        assert spec.name_field == "channel_name"
        assert spec.creator_field == "creator"

    def test_podcast_shape(self):
        spec = describe(ResourceKind.PODCAST)
        assert spec.creator_field == "hosts"
        assert spec.name_field == "podcast_name"
        assert spec.date_hint_field == "dates_active"
        assert spec.detail_key == "podcastDetails"

    def test_book_requires_link_or_isbn(self):
        spec = describe("book")
        assert spec.name_field is None
        assert spec.date_hint_field == "year_published"
        assert spec.date_hint_format == "year"
        assert spec.required_field_names == ["link", "isbn"]

    def test_practice_has_no_requirements(self):
        assert describe("practice").required_detail_fields == ()

    def test_legacy_link_fields(self):
        assert describe("website").legacy_link_field == "link"
        assert describe("blog").legacy_link_label == "Blog"
        assert describe("app").legacy_link_field is None

    def test_creator_labels(self):
        assert describe("book").creator_label == "Author"
        assert describe("podcast").creator_label_plural == "Hosts"
        assert describe("retreatCenter").creator_label == "Founded by"

    @pytest.mark.parametrize("kind", ["documentary", "", None, "Book"])
    def test_unknown_kind(self, kind):
        """Kinds outside the closed set raise UnknownKindError."""
        with pytest.raises(UnknownKindError):
            describe(kind)


class TestKindRegistry:
    def test_by_detail_key(self):
        assert get_kind_registry().by_detail_key("retreatCenterDetails").kind is ResourceKind.RETREAT_CENTER

    def test_by_unknown_detail_key(self):
        with pytest.raises(UnknownKindError):
            get_kind_registry().by_detail_key("movieDetails")

    def test_iteration_in_declaration_order(self):
        assert [spec.kind for spec in get_kind_registry()][:2] == [ResourceKind.BOOK, ResourceKind.BLOG]

    def test_register_rejects_unknown_field(self):
        """Declared fields must exist on the detail model."""
        registry = KindRegistry(specs=())
        with pytest.raises(ValueError, match="no field 'podcast_name'"):
            registry.register(
                KindSpec(
                    kind=ResourceKind.BOOK,
                    detail_model=BookDetails,
                    detail_key="bookDetails",
                    creator_field="author",
                    name_field="podcast_name",
                )
            )

    def test_partial_registry(self):
        registry = KindRegistry(
            specs=(
                KindSpec(
                    kind=ResourceKind.PODCAST,
                    detail_model=PodcastDetails,
                    detail_key="podcastDetails",
                    creator_field="hosts",
                    required_detail_fields=(Requirement(fields=("hosts",), names=("host",)),),
                ),
            )
        )
        assert registry.kinds() == [ResourceKind.PODCAST]
        with pytest.raises(UnknownKindError):
            registry.describe("book")
