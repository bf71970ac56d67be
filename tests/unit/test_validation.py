"""
Tests for the consistency validator.
"""

import pytest

from awakening.errors import InvariantViolationError
from awakening.models.entities import Resource
from awakening.normalization import prepare
from awakening.validation import (
    ViolationCode,
    check_writable,
    missing_required_fields,
    structural,
    validate,
)


def raw(**overrides) -> Resource:
    """A resource built without normalization, so inconsistencies survive."""
    data = {
        "kind": "podcast",
        "title": "Tara Talks",
        "slug": "tara-talks",
        "description": "Talks.",
        "creator": ["Tara Brach"],
        "detail": {
            "podcastName": "Tara Talks",
            "hosts": ["Tara Brach"],
            "links": [{"url": "https://podcasts.apple.com/tara", "label": "Apple Podcasts"}],
        },
    }
    data.update(overrides)
    return Resource.model_validate(data)


def codes(resource: Resource) -> list[ViolationCode]:
    return [v.code for v in validate(resource)]


class TestValidate:
    def test_consistent_resource_is_clean(self):
        assert validate(raw()) == []

    def test_normalized_resource_has_no_structural_violations(self, podcast_data):
        resource = prepare({**podcast_data, "slug": "here-and-now"}).resource
        assert structural(validate(resource)) == []

    def test_missing_and_invalid_slug(self):
        assert codes(raw(slug=None)) == [ViolationCode.MISSING_SLUG]
        assert codes(raw(slug="Tara Talks")) == [ViolationCode.INVALID_SLUG]

    def test_creator_mismatch(self):
        violations = validate(raw(creator=["Someone Else"]))
        assert [v.code for v in violations] == [ViolationCode.CREATOR_MISMATCH]
        assert violations[0].path == "detail.hosts"
        assert violations[0].structural

    def test_name_mismatch(self):
        resource = raw(detail={"podcastName": "Other", "hosts": ["Tara Brach"], "links": []})
        assert codes(resource) == [ViolationCode.NAME_MISMATCH]

    def test_duplicate_link(self):
        resource = raw(
            detail={
                "podcastName": "Tara Talks",
                "hosts": ["Tara Brach"],
                "links": [
                    {"url": "https://example.com/a", "label": "A"},
                    {"url": "https://EXAMPLE.com/a/", "label": "B"},
                ],
            }
        )
        violations = validate(resource)
        assert [v.code for v in violations] == [ViolationCode.DUPLICATE_LINK]
        assert violations[0].path == "detail.links[1]"

    def test_active_period_mismatch(self):
        resource = raw(
            detail={"podcastName": "Tara Talks", "hosts": ["Tara Brach"], "datesActive": "2008 - Present"}
        )
        assert codes(resource) == [ViolationCode.ACTIVE_PERIOD_MISMATCH]

    def test_active_period_on_kind_without_hint(self):
        resource = Resource.model_validate(
            {
                "kind": "app",
                "title": "Insight Timer",
                "slug": "insight-timer",
                "description": "Meditation app.",
                "active_period": {"start": "2009-01-01"},
                "detail": {"appName": "Insight Timer"},
            }
        )
        assert [(v.code, v.path) for v in validate(resource)] == [
            (ViolationCode.ACTIVE_PERIOD_MISMATCH, "active_period"),
            (ViolationCode.MISSING_REQUIRED_FIELD, "detail.links"),
        ]

    def test_legacy_link_field(self):
        resource = Resource.model_validate(
            {
                "kind": "website",
                "title": "Dharma Seed",
                "slug": "dharma-seed",
                "description": "Talks.",
                "detail": {"websiteName": "Dharma Seed", "link": "https://dharmaseed.org"},
            }
        )
        assert ViolationCode.LEGACY_LINK_FIELD in codes(resource)

    def test_status_flag_mismatch(self):
        violations = validate(raw(status="processed", processed=False))
        assert [(v.code, v.path) for v in violations] == [(ViolationCode.STATUS_FLAG_MISMATCH, "processed")]


class TestCompleteness:
    """Required fields are informational until the processed transition."""

    def test_completeness_is_not_structural(self):
        resource = Resource.model_validate(
            {"kind": "book", "title": "A Book", "slug": "a-book", "description": "d"}
        )
        violations = validate(resource)
        assert [(v.code, v.path) for v in violations] == [
            (ViolationCode.MISSING_REQUIRED_FIELD, "detail.links"),
            (ViolationCode.MISSING_REQUIRED_FIELD, "detail.isbn"),
        ]
        assert structural(violations) == []
        assert missing_required_fields(resource) == ["link", "isbn"]

    @pytest.mark.parametrize(
        "kind,detail,missing",
        [
            ("book", {"isbn": "978-0517543054"}, []),
            ("podcast", {}, ["host"]),
            ("retreatCenter", {"location": "Barre, MA"}, []),
            ("retreatCenter", {}, ["location", "link"]),
            ("app", {}, ["link"]),
            ("practice", {}, []),
        ],
    )
    def test_missing_required_fields(self, kind, detail, missing):
        resource = prepare({"kind": kind, "title": "T", "description": "d", "detail": detail}).resource
        assert missing_required_fields(resource) == missing


class TestCheckWritable:
    def test_check_writable(self):
        check_writable(raw())
        with pytest.raises(InvariantViolationError) as exc_info:
            check_writable(raw(slug="Bad Slug", creator=["X"]))
        assert {v.code for v in exc_info.value.violations} == {
            ViolationCode.INVALID_SLUG,
            ViolationCode.CREATOR_MISMATCH,
        }
