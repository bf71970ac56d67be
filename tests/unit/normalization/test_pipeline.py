"""
Tests for the normalization pipeline (parse + normalize).
"""

from datetime import date

import pytest
from pydantic import ValidationError

from awakening.errors import UnknownKindError
from awakening.models.core import ActivePeriod, Link
from awakening.models.entities import ResourceStatus
from awakening.normalization import normalize, parse_resource, prepare


class TestPrepare:
    def test_prepare_podcast(self, podcast_data):
        result = prepare(podcast_data)
        resource = result.resource

        assert resource.creator == ["Ann Lee", "Bo Chen"]
        assert resource.detail.podcast_name == "Here and Now Dharma"
        assert resource.detail.links == [
            Link(url="https://podcasts.apple.com/podcast/here-and-now", label="Apple Podcasts")
        ]
        assert resource.active_period == ActivePeriod(start=date(2015, 1, 1), end=None, is_ongoing=True)
        assert len(result.warnings) == 1
        assert result.warnings[0].raw == "not a url"

    def test_book_year_published_is_a_date_hint(self, book_data):
        resource = prepare(book_data).resource
        assert resource.active_period.start == date(1971, 1, 1)
        assert resource.tags == ["classic", "bhakti"]

    def test_legacy_link_field_folded(self):
        resource = prepare(
            {
                "kind": "blog",
                "title": "Lion's Roar",
                "description": "Buddhist wisdom for our time.",
                "detail": {"link": "https://www.lionsroar.com", "links": ["https://lionsroar.com/feed"]},
            }
        ).resource
        assert resource.detail.link is None
        assert resource.detail.links == [
            Link(url="https://lionsroar.com/feed", label="lionsroar.com"),
            Link(url="https://www.lionsroar.com", label="Blog"),
        ]

    def test_period_without_hint_writes_hint_back(self):
        resource = prepare(
            {
                "kind": "podcast",
                "title": "Old Show",
                "description": "Archived show.",
                "active_period": {"start": "2001-01-01", "end": "2004-12-31", "is_ongoing": False},
                "detail": {"hosts": ["A"]},
            }
        ).resource
        assert resource.detail.dates_active == "2001 - 2004"
        assert resource.active_period.end == date(2004, 12, 31)

    def test_period_dropped_for_kinds_without_hint(self):
        resource = prepare(
            {
                "kind": "website",
                "title": "Dharma Seed",
                "description": "Talk archive.",
                "active_period": {"start": "1998-01-01", "is_ongoing": True},
            }
        ).resource
        assert resource.active_period is None

    def test_flags_mirror_status(self):
        resource = prepare(
            {
                "kind": "practice",
                "title": "Metta",
                "description": "Loving-kindness practice.",
                "status": "skipped",
                "processed": True,
            }
        ).resource
        assert resource.status is ResourceStatus.SKIPPED
        assert resource.skipped is True
        assert resource.processed is False

    def test_normalize_idempotent(self, podcast_data):
        once = prepare(podcast_data).resource
        assert normalize(once).resource == once


class TestRejectedInput:
    """Inputs that never become a Resource."""

    def test_unknown_kind(self):
        with pytest.raises(UnknownKindError):
            parse_resource({"kind": "movie", "title": "x", "description": "y"})

    def test_blank_title_rejected(self):
        with pytest.raises(ValidationError):
            parse_resource({"kind": "app", "title": "   ", "description": "y"})

    def test_detail_for_other_kind_rejected(self):
        with pytest.raises(ValidationError):
            parse_resource(
                {"kind": "app", "title": "x", "description": "y", "detail": {"kind": "book"}}
            )
