"""
Pytest configuration and fixtures for awakening tests.

Service tests run against the in-memory store; nothing here needs a database.
"""

import json
from pathlib import Path

import pytest

from awakening.services.processing import ProcessingService
from awakening.services.repositories import InMemoryResourceStore
from awakening.services.resources import ResourceService


@pytest.fixture
def tests_data_dir() -> Path:
    """Path to tests/data directory."""
    return Path(__file__).parent / "data"


@pytest.fixture
def legacy_export(tests_data_dir: Path) -> list[dict]:
    """Load the legacy export sample (Mongo-era documents)."""
    with open(tests_data_dir / "legacy_export.json") as f:
        return json.load(f)


@pytest.fixture
def store() -> InMemoryResourceStore:
    return InMemoryResourceStore()


@pytest.fixture
def resource_service(store: InMemoryResourceStore) -> ResourceService:
    return ResourceService(store, max_slug_attempts=5)


@pytest.fixture
def processing_service(store: InMemoryResourceStore, resource_service: ResourceService) -> ProcessingService:
    return ProcessingService(store, resource_service)


@pytest.fixture
def book_data() -> dict:
    """A book with no link and no ISBN (incomplete)."""
    return {
        "kind": "book",
        "title": "Be Here Now",
        "description": "A classic on spiritual practice.",
        "creator": ["Ram Dass"],
        "detail": {"yearPublished": 1971, "publisher": "Lama Foundation"},
        "tags": ["Classic", "classic", " Bhakti "],
    }


@pytest.fixture
def podcast_data() -> dict:
    return {
        "kind": "podcast",
        "title": "Here and Now Dharma",
        "description": "Weekly dharma talks.",
        "detail": {
            "hosts": "Ann Lee & Bo Chen",
            "datesActive": "2015 - Present",
            "links": [
                "https://podcasts.apple.com/podcast/here-and-now",
                {"url": "https://podcasts.apple.com/podcast/here-and-now/", "label": "dup"},
                "not a url",
            ],
        },
    }
