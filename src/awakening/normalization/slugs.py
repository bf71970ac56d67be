"""
Slug derivation and collision disambiguation.

Slugs are derived from the title once, at creation, and never change. On
collision a numeric suffix is appended: foo, foo-1, foo-2, ...
"""

import re
from typing import Iterator

from ..errors import SlugCollisionExhaustedError
from ..utils.text import slugify

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def is_valid_slug(slug: str | None) -> bool:
    """True when slug is lowercase alphanumeric words joined by single hyphens."""
    return bool(slug) and SLUG_PATTERN.match(slug) is not None


def slug_base(title: str) -> str:
    """Base slug for a title."""
    return slugify(title)


def slug_candidates(base: str, max_attempts: int) -> Iterator[str]:
    """
    Yield base, base-1, base-2, ... up to max_attempts candidates.

    Raises:
        SlugCollisionExhaustedError: base is empty (nothing to derive from)
    """
    if not base:
        raise SlugCollisionExhaustedError(base, 0)
    yield base
    for suffix in range(1, max_attempts):
        yield f"{base}-{suffix}"
