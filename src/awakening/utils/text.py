"""Text helpers shared by models and normalizers."""

import re
import unicodedata
from typing import Any, Iterable

# Separators for creator names authored as one string: "A, B & C and D"
NAME_SEPARATOR = re.compile(r"\s*[,&]\s*|\s+and\s+", re.IGNORECASE)


def split_names(value: str) -> list[str]:
    """
    Split a single creator string into names.

    Splits on ",", "&" and the word "and" (case-insensitive), trims
    whitespace and discards empty segments.

    Example:
        >>> split_names("Ram Dass and Stephen Levine & Ondrea, ")
        ['Ram Dass', 'Stephen Levine', 'Ondrea']
    """
    return [part.strip() for part in NAME_SEPARATOR.split(value) if part and part.strip()]


def clean_names(values: Iterable[str]) -> list[str]:
    """Trim names, drop empties and exact duplicates, keep first-seen order."""
    cleaned: list[str] = []
    for value in values:
        name = value.strip() if isinstance(value, str) else ""
        if name and name not in cleaned:
            cleaned.append(name)
    return cleaned


def coerce_names(value: Any) -> list[str]:
    """Coerce a creator-like value (None, string or list) into a clean list."""
    if value is None:
        return []
    if isinstance(value, str):
        return clean_names(split_names(value))
    if isinstance(value, (list, tuple)):
        return clean_names(str(item) for item in value if item is not None)
    raise ValueError(f"Expected a name or list of names, got {type(value).__name__}")


def clean_tags(values: Iterable[str]) -> list[str]:
    """Lowercase and trim tags, dropping empties and duplicates in insertion order."""
    tags: list[str] = []
    for value in values:
        tag = str(value).strip().lower()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def slugify(text: str) -> str:
    """
    Create a URL-safe slug from text.

    Accents are folded to ASCII; anything outside [a-z0-9] becomes a single
    hyphen separator.

    Example:
        >>> slugify("  Be Here Now: Remember! ")
        'be-here-now-remember'
    """
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = text.lower()
    text = re.sub(r"[^a-z0-9\s_-]", "", text)
    text = re.sub(r"[\s_-]+", "-", text)
    return text.strip("-")


def is_blank(value: Any) -> bool:
    """True for None, whitespace-only strings and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False
