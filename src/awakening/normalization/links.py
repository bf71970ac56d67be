"""
Link Canonicalizer.

Turns the link shapes found across ingestion paths into canonical Link
entries:

- bare strings: "https://youtube.com/@channel"
- {url, label} objects, with or without a label
- Link instances (already canonical)
- legacy character arrays: {"0": "h", "1": "t", ...}, written by an old
  serialization bug that stored a URL string as an object of its characters

Entries that do not resolve to an absolute http(s) URL are dropped and
reported as MalformedLinkError warnings. Duplicates (case-insensitive
normalized URL) keep the first-seen entry and label.
"""

from typing import Any, Iterable, Mapping

from loguru import logger

from ..errors import MalformedLinkError
from ..models.core import Link
from ..utils.urls import infer_label, is_absolute_url, url_key


def _from_character_array(entry: Mapping[str, Any]) -> str | None:
    """Rebuild a URL stored as {"0": "h", "1": "t", ...}; None if not that shape."""
    indices = sorted(int(key) for key in entry if isinstance(key, str) and key.isdigit())
    if not indices or indices[0] != 0:
        return None
    chars = []
    for expected, index in enumerate(indices):
        if index != expected:
            break
        value = entry[str(index)]
        if not isinstance(value, str):
            return None
        chars.append(value)
    return "".join(chars)


def _coerce(entry: Any) -> tuple[str, str | None]:
    """
    Extract (url, label) from one raw entry.

    Raises:
        MalformedLinkError: entry has no usable URL
    """
    if isinstance(entry, Link):
        return entry.url, entry.label

    if isinstance(entry, str):
        url, label = entry, None
    elif isinstance(entry, Mapping):
        if "url" in entry:
            url, label = entry.get("url"), entry.get("label")
        else:
            url = _from_character_array(entry)
            label = None
            if url is not None:
                logger.debug(f"Rebuilt character-array link: {url}")
    else:
        raise MalformedLinkError(entry, f"unsupported link type {type(entry).__name__}")

    if not isinstance(url, str) or not url.strip():
        raise MalformedLinkError(entry, "missing URL")

    url = url.strip()
    if not is_absolute_url(url):
        raise MalformedLinkError(entry, "not an absolute http(s) URL", label=infer_label(url))

    if not isinstance(label, str) or not label.strip():
        label = None
    return url, label.strip() if label else None


def canonicalize(
    raw_links: Iterable[Any] | None,
    warnings: list[MalformedLinkError] | None = None,
) -> list[Link]:
    """
    Normalize raw link entries into de-duplicated canonical links.

    Never mutates the input and is idempotent.

    Args:
        raw_links: Any iterable of link-like entries (None is treated as empty)
        warnings: Optional list that receives a MalformedLinkError per dropped entry

    Returns:
        New list of Link objects in first-seen order

    Example:
        >>> canonicalize(["https://youtube.com/x", {"url": "https://youtube.com/x", "label": "dup"}])
        [Link(url='https://youtube.com/x', label='YouTube')]
    """
    if raw_links is None:
        return []
    if isinstance(raw_links, (str, Mapping)):
        raw_links = [raw_links]

    links: list[Link] = []
    seen: set[str] = set()

    for entry in raw_links:
        try:
            url, label = _coerce(entry)
        except MalformedLinkError as e:
            logger.warning(str(e))
            if warnings is not None:
                warnings.append(e)
            continue

        key = url_key(url)
        if key in seen:
            logger.debug(f"Dropping duplicate link {url}")
            continue
        seen.add(key)
        links.append(Link(url=url, label=label or infer_label(url)))

    return links


def is_canonical_entry(entry: Any) -> bool:
    """True when a raw entry is already a {url, label} object with an absolute URL."""
    if isinstance(entry, Link):
        return True
    if not isinstance(entry, Mapping):
        return False
    url, label = entry.get("url"), entry.get("label")
    return (
        isinstance(url, str)
        and is_absolute_url(url)
        and url == url.strip()
        and isinstance(label, str)
        and bool(label.strip())
    )
