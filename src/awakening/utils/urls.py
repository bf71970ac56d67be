"""URL helpers for link canonicalization."""

import ipaddress
import re
from urllib.parse import urlsplit

ALLOWED_SCHEMES = {"http", "https"}

# One DNS label: letters or digits, inner hyphens allowed (IDN letters included)
HOST_LABEL = re.compile(r"^[^\W_](?:[\w-]*[^\W_])?$")

# Host suffix -> display label. First match wins, so more specific hosts go first.
KNOWN_HOST_LABELS: tuple[tuple[str, str], ...] = (
    ("youtube.com", "YouTube"),
    ("youtu.be", "YouTube"),
    ("vimeo.com", "Vimeo"),
    ("podcasts.apple.com", "Apple Podcasts"),
    ("apps.apple.com", "App Store"),
    ("itunes.apple.com", "Apple Podcasts"),
    ("play.google.com", "Google Play"),
    ("spotify.com", "Spotify"),
    ("soundcloud.com", "SoundCloud"),
    ("amazon.com", "Amazon"),
    ("amazon.co.uk", "Amazon"),
    ("amazon.ca", "Amazon"),
    ("amzn.to", "Amazon"),
    ("audible.com", "Audible"),
    ("goodreads.com", "Goodreads"),
    ("barnesandnoble.com", "Barnes & Noble"),
    ("bookshop.org", "Bookshop"),
    ("substack.com", "Substack"),
    ("medium.com", "Medium"),
    ("patreon.com", "Patreon"),
    ("instagram.com", "Instagram"),
    ("facebook.com", "Facebook"),
)

FALLBACK_LABEL = "Website"


def _valid_host(host: str) -> bool:
    if ":" in host:
        try:
            ipaddress.IPv6Address(host)
        except ValueError:
            return False
        return True
    labels = host[:-1].split(".") if host.endswith(".") else host.split(".")
    return all(HOST_LABEL.match(label) for label in labels)


def _hostname(url: str) -> str | None:
    try:
        parts = urlsplit(url.strip())
        host = parts.hostname
        # Raises ValueError on a non-numeric or out-of-range port
        parts.port
    except ValueError:
        return None
    if parts.scheme.lower() not in ALLOWED_SCHEMES or not host or not _valid_host(host):
        return None
    return host.lower()


def is_absolute_url(url: str) -> bool:
    """True when url is an http(s) URL with a host."""
    return isinstance(url, str) and _hostname(url) is not None


def url_key(url: str) -> str:
    """
    Case-insensitive comparison key for a URL.

    Lowercases the whole URL and drops a trailing slash on the path so
    "HTTPS://Example.com/" and "https://example.com" compare equal.
    """
    parts = urlsplit(url.strip())
    path = parts.path.rstrip("/")
    key = f"{parts.scheme}://{parts.netloc}{path}"
    if parts.query:
        key += f"?{parts.query}"
    if parts.fragment:
        key += f"#{parts.fragment}"
    return key.lower()


def infer_label(url: str) -> str:
    """
    Derive a short display label from a URL host.

    Known hosts get a friendly name (youtube.com -> "YouTube"); others fall
    back to the bare host without "www."; unparseable URLs get "Website".
    """
    host = _hostname(url) if isinstance(url, str) else None
    if host is None:
        return FALLBACK_LABEL

    for suffix, label in KNOWN_HOST_LABELS:
        if host == suffix or host.endswith(f".{suffix}"):
            return label

    return host[4:] if host.startswith("www.") else host
