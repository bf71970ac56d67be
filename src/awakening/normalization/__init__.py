"""
Resource normalizers.

- links: canonical {url, label} lists
- creators: creator/name mirroring
- dates: active period from date hints
- slugs: slug derivation and disambiguation
- pipeline: the ordered normalize pass used by every write path
"""

from .creators import sync
from .dates import format_hint, resolve
from .links import canonicalize
from .pipeline import NormalizationResult, normalize, parse_resource, prepare
from .slugs import SLUG_PATTERN, is_valid_slug, slug_base, slug_candidates

__all__ = [
    "NormalizationResult",
    "SLUG_PATTERN",
    "canonicalize",
    "format_hint",
    "is_valid_slug",
    "normalize",
    "parse_resource",
    "prepare",
    "resolve",
    "slug_base",
    "slug_candidates",
    "sync",
]
