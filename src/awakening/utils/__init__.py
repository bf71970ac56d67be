"""Utility helpers."""

from .text import clean_names, clean_tags, coerce_names, is_blank, slugify, split_names
from .urls import infer_label, is_absolute_url, url_key

__all__ = [
    "clean_names",
    "clean_tags",
    "coerce_names",
    "infer_label",
    "is_absolute_url",
    "is_blank",
    "slugify",
    "split_names",
    "url_key",
]
