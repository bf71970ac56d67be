"""
Date-Range Resolver.

Derives an ActivePeriod from the free-text date hints stored on some kinds:

    "2015"            -> start 2015-01-01, ongoing
    "2010 - 2020"     -> start 2010-01-01, end 2020-12-31, not ongoing
    "2015 - Present"  -> start 2015-01-01, ongoing
    anything else     -> ongoing, no start

No start date is ever invented for a hint that does not state one.
"""

import re
from datetime import date
from typing import Any

from loguru import logger

from ..models.core import ActivePeriod

# Hyphen, en dash or em dash between the years
DATE_HINT = re.compile(
    r"^\s*(?P<start>\d{4})\s*(?:[-–—]\s*(?P<end>\d{4}|present)\s*)?$",
    re.IGNORECASE,
)

UNKNOWN_PERIOD = ActivePeriod(start=None, end=None, is_ongoing=True)


def _hint_text(date_hint: Any) -> str | None:
    if isinstance(date_hint, bool):
        return None
    if isinstance(date_hint, int):
        return f"{date_hint:04d}" if 1 <= date_hint <= 9999 else None
    if isinstance(date_hint, str):
        return date_hint
    return None


def resolve(kind: Any, date_hint: Any) -> ActivePeriod:
    """
    Parse a date hint into an ActivePeriod.

    Total: never raises; unparseable input yields an ongoing period with no
    start.

    Args:
        kind: Resource kind the hint belongs to (used for logging only)
        date_hint: Hint string ("2015 - Present") or a year as int
    """
    text = _hint_text(date_hint)
    match = DATE_HINT.match(text) if text is not None else None
    if not match:
        if date_hint not in (None, ""):
            logger.debug(f"Unparseable {getattr(kind, 'value', kind)} date hint: {date_hint!r}")
        return UNKNOWN_PERIOD

    try:
        start = date(int(match["start"]), 1, 1)
        end_text = match["end"]
        if end_text is None:
            return ActivePeriod(start=start, end=None, is_ongoing=True)
        if end_text.lower() == "present":
            return ActivePeriod(start=start, end=None, is_ongoing=True)
        end = date(int(end_text), 12, 31)
        if end < start:
            logger.debug(f"Date hint ends before it starts: {date_hint!r}")
            return UNKNOWN_PERIOD
        return ActivePeriod(start=start, end=end, is_ongoing=False)
    except ValueError:
        return UNKNOWN_PERIOD


def format_hint(period: ActivePeriod, hint_format: str = "range") -> Any:
    """
    Render a period back into the hint form stored on the detail payload.

    Used when a period was authored without a hint (legacy dateRange data).
    Returns None when the period has no start.

    Args:
        period: Period to render
        hint_format: "year" for integer year hints, "range" for text hints
    """
    if period.start is None:
        return None
    if hint_format == "year":
        return period.start.year
    if period.end is not None:
        return f"{period.start.year} - {period.end.year}"
    if period.is_ongoing:
        return f"{period.start.year} - Present"
    return str(period.start.year)
