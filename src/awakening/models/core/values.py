"""
Value types embedded in resources.

- Link: canonical {url, label} entry
- ActivePeriod: derived start/end/ongoing window
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ...utils.urls import is_absolute_url


class Link(BaseModel):
    """Canonical link: an absolute http(s) URL with a short label."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Absolute http(s) URL")
    label: str = Field(..., min_length=1, description="Short human-readable label")

    @field_validator("url")
    @classmethod
    def _absolute(cls, value: str) -> str:
        value = value.strip()
        if not is_absolute_url(value):
            raise ValueError(f"Not an absolute URL: {value!r}")
        return value


class ActivePeriod(BaseModel):
    """
    Derived activity window of a resource.

    start is None when no start date was ever stated.
    """

    model_config = ConfigDict(frozen=True)

    start: Optional[date] = Field(default=None, description="First day of activity")
    end: Optional[date] = Field(default=None, description="Last day of activity")
    is_ongoing: bool = Field(default=True, description="Open-ended or single-year period")

    @model_validator(mode="after")
    def _ordered(self) -> "ActivePeriod":
        if self.start and self.end and self.end < self.start:
            raise ValueError("ActivePeriod end precedes start")
        return self
