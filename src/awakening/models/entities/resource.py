"""
Resource - Central directory entity.

A Resource is one of eight content kinds (book, blog, videoChannel, podcast,
practice, retreatCenter, website, app) sharing a common envelope. The
kind-specific payload lives in `detail`, a discriminated union keyed by kind.

Canonical vs derived fields:
- title is canonical; the detail "name" field (podcast_name, app_name, ...) mirrors it
- creator is canonical; the detail creator-like field (author, hosts, ...) mirrors it
- the detail date hint (dates_active, year_published) derives active_period
- status is canonical; the legacy processed/skipped flags mirror it

The model itself only enforces shape. Mirroring is done by the normalizers in
awakening.normalization, and consistency is checked by awakening.validation.
"""

from typing import Any, Optional

from pydantic import Field, field_validator, model_validator

from ...utils.text import clean_tags
from ..core import ActivePeriod, CoreModel
from .details import CreatorList, ResourceDetail
from .kinds import ResourceKind, ResourceStatus


class Resource(CoreModel):
    """
    Directory resource.

    kind and slug are fixed once the resource is stored; changing kind is a
    delete plus recreate.
    """

    kind: ResourceKind = Field(..., description="Closed-enumeration variant discriminator")
    title: str = Field(..., description="Display name, canonical source for detail name fields")
    slug: Optional[str] = Field(
        default=None,
        description="Unique URL-safe key, derived from title at creation if not supplied",
    )
    description: str = Field(..., description="Resource description")
    creator: CreatorList = Field(
        default_factory=list,
        description="Who made or leads this (author, host, developer, originator)",
    )
    detail: ResourceDetail = Field(..., description="Kind-specific payload")
    active_period: Optional[ActivePeriod] = Field(
        default=None, description="Derived activity window"
    )
    teachers: list[str] = Field(default_factory=list, description="Related teacher ids")
    traditions: list[str] = Field(default_factory=list, description="Related tradition ids")
    tags: list[str] = Field(default_factory=list, description="Lowercase tags, insertion ordered")

    status: ResourceStatus = Field(
        default=ResourceStatus.PENDING, description="Moderation lifecycle state"
    )
    processed: bool = Field(
        default=False, description="Legacy mirror of status == processed"
    )
    skipped: bool = Field(default=False, description="Legacy mirror of status == skipped")
    processing_notes: Optional[str] = Field(
        default=None, description="Operator notes, typically why a resource was skipped"
    )

    image_url: Optional[str] = Field(default=None, description="Hosted cover/logo image")
    featured: bool = Field(default=False)
    view_count: int = Field(default=0, ge=0)
    average_rating: float = Field(default=0.0, ge=0.0, le=5.0)

    @model_validator(mode="before")
    @classmethod
    def _detail_kind(cls, data: Any) -> Any:
        """Tag the detail payload with the resource kind so the union resolves."""
        if not isinstance(data, dict) or "kind" not in data:
            return data
        kind = data["kind"]
        kind_value = kind.value if isinstance(kind, ResourceKind) else kind
        detail = data.get("detail")
        if detail is None:
            data = {**data, "detail": {"kind": kind_value}}
        elif isinstance(detail, dict) and "kind" not in detail:
            data = {**data, "detail": {**detail, "kind": kind_value}}
        return data

    @model_validator(mode="after")
    def _detail_matches_kind(self) -> "Resource":
        if self.detail.kind != self.kind:
            raise ValueError(
                f"Detail payload is for {self.detail.kind.value}, resource kind is {self.kind.value}"
            )
        return self

    @field_validator("title", "description")
    @classmethod
    def _required_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("tags")
    @classmethod
    def _tags(cls, value: list[str]) -> list[str]:
        return clean_tags(value)
