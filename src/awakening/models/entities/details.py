"""
Kind-specific detail payloads.

Each resource kind carries one of these models under Resource.detail. The
models only declare shape; which field is the "name", the "creator-like"
field or the date hint is declared once in the type registry.

Field names are snake_case in Python and camelCase on the wire
(bookDetails.yearPublished, podcastDetails.datesActive, ...), matching the
public read API.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...utils.text import coerce_names
from ..core import Link
from .kinds import ResourceKind

# Creator-like lists accept a single authored string ("A & B") and split it
CreatorList = Annotated[list[str], BeforeValidator(coerce_names)]


class DetailBase(BaseModel):
    """Common configuration for detail payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    links: list[Link] = Field(default_factory=list, description="Canonical links")


class BookDetails(DetailBase):
    kind: Literal[ResourceKind.BOOK] = ResourceKind.BOOK
    author: CreatorList = Field(default_factory=list)
    year_published: Optional[int] = Field(default=None, ge=1, le=9999)
    pages: Optional[int] = Field(default=None, ge=0)
    publisher: Optional[str] = None
    isbn: Optional[str] = None


class BlogDetails(DetailBase):
    kind: Literal[ResourceKind.BLOG] = ResourceKind.BLOG
    name: Optional[str] = None
    author: CreatorList = Field(default_factory=list)
    platform: Optional[str] = None
    frequency: Optional[str] = None
    link: Optional[str] = Field(default=None, description="Legacy single link, folded into links")


class VideoChannelDetails(DetailBase):
    kind: Literal[ResourceKind.VIDEO_CHANNEL] = ResourceKind.VIDEO_CHANNEL
    channel_name: Optional[str] = None
    creator: CreatorList = Field(default_factory=list)
    key_topics: list[str] = Field(default_factory=list)


class PodcastDetails(DetailBase):
    kind: Literal[ResourceKind.PODCAST] = ResourceKind.PODCAST
    podcast_name: Optional[str] = None
    hosts: CreatorList = Field(default_factory=list)
    dates_active: Optional[str] = Field(
        default=None, description='Active period hint, e.g. "2015 - Present"'
    )
    episode_count: Optional[int] = Field(default=None, ge=0)
    notable_guests: list[str] = Field(default_factory=list)


class PracticeDetails(DetailBase):
    kind: Literal[ResourceKind.PRACTICE] = ResourceKind.PRACTICE
    name: Optional[str] = None
    originator: CreatorList = Field(default_factory=list)
    duration: Optional[str] = None


class RetreatCenterDetails(DetailBase):
    kind: Literal[ResourceKind.RETREAT_CENTER] = ResourceKind.RETREAT_CENTER
    name: Optional[str] = None
    creator: CreatorList = Field(default_factory=list)
    location: Optional[str] = None
    retreat_types: list[str] = Field(default_factory=list)
    upcoming_dates: list[str] = Field(default_factory=list)


class WebsiteDetails(DetailBase):
    kind: Literal[ResourceKind.WEBSITE] = ResourceKind.WEBSITE
    website_name: Optional[str] = None
    creator: CreatorList = Field(default_factory=list)
    primary_content_types: list[str] = Field(default_factory=list)
    link: Optional[str] = Field(default=None, description="Legacy single link, folded into links")


class AppDetails(DetailBase):
    kind: Literal[ResourceKind.APP] = ResourceKind.APP
    app_name: Optional[str] = None
    creator: CreatorList = Field(default_factory=list)
    platforms: list[str] = Field(default_factory=list)
    teachers: list[str] = Field(default_factory=list, description="Teacher names, not ids")
    features: list[str] = Field(default_factory=list)


ResourceDetail = Annotated[
    Union[
        BookDetails,
        BlogDetails,
        VideoChannelDetails,
        PodcastDetails,
        PracticeDetails,
        RetreatCenterDetails,
        WebsiteDetails,
        AppDetails,
    ],
    Field(discriminator="kind"),
]
