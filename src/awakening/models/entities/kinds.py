"""Closed enumerations for resources."""

from enum import Enum


class ResourceKind(str, Enum):
    """Discriminator of a resource's variant shape."""

    BOOK = "book"
    BLOG = "blog"
    VIDEO_CHANNEL = "videoChannel"
    PODCAST = "podcast"
    PRACTICE = "practice"
    RETREAT_CENTER = "retreatCenter"
    WEBSITE = "website"
    APP = "app"


class ResourceStatus(str, Enum):
    """Moderation lifecycle of a resource."""

    PENDING = "pending"
    PROCESSED = "processed"
    SKIPPED = "skipped"
