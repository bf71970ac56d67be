"""
Directory Entity Models

- Resource: the polymorphic content entity
- Detail payloads: one model per resource kind
- ResourceKind / ResourceStatus: closed enumerations
"""

from .details import (
    AppDetails,
    BlogDetails,
    BookDetails,
    DetailBase,
    PodcastDetails,
    PracticeDetails,
    ResourceDetail,
    RetreatCenterDetails,
    VideoChannelDetails,
    WebsiteDetails,
)
from .kinds import ResourceKind, ResourceStatus
from .resource import Resource

__all__ = [
    "AppDetails",
    "BlogDetails",
    "BookDetails",
    "DetailBase",
    "PodcastDetails",
    "PracticeDetails",
    "Resource",
    "ResourceDetail",
    "ResourceKind",
    "ResourceStatus",
    "RetreatCenterDetails",
    "VideoChannelDetails",
    "WebsiteDetails",
]
