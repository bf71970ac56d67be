"""
Resource Type Registry - the closed set of resource kinds and their shapes.

Every component that needs kind-specific behaviour (which detail field mirrors
the title, which one mirrors creator, where the date hint lives, what makes a
resource complete) asks the registry instead of branching on kind literals.
Adding a kind means adding one KindSpec here plus its detail model.

Usage:
    from awakening.registry import describe

    spec = describe("podcast")
    spec.creator_field        # "hosts"
    spec.name_field           # "podcast_name"
    spec.date_hint_field      # "dates_active"
"""

from dataclasses import dataclass, field
from typing import Any, Iterator, Literal

from loguru import logger

from .errors import UnknownKindError
from .models.entities import (
    AppDetails,
    BlogDetails,
    BookDetails,
    DetailBase,
    PodcastDetails,
    PracticeDetails,
    ResourceKind,
    RetreatCenterDetails,
    VideoChannelDetails,
    WebsiteDetails,
)


@dataclass(frozen=True)
class Requirement:
    """
    Completeness rule: at least one of `fields` must be filled.

    `names` are the user-facing field names reported when the rule fails,
    aligned with `fields` (e.g. fields=("links", "isbn"), names=("link", "isbn")).
    """

    fields: tuple[str, ...]
    names: tuple[str, ...]


@dataclass(frozen=True)
class KindSpec:
    """Shape description of one resource kind."""

    kind: ResourceKind
    detail_model: type[DetailBase]
    detail_key: str  # public/legacy payload key, e.g. "bookDetails"
    creator_field: str | None
    name_field: str | None = None
    link_field: str = "links"
    date_hint_field: str | None = None
    date_hint_format: Literal["year", "range"] = "range"
    legacy_link_field: str | None = None
    legacy_link_label: str = "Website"
    required_detail_fields: tuple[Requirement, ...] = field(default_factory=tuple)
    creator_label: str = "Creator"
    creator_label_plural: str = "Creators"

    @property
    def required_field_names(self) -> list[str]:
        """Flat list of user-facing names across all requirements."""
        return [name for requirement in self.required_detail_fields for name in requirement.names]


LINK = Requirement(fields=("links",), names=("link",))


DEFAULT_KIND_SPECS: tuple[KindSpec, ...] = (
    KindSpec(
        kind=ResourceKind.BOOK,
        detail_model=BookDetails,
        detail_key="bookDetails",
        creator_field="author",
        date_hint_field="year_published",
        date_hint_format="year",
        required_detail_fields=(Requirement(fields=("links", "isbn"), names=("link", "isbn")),),
        creator_label="Author",
        creator_label_plural="Authors",
    ),
    KindSpec(
        kind=ResourceKind.BLOG,
        detail_model=BlogDetails,
        detail_key="blogDetails",
        creator_field="author",
        name_field="name",
        legacy_link_field="link",
        legacy_link_label="Blog",
        required_detail_fields=(LINK,),
        creator_label="Author",
        creator_label_plural="Authors",
    ),
    KindSpec(
        kind=ResourceKind.VIDEO_CHANNEL,
        detail_model=VideoChannelDetails,
        detail_key="videoChannelDetails",
        creator_field="creator",
        name_field="channel_name",
        required_detail_fields=(LINK,),
    ),
    KindSpec(
        kind=ResourceKind.PODCAST,
        detail_model=PodcastDetails,
        detail_key="podcastDetails",
        creator_field="hosts",
        name_field="podcast_name",
        date_hint_field="dates_active",
        required_detail_fields=(Requirement(fields=("hosts",), names=("host",)),),
        creator_label="Host",
        creator_label_plural="Hosts",
    ),
    KindSpec(
        kind=ResourceKind.PRACTICE,
        detail_model=PracticeDetails,
        detail_key="practiceDetails",
        creator_field="originator",
        name_field="name",
        creator_label="Source",
        creator_label_plural="Sources",
    ),
    KindSpec(
        kind=ResourceKind.RETREAT_CENTER,
        detail_model=RetreatCenterDetails,
        detail_key="retreatCenterDetails",
        creator_field="creator",
        name_field="name",
        required_detail_fields=(
            Requirement(fields=("location", "links"), names=("location", "link")),
        ),
        creator_label="Founded by",
        creator_label_plural="Founded by",
    ),
    KindSpec(
        kind=ResourceKind.WEBSITE,
        detail_model=WebsiteDetails,
        detail_key="websiteDetails",
        creator_field="creator",
        name_field="website_name",
        legacy_link_field="link",
        required_detail_fields=(LINK,),
    ),
    KindSpec(
        kind=ResourceKind.APP,
        detail_model=AppDetails,
        detail_key="appDetails",
        creator_field="creator",
        name_field="app_name",
        required_detail_fields=(LINK,),
        creator_label="Developer",
        creator_label_plural="Developers",
    ),
)


class KindRegistry:
    """
    Lookup table from ResourceKind to KindSpec.

    Pure, no I/O. Unknown kinds raise UnknownKindError.
    """

    def __init__(self, specs: tuple[KindSpec, ...] = DEFAULT_KIND_SPECS) -> None:
        self._specs: dict[ResourceKind, KindSpec] = {}
        for spec in specs:
            self.register(spec)

    def register(self, spec: KindSpec) -> KindSpec:
        """Register a kind spec. The kind must already exist in ResourceKind."""
        if spec.kind in self._specs:
            logger.warning(f"Kind {spec.kind.value} already registered, overwriting")
        declared = [
            spec.creator_field,
            spec.name_field,
            spec.link_field,
            spec.date_hint_field,
            spec.legacy_link_field,
        ]
        declared += [f for requirement in spec.required_detail_fields for f in requirement.fields]
        for attr in declared:
            if attr is not None and attr not in spec.detail_model.model_fields:
                raise ValueError(
                    f"{spec.detail_model.__name__} has no field {attr!r} for kind {spec.kind.value}"
                )
        self._specs[spec.kind] = spec
        logger.debug(f"Registered resource kind: {spec.kind.value}")
        return spec

    def describe(self, kind: Any) -> KindSpec:
        """
        Get the spec for a kind.

        Args:
            kind: ResourceKind member or its string value ("videoChannel")

        Raises:
            UnknownKindError: kind is outside the closed enumeration
        """
        try:
            resource_kind = kind if isinstance(kind, ResourceKind) else ResourceKind(kind)
        except ValueError:
            raise UnknownKindError(kind) from None

        spec = self._specs.get(resource_kind)
        if spec is None:
            raise UnknownKindError(kind)
        return spec

    def by_detail_key(self, detail_key: str) -> KindSpec:
        """Get the spec whose public payload key is detail_key ("podcastDetails")."""
        for spec in self._specs.values():
            if spec.detail_key == detail_key:
                return spec
        raise UnknownKindError(detail_key)

    def kinds(self) -> list[ResourceKind]:
        """Registered kinds in declaration order."""
        return list(self._specs)

    def __iter__(self) -> Iterator[KindSpec]:
        return iter(self._specs.values())


# Global registry singleton
_registry = KindRegistry()


def get_kind_registry() -> KindRegistry:
    """Get the global kind registry."""
    return _registry


def describe(kind: Any) -> KindSpec:
    """Shortcut for get_kind_registry().describe(kind)."""
    return _registry.describe(kind)
