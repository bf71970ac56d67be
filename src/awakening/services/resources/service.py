"""
ResourceService - the write pipeline for directory resources.

Every write takes the same path:

    raw data ─> parse ─> normalize ─> structural gate ─> store (CAS on version)

Create:
- status is always pending
- a supplied slug is used as-is and must be free (SlugConflictError otherwise)
- with no slug, one is derived from the title: foo, foo-1, foo-2, ... The
  store's unique constraint decides; on SlugConflictError the next suffix is
  tried, up to settings.processing.max_slug_attempts

Update:
- id, kind and slug are immutable (ImmutableFieldError)
- status only changes through ProcessingService (InvalidTransitionError)
- the whole normalized document is written with compare-and-set on version
- editing only the detail creator field (author, hosts, ...) is an edit of
  creator; editing only active_period clears the date hint it derives from
- a processed resource may not become incomplete (IncompleteResourceError)
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from loguru import logger
from pydantic import BaseModel

from ...errors import (
    ImmutableFieldError,
    IncompleteResourceError,
    InvalidTransitionError,
    MalformedLinkError,
    ResourceNotFoundError,
    SlugCollisionExhaustedError,
    SlugConflictError,
    UnknownKindError,
)
from ...models.entities import DetailBase, Resource, ResourceKind, ResourceStatus
from ...normalization import NormalizationResult, prepare, slug_base, slug_candidates
from ...registry import describe
from ...utils.text import clean_names, coerce_names
from ...validation import check_writable, missing_required_fields
from ..repositories import ResourceStore
from .enrichment import Enricher

# Owned by the store or derived from status
_STORE_FIELDS = ("version", "created_at", "updated_at")
_DERIVED_FLAGS = ("processed", "skipped")


@dataclass
class WriteResult:
    """Persisted resource plus dropped-link warnings from normalization."""

    resource: Resource
    warnings: list[MalformedLinkError] = field(default_factory=list)


def _detail_field_name(model: type[DetailBase], key: str) -> str:
    """Map a camelCase wire key to the model field name."""
    if key in model.model_fields:
        return key
    for name, info in model.model_fields.items():
        if info.alias == key:
            return name
    return key


def build_update(current: Resource, changes: Mapping[str, Any]) -> dict[str, Any]:
    """
    Merge changes into the current resource as a raw mapping.

    Top-level keys replace; detail keys (snake_case or camelCase) are merged
    into the current detail payload.
    """
    spec = describe(current.kind)
    merged = current.model_dump()

    raw_detail = changes.get("detail") or {}
    if isinstance(raw_detail, BaseModel):
        raw_detail = raw_detail.model_dump(exclude_unset=True)
    detail_changes = {
        _detail_field_name(spec.detail_model, key): value for key, value in raw_detail.items()
    }
    detail_changes.pop("kind", None)

    for key, value in changes.items():
        if key != "detail":
            merged[key] = value
    merged["detail"] = {**merged["detail"], **detail_changes}

    if spec.creator_field and "creator" not in changes and spec.creator_field in detail_changes:
        edited = coerce_names(detail_changes[spec.creator_field])
        if edited != clean_names(current.creator):
            logger.debug(f"Promoting edited {spec.detail_key}.{spec.creator_field} to creator")
            merged["creator"] = edited

    if (
        spec.date_hint_field
        and "active_period" in changes
        and spec.date_hint_field not in detail_changes
    ):
        merged["detail"][spec.date_hint_field] = None

    return merged


def _check_immutable(current: Resource, changes: Mapping[str, Any]) -> None:
    if "id" in changes and changes["id"] != current.id:
        raise ImmutableFieldError("id")
    if "kind" in changes:
        try:
            kind = ResourceKind(changes["kind"])
        except ValueError:
            raise UnknownKindError(changes["kind"]) from None
        if kind is not current.kind:
            raise ImmutableFieldError("kind")
    if "slug" in changes and changes["slug"] != current.slug:
        raise ImmutableFieldError("slug")


class ResourceService:
    """Create, update, delete and enrich resources through the write pipeline."""

    def __init__(self, store: ResourceStore, max_slug_attempts: Optional[int] = None):
        from ...settings import settings

        self.store = store
        self.max_slug_attempts = max_slug_attempts or settings.processing.max_slug_attempts

    async def get(self, resource_id: str) -> Resource:
        """
        Raises:
            ResourceNotFoundError: no resource with this id
        """
        resource = await self.store.get(resource_id)
        if resource is None:
            raise ResourceNotFoundError(resource_id)
        return resource

    async def get_by_slug(self, slug: str) -> Resource:
        resource = await self.store.find_by_slug(slug)
        if resource is None:
            raise ResourceNotFoundError(slug)
        return resource

    async def create(self, data: Mapping[str, Any]) -> WriteResult:
        """
        Create a resource from a raw mapping.

        Args:
            data: Raw resource fields; detail may use snake_case or camelCase keys

        Returns:
            WriteResult with the stored resource (id, slug and version 1 assigned)

        Raises:
            UnknownKindError: kind not registered
            pydantic.ValidationError: malformed shape
            InvariantViolationError: structural violations after normalization
            SlugConflictError: a supplied slug is already taken
            SlugCollisionExhaustedError: no free derived slug
        """
        payload = dict(data)
        requested = payload.get("status")
        if requested not in (None, ResourceStatus.PENDING, ResourceStatus.PENDING.value):
            logger.warning(f"Ignoring status {requested!r} on create, new resources start pending")
        payload["status"] = ResourceStatus.PENDING
        for flag in _DERIVED_FLAGS + _STORE_FIELDS:
            payload.pop(flag, None)

        result = prepare(payload)
        resource = result.resource

        supplied = resource.slug or None
        if supplied is not None:
            base = supplied
            candidates = iter([supplied])
        else:
            base = slug_base(resource.title)
            candidates = slug_candidates(base, self.max_slug_attempts)

        attempts = 0
        for slug in candidates:
            candidate = resource.model_copy(update={"slug": slug})
            if attempts == 0:
                check_writable(candidate)
            attempts += 1
            try:
                stored = await self.store.create(candidate)
            except SlugConflictError:
                if supplied is not None:
                    raise
                logger.debug(f"Slug {slug} taken, trying next suffix")
                continue
            logger.info(f"Created {stored.kind.value} resource {stored.id} ({stored.slug})")
            return WriteResult(resource=stored, warnings=result.warnings)

        raise SlugCollisionExhaustedError(base, attempts)

    def prepare_update(self, current: Resource, changes: Mapping[str, Any]) -> NormalizationResult:
        """
        Apply changes to current and normalize, without persisting.

        Raises:
            ImmutableFieldError: id, kind or slug changed
            InvalidTransitionError: status changed outside the processing workflow
        """
        changes = dict(changes)
        _check_immutable(current, changes)

        if "status" in changes:
            target = ResourceStatus(changes.pop("status"))
            if target is not current.status:
                raise InvalidTransitionError(current.status.value, target.value)
        for key in _DERIVED_FLAGS + _STORE_FIELDS:
            changes.pop(key, None)

        return prepare(build_update(current, changes))

    async def update(
        self,
        resource_id: str,
        changes: Mapping[str, Any],
        expected_version: Optional[int] = None,
    ) -> WriteResult:
        """
        Update a resource.

        Args:
            resource_id: Resource to update
            changes: Field changes; detail changes are merged into the current detail
            expected_version: Version the caller last read (defaults to the current one)

        Raises:
            ResourceNotFoundError, ImmutableFieldError, InvalidTransitionError,
            IncompleteResourceError, InvariantViolationError, VersionConflictError
        """
        current = await self.get(resource_id)
        result = self.prepare_update(current, changes)
        resource = result.resource

        if current.status is ResourceStatus.PROCESSED:
            missing = missing_required_fields(resource)
            if missing:
                raise IncompleteResourceError(resource_id, missing)

        check_writable(resource)
        version = current.version if expected_version is None else expected_version
        stored = await self.store.update(resource_id, resource, version)
        logger.info(f"Updated resource {resource_id} to version {stored.version}")
        return WriteResult(resource=stored, warnings=result.warnings)

    async def delete(self, resource_id: str) -> None:
        """
        Raises:
            ResourceNotFoundError: nothing was deleted
        """
        if not await self.store.delete(resource_id):
            raise ResourceNotFoundError(resource_id)
        logger.info(f"Deleted resource {resource_id}")

    async def enrich(
        self,
        resource_id: str,
        enricher: Enricher,
        hints: Optional[dict[str, Any]] = None,
    ) -> WriteResult:
        """
        Ask an enrichment collaborator for a patch and apply it as an update.

        The patch is applied against the version the enricher saw, so a
        concurrent edit surfaces as VersionConflictError.
        """
        current = await self.get(resource_id)
        patch = await enricher.enrich(current, dict(hints or {}))
        changes = patch.to_changes(current)
        if not changes:
            logger.debug(f"Nothing to apply from enrichment of {resource_id}")
            return WriteResult(resource=current)
        return await self.update(resource_id, changes, expected_version=current.version)
