"""
Normalization pipeline - the single path every write goes through.

    parse_resource(data)  raw mapping -> typed Resource (raw links canonicalized)
    normalize(resource)   typed Resource -> Resource with all derived fields recomputed
    prepare(data)         parse_resource + normalize

normalize() runs, in order:
1. legacy single-link fields folded into the links list, links canonicalized
2. creator/name synchronization
3. active period derived from the kind's date hint (dropped for kinds without one)
4. legacy processed/skipped flags mirrored from status
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Mapping

from loguru import logger

from ..errors import MalformedLinkError
from ..models.entities import Resource, ResourceStatus
from ..registry import describe
from ..utils.text import is_blank
from .creators import sync
from .dates import format_hint, resolve
from .links import canonicalize


@dataclass
class NormalizationResult:
    """Normalized resource plus non-fatal warnings (dropped links)."""

    resource: Resource
    warnings: list[MalformedLinkError] = field(default_factory=list)


def parse_resource(data: Mapping[str, Any]) -> NormalizationResult:
    """
    Build a typed Resource from a raw mapping.

    Raw link entries (strings, label-less objects, character arrays) are
    canonicalized before model validation so that dropped entries are
    reported instead of failing validation.

    Raises:
        UnknownKindError: data["kind"] is not a registered kind
        pydantic.ValidationError: shape errors (missing title, bad types, ...)
    """
    spec = describe(data.get("kind"))
    payload = copy.deepcopy(dict(data))
    payload["kind"] = spec.kind

    detail = payload.get("detail")
    if detail is None:
        detail = {}
    elif not isinstance(detail, Mapping):
        detail = detail.model_dump()
    detail = dict(detail)

    warnings: list[MalformedLinkError] = []
    detail[spec.link_field] = canonicalize(detail.get(spec.link_field), warnings)
    payload["detail"] = detail

    return NormalizationResult(resource=Resource.model_validate(payload), warnings=warnings)


def _links(resource: Resource, warnings: list[MalformedLinkError]) -> Resource:
    spec = describe(resource.kind)
    raw_links: list[Any] = list(getattr(resource.detail, spec.link_field))
    updates: dict[str, Any] = {}

    if spec.legacy_link_field:
        legacy = getattr(resource.detail, spec.legacy_link_field)
        if not is_blank(legacy):
            logger.debug(f"Folding legacy {spec.detail_key}.{spec.legacy_link_field} into links")
            raw_links.append({"url": legacy, "label": spec.legacy_link_label})
        updates[spec.legacy_link_field] = None

    updates[spec.link_field] = canonicalize(raw_links, warnings)
    detail = resource.detail.model_copy(update=updates, deep=True)
    return resource.model_copy(update={"detail": detail})


def _active_period(resource: Resource) -> Resource:
    spec = describe(resource.kind)
    if not spec.date_hint_field:
        if resource.active_period is None:
            return resource
        # No hint to derive from: a period on these kinds is never kept
        logger.debug(f"Dropping active period on {spec.kind.value}, which has no date hint")
        return resource.model_copy(update={"active_period": None})

    hint = getattr(resource.detail, spec.date_hint_field)
    detail = resource.detail
    if is_blank(hint):
        if resource.active_period is None or resource.active_period.start is None:
            return resource
        # Period authored without a hint: write the hint back so both agree
        hint = format_hint(resource.active_period, spec.date_hint_format)
        detail = detail.model_copy(update={spec.date_hint_field: hint}, deep=True)

    period = resolve(resource.kind, hint)
    return resource.model_copy(update={"detail": detail, "active_period": period})


def _status_flags(resource: Resource) -> Resource:
    return resource.model_copy(
        update={
            "processed": resource.status is ResourceStatus.PROCESSED,
            "skipped": resource.status is ResourceStatus.SKIPPED,
        }
    )


def normalize(resource: Resource) -> NormalizationResult:
    """
    Recompute every derived field of a resource.

    Pure and idempotent; returns a new Resource.
    """
    warnings: list[MalformedLinkError] = []
    normalized = _links(resource, warnings)
    normalized = sync(normalized)
    normalized = _active_period(normalized)
    normalized = _status_flags(normalized)
    return NormalizationResult(resource=normalized, warnings=warnings)


def prepare(data: Mapping[str, Any]) -> NormalizationResult:
    """Parse a raw mapping and normalize it."""
    parsed = parse_resource(data)
    normalized = normalize(parsed.resource)
    return NormalizationResult(
        resource=normalized.resource,
        warnings=parsed.warnings + normalized.warnings,
    )
