"""
Public and legacy document shapes.

to_public_document(resource) produces the read shape existing clients
consume: camelCase keys, the detail payload flattened under its kind-named
key (bookDetails, podcastDetails, ...), `type` for the kind and a
`dateRange` of {start, end, active}.

from_legacy_document(doc) reads that shape back, including what older
exports contain:
- Mongo `_id` (plain or {"$oid": ...}) and {"$date": ...} timestamps
- status "posted", and processed/skipped flags without a status
- a top-level `url` next to the detail links
- creators as a single string ("A & B")
- links stored as character arrays
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping, Optional

from pydantic.alias_generators import to_camel

from .errors import UnknownKindError
from .models.entities import Resource, ResourceStatus
from .normalization.links import is_canonical_entry
from .registry import KindSpec, describe, get_kind_registry
from .validation import Violation, ViolationCode

# Fields with dedicated handling in both directions
_SPECIAL_FIELDS = {"id", "kind", "detail", "active_period", "status", "processed", "skipped"}

LEGACY_STATUS_ALIASES = {"posted": ResourceStatus.PROCESSED}


def _iso(value: Optional[date | datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def creator_label(resource: Resource) -> str:
    """Display label for the creator list ("Author", "Hosts", "Founded by", ...)."""
    spec = describe(resource.kind)
    return spec.creator_label_plural if len(resource.creator) > 1 else spec.creator_label


def to_public_document(resource: Resource) -> dict[str, Any]:
    """Render a resource in the public read shape."""
    spec = describe(resource.kind)
    period = resource.active_period

    document: dict[str, Any] = {
        "id": resource.id,
        "type": resource.kind.value,
        "title": resource.title,
        "slug": resource.slug,
        "description": resource.description,
        "creator": list(resource.creator),
        "creatorLabel": creator_label(resource),
        spec.detail_key: resource.detail.model_dump(mode="json", by_alias=True, exclude={"kind"}),
        "teachers": list(resource.teachers),
        "traditions": list(resource.traditions),
        "tags": list(resource.tags),
        "status": resource.status.value,
        "processed": resource.processed,
        "skipped": resource.skipped,
        "processingNotes": resource.processing_notes,
        "imageUrl": resource.image_url,
        "featured": resource.featured,
        "viewCount": resource.view_count,
        "averageRating": resource.average_rating,
        "dateRange": None,
        "version": resource.version,
        "createdAt": _iso(resource.created_at),
        "updatedAt": _iso(resource.updated_at),
        "metadata": dict(resource.metadata),
    }
    if period is not None:
        document["dateRange"] = {
            "start": _iso(period.start),
            "end": _iso(period.end),
            "active": period.is_ongoing,
        }
    return document


@dataclass
class LegacyParse:
    """Raw resource data recovered from a legacy document, plus shape issues found."""

    data: dict[str, Any]
    violations: list[Violation] = field(default_factory=list)


def plain_id(value: Any) -> Optional[str]:
    if isinstance(value, Mapping):
        value = value.get("$oid")
    return str(value) if value is not None else None


def _plain_date(value: Any) -> Any:
    if isinstance(value, Mapping):
        value = value.get("$date")
    return value


def _date_only(value: Any) -> Any:
    value = _plain_date(value)
    # "2015-01-01T00:00:00.000Z" -> "2015-01-01"
    if isinstance(value, str) and len(value) > 10 and value[10] == "T":
        return value[:10]
    return value


def resolve_legacy_status(doc: Mapping[str, Any]) -> ResourceStatus:
    """
    Status of a legacy document.

    A set skipped flag wins; then an explicit status ("posted" reads as
    processed); then the processed flag; otherwise pending.
    """
    raw = doc.get("status")
    text = raw.strip().lower() if isinstance(raw, str) else None

    if doc.get("skipped") is True:
        return ResourceStatus.SKIPPED
    if text in LEGACY_STATUS_ALIASES:
        return LEGACY_STATUS_ALIASES[text]
    if text in {status.value for status in ResourceStatus}:
        return ResourceStatus(text)
    return ResourceStatus.PROCESSED if doc.get("processed") is True else ResourceStatus.PENDING


def _legacy_kind(doc: Mapping[str, Any]) -> KindSpec:
    kind = doc.get("type") or doc.get("kind")
    if kind is not None:
        return describe(kind)
    for spec in get_kind_registry():
        if spec.detail_key in doc:
            return spec
    raise UnknownKindError(None)


def _as_list(raw: Any) -> list[Any]:
    if raw is None:
        return []
    if isinstance(raw, (str, Mapping)):
        return [raw]
    return list(raw)


def from_legacy_document(doc: Mapping[str, Any]) -> LegacyParse:
    """
    Recover raw resource data from a public or legacy document.

    The result is not normalized: feed it to parse_resource() to see the
    document as stored, or to prepare() to repair it.

    Raises:
        UnknownKindError: no type/kind and no recognizable detail key
    """
    spec = _legacy_kind(doc)
    violations: list[Violation] = []

    detail = doc.get(spec.detail_key)
    if detail is None:
        detail = doc.get("detail") or {}
    detail = dict(detail)

    link_key = to_camel(spec.link_field)
    raw_links = _as_list(detail.pop(link_key, detail.pop(spec.link_field, None)))
    for index, entry in enumerate(raw_links):
        if not is_canonical_entry(entry):
            violations.append(
                Violation(
                    code=ViolationCode.NONCANONICAL_LINK,
                    path=f"{spec.detail_key}.{link_key}[{index}]",
                    message=f"Link entry {entry!r} is not a {{url, label}} object",
                )
            )

    url = doc.get("url")
    if isinstance(url, str) and url.strip():
        violations.append(
            Violation(
                code=ViolationCode.LEGACY_LINK_FIELD,
                path="url",
                message="Top-level url outside the links list",
            )
        )
        raw_links.append({"url": url})
    detail[spec.link_field] = raw_links

    raw_status = doc.get("status")
    if isinstance(raw_status, str) and raw_status.strip().lower() in LEGACY_STATUS_ALIASES:
        violations.append(
            Violation(
                code=ViolationCode.STATUS_FLAG_MISMATCH,
                path="status",
                message=f"Legacy status value {raw_status!r}",
            )
        )
    status = resolve_legacy_status(doc)

    data: dict[str, Any] = {
        "id": plain_id(doc.get("id", doc.get("_id"))),
        "kind": spec.kind,
        "detail": detail,
        "status": status,
        "processed": bool(doc.get("processed", status is ResourceStatus.PROCESSED)),
        "skipped": bool(doc.get("skipped", status is ResourceStatus.SKIPPED)),
    }

    for name in Resource.model_fields:
        if name in _SPECIAL_FIELDS:
            continue
        camel = to_camel(name)
        if camel in doc:
            data[name] = doc[camel]
        elif name in doc:
            data[name] = doc[name]

    for name in ("created_at", "updated_at"):
        if name in data:
            data[name] = _plain_date(data[name])
    for name in ("teachers", "traditions"):
        if name in data:
            data[name] = [plain_id(value) for value in _as_list(data[name]) if value is not None]
    if data.get("version") is None:
        data.pop("version", None)

    date_range = doc.get("dateRange", doc.get("active_period"))
    if isinstance(date_range, Mapping):
        data["active_period"] = {
            "start": _date_only(date_range.get("start")),
            "end": _date_only(date_range.get("end")),
            "is_ongoing": bool(date_range.get("active", date_range.get("is_ongoing", True))),
        }

    return LegacyParse(data=data, violations=violations)
