"""
Consistency Validator.

validate(resource) reports every invariant violation of a single resource:

    1. slug format                       invalid_slug / missing_slug
    2. absolute, unique links            malformed_link / duplicate_link / legacy_link_field
    3. creator <-> detail creator field  creator_mismatch
    4. title -> detail name field        name_mismatch
    5. active period vs date hint        active_period_mismatch
    6. kind completeness                 missing_required_field
    7. status vs legacy flags            status_flag_mismatch

Codes for 1-5 and 7 are structural: a write carrying any of them is rejected.
missing_required_field is informational while pending and blocks the processed
transition. Global slug uniqueness (duplicate_slug) needs more than one
document and is reported by the audit pass.
"""

from enum import Enum
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvariantViolationError
from .models.entities import Resource, ResourceStatus
from .normalization.dates import resolve
from .normalization.slugs import is_valid_slug
from .registry import describe
from .utils.text import clean_names, is_blank
from .utils.urls import is_absolute_url, url_key


class ViolationCode(str, Enum):
    MISSING_SLUG = "missing_slug"
    INVALID_SLUG = "invalid_slug"
    DUPLICATE_SLUG = "duplicate_slug"
    MALFORMED_LINK = "malformed_link"
    DUPLICATE_LINK = "duplicate_link"
    NONCANONICAL_LINK = "noncanonical_link"
    LEGACY_LINK_FIELD = "legacy_link_field"
    CREATOR_MISMATCH = "creator_mismatch"
    NAME_MISMATCH = "name_mismatch"
    ACTIVE_PERIOD_MISMATCH = "active_period_mismatch"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    STATUS_FLAG_MISMATCH = "status_flag_mismatch"
    INVALID_DOCUMENT = "invalid_document"


STRUCTURAL_CODES = frozenset(ViolationCode) - {ViolationCode.MISSING_REQUIRED_FIELD}


class Violation(BaseModel):
    """One invariant violation."""

    model_config = ConfigDict(frozen=True)

    code: ViolationCode = Field(..., description="Machine-readable violation code")
    path: str = Field(..., description="Offending field path, e.g. detail.links[2]")
    message: str = Field(default="", description="Human-readable explanation")

    @property
    def structural(self) -> bool:
        return self.code in STRUCTURAL_CODES


def structural(violations: Iterable[Violation]) -> list[Violation]:
    """Filter to structural violations."""
    return [v for v in violations if v.structural]


def missing_required_fields(resource: Resource) -> list[str]:
    """
    User-facing names of the required fields a resource lacks.

    A requirement with alternatives (book: link or ISBN) contributes all of its
    names when none of them is filled, e.g. ["link", "isbn"].
    """
    spec = describe(resource.kind)
    missing: list[str] = []
    for requirement in spec.required_detail_fields:
        if all(is_blank(getattr(resource.detail, f)) for f in requirement.fields):
            missing.extend(requirement.names)
    return missing


def _slug(resource: Resource) -> list[Violation]:
    if resource.slug is None:
        return [Violation(code=ViolationCode.MISSING_SLUG, path="slug", message="Slug not assigned")]
    if not is_valid_slug(resource.slug):
        return [
            Violation(
                code=ViolationCode.INVALID_SLUG,
                path="slug",
                message=f"Slug {resource.slug!r} is not lowercase hyphenated alphanumerics",
            )
        ]
    return []


def _links(resource: Resource) -> list[Violation]:
    spec = describe(resource.kind)
    violations: list[Violation] = []
    seen: dict[str, int] = {}

    for index, link in enumerate(getattr(resource.detail, spec.link_field)):
        path = f"detail.{spec.link_field}[{index}]"
        if not is_absolute_url(link.url):
            violations.append(
                Violation(code=ViolationCode.MALFORMED_LINK, path=path, message=f"Not absolute: {link.url!r}")
            )
            continue
        key = url_key(link.url)
        if key in seen:
            violations.append(
                Violation(
                    code=ViolationCode.DUPLICATE_LINK,
                    path=path,
                    message=f"Duplicates detail.{spec.link_field}[{seen[key]}]",
                )
            )
        else:
            seen[key] = index

    if spec.legacy_link_field and not is_blank(getattr(resource.detail, spec.legacy_link_field)):
        violations.append(
            Violation(
                code=ViolationCode.LEGACY_LINK_FIELD,
                path=f"detail.{spec.legacy_link_field}",
                message="Legacy single link not folded into links",
            )
        )
    return violations


def _creator(resource: Resource) -> list[Violation]:
    spec = describe(resource.kind)
    if not spec.creator_field:
        return []
    detail_creators = clean_names(getattr(resource.detail, spec.creator_field))
    creator = clean_names(resource.creator)
    if set(detail_creators) != set(creator):
        return [
            Violation(
                code=ViolationCode.CREATOR_MISMATCH,
                path=f"detail.{spec.creator_field}",
                message=f"{detail_creators} does not match creator {creator}",
            )
        ]
    return []


def _name(resource: Resource) -> list[Violation]:
    spec = describe(resource.kind)
    if not spec.name_field:
        return []
    name = getattr(resource.detail, spec.name_field)
    if name != resource.title:
        return [
            Violation(
                code=ViolationCode.NAME_MISMATCH,
                path=f"detail.{spec.name_field}",
                message=f"{name!r} does not equal title {resource.title!r}",
            )
        ]
    return []


def _active_period(resource: Resource) -> list[Violation]:
    spec = describe(resource.kind)
    if not spec.date_hint_field:
        if resource.active_period is None:
            return []
        return [
            Violation(
                code=ViolationCode.ACTIVE_PERIOD_MISMATCH,
                path="active_period",
                message=f"{spec.kind.value} has no date hint to derive an active period from",
            )
        ]
    hint = getattr(resource.detail, spec.date_hint_field)
    if is_blank(hint):
        return []
    expected = resolve(resource.kind, hint)
    if resource.active_period != expected:
        return [
            Violation(
                code=ViolationCode.ACTIVE_PERIOD_MISMATCH,
                path="active_period",
                message=f"Expected {expected.model_dump()} from hint {hint!r}",
            )
        ]
    return []


def _completeness(resource: Resource) -> list[Violation]:
    spec = describe(resource.kind)
    violations: list[Violation] = []
    for requirement in spec.required_detail_fields:
        if all(is_blank(getattr(resource.detail, f)) for f in requirement.fields):
            alternatives = " or ".join(requirement.names)
            for f in requirement.fields:
                violations.append(
                    Violation(
                        code=ViolationCode.MISSING_REQUIRED_FIELD,
                        path=f"detail.{f}",
                        message=f"{spec.kind.value} requires {alternatives}",
                    )
                )
    return violations


def _status(resource: Resource) -> list[Violation]:
    violations: list[Violation] = []
    if resource.processed != (resource.status is ResourceStatus.PROCESSED):
        violations.append(
            Violation(
                code=ViolationCode.STATUS_FLAG_MISMATCH,
                path="processed",
                message=f"processed={resource.processed} but status={resource.status.value}",
            )
        )
    if resource.skipped != (resource.status is ResourceStatus.SKIPPED):
        violations.append(
            Violation(
                code=ViolationCode.STATUS_FLAG_MISMATCH,
                path="skipped",
                message=f"skipped={resource.skipped} but status={resource.status.value}",
            )
        )
    return violations


def validate(resource: Resource) -> list[Violation]:
    """
    Report every invariant violation of a resource.

    Pure; never raises for a well-typed Resource.
    """
    violations: list[Violation] = []
    for check in (_slug, _links, _creator, _name, _active_period, _completeness, _status):
        violations.extend(check(resource))
    return violations


def check_writable(resource: Resource) -> None:
    """
    Pre-write gate.

    Raises:
        InvariantViolationError: resource carries structural violations
    """
    violations = structural(validate(resource))
    if violations:
        raise InvariantViolationError(violations)
