"""
Audit / repair pass.

Runs the consistency validator over every resource, either in the live store
or in a legacy JSON export, and reports what it finds. Historical data may
predate the write pipeline (flags without status, legacy link fields,
character-array links, "posted" status), so with repair enabled each
resource is renormalized:

- derived fields (links, creator/name mirrors, active period, flags) are recomputed
- a processed resource that is not complete is demoted to pending
- export audits also reallocate missing, invalid or duplicate slugs; store
  audits never rewrite a stored slug and report those for manual fixing
"""

from collections import Counter
from typing import Any, Iterable, Optional

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from ...errors import ResourceError, SlugCollisionExhaustedError
from ...models.entities import Resource, ResourceStatus
from ...normalization import is_valid_slug, normalize, parse_resource, slug_base, slug_candidates
from ...processing import with_status
from ...serialization import from_legacy_document, plain_id, to_public_document
from ...validation import Violation, ViolationCode, check_writable, missing_required_fields, validate
from ..repositories import ResourceStore

_SLUG_CODES = {ViolationCode.MISSING_SLUG, ViolationCode.INVALID_SLUG, ViolationCode.DUPLICATE_SLUG}


class AuditFinding(BaseModel):
    """Violations found on one resource or document."""

    resource_id: Optional[str] = None
    slug: Optional[str] = None
    title: Optional[str] = None
    violations: list[Violation] = Field(default_factory=list)
    repaired: bool = False
    remaining: list[Violation] = Field(
        default_factory=list, description="Violations left after repair"
    )


class AuditReport(BaseModel):
    scanned: int = 0
    findings: list[AuditFinding] = Field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.findings

    @property
    def repaired(self) -> int:
        return sum(1 for finding in self.findings if finding.repaired)

    def violation_counts(self) -> dict[str, int]:
        """Number of violations per code across all findings."""
        counts: Counter[str] = Counter()
        for finding in self.findings:
            counts.update(v.code.value for v in finding.violations)
        return dict(sorted(counts.items()))


def audit_violations(resource: Resource) -> list[Violation]:
    """Structural violations, plus completeness for resources already marked processed."""
    violations = validate(resource)
    if resource.status is ResourceStatus.PROCESSED:
        return violations
    return [v for v in violations if v.structural]


def repair_resource(resource: Resource) -> Resource:
    """
    Renormalize a resource and demote it to pending if it is processed but
    incomplete. Slugs are left alone.
    """
    repaired = normalize(resource).resource
    if repaired.status is ResourceStatus.PROCESSED:
        missing = missing_required_fields(repaired)
        if missing:
            logger.warning(
                f"Resource {repaired.id} ({repaired.slug}) marked processed but missing "
                f"{', '.join(missing)}, demoting to pending"
            )
            repaired = with_status(repaired, ResourceStatus.PENDING)
    return repaired


def _invalid_document(doc: Any, error: Exception) -> AuditFinding:
    resource_id = None
    title = None
    if isinstance(doc, dict):
        resource_id = plain_id(doc.get("id", doc.get("_id")))
        title = doc.get("title")
    return AuditFinding(
        resource_id=resource_id,
        title=title,
        violations=[
            Violation(code=ViolationCode.INVALID_DOCUMENT, path="", message=str(error))
        ],
    )


def audit_documents(
    documents: Iterable[dict[str, Any]],
    repair: bool = False,
    max_slug_attempts: int = 100,
) -> tuple[AuditReport, list[dict[str, Any]]]:
    """
    Audit a legacy JSON export.

    Args:
        documents: Exported resource documents
        repair: Return repaired documents instead of the originals
        max_slug_attempts: Suffix budget when reallocating slugs

    Returns:
        (report, documents) where documents are repaired public documents when
        repair is set, otherwise the input documents unchanged. Documents that
        cannot be parsed are passed through untouched.
    """
    report = AuditReport()
    output: list[dict[str, Any]] = []
    parsed: list[tuple[dict[str, Any], Optional[Resource], AuditFinding]] = []
    slug_counts: Counter[str] = Counter()

    for doc in documents:
        report.scanned += 1
        if not isinstance(doc, dict):
            finding = _invalid_document(doc, TypeError(f"Expected an object, got {type(doc).__name__}"))
            parsed.append((doc, None, finding))
            continue
        try:
            legacy = from_legacy_document(doc)
            resource = parse_resource(legacy.data).resource
        except (ResourceError, ValidationError) as e:
            finding = _invalid_document(doc, e)
            logger.warning(f"Unreadable document {finding.resource_id}: {e}")
            parsed.append((doc, None, finding))
            continue

        finding = AuditFinding(
            resource_id=resource.id,
            slug=resource.slug,
            title=resource.title,
            violations=legacy.violations + audit_violations(resource),
        )
        if resource.slug:
            slug_counts[resource.slug] += 1
        parsed.append((doc, resource, finding))

    used_slugs = {slug for slug in slug_counts if is_valid_slug(slug)}
    claimed: set[str] = set()

    for doc, resource, finding in parsed:
        if resource is not None and resource.slug and slug_counts[resource.slug] > 1:
            if resource.slug in claimed:
                finding.violations.append(
                    Violation(
                        code=ViolationCode.DUPLICATE_SLUG,
                        path="slug",
                        message=f"Slug {resource.slug!r} already used by an earlier document",
                    )
                )
            claimed.add(resource.slug)

        if finding.violations:
            report.findings.append(finding)

        if not repair or resource is None:
            output.append(doc)
            continue

        repaired = repair_resource(resource)
        if any(v.code in _SLUG_CODES for v in finding.violations):
            try:
                slug = _free_slug(repaired.title, used_slugs, max_slug_attempts)
            except SlugCollisionExhaustedError as e:
                logger.warning(f"Cannot reallocate slug for {resource.id}: {e}")
            else:
                logger.warning(f"Reallocated slug {resource.slug!r} -> {slug!r}")
                repaired = repaired.model_copy(update={"slug": slug})
        finding.remaining = [v for v in validate(repaired) if v.structural]
        finding.repaired = bool(finding.violations) and not finding.remaining
        output.append(to_public_document(repaired))

    logger.info(f"Audited {report.scanned} documents: {len(report.findings)} with violations")
    return report, output


def _free_slug(title: str, used: set[str], max_attempts: int) -> str:
    base = slug_base(title)
    for candidate in slug_candidates(base, max_attempts):
        if candidate not in used:
            used.add(candidate)
            return candidate
    raise SlugCollisionExhaustedError(base, max_attempts)


class AuditService:
    """Audit (and optionally repair) every resource in a store."""

    def __init__(self, store: ResourceStore, page_size: Optional[int] = None):
        from ...settings import settings

        self.store = store
        self.page_size = page_size or settings.processing.audit_page_size

    async def run(self, repair: bool = False) -> AuditReport:
        """
        Validate every stored resource, page by page.

        With repair, resources with violations are renormalized and written
        back with compare-and-set on the version read.
        """
        report = AuditReport()
        offset = 0

        while True:
            page = await self.store.query(
                {}, order_by="created_at ASC, id ASC", limit=self.page_size, offset=offset
            )
            if not page:
                break
            offset += len(page)

            for resource in page:
                report.scanned += 1
                violations = audit_violations(resource)
                if not violations:
                    continue

                finding = AuditFinding(
                    resource_id=resource.id,
                    slug=resource.slug,
                    title=resource.title,
                    violations=violations,
                )
                report.findings.append(finding)

                if repair:
                    await self._repair(resource, finding)

        logger.info(
            f"Audited {report.scanned} stored resources: {len(report.findings)} with violations"
        )
        return report

    async def _repair(self, resource: Resource, finding: AuditFinding) -> None:
        repaired = repair_resource(resource)
        finding.remaining = [v for v in validate(repaired) if v.structural]
        if finding.remaining:
            # Nothing is written: a partial repair would persist structural violations
            for violation in finding.remaining:
                logger.warning(
                    f"Resource {resource.id} needs a manual fix: {violation.code.value} at {violation.path}"
                )
            return
        check_writable(repaired)
        await self.store.update(resource.id, repaired, resource.version)
        finding.repaired = True
