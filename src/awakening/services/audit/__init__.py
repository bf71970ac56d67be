"""Audit and repair of stored resources and legacy exports."""

from .service import (
    AuditFinding,
    AuditReport,
    AuditService,
    audit_documents,
    audit_violations,
    repair_resource,
)

__all__ = [
    "AuditFinding",
    "AuditReport",
    "AuditService",
    "audit_documents",
    "audit_violations",
    "repair_resource",
]
