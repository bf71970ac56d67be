"""
Directory Services

Service layer over the pure resource core:
- PostgresService: PostgreSQL connection pool and schema
- Resource stores: in-memory and PostgreSQL implementations of ResourceStore
- ResourceService: create/update/delete/enrich write pipeline
- ProcessingService: moderation queue and status transitions
- AuditService: audit/repair pass over stored resources
"""

from .audit import AuditService
from .postgres import PostgresService
from .processing import ProcessingService
from .resources import ResourceService

__all__ = ["AuditService", "PostgresService", "ProcessingService", "ResourceService"]
