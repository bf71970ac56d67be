"""
Resource stores.

- ResourceStore: the persistence contract the services depend on
- InMemoryResourceStore: dict-backed, used by tests and file tooling
- PostgresResourceStore: asyncpg-backed production store
"""

from .base import DEFAULT_ORDER, FILTER_FIELDS, ORDER_FIELDS, ResourceStore, parse_order_by
from .memory import InMemoryResourceStore
from .resource_repository import PostgresResourceStore


def get_resource_store() -> ResourceStore:
    """
    Get the configured store.

    PostgreSQL when POSTGRES__ENABLED, otherwise a fresh in-memory store.
    """
    from ..postgres import get_postgres_service

    db = get_postgres_service()
    if db is None:
        return InMemoryResourceStore()
    return PostgresResourceStore(db)


__all__ = [
    "DEFAULT_ORDER",
    "FILTER_FIELDS",
    "InMemoryResourceStore",
    "ORDER_FIELDS",
    "PostgresResourceStore",
    "ResourceStore",
    "get_resource_store",
    "parse_order_by",
]
