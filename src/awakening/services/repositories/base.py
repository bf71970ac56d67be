"""
ResourceStore - persistence collaborator contract.

The core only ever talks to storage through these operations. Stores must:
- assign id and version (1) on create, and reject a taken slug with SlugConflictError
- compare-and-set on update: write only when the stored version equals
  expected_version, then increment it; otherwise VersionConflictError
- write the whole document on update (no field-level merge)

Filters are {field: value} dicts AND-ed together. A list/tuple/set value means
"any of". Only FILTER_FIELDS may be filtered on and only ORDER_FIELDS sorted by.
"""

from enum import Enum
from typing import Any, Optional, Protocol

from ...models.entities import Resource, ResourceKind

FILTER_FIELDS = frozenset({"id", "kind", "status", "slug", "processed", "skipped"})
ORDER_FIELDS = frozenset({"id", "title", "slug", "kind", "status", "created_at", "updated_at"})
DEFAULT_ORDER = "created_at ASC"


class ResourceStore(Protocol):
    """Persistence collaborator for resources."""

    async def get(self, resource_id: str) -> Optional[Resource]: ...

    async def find_by_slug(self, slug: str) -> Optional[Resource]: ...

    async def create(self, resource: Resource) -> Resource: ...

    async def update(self, resource_id: str, resource: Resource, expected_version: int) -> Resource: ...

    async def delete(self, resource_id: str) -> bool: ...

    async def query(
        self,
        filters: dict[str, Any],
        order_by: str = DEFAULT_ORDER,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Resource]: ...

    async def count_by(self, filters: dict[str, Any]) -> int: ...

    async def aggregate_by_kind(self, filters: dict[str, Any]) -> dict[ResourceKind, int]: ...


def filter_value(value: Any) -> Any:
    """Plain value for comparison/SQL parameters (enums -> their value)."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple, set, frozenset)):
        return [filter_value(v) for v in value]
    return value


def check_filters(filters: dict[str, Any]) -> dict[str, Any]:
    """
    Validate filter keys and normalize values.

    Raises:
        ValueError: unsupported filter field
    """
    unknown = set(filters) - FILTER_FIELDS
    if unknown:
        raise ValueError(f"Unsupported filter fields: {sorted(unknown)}")
    return {key: filter_value(value) for key, value in filters.items()}


def parse_order_by(order_by: str) -> list[tuple[str, bool]]:
    """
    Parse "title ASC, id DESC" into [("title", False), ("id", True)].

    The bool is True for descending.

    Raises:
        ValueError: unknown field or direction
    """
    terms: list[tuple[str, bool]] = []
    for term in order_by.split(","):
        parts = term.split()
        if not parts:
            continue
        field = parts[0]
        direction = parts[1].upper() if len(parts) > 1 else "ASC"
        if field not in ORDER_FIELDS or direction not in ("ASC", "DESC") or len(parts) > 2:
            raise ValueError(f"Unsupported order_by term: {term.strip()!r}")
        terms.append((field, direction == "DESC"))
    if not terms:
        raise ValueError("order_by must name at least one field")
    return terms
