"""
CoreModel - Base model for all directory entities.

Directory entities inherit from CoreModel, which provides:
- Identity (id - opaque string assigned by the store at creation)
- Temporal tracking (created_at, updated_at)
- Optimistic concurrency (version, incremented by the store on every update)
- Flexible metadata (metadata dict)
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class CoreModel(BaseModel):
    """
    Base model for all directory entities.

    Note: ID generation is handled by the persistence layer, not by CoreModel.
    A model with id=None has never been stored.
    """

    id: Optional[str] = Field(
        default=None,
        description="Opaque identifier, assigned at creation and immutable",
    )
    created_at: datetime = Field(
        default_factory=utcnow, description="Entity creation timestamp"
    )
    updated_at: datetime = Field(
        default_factory=utcnow, description="Last update timestamp"
    )
    version: int = Field(
        default=0,
        ge=0,
        description="Compare-and-set version, 0 until first persisted",
    )
    metadata: dict = Field(
        default_factory=dict, description="Flexible metadata storage"
    )
