"""Directory models."""

from .core import ActivePeriod, CoreModel, Link
from .entities import Resource, ResourceKind, ResourceStatus

__all__ = ["ActivePeriod", "CoreModel", "Link", "Resource", "ResourceKind", "ResourceStatus"]
