"""Core models shared by all entities."""

from .core_model import CoreModel, utcnow
from .values import ActivePeriod, Link

__all__ = ["ActivePeriod", "CoreModel", "Link", "utcnow"]
