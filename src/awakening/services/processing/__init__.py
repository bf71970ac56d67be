"""Moderation queue service."""

from .service import ProcessingService, ProgressCounts, ProgressReport

__all__ = ["ProcessingService", "ProgressCounts", "ProgressReport"]
