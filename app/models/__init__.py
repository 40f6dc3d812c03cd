"""Database models for the assessment service."""

from app.models.result import SystemAnalytics, UserAnalytics, UserResult

__all__ = [
    "SystemAnalytics",
    "UserAnalytics",
    "UserResult",
]
