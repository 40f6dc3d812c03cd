"""Business logic services."""

from app.services.results import ResultService, severity_bucket

__all__ = [
    "ResultService",
    "severity_bucket",
]
