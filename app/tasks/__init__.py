"""Scheduled tasks.

This package contains jobs that run periodically:
- Data retention cleanup of old results and opted-out analytics
"""

from app.tasks.retention import retention_loop, run_retention_cleanup

__all__ = [
    "retention_loop",
    "run_retention_cleanup",
]
