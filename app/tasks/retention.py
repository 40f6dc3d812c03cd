"""Scheduled data-retention cleanup.

Deletes stored results older than the retention window and analytics of
users who opted out.

Usage:
    # Run directly
    python -m app.tasks.retention

    # Or via cron (recommended daily)
    0 3 * * * cd /path/to/project && python -m app.tasks.retention

In production the API also runs the job in the background every
``CLEANUP_INTERVAL_HOURS`` hours.
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import settings
from app.services.results import ResultService

logger = logging.getLogger(__name__)


async def run_retention_cleanup(
    session_factory: async_sessionmaker[AsyncSession],
    retention_days: int | None = None,
) -> dict[str, int]:
    """Run one cleanup pass.

    Args:
        session_factory: Factory for database sessions
        retention_days: Override for RESULT_RETENTION_DAYS

    Returns:
        Number of deleted rows per table
    """
    days = retention_days if retention_days is not None else settings.result_retention_days
    logger.info(f"Starting data retention cleanup (retention={days} days)")

    async with session_factory() as session:
        return await ResultService(session).cleanup_old_data(days)


async def retention_loop(
    session_factory: async_sessionmaker[AsyncSession],
    interval_hours: int | None = None,
) -> None:
    """Run the cleanup forever at a fixed interval.

    Failures are logged and retried on the next tick.
    """
    interval = (interval_hours or settings.cleanup_interval_hours) * 3600
    while True:
        await asyncio.sleep(interval)
        try:
            await run_retention_cleanup(session_factory)
        except Exception:
            logger.exception("Data retention cleanup failed")


if __name__ == "__main__":
    from app.core.logging import setup_logging
    from app.db.session import AsyncSessionLocal

    setup_logging()
    summary = asyncio.run(run_retention_cleanup(AsyncSessionLocal))
    logger.info(f"Data retention cleanup complete: {summary}")
