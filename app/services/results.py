"""Result persistence and anonymized analytics.

Scoring never depends on this service: callers compute a result first and
only then try to store it, so a storage failure cannot lose a score.
"""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.result import SystemAnalytics, UserAnalytics, UserResult
from app.scoring.assembler import SubmissionRecord
from app.scoring.dimensional import MultiDimensionalResult
from app.scoring.interpretation import severity_level
from app.scoring.standard import StandardResult
from app.utils.anonymous_id import hash_for_privacy
from app.utils.time import days_ago, start_of_day, utc_now

logger = logging.getLogger(__name__)


def severity_bucket(record: SubmissionRecord) -> str | None:
    """Coarse severity of a submission for aggregate statistics.

    Type tests have no severity and return None.
    """
    result = record.scored.result
    if isinstance(result, StandardResult):
        return severity_level(result.interpretation).value
    if isinstance(result, MultiDimensionalResult):
        return result.overall_risk.level
    return None


class ResultService:
    """Service for storing and querying anonymized results."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def save_submission(
        self,
        record: SubmissionRecord,
        answers: dict[str, Any],
        language: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> UserResult:
        """Store a submission and update analytics in one transaction.

        Args:
            record: Assembled submission record
            answers: Raw answers as submitted
            language: Supported language the submission is attributed to
            ip_address: Client IP (stored hashed only)
            user_agent: Client user agent (stored hashed only)

        Returns:
            Persisted UserResult
        """
        scored = record.scored
        user_result = UserResult(
            anonymous_user_id=record.user_id,
            test_name=scored.test_name,
            test_type=scored.test_type,
            answers=dict(answers),
            results=record.test_results,
            language=language,
            completed_at=scored.completed_at,
            ip_hash=hash_for_privacy(ip_address) if ip_address else None,
            device_hash=hash_for_privacy(user_agent) if user_agent else None,
        )
        self.session.add(user_result)

        await self.update_user_analytics(
            record.user_id, scored.test_name, language, now=scored.completed_at
        )
        await self.record_system_analytics(
            scored.test_name, language, severity_bucket(record), now=scored.completed_at
        )

        await self.session.commit()
        await self.session.refresh(user_result)
        return user_result

    async def get_user_analytics(self, anonymous_id: str) -> UserAnalytics | None:
        result = await self.session.execute(
            select(UserAnalytics).where(UserAnalytics.anonymous_user_id == anonymous_id)
        )
        return result.scalar_one_or_none()

    async def update_user_analytics(
        self,
        anonymous_id: str,
        test_name: str,
        language: str,
        now: datetime | None = None,
    ) -> UserAnalytics:
        """Create or increment the per-user counters."""
        now = now or utc_now()
        analytics = await self.get_user_analytics(anonymous_id)

        if analytics is None:
            analytics = UserAnalytics(
                anonymous_user_id=anonymous_id,
                total_tests_taken=1,
                tests_by_type={test_name: 1},
                last_active_date=now,
                preferred_language=language,
            )
            self.session.add(analytics)
            return analytics

        tests_by_type = dict(analytics.tests_by_type or {})
        tests_by_type[test_name] = tests_by_type.get(test_name, 0) + 1

        analytics.total_tests_taken += 1
        analytics.tests_by_type = tests_by_type
        analytics.last_active_date = now
        analytics.preferred_language = language
        return analytics

    async def record_system_analytics(
        self,
        test_name: str,
        language: str,
        severity: str | None,
        now: datetime | None = None,
    ) -> SystemAnalytics:
        """Increment today's aggregate counters."""
        day = start_of_day(now or utc_now())
        result = await self.session.execute(
            select(SystemAnalytics).where(SystemAnalytics.date == day)
        )
        daily = result.scalar_one_or_none()

        if daily is None:
            daily = SystemAnalytics(
                date=day,
                total_tests=0,
                test_breakdown={},
                language_usage={},
                severity_distributions={},
            )
            self.session.add(daily)

        breakdown = dict(daily.test_breakdown or {})
        breakdown[test_name] = breakdown.get(test_name, 0) + 1

        language_usage = dict(daily.language_usage or {})
        language_usage[language] = language_usage.get(language, 0) + 1

        distributions = {
            name: dict(counts) for name, counts in (daily.severity_distributions or {}).items()
        }
        if severity is not None:
            counts = distributions.setdefault(test_name, {})
            counts[severity] = counts.get(severity, 0) + 1

        daily.total_tests = (daily.total_tests or 0) + 1
        daily.test_breakdown = breakdown
        daily.language_usage = language_usage
        daily.severity_distributions = distributions
        return daily

    async def get_user_history(self, anonymous_id: str) -> list[UserResult]:
        """All results of a user, newest first."""
        result = await self.session.execute(
            select(UserResult)
            .where(UserResult.anonymous_user_id == anonymous_id)
            .order_by(UserResult.completed_at.desc())
        )
        return list(result.scalars().all())

    async def cleanup_old_data(
        self,
        retention_days: int,
        now: datetime | None = None,
    ) -> dict[str, int]:
        """Delete results past retention and analytics of opted-out users.

        Returns:
            Number of deleted rows per table
        """
        cutoff = days_ago(retention_days, now)

        results_deleted = await self.session.execute(
            delete(UserResult)
            .where(UserResult.completed_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        opted_out_deleted = await self.session.execute(
            delete(UserAnalytics)
            .where(UserAnalytics.opt_out_analytics == True)  # noqa: E712
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()

        summary = {
            "user_results": results_deleted.rowcount or 0,
            "user_analytics": opted_out_deleted.rowcount or 0,
        }
        if any(summary.values()):
            logger.info(f"Data retention cleanup removed {summary}")
        return summary
