"""Tests for result persistence and analytics."""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.result import SystemAnalytics, UserAnalytics, UserResult
from app.scoring.assembler import assemble_submission
from app.scoring.engine import ScoringEngine
from app.services.results import ResultService, severity_bucket
from app.tasks import retention
from app.tasks.retention import run_retention_cleanup
from app.utils.anonymous_id import hash_for_privacy

USER_ID = "2025010203abcdef123456"
PHQ9_ANSWERS = {str(i): 3 for i in range(1, 10)}


class TestSeverityBucket:
    """Tests for aggregate severity buckets."""

    def test_standard_uses_level(self, scoring_engine: ScoringEngine) -> None:
        """Test standard results bucket by interpretation level."""
        record = assemble_submission(scoring_engine.score("phq9", PHQ9_ANSWERS), USER_ID)
        assert severity_bucket(record) == "urgent"

    def test_multi_dimensional_uses_risk(self, scoring_engine: ScoringEngine) -> None:
        """Test burnout results bucket by overall risk."""
        scored = scoring_engine.score("mbiss", {str(i): 0 for i in range(1, 16)})
        assert severity_bucket(assemble_submission(scored, USER_ID)) == "low"

    def test_categorical_has_no_bucket(self, scoring_engine: ScoringEngine) -> None:
        """Test type tests carry no severity."""
        scored = scoring_engine.score("mbti", {str(i): 3 for i in range(1, 9)})
        assert severity_bucket(assemble_submission(scored, USER_ID)) is None


class TestSaveSubmission:
    """Tests for storing submissions."""

    @pytest.mark.asyncio
    async def test_stores_result_and_analytics(
        self, async_session: AsyncSession, scoring_engine: ScoringEngine
    ) -> None:
        """Test a submission writes result, user and daily analytics."""
        record = assemble_submission(scoring_engine.score("phq9", PHQ9_ANSWERS), USER_ID)

        saved = await ResultService(async_session).save_submission(
            record, PHQ9_ANSWERS, language="en", ip_address="10.0.0.1", user_agent="pytest"
        )

        assert saved.id is not None
        assert saved.anonymous_user_id == USER_ID
        assert saved.test_name == "phq9"
        assert saved.results["rawScore"] == 27
        assert saved.results["userId"] == USER_ID
        assert saved.ip_hash == hash_for_privacy("10.0.0.1")
        assert saved.device_hash == hash_for_privacy("pytest")

        analytics = await ResultService(async_session).get_user_analytics(USER_ID)
        assert analytics.total_tests_taken == 1
        assert analytics.tests_by_type == {"phq9": 1}
        assert analytics.preferred_language == "en"

        daily = (await async_session.execute(select(SystemAnalytics))).scalar_one()
        assert daily.total_tests == 1
        assert daily.test_breakdown == {"phq9": 1}
        assert daily.language_usage == {"en": 1}
        assert daily.severity_distributions == {"phq9": {"urgent": 1}}

    @pytest.mark.asyncio
    async def test_repeat_submissions_increment(
        self, async_session: AsyncSession, scoring_engine: ScoringEngine
    ) -> None:
        """Test counters accumulate across submissions."""
        service = ResultService(async_session)
        for test_id, answers, language in (
            ("phq9", PHQ9_ANSWERS, "en"),
            ("phq9", {str(i): 0 for i in range(1, 10)}, "ks"),
            ("mbti", {str(i): 3 for i in range(1, 9)}, "ks"),
        ):
            record = assemble_submission(
                scoring_engine.score(test_id, answers, language), USER_ID
            )
            await service.save_submission(record, answers, language=language)

        analytics = await service.get_user_analytics(USER_ID)
        assert analytics.total_tests_taken == 3
        assert analytics.tests_by_type == {"phq9": 2, "mbti": 1}
        assert analytics.preferred_language == "ks"

        daily = (await async_session.execute(select(SystemAnalytics))).scalar_one()
        assert daily.total_tests == 3
        assert daily.test_breakdown == {"phq9": 2, "mbti": 1}
        assert daily.language_usage == {"en": 1, "ks": 2}
        assert daily.severity_distributions == {"phq9": {"urgent": 1, "low": 1}}

    @pytest.mark.asyncio
    async def test_history_newest_first(
        self, async_session: AsyncSession, scoring_engine: ScoringEngine
    ) -> None:
        """Test history is ordered by completion time, newest first."""
        service = ResultService(async_session)
        for test_id, count in (("gad7", 7), ("phq9", 9)):
            answers = {str(i): 1 for i in range(1, count + 1)}
            record = assemble_submission(scoring_engine.score(test_id, answers), USER_ID)
            await service.save_submission(record, answers, language="en")

        history = await service.get_user_history(USER_ID)

        assert [entry.test_name for entry in history] == ["phq9", "gad7"]
        assert await service.get_user_history("2025010203000000000000") == []


class TestRetentionCleanup:
    """Tests for data retention cleanup."""

    async def _seed(self, session: AsyncSession) -> None:
        now = datetime.now(timezone.utc)
        for user_id, completed_at in (
            ("2024010100aaaaaaaaaaaa", now - timedelta(days=400)),
            ("2025010100bbbbbbbbbbbb", now - timedelta(days=10)),
        ):
            session.add(
                UserResult(
                    anonymous_user_id=user_id,
                    test_name="phq9",
                    test_type="PHQ-9",
                    answers={},
                    results={},
                    language="en",
                    completed_at=completed_at,
                )
            )
        session.add(
            UserAnalytics(
                anonymous_user_id="2025010100cccccccccccc",
                total_tests_taken=1,
                tests_by_type={"phq9": 1},
                last_active_date=now,
                preferred_language="en",
                opt_out_analytics=True,
            )
        )
        session.add(
            UserAnalytics(
                anonymous_user_id="2025010100dddddddddddd",
                total_tests_taken=1,
                tests_by_type={"phq9": 1},
                last_active_date=now,
                preferred_language="en",
            )
        )
        await session.commit()

    @pytest.mark.asyncio
    async def test_cleanup_old_data(self, async_session: AsyncSession) -> None:
        """Test old results and opted-out analytics are deleted."""
        await self._seed(async_session)

        summary = await ResultService(async_session).cleanup_old_data(retention_days=365)

        assert summary == {"user_results": 1, "user_analytics": 1}
        remaining = (await async_session.execute(select(UserResult))).scalars().all()
        assert [r.anonymous_user_id for r in remaining] == ["2025010100bbbbbbbbbbbb"]
        users = (await async_session.execute(select(UserAnalytics))).scalars().all()
        assert [u.anonymous_user_id for u in users] == ["2025010100dddddddddddd"]

    @pytest.mark.asyncio
    async def test_run_retention_cleanup(
        self,
        async_session: AsyncSession,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        """Test the scheduled job opens its own session."""
        await self._seed(async_session)

        summary = await run_retention_cleanup(session_factory, retention_days=5)

        assert summary == {"user_results": 2, "user_analytics": 1}

    @pytest.mark.asyncio
    async def test_loop_survives_unexpected_errors(
        self,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test a failing run is logged and the loop keeps its schedule."""
        sleep = AsyncMock(side_effect=[None, None, asyncio.CancelledError()])
        cleanup = AsyncMock(side_effect=RuntimeError("disk full"))
        monkeypatch.setattr(retention.asyncio, "sleep", sleep)
        monkeypatch.setattr(retention, "run_retention_cleanup", cleanup)

        with caplog.at_level(logging.ERROR, logger="app.tasks.retention"):
            with pytest.raises(asyncio.CancelledError):
                await retention.retention_loop(MagicMock(), interval_hours=1)

        assert cleanup.await_count == 2
        sleep.assert_awaited_with(3600)
        assert caplog.text.count("Data retention cleanup failed") == 2
