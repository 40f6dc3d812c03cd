"""Anonymized result and analytics models.

No model stores personal data: submitters are keyed by their anonymous
ID, and client IP / user agent are kept only as SHA256 hashes.
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, TimestampMixin


class UserResult(Base, TimestampMixin):
    """One scored questionnaire submission."""

    __tablename__ = "user_results"
    __table_args__ = (
        Index("ix_user_results_user_completed", "anonymous_user_id", "completed_at"),
        Index("ix_user_results_test_completed", "test_name", "completed_at"),
    )

    anonymous_user_id: Mapped[str] = mapped_column(
        String(22),
        nullable=False,
        index=True,
    )
    # Lower-case questionnaire identifier (e.g. "phq9")
    test_name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    # Display name (e.g. "PHQ-9")
    test_type: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    answers: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
    )
    # Full result record as returned to the client
    results: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
    )
    language: Mapped[str] = mapped_column(
        String(5),
        default="en",
        nullable=False,
    )
    completed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )
    # Privacy-preserving hashes for basic abuse analytics
    ip_hash: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
    )
    device_hash: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
    )


class UserAnalytics(Base, TimestampMixin):
    """Per-user activity counters."""

    __tablename__ = "user_analytics"

    anonymous_user_id: Mapped[str] = mapped_column(
        String(22),
        nullable=False,
        unique=True,
        index=True,
    )
    total_tests_taken: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    # {test_name: count}
    tests_by_type: Mapped[dict] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
    )
    last_active_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    preferred_language: Mapped[str] = mapped_column(
        String(5),
        default="en",
        nullable=False,
    )
    opt_out_analytics: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )


class SystemAnalytics(Base, TimestampMixin):
    """Daily aggregate statistics (no personal data)."""

    __tablename__ = "system_analytics"

    # Midnight UTC of the aggregated day
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        unique=True,
        index=True,
    )
    total_tests: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    # {test_name: count}
    test_breakdown: Mapped[dict] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
    )
    # {language: count}
    language_usage: Mapped[dict] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
    )
    # {test_name: {"low": n, "moderate": n, "high": n, "urgent": n}}
    severity_distributions: Mapped[dict] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
    )
