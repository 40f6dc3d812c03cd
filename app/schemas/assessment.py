"""Pydantic schemas for questionnaire and submission endpoints.

JSON payloads use camelCase field names; Python code uses snake_case.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class AnswersSubmit(CamelModel):
    """Schema for submitting answers to a test."""

    answers: dict[str, Any] = Field(..., description="Question ID -> numeric answer")
    language: str = Field("en", description="Language code (en, ks)")
    user_id: str | None = Field(None, description="Existing anonymous user ID")


class AnswersValidate(CamelModel):
    """Schema for validating answers without scoring."""

    answers: dict[str, Any]


class SubmissionResponse(CamelModel):
    """Scored submission returned to the client."""

    user_id: str
    test_results: dict[str, Any]
    timestamp: datetime
    result_id: str | None = None
    warning: str | None = None


class ValidationResponse(CamelModel):
    """Result of a successful answer validation."""

    message: str = "Answers are valid"
    test_name: str
    answers_count: int
    expected_count: int


class TestCatalogue(CamelModel):
    """Available tests with their metadata."""

    __test__ = False

    total_tests: int
    language: str
    tests: list[dict[str, Any]]


class HistoryEntry(CamelModel):
    """Stored result as shown in a user's history."""

    id: str
    test_name: str
    test_type: str
    language: str
    results: dict[str, Any]
    completed_at: datetime


class UserAnalyticsRead(CamelModel):
    """Per-user analytics summary."""

    total_tests_taken: int
    preferred_language: str
    last_active_date: datetime


class UserHistoryResponse(CamelModel):
    """A user's test history, newest first."""

    user_id: str
    language: str
    test_history: list[HistoryEntry]
    total_tests: int
    last_test_date: datetime | None = None
    analytics: UserAnalyticsRead | None = None


class AnonymousIdResponse(CamelModel):
    """Newly generated anonymous identifier."""

    anonymous_id: str
    session_token: str
    format: str = "10 digits (YYYYMMDDHH) + 12 hex characters"
    usage: str = "Send this ID as 'userId' when submitting answers"
