"""Pydantic schemas for request/response validation."""

from app.schemas.assessment import (
    AnonymousIdResponse,
    AnswersSubmit,
    AnswersValidate,
    HistoryEntry,
    SubmissionResponse,
    TestCatalogue,
    UserAnalyticsRead,
    UserHistoryResponse,
    ValidationResponse,
)

__all__ = [
    "AnonymousIdResponse",
    "AnswersSubmit",
    "AnswersValidate",
    "HistoryEntry",
    "SubmissionResponse",
    "TestCatalogue",
    "UserAnalyticsRead",
    "UserHistoryResponse",
    "ValidationResponse",
]
