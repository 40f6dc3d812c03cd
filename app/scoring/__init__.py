"""Scoring subsystem for self-assessment questionnaires."""

from app.scoring.assembler import SubmissionRecord, assemble_submission
from app.scoring.definitions import SeverityLevel, TestCategory, TestDefinition
from app.scoring.engine import ScoredTest, ScoringEngine
from app.scoring.errors import (
    AnswerCountMismatch,
    DefinitionError,
    InvalidAnswerValue,
    InvalidQuestionId,
    ScoringError,
    TestNotFound,
    ValidationError,
)
from app.scoring.store import TestDefinitionStore

__all__ = [
    "AnswerCountMismatch",
    "DefinitionError",
    "InvalidAnswerValue",
    "InvalidQuestionId",
    "ScoredTest",
    "ScoringEngine",
    "ScoringError",
    "SeverityLevel",
    "SubmissionRecord",
    "TestCategory",
    "TestDefinition",
    "TestDefinitionStore",
    "TestNotFound",
    "ValidationError",
    "assemble_submission",
]
