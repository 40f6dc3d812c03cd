"""Answer submission, validation, catalogue and history endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import DbSession, Engine, get_client_ip
from app.core.config import settings
from app.core.logging import audit_logger
from app.schemas.assessment import (
    AnswersSubmit,
    AnswersValidate,
    HistoryEntry,
    SubmissionResponse,
    TestCatalogue,
    UserAnalyticsRead,
    UserHistoryResponse,
    ValidationResponse,
)
from app.scoring.assembler import assemble_submission
from app.scoring.catalog import describe_test
from app.scoring.engine import ScoredTest, ScoringEngine
from app.scoring.errors import TestNotFound, ValidationError
from app.services.results import ResultService
from app.utils.anonymous_id import generate_anonymous_id, validate_anonymous_id
from app.utils.time import utc_now

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/answers", tags=["answers"])

UNSAVED_WARNING = "Results calculated but not saved to database"


def _score_or_raise(
    engine: ScoringEngine, test_name: str, answers: dict, language: str
) -> ScoredTest:
    """Score answers, translating scoring errors to HTTP errors."""
    try:
        return engine.score(test_name, answers, language)
    except TestNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Test {test_name} not found",
        )
    except ValidationError as exc:
        logger.info(f"Rejected {test_name} submission: {exc}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        )


@router.get("/tests", response_model=TestCatalogue)
async def list_tests(engine: Engine, language: str = "en") -> TestCatalogue:
    """List available tests with localized metadata."""
    tests = [describe_test(definition, language) for definition in engine.store]
    return TestCatalogue(
        total_tests=len(tests),
        language=language,
        tests=sorted(tests, key=lambda test: test["testName"]),
    )


@router.post("/{test_name}", response_model=SubmissionResponse)
async def submit_answers(
    test_name: str,
    body: AnswersSubmit,
    request: Request,
    engine: Engine,
    session: DbSession,
) -> SubmissionResponse:
    """Score submitted answers and store the anonymized result.

    The computed result is returned even when it cannot be stored.
    """
    if body.user_id is not None and not validate_anonymous_id(body.user_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid user ID format",
        )

    anonymous_id = body.user_id or generate_anonymous_id()
    scored = _score_or_raise(engine, test_name, body.answers, body.language)
    record = assemble_submission(scored, anonymous_id)

    try:
        saved = await ResultService(session).save_submission(
            record,
            body.answers,
            language=settings.attributed_language(body.language),
            ip_address=get_client_ip(request),
            user_agent=request.headers.get("User-Agent"),
        )
    except SQLAlchemyError:
        await session.rollback()
        logger.exception(f"Failed to store {scored.test_name} result")
        return SubmissionResponse(
            user_id=anonymous_id,
            test_results=record.test_results,
            timestamp=utc_now(),
            warning=UNSAVED_WARNING,
        )

    audit_logger.log(
        action="submit_answers",
        anonymous_id=anonymous_id,
        test_name=scored.test_name,
        metadata={"result_id": saved.id},
    )

    return SubmissionResponse(
        user_id=anonymous_id,
        test_results=record.test_results,
        timestamp=utc_now(),
        result_id=saved.id,
    )


@router.post("/{test_name}/validate", response_model=ValidationResponse)
async def validate_answers(
    test_name: str,
    body: AnswersValidate,
    engine: Engine,
) -> ValidationResponse:
    """Check answers before submission without scoring or storing them."""
    try:
        definition = engine.validate(test_name, body.answers)
    except TestNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Test {test_name} not found",
        )
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        )

    return ValidationResponse(
        test_name=test_name,
        answers_count=len(body.answers),
        expected_count=definition.total_questions,
    )


@router.get("/user/{user_id}", response_model=UserHistoryResponse)
async def get_user_history(
    user_id: str,
    session: DbSession,
    language: str = "en",
) -> UserHistoryResponse:
    """Get an anonymous user's test history, newest first."""
    if not validate_anonymous_id(user_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid user ID format",
        )

    service = ResultService(session)
    history = await service.get_user_history(user_id)
    analytics = await service.get_user_analytics(user_id)

    return UserHistoryResponse(
        user_id=user_id,
        language=language,
        test_history=[HistoryEntry.model_validate(entry) for entry in history],
        total_tests=len(history),
        last_test_date=history[0].completed_at if history else None,
        analytics=UserAnalyticsRead.model_validate(analytics) if analytics else None,
    )
