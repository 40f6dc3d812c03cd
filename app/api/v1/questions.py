"""Questionnaire content endpoints."""

from typing import Any

from fastapi import APIRouter, HTTPException, status

from app.api.deps import Engine
from app.scoring.catalog import questions_payload
from app.scoring.errors import TestNotFound

router = APIRouter(prefix="/questions", tags=["questions"])


@router.get("/{test_name}")
async def get_questions(
    test_name: str,
    engine: Engine,
    language: str = "en",
) -> dict[str, Any]:
    """Get a test's localized questions and answer options."""
    try:
        definition = engine.get_definition(test_name)
    except TestNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Test not found",
        )

    return questions_payload(definition, language)
