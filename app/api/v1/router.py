"""API v1 router aggregating all endpoints."""

from fastapi import APIRouter

from app.api.v1 import anonymous, answers, health, questions

api_router = APIRouter()

# Health check
api_router.include_router(
    health.router,
    prefix="/health",
    tags=["health"],
)

# Questionnaire content
api_router.include_router(questions.router)

# Submission, validation, catalogue and history
api_router.include_router(answers.router)

# Anonymous identifiers
api_router.include_router(anonymous.router)
