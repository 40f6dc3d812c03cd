"""FastAPI dependency injection utilities."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.scoring.engine import ScoringEngine


def get_scoring_engine(request: Request) -> ScoringEngine:
    """Get the scoring engine built at application startup.

    Raises:
        HTTPException: If questionnaires have not been loaded
    """
    engine = getattr(request.app.state, "scoring_engine", None)
    if engine is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Questionnaires not loaded",
        )
    return engine


def get_client_ip(request: Request) -> str | None:
    """Extract client IP address from request.

    Args:
        request: FastAPI request

    Returns:
        Client IP address or None
    """
    # Check for forwarded header (when behind proxy)
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return None


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]
Engine = Annotated[ScoringEngine, Depends(get_scoring_engine)]
