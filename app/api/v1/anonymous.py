"""Anonymous identifier endpoint."""

from fastapi import APIRouter

from app.schemas.assessment import AnonymousIdResponse
from app.utils.anonymous_id import generate_anonymous_id, generate_session_token

router = APIRouter(tags=["anonymous"])


@router.get("/anonymous-id", response_model=AnonymousIdResponse)
async def create_anonymous_id() -> AnonymousIdResponse:
    """Issue a fresh anonymous ID and test-session token.

    Clients keep the ID and send it as ``userId`` with later submissions
    to link their results.
    """
    return AnonymousIdResponse(
        anonymous_id=generate_anonymous_id(),
        session_token=generate_session_token(),
    )
