from datetime import datetime
from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from sessiongate.web.deps import SessionDep
from sessiongate.web.openapi import ErrorResponse

router = APIRouter(tags=["profile"])


class ProfileResponse(BaseModel):
    """Identity attached to the current session."""

    user_id: UUID = Field(..., description="ID of the authenticated user")
    expires_at: datetime = Field(..., description="When the current session expires")


@router.get(
    "/profile",
    summary="Get current session identity",
    description="Get the user ID of the currently authenticated session.",
    operation_id="getProfile",
    responses={
        200: {"description": "Current session identity"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_profile(session: SessionDep) -> ProfileResponse:
    return ProfileResponse(user_id=session.user_id, expires_at=session.expires_at)
