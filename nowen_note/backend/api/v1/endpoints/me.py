"""
Current Account Endpoint.
"""

from fastapi import APIRouter

from nowen_note.backend.core.dependencies import CurrentUser
from nowen_note.backend.schemas.auth import UserResponse
from nowen_note.backend.schemas.base import ApiResponse

router = APIRouter()


@router.get("", response_model=ApiResponse[UserResponse], summary="Current account")
async def get_me(user: CurrentUser) -> ApiResponse[UserResponse]:
    """Profile of the authenticated account."""
    return ApiResponse(data=UserResponse.model_validate(user))
