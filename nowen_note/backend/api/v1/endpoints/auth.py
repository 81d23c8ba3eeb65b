"""
Auth API Endpoints.

Login, logout, session verification and account security.
"""

from fastapi import APIRouter, Response

from nowen_note.backend.core.config import get_app_config
from nowen_note.backend.core.dependencies import CurrentUser, DbSession, Token
from nowen_note.backend.schemas.auth import (
    ChangePasswordRequest,
    FactoryResetRequest,
    LoginRequest,
    TokenResponse,
    UserResponse,
)
from nowen_note.backend.schemas.base import ApiResponse, SuccessMessage
from nowen_note.backend.services.auth import AuthService

router = APIRouter()


def _set_session_cookie(response: Response, token: str) -> None:
    app_config = get_app_config()
    if not app_config.features.auth_cookie_enabled:
        return
    auth_config = app_config.security.auth
    response.set_cookie(
        key=auth_config.cookie_name,
        value=token,
        max_age=app_config.security.jwt.access_token_expire_minutes * 60,
        httponly=True,
        secure=auth_config.cookie_secure,
        samesite="lax",
    )


@router.post(
    "/login",
    response_model=ApiResponse[TokenResponse],
    summary="Log in",
    description="Exchange username and password for a session token.",
)
async def login(
    data: LoginRequest,
    response: Response,
    db: DbSession,
) -> ApiResponse[TokenResponse]:
    """Log in and receive a token (also set as an httponly cookie)."""
    token, user = await AuthService(db).login(data.username, data.password)
    _set_session_cookie(response, token)
    return ApiResponse(
        data=TokenResponse(token=token, user=UserResponse.model_validate(user))
    )


@router.post(
    "/logout",
    response_model=ApiResponse[SuccessMessage],
    summary="Log out",
)
async def logout(response: Response) -> ApiResponse[SuccessMessage]:
    """Clear the session cookie. Bearer tokens simply expire."""
    response.delete_cookie(get_app_config().security.auth.cookie_name)
    return ApiResponse(data=SuccessMessage(message="Logged out"))


@router.get(
    "/verify",
    response_model=ApiResponse[UserResponse],
    summary="Verify session",
    description="Return the account behind the current token, or 401.",
)
async def verify(user: CurrentUser) -> ApiResponse[UserResponse]:
    """Verify the current token."""
    return ApiResponse(data=UserResponse.model_validate(user))


@router.post(
    "/change-password",
    response_model=ApiResponse[UserResponse],
    summary="Change username or password",
)
async def change_password(
    data: ChangePasswordRequest,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[UserResponse]:
    """Change credentials after re-entering the current password."""
    updated = await AuthService(db).change_credentials(user, data)
    return ApiResponse(data=UserResponse.model_validate(updated))


@router.post(
    "/factory-reset",
    response_model=ApiResponse[SuccessMessage],
    summary="Factory reset",
    description='Delete all content and restore the default login. Requires confirm_text "RESET".',
)
async def factory_reset(
    data: FactoryResetRequest,
    token: Token,
    db: DbSession,
) -> ApiResponse[SuccessMessage]:
    """Wipe the caller's data in one transaction."""
    await AuthService(db).factory_reset(token, data.confirm_text)
    return ApiResponse(data=SuccessMessage(message="Factory reset completed"))
