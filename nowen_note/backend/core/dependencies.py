"""
FastAPI Dependencies.

Shared dependencies for request handling: the per-request database
session, the request ID, and the authenticated user.
"""

import uuid
from typing import Annotated

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from nowen_note.backend.core.config import get_app_config
from nowen_note.backend.core.database import get_db_session
from nowen_note.backend.core.exceptions import AuthenticationError
from nowen_note.backend.core.logging import get_logger
from nowen_note.backend.models.user import User
from nowen_note.backend.services.auth import AuthService

logger = get_logger(__name__)

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]

bearer_scheme = HTTPBearer(auto_error=False)


async def get_request_id(request: Request) -> str:
    """
    The request ID RequestContextMiddleware assigned to this request.

    Falls back to the header, then a fresh ID, when the middleware is
    not installed.
    """
    request_id = getattr(request.state, "request_id", None)
    return request_id or request.headers.get("x-request-id") or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


async def get_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    """
    Session token from the Authorization header, else from the cookie.

    Returns None when neither carries a token.
    """
    if credentials is not None and credentials.credentials:
        return credentials.credentials

    app_config = get_app_config()
    if app_config.features.auth_cookie_enabled:
        return request.cookies.get(app_config.security.auth.cookie_name) or None
    return None


Token = Annotated[str | None, Depends(get_token)]


async def get_current_user(token: Token, db: DbSession) -> User:
    """
    Resolve the authenticated account.

    Raises:
        AuthenticationError: If the token is missing, invalid, expired or
            belongs to an account that no longer exists
    """
    if not token:
        raise AuthenticationError()

    user = await AuthService(db).get_user_from_token(token)
    structlog.contextvars.bind_contextvars(user_id=user.id)
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
