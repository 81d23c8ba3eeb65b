"""
Auth Service.

Login, session verification and account management for the single
account an install usually has.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from nowen_note.backend.core.config import get_app_config
from nowen_note.backend.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ValidationError,
)
from nowen_note.backend.core.security import (
    BCRYPT_MAX_PASSWORD_BYTES,
    INVALID_TOKEN_MESSAGE,
    create_access_token,
    decode_token,
    fits_bcrypt,
    hash_password,
    is_legacy_hash,
    verify_password,
)
from nowen_note.backend.models.user import User
from nowen_note.backend.repositories.note import NoteRepository
from nowen_note.backend.repositories.notebook import NotebookRepository
from nowen_note.backend.repositories.search import SearchRepository
from nowen_note.backend.repositories.tag import TagRepository
from nowen_note.backend.repositories.task import TaskRepository
from nowen_note.backend.repositories.user import UserRepository
from nowen_note.backend.schemas.auth import ChangePasswordRequest
from nowen_note.backend.services.base import BaseService

LOGIN_FAILED_MESSAGE = "Invalid username or password"


class AuthService(BaseService):
    """Service for authentication and account management."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.users = UserRepository(session)

    async def login(self, username: str, password: str) -> tuple[str, User]:
        """
        Check credentials and issue a session token.

        A correct password stored under the legacy scheme is rehashed
        with bcrypt before the token is issued.

        Raises:
            AuthenticationError: If the username or password is wrong
        """
        user = await self.users.get_by_username(username)
        if user is None or not verify_password(password, user.password_hash):
            self._log_operation("Login failed", username=username)
            raise AuthenticationError(LOGIN_FAILED_MESSAGE)

        # Over-long legacy passwords stay on the old scheme; bcrypt cannot hold them
        if is_legacy_hash(user.password_hash) and fits_bcrypt(password):
            self._log_operation("Upgrading legacy password hash", user_id=user.id)
            await self.users.apply(user, password_hash=hash_password(password))

        token = create_access_token({"sub": user.id, "username": user.username})
        self._log_operation("Login succeeded", user_id=user.id)
        return token, user

    async def get_user_from_token(self, token: str) -> User:
        """
        Resolve a token to its account.

        Raises:
            AuthenticationError: For any invalid token or a deleted account
        """
        payload = decode_token(token)
        user = await self.users.get_by_id_or_none(payload["sub"])
        if user is None:
            raise AuthenticationError(INVALID_TOKEN_MESSAGE)
        return user

    async def change_credentials(self, user: User, data: ChangePasswordRequest) -> User:
        """
        Change the username and/or password after re-checking the current one.

        Raises:
            ValidationError: If nothing is to be changed or the new password is too short or too long
            AuthorizationError: If the current password is wrong
            ConflictError: If the new username belongs to another account
        """
        auth_config = get_app_config().security.auth
        new_username = (data.new_username or "").strip()
        new_password = data.new_password or ""

        if not new_username and not new_password:
            raise ValidationError("Provide a new username or a new password")
        if new_password:
            self._validate_string_length(
                new_password,
                "new_password",
                min_length=auth_config.password_min_length,
            )
            if not fits_bcrypt(new_password):
                raise ValidationError(
                    "new_password too long",
                    details={"new_password": f"Maximum length is {BCRYPT_MAX_PASSWORD_BYTES} bytes"},
                )
        if not verify_password(data.current_password, user.password_hash):
            raise AuthorizationError("Current password is incorrect")

        changes: dict[str, str] = {}
        if new_username and new_username != user.username:
            if await self.users.username_taken(new_username, exclude_id=user.id):
                raise ConflictError("Username already taken", details={"username": new_username})
            changes["username"] = new_username
        if new_password:
            changes["password_hash"] = hash_password(new_password)

        self._log_operation("Changing credentials", user_id=user.id, fields=sorted(changes))
        return await self._execute_db_operation(
            "change_credentials",
            self.users.apply(user, **changes),
        )

    async def factory_reset(self, token: str | None, confirm_text: str) -> None:
        """
        Wipe all of the caller's content and restore the default login.

        The token is checked here rather than by the auth dependency so
        the endpoint stays usable from the login screen flow. Search
        entries, tag joins, tasks, notes, tags and notebooks are removed
        and the account is reset to the default credentials, all in the
        current transaction.

        Raises:
            AuthenticationError: If the token is missing or invalid
            ValidationError: If confirm_text is not exactly the reset phrase
        """
        if not token:
            raise AuthenticationError()
        user = await self.get_user_from_token(token)

        auth_config = get_app_config().security.auth
        if not confirm_text:
            raise ValidationError("Confirmation text required")
        if confirm_text != auth_config.factory_reset_phrase:
            raise ValidationError("Confirmation text does not match")

        self._log_operation("Factory reset started", user_id=user.id)
        await SearchRepository(self.session).remove_for_user(user.id)
        await TagRepository(self.session).delete_joins_for_user(user.id)
        await TaskRepository(self.session).delete_all_for_user(user.id)
        await NoteRepository(self.session).delete_all_for_user(user.id)
        await TagRepository(self.session).delete_all_for_user(user.id)
        await NotebookRepository(self.session).delete_all_for_user(user.id)
        await self._execute_db_operation(
            "factory_reset",
            self.users.apply(
                user,
                username=auth_config.default_username,
                password_hash=hash_password(auth_config.default_password),
            ),
        )
        self._log_operation("Factory reset completed", user_id=user.id)
