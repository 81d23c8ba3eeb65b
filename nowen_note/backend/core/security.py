"""
Security Utilities.

Password hashing and session tokens.

Stored password hashes come in two schemes:
    bcrypt  - "$2a$"/"$2b$"/"$2y$" prefixed, the only scheme ever written
    legacy  - bare SHA-256 hex digest, accepted for verification only so
              older accounts can log in once and be upgraded
"""

import hashlib
import hmac
from datetime import timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from nowen_note.backend.core.config import get_app_config, get_settings
from nowen_note.backend.core.exceptions import AuthenticationError
from nowen_note.backend.core.logging import get_logger
from nowen_note.backend.core.utils import utc_now

logger = get_logger(__name__)

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")

# bcrypt refuses longer inputs outright
BCRYPT_MAX_PASSWORD_BYTES = 72

INVALID_TOKEN_MESSAGE = "Invalid or expired token"


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Raises:
        ValueError: If the password is longer than BCRYPT_MAX_PASSWORD_BYTES
    """
    password_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def fits_bcrypt(password: str) -> bool:
    return len(password.encode("utf-8")) <= BCRYPT_MAX_PASSWORD_BYTES


def hash_password_legacy(password: str) -> str:
    """Unsalted SHA-256 hex digest used by older account records."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def is_legacy_hash(hashed_password: str) -> bool:
    """Return True when the stored hash is not a bcrypt hash."""
    return not hashed_password.startswith(BCRYPT_PREFIXES)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a bcrypt or legacy hash."""
    if is_legacy_hash(hashed_password):
        return hmac.compare_digest(hash_password_legacy(plain_password), hashed_password)
    if not fits_bcrypt(plain_password):
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Payload data to encode (must include "sub")
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    to_encode = data.copy()

    if expires_delta:
        expire = utc_now() + expires_delta
    else:
        expire = utc_now() + timedelta(minutes=jwt_config.access_token_expire_minutes)

    to_encode.update({"exp": expire, "type": "access", "aud": jwt_config.audience})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=jwt_config.algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a JWT access token.

    Every failure (bad signature, expiry, wrong audience, garbage input,
    wrong token type, missing subject) raises the same error so callers
    cannot tell the reasons apart.

    Raises:
        AuthenticationError: If token is invalid or expired
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[jwt_config.algorithm],
            audience=jwt_config.audience,
        )
    except JWTError as e:
        logger.debug("Token decode failed", extra={"error": str(e)})
        raise AuthenticationError(INVALID_TOKEN_MESSAGE)

    if payload.get("type") != "access" or not payload.get("sub"):
        logger.debug("Token payload rejected")
        raise AuthenticationError(INVALID_TOKEN_MESSAGE)
    return payload
