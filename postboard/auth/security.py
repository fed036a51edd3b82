"""Security utilities for authentication.

Provides:
- Password hashing with Argon2id (OWASP recommended)
- JWT issue and verification for bearer tokens
"""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerifyMismatchError
from jose import JWTError, jwt

from postboard.config.settings import get_settings
from postboard.core.exceptions import UnauthorizedError


# Argon2id configuration (OWASP recommended parameters)
# https://cheatsheetseries.owasp.org/cheatsheets/Password_Storage_Cheat_Sheet.html
_password_hasher = PasswordHasher(
    time_cost=2,  # 2 iterations
    memory_cost=19456,  # 19 MiB (19456 KiB)
    parallelism=1,  # Single thread
    hash_len=32,  # 32-byte output
    salt_len=16,  # 16-byte random salt
)


class InvalidTokenError(UnauthorizedError):
    """Token is malformed, expired, tampered with or of the wrong type."""

    def __init__(self, message: str = "Authentication invalid."):
        super().__init__(message, "invalid_token")


def hash_password(password: str) -> str:
    """Hash a password using Argon2id.

    The returned hash includes the algorithm parameters and salt,
    making it self-contained for verification.

    Example:
        >>> hashed = hash_password("Secret1")
        >>> hashed.startswith("$argon2id$")
        True
    """
    return _password_hasher.hash(password)


def verify_password(password: str, password_hash: str) -> tuple[bool, str | None]:
    """Verify a password against its hash.

    Also checks whether the hash needs rehashing because the hasher
    parameters changed since it was stored.

    Returns:
        Tuple of (is_valid, new_hash); ``new_hash`` is None unless a
        rehash is due.
    """
    try:
        _password_hasher.verify(password_hash, password)
    except (VerifyMismatchError, InvalidHashError):
        return False, None

    if _password_hasher.check_needs_rehash(password_hash):
        return True, hash_password(password)

    return True, None


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT access token.

    Args:
        data: Payload claims, typically ``{"sub": user_id}``
        expires_delta: Token lifetime (default from settings)

    Token payload includes the given claims plus ``exp``, ``iat`` and
    ``type="access"``.
    """
    settings = get_settings()

    now = datetime.now(UTC)
    expire = now + (
        expires_delta or timedelta(days=settings.auth_token_expire_days)
    )

    to_encode = data.copy()
    to_encode.update(
        {
            "exp": expire,
            "iat": now,
            "type": "access",
        }
    )

    return jwt.encode(
        to_encode,
        settings.auth_secret_key,
        algorithm=settings.auth_algorithm,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and validate an access token.

    Validates the signature, the expiration time and ``type == "access"``.

    Raises:
        JWTError: If token is invalid, expired, or wrong type
    """
    settings = get_settings()

    payload = jwt.decode(
        token,
        settings.auth_secret_key,
        algorithms=[settings.auth_algorithm],
    )

    if payload.get("type") != "access":
        msg = "Invalid token type: expected 'access'"
        raise JWTError(msg)

    return payload


def issue_token(user_id: UUID) -> str:
    """Issue a bearer token identifying ``user_id``."""
    return create_access_token({"sub": str(user_id)})


def verify_token(token: str) -> UUID:
    """Return the user id carried by ``token``.

    Raises:
        InvalidTokenError: If the token does not verify or its subject is
            not a user id.
    """
    try:
        payload = decode_access_token(token)
        return UUID(str(payload["sub"]))
    except (JWTError, KeyError, ValueError) as e:
        raise InvalidTokenError from e
