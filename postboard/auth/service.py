"""Authentication service layer.

Business logic for:
- Signup and login, returning bearer tokens
- Identity resolution for the authentication gate
- Account deletion through the cascade coordinator
"""

from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from postboard.auth.models import User, utcnow
from postboard.auth.schemas import UserResponse
from postboard.auth.security import (
    InvalidTokenError,
    hash_password,
    issue_token,
    verify_password,
    verify_token,
)
from postboard.auth.validators import (
    validate_email,
    validate_name,
    validate_password,
)
from postboard.core.exceptions import BadRequestError


if TYPE_CHECKING:
    from postboard.auth.repository import UserRepository
    from postboard.cascade.coordinator import CascadeCoordinator, CascadeResult


logger = structlog.get_logger(__name__)


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class AuthError(BadRequestError):
    """Base authentication error."""


class InvalidCredentialsError(AuthError):
    """Same error for an unknown email and a wrong password."""

    def __init__(self, message: str = "Invalid credentials."):
        super().__init__(message, "invalid_credentials")


class UserExistsError(AuthError):
    """Email or name already registered."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, "user_exists")
        self.field = field


class UserNotFoundError(AuthError):
    def __init__(self, message: str = "No user found."):
        super().__init__(message, "not_found")


# ==============================================================================
# Auth Service
# ==============================================================================


class AuthService:
    """User signup, login and account lifecycle."""

    def __init__(self, users: "UserRepository", cascade: "CascadeCoordinator"):
        self.users = users
        self.cascade = cascade

    async def signup(
        self,
        email: str | None,
        name: str | None,
        password: str | None,
        confirm_password: str | None,
    ) -> str:
        """Register a user and return an issued token.

        Checks run in order: matching passwords, presence of every field,
        email format, password strength, name length, then uniqueness of
        email and name.

        Raises:
            AuthError: On the first failed check
            UserExistsError: If the email or name is taken
        """
        if password != confirm_password:
            raise AuthError("Invalid request: passwords don't match.")

        if not (email and name and password and confirm_password):
            raise AuthError(
                "Invalid request, must supply a name, an email and a password."
            )

        email_check = validate_email(email)
        if not email_check.valid:
            raise AuthError(email_check.message)

        password_check = validate_password(password)
        if not password_check.valid:
            raise AuthError(password_check.message)

        name_check = validate_name(name)
        if not name_check.valid:
            raise AuthError(name_check.message)

        user = User(
            email=email_check.formatted,
            name=name_check.formatted,
            password_hash=hash_password(password),
        )

        # Conditional writes: a claim on a taken email or name is not applied
        if not await self.users.claim_email(user.email, user.id):
            raise UserExistsError("Email address is already in use.", field="email")

        if not await self.users.claim_name(user.name, user.id):
            await self.users.release_email(user.email)
            raise UserExistsError("Name is already in use.", field="name")

        await self.users.insert(user)
        logger.info("user_signed_up", user_id=str(user.id))
        return issue_token(user.id)

    async def login(self, email: str | None, password: str | None) -> str:
        """Authenticate by email and password and return an issued token.

        Upgrades the stored hash when the Argon2 parameters changed.

        Raises:
            AuthError: If either field is missing
            InvalidCredentialsError: For an unknown email or a wrong password
        """
        if not email or not password:
            raise AuthError("Please provide an email and password.")

        user = await self.users.get_by_email(email.strip().lower())
        if not user:
            raise InvalidCredentialsError

        is_valid, new_hash = verify_password(password, user.password_hash)
        if not is_valid:
            logger.info("login_failed", user_id=str(user.id))
            raise InvalidCredentialsError

        if new_hash:
            user.password_hash = new_hash
            user.updated_at = utcnow()
            await self.users.update_password_hash(user.id, new_hash, user.updated_at)
            logger.info("password_rehashed", user_id=str(user.id))

        logger.info("user_logged_in", user_id=str(user.id))
        return issue_token(user.id)

    async def get_user(self, user_id: UUID) -> UserResponse | None:
        """Resolve a user id to its public projection."""
        user = await self.users.get_by_id(user_id)
        return UserResponse.from_user(user) if user else None

    async def authenticate_token(self, token: str) -> UserResponse:
        """Resolve a bearer token to the user it identifies.

        Raises:
            InvalidTokenError: If the token does not verify or the user no
                longer exists
        """
        user = await self.get_user(verify_token(token))
        if user is None:
            raise InvalidTokenError
        return user

    async def delete_user(self, user_id: UUID) -> "CascadeResult":
        """Delete a user together with everything they own.

        Raises:
            UserNotFoundError: If no such user exists
        """
        user = await self.users.get_by_id(user_id)
        if not user:
            raise UserNotFoundError
        return await self.cascade.delete_user(user)

    async def delete_users(
        self, user_ids: list[UUID] | None = None
    ) -> "CascadeResult":
        """Delete the given users, or every user when ``user_ids`` is None."""
        if user_ids is None:
            users = await self.users.list_all()
        else:
            users = []
            for user_id in user_ids:
                user = await self.users.get_by_id(user_id)
                if user:
                    users.append(user)
        return await self.cascade.delete_users(users)
