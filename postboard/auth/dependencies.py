"""FastAPI dependencies for authentication.

Provides dependency injection for:
- AuthService from app state
- Current user extraction from the bearer token
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from postboard.auth.schemas import UserResponse
from postboard.auth.security import InvalidTokenError
from postboard.auth.service import AuthService
from postboard.core.middleware import set_user_context


UNAUTHORIZED_MESSAGE = "Unauthorized."
AUTHENTICATION_INVALID_MESSAGE = "Authentication invalid."


async def get_auth_service(request: Request) -> AuthService:
    """Get auth service from app state."""
    app_state = request.app.state
    if not getattr(app_state, "auth_service", None):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication service unavailable",
        )
    return app_state.auth_service


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


def get_token_from_header(request: Request) -> str | None:
    """Extract Bearer token from Authorization header.

    Returns:
        Token string or None if the header is absent or malformed
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    expected_parts = 2
    parts = auth_header.split()
    if len(parts) != expected_parts or parts[0].lower() != "bearer":
        return None

    return parts[1]


async def get_current_user(
    token: Annotated[str | None, Depends(get_token_from_header)],
    auth_service: AuthServiceDep,
) -> UserResponse:
    """Resolve the bearer token to the acting user.

    Raises:
        HTTPException(401): "Unauthorized." when the header is missing or
            malformed, "Authentication invalid." when the token does not
            verify or its user no longer exists
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=UNAUTHORIZED_MESSAGE,
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user = await auth_service.authenticate_token(token)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=AUTHENTICATION_INVALID_MESSAGE,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    set_user_context(str(user.id))
    return user


CurrentUser = Annotated[UserResponse, Depends(get_current_user)]
