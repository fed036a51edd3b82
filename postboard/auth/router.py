"""Authentication API endpoints.

Provides routes for:
- Signup and login
- Deleting the caller's own account
"""

import structlog
from fastapi import APIRouter, status

from postboard.auth.dependencies import AuthServiceDep, CurrentUser
from postboard.auth.schemas import (
    LoginRequest,
    MessageResponse,
    SignupRequest,
    TokenResponse,
)


logger = structlog.get_logger(__name__)


router = APIRouter(prefix="/api/auth", tags=["auth"])
users_router = APIRouter(prefix="/api/users", tags=["users"])


@router.post(
    "/signup",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up",
    responses={400: {"description": "Validation error or email/name in use"}},
)
async def signup(data: SignupRequest, auth_service: AuthServiceDep) -> TokenResponse:
    """Register a new user and return a bearer token."""
    token = await auth_service.signup(
        email=data.email,
        name=data.name,
        password=data.password,
        confirm_password=data.confirm_password,
    )
    return TokenResponse(token=token)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in",
    responses={400: {"description": "Missing fields or invalid credentials"}},
)
async def login(data: LoginRequest, auth_service: AuthServiceDep) -> TokenResponse:
    """Authenticate with email and password and return a bearer token."""
    token = await auth_service.login(data.email, data.password)
    return TokenResponse(token=token)


@users_router.delete(
    "/me",
    response_model=MessageResponse,
    summary="Delete own account",
)
async def delete_me(user: CurrentUser, auth_service: AuthServiceDep) -> MessageResponse:
    """Delete the caller with all their posts, comments and likes."""
    result = await auth_service.delete_user(user.id)
    logger.info(
        "account_deleted",
        posts=result.posts,
        comments=result.comments,
        likes=result.likes,
    )
    return MessageResponse(message="User deleted.")
