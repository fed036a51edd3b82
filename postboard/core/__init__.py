# Core infrastructure
from postboard.core.context import (
    RequestContext,
    clear_context,
    get_context,
    get_request_id,
    get_user_id,
    set_request_id,
    set_user_id,
)
from postboard.core.exceptions import AppError, BadRequestError, UnauthorizedError
from postboard.core.logging import configure_structlog, get_logger


__all__ = [
    "AppError",
    "BadRequestError",
    "RequestContext",
    "UnauthorizedError",
    "clear_context",
    "configure_structlog",
    "get_context",
    "get_logger",
    "get_request_id",
    "get_user_id",
    "set_request_id",
    "set_user_id",
]
