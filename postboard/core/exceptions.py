"""Domain error base classes and their HTTP status mapping.

Services raise these at the point of detection; a single exception handler
registered in ``postboard.main`` turns them into JSON responses.
"""

from fastapi import status


class AppError(Exception):
    """Base application error."""

    def __init__(self, message: str, code: str = "app_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class BadRequestError(AppError):
    """Invalid input, malformed identifier or missing document."""

    def __init__(self, message: str, code: str = "bad_request"):
        super().__init__(message, code)


class UnauthorizedError(AppError):
    """Missing or invalid credentials, or acting on someone else's content."""

    def __init__(self, message: str = "Unauthorized.", code: str = "unauthorized"):
        super().__init__(message, code)


status_map: dict[str, int] = {
    "bad_request": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_400_BAD_REQUEST,
    "user_exists": status.HTTP_400_BAD_REQUEST,
    "invalid_credentials": status.HTTP_400_BAD_REQUEST,
    "unauthorized": status.HTTP_401_UNAUTHORIZED,
    "invalid_token": status.HTTP_401_UNAUTHORIZED,
    "permission_denied": status.HTTP_401_UNAUTHORIZED,
}


def status_for(error: AppError) -> int:
    """Return the HTTP status for an application error.

    Unknown codes map to 500 so an unmapped error never looks like a
    client mistake.
    """
    return status_map.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
