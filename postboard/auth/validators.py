"""Validation utilities for signup input."""

import re
from typing import NamedTuple


# ==============================================================================
# Constants for validation rules
# ==============================================================================

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 100

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
# At least one lowercase, one uppercase and one digit
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).+$")

INVALID_EMAIL_MESSAGE = "Must submit a valid email address."
INVALID_PASSWORD_MESSAGE = (
    "Passwords must contain at least 6 characters and should contain an "
    "uppercase, lowercase and numeric value."
)
INVALID_NAME_MESSAGE = (
    f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters."
)


class ValidationResult(NamedTuple):
    """Result of a validation check."""

    valid: bool
    message: str | None = None
    formatted: str | None = None


def normalize_email(email: str) -> str:
    """Trim and lower-case an email address."""
    return email.strip().lower()


def validate_email(email: str) -> ValidationResult:
    """Basic email format validation.

    Examples:
        >>> validate_email("User@Example.com ")
        ValidationResult(valid=True, message=None, formatted='user@example.com')
        >>> validate_email("invalid-email").valid
        False
    """
    normalized = normalize_email(email)
    if EMAIL_PATTERN.match(normalized):
        return ValidationResult(True, formatted=normalized)
    return ValidationResult(False, INVALID_EMAIL_MESSAGE)


def validate_password(password: str) -> ValidationResult:
    """Validate password strength.

    Requirements:
    - Between 6 and 100 characters
    - At least one uppercase letter, one lowercase letter and one digit
    """
    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        return ValidationResult(False, INVALID_PASSWORD_MESSAGE)

    if not PASSWORD_PATTERN.match(password):
        return ValidationResult(False, INVALID_PASSWORD_MESSAGE)

    return ValidationResult(True)


def validate_name(name: str) -> ValidationResult:
    """Validate a display name, trimmed, 2 to 50 characters."""
    trimmed = name.strip()
    if not NAME_MIN_LENGTH <= len(trimmed) <= NAME_MAX_LENGTH:
        return ValidationResult(False, INVALID_NAME_MESSAGE)
    return ValidationResult(True, formatted=trimmed)
