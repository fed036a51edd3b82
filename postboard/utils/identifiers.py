"""Parsing of client-supplied document identifiers."""

from uuid import UUID

from postboard.core.exceptions import BadRequestError


def parse_id(value: str | UUID | None, message: str) -> UUID:
    """Parse ``value`` as a UUID.

    Args:
        value: Identifier from a path or body.
        message: Error message used when the identifier is malformed.

    Raises:
        BadRequestError: If ``value`` is empty or not a UUID.
    """
    if isinstance(value, UUID):
        return value
    if not value:
        raise BadRequestError(message)
    try:
        return UUID(str(value))
    except ValueError as e:
        raise BadRequestError(message) from e
