"""Ownership-based authorization.

Posts and comments may only be changed or deleted by the user who
created them. There are no roles.
"""

from typing import Protocol
from uuid import UUID

from postboard.core.exceptions import UnauthorizedError


NOT_AUTHOR_MESSAGE = "Only the author can perform this action."


class Identity(Protocol):
    id: UUID


class PermissionDeniedError(UnauthorizedError):
    """Acting user does not own the document."""

    def __init__(self, message: str = NOT_AUTHOR_MESSAGE):
        super().__init__(message, "permission_denied")


def is_owner(acting_user: Identity | None, owner_id: UUID) -> bool:
    """Check whether ``acting_user`` is the owner identified by ``owner_id``."""
    return acting_user is not None and acting_user.id == owner_id


def authorize(acting_user: Identity | None, owner_id: UUID) -> None:
    """Allow the action only for the owner.

    Callers load the document first; a missing document is reported before
    authorization is attempted.

    Raises:
        PermissionDeniedError: If there is no acting user or it is not the
            owner.
    """
    if not is_owner(acting_user, owner_id):
        raise PermissionDeniedError
