"""Pydantic schemas for comments.

``content`` is optional in requests; emptiness and length are checked in
``CommentService`` so each operation reports its own message.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from postboard.auth.schemas import AuthorResponse
from postboard.comments.models import Comment
from postboard.likes.schemas import LikeResponse


# ==============================================================================
# Request Schemas
# ==============================================================================


class CreateCommentRequest(BaseModel):
    """Request to comment on a post."""

    content: str | None = Field(None, description="Comment text")


class UpdateCommentRequest(BaseModel):
    """Request to replace a comment's text."""

    content: str | None = Field(None, description="New comment text")


# ==============================================================================
# Response Schemas
# ==============================================================================


class CommentResponse(BaseModel):
    """Comment with its owner and likes resolved."""

    id: UUID
    content: str
    user: UUID
    post: UUID
    author: AuthorResponse | None = None
    likes: list[LikeResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_comment(
        cls,
        comment: Comment,
        author: AuthorResponse | None = None,
        likes: list[LikeResponse] | None = None,
    ) -> "CommentResponse":
        return cls(
            id=comment.id,
            content=comment.content,
            user=comment.user_id,
            post=comment.post_id,
            author=author,
            likes=likes or [],
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )


class CommentEnvelope(BaseModel):
    comment: CommentResponse


class CommentLikeResponse(BaseModel):
    """Comment after a like toggle."""

    document: CommentResponse
