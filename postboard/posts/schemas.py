"""Pydantic schemas for posts.

Also holds the responses that pair a post with its comments, since those
embed both documents.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from postboard.auth.schemas import AuthorResponse
from postboard.comments.schemas import CommentResponse
from postboard.likes.schemas import LikeResponse
from postboard.posts.models import Post


# ==============================================================================
# Request Schemas
# ==============================================================================


class CreatePostRequest(BaseModel):
    """Request to create a post."""

    title: str | None = Field(None, description="Post title")
    content: str | None = Field(None, description="Post body")


class UpdatePostRequest(BaseModel):
    """Request to update a post. Omitted fields are left unchanged."""

    title: str | None = Field(None, description="New title")
    content: str | None = Field(None, description="New body")


# ==============================================================================
# Response Schemas
# ==============================================================================


class PostResponse(BaseModel):
    """Post with its owner resolved; likes and comments on the detail view."""

    id: UUID
    title: str
    content: str
    user: UUID
    author: AuthorResponse | None = None
    likes: list[LikeResponse] | None = None
    comments: list[CommentResponse] | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_post(
        cls,
        post: Post,
        author: AuthorResponse | None = None,
        likes: list[LikeResponse] | None = None,
        comments: list[CommentResponse] | None = None,
    ) -> "PostResponse":
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            user=post.user_id,
            author=author,
            likes=likes,
            comments=comments,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class PostEnvelope(BaseModel):
    post: PostResponse


class PostListResponse(BaseModel):
    """One page of matching posts."""

    posts: list[PostResponse]
    page: int
    limit: int
    total_count: int


class PostLikeResponse(BaseModel):
    """Post after a like toggle."""

    document: PostResponse


class CommentWithPostResponse(BaseModel):
    post: PostResponse
    comment: CommentResponse


class CommentListResponse(BaseModel):
    post: PostResponse
    comments: list[CommentResponse]


class CommentDetailResponse(BaseModel):
    """A comment with its owner, likes and post resolved."""

    comment: CommentResponse
    post: PostResponse
