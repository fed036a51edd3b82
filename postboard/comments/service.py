"""Comment service layer.

Business logic for:
- Commenting on posts
- Editing and deleting own comments
- Reading a comment or all comments on a post
"""

from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from postboard.auth.models import utcnow
from postboard.auth.permissions import Identity, authorize
from postboard.comments.models import CONTENT_MAX_LENGTH, Comment
from postboard.core.exceptions import BadRequestError
from postboard.posts.schemas import (
    CommentDetailResponse,
    CommentListResponse,
    CommentWithPostResponse,
)
from postboard.utils.identifiers import parse_id


if TYPE_CHECKING:
    from postboard.cascade.coordinator import CascadeCoordinator
    from postboard.comments.repository import CommentRepository
    from postboard.comments.schemas import CommentResponse
    from postboard.posts.models import Post
    from postboard.posts.rendering import ContentRenderer
    from postboard.posts.repository import PostRepository


logger = structlog.get_logger(__name__)


CONTENT_TOO_LONG_MESSAGE = (
    f"Your comment content can not be longer than {CONTENT_MAX_LENGTH} characters."
)
FETCH_COMMENT_MESSAGE = "You must supply a correct comment to fetch."


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class CommentError(BadRequestError):
    """Base comment error."""


class CommentNotFoundError(CommentError):
    def __init__(self, message: str = "No comment found with that id."):
        super().__init__(message, "not_found")


class CommentPostNotFoundError(CommentError):
    def __init__(self, message: str = "No post found."):
        super().__init__(message, "not_found")


# ==============================================================================
# Comment Service
# ==============================================================================


class CommentService:
    """Comments on posts."""

    def __init__(
        self,
        comments: "CommentRepository",
        posts: "PostRepository",
        renderer: "ContentRenderer",
        cascade: "CascadeCoordinator",
    ):
        self.comments = comments
        self.posts = posts
        self.renderer = renderer
        self.cascade = cascade

    async def _load_post(self, post_id: UUID) -> "Post":
        post = await self.posts.get(post_id)
        if post is None:
            raise CommentPostNotFoundError
        return post

    async def load_comment(
        self, comment_id: str | UUID | None, message: str = FETCH_COMMENT_MESSAGE
    ) -> Comment:
        """Load a comment, rejecting a malformed id with ``message``."""
        comment = await self.comments.get(parse_id(comment_id, message))
        if comment is None:
            raise CommentNotFoundError
        return comment

    async def create_comment(
        self,
        content: str | None,
        post_id: str | UUID | None,
        acting_user: Identity,
    ) -> CommentWithPostResponse:
        """Comment on a post.

        Returns:
            The post and the new comment
        """
        post_uuid = parse_id(post_id, "Comment must belong to a post.")
        if not content:
            raise CommentError("You must add some content to your comment.")
        if len(content) > CONTENT_MAX_LENGTH:
            raise CommentError(CONTENT_TOO_LONG_MESSAGE)

        post = await self._load_post(post_uuid)

        comment = Comment(post_id=post.id, user_id=acting_user.id, content=content)
        await self.comments.insert(comment)

        logger.info("comment_created", comment_id=str(comment.id), post_id=str(post.id))
        return CommentWithPostResponse(
            post=await self.renderer.post(post),
            comment=await self.renderer.comment(comment),
        )

    async def update_comment(
        self,
        content: str | None,
        comment_id: str | UUID | None,
        acting_user: Identity,
    ) -> "CommentResponse":
        comment_uuid = parse_id(comment_id, "You must supply a comment to update.")
        if not content:
            raise CommentError("You must add some content to update your comment.")
        if len(content) > CONTENT_MAX_LENGTH:
            raise CommentError(CONTENT_TOO_LONG_MESSAGE)

        comment = await self.load_comment(comment_uuid)
        authorize(acting_user, comment.user_id)

        comment.content = content
        comment.updated_at = utcnow()
        await self.comments.update(comment)

        logger.info("comment_updated", comment_id=str(comment.id))
        return await self.renderer.comment(comment)

    async def delete_comment(
        self, comment_id: str | UUID | None, acting_user: Identity
    ) -> None:
        """Delete a comment with its likes."""
        comment = await self.load_comment(comment_id)
        authorize(acting_user, comment.user_id)

        result = await self.cascade.delete_comment(comment)
        logger.info("comment_deleted", comment_id=str(comment.id), likes=result.likes)

    async def get_comment(self, comment_id: str | UUID | None) -> CommentDetailResponse:
        comment = await self.load_comment(comment_id)
        post = await self.posts.get(comment.post_id)
        if post is None:
            raise CommentPostNotFoundError

        return CommentDetailResponse(
            comment=await self.renderer.comment(comment),
            post=await self.renderer.post(post),
        )

    async def get_comments(self, post_id: str | UUID | None) -> CommentListResponse:
        """All comments on a post, oldest first."""
        post = await self._load_post(
            parse_id(post_id, "You must supply a correct post to fetch.")
        )
        comments = await self.comments.list_by_post(post.id)

        return CommentListResponse(
            post=await self.renderer.post(post),
            comments=[await self.renderer.comment(c) for c in comments],
        )
