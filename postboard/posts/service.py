"""Post service layer.

Business logic for:
- Post CRUD with ownership checks
- Detail view with comments and likes resolved
- Paginated search over all posts
"""

from typing import TYPE_CHECKING, Any
from uuid import UUID

import structlog

from postboard.auth.models import utcnow
from postboard.auth.permissions import Identity, authorize
from postboard.core.exceptions import BadRequestError
from postboard.posts.models import CONTENT_MAX_LENGTH, TITLE_MAX_LENGTH, Post
from postboard.posts.query import PostQuery, paginate
from postboard.posts.schemas import PostListResponse, PostResponse
from postboard.utils.identifiers import parse_id


if TYPE_CHECKING:
    from postboard.cascade.coordinator import CascadeCoordinator
    from postboard.posts.rendering import ContentRenderer
    from postboard.posts.repository import PostRepository


logger = structlog.get_logger(__name__)


INVALID_POST_ID_MESSAGE = "Invalid request, no post with that id."


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class PostError(BadRequestError):
    """Base post error."""


class PostNotFoundError(PostError):
    def __init__(self, message: str = "No post found."):
        super().__init__(message, "not_found")


def check_title_length(title: str | None) -> None:
    if title and len(title) > TITLE_MAX_LENGTH:
        raise PostError(f"Title can be maximum {TITLE_MAX_LENGTH} characters long.")


def check_content_length(content: str | None) -> None:
    if content and len(content) > CONTENT_MAX_LENGTH:
        raise PostError(
            f"Post content can be maximum {CONTENT_MAX_LENGTH} characters long."
        )


# ==============================================================================
# Post Service
# ==============================================================================


class PostService:
    """Posts and their listing."""

    def __init__(
        self,
        posts: "PostRepository",
        renderer: "ContentRenderer",
        cascade: "CascadeCoordinator",
    ):
        self.posts = posts
        self.renderer = renderer
        self.cascade = cascade

    async def load_post(self, post_id: str | UUID | None, message: str) -> Post:
        """Load a post, rejecting a malformed id with ``message``.

        Raises:
            BadRequestError: If ``post_id`` is not a valid id
            PostNotFoundError: If no such post exists
        """
        post = await self.posts.get(parse_id(post_id, message))
        if post is None:
            raise PostNotFoundError
        return post

    async def create_post(
        self,
        title: str | None,
        content: str | None,
        acting_user: Identity | None,
    ) -> PostResponse:
        """Create a post owned by ``acting_user``."""
        if not title or not content:
            raise PostError("You must supply a title and some content to your post.")
        if acting_user is None:
            raise PostError("Post must belong to a user.")
        check_title_length(title)
        check_content_length(content)

        post = Post(user_id=acting_user.id, title=title, content=content)
        await self.posts.insert(post)

        logger.info("post_created", post_id=str(post.id))
        return await self.renderer.post(post)

    async def update_post(
        self,
        post_id: str | UUID | None,
        acting_user: Identity | None,
        title: str | None = None,
        content: str | None = None,
    ) -> PostResponse:
        """Change the title and/or content of a post.

        Validation order: something to update, lengths, id format, existence,
        then ownership.
        """
        if not title and not content:
            raise PostError("You must supply something to update.")
        check_title_length(title)
        check_content_length(content)

        post = await self.load_post(post_id, INVALID_POST_ID_MESSAGE)
        authorize(acting_user, post.user_id)

        if title:
            post.title = title
        if content:
            post.content = content
        post.updated_at = utcnow()
        await self.posts.update(post)

        logger.info("post_updated", post_id=str(post.id))
        return await self.renderer.post(post)

    async def delete_post(
        self, post_id: str | UUID | None, acting_user: Identity | None
    ) -> None:
        """Delete a post with its comments and likes."""
        post = await self.load_post(post_id, INVALID_POST_ID_MESSAGE)
        authorize(acting_user, post.user_id)

        result = await self.cascade.delete_post(post)
        logger.info(
            "post_deleted",
            post_id=str(post.id),
            comments=result.comments,
            likes=result.likes,
        )

    async def get_post(self, post_id: str | UUID | None) -> PostResponse:
        """Post with owner, likes and comments (each with owner and likes)."""
        post = await self.load_post(post_id, INVALID_POST_ID_MESSAGE)
        return await self.renderer.post(post, with_likes=True, with_comments=True)

    async def get_posts(
        self,
        q: str | None = None,
        sort_by: str | None = None,
        direction: str | None = None,
        page: Any = None,
        limit: Any = None,
    ) -> PostListResponse:
        """Search, sort and page through all posts."""
        query = PostQuery.from_params(
            q=q, sort_by=sort_by, direction=direction, page=page, limit=limit
        )
        result = paginate(await self.posts.list_all(), query)

        return PostListResponse(
            posts=[await self.renderer.post(post) for post in result.posts],
            page=result.page,
            limit=result.limit,
            total_count=result.total_count,
        )
