"""Like toggling on posts and comments.

Liking a document twice removes the like; there is no separate unlike
operation.
"""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any
from uuid import UUID

import structlog

from postboard.auth.permissions import Identity
from postboard.core.exceptions import BadRequestError
from postboard.likes.models import Like, TargetKind, TargetRef
from postboard.utils.identifiers import parse_id


if TYPE_CHECKING:
    from postboard.comments.repository import CommentRepository
    from postboard.comments.schemas import CommentResponse
    from postboard.likes.repository import LikeRepository
    from postboard.posts.rendering import ContentRenderer
    from postboard.posts.repository import PostRepository
    from postboard.posts.schemas import PostResponse


logger = structlog.get_logger(__name__)


INVALID_TARGET_MESSAGE = "Like must belong to a comment or post."


class LikeError(BadRequestError):
    """Like target is invalid or missing."""

    def __init__(self, message: str = INVALID_TARGET_MESSAGE):
        super().__init__(message)


class LikeService:
    """Adds or removes the acting user's like on a post or comment."""

    def __init__(
        self,
        likes: "LikeRepository",
        posts: "PostRepository",
        comments: "CommentRepository",
        renderer: "ContentRenderer",
    ):
        self.likes = likes
        self.renderer = renderer
        self._loaders: dict[TargetKind, Callable[[UUID], Awaitable[Any]]] = {
            TargetKind.POST: posts.get,
            TargetKind.COMMENT: comments.get,
        }

    async def _render(self, kind: TargetKind, document: Any) -> Any:
        if kind is TargetKind.POST:
            return await self.renderer.post(document, with_likes=True)
        return await self.renderer.comment(document)

    async def handle_like(
        self,
        target_kind: TargetKind | str | None,
        target_id: str | UUID | None,
        acting_user: Identity,
    ) -> "tuple[PostResponse | CommentResponse, bool]":
        """Toggle the acting user's like on a document.

        Returns:
            The liked document with its likes resolved, and True if the like
            was created or False if it was removed

        Raises:
            LikeError: If the kind is unknown, the id malformed or the
                document missing
        """
        try:
            kind = TargetKind(target_kind)
        except ValueError as e:
            raise LikeError from e
        document_id = parse_id(target_id, INVALID_TARGET_MESSAGE)

        document = await self._loaders[kind](document_id)
        if document is None:
            raise LikeError

        target = TargetRef(kind, document.id)
        existing = await self.likes.get(acting_user.id, target)

        created = False
        if existing is None:
            like = Like(
                user_id=acting_user.id,
                receiver_id=document.user_id,
                target=target,
            )
            created = await self.likes.insert_if_absent(like)
            if not created:
                # A concurrent toggle inserted it first
                existing = await self.likes.get(acting_user.id, target)

        if existing is not None:
            await self.likes.delete(existing)

        logger.info(
            "like_created" if created else "like_removed",
            on_model=kind.value,
            on_document=str(document.id),
        )
        return await self._render(kind, document), created
