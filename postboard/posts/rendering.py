"""Builds response documents with their derived relations resolved.

Owners, likes and comments are never stored on a document; they are
queried here when a response needs them.
"""

from typing import TYPE_CHECKING
from uuid import UUID

from postboard.auth.schemas import AuthorResponse
from postboard.comments.schemas import CommentResponse
from postboard.likes.models import TargetKind, TargetRef
from postboard.likes.schemas import LikeResponse
from postboard.posts.schemas import PostResponse


if TYPE_CHECKING:
    from postboard.auth.repository import UserRepository
    from postboard.comments.models import Comment
    from postboard.comments.repository import CommentRepository
    from postboard.likes.repository import LikeRepository
    from postboard.posts.models import Post


class ContentRenderer:
    def __init__(
        self,
        users: "UserRepository",
        comments: "CommentRepository",
        likes: "LikeRepository",
    ):
        self.users = users
        self.comments = comments
        self.likes = likes

    async def author(self, user_id: UUID) -> AuthorResponse | None:
        user = await self.users.get_by_id(user_id)
        return AuthorResponse.from_user(user) if user else None

    async def likes_on(self, target: TargetRef) -> list[LikeResponse]:
        likes = await self.likes.list_by_target(target)
        likes.sort(key=lambda like: (like.created_at, str(like.user_id)))
        return [LikeResponse.from_like(like) for like in likes]

    async def comment(self, comment: "Comment") -> CommentResponse:
        """Comment with its owner and likes."""
        return CommentResponse.from_comment(
            comment,
            author=await self.author(comment.user_id),
            likes=await self.likes_on(TargetRef(TargetKind.COMMENT, comment.id)),
        )

    async def post(
        self,
        post: "Post",
        *,
        with_likes: bool = False,
        with_comments: bool = False,
    ) -> PostResponse:
        """Post with its owner, and optionally its likes and comments."""
        likes = None
        if with_likes:
            likes = await self.likes_on(TargetRef(TargetKind.POST, post.id))

        comments = None
        if with_comments:
            comments = [
                await self.comment(c) for c in await self.comments.list_by_post(post.id)
            ]

        return PostResponse.from_post(
            post,
            author=await self.author(post.user_id),
            likes=likes,
            comments=comments,
        )
