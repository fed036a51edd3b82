"""Dependent deletion across users, posts, comments and likes.

Every deletion reads the current dependents first and removes them
children first; the parent row goes last. A failure therefore leaves the
parent in place and the same deletion can simply be retried.

    user    -> its posts (each cascading) -> its comments (each cascading)
               -> its likes and likes it received -> user
    post    -> its comments (each cascading) -> likes on the post -> post
    comment -> likes on the comment -> comment

Nothing below a user ever deletes a user, so the graph has no cycles.
"""

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from postboard.likes.models import TargetKind, TargetRef


if TYPE_CHECKING:
    from postboard.auth.models import User
    from postboard.auth.repository import UserRepository
    from postboard.comments.models import Comment
    from postboard.comments.repository import CommentRepository
    from postboard.likes.repository import LikeRepository
    from postboard.posts.models import Post
    from postboard.posts.repository import PostRepository


logger = structlog.get_logger(__name__)


@dataclass
class CascadeResult:
    """Number of documents removed by one cascade."""

    users: int = 0
    posts: int = 0
    comments: int = 0
    likes: int = 0


class CascadeCoordinator:
    """Runs the cascading deletes over the four stores."""

    def __init__(
        self,
        users: "UserRepository",
        posts: "PostRepository",
        comments: "CommentRepository",
        likes: "LikeRepository",
    ):
        self.users = users
        self.posts = posts
        self.comments = comments
        self.likes = likes

    # ==========================================================================
    # Public entry points
    # ==========================================================================

    async def delete_user(self, user: "User") -> CascadeResult:
        return await self.delete_users([user])

    async def delete_users(self, users: "list[User]") -> CascadeResult:
        result = CascadeResult()
        for user in users:
            await self._run("user", user.id, self._delete_user(user, result))
        return result

    async def delete_post(self, post: "Post") -> CascadeResult:
        return await self.delete_posts([post])

    async def delete_posts(self, posts: "list[Post]") -> CascadeResult:
        result = CascadeResult()
        for post in posts:
            await self._run("post", post.id, self._delete_post(post, result))
        return result

    async def delete_comment(self, comment: "Comment") -> CascadeResult:
        return await self.delete_comments([comment])

    async def delete_comments(self, comments: "list[Comment]") -> CascadeResult:
        result = CascadeResult()
        for comment in comments:
            await self._run(
                "comment", comment.id, self._delete_comment(comment, result)
            )
        return result

    async def delete_all(self) -> CascadeResult:
        """Delete every user, post, comment and like.

        Users go first through their own cascade. Whatever is still left
        afterwards, such as content whose owner row is already gone, is then
        swept store by store.
        """
        result = CascadeResult()
        for user in await self.users.list_all():
            await self._run("user", user.id, self._delete_user(user, result))
        for post in await self.posts.list_all():
            await self._run("post", post.id, self._delete_post(post, result))
        for comment in await self.comments.list_all():
            await self._run(
                "comment", comment.id, self._delete_comment(comment, result)
            )

        likes = await self.likes.list_all()
        await self.likes.delete_many(likes)
        result.likes += len(likes)
        return result

    # ==========================================================================
    # Cascade steps
    # ==========================================================================

    async def _run(
        self, kind: str, document_id: UUID, step: Awaitable[None]
    ) -> None:
        try:
            await step
        except Exception:
            logger.exception("cascade_failed", kind=kind, document_id=str(document_id))
            raise
        logger.info("cascade_completed", kind=kind, document_id=str(document_id))

    async def _delete_user(self, user: "User", result: CascadeResult) -> None:
        for post in await self.posts.list_by_user(user.id):
            await self._delete_post(post, result)

        # Comments on other users' posts
        for comment in await self.comments.list_by_user(user.id):
            await self._delete_comment(comment, result)

        # Its own likes, plus any like on its content that the target
        # cascades above could not see
        likes = {
            (like.user_id, like.target): like
            for like in await self.likes.list_by_user(user.id)
            + await self.likes.list_by_receiver(user.id)
        }
        await self.likes.delete_many(list(likes.values()))
        result.likes += len(likes)

        await self.users.delete(user)
        result.users += 1

    async def _delete_post(self, post: "Post", result: CascadeResult) -> None:
        for comment in await self.comments.list_by_post(post.id):
            await self._delete_comment(comment, result)

        likes = await self.likes.list_by_target(TargetRef(TargetKind.POST, post.id))
        await self.likes.delete_many(likes)
        result.likes += len(likes)

        await self.posts.delete(post)
        result.posts += 1

    async def _delete_comment(self, comment: "Comment", result: CascadeResult) -> None:
        likes = await self.likes.list_by_target(
            TargetRef(TargetKind.COMMENT, comment.id)
        )
        await self.likes.delete_many(likes)
        result.likes += len(likes)

        await self.comments.delete(comment)
        result.comments += 1
