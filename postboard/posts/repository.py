"""Cassandra persistence for posts."""

from typing import TYPE_CHECKING
from uuid import UUID

from postboard.posts.models import Post


if TYPE_CHECKING:
    from cassandra.cluster import Session


class PostRepository:
    """Content store for posts."""

    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for better performance."""
        self._get_post = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.posts WHERE id = ?"
        )
        self._get_all_posts = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.posts"
        )
        self._get_posts_by_user = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.posts WHERE user_id = ?"
        )
        self._insert_post = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.posts
            (id, user_id, title, content, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
        """)
        # Ownership is never updated
        self._update_post = self.session.prepare(f"""
            UPDATE {self.keyspace}.posts
            SET title = ?, content = ?, updated_at = ?
            WHERE id = ?
        """)
        self._delete_post = self.session.prepare(
            f"DELETE FROM {self.keyspace}.posts WHERE id = ?"
        )

    async def get(self, post_id: UUID) -> Post | None:
        result = await self.session.aexecute(self._get_post, [post_id])
        row = result[0] if result else None
        return Post.from_row(row) if row else None

    async def list_all(self) -> list[Post]:
        rows = await self.session.aexecute(self._get_all_posts)
        return [Post.from_row(row) for row in rows]

    async def list_by_user(self, user_id: UUID) -> list[Post]:
        rows = await self.session.aexecute(self._get_posts_by_user, [user_id])
        return [Post.from_row(row) for row in rows]

    async def insert(self, post: Post) -> None:
        await self.session.aexecute(
            self._insert_post,
            [
                post.id,
                post.user_id,
                post.title,
                post.content,
                post.created_at,
                post.updated_at,
            ],
        )

    async def update(self, post: Post) -> None:
        await self.session.aexecute(
            self._update_post,
            [post.title, post.content, post.updated_at, post.id],
        )

    async def delete(self, post: Post) -> None:
        await self.session.aexecute(self._delete_post, [post.id])
