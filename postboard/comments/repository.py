"""Cassandra persistence for comments."""

from typing import TYPE_CHECKING
from uuid import UUID

from postboard.comments.models import Comment


if TYPE_CHECKING:
    from cassandra.cluster import Session


class CommentRepository:
    """Content store for comments."""

    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for better performance."""
        self._get_comment = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.comments WHERE id = ?"
        )
        self._get_all_comments = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.comments"
        )
        self._get_comments_by_post = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.comments WHERE post_id = ?"
        )
        self._get_comments_by_user = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.comments WHERE user_id = ?"
        )
        self._insert_comment = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.comments
            (id, post_id, user_id, content, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
        """)
        self._update_comment = self.session.prepare(f"""
            UPDATE {self.keyspace}.comments
            SET content = ?, updated_at = ?
            WHERE id = ?
        """)
        self._delete_comment = self.session.prepare(
            f"DELETE FROM {self.keyspace}.comments WHERE id = ?"
        )

    async def get(self, comment_id: UUID) -> Comment | None:
        result = await self.session.aexecute(self._get_comment, [comment_id])
        row = result[0] if result else None
        return Comment.from_row(row) if row else None

    async def list_all(self) -> list[Comment]:
        rows = await self.session.aexecute(self._get_all_comments)
        return [Comment.from_row(row) for row in rows]

    async def list_by_post(self, post_id: UUID) -> list[Comment]:
        """Comments on a post, oldest first."""
        rows = await self.session.aexecute(self._get_comments_by_post, [post_id])
        comments = [Comment.from_row(row) for row in rows]
        return sorted(comments, key=lambda c: (c.created_at, str(c.id)))

    async def list_by_user(self, user_id: UUID) -> list[Comment]:
        rows = await self.session.aexecute(self._get_comments_by_user, [user_id])
        return [Comment.from_row(row) for row in rows]

    async def insert(self, comment: Comment) -> None:
        await self.session.aexecute(
            self._insert_comment,
            [
                comment.id,
                comment.post_id,
                comment.user_id,
                comment.content,
                comment.created_at,
                comment.updated_at,
            ],
        )

    async def update(self, comment: Comment) -> None:
        await self.session.aexecute(
            self._update_comment,
            [comment.content, comment.updated_at, comment.id],
        )

    async def delete(self, comment: Comment) -> None:
        await self.session.aexecute(self._delete_comment, [comment.id])
