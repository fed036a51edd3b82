"""Cassandra persistence for likes."""

from typing import TYPE_CHECKING
from uuid import UUID

from cassandra.query import BatchStatement, BatchType

from postboard.core.database import was_applied
from postboard.likes.models import Like, TargetRef


if TYPE_CHECKING:
    from cassandra.cluster import Session


class LikeRepository:
    """Reaction store.

    The ``likes`` primary key is (user_id, on_model, on_document), so a
    second insert of the same tuple is rejected by the conditional write.
    """

    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for better performance."""
        self._get_like = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.likes
            WHERE user_id = ? AND on_model = ? AND on_document = ?
        """)
        self._get_all_likes = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.likes"
        )
        self._get_likes_by_user = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.likes WHERE user_id = ?"
        )
        self._get_likes_by_receiver = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.likes WHERE receiver_id = ?"
        )
        self._get_likes_by_target = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.likes_by_target
            WHERE on_model = ? AND on_document = ?
        """)
        self._insert_like = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.likes
            (user_id, on_model, on_document, receiver_id, created_at)
            VALUES (?, ?, ?, ?, ?) IF NOT EXISTS
        """)
        self._insert_like_by_target = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.likes_by_target
            (on_model, on_document, user_id, receiver_id, created_at)
            VALUES (?, ?, ?, ?, ?)
        """)
        self._delete_like = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.likes
            WHERE user_id = ? AND on_model = ? AND on_document = ?
        """)
        self._delete_like_by_target = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.likes_by_target
            WHERE on_model = ? AND on_document = ? AND user_id = ?
        """)

    async def get(self, user_id: UUID, target: TargetRef) -> Like | None:
        result = await self.session.aexecute(
            self._get_like, [user_id, target.kind.value, target.id]
        )
        row = result[0] if result else None
        return Like.from_row(row) if row else None

    async def list_by_target(self, target: TargetRef) -> list[Like]:
        rows = await self.session.aexecute(
            self._get_likes_by_target, [target.kind.value, target.id]
        )
        return [Like.from_row(row) for row in rows]

    async def list_all(self) -> list[Like]:
        rows = await self.session.aexecute(self._get_all_likes)
        return [Like.from_row(row) for row in rows]

    async def list_by_user(self, user_id: UUID) -> list[Like]:
        rows = await self.session.aexecute(self._get_likes_by_user, [user_id])
        return [Like.from_row(row) for row in rows]

    async def list_by_receiver(self, receiver_id: UUID) -> list[Like]:
        rows = await self.session.aexecute(self._get_likes_by_receiver, [receiver_id])
        return [Like.from_row(row) for row in rows]

    async def insert_if_absent(self, like: Like) -> bool:
        """Insert ``like`` unless the same (user, target) already exists.

        Returns:
            True if this call created the like.
        """
        result = await self.session.aexecute(
            self._insert_like,
            [
                like.user_id,
                like.on_model,
                like.on_document,
                like.receiver_id,
                like.created_at,
            ],
        )
        if not was_applied(result):
            return False

        try:
            await self.session.aexecute(
                self._insert_like_by_target,
                [
                    like.on_model,
                    like.on_document,
                    like.user_id,
                    like.receiver_id,
                    like.created_at,
                ],
            )
        except Exception:
            # Target cascades only see likes through the mirror table
            await self.session.aexecute(
                self._delete_like,
                [like.user_id, like.on_model, like.on_document],
            )
            raise
        return True

    async def delete(self, like: Like) -> None:
        await self.delete_many([like])

    async def delete_many(self, likes: list[Like]) -> None:
        """Delete ``likes`` from both tables in one logged batch."""
        if not likes:
            return

        batch = BatchStatement(batch_type=BatchType.LOGGED)
        for like in likes:
            batch.add(
                self._delete_like,
                [like.user_id, like.on_model, like.on_document],
            )
            batch.add(
                self._delete_like_by_target,
                [like.on_model, like.on_document, like.user_id],
            )
        await self.session.aexecute(batch)
