"""Cassandra persistence for users and their uniqueness claims."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from cassandra.query import BatchStatement, BatchType

from postboard.auth.models import User
from postboard.core.database import was_applied


if TYPE_CHECKING:
    from cassandra.cluster import Session


class UserRepository:
    """Credential store.

    Email and name uniqueness is claimed with ``INSERT ... IF NOT EXISTS``
    on the lookup tables before the user row itself is written.
    """

    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for better performance."""
        self._get_user_by_id = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.users WHERE id = ?"
        )
        self._get_all_users = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.users"
        )
        self._insert_user = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.users
            (id, email, name, password_hash, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
        """)
        self._update_user_password = self.session.prepare(f"""
            UPDATE {self.keyspace}.users
            SET password_hash = ?, updated_at = ?
            WHERE id = ?
        """)
        self._delete_user = self.session.prepare(
            f"DELETE FROM {self.keyspace}.users WHERE id = ?"
        )

        # Uniqueness claims
        self._get_email_claim = self.session.prepare(
            f"SELECT user_id FROM {self.keyspace}.users_by_email WHERE email = ?"
        )
        self._claim_email = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.users_by_email (email, user_id)
            VALUES (?, ?) IF NOT EXISTS
        """)
        self._claim_name = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.users_by_name (name, user_id)
            VALUES (?, ?) IF NOT EXISTS
        """)
        self._release_email = self.session.prepare(
            f"DELETE FROM {self.keyspace}.users_by_email WHERE email = ?"
        )
        self._release_name = self.session.prepare(
            f"DELETE FROM {self.keyspace}.users_by_name WHERE name = ?"
        )

    async def get_by_id(self, user_id: UUID) -> User | None:
        result = await self.session.aexecute(self._get_user_by_id, [user_id])
        row = result[0] if result else None
        return User.from_row(row) if row else None

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.aexecute(self._get_email_claim, [email])
        row = result[0] if result else None
        return await self.get_by_id(row.user_id) if row else None

    async def list_all(self) -> list[User]:
        rows = await self.session.aexecute(self._get_all_users)
        return [User.from_row(row) for row in rows]

    async def claim_email(self, email: str, user_id: UUID) -> bool:
        """Reserve ``email`` for ``user_id``. False if already taken."""
        result = await self.session.aexecute(self._claim_email, [email, user_id])
        return was_applied(result)

    async def claim_name(self, name: str, user_id: UUID) -> bool:
        """Reserve ``name`` for ``user_id``. False if already taken."""
        result = await self.session.aexecute(self._claim_name, [name, user_id])
        return was_applied(result)

    async def release_email(self, email: str) -> None:
        await self.session.aexecute(self._release_email, [email])

    async def insert(self, user: User) -> None:
        await self.session.aexecute(
            self._insert_user,
            [
                user.id,
                user.email,
                user.name,
                user.password_hash,
                user.created_at,
                user.updated_at,
            ],
        )

    async def update_password_hash(
        self, user_id: UUID, password_hash: str, updated_at: datetime
    ) -> None:
        await self.session.aexecute(
            self._update_user_password, [password_hash, updated_at, user_id]
        )

    async def delete(self, user: User) -> None:
        """Delete the user row and release both claims atomically."""
        batch = BatchStatement(batch_type=BatchType.LOGGED)
        batch.add(self._delete_user, [user.id])
        batch.add(self._release_email, [user.email])
        batch.add(self._release_name, [user.name])
        await self.session.aexecute(batch)
