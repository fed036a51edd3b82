"""Database models for users.

Cassandra table definitions for:
- users: the user record, keyed by id
- users_by_email / users_by_name: uniqueness claims written with
  ``IF NOT EXISTS`` so two signups cannot take the same email or name

Tables are created via CQL statements in the database module.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4


USER_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.users (
    id UUID PRIMARY KEY,
    email TEXT,
    name TEXT,
    password_hash TEXT,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

USER_BY_EMAIL_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.users_by_email (
    email TEXT PRIMARY KEY,
    user_id UUID
)
"""

USER_BY_NAME_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.users_by_name (
    name TEXT PRIMARY KEY,
    user_id UUID
)
"""

AUTH_TABLES_CQL = [
    USER_TABLE_CQL,
    USER_BY_EMAIL_TABLE_CQL,
    USER_BY_NAME_TABLE_CQL,
]


def ensure_utc_aware(dt: datetime | None) -> datetime | None:
    """Ensure datetime is UTC-aware (Cassandra returns naive datetimes)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def utcnow() -> datetime:
    """Current time truncated to milliseconds, the precision Cassandra stores."""
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


@dataclass
class User:
    """A registered user.

    ``email`` is stored lower-cased; ``name`` as entered (trimmed).
    ``password_hash`` never leaves the service layer.
    """

    email: str
    name: str
    password_hash: str
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_row(cls, row: Any) -> "User":
        """Create User from Cassandra row."""
        return cls(
            id=row.id,
            email=row.email,
            name=row.name,
            password_hash=row.password_hash,
            created_at=ensure_utc_aware(row.created_at),
            updated_at=ensure_utc_aware(row.updated_at),
        )

    def __repr__(self) -> str:
        return f"<User {self.email}>"
