"""Database models for posts."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from postboard.auth.models import ensure_utc_aware, utcnow


TITLE_MAX_LENGTH = 100
CONTENT_MAX_LENGTH = 10000


POST_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.posts (
    id UUID PRIMARY KEY,
    user_id UUID,
    title TEXT,
    content TEXT,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

POST_USER_INDEX_CQL = """
CREATE INDEX IF NOT EXISTS posts_user_id_idx ON {keyspace}.posts (user_id)
"""

POSTS_TABLES_CQL = [
    POST_TABLE_CQL,
    POST_USER_INDEX_CQL,
]


@dataclass
class Post:
    """A post. ``user_id`` is set at creation and never reassigned."""

    user_id: UUID
    title: str
    content: str
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_row(cls, row: Any) -> "Post":
        """Create Post from Cassandra row."""
        return cls(
            id=row.id,
            user_id=row.user_id,
            title=row.title,
            content=row.content,
            created_at=ensure_utc_aware(row.created_at),
            updated_at=ensure_utc_aware(row.updated_at),
        )
