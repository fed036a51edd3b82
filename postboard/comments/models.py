"""Database models for comments."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from postboard.auth.models import ensure_utc_aware, utcnow


CONTENT_MAX_LENGTH = 10000


COMMENT_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.comments (
    id UUID PRIMARY KEY,
    post_id UUID,
    user_id UUID,
    content TEXT,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

COMMENT_POST_INDEX_CQL = """
CREATE INDEX IF NOT EXISTS comments_post_id_idx ON {keyspace}.comments (post_id)
"""

COMMENT_USER_INDEX_CQL = """
CREATE INDEX IF NOT EXISTS comments_user_id_idx ON {keyspace}.comments (user_id)
"""

COMMENTS_TABLES_CQL = [
    COMMENT_TABLE_CQL,
    COMMENT_POST_INDEX_CQL,
    COMMENT_USER_INDEX_CQL,
]


@dataclass
class Comment:
    """A comment on a post. Owner and post are fixed at creation."""

    post_id: UUID
    user_id: UUID
    content: str
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_row(cls, row: Any) -> "Comment":
        """Create Comment from Cassandra row."""
        return cls(
            id=row.id,
            post_id=row.post_id,
            user_id=row.user_id,
            content=row.content,
            created_at=ensure_utc_aware(row.created_at),
            updated_at=ensure_utc_aware(row.updated_at),
        )
