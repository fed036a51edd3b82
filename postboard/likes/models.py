"""Database models for likes.

A like is stored twice:
- ``likes`` keyed by the actor, whose primary key
  (user_id, on_model, on_document) is the uniqueness guarantee and is
  written with ``IF NOT EXISTS``
- ``likes_by_target`` keyed by the liked document, for listing its likes
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from postboard.auth.models import ensure_utc_aware, utcnow


class TargetKind(str, Enum):
    """Kind of document a like points at."""

    POST = "Post"
    COMMENT = "Comment"


@dataclass(frozen=True)
class TargetRef:
    """Typed reference to a like target."""

    kind: TargetKind
    id: UUID


LIKE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.likes (
    user_id UUID,
    on_model TEXT,
    on_document UUID,
    receiver_id UUID,
    created_at TIMESTAMP,
    PRIMARY KEY ((user_id), on_model, on_document)
)
"""

LIKE_RECEIVER_INDEX_CQL = """
CREATE INDEX IF NOT EXISTS likes_receiver_id_idx ON {keyspace}.likes (receiver_id)
"""

LIKE_BY_TARGET_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.likes_by_target (
    on_model TEXT,
    on_document UUID,
    user_id UUID,
    receiver_id UUID,
    created_at TIMESTAMP,
    PRIMARY KEY ((on_model, on_document), user_id)
)
"""

LIKES_TABLES_CQL = [
    LIKE_TABLE_CQL,
    LIKE_RECEIVER_INDEX_CQL,
    LIKE_BY_TARGET_TABLE_CQL,
]


@dataclass
class Like:
    """A like by ``user_id`` on ``target``, owned by ``receiver_id``."""

    user_id: UUID
    receiver_id: UUID
    target: TargetRef
    created_at: datetime = field(default_factory=utcnow)

    @property
    def on_model(self) -> str:
        return self.target.kind.value

    @property
    def on_document(self) -> UUID:
        return self.target.id

    @classmethod
    def from_row(cls, row: Any) -> "Like":
        """Create Like from a ``likes`` or ``likes_by_target`` row."""
        return cls(
            user_id=row.user_id,
            receiver_id=row.receiver_id,
            target=TargetRef(TargetKind(row.on_model), row.on_document),
            created_at=ensure_utc_aware(row.created_at),
        )
