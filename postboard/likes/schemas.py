"""Pydantic schemas for likes."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from postboard.likes.models import Like, TargetKind


class LikeResponse(BaseModel):
    """A like as embedded in post and comment responses."""

    user: UUID
    receiver: UUID
    on_model: TargetKind
    on_document: UUID
    created_at: datetime

    @classmethod
    def from_like(cls, like: Like) -> "LikeResponse":
        return cls(
            user=like.user_id,
            receiver=like.receiver_id,
            on_model=like.target.kind,
            on_document=like.target.id,
            created_at=like.created_at,
        )
