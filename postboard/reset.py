"""Wipe every user, post, comment and like.

Users are removed through the same cascade as account deletion. Content
that no user cascade reaches any more, for instance after an earlier
cascade failed half way, is swept afterwards.

Usage:
    python -m postboard.reset
"""

import asyncio
from pathlib import Path

from postboard.auth.repository import UserRepository
from postboard.cascade.coordinator import CascadeCoordinator, CascadeResult
from postboard.comments.repository import CommentRepository
from postboard.config import get_settings
from postboard.core.context import RequestContext
from postboard.core.database import init_async_cassandra, shutdown_async_cassandra
from postboard.core.logging import configure_structlog, get_logger
from postboard.likes.repository import LikeRepository
from postboard.posts.repository import PostRepository


logger = get_logger(__name__)


async def reset_store() -> CascadeResult:
    settings = get_settings()
    keyspace = settings.cassandra_keyspace

    session = await init_async_cassandra()
    try:
        cascade = CascadeCoordinator(
            UserRepository(session, keyspace),
            PostRepository(session, keyspace),
            CommentRepository(session, keyspace),
            LikeRepository(session, keyspace),
        )
        with RequestContext(request_id="reset"):
            result = await cascade.delete_all()
            logger.info(
                "store_reset",
                users=result.users,
                posts=result.posts,
                comments=result.comments,
                likes=result.likes,
            )
        return result
    finally:
        await shutdown_async_cassandra()


if __name__ == "__main__":
    settings = get_settings()
    configure_structlog(settings, log_dir=Path(settings.log_dir))
    asyncio.run(reset_store())
