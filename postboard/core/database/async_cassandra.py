"""Async Cassandra connection using cassandra-asyncio-driver.

Provides:
- cluster and session lifecycle
- sessions with ``aexecute()`` for non-blocking queries
- keyspace and table creation at startup
"""

from typing import Any

import structlog
from cassandra.auth import PlainTextAuthProvider
from cassandra.policies import DCAwareRoundRobinPolicy, TokenAwarePolicy
from cassandra_asyncio.cluster import Cluster

from postboard.auth.models import AUTH_TABLES_CQL
from postboard.comments.models import COMMENTS_TABLES_CQL
from postboard.config.settings import get_settings
from postboard.likes.models import LIKES_TABLES_CQL
from postboard.posts.models import POSTS_TABLES_CQL


logger = structlog.get_logger(__name__)


SCHEMA_CQL: dict[str, list[str]] = {
    "auth": AUTH_TABLES_CQL,
    "posts": POSTS_TABLES_CQL,
    "comments": COMMENTS_TABLES_CQL,
    "likes": LIKES_TABLES_CQL,
}


class AsyncCassandraConnection:
    """Async Cassandra connection manager.

    The cluster connects synchronously; queries then go through
    ``session.aexecute()``.
    """

    _cluster: Cluster | None = None
    _session = None  # Session type from cassandra_asyncio

    @classmethod
    def connect(cls):
        """Establish connection to the Cassandra cluster.

        Raises:
            ConnectionError: If connection fails
        """
        if cls._session is not None:
            return cls._session

        settings = get_settings()

        auth_provider = None
        if settings.cassandra_username and settings.cassandra_password:
            auth_provider = PlainTextAuthProvider(
                username=settings.cassandra_username,
                password=settings.cassandra_password,
            )

        cls._cluster = Cluster(
            contact_points=settings.cassandra_hosts,
            port=settings.cassandra_port,
            auth_provider=auth_provider,
            protocol_version=settings.cassandra_protocol_version,
            load_balancing_policy=TokenAwarePolicy(DCAwareRoundRobinPolicy()),
            connect_timeout=settings.cassandra_connect_timeout,
        )

        try:
            cls._session = cls._cluster.connect()
        except Exception as e:
            logger.error("async_cassandra_connection_failed", error=str(e))
            raise ConnectionError(f"Failed to connect to Cassandra: {e}") from e

        cls._session.default_timeout = settings.cassandra_request_timeout
        logger.info(
            "async_cassandra_connected",
            hosts=settings.cassandra_hosts,
            port=settings.cassandra_port,
            protocol_version=settings.cassandra_protocol_version,
        )
        return cls._session

    @classmethod
    def get_session(cls):
        """Get active session, connecting if necessary."""
        if cls._session is None:
            return cls.connect()
        return cls._session

    @classmethod
    def disconnect(cls) -> None:
        """Close connection to Cassandra."""
        if cls._session is not None:
            cls._session.shutdown()
            cls._session = None
            logger.info("async_cassandra_session_closed")

        if cls._cluster is not None:
            cls._cluster.shutdown()
            cls._cluster = None
            logger.info("async_cassandra_cluster_closed")

    @classmethod
    def is_connected(cls) -> bool:
        return cls._session is not None and not cls._session.is_shutdown


def was_applied(result: Any) -> bool:
    """Return whether a lightweight transaction (``IF ...``) was applied."""
    row = result[0] if result else None
    return bool(row and row.applied)


async def init_async_keyspace(session, keyspace: str) -> None:
    """Create keyspace if not exists."""
    settings = get_settings()

    if settings.is_production:
        replication = """
            'class': 'NetworkTopologyStrategy',
            'datacenter1': 3
        """
    else:
        replication = """
            'class': 'SimpleStrategy',
            'replication_factor': 1
        """

    cql = f"""
        CREATE KEYSPACE IF NOT EXISTS {keyspace}
        WITH replication = {{{replication}}}
        AND durable_writes = true
    """

    await session.aexecute(cql)
    logger.info("async_keyspace_created", keyspace=keyspace)


async def init_async_tables(session, keyspace: str) -> None:
    """Create every table and index used by the application."""
    for group, statements in SCHEMA_CQL.items():
        for cql_template in statements:
            await session.aexecute(cql_template.format(keyspace=keyspace))
        logger.info("async_tables_created", group=group, keyspace=keyspace)


async def init_async_cassandra():
    """Connect and make sure the keyspace and tables exist.

    Returns:
        Cassandra session with aexecute() support
    """
    settings = get_settings()

    session = AsyncCassandraConnection.connect()
    await init_async_keyspace(session, settings.cassandra_keyspace)
    session.set_keyspace(settings.cassandra_keyspace)
    await init_async_tables(session, settings.cassandra_keyspace)

    logger.info("async_cassandra_initialized", keyspace=settings.cassandra_keyspace)
    return session


async def shutdown_async_cassandra() -> None:
    """Shutdown async Cassandra connection."""
    AsyncCassandraConnection.disconnect()
