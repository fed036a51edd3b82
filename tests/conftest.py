"""Shared fixtures: an app wired to in-memory stores and helpers to use it."""

import os
import tempfile
from dataclasses import dataclass
from uuid import UUID

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient


# Must be set before postboard.main reads the settings
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_FORMAT", "json")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="postboard-logs-"))

from postboard.auth.security import verify_token  # noqa: E402
from postboard.cascade.coordinator import CascadeCoordinator  # noqa: E402
from postboard.main import attach_services, create_app  # noqa: E402
from postboard.posts.rendering import ContentRenderer  # noqa: E402

from tests.fakes import (  # noqa: E402
    InMemoryCommentRepository,
    InMemoryLikeRepository,
    InMemoryPostRepository,
    InMemoryUserRepository,
)


PASSWORD = "Secret123"


@dataclass
class Stores:
    users: InMemoryUserRepository
    posts: InMemoryPostRepository
    comments: InMemoryCommentRepository
    likes: InMemoryLikeRepository


@pytest.fixture
def stores() -> Stores:
    """Empty in-memory repositories."""
    return Stores(
        users=InMemoryUserRepository(),
        posts=InMemoryPostRepository(),
        comments=InMemoryCommentRepository(),
        likes=InMemoryLikeRepository(),
    )


@pytest.fixture
def cascade(stores: Stores) -> CascadeCoordinator:
    return CascadeCoordinator(stores.users, stores.posts, stores.comments, stores.likes)


@pytest.fixture
def renderer(stores: Stores) -> ContentRenderer:
    return ContentRenderer(stores.users, stores.comments, stores.likes)


@pytest.fixture
def app(stores: Stores) -> FastAPI:
    """Application whose services run over the in-memory stores.

    The lifespan is not entered, so no Cassandra or Redis is contacted.
    """
    application = create_app()
    attach_services(
        application,
        users=stores.users,
        posts=stores.posts,
        comments=stores.comments,
        likes=stores.likes,
    )
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@dataclass
class Account:
    """A signed-up user and their bearer token."""

    id: UUID
    name: str
    email: str
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


def signup(client: TestClient, name: str) -> Account:
    email = f"{name.lower()}@example.com"
    response = client.post(
        "/api/auth/signup",
        json={
            "email": email,
            "name": name,
            "password": PASSWORD,
            "confirmPassword": PASSWORD,
        },
    )
    assert response.status_code == 201, response.text
    token = response.json()["token"]
    return Account(id=verify_token(token), name=name, email=email, token=token)


@pytest.fixture
def alice(client: TestClient) -> Account:
    return signup(client, "Alice")


@pytest.fixture
def bob(client: TestClient) -> Account:
    return signup(client, "Bob")
