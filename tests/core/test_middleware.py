"""Tests for request context and rate limiting middleware."""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from postboard.core.context import get_request_id
from postboard.core.middleware import (
    RateLimitMiddleware,
    RequestContextMiddleware,
    get_client_ip,
)
from postboard.core.redis import set_redis


def mock_redis(count: int) -> Mock:
    """Redis client whose pipeline reports ``count`` hits in the window."""
    redis_mock = Mock()
    pipe = Mock()
    pipe.incr = Mock()
    pipe.expire = Mock()
    pipe.execute = AsyncMock(return_value=[count, True])
    redis_mock.pipeline = Mock(return_value=pipe)
    return redis_mock


def counting_redis() -> Mock:
    """Redis client that counts hits per key like INCR does."""
    counts: dict[str, int] = {}

    def pipeline() -> Mock:
        pipe = Mock()
        keys: list[str] = []
        pipe.incr = Mock(side_effect=keys.append)
        pipe.expire = Mock()

        async def execute() -> list:
            counts[keys[0]] = counts.get(keys[0], 0) + 1
            return [counts[keys[0]], True]

        pipe.execute = execute
        return pipe

    redis_mock = Mock()
    redis_mock.pipeline = Mock(side_effect=pipeline)
    return redis_mock


def make_request(client_host: str, headers: dict[str, str]) -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/",
            "headers": [
                (name.lower().encode(), value.encode())
                for name, value in headers.items()
            ],
            "client": (client_host, 50000),
        }
    )


@pytest.fixture
def limited_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, max_requests=2, window_seconds=60)
    app.add_middleware(RequestContextMiddleware, log_requests=True)

    @app.get("/api/ping")
    async def ping() -> dict[str, str]:
        return {"request_id": get_request_id()}

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


@pytest.fixture(autouse=True)
def reset_redis():
    yield
    set_redis(None)


class TestRequestContextMiddleware:
    def test_generates_request_id(self, limited_app: FastAPI) -> None:
        response = TestClient(limited_app).get("/api/ping")

        assert response.status_code == 200
        assert response.headers["X-Request-ID"] == response.json()["request_id"]

    def test_propagates_request_id(self, limited_app: FastAPI) -> None:
        response = TestClient(limited_app).get(
            "/api/ping", headers={"X-Request-ID": "req-1"}
        )

        assert response.json()["request_id"] == "req-1"
        assert response.headers["X-Request-ID"] == "req-1"


class TestRateLimitMiddleware:
    def test_passes_without_redis(self, limited_app: FastAPI) -> None:
        client = TestClient(limited_app)
        for _ in range(5):
            assert client.get("/api/ping").status_code == 200

    def test_under_limit(self, limited_app: FastAPI) -> None:
        set_redis(mock_redis(count=2))
        assert TestClient(limited_app).get("/api/ping").status_code == 200

    def test_over_limit(self, limited_app: FastAPI) -> None:
        set_redis(mock_redis(count=3))

        response = TestClient(limited_app).get("/api/ping")

        assert response.status_code == 429
        assert response.json()["message"] == (
            "Too many requests, please try again later."
        )
        assert 0 < int(response.headers["Retry-After"]) <= 60
        assert "X-Request-ID" in response.headers

    def test_excluded_paths_are_not_counted(self, limited_app: FastAPI) -> None:
        redis_mock = mock_redis(count=99)
        set_redis(redis_mock)

        assert TestClient(limited_app).get("/health").status_code == 200
        redis_mock.pipeline.assert_not_called()

    def test_redis_failure_lets_requests_through(self, limited_app: FastAPI) -> None:
        redis_mock = mock_redis(count=1)
        redis_mock.pipeline.return_value.execute = AsyncMock(
            side_effect=RedisConnectionError("down")
        )
        set_redis(redis_mock)

        assert TestClient(limited_app).get("/api/ping").status_code == 200

    def test_counts_requests_per_client(self, limited_app: FastAPI) -> None:
        set_redis(counting_redis())
        client = TestClient(limited_app)

        codes = [client.get("/api/ping").status_code for _ in range(4)]

        assert codes == [200, 200, 429, 429]

    def test_forwarded_headers_from_untrusted_peer_are_ignored(
        self, limited_app: FastAPI
    ) -> None:
        set_redis(counting_redis())
        client = TestClient(limited_app)

        codes = [
            client.get(
                "/api/ping",
                headers={
                    "X-Forwarded-For": f"10.0.0.{i}",
                    "X-Real-IP": f"10.0.1.{i}",
                },
            ).status_code
            for i in range(4)
        ]

        assert codes == [200, 200, 429, 429]


class TestGetClientIp:
    def test_untrusted_peer_uses_direct_address(self) -> None:
        request = make_request("203.0.113.7", {"X-Forwarded-For": "10.0.0.1"})
        assert get_client_ip(request, ["127.0.0.1"]) == "203.0.113.7"

    def test_no_trusted_hosts_uses_direct_address(self) -> None:
        request = make_request("127.0.0.1", {"X-Real-IP": "10.0.0.1"})
        assert get_client_ip(request) == "127.0.0.1"

    def test_trusted_proxy_forwards_first_non_proxy_hop(self) -> None:
        request = make_request(
            "127.0.0.1", {"X-Forwarded-For": "127.0.0.1, 198.51.100.4, 10.0.0.9"}
        )
        assert get_client_ip(request, ["127.0.0.1"]) == "198.51.100.4"

    def test_trusted_proxy_falls_back_to_real_ip(self) -> None:
        request = make_request("127.0.0.1", {"X-Real-IP": "198.51.100.4"})
        assert get_client_ip(request, ["127.0.0.1"]) == "198.51.100.4"

    def test_trusted_proxy_without_headers_uses_direct_address(self) -> None:
        request = make_request("127.0.0.1", {})
        assert get_client_ip(request, ["127.0.0.1"]) == "127.0.0.1"
