"""Postboard API - Main Application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from postboard.auth.repository import UserRepository
from postboard.auth.router import router as auth_router
from postboard.auth.router import users_router
from postboard.auth.service import AuthService
from postboard.cascade.coordinator import CascadeCoordinator
from postboard.comments.repository import CommentRepository
from postboard.comments.router import post_comments_router
from postboard.comments.router import router as comments_router
from postboard.comments.service import CommentService
from postboard.config import get_settings
from postboard.core.context import get_request_id
from postboard.core.database import init_async_cassandra, shutdown_async_cassandra
from postboard.core.exceptions import AppError, status_for
from postboard.core.logging import configure_structlog, get_logger
from postboard.core.middleware import RateLimitMiddleware, RequestContextMiddleware
from postboard.core.redis import init_redis, shutdown_redis
from postboard.health.router import check_router
from postboard.health.router import router as health_router
from postboard.likes.repository import LikeRepository
from postboard.likes.router import router as likes_router
from postboard.likes.service import LikeService
from postboard.posts.rendering import ContentRenderer
from postboard.posts.repository import PostRepository
from postboard.posts.router import router as posts_router
from postboard.posts.service import PostService


# Configure logging early (before creating logger)
settings = get_settings()
configure_structlog(settings, log_dir=Path(settings.log_dir))

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def attach_services(
    app: FastAPI,
    users: UserRepository,
    posts: PostRepository,
    comments: CommentRepository,
    likes: LikeRepository,
) -> None:
    """Build the services over the given stores and expose them on app.state."""
    cascade = CascadeCoordinator(users, posts, comments, likes)
    renderer = ContentRenderer(users, comments, likes)

    app.state.auth_service = AuthService(users, cascade)
    app.state.post_service = PostService(posts, renderer, cascade)
    app.state.comment_service = CommentService(comments, posts, renderer, cascade)
    app.state.like_service = LikeService(likes, posts, comments, renderer)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings = get_settings()
    logger.info(
        "starting_application",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    # Redis only backs rate limiting; the API runs without it
    try:
        await init_redis()
        logger.info("redis_initialized")
    except Exception as e:
        logger.warning(
            "redis_init_skipped",
            error=str(e),
            message="Running without Redis - rate limiting disabled",
        )

    try:
        session = await init_async_cassandra()
        logger.info("cassandra_initialized")

        keyspace = settings.cassandra_keyspace
        attach_services(
            app,
            users=UserRepository(session, keyspace),
            posts=PostRepository(session, keyspace),
            comments=CommentRepository(session, keyspace),
            likes=LikeRepository(session, keyspace),
        )
        logger.info("services_initialized")
    except Exception as e:
        logger.exception("cassandra_init_failed", error=str(e))
        raise

    yield

    # Shutdown
    logger.info("shutting_down_application")
    await shutdown_redis()
    await shutdown_async_cassandra()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    # debug stays off so Starlette never renders tracebacks into responses
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Postboard - posts, comments and likes API",
        debug=False,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
    )

    if settings.rate_limit_enabled:
        app.add_middleware(
            RateLimitMiddleware,
            max_requests=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window_seconds,
            exclude_paths=settings.rate_limit_exclude_paths,
            trusted_hosts=settings.trusted_hosts,
        )

    # Wraps the limiter so 429 responses carry X-Request-ID too
    app.add_middleware(
        RequestContextMiddleware,
        log_requests=settings.log_requests,
        exclude_paths=settings.log_exclude_paths,
        trusted_hosts=settings.trusted_hosts,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        max_age=settings.cors_max_age,
    )

    def _get_request_id_safe(request: Request) -> str | None:
        """Get request_id from request state or context."""
        if hasattr(request.state, "request_id"):
            return request.state.request_id
        return get_request_id() or None

    def _error_response(
        request: Request, status_code: int, message: str, **extra: object
    ) -> ORJSONResponse:
        return ORJSONResponse(
            status_code=status_code,
            content={
                "error": True,
                "message": message,
                "status_code": status_code,
                "request_id": _get_request_id_safe(request),
                **extra,
            },
        )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> ORJSONResponse:
        """Turn domain errors into their mapped status with the error message.

        Errors without a mapped code are server faults and get the generic
        message instead.
        """
        status_code = status_for(exc)
        is_server_error = status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR
        log_method = logger.error if is_server_error else logger.warning
        log_method(
            "app_error",
            code=exc.code,
            message=exc.message,
            status_code=status_code,
            path=request.url.path,
            method=request.method,
        )
        message = GENERIC_ERROR_MESSAGE if is_server_error else exc.message
        return _error_response(request, status_code, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> ORJSONResponse:
        """Handle HTTP exceptions with safe error messages."""
        logger.warning(
            "http_exception",
            status_code=exc.status_code,
            detail=str(exc.detail),
            path=request.url.path,
            method=request.method,
        )
        message = (
            str(exc.detail)
            if exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR
            else GENERIC_ERROR_MESSAGE
        )
        response = _error_response(request, exc.status_code, message)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        """Malformed request bodies are client errors (400)."""
        logger.warning(
            "validation_error",
            errors=exc.errors(),
            path=request.url.path,
            method=request.method,
        )
        return _error_response(
            request,
            status.HTTP_400_BAD_REQUEST,
            "Validation error",
            details=[
                {
                    "field": ".".join(str(loc) for loc in err.get("loc", [])),
                    "message": err.get("msg", "Invalid value"),
                }
                for err in exc.errors()
            ],
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> ORJSONResponse:
        """Catch-all handler for unhandled exceptions.

        Details are logged; the client only sees a generic message.
        """
        logger.exception(
            "unhandled_exception",
            error_type=type(exc).__name__,
            error_message=str(exc),
            path=request.url.path,
            method=request.method,
        )
        return _error_response(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(check_router)
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(posts_router)
    app.include_router(post_comments_router)
    app.include_router(comments_router)
    app.include_router(likes_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs" if settings.is_development else "disabled",
        }

    return app


app = create_app()
