"""Request-scoped context stored in contextvars.

Values set here are picked up by the logging processors so every log line
emitted while handling a request carries its request id and acting user.
"""

from contextvars import ContextVar, Token
from typing import Any
from uuid import UUID, uuid4


request_id_var: ContextVar[str] = ContextVar("request_id", default="")
user_id_var: ContextVar[str | None] = ContextVar("user_id", default=None)
trace_id_var: ContextVar[str | None] = ContextVar("trace_id", default=None)


def generate_request_id() -> str:
    """Generate a new unique request ID."""
    return str(uuid4())


def get_request_id() -> str:
    return request_id_var.get()


def set_request_id(request_id: str | None = None) -> str:
    """Set the request ID for the current context.

    Args:
        request_id: Incoming request ID. A new one is generated when absent.

    Returns:
        The request ID that was set.
    """
    rid = request_id or generate_request_id()
    request_id_var.set(rid)
    return rid


def get_user_id() -> str | None:
    return user_id_var.get()


def set_user_id(user_id: str | UUID | None) -> None:
    """Bind the acting user to the current context."""
    user_id_var.set(str(user_id) if user_id is not None else None)


def get_trace_id() -> str | None:
    return trace_id_var.get()


def set_trace_id(trace_id: str | None) -> None:
    trace_id_var.set(trace_id)


def get_context() -> dict[str, Any]:
    """Return the non-empty context values as a dictionary."""
    context: dict[str, Any] = {}

    request_id = get_request_id()
    if request_id:
        context["request_id"] = request_id

    user_id = get_user_id()
    if user_id:
        context["user_id"] = user_id

    trace_id = get_trace_id()
    if trace_id:
        context["trace_id"] = trace_id

    return context


def clear_context() -> None:
    """Reset all context variables at the end of a request."""
    request_id_var.set("")
    user_id_var.set(None)
    trace_id_var.set(None)


class RequestContext:
    """Context manager binding a request id outside of HTTP handling.

    Usage:
        with RequestContext(request_id="reset"):
            log.info("wiping_store")  # carries request_id="reset"
    """

    def __init__(
        self,
        request_id: str | None = None,
        user_id: str | UUID | None = None,
    ) -> None:
        self.request_id = request_id
        self.user_id = user_id
        self._request_token: Token[str] | None = None
        self._user_token: Token[str | None] | None = None

    def __enter__(self) -> "RequestContext":
        self._request_token = request_id_var.set(
            self.request_id or generate_request_id()
        )
        if self.user_id is not None:
            self._user_token = user_id_var.set(str(self.user_id))
        return self

    def __exit__(self, *_: object) -> None:
        if self._user_token is not None:
            user_id_var.reset(self._user_token)
        if self._request_token is not None:
            request_id_var.reset(self._request_token)
