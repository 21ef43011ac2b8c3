"""Request context management using contextvars.

Provides async-safe storage for request-scoped data: the request id, the
authenticated actor id (set after authentication) and the request start
time. Similar to Flask's `g`, but scoped to one request's task tree.

Usage:
    with request_scope("req-123"):
        set_actor_id("user-1")
        get_request_id()   # "req-123"
        get_actor_id()     # "user-1"
        elapsed_millis()   # time since the scope was opened

Tasks created inside the scope (asyncio.create_task, gather) inherit the
same RequestContext object. Other requests never see it: each scope binds
its own object and the binding is reset when the scope exits.
"""

import time
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field

_current_context: ContextVar["RequestContext | None"] = ContextVar(
    "current_request_context", default=None
)


@dataclass
class RequestContext:
    """Mutable per-request context. actor_id is filled in once authenticated."""

    request_id: str
    actor_id: str | None = None
    start_time: float = field(default_factory=time.monotonic)

    def elapsed_millis(self) -> float:
        """Milliseconds since this context was created."""
        return (time.monotonic() - self.start_time) * 1000


@contextmanager
def request_scope(request_id: str, actor_id: str | None = None) -> Iterator[RequestContext]:
    """Bind a fresh RequestContext for the duration of the block.

    The previous binding (normally None) is restored on exit, including when
    the block raises.
    """
    context = RequestContext(request_id=request_id, actor_id=actor_id)
    token = _current_context.set(context)
    try:
        yield context
    finally:
        _current_context.reset(token)


def current_context() -> RequestContext | None:
    """Return the bound context, or None outside any request (e.g. scripts)."""
    return _current_context.get()


def get_request_id() -> str | None:
    """Return the current request id, or None outside a request."""
    context = _current_context.get()
    return context.request_id if context else None


def get_actor_id() -> str | None:
    """Return the authenticated actor id, or None if not authenticated."""
    context = _current_context.get()
    return context.actor_id if context else None


def set_actor_id(actor_id: str) -> None:
    """Record the authenticated actor on the current context (in place).

    Call from the authentication dependency after credentials are verified.
    Outside a request scope there is nothing to update and this is a no-op.
    """
    context = _current_context.get()
    if context is not None:
        context.actor_id = actor_id


def elapsed_millis() -> float:
    """Milliseconds since the current request started; 0 outside a request."""
    context = _current_context.get()
    return context.elapsed_millis() if context else 0.0
