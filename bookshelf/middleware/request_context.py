"""Request context middleware.

Generates or forwards X-Request-ID, binds a fresh request context (request id,
start time, empty actor) for the whole request, and echoes the id on the
response. Client-provided values are sanitized (length + character set) to
prevent log injection. Raw ASGI (no BaseHTTPMiddleware) so the context
variable is visible to every handler and dependency of the request.
"""

import re
import uuid
from typing import Callable

from bookshelf.shared.context import request_scope

# Safe for logging: alphanumeric, hyphen, underscore; max length to avoid abuse.
REQUEST_ID_MAX_LENGTH = 64
REQUEST_ID_ALLOWED_PATTERN = re.compile(
    r"^[a-zA-Z0-9_-]{1," + str(REQUEST_ID_MAX_LENGTH) + r"}$"
)


def _get_header(scope: dict, name: str) -> str | None:
    """Return first header value for name (case-insensitive). Headers are (bytes, bytes)."""
    want = name.lower().encode()
    for k, v in scope.get("headers", []):
        if k.lower() == want:
            return v.decode("utf-8", errors="replace")
    return None


def sanitize_request_id(raw: str | None) -> str:
    """Return raw (stripped) if it is a safe id; otherwise a new UUID4."""
    candidate = (raw or "").strip()
    if not REQUEST_ID_ALLOWED_PATTERN.match(candidate):
        return str(uuid.uuid4())
    return candidate


def RequestContextMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Bind the request context around each HTTP request. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = sanitize_request_id(_get_header(scope, header_name))
        # Exposed on request.state for handlers running outside the context scope.
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((header_name.lower().encode(), request_id.encode()))
                message["headers"] = headers
            await send(message)

        with request_scope(request_id):
            await app(scope, receive, send_wrapper)

    return asgi_app
