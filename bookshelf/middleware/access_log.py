"""Access log middleware: one line per HTTP request.

Format: METHOD path status duration_ms. Server errors log at ERROR, client
errors at WARNING, everything else at INFO. Must run inside
RequestContextMiddleware so the line carries request and actor ids.
"""

from typing import Callable

from bookshelf.shared.context import elapsed_millis
from bookshelf.shared.logging import get_logger

logger = get_logger("bookshelf.access")

_SKIP_PATHS = frozenset({"/api/v1/health"})


def AccessLogMiddleware(app: Callable) -> Callable:
    """Log method, path, status and duration of each request. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http" or scope.get("path") in _SKIP_PATHS:
            await app(scope, receive, send)
            return
        status_code = 500

        async def send_wrapper(message: dict) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await app(scope, receive, send_wrapper)
        finally:
            if status_code >= 500:
                log = logger.error
            elif status_code >= 400:
                log = logger.warning
            else:
                log = logger.info
            log(
                "%s %s %d %.1fms",
                scope.get("method", "-"),
                scope.get("path", "-"),
                status_code,
                elapsed_millis(),
            )

    return asgi_app
