"""HTTP middleware: request context binding and access logging.

Applied in main app; order matters (last added = outermost).
"""

from bookshelf.middleware.access_log import AccessLogMiddleware
from bookshelf.middleware.request_context import RequestContextMiddleware

__all__ = ["AccessLogMiddleware", "RequestContextMiddleware"]
