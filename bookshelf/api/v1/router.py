"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from bookshelf.api.v1.dependencies.
"""

from fastapi import APIRouter

from bookshelf.api.v1.endpoints import audit_log, auth, books, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(books.router, prefix="/books", tags=["books"])
api_router.include_router(audit_log.router, prefix="/audits", tags=["audits"])
