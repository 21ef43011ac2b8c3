"""Application lifespan: startup and shutdown.

Wiring only: logs startup; on shutdown flushes telemetry then disposes the
SQL engine.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from bookshelf.core.config import get_settings
from bookshelf.infrastructure.persistence.database import dispose_engine
from bookshelf.shared.telemetry import get_telemetry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit flush telemetry and dispose the database engine."""
    settings = get_settings()
    registry = getattr(app.state, "audit_registry", None)
    logger.info(
        "%s %s starting; audited entities: %s",
        settings.app_name,
        settings.app_version,
        ", ".join(registry.list_tracked_entities()) if registry else "-",
    )

    yield

    telemetry = get_telemetry()
    if telemetry is not None:
        telemetry.shutdown()

    await dispose_engine()
    logger.info("Database engine disposed")
