"""FastAPI application entry point.

Wiring only: logging, audit policy registry, lifespan, exception handlers,
middleware, routers, tracing. No business logic here.

Settings are loaded inside create_app() so that tests can set env (and
optionally clear the get_settings cache) before calling create_app().
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from bookshelf.api.v1.router import api_router
from bookshelf.core.audit_config import build_audit_registry
from bookshelf.core.config import get_settings
from bookshelf.core.exception_handlers import register_exception_handlers
from bookshelf.core.lifespan import create_lifespan
from bookshelf.core.limiter import limiter
from bookshelf.middleware import AccessLogMiddleware, RequestContextMiddleware
from bookshelf.shared.logging import setup_logging
from bookshelf.shared.telemetry import TelemetryConfig, set_telemetry


def create_app() -> FastAPI:
    """Build and return the FastAPI application. Settings are resolved here (deferred from import)."""
    settings = get_settings()
    setup_logging()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    app.state.audit_registry = build_audit_registry()

    limiter.enabled = settings.rate_limit_enabled
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_exception_handlers(app)

    # Middleware: last added = outermost. Order: request context -> access log -> CORS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[settings.request_id_header],
    )
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestContextMiddleware, header_name=settings.request_id_header)

    app.include_router(api_router, prefix="/api/v1")

    # Tracing middleware is added last so it is outermost.
    if settings.telemetry_enabled:
        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            jaeger_endpoint=settings.telemetry_jaeger_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        telemetry.instrument_logging()

    return app


app = create_app()
