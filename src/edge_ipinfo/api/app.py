"""FastAPI application factory for the edge IP info service."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from structlog import get_logger

from edge_ipinfo import __version__
from edge_ipinfo.api.dispatcher import create_router
from edge_ipinfo.api.middleware.cors import CORSEntryMiddleware
from edge_ipinfo.api.middleware.errors import setup_error_handlers
from edge_ipinfo.api.middleware.logging import AccessLogMiddleware
from edge_ipinfo.api.middleware.request_id import RequestIDMiddleware
from edge_ipinfo.config.settings import Settings, get_settings
from edge_ipinfo.core.logging import setup_logging
from edge_ipinfo.cors.engine import CORSEngine
from edge_ipinfo.metadata.providers import create_metadata_provider


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log the effective policy once on startup."""
    settings: Settings = app.state.settings
    policy = app.state.cors_engine.policy
    logger.info(
        "server_start",
        version=__version__,
        url=settings.server_url,
        origin_policy=type(policy.origin).__name__,
        origins=str(policy.origin),
        credentials=policy.allow_credentials,
        methods=policy.methods_value,
        metadata_provider=settings.metadata.provider,
    )
    yield
    logger.debug("server_stop")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Configuration is read once here; the CORS policy and metadata provider
    built from it stay fixed for the life of the app.

    Args:
        settings: Optional settings override. If None, uses get_settings().

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    if not structlog.is_configured():
        setup_logging(
            json_logs=settings.server.json_logs,
            log_level_name=settings.server.log_level,
            log_file=settings.server.log_file,
        )

    engine = CORSEngine(settings.cors.to_policy())

    app = FastAPI(
        title="Edge IP Info",
        description="Reports the calling client's IP address, network metadata and headers",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    app.state.settings = settings
    app.state.cors_engine = engine
    app.state.metadata_provider = create_metadata_provider(settings.metadata)

    setup_error_handlers(app)

    # Added first so it runs innermost, right around the router
    app.add_middleware(CORSEntryMiddleware, engine=engine)
    app.add_middleware(
        AccessLogMiddleware, client_ip_header=settings.metadata.client_ip_header
    )
    app.add_middleware(RequestIDMiddleware)

    app.include_router(create_router(engine.policy.allow_methods))

    return app


def get_app() -> FastAPI:
    """Application factory used by ``uvicorn --factory``."""
    return create_app()
