"""
FastAPI application factory.

Responsibility:
    Builds the HTTP application around one ``MarketplaceService``: request
    logging middleware, error handlers and the resource routers.

Architecture position:
    API -- outermost layer.  Imports ``marketplace_services`` and
    ``marketplace_config``; never touches a Session directly.
"""

from __future__ import annotations

from fastapi import FastAPI

from marketplace_api.errors import register_error_handlers
from marketplace_api.middleware import LoggingContextMiddleware
from marketplace_api.routes import admin, balances, contracts, health, jobs
from marketplace_config import ServiceConfig, get_active_config
from marketplace_kernel import __version__
from marketplace_kernel.logging_config import configure_logging, get_logger
from marketplace_services import MarketplaceService

logger = get_logger("api.app")


def create_app(
    service: MarketplaceService | None = None,
    config: ServiceConfig | None = None,
) -> FastAPI:
    """
    Create the application.

    Args:
        service: Pre-built facade (tests pass one bound to SQLite).  When
            omitted, one is built from ``config``.
        config: Service configuration.  Defaults to ``get_active_config()``.
    """
    if service is None:
        config = config or get_active_config()
        configure_logging(level=config.log_level)
        service = MarketplaceService.from_config(config)

    app = FastAPI(
        title="Marketplace Ledger",
        version=__version__,
        description="Profiles, contracts, jobs, payments and deposits",
    )
    app.state.service = service

    app.add_middleware(LoggingContextMiddleware)
    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(contracts.router)
    app.include_router(jobs.router)
    app.include_router(balances.router)
    app.include_router(admin.router)

    logger.info(
        "app_created",
        extra={
            "version": __version__,
            "config_checksum": config.checksum if config else None,
        },
    )
    return app
