"""
HTTP Application Entry Point

This module defines the FastAPI application instance, registers all routers,
configures exception handling, and provides a test-friendly application
factory.

Design Goals
------------
- Configuration (and bot login, if configured) completes at startup,
  before the first request is served
- Centralized router registration
- Adapter errors mapped to deterministic JSON responses
- Global exception safety net
- Test-friendly via create_app()
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI

from .config import settings
from .core.errors import AdapterError, adapter_error_handler, unhandled_exception_handler
from .core.log_config import configure_logging
from .runtime import AdapterRuntime, runtime as default_runtime

from .api import (
    health_routes,
    resource_routes,
    tool_routes,
)


logger = logging.getLogger("mcp.app")


# ---------------------------------------------------------------------
# Application Factory (Test-Friendly)
# ---------------------------------------------------------------------

def create_app(runtime: Optional[AdapterRuntime] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Parameters
    ----------
    runtime : Optional[AdapterRuntime]
        Runtime configured at startup; defaults to the process-wide one.
        Route handlers resolve the runtime through ``get_runtime`` and can be
        overridden independently in tests.

    Returns
    -------
    FastAPI
        Fully configured FastAPI application.
    """
    rt = runtime or default_runtime

    app = FastAPI(
        title="mediawiki-adapter",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # --------------------------------------------------------------
    # Exception Handling
    # --------------------------------------------------------------

    app.add_exception_handler(AdapterError, adapter_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --------------------------------------------------------------
    # Router Registration
    # --------------------------------------------------------------

    app.include_router(health_routes.router)
    app.include_router(tool_routes.router)
    app.include_router(resource_routes.router)

    # --------------------------------------------------------------
    # Startup Configuration Hook
    # --------------------------------------------------------------

    @app.on_event("startup")
    async def _startup_configure() -> None:
        """
        Apply configuration and log in before serving requests.

        A failed login aborts startup.
        """
        logger.info("Starting mediawiki-adapter")

        if rt.configured:
            return

        result = await rt.configure()
        if result is None:
            logger.info("No bot credentials configured; running anonymously")
        elif not result.authenticated:
            logger.warning("Bot login returned no session; writes will be anonymous")

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        logger.info("Shutting down mediawiki-adapter")

    return app


# ---------------------------------------------------------------------
# Default Application Instance (for Uvicorn)
# ---------------------------------------------------------------------

configure_logging(settings.log_level)

app = create_app()
