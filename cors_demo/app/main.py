"""
cors_demo/app/main.py

FastAPI application entry point for the CORS demo server.

This module:
  - Loads environment variables via the config module
  - Configures logging (level + optional file) from .env settings
  - Builds the route policy table and registers RoutePolicyMiddleware
  - Registers the `{"error": ...}` exception handlers
  - Includes all API routers
  - Runs startup / shutdown lifecycle hooks

Run with:
    uvicorn cors_demo.app.main:app --port 3001 --reload
  or:
    python -m cors_demo.app.main
"""

import logging
import sys
from typing import Optional

from fastapi import FastAPI

from cors_demo.api.router import api_router
from cors_demo.app.config import Settings, get_settings
from cors_demo.app.cors import build_policy_table
from cors_demo.app.errors import register_exception_handlers
from cors_demo.policy.middleware import RoutePolicyMiddleware
from cors_demo.policy.models import PolicyTable

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Logging configuration: level and output file driven by .env
# ---------------------------------------------------------------------------

def configure_logging(settings: Settings) -> None:
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handlers: list = [logging.StreamHandler(sys.stdout)]
    if settings.LOG_FILE:
        handlers.append(logging.FileHandler(settings.LOG_FILE, encoding="utf-8"))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s  [%(levelname)s]  %(name)s — %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------

def create_app(
    settings: Optional[Settings] = None,
    policies: Optional[PolicyTable] = None,
) -> FastAPI:
    """
    Build the policy server.

    Args:
        settings (Settings | None): Defaults to the cached .env settings.
        policies (PolicyTable | None): Defaults to build_policy_table(settings).

    Raises:
        ValueError: when the policy table contains an invalid policy.
    """
    settings = settings or get_settings()
    policies = policies if policies is not None else build_policy_table(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "🔀 Cross-Origin Resource Sharing demo\n\n"
            "Five endpoints, each with its own cross-origin policy: open, "
            "origin allow-list, credentialed (cookie) and custom request / "
            "response headers."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        debug=settings.DEBUG,
    )
    app.state.settings = settings

    # -----------------------------------------------------------------------
    # Middleware: per-route cross-origin policies
    # -----------------------------------------------------------------------
    app.add_middleware(RoutePolicyMiddleware, policies=policies)

    register_exception_handlers(app)
    app.include_router(api_router)

    # -----------------------------------------------------------------------
    # Lifecycle events
    # -----------------------------------------------------------------------

    @app.on_event("startup")
    async def on_startup() -> None:
        """Log key configuration values and the active policy for every route."""
        logger.info("=" * 60)
        logger.info("🚀  Starting      : %s", settings.APP_NAME)
        logger.info("    Environment   : %s", settings.APP_ENV)
        logger.info("    Debug mode    : %s", settings.DEBUG)
        logger.info("    Client origin : %s", settings.CLIENT_ORIGIN)
        logger.info("    Log level     : %s  →  %s", settings.LOG_LEVEL, settings.LOG_FILE or "stdout")
        logger.info("    Docs          : http://%s:%s/docs", settings.HOST, settings.PORT)
        for policy in policies:
            logger.info("    🔀  %-18s %s", policy.path, policy.describe())
        logger.info("=" * 60)

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        """Shutdown hook: runs when the application is stopping."""
        logger.info("👋  %s is shutting down. Goodbye!", settings.APP_NAME)

    return app


configure_logging(get_settings())
app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run("cors_demo.app.main:app", host=_settings.HOST, port=_settings.PORT)
