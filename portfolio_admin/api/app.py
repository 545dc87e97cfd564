"""FastAPI application for the browser admin dashboard.

Run with:
    uvicorn portfolio_admin.api.app:app --port 8000
or:
    portfolio-admin serve
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portfolio_admin import __version__
from portfolio_admin.api.router import router
from portfolio_admin.core.dashboard import Dashboard, build_dashboard
from portfolio_admin.core.utils.config import load_config

logger = logging.getLogger(__name__)

# Dashboard dev servers; production sets CORS_ORIGINS="https://admin.example.com"
DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://localhost:3000"


def _cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def create_app(config: dict[str, Any] | None = None, dashboard: Dashboard | None = None) -> FastAPI:
    """
    Create the admin service.

    Args:
        config: Configuration dictionary; read from the file named by
            ``PORTFOLIO_CONFIG`` (or the defaults) when omitted
        dashboard: Pre-built dashboard, used as-is instead of building one
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        board = dashboard
        if board is None:
            cfg = config if config is not None else load_config(os.getenv("PORTFOLIO_CONFIG"))
            board = build_dashboard(cfg)
        board.open()
        app.state.dashboard = board
        if not await board.store.fetch_all():
            # Snapshot stays as the last-known list
            logger.warning("Startup fetch failed: %s", board.store.error)
        logger.info("Admin service ready, %d projects loaded", len(board.store.items))
        try:
            yield
        finally:
            board.close()
            logger.info("Admin service stopped")

    application = FastAPI(
        title="Portfolio Admin API",
        version=__version__,
        description="Projects, skills, CV and messages for the portfolio owner",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.include_router(router, prefix="/api")

    _install_access_log_filter()
    return application


class _QuietPollFilter(logging.Filter):
    """Drop uvicorn access lines for the endpoints the dashboard polls."""

    _POLLED = ("/api/health", "/api/progress")

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        return not any(path in msg for path in self._POLLED)


def _install_access_log_filter() -> None:
    uvicorn_access = logging.getLogger("uvicorn.access")
    if not any(isinstance(f, _QuietPollFilter) for f in uvicorn_access.filters):
        uvicorn_access.addFilter(_QuietPollFilter())


app = create_app()
