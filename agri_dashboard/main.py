"""
FastAPI application entrypoint for the agricultural dashboard backend.
"""

from __future__ import annotations

from fastapi import FastAPI

from agri_dashboard.api.routes import router as api_router
from agri_dashboard.core.config import get_settings
from agri_dashboard.core.logging import configure_logging


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Agri Platform Dashboard API",
        version="0.1.0",
        description="Production summaries and yield predictions for the dashboard.",
    )
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()

__all__ = ["app", "create_app"]
