"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache

from agri_dashboard.clients import IbabiClient
from agri_dashboard.core.config import get_settings
from agri_dashboard.services import PredictionService, SummaryService


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_ibabi_client() -> IbabiClient:
    """Provide the IBABI data API client."""
    settings = _settings()
    return IbabiClient(timeout=settings.upstream.timeout_seconds)


def get_summary_service() -> SummaryService:
    """Build a summary service over the configured upstream."""
    settings = _settings()
    return SummaryService(settings.upstream, get_ibabi_client())


def get_prediction_service() -> PredictionService:
    """Build a prediction service for the configured model endpoint."""
    settings = _settings()
    return PredictionService(settings.prediction)


__all__ = [
    "get_ibabi_client",
    "get_prediction_service",
    "get_summary_service",
]
