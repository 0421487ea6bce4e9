"""Expose dependency helpers for FastAPI routers."""

from .clients import get_ibabi_client, get_prediction_service, get_summary_service

__all__ = [
    "get_ibabi_client",
    "get_prediction_service",
    "get_summary_service",
]
