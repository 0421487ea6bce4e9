"""Expose constructed client wrappers."""

from .ibabi import IbabiClient
from .model_api import ModelApiClient

__all__ = ["IbabiClient", "ModelApiClient"]
