"""Forward yield predictions to the model service, or compute a demo value."""

from __future__ import annotations

import ipaddress
import logging
import math
from http import HTTPStatus
from typing import Any, Callable, Dict, Optional, Tuple
from urllib.parse import urlparse

from agri_dashboard.clients import ModelApiClient
from agri_dashboard.core.config import ModelSettings
from agri_dashboard.schemas import PredictionRequest, PredictionResult
from agri_dashboard.services.aggregation import coerce_quantity
from agri_dashboard.utils.http import UpstreamError

logger = logging.getLogger(__name__)

DEMO_NOTE = "Demo prediction (no public model URL)"
DEMO_FLOOR_KG = 50
KG_PER_HECTARE = 1500
MONTH_CYCLE_BONUS_KG = 120

_PREDICTION_KEYS = ("predicted_kg", "prediction", "value")


def demo_prediction(request: PredictionRequest) -> int:
    """Deterministic placeholder yield: linear in land size, nudged by month."""
    raw = (
        request.land_size_ha * KG_PER_HECTARE
        + math.fmod(request.month, 3) * MONTH_CYCLE_BONUS_KG
    )
    # Huge land sizes overflow to infinity; treat them as unreadable input.
    if not math.isfinite(raw):
        return DEMO_FLOOR_KG
    return max(DEMO_FLOOR_KG, math.floor(raw + 0.5))


def is_loopback_endpoint(endpoint: str) -> bool:
    """Return True when ``endpoint`` points at this machine."""
    host = urlparse(endpoint).hostname
    if not host:
        return "127.0.0.1" in endpoint or "localhost" in endpoint
    if host == "localhost" or host.endswith(".localhost"):
        return True
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return False
    return address.is_loopback or address.is_unspecified


class PredictionService:
    """Produce a ``PredictionResult`` and the HTTP status to answer with."""

    def __init__(
        self,
        settings: ModelSettings,
        client_factory: Callable[[str], ModelApiClient] | None = None,
    ) -> None:
        self._settings = settings
        self._client_factory = client_factory or (
            lambda endpoint: ModelApiClient(
                endpoint=endpoint, timeout=settings.timeout_seconds
            )
        )

    @property
    def demo_mode(self) -> bool:
        endpoint = self._settings.endpoint
        return not endpoint or is_loopback_endpoint(endpoint)

    async def predict(self, payload: Dict[str, Any]) -> Tuple[int, PredictionResult]:
        request = PredictionRequest.model_validate(payload)

        if self.demo_mode:
            predicted = demo_prediction(request)
            logger.info(
                "Demo prediction %s kg for %s ha (endpoint=%s)",
                predicted,
                request.land_size_ha,
                self._settings.endpoint,
            )
            return HTTPStatus.OK, PredictionResult(
                ok=True, predicted_kg=predicted, note=DEMO_NOTE
            )

        client = self._client_factory(self._settings.endpoint)
        try:
            body = await client.predict(payload)
        except UpstreamError as exc:
            return HTTPStatus.BAD_GATEWAY, self._error_result(exc)

        result = _result_from_body(body)
        if result is None:
            logger.warning("Model response had no usable prediction: %r", body)
            return HTTPStatus.BAD_GATEWAY, PredictionResult(
                ok=False, error="Model returned an unreadable response"
            )
        return (HTTPStatus.OK if result.ok else HTTPStatus.BAD_GATEWAY), result

    def _error_result(self, exc: UpstreamError) -> PredictionResult:
        if exc.status_code is None:
            logger.warning("Model service unreachable: %s", exc)
            return PredictionResult(ok=False, error="Model service unreachable")
        if not 200 <= exc.status_code < 300:
            logger.warning("Model service answered %s: %s", exc.status_code, exc.detail)
            message = f"Model {exc.status_code}"
            if exc.detail:
                message = f"{message}: {exc.detail}"
            return PredictionResult(ok=False, error=message)
        return PredictionResult(ok=False, error="Model returned an unreadable response")


def _result_from_body(body: Any) -> Optional[PredictionResult]:
    if not isinstance(body, dict):
        return None
    note = body.get("note")
    note = str(note) if note else None
    if body.get("ok") is False:
        error = body.get("error") or body.get("detail") or "Model reported a failure"
        return PredictionResult(ok=False, error=str(error), note=note)

    predicted = next(
        (body[key] for key in _PREDICTION_KEYS if body.get(key) is not None), None
    )
    value = coerce_quantity(predicted)
    if value is None:
        return None
    return PredictionResult(ok=True, predicted_kg=value, note=note)


__all__ = [
    "DEMO_NOTE",
    "PredictionService",
    "demo_prediction",
    "is_loopback_endpoint",
]
