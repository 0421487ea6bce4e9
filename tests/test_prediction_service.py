try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import json

import httpx
import pytest

from agri_dashboard.clients import ModelApiClient
from agri_dashboard.core.config import ModelSettings
from agri_dashboard.schemas import PredictionRequest
from agri_dashboard.services.prediction import (
    DEMO_NOTE,
    PredictionService,
    demo_prediction,
    is_loopback_endpoint,
)

pytestmark = pytest.mark.anyio("asyncio")

MODEL_URL = "https://model.example.com/api/ml/predict"

PAYLOAD = {
    "product_name": "BEANS",
    "product_type": "crops",
    "district": "NYARUGENGE",
    "sector": "KIGALI",
    "cell": "KIGALI",
    "village": "UMUCYO",
    "land_size_ha": 0.5,
    "year": 2025,
    "month": 8,
}


def _service(transport, endpoint=MODEL_URL):
    return PredictionService(
        ModelSettings(endpoint=endpoint),
        client_factory=lambda url: ModelApiClient(endpoint=url, transport=transport),
    )


@pytest.mark.parametrize(
    ("land_size_ha", "month", "expected"),
    [
        (0.5, 8, 990),
        (0.5, 0, 750),
        (0, 0, 50),
        (0.01, 1, 135),
        (2, 3, 3000),
        (1, -1, 1380),
        (0.5, 8.5, 1050),
    ],
)
def test_demo_prediction_formula(land_size_ha, month, expected):
    request = PredictionRequest(land_size_ha=land_size_ha, month=month)

    assert demo_prediction(request) == expected


def test_demo_prediction_coerces_bad_numbers_to_zero():
    request = PredictionRequest.model_validate(
        {"land_size_ha": "lots", "month": None, "year": "soon"}
    )

    assert request.land_size_ha == 0
    assert request.year == 0
    assert demo_prediction(request) == 50


@pytest.mark.parametrize(
    ("endpoint", "expected"),
    [
        ("http://127.0.0.1:8000/api/ml/predict", True),
        ("http://localhost:8000/predict", True),
        ("http://[::1]:8000/predict", True),
        ("http://0.0.0.0:8000/predict", True),
        ("https://model.example.com/predict", False),
        ("http://10.0.0.5/predict", False),
    ],
)
def test_is_loopback_endpoint(endpoint, expected):
    assert is_loopback_endpoint(endpoint) is expected


async def test_unconfigured_endpoint_returns_demo_without_network(recording_transport):
    transport = recording_transport(lambda request: httpx.Response(200, json={}))

    status, result = await _service(transport, endpoint=None).predict(dict(PAYLOAD))

    assert status == 200
    assert result.ok is True
    assert result.predicted_kg == 990
    assert result.note == DEMO_NOTE
    assert transport.requests == []


async def test_loopback_endpoint_returns_demo_without_network(recording_transport):
    transport = recording_transport(lambda request: httpx.Response(200, json={}))
    service = _service(transport, endpoint="http://127.0.0.1:8000/api/ml/predict")

    status, result = await service.predict(dict(PAYLOAD))

    assert status == 200
    assert result.predicted_kg == 990
    assert transport.requests == []


async def test_payload_is_forwarded_unchanged(recording_transport):
    payload = {**PAYLOAD, "extra_feature": [1, 2]}
    transport = recording_transport(
        lambda request: httpx.Response(200, json={"predicted_kg": 812.5})
    )

    status, result = await _service(transport).predict(payload)

    assert status == 200
    assert result.ok is True
    assert result.predicted_kg == 812.5
    assert len(transport.requests) == 1
    sent = transport.requests[0]
    assert sent.method == "POST"
    assert str(sent.url) == MODEL_URL
    assert sent.headers["content-type"] == "application/json"
    assert json.loads(sent.content) == payload


@pytest.mark.parametrize("key", ["prediction", "value"])
async def test_alternative_prediction_keys_are_accepted(recording_transport, key):
    transport = recording_transport(
        lambda request: httpx.Response(200, json={key: 42, "note": "xgb"})
    )

    status, result = await _service(transport).predict(dict(PAYLOAD))

    assert status == 200
    assert result.predicted_kg == 42
    assert result.note == "xgb"


async def test_upstream_500_is_reported_once_without_retry(recording_transport):
    transport = recording_transport(
        lambda request: httpx.Response(500, json={"detail": "model not loaded"})
    )

    status, result = await _service(transport).predict(dict(PAYLOAD))

    assert status == 502
    assert result.ok is False
    assert result.error == "Model 500: model not loaded"
    assert len(transport.requests) == 1


async def test_upstream_error_without_detail(recording_transport):
    transport = recording_transport(lambda request: httpx.Response(404, text="nope"))

    status, result = await _service(transport).predict(dict(PAYLOAD))

    assert status == 502
    assert result.error == "Model 404"


async def test_transport_failure_returns_generic_error(recording_transport):
    def _timeout(request):
        raise httpx.ReadTimeout("timed out", request=request)

    transport = recording_transport(_timeout)

    status, result = await _service(transport).predict(dict(PAYLOAD))

    assert status == 502
    assert result.ok is False
    assert result.error == "Model service unreachable"
    assert len(transport.requests) == 1


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"status": "done"}),
        httpx.Response(200, json=[990]),
    ],
)
async def test_unreadable_model_response(recording_transport, response):
    transport = recording_transport(lambda request: response)

    status, result = await _service(transport).predict(dict(PAYLOAD))

    assert status == 502
    assert result.ok is False
    assert result.error == "Model returned an unreadable response"


async def test_model_reported_failure_is_surfaced(recording_transport):
    transport = recording_transport(
        lambda request: httpx.Response(200, json={"ok": False, "error": "bad crop"})
    )

    status, result = await _service(transport).predict(dict(PAYLOAD))

    assert status == 502
    assert result.ok is False
    assert result.error == "bad crop"


async def test_overflowing_land_size_still_yields_demo_value(recording_transport):
    transport = recording_transport(lambda request: httpx.Response(200, json={}))

    status, result = await _service(transport, endpoint=None).predict(
        {"land_size_ha": 1e306, "month": 8}
    )

    assert status == 200
    assert result.ok is True
    assert result.predicted_kg == 50
    assert transport.requests == []


async def test_demo_prediction_is_serialized_as_integer(recording_transport):
    transport = recording_transport(lambda request: httpx.Response(200, json={}))

    _, result = await _service(transport, endpoint=None).predict(dict(PAYLOAD))

    assert result.model_dump()["predicted_kg"] == 990
    assert isinstance(result.model_dump()["predicted_kg"], int)
