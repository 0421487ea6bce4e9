"""Client for the external yield prediction model service."""

from __future__ import annotations

from typing import Any

import httpx

from agri_dashboard.utils.http import read_json, request_once


class ModelApiClient:
    """POST prediction payloads to a model serving endpoint."""

    def __init__(
        self,
        *,
        endpoint: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._timeout = timeout
        self._transport = transport

    async def predict(self, payload: Any) -> Any:
        """Forward ``payload`` unchanged and return the decoded response body."""
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            response = await request_once(
                client.post,
                self._endpoint,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
            return read_json(response)


__all__ = ["ModelApiClient"]
