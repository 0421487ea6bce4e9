"""Client for the IBABI agricultural data API."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from agri_dashboard.utils.http import read_json, request_once

logger = logging.getLogger(__name__)

_NO_STORE_HEADERS = {"Cache-Control": "no-store", "Accept": "application/json"}


class IbabiClient:
    """Fetch raw production records or pre-aggregated summaries."""

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    async def fetch_json(
        self, url: str, params: Mapping[str, Any] | None = None
    ) -> Any:
        """GET ``url`` once and return the decoded JSON body."""
        query = {key: value for key, value in (params or {}).items() if value is not None}
        logger.debug("Fetching %s params=%s", url, query)

        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            response = await request_once(
                client.get,
                url,
                params=query,
                headers=_NO_STORE_HEADERS,
            )
            return read_json(response)


__all__ = ["IbabiClient"]
