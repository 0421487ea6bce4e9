"""Pytest configuration shared across the suite."""

from typing import Callable

import httpx
import pytest


class RecordingTransport(httpx.MockTransport):
    """Mock transport that keeps every request it was asked to send."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def recording_transport() -> Callable[..., RecordingTransport]:
    """Build a ``RecordingTransport`` around a request handler."""
    return RecordingTransport
