"""HTTP utilities for single-attempt upstream calls."""

from __future__ import annotations

from typing import Any, Awaitable, Callable

import httpx


class UpstreamError(RuntimeError):
    """Raised when an upstream service cannot be reached or answers badly."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


def extract_error_detail(response: httpx.Response) -> str | None:
    """Pull a ``detail`` or ``error`` message out of an error response body."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    for key in ("detail", "error"):
        value = body.get(key)
        if value:
            return value if isinstance(value, str) else str(value)
    return None


async def request_once(
    func: Callable[..., Awaitable[httpx.Response]],
    *args,
    **kwargs,
) -> httpx.Response:
    """Issue exactly one request, mapping failures onto ``UpstreamError``."""
    try:
        response = await func(*args, **kwargs)
    except httpx.HTTPError as exc:
        raise UpstreamError(f"Request failed: {exc.__class__.__name__}") from exc

    if not response.is_success:
        raise UpstreamError(
            f"Upstream {response.status_code}",
            status_code=response.status_code,
            detail=extract_error_detail(response),
        )
    return response


def read_json(response: httpx.Response) -> Any:
    """Decode a response body, raising ``UpstreamError`` when it is not JSON."""
    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamError(
            "Upstream returned a non-JSON body",
            status_code=response.status_code,
        ) from exc


__all__ = ["UpstreamError", "extract_error_detail", "read_json", "request_once"]
