"""
HTTP helpers.

This module centralizes the minimal HTTP logic used by the locker API client.

Design goals:
- Small surface area (one JSON request coroutine for every verb).
- Deterministic defaults (timeout + User-Agent + JSON content type).
- Raise on non-2xx so callers can decide how to fail (the API client maps errors to `ApiError`).
"""

from __future__ import annotations

from typing import Any

import httpx


DEFAULT_USER_AGENT = "lockerhub/0.1.0 (+https://local)"


async def request_json(
    method: str,
    url: str,
    *,
    params: dict[str, Any] | None = None,
    json: Any = None,
    headers: dict[str, str] | None = None,
    timeout_seconds: float = 10,
) -> Any:
    """Send a request and return the decoded JSON response (None for an empty body).

    Raises:
        httpx.HTTPError: On transport errors, timeouts or non-2xx status codes.
        ValueError: If the response body is not valid JSON.
    """
    request_headers = {"User-Agent": DEFAULT_USER_AGENT, "Content-Type": "application/json"}
    if headers:
        request_headers.update(headers)

    async with httpx.AsyncClient(timeout=timeout_seconds) as client:
        resp = await client.request(
            method,
            url,
            params=params,
            json=json,
            headers=request_headers,
        )
        resp.raise_for_status()
        if not resp.content:
            return None
        return resp.json()
