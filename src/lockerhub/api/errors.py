"""
API error taxonomy.

`ApiError` wraps the underlying `httpx` error (kept as `__cause__`) and adds whatever
structured message the server returned. `error_message` turns any failure into the string
a state container stores in its `error` field.
"""

from __future__ import annotations

from typing import Literal

import httpx
from pydantic import ValidationError

ErrorKind = Literal["network", "server", "validation", "auth"]

NETWORK_ERROR_MESSAGE = "Network connection failed. Check if backend is running."
SERVER_ERROR_MESSAGE = "Server error occurred. Check backend logs."


class ApiError(Exception):
    """A failed API call, classified for display."""

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind,
        status_code: int | None = None,
        server_message: str | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code
        self.server_message = server_message

    @classmethod
    def from_httpx(cls, exc: httpx.HTTPError) -> "ApiError":
        if isinstance(exc, httpx.HTTPStatusError):
            status = exc.response.status_code
            server_message = _extract_server_message(exc.response)
            if status == 401:
                kind: ErrorKind = "auth"
            elif status >= 500:
                kind = "server"
            else:
                kind = "validation"
            return cls(
                server_message or f"HTTP {status}",
                kind=kind,
                status_code=status,
                server_message=server_message,
            )
        return cls(str(exc) or exc.__class__.__name__, kind="network")


def _extract_server_message(response: httpx.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, list):
            return "; ".join(str(m) for m in message)
        if message:
            return str(message)
    return None


def error_message(exc: BaseException, default: str) -> str:
    """User-displayable message for a failed operation."""
    if isinstance(exc, ApiError):
        if exc.kind == "network":
            return NETWORK_ERROR_MESSAGE
        if exc.kind == "server":
            return SERVER_ERROR_MESSAGE
        return exc.server_message or default
    if isinstance(exc, ValueError) and not isinstance(exc, ValidationError) and str(exc):
        return str(exc)
    return default
