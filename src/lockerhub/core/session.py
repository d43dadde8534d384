from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

"""
Persisted session store.

The session (bearer token + cached user record) is the only durable state shared by
every API call:
- It is stored as a small JSON document, `.cache/lockerhub/session.json` by default.
- Writes go through a temporary file + atomic replace so a crash never leaves a
  half-written token behind.
- It is read before each request and may be cleared at any time by a 401 from another
  in-flight request, so readers must tolerate a missing token.

Clearing the session emits an invalidation event; the auth container subscribes to it so
the presentation layer falls back to the signed-out flow.
"""

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionInvalidated:
    """Event delivered to subscribers when the session is cleared."""

    reason: str


SessionListener = Callable[[SessionInvalidated], None]


class SessionStore:
    """A file-backed store for the auth token and the signed-in user's record."""

    def __init__(self, path: Path):
        self._path = path
        self._listeners: list[SessionListener] = []

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable session file at %s", self._path)
            return {}
        return raw if isinstance(raw, dict) else {}

    def _write(self, payload: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(payload, ensure_ascii=False, default=str), encoding="utf-8")
        tmp.replace(self._path)

    @property
    def token(self) -> str | None:
        token = self._read().get("token")
        return str(token) if token else None

    @property
    def user(self) -> dict[str, Any] | None:
        user = self._read().get("user")
        return user if isinstance(user, dict) else None

    def save(self, token: str, user: dict[str, Any]) -> None:
        """Persist a freshly issued token together with the user it belongs to."""
        self._write({"token": token, "user": user})

    def save_user(self, user: dict[str, Any]) -> None:
        """Replace the cached user record, keeping the current token."""
        payload = self._read()
        payload["user"] = user
        self._write(payload)

    def clear(self, reason: str = "logout") -> None:
        """Remove token and cached user, then notify subscribers."""
        self._path.unlink(missing_ok=True)
        logger.info("Session cleared (%s)", reason)
        event = SessionInvalidated(reason=reason)
        for listener in list(self._listeners):
            listener(event)

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register `listener` for invalidation events; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
