"""
Root wiring: one API client, one session store, the three containers and the location
provider, built from settings.

The auth container subscribes to session invalidation, so a 401 from any call signs the
user out without the caller having to handle it.
"""

from __future__ import annotations

from dataclasses import dataclass

from lockerhub.api.client import ApiClient
from lockerhub.config.settings import Settings, get_settings
from lockerhub.core.env import resolve_project_path
from lockerhub.core.session import SessionInvalidated, SessionStore
from lockerhub.location.provider import LocationProvider, PositionSource, StaticPositionSource
from lockerhub.store.auth import SESSION_INVALIDATED, AuthContainer
from lockerhub.store.base import Action
from lockerhub.store.booking import BookingContainer
from lockerhub.store.business import BusinessContainer


@dataclass
class AppStore:
    settings: Settings
    session: SessionStore
    client: ApiClient
    auth: AuthContainer
    business: BusinessContainer
    booking: BookingContainer
    location: LocationProvider

    def _on_session_invalidated(self, event: SessionInvalidated) -> None:
        self.auth.store.dispatch(Action(SESSION_INVALIDATED, payload=event.reason))


def build_app(
    settings: Settings | None = None,
    *,
    session: SessionStore | None = None,
    position_source: PositionSource | None = None,
) -> AppStore:
    settings = settings or get_settings()
    session = session or SessionStore(resolve_project_path(settings.session.path))
    client = ApiClient(settings, session)

    app = AppStore(
        settings=settings,
        session=session,
        client=client,
        auth=AuthContainer(client),
        business=BusinessContainer(client),
        booking=BookingContainer(client),
        location=LocationProvider(settings, position_source or StaticPositionSource()),
    )
    session.subscribe(app._on_session_invalidated)
    return app
