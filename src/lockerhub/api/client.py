"""
Locker API client.

This module is responsible only for:
- attaching the bearer token from the session store to every request,
- calling one endpoint per method (auth, business search/nearby, bookings, profile),
- parsing responses into the Pydantic models in `lockerhub.domain.models`,
- invalidating the session on any 401, whichever call triggered it.

It intentionally does not hold UI state; see `lockerhub.store.*` for that.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from lockerhub.api.errors import ApiError
from lockerhub.config.settings import Settings
from lockerhub.core.http import request_json
from lockerhub.core.session import SessionStore
from lockerhub.domain.models import (
    AuthResponse,
    Booking,
    BookingQuery,
    BookingStatus,
    Business,
    CreateBookingRequest,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
    SearchBusinessesRequest,
    User,
)

logger = logging.getLogger(__name__)


class ApiClient:
    """Async client for the locker rental HTTP API."""

    def __init__(self, settings: Settings, session: SessionStore):
        self._settings = settings
        self._session = session

    @property
    def session(self) -> SessionStore:
        return self._session

    def _url(self, path: str) -> str:
        return f"{self._settings.api.base_url.rstrip('/')}{path}"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Send one request with the current token; map failures to `ApiError`."""
        headers: dict[str, str] = {}
        # The token may have been cleared by a concurrent 401; go out unauthenticated then.
        token = self._session.token
        if token:
            headers["Authorization"] = f"Bearer {token}"

        if params:
            params = {k: v for k, v in params.items() if v is not None}

        logger.debug("API %s %s params=%s", method, path, params)
        try:
            return await request_json(
                method,
                self._url(path),
                params=params or None,
                json=json,
                headers=headers,
                timeout_seconds=self._settings.app.http_timeout_seconds,
            )
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status == 401:
                logger.info("API request unauthorized (%s %s); clearing session.", method, path)
                self._session.clear(reason="unauthorized")
            else:
                logger.warning("API request failed with status=%s (%s %s)", status, method, path)
            raise ApiError.from_httpx(exc) from exc
        except httpx.HTTPError as exc:
            logger.warning("API transport error (%s %s): %s", method, path, exc)
            raise ApiError.from_httpx(exc) from exc
        except ValueError as exc:
            logger.warning("API returned an unreadable body (%s %s): %s", method, path, exc)
            raise ApiError("Invalid JSON in response body", kind="server") from exc

    # Auth

    async def login(self, credentials: LoginRequest) -> AuthResponse:
        payload = await self._request("POST", "/auth/login", json=credentials.to_api())
        return AuthResponse.model_validate(payload)

    async def register(self, user_data: RegisterRequest) -> AuthResponse:
        payload = await self._request("POST", "/auth/register", json=user_data.to_api())
        return AuthResponse.model_validate(payload)

    async def get_profile(self) -> User:
        return User.model_validate(await self._request("GET", "/auth/profile"))

    # Businesses

    async def search_businesses(self, params: SearchBusinessesRequest) -> list[Business]:
        payload = await self._request("GET", "/businesses/search", params=params.to_api())
        businesses = [Business.model_validate(item) for item in payload or []]
        if businesses:
            first = businesses[0]
            logger.info(
                "Search returned %s businesses; first=%s at %s",
                len(businesses),
                first.name,
                list(first.location.coordinates),
            )
        return businesses

    async def get_business_by_id(self, business_id: str) -> Business:
        return Business.model_validate(await self._request("GET", f"/businesses/{business_id}"))

    async def get_nearby_businesses(
        self, latitude: float, longitude: float, radius: float | None = None
    ) -> list[Business]:
        radius = radius if radius is not None else self._settings.search.radius_km
        logger.info("Requesting nearby businesses at [%s, %s] radius=%skm", latitude, longitude, radius)
        payload = await self._request(
            "GET",
            "/businesses/nearby",
            params={"latitude": latitude, "longitude": longitude, "radius": radius},
        )
        return [Business.model_validate(item) for item in payload or []]

    # Bookings

    async def create_booking(self, booking_data: CreateBookingRequest) -> Booking:
        return Booking.model_validate(await self._request("POST", "/bookings", json=booking_data.to_api()))

    async def get_user_bookings(self, query: BookingQuery | None = None) -> list[Booking]:
        params = query.to_api() if query is not None else None
        payload = await self._request("GET", "/bookings/my-bookings", params=params)
        return [Booking.model_validate(item) for item in payload or []]

    async def get_booking_by_id(self, booking_id: str) -> Booking:
        return Booking.model_validate(await self._request("GET", f"/bookings/{booking_id}"))

    async def update_booking_status(
        self, booking_id: str, status: BookingStatus, cancellation_reason: str | None = None
    ) -> Booking:
        body: dict[str, Any] = {"status": status}
        if cancellation_reason is not None:
            body["cancellationReason"] = cancellation_reason
        return Booking.model_validate(
            await self._request("PATCH", f"/bookings/{booking_id}/status", json=body)
        )

    async def cancel_booking(self, booking_id: str, cancellation_reason: str | None = None) -> Booking:
        body = {"cancellationReason": cancellation_reason} if cancellation_reason is not None else None
        return Booking.model_validate(
            await self._request("DELETE", f"/bookings/{booking_id}/cancel", json=body)
        )

    async def check_in(self, booking_id: str, access_code: str) -> Booking:
        return Booking.model_validate(
            await self._request("POST", f"/bookings/{booking_id}/checkin", json={"accessCode": access_code})
        )

    async def check_out(self, booking_id: str) -> Booking:
        return Booking.model_validate(await self._request("POST", f"/bookings/{booking_id}/checkout"))

    # Users

    async def update_user_profile(self, update: ProfileUpdate) -> User:
        return User.model_validate(await self._request("PATCH", "/users/profile", json=update.to_api()))
