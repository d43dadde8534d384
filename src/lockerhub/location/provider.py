"""
Location provider.

Wraps a device geolocation backend (`PositionSource`) with:
- a permission step (platforms with manifest-granted permission have no prompt),
- a bounded-timeout position request with a development fallback point,
- a polling watch with a minimum-movement filter,
- debug ZIP coordinates for repeatable scenarios,
- classified errors so callers can tell "denied" from "no fix".

The geolocation backend itself is out of scope; `StaticPositionSource` is what the CLI and
the tests plug in.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Protocol

from lockerhub.config.settings import Settings
from lockerhub.core.geo import distance_km, haversine_km
from lockerhub.domain.models import Location
from lockerhub.location.debug import get_debug_coordinates

logger = logging.getLogger(__name__)

PERMISSION_DENIED = 1
POSITION_UNAVAILABLE = 2
TIMEOUT = 3


class LocationError(Exception):
    """A failed location request with a numeric code and a user-facing message."""

    code = 0
    default_message = "An unknown location error occurred."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class LocationPermissionDenied(LocationError):
    code = PERMISSION_DENIED
    default_message = "Location access denied. Please enable location permissions in settings."


class PositionUnavailable(LocationError):
    code = POSITION_UNAVAILABLE
    default_message = "Unable to determine location. Please check your GPS/network connection."


class LocationTimeout(LocationError):
    code = TIMEOUT
    default_message = "Location request timed out. Please try again."


def classify_location_error(exc: BaseException) -> LocationError:
    """Map any backend failure onto the `LocationError` taxonomy."""
    if isinstance(exc, LocationError):
        return exc
    if isinstance(exc, (asyncio.TimeoutError, TimeoutError)):
        return LocationTimeout()
    if isinstance(exc, PermissionError):
        return LocationPermissionDenied()
    return LocationError()


class PositionSource(Protocol):
    async def get_position(self) -> Location: ...


class StaticPositionSource:
    """A position source that always reports the same fix (or always fails)."""

    def __init__(self, location: Location | None = None, error: LocationError | None = None):
        if location is None and error is None:
            error = PositionUnavailable()
        self._location = location
        self._error = error

    async def get_position(self) -> Location:
        if self._error is not None:
            raise self._error
        assert self._location is not None
        return self._location


PermissionPrompt = Callable[[], "bool | Awaitable[bool]"]
LocationCallback = Callable[[Location], None]
LocationErrorCallback = Callable[[LocationError], None]


class LocationProvider:
    """Device location access with development fallbacks."""

    def __init__(
        self,
        settings: Settings,
        source: PositionSource,
        permission_prompt: PermissionPrompt | None = None,
    ):
        self._settings = settings
        self._source = source
        self._permission_prompt = permission_prompt
        self._watches: dict[int, asyncio.Task[None]] = {}
        self._next_watch_id = 1

    @property
    def _timeout_seconds(self) -> float:
        if self._settings.app.is_development:
            return float(self._settings.location.timeout_seconds)
        return float(self._settings.location.production_timeout_seconds)

    def _fallback(self) -> Location:
        fb = self._settings.location.fallback
        return Location(latitude=fb.latitude, longitude=fb.longitude, accuracy=fb.accuracy)

    async def request_permission(self) -> bool:
        """Ask for location permission; no prompt configured means it is manifest-granted."""
        if self._permission_prompt is None:
            return True
        try:
            granted = self._permission_prompt()
            if inspect.isawaitable(granted):
                granted = await granted
        except Exception as exc:
            logger.warning("Location permission error: %s", exc)
            return False
        return bool(granted)

    async def get_current_location(self) -> Location:
        """Return the current position.

        Development builds resolve to the configured fallback point when the backend fails;
        production builds raise a classified `LocationError`.
        """
        try:
            location = await asyncio.wait_for(self._source.get_position(), self._timeout_seconds)
        except Exception as exc:
            error = classify_location_error(exc)
            if self._settings.app.is_development:
                fallback = self._fallback()
                logger.info(
                    "Location failed (%s); using fallback %.4f,%.4f",
                    error.message,
                    fallback.latitude,
                    fallback.longitude,
                )
                return fallback
            raise error from (None if error is exc else exc)

        logger.debug("Location obtained: %.4f,%.4f", location.latitude, location.longitude)
        return location

    async def get_location_with_permission(self) -> Location:
        if not await self.request_permission():
            raise LocationPermissionDenied()
        return await self.get_current_location()

    def watch_location(self, on_update: LocationCallback, on_error: LocationErrorCallback) -> int:
        """Start polling the backend; returns a handle for `clear_watch`.

        Must be called from a running event loop.
        """
        watch_id = self._next_watch_id
        self._next_watch_id += 1
        task = asyncio.get_running_loop().create_task(self._watch_loop(on_update, on_error))
        task.add_done_callback(lambda t: self._watch_finished(watch_id, t))
        self._watches[watch_id] = task
        return watch_id

    def _watch_finished(self, watch_id: int, task: asyncio.Task[None]) -> None:
        self._watches.pop(watch_id, None)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Location watch %s stopped", watch_id, exc_info=task.exception())

    def clear_watch(self, watch_id: int) -> None:
        task = self._watches.pop(watch_id, None)
        if task is not None:
            task.cancel()

    @staticmethod
    def _notify(callback: Callable[[Any], None], value: Any) -> None:
        try:
            callback(value)
        except Exception:
            logger.exception("Location watch callback failed")

    async def _watch_loop(self, on_update: LocationCallback, on_error: LocationErrorCallback) -> None:
        min_move_m = float(self._settings.location.watch_distance_filter_m)
        interval = float(self._settings.location.watch_interval_seconds)
        last: Location | None = None

        while True:
            try:
                location = await asyncio.wait_for(self._source.get_position(), self._timeout_seconds)
            except Exception as exc:
                self._notify(on_error, classify_location_error(exc))
            else:
                moved_m = (
                    haversine_km(last.as_point(), location.as_point()) * 1000 if last is not None else None
                )
                if moved_m is None or moved_m >= min_move_m:
                    last = location
                    self._notify(on_update, location)
            await asyncio.sleep(interval)

    def get_debug_location(self, zip_code: str) -> Location | None:
        """Fixed coordinates for a known ZIP code (development builds only)."""
        if not self._settings.app.is_development:
            return None
        location = get_debug_coordinates(zip_code)
        if location is not None:
            logger.info("Using debug coordinates for ZIP code %s", zip_code)
        return location

    @staticmethod
    def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """Distance in kilometers (same formula as every other distance in the app)."""
        return distance_km(lat1, lon1, lat2, lon2)
