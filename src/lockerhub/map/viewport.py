"""
Map viewport framing.

`compute_region` decides what the map shows, in strict priority order:

1. user location and at least one business: frame the user together with the first
   (nearest) business, centered on their midpoint, spans padded and floored;
2. only a user location: center on the user at metro zoom;
3. only businesses: center on the first business at metro zoom;
4. nothing: the configured default city region.

The business list is expected to be sorted nearest first already (the nearby path sorts
it); this module does not re-check.

`BusinessMap` is the component around it: it recomputes only when its inputs change,
keeps the region as the declarative target and also pushes it through an imperative
`animate_to_region` callback so the widget moves even when it diffs the update away.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from lockerhub.config.settings import MapSettings
from lockerhub.domain.models import Business, Location

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Region:
    """Map center plus latitude/longitude zoom deltas, in degrees."""

    latitude: float
    longitude: float
    latitude_delta: float
    longitude_delta: float


@dataclass(frozen=True)
class Marker:
    identifier: str
    latitude: float
    longitude: float
    title: str
    description: str
    pin_color: str


def default_region(settings: MapSettings) -> Region:
    return Region(
        latitude=settings.default_center.lat,
        longitude=settings.default_center.lon,
        latitude_delta=settings.metro_delta.latitude,
        longitude_delta=settings.metro_delta.longitude,
    )


def region_for_pair(user_location: Location, nearest: Business, settings: MapSettings) -> Region:
    """Region that keeps both the user and `nearest` on screen."""
    business_lat = nearest.location.latitude
    business_lon = nearest.location.longitude

    lat_span = abs(user_location.latitude - business_lat)
    lon_span = abs(user_location.longitude - business_lon)

    # The floor keeps the region non-degenerate when both points (nearly) coincide.
    return Region(
        latitude=(user_location.latitude + business_lat) / 2,
        longitude=(user_location.longitude + business_lon) / 2,
        latitude_delta=max(lat_span * settings.padding_factor, settings.min_delta),
        longitude_delta=max(lon_span * settings.padding_factor, settings.min_delta),
    )


def compute_region(
    user_location: Location | None,
    businesses: Sequence[Business],
    *,
    settings: MapSettings,
) -> Region:
    if user_location is not None and businesses:
        return region_for_pair(user_location, businesses[0], settings)

    if user_location is not None:
        return Region(
            latitude=user_location.latitude,
            longitude=user_location.longitude,
            latitude_delta=settings.metro_delta.latitude,
            longitude_delta=settings.metro_delta.longitude,
        )

    if businesses:
        first = businesses[0]
        return Region(
            latitude=first.location.latitude,
            longitude=first.location.longitude,
            latitude_delta=settings.metro_delta.latitude,
            longitude_delta=settings.metro_delta.longitude,
        )

    return default_region(settings)


AnimateCallback = Callable[[Region], None]


class BusinessMap:
    """Map state for a set of businesses around the user.

    `center_on_nearest_business` and `show_user_and_nearest_business` are display hints
    handed through to the rendering layer; framing follows the priority rules regardless.
    """

    def __init__(
        self,
        settings: MapSettings,
        *,
        animate_to_region: AnimateCallback | None = None,
        center_on_nearest_business: bool = False,
        show_user_and_nearest_business: bool = True,
    ):
        self._settings = settings
        self._animate = animate_to_region
        self.center_on_nearest_business = center_on_nearest_business
        self.show_user_and_nearest_business = show_user_and_nearest_business
        self._user_location: Location | None = None
        self._businesses: tuple[Business, ...] = ()
        self._inputs_key: tuple | None = None
        self.region = default_region(settings)

    @staticmethod
    def _key(user_location: Location | None, businesses: Sequence[Business]) -> tuple:
        loc = (user_location.latitude, user_location.longitude) if user_location is not None else None
        return (loc, tuple((b.id, b.location.coordinates) for b in businesses))

    @property
    def businesses(self) -> tuple[Business, ...]:
        return self._businesses

    def update(self, user_location: Location | None, businesses: Sequence[Business]) -> bool:
        """Feed new inputs; returns True if the region was recomputed."""
        # Marker text (names, locker counts) always follows the latest list; the region only
        # moves when the user or a business position changes.
        self._user_location = user_location
        self._businesses = tuple(businesses)

        key = self._key(user_location, businesses)
        if key == self._inputs_key:
            return False

        self._inputs_key = key
        self.region = compute_region(user_location, self._businesses, settings=self._settings)
        logger.debug("Map region recomputed: %s", self.region)
        if self._animate is not None:
            self._animate(self.region)
        return True

    def markers(self) -> list[Marker]:
        markers: list[Marker] = []
        if self._user_location is not None:
            markers.append(
                Marker(
                    identifier="user-location",
                    latitude=self._user_location.latitude,
                    longitude=self._user_location.longitude,
                    title="Your Location",
                    description="You are here",
                    pin_color="blue",
                )
            )
        for business in self._businesses:
            markers.append(
                Marker(
                    identifier=business.id,
                    latitude=business.location.coordinates[1],
                    longitude=business.location.coordinates[0],
                    title=business.name,
                    description=f"{business.available_lockers} lockers available",
                    pin_color="red",
                )
            )
        return markers
