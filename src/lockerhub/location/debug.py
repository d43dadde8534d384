"""
Fixed coordinates for development.

Looking up one of these ZIP codes bypasses the geolocation provider entirely, which makes
nearby-search scenarios repeatable on simulators and in tests.
"""

from __future__ import annotations

from lockerhub.domain.models import Location

DEBUG_COORDINATES: dict[str, Location] = {
    "30068": Location(latitude=33.9427, longitude=-84.4407),  # Marietta, GA
    "30308": Location(latitude=33.7729, longitude=-84.3627),  # Atlanta, GA
    "30307": Location(latitude=33.7632, longitude=-84.3330),  # Atlanta, GA (Inman Park)
    "30339": Location(latitude=33.8781, longitude=-84.4680),  # Atlanta, GA (The Battery)
    "73000": Location(latitude=35.2226, longitude=-97.4395),  # Oklahoma (not a real ZIP)
}


def get_debug_coordinates(zip_code: str) -> Location | None:
    return DEBUG_COORDINATES.get(zip_code.strip())
