"""
Search result reconciliation.

The business container tracks two independent lists: results of an explicit search
(ZIP / name) and ambient nearby results around the user's position. Views show the
explicit results when there are any and fall back to nearby results otherwise.
"""

from __future__ import annotations

import logging
from typing import Sequence

from lockerhub.core.geo import GeoPoint, haversine_km
from lockerhub.domain.models import Business

logger = logging.getLogger(__name__)


def annotate_distances(businesses: Sequence[Business], origin: GeoPoint) -> list[Business]:
    """Return copies carrying `distance_km` from `origin`, nearest first.

    This is the only producer of `Business.distance_km`. The sort is stable, so the
    server's order is kept for equal distances.
    """
    annotated = [
        b.model_copy(update={"distance_km": haversine_km(origin, b.location.as_point())}) for b in businesses
    ]
    annotated.sort(key=lambda b: b.distance_km)
    return annotated


def display_businesses(search_results: Sequence[Business], nearby_results: Sequence[Business]) -> list[Business]:
    """Pick the list to show: explicit search results first, nearby results as fallback."""
    if search_results:
        logger.debug("Using %s explicit search results", len(search_results))
        return list(search_results)
    if nearby_results:
        logger.debug("Using %s nearby results", len(nearby_results))
        return list(nearby_results)
    return []
