from __future__ import annotations

import argparse
import asyncio

from lockerhub.api.client import ApiClient
from lockerhub.api.errors import ApiError
from lockerhub.config.settings import get_settings
from lockerhub.core.env import resolve_project_path
from lockerhub.core.session import SessionStore
from lockerhub.domain.models import SearchBusinessesRequest


# Rough box around metro Atlanta: latitude (33, 34), longitude (-85, -84).
ATLANTA_BOX = ((33.0, 34.0), (-85.0, -84.0))


def in_box(lat: float, lon: float, box: tuple[tuple[float, float], tuple[float, float]] = ATLANTA_BOX) -> bool:
    (lat_min, lat_max), (lon_min, lon_max) = box
    return lat_min < lat < lat_max and lon_min < lon < lon_max


async def _check(zip_code: str, base_url: str | None) -> int:
    settings = get_settings()
    if base_url:
        settings = settings.model_copy(update={"api": settings.api.model_copy(update={"base_url": base_url})})
    client = ApiClient(settings, SessionStore(resolve_project_path(settings.session.path)))

    try:
        businesses = await client.search_businesses(SearchBusinessesRequest(zip_code=zip_code))
    except ApiError as exc:
        print("Search failed:", exc.kind, exc.status_code or "-", exc)
        return 2

    print("Businesses found:", len(businesses))
    if not businesses:
        return 1

    first = businesses[0]
    lon, lat = first.location.coordinates
    print("First business:", first.name)
    print("Coordinates [lon, lat]:", [lon, lat])
    print("Address:", first.address.model_dump())
    if in_box(lat, lon):
        print("OK: coordinates are in the Atlanta area")
        return 0
    print("FAIL: coordinates are NOT in the Atlanta area")
    return 1


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Search by ZIP code and check the first result's coordinates.")
    p.add_argument("--zip", type=str, default="30308")
    p.add_argument("--base-url", type=str, default=None)
    args = p.parse_args(argv)
    return asyncio.run(_check(args.zip, args.base_url))


if __name__ == "__main__":
    raise SystemExit(main())
