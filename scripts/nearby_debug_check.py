from __future__ import annotations

import argparse
import asyncio

from lockerhub.api.client import ApiClient
from lockerhub.api.errors import ApiError
from lockerhub.config.settings import get_settings
from lockerhub.core.env import resolve_project_path
from lockerhub.core.format import format_distance
from lockerhub.core.geo import GeoPoint, haversine_km
from lockerhub.core.session import SessionStore
from lockerhub.location.debug import get_debug_coordinates

KM_PER_MILE = 1.60934


async def _check(zip_code: str, radius_km: float | None, base_url: str | None) -> int:
    origin = get_debug_coordinates(zip_code)
    if origin is None:
        print("No debug coordinates for ZIP code", zip_code)
        return 2

    settings = get_settings()
    if base_url:
        settings = settings.model_copy(update={"api": settings.api.model_copy(update={"base_url": base_url})})
    client = ApiClient(settings, SessionStore(resolve_project_path(settings.session.path)))

    print(f"Nearby businesses at [{origin.latitude}, {origin.longitude}] (ZIP {zip_code})...")
    try:
        businesses = await client.get_nearby_businesses(origin.latitude, origin.longitude, radius_km)
    except ApiError as exc:
        print("Nearby search failed:", exc.kind, exc.status_code or "-", exc)
        return 2

    print("Found", len(businesses), "businesses")
    for i, b in enumerate(businesses, start=1):
        km = haversine_km(GeoPoint(lat=origin.latitude, lon=origin.longitude), b.location.as_point())
        print(f"  {i}. {b.name} ({b.address.zip_code})")
        print(f"     Coordinates: [{b.location.latitude}, {b.location.longitude}]")
        print(f"     Distance: {format_distance(km)} ({km / KM_PER_MILE:.2f} miles)")
    return 0 if businesses else 1


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Nearby search around a fixed debug ZIP location.")
    p.add_argument("--zip", type=str, default="30068")
    p.add_argument("--radius", type=float, default=None, help="Radius in km (default from config)")
    p.add_argument("--base-url", type=str, default=None)
    args = p.parse_args(argv)
    return asyncio.run(_check(args.zip, args.radius, args.base_url))


if __name__ == "__main__":
    raise SystemExit(main())
