"""Builders for API-shaped records used across the test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import httpx

from lockerhub.domain.models import Booking, Business

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def business_payload(business_id: str, lat: float, lon: float, **overrides: Any) -> dict[str, Any]:
    """A business record as the API returns it (GeoJSON coordinates are [lon, lat])."""
    data: dict[str, Any] = {
        "_id": business_id,
        "name": f"Business {business_id}",
        "businessType": "cafe",
        "address": {"street": "1 Peachtree St", "city": "Atlanta", "state": "GA", "zipCode": "30308"},
        "location": {"type": "Point", "coordinates": [lon, lat]},
        "totalLockers": 10,
        "availableLockers": 4,
        "pricePerHour": 5.0,
        "rating": 4.5,
    }
    data.update(overrides)
    return data


def booking_payload(booking_id: str, status: str = "confirmed", start: datetime | None = None, **overrides: Any) -> dict[str, Any]:
    start = start or NOW + timedelta(hours=3)
    data: dict[str, Any] = {
        "_id": booking_id,
        "userId": "u1",
        "businessId": "b1",
        "lockerNumber": "7",
        "startTime": start.isoformat(),
        "endTime": (start + timedelta(hours=2)).isoformat(),
        "durationHours": 2,
        "totalAmount": 10.0,
        "status": status,
    }
    data.update(overrides)
    return data


def make_business(business_id: str, lat: float, lon: float, **overrides: Any) -> Business:
    return Business.model_validate(business_payload(business_id, lat, lon, **overrides))


def make_booking(booking_id: str, status: str = "confirmed", start: datetime | None = None, **overrides: Any) -> Booking:
    return Booking.model_validate(booking_payload(booking_id, status, start, **overrides))


def http_status_error(status: int, method: str = "GET", url: str = "https://api.test/x", body: Any = None) -> httpx.HTTPStatusError:
    request = httpx.Request(method, url)
    response = httpx.Response(status, request=request, json=body if body is not None else {})
    return httpx.HTTPStatusError(str(status), request=request, response=response)


