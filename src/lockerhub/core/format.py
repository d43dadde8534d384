"""Display formatting shared by the CLI and the smoke scripts."""

from __future__ import annotations

from datetime import datetime

from lockerhub.core.time import utcnow


def format_distance(distance_km: float) -> str:
    if distance_km < 1:
        return f"{distance_km * 1000:.0f}m"
    return f"{distance_km:.1f}km"


def format_currency(amount: float) -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_duration(hours: float) -> str:
    if hours == 1:
        return "1 hour"
    if float(hours).is_integer():
        return f"{int(hours)} hours"
    return f"{hours:g} hours"


def format_datetime(dt: datetime) -> str:
    return dt.strftime("%b %d, %Y %I:%M %p")


def time_remaining(end_time: datetime, now: datetime | None = None) -> str:
    """Human-readable time left until `end_time` ("Expired" once it has passed)."""
    now = now or utcnow()
    seconds = int((end_time - now).total_seconds())
    if seconds <= 0:
        return "Expired"

    hours, rest = divmod(seconds, 3600)
    minutes = rest // 60
    if hours > 0:
        return f"{hours}h {minutes}m remaining"
    return f"{minutes}m remaining"
