"""
Client-side booking rules and input validation.

The server is authoritative for status transitions and availability; these helpers only
decide what the client offers (e.g., a cancel action) and reject obviously bad input before
a request is sent.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta

from lockerhub.core.time import hours_between, utcnow
from lockerhub.domain.models import Booking

_ZIP_RE = re.compile(r"^\d{5}$")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_RE = re.compile(r"^\+?[\d\s\-()]{10,}$")

NON_CANCELLABLE_STATUSES = frozenset({"completed", "cancelled"})


class BookingValidationError(ValueError):
    """Raised when user input fails a client-side check."""


def can_cancel_booking(booking: Booking, now: datetime | None = None, cutoff_minutes: int = 60) -> bool:
    """Cancellation is offered until `cutoff_minutes` before the booking starts."""
    if booking.status in NON_CANCELLABLE_STATUSES:
        return False
    now = now or utcnow()
    return hours_between(now, booking.start_time) >= cutoff_minutes / 60


def calculate_end_time(start_time: datetime, duration_hours: float) -> datetime:
    return start_time + timedelta(hours=duration_hours)


def is_booking_expired(booking: Booking, now: datetime | None = None) -> bool:
    return (now or utcnow()) > booking.end_time


def upcoming_bookings(bookings: list[Booking], now: datetime | None = None, limit: int = 3) -> list[Booking]:
    """Confirmed bookings that have not started yet, in list order."""
    now = now or utcnow()
    return [b for b in bookings if b.status == "confirmed" and b.start_time > now][:limit]


def current_bookings(bookings: list[Booking]) -> list[Booking]:
    """Bookings that count as in progress on the home summary (active or confirmed)."""
    return [b for b in bookings if b.status in ("active", "confirmed")]


def validate_zip_code(zip_code: str) -> str:
    value = zip_code.strip()
    if not _ZIP_RE.match(value):
        raise BookingValidationError(f"Invalid ZIP code '{zip_code}'")
    return value


def validate_email(email: str) -> str:
    value = email.strip()
    if not _EMAIL_RE.match(value):
        raise BookingValidationError(f"Invalid email address '{email}'")
    return value


def validate_phone_number(phone: str) -> str:
    value = phone.strip()
    if not _PHONE_RE.match(value):
        raise BookingValidationError(f"Invalid phone number '{phone}'")
    return value


def validate_booking_window(
    start_time: datetime,
    end_time: datetime,
    *,
    max_rental_hours: int,
    now: datetime | None = None,
) -> float:
    """Validate a requested rental window and return its duration in hours.

    Raises:
        BookingValidationError: end not after start, duration over the maximum,
            or a start time in the past.
    """
    if end_time <= start_time:
        raise BookingValidationError("End time must be after start time")

    duration = hours_between(start_time, end_time)
    if duration > max_rental_hours:
        raise BookingValidationError(f"Maximum rental duration is {max_rental_hours} hours")

    if start_time < (now or utcnow()):
        raise BookingValidationError("Start time cannot be in the past")
    return duration
