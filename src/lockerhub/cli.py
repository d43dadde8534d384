"""
LockerHub CLI entrypoint.

This CLI is the presentation layer for local use and debugging against a running API.
It delegates all state handling to the containers in `lockerhub.store` and prints
their state; errors are the same user-facing strings a container stores.
"""

from __future__ import annotations

import argparse
import asyncio
import json
from datetime import datetime
from typing import Any, Awaitable, Callable, Sequence

from lockerhub.config.settings import get_settings
from lockerhub.core.format import format_currency, format_datetime, format_distance, format_duration, time_remaining
from lockerhub.core.logging import configure_logging
from lockerhub.core.time import parse_datetime
from lockerhub.domain.booking_rules import (
    BookingValidationError,
    calculate_end_time,
    can_cancel_booking,
    validate_booking_window,
    validate_email,
    validate_phone_number,
    validate_zip_code,
)
from lockerhub.domain.models import (
    Booking,
    BookingQuery,
    Business,
    CreateBookingRequest,
    Location,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
    SearchBusinessesRequest,
)
from lockerhub.location.provider import LocationError
from lockerhub.map.viewport import BusinessMap
from lockerhub.store.app import AppStore, build_app
from lockerhub.store.base import Action


def _dump(items: Sequence[Any]) -> None:
    print(json.dumps([i.model_dump(mode="json", by_alias=True) for i in items], ensure_ascii=False, indent=2))


def _print_businesses(businesses: Sequence[Business]) -> None:
    if not businesses:
        print("No businesses found.")
        return
    for i, b in enumerate(businesses, start=1):
        distance = f"  {format_distance(b.distance_km)}" if b.distance_km is not None else ""
        print(
            f"{i:>2}. {b.name} ({b.address.city} {b.address.zip_code})  "
            f"{b.available_lockers}/{b.total_lockers} lockers  {format_currency(b.price_per_hour)}/hr{distance}"
        )
        print(f"    id={b.id}  lat={b.location.latitude:.4f} lon={b.location.longitude:.4f}")


def _print_booking(b: Booking) -> None:
    where = b.business.name if b.business is not None else b.business_id
    print(f"{b.id}  [{b.status}]  {where}  locker {b.locker_number or '-'}")
    print(
        f"    {format_datetime(b.start_time)} -> {format_datetime(b.end_time)}"
        f"  ({format_duration(b.duration_hours)}, {format_currency(b.total_amount)})"
    )
    if b.status == "active":
        print(f"    {time_remaining(b.end_time)}")
    if b.access_code:
        print(f"    access code: {b.access_code}")


def _failed(action: Action) -> bool:
    if action.type.endswith("/rejected"):
        print(f"Error: {action.error}")
        return True
    return False


async def _resolve_location(app: AppStore, args: argparse.Namespace) -> Location:
    if args.lat is not None and args.lon is not None:
        return Location(latitude=float(args.lat), longitude=float(args.lon))
    if args.zip:
        debug = app.location.get_debug_location(args.zip)
        if debug is None:
            raise BookingValidationError(f"No debug coordinates for ZIP code {args.zip}")
        return debug
    return await app.location.get_location_with_permission()


def _run(handler: Callable[[AppStore, argparse.Namespace], Awaitable[int]]) -> Callable[[argparse.Namespace], int]:
    def command(args: argparse.Namespace) -> int:
        app = build_app(get_settings())
        try:
            return asyncio.run(handler(app, args))
        except LocationError as exc:
            print(f"Location error: {exc.message}")
        except BookingValidationError as exc:
            print(f"Invalid input: {exc}")
        return 1

    return command


async def _login(app: AppStore, args: argparse.Namespace) -> int:
    action = await app.auth.login(LoginRequest(email=validate_email(args.email), password=args.password))
    if _failed(action):
        return 1
    print(f"Signed in as {app.auth.state.user.full_name}")
    return 0


async def _register(app: AppStore, args: argparse.Namespace) -> int:
    request = RegisterRequest(
        first_name=args.first_name,
        last_name=args.last_name,
        email=validate_email(args.email),
        password=args.password,
        phone_number=validate_phone_number(args.phone),
    )
    action = await app.auth.register(request)
    if _failed(action):
        return 1
    print(f"Registered and signed in as {app.auth.state.user.full_name}")
    return 0


async def _logout(app: AppStore, _: argparse.Namespace) -> int:
    await app.auth.logout()
    print("Signed out.")
    return 0


async def _profile(app: AppStore, args: argparse.Namespace) -> int:
    action = await app.auth.load_stored_auth()
    if _failed(action):
        return 1
    user = app.auth.state.user
    if args.first_name or args.last_name or args.phone:
        update = ProfileUpdate(
            first_name=args.first_name or user.first_name,
            last_name=args.last_name or user.last_name,
            phone_number=validate_phone_number(args.phone) if args.phone else user.phone_number,
        )
        if _failed(await app.auth.update_profile(update)):
            return 1
        user = app.auth.state.user
    print(f"{user.full_name} <{user.email}>  phone={user.phone_number or '-'}  role={user.role}")
    return 0


async def _search(app: AppStore, args: argparse.Namespace) -> int:
    zip_code = validate_zip_code(args.zip) if args.zip else None

    # Development: a ZIP with fixed debug coordinates becomes a nearby search around them.
    debug = app.location.get_debug_location(zip_code) if zip_code else None
    if debug is not None:
        action = await app.business.fetch_nearby_businesses(debug.latitude, debug.longitude)
    else:
        action = await app.business.search_businesses(SearchBusinessesRequest(zip_code=zip_code, name=args.name))
    if _failed(action):
        return 1

    results = app.business.state.display_businesses
    if args.json:
        _dump(results)
    else:
        _print_businesses(results)
    return 0


async def _nearby(app: AppStore, args: argparse.Namespace) -> int:
    location = await _resolve_location(app, args)
    action = await app.business.fetch_nearby_businesses(location.latitude, location.longitude, args.radius)
    if _failed(action):
        return 1
    if args.json:
        _dump(app.business.state.nearby_businesses)
    else:
        print(f"Nearby lockers around [{location.latitude:.4f}, {location.longitude:.4f}]:")
        _print_businesses(app.business.state.nearby_businesses)
    return 0


async def _business(app: AppStore, args: argparse.Namespace) -> int:
    action = await app.business.fetch_business_by_id(args.business_id)
    if _failed(action):
        return 1
    b = app.business.state.selected_business
    print(f"{b.name} ({b.business_type})  rating {b.rating:.1f} ({b.review_count} reviews)")
    print(f"    {b.address.street}, {b.address.city}, {b.address.state} {b.address.zip_code}")
    print(f"    {b.available_lockers}/{b.total_lockers} lockers available at {format_currency(b.price_per_hour)}/hr")
    if b.description:
        print(f"    {b.description}")
    return 0


async def _region(app: AppStore, args: argparse.Namespace) -> int:
    location = await _resolve_location(app, args)
    action = await app.business.fetch_nearby_businesses(location.latitude, location.longitude, args.radius)
    if _failed(action):
        return 1

    business_map = BusinessMap(app.settings.map)
    business_map.update(location, app.business.state.display_businesses)
    region = business_map.region
    if args.json:
        print(
            json.dumps(
                {
                    "latitude": region.latitude,
                    "longitude": region.longitude,
                    "latitudeDelta": region.latitude_delta,
                    "longitudeDelta": region.longitude_delta,
                    "markers": len(business_map.markers()),
                },
                indent=2,
            )
        )
        return 0
    print(
        f"center=({region.latitude:.4f}, {region.longitude:.4f})  "
        f"latitudeDelta={region.latitude_delta:.4f} longitudeDelta={region.longitude_delta:.4f}"
    )
    for marker in business_map.markers():
        print(f"    [{marker.pin_color}] {marker.title}  ({marker.latitude:.4f}, {marker.longitude:.4f})")
    return 0


async def _bookings(app: AppStore, args: argparse.Namespace) -> int:
    action = await app.booking.fetch_user_bookings(BookingQuery(status=args.status))
    if _failed(action):
        return 1
    bookings = app.booking.state.bookings
    if args.json:
        _dump(bookings)
        return 0
    if not bookings:
        print("No bookings.")
    for b in bookings:
        _print_booking(b)
    return 0


def _parse_time(value: str, tz: str, label: str) -> datetime:
    try:
        return parse_datetime(value, tz)
    except ValueError as exc:
        raise BookingValidationError(f"Invalid {label} time '{value}'") from exc


async def _book(app: AppStore, args: argparse.Namespace) -> int:
    tz = app.settings.app.timezone
    start = _parse_time(args.start, tz, "start")
    end = _parse_time(args.end, tz, "end") if args.end else calculate_end_time(start, float(args.hours))
    duration = validate_booking_window(start, end, max_rental_hours=app.settings.booking.max_rental_hours)

    request = CreateBookingRequest(
        business_id=args.business_id,
        start_time=start,
        duration_hours=duration,
        special_instructions=args.note,
    )
    action = await app.booking.create_booking(request)
    if _failed(action):
        return 1
    print("Booking confirmed:")
    _print_booking(action.payload)
    return 0


async def _cancel(app: AppStore, args: argparse.Namespace) -> int:
    action = await app.booking.fetch_booking_by_id(args.booking_id)
    if _failed(action):
        return 1
    booking = app.booking.state.selected_booking
    cutoff = app.settings.booking.cancel_cutoff_minutes
    if not can_cancel_booking(booking, cutoff_minutes=cutoff):
        print(f"Booking {booking.id} can no longer be cancelled (status {booking.status}).")
        return 1
    action = await app.booking.cancel_booking(booking.id, args.reason)
    if _failed(action):
        return 1
    print("Booking cancelled:")
    _print_booking(action.payload)
    return 0


async def _checkin(app: AppStore, args: argparse.Namespace) -> int:
    action = await app.booking.check_in(args.booking_id, args.code)
    if _failed(action):
        return 1
    _print_booking(action.payload)
    return 0


async def _checkout(app: AppStore, args: argparse.Namespace) -> int:
    action = await app.booking.check_out(args.booking_id)
    if _failed(action):
        return 1
    _print_booking(action.payload)
    return 0


async def _location(app: AppStore, args: argparse.Namespace) -> int:
    location = await _resolve_location(app, args)
    accuracy = f" (±{location.accuracy:.0f} m)" if location.accuracy is not None else ""
    print(f"{location.latitude:.4f}, {location.longitude:.4f}{accuracy}")
    return 0


def _add_location_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--lat", type=float, default=None)
    parser.add_argument("--lon", type=float, default=None)
    parser.add_argument("--zip", type=str, default=None, help="Use fixed debug coordinates (development only)")


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the LockerHub CLI."""
    parser = argparse.ArgumentParser(prog="lockerhub")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("login", help="Sign in and persist the session token.")
    p.add_argument("--email", required=True)
    p.add_argument("--password", required=True)
    p.set_defaults(func=_run(_login))

    p = sub.add_parser("register", help="Create an account and sign in.")
    p.add_argument("--first-name", dest="first_name", required=True)
    p.add_argument("--last-name", dest="last_name", required=True)
    p.add_argument("--email", required=True)
    p.add_argument("--password", required=True)
    p.add_argument("--phone", required=True)
    p.set_defaults(func=_run(_register))

    p = sub.add_parser("logout", help="Forget the stored session.")
    p.set_defaults(func=_run(_logout))

    p = sub.add_parser("profile", help="Show (or update) the signed-in user's profile.")
    p.add_argument("--first-name", dest="first_name", default=None)
    p.add_argument("--last-name", dest="last_name", default=None)
    p.add_argument("--phone", default=None)
    p.set_defaults(func=_run(_profile))

    p = sub.add_parser("search", help="Search businesses by ZIP code or name.")
    group = p.add_mutually_exclusive_group(required=True)
    group.add_argument("--zip", type=str)
    group.add_argument("--name", type=str)
    p.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    p.set_defaults(func=_run(_search))

    p = sub.add_parser("nearby", help="List businesses around a location, nearest first.")
    _add_location_args(p)
    p.add_argument("--radius", type=float, default=None, help="Radius in km (default from config)")
    p.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    p.set_defaults(func=_run(_nearby))

    p = sub.add_parser("business", help="Show one business.")
    p.add_argument("business_id")
    p.set_defaults(func=_run(_business))

    p = sub.add_parser("region", help="Compute the map region for a location and its nearby businesses.")
    _add_location_args(p)
    p.add_argument("--radius", type=float, default=None)
    p.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    p.set_defaults(func=_run(_region))

    p = sub.add_parser("bookings", help="List your bookings.")
    p.add_argument(
        "--status",
        default=None,
        choices=["pending", "confirmed", "active", "completed", "cancelled", "expired"],
    )
    p.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    p.set_defaults(func=_run(_bookings))

    p = sub.add_parser("book", help="Book a locker.")
    p.add_argument("--business-id", dest="business_id", required=True)
    p.add_argument("--start", required=True, help="ISO datetime (e.g. 2026-10-20T10:00)")
    window = p.add_mutually_exclusive_group(required=True)
    window.add_argument("--end", help="ISO datetime")
    window.add_argument("--hours", type=float)
    p.add_argument("--note", default=None, help="Special instructions")
    p.set_defaults(func=_run(_book))

    p = sub.add_parser("cancel", help="Cancel a booking (at least one hour before it starts).")
    p.add_argument("booking_id")
    p.add_argument("--reason", default=None)
    p.set_defaults(func=_run(_cancel))

    p = sub.add_parser("checkin", help="Check in to a booked locker.")
    p.add_argument("booking_id")
    p.add_argument("--code", required=True, help="Access code")
    p.set_defaults(func=_run(_checkin))

    p = sub.add_parser("checkout", help="Check out of a locker.")
    p.add_argument("booking_id")
    p.set_defaults(func=_run(_checkout))

    p = sub.add_parser("location", help="Print the current (or debug) location.")
    _add_location_args(p)
    p.set_defaults(func=_run(_location))
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m lockerhub.cli`."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging("DEBUG" if args.verbose else None)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
