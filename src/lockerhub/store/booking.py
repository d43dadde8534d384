"""
Booking container.

Merge rules:
- a created booking is prepended to `bookings` (and to `active_bookings` if it is active);
- any later update (status change, cancel, check-in/out) replaces the booking in place and
  adds it to or removes it from `active_bookings` depending on its new status;
- the selected booking follows updates to the same id.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from lockerhub.api.client import ApiClient
from lockerhub.domain.models import Booking, BookingQuery, BookingStatus, CreateBookingRequest
from lockerhub.store.base import Action, AsyncOperation, Store, reduce_operations, run_operation

CREATE_BOOKING = AsyncOperation("booking/createBooking", "Failed to create booking")
FETCH_USER_BOOKINGS = AsyncOperation("booking/fetchUserBookings", "Failed to fetch bookings")
FETCH_ACTIVE_BOOKINGS = AsyncOperation("booking/fetchActiveBookings", "Failed to fetch active bookings")
FETCH_BOOKING = AsyncOperation("booking/fetchBookingById", "Failed to fetch booking")
UPDATE_BOOKING_STATUS = AsyncOperation("booking/updateBookingStatus", "Failed to update booking")
CANCEL_BOOKING = AsyncOperation("booking/cancelBooking", "Failed to cancel booking")
CHECK_IN = AsyncOperation("booking/checkInToLocker", "Failed to check in")
CHECK_OUT = AsyncOperation("booking/checkOutFromLocker", "Failed to check out")

CLEAR_ERROR = "booking/clearError"
SET_SELECTED = "booking/setSelectedBooking"
CLEAR_BOOKINGS = "booking/clearBookings"


@dataclass(frozen=True)
class BookingState:
    bookings: tuple[Booking, ...] = ()
    active_bookings: tuple[Booking, ...] = ()
    selected_booking: Booking | None = None
    is_loading: bool = False
    error: str | None = None


def _created(state: BookingState, booking: Booking) -> BookingState:
    active = (booking, *state.active_bookings) if booking.status == "active" else state.active_bookings
    return replace(state, bookings=(booking, *state.bookings), active_bookings=active)


def _updated(state: BookingState, booking: Booking) -> BookingState:
    bookings = tuple(booking if b.id == booking.id else b for b in state.bookings)

    if booking.status == "active":
        if any(b.id == booking.id for b in state.active_bookings):
            active = tuple(booking if b.id == booking.id else b for b in state.active_bookings)
        else:
            active = (*state.active_bookings, booking)
    else:
        active = tuple(b for b in state.active_bookings if b.id != booking.id)

    selected = state.selected_booking
    if selected is not None and selected.id == booking.id:
        selected = booking
    return replace(state, bookings=bookings, active_bookings=active, selected_booking=selected)


_HANDLERS = {
    CREATE_BOOKING: _created,
    FETCH_USER_BOOKINGS: lambda state, bookings: replace(state, bookings=tuple(bookings)),
    FETCH_ACTIVE_BOOKINGS: lambda state, bookings: replace(state, active_bookings=tuple(bookings)),
    FETCH_BOOKING: lambda state, booking: replace(state, selected_booking=booking),
    UPDATE_BOOKING_STATUS: _updated,
    CANCEL_BOOKING: _updated,
    CHECK_IN: _updated,
    CHECK_OUT: _updated,
}


def booking_reducer(state: BookingState, action: Action) -> BookingState:
    next_state = reduce_operations(state, action, _HANDLERS)
    if next_state is not None:
        return next_state

    if action.type == CLEAR_ERROR:
        return replace(state, error=None)
    if action.type == SET_SELECTED:
        return replace(state, selected_booking=action.payload)
    if action.type == CLEAR_BOOKINGS:
        return replace(state, bookings=(), active_bookings=(), selected_booking=None)
    return state


class BookingContainer:
    """Runs booking operations against the API and keeps `BookingState` current."""

    def __init__(self, client: ApiClient):
        self._client = client
        self.store: Store[BookingState] = Store(booking_reducer, BookingState())

    @property
    def state(self) -> BookingState:
        return self.store.state

    async def create_booking(self, request: CreateBookingRequest) -> Action:
        async def call() -> Booking:
            return await self._client.create_booking(request)

        return await run_operation(self.store, CREATE_BOOKING, call)

    async def fetch_user_bookings(self, query: BookingQuery | None = None) -> Action:
        async def call() -> list[Booking]:
            return await self._client.get_user_bookings(query)

        return await run_operation(self.store, FETCH_USER_BOOKINGS, call)

    async def fetch_active_bookings(self) -> Action:
        async def call() -> list[Booking]:
            return await self._client.get_user_bookings(BookingQuery(status="active"))

        return await run_operation(self.store, FETCH_ACTIVE_BOOKINGS, call)

    async def fetch_booking_by_id(self, booking_id: str) -> Action:
        async def call() -> Booking:
            return await self._client.get_booking_by_id(booking_id)

        return await run_operation(self.store, FETCH_BOOKING, call)

    async def update_booking_status(
        self, booking_id: str, status: BookingStatus, cancellation_reason: str | None = None
    ) -> Action:
        async def call() -> Booking:
            return await self._client.update_booking_status(booking_id, status, cancellation_reason)

        return await run_operation(self.store, UPDATE_BOOKING_STATUS, call)

    async def cancel_booking(self, booking_id: str, cancellation_reason: str | None = None) -> Action:
        async def call() -> Booking:
            return await self._client.cancel_booking(booking_id, cancellation_reason)

        return await run_operation(self.store, CANCEL_BOOKING, call)

    async def check_in(self, booking_id: str, access_code: str) -> Action:
        async def call() -> Booking:
            return await self._client.check_in(booking_id, access_code)

        return await run_operation(self.store, CHECK_IN, call)

    async def check_out(self, booking_id: str) -> Action:
        async def call() -> Booking:
            return await self._client.check_out(booking_id)

        return await run_operation(self.store, CHECK_OUT, call)

    def clear_error(self) -> None:
        self.store.dispatch(Action(CLEAR_ERROR))

    def set_selected_booking(self, booking: Booking | None) -> None:
        self.store.dispatch(Action(SET_SELECTED, payload=booking))

    def clear_bookings(self) -> None:
        self.store.dispatch(Action(CLEAR_BOOKINGS))
