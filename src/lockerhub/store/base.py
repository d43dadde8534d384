"""
State container primitives.

Each domain (auth, business, booking) keeps an immutable state value and a pure reducer
`(state, action) -> state`. Asynchronous operations are named (`"booking/createBooking"`)
and observable in three phases:

- pending: loading on, error cleared
- fulfilled: loading off, data replaced or merged, error cleared
- rejected: loading off, a user-displayable error stored, prior data untouched

`run_operation` awaits the API call and dispatches the outcome. There is no sequencing
between concurrent runs of the same operation; whichever response lands last wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Generic, TypeVar

from lockerhub.api.errors import ApiError, error_message

logger = logging.getLogger(__name__)

S = TypeVar("S")
T = TypeVar("T")

Reducer = Callable[[S, "Action"], S]
Listener = Callable[["Action"], None]


@dataclass(frozen=True)
class Action:
    """Something that happened: a phase of an async operation or a plain state update."""

    type: str
    payload: Any = None
    error: str | None = None


@dataclass(frozen=True)
class AsyncOperation:
    """A named asynchronous operation and the error shown when it fails without detail."""

    name: str
    default_error: str

    @property
    def pending(self) -> str:
        return f"{self.name}/pending"

    @property
    def fulfilled(self) -> str:
        return f"{self.name}/fulfilled"

    @property
    def rejected(self) -> str:
        return f"{self.name}/rejected"


def reduce_async(
    state: S,
    action: Action,
    operation: AsyncOperation,
    on_fulfilled: Callable[[S, Any], S],
    on_rejected: Callable[[S], S] | None = None,
) -> S | None:
    """Apply the shared three-phase shape; returns None if `action` is not for `operation`.

    `state` must be a dataclass with `is_loading` and `error` fields.
    """
    if action.type == operation.pending:
        return replace(state, is_loading=True, error=None)  # type: ignore[type-var]
    if action.type == operation.fulfilled:
        return on_fulfilled(replace(state, is_loading=False, error=None), action.payload)  # type: ignore[type-var]
    if action.type == operation.rejected:
        next_state = replace(state, is_loading=False, error=action.error)  # type: ignore[type-var]
        return on_rejected(next_state) if on_rejected else next_state
    return None


def reduce_operations(
    state: S,
    action: Action,
    handlers: dict[AsyncOperation, Callable[[S, Any], S]],
) -> S | None:
    for operation, on_fulfilled in handlers.items():
        next_state = reduce_async(state, action, operation, on_fulfilled)
        if next_state is not None:
            return next_state
    return None


class Store(Generic[S]):
    """Holds one state value; every change goes through the reducer."""

    def __init__(self, reducer: Reducer[S], initial_state: S):
        self._reducer = reducer
        self._state = initial_state
        self._listeners: list[Listener] = []

    @property
    def state(self) -> S:
        return self._state

    def dispatch(self, action: Action) -> Action:
        self._state = self._reducer(self._state, action)
        for listener in list(self._listeners):
            listener(action)
        return action

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


async def run_operation(
    store: Store[Any],
    operation: AsyncOperation,
    call: Callable[[], Awaitable[T]],
) -> Action:
    """Dispatch pending, await `call`, then dispatch fulfilled or rejected.

    API failures and validation errors become a rejected action; anything else propagates.
    """
    store.dispatch(Action(operation.pending))
    try:
        result = await call()
    except (ApiError, ValueError) as exc:
        message = error_message(exc, operation.default_error)
        logger.warning("%s failed: %s", operation.name, message)
        return store.dispatch(Action(operation.rejected, error=message))
    return store.dispatch(Action(operation.fulfilled, payload=result))


def is_fulfilled(action: Action, operation: AsyncOperation) -> bool:
    return action.type == operation.fulfilled
