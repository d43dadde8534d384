"""Business container: explicit search results, nearby results and the selected business."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from lockerhub.api.client import ApiClient
from lockerhub.core.geo import GeoPoint
from lockerhub.domain.models import Business, SearchBusinessesRequest
from lockerhub.search.results import annotate_distances, display_businesses
from lockerhub.store.base import Action, AsyncOperation, Store, reduce_operations, run_operation

SEARCH_BUSINESSES = AsyncOperation("business/searchBusinesses", "Search failed")
FETCH_NEARBY = AsyncOperation("business/fetchNearbyBusinesses", "Failed to fetch nearby businesses")
FETCH_BY_ID = AsyncOperation("business/fetchBusinessById", "Failed to fetch business")

CLEAR_ERROR = "business/clearError"
SET_SELECTED = "business/setSelectedBusiness"
CLEAR_BUSINESSES = "business/clearBusinesses"


@dataclass(frozen=True)
class BusinessState:
    businesses: tuple[Business, ...] = ()
    nearby_businesses: tuple[Business, ...] = ()
    selected_business: Business | None = None
    search_params: SearchBusinessesRequest | None = None
    is_loading: bool = False
    error: str | None = None

    @property
    def display_businesses(self) -> list[Business]:
        return display_businesses(self.businesses, self.nearby_businesses)


def _search_fulfilled(state: BusinessState, payload: Any) -> BusinessState:
    businesses, params = payload
    return replace(state, businesses=tuple(businesses), search_params=params)


def _nearby_fulfilled(state: BusinessState, businesses: list[Business]) -> BusinessState:
    return replace(state, nearby_businesses=tuple(businesses))


def _selected_fulfilled(state: BusinessState, business: Business) -> BusinessState:
    return replace(state, selected_business=business)


_HANDLERS = {
    SEARCH_BUSINESSES: _search_fulfilled,
    FETCH_NEARBY: _nearby_fulfilled,
    FETCH_BY_ID: _selected_fulfilled,
}


def business_reducer(state: BusinessState, action: Action) -> BusinessState:
    next_state = reduce_operations(state, action, _HANDLERS)
    if next_state is not None:
        return next_state

    if action.type == CLEAR_ERROR:
        return replace(state, error=None)
    if action.type == SET_SELECTED:
        return replace(state, selected_business=action.payload)
    if action.type == CLEAR_BUSINESSES:
        return replace(state, businesses=(), nearby_businesses=(), selected_business=None, search_params=None)
    return state


class BusinessContainer:
    """Runs business lookups against the API and keeps `BusinessState` current."""

    def __init__(self, client: ApiClient):
        self._client = client
        self.store: Store[BusinessState] = Store(business_reducer, BusinessState())

    @property
    def state(self) -> BusinessState:
        return self.store.state

    async def search_businesses(self, params: SearchBusinessesRequest) -> Action:
        async def call() -> tuple[list[Business], SearchBusinessesRequest]:
            return await self._client.search_businesses(params), params

        return await run_operation(self.store, SEARCH_BUSINESSES, call)

    async def fetch_nearby_businesses(
        self, latitude: float, longitude: float, radius: float | None = None
    ) -> Action:
        async def call() -> list[Business]:
            businesses = await self._client.get_nearby_businesses(latitude, longitude, radius)
            return annotate_distances(businesses, GeoPoint(lat=latitude, lon=longitude))

        return await run_operation(self.store, FETCH_NEARBY, call)

    async def fetch_business_by_id(self, business_id: str) -> Action:
        async def call() -> Business:
            return await self._client.get_business_by_id(business_id)

        return await run_operation(self.store, FETCH_BY_ID, call)

    def clear_error(self) -> None:
        self.store.dispatch(Action(CLEAR_ERROR))

    def set_selected_business(self, business: Business | None) -> None:
        self.store.dispatch(Action(SET_SELECTED, payload=business))

    def clear_businesses(self) -> None:
        self.store.dispatch(Action(CLEAR_BUSINESSES))
