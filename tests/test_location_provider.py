import asyncio

import pytest

from lockerhub.domain.models import Location
from lockerhub.location.provider import (
    LocationError,
    LocationPermissionDenied,
    LocationProvider,
    LocationTimeout,
    PositionUnavailable,
    StaticPositionSource,
)

HERE = Location(latitude=33.7729, longitude=-84.3627, accuracy=5)


def _production(settings):
    return settings.model_copy(update={"app": settings.app.model_copy(update={"environment": "production"})})


def _with_location(settings, **updates):
    return settings.model_copy(update={"location": settings.location.model_copy(update=updates)})


class _SlowSource:
    async def get_position(self):
        await asyncio.sleep(1)
        return HERE


class _SequenceSource:
    """Reports each fix once, then fails and signals that it ran dry."""

    def __init__(self, fixes):
        self._fixes = list(fixes)
        self.exhausted = asyncio.Event()

    async def get_position(self):
        if self._fixes:
            return self._fixes.pop(0)
        self.exhausted.set()
        raise PositionUnavailable()


def test_returns_backend_position(settings):
    provider = LocationProvider(settings, StaticPositionSource(HERE))
    assert asyncio.run(provider.get_current_location()) == HERE


def test_development_falls_back_to_default_point(settings):
    provider = LocationProvider(settings, StaticPositionSource(error=LocationPermissionDenied()))

    location = asyncio.run(provider.get_current_location())

    assert (location.latitude, location.longitude) == (33.7490, -84.3880)
    assert location.accuracy == 100


def test_production_raises_classified_errors(settings):
    prod = _production(settings)

    with pytest.raises(LocationPermissionDenied) as denied:
        asyncio.run(LocationProvider(prod, StaticPositionSource(error=LocationPermissionDenied())).get_current_location())
    assert denied.value.code == 1

    with pytest.raises(PositionUnavailable) as unavailable:
        asyncio.run(LocationProvider(prod, StaticPositionSource()).get_current_location())
    assert unavailable.value.code == 2

    slow = LocationProvider(_with_location(prod, production_timeout_seconds=0.01), _SlowSource())
    with pytest.raises(LocationTimeout) as timed_out:
        asyncio.run(slow.get_current_location())
    assert timed_out.value.code == 3
    assert timed_out.value.message == "Location request timed out. Please try again."


def test_permission_prompt_outcomes(settings):
    source = StaticPositionSource(HERE)

    assert asyncio.run(LocationProvider(settings, source).request_permission()) is True
    assert asyncio.run(LocationProvider(settings, source, permission_prompt=lambda: False).request_permission()) is False

    def broken_prompt():
        raise RuntimeError("prompt crashed")

    assert asyncio.run(LocationProvider(settings, source, permission_prompt=broken_prompt).request_permission()) is False

    async def granted():
        return True

    provider = LocationProvider(settings, source, permission_prompt=granted)
    assert asyncio.run(provider.get_location_with_permission()) == HERE


def test_denied_permission_stops_location_request(settings):
    provider = LocationProvider(settings, StaticPositionSource(HERE), permission_prompt=lambda: False)
    with pytest.raises(LocationPermissionDenied):
        asyncio.run(provider.get_location_with_permission())


def test_debug_location_only_in_development(settings):
    source = StaticPositionSource(HERE)

    debug = LocationProvider(settings, source).get_debug_location("30068")
    assert (debug.latitude, debug.longitude) == (33.9427, -84.4407)
    assert LocationProvider(settings, source).get_debug_location("99999") is None
    assert LocationProvider(_production(settings), source).get_debug_location("30068") is None


def test_watch_reports_only_meaningful_moves(settings):
    nudged = Location(latitude=33.77291, longitude=-84.3627)
    moved = Location(latitude=33.7734, longitude=-84.3627)
    source = _SequenceSource([HERE, nudged, moved])
    provider = LocationProvider(_with_location(settings, watch_interval_seconds=0.001), source)
    updates: list[Location] = []
    errors: list[LocationError] = []

    async def scenario():
        watch_id = provider.watch_location(updates.append, errors.append)
        await asyncio.wait_for(source.exhausted.wait(), 1)
        provider.clear_watch(watch_id)

    asyncio.run(scenario())

    assert updates == [HERE, moved]
    assert errors and isinstance(errors[0], PositionUnavailable)


def test_classified_backend_error_is_not_its_own_cause(settings):
    denied = LocationPermissionDenied()
    provider = LocationProvider(_production(settings), StaticPositionSource(error=denied))

    with pytest.raises(LocationPermissionDenied) as excinfo:
        asyncio.run(provider.get_current_location())

    assert excinfo.value is denied
    assert excinfo.value.__cause__ is None


def test_watch_survives_failing_callback(settings):
    moved = Location(latitude=33.7734, longitude=-84.3627)
    source = _SequenceSource([HERE, moved])
    provider = LocationProvider(_with_location(settings, watch_interval_seconds=0.001), source)
    updates: list[Location] = []

    def on_update(location):
        updates.append(location)
        if len(updates) == 1:
            raise RuntimeError("render failed")

    async def scenario():
        watch_id = provider.watch_location(on_update, lambda error: None)
        await asyncio.wait_for(source.exhausted.wait(), 1)
        assert watch_id in provider._watches
        provider.clear_watch(watch_id)
        await asyncio.sleep(0)
        assert provider._watches == {}

    asyncio.run(scenario())

    assert updates == [HERE, moved]
