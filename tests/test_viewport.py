import pytest

from factories import make_business
from lockerhub.config.settings import MapSettings
from lockerhub.domain.models import Location
from lockerhub.map.viewport import BusinessMap, compute_region, default_region

MAP = MapSettings()


def test_region_frames_user_and_nearest_business():
    user = Location(latitude=33.9427, longitude=-84.4407)
    nearest = make_business("b1", lat=33.7729, lon=-84.3627)
    farther = make_business("b2", lat=34.5, lon=-85.0)

    region = compute_region(user, [nearest, farther], settings=MAP)

    assert region.latitude == pytest.approx(33.8578, abs=1e-4)
    assert region.longitude == pytest.approx(-84.4017, abs=1e-4)
    assert region.latitude_delta == pytest.approx(0.4245, abs=1e-4)
    assert region.longitude_delta == pytest.approx(0.195, abs=1e-4)
    assert min(user.latitude, 33.7729) < region.latitude < max(user.latitude, 33.7729)
    assert min(user.longitude, -84.3627) < region.longitude < max(user.longitude, -84.3627)


def test_region_deltas_never_fall_below_floor():
    user = Location(latitude=33.7729, longitude=-84.3627)
    same_spot = make_business("b1", lat=33.7729, lon=-84.3627)

    region = compute_region(user, [same_spot], settings=MAP)

    assert region.latitude == pytest.approx(33.7729)
    assert region.longitude == pytest.approx(-84.3627)
    assert region.latitude_delta == MAP.min_delta
    assert region.longitude_delta == MAP.min_delta


def test_region_centers_on_user_without_businesses():
    user = Location(latitude=33.9, longitude=-84.5)

    region = compute_region(user, [], settings=MAP)

    assert (region.latitude, region.longitude) == (33.9, -84.5)
    assert region.latitude_delta == MAP.metro_delta.latitude
    assert region.longitude_delta == MAP.metro_delta.longitude


def test_region_centers_on_first_business_without_user():
    region = compute_region(None, [make_business("b1", lat=33.8, lon=-84.4)], settings=MAP)

    assert (region.latitude, region.longitude) == (33.8, -84.4)
    assert region.latitude_delta == MAP.metro_delta.latitude


def test_region_defaults_to_city_center():
    assert compute_region(None, [], settings=MAP) == default_region(MAP)
    assert (default_region(MAP).latitude, default_region(MAP).longitude) == (33.7490, -84.3880)


def test_business_map_recomputes_only_when_inputs_change():
    animated = []
    business_map = BusinessMap(MAP, animate_to_region=animated.append)
    user = Location(latitude=33.9427, longitude=-84.4407)
    businesses = [make_business("b1", lat=33.7729, lon=-84.3627)]

    assert business_map.update(user, businesses) is True
    assert business_map.update(Location(latitude=33.9427, longitude=-84.4407), list(businesses)) is False
    assert animated == [business_map.region]

    assert business_map.update(None, businesses) is True
    assert animated[-1] == compute_region(None, businesses, settings=MAP)
    assert len(animated) == 2


def test_business_map_markers_read_geojson_axis_order():
    business_map = BusinessMap(MAP)
    business_map.update(
        Location(latitude=33.9, longitude=-84.5),
        [make_business("b1", lat=33.7729, lon=-84.3627, availableLockers=3)],
    )

    user_marker, business_marker = business_map.markers()

    assert user_marker.identifier == "user-location"
    assert user_marker.pin_color == "blue"
    assert (business_marker.latitude, business_marker.longitude) == (33.7729, -84.3627)
    assert business_marker.description == "3 lockers available"
    assert business_marker.pin_color == "red"


def test_business_map_markers_follow_refreshed_business_data():
    animated = []
    business_map = BusinessMap(MAP, animate_to_region=animated.append)
    user = Location(latitude=33.9427, longitude=-84.4407)

    business_map.update(user, [make_business("b1", lat=33.7729, lon=-84.3627, availableLockers=4)])
    refreshed = [make_business("b1", lat=33.7729, lon=-84.3627, availableLockers=0, name="Renamed")]

    assert business_map.update(user, refreshed) is False
    business_marker = business_map.markers()[1]
    assert business_marker.description == "0 lockers available"
    assert business_marker.title == "Renamed"
    assert len(animated) == 1
