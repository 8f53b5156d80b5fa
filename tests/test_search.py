import random

import pytest

from fleetgeo.core.errors import ValidationError
from fleetgeo.domain.models import BoundingBox, Coordinate
from fleetgeo.geo.distance import calculate_bearing, calculate_distance
from fleetgeo.geo.search import (
    calculate_bounding_box,
    calculate_bounding_box_from_coordinates,
    find_closest_coordinate,
    find_coordinates_within_radius,
    find_farthest_coordinate,
    find_nearby_locations,
    find_nearest_coordinates,
    is_coordinate_in_bounding_box,
)


def _depot_area_points() -> list[dict]:
    return [
        {"id": "far", "latitude": 35.5, "longitude": 139.0},
        {"id": "east", "latitude": 35.0, "longitude": 139.02},
        {"id": "bad-lat", "latitude": 91.0, "longitude": 139.0},
        {"id": "north", "latitude": 35.01, "longitude": 139.0},
        {"id": "string-lat", "latitude": "35.0", "longitude": 139.0},
        {"id": "missing-lat", "longitude": 139.0},
    ]


def _ids(coords) -> list[str]:
    return [c.model_dump()["id"] for c in coords]


def test_within_radius_filters_sorts_and_annotates():
    found = find_coordinates_within_radius(35.0, 139.0, 5.0, _depot_area_points())

    assert _ids(found) == ["north", "east"]
    assert found[0].distance == calculate_distance(35.0, 139.0, 35.01, 139.0)
    assert found[0].distance <= found[1].distance <= 5.0


def test_within_radius_matches_brute_force():
    # Compare against a plain scan over every point.
    rng = random.Random(7)
    pts = [
        {"id": str(i), "latitude": rng.uniform(34.5, 35.5), "longitude": rng.uniform(138.5, 139.5)}
        for i in range(200)
    ]
    radius = 25.0
    found = find_coordinates_within_radius(35.0, 139.0, radius, pts)

    expected = sorted(
        (p for p in pts if calculate_distance(35.0, 139.0, p["latitude"], p["longitude"]) <= radius),
        key=lambda p: calculate_distance(35.0, 139.0, p["latitude"], p["longitude"]),
    )
    assert _ids(found) == [p["id"] for p in expected]


def test_within_radius_validation():
    with pytest.raises(ValidationError, match="radius"):
        find_coordinates_within_radius(35.0, 139.0, 0, _depot_area_points())
    with pytest.raises(ValidationError, match="center point"):
        find_coordinates_within_radius(95.0, 139.0, 1.0, _depot_area_points())
    # Radius beyond float range is a bad argument, not an OverflowError.
    with pytest.raises(ValidationError, match="radius"):
        find_coordinates_within_radius(35.0, 139.0, 10**400, _depot_area_points())


def test_find_nearby_locations_is_radius_search():
    assert find_nearby_locations is find_coordinates_within_radius


def test_nearest_coordinates_limit_and_bearing():
    found = find_nearest_coordinates(35.0, 139.0, _depot_area_points(), limit=2)

    assert _ids(found) == ["north", "east"]
    assert found[0].bearing == calculate_bearing(35.0, 139.0, 35.01, 139.0)
    assert found[1].bearing == pytest.approx(90.0, abs=0.1)


def test_nearest_coordinates_default_returns_all_valid_sorted():
    found = find_nearest_coordinates(35.0, 139.0, _depot_area_points())
    assert _ids(found) == ["north", "east", "far"]


@pytest.mark.parametrize("limit", [0, -1, 1001])
def test_nearest_coordinates_rejects_bad_limit(limit):
    with pytest.raises(ValidationError, match="limit"):
        find_nearest_coordinates(35.0, 139.0, _depot_area_points(), limit=limit)


def test_bounding_box_at_equator_is_square():
    box = calculate_bounding_box(0.0, 0.0, 111.32)
    delta = box.north_east.latitude

    assert delta == pytest.approx(1.0, abs=0.01)
    assert box.south_west.latitude == pytest.approx(-delta)
    assert box.north_east.longitude == pytest.approx(delta)
    assert box.south_west.longitude == pytest.approx(-delta)


def test_bounding_box_widens_longitude_away_from_equator():
    box = calculate_bounding_box(60.0, 10.0, 50.0)
    lat_half = box.north_east.latitude - 60.0
    lon_half = box.north_east.longitude - 10.0
    # cos(60 deg) = 0.5
    assert lon_half == pytest.approx(2 * lat_half)


def test_bounding_box_clamps_near_pole():
    # Longitude span blows up near the pole and is clamped to the globe.
    box = calculate_bounding_box(89.9, 0.0, 50.0)
    assert box.north_east.latitude == 90
    assert box.north_east.longitude == 180
    assert box.south_west.longitude == -180


def test_bounding_box_validation():
    with pytest.raises(ValidationError):
        calculate_bounding_box(0.0, 0.0, -1.0)
    with pytest.raises(ValidationError):
        calculate_bounding_box(0.0, 200.0, 1.0)


def test_bounding_box_from_coordinates_contains_every_point():
    rng = random.Random(11)
    pts = [{"latitude": rng.uniform(-60, 60), "longitude": rng.uniform(-170, 170)} for _ in range(100)]
    box = calculate_bounding_box_from_coordinates(pts)

    assert all(is_coordinate_in_bounding_box(p, box) for p in pts)
    assert box.north_east.latitude == max(p["latitude"] for p in pts)
    assert box.south_west.longitude == min(p["longitude"] for p in pts)


def test_bounding_box_from_coordinates_errors():
    with pytest.raises(ValidationError, match="empty"):
        calculate_bounding_box_from_coordinates([])
    with pytest.raises(ValidationError, match="No valid coordinates"):
        calculate_bounding_box_from_coordinates([{"latitude": 100.0, "longitude": 0.0}])


def test_bounding_box_containment_is_inclusive_and_tolerates_bad_input():
    box = BoundingBox(
        north_east=Coordinate(latitude=1.0, longitude=1.0),
        south_west=Coordinate(latitude=0.0, longitude=0.0),
    )
    assert is_coordinate_in_bounding_box({"latitude": 1.0, "longitude": 0.0}, box)
    assert not is_coordinate_in_bounding_box({"latitude": 1.5, "longitude": 0.5}, box)
    assert not is_coordinate_in_bounding_box({"latitude": "0.5", "longitude": 0.5}, box)


def test_closest_and_farthest_coordinates():
    target = {"latitude": 0.0, "longitude": 0.0}
    candidates = [
        {"id": "a", "latitude": 0.0, "longitude": 2.0},
        {"id": "b", "latitude": 0.0, "longitude": 1.0},
        {"id": "c", "latitude": 0.0, "longitude": 1.0},
        {"id": "d", "latitude": 0.0, "longitude": 3.0},
        {"id": "bad", "latitude": None, "longitude": 0.0},
    ]

    closest = find_closest_coordinate(target, candidates)
    assert closest.coordinate.model_dump()["id"] == "b"
    assert closest.distance == 111.195

    farthest = find_farthest_coordinate(target, candidates)
    assert farthest.coordinate.model_dump()["id"] == "d"


def test_closest_ties_go_to_first_candidate():
    target = {"latitude": 0.0, "longitude": 0.0}
    candidates = [
        {"id": "east", "latitude": 0.0, "longitude": 1.0},
        {"id": "west", "latitude": 0.0, "longitude": -1.0},
    ]
    assert find_closest_coordinate(target, candidates).coordinate.model_dump()["id"] == "east"
    assert find_farthest_coordinate(target, candidates).coordinate.model_dump()["id"] == "east"


def test_closest_returns_none_without_valid_candidates_but_rejects_bad_target():
    target = {"latitude": 0.0, "longitude": 0.0}
    assert find_closest_coordinate(target, []) is None
    assert find_farthest_coordinate(target, [{"latitude": 123.0, "longitude": 0.0}]) is None

    with pytest.raises(ValidationError):
        find_closest_coordinate({"latitude": 0.0}, [target])
