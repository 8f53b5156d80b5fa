import math

import pytest

from fleetgeo.core.errors import ValidationError
from fleetgeo.domain.models import Coordinate
from fleetgeo.geo.validation import (
    filter_valid_coordinates,
    has_valid_coordinates,
    is_valid_accuracy,
    is_valid_altitude,
    is_valid_coordinate,
    is_valid_latitude,
    is_valid_longitude,
    to_coordinate,
    validate_coordinates,
    validate_gps_coordinates,
)


def test_latitude_and_longitude_boundaries_are_inclusive():
    assert is_valid_latitude(90)
    assert is_valid_latitude(-90)
    assert not is_valid_latitude(90.0001)
    assert not is_valid_latitude(-90.0001)

    assert is_valid_longitude(180)
    assert is_valid_longitude(-180)
    assert not is_valid_longitude(180.0001)
    assert not is_valid_longitude(-180.0001)


def test_non_finite_and_non_numeric_values_are_rejected():
    for bad in (math.nan, math.inf, -math.inf, "35.0", None, True):
        assert not is_valid_latitude(bad)
        assert not is_valid_longitude(bad)
    assert not is_valid_coordinate(35.0, math.nan)
    assert is_valid_coordinate(35.6812, 139.7671)


def test_accuracy_and_altitude_ranges():
    assert is_valid_accuracy(0)
    assert is_valid_accuracy(10000)
    assert not is_valid_accuracy(-1)
    assert not is_valid_accuracy(10000.5)

    assert is_valid_altitude(-500)
    assert is_valid_altitude(10000)
    assert not is_valid_altitude(-501)
    assert not is_valid_altitude(math.nan)


def test_has_valid_coordinates_accepts_mappings_and_objects():
    assert has_valid_coordinates({"latitude": 35.0, "longitude": 139.0})
    assert has_valid_coordinates(Coordinate(latitude=35.0, longitude=139.0))

    assert not has_valid_coordinates({"latitude": 35.0})
    assert not has_valid_coordinates({"latitude": "35.0", "longitude": 139.0})
    assert not has_valid_coordinates({"latitude": 95.0, "longitude": 139.0})
    assert not has_valid_coordinates(None)


def test_validate_coordinates_raises_with_context():
    validate_coordinates(35.0, 139.0, "origin point")

    with pytest.raises(ValidationError, match="latitude for origin point") as excinfo:
        validate_coordinates(91.0, 139.0, "origin point")
    assert excinfo.value.context == "origin point"

    with pytest.raises(ValidationError, match="longitude"):
        validate_coordinates(35.0, -181.0, "origin point")

    with pytest.raises(ValidationError, match="GPS coordinate"):
        validate_gps_coordinates(math.nan, 0.0)


def test_validation_error_is_a_value_error():
    # HTTP layers map ValueError to 400 responses.
    with pytest.raises(ValueError):
        validate_coordinates(100.0, 0.0)


def test_to_coordinate_keeps_extra_fields_and_drops_bad_optional_values():
    c = to_coordinate({"latitude": 35.0, "longitude": 139.0, "accuracy": "n/a", "altitude": 12.5, "id": "log-1"})
    assert c.latitude == 35.0
    assert c.accuracy is None
    assert c.altitude == 12.5
    assert c.model_dump()["id"] == "log-1"


def test_filter_valid_coordinates_preserves_order_and_drops_bad_fixes():
    records = [
        {"latitude": 1.0, "longitude": 1.0},
        {"latitude": 200.0, "longitude": 1.0},
        {"longitude": 2.0},
        {"latitude": 3.0, "longitude": 3.0},
    ]
    valid = filter_valid_coordinates(records)
    assert [(c.latitude, c.longitude) for c in valid] == [(1.0, 1.0), (3.0, 3.0)]


def test_integers_too_large_for_a_float_are_rejected_not_raised():
    # json.loads turns a long integer literal into an unbounded Python int.
    huge = 10**400
    assert not is_valid_latitude(huge)
    assert not is_valid_accuracy(huge)
    assert not has_valid_coordinates({"latitude": huge, "longitude": 0})

    # One corrupt record must not abort the whole batch.
    valid = filter_valid_coordinates(
        [{"latitude": huge, "longitude": 0}, {"latitude": 1.0, "longitude": 2.0, "accuracy": huge}]
    )
    assert len(valid) == 1
    assert valid[0].accuracy is None

    # Raw arguments still raise the library error rather than OverflowError.
    with pytest.raises(ValidationError, match="latitude"):
        validate_coordinates(huge, 0)
