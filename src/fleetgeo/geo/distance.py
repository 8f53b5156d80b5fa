"""
Great-circle distance and bearing.

Distances are kilometers rounded to 3 decimals; bearings are degrees clockwise from
north in [0, 360), rounded to 1 decimal. Every entry point that takes raw lat/lon
validates eagerly so invalid input can never surface as NaN or a wrapped bearing.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

from fleetgeo.core.errors import ValidationError
from fleetgeo.domain.models import AccuracyRange, DistanceWithAccuracy
from fleetgeo.geo.constants import DEG_TO_RAD, EARTH_RADIUS_KM, RAD_TO_DEG
from fleetgeo.geo.validation import (
    as_finite_float,
    filter_valid_coordinates,
    has_valid_coordinates,
    is_valid_accuracy,
    to_coordinate,
    validate_coordinates,
)

COMPASS_16 = ("N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE", "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW")
COMPASS_8 = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")
JAPANESE_COMPASS_8 = ("北", "北東", "東", "南東", "南", "南西", "西", "北西")
JAPANESE_COMPASS_16 = (
    "北", "北北東", "北東", "東北東",
    "東", "東南東", "南東", "南南東",
    "南", "南南西", "南西", "西南西",
    "西", "西北西", "北西", "北北西",
)


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in km between two points."""
    validate_coordinates(lat1, lon1, "origin point")
    validate_coordinates(lat2, lon2, "destination point")

    phi1 = lat1 * DEG_TO_RAD
    phi2 = lat2 * DEG_TO_RAD
    d_phi = (lat2 - lat1) * DEG_TO_RAD
    d_lam = (lon2 - lon1) * DEG_TO_RAD

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lam / 2) ** 2
    # Float error can push `a` a hair above 1 for antipodal points.
    a = min(a, 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round(EARTH_RADIUS_KM * c, 3)


def calculate_distance_simple(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Equirectangular approximation in km; only accurate for short hops."""
    validate_coordinates(lat1, lon1, "origin point")
    validate_coordinates(lat2, lon2, "destination point")

    x = (lon2 - lon1) * math.cos((lat1 + lat2) / 2 * DEG_TO_RAD)
    y = lat2 - lat1
    return round(math.sqrt(x * x + y * y) * EARTH_RADIUS_KM * DEG_TO_RAD, 3)


def calculate_distance_between_coordinates(coord1: Any, coord2: Any) -> float:
    """Distance in km between two coordinate records."""
    if not has_valid_coordinates(coord1) or not has_valid_coordinates(coord2):
        raise ValidationError("Invalid coordinate object supplied", context="coordinate pair")
    c1 = to_coordinate(coord1)
    c2 = to_coordinate(coord2)
    return calculate_distance(c1.latitude, c1.longitude, c2.latitude, c2.longitude)


def calculate_total_distance(coordinates: Sequence[Any]) -> float:
    """Path length in km along the valid coordinates, in sequence order."""
    points = filter_valid_coordinates(coordinates)
    if len(points) < 2:
        return 0.0

    total = 0.0
    for prev, cur in zip(points, points[1:]):
        total += calculate_distance(prev.latitude, prev.longitude, cur.latitude, cur.longitude)
    return round(total, 3)


def calculate_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Initial great-circle bearing from point 1 to point 2."""
    validate_coordinates(lat1, lon1, "origin point")
    validate_coordinates(lat2, lon2, "destination point")

    phi1 = lat1 * DEG_TO_RAD
    phi2 = lat2 * DEG_TO_RAD
    d_lam = (lon2 - lon1) * DEG_TO_RAD

    y = math.sin(d_lam) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(d_lam)

    bearing = round((math.atan2(y, x) * RAD_TO_DEG + 360) % 360, 1)
    # 359.96 rounds to 360.0, which is north.
    return 0.0 if bearing >= 360 else bearing


def _compass_index(bearing: float, points: int) -> int:
    if as_finite_float(bearing) is None:
        raise ValidationError(f"Invalid bearing: {bearing!r}", context="bearing")
    # Half-up rounding: 11.25 degrees is NNE, not N.
    return math.floor(bearing / (360 / points) + 0.5) % points


def bearing_to_compass16(bearing: float) -> str:
    return COMPASS_16[_compass_index(bearing, 16)]


bearing_to_compass = bearing_to_compass16


def bearing_to_compass8(bearing: float) -> str:
    return COMPASS_8[_compass_index(bearing, 8)]


def bearing_to_japanese_compass(bearing: float) -> str:
    """8-point Japanese label (北, 北東, ...)."""
    return JAPANESE_COMPASS_8[_compass_index(bearing, 8)]


def bearing_to_japanese_compass16(bearing: float) -> str:
    return JAPANESE_COMPASS_16[_compass_index(bearing, 16)]


def calculate_distance_with_accuracy(coord1: Any, coord2: Any) -> DistanceWithAccuracy:
    """Distance plus an uncertainty range from the worse of the two reported accuracies.

    Missing or out-of-range accuracy values count as 0 m.
    """
    if not has_valid_coordinates(coord1) or not has_valid_coordinates(coord2):
        raise ValidationError("Invalid coordinate object supplied", context="coordinate pair")
    c1 = to_coordinate(coord1)
    c2 = to_coordinate(coord2)

    distance = calculate_distance(c1.latitude, c1.longitude, c2.latitude, c2.longitude)
    accuracies = [a if is_valid_accuracy(a) else 0.0 for a in (c1.accuracy, c2.accuracy)]
    max_accuracy_km = max(accuracies) / 1000

    return DistanceWithAccuracy(
        distance=distance,
        accuracy_range=AccuracyRange(
            min=max(0.0, round(distance - max_accuracy_km, 3)),
            max=round(distance + max_accuracy_km, 3),
        ),
    )
