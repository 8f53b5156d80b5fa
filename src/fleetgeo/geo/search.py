"""
Spatial queries: radius search, k-nearest, bounding boxes, closest/farthest scans.

All queries are linear scans over the valid input records; invalid records are
skipped without error. Center/target arguments are validated and raise.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any, Callable

from fleetgeo.core.errors import ValidationError
from fleetgeo.domain.models import (
    BoundingBox,
    Coordinate,
    CoordinateMatch,
    NearbyCoordinate,
    NearestCoordinate,
)
from fleetgeo.geo.constants import DEG_TO_RAD, EARTH_RADIUS_KM, GPS_CALCULATION_LIMITS as LIMITS, RAD_TO_DEG
from fleetgeo.geo.distance import calculate_bearing, calculate_distance
from fleetgeo.geo.validation import (
    as_finite_float,
    filter_valid_coordinates,
    has_valid_coordinates,
    to_coordinate,
    validate_coordinates,
)

MAX_NEAREST_LIMIT = 1000


def _validate_radius(radius_km: Any) -> None:
    radius = as_finite_float(radius_km)
    if radius is None or radius <= 0:
        raise ValidationError(f"Invalid radius: {radius_km!r} km (must be a positive number)", context="radius")


def find_coordinates_within_radius(
    center_lat: float, center_lon: float, radius_km: float, coordinates: Sequence[Any]
) -> list[NearbyCoordinate]:
    """Valid coordinates within `radius_km` of the center, nearest first."""
    validate_coordinates(center_lat, center_lon, "center point")
    _validate_radius(radius_km)

    out: list[NearbyCoordinate] = []
    for coord in filter_valid_coordinates(coordinates):
        d = calculate_distance(center_lat, center_lon, coord.latitude, coord.longitude)
        if d <= radius_km:
            out.append(NearbyCoordinate(**{**coord.model_dump(), "distance": d}))
    out.sort(key=lambda c: c.distance)
    return out


find_nearby_locations = find_coordinates_within_radius


def find_nearest_coordinates(
    target_lat: float, target_lon: float, coordinates: Sequence[Any], limit: int = 10
) -> list[NearestCoordinate]:
    """Up to `limit` valid coordinates nearest the target, with distance and bearing."""
    validate_coordinates(target_lat, target_lon, "target point")
    if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= MAX_NEAREST_LIMIT:
        raise ValidationError(f"Invalid limit: {limit!r} (valid range: 1 to {MAX_NEAREST_LIMIT})", context="limit")

    annotated = [
        NearestCoordinate(
            **{
                **coord.model_dump(),
                "distance": calculate_distance(target_lat, target_lon, coord.latitude, coord.longitude),
                "bearing": calculate_bearing(target_lat, target_lon, coord.latitude, coord.longitude),
            }
        )
        for coord in filter_valid_coordinates(coordinates)
    ]
    annotated.sort(key=lambda c: c.distance)
    return annotated[:limit]


def calculate_bounding_box(center_lat: float, center_lon: float, radius_km: float) -> BoundingBox:
    """Square-ish box of half-width `radius_km` around the center, clamped to the globe.

    Longitude degrees shrink with latitude, so the longitude half-width is widened by
    1 / cos(latitude). Near the poles this saturates at the full longitude range.
    """
    validate_coordinates(center_lat, center_lon, "center point")
    _validate_radius(radius_km)

    lat_delta = (radius_km / EARTH_RADIUS_KM) * RAD_TO_DEG
    cos_lat = math.cos(center_lat * DEG_TO_RAD)
    lon_delta = lat_delta / cos_lat if cos_lat > 1e-12 else float("inf")

    return BoundingBox(
        north_east=Coordinate(
            latitude=min(center_lat + lat_delta, LIMITS.max_latitude),
            longitude=min(center_lon + lon_delta, LIMITS.max_longitude),
        ),
        south_west=Coordinate(
            latitude=max(center_lat - lat_delta, LIMITS.min_latitude),
            longitude=max(center_lon - lon_delta, LIMITS.min_longitude),
        ),
    )


def calculate_bounding_box_from_coordinates(coordinates: Sequence[Any]) -> BoundingBox:
    """Tight axis-aligned box around all valid coordinates."""
    if len(coordinates) == 0:
        raise ValidationError("Coordinate list is empty", context="coordinates")

    points = filter_valid_coordinates(coordinates)
    if not points:
        raise ValidationError("No valid coordinates found", context="coordinates")

    lats = [p.latitude for p in points]
    lons = [p.longitude for p in points]
    return BoundingBox(
        north_east=Coordinate(latitude=max(lats), longitude=max(lons)),
        south_west=Coordinate(latitude=min(lats), longitude=min(lons)),
    )


def is_coordinate_in_bounding_box(coordinate: Any, bounding_box: BoundingBox) -> bool:
    """Inclusive containment; structurally invalid coordinates are simply outside."""
    if not has_valid_coordinates(coordinate):
        return False
    c = to_coordinate(coordinate)
    ne = bounding_box.north_east
    sw = bounding_box.south_west
    return sw.latitude <= c.latitude <= ne.latitude and sw.longitude <= c.longitude <= ne.longitude


def _scan_extreme(
    target: Any, candidates: Sequence[Any], better: Callable[[float, float], bool]
) -> tuple[int, CoordinateMatch] | None:
    """Linear scan keeping the first candidate that `better` strictly prefers.

    Returns the index into the filtered candidate list alongside the match.
    """
    if not has_valid_coordinates(target):
        raise ValidationError("Invalid target coordinate supplied", context="target point")
    t = to_coordinate(target)

    valid = filter_valid_coordinates(candidates)
    if not valid:
        return None

    best_index = 0
    best_distance = calculate_distance(t.latitude, t.longitude, valid[0].latitude, valid[0].longitude)
    for i in range(1, len(valid)):
        d = calculate_distance(t.latitude, t.longitude, valid[i].latitude, valid[i].longitude)
        if better(d, best_distance):
            best_index = i
            best_distance = d

    return best_index, CoordinateMatch(coordinate=valid[best_index], distance=best_distance)


def find_closest_with_index(target: Any, candidates: Sequence[Any]) -> tuple[int, CoordinateMatch] | None:
    """Like `find_closest_coordinate`, also returning the index among the valid candidates."""
    return _scan_extreme(target, candidates, lambda d, best: d < best)


def find_closest_coordinate(target: Any, candidates: Sequence[Any]) -> CoordinateMatch | None:
    """Nearest valid candidate to `target`; ties go to the earliest candidate."""
    found = find_closest_with_index(target, candidates)
    return found[1] if found else None


def find_farthest_coordinate(target: Any, candidates: Sequence[Any]) -> CoordinateMatch | None:
    """Farthest valid candidate from `target`; ties go to the earliest candidate."""
    found = _scan_extreme(target, candidates, lambda d, best: d > best)
    return found[1] if found else None
