"""
Point-set statistics.

`calculate_center_point` is the arithmetic mean of latitudes and longitudes: a planar
approximation that is fine at city/regional scale. It does not unwrap longitudes, so a
set straddling the antimeridian (e.g. 179.9 and -179.9) averages to ~0 instead of ~180,
and it degrades near the poles. Bounding boxes share the same limitation.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from fleetgeo.core.errors import ValidationError
from fleetgeo.domain.models import Coordinate, CoordinatesSpread
from fleetgeo.geo.distance import calculate_distance
from fleetgeo.geo.search import calculate_bounding_box_from_coordinates
from fleetgeo.geo.validation import filter_valid_coordinates


def calculate_center_point(coordinates: Sequence[Any]) -> Coordinate:
    points = filter_valid_coordinates(coordinates)
    if not points:
        raise ValidationError("No valid coordinates found", context="coordinates")

    n = len(points)
    return Coordinate(
        latitude=round(sum(p.latitude for p in points) / n, 6),
        longitude=round(sum(p.longitude for p in points) / n, 6),
    )


def calculate_coordinates_spread(coordinates: Sequence[Any]) -> CoordinatesSpread:
    """Min/max/avg distance (km) of the valid points from their center point."""
    points = filter_valid_coordinates(coordinates)
    if not points:
        raise ValidationError("No valid coordinates found", context="coordinates")

    center = calculate_center_point(points)
    distances = [calculate_distance(center.latitude, center.longitude, p.latitude, p.longitude) for p in points]

    return CoordinatesSpread(
        center=center,
        max_distance=round(max(distances), 3),
        avg_distance=round(sum(distances) / len(distances), 3),
        min_distance=round(min(distances), 3),
        bounding_box=calculate_bounding_box_from_coordinates(points),
        coordinate_count=len(points),
    )
