"""
Route analysis and nearest-neighbor ordering.

`optimize_route_order` is a greedy nearest-neighbor heuristic, not a TSP solver: from
the current position it always moves to the closest remaining point (earliest point
wins ties). It is O(n^2) and can leave a far outlier for last; route-planning callers
depend on exactly this behavior. The module imposes no size limit, so callers working
with hundreds of points should bound their input.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from fleetgeo.core.errors import ValidationError
from fleetgeo.domain.models import Coordinate, RouteCalculationInfo, RoutePlan
from fleetgeo.geo.distance import calculate_bearing, calculate_total_distance
from fleetgeo.geo.motion import estimate_travel_minutes
from fleetgeo.geo.search import calculate_bounding_box_from_coordinates, find_closest_with_index
from fleetgeo.geo.validation import filter_valid_coordinates, has_valid_coordinates, to_coordinate

logger = logging.getLogger(__name__)


def calculate_route_info(coordinates: Sequence[Any]) -> RouteCalculationInfo:
    """Summarize a path: length, endpoints, extent and first/last leg bearings."""
    if len(coordinates) < 2:
        raise ValidationError("Route calculation requires at least 2 coordinates", context="coordinates")

    points = filter_valid_coordinates(coordinates)
    if len(points) < 2:
        raise ValidationError("Not enough valid coordinates for a route", context="coordinates")

    first, second = points[0], points[1]
    before_last, last = points[-2], points[-1]

    return RouteCalculationInfo(
        total_distance=calculate_total_distance(points),
        start_point=first,
        end_point=last,
        waypoint_count=len(points) - 2,
        bounding_box=calculate_bounding_box_from_coordinates(points),
        start_bearing=calculate_bearing(first.latitude, first.longitude, second.latitude, second.longitude),
        end_bearing=calculate_bearing(before_last.latitude, before_last.longitude, last.latitude, last.longitude),
    )


def _greedy_order(start: Coordinate, points: list[Coordinate]) -> list[int]:
    """Indices into `points` in nearest-neighbor visiting order from `start`."""
    remaining = list(range(len(points)))
    order: list[int] = []
    current = start
    while remaining:
        found = find_closest_with_index(current, [points[i] for i in remaining])
        if found is None:
            break
        pos, match = found
        order.append(remaining.pop(pos))
        current = match.coordinate
    return order


def _validated_start(start: Any) -> Coordinate:
    if not has_valid_coordinates(start):
        raise ValidationError("Invalid start coordinate supplied", context="start point")
    return to_coordinate(start)


def optimize_route_order(start: Any, coordinates: Sequence[Any]) -> list[Coordinate]:
    """Valid coordinates reordered by the nearest-neighbor heuristic from `start`."""
    origin = _validated_start(start)
    points = filter_valid_coordinates(coordinates)
    if not points:
        return []

    logger.debug("Ordering %d route points by nearest neighbor", len(points))
    return [points[i] for i in _greedy_order(origin, points)]


def calculate_optimized_route_distance(start: Any, coordinates: Sequence[Any]) -> float:
    """Path length (km) of `start` followed by the nearest-neighbor ordering."""
    ordered = optimize_route_order(start, coordinates)
    if not ordered:
        return 0.0
    return calculate_total_distance([to_coordinate(start), *ordered])


def plan_route(start: Any, destinations: Sequence[Any], *, average_speed_kmh: float = 36.0) -> RoutePlan:
    """Nearest-neighbor visit plan, reported as indices into `destinations`.

    Invalid destinations are left out of both orders.
    """
    origin = _validated_start(start)

    valid_indices = [i for i, d in enumerate(destinations) if has_valid_coordinates(d)]
    points = [to_coordinate(destinations[i]) for i in valid_indices]
    order = _greedy_order(origin, points) if points else []

    route = [origin, *(points[i] for i in order)]
    total = calculate_total_distance(route)
    return RoutePlan(
        original_order=valid_indices,
        optimized_order=[valid_indices[i] for i in order],
        optimized_route=route,
        total_distance=total,
        estimated_time_minutes=round(estimate_travel_minutes(total, average_speed_kmh)),
    )
