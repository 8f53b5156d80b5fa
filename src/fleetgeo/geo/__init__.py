"""
GPS geospatial calculations.

A flat set of pure, stateless functions over coordinate values: validation, Haversine
distance and bearing, spatial search, point-set statistics and route ordering. Nothing
here does I/O or keeps state between calls, so everything is safe to call concurrently.
"""

from fleetgeo.geo.constants import (
    DEG_TO_RAD,
    EARTH_RADIUS_KM,
    EARTH_RADIUS_M,
    GPS_CALCULATION_LIMITS,
    RAD_TO_DEG,
)
from fleetgeo.geo.distance import (
    bearing_to_compass,
    bearing_to_compass8,
    bearing_to_compass16,
    bearing_to_japanese_compass,
    bearing_to_japanese_compass16,
    calculate_bearing,
    calculate_distance,
    calculate_distance_between_coordinates,
    calculate_distance_simple,
    calculate_distance_with_accuracy,
    calculate_total_distance,
)
from fleetgeo.geo.grid import build_heatmap, top_frequent_areas
from fleetgeo.geo.motion import (
    accuracy_status,
    estimate_travel_minutes,
    exponential_moving_average,
    is_moving,
    is_stopped,
    kmh_to_ms,
    ms_to_kmh,
    smooth_heading,
    smooth_speed,
    summarize_track,
)
from fleetgeo.geo.route import (
    calculate_optimized_route_distance,
    calculate_route_info,
    optimize_route_order,
    plan_route,
)
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
from fleetgeo.geo.stats import calculate_center_point, calculate_coordinates_spread
from fleetgeo.geo.validation import (
    filter_valid_coordinates,
    has_valid_coordinates,
    is_valid_accuracy,
    is_valid_altitude,
    is_valid_coordinate,
    is_valid_coordinates,
    is_valid_latitude,
    is_valid_longitude,
    to_coordinate,
    validate_coordinates,
    validate_gps_coordinates,
)

__all__ = [
    "DEG_TO_RAD",
    "EARTH_RADIUS_KM",
    "EARTH_RADIUS_M",
    "GPS_CALCULATION_LIMITS",
    "RAD_TO_DEG",
    "accuracy_status",
    "bearing_to_compass",
    "bearing_to_compass8",
    "bearing_to_compass16",
    "bearing_to_japanese_compass",
    "bearing_to_japanese_compass16",
    "build_heatmap",
    "calculate_bearing",
    "calculate_bounding_box",
    "calculate_bounding_box_from_coordinates",
    "calculate_center_point",
    "calculate_coordinates_spread",
    "calculate_distance",
    "calculate_distance_between_coordinates",
    "calculate_distance_simple",
    "calculate_distance_with_accuracy",
    "calculate_optimized_route_distance",
    "calculate_route_info",
    "calculate_total_distance",
    "estimate_travel_minutes",
    "exponential_moving_average",
    "filter_valid_coordinates",
    "find_closest_coordinate",
    "find_coordinates_within_radius",
    "find_farthest_coordinate",
    "find_nearby_locations",
    "find_nearest_coordinates",
    "has_valid_coordinates",
    "is_coordinate_in_bounding_box",
    "is_moving",
    "is_stopped",
    "is_valid_accuracy",
    "is_valid_altitude",
    "is_valid_coordinate",
    "is_valid_coordinates",
    "is_valid_latitude",
    "is_valid_longitude",
    "kmh_to_ms",
    "ms_to_kmh",
    "optimize_route_order",
    "plan_route",
    "smooth_heading",
    "smooth_speed",
    "summarize_track",
    "to_coordinate",
    "top_frequent_areas",
    "validate_coordinates",
    "validate_gps_coordinates",
]
