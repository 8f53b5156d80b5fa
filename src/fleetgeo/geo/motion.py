"""
Speed, movement and GPS-accuracy helpers used when post-processing field GPS logs.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

from fleetgeo.core.errors import ValidationError
from fleetgeo.domain.models import AccuracyStatus, TrackSummary
from fleetgeo.geo.constants import DEG_TO_RAD, RAD_TO_DEG
from fleetgeo.geo.validation import as_finite_float, filter_valid_coordinates, is_valid_accuracy


def kmh_to_ms(kmh: float) -> float:
    return kmh / 3.6


def ms_to_kmh(ms: float) -> float:
    return ms * 3.6


def is_moving(speed_kmh: float, threshold_kmh: float = 1.0) -> bool:
    return speed_kmh >= threshold_kmh


def is_stopped(speed_kmh: float, threshold_kmh: float = 0.5) -> bool:
    return speed_kmh < threshold_kmh


def accuracy_status(
    accuracy_m: float, *, high_m: float = 10, medium_m: float = 30, low_m: float = 50
) -> AccuracyStatus:
    """Bucket a reported GPS accuracy (meters, lower is better)."""
    if accuracy_m <= high_m:
        return "high"
    if accuracy_m <= medium_m:
        return "medium"
    if accuracy_m <= low_m:
        return "low"
    return "poor"


def smooth_heading(headings: Sequence[float]) -> float:
    """Circular mean of headings in degrees, in [0, 360).

    A plain mean of 350 and 10 would give 180; the circular mean gives 0.
    """
    if not headings:
        return 0.0
    if len(headings) == 1:
        return float(headings[0]) % 360

    sum_x = sum(math.cos(h * DEG_TO_RAD) for h in headings)
    sum_y = sum(math.sin(h * DEG_TO_RAD) for h in headings)
    return (math.atan2(sum_y, sum_x) * RAD_TO_DEG + 360) % 360


def smooth_speed(speeds: Sequence[float]) -> float:
    if not speeds:
        return 0.0
    return sum(speeds) / len(speeds)


def _validate_alpha(alpha: float) -> None:
    if not 0 <= alpha <= 1:
        raise ValidationError(f"Invalid smoothing factor: {alpha!r} (valid range: 0 to 1)", context="alpha")


def exponential_moving_average(current: float, new: float, alpha: float = 0.3) -> float:
    _validate_alpha(alpha)
    return alpha * new + (1 - alpha) * current


def estimate_travel_minutes(distance_km: float, speed_kmh: float) -> float:
    """Convert distance (km) to travel time in minutes at a constant speed (km/h)."""
    if speed_kmh <= 0:
        raise ValidationError("speed_kmh must be positive", context="speed")
    if distance_km <= 0:
        return 0.0
    return distance_km / speed_kmh * 60.0


def summarize_track(
    coordinates: Sequence[Any],
    *,
    high_m: float = 10,
    medium_m: float = 30,
    low_m: float = 50,
    moving_threshold_kmh: float = 1.0,
    stopped_threshold_kmh: float = 0.5,
    smoothing_alpha: float = 0.3,
) -> TrackSummary:
    """Summarize fix quality and movement over a recorded GPS log, in record order.

    Reads the optional `accuracy` (m), `speed_kmh` and `heading` (degrees) fields of each
    valid fix. The smoothed speed is the exponential moving average seeded with the first
    reading.
    """
    _validate_alpha(smoothing_alpha)
    fixes = filter_valid_coordinates(coordinates)

    accuracy_counts = {"high": 0, "medium": 0, "low": 0, "poor": 0}
    speeds: list[float] = []
    headings: list[float] = []
    for fix in fixes:
        if is_valid_accuracy(fix.accuracy):
            status = accuracy_status(fix.accuracy, high_m=high_m, medium_m=medium_m, low_m=low_m)
            accuracy_counts[status] += 1
        speed = as_finite_float(getattr(fix, "speed_kmh", None))
        if speed is not None and speed >= 0:
            speeds.append(speed)
        heading = as_finite_float(getattr(fix, "heading", None))
        if heading is not None:
            headings.append(heading)

    smoothed: float | None = None
    for speed in speeds:
        smoothed = speed if smoothed is None else exponential_moving_average(smoothed, speed, smoothing_alpha)

    return TrackSummary(
        fix_count=len(fixes),
        accuracy_counts=accuracy_counts,
        moving_count=sum(1 for s in speeds if is_moving(s, moving_threshold_kmh)),
        stopped_count=sum(1 for s in speeds if is_stopped(s, stopped_threshold_kmh)),
        average_speed_kmh=round(smooth_speed(speeds), 2) if speeds else None,
        smoothed_speed_kmh=round(smoothed, 2) if smoothed is not None else None,
        # 359.96 rounds to 360.0, which is north.
        heading=round(smooth_heading(headings), 1) % 360 if headings else None,
    )
