"""
Coordinate validation.

Two policies live side by side and must not be mixed within one call path:
- raw latitude/longitude arguments are checked eagerly with `validate_coordinates`,
  which raises `ValidationError`;
- sequences of coordinate records go through `filter_valid_coordinates`, which drops
  bad fixes silently. Callers raise only when nothing usable remains.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any

from fleetgeo.core.errors import ValidationError
from fleetgeo.domain.models import Coordinate
from fleetgeo.geo.constants import GPS_CALCULATION_LIMITS as LIMITS

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def as_finite_float(value: Any) -> float | None:
    """Return `value` as a finite float, or None for bools, non-numbers, NaN and infinities."""
    if not _is_number(value):
        return None
    try:
        number = float(value)
    except OverflowError:
        # JSON integers have no size limit.
        return None
    return number if math.isfinite(number) else None


def _in_range(value: Any, low: float, high: float) -> bool:
    number = as_finite_float(value)
    return number is not None and low <= number <= high


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def is_valid_latitude(latitude: Any) -> bool:
    return _in_range(latitude, LIMITS.min_latitude, LIMITS.max_latitude)


def is_valid_longitude(longitude: Any) -> bool:
    return _in_range(longitude, LIMITS.min_longitude, LIMITS.max_longitude)


def is_valid_coordinate(latitude: Any, longitude: Any) -> bool:
    return is_valid_latitude(latitude) and is_valid_longitude(longitude)


is_valid_coordinates = is_valid_coordinate


def has_valid_coordinates(coordinate: Any) -> bool:
    """Structural check for a coordinate record (mapping or object).

    Both `latitude` and `longitude` must be present, real numbers (not bools or strings)
    and within bounds.
    """
    if coordinate is None:
        return False
    return is_valid_coordinate(_field(coordinate, "latitude"), _field(coordinate, "longitude"))


def is_valid_accuracy(accuracy: Any) -> bool:
    return _in_range(accuracy, LIMITS.min_accuracy_meters, LIMITS.max_accuracy_meters)


def is_valid_altitude(altitude: Any) -> bool:
    return _in_range(altitude, LIMITS.min_altitude_meters, LIMITS.max_altitude_meters)


def validate_coordinates(latitude: Any, longitude: Any, context: str = "coordinate") -> None:
    """Raise `ValidationError` naming `context` if the pair is not a valid coordinate."""
    if not is_valid_latitude(latitude):
        raise ValidationError(
            f"Invalid latitude for {context}: {latitude!r} "
            f"(valid range: {LIMITS.min_latitude} to {LIMITS.max_latitude})",
            context=context,
        )
    if not is_valid_longitude(longitude):
        raise ValidationError(
            f"Invalid longitude for {context}: {longitude!r} "
            f"(valid range: {LIMITS.min_longitude} to {LIMITS.max_longitude})",
            context=context,
        )


def validate_gps_coordinates(latitude: Any, longitude: Any) -> None:
    validate_coordinates(latitude, longitude, "GPS coordinate")


def to_coordinate(obj: Any) -> Coordinate:
    """Convert a coordinate record into a `Coordinate`, keeping extra fields.

    Non-numeric or non-finite `accuracy`/`altitude` values are dropped rather than rejected.
    """
    if isinstance(obj, Coordinate):
        return obj
    if isinstance(obj, Mapping):
        payload = dict(obj)
    else:
        payload = {name: _field(obj, name) for name in ("latitude", "longitude", "accuracy", "altitude")}
    for name in ("accuracy", "altitude"):
        payload[name] = as_finite_float(payload.get(name))
    return Coordinate.model_validate(payload)


def filter_valid_coordinates(coordinates: Iterable[Any]) -> list[Coordinate]:
    """Keep only records passing `has_valid_coordinates`, in input order."""
    items = list(coordinates)
    valid = [to_coordinate(c) for c in items if has_valid_coordinates(c)]
    dropped = len(items) - len(valid)
    if dropped:
        logger.debug("Dropped %d invalid coordinate(s) out of %d", dropped, len(items))
    return valid
