"""
Geometry constants.

These values are part of the calculation contract (results must match exactly across
implementations), so they are module-level constants rather than settings.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

EARTH_RADIUS_KM = 6371
EARTH_RADIUS_M = EARTH_RADIUS_KM * 1000

DEG_TO_RAD = math.pi / 180
RAD_TO_DEG = 180 / math.pi


@dataclass(frozen=True)
class CalculationLimits:
    """Validity ranges for GPS fields (degrees and meters)."""

    min_latitude: float = -90
    max_latitude: float = 90
    min_longitude: float = -180
    max_longitude: float = 180
    min_accuracy_meters: float = 0
    max_accuracy_meters: float = 10000
    min_altitude_meters: float = -500
    max_altitude_meters: float = 10000
    max_distance_km: float = 20037.5  # half the Earth's circumference
    max_bearing_degrees: float = 360


GPS_CALCULATION_LIMITS = CalculationLimits()
