"""
Domain models (Pydantic).

These types are the value contract between the calculation layer and its callers:
- `Coordinate` and its annotated variants (search results keep caller fields)
- aggregate results (`BoundingBox`, `CoordinatesSpread`, `RouteCalculationInfo`, ...)

All models are immutable. Coordinate bounds are deliberately NOT enforced here:
batch GPS logs contain bad fixes, and deciding validity (and whether to raise or
filter) belongs to `fleetgeo.geo.validation`.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    """A GPS fix in decimal degrees, with optional accuracy/altitude in meters.

    Extra fields (record ids, timestamps, speed) are kept so annotated results can be
    mapped back to their source records.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    latitude: float
    longitude: float
    accuracy: float | None = None
    altitude: float | None = None


class NearbyCoordinate(Coordinate):
    """A coordinate annotated with its distance (km) from a search center."""

    distance: float


class NearestCoordinate(NearbyCoordinate):
    """A coordinate annotated with distance (km) and bearing (degrees) from a target."""

    bearing: float


class BoundingBox(BaseModel):
    """Axis-aligned lat/lon rectangle; no antimeridian wraparound."""

    model_config = ConfigDict(frozen=True)

    north_east: Coordinate
    south_west: Coordinate


class AccuracyRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)


class DistanceWithAccuracy(BaseModel):
    model_config = ConfigDict(frozen=True)

    distance: float = Field(..., ge=0)
    accuracy_range: AccuracyRange


class CoordinateMatch(BaseModel):
    """Result of a closest/farthest scan."""

    model_config = ConfigDict(frozen=True)

    coordinate: Coordinate
    distance: float = Field(..., ge=0)


class CoordinatesSpread(BaseModel):
    """How dispersed a point set is around its center point (distances in km)."""

    model_config = ConfigDict(frozen=True)

    center: Coordinate
    max_distance: float
    avg_distance: float
    min_distance: float
    bounding_box: BoundingBox
    coordinate_count: int = Field(..., ge=1)


class RouteCalculationInfo(BaseModel):
    """Path summary: length, endpoints, extent and first/last leg bearings."""

    model_config = ConfigDict(frozen=True)

    total_distance: float
    start_point: Coordinate
    end_point: Coordinate
    waypoint_count: int = Field(..., ge=0)
    bounding_box: BoundingBox
    start_bearing: float
    end_bearing: float


class RoutePlan(BaseModel):
    """Nearest-neighbor visit plan for a start point and a set of destinations.

    `original_order` / `optimized_order` hold indices into the caller's destination list.
    """

    model_config = ConfigDict(frozen=True)

    original_order: list[int]
    optimized_order: list[int]
    optimized_route: list[Coordinate]
    total_distance: float
    estimated_time_minutes: int


class HeatmapCell(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
    intensity: int = Field(..., ge=1)
    weight: float = Field(..., ge=0, le=1)


class FrequentArea(BaseModel):
    model_config = ConfigDict(frozen=True)

    location: Coordinate
    visit_count: int = Field(..., ge=1)
    frequency: float = Field(..., ge=0, le=1)


AccuracyStatus = Literal["high", "medium", "low", "poor"]


class TrackSummary(BaseModel):
    """Movement and fix-quality overview of a recorded GPS log.

    Speeds are km/h. Fixes without a usable reading are left out of the matching
    count or average, so `moving_count + stopped_count` can be below `fix_count`.
    """

    model_config = ConfigDict(frozen=True)

    fix_count: int = Field(..., ge=0)
    accuracy_counts: dict[str, int]
    moving_count: int = Field(..., ge=0)
    stopped_count: int = Field(..., ge=0)
    average_speed_kmh: float | None = None
    smoothed_speed_kmh: float | None = None
    heading: float | None = None
