"""
Grid aggregation of GPS fixes (heatmaps, frequently visited areas).

Cells are snapped by flooring each axis to a multiple of the cell size in degrees, so
cell keys are the south-west corner of each cell.
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Sequence
from typing import Any

from fleetgeo.core.errors import ValidationError
from fleetgeo.domain.models import Coordinate, FrequentArea, HeatmapCell
from fleetgeo.geo.validation import as_finite_float, filter_valid_coordinates


def _validate_cell(cell_deg: Any) -> None:
    cell = as_finite_float(cell_deg)
    if cell is None or cell <= 0:
        raise ValidationError(f"Invalid grid cell size: {cell_deg!r} (must be positive)", context="cell_deg")


def _snap(value: float, cell_deg: float) -> float:
    return round(math.floor(value / cell_deg) * cell_deg, 6)


def _count_cells(points: list[Coordinate], cell_deg: float) -> Counter[tuple[float, float]]:
    # Counter preserves first-seen order, which keeps tie ordering stable.
    return Counter((_snap(p.latitude, cell_deg), _snap(p.longitude, cell_deg)) for p in points)


def build_heatmap(
    coordinates: Sequence[Any], *, cell_deg: float = 0.01, saturation_count: int = 10
) -> list[HeatmapCell]:
    """One cell per occupied grid square; `weight` saturates at `saturation_count` fixes."""
    _validate_cell(cell_deg)
    if saturation_count < 1:
        raise ValidationError(
            f"Invalid saturation count: {saturation_count!r} (must be >= 1)", context="saturation_count"
        )

    counts = _count_cells(filter_valid_coordinates(coordinates), cell_deg)
    return [
        HeatmapCell(latitude=lat, longitude=lon, intensity=n, weight=min(n / saturation_count, 1.0))
        for (lat, lon), n in counts.items()
    ]


def top_frequent_areas(coordinates: Sequence[Any], *, cell_deg: float = 0.01, limit: int = 20) -> list[FrequentArea]:
    """Most visited grid cells, by fix count."""
    _validate_cell(cell_deg)
    if limit < 1:
        raise ValidationError(f"Invalid limit: {limit!r} (must be >= 1)", context="limit")

    points = filter_valid_coordinates(coordinates)
    if not points:
        return []

    counts = _count_cells(points, cell_deg)
    ranked = sorted(counts.items(), key=lambda kv: -kv[1])[:limit]
    return [
        FrequentArea(
            location=Coordinate(latitude=lat, longitude=lon),
            visit_count=n,
            frequency=n / len(points),
        )
        for (lat, lon), n in ranked
    ]
