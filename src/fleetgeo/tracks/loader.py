"""
GPS log file loader.

Reads exported GPS logs (JSON or CSV) into plain record dicts. Records are NOT
validated here: the geo layer filters bad fixes itself, so a noisy export still
yields a usable analysis.

Accepted shapes:
- JSON list of objects: `[{"latitude": 35.6, "longitude": 139.7, ...}, ...]`
- JSON object with a `coordinates` list
- CSV with a header row (`latitude,longitude[,accuracy,altitude,speed_kmh,heading,...]`)
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any

from fleetgeo.core.env import resolve_project_path

logger = logging.getLogger(__name__)

_NUMERIC_FIELDS = ("latitude", "longitude", "accuracy", "altitude", "speed_kmh", "heading")


def _coerce_numeric(row: dict[str, Any]) -> dict[str, Any]:
    out = dict(row)
    for key in _NUMERIC_FIELDS:
        value = out.get(key)
        if not isinstance(value, str):
            continue
        value = value.strip()
        if not value:
            out[key] = None
            continue
        try:
            out[key] = float(value)
        except ValueError:
            # Left as a string so `has_valid_coordinates` rejects it.
            out[key] = value
    return out


def _load_json(path: Path) -> list[dict[str, Any]]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("coordinates")
    if not isinstance(payload, list):
        raise ValueError(f"Invalid GPS log {path}; expected a list or an object with a 'coordinates' list.")
    return [r for r in payload if isinstance(r, dict)]


def _load_csv(path: Path) -> list[dict[str, Any]]:
    with path.open(newline="", encoding="utf-8") as f:
        return [_coerce_numeric(row) for row in csv.DictReader(f)]


def load_coordinates(path: str | Path) -> list[dict[str, Any]]:
    """Load raw coordinate records from a JSON or CSV GPS log."""
    resolved = resolve_project_path(path)
    if resolved.suffix.lower() == ".csv":
        records = _load_csv(resolved)
    else:
        records = _load_json(resolved)
    logger.info("Loaded %d GPS records from %s", len(records), resolved)
    return records
