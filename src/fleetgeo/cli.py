"""
FleetGeo CLI entrypoint.

Quick local analysis of GPS logs without a backend. All calculations are delegated to
`fleetgeo.geo`; this module only parses arguments, loads files and prints results.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from pydantic import BaseModel

from fleetgeo.config.overrides import apply_settings_overrides, parse_override_pairs
from fleetgeo.config.settings import Settings, get_settings
from fleetgeo.core.errors import ValidationError
from fleetgeo.core.logging import configure_logging
from fleetgeo.geo import (
    bearing_to_compass16,
    bearing_to_japanese_compass,
    build_heatmap,
    calculate_bearing,
    calculate_bounding_box,
    calculate_coordinates_spread,
    calculate_distance,
    calculate_route_info,
    find_coordinates_within_radius,
    find_nearest_coordinates,
    plan_route,
    summarize_track,
    top_frequent_areas,
)
from fleetgeo.tracks.loader import load_coordinates

logger = logging.getLogger(__name__)


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_dump(v) for v in value]
    return value


def _print_json(value: Any) -> None:
    print(json.dumps(_dump(value), ensure_ascii=False, indent=2))


def _cmd_distance(args: argparse.Namespace, settings: Settings) -> int:
    distance = calculate_distance(args.lat1, args.lon1, args.lat2, args.lon2)
    bearing = calculate_bearing(args.lat1, args.lon1, args.lat2, args.lon2)
    if args.json:
        _print_json({"distance_km": distance, "bearing": bearing, "compass": bearing_to_compass16(bearing)})
        return 0
    print(f"Distance: {distance:.3f} km")
    print(f"Bearing:  {bearing:.1f} deg ({bearing_to_compass16(bearing)} / {bearing_to_japanese_compass(bearing)})")
    return 0


def _cmd_bbox(args: argparse.Namespace, settings: Settings) -> int:
    box = calculate_bounding_box(args.lat, args.lon, args.radius_km)
    if args.json:
        _print_json(box)
        return 0
    print(f"NE: {box.north_east.latitude:.6f}, {box.north_east.longitude:.6f}")
    print(f"SW: {box.south_west.latitude:.6f}, {box.south_west.longitude:.6f}")
    return 0


def _cmd_within_radius(args: argparse.Namespace, settings: Settings) -> int:
    found = find_coordinates_within_radius(args.lat, args.lon, args.radius_km, load_coordinates(args.file))
    if args.json:
        _print_json(found)
        return 0
    print(f"{len(found)} point(s) within {args.radius_km} km:")
    for c in found:
        print(f"  {c.latitude:.6f}, {c.longitude:.6f}  {c.distance:.3f} km")
    return 0


def _cmd_nearest(args: argparse.Namespace, settings: Settings) -> int:
    limit = args.limit if args.limit is not None else settings.search.nearest_limit
    found = find_nearest_coordinates(args.lat, args.lon, load_coordinates(args.file), limit=limit)
    if args.json:
        _print_json(found)
        return 0
    for i, c in enumerate(found, start=1):
        print(
            f"{i:>3}. {c.latitude:.6f}, {c.longitude:.6f}  "
            f"{c.distance:.3f} km  {c.bearing:.1f} deg ({bearing_to_compass16(c.bearing)})"
        )
    return 0


def _cmd_spread(args: argparse.Namespace, settings: Settings) -> int:
    spread = calculate_coordinates_spread(load_coordinates(args.file))
    if args.json:
        _print_json(spread)
        return 0
    print(f"Points: {spread.coordinate_count}")
    print(f"Center: {spread.center.latitude:.6f}, {spread.center.longitude:.6f}")
    print(
        f"Distance from center: min={spread.min_distance:.3f} "
        f"avg={spread.avg_distance:.3f} max={spread.max_distance:.3f} km"
    )
    return 0


def _cmd_route_info(args: argparse.Namespace, settings: Settings) -> int:
    info = calculate_route_info(load_coordinates(args.file))
    if args.json:
        _print_json(info)
        return 0
    print(f"Total distance: {info.total_distance:.3f} km")
    print(f"Waypoints:      {info.waypoint_count}")
    print(f"Start bearing:  {info.start_bearing:.1f} deg ({bearing_to_compass16(info.start_bearing)})")
    print(f"End bearing:    {info.end_bearing:.1f} deg ({bearing_to_compass16(info.end_bearing)})")
    return 0


def _cmd_optimize(args: argparse.Namespace, settings: Settings) -> int:
    start = {"latitude": args.start_lat, "longitude": args.start_lon}
    plan = plan_route(start, load_coordinates(args.file), average_speed_kmh=settings.motion.average_speed_kmh)
    if args.json:
        _print_json(plan)
        return 0
    print(f"Visit order:    {' -> '.join(str(i) for i in plan.optimized_order) or '(nothing to visit)'}")
    print(f"Total distance: {plan.total_distance:.3f} km")
    print(f"Estimated time: {plan.estimated_time_minutes} min at {settings.motion.average_speed_kmh:g} km/h")
    return 0


def _cmd_heatmap(args: argparse.Namespace, settings: Settings) -> int:
    cfg = settings.grid
    records = load_coordinates(args.file)
    if args.areas or args.top is not None:
        areas = top_frequent_areas(
            records,
            cell_deg=args.cell_deg if args.cell_deg is not None else cfg.frequent_area_cell_deg,
            limit=args.top if args.top is not None else cfg.frequent_area_limit,
        )
        if args.json:
            _print_json(areas)
            return 0
        for a in areas:
            print(
                f"  {a.location.latitude:.6f}, {a.location.longitude:.6f}  "
                f"visits={a.visit_count} freq={a.frequency:.3f}"
            )
        return 0

    cells = build_heatmap(
        records,
        cell_deg=args.cell_deg if args.cell_deg is not None else cfg.heatmap_cell_deg,
        saturation_count=cfg.heatmap_saturation_count,
    )
    if args.json:
        _print_json(cells)
        return 0
    for c in cells:
        print(f"  {c.latitude:.6f}, {c.longitude:.6f}  n={c.intensity} w={c.weight:.2f}")
    return 0


def _cmd_track_summary(args: argparse.Namespace, settings: Settings) -> int:
    acc = settings.accuracy
    motion = settings.motion
    summary = summarize_track(
        load_coordinates(args.file),
        high_m=acc.high_m,
        medium_m=acc.medium_m,
        low_m=acc.low_m,
        moving_threshold_kmh=motion.moving_threshold_kmh,
        stopped_threshold_kmh=motion.stopped_threshold_kmh,
        smoothing_alpha=motion.smoothing_alpha,
    )
    if args.json:
        _print_json(summary)
        return 0
    counts = summary.accuracy_counts
    print(f"Fixes:    {summary.fix_count}")
    print(f"Accuracy: high={counts['high']} medium={counts['medium']} low={counts['low']} poor={counts['poor']}")
    print(f"Moving:   {summary.moving_count}  stopped: {summary.stopped_count}")
    if summary.average_speed_kmh is not None:
        print(f"Speed:    avg={summary.average_speed_kmh:.2f} smoothed={summary.smoothed_speed_kmh:.2f} km/h")
    if summary.heading is not None:
        print(f"Heading:  {summary.heading:.1f} deg ({bearing_to_compass16(summary.heading)})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the FleetGeo CLI."""
    parser = argparse.ArgumentParser(prog="fleetgeo")
    parser.add_argument(
        "--override",
        action="append",
        default=[],
        help="Tune a setting for this run: SECTION.KEY=VALUE (repeatable).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--json", action="store_true", help="Output machine-readable JSON")

    dist = sub.add_parser("distance", parents=[common], help="Great-circle distance and bearing between two points.")
    dist.add_argument("lat1", type=float)
    dist.add_argument("lon1", type=float)
    dist.add_argument("lat2", type=float)
    dist.add_argument("lon2", type=float)
    dist.set_defaults(func=_cmd_distance)

    bbox = sub.add_parser("bbox", parents=[common], help="Bounding box around a point.")
    bbox.add_argument("--lat", required=True, type=float)
    bbox.add_argument("--lon", required=True, type=float)
    bbox.add_argument("--radius-km", required=True, type=float)
    bbox.set_defaults(func=_cmd_bbox)

    within = sub.add_parser("within-radius", parents=[common], help="GPS log points within a radius.")
    within.add_argument("file", help="GPS log (.json or .csv)")
    within.add_argument("--lat", required=True, type=float)
    within.add_argument("--lon", required=True, type=float)
    within.add_argument("--radius-km", required=True, type=float)
    within.set_defaults(func=_cmd_within_radius)

    near = sub.add_parser("nearest", parents=[common], help="Nearest GPS log points to a target.")
    near.add_argument("file", help="GPS log (.json or .csv)")
    near.add_argument("--lat", required=True, type=float)
    near.add_argument("--lon", required=True, type=float)
    near.add_argument("--limit", type=int, default=None, help="1..1000 (default from settings)")
    near.set_defaults(func=_cmd_nearest)

    spread = sub.add_parser("spread", parents=[common], help="Center point and dispersion of a GPS log.")
    spread.add_argument("file", help="GPS log (.json or .csv)")
    spread.set_defaults(func=_cmd_spread)

    route = sub.add_parser("route-info", parents=[common], help="Length, extent and bearings of a recorded path.")
    route.add_argument("file", help="GPS log (.json or .csv), in travel order")
    route.set_defaults(func=_cmd_route_info)

    opt = sub.add_parser("optimize", parents=[common], help="Nearest-neighbor visiting order for destinations.")
    opt.add_argument("file", help="Destinations (.json or .csv)")
    opt.add_argument("--start-lat", required=True, type=float)
    opt.add_argument("--start-lon", required=True, type=float)
    opt.set_defaults(func=_cmd_optimize)

    heat = sub.add_parser("heatmap", parents=[common], help="Grid aggregation of GPS fixes.")
    heat.add_argument("file", help="GPS log (.json or .csv)")
    heat.add_argument("--cell-deg", type=float, default=None, help="Grid cell size in degrees")
    heat.add_argument("--top", type=int, default=None, help="List the N most visited cells (implies --areas)")
    heat.add_argument("--areas", action="store_true", help="List the most visited cells (count from settings)")
    heat.set_defaults(func=_cmd_heatmap)

    track = sub.add_parser("track-summary", parents=[common], help="Fix quality and movement overview of a GPS log.")
    track.add_argument("file", help="GPS log (.json or .csv) with optional accuracy, speed_kmh and heading")
    track.set_defaults(func=_cmd_track_summary)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m fleetgeo.cli`."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = apply_settings_overrides(get_settings(), parse_override_pairs(args.override))
    except ValueError as e:
        parser.error(str(e))
    configure_logging(settings)
    logger.debug("%s: running %s", settings.app.name, args.command)

    func: Any = getattr(args, "func")
    try:
        return int(func(args, settings))
    except ValidationError as e:
        logger.debug("Validation failed (context=%s)", e.context)
        print(f"error: {e}", file=sys.stderr)
        return 2
    except (OSError, ValueError) as e:
        # Unreadable or malformed GPS log.
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
