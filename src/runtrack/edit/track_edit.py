#!/usr/bin/env python3
"""
runtrack-edit: apply an editing operation to GPX track(s).

Subcommands:
  cut    GPX START_KM END_KM   remove a distance range and close the gap
  trim   GPX START_KM END_KM   keep only a distance range (re-based to 0)
  merge  GPX GPX [GPX ...]     join tracks in start-time order
  repair GPX                   pull GPS outliers back onto their neighbours

The result is written as a new GPX file; inputs are never overwritten
unless --out points at one of them.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from runtrack.config import load_config
from runtrack.core.model import Track
from runtrack.edit.operations import cut, merge, repair_gps_outliers, trim_to_range
from runtrack.errors import RunTrackError
from runtrack.formats.gpx import track_from_gpx, track_to_gpx, write_gpx
from runtrack.util.logging import log
from runtrack.util.paths import default_output_path


def _add_range(sp: argparse.ArgumentParser) -> None:
    sp.add_argument("gpx", type=Path)
    sp.add_argument("start_km", type=float)
    sp.add_argument("end_km", type=float)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="runtrack: edit GPX track(s).")
    ap.add_argument("--out", type=Path, default=None,
                    help="Output GPX path (default: next to the first input).")
    sub = ap.add_subparsers(dest="command", required=True)

    _add_range(sub.add_parser("cut", help="Remove a distance range."))
    _add_range(sub.add_parser("trim", help="Keep only a distance range."))

    sp = sub.add_parser("merge", help="Merge tracks in start-time order.")
    sp.add_argument("gpx", type=Path, nargs="+")

    sp = sub.add_parser("repair", help="Correct GPS outliers.")
    sp.add_argument("gpx", type=Path)
    sp.add_argument("--max-speed", type=float, default=None,
                    help="Outlier speed threshold in km/h (default: from config).")
    return ap


def run_command(args: argparse.Namespace, cfg) -> tuple[Track, Path]:
    """Load inputs, apply the edit, return (result, source path for naming)."""
    if args.command == "merge":
        tracks = [track_from_gpx(p) for p in args.gpx]
        return merge(tracks), args.gpx[0]

    track = track_from_gpx(args.gpx)
    if args.command == "cut":
        result = cut(track, args.start_km, args.end_km)
        if result is track:
            log(f"Nothing cut: {args.start_km}-{args.end_km} km is not a valid range")
    elif args.command == "trim":
        result = trim_to_range(track, args.start_km, args.end_km)
        if not result.points:
            log("Trim left fewer than 2 points; writing an empty track")
    else:
        max_speed = args.max_speed if args.max_speed is not None else cfg.outliers.max_speed_kmh
        result, corrected = repair_gps_outliers(track, max_speed_kmh=max_speed)
        log(f"Corrected {corrected} point(s) faster than {max_speed:g} km/h")
    return result, args.gpx


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        result, src = run_command(args, load_config())
    except (RunTrackError, OSError) as e:
        log(str(e))
        return 2

    out = args.out or default_output_path(src, result.name or src.stem, args.command)
    write_gpx(track_to_gpx(result), out)
    log(f"{args.command}: {len(result)} points, {result.distance:.3f} km -> {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
