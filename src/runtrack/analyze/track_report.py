#!/usr/bin/env python3
"""
runtrack-analyze: report on one or more GPX tracks.

Summary per file by default. Optional extras:
  --segment START END   statistics for a distance range (km)
  --pauses              list detected pauses
  --plot METRIC OUT     render the track coloured by METRIC to a PNG
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path

from runtrack.analyze.pauses import find_pauses
from runtrack.analyze.segment import segment_stats
from runtrack.analyze.summary import summarize
from runtrack.config import load_config
from runtrack.errors import RunTrackError
from runtrack.formats.gpx import track_from_gpx
from runtrack.util.logging import log
from runtrack.visualize.colors import GradientMetric, segment_colors

TSV_FIELDS = (
    "points", "distance_km", "duration_s", "avg_pace_min_km",
    "elevation_gain_m", "elevation_loss_m", "pauses", "paused_s",
    "max_hr", "avg_power_w",
)


def _fmt(v) -> str:
    if v is None:
        return "-"
    if isinstance(v, float):
        return f"{v:.3f}"
    return str(v)


def print_report(path: Path, stats: dict, *, tsv: bool) -> None:
    if tsv:
        print("\t".join([str(path)] + [_fmt(stats.get(k)) for k in TSV_FIELDS]))
        return

    print(f"\n{path}")
    print(f"  points           : {stats.get('points', 0)}")
    print(f"  distance (km)    : {stats.get('distance_km', 0.0):.3f}")
    print(f"  duration (s)     : {stats.get('duration_s', 0.0):.1f}")
    print(f"  avg pace min/km  : {_fmt(stats.get('avg_pace_min_km'))}")
    print(f"  elev gain (m)    : {_fmt(stats.get('elevation_gain_m'))}")
    print(f"  elev loss (m)    : {_fmt(stats.get('elevation_loss_m'))}")
    print(f"  pauses           : {stats.get('pauses', 0)} ({_fmt(stats.get('paused_s'))} s)")
    print(f"  max hr           : {_fmt(stats.get('max_hr'))}")
    print(f"  avg power (W)    : {_fmt(stats.get('avg_power_w'))}")


def print_segment(track, start_km: float, end_km: float) -> None:
    stats = segment_stats(track, start_km, end_km)
    print(f"  segment {start_km:.3f}-{end_km:.3f} km:")
    if stats is None:
        print("    (no data in range)")
        return
    print(f"    distance (km)  : {stats.distance:.3f}")
    print(f"    duration (s)   : {stats.duration / 1000.0:.1f}")
    print(f"    pace min/km    : {stats.pace:.2f} (min {stats.min_pace:.2f}, max {stats.max_pace:.2f})")
    print(f"    elev +/- (m)   : {stats.elevation_gain:.1f} / {stats.elevation_loss:.1f}")
    print(f"    elev min/max   : {stats.min_ele:.1f} / {stats.max_ele:.1f}")
    print(f"    hr avg         : {_fmt(stats.avg_hr)} (min {_fmt(stats.min_hr)}, max {_fmt(stats.max_hr)})")
    print(f"    avg power (W)  : {_fmt(stats.avg_power)}")
    print(f"    avg cadence    : {_fmt(stats.avg_cadence)}")


def print_pauses(track, cfg) -> None:
    pauses = find_pauses(track, cfg.pauses.min_duration_s, cfg.pauses.max_speed_kmh)
    print(f"  pauses ({len(pauses)}):")
    for p in pauses:
        print(
            f"    {p.start_point.time.isoformat()}  "
            f"at {p.start_point.cumulative_distance:.3f} km  {p.duration:.0f} s"
        )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="runtrack: analyze GPX track(s).")
    ap.add_argument("gpx", nargs="+", type=Path, help="One or more GPX files.")
    ap.add_argument("--tsv", action="store_true",
                    help="Print tab-separated output (good for piping).")
    ap.add_argument("--segment", nargs=2, type=float, metavar=("START_KM", "END_KM"),
                    help="Also print statistics for this distance range.")
    ap.add_argument("--pauses", action="store_true", help="List detected pauses.")
    ap.add_argument("--plot", nargs=2, metavar=("METRIC", "OUT_PNG"),
                    help=f"Render coloured track; METRIC is one of "
                         f"{', '.join(m.value for m in GradientMetric)}.")
    ap.add_argument("--weight", type=float, default=None,
                    help="Runner weight in kg for power (default: from config).")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = load_config()
    except RunTrackError as e:
        log(str(e))
        return 2
    if args.weight is not None:
        cfg = replace(cfg, power=replace(cfg.power, weight_kg=args.weight))

    if args.plot and args.plot[0] not in {m.value for m in GradientMetric}:
        log(f"Unknown metric: {args.plot[0]}")
        return 2

    if args.tsv:
        print("\t".join(("file",) + TSV_FIELDS))

    rc = 0
    for path in args.gpx:
        if not path.is_file():
            log(f"Skipping (not a file): {path}")
            rc = 2
            continue
        try:
            track = track_from_gpx(path)
        except RunTrackError as e:
            log(str(e))
            rc = 2
            continue

        print_report(path, summarize(track, cfg), tsv=args.tsv)
        if args.segment:
            print_segment(track, *args.segment)
        if args.pauses:
            print_pauses(track, cfg)
        if args.plot:
            # matplotlib is only needed here
            from runtrack.visualize.plot import save_segments_plot

            metric, out = args.plot
            out_path = Path(out)
            if len(args.gpx) > 1:
                out_path = out_path.with_name(f"{path.stem}_{out_path.name}")
            save_segments_plot(segment_colors(track, metric), out_path, title=track.name)
            log(f"Wrote {out_path}")

    return rc


if __name__ == "__main__":
    raise SystemExit(main())
