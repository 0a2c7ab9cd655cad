# runtrack/formats/gpx.py
"""
GPX helpers for runtrack

This module is intentionally format-focused:
- GPX namespace handling
- reading GPX into raw TrackPoints (cumulative distance left at 0)
- writing a Track back out as a single-segment GPX 1.1 document

Key design principle:
  Parsing only produces raw points. Distances and durations are always
  derived by `runtrack.core.metrics`, never read from the file.
"""

from __future__ import annotations

import datetime as _dt
from pathlib import Path
from typing import Optional
from xml.etree import ElementTree as ET

from runtrack.core.metrics import build_track
from runtrack.core.model import Track, TrackPoint
from runtrack.errors import InvalidGpxError

# GPX 1.1 default namespace
GPX_NS = {"gpx": "http://www.topografix.com/GPX/1/1"}
# Garmin TrackPointExtension (hr / cad)
TPX_NS = "http://www.garmin.com/xmlschemas/TrackPointExtension/v1"

ET.register_namespace("", GPX_NS["gpx"])
ET.register_namespace("gpxtpx", TPX_NS)


def qn(tag: str, ns: str = GPX_NS["gpx"]) -> str:
    """
    Build an ElementTree-qualified name for a GPX tag.

    ElementTree represents namespaced tags internally as
      "{namespace-uri}tag"
    """
    return f"{{{ns}}}{tag}"


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _parse_gpx_time(text: str) -> Optional[_dt.datetime]:
    """
    Parse an ISO-8601 timestamp commonly found in GPX <time> nodes.

    Expected examples:
      - "2026-01-02T21:14:44Z"
      - "2026-01-02T21:14:44.123Z"
      - "2026-01-02T21:14:44+00:00"
    """
    if not text:
        return None
    s = text.strip()
    if not s:
        return None

    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    try:
        dt = _dt.datetime.fromisoformat(s)
    except ValueError:
        return None

    # Ensure tz-aware; if naive, assume UTC (conservative for GPX sources)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_dt.timezone.utc)

    return dt.astimezone(_dt.timezone.utc)


def _format_gpx_time(dt: _dt.datetime) -> str:
    """
    Format a datetime as GPX time (UTC with Z).

    Millisecond resolution: interpolated boundary points from cut/trim
    are rarely on a whole second.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_dt.timezone.utc)
    dt_utc = dt.astimezone(_dt.timezone.utc)
    spec = "milliseconds" if dt_utc.microsecond else "seconds"
    return dt_utc.isoformat(timespec=spec).replace("+00:00", "Z")


def _indent(elem: ET.Element, level: int = 0, indent: str = "  ") -> None:
    """
    In-place pretty-printer for ElementTree output. Eliminates double blank-line
    issues by explicitly controlling .text/.tail.
    """
    i = "\n" + level * indent
    j = "\n" + (level - 1) * indent if level > 0 else "\n"

    children = list(elem)
    if children:
        if elem.text is None or not elem.text.strip():
            elem.text = i + indent
        for child in children:
            _indent(child, level + 1, indent=indent)
        if children[-1].tail is None or not children[-1].tail.strip():
            children[-1].tail = i
    if elem.tail is None or not elem.tail.strip():
        elem.tail = j


def _float_or_none(text: Optional[str]) -> Optional[float]:
    if text is None or not text.strip():
        return None
    try:
        return float(text)
    except ValueError:
        return None


# ---------------------------
# Reading
# ---------------------------

def read_gpx(path: Path) -> ET.ElementTree:
    """
    Read a GPX file into an ElementTree.

    Raises:
      InvalidGpxError (malformed XML), OSError
    """
    try:
        return ET.parse(path)
    except ET.ParseError as e:
        raise InvalidGpxError(f"Could not parse GPX: {path} ({e})") from e


def _extension_values(trkpt: ET.Element) -> dict[str, Optional[float]]:
    """hr / cad / power from any extension block, matched by local name."""
    out: dict[str, Optional[float]] = {"hr": None, "cad": None, "power": None}
    ext = trkpt.find("gpx:extensions", GPX_NS)
    if ext is None:
        return out
    for el in ext.iter():
        name = _local(el.tag).lower()
        if name in out and out[name] is None:
            out[name] = _float_or_none(el.text)
    return out


def extract_trackpoints(tree: ET.ElementTree) -> list[TrackPoint]:
    """Extract ordered raw trackpoints from a GPX tree."""
    root = tree.getroot()
    pts: list[TrackPoint] = []

    for trkpt in root.findall(".//gpx:trkpt", GPX_NS):
        lat = _float_or_none(trkpt.get("lat"))
        lon = _float_or_none(trkpt.get("lon"))
        if lat is None or lon is None:
            continue

        time = _parse_gpx_time(trkpt.findtext("gpx:time", default="", namespaces=GPX_NS))
        if time is None:
            continue   # skip points without timestamps

        ele = _float_or_none(trkpt.findtext("gpx:ele", namespaces=GPX_NS))
        ext = _extension_values(trkpt)

        pts.append(TrackPoint(
            lat=lat,
            lon=lon,
            ele=ele if ele is not None else 0.0,
            time=time,
            hr=ext["hr"],
            cad=ext["cad"],
            power=ext["power"],
        ))

    return pts


def track_name(root: ET.Element) -> Optional[str]:
    """First non-empty <trk><name>, else <metadata><name>."""
    for xpath in ("gpx:trk/gpx:name", "gpx:metadata/gpx:name"):
        name = (root.findtext(xpath, default="", namespaces=GPX_NS) or "").strip()
        if name:
            return name
    return None


def track_from_gpx(path: Path, *, color: str = "") -> Track:
    """
    Load a GPX file as a consistent Track.

    Raises InvalidGpxError if the file has no usable track points.
    """
    tree = read_gpx(path)
    points = extract_trackpoints(tree)
    if not points:
        raise InvalidGpxError(f"No timestamped track points in {path}")

    # Files from some devices are not strictly time-ordered.
    points.sort(key=lambda p: p.time)
    return build_track(
        points,
        id=path.stem,
        name=track_name(tree.getroot()) or path.stem,
        color=color,
    )


# ---------------------------
# Writing
# ---------------------------

def _fmt_num(v: float) -> str:
    return f"{v:.7f}".rstrip("0").rstrip(".")


def track_to_gpx(track: Track) -> ET.Element:
    """Build a GPX 1.1 document with one <trk>/<trkseg> for `track`."""
    root = ET.Element(qn("gpx"), {"version": "1.1", "creator": "runtrack"})

    if track.points:
        md = ET.SubElement(root, qn("metadata"))
        ET.SubElement(md, qn("name")).text = track.name
        ET.SubElement(md, qn("time")).text = _format_gpx_time(track.points[0].time)

    trk = ET.SubElement(root, qn("trk"))
    ET.SubElement(trk, qn("name")).text = track.name
    seg = ET.SubElement(trk, qn("trkseg"))

    for p in track.points:
        el = ET.SubElement(seg, qn("trkpt"), {"lat": _fmt_num(p.lat), "lon": _fmt_num(p.lon)})
        ET.SubElement(el, qn("ele")).text = f"{p.ele:.2f}"
        ET.SubElement(el, qn("time")).text = _format_gpx_time(p.time)

        if p.hr is None and p.cad is None and p.power is None:
            continue
        ext = ET.SubElement(el, qn("extensions"))
        if p.power is not None:
            ET.SubElement(ext, qn("power")).text = f"{p.power:.0f}"
        if p.hr is not None or p.cad is not None:
            tpx = ET.SubElement(ext, qn("TrackPointExtension", TPX_NS))
            if p.hr is not None:
                ET.SubElement(tpx, qn("hr", TPX_NS)).text = f"{p.hr:.0f}"
            if p.cad is not None:
                ET.SubElement(tpx, qn("cad", TPX_NS)).text = f"{p.cad:.0f}"

    return root


def write_gpx(root: ET.Element, out_path: Path, *, pretty: bool = True) -> None:
    """
    Write a GPX XML tree to disk.

    - pretty=True applies indentation for human readability
    - writes UTF-8 with XML declaration
    """
    if pretty:
        _indent(root)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    tree = ET.ElementTree(root)
    tree.write(out_path, encoding="utf-8", xml_declaration=True)
