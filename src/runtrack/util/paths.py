# runtrack/util/paths.py
from __future__ import annotations

import re
from pathlib import Path

_slug_bad = re.compile(r"[^a-z0-9]+")


def slugify(text: str, *, default: str = "untitled") -> str:
    """Create a path-safe slug (lowercase, a-z0-9 and single underscores)."""
    s = (text or "").strip().lower()
    s = _slug_bad.sub("_", s).strip("_")
    return s or default


def default_output_path(src: Path, name: str, suffix: str) -> Path:
    """`<src dir>/<slug(name)>_<suffix>.gpx`, next to the input file."""
    return src.parent / f"{slugify(name)}_{suffix}.gpx"
