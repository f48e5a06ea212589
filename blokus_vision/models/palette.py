"""
Tile Palette – Tags, Reference Swatches & Seed Centres
=======================================================

A Blokus board tile is one of five colours.  Each is identified by a
single-letter tag, always handled in the fixed declaration order
``R, G, B, Y, W``; that order is also the tie-break order used during
clustering.

The clustering engine needs an initial centre per tag.  These are
derived from hand-picked swatches measured on earlier photographs of
the board (after filtering and downscaling to one pixel per tile):

  1. parse each ``#rrggbb`` swatch into an RGB triple in [0, 1],
  2. average the swatches of a tag **in RGB**,
  3. convert the mean to L*a*b*.

``default_seed_centers`` performs this once per process for the
built-in table and caches the result.
"""

from __future__ import annotations

import json
import logging
import math
import re
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Tuple

from blokus_vision.errors import ConfigError, InvalidInputError
from blokus_vision.models.colorspace import Color, average, lab_to_rgb, rgb_to_lab

log = logging.getLogger(__name__)


# ── Canonical tag list (declaration order = tie-break order) ──────────

TAGS: Tuple[str, ...] = ("R", "G", "B", "Y", "W")

NUM_TAGS: int = len(TAGS)

TAG_NAMES: dict[str, str] = {
    "R": "red",
    "G": "green",
    "B": "blue",
    "Y": "yellow",
    "W": "white",
}

# Measured tile colours, keyed by colour name.  The blue list really
# does contain one teal sample shared with green.
REFERENCE_SWATCHES: dict[str, list[str]] = {
    "red":    ["#8b0003", "#e20006", "#c14857", "#a30005", "#d32240"],
    "green":  ["#005d48", "#00887a", "#00978d", "#00767b", "#00a5a7"],
    "blue":   ["#00978d", "#2b4de0", "#6c85e4", "#0012a9", "#0319d4"],
    "yellow": ["#b88c00", "#dda800", "#d4ce00", "#e1ad00", "#dae81d"],
    "white":  ["#bab0be", "#c9c9cd", "#bebfc9", "#a5c1d6", "#b2b5cf"],
}

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")


# ── Seed centres ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class SeedCenters:
    """Initial cluster centres in L*a*b*, one per tag in ``TAGS`` order."""
    centers: Tuple[Color, ...]

    def __post_init__(self) -> None:
        if len(self.centers) != NUM_TAGS:
            raise ConfigError(
                f"Expected {NUM_TAGS} seed centres, got {len(self.centers)}"
            )
        checked = []
        for tag, c in zip(TAGS, self.centers):
            if len(c) != 3:
                raise ConfigError(
                    f"Seed centre for {tag} has {len(c)} components (expected 3)"
                )
            try:
                point = tuple(float(v) for v in c)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"Seed centre for {tag} is not numeric: {c!r}") from exc
            if not all(math.isfinite(v) for v in point):
                raise ConfigError(f"Seed centre for {tag} is not finite: {point!r}")
            checked.append(point)
        object.__setattr__(self, "centers", tuple(checked))

    def __getitem__(self, tag: str) -> Color:
        try:
            return self.centers[TAGS.index(tag)]
        except ValueError:
            raise KeyError(tag) from None

    def by_tag(self) -> Dict[str, Color]:
        return dict(zip(TAGS, self.centers))

    def as_rgb(self) -> Dict[str, Color]:
        """Seed centres converted back to RGB, keyed by tag."""
        return {tag: lab_to_rgb(*c) for tag, c in zip(TAGS, self.centers)}


def parse_hex_color(value: str) -> Color:
    """Parse ``"#rrggbb"`` (leading ``#`` optional) into RGB in [0, 1]."""
    if not isinstance(value, str):
        raise ConfigError(f"Swatch must be a hex string, got {value!r}")
    m = _HEX_RE.match(value.strip())
    if m is None:
        raise ConfigError(f"Malformed hex colour: {value!r}")
    return tuple(int(byte, 16) / 255 for byte in m.groups())


def rgb_to_hex(rgb: Sequence[float]) -> str:
    """Format an RGB triple in [0, 1] as ``#rrggbb``, clamping each channel."""
    return "#" + "".join(
        f"{round(min(max(c, 0.0), 1.0) * 255):02x}" for c in rgb
    )


def seed_center_from_swatches(swatches: Sequence[str]) -> Color:
    """Average a swatch list in RGB and return the mean as L*a*b*."""
    if not swatches:
        raise ConfigError("Swatch list is empty")
    rgb = [parse_hex_color(s) for s in swatches]
    try:
        mean = average(rgb)
    except InvalidInputError as exc:
        raise ConfigError(str(exc)) from exc
    return rgb_to_lab(*mean)


def load_seed_centers(table: Mapping[str, Sequence[str]]) -> SeedCenters:
    """Build the five seed centres from a ``name → [hex, ...]`` table.

    Raises
    ------
    ConfigError
        If a colour name is missing, its list is empty, or any swatch is
        not a valid ``#rrggbb`` string.
    """
    centers = []
    for tag in TAGS:
        name = TAG_NAMES[tag]
        if name not in table:
            raise ConfigError(f"Swatch table has no entry for '{name}'")
        swatches = table[name]
        if not isinstance(swatches, (list, tuple)):
            raise ConfigError(f"Swatches for '{name}' must be a list of hex strings")
        try:
            centers.append(seed_center_from_swatches(swatches))
        except ConfigError as exc:
            raise ConfigError(f"Swatches for '{name}': {exc}") from exc
    return SeedCenters(tuple(centers))


def load_swatch_table(path: str | Path) -> dict[str, list[str]]:
    """Read a JSON swatch table ``{"red": ["#rrggbb", ...], ...}``."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise ConfigError(f"Could not read swatch table {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Swatch table {path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Swatch table {path} must be a JSON object")
    log.info("Loaded swatch table from %s (%d colours)", path, len(data))
    return data


# ── Process-wide cache of the built-in seeds ───────────────────────────

_default_seeds: Optional[SeedCenters] = None
_default_seeds_lock = threading.Lock()


def default_seed_centers() -> SeedCenters:
    """Seed centres for ``REFERENCE_SWATCHES``, computed once and cached."""
    global _default_seeds
    if _default_seeds is None:
        with _default_seeds_lock:
            if _default_seeds is None:
                _default_seeds = load_seed_centers(REFERENCE_SWATCHES)
                log.debug("Computed default seed centres: %s", _default_seeds.by_tag())
    return _default_seeds
