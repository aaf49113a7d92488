"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/domain/palette.py

Palette families + piecewise-linear RGB interpolation.

Anchor sets are five-colour ColorBrewer ramps grouped by family:
-  sequential   ordered data (low → high)
-  diverging    data with a meaningful centre
-  qualitative  categorical data

`interpolate(anchors, n)` stretches or squeezes an anchor set to exactly `n`
colours; anchors landing on an integer position are emitted unchanged.

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Sequence

from symbology.core.errors import InvalidPaletteError

LOG = logging.getLogger(__name__)

_HEX = re.compile(r"^#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")

COLOR_SCHEMES: dict[str, list[list[str]]] = {
    "sequential": [
        ["#fee5d9", "#fcae91", "#fb6a4a", "#de2d26", "#a50f15"],  # Reds
        ["#edf8e9", "#bae4b3", "#74c476", "#31a354", "#006d2c"],  # Greens
        ["#eff3ff", "#bdd7e7", "#6baed6", "#3182bd", "#08519c"],  # Blues
    ],
    "diverging": [
        ["#d73027", "#fc8d59", "#fee090", "#91bfdb", "#4575b4"],  # Red-Blue
        ["#8c510a", "#f6e8c3", "#f5f5f5", "#c7eae5", "#01665e"],  # Brown-Teal
        ["#762a83", "#c2a5cf", "#f7f7f7", "#80cdc1", "#1b7837"],  # Purple-Green
    ],
    "qualitative": [
        ["#e41a1c", "#377eb8", "#4daf4a", "#984ea3", "#ff7f00"],  # Set 1
        ["#66c2a5", "#fc8d62", "#8da0cb", "#e78ac3", "#a6d854"],  # Set 2
        ["#8dd3c7", "#ffffb3", "#bebada", "#fb8072", "#80b1d3"],  # Set 3
    ],
}

SCHEME_NAMES: dict[str, list[str]] = {
    "sequential": ["Reds", "Greens", "Blues"],
    "diverging": ["Red-Blue", "Brown-Teal", "Purple-Green"],
    "qualitative": ["Set 1", "Set 2", "Set 3"],
}

FAMILY_HINTS: dict[str, str] = {
    "sequential": "Best for ordered data (low to high values)",
    "diverging": "Best for data with a meaningful center point",
    "qualitative": "Best for categorical data",
}

DEFAULT_FAMILY = "sequential"

__all__ = [
    "COLOR_SCHEMES",
    "DEFAULT_FAMILY",
    "FAMILY_HINTS",
    "SCHEME_NAMES",
    "decode_hex",
    "encode_hex",
    "interpolate",
    "round_half_up",
    "scheme_colors",
]


def round_half_up(x: float) -> int:
    # Python's round() is banker's rounding; break values and channels round .5 upwards.
    return int(math.floor(x + 0.5))


def decode_hex(color: str) -> tuple[int, int, int]:
    """'#rrggbb' -> (r, g, b) with 8-bit channels."""
    if not isinstance(color, str):
        raise InvalidPaletteError(f"Colour must be a hex string, got {color!r}")
    m = _HEX.match(color.strip())
    if m is None:
        raise InvalidPaletteError(f"Malformed hex colour: {color!r}")
    return tuple(int(part, 16) for part in m.groups())  # type: ignore[return-value]


def encode_hex(rgb: Iterable[int]) -> str:
    return "#" + "".join(f"{int(c):02x}" for c in rgb)


def _check_anchors(anchors: Sequence[str]) -> list[str]:
    if anchors is None or isinstance(anchors, (str, bytes)) or not isinstance(anchors, Sequence):
        raise InvalidPaletteError(f"Invalid color scheme: expected a sequence of hex colours, got {anchors!r}")
    if len(anchors) == 0:
        raise InvalidPaletteError("Invalid color scheme: no anchor colours")
    for c in anchors:
        decode_hex(c)
    return list(anchors)


def interpolate(anchors: Sequence[str], count: int) -> list[str]:
    """
    Return exactly `count` colours spread evenly over `anchors`.

    Output index i sits at fractional anchor position
        idx = i / (count - 1) * (len(anchors) - 1)      (idx = 0 when count == 1)
    Integer positions reuse the anchor verbatim; anything in between is a
    per-channel linear blend of the two neighbouring anchors.
    """
    scheme = _check_anchors(anchors)
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise InvalidPaletteError(f"Colour count must be an integer >= 1, got {count!r}")

    out: list[str] = []
    span = len(scheme) - 1
    for i in range(count):
        idx = 0.0 if count == 1 else i / (count - 1) * span
        lower = math.floor(idx)
        upper = math.ceil(idx)
        if lower == upper:
            out.append(scheme[lower])
            continue
        fraction = idx - lower
        lo = decode_hex(scheme[lower])
        hi = decode_hex(scheme[upper])
        out.append(encode_hex(round_half_up(a + (b - a) * fraction) for a, b in zip(lo, hi)))
    return out


def scheme_colors(family: str, index: int, count: int) -> list[str]:
    """
    Interpolate the `index`-th anchor set of `family` to `count` colours.

    Unknown families or out-of-range indices fall back to the first sequential
    ramp (logged at ERROR); interpolation errors still propagate.
    """
    schemes = COLOR_SCHEMES.get(family)
    if not schemes or index < 0 or index >= len(schemes):
        LOG.error("Invalid color scheme or index (%s[%s]); falling back to %s[0]", family, index, DEFAULT_FAMILY)
        return interpolate(COLOR_SCHEMES[DEFAULT_FAMILY][0], count)
    return interpolate(schemes[index], count)
