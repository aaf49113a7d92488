"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/plotting/legend.py

Matplotlib rendering of a classified-layer legend.

Swatches mirror the map paint: circles for point layers (radius ~ point size),
bars for line layers (height ~ line width), filled squares otherwise. Fills use
the class colour at layer opacity with a 1px outline in the solid colour.

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import contextlib
from pathlib import Path

import matplotlib as mpl
import matplotlib.pyplot as plt
from matplotlib.patches import Circle, Rectangle

from symbology.domain.legend import Legend, LegendEntry
from symbology.utils.fs import ensure_dir, slugify

_DEFAULT_RC = {
    "font_size": 11.0,
    "axes_titlesize": 12.0,
    "axes_titleweight": "bold",
    "savefig_dpi": 300,
    "pdf_fonttype": 42,  # vector text in PDF
}

_ROW_HEIGHT = 0.32  # inches per legend row
_SWATCH = 20.0  # swatch box edge, in legend "pixels"


@contextlib.contextmanager
def use_style(rc: dict | None = None):
    """Push a small, opinionated Matplotlib style for legend figures."""
    rc = {**_DEFAULT_RC, **(rc or {})}
    with mpl.rc_context():
        mpl.rcParams.update(
            {
                "font.size": float(rc["font_size"]),
                "axes.titlesize": float(rc["axes_titlesize"]),
                "axes.titleweight": rc["axes_titleweight"],
                "savefig.dpi": rc["savefig_dpi"],
                "pdf.fonttype": rc["pdf_fonttype"],
            }
        )
        yield


def _mpl_color(hex_color: str | None):
    # '#rrggbbaa' is understood by matplotlib directly
    return "none" if hex_color is None else hex_color


def _draw_swatch(ax, entry: LegendEntry, y: float) -> None:
    sw = entry.swatch
    cx = _SWATCH / 2
    if sw.shape == "circle":
        r = min(float(sw.radius or 0), _SWATCH) / 2
        ax.add_patch(
            Circle((cx, y), r, facecolor=_mpl_color(sw.fill_color), edgecolor=_mpl_color(sw.stroke_color), linewidth=1)
        )
    elif sw.shape == "line":
        h = float(sw.stroke_width or 1)
        ax.add_patch(Rectangle((0, y - h / 2), _SWATCH, h, facecolor=_mpl_color(sw.stroke_color), edgecolor="none"))
    else:
        half = _SWATCH / 2
        ax.add_patch(
            Rectangle(
                (0, y - half),
                _SWATCH,
                _SWATCH,
                facecolor=_mpl_color(sw.fill_color),
                edgecolor=_mpl_color(sw.stroke_color),
                linewidth=1,
            )
        )


def render_legend(legend: Legend, *, width: float = 3.0):
    """Return (fig, ax) with one row per class: swatch + 'lower - upper' label."""
    n = max(len(legend), 1)
    fig, ax = plt.subplots(figsize=(width, 0.6 + n * _ROW_HEIGHT), constrained_layout=True)
    step = _SWATCH * 1.4
    for row, entry in enumerate(legend.entries):
        y = (n - row - 0.5) * step
        _draw_swatch(ax, entry, y)
        ax.text(_SWATCH * 1.5, y, entry.label, va="center", ha="left")
    ax.set_xlim(0, _SWATCH * 8)
    ax.set_ylim(0, n * step)
    ax.set_aspect("equal")
    ax.set_axis_off()
    ax.set_title(legend.title, loc="left")
    return fig, ax


def save_legend(legend: Legend, output_dir: Path, filename_stub: str, ext: str = "pdf", rc: dict | None = None) -> Path:
    """
    Save the legend as **PDF by default** (print-friendly, vector). Use ext="png"
    if you explicitly need rasters.
    """
    output_dir = ensure_dir(output_dir)
    out = output_dir / f"{slugify(filename_stub)}.{ext}"
    with use_style(rc):
        fig, _ = render_legend(legend)
        try:
            fig.savefig(out, bbox_inches="tight")
        finally:
            plt.close(fig)
    return out
