"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/domain/legend.py

Legend description for a classified layer: one row per class with its value
range, label and swatch paint (swatch shape follows the dataset geometry type).

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from symbology.domain.style import GeometryType, Paint, StyleBundle, paint_for


def format_range(lower: float, upper: float) -> str:
    return f"{lower:.2f} - {upper:.2f}"


@dataclass(frozen=True)
class LegendEntry:
    index: int
    lower: float
    upper: float
    color: str
    swatch: Paint

    @property
    def label(self) -> str:
        return format_range(self.lower, self.upper)


@dataclass(frozen=True)
class Legend:
    field: str | None
    geometry_type: GeometryType
    entries: tuple[LegendEntry, ...]

    @property
    def title(self) -> str:
        return f"Legend - {self.field}" if self.field else "Legend"

    def __len__(self) -> int:
        return len(self.entries)

    def to_frame(self) -> pd.DataFrame:
        rows = [
            {
                "class": e.index,
                "lower": e.lower,
                "upper": e.upper,
                "label": e.label,
                "color": e.color,
                "shape": e.swatch.shape,
                "fill_color": e.swatch.fill_color,
                "stroke_color": e.swatch.stroke_color,
                "stroke_width": e.swatch.stroke_width,
                "radius": e.swatch.radius,
            }
            for e in self.entries
        ]
        return pd.DataFrame(rows, columns=[
            "class", "lower", "upper", "label", "color", "shape", "fill_color", "stroke_color", "stroke_width", "radius",
        ])


def build_legend(bundle: StyleBundle) -> Legend:
    entries = tuple(
        LegendEntry(
            index=i,
            lower=bundle.breaks[i],
            upper=bundle.breaks[i + 1],
            color=bundle.colors[i],
            swatch=paint_for(bundle.geometry_type, bundle.colors[i], bundle, i),
        )
        for i in range(len(bundle.breaks) - 1)
    )
    return Legend(field=bundle.field, geometry_type=bundle.geometry_type, entries=entries)
