"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/domain/style.py

Style resolution: (breaks, colours, geometry type, options) → per-feature paint.

The resolver closes over an immutable StyleBundle, never over live widget
state, so a style function handed to a layer keeps painting with the values it
was built from even after the operator edits options or re-styles another
dataset.

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from symbology.core.errors import InvalidPaletteError
from symbology.domain.buckets import bucket_of
from symbology.domain.palette import decode_hex, round_half_up


class GeometryType(str, Enum):
    POINT = "Point"
    LINESTRING = "LineString"
    POLYGON = "Polygon"
    MIXED = "Mixed"


_BASE_TYPES: dict[str, GeometryType] = {
    "Point": GeometryType.POINT,
    "MultiPoint": GeometryType.POINT,
    "LineString": GeometryType.LINESTRING,
    "MultiLineString": GeometryType.LINESTRING,
    "LinearRing": GeometryType.LINESTRING,
    "Polygon": GeometryType.POLYGON,
    "MultiPolygon": GeometryType.POLYGON,
}


def base_geometry_type(geom_type: str | None) -> GeometryType:
    """Collapse a geometry type name (Multi* included) onto its base kind."""
    return _BASE_TYPES.get(str(geom_type), GeometryType.MIXED)


def _feature_geometry_type(feature: Any) -> str | None:
    geom = feature.get_geometry()
    return None if geom is None else geom.get_type()


def detect_geometry_type(features: Iterable[Any]) -> GeometryType:
    """One GeometryType for a whole dataset; empty or heterogeneous → Mixed."""
    kinds = {base_geometry_type(_feature_geometry_type(f)) for f in features}
    if len(kinds) == 1:
        return kinds.pop()
    return GeometryType.MIXED


class StyleOptions(BaseModel):
    point_size: float = Field(8, ge=2, le=20)
    line_width: float = Field(2, ge=1, le=10)
    opacity: float = Field(0.5, gt=0, le=1)

    model_config = {"frozen": True, "extra": "forbid"}


def opacity_hex(opacity: float) -> str:
    """Two-digit hex alpha for `opacity`, e.g. 0.5 → '80'."""
    return f"{round_half_up(float(opacity) * 255):02x}"


@dataclass(frozen=True)
class Paint:
    """Concrete paint for one feature. `color` is the class colour without alpha."""

    shape: Literal["circle", "line", "fill"]
    color: str
    bucket: int
    fill_color: Optional[str] = None
    stroke_color: Optional[str] = None
    stroke_width: Optional[float] = None
    radius: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class StyleBundle:
    breaks: tuple[float, ...]
    colors: tuple[str, ...]
    geometry_type: GeometryType
    point_size: float
    line_width: float
    opacity: float
    field: Optional[str] = None

    @classmethod
    def create(
        cls,
        breaks: Sequence[float],
        colors: Sequence[str],
        geometry_type: GeometryType | str,
        options: StyleOptions,
        *,
        field: str | None = None,
    ) -> "StyleBundle":
        breaks_t = tuple(float(b) for b in breaks)
        colors_t = tuple(colors)
        if len(breaks_t) < 2:
            raise ValueError(f"At least two breaks are required, got {len(breaks_t)}")
        if len(colors_t) != len(breaks_t) - 1:
            raise InvalidPaletteError(
                f"{len(breaks_t) - 1} classes need {len(breaks_t) - 1} colours, got {len(colors_t)}"
            )
        for c in colors_t:
            decode_hex(c)
        return cls(
            breaks=breaks_t,
            colors=colors_t,
            geometry_type=GeometryType(geometry_type),
            point_size=float(options.point_size),
            line_width=float(options.line_width),
            opacity=float(options.opacity),
            field=field,
        )


def paint_for(kind: GeometryType, color: str, bundle: StyleBundle, bucket: int = 0) -> Paint:
    if kind is GeometryType.POINT:
        return Paint(
            shape="circle",
            color=color,
            bucket=bucket,
            fill_color=color + opacity_hex(bundle.opacity),
            stroke_color=color,
            stroke_width=1.0,
            radius=bundle.point_size,
        )
    if kind is GeometryType.LINESTRING:
        # stroke is drawn fully opaque; opacity only affects fills
        return Paint(shape="line", color=color, bucket=bucket, stroke_color=color, stroke_width=bundle.line_width)
    return Paint(
        shape="fill",
        color=color,
        bucket=bucket,
        fill_color=color + opacity_hex(bundle.opacity),
        stroke_color=color,
        stroke_width=1.0,
    )


def resolve_paint(bundle: StyleBundle, feature: Any, field: str | None = None) -> Paint:
    field = field or bundle.field
    if field is None:
        raise ValueError("No field given and the style bundle carries none")
    bucket = bucket_of(feature.get(field), bundle.breaks)
    kind = bundle.geometry_type
    if kind is GeometryType.MIXED:
        kind = base_geometry_type(_feature_geometry_type(feature))
    return paint_for(kind, bundle.colors[bucket], bundle, bucket)


class StyleFunction:
    """Callable (feature, field) -> Paint bound to one StyleBundle."""

    __slots__ = ("bundle",)

    def __init__(self, bundle: StyleBundle) -> None:
        self.bundle = bundle

    def __call__(self, feature: Any, field: str | None = None) -> Paint:
        return resolve_paint(self.bundle, feature, field)

    def __repr__(self) -> str:
        b = self.bundle
        return f"StyleFunction(field={b.field!r}, classes={len(b.colors)}, geometry={b.geometry_type.value})"


def build_style_function(
    breaks: Sequence[float],
    colors: Sequence[str],
    geometry_type: GeometryType | str,
    options: StyleOptions | None = None,
    *,
    field: str | None = None,
) -> StyleFunction:
    return StyleFunction(StyleBundle.create(breaks, colors, geometry_type, options or StyleOptions(), field=field))
