"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/domain/__init__.py

Pure classification / palette / style computations (no I/O, no shared state).

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from .buckets import bucket_of
from .classify import ClassMethod, classify, extract_sample, numeric_fields
from .legend import Legend, LegendEntry, build_legend
from .palette import COLOR_SCHEMES, interpolate, scheme_colors
from .style import GeometryType, Paint, StyleBundle, StyleOptions, build_style_function, detect_geometry_type

__all__ = [
    "COLOR_SCHEMES",
    "ClassMethod",
    "GeometryType",
    "Legend",
    "LegendEntry",
    "Paint",
    "StyleBundle",
    "StyleOptions",
    "bucket_of",
    "build_legend",
    "build_style_function",
    "classify",
    "detect_geometry_type",
    "extract_sample",
    "interpolate",
    "numeric_fields",
    "scheme_colors",
]
