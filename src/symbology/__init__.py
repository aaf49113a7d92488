"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/__init__.py

Thematic classification + colour symbology for vector layers.

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from symbology.core.cache import DatasetStyleEntry, StyleCache
from symbology.core.errors import (
    ClassificationError,
    ConfigError,
    EmptySampleError,
    InvalidPaletteError,
    MissingSelectionError,
    ParseError,
    SymbologyError,
)
from symbology.core.session import StylingSession
from symbology.domain import (
    ClassMethod,
    GeometryType,
    StyleOptions,
    bucket_of,
    build_legend,
    build_style_function,
    classify,
    interpolate,
)

__version__ = "0.1.0"

__all__ = [
    "ClassMethod",
    "ClassificationError",
    "ConfigError",
    "DatasetStyleEntry",
    "EmptySampleError",
    "GeometryType",
    "InvalidPaletteError",
    "MissingSelectionError",
    "ParseError",
    "StyleCache",
    "StyleOptions",
    "StylingSession",
    "SymbologyError",
    "bucket_of",
    "build_legend",
    "build_style_function",
    "classify",
    "interpolate",
]
