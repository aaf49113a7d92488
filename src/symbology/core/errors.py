"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/core/errors.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations


class SymbologyError(Exception): ...


class ConfigError(SymbologyError): ...


class ParseError(SymbologyError): ...


class ClassificationError(SymbologyError): ...


class InvalidPaletteError(SymbologyError): ...


class EmptySampleError(ClassificationError): ...


class MissingSelectionError(SymbologyError): ...
