"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/core/session.py

Headless styling session: the state machine behind a "layer symbology" panel.

Operator flow
-------------
1) select_layer()   → geometry type detected once; previous settings restored
                      from the StyleCache (or defaults when never styled)
2) select_field(), set_class_count(), set_method(), select_family(), ...
3) apply_style()    → classify → colours → style function → layer + cache

apply_style() is all-or-nothing: every value is computed before the layer or
the cache is touched, so a failure leaves the previous style in place.

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Sequence
from typing import Any, Optional

from pydantic import ValidationError

from symbology.core.cache import DatasetStyleEntry, StyleCache
from symbology.core.errors import (
    ClassificationError,
    ConfigError,
    EmptySampleError,
    InvalidPaletteError,
    MissingSelectionError,
)
from symbology.core.layers import StyleInfo
from symbology.domain.classify import (
    MAX_CLASSES,
    MIN_CLASSES,
    ClassMethod,
    classify,
    coerce_method,
    extract_sample,
    numeric_fields,
)
from symbology.domain.legend import Legend, build_legend
from symbology.domain.palette import COLOR_SCHEMES, DEFAULT_FAMILY, interpolate, scheme_colors
from symbology.domain.style import (
    GeometryType,
    StyleBundle,
    StyleOptions,
    build_style_function,
    detect_geometry_type,
)

LOG = logging.getLogger(__name__)

DEFAULT_CLASS_COUNT = 5


class StylingSession:
    def __init__(self, cache: StyleCache | None = None) -> None:
        self.cache = cache if cache is not None else StyleCache()
        self.layer: Any = None
        self.dataset_id: Optional[Hashable] = None
        self.geometry_type: Optional[GeometryType] = None
        self.field: Optional[str] = None
        self.class_count: int = DEFAULT_CLASS_COUNT
        self.class_method: ClassMethod = ClassMethod.EQUAL_INTERVAL
        self.color_scheme: str = DEFAULT_FAMILY
        self.scheme_index: int = 0
        self.style_options: StyleOptions = StyleOptions()
        self.current_style: Optional[StyleInfo] = None

    # ----------------------------- selection -----------------------------

    @property
    def fields(self) -> list[str]:
        if self.layer is None:
            return []
        return numeric_fields(self.layer.get_features())

    def select_layer(self, layer: Any, dataset_id: Hashable | None = None) -> Optional[DatasetStyleEntry]:
        """Focus `layer`; returns the cached entry that was restored, if any."""
        self.layer = layer
        self.dataset_id = dataset_id if dataset_id is not None else layer.title
        self.geometry_type = detect_geometry_type(layer.get_features())

        cached = self.cache.get(self.dataset_id)
        if cached is None:
            LOG.debug("layer %r: no cached style, using defaults", self.dataset_id)
            self.field = None
            self.current_style = None
            self.scheme_index = 0
            self.style_options = StyleOptions()
            return None

        LOG.debug("layer %r: restoring cached style on field %r", self.dataset_id, cached.field)
        self.field = cached.field
        self.class_count = cached.class_count
        self.class_method = cached.class_method
        self.color_scheme = cached.color_scheme
        self.scheme_index = cached.scheme_index or 0
        self.style_options = cached.style_options
        self.current_style = StyleInfo(field=cached.field, breaks=cached.breaks, colors=cached.colors)
        if hasattr(layer, "current_style"):
            layer.current_style = self.current_style
        return cached

    def select_field(self, field: str | None) -> None:
        self.field = field
        self.scheme_index = 0

    def select_family(self, family: str) -> None:
        self.color_scheme = family
        self.scheme_index = 0

    def set_class_count(self, count: int) -> None:
        if isinstance(count, bool) or not isinstance(count, int) or not MIN_CLASSES <= count <= MAX_CLASSES:
            raise ClassificationError(f"Class count must be between {MIN_CLASSES} and {MAX_CLASSES}, got {count!r}")
        self.class_count = count

    def set_method(self, method: ClassMethod | str) -> None:
        self.class_method = coerce_method(method)

    def set_style_options(self, **changes: Any) -> None:
        # options are frozen; a rejected value leaves the current ones in place
        try:
            self.style_options = StyleOptions.model_validate({**self.style_options.model_dump(), **changes})
        except ValidationError as e:
            raise ConfigError(f"Invalid style options: {e}") from e

    # ------------------------------ apply --------------------------------

    def colors(self) -> list[str]:
        return scheme_colors(self.color_scheme, self.scheme_index, self.class_count)

    def apply_style(self, colors: Sequence[str] | None = None) -> StyleInfo:
        """
        Classify the selected field and install a style function on the layer.

        `colors` overrides the scheme lookup with an explicit ColorSequence.
        """
        if self.layer is None or not self.field:
            raise MissingSelectionError("Please select both layer and field")

        field = self.field
        geometry_type = self.geometry_type or GeometryType.MIXED
        options = self.style_options

        sample = extract_sample(self.layer.get_features(), field)
        if not sample:
            raise EmptySampleError(f"Field {field!r} of layer {self.dataset_id!r} has no numeric values")
        breaks = classify(sample, self.class_count, self.class_method)
        palette = list(colors) if colors is not None else self.colors()
        style_fn = build_style_function(breaks, palette, geometry_type, options, field=field)

        # --- nothing above mutates state; commit ---
        self.layer.set_style(style_fn)
        info = StyleInfo(
            field=field,
            breaks=style_fn.bundle.breaks,
            colors=style_fn.bundle.colors,
            min=breaks[0],
            max=breaks[-1],
        )
        if hasattr(self.layer, "current_style"):
            self.layer.current_style = info
        self.current_style = info
        self.cache.put(
            self.dataset_id,
            DatasetStyleEntry(
                field=field,
                class_count=self.class_count,
                class_method=self.class_method,
                color_scheme=self.color_scheme,
                scheme_index=self.scheme_index,
                breaks=info.breaks,
                colors=info.colors,
                style_options=options,
                geometry_type=geometry_type,
            ),
        )
        LOG.info(
            "styled %r by %s: %d classes (%s, %s[%d])",
            self.dataset_id,
            field,
            self.class_count,
            self.class_method.value,
            self.color_scheme,
            self.scheme_index,
        )
        return info

    def apply_scheme(self, index: int) -> StyleInfo:
        """Pick anchor set `index` of the current family and apply it right away."""
        if self.layer is None or not self.field:
            raise MissingSelectionError("Please select both layer and field")
        schemes = COLOR_SCHEMES.get(self.color_scheme) or COLOR_SCHEMES[DEFAULT_FAMILY]
        if not 0 <= index < len(schemes):
            raise InvalidPaletteError(f"No scheme #{index} in family {self.color_scheme!r} ({len(schemes)} available)")
        colors = interpolate(schemes[index], self.class_count)
        previous = self.scheme_index
        self.scheme_index = index
        applied = False
        try:
            info = self.apply_style(colors)
            applied = True
        finally:
            if not applied:
                self.scheme_index = previous
        return info

    # ------------------------------ legend -------------------------------

    def legend(self) -> Optional[Legend]:
        if self.current_style is None:
            return None
        bundle = StyleBundle.create(
            self.current_style.breaks,
            self.current_style.colors,
            self.geometry_type or GeometryType.MIXED,
            self.style_options,
            field=self.current_style.field,
        )
        return build_legend(bundle)
