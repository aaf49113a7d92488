"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/tests/test_session.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from symbology.core.errors import (
    ClassificationError,
    ConfigError,
    EmptySampleError,
    InvalidPaletteError,
    MissingSelectionError,
)
from symbology.core.session import StylingSession
from symbology.domain.classify import ClassMethod
from symbology.domain.palette import COLOR_SCHEMES, interpolate
from symbology.domain.style import GeometryType, StyleOptions


def _styled(session: StylingSession, layer, field: str = "pop", classes: int = 4) -> None:
    session.select_layer(layer)
    session.select_field(field)
    session.set_class_count(classes)
    session.apply_style()


def test_apply_without_layer_or_field_is_rejected(points_layer):
    session = StylingSession()
    with pytest.raises(MissingSelectionError, match="select both layer and field"):
        session.apply_style()
    session.select_layer(points_layer)
    with pytest.raises(MissingSelectionError):
        session.apply_style()
    assert points_layer.style is None
    assert len(session.cache) == 0


def test_apply_installs_style_and_records_cache_entry(points_layer):
    session = StylingSession()
    _styled(session, points_layer)

    info = session.current_style
    assert info.field == "pop"
    assert info.breaks == (0, 10, 20, 30, 40)
    assert info.colors == tuple(interpolate(COLOR_SCHEMES["sequential"][0], 4))
    assert (info.min, info.max) == (0, 40)
    assert points_layer.current_style == info

    paint = points_layer.paint(points_layer.features[3])
    assert paint.shape == "circle"
    assert paint.bucket == 2

    entry = session.cache.get("towns")
    assert entry.field == "pop"
    assert entry.class_count == 4
    assert entry.breaks == info.breaks
    assert entry.geometry_type is GeometryType.POINT


def test_failed_apply_keeps_previous_style(points_layer):
    session = StylingSession()
    _styled(session, points_layer)
    style_before = points_layer.style
    entry_before = session.cache.get("towns")

    session.select_field("name")
    with pytest.raises(EmptySampleError):
        session.apply_style()
    assert points_layer.style is style_before
    assert session.cache.get("towns") is entry_before

    session.select_field("pop")
    with pytest.raises(InvalidPaletteError):
        session.apply_style(["#000000"])
    assert points_layer.style is style_before
    assert session.cache.get("towns") is entry_before


def test_explicit_colours_override_scheme(points_layer):
    session = StylingSession()
    session.select_layer(points_layer)
    session.select_field("pop")
    session.set_class_count(2)
    info = session.apply_style(["#111111", "#eeeeee"])
    assert info.colors == ("#111111", "#eeeeee")


def test_selecting_unstyled_layer_resets_to_defaults(points_layer, lines_layer):
    session = StylingSession()
    _styled(session, points_layer)
    session.set_style_options(opacity=0.9)

    assert session.select_layer(lines_layer) is None
    assert session.field is None
    assert session.scheme_index == 0
    assert session.style_options == StyleOptions()
    assert session.current_style is None
    assert session.geometry_type is GeometryType.LINESTRING


def test_reselecting_styled_layer_restores_settings(points_layer, lines_layer):
    session = StylingSession()
    session.select_layer(points_layer)
    session.select_field("pop")
    session.set_class_count(3)
    session.set_method("quantile")
    session.select_family("diverging")
    session.scheme_index = 2
    session.set_style_options(opacity=0.8, point_size=12)
    info = session.apply_style()

    _styled(session, lines_layer, classes=2)

    restored = session.select_layer(points_layer)
    assert restored is session.cache.get("towns")
    assert session.field == "pop"
    assert session.class_count == 3
    assert session.class_method is ClassMethod.QUANTILE
    assert session.color_scheme == "diverging"
    assert session.scheme_index == 2
    assert session.style_options == StyleOptions(opacity=0.8, point_size=12)
    assert session.current_style.breaks == info.breaks
    assert session.current_style.colors == info.colors
    assert points_layer.current_style.field == "pop"


def test_field_and_family_changes_reset_scheme_index(points_layer):
    session = StylingSession()
    session.select_layer(points_layer)
    session.scheme_index = 2
    session.select_field("pop")
    assert session.scheme_index == 0
    session.scheme_index = 1
    session.select_family("qualitative")
    assert session.scheme_index == 0


@pytest.mark.parametrize("count", [1, 11, "5"])
def test_class_count_bounds(count):
    session = StylingSession()
    with pytest.raises(ClassificationError):
        session.set_class_count(count)
    assert session.class_count == 5


def test_unknown_method_rejected():
    with pytest.raises(ClassificationError):
        StylingSession().set_method("jenks")


def test_invalid_style_option_leaves_options_unchanged():
    session = StylingSession()
    session.set_style_options(line_width=3)
    with pytest.raises(ConfigError):
        session.set_style_options(point_size=10, opacity=0)
    assert session.style_options == StyleOptions(line_width=3)
    with pytest.raises(ConfigError):
        session.set_style_options(halo=2)


def test_apply_scheme_switches_anchor_set(points_layer):
    session = StylingSession()
    _styled(session, points_layer)
    info = session.apply_scheme(2)
    assert session.scheme_index == 2
    assert info.colors == tuple(interpolate(COLOR_SCHEMES["sequential"][2], 4))
    assert session.cache.get("towns").scheme_index == 2


def test_apply_scheme_out_of_range_keeps_index(points_layer):
    session = StylingSession()
    _styled(session, points_layer)
    with pytest.raises(InvalidPaletteError):
        session.apply_scheme(9)
    assert session.scheme_index == 0


def test_unknown_family_falls_back_to_first_sequential(points_layer):
    session = StylingSession()
    session.select_layer(points_layer)
    session.select_field("pop")
    session.set_class_count(3)
    session.select_family("neon")
    info = session.apply_style()
    assert info.colors == tuple(interpolate(COLOR_SCHEMES["sequential"][0], 3))


def test_dataset_id_keys_the_cache(layer_factory):
    session = StylingSession()
    a = layer_factory("same title", "Polygon", [1, 2, 3])
    b = layer_factory("same title", "Polygon", [7, 8, 9])
    session.select_layer(a, dataset_id="a")
    session.select_field("pop")
    session.apply_style()
    assert session.select_layer(b, dataset_id="b") is None
    assert "a" in session.cache


def test_fields_and_legend(points_layer):
    session = StylingSession()
    assert session.fields == []
    assert session.legend() is None
    _styled(session, points_layer)
    assert session.fields == ["pop"]
    legend = session.legend()
    assert len(legend) == 4
    assert [e.label for e in legend.entries][0] == "0.00 - 10.00"
    assert legend.title == "Legend - pop"


def test_cached_entry_cannot_be_edited_through_get(points_layer):
    session = StylingSession()
    _styled(session, points_layer)
    entry = session.cache.get("towns")
    with pytest.raises(ValidationError):
        entry.style_options.opacity = 0.1
    assert session.cache.get("towns").style_options.opacity == 0.5

    session.set_style_options(opacity=0.9)
    assert session.cache.get("towns").style_options.opacity == 0.5


def test_failed_apply_scheme_restores_previous_index(points_layer):
    session = StylingSession()
    _styled(session, points_layer)
    session.select_field("name")
    session.scheme_index = 1
    with pytest.raises(EmptySampleError):
        session.apply_scheme(2)
    assert session.scheme_index == 1
