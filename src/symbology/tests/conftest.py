"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/tests/conftest.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

os.environ.setdefault("MPLBACKEND", "Agg")

from symbology.core.layers import Feature, Geometry, VectorLayer  # noqa: E402


def make_layer(title: str, geom_type: str, values: list, field: str = "pop") -> VectorLayer:
    features = [
        Feature(
            properties={field: v, "name": f"f{i}", "flag": True},
            geometry=Geometry(type=geom_type, coordinates=[0.0, float(i)]),
            id=f"f{i}",
        )
        for i, v in enumerate(values)
    ]
    return VectorLayer(title=title, features=features)


def point_feature_collection(values: list, *, name: str | None = None) -> dict:
    doc = {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "id": i,
                "geometry": {"type": "Point", "coordinates": [float(i), 0.0]},
                "properties": {"pop": v, "label": f"p{i}"},
            }
            for i, v in enumerate(values)
        ],
    }
    if name:
        doc["name"] = name
    return doc


def write_json(path: Path, payload) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture
def points_layer() -> VectorLayer:
    return make_layer("towns", "Point", [0, 10, 20, 30, 40])


@pytest.fixture
def lines_layer() -> VectorLayer:
    return make_layer("roads", "LineString", [1.5, 2.5, 9.0, None])


@pytest.fixture
def points_geojson(tmp_path: Path) -> Path:
    return write_json(tmp_path / "towns.geojson", point_feature_collection([0, 10, 20, 30, 40]))


@pytest.fixture
def layer_factory():
    return make_layer
