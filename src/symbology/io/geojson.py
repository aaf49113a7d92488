"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/io/geojson.py

GeoJSON (RFC 7946) ⇄ VectorLayer.

Reading keeps every feature that carries a geometry object (Point, LineString,
Polygon, their Multi* forms, GeometryCollection); properties pass through
untouched. Writing attaches the resolved paint of each feature under
`properties.style` and the classification under a top-level `symbology` member.
Geometries are copied as-is.

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from symbology.core.errors import ParseError
from symbology.core.layers import Feature, Geometry, VectorLayer

LOG = logging.getLogger(__name__)

_GEOMETRY_TYPES = {
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
}


def parse_geojson(data: Any, *, title: str | None = None) -> VectorLayer:
    """
    Build a VectorLayer from an already-decoded GeoJSON object.

    Title precedence: explicit `title` > GeoJSON `name` member > "untitled".
    """
    if isinstance(data, dict) and title is None:
        title = str(data.get("name") or "untitled")
    if not isinstance(data, dict):
        raise ParseError(f"{title}: GeoJSON root must be an object, got {type(data).__name__}")

    kind = data.get("type")
    if kind == "FeatureCollection":
        raw_features = data.get("features")
        if not isinstance(raw_features, list):
            raise ParseError(f"{title}: FeatureCollection.features must be a list")
    elif kind == "Feature":
        raw_features = [data]
    else:
        raise ParseError(f"{title}: unsupported GeoJSON root type {kind!r} (expected FeatureCollection or Feature)")

    features: list[Feature] = []
    skipped = 0
    for idx, raw in enumerate(raw_features):
        feature = _parse_feature(raw, idx)
        if feature is None:
            skipped += 1
            continue
        features.append(feature)
    if skipped:
        LOG.warning("%s: skipped %d feature(s) without a usable geometry", title, skipped)

    return VectorLayer(
        title=title,
        features=features,
        metadata={"source_format": "geojson"},
    )


def _parse_feature(raw: Any, idx: int) -> Feature | None:
    if not isinstance(raw, dict) or raw.get("type") != "Feature":
        return None
    geometry = raw.get("geometry")
    if not isinstance(geometry, dict) or geometry.get("type") not in _GEOMETRY_TYPES:
        return None
    gtype = geometry["type"]
    payload = geometry.get("geometries") if gtype == "GeometryCollection" else geometry.get("coordinates")
    if payload is None:
        return None

    properties = raw.get("properties") or {}
    if not isinstance(properties, dict):
        properties = {}
    fid = raw.get("id", f"feature-{idx}")
    return Feature(properties=dict(properties), geometry=Geometry(type=gtype, coordinates=payload), id=str(fid))


def read_geojson(path: str | Path, *, title: str | None = None) -> VectorLayer:
    """Load a local GeoJSON file; untitled collections are named after the file stem."""
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ParseError(f"GeoJSON file not found: {p}") from e
    except UnicodeDecodeError as e:
        raise ParseError(f"{p}: not UTF-8 text ({e.reason} at byte {e.start})") from e
    except OSError as e:
        raise ParseError(f"{p}: cannot read GeoJSON file ({e.strerror or e})") from e
    except json.JSONDecodeError as e:
        raise ParseError(f"{p}: invalid JSON ({e.msg} at line {e.lineno})") from e
    if title is None and not (isinstance(data, dict) and data.get("name")):
        title = p.stem
    layer = parse_geojson(data, title=title)
    layer.metadata["source"] = str(p.resolve())
    LOG.debug("read %d feature(s) from %s", len(layer), p)
    return layer


def _geometry_to_geojson(geometry: Geometry | None) -> dict | None:
    if geometry is None:
        return None
    if geometry.type == "GeometryCollection":
        return {"type": geometry.type, "geometries": geometry.coordinates}
    return {"type": geometry.type, "coordinates": geometry.coordinates}


def to_geojson(layer: VectorLayer) -> dict[str, Any]:
    """FeatureCollection dict with per-feature paint from the layer's style function."""
    out_features = []
    for feature in layer.get_features():
        props = dict(feature.properties)
        paint = layer.paint(feature)
        if paint is not None:
            props["style"] = paint.to_dict()
        out = {"type": "Feature", "geometry": _geometry_to_geojson(feature.geometry), "properties": props}
        if feature.id is not None:
            out["id"] = feature.id
        out_features.append(out)

    doc: dict[str, Any] = {"type": "FeatureCollection", "name": layer.title, "features": out_features}
    if layer.current_style is not None:
        cs = layer.current_style
        doc["symbology"] = {
            "field": cs.field,
            "breaks": list(cs.breaks),
            "colors": list(cs.colors),
        }
    return doc


def write_geojson(layer: VectorLayer, path: str | Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(to_geojson(layer), indent=2), encoding="utf-8")
    return p
