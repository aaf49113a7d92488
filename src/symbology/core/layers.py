"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/core/layers.py

In-memory vector layer model.

Anything the styling code touches only needs this surface:
    layer.title / layer.get_features()
    feature.get(name) / feature.get_properties() / feature.get_geometry()
    geometry.get_type()
so layers from other sources can be styled as long as they quack the same way.

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from symbology.domain.style import Paint


@dataclass(frozen=True)
class Geometry:
    type: str
    coordinates: Any = None

    def get_type(self) -> str:
        return self.type


@dataclass
class Feature:
    properties: dict[str, Any]
    geometry: Optional[Geometry] = None
    id: Optional[str] = None

    def get(self, name: str) -> Any:
        return self.properties.get(name)

    def get_properties(self) -> dict[str, Any]:
        return dict(self.properties)

    def get_geometry(self) -> Optional[Geometry]:
        return self.geometry


@dataclass(frozen=True)
class StyleInfo:
    """What a layer is currently classified by (for legends and restore)."""

    field: str
    breaks: tuple[float, ...]
    colors: tuple[str, ...]
    min: Optional[float] = None
    max: Optional[float] = None


StyleFn = Callable[[Any], Paint]


@dataclass
class VectorLayer:
    title: str
    features: list[Feature] = field(default_factory=list)
    style: Optional[StyleFn] = None
    current_style: Optional[StyleInfo] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def get_features(self) -> list[Feature]:
        return self.features

    def set_style(self, style: Optional[StyleFn]) -> None:
        self.style = style

    def paint(self, feature: Feature) -> Optional[Paint]:
        return None if self.style is None else self.style(feature)

    def __len__(self) -> int:
        return len(self.features)
