"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/core/config_model.py

YAML job schema (pydantic v2):

    schema: symbology/v1
    outputs: ./outputs
    legend: {csv: true, plot: pdf}
    layers:
      - id: parcels
        source: ./data/parcels.geojson
        field: area
        classes: 5
        method: quantile
        scheme: {family: sequential, index: 2}
        style: {point_size: 8, line_width: 2, opacity: 0.5}

Relative paths are resolved against the directory holding the config file.

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from symbology.core.errors import ConfigError
from symbology.domain.classify import MAX_CLASSES, MIN_CLASSES, ClassMethod
from symbology.domain.palette import COLOR_SCHEMES
from symbology.domain.style import StyleOptions

SCHEMA = "symbology/v1"


class SchemeSpec(BaseModel):
    family: Literal["sequential", "diverging", "qualitative"] = "sequential"
    index: int = Field(0, ge=0)

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def _index_in_family(self) -> "SchemeSpec":
        available = len(COLOR_SCHEMES[self.family])
        if self.index >= available:
            raise ValueError(f"scheme.index {self.index} out of range for {self.family} (0..{available - 1})")
        return self


class LayerSpec(BaseModel):
    id: Optional[str] = None  # dataset identity; defaults to the layer title
    source: str
    title: Optional[str] = None
    field: str
    classes: int = Field(5, ge=MIN_CLASSES, le=MAX_CLASSES)
    method: ClassMethod = ClassMethod.EQUAL_INTERVAL
    scheme: SchemeSpec = Field(default_factory=SchemeSpec)
    colors: Optional[List[str]] = None  # explicit ColorSequence; overrides scheme
    style: StyleOptions = Field(default_factory=StyleOptions)

    model_config = {"extra": "forbid"}


class LegendSpec(BaseModel):
    csv: bool = True
    plot: Optional[Literal["pdf", "png", "svg"]] = "pdf"

    model_config = {"extra": "forbid"}


class SymbologySpec(BaseModel):
    schema_: str = Field(alias="schema")
    outputs: str = "./outputs"
    root: Optional[str] = None
    legend: LegendSpec = Field(default_factory=LegendSpec)
    layers: List[LayerSpec] = Field(min_length=1)

    model_config = {"populate_by_name": True, "extra": "forbid"}

    @property
    def outputs_dir(self) -> Path:
        return Path(self.outputs)

    @classmethod
    def load(cls, path: Path) -> "SymbologySpec":
        path = Path(path)
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise ConfigError(f"Config not found: {path}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"{path}: invalid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: config must be a mapping, got {type(data).__name__}")
        if data.get("schema") != SCHEMA:
            raise ConfigError(f"{path}: expected 'schema: {SCHEMA}', got {data.get('schema')!r}")

        root = path.parent.resolve()

        def _abs(p: Any) -> Any:
            if isinstance(p, str) and not Path(p).is_absolute():
                return str((root / p).resolve())
            return p

        data["root"] = str(root)
        data["outputs"] = _abs(data.get("outputs", "./outputs"))
        for layer in data.get("layers") or []:
            if isinstance(layer, dict) and "source" in layer:
                layer["source"] = _abs(layer["source"])
        return cls.validate_payload(data, where=str(path))

    @classmethod
    def validate_payload(cls, data: dict[str, Any], *, where: str = "config") -> "SymbologySpec":
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"{where}: {e}") from e
