"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/core/engine.py

Batch styling: drive one StylingSession through every layer of a job file.

All layers share the session's StyleCache, so a dataset id that appears twice
is restored from its first styling before the second one is applied.

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from symbology.core.config_model import LayerSpec, LegendSpec, SymbologySpec
from symbology.core.layers import StyleInfo, VectorLayer
from symbology.core.session import StylingSession
from symbology.io.geojson import read_geojson, write_geojson
from symbology.utils.fs import slugify
from symbology.utils.logging import setup_logging

LOG = logging.getLogger(__name__)


@dataclass
class LayerResult:
    dataset_id: str
    style: StyleInfo
    outputs: dict[str, Path] = field(default_factory=dict)


def configure_session(session: StylingSession, layer: VectorLayer, spec: LayerSpec) -> None:
    """Replay the operator choices described by `spec` on `session`."""
    session.select_layer(layer, dataset_id=spec.id)
    session.select_field(spec.field)
    session.set_class_count(spec.classes)
    session.set_method(spec.method)
    session.select_family(spec.scheme.family)
    session.scheme_index = spec.scheme.index
    session.set_style_options(**spec.style.model_dump())


def export_layer(
    session: StylingSession,
    layer: VectorLayer,
    out_dir: Path,
    legend: LegendSpec,
    *,
    stub: str,
) -> dict[str, Path]:
    outputs: dict[str, Path] = {}
    outputs["geojson"] = write_geojson(layer, out_dir / f"{slugify(stub)}.styled.geojson")
    leg = session.legend()
    if leg is None:
        return outputs
    if legend.csv:
        csv_path = out_dir / f"{slugify(stub)}.legend.csv"
        leg.to_frame().to_csv(csv_path, index=False)
        outputs["legend_csv"] = csv_path
    if legend.plot:
        from symbology.plotting.legend import save_legend

        outputs["legend_plot"] = save_legend(leg, out_dir, f"{stub}.legend", ext=legend.plot)
    return outputs


def _summary(results: list[LayerResult]) -> Table:
    t = Table(title="[title]Styled layers[/title]", title_justify="left", header_style="bold", box=box.ROUNDED, expand=True)
    t.add_column("Dataset", style="accent")
    t.add_column("Field")
    t.add_column("Classes", justify="right")
    t.add_column("Range")
    for r in results:
        t.add_row(r.dataset_id, r.style.field, str(len(r.style.colors)), f"{r.style.min:.2f} - {r.style.max:.2f}")
    return t


def run_job(
    spec_path: Path,
    *,
    log_level: str = "INFO",
    console: Console | None = None,
    session: Optional[StylingSession] = None,
) -> list[LayerResult]:
    spec = SymbologySpec.load(Path(spec_path))
    out_dir = spec.outputs_dir.resolve()
    out_dir.mkdir(parents=True, exist_ok=True)
    console = console or Console()
    setup_logging(out_dir, level=log_level, console=console)
    session = session or StylingSession()

    results: list[LayerResult] = []
    with Progress(
        SpinnerColumn(style="accent"),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Styling layers", total=len(spec.layers))
        for ordinal, lspec in enumerate(spec.layers, 1):
            layer = read_geojson(lspec.source, title=lspec.title)
            LOG.info("→ layer %s [%d/%d] field=%s", lspec.id or layer.title, ordinal, len(spec.layers), lspec.field)
            configure_session(session, layer, lspec)
            info = session.apply_style(lspec.colors)
            dataset_id = str(session.dataset_id)
            outputs = export_layer(session, layer, out_dir, spec.legend, stub=dataset_id)
            results.append(LayerResult(dataset_id=dataset_id, style=info, outputs=outputs))
            progress.advance(task)

    console.print(Panel(_summary(results), border_style="accent", box=box.ROUNDED))
    console.print(Panel.fit(f"✓ Done — outputs in [path]{out_dir}[/path]", border_style="ok", box=box.ROUNDED))
    return results
