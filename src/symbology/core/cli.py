"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/core/cli.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from pathlib import Path

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme
from rich.traceback import install as rich_tracebacks

from symbology.core.config_model import LegendSpec
from symbology.core.engine import export_layer, run_job
from symbology.core.errors import SymbologyError
from symbology.core.session import StylingSession
from symbology.domain.classify import MAX_CLASSES, MIN_CLASSES, ClassMethod
from symbology.domain.legend import Legend
from symbology.domain.palette import COLOR_SCHEMES, FAMILY_HINTS, SCHEME_NAMES
from symbology.io.geojson import read_geojson
from symbology.utils.logging import setup_logging

THEME = Theme(
    {
        "title": "bold cyan",
        "accent": "cyan",
        "ok": "bold green",
        "warn": "bold yellow",
        "error": "bold red",
        "muted": "dim",
        "path": "magenta",
    }
)

app = typer.Typer(
    add_completion=False,
    help=(
        "symbology — thematic classification and colour styling for vector layers.\n\n"
        "Classify a numeric attribute (equal interval, quantile, natural breaks), map classes "
        "onto a colour ramp, and write per-feature paint + legends. Single files via 'classify' / "
        "'style'; batches via a YAML job with 'run'."
    ),
)
console = Console(theme=THEME)
rich_tracebacks(show_locals=False)

_SOURCE_ARG = typer.Argument(..., metavar="SOURCE", help="Path to a GeoJSON file (FeatureCollection or Feature).")
_FIELD_OPT = typer.Option(..., "--field", "-f", metavar="NAME", help="Numeric attribute to classify.")
_CLASSES_OPT = typer.Option(
    5, "--classes", "-n", min=MIN_CLASSES, max=MAX_CLASSES, help=f"Number of classes ({MIN_CLASSES}..{MAX_CLASSES})."
)
_METHOD_OPT = typer.Option(
    ClassMethod.EQUAL_INTERVAL.value,
    "--method",
    "-m",
    metavar="METHOD",
    help="equalInterval | quantile | naturalBreaks",
)
_FAMILY_OPT = typer.Option("sequential", "--family", metavar="FAMILY", help="sequential | diverging | qualitative")
_INDEX_OPT = typer.Option(0, "--index", "-i", min=0, help="Anchor set within the family (see 'symbology palettes').")


def _table(title: str) -> Table:
    return Table(
        title=f"[title]{title}[/title]",
        title_justify="left",
        header_style="bold",
        box=box.ROUNDED,
        expand=True,
        show_lines=False,
        show_edge=True,
    )


def _swatch(color: str) -> str:
    return f"[on {color}]    [/]"


def _fail(err: SymbologyError) -> None:
    console.print(Panel.fit(f"[error]✗ {err}[/error]", border_style="error", box=box.ROUNDED))
    raise typer.Exit(code=1)


def _legend_table(legend: Legend, method: str) -> Table:
    t = _table(f"{legend.title} • {method}")
    t.add_column("#", justify="right", style="muted")
    t.add_column("Colour")
    t.add_column("Hex", style="muted")
    t.add_column("Range")
    for e in legend.entries:
        t.add_row(str(e.index + 1), _swatch(e.color), e.color, e.label)
    return t


def _styled_session(source: str, field: str, classes: int, method: str, family: str, index: int, **style_options):
    layer = read_geojson(source)
    session = StylingSession()
    session.select_layer(layer)
    session.select_field(field)
    session.set_class_count(classes)
    session.set_method(method)
    session.select_family(family)
    session.scheme_index = index
    if style_options:
        session.set_style_options(**style_options)
    session.apply_style()
    return session, layer


@app.command(help="List the built-in palette families and their anchor colours.")
def palettes():
    t = _table("Palettes")
    t.add_column("Family", style="accent")
    t.add_column("#", justify="right", style="muted")
    t.add_column("Name")
    t.add_column("Anchors")
    for family, schemes in COLOR_SCHEMES.items():
        for i, scheme in enumerate(schemes):
            t.add_row(family if i == 0 else "", str(i), SCHEME_NAMES[family][i], "".join(_swatch(c) for c in scheme))
    hints = " • ".join(f"{k}: {v}" for k, v in FAMILY_HINTS.items())
    console.print(Panel(t, border_style="accent", box=box.ROUNDED, subtitle=f"[muted]{hints}[/muted]"))


@app.command(help="Describe the available classification methods.")
def methods():
    t = _table("Classification methods")
    t.add_column("Key", style="accent")
    t.add_column("Name")
    t.add_column("Description", overflow="fold")
    for m in ClassMethod:
        t.add_row(m.value, m.label, m.description)
    console.print(Panel(t, border_style="accent", box=box.ROUNDED))


@app.command(help="Show the numeric fields and detected geometry type of a GeoJSON file.")
def fields(source: str = _SOURCE_ARG):
    try:
        layer = read_geojson(source)
    except SymbologyError as e:
        _fail(e)
    session = StylingSession()
    session.select_layer(layer)
    names = session.fields
    if not names:
        console.print(
            Panel.fit(
                f"[warn]Layer [path]{layer.title}[/path] has no numeric fields[/warn]",
                border_style="warn",
                box=box.ROUNDED,
            )
        )
        return
    t = _table(f"Fields • {layer.title}")
    t.add_column("#", justify="right", style="muted")
    t.add_column("Field", style="accent")
    for i, name in enumerate(names, 1):
        t.add_row(str(i), name)
    console.print(
        Panel(
            t,
            border_style="accent",
            box=box.ROUNDED,
            subtitle=f"[muted]{len(layer)} feature(s) • geometry: {session.geometry_type.value}[/muted]",
        )
    )


@app.command(help="Classify one field of a GeoJSON file and print the class breaks and legend.")
def classify(
    source: str = _SOURCE_ARG,
    field: str = _FIELD_OPT,
    classes: int = _CLASSES_OPT,
    method: str = _METHOD_OPT,
    family: str = _FAMILY_OPT,
    index: int = _INDEX_OPT,
):
    try:
        session, _ = _styled_session(source, field, classes, method, family, index)
    except SymbologyError as e:
        _fail(e)
    legend = session.legend()
    console.print(Panel(_legend_table(legend, session.class_method.label), border_style="accent", box=box.ROUNDED))


@app.command(
    help=(
        "Classify one field and write a styled GeoJSON (per-feature paint under properties.style). "
        "Legend CSV/plot are written next to it unless disabled."
    )
)
def style(
    source: str = _SOURCE_ARG,
    field: str = _FIELD_OPT,
    classes: int = _CLASSES_OPT,
    method: str = _METHOD_OPT,
    family: str = _FAMILY_OPT,
    index: int = _INDEX_OPT,
    point_size: float = typer.Option(8.0, "--point-size", min=2, max=20, help="Circle radius for point layers."),
    line_width: float = typer.Option(2.0, "--line-width", min=1, max=10, help="Stroke width for line layers."),
    opacity: float = typer.Option(0.5, "--opacity", help="Fill opacity in (0, 1]."),
    out_dir: str = typer.Option("./outputs", "--out", "-o", metavar="DIR", help="Output directory."),
    legend_csv: bool = typer.Option(True, "--legend-csv/--no-legend-csv", help="Write <layer>.legend.csv."),
    legend_plot: str = typer.Option("pdf", "--legend-plot", metavar="EXT", help="pdf | png | svg | none"),
    log_level: str = typer.Option("INFO", "--log-level", metavar="LEVEL", help="DEBUG | INFO | WARNING | ERROR"),
):
    out = Path(out_dir).resolve()
    try:
        spec = LegendSpec(csv=legend_csv, plot=None if legend_plot.lower() == "none" else legend_plot.lower())
    except ValueError as e:
        raise typer.BadParameter(f"--legend-plot: {e}") from None
    setup_logging(out, level=log_level, console=console)
    try:
        session, layer = _styled_session(
            source, field, classes, method, family, index, point_size=point_size, line_width=line_width, opacity=opacity
        )
        outputs = export_layer(session, layer, out, spec, stub=layer.title)
    except SymbologyError as e:
        _fail(e)
    console.print(Panel(_legend_table(session.legend(), session.class_method.label), border_style="accent", box=box.ROUNDED))
    for kind, path in outputs.items():
        console.print(f"[ok]✓[/ok] {kind}: [path]{path}[/path]")


@app.command(
    help=(
        "Style every layer declared in a YAML job (schema: symbology/v1). Layers share one style cache; "
        "outputs (styled GeoJSON, legend CSV/plot, symbology.log) go to the job's outputs directory."
    )
)
def run(
    config: str = typer.Argument(..., metavar="CONFIG", help="Path to the job YAML."),
    log_level: str = typer.Option("INFO", "--log-level", metavar="LEVEL", help="DEBUG | INFO | WARNING | ERROR"),
):
    try:
        run_job(Path(config), log_level=log_level, console=console)
    except SymbologyError as e:
        _fail(e)
