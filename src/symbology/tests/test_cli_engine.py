"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/tests/test_cli_engine.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest
import typer
import yaml
from rich.console import Console
from typer.testing import CliRunner

from symbology.core import cli
from symbology.core.engine import run_job
from symbology.core.errors import ParseError
from symbology.core.session import StylingSession

from conftest import point_feature_collection, write_json


@pytest.fixture
def test_console(monkeypatch) -> Console:
    console = Console(width=120, record=True, theme=cli.THEME, force_terminal=True)
    monkeypatch.setattr(cli, "console", console)
    return console


def _write_job(path: Path, payload: dict) -> Path:
    path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    return path


def test_palettes_and_methods_listings(test_console):
    cli.palettes()
    cli.methods()
    out = test_console.export_text()
    assert "Reds" in out and "diverging" in out
    assert "naturalBreaks" in out and "Equal Interval" in out


def test_fields_lists_numeric_attributes(test_console, points_geojson):
    cli.fields(source=str(points_geojson))
    out = test_console.export_text()
    assert "pop" in out
    assert "label" not in out
    assert "geometry: Point" in out


def test_classify_prints_legend(test_console, points_geojson):
    cli.classify(source=str(points_geojson), field="pop", classes=4, method="equalInterval", family="sequential", index=1)
    out = test_console.export_text()
    assert "Legend - pop" in out
    assert "0.00 - 10.00" in out
    assert "30.00 - 40.00" in out


def test_classify_reports_missing_field(test_console, points_geojson):
    with pytest.raises(typer.Exit) as exc:
        cli.classify(source=str(points_geojson), field="label", classes=3, method="quantile", family="sequential", index=0)
    assert exc.value.exit_code == 1
    assert "no numeric values" in test_console.export_text()


def test_style_writes_geojson_and_legend(test_console, points_geojson, tmp_path):
    out_dir = tmp_path / "styled"
    cli.style(
        source=str(points_geojson),
        field="pop",
        classes=2,
        method="equalInterval",
        family="qualitative",
        index=0,
        point_size=6.0,
        line_width=2.0,
        opacity=1.0,
        out_dir=str(out_dir),
        legend_csv=True,
        legend_plot="none",
        log_level="INFO",
    )
    doc = json.loads((out_dir / "towns.styled.geojson").read_text(encoding="utf-8"))
    assert doc["symbology"]["breaks"] == [0.0, 20.0, 40.0]
    assert doc["features"][0]["properties"]["style"]["radius"] == 6.0
    legend = pd.read_csv(out_dir / "towns.legend.csv")
    assert list(legend["label"]) == ["0.00 - 20.00", "20.00 - 40.00"]
    assert not list(out_dir.glob("*.pdf"))
    assert (out_dir / "symbology.log").is_file()


def test_style_rejects_bad_opacity(test_console, points_geojson, tmp_path):
    with pytest.raises(typer.Exit):
        cli.style(
            source=str(points_geojson),
            field="pop",
            classes=3,
            method="equalInterval",
            family="sequential",
            index=0,
            point_size=8.0,
            line_width=2.0,
            opacity=0.0,
            out_dir=str(tmp_path / "x"),
            legend_csv=False,
            legend_plot="none",
            log_level="WARNING",
        )
    assert "Invalid style options" in test_console.export_text()


def test_run_job_styles_every_layer(tmp_path, test_console):
    data = tmp_path / "data"
    write_json(data / "towns.geojson", point_feature_collection([0, 10, 20, 30, 40]))
    write_json(data / "wells.geojson", point_feature_collection([5.5, 1.25, 9.75], name="Wells"))
    job = _write_job(
        tmp_path / "job.yaml",
        {
            "schema": "symbology/v1",
            "outputs": "./outputs",
            "legend": {"csv": True, "plot": "png"},
            "layers": [
                {"source": "data/towns.geojson", "field": "pop", "classes": 4},
                {
                    "id": "wells",
                    "source": "data/wells.geojson",
                    "field": "pop",
                    "classes": 2,
                    "method": "naturalBreaks",
                    "colors": ["#000000", "#ffffff"],
                    "style": {"opacity": 0.25},
                },
            ],
        },
    )

    session = StylingSession()
    results = run_job(job, console=test_console, session=session)

    out_dir = tmp_path / "outputs"
    assert [r.dataset_id for r in results] == ["towns", "wells"]
    assert results[0].style.breaks == (0, 10, 20, 30, 40)
    assert results[1].style.colors == ("#000000", "#ffffff")
    for name in ("towns", "wells"):
        assert (out_dir / f"{name}.styled.geojson").is_file()
        assert (out_dir / f"{name}.legend.csv").is_file()
        assert (out_dir / f"{name}.legend.png").is_file()
    assert set(session.cache) == {"towns", "wells"}
    assert session.cache.get("wells").style_options.opacity == 0.25
    assert "Styled layers" in test_console.export_text()


def test_run_job_missing_source(tmp_path, test_console):
    job = _write_job(
        tmp_path / "job.yaml",
        {"schema": "symbology/v1", "layers": [{"source": "nope.geojson", "field": "pop"}]},
    )
    with pytest.raises(ParseError):
        run_job(job, console=test_console)
    with pytest.raises(typer.Exit):
        cli.run(config=str(job), log_level="INFO")


def test_command_line_parsing(test_console, points_geojson):
    runner = CliRunner()
    result = runner.invoke(cli.app, ["classify", str(points_geojson), "--field", "pop", "-n", "4", "-m", "quantile"])
    assert result.exit_code == 0, result.output
    assert "Quantile" in test_console.export_text()

    result = runner.invoke(cli.app, ["classify", str(points_geojson), "--field", "pop", "--classes", "11"])
    assert result.exit_code == 2

    result = runner.invoke(cli.app, ["fields", str(points_geojson.parent / "absent.geojson")])
    assert result.exit_code == 1


def test_style_rejects_unknown_legend_format_before_writing(test_console, points_geojson, tmp_path):
    out_dir = tmp_path / "never"
    with pytest.raises(typer.BadParameter):
        cli.style(
            source=str(points_geojson),
            field="pop",
            classes=3,
            method="equalInterval",
            family="sequential",
            index=0,
            point_size=8.0,
            line_width=2.0,
            opacity=0.5,
            out_dir=str(out_dir),
            legend_csv=True,
            legend_plot="gif",
            log_level="INFO",
        )
    assert not out_dir.exists()
