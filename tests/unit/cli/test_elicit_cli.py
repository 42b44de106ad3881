import importlib
import json

import pandas as pd
import pytest

pytest.importorskip("typer")
from typer.testing import CliRunner

from metalog_elicitation.cli import main as cli_main
from metalog_elicitation.cli.main import app
from metalog_elicitation.exceptions import DependencyError

runner = CliRunner()


def _write_points(tmp_path, rows, name="points.csv"):
    path = tmp_path / name
    pd.DataFrame(rows, columns=["x", "y"]).to_csv(path, index=False)
    return path


def test_fit_json_reports_three_terms(tmp_path) -> None:
    path = _write_points(tmp_path, [(0.3, 0.25), (0.5, 0.5), (0.7, 0.75)])
    result = runner.invoke(app, ["fit", str(path), "--json"])
    assert result.exit_code == 0, result.output
    info = json.loads(result.stdout)
    assert info["type"] == "metalog"
    assert info["num_terms"] == 3


def test_fit_table_output(tmp_path) -> None:
    path = _write_points(tmp_path, [(0.2, 0.5), (0.8, 0.5)])
    result = runner.invoke(app, ["fit", str(path)])
    assert result.exit_code == 0, result.output
    assert "interpolation" in result.stdout


def test_fit_invalid_points_exit_code(tmp_path) -> None:
    path = _write_points(tmp_path, [(0.1, 0.01), (0.9, 0.99)])
    result = runner.invoke(app, ["fit", str(path)])
    assert result.exit_code == 2


def test_fit_bad_config_exit_code(tmp_path) -> None:
    path = _write_points(tmp_path, [(0.3, 0.25), (0.5, 0.5), (0.7, 0.75)])
    config = tmp_path / "settings.json"
    config.write_text(json.dumps({"unknown_knob": 1}))
    result = runner.invoke(app, ["fit", str(path), "--config", str(config)])
    assert result.exit_code == 1


def test_fit_in_years(tmp_path) -> None:
    path = _write_points(tmp_path, [(0.5, 0.25), (2.0, 0.5), (8.0, 0.75)])
    result = runner.invoke(app, ["fit", str(path), "--time-units", "years", "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["num_data_points"] == 3


def test_sample_writes_csv(tmp_path) -> None:
    path = _write_points(tmp_path, [(0.3, 0.25), (0.5, 0.5), (0.7, 0.75)])
    output = tmp_path / "out" / "curve.csv"
    result = runner.invoke(app, ["sample", str(path), "--points", "20", "--output", str(output)])
    assert result.exit_code == 0, result.output
    frame = pd.read_csv(output)
    assert list(frame.columns) == ["x", "y"]
    assert frame["y"].is_monotonic_increasing
    assert frame["x"].between(0, 1).all()


def test_sample_rejects_non_positive_points(tmp_path) -> None:
    path = _write_points(tmp_path, [(0.3, 0.25), (0.5, 0.5), (0.7, 0.75)])
    result = runner.invoke(app, ["sample", str(path), "--points", "0"])
    assert result.exit_code == 1


def test_convert_prints_normalized_values() -> None:
    result = runner.invoke(app, ["convert", "--duration", "6 months", "--probability", "25%"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["years"] == pytest.approx(0.5)
    assert 0 < payload["x"] < 1
    assert payload["y"] == pytest.approx(0.25)
    assert payload["probability"] == "25%"


def test_convert_requires_input() -> None:
    assert runner.invoke(app, ["convert"]).exit_code == 2
    assert runner.invoke(app, ["convert", "--duration", "soon"]).exit_code == 2


def test_plot_writes_png(tmp_path) -> None:
    pytest.importorskip("matplotlib")
    path = _write_points(tmp_path, [(0.3, 0.25), (0.5, 0.5), (0.7, 0.75)])
    output = tmp_path / "curve.png"
    result = runner.invoke(app, ["plot", str(path), "--output", str(output), "--points", "50"])
    assert result.exit_code == 0, result.output
    assert output.exists()
    assert output.stat().st_size > 0


def test_missing_plot_dependency_exit_code(tmp_path, monkeypatch) -> None:
    plot_module = importlib.import_module("metalog_elicitation.cli.commands.plot")

    def missing(*_args, **_kwargs):
        raise DependencyError("matplotlib is required for plot generation")

    monkeypatch.setattr(plot_module, "plot_distribution", missing)
    path = _write_points(tmp_path, [(0.3, 0.25), (0.5, 0.5), (0.7, 0.75)])
    result = runner.invoke(app, ["plot", str(path), "--output", str(tmp_path / "curve.png")])
    assert result.exit_code == 4


def test_main_maps_unhandled_errors(monkeypatch) -> None:
    def broken_app():
        raise RuntimeError("boom")

    monkeypatch.setattr(cli_main, "configure_logging", lambda **_kwargs: None)
    monkeypatch.setattr(cli_main, "app", broken_app)
    with pytest.raises(SystemExit) as excinfo:
        cli_main.main()
    assert excinfo.value.code == 255
