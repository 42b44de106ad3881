import json

import pytest

from metalog_elicitation.config.loader import load_settings, load_settings_with_precedence
from metalog_elicitation.config.settings import DEFAULT_SETTINGS, FitSettings
from metalog_elicitation.exceptions import ConfigValidationError


def test_defaults() -> None:
    settings = FitSettings()
    assert settings.clamp_low == 0.001
    assert settings.clamp_high == 0.999
    assert settings.k3_ratio_bound == 1.66711
    assert settings.quality_threshold == 0.025
    assert settings.slope_tolerance == 1e-10
    assert settings.pivot_epsilon == 1e-12
    assert settings == DEFAULT_SETTINGS


@pytest.mark.parametrize(
    "overrides",
    [
        {"quality_threshold": 0.0},
        {"quality_threshold": 1.5},
        {"clamp_low": 0.6},
        {"pivot_epsilon": 0.0},
        {"logistic_headroom": 1.0},
        {"root_grid_intervals": 1},
        {"default_plot_points": 0},
    ],
)
def test_invalid_settings_rejected(overrides) -> None:
    with pytest.raises(ConfigValidationError):
        FitSettings(**overrides)


def test_from_dict_rejects_unknown_keys() -> None:
    with pytest.raises(ConfigValidationError, match="Unknown settings"):
        FitSettings.from_dict({"quality": 0.1})


def test_dict_round_trip() -> None:
    settings = FitSettings(quality_threshold=0.05)
    assert FitSettings.from_dict(settings.to_dict()) == settings


def test_load_json_settings(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"quality_threshold": 0.04}))
    assert load_settings(path).quality_threshold == 0.04


def test_load_yaml_fit_section(tmp_path) -> None:
    pytest.importorskip("yaml")
    path = tmp_path / "settings.yaml"
    path.write_text("fit:\n  quality_threshold: 0.03\n  extend_to_bounds: false\n")
    settings = load_settings(path)
    assert settings.quality_threshold == 0.03
    assert settings.extend_to_bounds is False


def test_precedence_defaults_file_overrides(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"quality_threshold": 0.04, "default_plot_points": 50}))

    assert load_settings_with_precedence() == DEFAULT_SETTINGS

    settings = load_settings_with_precedence(path, {"quality_threshold": 0.1, "default_plot_points": None})
    assert settings.quality_threshold == 0.1
    assert settings.default_plot_points == 50


def test_loader_errors(tmp_path) -> None:
    with pytest.raises(ConfigValidationError, match="not found"):
        load_settings(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text("[1, 2]")
    with pytest.raises(ConfigValidationError, match="mapping"):
        load_settings(bad)

    broken = tmp_path / "broken.json"
    broken.write_text("{")
    with pytest.raises(ConfigValidationError, match="Invalid JSON"):
        load_settings(broken)
