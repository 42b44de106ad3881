"""Load fit settings from JSON/YAML files with CLI override precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Optional

from metalog_elicitation.config.settings import DEFAULT_SETTINGS, FitSettings
from metalog_elicitation.exceptions import ConfigValidationError
from metalog_elicitation.utils.logging import get_logger

log = get_logger(__name__, component="config_loader")


def _read_mapping(path: Path) -> dict:
    if not path.exists():
        raise ConfigValidationError(f"Config file not found: {path}")
    if path.suffix.lower() in {".yml", ".yaml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - dependency guard
            raise ConfigValidationError("pyyaml is required to load YAML config files") from exc
        content = yaml.safe_load(path.read_text())
    else:
        try:
            content = json.loads(path.read_text())
        except json.JSONDecodeError as exc:
            raise ConfigValidationError(f"Invalid JSON in {path}: {exc}") from exc
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping")
    # A top-level "fit" section is accepted so settings can live beside other tool config.
    section = content.get("fit", content)
    if not isinstance(section, dict):
        raise ConfigValidationError(f"'fit' section in {path} must be a mapping")
    return dict(section)


def load_settings(path: Path) -> FitSettings:
    return FitSettings.from_dict(_read_mapping(path))


def load_settings_with_precedence(
    path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> FitSettings:
    """Merge defaults < file values < non-None overrides."""

    merged = DEFAULT_SETTINGS.to_dict()
    if path is not None:
        file_values = _read_mapping(path)
        merged.update(file_values)
        log.info(f"Loaded settings from {path}")
    for key, value in (overrides or {}).items():
        if value is not None:
            merged[key] = value
    return FitSettings.from_dict(merged)


__all__ = ["load_settings", "load_settings_with_precedence"]
