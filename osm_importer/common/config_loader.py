"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from osm_importer.common.errors import ConfigError
from osm_importer.common.fs import read_yaml
from osm_importer.common.schema import validate_import_config

IMPORT_CONFIG_FILENAME = "import.yml"


@dataclass(frozen=True)
class ImportConfig:
    source: str
    default_type: str
    source_epsg: int
    documents_filename: str
    report_filename: str


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    if overlay is None:
        return base
    if not isinstance(overlay, dict):
        raise ConfigError(f"Overlay config must be a mapping: {overlay_path}")
    return _deep_merge(base, overlay)


def load_import_config(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> ImportConfig:
    overlay_path = None
    if overlay_config_dir is not None:
        overlay_path = overlay_config_dir / IMPORT_CONFIG_FILENAME
    cfg = validate_import_config(
        _load_yaml_with_overlay(config_dir / IMPORT_CONFIG_FILENAME, overlay_path),
        allow_unknown=allow_unknown,
    )
    return ImportConfig(
        source=cfg["source"],
        default_type=cfg["default_type"],
        source_epsg=int(cfg["crs"]["source_epsg"]),
        documents_filename=cfg["output"]["documents_filename"],
        report_filename=cfg["output"]["report_filename"],
    )
