"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from osm_importer.common.errors import ConfigError


def _assert_mapping(obj, ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    _assert_mapping(obj, ctx)
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_non_empty_string(value, ctx: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{ctx} must be a non-empty string")


def validate_import_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top_required = {"source", "default_type", "crs", "output"}
    _assert_required_keys(cfg, top_required, "import config")
    _assert_no_unknown_keys(cfg, top_required, "import config", allow_unknown)

    _assert_non_empty_string(cfg["source"], "source")
    _assert_non_empty_string(cfg["default_type"], "default_type")

    _assert_required_keys(cfg["crs"], {"source_epsg"}, "crs")
    epsg = cfg["crs"]["source_epsg"]
    if isinstance(epsg, bool) or not isinstance(epsg, int) or epsg <= 0:
        raise ConfigError("crs.source_epsg must be a positive integer")

    _assert_required_keys(cfg["output"], {"documents_filename", "report_filename"}, "output")
    _assert_non_empty_string(cfg["output"]["documents_filename"], "output.documents_filename")
    _assert_non_empty_string(cfg["output"]["report_filename"], "output.report_filename")

    return cfg
