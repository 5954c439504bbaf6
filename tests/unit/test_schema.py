import copy

import pytest

from osm_importer.common.errors import ConfigError
from osm_importer.common.schema import validate_import_config

BASE_CONFIG = {
    "source": "osm",
    "default_type": "venue",
    "crs": {"source_epsg": 4326},
    "output": {"documents_filename": "documents.jsonl", "report_filename": "report.json"},
}


def test_validate_import_config_accepts_valid_shape():
    validated = validate_import_config(copy.deepcopy(BASE_CONFIG))
    assert validated["source"] == "osm"


def test_validate_import_config_rejects_unknown_key_by_default():
    bad = copy.deepcopy(BASE_CONFIG)
    bad["unexpected"] = True
    with pytest.raises(ConfigError):
        validate_import_config(bad)


def test_validate_import_config_allows_unknown_when_enabled():
    okay = copy.deepcopy(BASE_CONFIG)
    okay["extra"] = 1
    validate_import_config(okay, allow_unknown=True)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda cfg: cfg.pop("source"),
        lambda cfg: cfg.update(source=""),
        lambda cfg: cfg.update(default_type=None),
        lambda cfg: cfg["crs"].update(source_epsg="4326"),
        lambda cfg: cfg["crs"].update(source_epsg=True),
        lambda cfg: cfg["crs"].update(source_epsg=0),
        lambda cfg: cfg["output"].pop("report_filename"),
        lambda cfg: cfg.update(output=[]),
    ],
)
def test_validate_import_config_rejects_invalid_values(mutate):
    bad = copy.deepcopy(BASE_CONFIG)
    mutate(bad)
    with pytest.raises(ConfigError):
        validate_import_config(bad)


def test_validate_import_config_rejects_non_mapping():
    with pytest.raises(ConfigError):
        validate_import_config(None)
