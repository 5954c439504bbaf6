import pytest

from osm_importer.cli import parse_args


def test_parse_args_defaults():
    args = parse_args(["construct", "--input", "records.jsonl"])
    assert args.command == "construct"
    assert args.input == "records.jsonl"
    assert args.config_dir == "./config"
    assert args.overlay_config_dir is None
    assert args.strict is False


def test_parse_args_accepts_overlay_config_dir():
    args = parse_args(["all", "--input", "x.json", "--overlay-config-dir", "config/live"])
    assert args.overlay_config_dir == "config/live"


def test_parse_args_requires_input():
    with pytest.raises(SystemExit):
        parse_args(["all"])


def test_parse_args_rejects_unknown_command():
    with pytest.raises(SystemExit):
        parse_args(["harvest", "--input", "x.json"])
