"""Filesystem helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Iterator

from osm_importer.common.errors import StageError


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_yaml(path: Path):
    import yaml

    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def write_json(path: Path, payload) -> None:
    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2, sort_keys=True)
        f.write("\n")


def read_json(path: Path):
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def iter_json_records(path: Path) -> Iterator[Any]:
    """Yield records from a JSON-lines file, a JSON list, or an ``elements`` payload."""
    if not path.exists():
        raise StageError(f"Missing input: {path}")

    if path.suffix.lower() in {".jsonl", ".ndjson"}:
        with path.open("r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    yield json.loads(line)
                except ValueError as exc:
                    raise StageError(f"Invalid JSON on line {line_no} of {path}") from exc
        return

    try:
        payload = read_json(path)
    except ValueError as exc:
        raise StageError(f"Invalid JSON payload at {path}") from exc
    if isinstance(payload, dict) and "elements" in payload:
        yield from payload["elements"]
    elif isinstance(payload, list):
        yield from payload
    else:
        raise StageError(f"Unsupported JSON payload shape at {path}")


def write_jsonl(path: Path, rows: Iterable[Any]) -> int:
    ensure_dir(path.parent)
    count = 0
    with path.open("w", encoding="utf-8") as f:
        for row in rows:
            f.write(json.dumps(row, ensure_ascii=False, sort_keys=True))
            f.write("\n")
            count += 1
    return count
