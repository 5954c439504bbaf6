"""Run report aggregation."""

from __future__ import annotations

from pathlib import Path

from osm_importer.common.config_loader import ImportConfig
from osm_importer.common.fs import write_json
from osm_importer.common.time_utils import utc_timestamp_iso
from osm_importer.pipeline.runner import RunStats


def write_run_report(
    data_dir: Path,
    config: ImportConfig,
    *,
    run_id: str,
    command: str,
    input_path: Path,
    output_path: Path,
    stats: RunStats,
) -> Path:
    status = "success"
    if stats.failures > 0:
        status = "partial"

    report_path = data_dir / "out" / "reports" / config.report_filename
    payload = {
        "run_id": run_id,
        "command": command,
        "generated_at": utc_timestamp_iso(),
        "status": status,
        "source": config.source,
        "input_path": str(input_path),
        "output_path": str(output_path),
        "counts": stats.to_dict(),
    }
    write_json(report_path, payload)
    return report_path
