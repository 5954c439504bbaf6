"""CLI entrypoint for the OSM document import pipeline."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from osm_importer.common.config_loader import load_import_config
from osm_importer.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS, STAGES
from osm_importer.common.errors import PipelineError
from osm_importer.common.ids import generate_run_id
from osm_importer.common.logging import build_logger, log_error, log_event
from osm_importer.pipeline.reports import write_run_report
from osm_importer.pipeline.runner import run_import


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=[*STAGES, "all"])
    parser.add_argument("--input", required=True)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--strict", action="store_true")
    return parser.parse_args(argv)


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    config_dir = Path(args.config_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    data_dir = Path(args.data_dir)
    input_path = Path(args.input)

    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)

    log_event(logger, "stage start", run_id=run_id, stage=args.command, event="STAGE_START", status="ok")
    try:
        config = load_import_config(config_dir, overlay_config_dir=overlay_config_dir)
        output_path, stats = run_import(args.command, input_path, config, data_dir, logger=logger)
    except PipelineError as exc:
        log_error(
            logger,
            f"run failed: {exc}",
            run_id=run_id,
            stage=args.command,
            event="STAGE_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return EXIT_HARD_FAIL

    write_run_report(
        data_dir,
        config,
        run_id=run_id,
        command=args.command,
        input_path=input_path,
        output_path=output_path,
        stats=stats,
    )
    log_event(
        logger,
        "stage end",
        run_id=run_id,
        stage=args.command,
        source=config.source,
        event="STAGE_END",
        status="ok" if stats.failures == 0 else "partial",
        rows_in=stats.rows_in,
        rows_out=stats.rows_out,
    )

    if stats.failures > 0:
        return EXIT_HARD_FAIL if args.strict else EXIT_PARTIAL
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or sys.argv[1:])
    try:
        return run_command(args)
    except PipelineError:
        return EXIT_HARD_FAIL
    except Exception:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
