"""Stage orchestration over record streams."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Any, Iterable, Iterator

from osm_importer.common.config_loader import ImportConfig
from osm_importer.common.document import Document
from osm_importer.common.errors import DocumentError
from osm_importer.common.fs import iter_json_records, write_jsonl
from osm_importer.common.ids import IdSequence
from osm_importer.common.logging import get_logger, log_error
from osm_importer.common.result import attempt
from osm_importer.pipeline.address_extractor import extract_address_documents
from osm_importer.pipeline.document_constructor import construct_document, report_construct_failure
from osm_importer.pipeline.record_fields import Tagger, tag_from_record


@dataclass
class RunStats:
    rows_in: int = 0
    documents_in: int = 0
    construct_failures: int = 0
    address_failures: int = 0
    rows_out: int = 0
    emitted_by_type: Counter = field(default_factory=Counter)

    @property
    def failures(self) -> int:
        return self.construct_failures + self.address_failures

    def to_dict(self) -> dict[str, Any]:
        return {
            "rows_in": self.rows_in,
            "documents_in": self.documents_in,
            "construct_failures": self.construct_failures,
            "address_failures": self.address_failures,
            "rows_out": self.rows_out,
            "emitted_by_type": dict(sorted(self.emitted_by_type.items())),
        }


def construct_documents(
    records: Iterable[Any],
    config: ImportConfig,
    stats: RunStats,
    *,
    logger: logging.Logger | None = None,
    tagger: Tagger | None = None,
) -> Iterator[Document]:
    log = get_logger(logger)
    for raw in records:
        stats.rows_in += 1
        outcome = construct_document(
            raw,
            source=config.source,
            default_type=config.default_type,
            source_epsg=config.source_epsg,
        )
        if not outcome.ok:
            stats.construct_failures += 1
            report_construct_failure(log, raw, outcome.error)
            continue
        doc = outcome.value
        if tagger is not None:
            doc = tagger(doc, raw)
        stats.documents_in += 1
        yield doc


def load_documents(
    payloads: Iterable[Any],
    stats: RunStats,
    *,
    logger: logging.Logger | None = None,
) -> Iterator[Document]:
    log = get_logger(logger)
    for payload in payloads:
        stats.rows_in += 1
        outcome = attempt(Document.from_dict, payload)
        if not outcome.ok:
            stats.construct_failures += 1
            log_error(
                log,
                f"document load failed: {outcome.error}",
                stage="load",
                event="DOCUMENT_LOAD_FAIL",
                status="error",
                record_id=payload.get("id") if isinstance(payload, dict) else None,
                error_code=outcome.error.error_code,
            )
            continue
        stats.documents_in += 1
        yield outcome.value


def extract_addresses(
    documents: Iterable[Document],
    stats: RunStats,
    *,
    id_sequence: IdSequence,
    logger: logging.Logger | None = None,
) -> Iterator[Document]:
    for doc in documents:
        failures: list[DocumentError] = []
        yield from extract_address_documents(doc, id_sequence=id_sequence, logger=logger, failures=failures)
        stats.address_failures += len(failures)


def _serialise(documents: Iterable[Document], stats: RunStats) -> Iterator[dict]:
    for doc in documents:
        stats.emitted_by_type[doc.source_type] += 1
        yield doc.to_dict()


def run_import(
    command: str,
    input_path: Path,
    config: ImportConfig,
    data_dir: Path,
    *,
    logger: logging.Logger | None = None,
    id_sequence: IdSequence | None = None,
) -> tuple[Path, RunStats]:
    stats = RunStats()
    sequence = id_sequence if id_sequence is not None else IdSequence()
    records = iter_json_records(input_path)

    if command == "construct":
        documents = construct_documents(records, config, stats, logger=logger)
    elif command == "extract-addresses":
        documents = extract_addresses(load_documents(records, stats, logger=logger), stats, id_sequence=sequence, logger=logger)
    elif command == "all":
        tagger = partial(tag_from_record, logger=logger)
        documents = extract_addresses(
            construct_documents(records, config, stats, logger=logger, tagger=tagger),
            stats,
            id_sequence=sequence,
            logger=logger,
        )
    else:
        raise ValueError(f"Unknown command: {command}")

    out_path = data_dir / "out" / config.documents_filename
    stats.rows_out = write_jsonl(out_path, _serialise(documents, stats))
    return out_path, stats
