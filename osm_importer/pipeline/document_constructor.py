"""Build canonical documents from raw OSM-derived records.

Malformed records never fault the stream: each record becomes either one
document or nothing, and rejections are logged and skipped.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Mapping

from osm_importer.common.constants import DEFAULT_SOURCE, DEFAULT_TYPE, META_FIELDS, WGS84_EPSG
from osm_importer.common.document import Document, DocumentBuilder
from osm_importer.common.errors import DocumentError
from osm_importer.common.geometry import to_wgs84
from osm_importer.common.logging import get_logger, log_error
from osm_importer.common.result import Outcome, attempt

STAGE_NAME = "construct"


def _resolve_centroid(raw: Mapping[str, Any], source_epsg: int) -> dict[str, Any] | None:
    lat = raw.get("lat")
    lon = raw.get("lon")
    if lat is not None and lon is not None:
        lat, lon = to_wgs84(lat, lon, source_epsg)
        return {"lat": lat, "lon": lon}

    centroid = raw.get("centroid")
    if centroid is None:
        return None
    if not isinstance(centroid, Mapping):
        raise DocumentError(f"invalid centroid: {centroid!r}")
    lat, lon = to_wgs84(centroid.get("lat"), centroid.get("lon"), source_epsg)
    return {"lat": lat, "lon": lon}


def _build_document(raw: Any, source: str, default_type: str, source_epsg: int) -> Document:
    if not isinstance(raw, Mapping):
        raise DocumentError(f"raw record must be a mapping, got {type(raw).__name__}")

    builder = DocumentBuilder(source, raw.get("type") or default_type, raw.get("id"))
    builder.set_source_id(raw.get("id"))

    centroid = _resolve_centroid(raw, source_epsg)
    if centroid is not None:
        builder.set_centroid(centroid)

    for key in META_FIELDS:
        if raw.get(key) is not None:
            builder.set_meta(key, raw[key])

    return builder.build()


def construct_document(
    raw: Any,
    *,
    source: str = DEFAULT_SOURCE,
    default_type: str = DEFAULT_TYPE,
    source_epsg: int = WGS84_EPSG,
) -> Outcome[Document]:
    return attempt(_build_document, raw, source, default_type, source_epsg)


def report_construct_failure(logger: logging.Logger, raw: Any, error: DocumentError) -> None:
    record_id = raw.get("id") if isinstance(raw, Mapping) else None
    log_error(
        logger,
        f"document construction failed: {error}",
        stage=STAGE_NAME,
        event="DOCUMENT_CONSTRUCT_FAIL",
        status="error",
        record_id=record_id,
        error_code=error.error_code,
    )


def run_document_constructor(
    records: Iterable[Any],
    *,
    logger: logging.Logger | None = None,
    source: str = DEFAULT_SOURCE,
    default_type: str = DEFAULT_TYPE,
    source_epsg: int = WGS84_EPSG,
) -> Iterator[Document]:
    log = get_logger(logger)
    for raw in records:
        outcome = construct_document(raw, source=source, default_type=default_type, source_epsg=source_epsg)
        if outcome.ok:
            yield outcome.value
        else:
            report_construct_failure(log, raw, outcome.error)
