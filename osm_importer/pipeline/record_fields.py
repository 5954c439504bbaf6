"""Carry pre-mapped name, address and admin fields from raw records onto documents.

This is the default tagging step between construction and address extraction.
It only copies values the upstream export already put in canonical shape; it
does not interpret raw OSM tags.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from osm_importer.common.constants import ADDRESS_FIELDS, ADMIN_FIELDS
from osm_importer.common.document import Document, DocumentBuilder
from osm_importer.common.logging import get_logger
from osm_importer.common.result import attempt

Tagger = Callable[[Document, Any], Document]


def _names(raw: Mapping[str, Any]) -> Mapping[str, Any]:
    names = raw.get("name")
    if isinstance(names, str):
        return {"default": names}
    if isinstance(names, Mapping):
        return names
    return {}


def tag_from_record(doc: Document, raw: Any, *, logger: logging.Logger | None = None) -> Document:
    if not isinstance(raw, Mapping):
        return doc

    builder = DocumentBuilder.from_document(doc)
    rejected: list[str] = []

    for key, value in _names(raw).items():
        if not attempt(builder.set_name, key, value).ok:
            rejected.append(f"name.{key}")

    address = raw.get("address")
    address = address if isinstance(address, Mapping) else {}
    admin = raw.get("admin")
    admin = admin if isinstance(admin, Mapping) else {}

    for prop in ADDRESS_FIELDS:
        value = address.get(prop)
        if value is not None and not attempt(builder.set_address, prop, value).ok:
            rejected.append(f"address.{prop}")

    # Admin levels are accepted either nested under ``admin`` or inline with the address.
    for level in ADMIN_FIELDS:
        value = admin.get(level, address.get(level))
        if value is not None and not attempt(builder.set_admin, level, value).ok:
            rejected.append(f"admin.{level}")

    alpha3 = raw.get("alpha3", address.get("alpha3"))
    if alpha3 is not None and not attempt(builder.set_alpha3, alpha3).ok:
        rejected.append("alpha3")

    if rejected:
        get_logger(logger).warning(
            "record fields skipped: %s",
            ", ".join(rejected),
            extra={"stage": "tag", "event": "RECORD_FIELD_SKIPPED", "status": "warning", "record_id": doc.id},
        )

    return builder.build()
