"""Expand documents carrying a street address into standalone address documents.

The address fields are populated earlier in the pipeline by the tagging stage,
so this stage must run after it or it will find nothing to extract.

Per input document the result is:

- no name and no valid address: nothing, the record is not searchable;
- a name but no valid address: the original document;
- a valid address but no name: one ``address`` document per house number;
- both: one ``poi-address`` document per house number, then the original.

House numbers may be ``;`` delimited ("12;14") and yield one document each.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Mapping

from osm_importer.common.constants import (
    ADDRESS_FIELDS,
    ADDRESS_TYPE,
    ADMIN_FIELDS,
    HOUSE_NUMBER_DELIMITER,
    POI_ADDRESS_TYPE,
)
from osm_importer.common.document import Document, DocumentBuilder
from osm_importer.common.errors import DocumentError
from osm_importer.common.ids import IdSequence
from osm_importer.common.logging import get_logger, log_error
from osm_importer.common.result import Outcome, attempt

STAGE_NAME = "extract-addresses"


def is_named_poi(doc: object) -> bool:
    if not isinstance(doc, Document):
        return False
    name = doc.get_name("default")
    return isinstance(name, str) and bool(name)


def has_valid_address(doc: object) -> bool:
    if not isinstance(doc, Document):
        return False
    if not isinstance(doc.address, Mapping):
        return False
    number = doc.address.get("number")
    street = doc.address.get("street")
    if not isinstance(number, str) or not number:
        return False
    if not isinstance(street, str) or not street:
        return False
    return True


def split_house_numbers(number: str) -> list[str]:
    """Split ``number`` on ``;``, dropping empty and repeated components.

    Order of first appearance is kept, so ``"12;14;14"`` gives ``["12", "14"]``.
    """
    parts = (part.strip() for part in number.split(HOUSE_NUMBER_DELIMITER))
    return list(dict.fromkeys(part for part in parts if part))


def derive_address_id(doc: Document, derived_type: str, base: str, house_number: str, index: int) -> str:
    parts = [doc.source, doc.source_type, derived_type, base]
    # Later components share the base, so the house number keeps them apart.
    if index > 0:
        parts.append(house_number)
    return "-".join(str(part) for part in parts)


def _base_identifier(doc: Document, id_sequence: IdSequence) -> str:
    if doc.source_id is not None:
        return doc.source_id
    return str(id_sequence.next())


def _copy_properties(builder: DocumentBuilder, doc: Document, house_number: str) -> list[str]:
    """Copy address, country and admin fields one at a time.

    Returns the fields the model rejected. Fields the source does not carry
    are left out without being reported.
    """
    rejected: list[str] = []

    for prop in ADDRESS_FIELDS:
        value = house_number if prop == "number" else doc.get_address(prop)
        if value is not None and not attempt(builder.set_address, prop, value).ok:
            rejected.append(f"address.{prop}")

    if doc.alpha3 is not None and not attempt(builder.set_alpha3, doc.alpha3).ok:
        rejected.append("alpha3")

    for level in ADMIN_FIELDS:
        value = doc.get_admin(level)
        if value is not None and not attempt(builder.set_admin, level, value).ok:
            rejected.append(f"admin.{level}")

    return rejected


def _build_address_document(
    doc: Document,
    house_number: str,
    index: int,
    derived_type: str,
    base: str,
    log: logging.Logger,
) -> Document:
    record_id = derive_address_id(doc, derived_type, base, house_number, index)
    builder = DocumentBuilder(doc.source, derived_type, record_id)
    builder.set_name("default", f"{house_number} {doc.get_address('street')}")
    if doc.centroid is not None:
        builder.set_centroid(doc.centroid)
    if doc.source_id is not None:
        builder.set_source_id(doc.source_id)

    rejected = _copy_properties(builder, doc, house_number)
    if rejected:
        log.warning(
            "address fields skipped: %s",
            ", ".join(rejected),
            extra={
                "stage": STAGE_NAME,
                "event": "ADDRESS_FIELD_SKIPPED",
                "status": "warning",
                "record_id": record_id,
            },
        )

    builder.replace_meta(doc.meta)
    return builder.build()


def build_address_document(
    doc: Document,
    house_number: str,
    index: int,
    derived_type: str,
    *,
    base: str,
    logger: logging.Logger | None = None,
) -> Outcome[Document]:
    return attempt(_build_address_document, doc, house_number, index, derived_type, base, get_logger(logger))


def report_address_failure(logger: logging.Logger, doc: Document, error: DocumentError) -> None:
    log_error(
        logger,
        f"address_extractor error: {error}",
        stage=STAGE_NAME,
        event="ADDRESS_EXTRACT_FAIL",
        status="error",
        record_id=doc.id,
        error_code=error.error_code,
        document=doc.to_dict(),
    )


def extract_address_documents(
    doc: Document,
    *,
    id_sequence: IdSequence,
    logger: logging.Logger | None = None,
    failures: list[DocumentError] | None = None,
) -> list[Document]:
    """Return the documents to emit for ``doc``, address documents first.

    Components that cannot be built are logged and left out; when ``failures``
    is given their errors are appended to it.
    """
    log = get_logger(logger)
    named = is_named_poi(doc)
    out: list[Document] = []

    if has_valid_address(doc):
        derived_type = POI_ADDRESS_TYPE if named else ADDRESS_TYPE
        house_numbers = split_house_numbers(doc.get_address("number"))
        if house_numbers:
            base = _base_identifier(doc, id_sequence)
        for index, house_number in enumerate(house_numbers):
            outcome = build_address_document(doc, house_number, index, derived_type, base=base, logger=log)
            if outcome.ok:
                out.append(outcome.value)
                continue
            report_address_failure(log, doc, outcome.error)
            if failures is not None:
                failures.append(outcome.error)

    # The original follows its address documents.
    if named:
        out.append(doc)

    return out


def run_address_extractor(
    documents: Iterable[Document],
    *,
    id_sequence: IdSequence,
    logger: logging.Logger | None = None,
) -> Iterator[Document]:
    """Stream ``documents`` through the extractor.

    ``id_sequence`` supplies fallback id bases; share one instance across a
    run, since a fresh sequence restarts at 1 and reuses earlier bases.
    """
    for doc in documents:
        yield from extract_address_documents(doc, id_sequence=id_sequence, logger=logger)
