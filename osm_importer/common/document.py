"""Canonical document model.

Documents are assembled through ``DocumentBuilder``, whose constructor and
setters validate every value and raise ``DocumentError`` on rejection.
``DocumentBuilder.build`` returns a frozen ``Document`` that is handed
downstream and never changed afterwards.
"""

from __future__ import annotations

import copy
import math
import re
from dataclasses import dataclass, field
from typing import Any, Mapping

from osm_importer.common.constants import ADDRESS_FIELDS, ADMIN_FIELDS
from osm_importer.common.errors import DocumentError

_ZIP_RE = re.compile(r"^[A-Za-z0-9]+(?:[ \-][A-Za-z0-9]+)*$")
_ALPHA3_RE = re.compile(r"^[A-Za-z]{3}$")


def _require_text(value: Any, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise DocumentError(f"invalid {label}: expected non-empty string, got {value!r}")
    return value


def _require_identifier(value: Any, label: str) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise DocumentError(f"invalid {label}: expected string or integer, got {value!r}")
    text = str(value)
    if not text.strip():
        raise DocumentError(f"invalid {label}: empty identifier")
    return text


def _require_coordinate(value: Any, label: str, limit: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DocumentError(f"invalid {label}: expected number, got {value!r}")
    number = float(value)
    if not math.isfinite(number) or not -limit <= number <= limit:
        raise DocumentError(f"invalid {label}: {value!r} outside [-{limit}, {limit}]")
    return number


def _require_mapping(value: Any, label: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise DocumentError(f"invalid {label}: expected mapping, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class Centroid:
    lat: float
    lon: float

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lon": self.lon}


@dataclass(frozen=True)
class Document:
    source: str
    source_type: str
    id: str
    source_id: str | None = None
    name: dict[str, str] = field(default_factory=dict)
    centroid: Centroid | None = None
    address: dict[str, str] = field(default_factory=dict)
    alpha3: str | None = None
    admin: dict[str, str] = field(default_factory=dict)
    meta: dict[str, Any] = field(default_factory=dict)

    def get_name(self, key: str = "default") -> str | None:
        return self.name.get(key)

    def get_address(self, prop: str) -> str | None:
        return self.address.get(prop)

    def get_admin(self, level: str) -> str | None:
        return self.admin.get(level)

    def get_meta(self, key: str) -> Any:
        return self.meta.get(key)

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "source_type": self.source_type,
            "id": self.id,
            "source_id": self.source_id,
            "name": dict(self.name),
            "centroid": self.centroid.to_dict() if self.centroid is not None else None,
            "address": dict(self.address),
            "alpha3": self.alpha3,
            "admin": dict(self.admin),
            "meta": copy.deepcopy(self.meta),
        }

    @classmethod
    def from_dict(cls, payload: Any) -> "Document":
        """Rebuild a document from ``to_dict`` output, re-validating every field."""
        payload = _require_mapping(payload, "document")
        builder = DocumentBuilder(payload.get("source"), payload.get("source_type"), payload.get("id"))
        if payload.get("source_id") is not None:
            builder.set_source_id(payload["source_id"])
        for key, value in _require_mapping(payload.get("name") or {}, "name").items():
            builder.set_name(key, value)
        if payload.get("centroid"):
            builder.set_centroid(payload["centroid"])
        for prop, value in _require_mapping(payload.get("address") or {}, "address").items():
            builder.set_address(prop, value)
        if payload.get("alpha3") is not None:
            builder.set_alpha3(payload["alpha3"])
        for level, value in _require_mapping(payload.get("admin") or {}, "admin").items():
            builder.set_admin(level, value)
        builder.replace_meta(_require_mapping(payload.get("meta") or {}, "meta"))
        return builder.build()


class DocumentBuilder:
    def __init__(self, source: Any, source_type: Any, id: Any) -> None:
        self.source = _require_text(source, "source")
        self.source_type = _require_text(source_type, "source_type")
        self.id = _require_identifier(id, "id")
        self.source_id: str | None = None
        self.name: dict[str, str] = {}
        self.centroid: Centroid | None = None
        self.address: dict[str, str] = {}
        self.alpha3: str | None = None
        self.admin: dict[str, str] = {}
        self.meta: dict[str, Any] = {"id": self.id, "type": self.source_type}

    @classmethod
    def from_document(cls, document: Document) -> "DocumentBuilder":
        builder = cls(document.source, document.source_type, document.id)
        builder.source_id = document.source_id
        builder.name = dict(document.name)
        builder.centroid = document.centroid
        builder.address = dict(document.address)
        builder.alpha3 = document.alpha3
        builder.admin = dict(document.admin)
        builder.meta = dict(document.meta)
        return builder

    def set_source_id(self, value: Any) -> "DocumentBuilder":
        self.source_id = _require_identifier(value, "source_id")
        return self

    def set_name(self, key: Any, value: Any) -> "DocumentBuilder":
        self.name[_require_text(key, "name key")] = _require_text(value, f"name.{key}")
        return self

    def set_centroid(self, centroid: Any) -> "DocumentBuilder":
        if isinstance(centroid, Centroid):
            lat, lon = centroid.lat, centroid.lon
        else:
            centroid = _require_mapping(centroid, "centroid")
            lat, lon = centroid.get("lat"), centroid.get("lon")
        self.centroid = Centroid(
            lat=_require_coordinate(lat, "centroid.lat", 90.0),
            lon=_require_coordinate(lon, "centroid.lon", 180.0),
        )
        return self

    def set_address(self, prop: Any, value: Any) -> "DocumentBuilder":
        if prop not in ADDRESS_FIELDS:
            raise DocumentError(f"invalid address property: {prop!r}")
        text = _require_text(value, f"address.{prop}")
        if prop == "zip" and not _ZIP_RE.match(text.strip()):
            raise DocumentError(f"invalid address.zip: {value!r}")
        self.address[prop] = text
        return self

    def set_alpha3(self, value: Any) -> "DocumentBuilder":
        if not isinstance(value, str) or not _ALPHA3_RE.match(value):
            raise DocumentError(f"invalid alpha3: {value!r}")
        self.alpha3 = value.upper()
        return self

    def set_admin(self, level: Any, value: Any) -> "DocumentBuilder":
        if level not in ADMIN_FIELDS:
            raise DocumentError(f"invalid admin level: {level!r}")
        self.admin[level] = _require_text(value, f"admin.{level}")
        return self

    def set_meta(self, key: Any, value: Any) -> "DocumentBuilder":
        self.meta[_require_text(key, "meta key")] = value
        return self

    def replace_meta(self, meta: Mapping[str, Any]) -> "DocumentBuilder":
        # Deep copy so the new document never shares nested state with the source.
        self.meta = copy.deepcopy(dict(meta))
        self.meta["id"] = self.id
        self.meta["type"] = self.source_type
        return self

    def build(self) -> Document:
        return Document(
            source=self.source,
            source_type=self.source_type,
            id=self.id,
            source_id=self.source_id,
            name=dict(self.name),
            centroid=self.centroid,
            address=dict(self.address),
            alpha3=self.alpha3,
            admin=dict(self.admin),
            meta=dict(self.meta),
        )
