"""Geometry helpers."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError

from osm_importer.common.constants import WGS84_EPSG
from osm_importer.common.errors import DocumentError


@lru_cache(maxsize=8)
def _transformer(source_epsg: int) -> Transformer:
    return Transformer.from_crs(CRS.from_epsg(source_epsg), CRS.from_epsg(WGS84_EPSG), always_xy=True)


def to_wgs84(lat: Any, lon: Any, source_epsg: int) -> tuple[Any, Any]:
    """Reproject a coordinate pair into WGS84.

    Values already in WGS84 pass through untouched so the document model sees
    exactly what the record carried, zeros included.
    """
    if source_epsg == WGS84_EPSG:
        return lat, lon
    if isinstance(lat, bool) or isinstance(lon, bool) or not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
        raise DocumentError(f"invalid coordinates for EPSG:{source_epsg}: {lat!r}, {lon!r}")
    try:
        transformed_lon, transformed_lat = _transformer(source_epsg).transform(lon, lat)
    except CRSError as exc:
        raise DocumentError(f"unsupported source CRS EPSG:{source_epsg}") from exc
    return transformed_lat, transformed_lon
