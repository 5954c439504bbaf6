import logging

import pytest

from osm_importer.common.document import Centroid, Document
from osm_importer.pipeline.document_constructor import construct_document, run_document_constructor


def _single(record: dict) -> Document:
    docs = list(run_document_constructor([record]))
    assert len(docs) == 1
    return docs[0]


def test_construct_document_valid_record():
    doc = _single({"id": 1, "type": "X"})

    assert isinstance(doc, Document)
    assert doc.source == "osm"
    assert doc.id == "1"
    assert doc.source_id == "1"
    assert doc.source_type == "X"


def test_construct_document_defaults_to_venue():
    doc = _single({"id": 1})
    assert doc.source_type == "venue"
    assert doc.get_meta("type") == "venue"
    assert doc.get_meta("id") == "1"


@pytest.mark.parametrize("record", [{}, {"type": "X"}, {"id": ""}, {"id": True}, None, "node/1", [1, 2]])
def test_construct_document_drops_malformed_records(record):
    outcome = construct_document(record)
    assert not outcome.ok
    assert outcome.error.error_code == "DOCUMENT_ERROR"
    assert list(run_document_constructor([record])) == []


def test_malformed_record_is_logged_and_stream_continues(caplog):
    with caplog.at_level(logging.ERROR, logger="osm_importer"):
        docs = list(run_document_constructor([{}, {"id": 2, "type": "X"}]))

    assert [doc.id for doc in docs] == ["2"]
    failures = [r for r in caplog.records if getattr(r, "event", None) == "DOCUMENT_CONSTRUCT_FAIL"]
    assert len(failures) == 1
    assert failures[0].stage == "construct"


def test_centroid_from_lat_lon():
    doc = _single({"id": 1, "type": "X", "lat": 1, "lon": 1})
    assert doc.centroid == Centroid(lat=1.0, lon=1.0)


def test_centroid_missing():
    doc = _single({"id": 1, "type": "X"})
    assert doc.centroid is None


def test_centroid_accepts_zero_values():
    doc = _single({"id": 1, "type": "X", "lat": 0, "lon": 0})
    assert doc.centroid == Centroid(lat=0.0, lon=0.0)


def test_centroid_from_preprocessed_centroid_property():
    doc = _single({"id": 1, "type": "X", "centroid": {"lat": 1, "lon": 2}})
    assert doc.centroid == Centroid(lat=1.0, lon=2.0)


def test_centroid_prefers_lat_lon_to_centroid():
    doc = _single({"id": 1, "type": "X", "lat": 1, "lon": 1, "centroid": {"lat": 2, "lon": 2}})
    assert doc.centroid == Centroid(lat=1.0, lon=1.0)


def test_centroid_uses_property_when_only_one_of_lat_lon_present():
    doc = _single({"id": 1, "type": "X", "lat": 1, "centroid": {"lat": 2, "lon": 3}})
    assert doc.centroid == Centroid(lat=2.0, lon=3.0)


def test_out_of_range_centroid_drops_record():
    assert list(run_document_constructor([{"id": 1, "lat": 95, "lon": 0}])) == []


def test_centroid_reprojected_from_source_crs():
    from pyproj import Transformer

    x, y = Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True).transform(-2.1, 49.2)
    outcome = construct_document({"id": 1, "lat": y, "lon": x}, source_epsg=3857)

    assert outcome.ok
    assert abs(outcome.value.centroid.lat - 49.2) < 1e-5
    assert abs(outcome.value.centroid.lon - (-2.1)) < 1e-5


def test_noderefs_set_verbatim():
    node_data = ["X", "Y"]
    doc = _single({"id": 1, "type": "X", "nodes": node_data})
    assert doc.get_meta("nodes") is node_data


def test_noderefs_absent():
    doc = _single({"id": 1, "type": "X"})
    assert not doc.get_meta("nodes")
    assert "nodes" not in doc.meta


def test_tags_set_verbatim():
    tag_data = ["X", "Y"]
    doc = _single({"id": 1, "type": "X", "tags": tag_data})
    assert doc.get_meta("tags") is tag_data


def test_tags_absent():
    doc = _single({"id": 1, "type": "X"})
    assert "tags" not in doc.meta


def test_output_order_follows_input():
    records = [{"id": 3}, {}, {"id": 1}, {"id": 2}]
    assert [doc.id for doc in run_document_constructor(records)] == ["3", "1", "2"]


def test_custom_source_and_default_type():
    outcome = construct_document({"id": 7}, source="osm-extract", default_type="poi")
    assert outcome.value.source == "osm-extract"
    assert outcome.value.source_type == "poi"
