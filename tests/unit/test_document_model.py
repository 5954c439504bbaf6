import dataclasses

import pytest

from osm_importer.common.document import Centroid, Document, DocumentBuilder
from osm_importer.common.errors import DocumentError


@pytest.mark.parametrize(
    ("source", "source_type", "record_id"),
    [
        ("", "venue", "1"),
        ("osm", "", "1"),
        ("osm", None, "1"),
        ("osm", "venue", None),
        ("osm", "venue", ""),
        ("osm", "venue", "   "),
        ("osm", "venue", False),
        ("osm", "venue", 1.5),
    ],
)
def test_builder_rejects_invalid_identity(source, source_type, record_id):
    with pytest.raises(DocumentError):
        DocumentBuilder(source, source_type, record_id)


def test_builder_accepts_integer_id_and_stores_string():
    doc = DocumentBuilder("osm", "venue", 42).build()
    assert doc.id == "42"
    assert doc.meta == {"id": "42", "type": "venue"}


def test_document_is_frozen():
    doc = DocumentBuilder("osm", "venue", 1).build()
    with pytest.raises(dataclasses.FrozenInstanceError):
        doc.id = "2"


def test_build_does_not_share_builder_state():
    builder = DocumentBuilder("osm", "venue", 1).set_name("default", "A")
    doc = builder.build()
    builder.set_name("default", "B")
    assert doc.get_name("default") == "A"


@pytest.mark.parametrize(
    "centroid",
    [
        {"lat": 91, "lon": 0},
        {"lat": 0, "lon": -181},
        {"lat": "1", "lon": 1},
        {"lat": True, "lon": 1},
        {"lat": float("nan"), "lon": 1},
        {"lat": 1},
        [1, 2],
    ],
)
def test_set_centroid_rejects_invalid_values(centroid):
    with pytest.raises(DocumentError):
        DocumentBuilder("osm", "venue", 1).set_centroid(centroid)


def test_set_centroid_accepts_centroid_instance_and_zero():
    doc = DocumentBuilder("osm", "venue", 1).set_centroid(Centroid(lat=0, lon=0)).build()
    assert doc.centroid == Centroid(lat=0.0, lon=0.0)


def test_set_address_validates_property_and_zip():
    builder = DocumentBuilder("osm", "venue", 1)
    with pytest.raises(DocumentError):
        builder.set_address("country", "UK")
    with pytest.raises(DocumentError):
        builder.set_address("street", "")
    with pytest.raises(DocumentError):
        builder.set_address("zip", "##")
    builder.set_address("zip", "10115").set_address("zip", "SW1A 1AA").set_address("zip", "02-495")
    assert builder.build().get_address("zip") == "02-495"


def test_set_alpha3_upper_cases_and_validates():
    builder = DocumentBuilder("osm", "venue", 1)
    assert builder.set_alpha3("gbr").build().alpha3 == "GBR"
    for value in ("GB", "GBRX", "G1R", None):
        with pytest.raises(DocumentError):
            builder.set_alpha3(value)


def test_set_admin_validates_level():
    builder = DocumentBuilder("osm", "venue", 1)
    builder.set_admin("admin1_abbr", "CA")
    with pytest.raises(DocumentError):
        builder.set_admin("county", "Kent")
    with pytest.raises(DocumentError):
        builder.set_admin("locality", 7)
    assert builder.build().admin == {"admin1_abbr": "CA"}


def test_replace_meta_deep_copies_and_keeps_identity():
    source_meta = {"id": "other", "type": "venue", "nodes": [[1, 2]]}
    doc = DocumentBuilder("osm", "address", "a-1").replace_meta(source_meta).build()

    assert doc.meta["id"] == "a-1"
    assert doc.meta["type"] == "address"
    source_meta["nodes"][0].append(3)
    assert doc.meta["nodes"] == [[1, 2]]


def test_to_dict_and_from_dict():
    doc = (
        DocumentBuilder("osm", "venue", "node/1")
        .set_source_id("node/1")
        .set_name("default", "Cafe")
        .set_centroid({"lat": 0, "lon": 0})
        .set_address("street", "Main St")
        .set_admin("locality", "London")
        .set_alpha3("GBR")
        .set_meta("tags", ["amenity=cafe"])
        .build()
    )
    payload = doc.to_dict()

    assert payload["centroid"] == {"lat": 0.0, "lon": 0.0}
    assert Document.from_dict(payload) == doc


def test_from_dict_rejects_invalid_payloads():
    with pytest.raises(DocumentError):
        Document.from_dict([])
    with pytest.raises(DocumentError):
        Document.from_dict({"source": "osm", "source_type": "venue"})
    with pytest.raises(DocumentError):
        Document.from_dict({"source": "osm", "source_type": "venue", "id": "1", "name": "Cafe"})


def test_from_dict_without_centroid():
    doc = Document.from_dict({"source": "osm", "source_type": "venue", "id": "1", "centroid": None})
    assert doc.centroid is None
    assert doc.source_id is None
