from datetime import datetime, timezone

import pytest

from conftest import run
from hopehub.config import Settings
from hopehub.core.domain_models import (
    Campaign,
    Donation,
    Request,
    RequestStatus,
    RequestType,
    ResourceLink,
)
from hopehub.core.errors import DocumentError, PersistError, QueryError
from hopehub.core.time_utils import coerce_timestamp
from hopehub.core.utils import clean_items, clean_or_none
from hopehub.storage.gateway import SERVER_TIMESTAMP
from hopehub.storage.memory_gateway import InMemoryGateway
from hopehub.storage.mongo_gateway import to_mongo_filter, to_public

REQUEST_DOC = {
    "id": "abc",
    "requestType": "library",
    "name": "Town Library",
    "contactNumber": "011",
    "district": "Jaffna",
    "cityTown": "Nallur",
    "description": "Roof leak damaged books",
    "items": ["Shelves"],
    "proofFiles": ["https://cdn.example.org/a.pdf"],
    "createdAt": "2024-05-01T10:00:00Z",
}


def test_request_round_trips_through_its_document():
    request = Request.from_document(REQUEST_DOC)

    assert request.request_type == RequestType.LIBRARY
    assert request.status == RequestStatus.OPEN
    assert request.created_at == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)
    assert request.map_link is None
    doc = request.to_document()
    assert "donationCount" not in doc
    assert "id" not in doc
    assert doc["cityTown"] == "Nallur"


@pytest.mark.parametrize("missing", ["id", "requestType", "name", "contactNumber", "district", "cityTown"])
def test_request_missing_required_field(missing):
    doc = {k: v for k, v in REQUEST_DOC.items() if k != missing}

    with pytest.raises(DocumentError):
        Request.from_document(doc)


def test_request_with_unknown_type_or_bad_items():
    with pytest.raises(DocumentError):
        Request.from_document(dict(REQUEST_DOC, requestType="hospital"))
    with pytest.raises(DocumentError):
        Request.from_document(dict(REQUEST_DOC, items="Shelves"))


def test_document_error_is_a_query_error():
    assert issubclass(DocumentError, QueryError)


def test_donation_decoding():
    donation = Donation.from_document({
        "id": "d1", "requestId": "abc", "donorName": "Ravi", "donorContact": "077",
        "donationItems": "Books", "requestType": "student", "donorLocation": "",
    })

    assert donation.request_type == RequestType.STUDENT
    assert donation.donor_location is None
    assert donation.created_at is None

    with pytest.raises(DocumentError):
        Donation.from_document({"id": "d2", "requestId": "abc", "donorName": "Ravi"})


def test_campaign_and_resource_link_decoding():
    campaign = Campaign.from_document({"id": "c1", "title": "Books for Jaffna", "posterUrl": "https://x/p.png"})
    link = ResourceLink.from_document(
        {"id": "r1", "_id": "raw", "url": "https://e.org", "level": "school"}, "education-site"
    )

    assert campaign.poster_url == "https://x/p.png"
    assert link.details == {"level": "school"}
    with pytest.raises(DocumentError):
        Campaign.from_document({"id": "c2"})


def test_coerce_timestamp():
    naive = datetime(2024, 1, 1, 12)

    assert coerce_timestamp(naive).tzinfo == timezone.utc
    assert coerce_timestamp(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)
    assert coerce_timestamp("1 March 2024") == datetime(2024, 3, 1, tzinfo=timezone.utc)
    assert coerce_timestamp("not a date") is None
    assert coerce_timestamp("") is None
    assert coerce_timestamp(None) is None
    assert coerce_timestamp(True) is None


def test_text_helpers():
    assert clean_items([" a ", "", None, "b"]) == ["a", "b"]
    assert clean_or_none("  ") is None


def test_memory_gateway_resolves_server_timestamp_and_isolates_state():
    stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
    gateway = InMemoryGateway(clock=lambda: stamp)
    fields = {"url": "u", "createdAt": SERVER_TIMESTAMP, "tags": ["a"]}

    doc_id = run(gateway.insert_document("c", fields))
    fields["tags"].append("b")
    fetched = run(gateway.query_documents("c", {"id": doc_id}))
    fetched[0]["url"] = "changed"

    assert fields["createdAt"] is SERVER_TIMESTAMP
    stored = run(gateway.query_documents("c"))[0]
    assert stored == {"id": doc_id, "url": "u", "createdAt": stamp, "tags": ["a"]}


def test_memory_gateway_failures_raise_store_errors():
    gateway = InMemoryGateway(fail_when=lambda op, coll, f: True)

    with pytest.raises(PersistError):
        run(gateway.insert_document("c", {}))
    with pytest.raises(QueryError):
        run(gateway.query_documents("c"))


def test_mongo_document_mapping():
    oid = "65f1c2a9e4b0a1b2c3d4e5f6"

    query = to_mongo_filter({"id": oid, "url": "u"})

    assert str(query["_id"]) == oid
    assert query["url"] == "u"
    assert to_mongo_filter({"id": "not-an-object-id"})["_id"] == "not-an-object-id"
    assert to_public({"_id": query["_id"], "url": "u"}) == {"id": oid, "url": "u"}


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("MONGO_DB_NAME", "hopehub_test")
    monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "demo")
    monkeypatch.delenv("CLOUDINARY_UPLOAD_PRESET", raising=False)
    monkeypatch.setenv("HOPEHUB_LISTING_LIMIT", "25")

    settings = Settings.from_env(tmp_path / "missing.env")

    assert settings.mongo_db_name == "hopehub_test"
    assert settings.cloudinary_cloud_name == "demo"
    assert settings.cloudinary_upload_preset is None
    assert settings.listing_limit == 25
