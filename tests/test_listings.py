from datetime import datetime, timedelta, timezone

import pytest

from conftest import run
from hopehub.config import Settings
from hopehub.core.domain_models import ResourceLink
from hopehub.listings.resource_links import (
    RESOURCE_KINDS,
    ResourceType,
    all_listings,
    education_labels,
    listing_for,
)
from hopehub.storage.memory_gateway import InMemoryGateway

BASE = datetime(2024, 3, 1, tzinfo=timezone.utc)


def seed(gateway, collection, count):
    for i in range(count):
        run(gateway.insert_document(collection, {
            "url": f"https://example.org/{i}",
            "subject": "Maths",
            "createdAt": BASE + timedelta(hours=i),
        }))


@pytest.mark.parametrize("resource_type", list(ResourceType))
def test_list_is_newest_first(resource_type):
    gateway = InMemoryGateway()
    collection = RESOURCE_KINDS[resource_type].collection
    seed(gateway, collection, 3)

    links = run(listing_for(resource_type, gateway).list())

    assert [link.url for link in links] == [
        "https://example.org/2", "https://example.org/1", "https://example.org/0",
    ]
    assert links[0].kind == resource_type.value
    assert links[0].details == {"subject": "Maths"}


def test_list_is_capped():
    gateway = InMemoryGateway()
    seed(gateway, "fileUploads", 120)

    links = run(listing_for(ResourceType.FILE_UPLOAD, gateway).list())

    assert len(links) == 100
    assert links[0].url == "https://example.org/119"


def test_list_retries_without_ordering():
    gateway = InMemoryGateway()
    seed(gateway, "oneDriveLinks", 2)
    # Mixed createdAt types make the ordered query fail
    gateway.collections["oneDriveLinks"][0]["createdAt"] = "yesterday"

    links = run(listing_for(ResourceType.CLOUD_DRIVE_LINK, gateway).list())

    assert [link.url for link in links] == ["https://example.org/0", "https://example.org/1"]
    ordered, unordered = [c for c in gateway.calls if c[0] == "query"]
    assert ordered == unordered


def test_list_returns_empty_when_both_attempts_fail():
    gateway = InMemoryGateway(fail_when=lambda op, coll, f: op == "query")

    assert run(listing_for(ResourceType.CHAT_GROUP_LINK, gateway).list()) == []
    assert len(gateway.calls) == 2


def test_malformed_records_are_skipped():
    gateway = InMemoryGateway()
    seed(gateway, "educationWebsites", 1)
    run(gateway.insert_document("educationWebsites", {"subject": "No url"}))

    links = run(listing_for(ResourceType.EDUCATION_SITE, gateway).list())

    assert len(links) == 1


@pytest.mark.parametrize("resource_type", list(ResourceType))
def test_duplicate_check_is_reflexive(resource_type):
    gateway = InMemoryGateway()
    listing = listing_for(resource_type, gateway)
    run(gateway.insert_document(listing.collection, {"url": "https://chat.whatsapp.com/Abc"}))

    assert run(listing.is_duplicate("https://chat.whatsapp.com/Abc"))
    assert run(listing.is_duplicate("  https://chat.whatsapp.com/Abc\n"))
    assert not run(listing.is_duplicate("https://chat.whatsapp.com/abc"))
    assert not run(listing.is_duplicate("https://chat.whatsapp.com/Other"))


def test_duplicate_check_fails_open():
    gateway = InMemoryGateway(fail_when=lambda op, coll, f: True)
    listing = listing_for(ResourceType.EDUCATION_SITE, gateway)

    assert run(listing.is_duplicate("https://example.org/0")) is False


def test_education_labels():
    university = ResourceLink(id="1", kind="education-site", url="u", details={
        "level": "university", "universityName": "University of Peradeniya",
        "year": 2, "grade": 11, "medium": "English",
    })
    school = ResourceLink(id="2", kind="education-site", url="u", details={
        "level": "school", "grade": 10, "medium": "all",
    })

    assert education_labels(university) == ["University of Peradeniya", "Year 2", "Medium: English"]
    assert education_labels(school) == ["Grade 10"]


def test_all_listings_use_configured_limit():
    listings = all_listings(InMemoryGateway(), Settings(listing_limit=10))

    assert set(listings) == set(ResourceType)
    assert all(listing.limit == 10 for listing in listings.values())
    assert listings[ResourceType.CHAT_GROUP_LINK].collection == "whatsappGroups"
