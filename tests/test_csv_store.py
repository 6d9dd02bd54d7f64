import csv

import pytest

from jobmail.errors import ValidationError
from jobmail.models import ImportRequest
from jobmail.store.csv_store import HEADERS, CsvApplicationStore


def _request(message_id="m1", **overrides):
    fields = dict(
        company="Acme",
        position="Engineer",
        status="applied",
        notes="[Imported from Gmail] Thanks for applying",
        gmail_message_id=message_id,
        applied_date="2025-03-01T00:00:00Z",
        url="https://mail.google.com/mail/u/0/#all/m1",
    )
    fields.update(overrides)
    return ImportRequest(**fields)


@pytest.fixture
def store(tmp_path):
    return CsvApplicationStore(tmp_path / "data" / "applications.csv")


def test_creates_file_with_headers(store):
    assert store.list().items == []
    with open(store.path, newline="", encoding="utf-8") as f:
        assert next(csv.reader(f)) == HEADERS


def test_create_then_list(store):
    app = store.create(_request("m1"))
    store.create(_request("m2", company="Globex", status="rejected", url=None))
    assert app.id == "1"
    assert app.gmail_message_id == "m1"

    listing = store.list()
    assert [a.id for a in listing.items] == ["1", "2"]
    assert listing.items[1].url is None
    assert listing.aggregate_counts["applied"] == 1
    assert listing.aggregate_counts["rejected"] == 1
    assert listing.aggregate_counts["offer"] == 0


def test_duplicate_message_id_returns_existing_record(store):
    first = store.create(_request("m1"))
    again = store.create(_request("m1", company="Other"))
    assert again.id == first.id
    assert again.company == "Acme"
    assert len(store.list().items) == 1


def test_blank_message_ids_are_not_deduplicated(store):
    store.create(_request(""))
    store.create(_request(""))
    items = store.list().items
    assert len(items) == 2
    assert all(a.gmail_message_id is None for a in items)


@pytest.mark.parametrize("overrides", [{"company": " "}, {"position": ""}, {"status": "ghosted"}])
def test_invalid_payloads_are_rejected(store, overrides):
    with pytest.raises(ValidationError):
        store.create(_request(**overrides))
    assert store.list().items == []


def test_list_filters(store):
    store.create(_request("m1", company="Acme", position="Engineer"))
    store.create(_request("m2", company="Globex", position="Analyst", status="interviewing"))
    assert [a.gmail_message_id for a in store.list({"status": "interviewing"}).items] == ["m2"]
    assert [a.gmail_message_id for a in store.list({"company": "acm"}).items] == ["m1"]
    assert [a.gmail_message_id for a in store.list({"search": "analyst"}).items] == ["m2"]
    counts = store.list({"status": "interviewing"}).aggregate_counts
    assert counts["applied"] == 1 and counts["interviewing"] == 1
