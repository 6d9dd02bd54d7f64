from datetime import date, datetime, timezone

import pytest

from conftest import TODAY, raw_event
from jobmail.models import JOB_STATUSES, CanonicalJobEvent
from jobmail.normalizer import normalize_event, normalize_events, parse_date, resolve


def test_canonical_names():
    ev = normalize_event(raw_event("m1"), today=TODAY)
    assert ev == CanonicalJobEvent(
        message_id="m1",
        company="Acme",
        title="Engineer",
        status="applied",
        applied_date=date(2025, 3, 1),
        subject="Thanks for applying (m1)",
        snippet="We received your application.",
        link="https://mail.google.com/mail/u/0/#all/m1",
    )


def test_pascal_case_variants():
    ev = normalize_event(
        {
            "MessageID": "m2",
            "Company": "Globex",
            "Position": "Analyst",
            "Status": "Interviewing",
            "AppliedDate": "2025-02-14",
            "Subject": "Next steps",
            "Snippet": "Let's talk",
            "Link": "https://example.com/m2",
        },
        today=TODAY,
    )
    assert ev.message_id == "m2"
    assert ev.company == "Globex"
    assert ev.title == "Analyst"
    assert ev.status == "interviewing"
    assert ev.applied_date == date(2025, 2, 14)
    assert ev.subject == "Next steps"
    assert ev.snippet == "Let's talk"
    assert ev.link == "https://example.com/m2"


def test_snake_case_variants():
    ev = normalize_event({"message_id": "m3", "position": "Dev", "applied_date": "2025-01-05"}, today=TODAY)
    assert ev.message_id == "m3"
    assert ev.title == "Dev"
    assert ev.applied_date == date(2025, 1, 5)


def test_first_non_empty_variant_wins():
    ev = normalize_event({"messageId": "", "message_id": "m4", "title": "", "Position": "Lead"}, today=TODAY)
    assert ev.message_id == "m4"
    assert ev.title == "Lead"
    assert resolve({"a": None, "b": "", "c": "x"}, ("a", "b", "c")) == "x"
    assert resolve({}, ("a",)) is None


def test_empty_record_gets_defaults():
    ev = normalize_event({}, today=TODAY)
    assert ev == CanonicalJobEvent(message_id="", status="applied", applied_date=TODAY)


@pytest.mark.parametrize("raw", [None, "junk", 42, ["messageId", "x"]])
def test_malformed_records_never_raise(raw):
    ev = normalize_event(raw, today=TODAY)
    assert ev.message_id == ""
    assert ev.applied_date == TODAY


def test_unknown_status_falls_back_to_applied():
    assert normalize_event({"status": "ghosted"}, today=TODAY).status == "applied"
    assert normalize_event({"status": "  OFFER "}, today=TODAY).status == "offer"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2025-03-04T10:00:00Z", date(2025, 3, 4)),
        ("2025-03-04T10:00:00.000Z", date(2025, 3, 4)),
        ("2025-03-04T23:30:00-05:00", date(2025, 3, 5)),
        ("Tue, 04 Mar 2025 23:30:00 -0500", date(2025, 3, 5)),
        (1741132800000, date(2025, 3, 5)),
        (1741132800, date(2025, 3, 5)),
        (datetime(2025, 3, 4, 22, 0, tzinfo=timezone.utc), date(2025, 3, 4)),
        (date(2024, 12, 31), date(2024, 12, 31)),
    ],
)
def test_parse_date_formats(value, expected):
    assert parse_date(value) == expected


@pytest.mark.parametrize(
    "value",
    [
        "not a date",
        "",
        "0001-01-01T00:00:00Z",
        True,
        object(),
        "9999-12-31T23:00:00-05:00",
        "0001-01-01T00:30:00+01:00",
        "Fri, 31 Dec 9999 23:00:00 -0500",
        10**400,
        float("inf"),
        float("nan"),
    ],
)
def test_unparseable_dates_default_to_today(value):
    ev = normalize_event({"messageId": "m5", "appliedDate": value}, today=TODAY)
    assert ev.applied_date == TODAY


def test_out_of_range_date_does_not_drop_the_batch():
    events = normalize_events(
        [{"messageId": "a"}, {"messageId": "b", "appliedDate": "9999-12-31T23:00:00-05:00"}],
        today=TODAY,
    )
    assert [e.message_id for e in events] == ["a", "b"]
    assert events[1].applied_date == TODAY


def test_every_field_defined_for_partial_records():
    for raw in ({"Company": "X"}, {"snippet": "hi"}, {"AppliedDate": "garbage", "status": None}):
        ev = normalize_event(raw, today=TODAY)
        assert ev.status in JOB_STATUSES
        assert isinstance(ev.applied_date, date)
        for text in (ev.message_id, ev.company, ev.title, ev.subject, ev.snippet, ev.link):
            assert isinstance(text, str)


def test_normalizing_canonical_event_is_identity():
    ev = normalize_event(
        {"MessageID": "m6", "Company": "Initech", "Position": "QA", "Status": "offer",
         "AppliedDate": "Mon, 03 Feb 2025 08:00:00 +0000", "Subject": "Offer", "Snippet": "Congrats"},
        today=TODAY,
    )
    other_day = date(2030, 1, 1)
    assert normalize_event(ev.to_dict(), today=other_day) == ev
    assert normalize_event(ev, today=other_day) == ev


def test_normalize_events_preserves_order_and_length():
    raws = [raw_event("a"), {}, raw_event("c"), None]
    events = normalize_events(raws, today=TODAY)
    assert [e.message_id for e in events] == ["a", "", "c", ""]
