"""
Tests for iCalendar generation
"""
import datetime
from unittest.mock import patch

import pytest
from icalendar import Calendar

from services.calendar import (
    build_calendar,
    event_uid,
    filter_events,
    generate_calendar,
    prod_id,
)
from services.common.exceptions import ScheduleUnavailableError
from services.scraper.core.models import CollectionEvent, ScheduleQuery, WasteType

STAMP = datetime.datetime(2023, 6, 1, 8, 0, tzinfo=datetime.timezone.utc)


def _query(*excluded):
    return ScheduleQuery(street="street", street_number="69", excluded=frozenset(excluded))


def _events_by_summary(calendar, summary):
    return [component for component in calendar.walk("VEVENT") if str(component.get("summary")) == summary]


def test_build_calendar_all(sample_events):
    calendar = build_calendar(_query(), sample_events, stamp=STAMP)
    events = calendar.walk("VEVENT")
    assert len(events) == 13

    residual = _events_by_summary(calendar, "Restmüll")
    assert [event.decoded("dtstart") for event in residual] == [
        datetime.date(2023, 6, 16),
        datetime.date(2023, 6, 29),
        datetime.date(2023, 7, 14),
    ]


def test_events_are_all_day(sample_events):
    calendar = build_calendar(_query(), sample_events, stamp=STAMP)
    event = _events_by_summary(calendar, "Sperrmüllabholung")[0]
    assert event.decoded("dtstart") == datetime.date(2023, 7, 12)
    assert event.decoded("dtend") == datetime.date(2023, 7, 13)
    assert b"DTSTART;VALUE=DATE:20230712" in event.to_ical()
    assert str(event.get("transp")) == "TRANSPARENT"
    assert str(event.get("location")) == "street 69, Karlsruhe"


def test_build_calendar_exclusion(sample_events):
    calendar = build_calendar(_query(WasteType.BULKY), sample_events, stamp=STAMP)
    assert len(calendar.walk("VEVENT")) == 12
    assert not _events_by_summary(calendar, "Sperrmüllabholung")

    calendar = build_calendar(_query(WasteType.RECYCLABLE, WasteType.ORGANIC), sample_events, stamp=STAMP)
    assert len(calendar.walk("VEVENT")) == 7
    assert not _events_by_summary(calendar, "Wertstoff")
    assert not _events_by_summary(calendar, "Bioabfall")
    assert len(_events_by_summary(calendar, "Restmüll")) == 3
    assert len(_events_by_summary(calendar, "Papier")) == 3


def test_excluding_everything_gives_empty_calendar(sample_events):
    calendar = build_calendar(_query(*WasteType), sample_events, stamp=STAMP)
    assert calendar.walk("VEVENT") == []
    assert str(calendar.get("version")) == "2.0"


def test_round_trip(sample_events):
    """Test date and waste type of every event survive serialization"""
    data = build_calendar(_query(), sample_events, stamp=STAMP).to_ical()
    parsed = Calendar.from_ical(data)

    labels = {waste_type.label: waste_type for waste_type in WasteType}
    recovered = {
        CollectionEvent(date=component.decoded("dtstart"), waste_type=labels[str(component.get("summary"))])
        for component in parsed.walk("VEVENT")
    }
    assert recovered == set(sample_events)

    by_category = {
        CollectionEvent(
            date=component.decoded("dtstart"),
            waste_type=WasteType(str(component.get("categories").cats[0])),
        )
        for component in parsed.walk("VEVENT")
    }
    assert by_category == set(sample_events)
    assert all(len(component.get("categories").cats) == 1 for component in parsed.walk("VEVENT"))


def test_calendar_properties(sample_events):
    calendar = build_calendar(_query(), sample_events, stamp=STAMP)
    assert str(calendar.get("prodid")) == "-//Abfuhrkalender//karlsruhe.de"
    assert str(calendar.get("calscale")) == "GREGORIAN"
    assert str(calendar.get("x-wr-timezone")) == "Europe/Berlin"
    assert str(calendar.get("x-wr-calname")) == "Abfuhrkalender street 69"


def test_single_type_calendar_name(sample_events):
    """Test a one-bin feed is named after its waste type"""
    query = _query(*[waste_type for waste_type in WasteType if waste_type is not WasteType.PAPER])
    calendar = build_calendar(query, sample_events, stamp=STAMP)
    assert str(calendar.get("x-wr-calname")) == "Abfuhrkalender street 69 Papier"


def test_uids_are_unique_and_stable(sample_events):
    first = build_calendar(_query(), sample_events, stamp=STAMP)
    second = build_calendar(_query(), sample_events)
    first_uids = [str(event.get("uid")) for event in first.walk("VEVENT")]
    second_uids = [str(event.get("uid")) for event in second.walk("VEVENT")]
    assert len(set(first_uids)) == len(first_uids)
    assert first_uids == second_uids


def test_event_uid_replaces_whitespace():
    event = CollectionEvent(date=datetime.date(2023, 6, 14), waste_type=WasteType.PAPER)
    assert event_uid("Am  Fasanengarten", "3 a", event) == (
        "Abfuhrkalender_Am-Fasanengarten_3-a_Papier_20230614@karlsruhe.de"
    )


def test_prod_id():
    assert prod_id(list(WasteType)) == "-//Abfuhrkalender//karlsruhe.de"
    assert prod_id([WasteType.PAPER]) == "-//Papier//Abfuhrkalender//karlsruhe.de"
    assert prod_id([WasteType.PAPER, WasteType.BULKY]) == "-//Abfuhrkalender//karlsruhe.de"


def test_filter_events_removes_only_excluded(sample_events):
    for waste_type in WasteType:
        kept = filter_events(sample_events, {waste_type})
        assert all(event.waste_type is not waste_type for event in kept)
        assert len(kept) == len(sample_events) - sum(
            1 for event in sample_events if event.waste_type is waste_type
        )


def test_generate_calendar(sample_events):
    with patch("services.calendar.get_collection_events", return_value=sample_events) as mock_get:
        data = generate_calendar(_query(WasteType.PAPER))

    mock_get.assert_called_once_with("street", "69")
    assert data.startswith(b"BEGIN:VCALENDAR")
    assert len(Calendar.from_ical(data).walk("VEVENT")) == 10


def test_generate_calendar_propagates_unavailable():
    with patch(
        "services.calendar.get_collection_events",
        side_effect=ScheduleUnavailableError("No collection dates available"),
    ):
        with pytest.raises(ScheduleUnavailableError):
            generate_calendar(_query())
