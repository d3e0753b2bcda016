"""
Calendar service - builds iCalendar feeds from collection events
Used by both the HTTP API and the CLI
"""

import datetime
import logging
import re
from typing import Iterable, List, Optional

from icalendar import Calendar, Event

import config
from services.common.logging_utils import setup_logging
from services.scraper.core.models import CollectionEvent, ScheduleQuery, WasteType
from services.scraper.main import get_collection_events

setup_logging()
logger = logging.getLogger(__name__)

PROD_ID_PARTS = ["Abfuhrkalender", "karlsruhe.de"]
UID_DOMAIN = "karlsruhe.de"
CITY = "Karlsruhe"
DATE_FORMAT = "%Y%m%d"

_WHITESPACE = re.compile(r"\s+")


def filter_events(
    events: Iterable[CollectionEvent], excluded: Iterable[WasteType]
) -> List[CollectionEvent]:
    """Remove events of excluded waste types, keeping order."""
    excluded = frozenset(excluded)
    return [event for event in events if event.waste_type not in excluded]


def prod_id(included: List[WasteType]) -> str:
    """
    PRODID of a calendar

    Calendars for exactly one waste type carry its label, so subscriptions
    for different bins are told apart by calendar apps.
    """
    parts = list(PROD_ID_PARTS)
    if len(included) == 1:
        parts.insert(0, included[0].label)
    return "//".join(["-"] + parts)


def calendar_name(query: ScheduleQuery) -> str:
    """Display name; single waste type feeds carry the label like prod_id."""
    name = f"Abfuhrkalender {query.street} {query.street_number}"
    included = query.included
    if len(included) == 1:
        name = f"{name} {included[0].label}"
    return name


def event_uid(street: str, street_number: str, event: CollectionEvent) -> str:
    """
    Unique id of a pickup at an address.

    Changing this breaks existing subscriptions (clients would see every
    event as new).
    """
    street = _WHITESPACE.sub("-", street.strip())
    street_number = _WHITESPACE.sub("-", street_number.strip())
    summary = _WHITESPACE.sub("-", event.waste_type.label)
    return f"Abfuhrkalender_{street}_{street_number}_{summary}_{event.date.strftime(DATE_FORMAT)}@{UID_DOMAIN}"


def build_event(
    event: CollectionEvent,
    street: str,
    street_number: str,
    stamp: datetime.datetime,
) -> Event:
    """Build an all-day VEVENT for one pickup."""
    ical_event = Event()
    ical_event.add("uid", event_uid(street, street_number, event))
    ical_event.add("dtstamp", stamp)
    ical_event.add("dtstart", event.date)
    ical_event.add("dtend", event.date + datetime.timedelta(days=1))
    ical_event.add("summary", event.waste_type.label)
    ical_event.add("categories", [event.waste_type.value])
    ical_event.add("location", f"{street} {street_number}, {CITY}")
    ical_event.add("description", config.SOURCE_URL)
    ical_event.add("transp", "TRANSPARENT")
    return ical_event


def build_calendar(
    query: ScheduleQuery,
    events: Iterable[CollectionEvent],
    stamp: Optional[datetime.datetime] = None,
) -> Calendar:
    """
    Build the calendar for a query

    Args:
        query: Address and excluded waste types
        events: Collection events for the address
        stamp: DTSTAMP for all events (defaults to now, UTC)

    Returns:
        icalendar Calendar with one event per remaining pickup
    """
    if stamp is None:
        stamp = datetime.datetime.now(datetime.timezone.utc)

    calendar = Calendar()
    calendar.add("prodid", prod_id(query.included))
    calendar.add("version", "2.0")
    calendar.add("calscale", "GREGORIAN")
    calendar.add("x-wr-calname", calendar_name(query))
    calendar.add("x-wr-timezone", config.CALENDAR_TIMEZONE)

    kept = filter_events(events, query.excluded)
    for event in sorted(kept, key=lambda e: e.date):
        calendar.add_component(build_event(event, query.street, query.street_number, stamp))

    logger.debug("Built calendar with %d events (excluded: %s)", len(kept), sorted(query.excluded))
    return calendar


def generate_calendar(query: ScheduleQuery) -> bytes:
    """
    Fetch, extract and serialize the calendar for a query

    Raises:
        ScheduleUnavailableError: If the address yields no usable schedule
    """
    events = get_collection_events(query.street, query.street_number)
    return build_calendar(query, events).to_ical()
