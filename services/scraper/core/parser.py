"""
Parser module - Extracts collection dates per waste type from the karlsruhe.de calendar page

The page lists one ".row" per waste type:
- ".col_3-2" holds the waste type name (e.g. "Restmüll, 14-täglich")
- ".col_3-3" holds the upcoming dates, one per line ("Fr. den 16.06.2023")
- bulky waste rows carry a single date in ".col_4-3" ("12.07.2023")

Holiday shifts are printed next to the moved date, e.g.
"Do. den 29.06.2023 (statt Fr. den 30.06.2023)". Only dates that open a text
node are collected, so the replaced date inside the note is skipped.
"""

import datetime
import logging
import re
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup, Tag

from services.common.exceptions import ScheduleUnavailableError
from services.scraper.core.models import (
    WASTE_TYPE_LABELS,
    CollectionEvent,
    WasteData,
    WasteType,
)
from services.scraper.core.validator import ensure_schedule_available

logger = logging.getLogger(__name__)

ROW_SELECTOR = ".row"
TYPE_COLUMN_SELECTOR = ".col_3-2"
DATE_COLUMN_SELECTOR = ".col_3-3"
BULKY_DATE_COLUMN_SELECTOR = ".col_4-3"

# "Fr. den 16.06.2023" - short weekday with dot, "den", then the date
DATE_PATTERN = re.compile(
    r"""
    \w{2}\.\s+          # weekday in short notation
    den\s+
    (?P<day>\d{2})\.
    (?P<month>\d{2})\.
    (?P<year>\d{4})
    """,
    re.VERBOSE,
)
BULKY_DATE_PATTERN = re.compile(r"(?P<day>\d{2})\.(?P<month>\d{2})\.(?P<year>\d{4})")


def _date_from_match(match: re.Match) -> Optional[datetime.date]:
    try:
        return datetime.date(int(match["year"]), int(match["month"]), int(match["day"]))
    except ValueError:
        logger.warning("Skipping impossible date %r", match.group(0))
        return None


def _matching_dates(texts: Iterable[str], pattern: re.Pattern) -> List[datetime.date]:
    dates = []
    for text in texts:
        match = pattern.match(text)
        if not match:
            continue
        parsed = _date_from_match(match)
        if parsed is not None:
            dates.append(parsed)
    return dates


def extract_dates_from_column(column: Optional[Tag]) -> List[datetime.date]:
    """
    Extract all "<weekday>. den DD.MM.YYYY" dates from a date column

    Args:
        column: The ".col_3-3" element (None yields no dates)

    Returns:
        Dates in page order
    """
    if column is None:
        return []
    return _matching_dates(column.stripped_strings, DATE_PATTERN)


def extract_bulky_date(column: Optional[Tag]) -> Optional[datetime.date]:
    """Extract the single bulky waste pickup date, if announced."""
    if column is None:
        return None
    dates = _matching_dates(column.stripped_strings, BULKY_DATE_PATTERN)
    return dates[0] if dates else None


def detect_waste_type(type_text: str, has_dates: bool, has_bulky_date: bool) -> Optional[WasteType]:
    """
    Map a type column text to a waste type

    Periodic waste types only count when the row has a date column, bulky
    waste only when it has the bulky date column.
    """
    for waste_type, label in WASTE_TYPE_LABELS.items():
        if label not in type_text:
            continue
        if waste_type is WasteType.BULKY and has_bulky_date:
            return waste_type
        if waste_type is not WasteType.BULKY and has_dates:
            return waste_type
    return None


def parse_schedule_html(html: str) -> WasteData:
    """
    Parse the calendar page into waste data

    Args:
        html: Page returned for an address

    Returns:
        WasteData with the dates found per waste type

    Raises:
        ScheduleUnavailableError: If no row of the page names a known waste type
    """
    soup = BeautifulSoup(html or "", "html.parser")
    waste_data = WasteData()
    recognised_rows = 0

    for row in soup.select(ROW_SELECTOR):
        type_column = row.select_one(TYPE_COLUMN_SELECTOR)
        if type_column is None:
            continue

        date_column = row.select_one(DATE_COLUMN_SELECTOR)
        bulky_column = row.select_one(BULKY_DATE_COLUMN_SELECTOR)
        type_text = type_column.get_text(" ", strip=True)
        waste_type = detect_waste_type(type_text, date_column is not None, bulky_column is not None)
        if waste_type is None:
            logger.debug("Ignoring row with type column %r", type_text)
            continue

        recognised_rows += 1
        if waste_type is WasteType.BULKY:
            waste_data.bulky = extract_bulky_date(bulky_column)
        else:
            setattr(waste_data, waste_type.value, extract_dates_from_column(date_column))

    if recognised_rows == 0:
        raise ScheduleUnavailableError("Waste calendar page could not be recognised")

    return waste_data


def filter_past_events(
    events: List[CollectionEvent], since: Optional[datetime.date]
) -> List[CollectionEvent]:
    """Drop events before `since` (keeps everything when since is None)."""
    if since is None:
        return list(events)
    return [event for event in events if event.date >= since]


def extract_collection_events(
    html: str, since: Optional[datetime.date] = None
) -> List[CollectionEvent]:
    """
    Parse, validate and flatten a calendar page into collection events

    Args:
        html: Page returned for an address
        since: If given, events before this date are dropped

    Returns:
        Events in chronological order

    Raises:
        ScheduleUnavailableError: If the page is unrecognisable, has no dates,
            or has no dates left on or after `since`
    """
    waste_data = parse_schedule_html(html)
    ensure_schedule_available(waste_data)
    events = waste_data.to_events()
    upcoming = filter_past_events(events, since)
    if not upcoming:
        logger.warning("All %d collection dates are before %s", len(events), since)
        raise ScheduleUnavailableError(f"No upcoming collection dates (since {since})")
    return upcoming
