"""
Scraper entry point - turns an address into collection events
"""

import datetime
import logging
from typing import List, Optional

import config
from services.common.exceptions import ScheduleUnavailableError
from services.scraper.core.fetcher import fetch_schedule_html
from services.scraper.core.models import CollectionEvent
from services.scraper.core.parser import extract_collection_events

logger = logging.getLogger(__name__)


def today() -> datetime.date:
    return datetime.date.today()


def get_collection_events(
    street: str,
    street_number: str,
    since: Optional[datetime.date] = None,
) -> List[CollectionEvent]:
    """Fetch and extract all collection events for an address

    Args:
        street: Street name
        street_number: House number
        since: Drop events before this date. Defaults to today when
            config.SKIP_PAST_DATES is set, otherwise nothing is dropped.

    Raises:
        ScheduleUnavailableError: If the address yields no usable schedule
    """
    if since is None and config.SKIP_PAST_DATES:
        since = today()

    logger.info("Collecting waste calendar (street=%s, street_number=%s, since=%s)", street, street_number, since)

    html = fetch_schedule_html(street, street_number)
    try:
        events = extract_collection_events(html, since=since)
    except ScheduleUnavailableError as e:
        # Attach the address so the caller can report it
        raise ScheduleUnavailableError(e.message, street, street_number) from e

    logger.info("Found %d collection events for %s %s", len(events), street, street_number)
    return events
