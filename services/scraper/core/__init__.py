"""
Core scraper modules - fetch, parse and validate the karlsruhe.de waste calendar
"""

from services.scraper.core.fetcher import DEFAULT_URL, fetch_schedule_html
from services.scraper.core.models import (
    WASTE_TYPE_LABELS,
    CollectionEvent,
    ScheduleQuery,
    WasteData,
    WasteType,
)
from services.scraper.core.parser import (
    extract_collection_events,
    filter_past_events,
    parse_schedule_html,
)
from services.scraper.core.validator import ensure_schedule_available, validate_waste_data

__all__ = [
    "fetch_schedule_html",
    "DEFAULT_URL",
    "WASTE_TYPE_LABELS",
    "CollectionEvent",
    "ScheduleQuery",
    "WasteData",
    "WasteType",
    "parse_schedule_html",
    "extract_collection_events",
    "filter_past_events",
    "validate_waste_data",
    "ensure_schedule_available",
]
