"""
Validator module - Checks extracted waste data before it is turned into a calendar
"""

import logging
from typing import List, Tuple

from services.common.exceptions import ScheduleUnavailableError
from services.scraper.core.models import WasteData, WasteType

logger = logging.getLogger(__name__)


def validate_waste_data(waste_data: WasteData) -> Tuple[bool, List[str]]:
    """
    Validate extracted waste data

    Lenient: missing waste types are only warnings (not every address has
    every bin, and bulky waste is only listed once booked).

    Args:
        waste_data: Result of parse_schedule_html

    Returns:
        Tuple of (is_valid, list_of_warnings_or_errors)
    """
    warnings = []

    if waste_data.is_empty():
        return (False, ["No collection dates found for any waste type"])

    for waste_type in WasteType:
        dates = waste_data.dates_for(waste_type)
        if not dates:
            warnings.append(f"No dates found for {waste_type.label}")
            continue
        if dates != sorted(dates):
            warnings.append(f"Dates for {waste_type.label} are not in chronological order")

    for warning in warnings:
        logger.debug(warning)

    return (True, warnings)


def ensure_schedule_available(waste_data: WasteData) -> None:
    """
    Raise if there is nothing to put into a calendar

    Raises:
        ScheduleUnavailableError: If no waste type has any date
    """
    is_valid, errors = validate_waste_data(waste_data)
    if not is_valid:
        logger.warning("Rejecting waste data: %s", "; ".join(errors))
        raise ScheduleUnavailableError("No collection dates available: " + "; ".join(errors))
