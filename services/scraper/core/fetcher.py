"""
Fetcher module - Requests the waste calendar page for an address from karlsruhe.de
"""

import logging

import requests

import config
from services.common.exceptions import ScheduleUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_URL = config.SOURCE_URL


def fetch_schedule_html(
    street: str,
    street_number: str,
    url: str = DEFAULT_URL,
    timeout: int = config.REQUEST_TIMEOUT_SECONDS,
) -> str:
    """
    Post the address form and return the resulting HTML page

    Args:
        street: Street name as spelled on karlsruhe.de (e.g. "Schloßplatz")
        street_number: House number, may carry a suffix ("12a")
        url: Form endpoint
        timeout: Seconds before the request is abandoned

    Returns:
        Decoded HTML text

    Raises:
        ScheduleUnavailableError: On network errors or an HTTP error status
    """
    logger.info("Fetching waste calendar for %s %s from %s", street, street_number, url)

    try:
        response = requests.post(
            url,
            data={"strasse_n": street, "hausnr": street_number},
            timeout=timeout,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error("Fetching waste calendar failed: %s", e)
        raise ScheduleUnavailableError(
            f"Failed to fetch waste calendar: {e}", street, street_number
        ) from e

    # Without a charset header requests assumes ISO-8859-1, which mangles "Restmüll"
    if "charset" not in response.headers.get("Content-Type", "").lower():
        response.encoding = response.apparent_encoding

    logger.debug("Received %d bytes (HTTP %s)", len(response.content), response.status_code)
    return response.text
