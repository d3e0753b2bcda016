"""
Configuration for the Abfuhrkalender service.
All values can be overridden through environment variables.
"""

import os


def _read_int_env(name: str, default: int) -> int:
    """Read an integer from the environment, failing loudly on garbage."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise RuntimeError(
            f"Configuration validation failed:\n"
            f"{name} must be an integer, got {raw!r}"
        ) from e


DEBUG = os.getenv("DEBUG", "0") == "1"
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO")


# Official Karlsruhe waste calendar (POST form: strasse_n, hausnr)
SOURCE_URL = os.getenv("SOURCE_URL", "https://web6.karlsruhe.de/service/abfall/akal/akal.php")
REQUEST_TIMEOUT_SECONDS = _read_int_env("REQUEST_TIMEOUT_SECONDS", 30)

# Drop collection dates before today when building calendars
SKIP_PAST_DATES = os.getenv("SKIP_PAST_DATES", "0") == "1"


SERVER_HOST = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT = _read_int_env("SERVER_PORT", 8008)


CALENDAR_OUTPUT_FILE = os.getenv("CALENDAR_OUTPUT_FILE", "calendar.ics")
CALENDAR_TIMEZONE = os.getenv("CALENDAR_TIMEZONE", "Europe/Berlin")
