"""
Flask API application serving waste collection calendars as iCalendar feeds
"""

import logging
import sys
from pathlib import Path

from flasgger import Swagger
from flask import Flask, Response, jsonify, render_template, request

REPO_ROOT = Path(__file__).resolve().parent.parent.parent
# When running as a script (e.g. `python services/api/app.py`), ensure repo root is on sys.path
# so `import config` (and `services.*`) work the same as after `pip install -e .`.
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import config  # noqa: E402
from services.calendar import generate_calendar  # noqa: E402
from services.common.exceptions import ScheduleUnavailableError  # noqa: E402
from services.common.logging_utils import setup_logging  # noqa: E402
from services.scraper.core.models import ScheduleQuery, WasteType  # noqa: E402

setup_logging()
logger = logging.getLogger(__name__)

app = Flask(
    __name__,
    template_folder=str(REPO_ROOT / "services" / "web" / "templates"),
)
app.config["DEBUG"] = config.DEBUG


# Initialize Swagger
swagger_config = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec",
            "route": "/apispec.json",
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/api-docs/",
}

swagger_template = {
    "swagger": "2.0",
    "info": {
        "title": "Abfuhrkalender",
        "description": "iCalendar feeds for Karlsruhe waste collection dates. All endpoints are read-only (GET only).",
        "version": "1.0.0",
    },
    "host": f"localhost:{config.SERVER_PORT}",
    "basePath": "/",
    "schemes": ["http"],
}

Swagger(app, config=swagger_config, template=swagger_template)

CALENDAR_MIMETYPE = "text/calendar"

TRUE_VALUES = {"true", "1", "yes", "on"}
FALSE_VALUES = {"false", "0", "no", "off", ""}


class InvalidQueryError(ValueError):
    """Query string cannot be turned into a ScheduleQuery."""


def parse_bool(name: str, value: str | None) -> bool:
    """Parse a boolean query parameter (missing means False)."""
    if value is None:
        return False
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise InvalidQueryError(f"Invalid boolean for {name}: {value!r}")


def parse_address(args) -> tuple[str, str]:
    street = (args.get("street") or "").strip()
    street_number = (args.get("street_number") or "").strip()
    if not street or not street_number:
        raise InvalidQueryError("Both street and street_number are required")
    return street, street_number


def schedule_query_from_args(args) -> ScheduleQuery:
    """
    Build a ScheduleQuery from request args

    Every waste type has an exclude_<type> flag, e.g. exclude_paper=true.
    """
    street, street_number = parse_address(args)
    excluded = frozenset(
        waste_type
        for waste_type in WasteType
        if parse_bool(f"exclude_{waste_type.value}", args.get(f"exclude_{waste_type.value}"))
    )
    return ScheduleQuery(street=street, street_number=street_number, excluded=excluded)


def calendar_response(query: ScheduleQuery):
    try:
        body = generate_calendar(query)
    except ScheduleUnavailableError as e:
        logger.warning("No data available: %s", e)
        return jsonify({"error": "No data available", "details": str(e)}), 502

    response = Response(body, mimetype=CALENDAR_MIMETYPE)
    response.headers["Content-Disposition"] = 'inline; filename="calendar.ics"'
    return response


@app.errorhandler(InvalidQueryError)
def handle_invalid_query(e: InvalidQueryError):
    return jsonify({"error": str(e)}), 400


@app.route("/")
def index():
    """Page building a subscription link"""
    return render_template("index.html", waste_types=list(WasteType))


@app.route("/calendar", methods=["GET"])
def api_calendar():
    """
    Waste collection calendar for an address
    ---
    tags:
      - Calendar
    produces:
      - text/calendar
    parameters:
      - name: street
        in: query
        type: string
        required: true
        description: Street name as spelled on karlsruhe.de
      - name: street_number
        in: query
        type: string
        required: true
        description: House number (may include a suffix, e.g. 12a)
      - name: exclude_residual
        in: query
        type: boolean
        required: false
        description: Leave out residual waste (Restmüll)
      - name: exclude_organic
        in: query
        type: boolean
        required: false
        description: Leave out organic waste (Bioabfall)
      - name: exclude_recyclable
        in: query
        type: boolean
        required: false
        description: Leave out recyclables (Wertstoff)
      - name: exclude_paper
        in: query
        type: boolean
        required: false
        description: Leave out paper (Papier)
      - name: exclude_bulky
        in: query
        type: boolean
        required: false
        description: Leave out bulky waste pickup (Sperrmüllabholung)
    responses:
      200:
        description: iCalendar document with one all-day event per pickup
      400:
        description: Missing address or invalid boolean flag
      502:
        description: No data available for this address
    """
    query = schedule_query_from_args(request.args)
    return calendar_response(query)


@app.route("/calendar/<waste_type>", methods=["GET"])
def api_calendar_single(waste_type: str):
    """
    Calendar for a single waste type
    ---
    tags:
      - Calendar
    produces:
      - text/calendar
    parameters:
      - name: waste_type
        in: path
        type: string
        required: true
        enum: [residual, organic, recyclable, paper, bulky]
      - name: street
        in: query
        type: string
        required: true
      - name: street_number
        in: query
        type: string
        required: true
    responses:
      200:
        description: iCalendar document with only this waste type
      400:
        description: Missing address
      404:
        description: Unknown waste type
      502:
        description: No data available for this address
    """
    try:
        selected = WasteType(waste_type)
    except ValueError:
        return jsonify({"error": f"Unknown waste type: {waste_type}"}), 404

    street, street_number = parse_address(request.args)
    excluded = frozenset(other for other in WasteType if other is not selected)
    return calendar_response(ScheduleQuery(street=street, street_number=street_number, excluded=excluded))


def run_server(host: str = config.SERVER_HOST, port: int = config.SERVER_PORT) -> None:
    logger.info("Starting calendar server on %s:%s", host, port)
    app.run(host=host, port=port, debug=config.DEBUG)


if __name__ == "__main__":
    run_server()
