"""
Command line entry point

    abfuhrkalender                      run the calendar server (port 8008)
    abfuhrkalender serve --port 9000    same, with overrides
    abfuhrkalender cli "Schloßplatz" 1  write calendar.ics to the working directory
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import config
from services.common.exceptions import ScheduleUnavailableError
from services.common.logging_utils import setup_logging
from services.scraper.core.models import ScheduleQuery, WasteType

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="abfuhrkalender",
        description="Karlsruhe waste collection dates as iCalendar",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Override LOG_LEVEL",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the HTTP calendar server (default)")
    serve.add_argument("--host", default=config.SERVER_HOST)
    serve.add_argument("--port", type=int, default=config.SERVER_PORT)

    cli = subparsers.add_parser("cli", help="Write a single calendar file")
    cli.add_argument("street", help="the street")
    cli.add_argument("street_number", help="the street number")
    for waste_type in WasteType:
        cli.add_argument(
            f"--exclude-{waste_type.value}",
            action="store_true",
            help=f"exclude {waste_type.value} waste collection dates ({waste_type.label})",
        )
    cli.add_argument(
        "--output",
        type=str,
        default=None,
        help=f"Output path (default: ./{config.CALENDAR_OUTPUT_FILE})",
    )
    return parser


def schedule_query_from_namespace(args: argparse.Namespace) -> ScheduleQuery:
    excluded = frozenset(
        waste_type for waste_type in WasteType if getattr(args, f"exclude_{waste_type.value}")
    )
    return ScheduleQuery(street=args.street, street_number=args.street_number, excluded=excluded)


def run_cli(args: argparse.Namespace) -> int:
    """Write the calendar for one address to a file"""
    from services.calendar import generate_calendar

    query = schedule_query_from_namespace(args)
    target = Path(args.output) if args.output else Path.cwd() / config.CALENDAR_OUTPUT_FILE

    try:
        body = generate_calendar(query)
    except ScheduleUnavailableError as e:
        logger.debug("No data available: %s", e)
        print(f"No data available: {e}", file=sys.stderr)
        return 1

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(body)
    print(f"Calendar exported to: {target}")
    return 0


def run_serve(host: str, port: int) -> int:
    from services.api.app import run_server

    run_server(host=host, port=port)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.command == "cli":
        return run_cli(args)
    if args.command == "serve":
        return run_serve(args.host, args.port)
    return run_serve(config.SERVER_HOST, config.SERVER_PORT)


if __name__ == "__main__":
    raise SystemExit(main())
