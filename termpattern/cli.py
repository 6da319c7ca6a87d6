"""
CLI (Command Line Interface).

Quick terminal commands around the term calendar, e.g.:

    termpattern terms --year 2014
    termpattern classify 2014-10-16T09:00:00
    termpattern pattern events.json
    termpattern rollover 2014-10-09T09:00:00 --from 2014 --to 2015
    termpattern rollover-events events.json events-2015.json --from 2014 --to 2015

Note:
- Tables are printed with rich, everything else is plain text
- Errors are printed to stderr and give exit code 1
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from termpattern.config import DEFAULT_TIMEZONE, TERM_NAMES, get_timezone
from termpattern.errors import TermPatternError
from termpattern.events import load_events, patterns_by_series, rollover_events, save_events
from termpattern.rollover import roll_over_timestamp
from termpattern.term_calendar import TermCalendar

console = Console()


def _load_calendar(args: argparse.Namespace) -> TermCalendar:
    """
    Load the term-date table from --term-dates or the default location.
    """
    return TermCalendar.from_file(args.term_dates)


def _parse_timestamp(text: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(text.strip())
    except ValueError:
        return None


def _cmd_terms(args: argparse.Namespace, calendar: TermCalendar) -> int:
    """
    Print the term table (raw start, aligned start, end) as a rich table.
    """
    years = [str(args.year)] if args.year else calendar.years()

    table = Table(title="Academic terms", box=box.SIMPLE)
    table.add_column("Year")
    table.add_column("Term")
    table.add_column("Raw start")
    table.add_column("Week 1 (Thu)")
    table.add_column("End")

    for year in years:
        # raises UnknownYear for --year values that are not configured
        raw_dates = calendar.terms_for(year)
        for i in range(len(raw_dates)):
            term = calendar.term(year, i)
            table.add_row(
                year,
                TERM_NAMES[i],
                term.raw_start.isoformat(),
                term.start.isoformat(),
                term.end.isoformat(),
            )

    console.print(table)
    return 0


def _cmd_classify(args: argparse.Namespace, calendar: TermCalendar) -> int:
    """
    Print the term week a timestamp falls into.
    """
    when = _parse_timestamp(args.timestamp or "")
    if when is None:
        print(f"Invalid timestamp: {args.timestamp!r}", file=sys.stderr)
        return 1

    tw = calendar.classify(when)
    print(f"{tw} ({tw.term.year})")
    return 0


def _cmd_pattern(args: argparse.Namespace, calendar: TermCalendar) -> int:
    """
    Print one pattern line per series of an event file.
    """
    events = load_events(args.events)
    if not events:
        print("No events.")
        return 0

    tz = get_timezone(args.tz) if args.tz else None
    patterns = patterns_by_series(events, calendar=calendar, tz=tz)

    table = Table(box=box.SIMPLE)
    table.add_column("Series")
    table.add_column("Pattern")
    for series, pattern in patterns.items():
        table.add_row(series, pattern)

    console.print(table)
    return 0


def _cmd_rollover(args: argparse.Namespace, calendar: TermCalendar) -> int:
    """
    Print a timestamp rolled over to another academic year.
    """
    if _parse_timestamp(args.timestamp or "") is None:
        print(f"Invalid timestamp: {args.timestamp!r}", file=sys.stderr)
        return 1

    print(roll_over_timestamp(args.timestamp, args.from_year, args.to_year, calendar=calendar))
    return 0


def _cmd_rollover_events(args: argparse.Namespace, calendar: TermCalendar) -> int:
    """
    Roll over every event of a file and write the result to a new file.
    """
    events = load_events(args.events)
    rolled = rollover_events(events, args.from_year, args.to_year, calendar=calendar)
    save_events(rolled, args.out)
    print(f"Rolled over {len(rolled)} events to: {args.out}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="termpattern", description="Academic term calendar tools")
    parser.add_argument("--term-dates", type=Path, default=None, help="JSON file with the term dates")
    parser.add_argument("--verbose", "-v", action="store_true", help="Print debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_terms = sub.add_parser("terms", help="Show the configured terms")
    p_terms.add_argument("--year", type=str, default=None, help="Academic year (e.g. 2014)")

    p_classify = sub.add_parser("classify", help="Show the term week of a timestamp")
    p_classify.add_argument("timestamp", type=str, help="ISO timestamp (e.g. 2014-10-16T09:00:00)")

    p_pattern = sub.add_parser("pattern", help="Show the pattern of each series in an event file")
    p_pattern.add_argument("events", type=Path, help="JSON file with events")
    p_pattern.add_argument(
        "--tz", type=str, default=DEFAULT_TIMEZONE, help=f"Time zone to render in (default {DEFAULT_TIMEZONE})"
    )

    p_rollover = sub.add_parser("rollover", help="Roll a timestamp over to another academic year")
    p_rollover.add_argument("timestamp", type=str, help="ISO timestamp")
    p_rollover.add_argument("--from", dest="from_year", required=True, help="Academic year of the timestamp")
    p_rollover.add_argument("--to", dest="to_year", required=True, help="Academic year to roll over to")

    p_rollover_events = sub.add_parser("rollover-events", help="Roll all events of a file over")
    p_rollover_events.add_argument("events", type=Path, help="JSON file with events")
    p_rollover_events.add_argument("out", type=Path, help="Output JSON file")
    p_rollover_events.add_argument("--from", dest="from_year", required=True, help="Academic year of the events")
    p_rollover_events.add_argument("--to", dest="to_year", required=True, help="Academic year to roll over to")

    return parser


COMMANDS = {
    "terms": _cmd_terms,
    "classify": _cmd_classify,
    "pattern": _cmd_pattern,
    "rollover": _cmd_rollover,
    "rollover-events": _cmd_rollover_events,
}


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handler = COMMANDS.get(args.command)
    if handler is None:
        raise SystemExit(2)

    try:
        calendar = _load_calendar(args)
        code = handler(args, calendar)
    except TermPatternError as e:
        print(f"Error: {e}", file=sys.stderr)
        code = 1

    raise SystemExit(code)
