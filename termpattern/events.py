"""
Event records (JSON -> core types and back).

An event file is a JSON list of objects such as:

    {
        "id": "49794",
        "name": "PCR",
        "series": "Practicals - Monday Group",
        "start": "2015-02-23T11:00:00+00:00",
        "end": "2015-02-23T17:00:00+00:00"
    }

Only "start" and "end" are required. This module is the place where
input gets normalised (reversed start/end pairs are swapped) before it
reaches the calendar and pattern code.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Any, Iterable, Optional

from termpattern.errors import TermPatternError
from termpattern.pattern import FullPattern
from termpattern.rollover import roll_over_timestamp
from termpattern.term_calendar import TermCalendar

logger = logging.getLogger(__name__)

# Series name used for events without a "series" field
DEFAULT_SERIES = "(no series)"


class EventFileError(TermPatternError):
    """
    An event file could not be read or does not have the expected shape.
    """


# ---------------------------------------------------------------------------
# Loading & saving
# ---------------------------------------------------------------------------


def load_events(path: str | Path) -> list[dict[str, Any]]:
    """
    Load a JSON list of event records.
    """
    events_path = Path(path)
    try:
        data = json.loads(events_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise EventFileError(f"Cannot read events from {events_path}: {e}") from e

    if not isinstance(data, list):
        raise EventFileError(f"{events_path} must contain a JSON list of events")
    events: list[dict[str, Any]] = []
    for i, ev in enumerate(data):
        if not isinstance(ev, dict):
            logger.warning("Skipping entry %d in %s: not an event object", i, events_path)
            continue
        events.append(ev)
    return events


def save_events(events: Iterable[dict[str, Any]], path: str | Path) -> None:
    """
    Write event records as JSON. Creates parent directories if needed.
    """
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(
        json.dumps(list(events), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------


def _parse_instant(value: Any, field: str, event: dict[str, Any]) -> datetime:
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError as e:
        raise EventFileError(f"Invalid {field} {value!r} in event {event.get('id', '?')}") from e


def event_instants(event: dict[str, Any]) -> tuple[datetime, datetime]:
    """
    Return (start, end) of an event as datetimes, start <= end.
    """
    if "start" not in event or "end" not in event:
        raise EventFileError(f"Event {event.get('id', '?')} needs a start and an end")

    start = _parse_instant(event["start"], "start", event)
    end = _parse_instant(event["end"], "end", event)
    if (start.tzinfo is None) != (end.tzinfo is None):
        raise EventFileError(
            f"Event {event.get('id', '?')} mixes a timestamp with a UTC offset and one without"
        )
    if start > end:
        logger.warning("Impossible start/end dates in event %s, swapping them", event.get("id", "?"))
        start, end = end, start
    return start, end


def normalize_event(event: dict[str, Any]) -> dict[str, Any]:
    """
    Copy of the event with start and end in the right order.
    """
    start, end = event_instants(event)
    out = dict(event)
    out["start"] = start.isoformat(timespec="seconds")
    out["end"] = end.isoformat(timespec="seconds")
    return out


# ---------------------------------------------------------------------------
# Core operations on event lists
# ---------------------------------------------------------------------------


def rollover_events(
    events: Iterable[dict[str, Any]],
    from_year: Any,
    to_year: Any,
    calendar: Optional[TermCalendar] = None,
) -> list[dict[str, Any]]:
    """
    Return new event records with start/end rolled over to another year.
    """
    out: list[dict[str, Any]] = []
    for ev in events:
        ev = normalize_event(ev)
        ev["start"] = roll_over_timestamp(str(ev["start"]), from_year, to_year, calendar=calendar)
        ev["end"] = roll_over_timestamp(str(ev["end"]), from_year, to_year, calendar=calendar)
        out.append(ev)
    return out


def patterns_by_series(
    events: Iterable[dict[str, Any]],
    calendar: Optional[TermCalendar] = None,
    tz: Optional[tzinfo] = None,
) -> dict[str, str]:
    """
    Render the pattern of every series, e.g. {"Lectures": "Mi1-8 Tu,Th 10"}.

    Events are merged in file order; series keep first-seen order.
    """
    by_series: dict[str, FullPattern] = {}
    for ev in events:
        series = str(ev.get("series") or DEFAULT_SERIES)
        start, end = event_instants(ev)
        if series not in by_series:
            by_series[series] = FullPattern(calendar=calendar, tz=tz)
        by_series[series].add(start, end)

    return {series: str(fp) for series, fp in by_series.items()}
