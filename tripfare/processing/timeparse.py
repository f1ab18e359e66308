"""Parsing and display helpers for itinerary timestamps and durations."""

import re
from datetime import date, datetime, timezone
from typing import Literal

from ..models import ParsedTimestamp

NOT_AVAILABLE = 'N/A'

_ISO_DURATION = re.compile(r'PT(\d+)H(?:(\d+)M)?', re.ASCII)
_TEXT_DURATION = re.compile(r'(\d+)\s*h\s*(?:(\d+)\s*m)?', re.IGNORECASE | re.ASCII)

_WEEKDAYS = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']
_MONTHS = ['January', 'February', 'March', 'April', 'May', 'June',
           'July', 'August', 'September', 'October', 'November', 'December']


def _to_utc(raw: object) -> datetime | None:
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        parsed = datetime.fromisoformat(raw.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        # offset pushes the instant outside years 1..9999
        return None


def split_instant(instant: datetime) -> ParsedTimestamp:
    return ParsedTimestamp(date=instant.date().isoformat(), time=instant.strftime('%H:%M'), instant=instant)


def parse_timestamp(raw: object) -> ParsedTimestamp | None:
    """Parse an ISO-8601 datetime into date / clock time / instant.

    Naive values are read as UTC and offset-aware values are shifted to UTC, so every
    leg is handled in a single reference frame. Returns None for anything that is not
    a valid calendar instant.
    """
    instant = _to_utc(raw)
    if instant is None:
        return None
    return split_instant(instant)


def parse_duration_to_minutes(raw: object) -> int:
    """Convert 'PT2H30M' or '2h 30m' style durations to minutes; 0 when unknown."""
    if not isinstance(raw, str) or not raw or raw == NOT_AVAILABLE:
        return 0
    for pattern in (_ISO_DURATION, _TEXT_DURATION):
        if match := pattern.search(raw):
            hours, minutes = match.groups()
            try:
                return int(hours) * 60 + int(minutes or 0)
            except ValueError:
                # digit run beyond the int conversion limit
                return 0
    return 0


def format_minutes_as_duration(minutes: int) -> str:
    if minutes <= 0:
        return NOT_AVAILABLE
    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f'{mins}min'
    if mins == 0:
        return f'{hours}h'
    return f'{hours}h {mins:02d}min'


def _parse_calendar_date(raw: str) -> date | None:
    try:
        return date.fromisoformat(raw)
    except (TypeError, ValueError):
        pass
    instant = _to_utc(raw)
    return instant.date() if instant else None


def days_between(start: str, end: str) -> int:
    """Whole days from start to end (ISO dates); 0 when either side is not a date."""
    start_date = _parse_calendar_date(start)
    end_date = _parse_calendar_date(end)
    if start_date is None or end_date is None:
        return 0
    return (end_date - start_date).days


def format_flight_date(raw: str, style: Literal['short', 'long'] = 'short') -> str:
    """Render a date as '1 Mar' (short) or 'Saturday 1 March 2025' (long).

    Input that is not a date is returned unchanged.
    """
    parsed = _parse_calendar_date(raw)
    if parsed is None:
        return raw
    month = _MONTHS[parsed.month - 1]
    if style == 'long':
        return f'{_WEEKDAYS[parsed.weekday()]} {parsed.day} {month} {parsed.year}'
    return f'{parsed.day} {month[:3]}'


def format_time(raw: str) -> str:
    parsed = parse_timestamp(raw)
    return parsed.time if parsed else raw
