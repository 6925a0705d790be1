"""Opening-hours parsing.

All free-text handling of opening hours lives here:

- :func:`parse_working_hours` unpacks the packed ``working_hours`` CSV column
  (``"{Monday: 10AM-6PM, Tuesday: Closed, ...}"``) into the seven
  ``*_hours`` schema fields.
- :func:`parse_day_hours` turns one day's hour text into a structured
  :class:`DaySchedule` (open ranges, explicitly closed, or unknown).

Nothing in this module raises on malformed input; unparseable text degrades
to empty strings or an ``UNKNOWN`` schedule.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import time
from enum import Enum

logger = logging.getLogger(__name__)


class Weekday(str, Enum):
    """Days of the week, valued by their full lowercase name."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def hours_field(self) -> str:
        """Schema field holding this day's hours, e.g. ``"mon_hours"``."""
        return f"{self.value[:3]}_hours"

    @classmethod
    def from_date_index(cls, index: int) -> "Weekday":
        """Map :meth:`datetime.date.weekday` (Monday == 0) to a member."""
        return list(cls)[index]


class DayState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TimeRange:
    """One opening interval. ``close < open`` means it runs past midnight."""

    open: time
    close: time

    @property
    def overnight(self) -> bool:
        return self.close < self.open

    def contains(self, moment: time) -> bool:
        """Return True if ``moment`` falls inside the range (inclusive)."""
        if self.overnight:
            return moment >= self.open or moment <= self.close
        return self.open <= moment <= self.close


@dataclass(frozen=True)
class DaySchedule:
    """Structured schedule of a single weekday."""

    weekday: Weekday
    state: DayState
    ranges: tuple[TimeRange, ...] = ()

    @property
    def is_open_day(self) -> bool:
        return self.state is DayState.OPEN


_DAY_ALIASES: dict[str, Weekday] = {}
for _day in Weekday:
    _DAY_ALIASES[_day.value] = _day
    _DAY_ALIASES[_day.value[:3]] = _day

_DAY_ENTRY = re.compile(r"^\s*[\"']?(?P<label>[A-Za-z]+)[\"']?\s*:(?P<hours>.*)$")
_RANGE_SEPARATOR = re.compile(r"\s*[;&]\s*|\s+and\s+", re.IGNORECASE)
_RANGE_DASH = re.compile(r"\s*(?:-|–|—|\bto\b)\s*", re.IGNORECASE)
_TIME_PATTERN = re.compile(
    r"^(?P<hour>\d{1,2})(?:[:.h](?P<minute>\d{2}))?\s*(?P<period>[ap]\.?\s*m\.?)?$",
    re.IGNORECASE,
)
_CLOSED_WORDS = frozenset({"closed", "ferme", "fermé"})
_ALWAYS_OPEN = re.compile(r"open\s*24\s*(hours|hrs|h)|24\s*hours", re.IGNORECASE)
_QUOTES = "\"'"

FULL_DAY = TimeRange(time(0, 0), time(23, 59))


def empty_hours() -> dict[str, str]:
    """Return the seven ``*_hours`` fields, all empty."""
    return {day.hours_field: "" for day in Weekday}


def parse_working_hours(working_hours: str | None) -> dict[str, str]:
    """Unpack a packed ``working_hours`` value into per-day schema fields.

    Parameters
    ----------
    working_hours : str | None
        Text such as ``"{Monday: 10AM-6PM, Sunday: Closed}"``. Outer braces
        and quotes around day names or hours are tolerated. An entry without
        a day label continues the previous day and is joined with ``"; "``.

    Returns
    -------
    dict[str, str]
        Mapping with exactly the keys ``mon_hours`` ... ``sun_hours``. Days
        that are absent or cannot be read are empty strings.

    Examples
    --------
    >>> parse_working_hours("{Monday: 10AM-6PM, Sunday: Closed}")["sun_hours"]
    'Closed'
    >>> parse_working_hours("{Monday: 9AM-12PM, 1PM-5PM, Tuesday: Closed}")["mon_hours"]
    '9AM-12PM; 1PM-5PM'
    >>> parse_working_hours("")["mon_hours"]
    ''
    """
    hours = empty_hours()
    if not working_hours or not working_hours.strip():
        return hours
    cleaned = working_hours.strip().lstrip("{").rstrip("}").strip()
    day: Weekday | None = None
    for entry in cleaned.split(","):
        match = _DAY_ENTRY.match(entry)
        if match is None:
            # No day label: a further range of the previous day ("9AM-12PM, 1PM-5PM").
            extra = entry.strip().strip(_QUOTES).strip()
            if day is None or not extra:
                logger.debug("Ignoring working_hours entry without a day label: %r", entry)
                continue
            previous = hours[day.hours_field]
            hours[day.hours_field] = f"{previous}; {extra}" if previous else extra
            continue
        day = _DAY_ALIASES.get(match.group("label").lower())
        if day is None:
            logger.debug("Ignoring unknown day label in working_hours: %r", entry)
            continue
        hours[day.hours_field] = match.group("hours").strip().strip(_QUOTES).strip()
    return hours


def parse_time(text: str, default_period: str | None = None) -> time | None:
    """Parse ``"10"``, ``"10:30"``, ``"6PM"`` or ``"9:30 a.m."`` into a time.

    ``default_period`` ("am"/"pm") applies when the text carries none. Returns
    None when the text is not a recognisable clock time. ``"24:00"`` and
    ``"12AM"`` as closing times are treated as midnight (00:00).
    """
    match = _TIME_PATTERN.match(text.strip())
    if match is None:
        return None
    hour = int(match.group("hour"))
    minute = int(match.group("minute") or 0)
    raw_period = match.group("period")
    period = (
        re.sub(r"[^apm]", "", raw_period.lower()) if raw_period else default_period
    )
    if period:
        if not 1 <= hour <= 12:
            return None
        if period.startswith("p") and hour != 12:
            hour += 12
        elif period.startswith("a") and hour == 12:
            hour = 0
    if hour == 24 and minute == 0:
        hour = 0
    if hour > 23 or minute > 59:
        return None
    return time(hour, minute)


def _period_of(text: str) -> str | None:
    match = _TIME_PATTERN.match(text.strip())
    if match is None or not match.group("period"):
        return None
    return "pm" if "p" in match.group("period").lower() else "am"


def parse_time_range(text: str) -> TimeRange | None:
    """Parse one ``open-close`` interval; return None if it is malformed."""
    parts = _RANGE_DASH.split(text.strip(), maxsplit=1)
    if len(parts) != 2:
        return None
    open_text, close_text = parts
    close_period = _period_of(close_text)
    close = parse_time(close_text)
    opening = None
    if close_period is not None and _period_of(open_text) is None:
        # "1-5PM": borrow the closing period unless that puts opening after close.
        opening = parse_time(open_text, default_period=close_period)
        if opening is not None and close is not None and opening > close:
            opening = parse_time(open_text, default_period="am")
    if opening is None:
        opening = parse_time(open_text)
    if opening is None or close is None:
        return None
    return TimeRange(opening, close)


def parse_day_hours(weekday: Weekday, text: str | None) -> DaySchedule:
    """Parse one weekday's hour text into a :class:`DaySchedule`.

    Parameters
    ----------
    weekday : Weekday
        The day being described.
    text : str | None
        Free text such as ``"10:00-17:00"``, ``"10AM–6PM; 7PM-9PM"``,
        ``"Closed"`` or ``"Open 24 hours"``. None or blank means missing.

    Returns
    -------
    DaySchedule
        ``CLOSED`` for an explicit closed marker, ``OPEN`` with at least one
        range when every interval parses, ``UNKNOWN`` otherwise.

    Examples
    --------
    >>> parse_day_hours(Weekday.SATURDAY, "10:00-17:00").ranges[0].close
    datetime.time(17, 0)
    >>> parse_day_hours(Weekday.SUNDAY, "Closed").state
    <DayState.CLOSED: 'closed'>
    >>> parse_day_hours(Weekday.MONDAY, None).state
    <DayState.UNKNOWN: 'unknown'>
    """
    if text is None or not text.strip():
        return DaySchedule(weekday, DayState.UNKNOWN)
    cleaned = text.strip()
    if cleaned.lower() in _CLOSED_WORDS:
        return DaySchedule(weekday, DayState.CLOSED)
    if _ALWAYS_OPEN.search(cleaned):
        return DaySchedule(weekday, DayState.OPEN, (FULL_DAY,))
    ranges: list[TimeRange] = []
    for chunk in _RANGE_SEPARATOR.split(cleaned):
        if not chunk:
            continue
        parsed = parse_time_range(chunk)
        if parsed is None:
            logger.debug("Unparseable hours for %s: %r", weekday.value, text)
            return DaySchedule(weekday, DayState.UNKNOWN)
        ranges.append(parsed)
    if not ranges:
        return DaySchedule(weekday, DayState.UNKNOWN)
    return DaySchedule(weekday, DayState.OPEN, tuple(ranges))
