"""Open/closed checks over a processed store's weekly hours."""

from __future__ import annotations

from datetime import datetime, time

from src.config import DEFAULT_STORE_STATUS, LATE_HOUR_THRESHOLD
from src.pipeline.csv_ingest import DaySchedule, DayState, Weekday, parse_day_hours

from .processor import ProcessedBookstore

WEEKEND: tuple[Weekday, Weekday] = (Weekday.SATURDAY, Weekday.SUNDAY)


def weekly_schedule(store: ProcessedBookstore) -> dict[Weekday, DaySchedule]:
    """Parse every day of ``store.hours`` into a :class:`DaySchedule`."""
    return {day: parse_day_hours(day, store.hours.get(day.value)) for day in Weekday}


def is_store_open(store: ProcessedBookstore, now: datetime | None = None) -> bool:
    """Return True if the store is open at ``now`` (local time, default: now).

    Stores that are not operational, days with missing or unparseable hours
    and explicitly closed days all count as closed. An overnight range
    belongs to the day it opens: Friday ``6PM-2AM`` covers Friday from 18:00
    and Saturday until 02:00.
    """
    if store.status != DEFAULT_STORE_STATUS:
        return False
    moment = now or datetime.now()
    today = Weekday.from_date_index(moment.weekday())
    yesterday = Weekday.from_date_index((moment.weekday() - 1) % 7)
    current = moment.time().replace(second=0, microsecond=0)
    for time_range in parse_day_hours(today, store.hours.get(today.value)).ranges:
        if time_range.overnight:
            if current >= time_range.open:
                return True
        elif time_range.contains(current):
            return True
    return any(
        time_range.overnight and current <= time_range.close
        for time_range in parse_day_hours(yesterday, store.hours.get(yesterday.value)).ranges
    )


def is_open_late(store: ProcessedBookstore, threshold_hour: int = LATE_HOUR_THRESHOLD) -> bool:
    """True if any day closes at or after ``threshold_hour`` o'clock.

    Ranges that run past midnight and round-the-clock days count as late.
    Malformed hours never count.
    """
    threshold = time(min(threshold_hour, 23), 59 if threshold_hour >= 24 else 0)
    for schedule in weekly_schedule(store).values():
        for time_range in schedule.ranges:
            if time_range.overnight or time_range.close >= threshold:
                return True
    return False


def is_open_weekends(store: ProcessedBookstore) -> bool:
    """True if Saturday or Sunday has any hours other than ``Closed``."""
    for day in WEEKEND:
        text = store.hours.get(day.value)
        if text and parse_day_hours(day, text).state is not DayState.CLOSED:
            return True
    return False


def get_formatted_hours(hours: str | None) -> str:
    """Display text for one day's hours; missing or closed shows ``Closed``.

    >>> get_formatted_hours(None), get_formatted_hours("closed"), get_formatted_hours("9-5")
    ('Closed', 'Closed', '9-5')
    """
    if not hours or hours.strip().lower() == "closed":
        return "Closed"
    return hours
