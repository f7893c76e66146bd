"""
Weekly availability lookup for the public booking form.

Resolves which time slots a calendar offers on a chosen date, and turns a
chosen slot into the appointment's start/end instants.

Two timezone rules apply to the same ``YYYY-MM-DD`` string:
- weekday lookup reads the string as UTC midnight, so the weekday is that
  of the calendar date named, whatever the host timezone;
- appointment instants are built in local wall-clock time.

Usage:
    slots = resolve_slots("2024-06-10", calendar.availability or [])
    start, end = slot_instants("2024-06-10", slots[0])
"""

import logging
from datetime import date, datetime, timezone
from typing import Iterable, Optional, Union

from fieldservice.schemas.availability_schema import DailyAvailability, TimeSlot
from fieldservice.utils import is_blank

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
SLOT_SEPARATOR = " - "


def weekday_index(value: Union[str, date, None]) -> Optional[int]:
    """
    Weekday of a date with Sunday=0, using UTC day boundaries.

    Aware datetimes are converted to UTC first; naive ones and plain dates
    are taken as already naming the calendar day. Returns None for blank
    or unparseable input.
    """
    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    if isinstance(value, date):
        return value.isoweekday() % 7
    if is_blank(value):
        return None
    try:
        parsed = datetime.strptime(value.strip(), DATE_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        return None
    return parsed.isoweekday() % 7


def resolve_slots(
    selected_date: Union[str, date, None],
    availability: Iterable[DailyAvailability],
) -> list[TimeSlot]:
    """
    Return the slots offered on the weekday of ``selected_date``.

    The first entry for that weekday wins; its slots come back in source
    order, untouched. Blank or unparseable dates and weekdays missing from
    the table all resolve to an empty list.
    """
    day_index = weekday_index(selected_date)
    if day_index is None:
        if isinstance(selected_date, str) and not is_blank(selected_date):
            logger.debug("Unparseable date %r, no slots", selected_date)
        return []

    for daily in availability:
        if daily.day_of_week == day_index:
            return list(daily.slots)
    return []


def parse_slot_label(label: str) -> TimeSlot:
    """Parse an ``"HH:MM - HH:MM"`` label back into a TimeSlot."""
    start, sep, end = label.partition(SLOT_SEPARATOR.strip())
    if not sep:
        raise ValueError(f"Slot label must look like 'HH:MM - HH:MM', got {label!r}")
    return TimeSlot(start_time=start.strip(), end_time=end.strip())


def _local_instant(selected_date: str, hhmm: str) -> datetime:
    naive = datetime.strptime(f"{selected_date.strip()}T{hhmm}", f"{DATE_FORMAT}T%H:%M")
    return naive.astimezone()


def slot_instants(selected_date: str, slot: TimeSlot) -> tuple[datetime, datetime]:
    """
    Combine a date with a slot's boundaries as local wall-clock instants.

    Returns timezone-aware datetimes in the host's local zone.

    Raises:
        ValueError: If the date is not ``YYYY-MM-DD``.
    """
    return (
        _local_instant(selected_date, slot.start_time),
        _local_instant(selected_date, slot.end_time),
    )
