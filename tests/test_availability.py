"""Tests for weekly availability lookup and slot instants."""

import time
from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from fieldservice.scheduling.availability import (
    parse_slot_label,
    resolve_slots,
    slot_instants,
    weekday_index,
)
from fieldservice.schemas.availability_schema import DailyAvailability, TimeSlot


@pytest.fixture
def host_timezone(monkeypatch):
    """Switch the process timezone, restoring it afterwards."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")

    def _set(name: str) -> None:
        monkeypatch.setenv("TZ", name)
        time.tzset()
        if time.timezone == 0 and time.altzone == 0:
            pytest.skip(f"zone database has no entry for {name}")

    yield _set
    monkeypatch.undo()
    time.tzset()


class TestWeekdayIndex:
    def test_monday_is_one(self):
        assert weekday_index("2024-06-10") == 1

    def test_sunday_is_zero(self):
        assert weekday_index("2024-06-09") == 0

    def test_saturday_is_six(self):
        assert weekday_index("2024-06-15") == 6

    def test_accepts_date_objects(self):
        assert weekday_index(date(2024, 6, 9)) == 0

    def test_blank_is_none(self):
        assert weekday_index("   ") is None
        assert weekday_index(None) is None

    def test_unparseable_is_none(self):
        assert weekday_index("10/06/2024") is None
        assert weekday_index("2024-13-40") is None


class TestResolveSlots:
    def test_monday_resolves_monday_slots(self, availability):
        slots = resolve_slots("2024-06-10", availability)
        assert [s.label for s in slots] == ["09:00 - 10:00", "10:00 - 11:00"]

    def test_sunday_resolves_nothing(self, availability):
        assert resolve_slots("2024-06-09", availability) == []

    def test_blank_date_resolves_nothing(self, availability):
        assert resolve_slots("", availability) == []

    def test_invalid_date_resolves_nothing(self, availability):
        assert resolve_slots("not-a-date", availability) == []

    def test_empty_table(self):
        assert resolve_slots("2024-06-10", []) == []

    def test_first_matching_entry_wins(self):
        first = [TimeSlot(start_time="08:00", end_time="09:00")]
        second = [TimeSlot(start_time="15:00", end_time="16:00")]
        table = [
            DailyAvailability(day_of_week=1, slots=first),
            DailyAvailability(day_of_week=1, slots=second),
        ]
        assert resolve_slots("2024-06-10", table) == first

    def test_source_order_preserved(self):
        unordered = [
            TimeSlot(start_time="14:00", end_time="15:00"),
            TimeSlot(start_time="08:00", end_time="09:00"),
        ]
        table = [DailyAvailability(day_of_week=1, slots=unordered)]
        assert resolve_slots("2024-06-10", table) == unordered

    def test_result_is_a_copy(self, availability):
        slots = resolve_slots("2024-06-10", availability)
        slots.clear()
        assert len(availability[0].slots) == 2


class TestSlotParsing:
    def test_parse_label(self):
        slot = parse_slot_label("09:00 - 10:00")
        assert slot == TimeSlot(start_time="09:00", end_time="10:00")

    def test_parse_label_without_spaces(self):
        assert parse_slot_label("09:00-10:00").label == "09:00 - 10:00"

    def test_parse_rejects_missing_separator(self):
        with pytest.raises(ValueError):
            parse_slot_label("0900")

    def test_time_slot_rejects_bad_format(self):
        with pytest.raises(ValidationError):
            TimeSlot(start_time="9am", end_time="10:00")

    def test_time_slot_accepts_camel_case_keys(self):
        slot = TimeSlot.model_validate({"startTime": "09:00", "endTime": "10:00"})
        assert slot.start_time == "09:00"

    def test_daily_availability_rejects_out_of_range_day(self):
        with pytest.raises(ValidationError):
            DailyAvailability(day_of_week=7, slots=[])


class TestSlotInstants:
    def test_local_wall_clock_instants(self):
        start, end = slot_instants("2024-06-10", parse_slot_label("09:00 - 10:00"))
        assert (start.hour, start.minute) == (9, 0)
        assert (end.hour, end.minute) == (10, 0)
        assert start.date() == date(2024, 6, 10)

    def test_instants_are_timezone_aware(self):
        start, end = slot_instants("2024-06-10", TimeSlot(start_time="14:30", end_time="16:00"))
        assert start.tzinfo is not None
        assert end > start

    def test_invalid_date_raises(self):
        with pytest.raises(ValueError):
            slot_instants("June 10", TimeSlot(start_time="09:00", end_time="10:00"))


class TestHostTimezone:
    """Weekday lookup is pinned to UTC; instants follow the host clock."""

    @pytest.mark.parametrize("zone", ["America/Santo_Domingo", "Pacific/Honolulu", "Asia/Tokyo"])
    def test_weekday_does_not_depend_on_host(self, host_timezone, availability, zone):
        host_timezone(zone)
        assert weekday_index("2024-06-10") == 1
        assert weekday_index("2024-06-09") == 0
        assert len(resolve_slots("2024-06-10", availability)) == 2

    def test_instants_use_local_wall_clock_west_of_utc(self, host_timezone):
        host_timezone("America/Santo_Domingo")
        start, end = slot_instants("2024-06-10", parse_slot_label("09:00 - 10:00"))
        assert (start.hour, end.hour) == (9, 10)
        assert start.utcoffset() == timedelta(hours=-4)
        assert start.astimezone(timezone.utc).hour == 13
        assert start.date() == date(2024, 6, 10)

    def test_instants_use_local_wall_clock_east_of_utc(self, host_timezone):
        host_timezone("Asia/Tokyo")
        start, _ = slot_instants("2024-06-10", parse_slot_label("09:00 - 10:00"))
        assert start.hour == 9
        assert start.utcoffset() == timedelta(hours=9)
        assert start.astimezone(timezone.utc).date() == date(2024, 6, 10)


class TestAwareDatetimes:
    def test_aware_datetime_uses_its_utc_day(self):
        evening = datetime(2024, 6, 9, 22, 0, tzinfo=timezone(timedelta(hours=-4)))
        assert weekday_index(evening) == 1

    def test_aware_datetime_east_of_utc(self):
        early = datetime(2024, 6, 10, 3, 0, tzinfo=timezone(timedelta(hours=9)))
        assert weekday_index(early) == 0

    def test_naive_datetime_is_taken_as_is(self):
        assert weekday_index(datetime(2024, 6, 10, 23, 30)) == 1

    def test_resolve_slots_with_aware_datetime(self, availability):
        evening = datetime(2024, 6, 9, 22, 0, tzinfo=timezone(timedelta(hours=-4)))
        assert len(resolve_slots(evening, availability)) == 2
