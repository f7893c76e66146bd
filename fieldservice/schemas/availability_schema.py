"""Calendar availability data models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

WIRE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TimeSlot(BaseModel):
    """A bookable wall-clock interval within a day, as HH:MM strings.

    Only the format is checked; start/end ordering is left to whoever
    maintains the calendar.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def _check_hhmm(cls, value: str) -> str:
        value = value.strip()
        try:
            datetime.strptime(value, "%H:%M")
        except ValueError:
            raise ValueError(f"expected HH:MM, got {value!r}") from None
        return value

    @property
    def label(self) -> str:
        return f"{self.start_time} - {self.end_time}"


class DailyAvailability(BaseModel):
    """Slots offered on one weekday (0 = Sunday)."""
    model_config = WIRE_CONFIG

    day_of_week: int = Field(ge=0, le=6)
    slots: list[TimeSlot] = Field(default_factory=list)


WeeklyAvailability = list[DailyAvailability]
