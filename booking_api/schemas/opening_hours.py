"""
Opening hours stored as JSON on BusinessSettings, modelled with explicit
per-weekday fields and merged with defaults on load.
"""
from datetime import date, time
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from booking_api.utils.date_parsing import TIME_RE

# date.weekday() order
WEEKDAY_KEYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


class DayHours(BaseModel):
    """Opening window for one weekday"""
    open: str = Field("09:00", description="HH:MM")
    close: str = Field("18:00", description="HH:MM")
    closed: bool = False

    @field_validator("open", "close")
    @classmethod
    def validate_hhmm(cls, v):
        match = TIME_RE.match(v or "")
        if not match or int(match.group(1)) > 23 or int(match.group(2)) > 59:
            raise ValueError("Time must be HH:MM")
        return f"{int(match.group(1)):02d}:{match.group(2)}"

    @model_validator(mode="after")
    def check_order(self):
        if not self.closed and self.open_time >= self.close_time:
            raise ValueError("open must be before close")
        return self

    @property
    def open_time(self) -> time:
        hour, minute = self.open.split(":")
        return time(int(hour), int(minute))

    @property
    def close_time(self) -> time:
        hour, minute = self.close.split(":")
        return time(int(hour), int(minute))


def _weekday(open_: str = "09:00", close: str = "18:00", closed: bool = False) -> DayHours:
    return DayHours(open=open_, close=close, closed=closed)


class OpeningHours(BaseModel):
    monday: DayHours = Field(default_factory=_weekday)
    tuesday: DayHours = Field(default_factory=_weekday)
    wednesday: DayHours = Field(default_factory=_weekday)
    thursday: DayHours = Field(default_factory=_weekday)
    friday: DayHours = Field(default_factory=_weekday)
    saturday: DayHours = Field(default_factory=lambda: _weekday("09:00", "14:00"))
    sunday: DayHours = Field(default_factory=lambda: _weekday(closed=True))

    @classmethod
    def from_stored(cls, raw: Optional[Dict[str, Any]]) -> "OpeningHours":
        """Merge a stored (possibly partial) mapping over the defaults."""
        merged = cls().model_dump()
        for key, value in (raw or {}).items():
            key = key.lower()
            if key in merged and isinstance(value, dict):
                merged[key] = {**merged[key], **value}
        return cls.model_validate(merged)

    def for_date(self, day: date) -> DayHours:
        return getattr(self, WEEKDAY_KEYS[day.weekday()])
