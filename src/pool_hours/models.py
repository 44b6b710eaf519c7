"""Data models for the pool hours service."""

import datetime as dt
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .utils import to_iso_utc

SessionType = Literal["lap", "recreational"]


class RawSession(BaseModel):
    """A session as read from the schedule table, before normalization."""

    weekday: str = Field(..., description="Full weekday name, e.g. 'Monday'")
    time_range_text: str = Field(..., description="Cell text, e.g. '7:30am - 11:00am'")
    session_type: SessionType = Field(..., description="Swim session type")


class NormalizedSession(BaseModel):
    """A session anchored to a calendar date, expressed in UTC."""

    model_config = ConfigDict(frozen=True)

    start: dt.datetime = Field(..., description="Session start (UTC)")
    end: dt.datetime = Field(..., description="Session end (UTC)")
    type: SessionType = Field(..., description="Swim session type")
    source_text: str = Field(..., description="Original time range text")

    def to_hours_entry(self) -> dict[str, Any]:
        """Serialize to the wire shape used by the hours endpoints."""
        return {
            "start": to_iso_utc(self.start),
            "end": to_iso_utc(self.end),
            "timezone": "UTC",
            "original": self.source_text,
            "type": self.type,
        }


class DayResult(BaseModel):
    """Pool sessions for one calendar date."""

    model_config = ConfigDict(frozen=True)

    date: dt.date = Field(..., description="Calendar date in the site timezone")
    weekday_name: str = Field(..., description="Full weekday name")
    sessions: list[NormalizedSession] = Field(
        default_factory=list, description="Sessions ascending by start"
    )
    is_open_now: bool = Field(False, description="Pool open at request time")
    error: str | None = Field(None, description="Per-day error message")


class WeekDay(BaseModel):
    """One day of a week result."""

    model_config = ConfigDict(frozen=True)

    day: DayResult
    is_today: bool = Field(False, description="Date is today in the client timezone")


class WeekResult(BaseModel):
    """Pool sessions for a Monday-anchored week."""

    model_config = ConfigDict(frozen=True)

    week_start: dt.date = Field(..., description="Monday of the week")
    week_end: dt.date = Field(..., description="Sunday of the week")
    week_offset: int = Field(0, description="Weeks from the current week")
    days: list[WeekDay] = Field(..., min_length=7, max_length=7)
    error: str | None = Field(None, description="Week-level error message")


class ApiError(BaseModel):
    """Represents an API error response."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    details: dict | None = Field(None, description="Additional error details")


class PoolHoursException(Exception):
    """Exception class for service errors that uses ApiError model for data."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        """Initialize the exception with error details."""
        super().__init__(f"[{code}] {message}")
        self.error = ApiError(code=code, message=message, details=details)
        self.code = code
        self.message = message
        self.details = details
