import asyncio
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any

from ..config import config
from ..models import DayResult, PoolHoursException, WeekDay, WeekResult
from ..summary import find_next_opening
from ..utils import get_zone, to_iso_utc, today_in_timezone, week_start, weekday_name
from .hours import HoursEndpoint, hours_endpoint

logger = logging.getLogger(__name__)

ALL_DAYS_FAILED = "Failed to fetch data for all days of the week"
NO_WEEK_DATA = "No pool hours data available for this week"


class WeeklyEndpoint:
    """Endpoint aggregating seven days of pool hours."""

    def __init__(self, hours: HoursEndpoint | None = None):
        """Initialize endpoint.

        Args:
            hours: Day endpoint used for each date of the week
        """
        self.hours = hours or hours_endpoint

    @staticmethod
    def week_dates(today: date, week_offset: int = 0) -> list[date]:
        """Monday..Sunday of the week `week_offset` weeks from `today`'s week."""
        monday = week_start(today, week_offset)
        return [monday + timedelta(days=i) for i in range(7)]

    async def get_week_result(
        self, week_offset: int, client_timezone: str, now: datetime
    ) -> WeekResult:
        """Fetch all seven days concurrently and summarize the week.

        "Today" and therefore the week boundaries come from the client's
        timezone. A failure on one day is recorded on that day only.
        """
        today = today_in_timezone(now, client_timezone)
        dates = self.week_dates(today, week_offset)

        outcomes = await asyncio.gather(
            *(self.hours.get_day_result(d, now) for d in dates),
            return_exceptions=True,
        )

        days = []
        for day_date, outcome in zip(dates, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.error(f"Failed to build pool hours for {day_date}: {outcome}")
                outcome = DayResult(
                    date=day_date,
                    weekday_name=weekday_name(day_date),
                    sessions=[],
                    error=f"Failed to fetch data for {day_date.isoformat()}: {outcome}",
                )
            days.append(WeekDay(day=outcome, is_today=day_date == today))

        error = None
        if all(d.day.error is not None for d in days):
            error = ALL_DAYS_FAILED
        elif not any(d.day.sessions for d in days):
            error = NO_WEEK_DATA

        return WeekResult(
            week_start=dates[0],
            week_end=dates[-1],
            week_offset=week_offset,
            days=days,
            error=error,
        )

    async def get_weekly_hours(
        self,
        week_offset: int = 0,
        client_timezone: str | None = None,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """Get pool hours for a whole week.

        Args:
            week_offset: Weeks from the current week (0 = this week, 1 = next)
            client_timezone: IANA timezone deciding which day is today
            now: Current instant, defaults to the system clock

        Returns:
            Weekly pool hours payload

        Raises:
            PoolHoursException: If the timezone is unknown
        """
        now = now or datetime.now(timezone.utc)
        client_timezone = client_timezone or config.client_timezone

        try:
            get_zone(client_timezone)
        except ValueError as e:
            raise PoolHoursException(
                code="INVALID_INPUT",
                message=str(e),
                details={"timezone": client_timezone},
            ) from e

        week = await self.get_week_result(week_offset, client_timezone, now)
        logger.debug(
            f"Week {week.week_start}..{week.week_end}: "
            f"{sum(len(d.day.sessions) for d in week.days)} sessions"
        )
        return self.to_payload(week, now)

    @staticmethod
    def to_payload(week: WeekResult, now: datetime) -> dict[str, Any]:
        """Serialize a WeekResult to the week query response shape."""
        next_opening = find_next_opening(week, now)
        return {
            "weekData": [
                {
                    "date": d.day.date.isoformat(),
                    "dayName": d.day.weekday_name,
                    "hours": [s.to_hours_entry() for s in d.day.sessions],
                    "error": d.day.error,
                    "isToday": d.is_today,
                }
                for d in week.days
            ],
            "weekStartDate": week.week_start.isoformat(),
            "weekEndDate": week.week_end.isoformat(),
            "weekOffset": week.week_offset,
            "error": week.error,
            "timestamp": to_iso_utc(now),
            "nextOpening": (
                {"date": next_opening[0], **next_opening[1].to_hours_entry()}
                if next_opening
                else None
            ),
        }

    @staticmethod
    def error_payload(message: str, week_offset: int) -> dict[str, Any]:
        """Week query response for a request that produced no result."""
        return {
            "weekData": [],
            "weekStartDate": None,
            "weekEndDate": None,
            "weekOffset": week_offset,
            "error": message,
            "timestamp": to_iso_utc(datetime.now(timezone.utc)),
            "nextOpening": None,
        }


# Global endpoint instance
weekly_endpoint = WeeklyEndpoint()
