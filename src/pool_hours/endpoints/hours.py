import logging
from datetime import date, datetime, timezone
from typing import Any

from bs4 import BeautifulSoup

from ..client import PoolSiteClient, describe_error
from ..config import config
from ..models import DayResult, NormalizedSession, PoolHoursException
from ..schedule_parser import PoolHours, ScheduleParser
from ..summary import prettify_hours
from ..utils import (
    normalize_time_range,
    parse_date,
    to_iso_utc,
    today_in_timezone,
    validate_date,
    weekday_name,
)

logger = logging.getLogger(__name__)


class HoursEndpoint:
    """Endpoint for one day of pool hours."""

    def __init__(self):
        """Initialize endpoint."""
        self.client = PoolSiteClient()

    @property
    def site_timezone(self) -> str:
        return config.site_timezone

    def extract_pool_hours(self, html: "str | BeautifulSoup") -> PoolHours:
        """Extract raw sessions for both categories using the configured mode."""
        soup = ScheduleParser.make_soup(html)
        if config.extraction_mode == "combined":
            return ScheduleParser.parse_all_pool_hours(soup)

        hours: PoolHours = {}
        for category in ("lap", "recreational"):
            for day, sessions in ScheduleParser.parse_category_hours(
                soup, category
            ).items():
                hours.setdefault(day, []).extend(sessions)
        return hours

    def build_day_result(
        self, html: "str | BeautifulSoup", target_date: date, now: datetime
    ) -> DayResult:
        """Assemble the sessions of one date from an already fetched page.

        Args:
            html: Raw HTML or parsed pool hours page
            target_date: Date in the site timezone
            now: Current instant (timezone aware)

        Returns:
            DayResult with sessions sorted by start time
        """
        day_name = weekday_name(target_date)
        raw_sessions = self.extract_pool_hours(html).get(day_name, [])

        sessions = []
        for raw in raw_sessions:
            span = normalize_time_range(
                raw.time_range_text, target_date, self.site_timezone
            )
            if span is None:
                continue
            sessions.append(
                NormalizedSession(
                    start=span[0],
                    end=span[1],
                    type=raw.session_type,
                    source_text=raw.time_range_text,
                )
            )
        sessions.sort(key=lambda s: s.start)

        return DayResult(
            date=target_date,
            weekday_name=day_name,
            sessions=sessions,
            is_open_now=self.is_open_now(sessions, target_date, now),
        )

    def is_open_now(
        self, sessions: list[NormalizedSession], target_date: date, now: datetime
    ) -> bool:
        """Whether `now` falls inside a session, for today's date only.

        Compared at minute granularity with both ends inclusive.
        """
        if target_date != today_in_timezone(now, self.site_timezone):
            return False

        current = now.astimezone(timezone.utc).replace(second=0, microsecond=0)
        return any(s.start <= current <= s.end for s in sessions)

    async def get_day_result(self, target_date: date, now: datetime) -> DayResult:
        """Fetch the pool page and build the result for one date.

        Transport failures are returned as a DayResult carrying an error
        message instead of being raised.
        """
        try:
            html = await self.client.fetch_schedule_page()
        except PoolHoursException as e:
            logger.error(f"Failed to fetch pool page for {target_date}: {e}")
            return DayResult(
                date=target_date,
                weekday_name=weekday_name(target_date),
                sessions=[],
                error=describe_error(e),
            )

        result = self.build_day_result(html, target_date, now)
        logger.debug(f"{target_date}: {len(result.sessions)} sessions")
        return result

    async def get_pool_hours(
        self, date_str: str | None = None, now: datetime | None = None
    ) -> dict[str, Any]:
        """Get pool hours for a date.

        Args:
            date_str: Date in YYYY-MM-DD format; today in the site timezone if omitted
            now: Current instant, defaults to the system clock

        Returns:
            Pool hours payload

        Raises:
            PoolHoursException: If the date is malformed
        """
        now = now or datetime.now(timezone.utc)

        if date_str:
            if not validate_date(date_str):
                raise PoolHoursException(
                    code="INVALID_INPUT",
                    message="Invalid date format. Use YYYY-MM-DD format.",
                    details={"date": date_str},
                )
            target_date = parse_date(date_str)
        else:
            target_date = today_in_timezone(now, self.site_timezone)

        result = await self.get_day_result(target_date, now)
        return self.to_payload(result, now)

    def to_payload(self, result: DayResult, now: datetime) -> dict[str, Any]:
        """Serialize a DayResult to the day query response shape."""
        if result.error:
            prettified = "[Closed] Unable to retrieve pool hours"
        else:
            prettified = prettify_hours(
                result.sessions, result.is_open_now, self.site_timezone
            )
        return {
            "hours": [s.to_hours_entry() for s in result.sessions],
            "error": result.error,
            "timestamp": to_iso_utc(now),
            "date": result.date.isoformat(),
            "dayName": result.weekday_name,
            "isOpenNow": result.is_open_now,
            "prettified": prettified,
        }

    @staticmethod
    def error_payload(message: str, date_str: str | None) -> dict[str, Any]:
        """Day query response for a request that produced no result."""
        return {
            "hours": [],
            "isOpenNow": False,
            "prettified": "[Closed] Unable to retrieve pool hours",
            "error": message,
            "timestamp": to_iso_utc(datetime.now(timezone.utc)),
            "date": date_str,
            "dayName": None,
        }


# Global endpoint instance
hours_endpoint = HoursEndpoint()
