"""Tests for the weekly hours endpoint."""

import asyncio
from datetime import date, datetime, timezone

import httpx
import pytest

from pool_hours.endpoints.hours import HoursEndpoint
from pool_hours.endpoints.weekly import ALL_DAYS_FAILED, NO_WEEK_DATA, WeeklyEndpoint
from pool_hours.models import PoolHoursException

LA = "America/Los_Angeles"
# Noon Pacific on Wednesday 2024-01-17
WEDNESDAY_NOON = datetime(2024, 1, 17, 20, 0, tzinfo=timezone.utc)


def weekly_for(client) -> WeeklyEndpoint:
    hours = HoursEndpoint()
    hours.client = client
    return WeeklyEndpoint(hours)


@pytest.fixture
def weekly(html_client):
    return weekly_for(html_client)


class TestWeekBoundaries:
    """Test which dates make up a week."""

    def test_week_dates(self):
        dates = WeeklyEndpoint.week_dates(date(2024, 1, 17))

        assert dates[0] == date(2024, 1, 15)
        assert dates[-1] == date(2024, 1, 21)
        assert len(dates) == 7

    @pytest.mark.asyncio
    async def test_current_week(self, weekly):
        payload = await weekly.get_weekly_hours(0, LA, now=WEDNESDAY_NOON)

        assert payload["weekStartDate"] == "2024-01-15"
        assert payload["weekEndDate"] == "2024-01-21"
        assert payload["weekOffset"] == 0
        assert [d["dayName"] for d in payload["weekData"]] == [
            "Monday",
            "Tuesday",
            "Wednesday",
            "Thursday",
            "Friday",
            "Saturday",
            "Sunday",
        ]
        assert [d["date"] for d in payload["weekData"] if d["isToday"]] == ["2024-01-17"]
        assert payload["error"] is None
        assert payload["timestamp"] == "2024-01-17T20:00:00Z"

    @pytest.mark.asyncio
    async def test_next_week(self, weekly):
        payload = await weekly.get_weekly_hours(1, LA, now=WEDNESDAY_NOON)

        assert payload["weekStartDate"] == "2024-01-22"
        assert payload["weekEndDate"] == "2024-01-28"
        assert not any(d["isToday"] for d in payload["weekData"])

    @pytest.mark.asyncio
    async def test_sunday_belongs_to_preceding_monday(self, weekly):
        sunday_noon = datetime(2024, 1, 21, 20, 0, tzinfo=timezone.utc)

        payload = await weekly.get_weekly_hours(0, LA, now=sunday_noon)

        assert payload["weekStartDate"] == "2024-01-15"
        assert payload["weekData"][-1]["isToday"] is True

    @pytest.mark.asyncio
    async def test_client_timezone_decides_today(self, weekly):
        """Sunday evening in Los Angeles is already Monday in UTC."""
        now = datetime(2024, 1, 22, 3, 0, tzinfo=timezone.utc)

        pacific = await weekly.get_weekly_hours(0, LA, now=now)
        utc = await weekly.get_weekly_hours(0, "UTC", now=now)

        assert pacific["weekStartDate"] == "2024-01-15"
        assert pacific["weekData"][6]["isToday"] is True
        assert utc["weekStartDate"] == "2024-01-22"
        assert utc["weekData"][0]["isToday"] is True

    @pytest.mark.asyncio
    async def test_unknown_timezone(self, weekly):
        with pytest.raises(PoolHoursException) as exc_info:
            await weekly.get_weekly_hours(0, "Mars/Olympus_Mons", now=WEDNESDAY_NOON)

        assert exc_info.value.code == "INVALID_INPUT"


class TestWeekContents:
    """Test per-day sessions and week level errors."""

    @pytest.mark.asyncio
    async def test_days_carry_sessions(self, weekly):
        payload = await weekly.get_weekly_hours(0, LA, now=WEDNESDAY_NOON)
        saturday = payload["weekData"][5]

        assert [h["original"] for h in saturday["hours"]] == [
            "7:00am - 10:00am",
            "11:00am - 4:00pm",
            "Family swim 4:00pm - 6:00pm",
        ]
        assert saturday["hours"][0]["start"] == "2024-01-20T15:00:00Z"
        assert all(d["error"] is None for d in payload["weekData"])

    @pytest.mark.asyncio
    async def test_all_days_failed(self, refused_client):
        weekly = weekly_for(refused_client)

        payload = await weekly.get_weekly_hours(0, LA, now=WEDNESDAY_NOON)

        assert payload["error"] == ALL_DAYS_FAILED
        assert len(payload["weekData"]) == 7
        for day in payload["weekData"]:
            assert day["hours"] == []
            assert day["error"].startswith("Unable to connect to the pool website.")
        assert payload["nextOpening"] is None

    @pytest.mark.asyncio
    async def test_no_data_for_week(self, make_client):
        weekly = weekly_for(
            make_client(lambda request: httpx.Response(200, text="<p>Closed</p>"))
        )

        payload = await weekly.get_weekly_hours(0, LA, now=WEDNESDAY_NOON)

        assert payload["error"] == NO_WEEK_DATA
        assert all(d["error"] is None for d in payload["weekData"])

    @pytest.mark.asyncio
    async def test_one_failing_day_does_not_fail_the_week(self, html_client):
        class FlakyHours(HoursEndpoint):
            async def get_day_result(self, target_date, now):
                if target_date == date(2024, 1, 17):
                    raise RuntimeError("parser exploded")
                return await super().get_day_result(target_date, now)

        hours = FlakyHours()
        hours.client = html_client
        weekly = WeeklyEndpoint(hours)

        payload = await weekly.get_weekly_hours(0, LA, now=WEDNESDAY_NOON)
        wednesday = payload["weekData"][2]

        assert payload["error"] is None
        assert wednesday["date"] == "2024-01-17"
        assert wednesday["dayName"] == "Wednesday"
        assert wednesday["hours"] == []
        assert wednesday["error"] == "Failed to fetch data for 2024-01-17: parser exploded"
        assert payload["weekData"][1]["hours"]

    @pytest.mark.asyncio
    async def test_days_fetched_concurrently(self, make_client, pool_html):
        """All seven fetches are in flight before any of them completes."""
        started = 0
        all_started = asyncio.Event()

        async def handler(request):
            nonlocal started
            started += 1
            if started == 7:
                all_started.set()
            await all_started.wait()
            return httpx.Response(200, text=pool_html)

        weekly = weekly_for(make_client(handler))

        payload = await asyncio.wait_for(
            weekly.get_weekly_hours(0, LA, now=WEDNESDAY_NOON), timeout=5
        )

        assert started == 7
        assert payload["error"] is None


class TestNextOpening:
    """Test the next opening lookup across the week."""

    @pytest.mark.asyncio
    async def test_next_opening_rolls_to_tomorrow(self, weekly):
        # 8:00pm Pacific Monday, after Monday's last session
        now = datetime(2024, 1, 16, 4, 0, tzinfo=timezone.utc)

        payload = await weekly.get_weekly_hours(0, LA, now=now)

        assert payload["nextOpening"] == {
            "date": "2024-01-16",
            "start": "2024-01-16T14:00:00Z",
            "end": "2024-01-16T17:00:00Z",
            "timezone": "UTC",
            "original": "6:00am - 9:00am",
            "type": "lap",
        }

    @pytest.mark.asyncio
    async def test_later_session_today(self, weekly):
        payload = await weekly.get_weekly_hours(0, LA, now=WEDNESDAY_NOON)

        # Morning lap swim is over, rec swim starts at 1:00pm
        assert payload["nextOpening"]["date"] == "2024-01-17"
        assert payload["nextOpening"]["original"] == "1:00pm - 4:00pm"
