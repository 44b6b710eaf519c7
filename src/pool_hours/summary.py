"""Human-readable summaries of pool sessions."""

from datetime import datetime

from .models import NormalizedSession, WeekResult
from .utils import format_time_range


def prettify_hours(
    sessions: list[NormalizedSession], is_open_now: bool, timezone_name: str
) -> str:
    """One-line status, e.g. "[Open] Lap 7:30am-11:00am / Rec 1:00pm-4:00pm".

    Args:
        sessions: The day's sessions, in display order
        is_open_now: Whether the pool is open at request time
        timezone_name: Timezone the times are rendered in
    """
    if not sessions:
        return "[Closed] No hours available today"

    parts = ["[Open]" if is_open_now else "[Closed]"]

    lap = [s for s in sessions if s.type == "lap"]
    rec = [s for s in sessions if s.type == "recreational"]
    if lap:
        parts.append(
            "Lap "
            + ", ".join(format_time_range(s.start, s.end, timezone_name) for s in lap)
        )
    if lap and rec:
        parts.append("/")
    if rec:
        parts.append(
            "Rec "
            + ", ".join(format_time_range(s.start, s.end, timezone_name) for s in rec)
        )

    return " ".join(parts)


def find_next_opening(
    week: WeekResult, now: datetime
) -> tuple[str, NormalizedSession] | None:
    """The running session, or else the earliest one starting after `now`.

    Looks across every day of the week, so once today's sessions are over
    the next opening is found on a later day.

    Returns:
        (ISO date of the day, session) or None when nothing is left this week
    """
    candidates = [
        (week_day.day.date.isoformat(), session)
        for week_day in week.days
        for session in week_day.day.sessions
        if session.end >= now
    ]
    if not candidates:
        return None
    return min(candidates, key=lambda c: c[1].start)
