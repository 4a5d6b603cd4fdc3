"""
Centralized date, time and duration utilities.

Activity times are stored as "HH:MM" strings on a single date, so logged
time is always a same-day difference in whole minutes.
"""

from datetime import date, datetime, timedelta
from typing import Dict, Iterable, Optional
import pytz

from config import settings

from ..models import ProjectStatus


def get_local_tz() -> pytz.BaseTzInfo:
    """Get the configured local timezone."""
    return pytz.timezone(settings.timezone)


def get_local_now() -> datetime:
    """Get current time in local timezone (naive)."""
    return datetime.now(get_local_tz()).replace(tzinfo=None)


def get_local_today() -> date:
    return get_local_now().date()


def parse_hhmm(value: str) -> Optional[int]:
    """
    Minutes since midnight for an "H:M" / "HH:MM" string.

    Returns:
        Minutes, or None if the value is not a valid time
    """
    if not value or ":" not in value:
        return None

    hour, _, minute = value.strip().partition(":")
    try:
        hours, minutes = int(hour), int(minute)
    except ValueError:
        return None

    if not (0 <= hours < 24 and 0 <= minutes < 60):
        return None
    return hours * 60 + minutes


def minutes_between(start_time: str, end_time: str) -> int:
    """Logged minutes for a start/end pair; 0 when unparsable or not positive."""
    start = parse_hhmm(start_time)
    end = parse_hhmm(end_time)
    if start is None or end is None:
        return 0
    return max(end - start, 0)


def format_duration(minutes: int) -> str:
    """
    Format minutes for display.

    Examples:
        45 -> "45m", 120 -> "2h", 125 -> "2h 5m"
    """
    if minutes < 60:
        return f"{minutes}m"

    hours, remainder = divmod(minutes, 60)
    if remainder == 0:
        return f"{hours}h"
    return f"{hours}h {remainder}m"


def total_logged_minutes(activities: Iterable) -> int:
    return sum(minutes_between(a.start_time, a.end_time) for a in activities)


def minutes_by_project(
    activities: Iterable,
    projects: Iterable,
    since: Optional[date] = None,
) -> Dict[str, int]:
    """
    Logged minutes per project name.

    Args:
        activities: Activities to aggregate
        projects: Known projects; activities of unknown projects are ignored
        since: Only count activities dated strictly after this day
            (defaults to 30 days ago)

    Returns:
        Project name -> minutes, only for projects with time logged
    """
    if since is None:
        since = get_local_today() - timedelta(days=30)

    names = {p.id: p.name for p in projects}
    totals: Dict[str, int] = {}

    for activity in activities:
        if activity.date <= since:
            continue
        name = names.get(activity.project_id)
        if name is None:
            continue
        minutes = minutes_between(activity.start_time, activity.end_time)
        if minutes > 0:
            totals[name] = totals.get(name, 0) + minutes

    return totals


def is_overdue(project, today: Optional[date] = None) -> bool:
    """A project is overdue when its deadline has passed and it is not completed."""
    if project.deadline is None:
        return False
    today = today or get_local_today()
    return project.deadline < today and project.status != ProjectStatus.COMPLETED


def format_date(value: Optional[date]) -> str:
    """Format a date for display, or "Not set"."""
    if value is None:
        return "Not set"
    return value.strftime("%b %d, %Y")
