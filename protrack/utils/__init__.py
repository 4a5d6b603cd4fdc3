"""Utility modules for ProTrack."""

from .datetime_utils import (
    get_local_tz,
    get_local_now,
    get_local_today,
    parse_hhmm,
    minutes_between,
    format_duration,
    total_logged_minutes,
    minutes_by_project,
    is_overdue,
    format_date,
)

from .retry import (
    RetryExhausted,
    retry_with_backoff,
    with_retry,
    with_google_api_retry,
    GOOGLE_API_RETRY,
)

__all__ = [
    # Datetime utilities
    "get_local_tz",
    "get_local_now",
    "get_local_today",
    "parse_hhmm",
    "minutes_between",
    "format_duration",
    "total_logged_minutes",
    "minutes_by_project",
    "is_overdue",
    "format_date",
    # Retry
    "RetryExhausted",
    "retry_with_backoff",
    "with_retry",
    "with_google_api_retry",
    "GOOGLE_API_RETRY",
]
