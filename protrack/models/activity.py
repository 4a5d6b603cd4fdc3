"""Activity (time log) data model."""

import datetime
from typing import List
from pydantic import field_validator, model_validator

from .base import CamelModel


def _check_hhmm(value: str) -> str:
    hours, sep, minutes = value.partition(":")
    if not sep or not hours.isdigit() or not minutes.isdigit():
        raise ValueError(f"expected HH:mm, got {value!r}")
    if int(hours) > 23 or int(minutes) > 59:
        raise ValueError(f"time out of range: {value!r}")
    return f"{int(hours):02d}:{int(minutes):02d}"


class ActivityBase(CamelModel):
    activity: str
    task_id: str
    project_id: str
    user_id: str
    date: datetime.date
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def _normalize_time(cls, value: str) -> str:
        return _check_hhmm(value)


class ActivityCreate(ActivityBase):
    """Fields accepted when logging an activity."""

    @model_validator(mode="after")
    def _end_after_start(self) -> "ActivityCreate":
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time.")
        return self


class Activity(ActivityBase):
    """A time-stamped log entry against a task."""
    id: str
    task_name: str = ""
    user_name: str = ""
    user_avatar: str = ""


def sort_newest_first(activities: List[Activity]) -> List[Activity]:
    """Date descending; equal dates keep their relative order."""
    return sorted(activities, key=lambda a: a.date, reverse=True)
