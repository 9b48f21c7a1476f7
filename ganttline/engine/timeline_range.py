"""
timeline_range.py — Visible date range resolution.

The range is never authored directly: it is the min task start and max task
end, widened by a view-mode rule so the ruler has context around the tasks.
It is recomputed from scratch on every task or mode change.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Union

from .data_models import Task
from .dates import Calendar
from .view_modes import ViewMode, parse_view_mode


@dataclass(frozen=True)
class TimelineRange:
    """Widened [start, end) window the timeline displays."""
    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end


def task_extent(tasks: Iterable[Task], calendar: Calendar) -> TimelineRange:
    """
    Min start and max end over the tasks.

    The first task seeds both ends; an empty list seeds both with today.
    """
    start = end = None
    for task in tasks:
        if start is None or task.start_at < start:
            start = task.start_at
        if end is None or task.end_at > end:
            end = task.end_at

    if start is None or end is None:
        today = calendar.today()
        return TimelineRange(today, today)
    return TimelineRange(start, end)


def widen(extent: TimelineRange, view_mode: Union[str, ViewMode], calendar: Calendar) -> TimelineRange:
    """Apply the view-mode padding rule to a raw task extent."""
    mode = parse_view_mode(view_mode)
    start, end = extent.start, extent.end

    if mode in (ViewMode.QUARTER_DAY, ViewMode.HALF_DAY):
        start = calendar.subtract(start, 7, "days")
        end = calendar.add(end, 7, "days")
    elif mode == ViewMode.MONTH:
        start = calendar.start_of(start, "year")
        end = calendar.add(calendar.end_of(end, "month"), 1, "years")
    else:
        start = calendar.subtract(calendar.start_of(start, "month"), 1, "months")
        end = calendar.add(calendar.end_of(end, "month"), 1, "months")

    return TimelineRange(start, end)


def resolve(tasks: Iterable[Task], view_mode: Union[str, ViewMode], calendar: Calendar) -> TimelineRange:
    """Visible range for a task set under a view mode."""
    return widen(task_extent(tasks, calendar), view_mode, calendar)
