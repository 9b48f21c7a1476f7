"""
coordinates.py — Date <-> pixel mapping.

Every visual element (grid ticks, today highlight, bars, arrows, label
offsets) goes through a CoordinateMapper so the grid and the bars always
agree. The mapper is a frozen snapshot of one render pass's configuration.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from .dates import Calendar
from .units import MONTH_REFERENCE_DAYS
from .view_modes import ViewMode


@dataclass(frozen=True)
class CoordinateMapper:
    """
    Pure mapping functions for one render pass.

    x = offset + hours(instant - start) / step * column_width

    In Month mode step is 30 days, so a month spans
    days_in_month * column_width / 30 pixels, proportionate to its length.
    """
    offset: float            # Label column width: x of the range start
    column_width: float      # Pixels per column
    step: float              # Hours per column
    start: datetime          # Range start
    view_mode: ViewMode
    calendar: Calendar

    def x_for(self, instant: datetime) -> float:
        """Pixel x of an instant."""
        return self.offset + self.calendar.diff_hours(instant, self.start) / self.step * self.column_width

    def width_for(self, start: datetime, end: datetime) -> float:
        """Pixel width of the span [start, end]."""
        return self.calendar.diff_hours(end, start) / self.step * self.column_width

    def instant_at(self, x: float) -> datetime:
        """Inverse of x_for."""
        hours = (x - self.offset) / self.column_width * self.step
        return self.start + timedelta(hours=hours)

    def tick_width(self, tick: datetime) -> float:
        """Horizontal advance of the column that begins at a tick."""
        if self.view_mode == ViewMode.MONTH:
            return self.calendar.days_in_month(tick) * self.column_width / MONTH_REFERENCE_DAYS
        return self.column_width

    def scroll_offset(self, starts: Iterable[datetime]) -> float:
        """Initial horizontal scroll: x of the earliest start."""
        earliest: Optional[datetime] = None
        for instant in starts:
            if earliest is None or instant <= earliest:
                earliest = instant
        if earliest is None:
            return self.offset
        return self.x_for(earliest)
