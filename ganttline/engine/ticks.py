"""
ticks.py — Date-axis tick sequence and header labels.

The tick sequence starts exactly at the range start and advances by the
view mode's unit until it meets or passes the range end. Month mode steps
by calendar months; every other mode steps by a fixed number of hours.

Each tick gets a primary (lower) and secondary (upper) header label. Labels
that would repeat the previous tick's value are emptied.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Union

from .coordinates import CoordinateMapper
from .dates import Calendar
from .timeline_range import TimelineRange
from .units import SECONDARY_TEXT_RISE
from .view_modes import ViewMode, parse_view_mode


# =============================================================================
# TICK SEQUENCE
# =============================================================================

def build_ticks(
    timeline: TimelineRange,
    view_mode: Union[str, ViewMode],
    step: float,
    calendar: Calendar,
) -> List[datetime]:
    """
    Ordered tick instants covering the range.

    Returns:
        Non-empty, strictly increasing list; first == range.start,
        last >= range.end
    """
    mode = parse_view_mode(view_mode)
    if mode != ViewMode.MONTH and step <= 0:
        raise ValueError(f"Step must be positive, got {step}")

    ticks = [timeline.start]
    current = timeline.start
    while current < timeline.end:
        if mode == ViewMode.MONTH:
            current = calendar.add(current, 1, "months")
        else:
            current = calendar.add(current, step, "hours")
        ticks.append(current)
    return ticks


# =============================================================================
# LABEL TEXT
# =============================================================================

def date_text(instant: datetime, view_mode: ViewMode, calendar: Calendar, primary: bool) -> str:
    """Header text for a tick in a view mode."""
    if view_mode == ViewMode.DAY:
        return calendar.format(instant, "D" if primary else "MMMM")
    if view_mode in (ViewMode.QUARTER_DAY, ViewMode.HALF_DAY):
        return calendar.format(instant, "HH" if primary else "D MMM")
    if view_mode == ViewMode.WEEK:
        return f"Week {calendar.iso_week(instant)}" if primary else calendar.format(instant, "MMMM")
    return calendar.format(instant, "MMMM" if primary else "YYYY")


def _shows_primary(current: datetime, previous: datetime, view_mode: ViewMode) -> bool:
    if view_mode == ViewMode.DAY:
        return current.day != previous.day
    return True


def _shows_secondary(current: datetime, previous: datetime, view_mode: ViewMode) -> bool:
    if view_mode in (ViewMode.QUARTER_DAY, ViewMode.HALF_DAY):
        return current.day != previous.day
    if view_mode == ViewMode.MONTH:
        return current.year != previous.year
    # Day and Week
    return current.month != previous.month


@dataclass
class DateLabel:
    """Header labels of one tick. Empty text means suppressed."""
    index: int
    tick: datetime
    primary_text: str
    secondary_text: str
    primary_x: float = 0.0
    primary_y: float = 0.0
    secondary_x: float = 0.0
    secondary_y: float = 0.0


def build_labels(
    ticks: List[datetime],
    view_mode: Union[str, ViewMode],
    calendar: Calendar,
) -> List[DateLabel]:
    """
    Primary/secondary text per tick with run-length suppression.

    The first tick always shows both labels.
    """
    mode = parse_view_mode(view_mode)
    labels = []
    for i, tick in enumerate(ticks):
        if i == 0:
            primary = date_text(tick, mode, calendar, primary=True)
            secondary = date_text(tick, mode, calendar, primary=False)
        else:
            previous = ticks[i - 1]
            primary = (
                date_text(tick, mode, calendar, primary=True)
                if _shows_primary(tick, previous, mode) else ""
            )
            secondary = (
                date_text(tick, mode, calendar, primary=False)
                if _shows_secondary(tick, previous, mode) else ""
            )
        labels.append(DateLabel(index=i, tick=tick, primary_text=primary, secondary_text=secondary))
    return labels


# =============================================================================
# LABEL PLACEMENT
# =============================================================================

# Columns spanned by one secondary label, used to centre it over its run
SECONDARY_SPAN_COLUMNS = {
    ViewMode.DAY: 30,
    ViewMode.WEEK: 4,
    ViewMode.QUARTER_DAY: 4,
    ViewMode.HALF_DAY: 2,
    ViewMode.MONTH: 12,
}


def position_labels(labels: List[DateLabel], mapper: CoordinateMapper, header_height: float) -> List[DateLabel]:
    """
    Fill in label coordinates through the mapper.

    Labels are middle-anchored: x is the centre of the text.
    """
    mode = mapper.view_mode
    for label in labels:
        tick_x = mapper.x_for(label.tick)

        primary_x = tick_x
        if mode in (ViewMode.DAY, ViewMode.WEEK, ViewMode.MONTH):
            primary_x += mapper.tick_width(label.tick) / 2

        secondary_x = tick_x + mapper.column_width * SECONDARY_SPAN_COLUMNS[mode] / 2

        label.primary_x = primary_x
        label.primary_y = header_height
        label.secondary_x = secondary_x
        label.secondary_y = header_height - SECONDARY_TEXT_RISE
    return labels
