"""
dates.py — Calendar capability injected into the layout pipeline.

Every parse, format and calendar-arithmetic call made by the engine goes
through a Calendar instance, so tests can pin "today" with a fixed clock.

Parsing, formatting and unit boundaries are delegated to pendulum, which
takes moment-style format tokens (DD-MM-YYYY, MMMM, HH ...). Month steps use
python-dateutil's relativedelta, never a fixed number of hours. The engine
itself only ever sees naive stdlib datetimes.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional

import pendulum
from dateutil.relativedelta import relativedelta

_UNITS = ("years", "months", "weeks", "days", "hours", "minutes")
_BOUNDARY_UNITS = ("year", "month", "day")


def _to_pendulum(instant: datetime) -> pendulum.DateTime:
    return pendulum.naive(
        instant.year, instant.month, instant.day,
        instant.hour, instant.minute, instant.second, instant.microsecond,
    )


def _to_datetime(instant: pendulum.DateTime) -> datetime:
    return datetime(
        instant.year, instant.month, instant.day,
        instant.hour, instant.minute, instant.second, instant.microsecond,
    )


# =============================================================================
# CALENDAR
# =============================================================================

class Calendar:
    """
    Date parsing, formatting and calendar arithmetic.

    The clock is injectable; "today" is always the clock's current instant
    truncated to midnight.
    """

    def __init__(self, now: Optional[Callable[[], datetime]] = None):
        self._now = now or datetime.now

    # -------------------------------------------------------------------------
    # Clock
    # -------------------------------------------------------------------------

    def now(self) -> datetime:
        return self._now()

    def today(self) -> datetime:
        """Start of the current day."""
        return self.start_of(self.now(), "day")

    # -------------------------------------------------------------------------
    # Parse / format
    # -------------------------------------------------------------------------

    def parse(self, text: Optional[str], fmt: str) -> Optional[datetime]:
        """
        Parse text with a moment-style format.

        Returns None for empty or malformed input instead of raising, so
        callers can substitute a placeholder.
        """
        if not text or not text.strip():
            return None
        try:
            parsed = pendulum.from_format(text.strip(), fmt)
        except ValueError:
            return None
        return _to_datetime(parsed)

    def format(self, instant: datetime, fmt: str) -> str:
        """Format an instant with a moment-style format."""
        return _to_pendulum(instant).format(fmt)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def add(self, instant: datetime, amount: float, unit: str) -> datetime:
        """
        Add an amount of a calendar unit.

        Months and years use calendar arithmetic (Jan 31 + 1 month = Feb 28/29).
        """
        if unit not in _UNITS:
            raise ValueError(f"Unsupported unit: {unit}")
        if unit in ("years", "months"):
            return instant + relativedelta(**{unit: int(amount)})
        return instant + timedelta(**{unit: amount})

    def subtract(self, instant: datetime, amount: float, unit: str) -> datetime:
        return self.add(instant, -amount, unit)

    def diff_hours(self, later: datetime, earlier: datetime) -> float:
        """Signed difference in (fractional) hours."""
        return (later - earlier).total_seconds() / 3600

    def start_of(self, instant: datetime, unit: str) -> datetime:
        if unit not in _BOUNDARY_UNITS:
            raise ValueError(f"Unsupported unit: {unit}")
        return _to_datetime(_to_pendulum(instant).start_of(unit))

    def end_of(self, instant: datetime, unit: str) -> datetime:
        """Last representable instant of the unit containing `instant`."""
        if unit not in _BOUNDARY_UNITS:
            raise ValueError(f"Unsupported unit: {unit}")
        return _to_datetime(_to_pendulum(instant).end_of(unit))

    def days_in_month(self, instant: datetime) -> int:
        return _to_pendulum(instant).days_in_month

    def iso_week(self, instant: datetime) -> int:
        return _to_pendulum(instant).week_of_year


def default_calendar() -> Calendar:
    """Calendar bound to the system clock."""
    return Calendar()
