"""Pytest configuration and fixtures."""

import os
from datetime import datetime
from typing import Callable, List, Optional

import pytest

from ganttline.config import get_settings
from ganttline.dsl.schema import GanttOptions
from ganttline.engine.dates import Calendar
from ganttline.engine.gantt import Gantt, GanttEvents

# "Now" for every test that uses the calendar fixture
FIXED_NOW = datetime(2024, 1, 10, 15, 30)


def fixed_measure(text: str, font_size: float) -> float:
    """Deterministic text width: 0.6 em per character."""
    return len(text) * font_size * 0.6


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch):
    """Isolate tests from GANTT_* variables and the settings cache."""
    for key in list(os.environ):
        if key.startswith("GANTT_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def calendar() -> Calendar:
    """Calendar with the clock pinned to FIXED_NOW."""
    return Calendar(now=lambda: FIXED_NOW)


@pytest.fixture
def measure() -> Callable[[str, float], float]:
    return fixed_measure


@pytest.fixture
def sample_records() -> List[dict]:
    """Two tasks; B depends on A."""
    return [
        {"id": "A", "name": "Design", "start": "01-01-2024", "end": "05-01-2024", "progress": 50},
        {"id": "B", "name": "Build", "start": "06-01-2024", "end": "07-01-2024", "dependent": "A"},
    ]


@pytest.fixture
def make_gantt(calendar: Calendar):
    """Factory building a Gantt with the fixed clock and measurement."""
    def _make(
        records: List[dict],
        options: Optional[GanttOptions] = None,
        events: Optional[GanttEvents] = None,
    ) -> Gantt:
        return Gantt(records, options=options, events=events, calendar=calendar, measure=fixed_measure)

    return _make
