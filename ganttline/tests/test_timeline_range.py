"""Tests for visible range resolution."""

from datetime import datetime

import pytest

from ganttline.engine.data_models import normalize_tasks
from ganttline.engine.dates import Calendar
from ganttline.engine.timeline_range import TimelineRange, resolve, task_extent, widen
from ganttline.engine.view_modes import ALL_VIEW_MODES, ViewMode


END_OF_DAY = dict(hour=23, minute=59, second=59, microsecond=999999)


class TestTaskExtent:
    """Tests for the raw min-start / max-end extent."""

    def test_extent_spans_all_tasks(self, calendar: Calendar, sample_records) -> None:
        tasks = normalize_tasks(sample_records, calendar)
        extent = task_extent(tasks, calendar)
        assert extent.start == datetime(2024, 1, 1)
        assert extent.end == datetime(2024, 1, 7)

    def test_extent_ignores_input_order(self, calendar: Calendar, sample_records) -> None:
        tasks = normalize_tasks(list(reversed(sample_records)), calendar)
        extent = task_extent(tasks, calendar)
        assert extent == TimelineRange(datetime(2024, 1, 1), datetime(2024, 1, 7))

    def test_empty_task_list_seeds_with_today(self, calendar: Calendar) -> None:
        extent = task_extent([], calendar)
        assert extent.start == extent.end == datetime(2024, 1, 10)


class TestWiden:
    """Tests for the per-mode padding rules."""

    @pytest.fixture
    def extent(self) -> TimelineRange:
        return TimelineRange(datetime(2024, 1, 1), datetime(2024, 1, 7))

    def test_day_pads_a_month_each_side(self, calendar: Calendar, extent: TimelineRange) -> None:
        widened = widen(extent, ViewMode.DAY, calendar)
        assert widened.start == datetime(2023, 12, 1)
        # End of January + 1 month clamps to 29 Feb
        assert widened.end == datetime(2024, 2, 29, **END_OF_DAY)

    def test_week_uses_the_day_rule(self, calendar: Calendar, extent: TimelineRange) -> None:
        assert widen(extent, "Week", calendar) == widen(extent, "Day", calendar)

    @pytest.mark.parametrize("mode", ["Quarter Day", "Half Day"])
    def test_sub_day_modes_pad_a_week(self, calendar: Calendar, extent: TimelineRange, mode: str) -> None:
        widened = widen(extent, mode, calendar)
        assert widened.start == datetime(2023, 12, 25)
        assert widened.end == datetime(2024, 1, 14)

    def test_month_spans_start_of_year_to_next_year(self, calendar: Calendar, extent: TimelineRange) -> None:
        widened = widen(extent, ViewMode.MONTH, calendar)
        assert widened.start == datetime(2024, 1, 1)
        assert widened.end == datetime(2025, 1, 31, **END_OF_DAY)


class TestResolve:
    """Tests for the combined resolution."""

    @pytest.mark.parametrize("mode", ALL_VIEW_MODES)
    def test_range_contains_every_task(self, calendar: Calendar, sample_records, mode: ViewMode) -> None:
        tasks = normalize_tasks(sample_records, calendar)
        timeline = resolve(tasks, mode, calendar)
        for task in tasks:
            assert timeline.contains(task.start_at)
            assert timeline.contains(task.end_at)
        assert timeline.start <= timeline.end

    def test_empty_tasks_still_resolve(self, calendar: Calendar) -> None:
        timeline = resolve([], "Day", calendar)
        assert timeline.start == datetime(2023, 12, 1)
        assert timeline.end == datetime(2024, 2, 29, **END_OF_DAY)
