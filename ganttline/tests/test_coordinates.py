"""Tests for date <-> pixel mapping."""

from datetime import datetime, timedelta

import pytest

from ganttline.engine.coordinates import CoordinateMapper
from ganttline.engine.dates import Calendar
from ganttline.engine.data_models import normalize_tasks
from ganttline.engine.timeline_range import resolve
from ganttline.engine.view_modes import ALL_VIEW_MODES, ViewMode, get_scale


def mapper_for(mode: ViewMode, start: datetime, calendar: Calendar, offset: float = 38) -> CoordinateMapper:
    scale = get_scale(mode)
    return CoordinateMapper(
        offset=offset,
        column_width=scale.column_width,
        step=scale.step,
        start=start,
        view_mode=mode,
        calendar=calendar,
    )


class TestXFor:
    """Tests for instant -> x."""

    @pytest.mark.parametrize("mode", ALL_VIEW_MODES)
    def test_range_start_maps_to_label_width(self, calendar: Calendar, sample_records, mode: ViewMode) -> None:
        tasks = normalize_tasks(sample_records, calendar)
        timeline = resolve(tasks, mode, calendar)
        mapper = mapper_for(mode, timeline.start, calendar)
        assert mapper.x_for(timeline.start) == 38

    def test_one_step_is_one_column(self, calendar: Calendar) -> None:
        start = datetime(2024, 1, 1)
        mapper = mapper_for(ViewMode.WEEK, start, calendar)
        assert mapper.x_for(start + timedelta(days=7)) == pytest.approx(38 + 140)

    def test_before_start_is_left_of_offset(self, calendar: Calendar) -> None:
        start = datetime(2024, 1, 1)
        mapper = mapper_for(ViewMode.DAY, start, calendar)
        assert mapper.x_for(start - timedelta(days=1)) == pytest.approx(0)

    def test_width_for(self, calendar: Calendar) -> None:
        mapper = mapper_for(ViewMode.DAY, datetime(2024, 1, 1), calendar)
        assert mapper.width_for(datetime(2024, 1, 1), datetime(2024, 1, 5)) == pytest.approx(4 * 38)


class TestInverse:
    """Tests for x -> instant."""

    @pytest.mark.parametrize("mode", ALL_VIEW_MODES)
    def test_instant_at_inverts_x_for(self, calendar: Calendar, mode: ViewMode) -> None:
        mapper = mapper_for(mode, datetime(2023, 12, 1), calendar)
        instant = datetime(2024, 1, 6, 12)
        recovered = mapper.instant_at(mapper.x_for(instant))
        assert abs((recovered - instant).total_seconds()) < 1


class TestTickWidth:
    """Tests for per-column advance."""

    def test_month_width_is_proportional_to_length(self, calendar: Calendar) -> None:
        mapper = mapper_for(ViewMode.MONTH, datetime(2024, 1, 1), calendar)
        assert mapper.tick_width(datetime(2024, 2, 1)) == pytest.approx(29 * 120 / 30)
        assert mapper.tick_width(datetime(2024, 1, 1)) == pytest.approx(31 * 120 / 30)

    def test_month_ticks_line_up_with_widths(self, calendar: Calendar) -> None:
        mapper = mapper_for(ViewMode.MONTH, datetime(2024, 1, 1), calendar)
        jan, feb = datetime(2024, 1, 1), datetime(2024, 2, 1)
        assert mapper.x_for(feb) - mapper.x_for(jan) == pytest.approx(mapper.tick_width(jan))

    def test_other_modes_use_column_width(self, calendar: Calendar) -> None:
        mapper = mapper_for(ViewMode.DAY, datetime(2024, 1, 1), calendar)
        assert mapper.tick_width(datetime(2024, 2, 1)) == 38


class TestScrollOffset:
    """Tests for the initial scroll position."""

    def test_scroll_to_earliest_start(self, calendar: Calendar) -> None:
        mapper = mapper_for(ViewMode.DAY, datetime(2023, 12, 1), calendar)
        starts = [datetime(2024, 1, 6), datetime(2024, 1, 1)]
        assert mapper.scroll_offset(starts) == pytest.approx(38 + 31 * 38)

    def test_no_tasks_scrolls_to_offset(self, calendar: Calendar) -> None:
        mapper = mapper_for(ViewMode.DAY, datetime(2023, 12, 1), calendar)
        assert mapper.scroll_offset([]) == 38
