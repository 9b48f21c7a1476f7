"""Tests for DSL schema models and settings."""

import pytest
from pydantic import ValidationError

from ganttline.config import GanttSettings, get_settings
from ganttline.dsl.schema import GanttOptions, TaskRecord
from ganttline.engine.view_modes import ALL_VIEW_MODES, ViewMode


class TestTaskRecord:
    """Tests for TaskRecord model."""

    def test_name_defaults_to_id(self) -> None:
        assert TaskRecord(id="T1").name == "T1"

    def test_unknown_keys_are_ignored(self) -> None:
        record = TaskRecord(id="T1", color="red")
        assert not hasattr(record, "color")

    def test_id_required(self) -> None:
        with pytest.raises(ValidationError):
            TaskRecord(id="")

    def test_progress_bounds(self) -> None:
        with pytest.raises(ValidationError):
            TaskRecord(id="T1", progress=101)
        with pytest.raises(ValidationError):
            TaskRecord(id="T1", progress=-1)

    def test_null_progress_is_zero(self) -> None:
        assert TaskRecord(id="T1", progress=None).progress == 0.0

    def test_dependent_list_is_joined(self) -> None:
        assert TaskRecord(id="T1", dependent=["A", "B"]).dependent == "A,B"

    def test_numeric_dates_become_text(self) -> None:
        record = TaskRecord(id="T1", start=20240101, end=1.5)
        assert record.start == "20240101"
        assert record.end == "1.5"

    def test_structured_dates_count_as_missing(self) -> None:
        record = TaskRecord(id="T1", start=["01-01-2024"], end={"day": 1})
        assert record.start is None
        assert record.end is None


class TestGanttOptions:
    """Tests for GanttOptions model."""

    def test_defaults(self) -> None:
        opts = GanttOptions()
        assert opts.label_width == 38
        assert opts.header_height == 50
        assert opts.column_width == 30
        assert opts.step == 24
        assert opts.bar_height == 20
        assert opts.arrow_curve == 5
        assert opts.padding == 18
        assert opts.view_mode == ViewMode.DAY
        assert opts.date_format == "DD-MM-YYYY"
        assert opts.valid_view_modes == ALL_VIEW_MODES
        assert opts.strict_ids is True

    def test_view_mode_by_name(self) -> None:
        assert GanttOptions(view_mode="Half Day").view_mode == ViewMode.HALF_DAY

    def test_unknown_view_mode_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GanttOptions(view_mode="Year")

    def test_view_mode_must_be_allowed(self) -> None:
        with pytest.raises(ValidationError):
            GanttOptions(view_mode="Month", valid_view_modes=["Day", "Week"])

    def test_empty_valid_view_modes_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GanttOptions(valid_view_modes=[])

    def test_negative_lengths_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GanttOptions(bar_height=0)
        with pytest.raises(ValidationError):
            GanttOptions(padding=-1)

    def test_options_are_frozen(self) -> None:
        opts = GanttOptions()
        with pytest.raises(ValidationError):
            opts.padding = 4


class TestSettings:
    """Tests for environment-backed settings."""

    def test_defaults(self) -> None:
        settings = GanttSettings()
        assert settings.default_view_mode == ViewMode.DAY
        assert settings.log_level == "WARNING"
        assert settings.font_dir is None

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GANTT_DEFAULT_VIEW_MODE", "Week")
        monkeypatch.setenv("GANTT_CONTAINER_WIDTH", "640")
        settings = GanttSettings()
        assert settings.default_view_mode == ViewMode.WEEK
        assert settings.container_width == 640

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_options_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GANTT_DEFAULT_VIEW_MODE", "Month")
        monkeypatch.setenv("GANTT_DATE_FORMAT", "YYYY-MM-DD")
        opts = GanttOptions.from_settings(padding=10)
        assert opts.view_mode == ViewMode.MONTH
        assert opts.date_format == "YYYY-MM-DD"
        assert opts.padding == 10

    def test_overrides_win_over_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GANTT_DEFAULT_VIEW_MODE", "Month")
        assert GanttOptions.from_settings(view_mode="Week").view_mode == ViewMode.WEEK
