"""Pydantic v2 models for task records and chart options.

This module defines the validated input surface of the layout engine: the
raw task record supplied by the embedding application and the options that
configure a chart. Dates stay strings here; parsing them (and degrading
gracefully when they are malformed) is the engine's job.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ganttline.engine.units import (
    ARROW_CURVE,
    BAR_HEIGHT,
    COLUMN_WIDTH,
    CONTAINER_WIDTH,
    DEFAULT_CONTAINER,
    DEFAULT_DATE_FORMAT,
    HEADER_HEIGHT,
    LABEL_WIDTH,
    PADDING,
    STEP_HOURS,
)
from ganttline.engine.view_modes import ALL_VIEW_MODES, ViewMode


# ============================================================================
# Task Records
# ============================================================================


class TaskRecord(BaseModel):
    """A task as supplied by the embedding application."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1, description="Unique task identifier")
    name: Optional[str] = Field(default=None, description="Display name (defaults to id)")
    start: Optional[str] = Field(default=None, description="Start date in the chart's date format")
    end: Optional[str] = Field(default=None, description="End date in the chart's date format")
    dependent: Optional[str] = Field(
        default=None, description="Comma-separated ids of tasks this one depends on"
    )
    progress: float = Field(default=0.0, ge=0.0, le=100.0, description="Percent complete")
    custom_class: Optional[str] = Field(default=None, description="Extra CSS class for the bar")

    @field_validator("start", "end", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> Any:
        """Numbers become text; other non-string values count as missing."""
        if isinstance(value, (int, float)):
            return str(value)
        if value is not None and not isinstance(value, str):
            return None
        return value

    @field_validator("dependent", mode="before")
    @classmethod
    def _join_dependency_list(cls, value: Any) -> Any:
        """Accept a list of ids as well as the comma-separated form."""
        if isinstance(value, (list, tuple)):
            return ",".join(str(v) for v in value)
        return value

    @field_validator("progress", mode="before")
    @classmethod
    def _default_progress(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @model_validator(mode="after")
    def _default_name(self) -> "TaskRecord":
        if not self.name:
            self.name = self.id
        return self


# ============================================================================
# Chart Options
# ============================================================================


class GanttOptions(BaseModel):
    """Chart configuration. Every field is optional and has a default."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    container: str = Field(default=DEFAULT_CONTAINER, description="Container selector")
    container_width: float = Field(default=CONTAINER_WIDTH, gt=0, description="Host width in px")
    label_width: float = Field(default=LABEL_WIDTH, ge=0, description="Offset of the first column")
    header_height: float = Field(default=HEADER_HEIGHT, ge=0)
    column_width: float = Field(
        default=COLUMN_WIDTH, gt=0, description="Base column width; the active view mode overrides it"
    )
    step: float = Field(
        default=STEP_HOURS, gt=0, description="Base hours per column; the active view mode overrides it"
    )
    bar_height: float = Field(default=BAR_HEIGHT, gt=0)
    arrow_curve: float = Field(default=ARROW_CURVE, ge=0)
    padding: float = Field(default=PADDING, ge=0)
    view_mode: ViewMode = Field(default=ViewMode.DAY)
    valid_view_modes: list[ViewMode] = Field(default_factory=lambda: list(ALL_VIEW_MODES))
    date_format: str = Field(default=DEFAULT_DATE_FORMAT, min_length=1)
    strict_ids: bool = Field(
        default=True, description="Reject duplicate task ids at load time (False: first match wins)"
    )

    @model_validator(mode="after")
    def _view_mode_allowed(self) -> "GanttOptions":
        if not self.valid_view_modes:
            raise ValueError("valid_view_modes must not be empty")
        if self.view_mode not in self.valid_view_modes:
            raise ValueError(
                f"view_mode '{self.view_mode.value}' is not in valid_view_modes"
            )
        return self

    @classmethod
    def from_settings(cls, **overrides: Any) -> "GanttOptions":
        """Build options from environment settings, then apply overrides."""
        from ganttline.config import get_settings

        settings = get_settings()
        values: dict[str, Any] = {
            "view_mode": settings.default_view_mode,
            "date_format": settings.date_format,
            "container_width": settings.container_width,
        }
        values.update(overrides)
        return cls(**values)
