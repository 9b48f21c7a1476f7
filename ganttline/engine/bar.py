"""
bar.py — Task bar widget.

A Bar owns its own geometry: it derives x and width from its task's dates
through the pass's CoordinateMapper, and y from the task's sequence index.
It reports date and progress changes through its `events` table and keeps
references to every arrow it takes part in so they follow it when it moves.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Callable, List, Optional

from .coordinates import CoordinateMapper
from .data_models import Task
from .scene import Scene, SceneElement
from .units import BAR_LABEL_FONT_SIZE_PX, clamp

if TYPE_CHECKING:
    from .arrow import Arrow

logger = logging.getLogger(__name__)

BAR_CORNER_RADIUS = 3
LABEL_OUTSIDE_GAP = 5


# =============================================================================
# LAYOUT SNAPSHOT
# =============================================================================

@dataclass(frozen=True)
class BarLayout:
    """
    Read-only layout configuration handed to every widget of one pass.

    Widgets must not keep it across renders.
    """
    mapper: CoordinateMapper
    header_height: float
    padding: float
    bar_height: float
    arrow_curve: float

    def row_y(self, index: int) -> float:
        """Top of the bar in row `index`."""
        return self.header_height + self.padding + index * (self.bar_height + self.padding)


@dataclass
class BarEvents:
    """Callbacks a bar fires. Unset slots are skipped."""
    on_date_change: Optional[Callable[[Task, datetime, datetime], None]] = None
    on_progress_change: Optional[Callable[[Task, float], None]] = None
    on_click: Optional[Callable[[Task], None]] = None


# =============================================================================
# BAR
# =============================================================================

class Bar:
    """Visual rectangle for one task."""

    def __init__(
        self,
        scene: Scene,
        task: Task,
        layout: BarLayout,
        popover_group: Optional[SceneElement] = None,
    ):
        self.scene = scene
        self.task = task
        self.layout = layout
        self.popover_group = popover_group
        self.events = BarEvents()
        self.arrows: List["Arrow"] = []

        self.x = layout.mapper.x_for(task.start_at)
        self.width = layout.mapper.width_for(task.start_at, task.end_at)
        self.y = layout.row_y(task.index)
        self.height = layout.bar_height

        self.group = scene.group(id=f"bar-{task.id}").add_class("bar-wrapper")
        if task.custom_class:
            self.group.add_class(task.custom_class)
        if task.invalid:
            self.group.add_class("invalid")

        self.draw()
        self.group.click(lambda _el: self._handle_click())

    # -------------------------------------------------------------------------
    # Drawing
    # -------------------------------------------------------------------------

    def draw(self) -> None:
        self.bar = self.scene.rect(
            self.x, self.y, self.width, self.height,
            rx=BAR_CORNER_RADIUS, ry=BAR_CORNER_RADIUS,
        ).add_class("bar").append_to(self.group)

        self.bar_progress = self.scene.rect(
            self.x, self.y, self.progress_width, self.height,
            rx=BAR_CORNER_RADIUS, ry=BAR_CORNER_RADIUS,
        ).add_class("bar-progress").append_to(self.group)

        self.label = self.scene.text(
            0, self.y + self.height / 2, self.task.name,
            **{"font-size": BAR_LABEL_FONT_SIZE_PX, "dominant-baseline": "central"},
        ).add_class("bar-label").append_to(self.group)
        self.update_label_position()

    @property
    def progress_width(self) -> float:
        return self.width * clamp(self.task.progress, 0, 100) / 100

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def right_edge(self) -> float:
        return self.x + self.width

    def update_label_position(self) -> None:
        """Centre the label on the bar, or put it after the bar if it does not fit."""
        label_width = self.scene.measure(self.task.name, BAR_LABEL_FONT_SIZE_PX)
        if label_width > self.width:
            self.label.add_class("big")
            self.label.attr({"x": self.right_edge + LABEL_OUTSIDE_GAP, "text-anchor": "start"})
        else:
            self.label.remove_class("big")
            self.label.attr({"x": self.center_x, "text-anchor": "middle"})

    def update_bar_position(self, x: Optional[float] = None, width: Optional[float] = None) -> None:
        """Move/resize the bar and drag its arrows along."""
        if x is not None:
            self.x = x
        if width is not None:
            self.width = max(0.0, width)
        self.bar.attr(x=self.x, width=self.width)
        self.bar_progress.attr(x=self.x, width=self.progress_width)
        self.update_label_position()
        for arrow in self.arrows:
            arrow.update()

    # -------------------------------------------------------------------------
    # Interaction
    # -------------------------------------------------------------------------

    def click(self, handler: Optional[Callable[[Task], None]]) -> "Bar":
        """Set the callback fired when the bar is clicked."""
        self.events.on_click = handler
        return self

    def _handle_click(self) -> None:
        self.group.add_class("active")
        self.show_details()
        if self.events.on_click:
            self.events.on_click(self.task)

    def show_details(self) -> None:
        """Render the task's name and date span into the popover layer."""
        if self.popover_group is None:
            return
        for child in list(self.popover_group.children):
            child.remove()

        calendar = self.layout.mapper.calendar
        span = (
            f"{calendar.format(self.task.start_at, 'D MMM')} - "
            f"{calendar.format(self.task.end_at, 'D MMM')}"
        )
        popover = self.scene.group().add_class("details-container").append_to(self.popover_group)
        self.scene.text(
            self.x, self.y + self.height + self.layout.padding / 2, self.task.name,
            **{"text-anchor": "start"},
        ).add_class("details-heading").append_to(popover)
        self.scene.text(
            self.x, self.y + self.height + self.layout.padding, span,
            **{"text-anchor": "start"},
        ).add_class("details-body").append_to(popover)

    def move(self, dx: float) -> None:
        """Drag the whole bar horizontally, then report the new dates."""
        self.update_bar_position(x=self.x + dx)
        self.date_changed()

    def resize(self, dwidth: float) -> None:
        """Drag the right handle, then report the new dates."""
        self.update_bar_position(width=self.width + dwidth)
        self.date_changed()

    def date_changed(self) -> None:
        """Convert the current geometry back to dates and fire on_date_change."""
        mapper = self.layout.mapper
        new_start = mapper.instant_at(self.x)
        new_end = mapper.instant_at(self.x + self.width)
        self.task.start_at = new_start
        self.task.end_at = new_end
        logger.debug(f"Bar '{self.task.id}' moved to {new_start} - {new_end}")
        if self.events.on_date_change:
            self.events.on_date_change(self.task, new_start, new_end)

    def progress_changed(self, progress: float) -> None:
        """Set progress (clamped to 0-100) and fire on_progress_change."""
        self.task.progress = clamp(progress, 0, 100)
        self.bar_progress.attr(width=self.progress_width)
        if self.events.on_progress_change:
            self.events.on_progress_change(self.task, self.task.progress)
