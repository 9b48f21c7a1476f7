"""
gantt.py — Layout orchestrator.

The Gantt coordinates one full render pass:
1. Resolves the visible range from the tasks and the active view mode
2. Builds the tick sequence and a CoordinateMapper for the pass
3. Draws the grid, header, rows, ticks and today highlight
4. Renders the date-axis labels
5. Places one bar per task and builds dependency arrows between them
6. Wires events, resizes the surface and computes the initial scroll

Every mutation (add_task, set_view_mode) is a full rebuild; each render
returns a fresh RenderState and nothing from a previous pass is reused.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

from ..dsl.schema import GanttOptions
from .arrow import Arrow
from .bar import Bar, BarLayout
from .coordinates import CoordinateMapper
from .data_models import (
    DuplicateTaskIdError,
    Task,
    TaskInput,
    find_task,
    normalize_task,
    normalize_tasks,
)
from .dates import Calendar, default_calendar
from .scene import MeasureFn, Scene, SceneElement, format_path
from .ticks import DateLabel, build_labels, build_ticks, position_labels
from .timeline_range import TimelineRange, resolve
from .units import HEADER_BAND_EXTRA, PRIMARY_FONT_SIZE_PX, SECONDARY_FONT_SIZE_PX
from .view_modes import (
    Scale,
    UnknownViewModeError,
    ViewMode,
    get_scale,
    parse_view_mode,
    validate_view_modes,
)

logger = logging.getLogger(__name__)

# Layer groups, bottom to top
LAYERS = ("grid", "date", "arrow", "progress", "bar", "details")


def _noop(*args: Any) -> None:
    return None


# =============================================================================
# EVENTS AND RENDER STATE
# =============================================================================

@dataclass
class GanttEvents:
    """Callbacks forwarded to the embedding application."""
    on_viewmode_change: Callable[[ViewMode], None] = _noop
    bar_on_date_change: Callable[[Task, datetime, datetime], None] = _noop
    bar_on_progress_change: Callable[[Task, float], None] = _noop
    bar_on_click: Callable[[Task], None] = _noop


@dataclass(frozen=True)
class RenderState:
    """Everything one render pass produced."""
    scene: Scene
    groups: Dict[str, SceneElement]
    timeline: TimelineRange
    scale: Scale
    mapper: CoordinateMapper
    ticks: List[datetime]
    labels: List[DateLabel]
    bars: List[Bar]
    arrows: List[Arrow]
    grid_width: float
    grid_height: float
    scroll_left: float
    warnings: List[str] = field(default_factory=list)

    @property
    def view_mode(self) -> ViewMode:
        return self.scale.view_mode

    def get_bar(self, task_id: str) -> Optional[Bar]:
        for bar in self.bars:
            if bar.task.id == task_id:
                return bar
        return None


# =============================================================================
# ARROW BUILDER
# =============================================================================

def build_arrows(
    tasks: Sequence[Task],
    bars: Sequence[Bar],
    layout: BarLayout,
    warnings: Optional[List[str]] = None,
) -> List[Arrow]:
    """
    One arrow per resolved dependency id.

    Bars are looked up by sequence index, so every bar of the pass must exist
    before this is called. Unresolved ids are skipped with a warning.
    """
    if len(bars) != len(tasks):
        raise ValueError("Arrows need one bar per task; build bars first")

    arrows = []
    for task in tasks:
        for dep_id in task.dependencies:
            dependency = find_task(tasks, dep_id)
            if dependency is None:
                message = f"Task '{task.id}' depends on unknown task '{dep_id}'"
                logger.warning(message)
                if warnings is not None:
                    warnings.append(message)
                continue
            arrows.append(Arrow(layout, bars[dependency.index], bars[task.index]))
    return arrows


# =============================================================================
# GANTT
# =============================================================================

class Gantt:
    """
    Interactive Gantt timeline.

    Usage:
        gantt = Gantt(tasks, GanttOptions(view_mode="Week"))
        state = gantt.set_view_mode("Month")
        svg = render_to_svg_string(state)
    """

    def __init__(
        self,
        tasks: Iterable[TaskInput],
        options: Optional[GanttOptions] = None,
        events: Optional[GanttEvents] = None,
        calendar: Optional[Calendar] = None,
        measure: Optional[MeasureFn] = None,
    ):
        """
        Initialize and render the chart.

        Args:
            tasks: Task records (TaskRecord or mappings)
            options: Chart options (defaults to GanttOptions())
            events: Callbacks (defaults to no-ops)
            calendar: Calendar capability (defaults to the system clock)
            measure: Text width function for bounding boxes (defaults to Pillow)
        """
        self.options = options or GanttOptions()
        self.events = events or GanttEvents()
        self.calendar = calendar or default_calendar()
        self.valid_view_modes = validate_view_modes(self.options.valid_view_modes)

        self.tasks: List[Task] = normalize_tasks(
            tasks,
            self.calendar,
            date_format=self.options.date_format,
            strict_ids=self.options.strict_ids,
        )

        self.measure = measure
        self.scene: Optional[Scene] = None

        self.view_mode: ViewMode = self.options.view_mode
        self.scale: Scale = get_scale(self.view_mode)
        self.state: Optional[RenderState] = None

        self.set_scale(self.options.view_mode)
        self.render()

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def get_view_modes(self) -> List[ViewMode]:
        """Allowed view modes, in configured order."""
        return list(self.valid_view_modes)

    def view_is(self, modes: Union[str, ViewMode, Iterable[Union[str, ViewMode]]]) -> bool:
        """Whether the active mode is the given mode (or one of them)."""
        if isinstance(modes, (str, ViewMode)):
            return self.view_mode == parse_view_mode(modes)
        return any(self.view_mode == parse_view_mode(mode) for mode in modes)

    def set_scale(self, mode: Union[str, ViewMode]) -> Scale:
        """
        Switch the active mode without rendering.

        The mode is validated before anything changes; the view-mode-change
        event fires before the new scale is applied.

        Raises:
            UnknownViewModeError: for names outside the registry or the
                configured valid_view_modes
        """
        parsed = parse_view_mode(mode)
        if parsed not in self.valid_view_modes:
            allowed = ", ".join(m.value for m in self.valid_view_modes)
            raise UnknownViewModeError(
                f"View mode '{parsed.value}' is not enabled. Allowed: {allowed}"
            )

        self.view_mode = parsed
        self.events.on_viewmode_change(parsed)
        self.scale = get_scale(parsed)
        return self.scale

    def set_view_mode(self, mode: Union[str, ViewMode]) -> RenderState:
        """Change the view mode and re-render."""
        self.set_scale(mode)
        return self.render()

    def add_task(self, record: TaskInput) -> RenderState:
        """Append a task with the next sequence index and re-render."""
        task = normalize_task(record, len(self.tasks), self.calendar, self.options.date_format)
        if find_task(self.tasks, task.id) is not None:
            message = f"Duplicate task ids: {task.id}"
            if self.options.strict_ids:
                raise DuplicateTaskIdError(message)
            logger.warning(f"{message}; dependencies resolve to the first match")
        self.tasks.append(task)
        return self.render()

    def get_task(self, task_id: str) -> Optional[Task]:
        return find_task(self.tasks, task_id)

    def get_bar(self, task_id: str) -> Optional[Bar]:
        return self.state.get_bar(task_id) if self.state else None

    @property
    def bars(self) -> List[Bar]:
        return self.state.bars if self.state else []

    @property
    def arrows(self) -> List[Arrow]:
        return self.state.arrows if self.state else []

    # =========================================================================
    # RENDER PIPELINE
    # =========================================================================

    def render(self) -> RenderState:
        """Run the full pipeline and return the new state."""
        opts = self.options
        scale = self.scale
        warnings: List[str] = []

        timeline = resolve(self.tasks, self.view_mode, self.calendar)
        ticks = build_ticks(timeline, self.view_mode, scale.step, self.calendar)
        mapper = CoordinateMapper(
            offset=opts.label_width,
            column_width=scale.column_width,
            step=scale.step,
            start=timeline.start,
            view_mode=self.view_mode,
            calendar=self.calendar,
        )

        self.scene = self._new_scene()
        groups = self._setup_groups()
        grid_width, grid_height = self._make_grid(groups, ticks, mapper)
        labels = self._make_dates(groups, ticks, mapper, grid_width)

        layout = BarLayout(
            mapper=mapper,
            header_height=opts.header_height,
            padding=opts.padding,
            bar_height=opts.bar_height,
            arrow_curve=opts.arrow_curve,
        )
        bars = self._make_bars(groups, layout)
        arrows = build_arrows(self.tasks, bars, layout, warnings)
        for arrow in arrows:
            groups["arrow"].add(arrow.element)
        self._set_arrows_on_bars(bars, arrows)
        self._setup_events(bars)
        self._set_width()
        scroll_left = mapper.scroll_offset(task.start_at for task in self.tasks)
        self._bind_grid_click(groups)

        warnings.extend(
            f"Task '{task.id}' has invalid dates" for task in self.tasks if task.invalid
        )

        self.state = RenderState(
            scene=self.scene,
            groups=groups,
            timeline=timeline,
            scale=scale,
            mapper=mapper,
            ticks=ticks,
            labels=labels,
            bars=bars,
            arrows=arrows,
            grid_width=grid_width,
            grid_height=grid_height,
            scroll_left=scroll_left,
            warnings=warnings,
        )
        logger.debug(
            f"Rendered {len(bars)} bars, {len(arrows)} arrows, {len(ticks)} ticks "
            f"in {self.view_mode.value} mode"
        )
        return self.state

    def _new_scene(self) -> Scene:
        scene = Scene(self.options.container, self.options.container_width, measure=self.measure)
        scene.add_class("gantt")
        return scene

    def _setup_groups(self) -> Dict[str, SceneElement]:
        return {name: self.scene.group(id=name) for name in LAYERS}

    # -------------------------------------------------------------------------
    # Grid
    # -------------------------------------------------------------------------

    def _row_height(self) -> float:
        return self.options.bar_height + self.options.padding

    def _make_grid(
        self,
        groups: Dict[str, SceneElement],
        ticks: List[datetime],
        mapper: CoordinateMapper,
    ) -> tuple:
        opts = self.options
        grid_width = opts.label_width + len(ticks) * mapper.column_width
        grid_height = opts.header_height + opts.padding + self._row_height() * len(self.tasks)

        self.scene.rect(0, 0, grid_width, grid_height) \
            .add_class("grid-background").append_to(groups["grid"])
        self.scene.attr(height=grid_height + opts.padding, width="100%")

        self.scene.rect(0, 0, grid_width, opts.header_height + HEADER_BAND_EXTRA) \
            .add_class("grid-header").append_to(groups["grid"])

        self._make_grid_rows(groups["grid"], grid_width)
        self._make_grid_ticks(groups["grid"], ticks, mapper)
        self._make_grid_highlights(groups["grid"], mapper)
        return grid_width, grid_height

    def _make_grid_rows(self, grid: SceneElement, row_width: float) -> None:
        rows = self.scene.group().append_to(grid)
        lines = self.scene.group().append_to(grid)
        row_height = self._row_height()
        row_y = self.options.header_height + self.options.padding / 2

        for i, _task in enumerate(self.tasks):
            row_class = "row-odd" if i % 2 else "row-even"
            self.scene.rect(0, row_y, row_width, row_height).add_class(row_class).append_to(rows)
            self.scene.line(0, row_y + row_height, row_width, row_y + row_height) \
                .add_class("row-line").append_to(lines)
            row_y += row_height

    def _tick_class(self, tick: datetime) -> str:
        tick_class = "tick"
        if self.view_mode == ViewMode.DAY and tick.weekday() == 0:
            tick_class += " thick"
        if self.view_mode == ViewMode.WEEK and 1 <= tick.day < 8:
            tick_class += " thick"
        # Quarter starts: Jan, Apr, Jul, Oct
        if self.view_mode == ViewMode.MONTH and (tick.month - 1) % 3 == 0:
            tick_class += " thick"
        return tick_class

    def _make_grid_ticks(self, grid: SceneElement, ticks: List[datetime], mapper: CoordinateMapper) -> None:
        tick_y = self.options.header_height + self.options.padding / 2
        tick_height = self._row_height() * len(self.tasks)

        for tick in ticks:
            d = format_path("M {x} {y} v {height}", x=mapper.x_for(tick), y=tick_y, height=tick_height)
            self.scene.path(d).add_class(self._tick_class(tick)).append_to(grid)

    def _make_grid_highlights(self, grid: SceneElement, mapper: CoordinateMapper) -> None:
        if self.view_mode != ViewMode.DAY:
            return
        opts = self.options
        x = mapper.x_for(self.calendar.today())
        height = self._row_height() * len(self.tasks) + opts.header_height + opts.padding / 2
        self.scene.rect(x, 0, mapper.column_width, height) \
            .add_class("today-highlight").append_to(grid)

    # -------------------------------------------------------------------------
    # Date axis
    # -------------------------------------------------------------------------

    def _make_dates(
        self,
        groups: Dict[str, SceneElement],
        ticks: List[datetime],
        mapper: CoordinateMapper,
        grid_width: float,
    ) -> List[DateLabel]:
        labels = build_labels(ticks, self.view_mode, self.calendar)
        position_labels(labels, mapper, self.options.header_height)

        for label in labels:
            self.scene.text(
                label.primary_x, label.primary_y, label.primary_text,
                **{"font-size": PRIMARY_FONT_SIZE_PX},
            ).add_class("primary-text").append_to(groups["date"])

            if not label.secondary_text:
                continue
            secondary = self.scene.text(
                label.secondary_x, label.secondary_y, label.secondary_text,
                **{"font-size": SECONDARY_FONT_SIZE_PX},
            ).add_class("secondary-text").append_to(groups["date"])

            box = secondary.bbox()
            if box is not None and box.x2 > grid_width:
                logger.debug(f"Dropping header label '{label.secondary_text}': overflows grid")
                secondary.remove()
                label.secondary_text = ""
        return labels

    # -------------------------------------------------------------------------
    # Bars, arrows, events
    # -------------------------------------------------------------------------

    def _make_bars(self, groups: Dict[str, SceneElement], layout: BarLayout) -> List[Bar]:
        bars = []
        for task in self.tasks:
            bar = Bar(self.scene, task, layout, popover_group=groups["details"])
            groups["bar"].add(bar.group)
            bars.append(bar)
        return bars

    @staticmethod
    def _set_arrows_on_bars(bars: List[Bar], arrows: List[Arrow]) -> None:
        for bar in bars:
            bar.arrows = [
                arrow for arrow in arrows
                if arrow.from_bar.task.id == bar.task.id or arrow.to_bar.task.id == bar.task.id
            ]

    def _setup_events(self, bars: List[Bar]) -> None:
        for bar in bars:
            bar.events.on_date_change = self.events.bar_on_date_change
            bar.events.on_progress_change = self.events.bar_on_progress_change
            bar.click(self.events.bar_on_click)

    def _set_width(self) -> None:
        current_width = self.scene.rendered_width()
        actual_width = self.scene.bbox().width
        if current_width < actual_width:
            self.scene.resize(actual_width)

    def _bind_grid_click(self, groups: Dict[str, SceneElement]) -> None:
        scene = self.scene

        def clear_active(_el: SceneElement) -> None:
            for wrapper in scene.select_all("bar-wrapper"):
                wrapper.remove_class("active")

        groups["grid"].click(clear_active)
