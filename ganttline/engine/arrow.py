"""
arrow.py — Dependency connector between two bars.

The path leaves the middle of the source bar's bottom edge, drops to the
target row, turns with a rounded corner and ends on the target bar's left
edge with an open arrowhead. When the target starts left of the source the
path detours around the target's left side.
"""

from .bar import Bar, BarLayout
from .scene import format_path
from .units import ARROW_HEAD, ARROW_SHIFT_STEP

_HEAD = "m -{head} -{head} l {head} {head} l -{head} {head}"

_DIRECT = (
    "M {start_x} {start_y} V {offset} "
    "a {curve} {curve} 0 0 {clockwise} {curve} {curve_y} "
    "L {end_x} {end_y} " + _HEAD
)

_AROUND = (
    "M {start_x} {start_y} v {down_1} "
    "a {curve} {curve} 0 0 1 -{curve} {curve} H {left} "
    "a {curve} {curve} 0 0 {clockwise} -{curve} {curve_y} V {down_2} "
    "a {curve} {curve} 0 0 {clockwise} {curve} {curve_y} "
    "L {end_x} {end_y} " + _HEAD
)


class Arrow:
    """Directed edge from a dependency's bar to its dependent's bar."""

    def __init__(self, layout: BarLayout, from_bar: Bar, to_bar: Bar):
        self.layout = layout
        self.from_bar = from_bar
        self.to_bar = to_bar
        self.path = self.calculate_path()
        self.element = from_bar.scene.path(self.path).add_class("arrow")
        self.element.attr({
            "data-from": from_bar.task.id,
            "data-to": to_bar.task.id,
        })

    def __repr__(self) -> str:
        return f"<Arrow {self.from_bar.task.id} -> {self.to_bar.task.id}>"

    def calculate_path(self) -> str:
        layout = self.layout
        source, target = self.from_bar, self.to_bar
        padding = layout.padding
        curve = layout.arrow_curve

        start_x = source.center_x
        while target.x < start_x + padding and start_x > source.x + padding:
            start_x -= ARROW_SHIFT_STEP

        start_y = layout.row_y(source.task.index) + layout.bar_height
        end_x = target.x - padding / 2
        end_y = layout.row_y(target.task.index) + layout.bar_height / 2

        from_is_below_to = source.task.index > target.task.index
        clockwise = 1 if from_is_below_to else 0
        curve_y = -curve if from_is_below_to else curve
        offset = end_y + curve if from_is_below_to else end_y - curve

        if target.x < source.x + padding:
            return format_path(
                _AROUND,
                start_x=start_x,
                start_y=start_y,
                down_1=padding / 2 - curve,
                curve=curve,
                left=target.x - padding,
                clockwise=clockwise,
                curve_y=curve_y,
                down_2=target.y + target.height / 2 - curve_y,
                end_x=end_x,
                end_y=end_y,
                head=ARROW_HEAD,
            )

        return format_path(
            _DIRECT,
            start_x=start_x,
            start_y=start_y,
            offset=offset,
            curve=curve,
            clockwise=clockwise,
            curve_y=curve_y,
            end_x=end_x,
            end_y=end_y,
            head=ARROW_HEAD,
        )

    def update(self) -> None:
        """Recompute the path after either bar moved."""
        self.path = self.calculate_path()
        self.element.attr(d=self.path)
