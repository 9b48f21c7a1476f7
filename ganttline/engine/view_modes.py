"""
view_modes.py — View-mode registry.

A view mode is a named zoom level binding a time-per-column (step, in hours)
and a pixel-per-column (column width) pair. The table is the single source
of these numbers; switching modes is a pure lookup with no memory of the
previous mode.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Union


# =============================================================================
# VIEW MODE ENUM
# =============================================================================

class ViewMode(str, Enum):
    """Closed set of zoom levels."""
    QUARTER_DAY = "Quarter Day"
    HALF_DAY = "Half Day"
    DAY = "Day"
    WEEK = "Week"
    MONTH = "Month"


class UnknownViewModeError(ValueError):
    """Raised for a view-mode name outside the registry or the allowed set."""


# =============================================================================
# SCALE TABLE
# =============================================================================

@dataclass(frozen=True)
class Scale:
    """Derived layout config for one view mode."""
    view_mode: ViewMode
    step: float          # Hours per column
    column_width: float  # Pixels per column


SCALES: Dict[ViewMode, Scale] = {
    ViewMode.QUARTER_DAY: Scale(ViewMode.QUARTER_DAY, step=24 / 4, column_width=38),
    ViewMode.HALF_DAY: Scale(ViewMode.HALF_DAY, step=24 / 2, column_width=38),
    ViewMode.DAY: Scale(ViewMode.DAY, step=24, column_width=38),
    ViewMode.WEEK: Scale(ViewMode.WEEK, step=24 * 7, column_width=140),
    ViewMode.MONTH: Scale(ViewMode.MONTH, step=24 * 30, column_width=120),
}

ALL_VIEW_MODES: List[ViewMode] = list(ViewMode)


# =============================================================================
# LOOKUPS
# =============================================================================

def parse_view_mode(mode: Union[str, ViewMode]) -> ViewMode:
    """
    Resolve a name (or enum member) to a ViewMode.

    Raises:
        UnknownViewModeError: if the name is not one of the five modes
    """
    if isinstance(mode, ViewMode):
        return mode
    try:
        return ViewMode(mode)
    except ValueError:
        valid = ", ".join(m.value for m in ViewMode)
        raise UnknownViewModeError(
            f"Unknown view mode '{mode}'. Valid modes: {valid}"
        ) from None


def get_scale(mode: Union[str, ViewMode]) -> Scale:
    """Look up step/column width for a mode."""
    return SCALES[parse_view_mode(mode)]


def validate_view_modes(modes: Iterable[Union[str, ViewMode]]) -> List[ViewMode]:
    """
    Validate a configured set of allowed modes.

    Order is preserved and duplicates are dropped.
    """
    result: List[ViewMode] = []
    for mode in modes:
        parsed = parse_view_mode(mode)
        if parsed not in result:
            result.append(parsed)
    if not result:
        raise UnknownViewModeError("At least one view mode must be allowed")
    return result
