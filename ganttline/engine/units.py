"""
units.py — Layout defaults and pixel constants.

This is the foundation module. Every default used by the layout pipeline
lives here so the options model, the settings layer and the widgets agree.

All lengths are in PIXELS.
"""

# =============================================================================
# LAYOUT DEFAULTS
# =============================================================================

LABEL_WIDTH = 38          # Left offset before the first tick column
HEADER_HEIGHT = 50        # Height of the date header band
COLUMN_WIDTH = 30         # Base column width (the view mode overrides it)
STEP_HOURS = 24           # Base hours per column (the view mode overrides it)
BAR_HEIGHT = 20
ARROW_CURVE = 5           # Radius of arrow corners
PADDING = 18              # Vertical gap between rows
CONTAINER_WIDTH = 1000    # Width of the host container before resize

DEFAULT_DATE_FORMAT = "DD-MM-YYYY"
DEFAULT_CONTAINER = "#gantt"

# =============================================================================
# HEADER GEOMETRY
# =============================================================================

HEADER_BAND_EXTRA = 10        # Header band overhangs the header by this much
SECONDARY_TEXT_RISE = 25      # Secondary labels sit this far above primary

# Reference month length used to scale Month-mode columns
MONTH_REFERENCE_DAYS = 30

# =============================================================================
# PLACEHOLDER FOR INVALID TASKS
# =============================================================================

INVALID_TASK_DAYS = 2

# =============================================================================
# ARROWS
# =============================================================================

ARROW_SHIFT_STEP = 10     # Source x is nudged left in these steps
ARROW_HEAD = 5            # Arrowhead half-size

# =============================================================================
# FONTS
# =============================================================================

DEFAULT_FONT_FAMILY = "DejaVu Sans"
PRIMARY_FONT_SIZE_PX = 12
SECONDARY_FONT_SIZE_PX = 14
BAR_LABEL_FONT_SIZE_PX = 12

# =============================================================================
# COLOR DEFAULTS
# =============================================================================

DEFAULT_BACKGROUND_COLOR = "#FFFFFF"
DEFAULT_TEXT_COLOR = "#555555"
DEFAULT_BAR_COLOR = "#B8C2CC"
DEFAULT_PROGRESS_COLOR = "#A3A3FF"
DEFAULT_ARROW_COLOR = "#666666"


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between min and max."""
    return max(min_val, min(max_val, value))


def format_px(value: float) -> str:
    """Format pixel value for SVG attributes (2 decimal places, trimmed)."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"
