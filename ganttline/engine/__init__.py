# Ganttline Layout Engine

from .units import (
    LABEL_WIDTH,
    HEADER_HEIGHT,
    BAR_HEIGHT,
    ARROW_CURVE,
    PADDING,
    DEFAULT_DATE_FORMAT,
)

from .dates import (
    Calendar,
    default_calendar,
)

from .view_modes import (
    ViewMode,
    Scale,
    SCALES,
    ALL_VIEW_MODES,
    UnknownViewModeError,
    get_scale,
    parse_view_mode,
    validate_view_modes,
)

from .coordinates import CoordinateMapper

from .scene import (
    Scene,
    SceneElement,
    ElementKind,
    BBox,
)

from .svg_renderer import (
    SVGRenderer,
    render_to_svg,
    render_to_svg_string,
    render_to_data_uri,
)
