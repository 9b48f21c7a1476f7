"""
scene.py — In-memory drawing surface.

The layout pipeline draws into a Scene: a tree of groups and rect / line /
path / text primitives with class-based styling, bounding-box queries and
click handlers. Renderers (SVG) consume the tree; they never compute
positions themselves.

All coordinates are in PIXELS.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional

from .units import PRIMARY_FONT_SIZE_PX, format_px


class ElementKind(Enum):
    """Types of scene nodes."""
    GROUP = "g"
    RECT = "rect"
    LINE = "line"
    PATH = "path"
    TEXT = "text"


MeasureFn = Callable[[str, float], float]
ClickHandler = Callable[["SceneElement"], Any]


# =============================================================================
# BOUNDING BOX
# =============================================================================

@dataclass(frozen=True)
class BBox:
    """Axis-aligned bounding box."""
    x: float
    y: float
    width: float
    height: float

    @property
    def x2(self) -> float:
        """Right edge x-coordinate."""
        return self.x + self.width

    @property
    def y2(self) -> float:
        """Bottom edge y-coordinate."""
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    def union(self, other: "BBox") -> "BBox":
        left = min(self.x, other.x)
        top = min(self.y, other.y)
        return BBox(left, top, max(self.x2, other.x2) - left, max(self.y2, other.y2) - top)

    @classmethod
    def from_points(cls, points: List[tuple]) -> Optional["BBox"]:
        if not points:
            return None
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        return cls(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


_PATH_TOKEN_RE = re.compile(r"[MmLlHhVvAaZz]|-?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

# Number of arguments consumed by one repetition of each command
_PATH_ARITY = {"M": 2, "L": 2, "H": 1, "V": 1, "A": 7, "Z": 0}


def path_points(d: str) -> List[tuple]:
    """
    Endpoints visited by an SVG path.

    Supports M/L/H/V/A/Z in absolute and relative forms. Arc bulges are not
    included, only arc endpoints.
    """
    tokens = _PATH_TOKEN_RE.findall(d)
    points: List[tuple] = []
    x = y = 0.0
    start_x = start_y = 0.0
    command = None
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token.isalpha():
            command = token
            i += 1
            if command in "Zz":
                x, y = start_x, start_y
                points.append((x, y))
            continue
        if command is None:
            raise ValueError(f"Path data must start with a command: {d!r}")

        upper = command.upper()
        arity = _PATH_ARITY[upper]
        args = [float(t) for t in tokens[i:i + arity]]
        if len(args) < arity:
            raise ValueError(f"Truncated path command '{command}' in {d!r}")
        i += arity
        relative = command.islower()

        if upper in ("M", "L"):
            nx, ny = args
            x, y = (x + nx, y + ny) if relative else (nx, ny)
            if upper == "M":
                start_x, start_y = x, y
                # Implicit lineto for extra coordinate pairs
                command = "l" if relative else "L"
        elif upper == "H":
            x = x + args[0] if relative else args[0]
        elif upper == "V":
            y = y + args[0] if relative else args[0]
        elif upper == "A":
            nx, ny = args[5], args[6]
            x, y = (x + nx, y + ny) if relative else (nx, ny)
        points.append((x, y))
    return points


# =============================================================================
# SCENE ELEMENT
# =============================================================================

class SceneElement:
    """A node in the scene tree. Mutators return self for chaining."""

    def __init__(
        self,
        kind: ElementKind,
        attrs: Optional[Dict[str, Any]] = None,
        text: Optional[str] = None,
        scene: Optional["Scene"] = None,
    ):
        self.kind = kind
        self.attrs: Dict[str, Any] = dict(attrs or {})
        self.text = text
        self.scene = scene
        self.classes: List[str] = []
        self.children: List["SceneElement"] = []
        self.parent: Optional["SceneElement"] = None
        self._click_handlers: List[ClickHandler] = []

    def __repr__(self) -> str:
        classes = ".".join(self.classes)
        return f"<SceneElement {self.kind.value}{'.' + classes if classes else ''}>"

    # -------------------------------------------------------------------------
    # Attributes and classes
    # -------------------------------------------------------------------------

    def attr(self, values: Optional[Dict[str, Any]] = None, **kwargs: Any) -> "SceneElement":
        """Set attributes from a dict and/or keyword arguments."""
        if values:
            self.attrs.update(values)
        self.attrs.update(kwargs)
        return self

    def get(self, name: str, default: Any = None) -> Any:
        return self.attrs.get(name, default)

    def add_class(self, *names: str) -> "SceneElement":
        for name in names:
            for part in (name or "").split():
                if part not in self.classes:
                    self.classes.append(part)
        return self

    def remove_class(self, name: str) -> "SceneElement":
        if name in self.classes:
            self.classes.remove(name)
        return self

    def has_class(self, name: str) -> bool:
        return name in self.classes

    # -------------------------------------------------------------------------
    # Tree
    # -------------------------------------------------------------------------

    def add(self, child: "SceneElement") -> "SceneElement":
        """Append child (re-parenting it if needed). Returns self."""
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)
        return self

    def append_to(self, parent: "SceneElement") -> "SceneElement":
        """Move this element under parent. Returns self."""
        parent.add(self)
        return self

    def remove(self) -> None:
        """Detach from the tree."""
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None

    def iter(self) -> Iterator["SceneElement"]:
        """Depth-first walk including self."""
        yield self
        for child in self.children:
            yield from child.iter()

    def select_all(self, class_name: str) -> List["SceneElement"]:
        return [el for el in self.iter() if el.has_class(class_name)]

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def click(self, handler: ClickHandler) -> "SceneElement":
        """Register a click handler."""
        self._click_handlers.append(handler)
        return self

    def trigger_click(self) -> None:
        """Dispatch a click to this element's handlers."""
        for handler in list(self._click_handlers):
            handler(self)

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    def bbox(self) -> Optional[BBox]:
        """Bounding box in scene coordinates, None for empty groups."""
        if self.kind == ElementKind.GROUP:
            result: Optional[BBox] = None
            for child in self.children:
                child_box = child.bbox()
                if child_box is None:
                    continue
                result = child_box if result is None else result.union(child_box)
            return result

        a = self.attrs
        if self.kind == ElementKind.RECT:
            return BBox(float(a["x"]), float(a["y"]), float(a["width"]), float(a["height"]))
        if self.kind == ElementKind.LINE:
            return BBox.from_points([
                (float(a["x1"]), float(a["y1"])),
                (float(a["x2"]), float(a["y2"])),
            ])
        if self.kind == ElementKind.PATH:
            return BBox.from_points(path_points(a.get("d", "")))
        return self._text_bbox()

    def _text_bbox(self) -> Optional[BBox]:
        if not self.text:
            return None
        size = float(self.attrs.get("font-size", PRIMARY_FONT_SIZE_PX))
        measure = self.scene.measure if self.scene is not None else _default_measure
        width = measure(self.text, size)
        x = float(self.attrs["x"])
        y = float(self.attrs["y"])

        anchor = self.attrs.get("text-anchor", "middle")
        if anchor == "middle":
            left = x - width / 2
        elif anchor == "end":
            left = x - width
        else:
            left = x

        baseline = self.attrs.get("dominant-baseline")
        top = y - size / 2 if baseline in ("central", "middle") else y - size * 0.8
        return BBox(left, top, width, size)


def _default_measure(text: str, font_size: float) -> float:
    from .text_measure import measure_text_width

    return measure_text_width(text, font_size)


# =============================================================================
# SCENE
# =============================================================================

class Scene:
    """
    Drawing surface bound to a container.

    Primitive factories append to the root; use append_to() to move a node
    into a layer group.
    """

    def __init__(
        self,
        container: str,
        container_width: float,
        measure: Optional[MeasureFn] = None,
    ):
        self.container = container
        self.container_width = container_width
        self.measure: MeasureFn = measure or _default_measure
        self.root = SceneElement(ElementKind.GROUP, scene=self)

    # -------------------------------------------------------------------------
    # Surface
    # -------------------------------------------------------------------------

    def attr(self, values: Optional[Dict[str, Any]] = None, **kwargs: Any) -> "Scene":
        self.root.attr(values, **kwargs)
        return self

    def add_class(self, *names: str) -> "Scene":
        self.root.add_class(*names)
        return self

    @property
    def classes(self) -> List[str]:
        return self.root.classes

    @property
    def width(self) -> Any:
        return self.root.get("width", "100%")

    @property
    def height(self) -> Any:
        return self.root.get("height")

    def rendered_width(self) -> float:
        """Current on-screen width: explicit pixel width, else the container's."""
        width = self.width
        if isinstance(width, (int, float)):
            return float(width)
        return float(self.container_width)

    def resize(self, width: float, height: Optional[float] = None) -> "Scene":
        self.root.attr(width=width)
        if height is not None:
            self.root.attr(height=height)
        return self

    def bbox(self) -> BBox:
        return self.root.bbox() or BBox(0, 0, 0, 0)

    def select_all(self, class_name: str) -> List[SceneElement]:
        return self.root.select_all(class_name)

    def iter(self) -> Iterator[SceneElement]:
        return self.root.iter()

    # -------------------------------------------------------------------------
    # Primitives
    # -------------------------------------------------------------------------

    def _make(self, kind: ElementKind, attrs: Dict[str, Any], text: Optional[str] = None) -> SceneElement:
        element = SceneElement(kind, attrs, text=text, scene=self)
        self.root.add(element)
        return element

    def group(self, **attrs: Any) -> SceneElement:
        return self._make(ElementKind.GROUP, attrs)

    def rect(self, x: float, y: float, width: float, height: float, **attrs: Any) -> SceneElement:
        attrs.update(x=x, y=y, width=width, height=height)
        return self._make(ElementKind.RECT, attrs)

    def line(self, x1: float, y1: float, x2: float, y2: float, **attrs: Any) -> SceneElement:
        attrs.update(x1=x1, y1=y1, x2=x2, y2=y2)
        return self._make(ElementKind.LINE, attrs)

    def path(self, d: str, **attrs: Any) -> SceneElement:
        attrs["d"] = d
        return self._make(ElementKind.PATH, attrs)

    def text(self, x: float, y: float, content: str, **attrs: Any) -> SceneElement:
        attrs.update(x=x, y=y)
        attrs.setdefault("text-anchor", "middle")
        return self._make(ElementKind.TEXT, attrs, text=content)


def format_path(template: str, **values: float) -> str:
    """Fill a path template with pixel-formatted numbers."""
    return template.format(**{k: format_px(v) for k, v in values.items()})
