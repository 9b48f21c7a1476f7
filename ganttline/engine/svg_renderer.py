"""
svg_renderer.py — SVG generation from a rendered Scene.

Consumes the scene tree of a render pass and emits SVG strings or files.
Positions are final by the time they get here; scene nodes map one-to-one
onto SVG elements and the chart stylesheet is prepended.

Used for:
1. Embedding the chart in web pages
2. Snapshotting a chart to a file
"""

import base64
from pathlib import Path
from typing import Optional, Union
from xml.etree import ElementTree as ET
from xml.etree.ElementTree import Element, SubElement

from .scene import ElementKind, Scene, SceneElement
from .units import (
    DEFAULT_ARROW_COLOR,
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_BAR_COLOR,
    DEFAULT_FONT_FAMILY,
    DEFAULT_PROGRESS_COLOR,
    DEFAULT_TEXT_COLOR,
    format_px,
)


# =============================================================================
# CONSTANTS
# =============================================================================

SVG_NS = "http://www.w3.org/2000/svg"

GANTT_CSS = f"""
    .gantt text {{
        font-family: '{DEFAULT_FONT_FAMILY}', 'Segoe UI', Arial, sans-serif;
        fill: {DEFAULT_TEXT_COLOR};
    }}
    .gantt .grid-background {{ fill: none; }}
    .gantt .grid-header {{ fill: #FFFFFF; stroke: #E0E0E0; stroke-width: 1.4; }}
    .gantt .row-even {{ fill: #F5F5F5; }}
    .gantt .row-odd {{ fill: {DEFAULT_BACKGROUND_COLOR}; }}
    .gantt .row-line {{ stroke: #EBEFF2; }}
    .gantt .tick {{ stroke: #E0E0E0; stroke-width: 0.2; }}
    .gantt .tick.thick {{ stroke-width: 0.4; }}
    .gantt .today-highlight {{ fill: #FCF8E3; opacity: 0.5; }}
    .gantt .primary-text {{ text-anchor: middle; font-size: 12px; }}
    .gantt .secondary-text {{ text-anchor: middle; font-size: 14px; }}
    .gantt .arrow {{ fill: none; stroke: {DEFAULT_ARROW_COLOR}; stroke-width: 1.4; }}
    .gantt .bar {{ fill: {DEFAULT_BAR_COLOR}; stroke: #8D99A6; stroke-width: 0; }}
    .gantt .bar-progress {{ fill: {DEFAULT_PROGRESS_COLOR}; }}
    .gantt .bar-label {{ fill: #FFFFFF; font-size: 12px; }}
    .gantt .bar-label.big {{ fill: {DEFAULT_TEXT_COLOR}; }}
    .gantt .bar-wrapper.active .bar {{ stroke-width: 2; }}
    .gantt .bar-wrapper.invalid .bar {{ fill: transparent; stroke: #8D99A6; stroke-dasharray: 5; }}
    .gantt .details-heading {{ font-weight: 700; font-size: 13px; }}
    .gantt .details-body {{ font-size: 12px; }}
"""


# =============================================================================
# CONVERSION HELPERS
# =============================================================================

def _attr_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_px(float(value))
    return str(value)


# =============================================================================
# SVG RENDERER
# =============================================================================

class SVGRenderer:
    """
    Renders a Scene to SVG format.

    Stateless: every render() call builds a new document.
    """

    def __init__(self, include_styles: bool = True):
        """
        Initialize renderer.

        Args:
            include_styles: Whether to embed the chart stylesheet
        """
        self.include_styles = include_styles

    def render(
        self,
        scene: Scene,
        output: Optional[Union[str, Path]] = None
    ) -> str:
        """
        Render a Scene to SVG format.

        Args:
            scene: The scene to render
            output: Optional output path for file

        Returns:
            SVG content as string
        """
        svg = Element('svg')
        svg.set('xmlns', SVG_NS)
        for name, value in scene.root.attrs.items():
            svg.set(name, _attr_value(value))
        if scene.classes:
            svg.set('class', ' '.join(scene.classes))

        if self.include_styles:
            style = SubElement(svg, 'style')
            style.text = GANTT_CSS

        for child in scene.root.children:
            self._render_element(svg, child)

        ET.indent(svg, space="  ")
        svg_str = '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(svg, encoding='unicode')

        if output:
            Path(output).write_text(svg_str, encoding='utf-8')

        return svg_str

    def render_to_file(self, scene: Scene, filepath: Union[str, Path]) -> None:
        """Render a scene directly to a file."""
        self.render(scene, output=filepath)

    # =========================================================================
    # ELEMENT RENDERING
    # =========================================================================

    def _render_element(self, parent: Element, element: SceneElement) -> None:
        node = SubElement(parent, element.kind.value)
        for name, value in element.attrs.items():
            node.set(name, _attr_value(value))
        if element.classes:
            node.set('class', ' '.join(element.classes))

        if element.kind == ElementKind.TEXT:
            node.text = element.text or ""
            return

        for child in element.children:
            self._render_element(node, child)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def _scene_of(source) -> Scene:
    """Accept a Scene or anything carrying one (e.g. a RenderState)."""
    return source if isinstance(source, Scene) else source.scene


def render_to_svg(source, output_path: Optional[Union[str, Path]] = None) -> str:
    """
    Render a scene (or render state) to SVG, optionally saving it.

    Args:
        source: Scene or RenderState
        output_path: Optional file path to save to

    Returns:
        SVG content as string
    """
    return SVGRenderer().render(_scene_of(source), output=output_path)


def render_to_svg_string(source, include_styles: bool = False) -> str:
    """Render to an SVG string for inline embedding (no stylesheet by default)."""
    return SVGRenderer(include_styles=include_styles).render(_scene_of(source))


def render_to_data_uri(source) -> str:
    """
    Render to an SVG data URI (for img src or CSS background).

    Returns:
        Data URI string (data:image/svg+xml;base64,...)
    """
    svg_str = SVGRenderer(include_styles=True).render(_scene_of(source))
    b64 = base64.b64encode(svg_str.encode('utf-8')).decode('ascii')
    return f"data:image/svg+xml;base64,{b64}"
