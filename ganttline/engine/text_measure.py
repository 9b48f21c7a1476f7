"""
text_measure.py — Measure label text for bounding-box queries.

The scene needs the width of header and bar labels to answer bounding-box
queries (a secondary header label is dropped when its right edge passes the
grid). We use Pillow to measure text at a pixel font size.
"""

import os
from pathlib import Path
from typing import Dict, Optional, Tuple

from PIL import ImageFont

from .units import DEFAULT_FONT_FAMILY

# =============================================================================
# FONT CONFIGURATION
# =============================================================================

FONT_MAP = {
    'DejaVu Sans': 'DejaVuSans.ttf',
    'DejaVu Sans Bold': 'DejaVuSans-Bold.ttf',
    'Arial': 'arial.ttf',
    'Arial Bold': 'arialbd.ttf',
}

FALLBACK_FONT_FILE = 'DejaVuSans.ttf'

_font_cache: Dict[Tuple[str, int, bool], ImageFont.ImageFont] = {}


# =============================================================================
# FONT LOADING
# =============================================================================

def _font_dirs() -> list:
    # Lazy import: config imports the engine package
    from ..config import get_settings

    font_dir = get_settings().font_dir
    return [Path(font_dir)] if font_dir else []


def _find_font_file(family: str, bold: bool) -> Optional[Path]:
    font_key = f"{family} Bold" if bold else family
    filename = FONT_MAP.get(font_key, FONT_MAP.get(family, FALLBACK_FONT_FILE))

    for directory in _font_dirs():
        for name in (filename, FALLBACK_FONT_FILE):
            candidate = directory / name
            if candidate.exists():
                return candidate

    system_fonts = [
        Path('/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf'),
        Path('/usr/share/fonts/TTF/DejaVuSans.ttf'),
        Path(os.environ.get('WINDIR', 'C:/Windows')) / 'Fonts' / 'arial.ttf',
    ]
    for sys_font in system_fonts:
        if sys_font.exists():
            return sys_font
    return None


def get_font(family: str, size_px: int, bold: bool = False) -> ImageFont.ImageFont:
    """
    Load a font for measurement. Falls back gracefully if not found.

    Args:
        family: Font family name
        size_px: Font size in pixels
        bold: Whether to use bold variant

    Returns:
        PIL font object ready for measurement
    """
    cache_key = (family, size_px, bold)
    if cache_key in _font_cache:
        return _font_cache[cache_key]

    font_path = _find_font_file(family, bold)
    font: ImageFont.ImageFont
    if font_path is not None:
        try:
            font = ImageFont.truetype(str(font_path), size_px)
        except OSError:
            font = ImageFont.load_default(size=size_px)
    else:
        # Pillow's bundled font as last resort
        font = ImageFont.load_default(size=size_px)

    _font_cache[cache_key] = font
    return font


def clear_font_cache():
    """Clear the font cache (useful for testing)."""
    _font_cache.clear()


# =============================================================================
# TEXT MEASUREMENT
# =============================================================================

def measure_text(
    text: str,
    font_size_px: int,
    font_family: str = DEFAULT_FONT_FAMILY,
    bold: bool = False,
) -> Tuple[float, float]:
    """
    Measure text dimensions using Pillow.

    Returns:
        Tuple of (width_px, height_px)
    """
    if not text:
        return (0.0, 0.0)
    font = get_font(font_family, int(font_size_px), bold)
    left, top, right, bottom = font.getbbox(text)
    return (float(right - left), float(bottom - top))


def measure_text_width(text: str, font_size_px: float) -> float:
    """Width in pixels of a single line of text."""
    return measure_text(text, int(font_size_px))[0]
