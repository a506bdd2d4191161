"""
Color space math for theme validation.

Pure functions: hex <-> RGB <-> HSL conversion, Euclidean RGB distance
and WCAG 2.1 relative luminance / contrast ratio.
"""

import math
import re
from typing import Optional, Tuple

RGB = Tuple[int, int, int]
HSL = Tuple[int, int, int]

HEX_PATTERN = re.compile(r'^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$')

# sqrt(255^2 * 3)
MAX_RGB_DISTANCE = math.sqrt(3 * 255 ** 2)

WCAG_AA_CONTRAST = 4.5
DARK_LUMINANCE_THRESHOLD = 0.179


def is_valid_hex(color: Optional[str]) -> bool:
    """Check for a 6-digit hex color, '#' optional."""
    return isinstance(color, str) and HEX_PATTERN.match(color) is not None


def hex_to_rgb(hex_color: Optional[str]) -> Optional[RGB]:
    """Convert hex color to RGB, or None if it is not a 6-digit hex string."""
    if not isinstance(hex_color, str):
        return None
    match = HEX_PATTERN.match(hex_color)
    if not match:
        return None
    return tuple(int(group, 16) for group in match.groups())


def rgb_distance(color1: str, color2: str, invalid_distance: float = 0.0) -> float:
    """
    Euclidean distance between two hex colors in 0-255 RGB space.

    Args:
        color1: First hex color
        color2: Second hex color
        invalid_distance: Value returned when either color cannot be parsed.
            0.0 treats unparseable colors as identical to everything.

    Returns:
        Distance in [0, MAX_RGB_DISTANCE]
    """
    rgb1 = hex_to_rgb(color1)
    rgb2 = hex_to_rgb(color2)
    if rgb1 is None or rgb2 is None:
        return invalid_distance

    r_diff = rgb1[0] - rgb2[0]
    g_diff = rgb1[1] - rgb2[1]
    b_diff = rgb1[2] - rgb2[2]
    return math.sqrt(r_diff * r_diff + g_diff * g_diff + b_diff * b_diff)


def hex_to_hsl(hex_color: Optional[str]) -> Optional[HSL]:
    """
    Convert hex color to HSL.

    Returns:
        (h 0-360, s 0-100, l 0-100) rounded to integers, or None for invalid input
    """
    rgb = hex_to_rgb(hex_color)
    if rgb is None:
        return None

    r, g, b = (c / 255.0 for c in rgb)
    max_c = max(r, g, b)
    min_c = min(r, g, b)
    lightness = (max_c + min_c) / 2
    hue = 0.0
    saturation = 0.0

    if max_c != min_c:
        delta = max_c - min_c
        saturation = delta / (2 - max_c - min_c) if lightness > 0.5 else delta / (max_c + min_c)

        if max_c == r:
            hue = (g - b) / delta + (6 if g < b else 0)
        elif max_c == g:
            hue = (b - r) / delta + 2
        else:
            hue = (r - g) / delta + 4
        hue /= 6

    return (
        _round_half_up(hue * 360),
        _round_half_up(saturation * 100),
        _round_half_up(lightness * 100),
    )


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; HSL components round .5 upward
    return int(math.floor(value + 0.5))


def _linearize(channel: float) -> float:
    return channel / 12.92 if channel <= 0.03928 else ((channel + 0.055) / 1.055) ** 2.4


def relative_luminance(hex_color: str) -> float:
    """Calculate relative luminance of a color according to WCAG 2.1."""
    rgb = hex_to_rgb(hex_color)
    if rgb is None:
        raise ValueError(f"Invalid hex color: {hex_color!r}")
    r, g, b = (_linearize(c / 255.0) for c in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(color1: str, color2: str) -> float:
    """Calculate WCAG contrast ratio between two colors."""
    lum1 = relative_luminance(color1)
    lum2 = relative_luminance(color2)
    lighter, darker = max(lum1, lum2), min(lum1, lum2)
    return (lighter + 0.05) / (darker + 0.05)


def is_dark_color(hex_color: str) -> bool:
    """Check if a color is dark based on luminance."""
    return relative_luminance(hex_color) < DARK_LUMINANCE_THRESHOLD


def meets_wcag_aa(color1: str, color2: str) -> bool:
    return contrast_ratio(color1, color2) >= WCAG_AA_CONTRAST
