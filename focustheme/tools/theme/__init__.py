"""Theme-specific tools for color math and prompt context."""

from .color_math import (
    MAX_RGB_DISTANCE,
    hex_to_rgb,
    hex_to_hsl,
    rgb_distance,
    relative_luminance,
    contrast_ratio,
    is_valid_hex,
    is_dark_color,
    meets_wcag_aa
)
from .semantic_contexts import (
    ColorFamily,
    AnimationContext,
    SemanticContext,
    SemanticContextResolver,
    SEMANTIC_CONTEXTS,
    available_contexts,
    expected_color_families,
    expected_animations
)

__all__ = [
    "MAX_RGB_DISTANCE",
    "hex_to_rgb",
    "hex_to_hsl",
    "rgb_distance",
    "relative_luminance",
    "contrast_ratio",
    "is_valid_hex",
    "is_dark_color",
    "meets_wcag_aa",
    "ColorFamily",
    "AnimationContext",
    "SemanticContext",
    "SemanticContextResolver",
    "SEMANTIC_CONTEXTS",
    "available_contexts",
    "expected_color_families",
    "expected_animations"
]
