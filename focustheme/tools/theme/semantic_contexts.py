"""
Semantic contexts: prompt keywords mapped to expected color families,
animation vocabulary and mood descriptors.

Contexts are declared in a fixed order. When two contexts match the same
number of keywords, the one declared first wins.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, List

from focustheme.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ColorFamily:
    """HSL bands describing a family of colors.

    A hue range whose start is greater than its end wraps past 360 degrees.
    """
    name: str
    hue_range: Tuple[int, int]
    saturation_range: Tuple[int, int]
    lightness_range: Tuple[int, int]
    expected_colors: Tuple[str, ...] = ()

    @property
    def wraps(self) -> bool:
        return self.hue_range[0] > self.hue_range[1]


@dataclass(frozen=True)
class AnimationContext:
    appropriate_types: Tuple[str, ...]
    inappropriate_types: Tuple[str, ...]
    expected_mood: Tuple[str, ...]


@dataclass(frozen=True)
class SemanticContext:
    name: str
    keywords: Tuple[str, ...]
    expected_color_families: Tuple[ColorFamily, ...]
    animation_context: AnimationContext
    mood_descriptors: Tuple[str, ...]
    visual_metaphors: Tuple[str, ...]
    suggested_colors: Tuple[str, ...]
    suggested_animations: Tuple[str, ...]

    def match_count(self, lowered_prompt: str) -> int:
        return sum(1 for keyword in self.keywords if keyword in lowered_prompt)


BLUES = ColorFamily(
    name='Blues',
    hue_range=(180, 240),
    saturation_range=(30, 100),
    lightness_range=(20, 80),
    expected_colors=('#0077BE', '#4A90E2', '#87CEEB', '#20B2AA', '#008B8B'),
)
ORANGES = ColorFamily(
    name='Oranges/Reds',
    hue_range=(340, 60),
    saturation_range=(40, 100),
    lightness_range=(30, 80),
    expected_colors=('#FF6B35', '#F7931E', '#FFD23F', '#FF8C42', '#E74C3C'),
)
GREENS = ColorFamily(
    name='Greens',
    hue_range=(80, 160),
    saturation_range=(30, 100),
    lightness_range=(25, 75),
    expected_colors=('#228B22', '#32CD32', '#90EE90', '#006400', '#8FBC8F'),
)
PURPLES = ColorFamily(
    name='Purples',
    hue_range=(240, 300),
    saturation_range=(30, 100),
    lightness_range=(25, 75),
    expected_colors=('#191970', '#4B0082', '#483D8B', '#6A5ACD', '#9370DB'),
)
GRAYS = ColorFamily(
    name='Grays/Blues',
    hue_range=(200, 240),
    saturation_range=(10, 50),
    lightness_range=(40, 80),
    expected_colors=('#708090', '#2F4F4F', '#B0C4DE', '#4682B4', '#5F9EA0'),
)
PASTELS = ColorFamily(
    name='Pastels',
    hue_range=(0, 360),
    saturation_range=(20, 60),
    lightness_range=(70, 90),
    expected_colors=('#98FB98', '#FFB6C1', '#F0E68C', '#DDA0DD', '#87CEFA'),
)
COOL = ColorFamily(
    name='Cool Colors',
    hue_range=(180, 300),
    saturation_range=(20, 80),
    lightness_range=(60, 90),
    expected_colors=('#B0E0E6', '#E0FFFF', '#F0F8FF', '#DCDCDC', '#C0C0C0'),
)

COLOR_FAMILIES = {
    'blues': BLUES,
    'oranges': ORANGES,
    'greens': GREENS,
    'purples': PURPLES,
    'grays': GRAYS,
    'pastels': PASTELS,
    'cool': COOL,
}


SEMANTIC_CONTEXTS: Tuple[SemanticContext, ...] = (
    SemanticContext(
        name='ocean',
        keywords=('ocean', 'sea', 'water', 'wave', 'marine', 'aquatic', 'blue', 'deep'),
        expected_color_families=(BLUES, COOL),
        animation_context=AnimationContext(
            appropriate_types=('flowing', 'wave', 'ripple', 'drift', 'gentle', 'fluid'),
            inappropriate_types=('flicker', 'dance', 'intensity', 'sharp', 'angular'),
            expected_mood=('calm', 'flowing', 'deep', 'refreshing', 'serene'),
        ),
        mood_descriptors=('calm', 'flowing', 'deep', 'refreshing'),
        visual_metaphors=('waves', 'currents', 'depths', 'tides'),
        suggested_colors=('#0077BE', '#4A90E2', '#87CEEB', '#20B2AA', '#008B8B'),
        suggested_animations=('flowing', 'wave', 'ripple'),
    ),
    SemanticContext(
        name='sunset',
        keywords=('sunset', 'sunrise', 'golden', 'warm', 'evening', 'dusk', 'orange', 'red'),
        expected_color_families=(ORANGES,),
        animation_context=AnimationContext(
            appropriate_types=('fade', 'glow', 'gradient-shift', 'gentle', 'warm', 'soft'),
            inappropriate_types=('sharp', 'cold', 'crystalline', 'harsh'),
            expected_mood=('warm', 'peaceful', 'golden', 'serene'),
        ),
        mood_descriptors=('warm', 'peaceful', 'golden', 'serene'),
        visual_metaphors=('horizon', 'golden hour', 'warm glow', 'evening sky'),
        suggested_colors=('#FF6B35', '#F7931E', '#FFD23F', '#FF8C42', '#E74C3C'),
        suggested_animations=('fade', 'glow', 'gradient-shift'),
    ),
    SemanticContext(
        name='forest',
        keywords=('forest', 'tree', 'nature', 'green', 'woods', 'natural', 'leaf', 'plant'),
        expected_color_families=(GREENS,),
        animation_context=AnimationContext(
            appropriate_types=('gentle-sway', 'organic', 'natural', 'growth', 'rustle'),
            inappropriate_types=('mechanical', 'artificial', 'harsh', 'metallic'),
            expected_mood=('natural', 'grounded', 'fresh', 'alive'),
        ),
        mood_descriptors=('natural', 'grounded', 'fresh', 'alive'),
        visual_metaphors=('leaves', 'branches', 'canopy', 'growth'),
        suggested_colors=('#228B22', '#32CD32', '#90EE90', '#006400', '#8FBC8F'),
        suggested_animations=('gentle-sway', 'organic', 'natural'),
    ),
    SemanticContext(
        name='mountain',
        keywords=('mountain', 'peak', 'stone', 'rock', 'elevation', 'high', 'summit'),
        expected_color_families=(GRAYS, BLUES),
        animation_context=AnimationContext(
            appropriate_types=('steady', 'solid', 'majestic', 'strong', 'stable'),
            inappropriate_types=('fluid', 'flowing', 'soft', 'delicate'),
            expected_mood=('strong', 'stable', 'elevated', 'enduring'),
        ),
        mood_descriptors=('strong', 'stable', 'elevated', 'enduring'),
        visual_metaphors=('peaks', 'stone', 'elevation', 'strength'),
        suggested_colors=('#708090', '#2F4F4F', '#B0C4DE', '#4682B4', '#5F9EA0'),
        suggested_animations=('steady', 'solid', 'majestic'),
    ),
    SemanticContext(
        name='fire',
        keywords=('fire', 'flame', 'heat', 'energy', 'red', 'orange', 'burn', 'hot'),
        expected_color_families=(ORANGES,),
        animation_context=AnimationContext(
            appropriate_types=('flicker', 'dance', 'intensity', 'dynamic', 'energetic'),
            inappropriate_types=('calm', 'still', 'cold', 'frozen', 'crystalline'),
            expected_mood=('energetic', 'passionate', 'dynamic', 'intense'),
        ),
        mood_descriptors=('energetic', 'passionate', 'dynamic', 'intense'),
        visual_metaphors=('flames', 'ember', 'heat', 'energy'),
        suggested_colors=('#FF4500', '#DC143C', '#FF6347', '#B22222', '#CD5C5C'),
        suggested_animations=('flicker', 'dance', 'intensity'),
    ),
    SemanticContext(
        name='space',
        keywords=('space', 'cosmic', 'star', 'galaxy', 'universe', 'nebula', 'dark', 'void'),
        expected_color_families=(PURPLES, BLUES),
        animation_context=AnimationContext(
            appropriate_types=('drift', 'cosmic', 'stellar', 'mysterious', 'floating'),
            inappropriate_types=('earthly', 'grounded', 'natural', 'organic'),
            expected_mood=('mysterious', 'vast', 'contemplative', 'infinite'),
        ),
        mood_descriptors=('mysterious', 'vast', 'contemplative', 'infinite'),
        visual_metaphors=('stars', 'nebula', 'cosmos', 'infinity'),
        suggested_colors=('#191970', '#4B0082', '#483D8B', '#6A5ACD', '#9370DB'),
        suggested_animations=('drift', 'cosmic', 'stellar'),
    ),
    SemanticContext(
        name='spring',
        keywords=('spring', 'bloom', 'fresh', 'new', 'growth', 'renewal', 'pastel', 'light'),
        expected_color_families=(PASTELS, GREENS),
        animation_context=AnimationContext(
            appropriate_types=('bloom', 'gentle', 'fresh', 'growth', 'renewal'),
            inappropriate_types=('harsh', 'dark', 'heavy', 'winter'),
            expected_mood=('fresh', 'hopeful', 'vibrant', 'renewing'),
        ),
        mood_descriptors=('fresh', 'hopeful', 'vibrant', 'renewing'),
        visual_metaphors=('blossoms', 'renewal', 'growth', 'awakening'),
        suggested_colors=('#98FB98', '#FFB6C1', '#F0E68C', '#DDA0DD', '#87CEFA'),
        suggested_animations=('bloom', 'gentle', 'fresh'),
    ),
    SemanticContext(
        name='winter',
        keywords=('winter', 'snow', 'ice', 'cold', 'frost', 'white', 'crystal', 'frozen'),
        expected_color_families=(COOL, GRAYS),
        animation_context=AnimationContext(
            appropriate_types=('crystalline', 'crisp', 'serene', 'gentle', 'floating'),
            inappropriate_types=('warm', 'hot', 'fiery', 'intense', 'flicker'),
            expected_mood=('crisp', 'clean', 'peaceful', 'pure'),
        ),
        mood_descriptors=('crisp', 'clean', 'peaceful', 'pure'),
        visual_metaphors=('snow', 'ice', 'frost', 'clarity'),
        suggested_colors=('#B0E0E6', '#E0FFFF', '#F0F8FF', '#DCDCDC', '#C0C0C0'),
        suggested_animations=('crystalline', 'crisp', 'serene'),
    ),
)

_CONTEXTS_BY_NAME = {context.name: context for context in SEMANTIC_CONTEXTS}


class SemanticContextResolver:
    """Resolves the best-matching semantic context for a prompt."""

    def __init__(self, contexts: Tuple[SemanticContext, ...] = SEMANTIC_CONTEXTS):
        self.contexts = contexts

    def resolve(self, prompt: str) -> Optional[SemanticContext]:
        """
        Return the context with the most keyword substring matches.

        Ties resolve to the first context in declaration order. None means the
        prompt carries no contextual constraints.
        """
        lowered = (prompt or '').lower()
        best_match: Optional[SemanticContext] = None
        max_matches = 0

        for context in self.contexts:
            matches = context.match_count(lowered)
            # Strictly greater keeps the earliest declared context on ties
            if matches > max_matches:
                max_matches = matches
                best_match = context

        if best_match:
            logger.debug(f"Resolved context '{best_match.name}' ({max_matches} keyword matches) for prompt '{prompt}'")
        return best_match

    def get(self, name: str) -> Optional[SemanticContext]:
        for context in self.contexts:
            if context.name == name:
                return context
        return None


def available_contexts() -> List[str]:
    """Names of all declared contexts, in declaration order."""
    return [context.name for context in SEMANTIC_CONTEXTS]


def expected_color_families(context_name: str) -> List[ColorFamily]:
    context = _CONTEXTS_BY_NAME.get(context_name)
    return list(context.expected_color_families) if context else []


def expected_animations(context_name: str) -> List[str]:
    context = _CONTEXTS_BY_NAME.get(context_name)
    return list(context.animation_context.appropriate_types) if context else []
