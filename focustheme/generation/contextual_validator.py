"""
Contextual validation: does a candidate theme fit the meaning of its prompt?

Colors are scored against the HSL bands of the prompt's expected color
families, animations against the context's appropriate / inappropriate
vocabulary.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from focustheme.logging_config import get_logger
from focustheme.models.candidate import CandidateTheme, ColorTriple
from focustheme.tools.theme.color_math import hex_to_hsl, HSL
from focustheme.tools.theme.semantic_contexts import (
    ColorFamily,
    SemanticContext,
    SemanticContextResolver
)

logger = get_logger(__name__)

NEUTRAL_SCORE = 0.7
NO_ANIMATION_SCORE = 0.5
APPROPRIATE_THRESHOLD = 0.6
PHASE_ISSUE_THRESHOLD = 0.4

HUE_WEIGHT = 0.7
SATURATION_WEIGHT = 0.2
LIGHTNESS_WEIGHT = 0.1

# Degrees past a hue boundary at which the hue score reaches zero
HUE_FALLOFF = 60
# Points from the band midpoint at which saturation / lightness scores reach zero
BAND_FALLOFF = 50


@dataclass
class ContextualValidationResult:
    is_appropriate: bool
    color_score: float
    animation_score: float
    overall_score: float
    issues: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    context_name: Optional[str] = None


@dataclass
class _PartialScore:
    score: float
    issues: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


class ContextualValidator:
    """Scores how well a candidate theme matches its prompt's semantic context."""

    def __init__(self, resolver: Optional[SemanticContextResolver] = None):
        self.resolver = resolver or SemanticContextResolver()

    def validate(self, prompt: str, candidate: CandidateTheme) -> ContextualValidationResult:
        context = self.resolver.resolve(prompt)

        if context is None:
            return ContextualValidationResult(
                is_appropriate=True,
                color_score=NEUTRAL_SCORE,
                animation_score=NEUTRAL_SCORE,
                overall_score=NEUTRAL_SCORE,
                recommendations=['Consider using more specific prompt keywords for better contextual validation'],
            )

        colors = self._score_colors(candidate, context)
        animations = self._score_animations(candidate, context)
        overall = (colors.score + animations.score) / 2

        result = ContextualValidationResult(
            is_appropriate=overall >= APPROPRIATE_THRESHOLD,
            color_score=colors.score,
            animation_score=animations.score,
            overall_score=overall,
            issues=colors.issues + animations.issues,
            recommendations=colors.recommendations + animations.recommendations,
            context_name=context.name,
        )
        logger.debug(
            f"Context '{context.name}': color={colors.score:.2f} "
            f"animation={animations.score:.2f} overall={overall:.2f}"
        )
        return result

    # ------------------------------------------------------------------
    # Colors
    # ------------------------------------------------------------------

    def _score_colors(self, candidate: CandidateTheme, context: SemanticContext) -> _PartialScore:
        families = context.expected_color_families
        study_score = self.phase_color_score(_triple(candidate.studyColors), families)
        break_score = self.phase_color_score(_triple(candidate.breakColors), families)

        partial = _PartialScore(score=(study_score + break_score) / 2)
        family_names = ', '.join(family.name for family in families)

        if study_score < PHASE_ISSUE_THRESHOLD:
            partial.issues.append('Study colors do not match expected color families for this prompt')
            partial.recommendations.append(f'Consider using colors from: {family_names}')
        if break_score < PHASE_ISSUE_THRESHOLD:
            partial.issues.append('Break colors do not match expected color families for this prompt')
            partial.recommendations.append(f'Consider using colors from: {family_names}')

        return partial

    def phase_color_score(self, colors: Sequence[Optional[str]], families: Sequence[ColorFamily]) -> float:
        """Average best-family score over the parseable colors of one phase.

        Unparseable colors are skipped; a phase with none scores 0.
        """
        if not families:
            return 0.5

        total = 0.0
        valid = 0
        for color in colors:
            hsl = hex_to_hsl(color)
            if hsl is None:
                continue
            valid += 1
            total += max(family_score(hsl, family) for family in families)

        return total / valid if valid else 0.0

    # ------------------------------------------------------------------
    # Animations
    # ------------------------------------------------------------------

    def _score_animations(self, candidate: CandidateTheme, context: SemanticContext) -> _PartialScore:
        appropriate_types = context.animation_context.appropriate_types
        inappropriate_types = context.animation_context.inappropriate_types
        animation_types = candidate.animation_types()

        if not animation_types:
            return _PartialScore(
                score=NO_ANIMATION_SCORE,
                issues=['No animations specified'],
                recommendations=[f"Consider adding {' or '.join(appropriate_types)} animations"],
            )

        partial = _PartialScore(score=0.0)
        appropriate = 0
        inappropriate = 0

        for animation_type in animation_types:
            if _matches_any(animation_type, appropriate_types):
                appropriate += 1
            elif _matches_any(animation_type, inappropriate_types):
                inappropriate += 1
                partial.issues.append(f'Animation type "{animation_type}" is inappropriate for this context')

        if inappropriate:
            partial.recommendations.append(f"Use {', '.join(appropriate_types)} animations instead")
        if not appropriate:
            partial.recommendations.append(
                f"Consider using contextually appropriate animations: {', '.join(appropriate_types)}"
            )

        score = max(0.0, (appropriate - inappropriate) / len(animation_types))
        partial.score = min(1.0, score)
        return partial


def family_score(hsl: HSL, family: ColorFamily) -> float:
    """Weighted fit of one HSL color to a color family (hue dominates)."""
    hue, saturation, lightness = hsl
    return (
        _hue_score(hue, family) * HUE_WEIGHT
        + _band_score(saturation, family.saturation_range) * SATURATION_WEIGHT
        + _band_score(lightness, family.lightness_range) * LIGHTNESS_WEIGHT
    )


def _hue_score(hue: float, family: ColorFamily) -> float:
    min_hue, max_hue = family.hue_range

    if family.wraps:
        if hue >= min_hue or hue <= max_hue:
            return 1.0
        to_min = abs(hue - min_hue)
        to_max = abs(hue - max_hue)
        distance = min(min(to_min, 360 - to_min), min(to_max, 360 - to_max))
    else:
        if min_hue <= hue <= max_hue:
            return 1.0
        distance = min(abs(hue - min_hue), abs(hue - max_hue))

    if distance > HUE_FALLOFF:
        return 0.0
    return max(0.0, 1 - distance / HUE_FALLOFF)


def _band_score(value: float, band: Tuple[int, int]) -> float:
    low, high = band
    if low <= value <= high:
        return 1.0
    midpoint = (low + high) / 2
    return max(0.0, 1 - abs(value - midpoint) / BAND_FALLOFF)


def _matches_any(animation_type: str, vocabulary: Sequence[str]) -> bool:
    """Case-insensitive, substring match in either direction."""
    lowered = animation_type.lower()
    return any(lowered in term.lower() or term.lower() in lowered for term in vocabulary)


def _triple(colors: Optional[ColorTriple]) -> List[Optional[str]]:
    if colors is None:
        return []
    return [colors.primary, colors.secondary, colors.accent]
