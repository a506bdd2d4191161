"""
Theme assembly: turns a validated candidate into an immutable AcceptedTheme,
and builds the deterministic fallback theme.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from focustheme.domain.models import (
    AcceptedTheme,
    BackgroundElement,
    DiversityReport,
    ParticleSettings,
    ThemeAnimations,
    ThemeColors,
    ThemeKind
)
from focustheme.exceptions import DiversitySimilarityError, StructuralValidationError
from focustheme.generation.diversity_validator import DiversityValidator
from focustheme.logging_config import get_logger
from focustheme.models.candidate import AnimationSuggestion, CandidateTheme, ColorTriple, VisualElements
from focustheme.tools.theme.color_math import contrast_ratio, is_valid_hex, WCAG_AA_CONTRAST

logger = get_logger(__name__)

MIN_ANIMATION_DURATION = 3000
MAX_ANIMATION_DURATION = 10000
DEFAULT_ANIMATION_DURATION = 6000
DEFAULT_EASING = 'ease-in-out'

MIN_PARTICLES = 5
MAX_PARTICLES = 15

DEFAULT_GRADIENT_COLORS = ('#f0f0f0', '#e0e0e0')
MAX_NAME_LENGTH = 20

FALLBACK_STUDY_COLORS = ThemeColors(
    primary='#6B73FF',
    secondary='#F0F2FF',
    accent='#4C51BF',
    gradient=('#F0F2FF', '#E6E8FF'),
    background='#F0F2FF',
)
FALLBACK_BREAK_COLORS = ThemeColors(
    primary='#48BB78',
    secondary='#F0FFF4',
    accent='#38A169',
    gradient=('#F0FFF4', '#E6FFFA'),
    background='#F0FFF4',
)
FALLBACK_BACKGROUND = BackgroundElement(
    type='gradient',
    config={'colors': ('#f8f9fa', '#e9ecef'), 'direction': 'vertical'},
)
FALLBACK_ANIMATIONS = ThemeAnimations(
    duration=DEFAULT_ANIMATION_DURATION,
    easing=DEFAULT_EASING,
    particles=ParticleSettings(count=6, speed=1, opacity=0.3),
)
FALLBACK_CONFIDENCE = 0.5
FALLBACK_REPORT = DiversityReport(
    is_unique=False,
    similarity_score=1.0,
    conflicting_ids=('fallback',),
    recommendations=('This is a fallback theme with default colors',),
)


@dataclass(frozen=True)
class PhaseAccessibility:
    contrast: float
    meets_aa: bool


@dataclass(frozen=True)
class AccessibilityReport:
    study: PhaseAccessibility
    break_: PhaseAccessibility

    @property
    def meets_aa(self) -> bool:
        return self.study.meets_aa and self.break_.meets_aa


def hash32(text: str) -> str:
    """Rolling 32-bit signed hash over the UTF-16 code units of `text`, absolute value in base 36."""
    value = 0
    data = text.encode('utf-16-le', 'surrogatepass')
    for index in range(0, len(data), 2):
        unit = int.from_bytes(data[index:index + 2], 'little')
        value = (value * 31 + unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return _to_base36(abs(value))


def _to_base36(number: int) -> str:
    digits = '0123456789abcdefghijklmnopqrstuvwxyz'
    if number == 0:
        return '0'
    encoded = []
    while number:
        number, remainder = divmod(number, 36)
        encoded.append(digits[remainder])
    return ''.join(reversed(encoded))


def generate_theme_name(prompt: str) -> str:
    cleaned = prompt.strip().lower()
    capitalized = cleaned[:1].upper() + cleaned[1:]
    if len(capitalized) > MAX_NAME_LENGTH:
        return capitalized[:MAX_NAME_LENGTH] + '...'
    return capitalized


def accessibility_report(study: ThemeColors, break_colors: ThemeColors) -> AccessibilityReport:
    """WCAG contrast of primary against secondary, per phase."""
    def phase(colors: ThemeColors) -> PhaseAccessibility:
        ratio = contrast_ratio(colors.primary, colors.secondary)
        return PhaseAccessibility(contrast=ratio, meets_aa=ratio >= WCAG_AA_CONTRAST)

    return AccessibilityReport(study=phase(study), break_=phase(break_colors))


class ThemeAssembler:
    """Builds AcceptedTheme records and registers them with the session."""

    def __init__(
        self,
        diversity_validator: DiversityValidator,
        clock: Callable[[], float] = time.time
    ):
        self.diversity_validator = diversity_validator
        self.clock = clock

    def validate_structure(self, candidate: CandidateTheme) -> None:
        """Raise StructuralValidationError naming the first missing or malformed field."""
        if candidate.studyColors is None or candidate.breakColors is None:
            field_name = 'studyColors' if candidate.studyColors is None else 'breakColors'
            raise StructuralValidationError(field_name, 'Missing color information in AI response')

        if candidate.visualElements is None:
            raise StructuralValidationError('visualElements', 'Missing visual elements in AI response')

        self._validate_triple(candidate.studyColors, 'studyColors')
        self._validate_triple(candidate.breakColors, 'breakColors')

    def assemble(self, candidate: CandidateTheme, prompt: str) -> AcceptedTheme:
        """Build the accepted record and add it to session history.

        Diversity is re-checked here so nothing that collides with the session
        or the fallback palette can be registered.
        """
        self.validate_structure(candidate)

        validator = self.diversity_validator
        session_check = validator.validate_session_uniqueness(candidate)
        if not session_check.is_unique and session_check.conflicting_ids:
            similarity = f"{session_check.similarity_score * 100:.1f}"
            raise DiversitySimilarityError(
                f"Generated theme is too similar to {len(session_check.conflicting_ids)} existing theme(s) "
                f"({similarity}% similarity). {'. '.join(session_check.recommendations)}",
                similarity=session_check.similarity_score,
                conflicting_ids=session_check.conflicting_ids,
                recommendations=session_check.recommendations,
            )

        fallback_check = validator.validate_against_fallback(candidate)
        if fallback_check.is_similar:
            raise DiversitySimilarityError(
                f"Generated theme is too similar to fallback theme "
                f"(distance: {fallback_check.distance:.2f}). Try a more creative prompt.",
                distance=fallback_check.distance,
            )

        study_colors = self._theme_colors(candidate.studyColors)
        break_colors = self._theme_colors(candidate.breakColors)
        distances = session_check.color_distances

        theme = AcceptedTheme(
            id=self._theme_id(prompt),
            name=candidate.themeName or generate_theme_name(prompt),
            study_colors=study_colors,
            break_colors=break_colors,
            background_elements=self.background_elements(candidate.visualElements),
            animations=self.animations(candidate.visualElements.animations),
            original_prompt=prompt,
            created_at=self._now_millis(),
            confidence=candidate.confidence,
            diversity_report=DiversityReport(
                is_unique=session_check.is_unique,
                similarity_score=session_check.similarity_score,
                conflicting_ids=tuple(session_check.conflicting_ids),
                recommendations=tuple(session_check.recommendations),
                study_distance=distances.study_colors if distances else 0.0,
                break_distance=distances.break_colors if distances else 0.0,
                overall_distance=distances.overall if distances else 0.0,
            ),
            kind=ThemeKind.GENERATED,
        )

        report = accessibility_report(study_colors, break_colors)
        if not report.meets_aa:
            logger.warning(
                f"Theme '{theme.name}' may not meet accessibility contrast requirements "
                f"(study {report.study.contrast:.2f}:1, break {report.break_.contrast:.2f}:1)"
            )

        validator.add_to_session(theme)
        logger.info(f"Assembled theme {theme.id} ('{theme.name}')")
        return theme

    def build_fallback(self, prompt: str) -> AcceptedTheme:
        """Deterministic default theme; also registered into the session."""
        theme = AcceptedTheme(
            id=self._theme_id(prompt),
            name=generate_theme_name(prompt),
            study_colors=FALLBACK_STUDY_COLORS,
            break_colors=FALLBACK_BREAK_COLORS,
            background_elements=(FALLBACK_BACKGROUND,),
            animations=FALLBACK_ANIMATIONS,
            original_prompt=prompt,
            created_at=self._now_millis(),
            confidence=FALLBACK_CONFIDENCE,
            diversity_report=FALLBACK_REPORT,
            kind=ThemeKind.FALLBACK,
        )
        self.diversity_validator.add_to_session(theme)
        logger.info(f"Built fallback theme {theme.id} for prompt '{prompt}'")
        return theme

    @staticmethod
    def background_elements(visual_elements: VisualElements) -> Tuple[BackgroundElement, ...]:
        elements = visual_elements.elements or []
        background_type = visual_elements.backgroundType

        if background_type == 'particles' and elements:
            config: Dict[str, Any] = {
                'pattern': elements[0] or 'default',
                'count': min(MAX_PARTICLES, max(MIN_PARTICLES, len(elements) * 3)),
                'animationDuration': DEFAULT_ANIMATION_DURATION,
                'opacity': 0.4,
            }
            return (BackgroundElement(type='particles', config=config),)

        if background_type == 'pattern' and elements:
            config = {
                'studyCharacter': elements[0] or 'default-study',
                'breakCharacter': elements[1] if len(elements) > 1 and elements[1] else 'default-break',
                'position': 'left-side',
                'scale': 0.8,
            }
            return (BackgroundElement(type='pattern', config=config),)

        if background_type == 'gradient':
            colors = tuple(visual_elements.elements) if visual_elements.elements is not None else DEFAULT_GRADIENT_COLORS
            return (BackgroundElement(type='gradient', config={'colors': colors, 'direction': 'vertical'}),)

        return ()

    @staticmethod
    def animations(suggestions: Optional[List[AnimationSuggestion]]) -> ThemeAnimations:
        if not suggestions:
            return ThemeAnimations()

        first = suggestions[0]
        duration = min(MAX_ANIMATION_DURATION, max(MIN_ANIMATION_DURATION, first.duration or DEFAULT_ANIMATION_DURATION))
        return ThemeAnimations(duration=duration, animation_type=first.type)

    @staticmethod
    def _validate_triple(colors: ColorTriple, context: str) -> None:
        for field_name in ('primary', 'secondary', 'accent'):
            value = getattr(colors, field_name)
            if not value:
                raise StructuralValidationError(
                    f'{context}.{field_name}', f'Missing {field_name} color in {context}'
                )
            if not is_valid_hex(value) or not value.startswith('#'):
                raise StructuralValidationError(
                    f'{context}.{field_name}',
                    f'Invalid hex color format for {field_name} in {context}: {value}'
                )

    @staticmethod
    def _theme_colors(colors: ColorTriple) -> ThemeColors:
        return ThemeColors(
            primary=colors.primary,
            secondary=colors.secondary,
            accent=colors.accent,
            gradient=(colors.secondary, colors.primary),
            background=colors.secondary,
        )

    def _theme_id(self, prompt: str) -> str:
        return f"ai-theme-{hash32(prompt)}-{self._now_millis()}"

    def _now_millis(self) -> int:
        return int(self.clock() * 1000)
