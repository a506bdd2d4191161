"""
Color diversity validation.

Checks candidate themes against the fixed fallback palette and against
themes already accepted in the current session.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from focustheme.config import Config, get_config
from focustheme.domain.models import AcceptedTheme, ThemeColorSummary
from focustheme.generation.session_history import SessionHistory
from focustheme.logging_config import get_logger
from focustheme.models.candidate import CandidateTheme
from focustheme.tools.theme.color_math import rgb_distance, MAX_RGB_DISTANCE

logger = get_logger(__name__)

# Used as the denominator for similarity scores
MAX_DISTANCE = 441.67

FALLBACK_COLORS = ThemeColorSummary(
    study_primary='#6B73FF',
    study_secondary='#F0F2FF',
    study_accent='#4C51BF',
    break_primary='#48BB78',
    break_secondary='#F0FFF4',
    break_accent='#38A169',
)

PRIMARY_WEIGHT = 0.5
SECONDARY_WEIGHT = 0.3
ACCENT_WEIGHT = 0.2


@dataclass(frozen=True)
class DiversitySettings:
    min_color_distance: float = 50.0
    max_similarity_score: float = 0.7
    session_capacity: int = 10
    fallback_colors: ThemeColorSummary = FALLBACK_COLORS
    # Distance assigned when a color cannot be parsed (0 = treat as identical)
    invalid_color_distance: float = 0.0

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> 'DiversitySettings':
        config = config or get_config()
        diversity = config.diversity
        policy = config.generation.invalid_color_policy
        return cls(
            min_color_distance=diversity.min_color_distance,
            max_similarity_score=diversity.max_similarity_score,
            session_capacity=diversity.session_capacity,
            invalid_color_distance=MAX_RGB_DISTANCE if policy == 'distinct' else 0.0,
        )


@dataclass
class ColorDistance:
    distance: float
    is_similar: bool


@dataclass
class ColorDistances:
    study_colors: float
    break_colors: float
    overall: float


@dataclass
class DiversityValidationResult:
    is_unique: bool
    similarity_score: float
    conflicting_ids: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    color_distances: Optional[ColorDistances] = None


class DiversityValidator:
    """Validates theme diversity and uniqueness."""

    def __init__(
        self,
        settings: Optional[DiversitySettings] = None,
        session: Optional[SessionHistory] = None
    ):
        self.settings = settings or DiversitySettings.from_config()
        self.session = session if session is not None else SessionHistory(self.settings.session_capacity)

    def color_distance(self, color1: str, color2: str) -> float:
        return rgb_distance(color1, color2, invalid_distance=self.settings.invalid_color_distance)

    def phase_distance(
        self,
        primary: str, secondary: str, accent: str,
        other_primary: str, other_secondary: str, other_accent: str
    ) -> float:
        """Weighted distance between two phases (primary counts most)."""
        return (
            self.color_distance(primary, other_primary) * PRIMARY_WEIGHT
            + self.color_distance(secondary, other_secondary) * SECONDARY_WEIGHT
            + self.color_distance(accent, other_accent) * ACCENT_WEIGHT
        )

    def fallback_distances(self, summary: ThemeColorSummary) -> ColorDistances:
        fallback = self.settings.fallback_colors
        study = self.phase_distance(
            summary.study_primary, summary.study_secondary, summary.study_accent,
            fallback.study_primary, fallback.study_secondary, fallback.study_accent,
        )
        brk = self.phase_distance(
            summary.break_primary, summary.break_secondary, summary.break_accent,
            fallback.break_primary, fallback.break_secondary, fallback.break_accent,
        )
        return ColorDistances(study_colors=study, break_colors=brk, overall=(study + brk) / 2)

    def validate_against_fallback(self, candidate: CandidateTheme) -> ColorDistance:
        """Check if generated colors differ from the fallback theme."""
        distances = self.fallback_distances(ThemeColorSummary.from_candidate(candidate))
        return ColorDistance(
            distance=distances.overall,
            is_similar=distances.overall < self.settings.min_color_distance,
        )

    def summary_distance(self, first: ThemeColorSummary, second: ThemeColorSummary) -> float:
        """Average of the six per-color distances."""
        total = sum(
            self.color_distance(a, b) for a, b in zip(first.colors(), second.colors())
        )
        return total / 6

    def similarity(self, first: ThemeColorSummary, second: ThemeColorSummary) -> float:
        """1 = identical, 0 = maximally distant."""
        return 1 - (self.summary_distance(first, second) / MAX_DISTANCE)

    def validate_session_uniqueness(self, candidate: CandidateTheme) -> DiversityValidationResult:
        """Check uniqueness against previous themes in the session."""
        summary = ThemeColorSummary.from_candidate(candidate)
        conflicting_ids: List[str] = []
        max_similarity = 0.0

        for theme_id, existing in self.session.items():
            similarity = self.similarity(summary, existing)
            if similarity > self.settings.max_similarity_score:
                conflicting_ids.append(theme_id)
            max_similarity = max(max_similarity, similarity)

        distances = self.fallback_distances(summary)

        recommendations: List[str] = []
        if conflicting_ids:
            recommendations.append('Try a different color palette to avoid similarity with recent themes')
        if distances.overall < self.settings.min_color_distance:
            recommendations.append('Generated colors are too similar to default fallback theme')

        is_unique = not conflicting_ids and distances.overall >= self.settings.min_color_distance
        if not is_unique:
            logger.info(
                f"Candidate not unique: similarity={max_similarity:.2f}, "
                f"conflicts={len(conflicting_ids)}, fallback distance={distances.overall:.2f}"
            )

        return DiversityValidationResult(
            is_unique=is_unique,
            similarity_score=max_similarity,
            conflicting_ids=conflicting_ids,
            recommendations=recommendations,
            color_distances=distances,
        )

    def add_to_session(self, theme: AcceptedTheme) -> None:
        """Add theme to session tracking."""
        self.session.add(theme.id, ThemeColorSummary.from_theme(theme))
        logger.debug(f"Tracking theme {theme.id} ({len(self.session)}/{self.session.capacity} in session)")

    def clear_session(self) -> None:
        self.session.clear()

    def session_count(self) -> int:
        return len(self.session)
