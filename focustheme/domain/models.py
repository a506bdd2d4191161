"""
Domain models representing core theme concepts.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Any, List, Optional, Tuple, Mapping, Literal
from enum import Enum

from focustheme.models.candidate import CandidateTheme, ColorTriple

DiversityLevel = Literal['standard', 'high', 'maximum']


class ThemeKind(str, Enum):
    """Discriminates built-in themes from generated ones."""
    PREDEFINED = "predefined"
    GENERATED = "generated"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ThemeColorSummary:
    """Six-color digest of a theme plus its leading animation type.

    This is the unit remembered in session history.
    """
    study_primary: str
    study_secondary: str
    study_accent: str
    break_primary: str
    break_secondary: str
    break_accent: str
    animation_type: Optional[str] = None

    def colors(self) -> Tuple[str, str, str, str, str, str]:
        return (
            self.study_primary, self.study_secondary, self.study_accent,
            self.break_primary, self.break_secondary, self.break_accent,
        )

    def avoid_colors(self) -> List[str]:
        """Primary and secondary colors of both phases, used in prompt digests."""
        return [self.study_primary, self.study_secondary, self.break_primary, self.break_secondary]

    @classmethod
    def from_candidate(cls, candidate: CandidateTheme) -> 'ThemeColorSummary':
        study = candidate.studyColors or ColorTriple()
        brk = candidate.breakColors or ColorTriple()
        animation_types = candidate.animation_types()
        return cls(
            study_primary=study.primary,
            study_secondary=study.secondary,
            study_accent=study.accent,
            break_primary=brk.primary,
            break_secondary=brk.secondary,
            break_accent=brk.accent,
            animation_type=animation_types[0] if animation_types else None,
        )

    @classmethod
    def from_theme(cls, theme: 'AcceptedTheme') -> 'ThemeColorSummary':
        return cls(
            study_primary=theme.study_colors.primary,
            study_secondary=theme.study_colors.secondary,
            study_accent=theme.study_colors.accent,
            break_primary=theme.break_colors.primary,
            break_secondary=theme.break_colors.secondary,
            break_accent=theme.break_colors.accent,
            animation_type=theme.animations.animation_type,
        )


@dataclass(frozen=True)
class ThemeColors:
    """Resolved colors for one phase."""
    primary: str
    secondary: str
    accent: str
    gradient: Tuple[str, ...]
    background: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'primary': self.primary,
            'secondary': self.secondary,
            'accent': self.accent,
            'gradient': list(self.gradient),
            'background': self.background,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ThemeColors':
        return cls(
            primary=data['primary'],
            secondary=data['secondary'],
            accent=data['accent'],
            gradient=tuple(data.get('gradient', ())),
            background=data.get('background', data['secondary']),
        )


@dataclass(frozen=True)
class BackgroundElement:
    type: str
    config: Mapping[str, Any]

    def __post_init__(self):
        object.__setattr__(self, 'config', MappingProxyType(dict(self.config)))

    def to_dict(self) -> Dict[str, Any]:
        config = {}
        for key, value in self.config.items():
            config[key] = list(value) if isinstance(value, tuple) else value
        return {'type': self.type, 'config': config}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BackgroundElement':
        config = {
            key: tuple(value) if isinstance(value, list) else value
            for key, value in data.get('config', {}).items()
        }
        return cls(type=data['type'], config=config)


@dataclass(frozen=True)
class ParticleSettings:
    count: int = 8
    speed: float = 1
    opacity: float = 0.4


@dataclass(frozen=True)
class ThemeAnimations:
    duration: int = 6000
    easing: str = 'ease-in-out'
    particles: ParticleSettings = field(default_factory=ParticleSettings)
    animation_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'duration': self.duration,
            'easing': self.easing,
            'particles': {
                'count': self.particles.count,
                'speed': self.particles.speed,
                'opacity': self.particles.opacity,
            },
            'animation_type': self.animation_type,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ThemeAnimations':
        particles = data.get('particles') or {}
        return cls(
            duration=data.get('duration', 6000),
            easing=data.get('easing', 'ease-in-out'),
            particles=ParticleSettings(**particles),
            animation_type=data.get('animation_type'),
        )


@dataclass(frozen=True)
class DiversityReport:
    """Outcome of the diversity checks at acceptance time."""
    is_unique: bool
    similarity_score: float
    conflicting_ids: Tuple[str, ...] = ()
    recommendations: Tuple[str, ...] = ()
    study_distance: float = 0.0
    break_distance: float = 0.0
    overall_distance: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'is_unique': self.is_unique,
            'similarity_score': self.similarity_score,
            'conflicting_ids': list(self.conflicting_ids),
            'recommendations': list(self.recommendations),
            'study_distance': self.study_distance,
            'break_distance': self.break_distance,
            'overall_distance': self.overall_distance,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DiversityReport':
        return cls(
            is_unique=data['is_unique'],
            similarity_score=data['similarity_score'],
            conflicting_ids=tuple(data.get('conflicting_ids', ())),
            recommendations=tuple(data.get('recommendations', ())),
            study_distance=data.get('study_distance', 0.0),
            break_distance=data.get('break_distance', 0.0),
            overall_distance=data.get('overall_distance', 0.0),
        )


@dataclass(frozen=True)
class AcceptedTheme:
    """Canonical, immutable theme record produced by the pipeline."""
    id: str
    name: str
    study_colors: ThemeColors
    break_colors: ThemeColors
    background_elements: Tuple[BackgroundElement, ...]
    animations: ThemeAnimations
    original_prompt: str
    created_at: int
    confidence: float
    diversity_report: DiversityReport
    kind: ThemeKind = ThemeKind.GENERATED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'study_colors': self.study_colors.to_dict(),
            'break_colors': self.break_colors.to_dict(),
            'background_elements': [element.to_dict() for element in self.background_elements],
            'animations': self.animations.to_dict(),
            'original_prompt': self.original_prompt,
            'created_at': self.created_at,
            'confidence': self.confidence,
            'diversity_report': self.diversity_report.to_dict(),
            'kind': self.kind.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AcceptedTheme':
        """Create AcceptedTheme from dictionary."""
        return cls(
            id=data['id'],
            name=data['name'],
            study_colors=ThemeColors.from_dict(data['study_colors']),
            break_colors=ThemeColors.from_dict(data['break_colors']),
            background_elements=tuple(
                BackgroundElement.from_dict(element) for element in data.get('background_elements', [])
            ),
            animations=ThemeAnimations.from_dict(data.get('animations') or {}),
            original_prompt=data['original_prompt'],
            created_at=data['created_at'],
            confidence=data.get('confidence', 0.0),
            diversity_report=DiversityReport.from_dict(data['diversity_report']),
            kind=ThemeKind(data.get('kind', ThemeKind.GENERATED.value)),
        )


def is_generated_theme(theme: Any) -> bool:
    """True for records produced by the generation pipeline, fallback included."""
    return isinstance(theme, AcceptedTheme) and theme.kind in (ThemeKind.GENERATED, ThemeKind.FALLBACK)


@dataclass(frozen=True)
class PromptValidationResult:
    is_valid: bool
    errors: Tuple[str, ...] = ()
    sanitized_prompt: Optional[str] = None


@dataclass(frozen=True)
class GenerationOptions:
    """Per-call options for theme generation.

    None for diversity_level, fallback_on_error or retry_attempts uses the
    configured default; retry_attempts is still capped by the generation
    retry clamp.
    """
    diversity_level: Optional[DiversityLevel] = None
    previous_themes: Tuple[ThemeColorSummary, ...] = ()
    fallback_on_error: Optional[bool] = None
    retry_attempts: Optional[int] = None


@dataclass
class GenerationResult:
    success: bool
    theme: Optional[AcceptedTheme] = None
    error: Optional[str] = None
    used_fallback: bool = False
    diversity_failures: int = 0
    attempts: int = 0
    transitions: List[str] = field(default_factory=list)
    final_state: Optional[str] = None
