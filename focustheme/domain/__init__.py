from .models import (
    DiversityLevel,
    ThemeKind,
    ThemeColorSummary,
    ThemeColors,
    BackgroundElement,
    ParticleSettings,
    ThemeAnimations,
    DiversityReport,
    AcceptedTheme,
    PromptValidationResult,
    GenerationOptions,
    GenerationResult,
    is_generated_theme
)

__all__ = [
    "DiversityLevel",
    "ThemeKind",
    "ThemeColorSummary",
    "ThemeColors",
    "BackgroundElement",
    "ParticleSettings",
    "ThemeAnimations",
    "DiversityReport",
    "AcceptedTheme",
    "PromptValidationResult",
    "GenerationOptions",
    "GenerationResult",
    "is_generated_theme"
]
