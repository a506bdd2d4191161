"""Prompt-driven study/break color themes with diversity and context validation."""

from focustheme.domain.models import AcceptedTheme, GenerationOptions, GenerationResult, ThemeKind
from focustheme.generation.orchestrator import GenerationOrchestrator, GenerationState

__version__ = "0.1.0"

__all__ = [
    "AcceptedTheme",
    "GenerationOptions",
    "GenerationResult",
    "ThemeKind",
    "GenerationOrchestrator",
    "GenerationState"
]
