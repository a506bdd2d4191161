"""
Theme generation pipeline package.
"""

from focustheme.generation.session_history import SessionHistory
from focustheme.generation.diversity_validator import DiversityValidator, DiversitySettings
from focustheme.generation.contextual_validator import ContextualValidator
from focustheme.generation.prompt_composer import PromptComposer, PromptOptions
from focustheme.generation.theme_assembler import ThemeAssembler
from focustheme.generation.orchestrator import GenerationOrchestrator, GenerationState

__all__ = [
    'SessionHistory',
    'DiversityValidator',
    'DiversitySettings',
    'ContextualValidator',
    'PromptComposer',
    'PromptOptions',
    'ThemeAssembler',
    'GenerationOrchestrator',
    'GenerationState'
]
