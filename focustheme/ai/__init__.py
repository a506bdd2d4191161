"""
Text-generation engine adapter and API key handling.
"""

from focustheme.ai.credentials import APIKeyProvider, validate_api_key_format, get_api_key
from focustheme.ai.engine import AIThemeEngine, OpenAIThemeEngine, validate_prompt

__all__ = [
    'APIKeyProvider',
    'validate_api_key_format',
    'get_api_key',
    'AIThemeEngine',
    'OpenAIThemeEngine',
    'validate_prompt'
]
