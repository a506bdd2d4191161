"""
Text-generation engine adapter.

The engine is an untrusted color proposer: it turns a composed prompt into a
CandidateTheme and nothing more. All diversity and contextual checks happen
in the generation pipeline.
"""

import asyncio
import json
from typing import Optional, List, Protocol

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError as PydanticValidationError

from focustheme.config import AIConfig, get_ai_config
from focustheme.domain.models import PromptValidationResult
from focustheme.exceptions import (
    AIAuthenticationError,
    AIInvalidResponseError,
    AIRateLimitError,
    AIServiceError,
    AITimeoutError,
    InvalidPromptError,
    MissingConfigError
)
from focustheme.generation.prompt_composer import PromptComposer, PromptOptions
from focustheme.logging_config import get_logger, log_performance
from focustheme.models.candidate import CandidateTheme
from focustheme.tools.theme.color_math import is_valid_hex

logger = get_logger(__name__)

MAX_PROMPT_LENGTH = 50
BLOCKED_WORDS = ('hate', 'violence', 'explicit')


def validate_prompt(prompt: Optional[str]) -> PromptValidationResult:
    """Length and content checks; sanitized prompt is set only when valid."""
    errors: List[str] = []
    trimmed = (prompt or '').strip()

    if not trimmed:
        errors.append('Prompt cannot be empty')
    elif len(trimmed) > MAX_PROMPT_LENGTH:
        errors.append(f'Prompt must be {MAX_PROMPT_LENGTH} characters or less')

    lowered = (prompt or '').lower()
    if any(word in lowered for word in BLOCKED_WORDS):
        errors.append('Prompt contains inappropriate content')

    sanitized = trimmed.replace('<', '').replace('>', '')
    return PromptValidationResult(
        is_valid=not errors,
        errors=tuple(errors),
        sanitized_prompt=sanitized if not errors else None,
    )


class AIThemeEngine(Protocol):
    """Anything that can propose a theme for a prompt."""

    async def generate_theme(self, prompt: str, options: Optional[PromptOptions] = None) -> CandidateTheme:
        ...

    def validate_prompt(self, prompt: str) -> PromptValidationResult:
        ...


class OpenAIThemeEngine:
    """Chat-completions engine speaking the OpenAI wire protocol."""

    def __init__(
        self,
        api_key: str,
        config: Optional[AIConfig] = None,
        composer: Optional[PromptComposer] = None,
        client: Optional[AsyncOpenAI] = None
    ):
        self.config = config or get_ai_config()
        self.composer = composer or PromptComposer()
        if client is None and not api_key:
            raise MissingConfigError("OpenAI API key is required", context={'field': 'api_key'})
        # Retries belong to the orchestrator, so the client never retries on its own
        self.client = client or AsyncOpenAI(api_key=api_key, base_url=self.config.endpoint, max_retries=0)

    def validate_prompt(self, prompt: str) -> PromptValidationResult:
        return validate_prompt(prompt)

    @log_performance("ai_generate_theme")
    async def generate_theme(self, prompt: str, options: Optional[PromptOptions] = None) -> CandidateTheme:
        validation = self.validate_prompt(prompt)
        if not validation.is_valid:
            raise InvalidPromptError(validation.errors)

        composed = self.composer.compose(validation.sanitized_prompt, options)
        content = await self._complete(composed.system_text, composed.user_text)
        return self.parse_response(content)

    async def _complete(self, system_text: str, user_text: str) -> str:
        try:
            response = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=self.config.model,
                    messages=[
                        {"role": "system", "content": system_text},
                        {"role": "user", "content": user_text}
                    ],
                    max_tokens=self.config.max_tokens,
                    temperature=self.config.temperature,
                    response_format={"type": "json_object"}
                ),
                timeout=self.config.timeout_seconds
            )
        except asyncio.TimeoutError as e:
            raise AITimeoutError('Request timeout - please try again', cause=e)
        except openai.APITimeoutError as e:
            raise AITimeoutError('Request timeout - please try again', cause=e)
        except openai.RateLimitError as e:
            raise AIRateLimitError('Rate limit exceeded. Please try again later.', cause=e)
        except openai.AuthenticationError as e:
            raise AIAuthenticationError('Invalid API key. Please check your OpenAI API key in settings.', cause=e)
        except openai.PermissionDeniedError as e:
            raise AIAuthenticationError(
                'API access forbidden. Please check your OpenAI account permissions.', cause=e
            )
        except openai.APIStatusError as e:
            if e.status_code >= 500:
                raise AIServiceError('OpenAI service temporarily unavailable. Please try again later.', cause=e)
            raise AIServiceError(f'API request failed: {e.status_code}', cause=e)
        except openai.APIConnectionError as e:
            raise AIServiceError('Network error - please check your internet connection', cause=e)
        except openai.APIResponseValidationError as e:
            raise AIInvalidResponseError('Invalid response from AI service - please try again', cause=e)

        if not response.choices:
            raise AIInvalidResponseError('Invalid API response: no choices returned')

        content = response.choices[0].message.content
        if not content:
            raise AIInvalidResponseError('Invalid API response: no content in message')

        return content

    @staticmethod
    def parse_response(content: str) -> CandidateTheme:
        """Parse the engine's JSON into a CandidateTheme.

        Requires studyColors, breakColors and themeName, and strict hex for
        every phase color.
        """
        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            raise AIInvalidResponseError('Failed to parse AI response: Invalid JSON', cause=e)

        if not isinstance(parsed, dict):
            raise AIInvalidResponseError('Failed to parse AI response: Invalid response format')

        if not parsed.get('studyColors') or not parsed.get('breakColors') or not parsed.get('themeName'):
            raise AIInvalidResponseError('Failed to parse AI response: Invalid response format: missing required fields')

        for phase in ('studyColors', 'breakColors'):
            colors = parsed[phase]
            for field_name in ('primary', 'secondary', 'accent'):
                value = colors.get(field_name) if isinstance(colors, dict) else None
                if not value or not is_valid_hex(value) or not str(value).startswith('#'):
                    raise AIInvalidResponseError(
                        f'Failed to parse AI response: Invalid color format for {field_name}: {value}'
                    )

        try:
            return CandidateTheme.model_validate(parsed)
        except PydanticValidationError as e:
            raise AIInvalidResponseError(f'Failed to parse AI response: {e.error_count()} invalid field(s)', cause=e)
