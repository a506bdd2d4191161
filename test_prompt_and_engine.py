"""
Prompt composition, prompt validation and engine adapter tests.

The OpenAI client is replaced by a small in-file fake; no network access.
"""

import asyncio
import json
import random
from types import SimpleNamespace

import httpx
import openai
import pytest

from focustheme.ai.engine import OpenAIThemeEngine, validate_prompt
from focustheme.config import AIConfig
from focustheme.domain.models import ThemeColorSummary
from focustheme.exceptions import (
    AIAuthenticationError,
    AIInvalidResponseError,
    AIRateLimitError,
    AIServiceError,
    AITimeoutError,
    InvalidPromptError,
    MissingConfigError,
    is_retryable
)
from focustheme.generation.prompt_composer import CREATIVE_DIRECTIONS, PromptComposer, PromptOptions

PREVIOUS = ThemeColorSummary('#111111', '#222222', '#333333', '#444444', '#555555', '#666666')


def make_composer(seed: int = 7) -> PromptComposer:
    return PromptComposer(rng=random.Random(seed), clock=lambda: 1700000000.0)


class FakeCompletions:
    def __init__(self, content=None, delay: float = 0.0, error: Exception = None):
        self.content = content
        self.delay = delay
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if self.delay:
            await asyncio.sleep(self.delay)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_engine(completions: FakeCompletions, timeout: float = 10) -> OpenAIThemeEngine:
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAIThemeEngine(
        'sk-test',
        config=AIConfig(timeout_seconds=timeout),
        composer=make_composer(),
        client=client,
    )


def test_system_text_requirements():
    composed = make_composer().compose('ocean waves')

    assert '4.5:1' in composed.system_text
    assert 'AVOID generic blue/green combinations' in composed.system_text
    assert 'promote focus and concentration' in composed.system_text
    assert 'promote relaxation and rest' in composed.system_text
    assert 'Return ONLY valid JSON' in composed.system_text
    assert 'STANDARD DIVERSITY MODE' in composed.system_text


def test_user_text_with_context_and_avoid_list():
    composed = make_composer().compose(
        'ocean waves',
        PromptOptions(diversity_level='maximum', previous_themes=(PREVIOUS,), session_token='abc')
    )

    assert 'MAXIMUM DIVERSITY MODE' in composed.system_text
    assert 'SEMANTIC CONTEXT for "ocean"' in composed.user_text
    assert '#0077BE' in composed.user_text
    assert 'AVOID THESE RECENTLY USED COLORS:\n#111111, #222222, #444444, #555555' in composed.user_text
    assert composed.creative_direction in CREATIVE_DIRECTIONS
    assert f'Create a {composed.creative_direction} theme for: "ocean waves"' in composed.user_text
    assert composed.randomization_seed.startswith('abc-1700000000000-')
    assert '"studyColors"' in composed.user_text


def test_user_text_without_context_or_history():
    composed = make_composer().compose('quiet library', PromptOptions(diversity_level='high'))

    assert 'HIGH DIVERSITY MODE' in composed.system_text
    assert 'CREATIVE INTERPRETATION GUIDANCE' in composed.user_text
    assert 'FIRST THEME: Create a unique baseline theme.' in composed.user_text


def test_composition_is_deterministic_for_seeded_rng():
    assert make_composer(3).compose('forest') == make_composer(3).compose('forest')


@pytest.mark.parametrize("prompt, error", [
    ('', 'Prompt cannot be empty'),
    ('   ', 'Prompt cannot be empty'),
    ('x' * 51, 'Prompt must be 50 characters or less'),
    ('violence at sea', 'Prompt contains inappropriate content'),
])
def test_validate_prompt_rejects(prompt, error):
    result = validate_prompt(prompt)
    assert not result.is_valid
    assert error in result.errors
    assert result.sanitized_prompt is None


def test_validate_prompt_sanitizes():
    result = validate_prompt('  <ocean> waves ')
    assert result.is_valid
    assert result.sanitized_prompt == 'ocean waves'
    assert validate_prompt('x' * 50).is_valid


def test_engine_returns_candidate(ocean_response):
    completions = FakeCompletions(content=json.dumps(ocean_response))
    candidate = asyncio.run(make_engine(completions).generate_theme('<ocean>'))

    assert candidate.themeName == 'Tidal Focus'
    assert candidate.animation_types() == ['flowing', 'wave']

    call = completions.calls[0]
    assert call['model'] == 'gpt-3.5-turbo'
    assert call['max_tokens'] == 1000
    assert call['response_format'] == {'type': 'json_object'}
    assert 'for: "ocean"' in call['messages'][1]['content']


def test_engine_rejects_invalid_prompt():
    with pytest.raises(InvalidPromptError) as excinfo:
        asyncio.run(make_engine(FakeCompletions(content='{}')).generate_theme(''))
    assert str(excinfo.value) == 'Invalid prompt: Prompt cannot be empty'


def test_engine_timeout_is_retryable_error(ocean_response):
    completions = FakeCompletions(content=json.dumps(ocean_response), delay=1.0)
    with pytest.raises(AITimeoutError) as excinfo:
        asyncio.run(make_engine(completions, timeout=0.01).generate_theme('ocean'))
    assert excinfo.value.message == 'Request timeout - please try again'


def test_engine_empty_content():
    with pytest.raises(AIInvalidResponseError, match='no content in message'):
        asyncio.run(make_engine(FakeCompletions(content='')).generate_theme('ocean'))


def test_parse_response_requires_fields(ocean_response):
    del ocean_response['themeName']
    with pytest.raises(AIInvalidResponseError, match='Failed to parse AI response'):
        OpenAIThemeEngine.parse_response(json.dumps(ocean_response))


def test_parse_response_checks_color_format(ocean_response):
    ocean_response['studyColors']['primary'] = 'blue'
    with pytest.raises(AIInvalidResponseError) as excinfo:
        OpenAIThemeEngine.parse_response(json.dumps(ocean_response))
    assert 'Invalid color format for primary: blue' in excinfo.value.message


def test_parse_response_rejects_bad_json():
    with pytest.raises(AIInvalidResponseError, match='Failed to parse AI response'):
        OpenAIThemeEngine.parse_response('not json')


def test_engine_requires_api_key_without_client():
    with pytest.raises(MissingConfigError):
        OpenAIThemeEngine('', config=AIConfig())


COMPLETIONS_URL = 'https://api.openai.com/v1/chat/completions'


def status_error(error_class, status_code: int):
    request = httpx.Request('POST', COMPLETIONS_URL)
    response = httpx.Response(status_code, request=request)
    return error_class(f'HTTP {status_code}', response=response, body=None)


@pytest.mark.parametrize("error, mapped_class, message, retryable", [
    (status_error(openai.AuthenticationError, 401), AIAuthenticationError,
     'Invalid API key. Please check your OpenAI API key in settings.', False),
    (status_error(openai.PermissionDeniedError, 403), AIAuthenticationError,
     'API access forbidden. Please check your OpenAI account permissions.', False),
    (status_error(openai.RateLimitError, 429), AIRateLimitError,
     'Rate limit exceeded. Please try again later.', True),
    (status_error(openai.InternalServerError, 503), AIServiceError,
     'OpenAI service temporarily unavailable. Please try again later.', True),
    (openai.APIConnectionError(request=httpx.Request('POST', COMPLETIONS_URL)), AIServiceError,
     'Network error - please check your internet connection', True),
])
def test_engine_maps_client_errors(error, mapped_class, message, retryable):
    with pytest.raises(mapped_class) as excinfo:
        asyncio.run(make_engine(FakeCompletions(error=error)).generate_theme('ocean'))

    assert excinfo.value.message == message
    assert excinfo.value.cause is error
    assert is_retryable(excinfo.value) is retryable
