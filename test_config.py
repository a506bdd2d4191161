"""
Configuration tests.
"""

import pytest

from focustheme.config import AIConfig, Config, DiversityConfig, GenerationConfig


def test_defaults_validate():
    config = Config()
    config.validate()

    assert config.generation.retry_attempts_clamp == 2
    assert config.diversity.session_capacity == 10


def test_env_overrides(monkeypatch):
    monkeypatch.setenv('FOCUSTHEME_AI_MODEL', 'gpt-4o-mini')
    monkeypatch.setenv('FOCUSTHEME_MIN_COLOR_DISTANCE', '80')

    config = Config()

    assert config.ai.model == 'gpt-4o-mini'
    assert config.diversity.min_color_distance == 80


@pytest.mark.parametrize("config, message", [
    (Config(ai=AIConfig(endpoint='ftp://example.com')), r'http\(s\) URL'),
    (Config(ai=AIConfig(temperature=3)), 'temperature'),
    (Config(ai=AIConfig(timeout_seconds=0)), 'timeout_seconds'),
    (Config(diversity=DiversityConfig(max_similarity_score=1.5)), 'max_similarity_score'),
    (Config(diversity=DiversityConfig(session_capacity=0)), 'session_capacity'),
    (Config(generation=GenerationConfig(diversity_level='extreme')), 'diversity_level'),
    (Config(generation=GenerationConfig(invalid_color_policy='ignore')), 'invalid_color_policy'),
])
def test_validate_rejects(config, message):
    with pytest.raises(ValueError, match=message):
        config.validate()


def test_to_dict_sections():
    data = Config().to_dict()

    assert set(data) == {'ai', 'diversity', 'generation', 'storage', 'logging'}
    assert data['generation']['invalid_color_policy'] == 'identical'
    assert 'api_key' not in data['ai']
