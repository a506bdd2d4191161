"""
Configuration management for theme generation.

Centralized configuration with:
- Type safety
- Environment variable support
- Validation
- Documentation
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


DIVERSITY_LEVELS = ('standard', 'high', 'maximum')
INVALID_COLOR_POLICIES = ('identical', 'distinct')


@dataclass
class AIConfig:
    """AI service configuration"""
    endpoint: str = field(default_factory=lambda: os.getenv('FOCUSTHEME_AI_ENDPOINT', 'https://api.openai.com/v1'))
    model: str = field(default_factory=lambda: os.getenv('FOCUSTHEME_AI_MODEL', 'gpt-3.5-turbo'))
    temperature: float = field(default_factory=lambda: float(os.getenv('FOCUSTHEME_AI_TEMPERATURE', '0.7')))
    max_tokens: int = field(default_factory=lambda: int(os.getenv('FOCUSTHEME_AI_MAX_TOKENS', '1000')))
    timeout_seconds: float = field(default_factory=lambda: float(os.getenv('FOCUSTHEME_AI_TIMEOUT', '10')))
    retry_attempts: int = field(default_factory=lambda: int(os.getenv('FOCUSTHEME_AI_RETRY_ATTEMPTS', '3')))


@dataclass
class DiversityConfig:
    """Thresholds for fallback distance and session similarity"""
    min_color_distance: float = field(default_factory=lambda: float(os.getenv('FOCUSTHEME_MIN_COLOR_DISTANCE', '50')))
    max_similarity_score: float = field(default_factory=lambda: float(os.getenv('FOCUSTHEME_MAX_SIMILARITY', '0.7')))
    session_capacity: int = field(default_factory=lambda: int(os.getenv('FOCUSTHEME_SESSION_CAPACITY', '10')))


@dataclass
class GenerationConfig:
    """Retry and escalation settings for the generation loop."""

    diversity_level: str = field(default_factory=lambda: os.getenv('FOCUSTHEME_DIVERSITY_LEVEL', 'standard'))
    fallback_on_error: bool = field(default_factory=lambda: os.getenv('FOCUSTHEME_FALLBACK_ON_ERROR', 'true').lower() == 'true')

    # Hard ceiling on attempts regardless of what callers request
    retry_attempts_clamp: int = 2

    # Backoff
    diversity_backoff_seconds: float = field(default_factory=lambda: float(os.getenv('FOCUSTHEME_DIVERSITY_BACKOFF', '0.5')))
    base_backoff_seconds: float = field(default_factory=lambda: float(os.getenv('FOCUSTHEME_BASE_BACKOFF', '1.0')))

    # How rgb_distance treats unparseable hex: 'identical' (distance 0) or 'distinct' (max distance)
    invalid_color_policy: str = field(default_factory=lambda: os.getenv('FOCUSTHEME_INVALID_COLOR_POLICY', 'identical'))


@dataclass
class StorageConfig:
    """Durable theme store configuration"""
    cache_dir: str = field(default_factory=lambda: os.getenv('FOCUSTHEME_CACHE_DIR', '.focustheme_cache'))


@dataclass
class LogConfig:
    """Logging configuration"""
    level: str = field(default_factory=lambda: os.getenv('LOG_LEVEL', 'INFO'))
    format: str = field(default_factory=lambda: os.getenv('LOG_FORMAT', 'text'))
    enable_performance_logging: bool = field(default_factory=lambda: os.getenv('LOG_PERFORMANCE', 'true').lower() == 'true')


@dataclass
class Config:
    """Master configuration"""
    ai: AIConfig = field(default_factory=AIConfig)
    diversity: DiversityConfig = field(default_factory=DiversityConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LogConfig = field(default_factory=LogConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'ai': {
                'endpoint': self.ai.endpoint,
                'model': self.ai.model,
                'temperature': self.ai.temperature,
                'max_tokens': self.ai.max_tokens,
                'timeout_seconds': self.ai.timeout_seconds,
                'retry_attempts': self.ai.retry_attempts
            },
            'diversity': {
                'min_color_distance': self.diversity.min_color_distance,
                'max_similarity_score': self.diversity.max_similarity_score,
                'session_capacity': self.diversity.session_capacity
            },
            'generation': {
                'diversity_level': self.generation.diversity_level,
                'fallback_on_error': self.generation.fallback_on_error,
                'retry_attempts_clamp': self.generation.retry_attempts_clamp,
                'diversity_backoff_seconds': self.generation.diversity_backoff_seconds,
                'base_backoff_seconds': self.generation.base_backoff_seconds,
                'invalid_color_policy': self.generation.invalid_color_policy
            },
            'storage': {
                'cache_dir': self.storage.cache_dir
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format
            }
        }

    def validate(self) -> None:
        """Validate configuration values"""
        # AI validation
        if not self.ai.endpoint.startswith(('http://', 'https://')):
            raise ValueError(f"AI endpoint must be an http(s) URL, got {self.ai.endpoint!r}")

        if self.ai.temperature < 0 or self.ai.temperature > 2:
            raise ValueError(f"AI temperature must be between 0 and 2, got {self.ai.temperature}")

        if self.ai.timeout_seconds <= 0:
            raise ValueError(f"AI timeout_seconds must be greater than 0, got {self.ai.timeout_seconds}")

        if self.ai.retry_attempts < 1:
            raise ValueError(f"AI retry_attempts must be at least 1, got {self.ai.retry_attempts}")

        # Diversity validation
        if self.diversity.min_color_distance < 0:
            raise ValueError(f"min_color_distance must be non-negative, got {self.diversity.min_color_distance}")

        if self.diversity.max_similarity_score < 0 or self.diversity.max_similarity_score > 1:
            raise ValueError(f"max_similarity_score must be between 0 and 1, got {self.diversity.max_similarity_score}")

        if self.diversity.session_capacity < 1:
            raise ValueError(f"session_capacity must be at least 1, got {self.diversity.session_capacity}")

        # Generation validation
        if self.generation.diversity_level not in DIVERSITY_LEVELS:
            raise ValueError(f"diversity_level must be one of {DIVERSITY_LEVELS}, got {self.generation.diversity_level!r}")

        if self.generation.retry_attempts_clamp < 1:
            raise ValueError(f"retry_attempts_clamp must be at least 1, got {self.generation.retry_attempts_clamp}")

        if self.generation.invalid_color_policy not in INVALID_COLOR_POLICIES:
            raise ValueError(
                f"invalid_color_policy must be one of {INVALID_COLOR_POLICIES}, "
                f"got {self.generation.invalid_color_policy!r}"
            )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Get singleton configuration instance"""
    config = Config()
    config.validate()
    return config


# Convenience functions for common config access
def get_ai_config() -> AIConfig:
    """Get AI configuration"""
    return get_config().ai


def get_storage_config() -> StorageConfig:
    """Get storage configuration"""
    return get_config().storage
