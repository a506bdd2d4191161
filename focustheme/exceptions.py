"""
Exception hierarchy for theme generation.

Provides specific exceptions for different failure scenarios
so the orchestrator can decide between retrying, falling back and failing.
"""

from typing import Optional, Dict, Any, List, Sequence


class GenerationError(Exception):
    """Base exception for all theme generation errors"""

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.context = context or {}

    def __str__(self):
        parts = [self.message]
        if self.cause:
            parts.append(f" (caused by: {type(self.cause).__name__}: {str(self.cause)})")
        return "".join(parts)


# === Prompt exceptions ===

class InvalidPromptError(GenerationError):
    """Prompt failed length or content checks"""

    def __init__(self, errors: Sequence[str], **kwargs):
        self.errors = list(errors)
        super().__init__(f"Invalid prompt: {', '.join(self.errors)}", **kwargs)


# === AI service exceptions ===

class AIServiceError(GenerationError):
    """External text-generation service failed"""
    pass


class AITimeoutError(AIServiceError):
    """AI request timed out or was cancelled"""
    pass


class AIRateLimitError(AIServiceError):
    """AI API rate limit exceeded"""
    pass


class AIAuthenticationError(AIServiceError):
    """API key rejected or access forbidden"""
    pass


class AIInvalidResponseError(AIServiceError):
    """AI returned invalid or unparseable response"""
    pass


# === Validation exceptions ===

class ValidationError(GenerationError):
    """Candidate theme failed validation"""
    pass


class StructuralValidationError(ValidationError):
    """Missing or malformed color / visual element fields"""

    def __init__(self, field_name: str, message: str, **kwargs):
        super().__init__(message, **kwargs)
        self.field_name = field_name
        self.context['field'] = field_name


class DiversitySimilarityError(ValidationError):
    """Candidate too similar to the fallback theme or to recent session themes"""

    def __init__(
        self,
        message: str,
        distance: Optional[float] = None,
        similarity: Optional[float] = None,
        conflicting_ids: Optional[List[str]] = None,
        recommendations: Optional[List[str]] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.distance = distance
        self.similarity = similarity
        self.conflicting_ids = list(conflicting_ids or [])
        self.recommendations = list(recommendations or [])
        self.context.update({
            'distance': distance,
            'similarity': similarity,
            'conflicting_ids': self.conflicting_ids
        })


class ContextualMismatchError(ValidationError):
    """Colors or animations do not fit the semantic context of the prompt"""

    def __init__(
        self,
        message: str,
        color_score: float,
        animation_score: float,
        issues: Optional[List[str]] = None,
        recommendations: Optional[List[str]] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.color_score = color_score
        self.animation_score = animation_score
        self.issues = list(issues or [])
        self.recommendations = list(recommendations or [])
        self.context.update({
            'color_score': color_score,
            'animation_score': animation_score
        })


# === Persistence exceptions ===

class PersistenceError(GenerationError):
    """Theme store error"""
    pass


class SaveError(PersistenceError):
    """Failed to save theme"""
    pass


class LoadError(PersistenceError):
    """Failed to load theme"""
    pass


class ThemeNotFoundError(PersistenceError):
    """No stored theme with the requested id"""
    pass


# === Configuration exceptions ===

class ConfigurationError(GenerationError):
    """Configuration error"""
    pass


class InvalidConfigError(ConfigurationError):
    """Invalid configuration value"""
    pass


class MissingConfigError(ConfigurationError):
    """Required configuration missing"""
    pass


# === Recovery helpers ===

NON_RETRYABLE_MARKERS = (
    'invalid api key',
    'invalid prompt',
    'failed to parse',
    'forbidden',
    'invalid response from ai service',
)


def is_retryable(error: Exception) -> bool:
    """Check if error is retryable.

    Prompt and structural failures never are. Everything else is classified by
    message so that wrapped transport errors keep their meaning.
    """
    if isinstance(error, (InvalidPromptError, StructuralValidationError, AIAuthenticationError)):
        return False
    message = str(error).lower()
    return not any(marker in message for marker in NON_RETRYABLE_MARKERS)


def is_diversity_failure(error: Exception) -> bool:
    """True for rejections caused by similarity to the fallback or to session themes."""
    if isinstance(error, DiversitySimilarityError):
        return True
    message = str(error).lower()
    return 'diversity' in message or 'similar' in message


def is_validation_rejection(error: Exception) -> bool:
    """Diversity and contextual rejections share the short backoff."""
    return isinstance(error, ContextualMismatchError) or is_diversity_failure(error)


def get_retry_delay(
    error: Exception,
    attempt: int,
    diversity_delay: float = 0.5,
    base_delay: float = 1.0
) -> float:
    """Get retry delay in seconds for a failed attempt (1-based)"""
    if is_validation_rejection(error):
        return diversity_delay
    return base_delay * (2 ** (attempt - 1))
