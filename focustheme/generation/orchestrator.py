"""
Generation orchestrator.

Drives one prompt through the pipeline as an explicit state machine:

    INIT -> VALIDATING_PROMPT -> CALLING_ENGINE -> DIVERSITY_CHECK
         -> CONTEXTUAL_CHECK -> ACCEPTED

Any failure after the engine call moves to RETRY (back to CALLING_ENGINE with
an escalated diversity level) or, once attempts run out or the error is not
retryable, to EXHAUSTED and then FALLBACK or FAILED.

`generate_theme` never raises; every outcome is a GenerationResult.
"""

import asyncio
import dataclasses
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

from focustheme.ai.credentials import APIKeyProvider
from focustheme.ai.engine import AIThemeEngine, OpenAIThemeEngine, validate_prompt
from focustheme.config import Config, get_config
from focustheme.domain.models import (
    AcceptedTheme,
    DiversityLevel,
    GenerationOptions,
    GenerationResult,
    ThemeColorSummary
)
from focustheme.exceptions import (
    ContextualMismatchError,
    DiversitySimilarityError,
    GenerationError,
    PersistenceError,
    get_retry_delay,
    is_diversity_failure,
    is_retryable
)
from focustheme.generation.contextual_validator import ContextualValidator
from focustheme.generation.diversity_validator import DiversitySettings, DiversityValidator
from focustheme.generation.prompt_composer import PromptOptions
from focustheme.generation.session_history import SessionHistory
from focustheme.generation.theme_assembler import ThemeAssembler
from focustheme.logging_config import get_logger, request_context
from focustheme.models.candidate import CandidateTheme
from focustheme.persistence.theme_store import ThemeStore

logger = get_logger(__name__)

RECENT_THEMES_CAPACITY = 10
CONNECTION_TEST_PROMPT = 'ocean'
CONNECTION_TEST_TIMEOUT = 5.0
NO_API_KEY_MESSAGE = 'No API key configured. Please add your OpenAI API key in settings.'


class GenerationState(str, Enum):
    INIT = "init"
    VALIDATING_PROMPT = "validating_prompt"
    CALLING_ENGINE = "calling_engine"
    DIVERSITY_CHECK = "diversity_check"
    CONTEXTUAL_CHECK = "contextual_check"
    ACCEPTED = "accepted"
    RETRY = "retry"
    EXHAUSTED = "exhausted"
    FALLBACK = "fallback"
    FAILED = "failed"


TERMINAL_STATES = frozenset({GenerationState.ACCEPTED, GenerationState.FALLBACK, GenerationState.FAILED})

ALLOWED_TRANSITIONS = {
    GenerationState.INIT: {GenerationState.VALIDATING_PROMPT, GenerationState.FAILED},
    GenerationState.VALIDATING_PROMPT: {GenerationState.CALLING_ENGINE, GenerationState.FAILED},
    GenerationState.CALLING_ENGINE: {
        GenerationState.DIVERSITY_CHECK, GenerationState.RETRY, GenerationState.EXHAUSTED
    },
    GenerationState.DIVERSITY_CHECK: {
        GenerationState.CONTEXTUAL_CHECK, GenerationState.RETRY, GenerationState.EXHAUSTED
    },
    GenerationState.CONTEXTUAL_CHECK: {
        GenerationState.ACCEPTED, GenerationState.RETRY, GenerationState.EXHAUSTED
    },
    GenerationState.RETRY: {GenerationState.CALLING_ENGINE},
    GenerationState.EXHAUSTED: {GenerationState.FALLBACK, GenerationState.FAILED},
}


def escalated_level(attempt: int, requested: DiversityLevel) -> DiversityLevel:
    """Attempt 1 keeps the caller's level, 2 forces high, 3+ forces maximum."""
    if attempt <= 1:
        return requested
    if attempt == 2:
        return 'high'
    return 'maximum'


@dataclass
class _Run:
    """Mutable bookkeeping for one generate_theme call."""
    prompt: str
    state: GenerationState = GenerationState.INIT
    transitions: List[str] = field(default_factory=lambda: [GenerationState.INIT.value])
    attempts: int = 0
    diversity_failures: int = 0
    last_error: Optional[Exception] = None

    def move(self, new_state: GenerationState) -> None:
        allowed = ALLOWED_TRANSITIONS.get(self.state, set())
        if new_state not in allowed:
            raise RuntimeError(f"Illegal transition {self.state.value} -> {new_state.value}")
        logger.debug(f"{self.state.value} -> {new_state.value}")
        self.state = new_state
        self.transitions.append(new_state.value)

    def result(self, success: bool, **kwargs) -> GenerationResult:
        return GenerationResult(
            success=success,
            attempts=self.attempts,
            diversity_failures=self.diversity_failures,
            transitions=list(self.transitions),
            final_state=self.state.value,
            **kwargs
        )


@dataclass(frozen=True)
class ConfigurationCheck:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ConnectionTestResult:
    success: bool
    error: Optional[str] = None


class GenerationOrchestrator:
    """Generates validated themes with bounded retries and a deterministic fallback.

    One instance owns one session: the diversity validator's history and the
    local recent-themes cache both live as long as the orchestrator.
    """

    def __init__(
        self,
        engine: Optional[AIThemeEngine] = None,
        api_key_provider: Optional[Callable[[], Optional[str]]] = None,
        config: Optional[Config] = None,
        diversity_validator: Optional[DiversityValidator] = None,
        contextual_validator: Optional[ContextualValidator] = None,
        assembler: Optional[ThemeAssembler] = None,
        theme_store: Optional[ThemeStore] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.time
    ):
        self.config = config or get_config()
        self.api_key_provider = api_key_provider or APIKeyProvider()
        self._engine = engine
        self._owns_engine = engine is None
        self._engine_key: Optional[str] = None

        self.diversity_validator = diversity_validator or DiversityValidator(
            DiversitySettings.from_config(self.config)
        )
        self.contextual_validator = contextual_validator or ContextualValidator()
        self.assembler = assembler or ThemeAssembler(self.diversity_validator, clock=clock)
        self.theme_store = theme_store
        self.recent_themes = SessionHistory(RECENT_THEMES_CAPACITY)

        self._sleep = sleep
        self._clock = clock
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def generate_theme(
        self,
        prompt: str,
        options: Optional[GenerationOptions] = None
    ) -> GenerationResult:
        options = options or GenerationOptions()
        with request_context(request_id=uuid.uuid4().hex[:8], prompt=prompt):
            return await self._run(prompt, options)

    def validate_configuration(self) -> ConfigurationCheck:
        errors = []
        api_key = self.api_key_provider()
        if not api_key or not api_key.strip():
            errors.append('API key is required')
        if not self.config.ai.endpoint.startswith(('http://', 'https://')):
            errors.append('Valid API endpoint is required')
        if self.config.ai.timeout_seconds <= 0:
            errors.append('Timeout must be greater than 0')
        return ConfigurationCheck(is_valid=not errors, errors=errors)

    def get_configuration(self) -> Dict[str, Any]:
        """Current engine settings; the API key is never included."""
        return {
            'endpoint': self.config.ai.endpoint,
            'model': self.config.ai.model,
            'timeout_seconds': self.config.ai.timeout_seconds,
            'retry_attempts': self.config.ai.retry_attempts,
            'retry_attempts_clamp': self.config.generation.retry_attempts_clamp,
            'diversity_level': self.config.generation.diversity_level,
        }

    def update_api_key(self, api_key: str) -> str:
        """Store a new key and rebuild the default engine; returns the key preview."""
        if not isinstance(self.api_key_provider, APIKeyProvider):
            raise GenerationError('API key provider does not accept updates')
        preview = self.api_key_provider.set_api_key(api_key)
        if self._owns_engine:
            self._engine = None
            self._engine_key = None
        return preview

    async def test_connection(self) -> ConnectionTestResult:
        api_key = self.api_key_provider()
        if not api_key:
            return ConnectionTestResult(success=False, error='No API key configured')

        engine = self._connection_test_engine(api_key)
        if not engine.validate_prompt(CONNECTION_TEST_PROMPT).is_valid:
            return ConnectionTestResult(success=False, error='Prompt validation failed')

        try:
            await engine.generate_theme(CONNECTION_TEST_PROMPT, PromptOptions())
        except Exception as e:
            logger.warning(f"Connection test failed: {e}")
            return ConnectionTestResult(success=False, error=str(e) or 'Connection test failed')
        return ConnectionTestResult(success=True)

    def get_session_themes(self) -> List[ThemeColorSummary]:
        return self.recent_themes.values()

    def clear_session_themes(self) -> None:
        """Start a new session: forget recent themes and diversity history."""
        self.recent_themes.clear()
        self.diversity_validator.clear_session()

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    async def _run(self, prompt: str, options: GenerationOptions) -> GenerationResult:
        run = _Run(prompt=prompt)

        api_key = self.api_key_provider()
        if not api_key:
            run.move(GenerationState.FAILED)
            logger.warning("Generation skipped: no API key configured")
            return run.result(False, error=NO_API_KEY_MESSAGE)

        run.move(GenerationState.VALIDATING_PROMPT)
        validation = validate_prompt(prompt)
        if not validation.is_valid:
            run.move(GenerationState.FAILED)
            error = f"Invalid prompt: {', '.join(validation.errors)}"
            logger.info(error)
            return run.result(False, error=error)

        engine = self._get_engine(api_key)
        sanitized = validation.sanitized_prompt
        max_attempts = self._attempt_limit(options)
        previous = tuple(self.recent_themes.values()) + tuple(options.previous_themes)
        session_token = str(self._now_millis())
        requested_level = options.diversity_level or self.config.generation.diversity_level

        for attempt in range(1, max_attempts + 1):
            run.attempts = attempt
            run.move(GenerationState.CALLING_ENGINE)
            level = escalated_level(attempt, requested_level)
            logger.info(
                f"Generating theme for '{sanitized}' "
                f"(attempt {attempt}/{max_attempts}, diversity: {level})"
            )

            try:
                candidate = await engine.generate_theme(
                    sanitized,
                    PromptOptions(diversity_level=level, previous_themes=previous, session_token=session_token)
                )
                theme = await self._validate_and_accept(run, candidate, sanitized)
            except Exception as e:
                run.last_error = e
                if is_diversity_failure(e):
                    run.diversity_failures += 1
                logger.warning(f"Attempt {attempt} failed: {e}")

                if attempt == max_attempts or not is_retryable(e):
                    run.move(GenerationState.EXHAUSTED)
                    break

                run.move(GenerationState.RETRY)
                session_token = f"{self._now_millis()}-retry-{attempt}"
                delay = get_retry_delay(
                    e,
                    attempt,
                    diversity_delay=self.config.generation.diversity_backoff_seconds,
                    base_delay=self.config.generation.base_backoff_seconds,
                )
                await self._sleep(delay)
                continue

            self._persist(theme)
            logger.info(f"Accepted theme '{theme.name}' after {attempt} attempt(s)")
            return run.result(True, theme=theme)

        return await self._exhausted(run, options)

    async def _validate_and_accept(self, run: _Run, candidate: CandidateTheme, prompt: str) -> AcceptedTheme:
        """Diversity, context and assembly as one critical section over session state."""
        async with self._lock:
            self.assembler.validate_structure(candidate)

            run.move(GenerationState.DIVERSITY_CHECK)
            self._check_diversity(candidate)

            run.move(GenerationState.CONTEXTUAL_CHECK)
            self._check_context(candidate, prompt)

            theme = self.assembler.assemble(candidate, prompt)
            run.move(GenerationState.ACCEPTED)
            self.recent_themes.add(f"{theme.original_prompt}-{theme.created_at}", ThemeColorSummary.from_theme(theme))
            return theme

    def _check_diversity(self, candidate: CandidateTheme) -> None:
        validator = self.diversity_validator

        fallback = validator.validate_against_fallback(candidate)
        if fallback.is_similar:
            raise DiversitySimilarityError(
                f"Diversity validation failed: Theme too similar to fallback "
                f"(distance: {fallback.distance:.2f}). "
                f"Try a more specific or creative prompt. Use different color keywords.",
                distance=fallback.distance,
            )

        session = validator.validate_session_uniqueness(candidate)
        if not session.is_unique:
            raise DiversitySimilarityError(
                f"Diversity validation failed: Theme too similar to recent themes "
                f"(similarity: {session.similarity_score:.2f}). {' '.join(session.recommendations)}",
                similarity=session.similarity_score,
                conflicting_ids=session.conflicting_ids,
                recommendations=session.recommendations,
            )

    def _check_context(self, candidate: CandidateTheme, prompt: str) -> None:
        result = self.contextual_validator.validate(prompt, candidate)
        if not result.is_appropriate:
            raise ContextualMismatchError(
                f"Theme not contextually appropriate: {'. '.join(result.issues)} "
                f"{' '.join(result.recommendations)}",
                color_score=result.color_score,
                animation_score=result.animation_score,
                issues=result.issues,
                recommendations=result.recommendations,
            )
        logger.debug(f"Contextual score {result.overall_score:.2f} ({result.context_name or 'no context'})")

    async def _exhausted(self, run: _Run, options: GenerationOptions) -> GenerationResult:
        message = str(run.last_error) if run.last_error else 'Theme generation failed after all retry attempts'
        if run.diversity_failures:
            message += f" ({run.diversity_failures} diversity validation failures)"

        fallback_on_error = options.fallback_on_error
        if fallback_on_error is None:
            fallback_on_error = self.config.generation.fallback_on_error

        if not fallback_on_error:
            run.move(GenerationState.FAILED)
            logger.error(f"Theme generation failed: {message}")
            return run.result(False, error=message)

        try:
            async with self._lock:
                theme = self.assembler.build_fallback(run.prompt)
        except GenerationError as e:
            run.move(GenerationState.FAILED)
            logger.error(f"Fallback theme failed: {e}")
            return run.result(False, error=f"Both AI generation and fallback failed: {message}")

        run.move(GenerationState.FALLBACK)
        logger.warning(f"Using fallback theme: {message}")
        return run.result(
            True,
            theme=theme,
            used_fallback=True,
            error=f"AI generation failed: {message}. Using fallback theme.",
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _attempt_limit(self, options: GenerationOptions) -> int:
        requested = options.retry_attempts if options.retry_attempts is not None else self.config.ai.retry_attempts
        return max(1, min(requested, self.config.generation.retry_attempts_clamp))

    def _get_engine(self, api_key: str) -> AIThemeEngine:
        if not self._owns_engine:
            return self._engine
        if self._engine is None or self._engine_key != api_key:
            self._engine = OpenAIThemeEngine(api_key, config=self.config.ai)
            self._engine_key = api_key
        return self._engine

    def _connection_test_engine(self, api_key: str) -> AIThemeEngine:
        if not self._owns_engine:
            return self._engine
        test_config = dataclasses.replace(self.config.ai, timeout_seconds=CONNECTION_TEST_TIMEOUT)
        return OpenAIThemeEngine(api_key, config=test_config)

    def _persist(self, theme: AcceptedTheme) -> None:
        if self.theme_store is None:
            return
        try:
            self.theme_store.save(theme)
        except PersistenceError as e:
            logger.error(f"Accepted theme {theme.id} could not be stored: {e}")

    def _now_millis(self) -> int:
        return int(self._clock() * 1000)
