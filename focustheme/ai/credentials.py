"""
API key lookup and validation.

Keys come from an explicitly set value first, then the OPENAI_API_KEY
environment variable (a .env file is honoured via python-dotenv).
"""

import os
import re
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from focustheme.exceptions import InvalidConfigError
from focustheme.logging_config import get_logger

logger = get_logger(__name__)

load_dotenv()

API_KEY_ENV_VAR = 'OPENAI_API_KEY'
KEY_PREFIX = 'sk-'
MIN_KEY_LENGTH = 20
KEY_PATTERN = re.compile(r'^sk-[A-Za-z0-9\-_]+$')
PREVIEW_LENGTH = 8


@dataclass(frozen=True)
class APIKeyValidation:
    is_valid: bool
    error: Optional[str] = None
    key_preview: Optional[str] = None


def validate_api_key_format(api_key: Optional[str]) -> APIKeyValidation:
    if not api_key or not api_key.strip():
        return APIKeyValidation(is_valid=False, error='API key cannot be empty')

    key = api_key.strip()
    if not key.startswith(KEY_PREFIX):
        return APIKeyValidation(is_valid=False, error=f'OpenAI API keys must start with "{KEY_PREFIX}"')
    if len(key) < MIN_KEY_LENGTH:
        return APIKeyValidation(is_valid=False, error='API key appears to be too short')
    if not KEY_PATTERN.match(key):
        return APIKeyValidation(is_valid=False, error='API key contains invalid characters')

    return APIKeyValidation(is_valid=True, key_preview=key_preview(key))


def key_preview(api_key: Optional[str]) -> Optional[str]:
    if api_key and len(api_key) >= PREVIEW_LENGTH:
        return api_key[:PREVIEW_LENGTH] + '...'
    return None


class APIKeyProvider:
    """Resolves the API key for the engine; callable so it can be injected as a plain function."""

    def __init__(self, api_key: Optional[str] = None, env_var: str = API_KEY_ENV_VAR):
        self._api_key = api_key.strip() if api_key else None
        self.env_var = env_var

    def __call__(self) -> Optional[str]:
        return self.get_api_key()

    def get_api_key(self) -> Optional[str]:
        if self._api_key:
            return self._api_key
        value = os.getenv(self.env_var)
        return value.strip() if value and value.strip() else None

    def set_api_key(self, api_key: str) -> str:
        """Validate and store a key; returns its preview."""
        validation = validate_api_key_format(api_key)
        if not validation.is_valid:
            raise InvalidConfigError(validation.error, context={'field': 'api_key'})
        self._api_key = api_key.strip()
        logger.info(f"API key updated ({validation.key_preview})")
        return validation.key_preview

    def clear(self) -> None:
        self._api_key = None

    def has_api_key(self) -> bool:
        return self.get_api_key() is not None

    def preview(self) -> Optional[str]:
        return key_preview(self.get_api_key())


def get_api_key() -> Optional[str]:
    """Key from the environment, or None."""
    return APIKeyProvider().get_api_key()
