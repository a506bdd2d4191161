"""
Durable storage for accepted themes, backed by diskcache.

Themes are stored as JSON strings keyed by theme id.
"""

import json
from typing import List, Optional, Protocol

import diskcache

from focustheme.config import get_storage_config
from focustheme.domain.models import AcceptedTheme
from focustheme.exceptions import LoadError, SaveError, ThemeNotFoundError
from focustheme.logging_config import get_logger

logger = get_logger(__name__)

KEY_PREFIX = 'theme:'
MAX_STORED_THEMES = 50


class ThemeStore(Protocol):
    """What the generation pipeline needs from a durable store."""

    def save(self, theme: AcceptedTheme) -> None:
        ...

    def load_all(self) -> List[AcceptedTheme]:
        ...

    def delete(self, theme_id: str) -> None:
        ...


class DiskThemeStore:
    """ThemeStore implementation on a diskcache directory."""

    def __init__(self, directory: Optional[str] = None, cache: Optional[diskcache.Cache] = None):
        self.directory = directory or get_storage_config().cache_dir
        self.cache = cache if cache is not None else diskcache.Cache(self.directory)

    def save(self, theme: AcceptedTheme) -> None:
        try:
            self.cache.set(_key(theme.id), json.dumps(theme.to_dict()))
        except (OSError, TypeError, ValueError) as e:
            raise SaveError(f"Failed to save theme {theme.id}", cause=e, context={'theme_id': theme.id})
        logger.info(f"Saved theme {theme.id} ('{theme.name}')")

    def get(self, theme_id: str) -> Optional[AcceptedTheme]:
        raw = self.cache.get(_key(theme_id))
        if raw is None:
            return None
        return _decode(theme_id, raw)

    def load_all(self) -> List[AcceptedTheme]:
        """All stored themes, newest first."""
        themes = []
        for key in list(self.cache.iterkeys()):
            if not isinstance(key, str) or not key.startswith(KEY_PREFIX):
                continue
            raw = self.cache.get(key)
            if raw is None:
                continue
            themes.append(_decode(key[len(KEY_PREFIX):], raw))
        themes.sort(key=lambda theme: theme.created_at, reverse=True)
        return themes

    def update(self, theme: AcceptedTheme) -> None:
        if not self.exists(theme.id):
            raise ThemeNotFoundError(f"Theme not found: {theme.id}", context={'theme_id': theme.id})
        self.save(theme)

    def delete(self, theme_id: str) -> None:
        if not self.cache.delete(_key(theme_id)):
            raise ThemeNotFoundError(f"Theme not found: {theme_id}", context={'theme_id': theme_id})
        logger.info(f"Deleted theme {theme_id}")

    def clear(self) -> int:
        """Remove every stored theme; returns how many were removed."""
        removed = 0
        for key in list(self.cache.iterkeys()):
            if isinstance(key, str) and key.startswith(KEY_PREFIX) and self.cache.delete(key):
                removed += 1
        logger.info(f"Cleared {removed} stored theme(s)")
        return removed

    def exists(self, theme_id: str) -> bool:
        return _key(theme_id) in self.cache

    def cleanup(self, max_themes: int = MAX_STORED_THEMES) -> int:
        """Keep only the newest `max_themes` themes; returns how many were removed."""
        removed = 0
        for theme in self.load_all()[max_themes:]:
            if self.cache.delete(_key(theme.id)):
                removed += 1
        if removed:
            logger.info(f"Removed {removed} old theme(s), keeping {max_themes}")
        return removed

    def count(self) -> int:
        return sum(1 for key in self.cache.iterkeys() if isinstance(key, str) and key.startswith(KEY_PREFIX))

    def close(self) -> None:
        self.cache.close()

    def __enter__(self) -> 'DiskThemeStore':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def _key(theme_id: str) -> str:
    return f"{KEY_PREFIX}{theme_id}"


def _decode(theme_id: str, raw: str) -> AcceptedTheme:
    try:
        return AcceptedTheme.from_dict(json.loads(raw))
    except (KeyError, TypeError, ValueError) as e:
        raise LoadError(f"Stored theme {theme_id} is corrupt", cause=e, context={'theme_id': theme_id})
