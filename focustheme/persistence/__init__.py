from .theme_store import ThemeStore, DiskThemeStore

__all__ = ["ThemeStore", "DiskThemeStore"]
