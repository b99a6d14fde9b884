"""Shared theme lookup for use cases."""

from src.domain.errors import NotFound
from src.domain.model import Theme
from src.domain.ports import ThemeRepositoryPort


def require_theme(themes: ThemeRepositoryPort, theme_id: str) -> Theme:
    theme = themes.get(theme_id)
    if theme is None:
        raise NotFound(f"Theme {theme_id} does not exist")
    return theme
