"""Use case: start a new theme for a Music League round."""

import logging
from typing import Optional

from src.domain.model import Theme
from src.domain.ports import ThemeRepositoryPort

logger = logging.getLogger("music_league.usecases.create_theme")


class CreateThemeUseCase:

    def __init__(self, themes: ThemeRepositoryPort):
        self.themes = themes

    def execute(self, raw_theme: str, deadline: Optional[int] = None) -> Theme:
        if not raw_theme.strip():
            raise ValueError("Theme prompt cannot be empty")
        theme = Theme.new(raw_theme.strip())
        theme.deadline = deadline
        self.themes.save(theme)
        logger.info("Created theme %s (%s)", theme.id, theme.title)
        return theme
