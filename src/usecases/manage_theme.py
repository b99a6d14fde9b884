"""Use case: edit theme metadata outside the funnel."""

import copy
from typing import Optional

from src.domain.model import Theme, ThemeStatus, now_ms
from src.domain.ports import ThemeRepositoryPort
from src.usecases._lookup import require_theme


class ManageThemeUseCase:

    def __init__(self, themes: ThemeRepositoryPort):
        self.themes = themes

    def rename(self, theme_id: str, title: str) -> Theme:
        return self._update(theme_id, title=title.strip())

    def set_deadline(self, theme_id: str, deadline: Optional[int]) -> Theme:
        return self._update(theme_id, deadline=deadline)

    def set_interpretation(self, theme_id: str, interpretation: str, strategy: Optional[str] = None) -> Theme:
        changes = {"interpretation": interpretation}
        if strategy is not None:
            changes["strategy"] = strategy
        return self._update(theme_id, **changes)

    def archive(self, theme_id: str) -> Theme:
        return self._update(theme_id, status=ThemeStatus.ARCHIVED)

    def mark_submitted(self, theme_id: str) -> Theme:
        return self._update(theme_id, status=ThemeStatus.SUBMITTED)

    def reactivate(self, theme_id: str) -> Theme:
        return self._update(theme_id, status=ThemeStatus.ACTIVE)

    def clear_conversation(self, theme_id: str) -> Theme:
        return self._update(theme_id, conversation=[])

    def delete(self, theme_id: str) -> None:
        require_theme(self.themes, theme_id)
        self.themes.delete(theme_id)

    def _update(self, theme_id: str, **changes) -> Theme:
        theme = copy.deepcopy(require_theme(self.themes, theme_id))
        for name, value in changes.items():
            setattr(theme, name, value)
        theme.updated_at = max(now_ms(), theme.updated_at)
        self.themes.save(theme)
        return theme
