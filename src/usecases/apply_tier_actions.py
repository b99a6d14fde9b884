"""Use case: apply a batch of strategist tier actions to a theme."""

from src.domain.model import TierAction, TierActionReport
from src.domain.ports import ThemeRepositoryPort
from src.domain.tier_actions import apply_tier_actions
from src.usecases._lookup import require_theme


class ApplyTierActionsUseCase:

    def __init__(self, themes: ThemeRepositoryPort):
        self.themes = themes

    def execute(self, theme_id: str, actions: list[TierAction]) -> TierActionReport:
        theme = require_theme(self.themes, theme_id)
        updated, report = apply_tier_actions(theme, actions)
        if report.applied:
            self.themes.save(updated)
        return report
