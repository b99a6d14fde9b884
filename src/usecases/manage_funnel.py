"""Use case: manual funnel moves from the user (buttons, swipes, drag-to-rank).

Each call loads the theme, runs one funnel operation and saves the result.
``FunnelError`` subclasses propagate untouched so the caller can show them.
"""

from typing import Callable, Optional

from src.domain import funnel
from src.domain.hall_pass import hall_passes_available
from src.domain.model import HallPasses, Phase, Song, Theme, Tier
from src.domain.phase import DEFAULT_THRESHOLDS, PhaseThresholds, compute_phase
from src.domain.ports import ThemeRepositoryPort
from src.usecases._lookup import require_theme


class ManageFunnelUseCase:

    def __init__(self, themes: ThemeRepositoryPort, thresholds: PhaseThresholds = DEFAULT_THRESHOLDS):
        self.themes = themes
        self.thresholds = thresholds

    # Reads

    def songs(self, theme_id: str, tier: Tier) -> list[Song]:
        return funnel.ranked_songs(require_theme(self.themes, theme_id), tier)

    def phase(self, theme_id: str) -> Phase:
        return compute_phase(require_theme(self.themes, theme_id), self.thresholds)

    def hall_passes(self, theme_id: str) -> HallPasses:
        return hall_passes_available(require_theme(self.themes, theme_id))

    def total_songs(self, theme_id: str) -> int:
        return funnel.total_song_count(require_theme(self.themes, theme_id))

    # Mutations

    def promote_song(self, theme_id: str, song_id: str, to_tier: Tier, reason: Optional[str] = None) -> Theme:
        return self._apply(theme_id, lambda t: funnel.promote_song(t, song_id, to_tier, reason))

    def demote_song(self, theme_id: str, song_id: str, to_tier: Tier, reason: Optional[str] = None) -> Theme:
        return self._apply(theme_id, lambda t: funnel.demote_song(t, song_id, to_tier, reason))

    def remove_song_from_tier(
        self,
        theme_id: str,
        song_id: str,
        tier: Tier,
        rejection_reason: Optional[str] = None,
    ) -> Theme:
        return self._apply(
            theme_id,
            lambda t: funnel.remove_song_from_tier(t, song_id, tier, rejection_reason),
        )

    def toggle_muted(self, theme_id: str, song_id: str) -> Theme:
        return self._apply(theme_id, lambda t: funnel.toggle_muted(t, song_id))

    def toggle_eliminated(self, theme_id: str, song_id: str) -> Theme:
        return self._apply(theme_id, lambda t: funnel.toggle_eliminated(t, song_id))

    def rate_song(self, theme_id: str, song_id: str, theme_fit: int, general: int) -> Theme:
        return self._apply(theme_id, lambda t: funnel.rate_song(t, song_id, theme_fit, general))

    def reorder_songs_in_tier(self, theme_id: str, tier: Tier, ordered_ids: list[str]) -> Theme:
        return self._apply(theme_id, lambda t: funnel.reorder_songs_in_tier(t, tier, ordered_ids))

    def add_song_from_collection(self, theme_id: str, song: Song) -> Theme:
        return self._apply(theme_id, lambda t: funnel.add_song_from_collection(t, song))

    def use_hall_pass(self, theme_id: str, song: Song, to_tier: Tier, reason: Optional[str] = None) -> Theme:
        return self._apply(theme_id, lambda t: funnel.use_hall_pass(t, song, to_tier, reason))

    def _apply(self, theme_id: str, operation: Callable[[Theme], Theme]) -> Theme:
        updated = operation(require_theme(self.themes, theme_id))
        self.themes.save(updated)
        return updated
