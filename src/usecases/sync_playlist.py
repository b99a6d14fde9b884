"""Use case: mirror one funnel tier into a Spotify playlist."""

import copy
import logging
from typing import Optional

from src.domain import funnel
from src.domain.model import PlaylistSyncRecord, Theme, Tier, now_ms
from src.domain.ports import CatalogPort, PlaylistSyncPort, PlaylistSyncResult, ThemeRepositoryPort
from src.usecases._lookup import require_theme

logger = logging.getLogger("music_league.usecases.sync_playlist")


class EmptyTierError(Exception):
    pass


def default_sync_tier(theme: Theme) -> Tier:
    if theme.finalists:
        return Tier.FINALISTS
    if theme.semifinalists:
        return Tier.SEMIFINALISTS
    return Tier.CANDIDATES


class SyncPlaylistUseCase:

    def __init__(
        self,
        playlist: PlaylistSyncPort,
        themes: ThemeRepositoryPort,
        catalog: Optional[CatalogPort] = None,
    ):
        self.playlist = playlist
        self.themes = themes
        self.catalog = catalog

    def execute(self, theme_id: str, tier: Optional[Tier] = None) -> PlaylistSyncResult:
        theme = require_theme(self.themes, theme_id)
        tier = tier or default_sync_tier(theme)
        if not funnel.playable_songs(theme, tier):
            raise EmptyTierError(f"No songs in {tier.value} to sync")

        theme = self._resolve_track_ids(theme, tier)
        songs = funnel.playable_songs(theme, tier)
        if self.catalog is not None:
            songs = [s for s in songs if s.spotify_uri]
        if not songs:
            raise EmptyTierError(f"None of the songs in {tier.value} were found on Spotify")

        existing_id = None
        previous = theme.spotify_playlist
        if previous is not None and previous.synced_tier == tier:
            existing_id = previous.playlist_id
        elif previous is not None:
            logger.info(
                "Theme %s switches playlist sync from %s to %s; creating a new playlist",
                theme.id,
                previous.synced_tier.value,
                tier.value,
            )
        result = self.playlist.sync(
            title=f"ML: {theme.title} ({tier.value})",
            description=f'Music League {tier.value} for "{theme.title}". Synced via Music League Strategist.',
            songs=songs,
            existing_playlist_id=existing_id,
        )

        theme = copy.deepcopy(theme)
        stamp = max(now_ms(), theme.updated_at)
        theme.spotify_playlist = PlaylistSyncRecord(
            playlist_id=result.playlist_id,
            playlist_url=result.playlist_url,
            synced_tier=tier,
            last_sync_at=stamp,
        )
        theme.updated_at = stamp
        self.themes.save(theme)
        logger.info(
            "Synced %s of theme %s to playlist %s (added=%s, removed=%s)",
            tier.value,
            theme.id,
            result.playlist_id,
            result.added,
            result.removed,
        )
        return result

    def _resolve_track_ids(self, theme: Theme, tier: Tier) -> Theme:
        if self.catalog is None:
            return theme
        for song in funnel.playable_songs(theme, tier):
            if song.spotify_uri:
                continue
            match = self.catalog.find_track(song.title, song.artist)
            if match is None:
                logger.warning('No Spotify match for "%s" by %s', song.title, song.artist)
                continue
            theme = funnel.set_streaming_ids(theme, song.id, match.track_id, match.uri)
        return theme
