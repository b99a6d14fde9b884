"""Use case: the "Songs I Like" collection shared across themes.

Songs are saved once per title and artist. Saving the same song again merges
its tags and notes into the existing entry instead of duplicating it.
"""

import logging
from typing import Iterable, Optional

from src.domain import funnel
from src.domain.errors import NotFound
from src.domain.model import SavedSong, Theme, new_saved_song_id, now_ms
from src.domain.ports import SavedSongRepositoryPort, ThemeRepositoryPort
from src.usecases._lookup import require_theme

logger = logging.getLogger("music_league.usecases.collection")


class ManageCollectionUseCase:

    def __init__(self, collection: SavedSongRepositoryPort, themes: ThemeRepositoryPort):
        self.collection = collection
        self.themes = themes

    def list_songs(self, tag: Optional[str] = None) -> list[SavedSong]:
        songs = self.collection.list_all()
        if tag:
            songs = [s for s in songs if s.has_tag(tag)]
        return sorted(songs, key=lambda s: s.saved_at, reverse=True)

    def save_song(
        self,
        title: str,
        artist: str,
        tags: Iterable[str] = (),
        notes: Optional[str] = None,
        source_theme_id: Optional[str] = None,
        **details,
    ) -> SavedSong:
        if not title.strip() or not artist.strip():
            raise ValueError("A saved song needs a title and an artist")

        existing = next((s for s in self.collection.list_all() if s.matches(title, artist)), None)
        if existing is not None:
            existing.tags = _merge_tags(existing.tags, tags)
            if notes:
                existing.notes = notes
            self.collection.save(existing)
            logger.info('"%s" by %s is already saved as %s', title, artist, existing.id)
            return existing

        song = SavedSong(
            id=new_saved_song_id(),
            title=title.strip(),
            artist=artist.strip(),
            tags=_merge_tags([], tags),
            notes=notes,
            source_theme_id=source_theme_id,
            saved_at=now_ms(),
            **details,
        )
        self.collection.save(song)
        logger.info('Saved "%s" by %s as %s', song.title, song.artist, song.id)
        return song

    def save_from_theme(
        self,
        theme_id: str,
        song_id: str,
        tags: Iterable[str] = (),
        notes: Optional[str] = None,
    ) -> SavedSong:
        theme = require_theme(self.themes, theme_id)
        song = funnel.find_song(theme, song_id)
        if song is None:
            raise NotFound(f"Song {song_id} is not in theme {theme_id}")
        return self.save_song(
            song.title,
            song.artist,
            tags=tags,
            notes=notes or song.notes,
            source_theme_id=theme_id,
            album=song.album,
            year=song.year,
            genre=song.genre,
            spotify_track_id=song.spotify_track_id,
            spotify_uri=song.spotify_uri,
            youtube_video_id=song.youtube_video_id,
        )

    def remove(self, saved_id: str) -> None:
        self._require(saved_id)
        self.collection.delete(saved_id)
        logger.info("Removed %s from the collection", saved_id)

    def tag(self, saved_id: str, add: Iterable[str] = (), remove: Iterable[str] = ()) -> SavedSong:
        song = self._require(saved_id)
        dropped = {t.strip().lower() for t in remove}
        song.tags = [t for t in _merge_tags(song.tags, add) if t.lower() not in dropped]
        self.collection.save(song)
        return song

    def add_to_theme(self, saved_id: str, theme_id: str) -> Theme:
        """Copy a saved song into a theme's candidates."""
        saved = self._require(saved_id)
        theme = funnel.add_song_from_collection(require_theme(self.themes, theme_id), saved.to_song())
        self.themes.save(theme)
        return theme

    def _require(self, saved_id: str) -> SavedSong:
        song = self.collection.get(saved_id)
        if song is None:
            raise NotFound(f"Saved song {saved_id} does not exist")
        return song


def _merge_tags(current: Iterable[str], extra: Iterable[str]) -> list[str]:
    merged: list[str] = []
    for tag in [*current, *extra]:
        tag = tag.strip()
        if tag and tag.lower() not in (t.lower() for t in merged):
            merged.append(tag)
    return merged
