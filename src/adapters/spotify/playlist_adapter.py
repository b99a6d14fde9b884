"""Spotify adapter that mirrors a list of songs into a playlist."""

import logging
from typing import Optional

import spotipy

from src.domain.model import Song
from src.domain.ports import PlaylistSyncPort, PlaylistSyncResult

logger = logging.getLogger("music_league.spotify.playlist")

BATCH_SIZE = 100


def _playlist_url(playlist_id: str) -> str:
    return f"https://open.spotify.com/playlist/{playlist_id}"


class SpotifyPlaylistAdapter(PlaylistSyncPort):

    def __init__(self, sp: spotipy.Spotify):
        self.sp = sp

    def sync(
        self,
        title: str,
        description: str,
        songs: list[Song],
        existing_playlist_id: Optional[str] = None,
    ) -> PlaylistSyncResult:
        desired = [s.spotify_uri for s in songs if s.spotify_uri]
        if existing_playlist_id:
            return self._sync_existing(existing_playlist_id, desired)

        user_id = self.sp.current_user()["id"]
        playlist = self.sp.user_playlist_create(
            user=user_id,
            name=title,
            public=False,
            description=description,
        )
        playlist_id = playlist["id"]
        self._add(playlist_id, desired)
        url = playlist.get("external_urls", {}).get("spotify") or _playlist_url(playlist_id)
        logger.info("Created playlist %s with %s tracks", playlist_id, len(desired))
        return PlaylistSyncResult(playlist_id=playlist_id, playlist_url=url, added=len(desired), removed=0)

    def _sync_existing(self, playlist_id: str, desired: list[str]) -> PlaylistSyncResult:
        current = self._playlist_uris(playlist_id)
        to_remove = [uri for uri in current if uri not in desired]
        to_add = [uri for uri in desired if uri not in current]

        for i in range(0, len(to_remove), BATCH_SIZE):
            self.sp.playlist_remove_all_occurrences_of_items(playlist_id, to_remove[i : i + BATCH_SIZE])
        self._add(playlist_id, to_add)

        logger.info("Synced playlist %s: added=%s removed=%s", playlist_id, len(to_add), len(to_remove))
        return PlaylistSyncResult(
            playlist_id=playlist_id,
            playlist_url=_playlist_url(playlist_id),
            added=len(to_add),
            removed=len(to_remove),
        )

    def _add(self, playlist_id: str, uris: list[str]) -> None:
        for i in range(0, len(uris), BATCH_SIZE):
            self.sp.playlist_add_items(playlist_id, uris[i : i + BATCH_SIZE])

    def _playlist_uris(self, playlist_id: str) -> list[str]:
        uris: list[str] = []
        offset = 0
        while True:
            results = self.sp.playlist_items(playlist_id, limit=100, offset=offset)
            items = results.get("items", [])
            if not items:
                break
            for item in items:
                uri = (item.get("track") or {}).get("uri")
                if uri and uri not in uris:
                    uris.append(uri)
            offset += 100
            if offset >= results.get("total", 0):
                break
        return uris
