"""Dry-run playlist adapter that never writes to Spotify."""

from typing import Optional

from src.domain.model import Song
from src.domain.ports import PlaylistSyncPort, PlaylistSyncResult


class DryRunPlaylistAdapter(PlaylistSyncPort):
    """Records sync requests instead of sending them, for simulation runs."""

    def __init__(self):
        self.syncs: list[tuple[str, list[str]]] = []
        self._playlists: dict[str, list[str]] = {}

    def sync(
        self,
        title: str,
        description: str,
        songs: list[Song],
        existing_playlist_id: Optional[str] = None,
    ) -> PlaylistSyncResult:
        uris = [s.spotify_uri or s.id for s in songs]
        playlist_id = existing_playlist_id or f"dry-run-{len(self._playlists) + 1}"
        previous = self._playlists.get(playlist_id, [])
        self._playlists[playlist_id] = uris
        self.syncs.append((playlist_id, uris))
        return PlaylistSyncResult(
            playlist_id=playlist_id,
            playlist_url=f"https://open.spotify.com/playlist/{playlist_id}",
            added=len([u for u in uris if u not in previous]),
            removed=len([u for u in previous if u not in uris]),
        )
