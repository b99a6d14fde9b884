"""Spotify adapter for resolving songs to catalog tracks."""

import logging
from typing import Optional

import spotipy

from src.domain.ports import CatalogMatch, CatalogPort

logger = logging.getLogger("music_league.spotify.catalog")


class SpotifyCatalogAdapter(CatalogPort):

    def __init__(self, sp: spotipy.Spotify):
        self.sp = sp

    def find_track(self, title: str, artist: str) -> Optional[CatalogMatch]:
        try:
            results = self.sp.search(q=f"track:{title} artist:{artist}", type="track", limit=1)
        except spotipy.SpotifyException:
            logger.exception('Spotify search failed for "%s" by %s', title, artist)
            raise
        items = results.get("tracks", {}).get("items", [])
        if not items:
            return None
        track = items[0]
        return CatalogMatch(
            track_id=track["id"],
            uri=track["uri"],
            url=track.get("external_urls", {}).get("spotify", f"https://open.spotify.com/track/{track['id']}"),
        )
