"""Spotify OAuth for the playlist sync, built from the loaded settings."""

import logging
import os

import spotipy
from spotipy.oauth2 import SpotifyOAuth

from src.config import Settings

logger = logging.getLogger("music_league.spotify.auth")

PLAYLIST_SCOPES = ("playlist-modify-public", "playlist-modify-private", "playlist-read-private")
TOKEN_CACHE_FILE = ".spotify_token_cache.json"


def token_cache_path(themes_file: str) -> str:
    """The token lives beside the themes file, one login per library."""
    return os.path.join(os.path.dirname(os.path.abspath(themes_file)), TOKEN_CACHE_FILE)


def spotify_client(settings: Settings) -> spotipy.Spotify:
    if not settings.spotify_enabled:
        raise ValueError("Spotify is not configured (spotify_client_id, spotify_client_secret)")
    auth_manager = SpotifyOAuth(
        client_id=settings.spotify_client_id,
        client_secret=settings.spotify_client_secret,
        redirect_uri=settings.spotify_redirect_uri,
        scope=" ".join(PLAYLIST_SCOPES),
        cache_path=token_cache_path(settings.themes_file),
    )
    logger.debug("Spotify OAuth prepared (redirect=%s)", settings.spotify_redirect_uri)
    return spotipy.Spotify(auth_manager=auth_manager)
