"""Bounded context: Spotify

Mirroring a tier into a playlist and remembering where it went.
"""

import pytest

from src.domain import funnel
from src.domain.model import Tier
from src.usecases.sync_playlist import EmptyTierError, SyncPlaylistUseCase, default_sync_tier
from tests.builders import fill
from tests.fakes import InMemoryCatalog


class TestUserSyncsAPlaylist:

    def test_highest_populated_tier_is_synced_by_default(self, theme):
        fill(theme, Tier.CANDIDATES, 3)
        assert default_sync_tier(theme) == Tier.CANDIDATES

        fill(theme, Tier.SEMIFINALISTS, 1, start=4)
        assert default_sync_tier(theme) == Tier.SEMIFINALISTS

        fill(theme, Tier.FINALISTS, 1, start=5)
        assert default_sync_tier(theme) == Tier.FINALISTS

    def test_sync_records_the_playlist_on_the_theme(self, themes, theme, playlist):
        fill(theme, Tier.FINALISTS, 2)
        themes.save(theme)

        result = SyncPlaylistUseCase(playlist, themes).execute("theme-1")

        assert playlist.titles == ["ML: Songs about the weather (finalists)"]
        record = themes.get("theme-1").spotify_playlist
        assert record.playlist_id == result.playlist_id
        assert record.synced_tier == Tier.FINALISTS
        assert record.last_sync_at > 0

    def test_resync_reuses_the_playlist(self, themes, theme, playlist):
        fill(theme, Tier.FINALISTS, 2)
        themes.save(theme)
        use_case = SyncPlaylistUseCase(playlist, themes)
        first = use_case.execute("theme-1")

        updated = funnel.toggle_muted(themes.get("theme-1"), "s2")
        themes.save(updated)
        second = use_case.execute("theme-1")

        assert second.playlist_id == first.playlist_id
        assert playlist.playlists[first.playlist_id] == ["s1"]
        assert second.removed == 1

    def test_switching_tiers_starts_a_new_playlist(self, themes, theme, playlist):
        fill(theme, Tier.SEMIFINALISTS, 2)
        fill(theme, Tier.FINALISTS, 1, start=3)
        themes.save(theme)
        use_case = SyncPlaylistUseCase(playlist, themes)
        finals = use_case.execute("theme-1", Tier.FINALISTS)

        semis = use_case.execute("theme-1", Tier.SEMIFINALISTS)

        assert semis.playlist_id != finals.playlist_id
        assert playlist.playlists[finals.playlist_id] == ["s3"]
        assert playlist.playlists[semis.playlist_id] == ["s1", "s2"]
        assert playlist.titles == [
            "ML: Songs about the weather (finalists)",
            "ML: Songs about the weather (semifinalists)",
        ]
        record = themes.get("theme-1").spotify_playlist
        assert (record.playlist_id, record.synced_tier) == (semis.playlist_id, Tier.SEMIFINALISTS)

    def test_muted_and_eliminated_songs_are_left_out(self, themes, theme, playlist):
        fill(theme, Tier.SEMIFINALISTS, 3)
        theme = funnel.toggle_muted(theme, "s1")
        theme = funnel.toggle_eliminated(theme, "s2")
        themes.save(theme)

        result = SyncPlaylistUseCase(playlist, themes).execute("theme-1", Tier.SEMIFINALISTS)

        assert playlist.playlists[result.playlist_id] == ["s3"]

    def test_empty_tier_is_refused(self, themes, stored_theme, playlist):
        with pytest.raises(EmptyTierError):
            SyncPlaylistUseCase(playlist, themes).execute("theme-1", Tier.FINALISTS)

    def test_catalog_fills_in_missing_track_ids(self, themes, theme, playlist):
        fill(theme, Tier.FINALISTS, 2)
        themes.save(theme)
        catalog = InMemoryCatalog({("song 1", "artist 1"): "abc"})

        result = SyncPlaylistUseCase(playlist, themes, catalog).execute("theme-1")

        assert playlist.playlists[result.playlist_id] == ["spotify:track:abc"]
        saved = themes.get("theme-1").finalists[0]
        assert (saved.spotify_track_id, saved.spotify_uri) == ("abc", "spotify:track:abc")

    def test_nothing_found_on_spotify(self, themes, theme, playlist):
        fill(theme, Tier.FINALISTS, 1)
        themes.save(theme)

        with pytest.raises(EmptyTierError):
            SyncPlaylistUseCase(playlist, themes, InMemoryCatalog()).execute("theme-1")

        assert playlist.titles == []
