"""Bounded context: Persistence

Themes survive restarts in a single JSON document.
"""

import json

from src.adapters.themes.json_theme_repository import JsonThemeRepository
from src.domain import funnel
from src.domain.model import PlaylistSyncRecord, Song, Theme, ThemeStatus, Tier
from tests.builders import fill


class TestThemeStorage:

    def test_missing_file_means_no_themes(self, tmp_path):
        repo = JsonThemeRepository(str(tmp_path / "themes.json"))

        assert repo.list_all() == []
        assert repo.get("theme-1") is None
        assert not repo.exists("theme-1")

    def test_full_theme_round_trips(self, tmp_path, theme):
        fill(theme, Tier.CANDIDATES, 2)
        fill(theme, Tier.FINALISTS, 2, start=3)
        theme = funnel.promote_song(theme, "s1", Tier.SEMIFINALISTS, "Great hook")
        theme = funnel.rate_song(theme, "s1", theme_fit=4, general=5)
        theme = funnel.use_hall_pass(theme, Song(id="h1", title="Rain", artist="The Beatles"), Tier.SEMIFINALISTS)
        theme = funnel.reorder_songs_in_tier(theme, Tier.FINALISTS, ["s4", "s3"])
        theme = funnel.promote_song(theme, "s4", Tier.PICK)
        theme = funnel.remove_song_from_tier(theme, "s2", Tier.CANDIDATES, rejection_reason="Meh")
        theme.status = ThemeStatus.SUBMITTED
        theme.spotify_playlist = PlaylistSyncRecord(
            playlist_id="pl-1", playlist_url="https://open.spotify.com/playlist/pl-1", synced_tier=Tier.FINALISTS
        )
        repo = JsonThemeRepository(str(tmp_path / "themes.json"))

        repo.save(theme)

        assert repo.get("theme-1") == theme

    def test_file_format_uses_plain_values(self, tmp_path, theme):
        fill(theme, Tier.CANDIDATES, 1)
        path = tmp_path / "themes.json"

        JsonThemeRepository(str(path)).save(theme)

        payload = json.loads(path.read_text(encoding="utf-8"))
        assert payload["version"] == 1
        stored = payload["themes"][0]
        assert stored["status"] == "active"
        assert stored["candidates"][0]["current_tier"] == "candidates"
        assert stored["hall_passes"] == {"semifinals": True, "finals": True}

    def test_newest_theme_is_listed_first(self, tmp_path):
        repo = JsonThemeRepository(str(tmp_path / "themes.json"))

        repo.save(Theme.new("First round", theme_id="a"))
        repo.save(Theme.new("Second round", theme_id="b"))

        assert [t.id for t in repo.list_all()] == ["b", "a"]

    def test_save_replaces_in_place(self, tmp_path):
        repo = JsonThemeRepository(str(tmp_path / "themes.json"))
        first = Theme.new("First round", theme_id="a")
        repo.save(first)
        repo.save(Theme.new("Second round", theme_id="b"))

        first.title = "Renamed"
        repo.save(first)

        assert [t.title for t in repo.list_all()] == ["Second round", "Renamed"]

    def test_delete(self, tmp_path):
        repo = JsonThemeRepository(str(tmp_path / "themes.json"))
        repo.save(Theme.new("Gone soon", theme_id="a"))

        repo.delete("a")

        assert not repo.exists("a")

    def test_container_decides_the_tier(self, tmp_path, theme):
        fill(theme, Tier.SEMIFINALISTS, 1)
        path = tmp_path / "themes.json"
        JsonThemeRepository(str(path)).save(theme)
        payload = json.loads(path.read_text(encoding="utf-8"))
        payload["themes"][0]["semifinalists"][0]["current_tier"] = "candidates"
        path.write_text(json.dumps(payload), encoding="utf-8")

        loaded = JsonThemeRepository(str(path)).get("theme-1")

        assert loaded.semifinalists[0].current_tier == Tier.SEMIFINALISTS

    def test_no_temp_file_is_left_behind(self, tmp_path, theme):
        JsonThemeRepository(str(tmp_path / "themes.json")).save(theme)

        assert [p.name for p in tmp_path.iterdir()] == ["themes.json"]

    def test_conversation_survives_a_reload(self, tmp_path, theme):
        theme.remember_exchange("Any rainy songs?", "Try Rain by The Beatles.", 1_000)
        path = str(tmp_path / "themes.json")
        JsonThemeRepository(path).save(theme)

        loaded = JsonThemeRepository(path).get("theme-1")

        assert [(m.role, m.content, m.timestamp) for m in loaded.conversation] == [
            ("user", "Any rainy songs?", 1_000),
            ("assistant", "Try Rain by The Beatles.", 1_000),
        ]
