"""JSON file-based theme persistence adapter."""

from dataclasses import asdict
from typing import Any, Optional

from src.adapters.json_document import read_items, write_items
from src.domain.model import (
    ChatMessage,
    HallPasses,
    PlaylistSyncRecord,
    PromotionRecord,
    RejectedSong,
    Song,
    SongRatings,
    Theme,
    ThemeStatus,
    Tier,
)
from src.domain.ports import ThemeRepositoryPort


class JsonThemeRepository(ThemeRepositoryPort):
    """All themes in one JSON document, newest first."""

    def __init__(self, path: str = "themes.json"):
        self.path = path

    def list_all(self) -> list[Theme]:
        return [theme_from_dict(item) for item in self._read()]

    def get(self, theme_id: str) -> Optional[Theme]:
        for item in self._read():
            if item.get("id") == theme_id:
                return theme_from_dict(item)
        return None

    def save(self, theme: Theme) -> None:
        items = self._read()
        data = theme_to_dict(theme)
        for index, item in enumerate(items):
            if item.get("id") == theme.id:
                items[index] = data
                break
        else:
            items.insert(0, data)
        self._write(items)

    def delete(self, theme_id: str) -> None:
        items = [item for item in self._read() if item.get("id") != theme_id]
        self._write(items)

    def exists(self, theme_id: str) -> bool:
        return any(item.get("id") == theme_id for item in self._read())

    def _read(self) -> list[dict]:
        return read_items(self.path, "themes")

    def _write(self, items: list[dict]) -> None:
        write_items(self.path, "themes", items)


def theme_to_dict(theme: Theme) -> dict:
    return _plain(asdict(theme))


def _plain(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, (Tier, ThemeStatus)):
        return value.value
    return value


def _tier(value: Optional[str]) -> Optional[Tier]:
    return Tier(value) if value else None


def song_from_dict(data: dict, tier: Tier) -> Song:
    ratings = data.get("ratings")
    return Song(
        id=data["id"],
        title=data.get("title", ""),
        artist=data.get("artist", ""),
        reason=data.get("reason", ""),
        album=data.get("album"),
        year=data.get("year"),
        genre=data.get("genre"),
        question=data.get("question"),
        spotify_track_id=data.get("spotify_track_id"),
        spotify_uri=data.get("spotify_uri"),
        youtube_video_id=data.get("youtube_video_id"),
        # The container a song sits in is authoritative, not the stored label.
        current_tier=tier,
        is_muted=bool(data.get("is_muted", False)),
        is_eliminated=bool(data.get("is_eliminated", False)),
        rank=data.get("rank"),
        promotion_history=[
            PromotionRecord(
                from_tier=_tier(r.get("from_tier")),
                to_tier=Tier(r["to_tier"]),
                reason=r.get("reason"),
                timestamp=int(r.get("timestamp", 0)),
            )
            for r in data.get("promotion_history", [])
        ],
        ratings=SongRatings(**ratings) if ratings else None,
        notes=data.get("notes"),
    )


def theme_from_dict(data: dict) -> Theme:
    playlist = data.get("spotify_playlist")
    passes = data.get("hall_passes") or {}
    pick = data.get("pick")
    return Theme(
        id=data["id"],
        raw_theme=data.get("raw_theme", ""),
        title=data.get("title", ""),
        created_at=int(data.get("created_at", 0)),
        updated_at=int(data.get("updated_at", 0)),
        interpretation=data.get("interpretation"),
        strategy=data.get("strategy"),
        pick=song_from_dict(pick, Tier.PICK) if pick else None,
        finalists=[song_from_dict(s, Tier.FINALISTS) for s in data.get("finalists", [])],
        semifinalists=[song_from_dict(s, Tier.SEMIFINALISTS) for s in data.get("semifinalists", [])],
        candidates=[song_from_dict(s, Tier.CANDIDATES) for s in data.get("candidates", [])],
        status=ThemeStatus(data.get("status", ThemeStatus.ACTIVE.value)),
        deadline=data.get("deadline"),
        spotify_playlist=(
            PlaylistSyncRecord(
                playlist_id=playlist["playlist_id"],
                playlist_url=playlist.get("playlist_url", ""),
                synced_tier=Tier(playlist["synced_tier"]),
                last_sync_at=int(playlist.get("last_sync_at", 0)),
            )
            if playlist
            else None
        ),
        hall_passes=HallPasses(
            semifinals=bool(passes.get("semifinals", True)),
            finals=bool(passes.get("finals", True)),
        ),
        rejected_songs=[RejectedSong(**r) for r in data.get("rejected_songs", [])],
        conversation=[ChatMessage(**m) for m in data.get("conversation", [])],
    )
