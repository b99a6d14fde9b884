"""JSON file-based persistence for the "Songs I Like" collection."""

from dataclasses import asdict
from typing import Optional

from src.adapters.json_document import read_items, write_items
from src.domain.model import SavedSong
from src.domain.ports import SavedSongRepositoryPort


class JsonSavedSongRepository(SavedSongRepositoryPort):
    """Every saved song in one JSON document, newest first."""

    def __init__(self, path: str = "songs_i_like.json"):
        self.path = path

    def list_all(self) -> list[SavedSong]:
        return [saved_song_from_dict(item) for item in read_items(self.path, "songs")]

    def get(self, saved_id: str) -> Optional[SavedSong]:
        for item in read_items(self.path, "songs"):
            if item.get("id") == saved_id:
                return saved_song_from_dict(item)
        return None

    def save(self, song: SavedSong) -> None:
        items = read_items(self.path, "songs")
        data = asdict(song)
        for index, item in enumerate(items):
            if item.get("id") == song.id:
                items[index] = data
                break
        else:
            items.insert(0, data)
        write_items(self.path, "songs", items)

    def delete(self, saved_id: str) -> None:
        items = [item for item in read_items(self.path, "songs") if item.get("id") != saved_id]
        write_items(self.path, "songs", items)


def saved_song_from_dict(data: dict) -> SavedSong:
    return SavedSong(
        id=data["id"],
        title=data.get("title", ""),
        artist=data.get("artist", ""),
        album=data.get("album"),
        year=data.get("year"),
        genre=data.get("genre"),
        spotify_track_id=data.get("spotify_track_id"),
        spotify_uri=data.get("spotify_uri"),
        youtube_video_id=data.get("youtube_video_id"),
        tags=list(data.get("tags", [])),
        notes=data.get("notes"),
        source_theme_id=data.get("source_theme_id"),
        saved_at=int(data.get("saved_at", 0)),
    )
