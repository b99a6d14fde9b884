"""Ports (interfaces) for the hexagonal architecture."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from src.domain.model import RejectedSong, SavedSong, Song, Theme, TierAction


@dataclass
class StrategistReply:
    message: str
    candidates: list[Song] = field(default_factory=list)
    tier_actions: list[TierAction] = field(default_factory=list)
    songs_to_reject: list[RejectedSong] = field(default_factory=list)
    interpretation: Optional[str] = None


@dataclass
class PlaylistSyncResult:
    playlist_id: str
    playlist_url: str
    added: int = 0
    removed: int = 0


@dataclass
class CatalogMatch:
    track_id: str
    uri: str
    url: str = ""


class ThemeRepositoryPort(ABC):
    @abstractmethod
    def list_all(self) -> list[Theme]:
        ...

    @abstractmethod
    def get(self, theme_id: str) -> Optional[Theme]:
        ...

    @abstractmethod
    def save(self, theme: Theme) -> None:
        ...

    @abstractmethod
    def delete(self, theme_id: str) -> None:
        ...

    @abstractmethod
    def exists(self, theme_id: str) -> bool:
        ...


class SavedSongRepositoryPort(ABC):
    @abstractmethod
    def list_all(self) -> list[SavedSong]:
        ...

    @abstractmethod
    def get(self, saved_id: str) -> Optional[SavedSong]:
        ...

    @abstractmethod
    def save(self, song: SavedSong) -> None:
        ...

    @abstractmethod
    def delete(self, saved_id: str) -> None:
        ...


class StrategistPort(ABC):
    @abstractmethod
    def respond(self, theme: Theme, message: str) -> StrategistReply:
        ...


class PlaylistSyncPort(ABC):
    @abstractmethod
    def sync(
        self,
        title: str,
        description: str,
        songs: list[Song],
        existing_playlist_id: Optional[str] = None,
    ) -> PlaylistSyncResult:
        ...


class CatalogPort(ABC):
    @abstractmethod
    def find_track(self, title: str, artist: str) -> Optional[CatalogMatch]:
        ...


class ConfigPort(ABC):
    @abstractmethod
    def load(self) -> dict:
        ...

    @abstractmethod
    def save(self, cfg: dict) -> None:
        ...

    @abstractmethod
    def is_configured(self) -> bool:
        ...
