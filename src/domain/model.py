"""Funnel domain objects: tiers, songs, themes and tier actions."""

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Tier(str, Enum):
    CANDIDATES = "candidates"
    SEMIFINALISTS = "semifinalists"
    FINALISTS = "finalists"
    PICK = "pick"


TIER_ORDER = (Tier.CANDIDATES, Tier.SEMIFINALISTS, Tier.FINALISTS, Tier.PICK)

TIER_CAPACITY = {
    Tier.CANDIDATES: 30,
    Tier.SEMIFINALISTS: 8,
    Tier.FINALISTS: 4,
    Tier.PICK: 1,
}

RANKED_TIERS = (Tier.SEMIFINALISTS, Tier.FINALISTS)


def next_tier(tier: Tier) -> Optional[Tier]:
    index = TIER_ORDER.index(tier)
    if index + 1 >= len(TIER_ORDER):
        return None
    return TIER_ORDER[index + 1]


def previous_tier(tier: Tier) -> Optional[Tier]:
    index = TIER_ORDER.index(tier)
    if index == 0:
        return None
    return TIER_ORDER[index - 1]


class Phase(str, Enum):
    IDLE = "idle"
    BRAINSTORM = "brainstorm"
    REFINE = "refine"
    DECIDE = "decide"
    COMPLETE = "complete"


class ThemeStatus(str, Enum):
    ACTIVE = "active"
    SUBMITTED = "submitted"
    ARCHIVED = "archived"


def now_ms() -> int:
    return int(time.time() * 1000)


def new_song_id() -> str:
    return f"song-{uuid.uuid4().hex[:9]}"


def new_saved_song_id() -> str:
    return f"saved-{uuid.uuid4().hex[:9]}"


def new_theme_id() -> str:
    return f"theme-{now_ms()}-{uuid.uuid4().hex[:7]}"


@dataclass
class SongRatings:
    theme: int
    general: int

    def __post_init__(self):
        for label, value in (("theme", self.theme), ("general", self.general)):
            if not isinstance(value, int) or not 1 <= value <= 5:
                raise ValueError(f"{label} rating must be an integer from 1 to 5, got {value!r}")


@dataclass
class PromotionRecord:
    from_tier: Optional[Tier]  # None when the song came from outside the funnel
    to_tier: Tier
    reason: Optional[str] = None
    timestamp: int = 0


@dataclass
class Song:
    id: str
    title: str
    artist: str
    reason: str = ""
    album: Optional[str] = None
    year: Optional[int] = None
    genre: Optional[str] = None
    question: Optional[str] = None
    spotify_track_id: Optional[str] = None
    spotify_uri: Optional[str] = None
    youtube_video_id: Optional[str] = None
    current_tier: Optional[Tier] = None
    is_muted: bool = False
    is_eliminated: bool = False
    rank: Optional[int] = None
    promotion_history: list[PromotionRecord] = field(default_factory=list)
    ratings: Optional[SongRatings] = None
    notes: Optional[str] = None

    def matches(self, title: str, artist: str) -> bool:
        return (
            self.title.strip().lower() == title.strip().lower()
            and self.artist.strip().lower() == artist.strip().lower()
        )


@dataclass
class HallPasses:
    semifinals: bool = True
    finals: bool = True


@dataclass
class RejectedSong:
    title: str
    artist: str
    reason: str = ""
    timestamp: int = 0


# User and assistant messages are kept in pairs, newest last.
CONVERSATION_TURNS = 10


@dataclass
class ChatMessage:
    role: str  # "user" or "assistant"
    content: str
    timestamp: int = 0


@dataclass
class PlaylistSyncRecord:
    playlist_id: str
    playlist_url: str
    synced_tier: Tier
    last_sync_at: int = 0


@dataclass
class Theme:
    id: str
    raw_theme: str
    title: str
    created_at: int = 0
    updated_at: int = 0
    interpretation: Optional[str] = None
    strategy: Optional[str] = None
    pick: Optional[Song] = None
    finalists: list[Song] = field(default_factory=list)
    semifinalists: list[Song] = field(default_factory=list)
    candidates: list[Song] = field(default_factory=list)
    status: ThemeStatus = ThemeStatus.ACTIVE
    deadline: Optional[int] = None
    spotify_playlist: Optional[PlaylistSyncRecord] = None
    hall_passes: HallPasses = field(default_factory=HallPasses)
    rejected_songs: list[RejectedSong] = field(default_factory=list)
    conversation: list[ChatMessage] = field(default_factory=list)

    @classmethod
    def new(cls, raw_theme: str, theme_id: Optional[str] = None) -> "Theme":
        created = now_ms()
        return cls(
            id=theme_id or new_theme_id(),
            raw_theme=raw_theme,
            title=title_from_raw_theme(raw_theme),
            created_at=created,
            updated_at=created,
        )

    def is_rejected(self, title: str, artist: str) -> bool:
        title_key = title.strip().lower()
        artist_key = artist.strip().lower()
        return any(
            r.title.strip().lower() == title_key and r.artist.strip().lower() == artist_key
            for r in self.rejected_songs
        )

    def remember_exchange(self, question: str, answer: str, stamp: int) -> None:
        """Append one user/assistant pair, dropping the oldest past the limit."""
        self.conversation.append(ChatMessage(role="user", content=question, timestamp=stamp))
        self.conversation.append(ChatMessage(role="assistant", content=answer, timestamp=stamp))
        del self.conversation[: max(len(self.conversation) - CONVERSATION_TURNS * 2, 0)]


@dataclass
class SavedSong:
    """A song kept in the "Songs I Like" collection, independent of any theme."""

    id: str
    title: str
    artist: str
    album: Optional[str] = None
    year: Optional[int] = None
    genre: Optional[str] = None
    spotify_track_id: Optional[str] = None
    spotify_uri: Optional[str] = None
    youtube_video_id: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    notes: Optional[str] = None
    source_theme_id: Optional[str] = None
    saved_at: int = 0

    def matches(self, title: str, artist: str) -> bool:
        return (
            self.title.strip().lower() == title.strip().lower()
            and self.artist.strip().lower() == artist.strip().lower()
        )

    def has_tag(self, tag: str) -> bool:
        return tag.strip().lower() in (t.lower() for t in self.tags)

    def to_song(self) -> Song:
        """A fresh candidate for a theme; the theme assigns its own id."""
        return Song(
            id="",
            title=self.title,
            artist=self.artist,
            reason=self.notes or "From Songs I Like",
            album=self.album,
            year=self.year,
            genre=self.genre,
            spotify_track_id=self.spotify_track_id,
            spotify_uri=self.spotify_uri,
            youtube_video_id=self.youtube_video_id,
        )


def title_from_raw_theme(raw_theme: str) -> str:
    lines = raw_theme.split("\n")
    first_line = lines[0].strip() if lines else ""
    if len(first_line) > 50:
        return first_line[:47] + "..."
    return first_line


class TierActionKind(str, Enum):
    PROMOTE = "promote"
    DEMOTE = "demote"
    REMOVE = "remove"


@dataclass
class TierAction:
    action: TierActionKind
    song_title: str
    song_artist: str
    to_tier: Optional[Tier] = None
    reason: Optional[str] = None


@dataclass
class TierActionOutcome:
    action: TierAction
    applied: bool
    song_id: Optional[str] = None
    detail: str = ""


@dataclass
class TierActionReport:
    outcomes: list[TierActionOutcome] = field(default_factory=list)

    @property
    def applied(self) -> list[TierActionOutcome]:
        return [o for o in self.outcomes if o.applied]

    @property
    def skipped(self) -> list[TierActionOutcome]:
        return [o for o in self.outcomes if not o.applied]
