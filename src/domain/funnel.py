"""Funnel engine: single-song tier transitions on a theme.

Every function here takes a theme and returns a new one; the argument is never
touched. Preconditions are checked before anything is copied, so a raised
``FunnelError`` means no state changed.
"""

import copy
import logging
from dataclasses import replace
from typing import Optional

from src.domain.errors import (
    CapacityExceeded,
    HallPassExhausted,
    InvalidOrdering,
    InvalidTransition,
    NotFound,
)
from src.domain.hall_pass import HALL_PASS_TIERS, is_available, spend
from src.domain.model import (
    TIER_CAPACITY,
    TIER_ORDER,
    PromotionRecord,
    RejectedSong,
    Song,
    SongRatings,
    Theme,
    Tier,
    new_song_id,
    next_tier,
    now_ms,
    previous_tier,
)

logger = logging.getLogger("music_league.funnel")


# ── Queries ─────────────────────────────────────────────────────────


def songs_in(theme: Theme, tier: Tier) -> list[Song]:
    if tier == Tier.PICK:
        return [theme.pick] if theme.pick is not None else []
    return list(getattr(theme, tier.value))


def ranked_songs(theme: Theme, tier: Tier) -> list[Song]:
    """Songs of a tier by rank; unranked songs follow in container order."""
    indexed = list(enumerate(songs_in(theme, tier)))
    indexed.sort(key=lambda pair: (pair[1].rank is None, pair[1].rank or 0, pair[0]))
    return [song for _, song in indexed]


def playable_songs(theme: Theme, tier: Tier) -> list[Song]:
    return [s for s in ranked_songs(theme, tier) if not s.is_muted and not s.is_eliminated]


def locate(theme: Theme, song_id: str) -> Optional[Tier]:
    for tier in TIER_ORDER:
        if any(s.id == song_id for s in songs_in(theme, tier)):
            return tier
    return None


def find_song(theme: Theme, song_id: str) -> Optional[Song]:
    for tier in TIER_ORDER:
        for song in songs_in(theme, tier):
            if song.id == song_id:
                return song
    return None


def find_by_title(theme: Theme, title: str, artist: str) -> Optional[Song]:
    for tier in TIER_ORDER:
        for song in songs_in(theme, tier):
            if song.matches(title, artist):
                return song
    return None


def total_song_count(theme: Theme) -> int:
    return sum(len(songs_in(theme, tier)) for tier in TIER_ORDER)


# ── Internal helpers (operate on a private copy) ────────────────────


def _require_room(theme: Theme, tier: Tier) -> None:
    if tier == Tier.PICK and theme.pick is not None:
        raise InvalidTransition(
            f'Pick is already "{theme.pick.title}"; demote it before choosing another'
        )
    limit = TIER_CAPACITY[tier]
    if len(songs_in(theme, tier)) >= limit:
        raise CapacityExceeded(f"Cannot add to {tier.value}: tier is full ({limit})")


def _detach(theme: Theme, song_id: str, tier: Tier) -> Song:
    if tier == Tier.PICK:
        song = theme.pick
        theme.pick = None
        return song
    container: list[Song] = getattr(theme, tier.value)
    for index, song in enumerate(container):
        if song.id == song_id:
            return container.pop(index)
    raise NotFound(f"Song {song_id} is not in {tier.value}")


def _attach(theme: Theme, song: Song, tier: Tier) -> None:
    if tier == Tier.PICK:
        theme.pick = song
    else:
        getattr(theme, tier.value).append(song)


def _arrive(song: Song, from_tier: Optional[Tier], to_tier: Tier, reason: Optional[str], stamp: int) -> Song:
    return replace(
        song,
        current_tier=to_tier,
        rank=None,
        promotion_history=list(song.promotion_history)
        + [PromotionRecord(from_tier=from_tier, to_tier=to_tier, reason=reason, timestamp=stamp)],
    )


def _touch(theme: Theme) -> int:
    stamp = max(now_ms(), theme.updated_at)
    theme.updated_at = stamp
    return stamp


def _move(theme: Theme, song_id: str, source: Tier, target: Tier, reason: Optional[str]) -> Theme:
    updated = copy.deepcopy(theme)
    stamp = _touch(updated)
    song = _detach(updated, song_id, source)
    _attach(updated, _arrive(song, source, target, reason, stamp), target)
    logger.info("Moved %s from %s to %s in theme %s", song_id, source.value, target.value, theme.id)
    return updated


def _update_song(theme: Theme, song_id: str, **changes) -> Theme:
    tier = locate(theme, song_id)
    if tier is None:
        raise NotFound(f"Song {song_id} is not in theme {theme.id}")
    updated = copy.deepcopy(theme)
    _touch(updated)
    if tier == Tier.PICK:
        updated.pick = replace(updated.pick, **changes)
    else:
        container: list[Song] = getattr(updated, tier.value)
        for index, song in enumerate(container):
            if song.id == song_id:
                container[index] = replace(song, **changes)
    return updated


def _check_not_in_funnel(theme: Theme, song: Song) -> None:
    if song.id and locate(theme, song.id) is not None:
        raise InvalidTransition(f"Song {song.id} is already in the funnel")
    duplicate = find_by_title(theme, song.title, song.artist)
    if duplicate is not None:
        raise InvalidTransition(
            f'"{song.title}" by {song.artist} is already in {locate(theme, duplicate.id).value}'
        )


# ── Mutations ───────────────────────────────────────────────────────


def promote_song(theme: Theme, song_id: str, to_tier: Tier, reason: Optional[str] = None) -> Theme:
    source = locate(theme, song_id)
    if source is None:
        raise NotFound(f"Song {song_id} is not in theme {theme.id}")
    if source == to_tier:
        raise InvalidTransition(f"Song {song_id} is already in {to_tier.value}")
    if next_tier(source) != to_tier:
        raise InvalidTransition(f"Cannot promote from {source.value} to {to_tier.value}")
    _require_room(theme, to_tier)
    return _move(theme, song_id, source, to_tier, reason)


def demote_song(theme: Theme, song_id: str, to_tier: Tier, reason: Optional[str] = None) -> Theme:
    source = locate(theme, song_id)
    if source is None:
        raise NotFound(f"Song {song_id} is not in theme {theme.id}")
    if source == to_tier:
        raise InvalidTransition(f"Song {song_id} is already in {to_tier.value}")
    if previous_tier(source) != to_tier:
        raise InvalidTransition(f"Cannot demote from {source.value} to {to_tier.value}")
    _require_room(theme, to_tier)
    return _move(theme, song_id, source, to_tier, reason)


def remove_song_from_tier(
    theme: Theme,
    song_id: str,
    tier: Tier,
    rejection_reason: Optional[str] = None,
) -> Theme:
    """Drop a song from ``tier``.

    With a ``rejection_reason`` the song is also remembered as rejected so the
    strategist stops proposing it.
    """
    if not any(s.id == song_id for s in songs_in(theme, tier)):
        raise NotFound(f"Song {song_id} is not in {tier.value}")
    updated = copy.deepcopy(theme)
    stamp = _touch(updated)
    song = _detach(updated, song_id, tier)
    if rejection_reason is not None:
        updated.rejected_songs.append(
            RejectedSong(title=song.title, artist=song.artist, reason=rejection_reason, timestamp=stamp)
        )
    logger.info("Removed %s from %s in theme %s", song_id, tier.value, theme.id)
    return updated


def toggle_muted(theme: Theme, song_id: str) -> Theme:
    song = find_song(theme, song_id)
    if song is None:
        raise NotFound(f"Song {song_id} is not in theme {theme.id}")
    return _update_song(theme, song_id, is_muted=not song.is_muted)


def toggle_eliminated(theme: Theme, song_id: str) -> Theme:
    song = find_song(theme, song_id)
    if song is None:
        raise NotFound(f"Song {song_id} is not in theme {theme.id}")
    return _update_song(theme, song_id, is_eliminated=not song.is_eliminated)


def rate_song(theme: Theme, song_id: str, theme_fit: int, general: int) -> Theme:
    ratings = SongRatings(theme=theme_fit, general=general)
    return _update_song(theme, song_id, ratings=ratings)


def set_streaming_ids(theme: Theme, song_id: str, spotify_track_id: str, spotify_uri: str) -> Theme:
    return _update_song(theme, song_id, spotify_track_id=spotify_track_id, spotify_uri=spotify_uri)


def reorder_songs_in_tier(theme: Theme, tier: Tier, ordered_ids: list[str]) -> Theme:
    """Rank a tier's songs 1..N in the given order.

    ``ordered_ids`` must name every song of the tier exactly once.
    """
    if tier == Tier.PICK:
        raise InvalidOrdering("The pick holds a single song and cannot be reordered")
    current_ids = [s.id for s in songs_in(theme, tier)]
    if len(set(ordered_ids)) != len(ordered_ids):
        raise InvalidOrdering(f"Duplicate song ids in {tier.value} ordering")
    missing = set(current_ids) - set(ordered_ids)
    unknown = set(ordered_ids) - set(current_ids)
    if missing or unknown:
        raise InvalidOrdering(
            f"Ordering for {tier.value} must list exactly its {len(current_ids)} songs "
            f"(missing={sorted(missing)}, unknown={sorted(unknown)})"
        )

    updated = copy.deepcopy(theme)
    _touch(updated)
    by_id = {s.id: s for s in getattr(updated, tier.value)}
    setattr(
        updated,
        tier.value,
        [replace(by_id[song_id], rank=position) for position, song_id in enumerate(ordered_ids, start=1)],
    )
    return updated


def add_song_from_collection(theme: Theme, song: Song) -> Theme:
    """Insert an externally sourced song into candidates."""
    _check_not_in_funnel(theme, song)
    _require_room(theme, Tier.CANDIDATES)
    updated = copy.deepcopy(theme)
    _touch(updated)
    added = replace(
        copy.deepcopy(song),
        id=song.id or new_song_id(),
        current_tier=Tier.CANDIDATES,
        rank=None,
    )
    updated.candidates.append(added)
    logger.info('Added candidate "%s" by %s to theme %s', song.title, song.artist, theme.id)
    return updated


def use_hall_pass(theme: Theme, song: Song, to_tier: Tier, reason: Optional[str] = None) -> Theme:
    """Put a new or candidate song straight into semifinalists or finalists."""
    if to_tier not in HALL_PASS_TIERS:
        raise InvalidTransition(f"Hall passes only reach {', '.join(t.value for t in HALL_PASS_TIERS)}")
    if not is_available(theme, to_tier):
        raise HallPassExhausted(f"The {to_tier.value} hall pass has already been used for this theme")

    source = locate(theme, song.id) if song.id else None
    if source is None:
        _check_not_in_funnel(theme, song)
    elif source != Tier.CANDIDATES:
        raise InvalidTransition(f"Hall passes only move new songs or candidates, not {source.value}")
    _require_room(theme, to_tier)

    updated = copy.deepcopy(theme)
    stamp = _touch(updated)
    if source is not None:
        moving = _detach(updated, song.id, source)
    else:
        moving = replace(copy.deepcopy(song), id=song.id or new_song_id())
    _attach(updated, _arrive(moving, source, to_tier, reason or "Hall pass", stamp), to_tier)
    updated.hall_passes = spend(updated.hall_passes, to_tier)
    logger.info("Hall pass used for %s into %s in theme %s", moving.id, to_tier.value, theme.id)
    return updated
