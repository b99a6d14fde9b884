"""Resolve strategist tier actions against the funnel and apply the valid ones.

The strategist never sees song ids, so actions name a song by title and artist.
Each action is resolved on its own: a miss or a rejected transition skips that
action and the rest of the batch still runs.
"""

import logging
from typing import Optional

from src.domain import funnel
from src.domain.errors import FunnelError
from src.domain.model import (
    Song,
    Theme,
    TierAction,
    TierActionKind,
    TierActionOutcome,
    TierActionReport,
    next_tier,
    previous_tier,
)

logger = logging.getLogger("music_league.tier_actions")


def match_song(theme: Theme, title: str, artist: str) -> Optional[Song]:
    """Case-insensitive exact match on title and artist across every tier."""
    return funnel.find_by_title(theme, title, artist)


def apply_tier_action(theme: Theme, action: TierAction) -> tuple[Theme, TierActionOutcome]:
    song = match_song(theme, action.song_title, action.song_artist)
    if song is None:
        return theme, _skip(action, None, "song not found in funnel")

    source = funnel.locate(theme, song.id)
    try:
        if action.action == TierActionKind.REMOVE:
            theme = funnel.remove_song_from_tier(theme, song.id, source)
        elif action.action == TierActionKind.PROMOTE:
            if action.to_tier is None or next_tier(source) != action.to_tier:
                return theme, _skip(action, song.id, f"cannot promote from {source.value} to {_label(action)}")
            theme = funnel.promote_song(theme, song.id, action.to_tier, action.reason)
        elif action.action == TierActionKind.DEMOTE:
            if action.to_tier is None or previous_tier(source) != action.to_tier:
                return theme, _skip(action, song.id, f"cannot demote from {source.value} to {_label(action)}")
            theme = funnel.demote_song(theme, song.id, action.to_tier, action.reason)
        else:
            return theme, _skip(action, song.id, f"unsupported action {action.action!r}")
    except FunnelError as exc:
        return theme, _skip(action, song.id, str(exc))

    return theme, TierActionOutcome(action=action, applied=True, song_id=song.id)


def apply_tier_actions(theme: Theme, actions: list[TierAction]) -> tuple[Theme, TierActionReport]:
    report = TierActionReport()
    for action in actions:
        theme, outcome = apply_tier_action(theme, action)
        report.outcomes.append(outcome)
    if actions:
        logger.info(
            "Tier actions for theme %s: applied=%s skipped=%s",
            theme.id,
            len(report.applied),
            len(report.skipped),
        )
    return theme, report


def _skip(action: TierAction, song_id: Optional[str], detail: str) -> TierActionOutcome:
    logger.info(
        'Skipped %s of "%s" by %s: %s',
        action.action.value,
        action.song_title,
        action.song_artist,
        detail,
    )
    return TierActionOutcome(action=action, applied=False, song_id=song_id, detail=detail)


def _label(action: TierAction) -> str:
    return action.to_tier.value if action.to_tier is not None else "no tier"
