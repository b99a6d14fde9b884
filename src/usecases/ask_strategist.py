"""Use case: one chat turn with the AI strategist.

The reply can carry new candidate songs, songs to reject and tier actions. New
candidates go through the same insertion rules as a manual add; any that would
break them are dropped and reported, never forced in.
The exchange is stored on the theme so the next turn, even from a new
process, continues the same conversation.
"""

import copy
import logging
from dataclasses import dataclass, field, replace

from src.domain import funnel
from src.domain.errors import FunnelError
from src.domain.model import Song, Theme, TierActionReport, now_ms
from src.domain.ports import StrategistPort, StrategistReply, ThemeRepositoryPort
from src.domain.tier_actions import apply_tier_actions
from src.usecases._lookup import require_theme

logger = logging.getLogger("music_league.usecases.ask_strategist")


@dataclass
class StrategistTurn:
    reply: StrategistReply
    theme: Theme
    added: list[Song] = field(default_factory=list)
    not_added: list[tuple[Song, str]] = field(default_factory=list)
    tier_report: TierActionReport = field(default_factory=TierActionReport)


class AskStrategistUseCase:

    def __init__(self, strategist: StrategistPort, themes: ThemeRepositoryPort):
        self.strategist = strategist
        self.themes = themes

    def execute(self, theme_id: str, message: str) -> StrategistTurn:
        theme = require_theme(self.themes, theme_id)
        reply = self.strategist.respond(theme, message)

        theme = copy.deepcopy(theme)
        if reply.interpretation and not theme.interpretation:
            theme.interpretation = reply.interpretation
        for rejected in reply.songs_to_reject:
            if not theme.is_rejected(rejected.title, rejected.artist):
                theme.rejected_songs.append(replace(rejected, timestamp=rejected.timestamp or now_ms()))

        turn = StrategistTurn(reply=reply, theme=theme)
        for song in reply.candidates:
            if theme.is_rejected(song.title, song.artist):
                turn.not_added.append((song, "previously rejected"))
                continue
            try:
                theme = funnel.add_song_from_collection(theme, song)
            except FunnelError as exc:
                turn.not_added.append((song, str(exc)))
                continue
            turn.added.append(theme.candidates[-1])

        theme, turn.tier_report = apply_tier_actions(theme, reply.tier_actions)
        stamp = max(now_ms(), theme.updated_at)
        theme.remember_exchange(message, reply.message or "(no reply)", stamp)
        theme.updated_at = stamp
        self.themes.save(theme)
        turn.theme = theme

        logger.info(
            "Strategist turn for theme %s: added=%s dropped=%s tier_actions_applied=%s",
            theme_id,
            len(turn.added),
            len(turn.not_added),
            len(turn.tier_report.applied),
        )
        return turn
