"""Shared prompt logic for strategist adapters."""

import json
import logging
from datetime import datetime
from typing import Optional

from src.domain.funnel import ranked_songs
from src.domain.model import (
    TIER_CAPACITY,
    RejectedSong,
    Song,
    Theme,
    Tier,
    TierAction,
    TierActionKind,
)
from src.domain.phase import DEFAULT_THRESHOLDS, PhaseThresholds, compute_phase
from src.domain.ports import StrategistReply

logger = logging.getLogger("music_league.strategist.prompt")


SYSTEM_PROMPT = """ROLE: Music League Strategist. You help the player choose the one song they will submit for this round.
TONE: Direct and opinionated. Push back when a choice looks weak.

=== FUNNEL ===
Songs move one tier at a time through a funnel:
  [PICK]          1 song   - the submission
  [FINALISTS]     4 max    - top contenders
  [SEMIFINALISTS] 8 max    - serious options
  [CANDIDATES]    30 max   - discovery pool
Promotions and demotions move exactly one tier. A full tier cannot take more songs.
The pick must be demoted before another song can become the pick.

=== RULES ===
1. Propose 5-8 new candidates when the player is still exploring.
2. Never propose two songs by the same artist.
3. Give every candidate a probing question about that song.
4. Never propose a song from the REJECTED SONGS list or one already in the funnel.
5. Always include year and genre for every candidate.

=== RESPONSE FORMAT ===
Return ONLY valid JSON:
{{
  "message": "Conversational reply",
  "interpretation": "Your reading of the theme (first reply only)",
  "candidates": [
    {{"title": "...", "artist": "...", "album": "...", "year": 1985, "genre": "...",
      "reason": "Why it fits", "question": "A probing question"}}
  ],
  "songsToReject": [{{"title": "...", "artist": "...", "reason": "..."}}],
  "tierActions": [
    {{"action": "promote", "songTitle": "...", "songArtist": "...", "toTier": "semifinalists", "reason": "..."}}
  ]
}}
Valid actions: "promote", "demote", "remove". Valid toTier values: "candidates", "semifinalists", "finalists", "pick".
Only use tierActions for songs already in the funnel.

{context}"""


def format_funnel(theme: Theme) -> str:
    parts = []
    if theme.pick is not None:
        parts.append(f'PICK: "{theme.pick.title}" by {theme.pick.artist}')
    for tier in (Tier.FINALISTS, Tier.SEMIFINALISTS, Tier.CANDIDATES):
        songs = ranked_songs(theme, tier)
        if not songs:
            continue
        parts.append(f"{tier.value.upper()} ({len(songs)}/{TIER_CAPACITY[tier]}):")
        for i, song in enumerate(songs, start=1):
            muted = " [muted]" if song.is_muted else ""
            parts.append(f'  {i}. "{song.title}" by {song.artist}{muted}')
    return "\n".join(parts) if parts else "The funnel is empty."


def format_rejected(rejected: list[RejectedSong]) -> str:
    if not rejected:
        return "None"
    return "\n".join(f'- "{r.title}" by {r.artist} (Reason: {r.reason})' for r in rejected)


def build_context(
    theme: Theme,
    now: Optional[datetime] = None,
    thresholds: PhaseThresholds = DEFAULT_THRESHOLDS,
) -> str:
    lines = [f"=== CURRENT THEME ===\nTitle: {theme.title}\nPrompt: {theme.raw_theme}"]
    if theme.interpretation:
        lines.append(f"Interpretation: {theme.interpretation}")
    if theme.deadline:
        now = now or datetime.now()
        deadline = datetime.fromtimestamp(theme.deadline / 1000)
        days_left = max((deadline - now).days, 0)
        lines.append(f"Deadline: {deadline:%Y-%m-%d} ({days_left} day{'' if days_left == 1 else 's'} left)")

    passes = theme.hall_passes
    lines.append(f"\n=== PHASE ===\n{compute_phase(theme, thresholds).value}")
    lines.append(
        "Hall passes: "
        f"semifinals {'available' if passes.semifinals else 'used'}, "
        f"finals {'available' if passes.finals else 'used'}"
    )
    lines.append(f"\n=== FUNNEL STATE ===\n{format_funnel(theme)}")
    lines.append(f"\n=== REJECTED SONGS (DO NOT RE-PROPOSE) ===\n{format_rejected(theme.rejected_songs)}")
    return "\n".join(lines)


def build_system_prompt(theme: Theme, thresholds: PhaseThresholds = DEFAULT_THRESHOLDS) -> str:
    return SYSTEM_PROMPT.format(context=build_context(theme, thresholds=thresholds))


def _strip_fences(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)
    return cleaned


def _optional_int(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_candidates(items) -> list[Song]:
    songs = []
    for item in items or []:
        if not isinstance(item, dict) or not item.get("title") or not item.get("artist"):
            continue
        songs.append(
            Song(
                id="",
                title=str(item["title"]),
                artist=str(item["artist"]),
                album=item.get("album"),
                year=_optional_int(item.get("year")),
                genre=item.get("genre"),
                reason=str(item.get("reason", "")),
                question=item.get("question"),
            )
        )
    return songs


def parse_tier_actions(items) -> list[TierAction]:
    actions = []
    for item in items or []:
        if not isinstance(item, dict):
            continue
        try:
            kind = TierActionKind(str(item.get("action", "")).lower())
            to_tier = Tier(str(item["toTier"]).strip().lower()) if item.get("toTier") else None
        except ValueError:
            logger.info("Ignoring malformed tier action: %s", item)
            continue
        title = item.get("songTitle")
        artist = item.get("songArtist")
        if not title or not artist:
            continue
        actions.append(
            TierAction(
                action=kind,
                song_title=str(title),
                song_artist=str(artist),
                to_tier=to_tier,
                reason=item.get("reason"),
            )
        )
    return actions


def parse_rejections(items) -> list[RejectedSong]:
    return [
        RejectedSong(title=str(item["title"]), artist=str(item["artist"]), reason=str(item.get("reason", "")))
        for item in items or []
        if isinstance(item, dict) and item.get("title") and item.get("artist")
    ]


def parse_reply(text: str) -> StrategistReply:
    cleaned = _strip_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        # Plain prose is still a usable chat reply.
        return StrategistReply(message=text.strip())
    if not isinstance(data, dict):
        return StrategistReply(message=text.strip())

    return StrategistReply(
        message=str(data.get("message", "")),
        candidates=parse_candidates(data.get("candidates")),
        tier_actions=parse_tier_actions(data.get("tierActions")),
        songs_to_reject=parse_rejections(data.get("songsToReject")),
        interpretation=data.get("interpretation") or None,
    )


def conversation_messages(theme: Theme, message: str) -> list[dict]:
    """Earlier turns of this theme's chat followed by the new user message."""
    history = [{"role": m.role, "content": m.content} for m in theme.conversation]
    return history + [{"role": "user", "content": message}]
