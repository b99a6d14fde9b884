"""Use case: render the funnel of a theme as a markdown summary."""

from datetime import datetime

from src.domain.model import TIER_CAPACITY, Song, Theme, Tier
from src.domain.funnel import ranked_songs
from src.domain.ports import ThemeRepositoryPort
from src.usecases._lookup import require_theme


def format_funnel_summary(theme: Theme) -> str:
    lines = [f"# {theme.title}", f"Theme: {theme.raw_theme}", ""]

    if theme.interpretation:
        lines += [f"Interpretation: {theme.interpretation}", ""]

    if theme.pick is not None:
        lines += ["## PICK", f'- "{theme.pick.title}" by {theme.pick.artist}', ""]

    for tier in (Tier.FINALISTS, Tier.SEMIFINALISTS, Tier.CANDIDATES):
        songs = ranked_songs(theme, tier)
        if not songs:
            continue
        lines.append(f"## {tier.value.capitalize()} ({len(songs)}/{TIER_CAPACITY[tier]})")
        lines += [_song_line(i, song) for i, song in enumerate(songs, start=1)]
        lines.append("")

    if theme.deadline:
        deadline = datetime.fromtimestamp(theme.deadline / 1000)
        lines.append(f"Deadline: {deadline:%Y-%m-%d %H:%M}")

    return "\n".join(lines)


def _song_line(position: int, song: Song) -> str:
    muted = " (muted)" if song.is_muted else ""
    return f'{position}. "{song.title}" by {song.artist}{muted}'


class ExportSummaryUseCase:

    def __init__(self, themes: ThemeRepositoryPort):
        self.themes = themes

    def execute(self, theme_id: str, path: str | None = None) -> str:
        summary = format_funnel_summary(require_theme(self.themes, theme_id))
        if path:
            with open(path, "w", encoding="utf-8") as f:
                f.write(summary)
        return summary
