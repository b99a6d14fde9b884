"""Bounded context: Tier actions

The strategist names songs by title and artist; only valid one-step moves apply.
"""

from src.domain import tier_actions
from src.domain.model import Tier, TierAction, TierActionKind
from tests.builders import fill


def _promote(title, artist, to_tier, reason=None):
    return TierAction(action=TierActionKind.PROMOTE, song_title=title, song_artist=artist, to_tier=to_tier, reason=reason)


class TestSongMatching:

    def test_match_ignores_case_and_surrounding_whitespace(self, theme):
        fill(theme, Tier.CANDIDATES, 2)

        song = tier_actions.match_song(theme, "  SONG 2 ", "artist 2")

        assert song.id == "s2"

    def test_partial_titles_do_not_match(self, theme):
        fill(theme, Tier.CANDIDATES, 1)

        assert tier_actions.match_song(theme, "Song", "Artist 1") is None


class TestStrategistMovesSongs:
    """The strategist's suggestions reshape the funnel when they are legal."""

    def test_adjacent_promotion_is_applied(self, theme):
        fill(theme, Tier.CANDIDATES, 1)

        updated, report = tier_actions.apply_tier_actions(
            theme, [_promote("Song 1", "Artist 1", Tier.SEMIFINALISTS, "Strong opener")]
        )

        assert [s.id for s in updated.semifinalists] == ["s1"]
        assert updated.semifinalists[0].promotion_history[-1].reason == "Strong opener"
        assert len(report.applied) == 1
        assert report.skipped == []

    def test_skipping_a_tier_is_ignored(self, theme):
        fill(theme, Tier.CANDIDATES, 1)

        updated, report = tier_actions.apply_tier_actions(theme, [_promote("Song 1", "Artist 1", Tier.FINALISTS)])

        assert [s.id for s in updated.candidates] == ["s1"]
        assert report.applied == []
        assert report.skipped[0].detail == "cannot promote from candidates to finalists"

    def test_unknown_song_is_skipped(self, theme):
        updated, report = tier_actions.apply_tier_actions(theme, [_promote("Ghost", "Nobody", Tier.SEMIFINALISTS)])

        assert updated is theme
        assert report.skipped[0].detail == "song not found in funnel"
        assert report.skipped[0].song_id is None

    def test_capacity_refusal_is_reported(self, theme):
        fill(theme, Tier.SEMIFINALISTS, 8)
        fill(theme, Tier.CANDIDATES, 1, start=9)

        updated, report = tier_actions.apply_tier_actions(theme, [_promote("Song 9", "Artist 9", Tier.SEMIFINALISTS)])

        assert len(updated.semifinalists) == 8
        assert "full" in report.skipped[0].detail

    def test_demote_and_remove(self, theme):
        fill(theme, Tier.FINALISTS, 1)
        fill(theme, Tier.CANDIDATES, 1, start=2)
        actions = [
            TierAction(action=TierActionKind.DEMOTE, song_title="Song 1", song_artist="Artist 1", to_tier=Tier.SEMIFINALISTS),
            TierAction(action=TierActionKind.REMOVE, song_title="Song 2", song_artist="Artist 2"),
        ]

        updated, report = tier_actions.apply_tier_actions(theme, actions)

        assert [s.id for s in updated.semifinalists] == ["s1"]
        assert updated.candidates == []
        assert len(report.applied) == 2

    def test_demote_two_steps_is_skipped(self, theme):
        fill(theme, Tier.FINALISTS, 1)
        action = TierAction(action=TierActionKind.DEMOTE, song_title="Song 1", song_artist="Artist 1", to_tier=Tier.CANDIDATES)

        updated, report = tier_actions.apply_tier_actions(theme, [action])

        assert [s.id for s in updated.finalists] == ["s1"]
        assert report.skipped[0].detail == "cannot demote from finalists to candidates"

    def test_actions_apply_in_order(self, theme):
        fill(theme, Tier.CANDIDATES, 1)
        actions = [
            _promote("Song 1", "Artist 1", Tier.SEMIFINALISTS),
            _promote("Song 1", "Artist 1", Tier.FINALISTS),
        ]

        updated, report = tier_actions.apply_tier_actions(theme, actions)

        assert [s.id for s in updated.finalists] == ["s1"]
        assert len(report.applied) == 2

    def test_one_bad_action_does_not_stop_the_batch(self, theme):
        fill(theme, Tier.CANDIDATES, 2)
        actions = [
            _promote("Missing", "Nobody", Tier.SEMIFINALISTS),
            _promote("Song 2", "Artist 2", Tier.SEMIFINALISTS),
        ]

        updated, report = tier_actions.apply_tier_actions(theme, actions)

        assert [s.id for s in updated.semifinalists] == ["s2"]
        assert len(report.applied) == 1
        assert len(report.skipped) == 1
