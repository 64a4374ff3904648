# tests/test_streaks.py

from datetime import timedelta
from zoneinfo import ZoneInfo

import pytest

from puzzlelog.core.models import StreakState
from puzzlelog.core.streaks import StreakDisplay, accumulate, display_streaks, first_streak, latest_record, replay
from tests.helpers import make_game, make_record, utc


@pytest.fixture
def game():
    return make_game("00:00")


def day(n, hour=12):
    """Noon UTC on the n-th of January 2024."""
    return utc(2024, 1, n, hour)


def reference_streaks(history):
    """Straightforward recomputation over (failed, puzzle-day index) pairs."""
    out = []
    play = win = best = 0
    last_day = None
    for failed, d in history:
        if last_day is not None and d - last_day == 1:
            play += 1
            win = 0 if failed else win + 1
        else:
            play = 1
            win = 0 if failed else 1
        best = max(best, win)
        last_day = d
        out.append(StreakState(play, win, best))
    return out


class TestAccumulate:

    def test_first_record(self, game):
        assert accumulate(False, day(1), None, game) == StreakState(1, 1, 1)
        assert accumulate(True, day(1), None, game) == StreakState(1, 0, 0)
        assert first_streak(True) == StreakState(1, 0, 0)

    def test_consecutive_wins(self, game):
        prior = make_record(day(1), playstreak=3, winstreak=3, max_winstreak=5)
        assert accumulate(False, day(2), prior, game) == StreakState(4, 4, 5)

    def test_loss_resets_winstreak_only(self, game):
        prior = make_record(day(1), playstreak=3, winstreak=3, max_winstreak=3)
        assert accumulate(True, day(2), prior, game) == StreakState(4, 0, 3)

    def test_win_after_loss_starts_at_one(self, game):
        prior = make_record(day(1), failed=True, playstreak=4, winstreak=0, max_winstreak=3)
        assert accumulate(False, day(2), prior, game) == StreakState(5, 1, 3)

    def test_gap_resets_playstreak(self, game):
        prior = make_record(day(1), playstreak=6, winstreak=6, max_winstreak=6)
        assert accumulate(False, day(4), prior, game) == StreakState(1, 1, 6)
        assert accumulate(True, day(4), prior, game) == StreakState(1, 0, 6)

    def test_same_puzzle_day_restarts(self, game):
        prior = make_record(day(1, hour=1), playstreak=2, winstreak=2, max_winstreak=2)
        assert accumulate(False, day(1, hour=23), prior, game) == StreakState(1, 1, 2)

    def test_consecutive_puzzle_days_not_calendar_days(self):
        game = make_game("06:00")
        prior = make_record(utc(2024, 1, 15, 7, 0))
        # two calendar dates later, but 05:00 still belongs to the 16th's puzzle
        assert accumulate(False, utc(2024, 1, 17, 5, 0), prior, game) == StreakState(2, 2, 2)

    def test_asynchronous_game_uses_player_zone(self):
        game = make_game("00:00", is_asynchronous=True)
        new_york = ZoneInfo("America/New_York")
        prior = make_record(utc(2024, 1, 15, 12, 0))
        # 03:00 UTC on the 17th is still the evening of the 16th in New York
        assert accumulate(False, utc(2024, 1, 17, 3, 0), prior, game, tz=new_york).playstreak == 2
        assert accumulate(False, utc(2024, 1, 17, 3, 0), prior, game, tz=ZoneInfo("UTC")).playstreak == 1


class TestReplay:

    def test_win_loss_win(self, game):
        states = replay([(False, day(1)), (False, day(2)), (True, day(3)), (False, day(4))], game)
        assert states == [
            StreakState(1, 1, 1),
            StreakState(2, 2, 2),
            StreakState(3, 0, 2),
            StreakState(4, 1, 2),
        ]

    def test_matches_reference_recomputation(self, game):
        days = [1, 2, 3, 5, 6, 7, 8, 8, 9, 12, 13, 14, 15, 16, 20]
        outcomes = [False, False, True, False, False, False, True, False, False, False, False, False, False, True, False]
        history = list(zip(outcomes, days))

        states = replay([(failed, day(d)) for failed, d in history], game)

        assert states == reference_streaks(history)

    def test_invariants_hold(self, game):
        history = [(i % 4 == 3, day(1) + timedelta(days=i + (i // 6))) for i in range(25)]
        states = replay(history, game)
        previous_max = 0
        for state in states:
            assert state.playstreak >= 1
            assert 0 <= state.winstreak <= state.max_winstreak
            assert state.winstreak <= state.playstreak
            assert state.max_winstreak >= previous_max
            previous_max = state.max_winstreak


class TestLatestRecord:

    def test_picks_newest_for_game(self):
        older = make_record(day(1))
        newer = make_record(day(3))
        other = make_record(day(5), game_id="quordle")
        assert latest_record([newer, other, older], "wordle") is newer

    def test_none_when_empty(self):
        assert latest_record([], "wordle") is None


class TestDisplayStreaks:

    def test_no_record(self, game):
        assert display_streaks(None, game, now=day(5)) == StreakDisplay(0, 0, 0, False)

    def test_played_today(self, game):
        record = make_record(day(5, hour=1), playstreak=4, winstreak=2, max_winstreak=3)
        view = display_streaks(record, game, now=day(5, hour=20))
        assert (view.playstreak, view.winstreak, view.max_winstreak, view.streak_at_risk) == (4, 2, 3, False)

    def test_played_yesterday_is_at_risk(self, game):
        record = make_record(day(4), playstreak=4, winstreak=2, max_winstreak=3)
        view = display_streaks(record, game, now=day(5))
        assert view.streak_at_risk is True
        assert view.playstreak == 4

    def test_older_record_shows_zero_but_keeps_best(self, game):
        record = make_record(day(1), playstreak=4, winstreak=2, max_winstreak=3)
        view = display_streaks(record, game, now=day(5))
        assert (view.playstreak, view.winstreak, view.max_winstreak, view.streak_at_risk) == (0, 0, 3, False)
        assert record.metadata == StreakState(4, 2, 3)
