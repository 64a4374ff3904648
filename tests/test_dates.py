# tests/test_dates.py

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from puzzlelog.core.dates import (
    DatesConfig,
    InvalidGameConfig,
    current_puzzle_day,
    days_between,
    format_time_until_reset,
    get_last_reset_instant,
    get_next_reset_instant,
    get_puzzle_day,
    get_time_until_reset,
    is_current_puzzle,
    parse_reset_time,
)
from tests.helpers import make_game, utc

NEW_YORK = ZoneInfo("America/New_York")


class TestResetTime:

    def test_valid(self):
        assert parse_reset_time("00:00") == (0, 0)
        assert parse_reset_time("6:30") == (6, 30)
        assert parse_reset_time("23:59") == (23, 59)

    @pytest.mark.parametrize("value", ["24:00", "12:60", "noon", "", "12", None])
    def test_invalid(self, value):
        with pytest.raises(InvalidGameConfig):
            parse_reset_time(value)

    def test_invalid_game_config_fails_every_operation(self):
        game = make_game("25:00")
        with pytest.raises(InvalidGameConfig):
            get_puzzle_day(utc(2024, 1, 15), game)
        with pytest.raises(InvalidGameConfig):
            is_current_puzzle("2024-01-15", game)
        with pytest.raises(InvalidGameConfig):
            get_time_until_reset(game, now=utc(2024, 1, 15))


class TestPuzzleDay:

    def test_utc_midnight_boundary(self):
        game = make_game("00:00")
        assert get_puzzle_day("2024-01-15T23:59:00Z", game) == date(2024, 1, 15)
        assert get_puzzle_day("2024-01-16T00:01:00Z", game) == date(2024, 1, 16)

    def test_exactly_at_reset_is_the_new_day(self):
        game = make_game("06:00")
        assert get_puzzle_day(utc(2024, 1, 16, 6, 0), game) == date(2024, 1, 16)
        assert get_puzzle_day(utc(2024, 1, 16, 5, 59), game) == date(2024, 1, 15)

    def test_synchronous_game_ignores_offset_of_input(self):
        game = make_game("00:00")
        # 20:00 in New York on the 15th is 01:00 UTC on the 16th
        ts = datetime(2024, 1, 15, 20, 0, tzinfo=NEW_YORK)
        assert get_puzzle_day(ts, game) == date(2024, 1, 16)

    def test_asynchronous_game_uses_player_zone(self):
        game = make_game("00:00", is_asynchronous=True)
        assert get_puzzle_day("2024-01-16T03:00:00Z", game, tz=NEW_YORK) == date(2024, 1, 15)
        assert get_puzzle_day("2024-01-16T03:00:00Z", game, tz=timezone.utc) == date(2024, 1, 16)

    def test_bare_date_is_its_own_puzzle_day(self):
        game = make_game("06:00")
        assert get_puzzle_day("2024-01-15", game) == date(2024, 1, 15)
        assert get_puzzle_day(date(2024, 1, 15), game) == date(2024, 1, 15)

    def test_naive_timestamp_is_read_as_utc_for_synchronous_games(self):
        game = make_game("00:00")
        assert get_puzzle_day(datetime(2024, 1, 15, 23, 0), game) == date(2024, 1, 15)

    @pytest.mark.parametrize("reset", ["00:00", "06:00", "13:45", "23:59"])
    def test_monotonic(self, reset):
        game = make_game(reset)
        start = utc(2024, 3, 1, 0, 0)
        previous = get_puzzle_day(start, game)
        for step in range(1, 24 * 5):
            current = get_puzzle_day(start + timedelta(minutes=37 * step), game)
            assert current >= previous
            previous = current

    def test_more_than_a_day_apart_is_a_later_puzzle(self):
        game = make_game("06:00")
        t1 = utc(2024, 3, 1, 5, 0)
        t2 = t1 + timedelta(hours=24, minutes=1)
        assert get_puzzle_day(t1, game) < get_puzzle_day(t2, game)

    def test_current_puzzle_day(self):
        game = make_game("06:00")
        assert current_puzzle_day(game, now=utc(2024, 1, 16, 5, 0)) == date(2024, 1, 15)


class TestIsCurrentPuzzle:

    def test_timestamps(self):
        game = make_game("00:00")
        now = utc(2024, 1, 16, 12, 0)
        assert is_current_puzzle(utc(2024, 1, 16, 0, 30), game, now=now)
        assert not is_current_puzzle(utc(2024, 1, 15, 23, 0), game, now=now)

    def test_bare_date_compares_to_utc_today(self):
        game = make_game("06:00")
        now = utc(2024, 1, 16, 1, 0)
        # the live puzzle is still the 15th's, but bare dates skip the reset math
        assert current_puzzle_day(game, now=now) == date(2024, 1, 15)
        assert not is_current_puzzle("2024-01-15", game, now=now)
        assert is_current_puzzle("2024-01-16", game, now=now)


class TestResetInstants:

    def test_last_reset_synchronous(self):
        game = make_game("06:00")
        assert get_last_reset_instant(game, now=utc(2024, 1, 16, 5, 0)) == utc(2024, 1, 15, 6, 0)
        assert get_last_reset_instant(game, now=utc(2024, 1, 16, 7, 0)) == utc(2024, 1, 16, 6, 0)

    def test_next_reset_synchronous(self):
        game = make_game("06:00")
        assert get_next_reset_instant(game, now=utc(2024, 1, 16, 5, 0)) == utc(2024, 1, 16, 6, 0)
        assert get_next_reset_instant(game, now=utc(2024, 1, 16, 6, 0)) == utc(2024, 1, 17, 6, 0)

    def test_time_until_reset(self):
        game = make_game("00:00")
        assert get_time_until_reset(game, now=utc(2024, 1, 15, 21, 30)) == (2, 30)
        assert get_time_until_reset(game, now=utc(2024, 1, 15, 21, 29, 30)) == (2, 30)
        assert get_time_until_reset(game, now=utc(2024, 1, 15, 0, 0)) == (24, 0)

    def test_format_time_until_reset(self):
        game = make_game("00:00")
        assert format_time_until_reset(game, now=utc(2024, 1, 15, 21, 55)) == "2:05"

    @pytest.mark.parametrize("reset", ["00:00", "06:00", "22:30"])
    @pytest.mark.parametrize("hour", [0, 5, 6, 12, 22, 23])
    def test_round_trip(self, reset, hour):
        game = make_game(reset)
        now = utc(2024, 5, 10, hour, 17)
        last = get_last_reset_instant(game, now=now)
        hours, minutes = get_time_until_reset(game, now=now)

        assert last <= now < last + timedelta(days=1)
        assert now + timedelta(hours=hours, minutes=minutes) == last + timedelta(days=1)

    def test_asynchronous_reset_keeps_wall_clock_over_dst(self):
        game = make_game("00:00", is_asynchronous=True)
        # 03:00 EDT on the day clocks spring forward
        now = datetime(2024, 3, 10, 7, 0, tzinfo=timezone.utc)

        last = get_last_reset_instant(game, now=now, tz=NEW_YORK)
        assert last == datetime(2024, 3, 10, 0, 0, tzinfo=NEW_YORK)
        assert last.astimezone(timezone.utc) == utc(2024, 3, 10, 5, 0)

        assert get_time_until_reset(game, now=now, tz=NEW_YORK) == (21, 0)


class TestMisc:

    def test_days_between(self):
        assert days_between(date(2024, 1, 15), date(2024, 1, 18)) == 3
        assert days_between(date(2024, 1, 15), date(2024, 1, 15)) == 0

    def test_dates_config_min_datetime(self):
        assert DatesConfig(min_date="2024-06-19").min_datetime() == utc(2024, 6, 19, 0, 0)
