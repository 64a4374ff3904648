#!/usr/bin/python
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import NamedTuple, Optional

from .models import Game, Timestamp

RESET_TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")
DATE_ONLY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class InvalidGameConfig(ValueError):
    """Raised when a Game carries a reset configuration that cannot be evaluated."""


class TimeUntilReset(NamedTuple):
    hours: int
    minutes: int


@dataclass(frozen=True)
class DatesConfig:
    # Date format used for history catch-up bounds
    date_format: str = "%Y-%m-%d"
    # Earliest date to scan channel history from (formatted by date_format)
    min_date: str = "2024-06-19"

    def min_datetime(self) -> datetime:
        return datetime.strptime(self.min_date, self.date_format).replace(tzinfo=timezone.utc)


def parse_reset_time(value: str) -> tuple[int, int]:
    """
    Split a "HH:MM" reset time into (hour, minute).
    Anything else is a broken Game config and raises instead of defaulting to midnight.
    """
    m = RESET_TIME_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if m is None:
        raise InvalidGameConfig(f"Invalid reset_time {value!r}: expected 24-hour HH:MM")
    return int(m.group(1)), int(m.group(2))


def is_bare_date(ts: Timestamp) -> bool:
    if isinstance(ts, datetime):
        return False
    if isinstance(ts, date):
        return True
    return isinstance(ts, str) and DATE_ONLY_PATTERN.match(ts.strip()) is not None


def to_datetime(ts: Timestamp) -> datetime:
    """Coerce an ISO-8601 string, date or datetime into a datetime (tz-awareness preserved)."""
    if isinstance(ts, datetime):
        return ts
    if isinstance(ts, date):
        return datetime.combine(ts, time())
    return datetime.fromisoformat(ts.strip())


def _as_date(ts: Timestamp) -> date:
    if isinstance(ts, date) and not isinstance(ts, datetime):
        return ts
    return date.fromisoformat(str(ts).strip())


def _in_frame(ts: datetime, game: Game, tz: Optional[tzinfo]) -> datetime:
    """
    Express ts as an aware datetime in the game's frame:
    - synchronous games: UTC
    - asynchronous games: tz if given, otherwise the process's local timezone
    Naive input is taken to already be wall-clock time in that frame.
    """
    if not game.is_asynchronous:
        if ts.tzinfo is None:
            return ts.replace(tzinfo=timezone.utc)
        return ts.astimezone(timezone.utc)
    if tz is not None:
        if ts.tzinfo is None:
            return ts.replace(tzinfo=tz)
        return ts.astimezone(tz)
    # astimezone() on a naive datetime assumes local time
    return ts.astimezone()


def _now(game: Game, now: Optional[datetime], tz: Optional[tzinfo]) -> datetime:
    return _in_frame(now if now is not None else datetime.now(timezone.utc), game, tz)


def _reset_instant(day: date, game: Game, tz: Optional[tzinfo]) -> datetime:
    # Rebuilt from components every time so a DST shift keeps the wall-clock reset time
    hour, minute = parse_reset_time(game.reset_time)
    naive = datetime(day.year, day.month, day.day, hour, minute)
    if not game.is_asynchronous:
        return naive.replace(tzinfo=timezone.utc)
    if tz is not None:
        return naive.replace(tzinfo=tz)
    return naive.astimezone()


def _utc(ts: datetime) -> datetime:
    return ts.astimezone(timezone.utc)


def get_puzzle_day(ts: Timestamp, game: Game, tz: Optional[tzinfo] = None) -> date:
    """
    Map a timestamp to the puzzle day it belongs to.

    The time of day is read in the game's frame (see _in_frame). Anything strictly
    before the reset time belongs to the previous calendar date. A bare date carries
    no time of day and is already a puzzle day.
    """
    hour, minute = parse_reset_time(game.reset_time)
    if is_bare_date(ts):
        return _as_date(ts)
    local = _in_frame(to_datetime(ts), game, tz)
    day = local.date()
    if (local.hour, local.minute) < (hour, minute):
        day = day - timedelta(days=1)
    return day


def current_puzzle_day(game: Game, now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> date:
    return get_puzzle_day(_now(game, now, tz), game, tz)


def is_current_puzzle(
    ts: Timestamp,
    game: Game,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> bool:
    """
    True when ts belongs to the puzzle that is live right now.
    Bare dates (legacy records) are compared to today's UTC date, skipping reset math.
    """
    parse_reset_time(game.reset_time)
    if is_bare_date(ts):
        utc_now = now if now is not None else datetime.now(timezone.utc)
        if utc_now.tzinfo is not None:
            utc_now = _utc(utc_now)
        return _as_date(ts) == utc_now.date()
    return get_puzzle_day(ts, game, tz) == current_puzzle_day(game, now, tz)


def get_last_reset_instant(game: Game, now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> datetime:
    """Most recent instant the reset fired, as an aware datetime in the game's frame."""
    local_now = _now(game, now, tz)
    reset = _reset_instant(local_now.date(), game, tz)
    if _utc(reset) > _utc(local_now):
        reset = _reset_instant(local_now.date() - timedelta(days=1), game, tz)
    return reset


def get_next_reset_instant(game: Game, now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> datetime:
    local_now = _now(game, now, tz)
    reset = _reset_instant(local_now.date(), game, tz)
    if _utc(reset) <= _utc(local_now):
        reset = _reset_instant(local_now.date() + timedelta(days=1), game, tz)
    return reset


def get_time_until_reset(game: Game, now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> TimeUntilReset:
    """Whole hours and remaining minutes until the next reset (seconds are floored away)."""
    local_now = _now(game, now, tz)
    diff = _utc(get_next_reset_instant(game, local_now, tz)) - _utc(local_now)
    total_minutes = max(0, int(diff.total_seconds() // 60))
    return TimeUntilReset(total_minutes // 60, total_minutes % 60)


def format_time_until_reset(game: Game, now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> str:
    hours, minutes = get_time_until_reset(game, now, tz)
    return f"{hours}:{minutes:02d}"


def days_between(earlier: date, later: date) -> int:
    return (later - earlier).days
