#!/usr/bin/python
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Iterable, List, Optional, Tuple

from .dates import current_puzzle_day, days_between, get_puzzle_day, to_datetime
from .models import Game, GameRecord, StreakState, Timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreakDisplay:
    playstreak: int
    winstreak: int
    max_winstreak: int
    streak_at_risk: bool


def first_streak(failed: bool) -> StreakState:
    winstreak = 0 if failed else 1
    return StreakState(playstreak=1, winstreak=winstreak, max_winstreak=winstreak)


def accumulate(
    failed: bool,
    timestamp: Timestamp,
    prior: Optional[GameRecord],
    game: Game,
    tz: Optional[tzinfo] = None,
) -> StreakState:
    """
    Compute the streak triple for a new record from the most recent prior record
    of the same (owner, game).

    - No prior record: play 1, win 1 (or 0 on a loss).
    - Prior exactly one puzzle day earlier: play streak extends; the win streak
      extends only if both are wins, restarts at 1 after a loss, and drops to 0 on a loss.
    - Any other gap (missed day, same day, earlier day): both restart.
    max_winstreak never decreases.
    """
    if prior is None:
        return first_streak(failed)

    days_diff = days_between(
        get_puzzle_day(prior.created_at, game, tz),
        get_puzzle_day(timestamp, game, tz),
    )
    previous = prior.metadata

    if days_diff == 1:
        playstreak = previous.playstreak + 1
        if failed:
            winstreak = 0
        elif prior.failed:
            winstreak = 1
        else:
            winstreak = previous.winstreak + 1
    else:
        playstreak = 1
        winstreak = 0 if failed else 1

    max_winstreak = max(previous.max_winstreak, winstreak)
    logger.debug("accumulate: game=%s days_diff=%s failed=%s -> play=%s win=%s max=%s",
                 game.game_id, days_diff, failed, playstreak, winstreak, max_winstreak)
    return StreakState(playstreak=playstreak, winstreak=winstreak, max_winstreak=max_winstreak)


def replay(history: Iterable[Tuple[bool, Timestamp]], game: Game, tz: Optional[tzinfo] = None) -> List[StreakState]:
    """
    Rebuild streaks for an ordered history of (failed, timestamp) pairs, each entry
    accumulated against the one before it.
    """
    states: List[StreakState] = []
    prior: Optional[GameRecord] = None
    for failed, timestamp in history:
        state = accumulate(failed, timestamp, prior, game, tz)
        states.append(state)
        prior = GameRecord(owner_id=0, game_id=game.game_id, created_at=timestamp,
                           failed=failed, metadata=state)
    return states


def _sort_key(ts: Timestamp) -> datetime:
    dt = to_datetime(ts)
    # naive timestamps are ordered as if they were UTC
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def latest_record(records: Iterable[GameRecord], game_id: str) -> Optional[GameRecord]:
    """Most recent record for game_id by created_at, or None."""
    candidates = [r for r in records if r.game_id == game_id and r.created_at]
    if not candidates:
        return None
    return max(candidates, key=lambda r: _sort_key(r.created_at))


def display_streaks(
    latest: Optional[GameRecord],
    game: Game,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> StreakDisplay:
    """
    Presentation view of the stored streaks.
    Played yesterday but not today -> at risk. Older than yesterday -> the current
    streaks show as 0, the stored record is left as is.
    """
    if latest is None:
        return StreakDisplay(0, 0, 0, False)

    stored = latest.metadata
    gap = days_between(get_puzzle_day(latest.created_at, game, tz), current_puzzle_day(game, now, tz))
    if gap == 1:
        return StreakDisplay(stored.playstreak, stored.winstreak, stored.max_winstreak, True)
    if gap > 1:
        return StreakDisplay(0, 0, stored.max_winstreak, False)
    return StreakDisplay(stored.playstreak, stored.winstreak, stored.max_winstreak, False)
