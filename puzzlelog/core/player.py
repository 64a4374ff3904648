#!/usr/bin/python

import asyncio
import logging
from collections import defaultdict
from datetime import tzinfo
from typing import Dict, List, Optional

from .dates import current_puzzle_day, get_puzzle_day
from .models import Game, GameRecord, ParsedResult, Timestamp
from .streaks import accumulate, latest_record

logger = logging.getLogger(__name__)


class Player:
    """
    In-memory record log for one owner.

    Appends for the same game are serialised with one asyncio.Lock per game, so the
    prior record read by the streak computation is always the one the new record follows.
    """

    def __init__(self, author, tz: Optional[tzinfo] = None):
        self.author = author
        self.tz = tz
        self.records: Dict[str, List[GameRecord]] = {}
        self._locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    @property
    def owner_id(self):
        return getattr(self.author, "id", None)

    @property
    def total_games(self) -> int:
        return sum(len(v) for v in self.records.values())

    async def add_record(
        self,
        game: Game,
        parsed: ParsedResult,
        timestamp: Timestamp,
        share_text: Optional[str] = None,
    ) -> Optional[GameRecord]:
        """
        Append a record for parsed at timestamp with freshly computed streaks.
        Returns None when the puzzle day already has a record or lies in the future.
        """
        async with self._locks[game.game_id]:
            history = self.records.setdefault(game.game_id, [])
            puzzle_day = get_puzzle_day(timestamp, game, self.tz)

            newest_day = current_puzzle_day(game, tz=self.tz)
            if puzzle_day > newest_day:
                logger.warning("Player.add_record: user_id=%s game=%s puzzle day %s is after the current %s; "
                               "this might be a time zone error", self.owner_id, game.game_id, puzzle_day, newest_day)
                return None

            if any(get_puzzle_day(r.created_at, game, self.tz) == puzzle_day for r in history):
                logger.debug("Player.add_record: duplicate ignored for user_id=%s game=%s day=%s",
                             self.owner_id, game.game_id, puzzle_day)
                return None

            prior = latest_record(history, game.game_id)
            streak = accumulate(parsed.failed, timestamp, prior, game, self.tz)
            record = GameRecord(
                owner_id=self.owner_id,
                game_id=game.game_id,
                created_at=timestamp,
                failed=parsed.failed,
                scores=parsed.scores,
                puzzle_number=parsed.puzzle_number,
                grid=parsed.grid,
                share_text=share_text,
                metadata=streak,
            )
            history.append(record)
            logger.debug("Player.add_record: user_id=%s game=%s day=%s streak=%s (total_records=%s)",
                         self.owner_id, game.game_id, puzzle_day, streak, len(history))
            return record

    def get_last_record(self, game_id: str) -> Optional[GameRecord]:
        return latest_record(self.records.get(game_id, []), game_id)

    def played_game_ids(self) -> List[str]:
        return [game_id for game_id, history in self.records.items() if history]
