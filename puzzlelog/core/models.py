from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

Timestamp = Union[datetime, date, str]
ScoreValue = Union[int, float, str]
Scores = Dict[str, Dict[str, ScoreValue]]


@dataclass
class Game:
    """
    Reset configuration for one tracked puzzle game.

    reset_time is "HH:MM" (24h). is_asynchronous=True means the reset fires at
    reset_time on each player's own wall clock; False means one shared instant in UTC.
    score_types maps sub-puzzle -> score field -> max value (-1 = no maximum).
    """
    game_id: str
    display_name: str
    reset_time: str = "00:00"
    is_asynchronous: bool = False
    score_types: Dict[str, Dict[str, int]] = field(default_factory=dict)
    aliases: tuple[str, ...] = ()
    url: str | None = None
    is_failable: bool = True

    def names(self) -> List[str]:
        return [self.game_id, self.display_name, *self.aliases]


@dataclass
class ParsedResult:
    game_name: Optional[str] = None
    failed: bool = False
    completed: bool = False
    scores: Optional[Scores] = None
    puzzle_number: Optional[str] = None
    grid: Optional[str] = None
    max_attempts: Optional[int] = None
    max_guess_number: Optional[int] = None
    percentage: Optional[float] = None
    guess_count: Optional[int] = None
    time_ms: Optional[int] = None
    uniqueness: Optional[int] = None
    max_uniqueness: Optional[int] = None
    grade: Optional[str] = None
    parse_warnings: List[str] = field(default_factory=list)

    @property
    def uniqueness_ratio(self) -> Optional[float]:
        if not self.uniqueness or not self.max_uniqueness:
            return None
        return max(0.0, min(1.0, self.uniqueness / self.max_uniqueness))

    def primary_score(self, sub_puzzle: str = "puzzle1") -> Dict[str, ScoreValue]:
        return dict((self.scores or {}).get(sub_puzzle, {}))


@dataclass(frozen=True)
class StreakState:
    playstreak: int = 0
    winstreak: int = 0
    max_winstreak: int = 0


@dataclass
class GameRecord:
    owner_id: int
    game_id: str
    created_at: Timestamp
    failed: bool
    scores: Optional[Scores] = None
    puzzle_number: Optional[str] = None
    grid: Optional[str] = None
    share_text: Optional[str] = None
    metadata: StreakState = field(default_factory=StreakState)
    extra: Dict[str, Any] = field(default_factory=dict)
    record_id: str = field(default_factory=lambda: uuid.uuid4().hex)
