#!/usr/bin/python
from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional

from .dates import parse_reset_time
from .models import Game

logger = logging.getLogger(__name__)

# Reset configuration for the games the bot knows out of the box.
# Asynchronous games roll over at each player's local midnight, the rest at a shared UTC instant.
DEFAULT_GAMES: List[Game] = [
    Game("wordle", "Wordle", "00:00", True, {"puzzle1": {"attempts": 6}}, url="https://www.nytimes.com/games/wordle"),
    Game("connections", "Connections", "00:00", True, {"puzzle1": {"solved": 4}}),
    Game("quordle", "Quordle", "00:00", True, {"puzzle1": {"solved": 4, "attempts": 9}}),
    Game("nerdle", "Nerdle", "00:00", True, {"puzzle1": {"attempts": 6}}),
    Game("worldle", "Worldle", "00:00", True, {"puzzle1": {"accuracy": 100, "attempts": 6}}),
    Game("colorfle", "Colorfle", "00:00", False, {"puzzle1": {"attempts": 6, "accuracy": 100}}),
    Game("bandle", "Bandle", "00:00", False, {"puzzle1": {"attempts": 6}}),
    Game("angle", "Angle", "00:00", False, {"puzzle1": {"attempts": 4}}),
    Game("hexcodle", "Hexcodle", "00:00", False, {"puzzle1": {"accuracy": 100, "attempts": 5}}),
    Game("genshindle", "Genshindle", "00:00", False, {"puzzle1": {"attempts": 5}}),
    Game("gamedle", "Gamedle", "00:00", False, {
        "puzzle1": {"attempts": 6},
        "cover_art": {"attempts": 6},
        "artwork": {"attempts": 6},
        "character": {"attempts": 4},
        "keywords": {"attempts": 6},
        "guess": {"attempts": 10},
    }),
    Game("loldle", "LoLdle", "06:00", False, {
        "classic": {"attempts": -1},
        "quote": {"attempts": -1},
        "ability": {"attempts": -1},
        "emoji": {"attempts": -1},
        "splash": {"attempts": -1},
    }, is_failable=False),
    Game("pokedle", "Pokedle", "22:00", False, {
        "classic": {"attempts": -1},
        "card": {"attempts": -1},
        "description": {"attempts": -1},
        "silhouette": {"attempts": -1},
    }, is_failable=False),
    Game("pokedoku", "Pokedoku", "00:00", False,
         {"puzzle1": {"solved": 9, "uniqueness": -1, "maxUniqueness": -1}}, is_failable=False),
    Game("spellcheck", "Spellcheck", "00:00", True, {"puzzle1": {"solved": 15}}, is_failable=False),
    Game("r34dle", "r34dle", "00:00", False, {"puzzle1": {"solved": 10}}, aliases=("Rule34dle",)),
    Game("scrandle", "Scrandle", "00:00", False, {"puzzle1": {"solved": 10}}),
    Game("chronophoto", "Chronophoto", "00:00", True, {"puzzle1": {"points": -1}}),
    Game("colorguesser", "ColorGuesser", "00:00", False, {"puzzle1": {"points": 500}}, is_failable=False),
    Game("timingle", "Timingle", "00:00", True, {"puzzle1": {"time": -1}}, is_failable=False),
    Game("wantedle", "Wantedle", "00:00", False, {"puzzle1": {"time": -1, "grade": -1}}),
]


class GameCatalog:
    """
    Game configurations by id, display name or alias (case-insensitive).
    Reset times are validated on registration so a broken config fails at startup,
    not in the middle of a streak computation.
    """

    def __init__(self, games: Iterable[Game] = DEFAULT_GAMES):
        self._games: Dict[str, Game] = {}
        self._names: Dict[str, str] = {}
        for game in games:
            self.register(game)

    def register(self, game: Game) -> None:
        parse_reset_time(game.reset_time)
        self._games[game.game_id] = game
        for name in game.names():
            self._names[name.casefold()] = game.game_id
        logger.debug("GameCatalog.register: %s reset=%s async=%s", game.game_id, game.reset_time, game.is_asynchronous)

    def get(self, name: Optional[str]) -> Optional[Game]:
        if not name:
            return None
        game_id = self._names.get(name.strip().casefold())
        return self._games.get(game_id) if game_id else None

    def __iter__(self) -> Iterator[Game]:
        return iter(self._games.values())

    def __len__(self) -> int:
        return len(self._games)
