"""
Ordered grammar table used for auto-detection.

The first grammar whose signature matches a share text owns it. Signatures are
written to be mutually exclusive over real share texts, so the order only has
to put the loosest signature (Wordle) last.
"""
from typing import Optional, Sequence

from puzzlelog.core.game_protocol import ShareGrammar
from .attempts import ANGLE, BANDLE, COLORFLE, NERDLE, WORDLE, WORLDLE
from .counted import GAMEDLE, GENSHINDLE, HEXCODLE, QUORDLE, SPELLCHECK
from .fallback import FALLBACK
from .summaries import LOLDLE, POKEDLE
from .threshold import CONNECTIONS, POKEDOKU, RULE34DLE, SCRANDLE
from .timed import CHRONOPHOTO, COLORGUESSER, TIMINGLE, WANTEDLE

GRAMMARS: Sequence[ShareGrammar] = (
    WANTEDLE,
    CHRONOPHOTO,
    ANGLE,
    GENSHINDLE,
    GAMEDLE,
    RULE34DLE,
    SCRANDLE,
    CONNECTIONS,
    QUORDLE,
    WORLDLE,
    NERDLE,
    COLORFLE,
    HEXCODLE,
    COLORGUESSER,
    TIMINGLE,
    SPELLCHECK,
    POKEDOKU,
    LOLDLE,
    POKEDLE,
    BANDLE,
    WORDLE,
)


def detect(text: str, grammars: Sequence[ShareGrammar] = GRAMMARS) -> Optional[ShareGrammar]:
    for grammar in grammars:
        if grammar.matches(text):
            return grammar
    return None


def lookup(game_name: str, grammars: Sequence[ShareGrammar] = GRAMMARS) -> Optional[ShareGrammar]:
    for grammar in grammars:
        if grammar.handles(game_name):
            return grammar
    if FALLBACK.handles(game_name):
        return FALLBACK
    return None
