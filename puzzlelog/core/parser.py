#!/usr/bin/python
from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from puzzlelog.games.fallback import FALLBACK
from puzzlelog.games.registry import GRAMMARS, detect, lookup
from .game_protocol import ParseError, ShareGrammar
from .models import ParsedResult

logger = logging.getLogger(__name__)

# Score fields that legitimately hold text
ALLOWED_STRING_FIELDS = frozenset({"grade"})

__all__ = ["ParseError", "parse_share_text", "detect_game_name", "normalize_result"]


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def normalize_result(result: ParsedResult, today: Optional[date] = None) -> ParsedResult:
    """
    Shape every grammar's output the same way:
    - drop None-valued score fields, then empty sub-puzzle maps; no maps left -> scores None
    - warn (once each) about non-numeric fields other than the allowed text fields
    - default puzzle_number to today's calendar date
    """
    if result.scores:
        cleaned = {}
        for key, fields in result.scores.items():
            kept = {name: value for name, value in (fields or {}).items() if value is not None}
            if not kept:
                continue
            for name, value in kept.items():
                if not _is_number(value) and name not in ALLOWED_STRING_FIELDS:
                    result.parse_warnings.append(
                        f"Parsed non-numeric score value for '{name}' in '{key}': \"{value}\""
                    )
            cleaned[key] = kept
        result.scores = cleaned or None
    else:
        result.scores = None

    result.parse_warnings = list(dict.fromkeys(result.parse_warnings))
    if not result.puzzle_number:
        result.puzzle_number = (today or date.today()).isoformat()
    return result


def detect_game_name(text: str, grammars: Sequence[ShareGrammar] = GRAMMARS) -> Optional[str]:
    grammar = detect(text, grammars)
    return grammar.name if grammar else None


def parse_share_text(
    text: str,
    expected_game: Optional[str] = None,
    *,
    strict: bool = False,
    today: Optional[date] = None,
    grammars: Sequence[ShareGrammar] = GRAMMARS,
) -> Optional[ParsedResult]:
    """
    Parse a pasted share text into a ParsedResult.

    expected_game: run only that game's grammar (name or alias, case-insensitive) and
                   raise ParseError on mismatch instead of trying anything else.
    Otherwise the first grammar whose signature matches is used, and the generic
    fallback when none does. Blank text returns None.
    strict: raise ParseError instead of returning a result carrying parse warnings.
    """
    if not text or not text.strip():
        return None

    lines = text.strip().splitlines()

    if expected_game:
        grammar = lookup(expected_game, grammars)
        if grammar is None:
            known = ", ".join(sorted((g.name for g in grammars), key=str.casefold))
            raise ParseError(expected_game, detail=f"Unknown game. Known games: {known}.")
    else:
        grammar = detect(text, grammars) or FALLBACK

    logger.debug("parse_share_text: grammar=%s expected=%s lines=%s", grammar.name, expected_game, len(lines))
    result = normalize_result(grammar.parse(text, lines), today)

    if result.parse_warnings:
        if strict:
            raise ParseError(
                result.game_name or grammar.name,
                detail="Share text parse warnings: " + "; ".join(result.parse_warnings),
            )
        logger.debug("parse_share_text: %s warnings for %s", len(result.parse_warnings), grammar.name)
    return result
