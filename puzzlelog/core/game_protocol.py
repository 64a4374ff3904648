# puzzlelog/core/game_protocol.py
from __future__ import annotations

import re
from typing import Iterable, List, Optional, Pattern, Protocol, Sequence, runtime_checkable

from .models import ParsedResult

VARIATION_SELECTOR = "\ufe0f"


class ParseError(ValueError):
    """
    Share text did not match a game's grammar. User-facing: the message names the
    game and, where known, an example of the format that game shares.
    """

    def __init__(self, game: Optional[str], expected_format: Optional[str] = None, detail: Optional[str] = None):
        self.game = game
        self.expected_format = expected_format
        self.detail = detail
        if detail:
            message = f"Incorrect share text for {game}. {detail}"
        elif expected_format:
            message = f'Incorrect share text for {game}. Expected format: "{expected_format}"'
        else:
            message = f"Incorrect share text for {game}. Please check the format."
        super().__init__(message)


@runtime_checkable
class Grammar(Protocol):
    name: str
    example: str

    def matches(self, text: str) -> bool:
        """True when the signature pattern claims this text (auto-detection)."""
        ...

    def handles(self, game_name: str) -> bool:
        """True when game_name (case-insensitive) names this grammar or one of its aliases."""
        ...

    def parse(self, text: str, lines: List[str]) -> ParsedResult:
        """
        Parse a share text already known to belong to this game.
        Raise ParseError when the header (or another required part) is missing.
        """
        ...


def compile_pattern(pattern: str | Pattern | None, flags: int = re.IGNORECASE) -> Optional[Pattern]:
    if pattern is None or isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern, flags)


def glyphs(chars: Iterable[str]) -> frozenset[str]:
    stripped = (c.replace(VARIATION_SELECTOR, "") for c in chars)
    return frozenset(c for c in stripped if c)


def strip_glyph_line(line: str) -> str:
    return "".join(c for c in line if not c.isspace() and c != VARIATION_SELECTOR)


def line_has_any(line: str, alphabet: frozenset[str]) -> bool:
    return any(g in line for g in alphabet)


def line_is_only(line: str, alphabet: frozenset[str]) -> bool:
    body = strip_glyph_line(line)
    return bool(body) and all(c in alphabet for c in body)


def attempts_from_token(token: str, game: Optional[str] = None) -> tuple[bool, int]:
    """'X' (any case) -> (failed, -1); a number -> (not failed, attempts)."""
    token = token.strip()
    if token.upper() == "X":
        return True, -1
    if not token.isdigit():
        raise ParseError(game, detail=f"Could not read attempts from \"{token}\".")
    return False, int(token)


class ShareGrammar:
    """
    Common plumbing for one game's share-text grammar: name/alias lookup, the
    auto-detection signature, the expected-format example, and grid extraction
    over the game's declared glyph alphabet.

    grid_mode "any" keeps lines containing at least one alphabet glyph,
    "only" keeps lines made up solely of alphabet glyphs (whitespace ignored).
    skip holds patterns for lines that never belong to the grid (headers, footers).
    """

    def __init__(
        self,
        name: str,
        example: str,
        signature: str | Pattern | None = None,
        aliases: Sequence[str] = (),
        alphabet: Iterable[str] = (),
        grid_mode: str = "any",
        skip: Sequence[str | Pattern] = (),
    ):
        self.name = name
        self.example = example
        self.signature = compile_pattern(signature)
        self.aliases = tuple(aliases)
        self.alphabet = glyphs(alphabet)
        self.grid_mode = grid_mode
        self.skip = tuple(compile_pattern(p) for p in skip)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"

    def matches(self, text: str) -> bool:
        return self.signature is not None and self.signature.search(text) is not None

    def handles(self, game_name: str) -> bool:
        wanted = game_name.strip().casefold()
        return any(wanted == n.casefold() for n in (self.name, *self.aliases))

    def error(self, detail: Optional[str] = None) -> ParseError:
        return ParseError(self.name, self.example, detail)

    def result(self, **fields) -> ParsedResult:
        return ParsedResult(game_name=self.name, **fields)

    def grid_lines(self, lines: Iterable[str]) -> List[str]:
        if not self.alphabet:
            return []
        keep = line_is_only if self.grid_mode == "only" else line_has_any
        out = []
        for line in lines:
            if any(p.search(line) for p in self.skip):
                continue
            if keep(line, self.alphabet):
                out.append(line)
        return out

    def extract_grid(self, lines: Iterable[str]) -> Optional[str]:
        found = self.grid_lines(lines)
        return "\n".join(found) if found else None

    def parse(self, text: str, lines: List[str]) -> ParsedResult:
        raise NotImplementedError
