import re
import logging
from typing import Dict, List, Optional

from puzzlelog.core.game_protocol import (
    ShareGrammar,
    line_has_any,
    line_is_only,
    strip_glyph_line,
)
from puzzlelog.core.models import ParsedResult

logger = logging.getLogger(__name__)

# Keycap digits Quordle uses for solved words, with or without the variation selector:
#   "6️⃣4️⃣" / "8️⃣🟥"
KEYCAP_PATTERN = re.compile(r"([1-9])\ufe0f?\u20e3")

RED, GREEN, WHITE, PURPLE, CHECK = "🟥", "🟩", "⬜", "🟪", "✅"


def attempts_until_success(glyph_row: str, success: str = GREEN, miss: str = RED) -> int:
    """
    Misses before the first success in a row of one glyph per guess.
    A first-try success is 0; no success glyph -> -1.
    """
    row = strip_glyph_line(glyph_row)
    idx = row.find(success)
    if idx == -1:
        return -1
    return row[:idx].count(miss)


class QuordleGrammar(ShareGrammar):
    """
    Daily Quordle 1012
    6️⃣4️⃣
    8️⃣🟥
    Each keycap is a solved word (its digit is the guess it fell on), each red square a missed word.
    """

    header = re.compile(r"(?:🙂\s*)?Daily Quordle\s+#?([\d,]+)", re.IGNORECASE)
    words = 4
    guesses = 9

    def parse(self, text: str, lines: List[str]) -> ParsedResult:
        m = self.header.search(text)
        if m is None:
            raise self.error()

        solved = 0
        max_guess = 0
        for line in lines:
            if self.header.search(line):
                continue
            for digit in KEYCAP_PATTERN.findall(line):
                solved += 1
                max_guess = max(max_guess, int(digit))

        all_solved = solved >= self.words
        return self.result(
            puzzle_number=m.group(1),
            completed=True,
            failed=not all_solved,
            max_attempts=self.guesses,
            max_guess_number=max_guess or None,
            scores={"puzzle1": {"solved": solved, "attempts": max_guess if all_solved else -1}},
            grid=self.extract_grid(lines),
        )

    def grid_lines(self, lines):
        return [
            line for line in lines
            if not self.header.search(line)
            and (KEYCAP_PATTERN.search(line) or line_has_any(line, self.alphabet))
        ]


class GenshindleGrammar(ShareGrammar):
    """
    I found today's #Genshindle in 3 tries!
    🟪🟩🟩🟩🟩🟩🟩
    ...
    The newest guess comes first; an all-correct first row means solved in len(rows) tries.
    """

    solved_row = PURPLE + GREEN * 6
    max_tries = 5

    def parse(self, text: str, lines: List[str]) -> ParsedResult:
        if not self.matches(text):
            raise self.error()
        rows = self.grid_lines(lines)
        if not rows:
            raise self.error("No emoji grid found.")

        solved = strip_glyph_line(rows[0]) == self.solved_row
        return self.result(
            completed=True,
            failed=not solved,
            max_attempts=self.max_tries,
            scores={"puzzle1": {"attempts": len(rows) if solved else -1}},
            grid="\n".join(rows),
        )


class GamedleGrammar(ShareGrammar):
    """
    Single mode:
        🕹️ Gamedle (Cover art): #1337 🟥🟥🟥🟥🟥🟩
    Summary of several modes:
        Gamedle
        🕹️ (Cover art) #1337:
        🟥🟥🟥🟥🟥🟩
        🎨 (Artwork) #1096:
        🟥🟥🟥🟥🟥🟥
    """

    modes = "Cover art|Artwork|Character|Keywords|Guess"
    max_attempts_by_mode: Dict[str, int] = {
        "cover art": 6,
        "artwork": 6,
        "character": 4,
        "keywords": 6,
        "guess": 10,
    }
    single = re.compile(rf"Gamedle\s+\(({modes})\):\s+#([\d,]+)\s+([🟥🟩⬜]+)", re.IGNORECASE)
    summary_header = re.compile(r"^\s*Gamedle\s*$", re.IGNORECASE | re.MULTILINE)
    summary_entry = re.compile(rf"\(({modes})\)\s+#([\d,]+):\s*([🟥🟩⬜]+)", re.IGNORECASE)

    def parse(self, text: str, lines: List[str]) -> ParsedResult:
        m = self.single.search(text)
        if m is not None:
            mode, puzzle_number, row = m.groups()
            attempts = attempts_until_success(row)
            return self.result(
                puzzle_number=puzzle_number,
                failed=attempts == -1,
                completed=attempts != -1,
                max_attempts=self.max_attempts_by_mode.get(mode.lower(), 6),
                scores={"puzzle1": {"attempts": attempts}},
                grid=row,
            )
        if self.summary_header.search(text):
            return self._parse_summary(text, lines)
        raise self.error()

    def _parse_summary(self, text: str, lines: List[str]) -> ParsedResult:
        scores: Dict[str, Dict[str, int]] = {}
        puzzle_number: Optional[str] = None
        for mode, number, row in self.summary_entry.findall(text):
            key = mode.lower().replace(" ", "_")
            scores[key] = {"attempts": attempts_until_success(row)}
            puzzle_number = puzzle_number or number
        if not scores:
            raise self.error("No Gamedle modes found in the summary.")
        return self.result(
            puzzle_number=puzzle_number,
            completed=True,
            failed=any(s["attempts"] == -1 for s in scores.values()),
            scores=scores,
            grid=self.extract_grid(lines),
        )


class HexcodleGrammar(ShareGrammar):
    """
    I got Hexcodle #869 in 3! Score: 94%
    I didn't get Hexcodle #869. Score: 69%
    Arrow rows per guess, a row of ✅ once solved; five rows is the limit.
    """

    solved_pattern = re.compile(r"Hexcodle\s+#([\d,]+)\s+in\s+(\d+)!.*?Score:\s*(\d+)%", re.IGNORECASE | re.DOTALL)
    scored_pattern = re.compile(r"Hexcodle\s+#([\d,]+).*?Score:\s*(\d+)%", re.IGNORECASE | re.DOTALL)
    max_rows = 5

    def parse(self, text: str, lines: List[str]) -> ParsedResult:
        attempts: Optional[int] = None
        m = self.solved_pattern.search(text)
        if m is not None:
            puzzle_number, attempts_token, percent_token = m.groups()
            attempts = int(attempts_token)
        else:
            m = self.scored_pattern.search(text)
            if m is None:
                raise self.error()
            puzzle_number, percent_token = m.groups()

        rows = self.grid_lines(lines)
        last_solved = bool(rows) and line_is_only(rows[-1], frozenset(CHECK))
        failed = (len(rows) == self.max_rows and not last_solved) or attempts is None
        return self.result(
            puzzle_number=puzzle_number,
            percentage=int(percent_token),
            completed=True,
            failed=failed,
            guess_count=None if failed else len(rows),
            max_attempts=self.max_rows,
            scores={"puzzle1": {"accuracy": int(percent_token), "attempts": -1 if failed else attempts}},
            grid="\n".join(rows) if rows else None,
        )


class SpellcheckGrammar(ShareGrammar):
    """Spellcheck #112 followed by a row per word; every non-red square is a correctly spelled word."""

    header = re.compile(r"Spellcheck\s+#([\d,]+)", re.IGNORECASE)
    misses = frozenset(RED + "❌")
    words = 15

    def parse(self, text: str, lines: List[str]) -> ParsedResult:
        m = self.header.search(text)
        if m is None:
            raise self.error()
        rows = self.grid_lines(lines)
        correct = sum(
            1
            for row in rows
            for ch in strip_glyph_line(row)
            if ch in self.alphabet and ch not in self.misses
        )
        return self.result(
            puzzle_number=m.group(1),
            completed=True,
            failed=False,
            max_attempts=self.words,
            scores={"puzzle1": {"solved": correct}},
            grid="\n".join(rows) if rows else None,
        )


QUORDLE = QuordleGrammar(
    "Quordle",
    example="Daily Quordle 1012",
    signature=r"(?:🙂\s*)?Daily Quordle\s+#?[\d,]+",
    alphabet="🟥⬛⬜🟨🟩",
)

GENSHINDLE = GenshindleGrammar(
    "Genshindle",
    example="I found today's #Genshindle in 3 tries!",
    signature=r"I (?:found|couldn['’]t find) today['’]s #Genshindle",
    alphabet=PURPLE + GREEN + RED,
)

GAMEDLE = GamedleGrammar(
    "Gamedle",
    example="🕹️ Gamedle (Cover art): #1337 🟥🟥🟥🟥🟥🟩",
    signature=re.compile(
        r"Gamedle\s+\((?:Cover art|Artwork|Character|Keywords|Guess)\):|^\s*Gamedle\s*$",
        re.IGNORECASE | re.MULTILINE,
    ),
    alphabet=RED + GREEN + WHITE,
)

HEXCODLE = HexcodleGrammar(
    "Hexcodle",
    example="I got Hexcodle #869 in 3! Score: 94%",
    signature=r"Hexcodle\s+#[\d,]+",
    alphabet="⏫⏬🔼🔽✅",
    skip=(r"Hexcodle\s+#[\d,]+", r"Score:", r"hexcodle\.com"),
)

SPELLCHECK = SpellcheckGrammar(
    "Spellcheck",
    example="Spellcheck #112",
    signature=r"Spellcheck\s+#[\d,]+",
    alphabet="🟥🟩🟦🟨🟧🟪🟫⭐✅❌",
)
