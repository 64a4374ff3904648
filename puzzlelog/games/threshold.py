import re
import logging
from typing import List

from puzzlelog.core.game_protocol import ShareGrammar, glyphs, strip_glyph_line
from puzzlelog.core.models import ParsedResult

logger = logging.getLogger(__name__)


class ConnectionsGrammar(ShareGrammar):
    """
    Connections
    Puzzle #512
    🟨🟨🟨🟨
    🟩🟦🟩🟩
    A guess row is four colour squares; a solved group is a row of one colour.
    """

    header = re.compile(r"Connections[\s\S]*?Puzzle #([\d,]+)", re.IGNORECASE)
    groups = 4

    def grid_lines(self, lines):
        rows = []
        for line in lines:
            body = strip_glyph_line(line)
            if len(body) == self.groups and all(c in self.alphabet for c in body):
                rows.append(line)
        return rows

    def parse(self, text: str, lines: List[str]) -> ParsedResult:
        m = self.header.search(text)
        if m is None:
            raise self.error()
        rows = self.grid_lines(lines)
        solved = sum(1 for row in rows if len(set(strip_glyph_line(row))) == 1)
        return self.result(
            puzzle_number=m.group(1),
            completed=True,
            failed=solved < self.groups,
            max_attempts=self.groups,
            scores={"puzzle1": {"solved": solved}},
            grid="\n".join(rows) if rows else None,
        )


class Rule34dleGrammar(ShareGrammar):
    """
    Rule34dle Daily 2025-01-14
    7/10
    Solved only with every one of the ten rounds correct.
    """

    header = re.compile(r"Rule34dle Daily ([\d-]+)", re.IGNORECASE)
    fraction = re.compile(r"(\d+)/10\b")
    required = 10

    def parse(self, text: str, lines: List[str]) -> ParsedResult:
        m = self.header.search(text)
        if m is None:
            raise self.error()
        score = self.fraction.search(text)
        if score is None:
            raise self.error('Could not find score in format "n/10"')
        solved = int(score.group(1))
        return self.result(
            puzzle_number=m.group(1),
            completed=True,
            failed=solved < self.required,
            max_attempts=self.required,
            scores={"puzzle1": {"solved": solved}},
            grid=self.extract_grid(lines),
        )


class ScrandleGrammar(ShareGrammar):
    """🟩🟥🟩🟩🟩🟩🟥🟩🟩🟩 8/10 | 2025-01-14 | https://scrandle.com"""

    header = re.compile(
        r"([🟩🟥]+)\s+(\d+)/10\s*\|\s*([\d-]+)\s*\|\s*https://scrandle\.com", re.IGNORECASE
    )
    required = 10

    def parse(self, text: str, lines: List[str]) -> ParsedResult:
        m = self.header.search(text)
        if m is None:
            raise self.error()
        row, solved_token, puzzle_number = m.groups()
        solved = int(solved_token)
        return self.result(
            puzzle_number=puzzle_number,
            completed=True,
            failed=solved < self.required,
            max_attempts=self.required,
            scores={"puzzle1": {"solved": solved}},
            grid=row,
        )


class PokedokuGrammar(ShareGrammar):
    """
    PokeDoku Summary 2025-01-14
    Score: 7/9
    Uniqueness: 340/900
    ✅✅🟥
    ✅✅✅
    🟥✅✅
    """

    header = re.compile(r"PokeDoku\b.*?Score:\s*(\d+)\s*/\s*(\d+)", re.IGNORECASE | re.DOTALL)
    date_pattern = re.compile(r"(\d{4}-\d{2}-\d{2})")
    uniqueness_pattern = re.compile(r"Uniqueness:\s*(\d+)\s*/\s*(\d+)", re.IGNORECASE)
    cells = glyphs("✅🟥")

    def grid_lines(self, lines):
        # the board is the first three consecutive rows of cells
        run: List[str] = []
        for line in lines:
            body = strip_glyph_line(line)
            if body and all(c in self.cells for c in body):
                run.append(line.strip())
                if len(run) == 3:
                    return run
            else:
                run = []
        return []

    def parse(self, text: str, lines: List[str]) -> ParsedResult:
        m = self.header.search(text)
        if m is None:
            raise self.error()
        solved, cells = int(m.group(1)), int(m.group(2))
        date_match = self.date_pattern.search(text[:m.start(1)])

        uniqueness = max_uniqueness = 0
        u = self.uniqueness_pattern.search(text)
        if u is not None:
            uniqueness, max_uniqueness = int(u.group(1)), int(u.group(2))

        return self.result(
            puzzle_number=date_match.group(1) if date_match else None,
            completed=True,
            failed=False,
            max_attempts=cells,
            uniqueness=uniqueness if u else None,
            max_uniqueness=max_uniqueness if u else None,
            scores={"puzzle1": {"solved": solved, "uniqueness": uniqueness, "maxUniqueness": max_uniqueness}},
            grid=self.extract_grid(lines),
        )


CONNECTIONS = ConnectionsGrammar(
    "Connections",
    example="Connections\nPuzzle #512",
    signature=r"Connections[\s\S]*?Puzzle #[\d,]+",
    alphabet="🟦🟩🟨🟪",
)

RULE34DLE = Rule34dleGrammar(
    "r34dle",
    example="Rule34dle Daily 2025-01-14\n7/10",
    signature=r"Rule34dle Daily [\d-]+",
    aliases=("Rule34dle",),
    alphabet="🟩🟥",
)

SCRANDLE = ScrandleGrammar(
    "Scrandle",
    example="🟩🟥🟩🟩🟩🟩🟥🟩🟩🟩 8/10 | 2025-01-14 | https://scrandle.com",
    signature=r"[🟩🟥]+\s+\d+/10\s*\|\s*[\d-]+\s*\|\s*https://scrandle\.com",
)

POKEDOKU = PokedokuGrammar(
    "Pokedoku",
    example="PokeDoku Summary\nScore: 7/9",
    signature=r"PokeDoku\s+(?:Summary|#[\d,]+)",
)
