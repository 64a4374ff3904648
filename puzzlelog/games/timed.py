import re
import logging
import unicodedata
from typing import List

from puzzlelog.core.game_protocol import VARIATION_SELECTOR, ShareGrammar
from puzzlelog.core.models import ParsedResult

logger = logging.getLogger(__name__)

ZERO_WIDTH_JOINER = "\u200d"


def seconds_to_ms(token: str) -> int:
    """ "19.2" -> 19200 """
    return int(round(float(token) * 1000))


def is_emoji_line(line: str) -> bool:
    body = [c for c in line.strip() if not c.isspace()]
    if not body:
        return False
    return all(
        c in (VARIATION_SELECTOR, ZERO_WIDTH_JOINER) or unicodedata.category(c) in ("So", "Sk")
        for c in body
    )


class WantedleGrammar(ShareGrammar):
    """
    WANTEDLE #204 - Hard
    B - 19.2s
    🤠
    Letter grade plus the elapsed time; D and F count as a loss.
    """

    header = re.compile(r"WANTEDLE\s+#([\d,]+)", re.IGNORECASE)
    score_line = re.compile(r"\b([SABCDF])\s*-\s*([\d.]+)s\b", re.IGNORECASE)
    losing_grades = frozenset("DF")

    def grid_lines(self, lines):
        return [line for line in lines if is_emoji_line(line)]

    def parse(self, text: str, lines: List[str]) -> ParsedResult:
        m = self.header.search(text)
        if m is None:
            raise self.error()
        score = self.score_line.search(text, m.end())
        if score is None:
            raise self.error('Could not find score line (e.g., "S - 9.4s", "A - 12.3s", "F - 30.0s")')
        grade = score.group(1).upper()
        time_ms = seconds_to_ms(score.group(2))
        return self.result(
            puzzle_number=m.group(1),
            completed=True,
            failed=grade in self.losing_grades,
            grade=grade,
            time_ms=time_ms,
            scores={"puzzle1": {"time": time_ms, "grade": grade}},
            grid=self.extract_grid(lines),
        )


class TimingleGrammar(ShareGrammar):
    """Timingle #301 ... off by 2.4 seconds"""

    header = re.compile(r"Timingle\s+#([\d,]+)", re.IGNORECASE)
    seconds = re.compile(r"([-+]?\d+(?:\.\d+)?)\s*seconds", re.IGNORECASE)

    def parse(self, text: str, lines: List[str]) -> ParsedResult:
        m = self.header.search(text)
        if m is None:
            raise self.error()
        s = self.seconds.search(text, m.end())
        time_ms = seconds_to_ms(s.group(1)) if s else None
        return self.result(
            puzzle_number=m.group(1),
            completed=True,
            failed=False,
            time_ms=time_ms,
            scores={"puzzle1": {"time": time_ms}},
        )


class ChronophotoGrammar(ShareGrammar):
    """
    I got a score of 342 on today's Chronophoto: 12/25/2025
    Round 1: 0❌
    Round 4: 342
    Points are the sum of the rounds; zero points is a loss.
    """

    header = re.compile(r"I got a score of (\d+) on today['’]s Chronophoto", re.IGNORECASE)
    date_pattern = re.compile(r"Chronophoto: (\d{1,2}/\d{1,2}/\d{4})")
    round_pattern = re.compile(r"Round \d+: (\d+[❌✅]?)")

    def parse(self, text: str, lines: List[str]) -> ParsedResult:
        m = self.header.search(text)
        if m is None:
            raise self.error()
        rounds = [r.group(1) for r in map(self.round_pattern.search, lines) if r]
        if rounds:
            points = sum(int(re.match(r"\d+", r).group(0)) for r in rounds)
        else:
            points = int(m.group(1))
        date_match = self.date_pattern.search(text)
        return self.result(
            puzzle_number=date_match.group(1) if date_match else None,
            completed=True,
            failed=points == 0,
            scores={"puzzle1": {"points": points}},
            grid="\n".join(rounds) if rounds else None,
        )


class ColorGuesserGrammar(ShareGrammar):
    """ColorGuesser #88 ... Score: 412/500"""

    header = re.compile(r"ColorGuesser\s+#([\d,]+).*?Score:\s*(\d+)\s*/\s*(\d+)", re.IGNORECASE | re.DOTALL)

    def parse(self, text: str, lines: List[str]) -> ParsedResult:
        m = self.header.search(text)
        if m is None:
            raise self.error()
        puzzle_number, points, max_points = m.groups()
        return self.result(
            puzzle_number=puzzle_number,
            completed=True,
            failed=False,
            max_attempts=int(max_points),
            scores={"puzzle1": {"points": int(points)}},
        )


WANTEDLE = WantedleGrammar(
    "Wantedle",
    example="WANTEDLE #204 - Hard\nB - 19.2s",
    signature=r"WANTEDLE\s+#[\d,]+",
)

TIMINGLE = TimingleGrammar(
    "Timingle",
    example="Timingle #301 2.4 seconds",
    signature=r"Timingle\s+#[\d,]+",
)

CHRONOPHOTO = ChronophotoGrammar(
    "Chronophoto",
    example="I got a score of N on today's Chronophoto",
    signature=r"Chronophoto",
)

COLORGUESSER = ColorGuesserGrammar(
    "ColorGuesser",
    example="ColorGuesser #88 Score: 412/500",
    signature=r"ColorGuesser\s+#[\d,]+",
    aliases=("Colorguesser", "Color Guesser"),
)
