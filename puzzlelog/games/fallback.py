import re
import logging
from typing import List

from puzzlelog.core.game_protocol import ShareGrammar, attempts_from_token, glyphs, line_is_only
from puzzlelog.core.models import ParsedResult

logger = logging.getLogger(__name__)

# "Wordle 1,643 X/6", "Some Game 12 4/8"
LABELLED_SCORE = re.compile(r"([\w\s]+?)\s+([\d,]+)\s+(X|\d+)/(\d+)", re.IGNORECASE)
# "4/6", "X/6"
BARE_SCORE = re.compile(r"\b(X|\d+)/(\d+)", re.IGNORECASE)

SUCCESS_GLYPHS = glyphs("🟩✅🟢")


class FallbackGrammar(ShareGrammar):
    """
    Best effort for games without a grammar: the first "<label> <n> <score>/<max>"
    (or bare "<score>/<max>") line gives the score, and any line containing a known
    marker glyph joins the grid. Without a score line the grid decides: a last row
    made only of success glyphs is a win in len(grid) attempts, anything else a loss.
    """

    def parse(self, text: str, lines: List[str]) -> ParsedResult:
        result = ParsedResult()
        score_found = False

        for line in lines:
            m = LABELLED_SCORE.search(line)
            if m is not None:
                label, puzzle_number, score_token, max_token = m.groups()
                result.game_name = label.strip() or None
                result.puzzle_number = puzzle_number
            else:
                m = BARE_SCORE.search(line)
                if m is None:
                    continue
                score_token, max_token = m.groups()
            result.failed, attempts = attempts_from_token(score_token, self.name)
            result.completed = True
            result.max_attempts = int(max_token)
            result.scores = {"puzzle1": {"attempts": attempts}}
            score_found = True
            break

        rows = self.grid_lines(lines)
        if rows:
            result.grid = "\n".join(rows)
            if not score_found:
                solved = line_is_only(rows[-1], SUCCESS_GLYPHS)
                result.completed = True
                result.failed = not solved
                result.max_attempts = len(rows)
                result.scores = {"puzzle1": {"attempts": len(rows) if solved else -1}}

        logger.debug("fallback: score_found=%s grid_rows=%s", score_found, len(rows))
        return result

    def grid_lines(self, lines):
        return super().grid_lines(line for line in lines if not _is_link_or_blank(line))


def _is_link_or_blank(line: str) -> bool:
    return not line.strip() or "http://" in line or "https://" in line or ".com" in line


FALLBACK = FallbackGrammar(
    "Generic",
    example="<Game> <number> <score>/<max>",
    alphabet="⬛⬜🟨🟩🟦🟧🟥🟪🟫⭐✅❌🔴🔵🟢🟡⚪",
)
