import re
import logging
from typing import List, Optional

from puzzlelog.core.game_protocol import ShareGrammar, attempts_from_token, compile_pattern
from puzzlelog.core.models import ParsedResult

logger = logging.getLogger(__name__)

# Accuracy suffix Colorfle appends, e.g. "... with a color accuracy of 76.8%"
ACCURACY_PATTERN = re.compile(r"accuracy of\s*([\d.]+)%", re.IGNORECASE)


class AttemptsGrammar(ShareGrammar):
    """
    Games whose header states the attempts used out of a maximum, with "X" for a loss:
        "Wordle 1,643 4/6"
        "nerdlegame 812 X/6"
    header must capture (puzzle number, attempts or X, max attempts).
    """

    def __init__(self, name: str, example: str, header: str, **kwargs):
        self.header = compile_pattern(header)
        kwargs.setdefault("skip", (self.header,))
        super().__init__(name, example, **kwargs)

    def parse(self, text: str, lines: List[str]) -> ParsedResult:
        m = self.header.search(text)
        if m is None:
            raise self.error()
        puzzle_number, score_token, max_token = m.group(1), m.group(2), m.group(3)
        failed, attempts = attempts_from_token(score_token, self.name)
        result = self.result(
            puzzle_number=puzzle_number,
            failed=failed,
            completed=True,
            max_attempts=int(max_token),
            scores={"puzzle1": {"attempts": attempts}},
            grid=self.extract_grid(lines),
        )
        self.extend(result, text, lines)
        return result

    def extend(self, result: ParsedResult, text: str, lines: List[str]) -> None:
        """Hook for per-game extras on top of the attempts score."""


class ColorfleGrammar(AttemptsGrammar):
    def extend(self, result: ParsedResult, text: str, lines: List[str]) -> None:
        m = ACCURACY_PATTERN.search(text)
        accuracy: Optional[float] = float(m.group(1)) if m else None
        result.percentage = accuracy
        result.scores["puzzle1"]["accuracy"] = accuracy if accuracy is not None else 0


class WorldleGrammar(ShareGrammar):
    """
    "#Worldle #1052 (03.12.2024) 3/6 (100%)"
    A Worldle only counts as solved at 100% proximity; the attempts are kept separately.
    """

    header = re.compile(
        r"#Worldle\s+#([\d,]+)(?:\s+\([^)]+\))?\s+(X|\d+)/(\d+)(?:\s+\((\d+)%\))?",
        re.IGNORECASE,
    )

    def parse(self, text: str, lines: List[str]) -> ParsedResult:
        m = self.header.search(text)
        if m is None:
            raise self.error()
        puzzle_number, score_token, max_token, percent_token = m.groups()
        lost, guesses = attempts_from_token(score_token, self.name)
        percentage = int(percent_token) if percent_token else None

        if percentage is not None:
            failed = percentage != 100
        else:
            failed = lost
        result = self.result(
            puzzle_number=puzzle_number,
            max_attempts=int(max_token),
            percentage=percentage,
            guess_count=None if lost else guesses,
            completed=True,
            failed=failed,
            grid=self.extract_grid(lines),
        )
        if percentage is None:
            percentage = 0 if failed else 100
        result.scores = {"puzzle1": {"accuracy": percentage, "attempts": -1 if failed else guesses}}
        return result


WORDLE = AttemptsGrammar(
    "Wordle",
    example="Wordle 1,643 X/6",
    signature=r"\bWordle\s+[\d,]+",
    header=r"\bWordle\s+([\d,]+)\s+(X|\d+)/(\d+)",
    alphabet="⬛⬜🟨🟩🟦🟧",
)

NERDLE = AttemptsGrammar(
    "Nerdle",
    example="nerdlegame 812 3/6",
    signature=r"nerdlegame\s+[\d,]+",
    header=r"nerdlegame\s+([\d,]+)\s+(X|\d+)/(\d+)",
    alphabet="⬛⬜🟪🟩",
)

BANDLE = AttemptsGrammar(
    "Bandle",
    example="Bandle #1227 4/6",
    signature=r"Bandle\s+#[\d,]+",
    header=r"Bandle\s+#([\d,]+)\s+(X|\d+)/(\d+)",
    alphabet="⬛⬜🟨🟩🟥",
)

ANGLE = AttemptsGrammar(
    "Angle",
    example="#Angle #912 3/4",
    signature=r"#Angle\s+#[\d,]+",
    header=r"#Angle\s+#([\d,]+)\s+(X|\d+)/(\d+)",
    alphabet="⬆️⬇️🎉",
)

COLORFLE = ColorfleGrammar(
    "Colorfle",
    example="Colorfle 1010 3/6",
    signature=r"Colorfle\s+[\d,]+",
    header=r"Colorfle\s+([\d,]+)\s+(X|\d+)/(\d+)",
    alphabet="⬛⬜🟨🟩🟦🟧🟥🟪🟫",
)

WORLDLE = WorldleGrammar(
    "Worldle",
    example="#Worldle #1052 (03.12.2024) 3/6 (100%)",
    signature=r"#Worldle\s+#[\d,]+",
    alphabet="⬆⬇⬅➡↗↘↙↖🟩🟨🟥⬜🎉",
    grid_mode="only",
    skip=(r"^\s*#Worldle\s+#[\d,]+", r"streak", r"^\s*🔥", r"new bonus round"),
)
