import re
import logging
from typing import Dict, List, Sequence

from puzzlelog.core.game_protocol import ShareGrammar
from puzzlelog.core.models import ParsedResult

logger = logging.getLogger(__name__)


class ModeSummaryGrammar(ShareGrammar):
    """
    "Completed all the modes" summaries, one sub-puzzle per mode line:
        I've completed all the modes of #LoLdle #1261 today:
        ❓ Classic: 8
        💬 Quote: 5
        🔥 Ability: 1 🧠 ✓
    Each mode becomes its own score map keyed by the lower-cased mode name.
    """

    def __init__(self, name: str, example: str, header: str, modes: Sequence[str], **kwargs):
        self.header = re.compile(header, re.IGNORECASE)
        self.modes = tuple(modes)
        self.mode_patterns = {
            mode: re.compile(rf"\b{re.escape(mode)}:\s*(\d+)", re.IGNORECASE) for mode in self.modes
        }
        kwargs.setdefault("signature", self.header)
        super().__init__(name, example, **kwargs)

    def parse(self, text: str, lines: List[str]) -> ParsedResult:
        m = self.header.search(text)
        if m is None:
            raise self.error()

        scores: Dict[str, Dict[str, int]] = {}
        for line in lines:
            for mode, pattern in self.mode_patterns.items():
                found = pattern.search(line)
                if found:
                    scores[mode.lower()] = {"attempts": int(found.group(1))}

        if not scores:
            raise self.error(f"No modes found; expected lines like \"{self.modes[0]}: 4\".")
        logger.debug("%s summary: modes=%s", self.name, sorted(scores))
        return self.result(
            puzzle_number=m.group(1),
            completed=True,
            failed=False,
            scores=scores,
        )


LOLDLE = ModeSummaryGrammar(
    "LoLdle",
    example="I've completed all the modes of #LoLdle #1261 today:",
    header=r"#LoLdle\s+#([\d,]+)",
    modes=("Classic", "Quote", "Ability", "Emoji", "Splash"),
)

POKEDLE = ModeSummaryGrammar(
    "Pokedle",
    example="I've completed all the modes of #Pokedle #799 today:",
    header=r"#Pokedle\s+#([\d,]+)",
    modes=("Classic", "Card", "Description", "Silhouette"),
)
