"""Race-result screenshot parsing: character names and scores.

The result screen does not keep names and scores in stable separate fields,
so parsing is anchored on score lines. The name is read from the same line
when enough of it is left after removing the score, otherwise from the line
right above it.
"""

import logging
import re

from config import (
    DECORATIVE_PHRASES,
    MIN_NAME_LENGTH,
    RANK_ICON_PATTERN,
    SCORE_MAX_DIGITS,
    SCORE_PATTERN,
)
from models import RaceResultCandidate

logger = logging.getLogger(__name__)

_SCORE_RE = re.compile(SCORE_PATTERN, re.IGNORECASE)
_RANK_ICON_RE = re.compile(RANK_ICON_PATTERN)
_DECORATIVE_RE = re.compile(
    "|".join(re.escape(p) for p in DECORATIVE_PHRASES), re.IGNORECASE
)


def _clean_name(name: str) -> str:
    name = _DECORATIVE_RE.sub(" ", name)
    return " ".join(name.split())


def parse_score(line: str) -> int | None:
    """Return the score on *line*, or ``None`` if it is not a score line.

    >>> parse_score("Gold Ship 44,426 pts")
    44426
    """
    match = _SCORE_RE.search(line)
    if match is None:
        return None
    digits = match.group(1).replace(",", "")
    if not digits or len(digits) > SCORE_MAX_DIGITS:
        return None
    return int(digits)


def parse_race_results(text: str) -> list[RaceResultCandidate]:
    """Extract ``(name, score)`` pairs from race-result OCR text.

    Args:
        text: Raw multi-line OCR output for one screenshot.

    Returns:
        Candidates in screenshot line order. Lines whose name or score cannot
        be recovered are skipped, so the list may be empty.
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    results: list[RaceResultCandidate] = []

    for i, line in enumerate(lines):
        match = _SCORE_RE.search(line)
        if match is None:
            continue

        score = parse_score(line) or 0

        name = (line[:match.start()] + " " + line[match.end():]).strip()
        name = _RANK_ICON_RE.sub("", name).strip()

        # Name rendered on its own line above the score.
        if len(name) < MIN_NAME_LENGTH and i > 0:
            previous = lines[i - 1]
            if _SCORE_RE.search(previous) is None:
                name = previous

        name = _clean_name(name)

        if len(name) < MIN_NAME_LENGTH or score <= 0:
            logger.debug(
                "Skipping score line %r (name=%r, score=%d)", line, name, score
            )
            continue

        results.append(RaceResultCandidate(detected_name=name, score=score))

    logger.debug("Parsed %d race result(s) from %d line(s)", len(results), len(lines))
    return results
