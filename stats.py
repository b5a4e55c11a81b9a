"""Stat-block screenshot parsing: five stat values and a rank code.

The stats screen is OCR'd with a digits-only whitelist, which usually yields
the five values run together (``"108995341549481"``). When the digit count
fits that layout the run is segmented; otherwise numbers are scanned from the
text as-is. Values outside the stat band are dropped as noise.

Several preprocessing strategies may be tried per image; the block with the
most filled fields wins (see ``select_stat_block``).
"""

import logging
import re
from collections.abc import Iterable
from functools import lru_cache

from config import (
    RANK_CODES,
    STAT_DIGITS_MAX_LENGTH,
    STAT_DIGITS_MIN_LENGTH,
    STAT_FIELDS,
    STAT_MAX,
    STAT_MIN,
    STAT_NUMBER_PATTERN,
)
from models import StatBlock
from strategy import ParseOutcome, Strategy, best_outcome, first_applicable

logger = logging.getLogger(__name__)

STAT_COUNT = len(STAT_FIELDS)

_NON_DIGIT_RE = re.compile(r"\D")
_NUMBER_RE = re.compile(STAT_NUMBER_PATTERN)
_RANK_RE = re.compile(
    r"(?<![A-Za-z0-9+])("
    + "|".join(re.escape(code) for code in RANK_CODES)
    + r")(?![A-Za-z0-9+])"
)


def in_stat_band(value: int) -> bool:
    return STAT_MIN <= value <= STAT_MAX


# ---------------------------------------------------------------------------
# Digit segmentation
# ---------------------------------------------------------------------------


def segment_digits(digits: str, count: int = STAT_COUNT) -> list[int]:
    """Split a run of concatenated stat digits into in-band values.

    Reads left to right. At each position a 4-digit chunk is preferred,
    then a 3-digit chunk, each only if it lies in the stat band; failing
    both, one digit is dropped as noise. Where taking the 4-digit chunk
    would leave too few digits for the remaining stats, the split that
    recovers more values wins.

    Args:
        digits: A string of ASCII digits.
        count: Maximum number of values to recover.

    Returns:
        Up to *count* values in order, each within the stat band.
    """

    @lru_cache(maxsize=None)
    def best_from(pos: int, remaining: int) -> tuple[int, ...]:
        if remaining == 0 or pos >= len(digits):
            return ()
        best: tuple[int, ...] = ()
        for width in (4, 3):
            chunk = digits[pos:pos + width]
            if len(chunk) == width and in_stat_band(int(chunk)):
                found = (int(chunk),) + best_from(pos + width, remaining - 1)
                if len(found) > len(best):
                    best = found
            if len(best) == remaining:
                return best
        skipped = best_from(pos + 1, remaining)
        return skipped if len(skipped) > len(best) else best

    return list(best_from(0, count))


def _digit_segmentation(text: str) -> list[int] | None:
    digits = _NON_DIGIT_RE.sub("", text)
    if not STAT_DIGITS_MIN_LENGTH <= len(digits) <= STAT_DIGITS_MAX_LENGTH:
        return None
    return segment_digits(digits)


def _bounded_scan(text: str) -> list[int]:
    values = []
    for match in _NUMBER_RE.finditer(text):
        value = int(match.group())
        if in_stat_band(value):
            values.append(value)
        else:
            logger.debug("Discarding out-of-band stat value %d", value)
    return values[:STAT_COUNT]


STAT_STRATEGIES: list[Strategy[list[int]]] = [
    Strategy("digit_segmentation", _digit_segmentation, len),
    Strategy("bounded_scan", _bounded_scan, len),
]


# ---------------------------------------------------------------------------
# Rank
# ---------------------------------------------------------------------------


def parse_rank(text: str) -> str:
    """Return the first rank code found in *text*, or ``""``."""
    for line in text.splitlines():
        match = _RANK_RE.search(line)
        if match:
            return match.group(1)
    return ""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_stat_values(text: str) -> list[int]:
    """Extract up to five in-band stat values from OCR text, in order."""
    outcome = first_applicable(STAT_STRATEGIES, text)
    return outcome.value if outcome else []


def parse_stat_block(text: str, rank_text: str | None = None) -> StatBlock:
    """Parse one OCR reading of a stats screenshot.

    Args:
        text: OCR output, ideally produced with a digits-only whitelist.
        rank_text: Separate full-charset OCR output to read the rank from.
            Defaults to *text*.

    Returns:
        A ``StatBlock``. Fields that could not be read are ``0`` (stats) or
        ``""`` (rank); a partial block is a valid result.
    """
    values = parse_stat_values(text)
    rank = parse_rank(text if rank_text is None else rank_text)
    block = StatBlock.from_values(values, rank=rank)
    logger.debug("Stat block %s (%d/%d fields)", block.values, block.filled_count, STAT_COUNT)
    return block


def stat_outcome(strategy: str, block: StatBlock) -> ParseOutcome[StatBlock]:
    """Wrap a parsed block for ``select_stat_block``."""
    return ParseOutcome(strategy, block, block.filled_count)


def select_stat_block(
    outcomes: Iterable[ParseOutcome[StatBlock] | None],
) -> ParseOutcome[StatBlock] | None:
    """Choose the block with the most filled fields across strategies.

    Ties keep the earlier strategy. *outcomes* is consumed lazily and
    iteration stops at the first complete block, so a generator that runs
    preprocessing + OCR per item skips the remaining strategies.
    """
    return best_outcome(outcomes, target=STAT_COUNT)
