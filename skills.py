"""Skill-list screenshot parsing: unique skill level and skill names.

The skills screen shows two columns of skill names. OCR sometimes keeps the
columns as separate lines and sometimes glues a left and right entry onto one
line, occasionally with a pipe, a close-paren or a misread rarity badge
(``B``/``O``) in between. Each line goes through an ordered list of split
strategies; the first that applies decides the fragments.
"""

import logging
import re

from config import (
    CHARACTER_LINE_PATTERN,
    DECORATIVE_MARKS,
    LEVEL_PATTERN,
    MIN_NAME_LENGTH,
    RANK_CODES,
    RARITY_MARKERS,
    SKILL_LEVEL_MAX,
    SKILL_LEVEL_MAX_DIGITS,
    SKILL_LEVEL_MIN,
)
from models import SkillCandidate, SkillParseResult
from strategy import Strategy, first_applicable

logger = logging.getLogger(__name__)

_LEVEL_RE = re.compile(LEVEL_PATTERN, re.IGNORECASE)
_LEVEL_LINE_RE = re.compile(r"^\s*" + LEVEL_PATTERN + r"\s*$", re.IGNORECASE)
_RANK_LINE_RE = re.compile(
    r"^\s*(?:Rank\s*[:\-]?\s*)?(?:"
    + "|".join(re.escape(code) for code in RANK_CODES)
    + r")\s*$",
    re.IGNORECASE,
)
_DIGITS_LINE_RE = re.compile(r"^[\d\s.,:/\-]+$")
_CHARACTER_LINE_RE = re.compile(CHARACTER_LINE_PATTERN)

_MARKER = f"[{RARITY_MARKERS}]"
_RARITY_SPLIT_RE = re.compile(
    r"\)\s*(?=[A-Z])"
    rf"|(?<=[a-z])\s*{_MARKER}\s*(?=[A-Z])"
)
_COLUMN_GAP_RE = re.compile(r"(?<=[a-z])\s{2,}(?=[A-Z][a-z])")

_DECORATIVE_RE = re.compile(f"[{re.escape(DECORATIVE_MARKS)}]")
_DIGIT_NOTE_RE = re.compile(r"[\(\[]\s*\d+\s*[\)\]]|\b\d+\b")
_EDGE_MARKER_RE = re.compile(rf"^{_MARKER}\s+|\s+{_MARKER}$")
_LETTER_RE = re.compile(r"[^\W\d_]")


# ---------------------------------------------------------------------------
# Unique skill level
# ---------------------------------------------------------------------------


def parse_unique_skill_level(text: str) -> int:
    """Return the first unique skill level in 1-6 found in *text*, else 0."""
    for match in _LEVEL_RE.finditer(text):
        digits = match.group(1)
        if len(digits) <= SKILL_LEVEL_MAX_DIGITS:
            level = int(digits)
            if SKILL_LEVEL_MIN <= level <= SKILL_LEVEL_MAX:
                return level
        logger.debug("Discarding out-of-range skill level %.10s", digits)
    return 0


# ---------------------------------------------------------------------------
# Column split strategies
# ---------------------------------------------------------------------------


def _split_pipe(line: str) -> list[str] | None:
    if "|" not in line:
        return None
    return line.split("|")


def _split_rarity_marker(line: str) -> list[str] | None:
    parts = _RARITY_SPLIT_RE.split(line)
    return parts if len(parts) > 1 else None


def _split_paren_scan(line: str) -> list[str] | None:
    # A ")" closing the left entry, then marks or spaces, then a capital.
    for i, char in enumerate(line):
        if char != ")":
            continue
        j = i + 1
        while j < len(line) and not line[j].isalnum():
            j += 1
        if j < len(line) and line[j].isupper():
            return [line[:i], line[j:]]
    return None


def _split_column_gap(line: str) -> list[str] | None:
    parts = _COLUMN_GAP_RE.split(line)
    return parts if len(parts) > 1 else None


def _whole_line(line: str) -> list[str]:
    return [line]


SPLIT_STRATEGIES: list[Strategy[list[str]]] = [
    Strategy("pipe", _split_pipe),
    Strategy("rarity_marker", _split_rarity_marker),
    Strategy("paren_scan", _split_paren_scan),
    Strategy("column_gap", _split_column_gap),
    Strategy("whole_line", _whole_line),
]


def split_columns(line: str) -> list[str]:
    """Split one OCR line into the raw fragments of its column entries."""
    outcome = first_applicable(SPLIT_STRATEGIES, line)
    return outcome.value if outcome else [line]


# ---------------------------------------------------------------------------
# Fragment cleanup
# ---------------------------------------------------------------------------


def clean_skill_name(fragment: str) -> str:
    """Strip marks, markers and digit annotations from a skill fragment.

    Returns:
        The cleaned name, or ``""`` if nothing usable is left.
    """
    name = _DECORATIVE_RE.sub(" ", fragment)
    name = _DIGIT_NOTE_RE.sub(" ", name)
    name = " ".join(name.split())
    name = name.strip(")").strip()
    previous = None
    while previous != name:
        previous = name
        name = _EDGE_MARKER_RE.sub("", name).strip(")").strip()
    if len(name) < MIN_NAME_LENGTH or not _LETTER_RE.search(name):
        return ""
    return name


def _is_skipped_line(line: str) -> bool:
    return bool(
        _DIGITS_LINE_RE.match(line)
        or _LEVEL_LINE_RE.match(line)
        or _RANK_LINE_RE.match(line)
        or _CHARACTER_LINE_RE.match(line)
    )


def dedupe_skills(skills: list[SkillCandidate]) -> list[SkillCandidate]:
    """Drop case-insensitive duplicate names, keeping first occurrences."""
    seen: set[str] = set()
    unique = []
    for skill in skills:
        key = skill.name.casefold()
        if key in seen:
            continue
        seen.add(key)
        unique.append(skill)
    return unique


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_skill_names(text: str) -> list[SkillCandidate]:
    """Extract skill names from skills-screen OCR text.

    Every skill comes back with ``is_rare=False``; rarity is only known after
    dictionary resolution (see ``dictionary.resolve_skills``).
    """
    skills = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or _is_skipped_line(line):
            continue
        for fragment in split_columns(line):
            name = clean_skill_name(fragment)
            if name:
                skills.append(SkillCandidate(name=name))
            else:
                logger.debug("Dropping skill fragment %r", fragment)
    return dedupe_skills(skills)


def parse_skills(text: str) -> SkillParseResult:
    """Parse one skills screenshot's OCR text.

    Args:
        text: Raw multi-line OCR output.

    Returns:
        The unique skill level (``0`` when not found) and the deduplicated
        skill names in reading order.
    """
    result = SkillParseResult(
        unique_skill_level=parse_unique_skill_level(text),
        skills=parse_skill_names(text),
    )
    logger.debug(
        "Parsed %d skill(s), unique skill level %d",
        len(result.skills), result.unique_skill_level,
    )
    return result
