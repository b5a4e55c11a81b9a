"""Resolve detected names against caller-supplied rosters and dictionaries.

Two policies:

* Roster matching (race results, character lookups) is permissive: plain
  substring containment in either direction, so OCR junk around a correctly
  read name still matches. Caller order is the tie-break.
* Dictionary matching (skills) is strict: an exact name wins outright,
  otherwise the best containment/similarity score must reach the threshold.

The caller's lists are never mutated, sorted or cached.
"""

import logging
from collections.abc import Sequence

from config import (
    CHARACTER_PREFILTER_LIMIT,
    DICTIONARY_MATCH_THRESHOLD,
    RACE_MATCH_LIMIT,
    REVERSE_CONTAINMENT_MIN_LENGTH,
)
from models import MatchResult, ReferenceEntry
from similarity import similarity

logger = logging.getLogger(__name__)


def _containment_ratio(a: str, b: str) -> float:
    """Length ratio of the shorter to the longer string if one contains the other."""
    if not a or not b:
        return 0.0
    if a in b or b in a:
        return min(len(a), len(b)) / max(len(a), len(b))
    return 0.0


def contains_match(detected_name: str, candidate_name: str) -> bool:
    """Return True if two names match by case-insensitive containment.

    The candidate matches when the detected name contains it, or, for
    detected names of at least ``REVERSE_CONTAINMENT_MIN_LENGTH`` characters,
    when it contains the detected name.
    """
    detected = detected_name.strip().lower()
    candidate = candidate_name.strip().lower()
    if not detected or not candidate:
        return False
    if candidate in detected:
        return True
    return len(detected) >= REVERSE_CONTAINMENT_MIN_LENGTH and detected in candidate


def match_roster(
    detected_name: str,
    candidates: Sequence[ReferenceEntry],
    limit: int = RACE_MATCH_LIMIT,
) -> MatchResult:
    """Find roster entries whose name matches *detected_name* by containment.

    Args:
        detected_name: Name read from the screenshot, possibly with noise.
        candidates: Known entries in the caller's priority order (for
            example most recently used first).
        limit: Maximum number of entries returned.

    Returns:
        Matching entries in caller order, capped at *limit*. The best match
        is the first of them; an empty result has no best match.
    """
    matched = [
        entry for entry in candidates if contains_match(detected_name, entry.name)
    ][:limit]
    best_id = matched[0].id if matched else None
    logger.debug(
        "Roster match for %r: %d candidate(s), best=%r",
        detected_name, len(matched), best_id,
    )
    return MatchResult(candidates=matched, best_match_id=best_id)


def match(
    detected_name: str,
    candidates: Sequence[ReferenceEntry],
) -> MatchResult:
    """Match a race-result name against the roster (see ``match_roster``)."""
    return match_roster(detected_name, candidates)


def match_character(
    detected_name: str,
    candidates: Sequence[ReferenceEntry],
) -> MatchResult:
    """Short-list roster entries for an inline character lookup."""
    return match_roster(detected_name, candidates, CHARACTER_PREFILTER_LIMIT)


def dictionary_score(detected_name: str, candidate_name: str) -> float:
    """Score a dictionary candidate: the better of containment and similarity."""
    detected = detected_name.strip().lower()
    candidate = candidate_name.strip().lower()
    return max(
        _containment_ratio(detected, candidate),
        similarity(detected, candidate),
    )


def match_dictionary(
    detected_name: str,
    candidates: Sequence[ReferenceEntry],
    threshold: float = DICTIONARY_MATCH_THRESHOLD,
) -> MatchResult:
    """Find the dictionary entry closest to *detected_name*.

    An exact case-insensitive name match is returned directly. Otherwise
    every entry is scored with ``dictionary_score`` and the highest scorer
    is accepted only if it reaches *threshold*; ties keep caller order.

    Args:
        detected_name: Name read from the screenshot.
        candidates: Dictionary entries.
        threshold: Minimum score to accept a fuzzy match.

    Returns:
        A ``MatchResult`` holding at most one entry.
    """
    wanted = detected_name.strip().lower()
    if not wanted:
        return MatchResult()

    for entry in candidates:
        if entry.name.strip().lower() == wanted:
            return MatchResult(candidates=[entry], best_match_id=entry.id)

    best_entry: ReferenceEntry | None = None
    best_score = 0.0
    for entry in candidates:
        score = dictionary_score(wanted, entry.name)
        if score > best_score:
            best_entry, best_score = entry, score

    if best_entry is None or best_score < threshold:
        logger.debug(
            "No dictionary match for %r (best score %.2f)", detected_name, best_score
        )
        return MatchResult()

    logger.debug(
        "Dictionary match %r -> %r (score %.2f)",
        detected_name, best_entry.name, best_score,
    )
    return MatchResult(candidates=[best_entry], best_match_id=best_entry.id)
