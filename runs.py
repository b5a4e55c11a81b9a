"""Defaults for a new run, derived from a character's prior runs."""

import logging
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Optional

from config import FINAL_PLACE_MAX, FINAL_PLACE_MIN
from models import RunDefaults, RunRecord, TrackType

logger = logging.getLogger(__name__)


def most_common_track(history: Sequence[RunRecord]) -> Optional[TrackType]:
    """Return the most frequent track; ties go to the track seen first."""
    if not history:
        return None
    # Counter keeps first-insertion order for equal counts.
    counts = Counter(run.track_type for run in history)
    return counts.most_common(1)[0][0]


def average_final_place(history: Sequence[RunRecord]) -> Optional[int]:
    """Return the mean final place, rounded and clamped to the valid range."""
    if not history:
        return None
    mean = sum(run.final_place for run in history) / len(history)
    place = int(mean + 0.5)
    return max(FINAL_PLACE_MIN, min(FINAL_PLACE_MAX, place))


def suggest_run_defaults(history: Sequence[RunRecord]) -> RunDefaults:
    """Pre-fill track and final place for a new run of one character.

    Args:
        history: The character's prior runs as read by the caller.

    Returns:
        ``RunDefaults`` with both fields ``None`` when there is no history.
    """
    defaults = RunDefaults(
        track_type=most_common_track(history),
        final_place=average_final_place(history),
    )
    logger.debug("Run defaults from %d run(s): %s", len(history), defaults)
    return defaults


def load_history(
    data: Mapping[str, Iterable[Mapping[str, Any]]],
) -> dict[str, list[RunRecord]]:
    """Convert a JSON-style ``{character_id: [run, ...]}`` mapping."""
    return {
        str(character_id): [RunRecord.from_mapping(run) for run in runs]
        for character_id, runs in data.items()
    }
