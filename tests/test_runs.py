"""Tests for runs.py — run defaults from prior history."""

import pytest

from models import RunDefaults, RunRecord, TrackType
from runs import (
    average_final_place,
    load_history,
    most_common_track,
    suggest_run_defaults,
)


def _runs(*pairs: tuple[TrackType, int]) -> list[RunRecord]:
    return [RunRecord(track_type=t, final_place=p) for t, p in pairs]


class TestMostCommonTrack:
    """Tests for most_common_track()."""

    def test_most_frequent(self) -> None:
        """The track with the most runs wins."""
        history = _runs(
            (TrackType.TURF_MILE, 1), (TrackType.DIRT, 2), (TrackType.TURF_MILE, 3),
        )

        assert most_common_track(history) is TrackType.TURF_MILE

    def test_tie_keeps_first_seen(self) -> None:
        """Equal counts go to the track reached first in history order."""
        history = _runs(
            (TrackType.DIRT, 1), (TrackType.TURF_LONG, 1),
            (TrackType.TURF_LONG, 1), (TrackType.DIRT, 1),
        )

        assert most_common_track(history) is TrackType.DIRT


class TestAverageFinalPlace:
    """Tests for average_final_place()."""

    @pytest.mark.parametrize(
        ("places", "expected"),
        [([1, 2, 4], 2), ([1, 2], 2), ([3], 3), ([20, 20], 18)],
    )
    def test_rounded_and_clamped(self, places: list[int], expected: int) -> None:
        """The mean is rounded half up and kept within 1-18."""
        history = _runs(*[(TrackType.DIRT, p) for p in places])

        assert average_final_place(history) == expected


class TestSuggestRunDefaults:
    """Tests for suggest_run_defaults() and load_history()."""

    def test_defaults(self) -> None:
        """Both defaults are filled from history."""
        history = _runs((TrackType.TURF_SHORT, 2), (TrackType.TURF_SHORT, 5))

        assert suggest_run_defaults(history) == RunDefaults(TrackType.TURF_SHORT, 4)

    def test_empty_history(self) -> None:
        """No runs means no defaults."""
        assert suggest_run_defaults([]) == RunDefaults(None, None)

    def test_load_history_accepts_camel_case(self) -> None:
        """JSON from the storage layer is converted to RunRecords."""
        data = {1: [{"trackType": "DIRT", "finalPlace": 3, "score": 40000}]}

        history = load_history(data)

        assert history == {"1": [RunRecord(TrackType.DIRT, 3, 40000)]}

    def test_unknown_track_rejected(self) -> None:
        """Track names outside the enum raise ValueError."""
        with pytest.raises(ValueError):
            RunRecord.from_mapping({"track_type": "SAND", "final_place": 1})

    def test_missing_final_place_rejected(self) -> None:
        """A stored run without a final place raises ValueError."""
        with pytest.raises(ValueError):
            RunRecord.from_mapping({"trackType": "DIRT"})
