"""Tests for matching.py and similarity.py — roster and dictionary matching."""

import pytest

from matching import (
    contains_match,
    dictionary_score,
    match,
    match_character,
    match_dictionary,
    match_roster,
)
from models import ReferenceEntry
from similarity import edit_distance, similarity


# ---------------------------------------------------------------------------
# similarity
# ---------------------------------------------------------------------------

class TestSimilarity:
    """Tests for edit_distance() and similarity()."""

    def test_edit_distance(self) -> None:
        """Classic Levenshtein distance."""
        assert edit_distance("kitten", "sitting") == 3

    @pytest.mark.parametrize(
        ("a", "b", "expected"),
        [
            ("", "", 1.0),
            ("abc", "abc", 1.0),
            ("Gold Ship", "gold ship", 1.0),
            ("abc", "", 0.0),
            ("kitten", "sitting", 4 / 7),
        ],
    )
    def test_similarity(self, a: str, b: str, expected: float) -> None:
        """(max_len - distance) / max_len over lower-cased input."""
        assert similarity(a, b) == pytest.approx(expected)


# ---------------------------------------------------------------------------
# Roster matching
# ---------------------------------------------------------------------------

class TestMatchRoster:
    """Tests for match(), match_roster() and contains_match()."""

    def test_noise_around_name(self, roster: list[ReferenceEntry]) -> None:
        """A roster name inside OCR noise matches."""
        result = match("xs Gold Ship !,af", roster)

        assert [c.id for c in result.candidates] == [1]
        assert result.best_match_id == 1

    def test_two_characters_do_not_reverse_match(self) -> None:
        """A two-character detection never matches by reverse containment."""
        result = match("go", [ReferenceEntry(id=1, name="Gold Ship")])

        assert result.candidates == []
        assert result.best_match_id is None

    def test_reverse_containment(self, roster: list[ReferenceEntry]) -> None:
        """A truncated detection of three or more characters matches."""
        assert match("Suzuka", roster).best_match_id == 3

    def test_case_insensitive(self, roster: list[ReferenceEntry]) -> None:
        """Matching ignores case."""
        assert match("TOKAI TEIO", roster).best_match_id == 4

    def test_caller_order_is_tie_break(self) -> None:
        """The first matching entry in caller order is the best match."""
        entries = [
            ReferenceEntry(id="recent", name="Special Week"),
            ReferenceEntry(id="older", name="Special Week"),
        ]

        assert match("Special Week", entries).best_match_id == "recent"

    def test_limit(self) -> None:
        """Results are capped at the race limit (10) or a custom limit."""
        entries = [ReferenceEntry(id=i, name=f"Ship {i}") for i in range(12)]

        assert len(match_roster("Ship", entries).candidates) == 10
        assert len(match_roster("Ship", entries, limit=5).candidates) == 5
        assert [c.id for c in match_roster("Ship", entries, limit=3).candidates] == [0, 1, 2]

    def test_character_lookup_keeps_five(self) -> None:
        """Inline character lookups return at most five entries."""
        entries = [ReferenceEntry(id=i, name=f"Ship {i}") for i in range(8)]

        result = match_character("Ship", entries)

        assert [c.id for c in result.candidates] == [0, 1, 2, 3, 4]
        assert result.best_match_id == 0

    def test_caller_list_not_mutated(self, roster: list[ReferenceEntry]) -> None:
        """The roster is read only."""
        before = list(roster)

        match("Gold Ship", roster)

        assert roster == before

    def test_no_match(self, roster: list[ReferenceEntry]) -> None:
        """Unknown names give an empty result, not an error."""
        result = match("Haru Urara", roster)

        assert result.candidates == []
        assert not result.matched

    def test_empty_names_never_match(self) -> None:
        """Empty strings on either side do not match."""
        assert not contains_match("", "Gold Ship")
        assert not contains_match("Gold Ship", "")


# ---------------------------------------------------------------------------
# Dictionary matching
# ---------------------------------------------------------------------------

class TestMatchDictionary:
    """Tests for match_dictionary() and dictionary_score()."""

    def test_exact_name(self, skill_dictionary: list[ReferenceEntry]) -> None:
        """An exact case-insensitive name wins outright."""
        result = match_dictionary("corner adept", skill_dictionary)

        assert result.best_match_id == "s3"

    def test_one_edit_on_twenty_characters(
        self, skill_dictionary: list[ReferenceEntry],
    ) -> None:
        """Similarity 0.95 is above the threshold."""
        assert similarity("Corner Recovery Pius", "Corner Recovery Plus") == pytest.approx(0.95)

        result = match_dictionary("Corner Recovery Pius", skill_dictionary)

        assert result.best_match_id == "s2"
        assert [c.name for c in result.candidates] == ["Corner Recovery Plus"]

    def test_six_edits_on_ten_characters(self) -> None:
        """Similarity 0.4 is below the threshold."""
        entries = [ReferenceEntry(id=1, name="abcdefghij")]
        assert similarity("abcdzzzzzz", "abcdefghij") == pytest.approx(0.4)

        result = match_dictionary("abcdzzzzzz", entries)

        assert not result.matched
        assert result.candidates == []

    def test_containment_ratio(self, skill_dictionary: list[ReferenceEntry]) -> None:
        """A near-complete substring scores by length ratio."""
        assert dictionary_score("Professor of Curvatur", "Professor of Curvature") == pytest.approx(21 / 22)
        assert match_dictionary("Professor of Curvatur", skill_dictionary).best_match_id == "s1"

    def test_short_substring_rejected(self, skill_dictionary: list[ReferenceEntry]) -> None:
        """A short fragment of a long name is not enough."""
        assert not match_dictionary("Curvature", skill_dictionary).matched

    def test_custom_threshold(self) -> None:
        """The acceptance threshold is configurable."""
        entries = [ReferenceEntry(id=1, name="abcdefghij")]

        assert match_dictionary("abcdzzzzzz", entries, threshold=0.4).best_match_id == 1

    def test_empty_name(self, skill_dictionary: list[ReferenceEntry]) -> None:
        """An empty detection matches nothing."""
        assert not match_dictionary("  ", skill_dictionary).matched
