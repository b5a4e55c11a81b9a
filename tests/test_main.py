"""Tests for main.py — the command-line entry point."""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from exceptions import OCREngineError
from main import load_reference_entries, main


def _write(path: Path, content: str) -> str:
    path.write_text(content, encoding="utf-8")
    return str(path)


class TestLoadReferenceEntries:
    """Tests for load_reference_entries()."""

    def test_reads_entries_and_payload(self, tmp_path: Path) -> None:
        """Extra keys are kept as payload."""
        path = _write(
            tmp_path / "skills.json",
            json.dumps([{"id": "s1", "name": "Corner Adept", "isRare": True}]),
        )

        entries = load_reference_entries(path)

        assert entries[0].name == "Corner Adept"
        assert entries[0].is_rare is True

    def test_no_path(self) -> None:
        """No file means no entries."""
        assert load_reference_entries(None) == []


class TestMain:
    """Tests for main()."""

    def test_race_from_text(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Race text is parsed, matched and printed as JSON."""
        text = _write(tmp_path / "race.txt", "Special Week\nA+ 12,000 pts\n")
        roster = _write(
            tmp_path / "roster.json",
            json.dumps([{"id": "c1", "name": "Special Week"}]),
        )
        history = _write(
            tmp_path / "runs.json",
            json.dumps({"c1": [{"trackType": "TURF_MILE", "finalPlace": 2}]}),
        )

        code = main(["race", text, "--text", "--roster", roster, "--history", history])

        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output == [{
            "detected_name": "Special Week",
            "score": 12000,
            "candidates": [{"id": "c1", "name": "Special Week"}],
            "best_match_id": "c1",
            "defaults": {"track_type": "TURF_MILE", "final_place": 2},
        }]

    def test_stats_from_text(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Stats text prints a full stat block."""
        text = _write(tmp_path / "stats.txt", "108995341549481\nSS+\n")

        assert main(["stats", text, "--text"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output == {
            "speed": 108, "stamina": 995, "power": 341,
            "guts": 549, "wit": 481, "rank": "SS+",
        }

    def test_skills_flag_unknown(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """--flag-unknown-rarity marks skills missing from the dictionary."""
        text = _write(tmp_path / "skills.txt", "Lvl 3\nCorner Adept | Shooting Star\n")
        dictionary = _write(
            tmp_path / "dict.json",
            json.dumps([{"id": 1, "name": "Corner Adept", "is_rare": False}]),
        )

        code = main([
            "skills", text, "--text", "--dictionary", dictionary, "--flag-unknown-rarity",
        ])

        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["unique_skill_level"] == 3
        assert [s["rarity_confirmed"] for s in output["skills"]] == [True, False]

    @patch("main.extract_stat_block")
    def test_collaborator_error_exits_non_zero(
        self, mock_extract: MagicMock, tmp_path: Path,
    ) -> None:
        """OCR failures are logged and turned into exit code 1."""
        mock_extract.side_effect = OCREngineError("tesseract executable not found")
        image = tmp_path / "stats.png"
        image.write_bytes(b"\x89PNG")

        assert main(["stats", str(image)]) == 1

    def test_missing_input_file(self, tmp_path: Path) -> None:
        """A missing input file exits with 1."""
        assert main(["stats", str(tmp_path / "missing.png")]) == 1

    def test_history_run_without_place(self, tmp_path: Path) -> None:
        """A malformed history file is logged and exits with 1."""
        text = _write(tmp_path / "race.txt", "Special Week 12,000 pts\n")
        history = _write(
            tmp_path / "runs.json", json.dumps({"c1": [{"trackType": "DIRT"}]}),
        )

        assert main(["race", text, "--text", "--history", history]) == 1

    def test_no_command(self, capsys: pytest.CaptureFixture) -> None:
        """No subcommand prints help and returns 2."""
        assert main([]) == 2
        assert "race" in capsys.readouterr().out
