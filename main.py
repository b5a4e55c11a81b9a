#!/usr/bin/env python3
"""Command-line entry point for the race-screenshot OCR extractor.

Reads one screenshot (or, with ``--text``, a file of raw OCR text), runs the
matching parser and prints the structured result as JSON.

Subcommands::

    race     Names and scores from a race-result screenshot.
    stats    Speed, stamina, power, guts, wit and rank from a stats screen.
    skills   Unique skill level and skill names from a skills screen.

Reference data is passed as JSON files: ``--roster`` and ``--dictionary``
take arrays of ``{"id": ..., "name": ...}`` objects (extra keys are kept as
payload; ``is_rare`` marks rare dictionary skills), ``--history`` takes an
object mapping character ids to arrays of prior runs.

Usage::

    python main.py race result.png --roster roster.json --history runs.json
    python main.py stats stats.png
    python main.py skills skills.txt --text --dictionary skills.json

Collaborator errors (unreadable image, missing Tesseract) are fatal: they are
logged with a full traceback and the process exits with a non-zero code.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from exceptions import ImageDecodeError, OCREngineError
from models import RarityPolicy, ReferenceEntry
from pipeline import (
    extract_race_results,
    extract_skills,
    extract_stat_block,
    resolve_race_results,
    resolve_skill_text,
)
from runs import load_history
from stats import parse_stat_block

logger = logging.getLogger(__name__)


def _load_json(path: str | None) -> Any:
    if path is None:
        return None
    return json.loads(Path(path).read_text(encoding="utf-8"))


def load_reference_entries(path: str | None) -> list[ReferenceEntry]:
    """Read a JSON array of ``{id, name, ...}`` objects.

    Returns:
        The entries in file order, or an empty list if *path* is ``None``.
    """
    data = _load_json(path)
    if not data:
        return []
    return [ReferenceEntry.from_mapping(item) for item in data]


def cmd_race(args: argparse.Namespace) -> Any:
    roster = load_reference_entries(args.roster)
    history_data = _load_json(args.history)
    history = load_history(history_data) if history_data else None
    if args.text:
        results = resolve_race_results(args.input.read_text(encoding="utf-8"), roster, history)
    else:
        results = extract_race_results(args.input.read_bytes(), roster, history)
    return [r.to_dict() for r in results]


def cmd_stats(args: argparse.Namespace) -> Any:
    if args.text:
        block = parse_stat_block(args.input.read_text(encoding="utf-8"))
    else:
        block = extract_stat_block(args.input.read_bytes())
    return block.to_dict()


def cmd_skills(args: argparse.Namespace) -> Any:
    dictionary = load_reference_entries(args.dictionary)
    policy = (
        RarityPolicy.FLAG_UNKNOWN if args.flag_unknown_rarity
        else RarityPolicy.ASSUME_COMMON
    )
    if args.text:
        result = resolve_skill_text(args.input.read_text(encoding="utf-8"), dictionary, policy)
    else:
        result = extract_skills(args.input.read_bytes(), dictionary, policy)
    return result.to_dict()


COMMANDS = {
    "race": cmd_race,
    "stats": cmd_stats,
    "skills": cmd_skills,
}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subparser per screenshot type."""
    parser = argparse.ArgumentParser(
        description="Extract race results, stat blocks and skills from game screenshots.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log parser decisions (DEBUG)"
    )
    subparsers = parser.add_subparsers(dest="command")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("input", type=Path, help="Screenshot, or OCR text with --text")
    common.add_argument(
        "--text",
        action="store_true",
        help="Treat INPUT as raw OCR text and skip preprocessing/OCR",
    )

    race_parser = subparsers.add_parser(
        "race", parents=[common], help="Parse a race-result screenshot"
    )
    race_parser.add_argument("--roster", help="JSON array of known characters")
    race_parser.add_argument(
        "--history", help="JSON object of prior runs keyed by character id"
    )

    subparsers.add_parser(
        "stats", parents=[common], help="Parse a character stats screenshot"
    )

    skills_parser = subparsers.add_parser(
        "skills", parents=[common], help="Parse a skills screenshot"
    )
    skills_parser.add_argument("--dictionary", help="JSON array of known skills")
    skills_parser.add_argument(
        "--flag-unknown-rarity",
        action="store_true",
        help="Mark skills missing from the dictionary as needing rarity review",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run one extraction and print JSON to stdout.

    Returns:
        The process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command not in COMMANDS:
        parser.print_help()
        return 2

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        output = COMMANDS[args.command](args)
    except (ImageDecodeError, OCREngineError, OSError, ValueError, KeyError):
        logger.exception("Extraction failed")
        return 1

    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
