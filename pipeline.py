"""Screenshot-to-record orchestration.

Wires the image and OCR collaborators to the parsers and matchers:

* race results — one binarized OCR pass, parse, roster match, run defaults.
* stat blocks — preprocessing strategies tried in order with a digits-only
  whitelist, stopping at the first complete block.
* skills — one OCR pass, parse, optional dictionary resolution.

Collaborators are plain callables so callers (and tests) can swap them out.
Nothing here keeps state between images; batches run concurrently.
"""

import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, TypeVar

import imaging
import ocr
from config import (
    BATCH_MAX_WORKERS,
    DEFAULT_RARITY_POLICY,
    OCR_DIGIT_WHITELIST,
    PREPROCESS_STRATEGIES,
    RACE_MATCH_LIMIT,
    RACE_PREPROCESS_STRATEGY,
    SKILLS_PREPROCESS_STRATEGY,
)
from dictionary import resolve_skills
from matching import match_roster
from models import (
    RarityPolicy,
    ReferenceEntry,
    ResolvedRaceResult,
    RunDefaults,
    RunRecord,
    SkillParseResult,
    StatBlock,
)
from race import parse_race_results
from runs import suggest_run_defaults
from skills import parse_skills
from stats import parse_rank, parse_stat_block, select_stat_block, stat_outcome
from strategy import ParseOutcome

logger = logging.getLogger(__name__)

Preprocessor = Callable[[bytes, str], bytes]
Recognizer = Callable[..., str]

T = TypeVar("T")


def _read_text(
    image: bytes,
    strategy: str,
    preprocess: Preprocessor,
    recognize: Recognizer,
    whitelist: Optional[str] = None,
) -> str:
    processed = preprocess(image, strategy)
    return recognize(processed, whitelist) if whitelist else recognize(processed)


# ---------------------------------------------------------------------------
# Race results
# ---------------------------------------------------------------------------


def resolve_race_results(
    text: str,
    roster: Sequence[ReferenceEntry],
    history: Optional[Mapping[str, Sequence[RunRecord]]] = None,
    limit: int = RACE_MATCH_LIMIT,
) -> list[ResolvedRaceResult]:
    """Parse race-result text and match each name against the roster.

    Args:
        text: OCR text of one race-result screenshot.
        roster: Known characters in the caller's priority order.
        history: Prior runs keyed by ``str(character id)``; the best match's
            runs supply the defaults for the new run.
        limit: Maximum roster candidates per result.

    Returns:
        One ``ResolvedRaceResult`` per parsed score line.
    """
    resolved = []
    for candidate in parse_race_results(text):
        match = match_roster(candidate.detected_name, roster, limit)
        defaults = RunDefaults()
        if match.matched and history:
            defaults = suggest_run_defaults(history.get(str(match.best_match_id), []))
        resolved.append(ResolvedRaceResult(candidate, match, defaults))
    logger.info(
        "Race results: %d parsed, %d matched",
        len(resolved), sum(1 for r in resolved if r.match.matched),
    )
    return resolved


def extract_race_results(
    image: bytes,
    roster: Sequence[ReferenceEntry],
    history: Optional[Mapping[str, Sequence[RunRecord]]] = None,
    *,
    preprocess: Preprocessor = imaging.preprocess,
    recognize: Recognizer = ocr.recognize,
) -> list[ResolvedRaceResult]:
    """OCR a race-result screenshot and resolve its entries."""
    text = _read_text(image, RACE_PREPROCESS_STRATEGY, preprocess, recognize)
    return resolve_race_results(text, roster, history)


# ---------------------------------------------------------------------------
# Stat block
# ---------------------------------------------------------------------------


def _stat_outcomes(
    image: bytes,
    preprocess: Preprocessor,
    recognize: Recognizer,
    strategies: Sequence[str],
) -> Iterator[ParseOutcome[StatBlock]]:
    for strategy in strategies:
        text = _read_text(image, strategy, preprocess, recognize, OCR_DIGIT_WHITELIST)
        block = parse_stat_block(text, rank_text="")
        logger.info(
            "Stat strategy '%s': %d field(s) filled", strategy, block.filled_count
        )
        yield stat_outcome(strategy, block)


def extract_stat_block(
    image: bytes,
    *,
    preprocess: Preprocessor = imaging.preprocess,
    recognize: Recognizer = ocr.recognize,
    strategies: Sequence[str] = PREPROCESS_STRATEGIES,
) -> StatBlock:
    """Read a stats screenshot, trying preprocessing strategies in order.

    Each strategy is one preprocess + digits-only OCR call. The block with
    the most filled fields wins (ties keep the earlier strategy) and no
    further strategy runs once all five fields are filled. The rank is read
    from one full-charset OCR pass of the first strategy.

    Returns:
        The best ``StatBlock``; all zero if no strategy found anything.
    """
    outcome = select_stat_block(_stat_outcomes(image, preprocess, recognize, strategies))
    block = outcome.value if outcome else StatBlock()

    rank = ""
    if strategies:
        rank = parse_rank(_read_text(image, strategies[0], preprocess, recognize))

    result = StatBlock.from_values(block.values, rank=rank)
    logger.info(
        "Stat block from '%s': %s rank=%r",
        outcome.strategy if outcome else None, result.values, rank,
    )
    return result


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------


def resolve_skill_text(
    text: str,
    dictionary: Optional[Sequence[ReferenceEntry]] = None,
    policy: RarityPolicy = RarityPolicy(DEFAULT_RARITY_POLICY),
) -> SkillParseResult:
    """Parse skills text and, given a dictionary, resolve names and rarity."""
    result = parse_skills(text)
    if dictionary:
        result = resolve_skills(result, dictionary, policy)
    return result


def extract_skills(
    image: bytes,
    dictionary: Optional[Sequence[ReferenceEntry]] = None,
    policy: RarityPolicy = RarityPolicy(DEFAULT_RARITY_POLICY),
    *,
    preprocess: Preprocessor = imaging.preprocess,
    recognize: Recognizer = ocr.recognize,
) -> SkillParseResult:
    """OCR a skills screenshot and parse (and optionally resolve) its skills."""
    text = _read_text(image, SKILLS_PREPROCESS_STRATEGY, preprocess, recognize)
    return resolve_skill_text(text, dictionary, policy)


# ---------------------------------------------------------------------------
# Batches
# ---------------------------------------------------------------------------


def process_batch(
    images: Sequence[bytes],
    handler: Callable[[bytes], T],
    max_workers: int = BATCH_MAX_WORKERS,
) -> list[T]:
    """Run *handler* on independent images concurrently.

    Results come back in input order. The first exception raised by a
    handler propagates to the caller.
    """
    if not images:
        return []
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(images)))) as pool:
        results = list(pool.map(handler, images))
    logger.info("Processed batch of %d image(s)", len(results))
    return results
