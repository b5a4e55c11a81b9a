"""Named parse strategies and the folds that choose between them.

A parser that can read its input several ways declares an ordered list of
``Strategy`` objects. Each strategy is a pure function from text to a
``ParseOutcome`` (or ``None`` when it does not apply). One of two folds then
picks the result:

* ``first_applicable`` — a fallback chain inside one text.
* ``best_outcome`` — highest confidence across alternatives, with an early
  exit once a target confidence is reached.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ParseOutcome(Generic[T]):
    """A strategy's result and how much of the expected output it recovered."""

    strategy: str
    value: T
    confidence: float


@dataclass(frozen=True)
class Strategy(Generic[T]):
    name: str
    func: Callable[[str], Optional[T]]
    confidence: Callable[[T], float] = lambda _value: 1.0

    def apply(self, text: str) -> Optional[ParseOutcome[T]]:
        """Run the strategy on *text*.

        Returns:
            A ``ParseOutcome``, or ``None`` if the strategy does not apply.
        """
        value = self.func(text)
        if value is None:
            return None
        return ParseOutcome(self.name, value, self.confidence(value))


def first_applicable(
    strategies: Iterable[Strategy[T]],
    text: str,
) -> Optional[ParseOutcome[T]]:
    """Return the outcome of the first strategy that applies to *text*."""
    for strategy in strategies:
        outcome = strategy.apply(text)
        if outcome is not None:
            logger.debug("Strategy '%s' applied", strategy.name)
            return outcome
    return None


def best_outcome(
    outcomes: Iterable[Optional[ParseOutcome[Any]]],
    target: Optional[float] = None,
) -> Optional[ParseOutcome[Any]]:
    """Pick the highest-confidence outcome; ties keep the earliest.

    *outcomes* may be a lazy iterable. Once an outcome reaches *target*,
    nothing further is consumed, so later (expensive) alternatives are never
    computed.

    Args:
        outcomes: Candidate outcomes in priority order; ``None`` entries are
            skipped.
        target: Confidence at which to stop early.

    Returns:
        The chosen outcome, or ``None`` if no outcome was supplied.
    """
    best: Optional[ParseOutcome[Any]] = None
    for outcome in outcomes:
        if outcome is None:
            continue
        if best is None or outcome.confidence > best.confidence:
            best = outcome
        if target is not None and best.confidence >= target:
            logger.debug(
                "Strategy '%s' reached target confidence %.2f",
                best.strategy, target,
            )
            break
    return best
