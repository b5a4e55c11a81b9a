"""Skill dictionary: resolving parsed skills and building usage counts.

Parsed skills carry no reliable rarity. Resolution looks each name up in the
caller's dictionary; a match supplies the canonical name and rarity, and
unmatched skills are handled by the configured ``RarityPolicy``.
"""

import logging
from collections.abc import Iterable, Sequence

from config import DEFAULT_RARITY_POLICY, DICTIONARY_MATCH_THRESHOLD
from matching import match_dictionary
from models import (
    RarityPolicy,
    ReferenceEntry,
    SkillCandidate,
    SkillParseResult,
    SkillUsage,
)
from skills import dedupe_skills

logger = logging.getLogger(__name__)


def resolve_skill(
    skill: SkillCandidate,
    dictionary: Sequence[ReferenceEntry],
    policy: RarityPolicy = RarityPolicy(DEFAULT_RARITY_POLICY),
    threshold: float = DICTIONARY_MATCH_THRESHOLD,
) -> SkillCandidate:
    """Resolve one parsed skill against the dictionary.

    Args:
        skill: A freshly parsed skill.
        dictionary: Known skills; ``payload["is_rare"]`` gives the rarity.
        policy: Rarity handling for skills with no dictionary match.
        threshold: Minimum fuzzy score for a dictionary match.

    Returns:
        A new ``SkillCandidate``. On a match the name is the dictionary's
        canonical name and the rarity comes from the entry (entries without a
        rarity count as common).
    """
    result = match_dictionary(skill.name, dictionary, threshold)
    if result.matched:
        entry = result.candidates[0]
        return SkillCandidate(
            name=entry.name,
            is_rare=bool(entry.is_rare),
            rarity_confirmed=True,
        )
    if policy is RarityPolicy.FLAG_UNKNOWN:
        logger.info("Skill %r not in dictionary; rarity needs confirmation", skill.name)
        return SkillCandidate(name=skill.name, is_rare=False, rarity_confirmed=False)
    return SkillCandidate(name=skill.name, is_rare=False, rarity_confirmed=True)


def resolve_skills(
    result: SkillParseResult,
    dictionary: Sequence[ReferenceEntry],
    policy: RarityPolicy = RarityPolicy(DEFAULT_RARITY_POLICY),
    threshold: float = DICTIONARY_MATCH_THRESHOLD,
) -> SkillParseResult:
    """Resolve every skill of a parse result; the input is left untouched.

    Two OCR variants of one skill may resolve to the same canonical name,
    so the resolved list is deduplicated again.
    """
    resolved = [resolve_skill(s, dictionary, policy, threshold) for s in result.skills]
    skills = dedupe_skills(resolved)
    logger.info(
        "Resolved %d skill(s): %d rare, %d unconfirmed",
        len(skills),
        sum(1 for s in skills if s.is_rare),
        sum(1 for s in skills if not s.rarity_confirmed),
    )
    return SkillParseResult(unique_skill_level=result.unique_skill_level, skills=skills)


def tally_skill_usage(
    skill_lists: Iterable[Iterable[SkillCandidate]],
) -> list[SkillUsage]:
    """Build dictionary entries from previously saved skill lists.

    A skill is rare if any saved occurrence is rare.

    Returns:
        One ``SkillUsage`` per distinct name, most used first, then by name.
    """
    counts: dict[str, int] = {}
    rare: dict[str, bool] = {}
    for skills in skill_lists:
        for skill in skills:
            counts[skill.name] = counts.get(skill.name, 0) + 1
            rare[skill.name] = rare.get(skill.name, False) or skill.is_rare

    usage = [
        SkillUsage(name=name, is_rare=rare[name], times_used=count)
        for name, count in counts.items()
    ]
    usage.sort(key=lambda u: (-u.times_used, u.name))
    return usage


def usage_to_entries(usage: Iterable[SkillUsage]) -> list[ReferenceEntry]:
    """Turn usage counts into dictionary entries keyed by skill name."""
    return [
        ReferenceEntry(
            id=u.name,
            name=u.name,
            payload={"is_rare": u.is_rare, "times_used": u.times_used},
        )
        for u in usage
    ]
