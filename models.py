"""Plain structured records produced by the parsers and matchers.

Every record is a dataclass with no behaviour beyond small derived values
and ``to_dict()`` for JSON output. Missing data is modelled with defaults
(``0``, ``""``, empty lists, ``None``), never with exceptions.
"""

from collections.abc import Hashable, Mapping
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional

from config import STAT_FIELDS


class TrackType(str, Enum):
    """Race track categories a run can be recorded on."""

    TURF_SHORT = "TURF_SHORT"
    TURF_MILE = "TURF_MILE"
    TURF_MEDIUM = "TURF_MEDIUM"
    TURF_LONG = "TURF_LONG"
    DIRT = "DIRT"


class RarityPolicy(str, Enum):
    """What to do with a parsed skill that matches no dictionary entry."""

    ASSUME_COMMON = "assume_common"
    FLAG_UNKNOWN = "flag_unknown"


# ---------------------------------------------------------------------------
# Reference data (caller-owned)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ReferenceEntry:
    """A known character or skill supplied by the caller.

    ``payload`` carries whatever else the caller attached (version
    identifiers, rarity, usage counts). The core only reads ``id`` and
    ``name``, plus ``payload["is_rare"]`` for skill dictionaries.
    """

    id: Hashable
    name: str
    payload: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ReferenceEntry":
        """Build an entry from a mapping with at least ``id`` and ``name``.

        Raises:
            KeyError: If *data* has no ``id`` or no ``name`` key.
        """
        payload = {k: v for k, v in data.items() if k not in ("id", "name")}
        return cls(id=data["id"], name=str(data["name"]), payload=payload)

    @property
    def is_rare(self) -> Optional[bool]:
        value = self.payload.get("is_rare", self.payload.get("isRare"))
        return None if value is None else bool(value)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, **self.payload}


@dataclass
class MatchResult:
    """Reference entries that matched a detected name, best first."""

    candidates: list[ReferenceEntry] = field(default_factory=list)
    best_match_id: Optional[Hashable] = None

    @property
    def matched(self) -> bool:
        return self.best_match_id is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "candidates": [c.to_dict() for c in self.candidates],
            "best_match_id": self.best_match_id,
        }


# ---------------------------------------------------------------------------
# Race results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RaceResultCandidate:
    detected_name: str
    score: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RunRecord:
    """A prior run of one character, read by the caller from its storage."""

    track_type: TrackType
    final_place: int
    score: int = 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RunRecord":
        track = data.get("track_type", data.get("trackType"))
        place = data.get("final_place", data.get("finalPlace"))
        if place is None:
            raise ValueError(f"Run has no final place: {dict(data)!r}")
        return cls(
            track_type=TrackType(track),
            final_place=int(place),
            score=int(data.get("score", 0)),
        )


@dataclass(frozen=True)
class RunDefaults:
    """Pre-filled values for a new run, derived from the run history."""

    track_type: Optional[TrackType] = None
    final_place: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "track_type": self.track_type.value if self.track_type else None,
            "final_place": self.final_place,
        }


@dataclass
class ResolvedRaceResult:
    """A race-result candidate with its roster match and run defaults."""

    candidate: RaceResultCandidate
    match: MatchResult
    defaults: RunDefaults = field(default_factory=RunDefaults)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.candidate.to_dict(),
            **self.match.to_dict(),
            "defaults": self.defaults.to_dict(),
        }


# ---------------------------------------------------------------------------
# Stat block
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StatBlock:
    """Five stat values and a rank code. ``0`` / ``""`` mean unknown."""

    speed: int = 0
    stamina: int = 0
    power: int = 0
    guts: int = 0
    wit: int = 0
    rank: str = ""

    @classmethod
    def from_values(cls, values: list[int], rank: str = "") -> "StatBlock":
        """Assign *values* in fixed order; missing trailing fields stay 0."""
        fields = dict(zip(STAT_FIELDS, values))
        return cls(rank=rank, **fields)

    @property
    def values(self) -> list[int]:
        return [getattr(self, name) for name in STAT_FIELDS]

    @property
    def filled_count(self) -> int:
        return sum(1 for v in self.values if v)

    @property
    def complete(self) -> bool:
        return self.filled_count == len(STAT_FIELDS)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SkillCandidate:
    """A parsed skill name.

    ``is_rare`` is never read from the screenshot; it stays ``False`` until
    the skill is resolved against a dictionary. ``rarity_confirmed`` tells
    whether the flag came from a dictionary entry or the rarity policy
    (``True``) or still needs a manual check (``False``).
    """

    name: str
    is_rare: bool = False
    rarity_confirmed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SkillParseResult:
    unique_skill_level: int = 0
    skills: list[SkillCandidate] = field(default_factory=list)

    @property
    def rare_count(self) -> int:
        return sum(1 for s in self.skills if s.is_rare)

    @property
    def normal_count(self) -> int:
        return len(self.skills) - self.rare_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "unique_skill_level": self.unique_skill_level,
            "skills": [s.to_dict() for s in self.skills],
            "rare_count": self.rare_count,
            "normal_count": self.normal_count,
        }


@dataclass(frozen=True)
class SkillUsage:
    """One entry of a skill dictionary built from saved skill lists."""

    name: str
    is_rare: bool
    times_used: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
