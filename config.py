"""Central configuration for the race-screenshot OCR extractor.

Parsers, matchers and the image pipeline read their bands, patterns, limits
and preprocessing parameters from here instead of carrying literals.

The heuristics are tuned to one fixed UI layout family; changing a band or
pattern here changes what every parser accepts.
"""

from typing import Final

import numpy as np

# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------

# Extracted names shorter than this are dropped (race results and skills).
MIN_NAME_LENGTH: Final[int] = 3

# ---------------------------------------------------------------------------
# Race results
# ---------------------------------------------------------------------------

# "44,426 pts", "12000pts", "9,870 PTS"
SCORE_PATTERN: Final[str] = r"(\d[\d,]*)\s*pts\b"

# Longer digit runs are OCR noise, not a score.
SCORE_MAX_DIGITS: Final[int] = 9

# Rank badge misread as a letter plus "+" in front of the name ("A+ ").
RANK_ICON_PATTERN: Final[str] = r"^[A-Z]\+(?:\s+|$)"

# Fixed UI phrases rendered next to the score.
DECORATIVE_PHRASES: Final[list[str]] = [
    "Witness to Legend",
    "Dream Team",
]

# ---------------------------------------------------------------------------
# Stat block
# ---------------------------------------------------------------------------

STAT_FIELDS: Final[list[str]] = ["speed", "stamina", "power", "guts", "wit"]

# Valid stat value range (inclusive). Anything else is OCR noise.
STAT_MIN: Final[int] = 100
STAT_MAX: Final[int] = 1500

# Five stats of 3-4 digits with no separator survive as 15-20 digits.
STAT_DIGITS_MIN_LENGTH: Final[int] = 15
STAT_DIGITS_MAX_LENGTH: Final[int] = 20

# Fallback scan when separators survived or OCR under/over-read.
STAT_NUMBER_PATTERN: Final[str] = r"\b\d{3,4}\b"

# Closed set of rank codes, longest alternatives first.
RANK_CODES: Final[list[str]] = (
    [f"UG{n}" for n in range(1, 10)]
    + ["UG", "SS+", "SS", "S+", "S", "A+", "A", "B+", "B", "C+", "C"]
)

# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------

LEVEL_PATTERN: Final[str] = r"\b(?:Level|Lvl|Lv)\s*[:\-]?\s*(\d+)"

# Unique skill level valid range (inclusive).
SKILL_LEVEL_MIN: Final[int] = 1
SKILL_LEVEL_MAX: Final[int] = 6
SKILL_LEVEL_MAX_DIGITS: Final[int] = 1

# Character header on the skills screen: "[Special Dreamer] Special Week"
CHARACTER_LINE_PATTERN: Final[str] = r"^\s*[\[【][^\]】]*[\]】]"

# Rarity badges (bronze / other) that OCR reads as stray capital letters.
RARITY_MARKERS: Final[str] = "BO"

# Glyphs the skill list draws around names.
DECORATIVE_MARKS: Final[str] = "◎○◯●◉★☆◆◇■□▲△▼▽•·※»«>~*_=#"

# ---------------------------------------------------------------------------
# Fuzzy name matching
# ---------------------------------------------------------------------------

# Candidates returned per race-result line / per inline character lookup.
RACE_MATCH_LIMIT: Final[int] = 10
CHARACTER_PREFILTER_LIMIT: Final[int] = 5

# Minimum length before a detected name may match by reverse containment.
REVERSE_CONTAINMENT_MIN_LENGTH: Final[int] = 3

# Skill dictionary: similarity or containment ratio needed to accept a match.
DICTIONARY_MATCH_THRESHOLD: Final[float] = 0.8

# Unmatched skills: "assume_common" or "flag_unknown".
DEFAULT_RARITY_POLICY: Final[str] = "assume_common"

# ---------------------------------------------------------------------------
# Runs
# ---------------------------------------------------------------------------

# Final place valid range (inclusive).
FINAL_PLACE_MIN: Final[int] = 1
FINAL_PLACE_MAX: Final[int] = 18

# ---------------------------------------------------------------------------
# Image preprocessing
# ---------------------------------------------------------------------------

# Tried in this order for stat blocks.
PREPROCESS_LIGHT: Final[str] = "light"
PREPROCESS_SHARPEN: Final[str] = "sharpen"
PREPROCESS_BINARIZE: Final[str] = "binarize"
PREPROCESS_STRATEGIES: Final[list[str]] = [
    PREPROCESS_LIGHT,
    PREPROCESS_SHARPEN,
    PREPROCESS_BINARIZE,
]

# Race results are read from a single binarized pass.
RACE_PREPROCESS_STRATEGY: Final[str] = PREPROCESS_BINARIZE
SKILLS_PREPROCESS_STRATEGY: Final[str] = PREPROCESS_SHARPEN

BINARIZE_THRESHOLD: Final[int] = 180

# Upscale small screenshots to this width, never past it.
TARGET_WIDTH: Final[int] = 2000

SHARPEN_KERNEL: Final[np.ndarray] = np.array(
    [[0, -1, 0], [-1, 5, -1], [0, -1, 0]], dtype=np.float32
)

# Encoded format handed to the OCR collaborator.
PREPROCESS_OUTPUT_EXT: Final[str] = ".png"

# ---------------------------------------------------------------------------
# OCR
# ---------------------------------------------------------------------------

OCR_LANGUAGE: Final[str] = "eng"
OCR_DIGIT_WHITELIST: Final[str] = "0123456789"

# Tesseract page segmentation: 6 = single uniform block of text.
OCR_PAGE_SEGMENTATION_MODE: Final[int] = 6

# ---------------------------------------------------------------------------
# Batch processing
# ---------------------------------------------------------------------------

BATCH_MAX_WORKERS: Final[int] = 4
