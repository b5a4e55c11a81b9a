"""Edit-distance string similarity used by the name matchers."""

from rapidfuzz.distance import Levenshtein


def edit_distance(a: str, b: str) -> int:
    """Unit-cost Levenshtein distance (insert, delete, substitute)."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """Return how alike two strings are, from 0.0 to 1.0, ignoring case.

    Computed as ``(max_len - edit_distance) / max_len``. Two empty strings
    are identical (``1.0``).

    Args:
        a: First string.
        b: Second string.

    Returns:
        The similarity ratio.
    """
    a, b = a.lower(), b.lower()
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return (longest - edit_distance(a, b)) / longest
