"""Shared test configuration and fixtures.

Provides a small character roster, a skill dictionary and a factory for
encoded test images, so tests never need real screenshots.
"""

from collections.abc import Callable

import cv2
import numpy as np
import pytest

from models import ReferenceEntry


@pytest.fixture
def roster() -> list[ReferenceEntry]:
    """Known characters, most recently used first."""
    return [
        ReferenceEntry(id=1, name="Gold Ship", payload={"identifier_version": "Long v2"}),
        ReferenceEntry(id=2, name="Special Week", payload={"identifier_version": "Speed Focus v1"}),
        ReferenceEntry(id=3, name="Silence Suzuka", payload={"identifier_version": "Stamina Build v1"}),
        ReferenceEntry(id=4, name="Tokai Teio", payload={"identifier_version": "Balanced v1"}),
    ]


@pytest.fixture
def skill_dictionary() -> list[ReferenceEntry]:
    """Known skills with their rarity."""
    return [
        ReferenceEntry(id="s1", name="Professor of Curvature", payload={"is_rare": True}),
        ReferenceEntry(id="s2", name="Corner Recovery Plus", payload={"is_rare": True}),
        ReferenceEntry(id="s3", name="Corner Adept", payload={"is_rare": False}),
        ReferenceEntry(id="s4", name="Straightaway Adept", payload={"is_rare": False}),
        ReferenceEntry(id="s5", name="Concentration", payload={}),
    ]


@pytest.fixture
def make_png() -> Callable[..., bytes]:
    """Factory for PNG-encoded BGR test images."""

    def _make(width: int = 100, height: int = 50, value: int = 128) -> bytes:
        image = np.full((height, width, 3), value, dtype=np.uint8)
        # A dark bar so thresholding has both colours to work with.
        image[height // 4: height // 2, width // 4: width // 2] = 10
        ok, encoded = cv2.imencode(".png", image)
        assert ok
        return encoded.tobytes()

    return _make
