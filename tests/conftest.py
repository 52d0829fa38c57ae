"""Shared fixtures for the ascii_ripple test suite."""

import numpy as np
import pytest

from ascii_ripple.characters import CharacterEntry
from ascii_ripple.lookup import CachedCharacterLookup


@pytest.fixture
def two_char_catalog():
    return [
        CharacterEntry(" ", (0.0,) * 6),
        CharacterEntry("#", (1.0,) * 6),
    ]


@pytest.fixture
def two_char_lookup(two_char_catalog):
    return CachedCharacterLookup(two_char_catalog)


@pytest.fixture
def gray_buffer():
    """4x4 uniform mid-gray RGB buffer."""
    return np.full((4, 4, 3), 128, dtype=np.uint8)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
