"""
Character shape vectors.

Each character carries a 6D shape vector: its visual density in six
sampling regions laid out as a staggered 2x3 grid::

    [0]   [1]    top row, left slightly lower
    [2]   [3]    middle row
    [4]   [5]    bottom row, left slightly higher

The raw values approximate typical monospace glyphs. Use
NORMALIZED_CHARACTERS for matching; it is built once at import time.
"""

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import numpy as np

VECTOR_SIZE = 6


@dataclass(frozen=True)
class CharacterEntry:
    char: str
    vector: Tuple[float, ...]


# Printable ASCII (32-126) with raw shape vectors
_RAW_CHARACTERS = [
    (' ', (0, 0, 0, 0, 0, 0)),
    ('.', (0, 0, 0, 0, 0.3, 0)),
    (',', (0, 0, 0, 0, 0.3, 0.2)),
    (':', (0, 0, 0.3, 0, 0.3, 0)),
    (';', (0, 0, 0.3, 0, 0.4, 0.2)),
    ('!', (0.4, 0, 0.3, 0, 0.3, 0)),
    ('?', (0.5, 0.5, 0.2, 0.4, 0.3, 0)),
    ("'", (0.3, 0, 0, 0, 0, 0)),
    ('"', (0.3, 0.3, 0, 0, 0, 0)),
    ('`', (0.3, 0, 0, 0, 0, 0)),
    ('-', (0, 0, 0.5, 0.5, 0, 0)),
    ('_', (0, 0, 0, 0, 0.6, 0.6)),
    ('=', (0, 0, 0.5, 0.5, 0.5, 0.5)),
    ('+', (0.2, 0.2, 0.5, 0.5, 0.2, 0.2)),
    ('*', (0.4, 0.4, 0.5, 0.5, 0.2, 0.2)),
    ('/', (0, 0.4, 0.3, 0.3, 0.4, 0)),
    ('\\', (0.4, 0, 0.3, 0.3, 0, 0.4)),
    ('|', (0.3, 0, 0.3, 0, 0.3, 0)),
    ('(', (0.2, 0.4, 0.3, 0.3, 0.2, 0.4)),
    (')', (0.4, 0.2, 0.3, 0.3, 0.4, 0.2)),
    ('[', (0.5, 0.4, 0.4, 0, 0.5, 0.4)),
    (']', (0.4, 0.5, 0, 0.4, 0.4, 0.5)),
    ('{', (0.2, 0.4, 0.4, 0.2, 0.2, 0.4)),
    ('}', (0.4, 0.2, 0.2, 0.4, 0.4, 0.2)),
    ('<', (0, 0.3, 0.4, 0.2, 0, 0.3)),
    ('>', (0.3, 0, 0.2, 0.4, 0.3, 0)),
    ('^', (0.3, 0.3, 0.4, 0.4, 0, 0)),
    ('~', (0.3, 0.4, 0.4, 0.3, 0, 0)),
    ('#', (0.6, 0.6, 0.7, 0.7, 0.6, 0.6)),
    ('$', (0.5, 0.6, 0.6, 0.5, 0.6, 0.5)),
    ('%', (0.5, 0.3, 0.4, 0.4, 0.3, 0.5)),
    ('&', (0.5, 0.4, 0.5, 0.5, 0.6, 0.5)),
    ('@', (0.6, 0.7, 0.7, 0.6, 0.6, 0.7)),

    # Digits
    ('0', (0.5, 0.5, 0.5, 0.5, 0.5, 0.5)),
    ('1', (0.3, 0.3, 0.2, 0.3, 0.3, 0.4)),
    ('2', (0.5, 0.5, 0.3, 0.5, 0.5, 0.5)),
    ('3', (0.5, 0.5, 0.3, 0.5, 0.5, 0.5)),
    ('4', (0.4, 0.5, 0.5, 0.5, 0.2, 0.4)),
    ('5', (0.5, 0.5, 0.5, 0.3, 0.5, 0.5)),
    ('6', (0.4, 0.5, 0.5, 0.4, 0.5, 0.5)),
    ('7', (0.5, 0.5, 0.2, 0.4, 0.2, 0.4)),
    ('8', (0.5, 0.5, 0.5, 0.5, 0.5, 0.5)),
    ('9', (0.5, 0.5, 0.4, 0.5, 0.5, 0.4)),

    # Uppercase
    ('A', (0.4, 0.4, 0.6, 0.6, 0.5, 0.5)),
    ('B', (0.6, 0.5, 0.6, 0.5, 0.6, 0.5)),
    ('C', (0.5, 0.5, 0.5, 0.2, 0.5, 0.5)),
    ('D', (0.6, 0.5, 0.5, 0.5, 0.6, 0.5)),
    ('E', (0.6, 0.5, 0.6, 0.3, 0.6, 0.5)),
    ('F', (0.6, 0.5, 0.6, 0.3, 0.5, 0.2)),
    ('G', (0.5, 0.5, 0.5, 0.4, 0.5, 0.5)),
    ('H', (0.5, 0.5, 0.6, 0.6, 0.5, 0.5)),
    ('I', (0.5, 0.5, 0.3, 0.3, 0.5, 0.5)),
    ('J', (0.3, 0.5, 0.2, 0.4, 0.5, 0.4)),
    ('K', (0.5, 0.5, 0.6, 0.4, 0.5, 0.5)),
    ('L', (0.5, 0.2, 0.5, 0.2, 0.6, 0.5)),
    ('M', (0.6, 0.6, 0.6, 0.6, 0.5, 0.5)),
    ('N', (0.5, 0.5, 0.5, 0.5, 0.5, 0.5)),
    ('O', (0.5, 0.5, 0.5, 0.5, 0.5, 0.5)),
    ('P', (0.6, 0.5, 0.6, 0.5, 0.5, 0.2)),
    ('Q', (0.5, 0.5, 0.5, 0.5, 0.5, 0.6)),
    ('R', (0.6, 0.5, 0.6, 0.5, 0.5, 0.5)),
    ('S', (0.5, 0.5, 0.5, 0.4, 0.4, 0.5)),
    ('T', (0.6, 0.6, 0.3, 0.3, 0.3, 0.3)),
    ('U', (0.5, 0.5, 0.5, 0.5, 0.5, 0.5)),
    ('V', (0.5, 0.5, 0.5, 0.5, 0.4, 0.4)),
    ('W', (0.5, 0.5, 0.6, 0.6, 0.6, 0.6)),
    ('X', (0.5, 0.5, 0.4, 0.4, 0.5, 0.5)),
    ('Y', (0.5, 0.5, 0.4, 0.4, 0.3, 0.3)),
    ('Z', (0.5, 0.5, 0.4, 0.4, 0.5, 0.5)),

    # Lowercase
    ('a', (0.2, 0.3, 0.4, 0.5, 0.5, 0.5)),
    ('b', (0.5, 0.2, 0.5, 0.4, 0.5, 0.4)),
    ('c', (0.2, 0.3, 0.4, 0.2, 0.4, 0.3)),
    ('d', (0.2, 0.5, 0.4, 0.5, 0.4, 0.5)),
    ('e', (0.2, 0.3, 0.5, 0.4, 0.4, 0.3)),
    ('f', (0.3, 0.4, 0.5, 0.3, 0.4, 0.2)),
    ('g', (0.2, 0.3, 0.4, 0.5, 0.4, 0.5)),
    ('h', (0.5, 0.2, 0.5, 0.4, 0.4, 0.4)),
    ('i', (0.3, 0, 0.3, 0, 0.3, 0.2)),
    ('j', (0, 0.3, 0, 0.3, 0.3, 0.3)),
    ('k', (0.5, 0.2, 0.5, 0.4, 0.4, 0.4)),
    ('l', (0.4, 0.2, 0.4, 0.2, 0.3, 0.3)),
    ('m', (0.2, 0.2, 0.6, 0.6, 0.5, 0.5)),
    ('n', (0.2, 0.2, 0.5, 0.4, 0.4, 0.4)),
    ('o', (0.2, 0.2, 0.4, 0.4, 0.4, 0.4)),
    ('p', (0.2, 0.2, 0.5, 0.4, 0.5, 0.2)),
    ('q', (0.2, 0.2, 0.4, 0.5, 0.2, 0.5)),
    ('r', (0.2, 0.2, 0.5, 0.3, 0.4, 0.2)),
    ('s', (0.2, 0.3, 0.4, 0.3, 0.3, 0.4)),
    ('t', (0.4, 0.3, 0.5, 0.3, 0.3, 0.4)),
    ('u', (0.2, 0.2, 0.4, 0.4, 0.4, 0.5)),
    ('v', (0.2, 0.2, 0.4, 0.4, 0.3, 0.3)),
    ('w', (0.2, 0.2, 0.5, 0.5, 0.5, 0.5)),
    ('x', (0.2, 0.2, 0.3, 0.3, 0.4, 0.4)),
    ('y', (0.2, 0.2, 0.4, 0.4, 0.3, 0.5)),
    ('z', (0.2, 0.3, 0.3, 0.4, 0.4, 0.3)),
]

CHARACTERS: List[CharacterEntry] = [
    CharacterEntry(char, tuple(float(v) for v in vector))
    for char, vector in _RAW_CHARACTERS
]


def normalize_character_vectors(characters: Iterable[CharacterEntry]) -> List[CharacterEntry]:
    """Scale every dimension so its maximum across the catalog becomes 1.

    Dimensions whose maximum is 0 stay at 0. Normalizing an already
    normalized catalog returns an equal catalog.
    """
    characters = list(characters)
    if not characters:
        return []
    raw = character_matrix(characters)
    max_values = raw.max(axis=0)
    safe = np.where(max_values > 0, max_values, 1.0)
    scaled = np.where(max_values > 0, raw / safe, 0.0)
    return [
        CharacterEntry(entry.char, tuple(float(v) for v in row))
        for entry, row in zip(characters, scaled)
    ]


def character_matrix(characters: Sequence[CharacterEntry]) -> np.ndarray:
    """Stack catalog vectors into an (N, 6) float array."""
    if not characters:
        return np.zeros((0, VECTOR_SIZE), dtype=np.float64)
    return np.array([entry.vector for entry in characters], dtype=np.float64)


NORMALIZED_CHARACTERS: List[CharacterEntry] = normalize_character_vectors(CHARACTERS)
