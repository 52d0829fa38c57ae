"""
Character lookup.

Finds the catalog character whose shape vector is nearest to a sampling
vector (squared Euclidean distance, brute force). CachedCharacterLookup
memoizes results under a 30-bit quantized key, 5 bits per component.
"""

import logging
from collections import OrderedDict, namedtuple
from typing import Optional, Sequence

import numpy as np

from .characters import NORMALIZED_CHARACTERS, CharacterEntry, character_matrix
from .config import ConfigurationError

logger = logging.getLogger(__name__)

BITS = 5
RANGE = 2 ** BITS
DEFAULT_CACHE_SIZE = 65536

CacheInfo = namedtuple("CacheInfo", ["hits", "misses", "max_size", "current_size"])


def squared_distance(a: Sequence[float], b: Sequence[float]) -> float:
    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    return float(np.dot(diff, diff))


def _nearest(sampling_vector: Sequence[float], chars: Sequence[str], matrix: np.ndarray) -> str:
    if len(chars) == 0:
        raise ConfigurationError("Character catalog is empty")
    diff = matrix - np.asarray(sampling_vector, dtype=np.float64)
    # argmin returns the first minimum, so ties go to catalog order
    return chars[int(np.argmin((diff * diff).sum(axis=1)))]


def find_best_character(sampling_vector: Sequence[float],
                        characters: Sequence[CharacterEntry] = NORMALIZED_CHARACTERS) -> str:
    """Nearest catalog character to ``sampling_vector``.

    Raises:
        ConfigurationError: if ``characters`` is empty.
    """
    return _nearest(sampling_vector, [c.char for c in characters], character_matrix(characters))


def cache_key(vector: Sequence[float]) -> int:
    """Pack a vector into an integer, BITS bits per component."""
    quantized = np.floor(np.clip(np.asarray(vector, dtype=np.float64), 0.0, 1.0) * RANGE)
    quantized = np.minimum(quantized, RANGE - 1).astype(np.int64)
    key = 0
    for q in quantized:
        key = (key << BITS) | int(q)
    return key


def decode_cache_key(key: int, size: int = 6) -> np.ndarray:
    """Bucket-center vector represented by a cache key."""
    values = []
    for _ in range(size):
        values.append(key & (RANGE - 1))
        key >>= BITS
    return (np.array(values[::-1], dtype=np.float64) + 0.5) / RANGE


class CachedCharacterLookup:
    """Nearest-character lookup with a bounded LRU cache.

    A miss scans the catalog with the key's decoded bucket-center vector, so
    every vector in a bucket gets the same answer regardless of which one
    arrived first.
    """

    def __init__(self, characters: Sequence[CharacterEntry] = NORMALIZED_CHARACTERS,
                 max_size: Optional[int] = DEFAULT_CACHE_SIZE):
        if not characters:
            raise ConfigurationError("Character catalog is empty")
        if max_size is not None and max_size < 1:
            raise ConfigurationError(f"max_size must be >= 1 or None, got {max_size}")
        self.characters = list(characters)
        self.max_size = max_size
        self._chars = [c.char for c in self.characters]
        self._matrix = character_matrix(self.characters)
        self._cache: "OrderedDict[int, str]" = OrderedDict()
        self._hits = 0
        self._misses = 0

    def find_best(self, sampling_vector: Sequence[float]) -> str:
        vector = np.asarray(sampling_vector, dtype=np.float64)
        key = cache_key(vector)
        cached = self._cache.get(key)
        if cached is not None:
            self._cache.move_to_end(key)
            self._hits += 1
            return cached

        self._misses += 1
        result = _nearest(decode_cache_key(key, vector.size), self._chars, self._matrix)
        self._cache[key] = result
        if self.max_size is not None and len(self._cache) > self.max_size:
            evicted, _ = self._cache.popitem(last=False)
            logger.debug("Evicted cache key %#x", evicted)
        return result

    def cache_info(self) -> CacheInfo:
        return CacheInfo(self._hits, self._misses, self.max_size, len(self._cache))

    def clear_cache(self):
        logger.debug("Clearing lookup cache (%d entries)", len(self._cache))
        self._cache.clear()
        self._hits = self._misses = 0


# Shared default instance
cached_lookup = CachedCharacterLookup()
