"""
Contrast enhancement for sampling vectors.

Both transforms normalize by a maximum, raise to an exponent and rescale,
which pushes darker samples further down relative to the brightest one.
Directional contrast anchors each internal sample to the brightest of the
external samples next to it, so edges at cell borders come out sharper.
"""

from typing import Optional, Sequence

import numpy as np

# Internal circle index -> external circle indices that affect it
AFFECTING_EXTERNAL_INDICES = np.array([
    [0, 1, 2, 8],  # top-left: above-TL, above-TR, left-ML, above-center
    [0, 1, 3, 8],  # top-right: above-TL, above-TR, right-MR, above-center
    [2, 4, 0, 6],  # middle-left: left-ML, left-BL, above-TL, below-BL
    [3, 5, 1, 7],  # middle-right: right-MR, right-BR, above-TR, below-BR
    [4, 6, 9, 2],  # bottom-left: left-BL, below-BL, below-center, left-ML
    [5, 7, 9, 3],  # bottom-right: right-BR, below-BR, below-center, right-MR
])


def _enhance(values: np.ndarray, anchors: np.ndarray, exponent: float) -> np.ndarray:
    # Zero anchors pass their values through untouched.
    safe = np.where(anchors > 0, anchors, 1.0)
    enhanced = np.power(values / safe, exponent) * safe
    return np.where(anchors > 0, enhanced, values)


def apply_global_contrast(vector: Sequence[float], exponent: float) -> np.ndarray:
    """Normalize by the vector's own maximum, apply ``exponent``, rescale."""
    vector = np.array(vector, dtype=np.float64)
    if exponent <= 1 or vector.size == 0:
        return vector
    max_value = vector.max()
    if max_value <= 0:
        return vector
    return _enhance(vector, np.full_like(vector, max_value), exponent)


def apply_directional_contrast(internal_vector: Sequence[float],
                               external_vector: Sequence[float],
                               exponent: float) -> np.ndarray:
    """Contrast each internal sample against its local maximum.

    The local maximum of sample ``i`` is the largest of the sample itself
    and the external samples listed in AFFECTING_EXTERNAL_INDICES[i].
    """
    internal = np.array(internal_vector, dtype=np.float64)
    if exponent <= 1:
        return internal
    external = np.asarray(external_vector, dtype=np.float64)
    local_max = np.maximum(internal, external[AFFECTING_EXTERNAL_INDICES].max(axis=1))
    return _enhance(internal, local_max, exponent)


def apply_full_contrast(internal_vector: Sequence[float],
                        external_vector: Optional[Sequence[float]],
                        global_exponent: float,
                        directional_exponent: float) -> np.ndarray:
    """Directional contrast first (when external samples exist), then global."""
    result = np.array(internal_vector, dtype=np.float64)
    if external_vector is not None and directional_exponent > 1:
        result = apply_directional_contrast(result, external_vector, directional_exponent)
    if global_exponent > 1:
        result = apply_global_contrast(result, global_exponent)
    return result
