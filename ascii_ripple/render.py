"""
Frame rendering pipeline: sampling -> contrast -> ripple -> character lookup.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from .config import DEFAULT_GRID_CONFIG, DEFAULT_RENDER_OPTIONS, GridConfig, RenderOptions
from .contrast import apply_full_contrast
from .lookup import CachedCharacterLookup, cached_lookup
from .ripple import Ripple, apply_ripple_to_vector
from .sampling import grid_size, lightness_map, sample_cell, sample_external_circles

logger = logging.getLogger(__name__)

DEFAULT_BASE_VECTOR = (0.5, 0.5, 0.5, 0.5, 0.5, 0.5)


@dataclass
class FrameOutput:
    chars: List[List[str]]
    cols: int
    rows: int

    def lines(self) -> List[str]:
        return ["".join(row) for row in self.chars]

    def to_text(self) -> str:
        return "\n".join(self.lines())


def _cell_center(col: int, row: int, config: GridConfig):
    return (col + 0.5) * config.cell_width, (row + 0.5) * config.cell_height


def render_ascii_frame(buffer: np.ndarray,
                       grid_config: GridConfig = DEFAULT_GRID_CONFIG,
                       options: RenderOptions = DEFAULT_RENDER_OPTIONS,
                       ripples: Sequence[Ripple] = (),
                       current_time: float = 0.0,
                       lookup: Optional[CachedCharacterLookup] = None) -> FrameOutput:
    """Render one frame of a pixel buffer as a character grid.

    ``current_time`` is only read when ``ripples`` is non-empty.
    """
    lookup = cached_lookup if lookup is None else lookup
    lmap = lightness_map(buffer)
    h, w = lmap.shape
    cols, rows = grid_size(w, h, grid_config)
    directional = options.enable_directional_contrast
    logger.debug("Rendering %dx%d cells from %dx%d buffer, %d ripple(s)",
                 cols, rows, w, h, len(ripples))

    chars = []
    for row in range(rows):
        row_chars = []
        for col in range(cols):
            vector = sample_cell(lmap, col, row, grid_config)
            external = sample_external_circles(lmap, col, row, grid_config) if directional else None
            vector = apply_full_contrast(
                vector, external, options.contrast,
                options.directional_contrast if directional else 1)
            if ripples:
                cx, cy = _cell_center(col, row, grid_config)
                vector = apply_ripple_to_vector(vector, cx, cy, ripples, current_time)
            row_chars.append(lookup.find_best(vector))
        chars.append(row_chars)

    return FrameOutput(chars, cols, rows)


def render_base_frame(cols: int, rows: int,
                      grid_config: GridConfig = DEFAULT_GRID_CONFIG,
                      base_vector: Sequence[float] = DEFAULT_BASE_VECTOR,
                      ripples: Sequence[Ripple] = (),
                      current_time: float = 0.0,
                      lookup: Optional[CachedCharacterLookup] = None) -> FrameOutput:
    """Render a grid with no image source: every cell starts at ``base_vector``."""
    lookup = cached_lookup if lookup is None else lookup
    base = np.asarray(base_vector, dtype=np.float64)
    if not ripples:
        char = lookup.find_best(base)
        return FrameOutput([[char] * cols for _ in range(rows)], cols, rows)

    chars = []
    for row in range(rows):
        row_chars = []
        for col in range(cols):
            cx, cy = _cell_center(col, row, grid_config)
            vector = apply_ripple_to_vector(base, cx, cy, ripples, current_time)
            row_chars.append(lookup.find_best(vector))
        chars.append(row_chars)
    return FrameOutput(chars, cols, rows)
