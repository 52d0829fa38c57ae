"""
Grid sampling.

Turns a pixel buffer into 6D lightness vectors using a staggered 2x3
layout of sampling circles per grid cell, plus 10 circles just outside the
cell used for directional contrast.

Buffers are numpy arrays in RGB(A) order, shape (H, W, 3|4), values 0-255.
A 2-D float array is taken as an already computed lightness map.
"""

import math
from functools import lru_cache
from typing import List, Tuple

import numpy as np

from .config import DEFAULT_GRID_CONFIG, GridConfig

LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722])

# (x, y) as fractions of cell width/height
CIRCLE_POSITIONS = np.array([
    (0.25, 0.17),  # top-left (slightly lower)
    (0.75, 0.25),  # top-right (slightly higher)
    (0.25, 0.50),  # middle-left
    (0.75, 0.50),  # middle-right
    (0.25, 0.75),  # bottom-left (slightly higher)
    (0.75, 0.83),  # bottom-right (slightly lower)
])

EXTERNAL_CIRCLE_POSITIONS = np.array([
    (0.25, -0.17),  # above top-left
    (0.75, -0.08),  # above top-right
    (-0.08, 0.33),  # left of middle-left
    (1.08, 0.33),   # right of middle-right
    (-0.08, 0.67),  # left of bottom-left
    (1.08, 0.67),   # right of bottom-right
    (0.25, 0.92),   # below bottom-left
    (0.75, 1.08),   # below bottom-right
    (0.50, -0.12),  # above center
    (0.50, 1.00),   # below center
])


def rgb_to_lightness(r: float, g: float, b: float) -> float:
    """Relative luminance (ITU-R BT.709 weights), 0-1."""
    return (0.2126 * r + 0.7152 * g + 0.0722 * b) / 255


def lightness_map(buffer: np.ndarray) -> np.ndarray:
    """Per-pixel lightness of a buffer as an (H, W) float array."""
    buffer = np.asarray(buffer)
    if buffer.ndim == 2:
        return buffer.astype(np.float64, copy=False)
    if buffer.ndim != 3 or buffer.shape[2] < 3:
        raise ValueError(
            f"Expected an (H, W) lightness map or (H, W, 3|4) RGB buffer, got shape {buffer.shape}")
    return buffer[:, :, :3].astype(np.float64) @ LUMA_WEIGHTS / 255


def _lookup(lmap: np.ndarray, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    # Floor, then read; anything outside the buffer is black.
    ix = np.floor(xs).astype(np.int64)
    iy = np.floor(ys).astype(np.int64)
    h, w = lmap.shape
    inside = (ix >= 0) & (ix < w) & (iy >= 0) & (iy < h)
    values = np.zeros(ix.shape, dtype=np.float64)
    values[inside] = lmap[iy[inside], ix[inside]]
    return values


def pixel_lightness(buffer: np.ndarray, x: float, y: float) -> float:
    """Lightness of the pixel containing (x, y); 0 outside the buffer."""
    buffer = np.asarray(buffer)
    ix, iy = math.floor(x), math.floor(y)
    h, w = buffer.shape[:2]
    if ix < 0 or ix >= w or iy < 0 or iy >= h:
        return 0.0
    if buffer.ndim == 2:
        return float(buffer[iy, ix])
    r, g, b = buffer[iy, ix, :3]
    return rgb_to_lightness(float(r), float(g), float(b))


@lru_cache(maxsize=32)
def circle_offsets(sample_count: int) -> np.ndarray:
    """Unit-circle offsets of a ceil(sqrt(n))^2 sampling grid, shape (k, 2)."""
    if sample_count <= 1:
        return np.zeros((1, 2))
    grid_size = math.ceil(math.sqrt(sample_count))
    steps = np.linspace(-1.0, 1.0, grid_size)
    ox, oy = np.meshgrid(steps, steps)
    offsets = np.column_stack([ox.ravel(), oy.ravel()])
    offsets = offsets[(offsets ** 2).sum(axis=1) <= 1]
    offsets.setflags(write=False)
    return offsets


def _sample_circles(lmap: np.ndarray, centers: np.ndarray, radius: float,
                    sample_count: int) -> np.ndarray:
    offsets = circle_offsets(sample_count)
    if len(offsets) == 0:
        return np.zeros(len(centers))
    points = centers[:, None, :] + offsets[None, :, :] * radius
    values = _lookup(lmap, points[..., 0], points[..., 1])
    return values.mean(axis=1)


def sample_circle(buffer: np.ndarray, center_x: float, center_y: float,
                  radius: float, sample_count: int) -> float:
    """Average lightness over a disc; a single sample reads the center pixel."""
    if sample_count <= 1:
        return pixel_lightness(buffer, center_x, center_y)
    lmap = lightness_map(buffer)
    centers = np.array([[center_x, center_y]], dtype=np.float64)
    return float(_sample_circles(lmap, centers, radius, sample_count)[0])


def sampling_radius(config: GridConfig) -> float:
    return (config.circle_radius * config.cell_width
            + config.circle_radius * config.cell_height) / 2


def _cell_centers(positions: np.ndarray, cell_x: int, cell_y: int,
                  config: GridConfig) -> np.ndarray:
    size = np.array([config.cell_width, config.cell_height], dtype=np.float64)
    base = np.array([cell_x, cell_y], dtype=np.float64) * size
    return base + positions * size


def sample_cell(buffer: np.ndarray, cell_x: int, cell_y: int,
                config: GridConfig = DEFAULT_GRID_CONFIG) -> np.ndarray:
    """6D lightness vector for the cell at column ``cell_x``, row ``cell_y``.

    Order: top-left, top-right, middle-left, middle-right, bottom-left,
    bottom-right.
    """
    lmap = lightness_map(buffer)
    centers = _cell_centers(CIRCLE_POSITIONS, cell_x, cell_y, config)
    return _sample_circles(lmap, centers, sampling_radius(config), config.samples_per_circle)


def sample_external_circles(buffer: np.ndarray, cell_x: int, cell_y: int,
                            config: GridConfig = DEFAULT_GRID_CONFIG) -> np.ndarray:
    """10D lightness vector sampled just outside the cell (see EXTERNAL_CIRCLE_POSITIONS)."""
    lmap = lightness_map(buffer)
    centers = _cell_centers(EXTERNAL_CIRCLE_POSITIONS, cell_x, cell_y, config)
    return _sample_circles(lmap, centers, sampling_radius(config), config.samples_per_circle)


def grid_size(width: int, height: int, config: GridConfig = DEFAULT_GRID_CONFIG) -> Tuple[int, int]:
    """(cols, rows) of whole cells that fit in a width x height buffer."""
    return width // config.cell_width, height // config.cell_height


def sample_grid(buffer: np.ndarray,
                config: GridConfig = DEFAULT_GRID_CONFIG) -> Tuple[List[np.ndarray], int, int]:
    """Internal vectors for every cell in row-major order, plus (cols, rows)."""
    lmap = lightness_map(buffer)
    h, w = lmap.shape
    cols, rows = grid_size(w, h, config)
    vectors = [
        sample_cell(lmap, col, row, config)
        for row in range(rows)
        for col in range(cols)
    ]
    return vectors, cols, rows
