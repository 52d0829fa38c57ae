"""
Ripple animation.

A ripple is a single Gaussian ring expanding from an origin. While it is
active it shifts every component of nearby sampling vectors by the same
amount, so different characters get picked as the ring passes through.

Timestamps are milliseconds from any monotonic clock, supplied by the
caller. Ripples are immutable; a pool is a plain list owned by the caller.
"""

import enum
import logging
import math
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from .config import (DEFAULT_RAIN_CONFIG, DEFAULT_RIPPLE_CONFIG, RainConfigLike,
                     RippleConfig, RippleConfigLike, merge_rain_config,
                     merge_ripple_config)

logger = logging.getLogger(__name__)

CASCADE_OFFSET_MS = 200.0
MAX_TOTAL_WAVE = 0.5
MIN_PULSE = 0.01


def now_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.perf_counter() * 1000.0


class RippleState(enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    EXPIRED = "expired"


@dataclass(frozen=True)
class Ripple:
    origin_x: float
    origin_y: float
    start_time: float
    config: RippleConfig = DEFAULT_RIPPLE_CONFIG


def create_ripple(x: float, y: float, config: RippleConfigLike = None,
                  now: Optional[float] = None) -> Ripple:
    """Ripple at (x, y) starting at ``now`` with ``config`` merged over the defaults."""
    start = now_ms() if now is None else now
    return Ripple(x, y, start, merge_ripple_config(DEFAULT_RIPPLE_CONFIG, config))


def create_ripple_burst(x: float, y: float, count: int = 1,
                        config: RippleConfigLike = None, now: Optional[float] = None,
                        offset_ms: float = CASCADE_OFFSET_MS) -> List[Ripple]:
    """``count`` ripples at one origin, the i-th starting ``i * offset_ms`` later."""
    start = now_ms() if now is None else now
    merged = merge_ripple_config(DEFAULT_RIPPLE_CONFIG, config)
    return [Ripple(x, y, start + i * offset_ms, merged) for i in range(count)]


def ripple_state(ripple: Ripple, current_time: float) -> RippleState:
    elapsed = current_time - ripple.start_time
    if elapsed < 0:
        return RippleState.PENDING
    if elapsed > ripple.config.duration:
        return RippleState.EXPIRED
    return RippleState.ACTIVE


def calculate_wave_value(x: float, y: float, ripple: Ripple, current_time: float) -> float:
    """Displacement contributed by ``ripple`` at point (x, y)."""
    config = ripple.config
    elapsed = current_time - ripple.start_time
    if elapsed < 0 or elapsed > config.duration:
        return 0.0

    distance = math.hypot(x - ripple.origin_x, y - ripple.origin_y)
    ripple_radius = (elapsed / 1000) * config.speed
    # positive = ahead of the front, negative = behind it
    dist_from_front = distance - ripple_radius

    ring_width = config.wavelength / 2
    gaussian_pulse = math.exp(-(dist_from_front * dist_from_front) / (2 * ring_width * ring_width))
    if gaussian_pulse < MIN_PULSE:
        return 0.0

    time_decay = (1 - elapsed / config.duration) ** 2
    distance_decay = math.exp(-ripple_radius / (config.speed * 3))
    return gaussian_pulse * config.amplitude * time_decay * distance_decay


def total_wave_value(x: float, y: float, ripples: Sequence[Ripple], current_time: float) -> float:
    """Summed wave value of all ripples, clamped to [-0.5, 0.5]."""
    total = sum(calculate_wave_value(x, y, ripple, current_time) for ripple in ripples)
    return max(-MAX_TOTAL_WAVE, min(MAX_TOTAL_WAVE, total))


def apply_ripple_to_vector(vector: Sequence[float], cell_center_x: float, cell_center_y: float,
                           ripples: Sequence[Ripple], current_time: float) -> np.ndarray:
    """Shift every component by the combined wave value, clamped to [0, 1]."""
    vector = np.array(vector, dtype=np.float64)
    if not ripples:
        return vector
    wave = total_wave_value(cell_center_x, cell_center_y, ripples, current_time)
    return np.clip(vector + wave, 0.0, 1.0)


def prune_expired_ripples(ripples: Sequence[Ripple], current_time: float) -> List[Ripple]:
    """Drop expired ripples; pending and active ones are kept in order."""
    survivors = [r for r in ripples if ripple_state(r, current_time) is not RippleState.EXPIRED]
    if len(survivors) != len(ripples):
        logger.debug("Pruned %d expired ripple(s), %d left",
                     len(ripples) - len(survivors), len(survivors))
    return survivors


def has_active_ripples(ripples: Sequence[Ripple], current_time: float) -> bool:
    """True if any ripple is pending or active."""
    return any(ripple_state(r, current_time) is not RippleState.EXPIRED for r in ripples)


def apply_variation(value: float, variation: float, rng: np.random.Generator) -> float:
    """``value`` jittered uniformly by up to ``value * variation`` either way."""
    return value + rng.uniform(-1.0, 1.0) * value * variation


def create_rain_drop(image_width: float, image_height: float,
                     rain_config: RainConfigLike = None,
                     base_ripple_config: RippleConfigLike = None,
                     rng: Optional[np.random.Generator] = None,
                     now: Optional[float] = None) -> Ripple:
    """Ripple at a random position with jittered parameters.

    The drop config is the defaults, then ``base_ripple_config``, then the
    rain config's ``drop_ripple_config``. Each numeric parameter is then
    jittered by the rain variation; amplitude is clamped to [0.1, 1].
    """
    rng = np.random.default_rng() if rng is None else rng
    rain = merge_rain_config(DEFAULT_RAIN_CONFIG, rain_config)
    merged = merge_ripple_config(DEFAULT_RIPPLE_CONFIG, base_ripple_config)
    merged = merge_ripple_config(merged, rain.drop_ripple_config)

    x = rng.uniform(0.0, image_width)
    y = rng.uniform(0.0, image_height)

    variation = rain.variation
    varied = RippleConfig(
        speed=apply_variation(merged.speed, variation, rng),
        amplitude=max(0.1, min(1.0, apply_variation(merged.amplitude, variation, rng))),
        decay=apply_variation(merged.decay, variation, rng),
        wavelength=apply_variation(merged.wavelength, variation, rng),
        duration=apply_variation(merged.duration, variation, rng),
    )
    start = now_ms() if now is None else now
    return Ripple(float(x), float(y), start, varied)
