"""
Per-instance animation state.

AsciiSession owns one ripple pool and turns host events (clicks, mouse
moves, timer ticks) into ripples and rendered frames. It never reads a
clock: every entry point takes the current time in milliseconds, so the
host decides when to render (UI loop, thread, or a test feeding synthetic
timestamps).
"""

import logging
import math
from typing import List, Optional, Sequence

import numpy as np

from .config import (DEFAULT_GRID_CONFIG, DEFAULT_MOUSE_RIPPLE_CONFIG, DEFAULT_RAIN_CONFIG,
                     DEFAULT_RENDER_OPTIONS, DEFAULT_RIPPLE_CONFIG, ConfigurationError,
                     GridConfig, RainConfigLike, RenderOptions, RippleConfigLike,
                     merge_rain_config, merge_ripple_config)
from .lookup import CachedCharacterLookup, cached_lookup
from .render import DEFAULT_BASE_VECTOR, FrameOutput, render_ascii_frame, render_base_frame
from .ripple import (Ripple, RippleState, create_rain_drop, create_ripple, create_ripple_burst,
                     has_active_ripples, prune_expired_ripples, ripple_state)

logger = logging.getLogger(__name__)


class AsciiSession:
    """Ripple pool plus the settings that drive it.

    Args:
        grid_config: Sampling geometry, also used to map cells to pixels.
        render_options: Contrast settings.
        ripple_config: Click ripple config (partial mapping or full config).
        ripple_count: Ripples per click, cascaded 200 ms apart.
        rain_config: Rain settings (partial mapping or full config).
        mouse_ripple_config: Config for mouse-move ripples.
        mouse_throttle_ms: Minimum time between mouse ripples.
        max_ripples: Pool size above which rain and mouse ripples are dropped.
        lookup: Character lookup; defaults to the shared cached instance.
        rng: Random generator for rain; pass a seeded one for repeatable runs.
    """

    def __init__(self,
                 grid_config: GridConfig = DEFAULT_GRID_CONFIG,
                 render_options: RenderOptions = DEFAULT_RENDER_OPTIONS,
                 ripple_config: RippleConfigLike = None,
                 ripple_count: int = 1,
                 rain_config: RainConfigLike = None,
                 mouse_ripple_config: RippleConfigLike = None,
                 mouse_throttle_ms: float = 60.0,
                 max_ripples: int = 80,
                 lookup: Optional[CachedCharacterLookup] = None,
                 rng: Optional[np.random.Generator] = None):
        if ripple_count < 1:
            raise ConfigurationError(f"ripple_count must be >= 1, got {ripple_count}")
        if max_ripples < 1:
            raise ConfigurationError(f"max_ripples must be >= 1, got {max_ripples}")
        self.grid_config = grid_config
        self.render_options = render_options
        self.ripple_config = merge_ripple_config(DEFAULT_RIPPLE_CONFIG, ripple_config)
        self.ripple_count = ripple_count
        self.rain_config = merge_rain_config(DEFAULT_RAIN_CONFIG, rain_config)
        self.mouse_ripple_config = merge_ripple_config(DEFAULT_MOUSE_RIPPLE_CONFIG, mouse_ripple_config)
        self.mouse_throttle_ms = mouse_throttle_ms
        self.max_ripples = max_ripples
        self.lookup = cached_lookup if lookup is None else lookup
        self.rng = np.random.default_rng() if rng is None else rng

        self.ripples: List[Ripple] = []
        self._rain_enabled = False
        self._next_drop_at: Optional[float] = None
        self._last_mouse_ripple: Optional[float] = None

    # -- events ------------------------------------------------------------

    def click(self, x: float, y: float, now: float) -> List[Ripple]:
        """Add a cascading burst at (x, y). Bursts ignore ``max_ripples``."""
        burst = create_ripple_burst(x, y, self.ripple_count, self.ripple_config, now)
        self.ripples.extend(burst)
        return burst

    def mouse_move(self, x: float, y: float, now: float) -> Optional[Ripple]:
        """Add a mouse ripple unless throttled or the pool is full."""
        if self._last_mouse_ripple is not None and now - self._last_mouse_ripple < self.mouse_throttle_ms:
            return None
        self._last_mouse_ripple = now
        if len(self.ripples) >= self.max_ripples:
            return None
        ripple = create_ripple(x, y, self.mouse_ripple_config, now)
        self.ripples.append(ripple)
        return ripple

    def clear(self):
        self.ripples = []

    # -- rain ----------------------------------------------------------------

    @property
    def rain_enabled(self) -> bool:
        return self._rain_enabled

    def set_rain(self, enabled: bool, now: float):
        """Turn rain on or off. The first drop falls on the next ``spawn_rain``."""
        if enabled and not self._rain_enabled:
            self._next_drop_at = now
        elif not enabled:
            self._next_drop_at = None
        self._rain_enabled = enabled
        logger.debug("Rain %s at %.1f ms", "enabled" if enabled else "disabled", now)

    def spawn_rain(self, width: float, height: float, now: float) -> List[Ripple]:
        """Spawn every drop scheduled up to ``now`` inside a width x height area.

        Each drop starts at its scheduled time, one ``1000 / intensity`` ms
        interval apart. Slots whose drop would already have expired at ``now``
        are skipped, and drops that would overflow ``max_ripples`` are dropped.
        """
        if not self._rain_enabled or self._next_drop_at is None:
            return []
        self.ripples = prune_expired_ripples(self.ripples, now)
        spawned = []
        interval = self.rain_config.interval_ms
        # after a stall, jump to the oldest slot that can still be alive
        oldest_alive = now - self._max_drop_duration()
        if self._next_drop_at < oldest_alive:
            missed = math.ceil((oldest_alive - self._next_drop_at) / interval)
            self._next_drop_at += missed * interval
        while self._next_drop_at <= now:
            if len(self.ripples) < self.max_ripples:
                drop = create_rain_drop(width, height, self.rain_config, self.ripple_config,
                                        rng=self.rng, now=self._next_drop_at)
                if ripple_state(drop, now) is not RippleState.EXPIRED:
                    self.ripples.append(drop)
                    spawned.append(drop)
            self._next_drop_at += interval
        if spawned:
            logger.debug("Spawned %d raindrop(s)", len(spawned))
        return spawned

    def _max_drop_duration(self) -> float:
        drop_config = merge_ripple_config(self.ripple_config, self.rain_config.drop_ripple_config)
        return drop_config.duration * (1.0 + self.rain_config.variation)

    # -- frames --------------------------------------------------------------

    def is_animating(self, now: float) -> bool:
        """Whether the host should keep scheduling ticks."""
        return self._rain_enabled or has_active_ripples(self.ripples, now)

    def _advance(self, width: float, height: float, now: float):
        self.spawn_rain(width, height, now)
        self.ripples = prune_expired_ripples(self.ripples, now)

    def tick(self, buffer: np.ndarray, now: float) -> FrameOutput:
        """Advance the pool to ``now`` and render ``buffer``."""
        h, w = np.shape(buffer)[:2]
        self._advance(w, h, now)
        return render_ascii_frame(buffer, self.grid_config, self.render_options,
                                  self.ripples, now, self.lookup)

    def tick_canvas(self, cols: int, rows: int, now: float,
                    base_vector: Sequence[float] = DEFAULT_BASE_VECTOR) -> FrameOutput:
        """Like ``tick`` for an imageless cols x rows grid of ``base_vector`` cells."""
        self._advance(cols * self.grid_config.cell_width, rows * self.grid_config.cell_height, now)
        return render_base_frame(cols, rows, self.grid_config, base_vector,
                                 self.ripples, now, self.lookup)
