"""
Configuration values for the ASCII ripple renderer.

All configs are frozen dataclasses. The DEFAULT_* constants are shared by
reference; derive variations with ``dataclasses.replace`` or the merge
helpers below rather than mutating them.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional, Union


class ConfigurationError(ValueError):
    """Raised for invalid configuration values or an empty character catalog."""


@dataclass(frozen=True)
class GridConfig:
    """Sampling geometry shared by every cell of a frame.

    Attributes:
        cell_width: Width of each grid cell in pixels.
        cell_height: Height of each grid cell in pixels.
        samples_per_circle: Number of samples per sampling circle
            (higher = better quality, slower). 1 means point sampling.
        circle_radius: Radius of each sampling circle as a fraction of
            the cell size.
    """

    cell_width: int = 6
    cell_height: int = 12
    samples_per_circle: int = 9
    circle_radius: float = 0.25

    def __post_init__(self):
        if self.cell_width < 1 or self.cell_height < 1:
            raise ConfigurationError(
                f"Cell size must be at least 1x1 pixel, got {self.cell_width}x{self.cell_height}")
        if self.samples_per_circle < 1:
            raise ConfigurationError(
                f"samples_per_circle must be >= 1, got {self.samples_per_circle}")
        if self.circle_radius < 0:
            raise ConfigurationError(
                f"circle_radius must be >= 0, got {self.circle_radius}")


@dataclass(frozen=True)
class RenderOptions:
    """Contrast settings applied to each cell's shape vector.

    Attributes:
        contrast: Global contrast exponent (1 = unchanged, higher = sharper
            character edges).
        directional_contrast: Exponent used when enhancing a component
            against its neighbouring external samples.
        enable_directional_contrast: Apply the directional pass before the
            global one.
    """

    contrast: float = 1.5
    directional_contrast: float = 2.0
    enable_directional_contrast: bool = True


@dataclass(frozen=True)
class RippleConfig:
    """Wave parameters attached to a single ripple.

    Attributes:
        speed: Expansion speed of the ring in pixels per second.
        amplitude: Peak displacement added to a shape vector (0-1).
        decay: Fade rate hint (higher = faster). Carried for callers and
            jittered by rain, not read by the wave formula.
        wavelength: Ring width control in pixels (ring sigma = wavelength / 2).
        duration: Lifetime in milliseconds.
    """

    speed: float = 150.0
    amplitude: float = 0.4
    decay: float = 2.0
    wavelength: float = 40.0
    duration: float = 2000.0

    def __post_init__(self):
        if self.speed <= 0:
            raise ConfigurationError(f"Ripple speed must be > 0, got {self.speed}")
        if self.duration <= 0:
            raise ConfigurationError(
                f"Ripple duration must be > 0, got {self.duration}")
        if self.wavelength <= 0:
            raise ConfigurationError(
                f"Ripple wavelength must be > 0, got {self.wavelength}")


@dataclass(frozen=True)
class RainConfig:
    """Parameters for automatic raindrop spawning.

    Attributes:
        intensity: Raindrops per second.
        variation: Random jitter fraction applied to every ripple parameter.
        drop_ripple_config: Optional overrides merged over the base ripple
            config for every drop.
    """

    intensity: float = 3.0
    variation: float = 0.3
    drop_ripple_config: Optional[Mapping[str, float]] = None

    def __post_init__(self):
        if self.intensity <= 0:
            raise ConfigurationError(
                f"Rain intensity must be > 0, got {self.intensity}")
        if not 0 <= self.variation < 1:
            raise ConfigurationError(
                f"Rain variation must be in [0, 1), got {self.variation}")

    @property
    def interval_ms(self) -> float:
        return 1000.0 / self.intensity


DEFAULT_GRID_CONFIG = GridConfig()
DEFAULT_RENDER_OPTIONS = RenderOptions()
DEFAULT_RIPPLE_CONFIG = RippleConfig()
DEFAULT_RAIN_CONFIG = RainConfig()
DEFAULT_MOUSE_RIPPLE_CONFIG = RippleConfig(
    speed=120.0, amplitude=0.25, decay=3.0, wavelength=25.0, duration=1000.0)

RippleConfigLike = Union[RippleConfig, Mapping[str, Any], None]
RainConfigLike = Union[RainConfig, Mapping[str, Any], None]


def _merge(base, overrides: Optional[Mapping[str, Any]]):
    if not overrides:
        return base
    known = {f.name for f in fields(base)}
    unknown = set(overrides) - known
    if unknown:
        raise ConfigurationError(
            f"Unknown {type(base).__name__} option(s): {', '.join(sorted(unknown))}")
    return replace(base, **overrides)


def merge_ripple_config(base: RippleConfig = DEFAULT_RIPPLE_CONFIG,
                        overrides: RippleConfigLike = None) -> RippleConfig:
    """Merge a partial mapping (or a full RippleConfig) over ``base``."""
    if isinstance(overrides, RippleConfig):
        return overrides
    return _merge(base, overrides)


def merge_rain_config(base: RainConfig = DEFAULT_RAIN_CONFIG,
                      overrides: RainConfigLike = None) -> RainConfig:
    if isinstance(overrides, RainConfig):
        return overrides
    return _merge(base, overrides)
