"""Shape-matched ASCII rendering with ripple and rain effects."""

from .characters import (CHARACTERS, NORMALIZED_CHARACTERS, CharacterEntry,
                         normalize_character_vectors)
from .config import (DEFAULT_GRID_CONFIG, DEFAULT_MOUSE_RIPPLE_CONFIG, DEFAULT_RAIN_CONFIG,
                     DEFAULT_RENDER_OPTIONS, DEFAULT_RIPPLE_CONFIG, ConfigurationError,
                     GridConfig, RainConfig, RenderOptions, RippleConfig)
from .contrast import apply_directional_contrast, apply_full_contrast, apply_global_contrast
from .lookup import CachedCharacterLookup, cached_lookup, find_best_character
from .render import FrameOutput, render_ascii_frame, render_base_frame
from .ripple import (Ripple, RippleState, apply_ripple_to_vector, calculate_wave_value,
                     create_rain_drop, create_ripple, create_ripple_burst, has_active_ripples,
                     prune_expired_ripples)
from .sampling import (pixel_lightness, rgb_to_lightness, sample_cell, sample_circle,
                       sample_external_circles, sample_grid)
from .session import AsciiSession

__version__ = "0.1.0"
