"""Analysis layer - Low-level numeric helpers.

Shared by the frequency extractors:
- Windowing and framing
- Goertzel single-frequency magnitude
- Adaptive thresholds and local-maximum picking
"""

from .goertzel import goertzel_magnitude, goertzel_magnitudes
from .peaks import calculate_adaptive_threshold, find_local_maxima
from .windows import hann_window, window_gain, frame_signal, spread_window_starts

__all__ = [
    "goertzel_magnitude",
    "goertzel_magnitudes",
    "calculate_adaptive_threshold",
    "find_local_maxima",
    "hann_window",
    "window_gain",
    "frame_signal",
    "spread_window_starts",
]
