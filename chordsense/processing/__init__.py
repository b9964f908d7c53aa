"""Processing layer - Peak post-processing.

This layer refines extractor output:
- Harmonic filtering (drop overtones of stronger peaks)
- Note quantization (frequency -> MIDI -> pitch class)
"""

from .harmonics import (
    HarmonicFilter,
    HarmonicFilterConfig,
    filter_fundamentals,
    is_harmonic_of,
    cents_between,
)
from .quantize import NoteQuantizer, to_pitch_classes

__all__ = [
    "HarmonicFilter",
    "HarmonicFilterConfig",
    "filter_fundamentals",
    "is_harmonic_of",
    "cents_between",
    "NoteQuantizer",
    "to_pitch_classes",
]
