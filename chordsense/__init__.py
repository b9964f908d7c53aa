"""chordsense - Chord recognition for short guitar recordings.

Architecture Layers:
    1. input/       - Audio file loading
    2. analysis/    - Low-level signal helpers (windows, Goertzel, peak picking)
    3. extraction/  - Candidate fundamentals from samples (grid / spectral)
    4. processing/  - Harmonic filtering and note quantization
    5. inference/   - Chord templates, confidence and ranked matching
    6. pipeline     - Stage wiring: samples -> ChordCandidates
"""

__version__ = "0.1.0"

# Core types
from .core import (
    SampleBuffer,
    FrequencyPeak,
    NoteInfo,
    ConfigurationError,
    normalize_notes,
    frequency_to_midi,
    frequency_to_note_info,
)

# Input layer
from .input import AudioLoader

# Extraction layer
from .extraction import (
    ExtractorConfig,
    SpectralExtractor,
    GoertzelGridExtractor,
    create_extractor,
    extract_frequencies,
)

# Processing layer
from .processing import (
    HarmonicFilter,
    HarmonicFilterConfig,
    NoteQuantizer,
    filter_fundamentals,
    to_pitch_classes,
)

# Inference layer
from .inference import (
    ChordTemplate,
    ChordCandidate,
    ChordMatcher,
    MatcherConfig,
    confidence,
    match_chords,
    best_chord,
    all_possible_chords,
    matches_expected_chord,
    get_chord_template,
    chord_notes,
)

# Pipeline
from .config import PipelineConfig
from .pipeline import AnalysisResult, ChordRecognizer, recognize_chords

__all__ = [
    # Core
    "SampleBuffer",
    "FrequencyPeak",
    "NoteInfo",
    "ConfigurationError",
    "normalize_notes",
    "frequency_to_midi",
    "frequency_to_note_info",
    # Input
    "AudioLoader",
    # Extraction
    "ExtractorConfig",
    "SpectralExtractor",
    "GoertzelGridExtractor",
    "create_extractor",
    "extract_frequencies",
    # Processing
    "HarmonicFilter",
    "HarmonicFilterConfig",
    "NoteQuantizer",
    "filter_fundamentals",
    "to_pitch_classes",
    # Inference
    "ChordTemplate",
    "ChordCandidate",
    "ChordMatcher",
    "MatcherConfig",
    "confidence",
    "match_chords",
    "best_chord",
    "all_possible_chords",
    "matches_expected_chord",
    "get_chord_template",
    "chord_notes",
    # Pipeline
    "PipelineConfig",
    "AnalysisResult",
    "ChordRecognizer",
    "recognize_chords",
]
