"""Core types and constants for chordsense."""

from .buffer import SampleBuffer, FrequencyPeak
from .errors import ConfigurationError
from .note import (
    NoteInfo,
    normalize_pitch_class,
    pitch_class_index,
    normalize_notes,
    is_valid_frequency,
    frequency_to_midi,
    midi_to_frequency,
    midi_to_note_name,
    midi_to_pitch_class,
    frequency_to_note_info,
    is_in_musical_range,
)
from .constants import (
    PITCH_NAMES,
    MIDI_MIN,
    MIDI_MAX,
    MIN_CHORD_NOTES,
    DEFAULT_WINDOW_SIZE,
)

__all__ = [
    "SampleBuffer",
    "FrequencyPeak",
    "ConfigurationError",
    "NoteInfo",
    "normalize_pitch_class",
    "pitch_class_index",
    "normalize_notes",
    "is_valid_frequency",
    "frequency_to_midi",
    "midi_to_frequency",
    "midi_to_note_name",
    "midi_to_pitch_class",
    "frequency_to_note_info",
    "is_in_musical_range",
    "PITCH_NAMES",
    "MIDI_MIN",
    "MIDI_MAX",
    "MIN_CHORD_NOTES",
    "DEFAULT_WINDOW_SIZE",
]
