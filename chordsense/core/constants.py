"""Global constants for chordsense."""

# Pitch names (sharps are the canonical spelling)
PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Natural note offsets from C, used when parsing spelled note names
NATURAL_OFFSETS = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}

# Tuning reference
A4_FREQUENCY = 440.0
A4_MIDI = 69

# MIDI ranges
MIDI_MIN = 0
MIDI_MAX = 127
GUITAR_MIN = 40  # E2
GUITAR_MAX = 76  # E5

# Analysis defaults
DEFAULT_WINDOW_SIZE = 4096
DEFAULT_MIN_FREQUENCY = 80.0
DEFAULT_MAX_FREQUENCY = 2000.0
SILENCE_RMS = 1e-4
GUITAR_MIN_FREQUENCY = 70.0
GUITAR_MAX_FREQUENCY = 1200.0

# A chord needs at least this many distinct pitch classes
MIN_CHORD_NOTES = 3
