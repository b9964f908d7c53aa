"""Pitch helpers - frequencies, MIDI numbers and pitch classes."""

import math
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .constants import (
    A4_FREQUENCY,
    A4_MIDI,
    MIDI_MAX,
    MIDI_MIN,
    NATURAL_OFFSETS,
    PITCH_NAMES,
)

_NOTE_RE = re.compile(r"^\s*([A-Ga-g])([#b♯♭x]*)(-?\d+)?\s*$")


@dataclass(frozen=True)
class NoteInfo:
    """A single quantized note."""

    name: str  # Note name with octave (e.g., "C#4")
    pc: str  # Pitch class (e.g., "C#")
    octave: int
    midi: int
    freq: float  # Frequency the note was quantized from


def normalize_pitch_class(name: str) -> Optional[str]:
    """
    Normalize a spelled note name to its canonical pitch class.

    Octave numbers are stripped and flats/sharps are folded onto the
    sharp spelling, so "Db", "C#4" and "c♯" all become "C#".

    Returns:
        Canonical pitch class, or None if the name can't be parsed
    """
    if not isinstance(name, str):
        return None

    match = _NOTE_RE.match(name)
    if not match:
        return None

    letter, accidentals, _ = match.groups()
    offset = NATURAL_OFFSETS[letter.upper()]
    for acc in accidentals:
        if acc in "#♯":
            offset += 1
        elif acc == "x":
            offset += 2
        else:
            offset -= 1

    return PITCH_NAMES[offset % 12]


def pitch_class_index(name: str) -> Optional[int]:
    """Get pitch class number (0-11, where 0=C) for any spelling."""
    pc = normalize_pitch_class(name)
    if pc is None:
        return None
    return PITCH_NAMES.index(pc)


def normalize_notes(notes: Iterable[str]) -> List[str]:
    """Normalize note names to pitch classes, dropping unparseable ones.

    Order of first occurrence is kept and duplicates are removed.
    """
    seen = []
    for note in notes:
        pc = normalize_pitch_class(note)
        if pc is not None and pc not in seen:
            seen.append(pc)
    return seen


def is_valid_frequency(freq) -> bool:
    """True for strictly positive, finite frequencies."""
    try:
        freq = float(freq)
    except (TypeError, ValueError):
        return False
    return math.isfinite(freq) and freq > 0


def frequency_to_midi(freq: float) -> Optional[int]:
    """Convert frequency (Hz) to the nearest equal-tempered MIDI pitch.

    Returns None for non-finite or non-positive frequencies and for
    results outside the MIDI range.
    """
    if not is_valid_frequency(freq):
        return None

    midi = int(round(12 * math.log2(float(freq) / A4_FREQUENCY) + A4_MIDI))
    if midi < MIDI_MIN or midi > MIDI_MAX:
        return None
    return midi


def midi_to_frequency(midi: int) -> float:
    """Convert MIDI pitch to frequency (Hz)."""
    return A4_FREQUENCY * (2 ** ((midi - A4_MIDI) / 12.0))


def midi_to_note_name(midi: int) -> str:
    """Get note name (e.g., 'C4', 'A#3')."""
    octave = (midi // 12) - 1
    return f"{PITCH_NAMES[midi % 12]}{octave}"


def midi_to_pitch_class(midi: int) -> str:
    """Get pitch class name for a MIDI pitch."""
    return PITCH_NAMES[midi % 12]


def frequency_to_note_info(freq: float) -> Optional[NoteInfo]:
    """Get note information for a frequency, or None if it can't be quantized."""
    midi = frequency_to_midi(freq)
    if midi is None:
        return None

    return NoteInfo(
        name=midi_to_note_name(midi),
        pc=midi_to_pitch_class(midi),
        octave=(midi // 12) - 1,
        midi=midi,
        freq=float(freq),
    )


def is_in_musical_range(
    freq: float,
    min_freq: float = 80.0,
    max_freq: float = 2000.0,
) -> bool:
    """Check if a frequency lies in the musical range of interest."""
    return is_valid_frequency(freq) and min_freq <= freq <= max_freq
