"""Note quantization - Snap frequencies to tempered notes and pitch classes."""

from typing import Iterable, List, Optional, Union

from ..core import (
    FrequencyPeak,
    MIDI_MAX,
    MIDI_MIN,
    NoteInfo,
    frequency_to_midi,
    frequency_to_note_info,
    midi_to_pitch_class,
)

FrequencyLike = Union[FrequencyPeak, float]


def _frequency_of(item: FrequencyLike) -> float:
    if isinstance(item, FrequencyPeak):
        return item.frequency
    return item


def _midi_of(item: FrequencyLike) -> Optional[int]:
    if isinstance(item, FrequencyPeak):
        return item.midi
    return frequency_to_midi(item)


class NoteQuantizer:
    """Quantize frequencies to MIDI notes and deduplicated pitch classes."""

    def __init__(self, min_midi: int = MIDI_MIN, max_midi: int = MIDI_MAX):
        """
        Initialize NoteQuantizer.

        Args:
            min_midi: Lowest MIDI note accepted
            max_midi: Highest MIDI note accepted
        """
        self.min_midi = min_midi
        self.max_midi = max_midi

    def to_midi(self, items: Iterable[FrequencyLike]) -> List[int]:
        """Nearest MIDI note for each usable frequency, in input order.

        Non-finite, non-positive and out-of-range frequencies are skipped.
        """
        midi_notes = []
        for item in items:
            midi = _midi_of(item)
            if midi is None or not self.min_midi <= midi <= self.max_midi:
                continue
            midi_notes.append(midi)
        return midi_notes

    def to_note_infos(self, items: Iterable[FrequencyLike]) -> List[NoteInfo]:
        """Note details for each usable frequency, in input order."""
        infos = []
        for item in items:
            info = frequency_to_note_info(_frequency_of(item))
            if info is None or not self.min_midi <= info.midi <= self.max_midi:
                continue
            infos.append(info)
        return infos

    def to_pitch_classes(self, items: Iterable[FrequencyLike]) -> List[str]:
        """
        Pitch classes for peaks or frequencies.

        Args:
            items: FrequencyPeak objects or frequencies in Hz

        Returns:
            Pitch class names in order of first occurrence, no duplicates
        """
        pitch_classes: List[str] = []
        for midi in self.to_midi(items):
            pc = midi_to_pitch_class(midi)
            if pc not in pitch_classes:
                pitch_classes.append(pc)
        return pitch_classes


def to_pitch_classes(items: Iterable[FrequencyLike]) -> List[str]:
    """Deduplicated pitch classes for peaks or frequencies."""
    return NoteQuantizer().to_pitch_classes(items)
