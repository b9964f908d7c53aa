"""Chord templates - the static table of chord shapes.

Every chord is a root pitch class plus a quality, and every quality is a
set of semitone intervals from the root. The table holds all 12 roots for
each quality and is built once at import.
"""

import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

from ..core import PITCH_NAMES, normalize_pitch_class


@dataclass(frozen=True)
class ChordQuality:
    """A chord quality: label, intervals from the root and name suffix."""

    label: str
    intervals: Tuple[int, ...]
    suffix: str


# Ordered by priority (more common chords first); ranking ties fall back to this order
QUALITIES: Tuple[ChordQuality, ...] = (
    ChordQuality("maj", (0, 4, 7), ""),
    ChordQuality("min", (0, 3, 7), "m"),
    ChordQuality("7", (0, 4, 7, 10), "7"),
    ChordQuality("maj7", (0, 4, 7, 11), "maj7"),
    ChordQuality("m7", (0, 3, 7, 10), "m7"),
    ChordQuality("dim", (0, 3, 6), "dim"),
    ChordQuality("aug", (0, 4, 8), "aug"),
    ChordQuality("sus2", (0, 2, 7), "sus2"),
    ChordQuality("sus4", (0, 5, 7), "sus4"),
    ChordQuality("dim7", (0, 3, 6, 9), "dim7"),
    ChordQuality("m7b5", (0, 3, 6, 10), "m7b5"),
    ChordQuality("6", (0, 4, 7, 9), "6"),
    ChordQuality("m6", (0, 3, 7, 9), "m6"),
    ChordQuality("add9", (0, 2, 4, 7), "add9"),
)

QUALITY_BY_LABEL: Dict[str, ChordQuality] = {q.label: q for q in QUALITIES}


@dataclass(frozen=True)
class ChordTemplate:
    """A chord shape anchored on a root."""

    root: str
    quality: str
    intervals: Tuple[int, ...]

    @property
    def root_index(self) -> int:
        return PITCH_NAMES.index(self.root)

    @property
    def pitch_classes(self) -> FrozenSet[int]:
        """Pitch class numbers (0-11) of the chord tones."""
        return frozenset((self.root_index + i) % 12 for i in self.intervals)

    @property
    def notes(self) -> List[str]:
        """Chord tones in interval order, starting at the root."""
        return [PITCH_NAMES[(self.root_index + i) % 12] for i in self.intervals]

    @property
    def name(self) -> str:
        """Conventional chord name (e.g. 'C', 'Dm7', 'F#maj7')."""
        return format_chord_name(self.root, self.quality)

    def __len__(self) -> int:
        return len(self.intervals)


def format_chord_name(root: str, quality: str) -> str:
    """Build a chord name from a root pitch class and quality label."""
    return f"{root}{QUALITY_BY_LABEL[quality].suffix}"


CHORD_TEMPLATES: Tuple[ChordTemplate, ...] = tuple(
    ChordTemplate(root, quality.label, quality.intervals)
    for quality in QUALITIES
    for root in PITCH_NAMES
)

_TEMPLATE_BY_KEY: Dict[Tuple[str, str], ChordTemplate] = {
    (t.root, t.quality): t for t in CHORD_TEMPLATES
}

# Suffix spellings, matched case-sensitively ("M7" and "m7" differ)
_SUFFIX_ALIASES: Dict[str, str] = {
    "": "maj", "M": "maj", "maj": "maj", "major": "maj", "Δ": "maj",
    "m": "min", "min": "min", "minor": "min", "-": "min",
    "7": "7", "dom7": "7",
    "maj7": "maj7", "M7": "maj7", "Δ7": "maj7", "major7": "maj7",
    "m7": "m7", "min7": "m7", "-7": "m7", "minor7": "m7",
    "dim": "dim", "°": "dim", "o": "dim",
    "aug": "aug", "+": "aug",
    "sus2": "sus2",
    "sus": "sus4", "sus4": "sus4",
    "dim7": "dim7", "°7": "dim7", "o7": "dim7",
    "m7b5": "m7b5", "ø": "m7b5", "ø7": "m7b5", "min7b5": "m7b5",
    "6": "6", "maj6": "6",
    "m6": "m6", "min6": "m6",
    "add9": "add9",
}

# Spelled-out words, matched case-insensitively ("C Major", "a minor")
_WORD_ALIASES: Dict[str, str] = {
    "major": "maj", "maj": "maj",
    "minor": "min", "min": "min",
    "dominant7": "7", "dominant": "7", "dom7": "7",
    "major7": "maj7", "maj7": "maj7",
    "minor7": "m7", "min7": "m7",
    "diminished": "dim", "dim": "dim",
    "augmented": "aug", "aug": "aug",
    "sus2": "sus2", "sus4": "sus4", "sus": "sus4",
    "diminished7": "dim7", "dim7": "dim7",
    "halfdiminished": "m7b5", "half-diminished": "m7b5",
    "minor6": "m6", "min6": "m6",
    "add9": "add9",
}

_CHORD_NAME_RE = re.compile(r"^\s*([A-Ga-g])([#b♯♭]?)\s*(.*?)\s*$")


def parse_chord_name(name: str) -> Optional[Tuple[str, str]]:
    """
    Parse a chord name into (root pitch class, quality label).

    Accepts conventional symbols ("C", "Dm7", "F#maj7", "Bbm", "Bm7b5")
    and spelled-out names ("C Major", "A minor").

    Returns:
        (root, quality) tuple, or None if the name isn't recognised
    """
    if not isinstance(name, str):
        return None

    match = _CHORD_NAME_RE.match(name)
    if not match:
        return None

    letter, accidental, suffix = match.groups()
    root = normalize_pitch_class(letter.upper() + accidental)
    if root is None:
        return None

    quality = _SUFFIX_ALIASES.get(suffix)
    if quality is None:
        quality = _WORD_ALIASES.get(suffix.replace(" ", "").lower())
    if quality is None:
        return None

    return root, quality


def get_chord_template(name: str) -> Optional[ChordTemplate]:
    """Look up the template for a chord name, or None if unknown."""
    parsed = parse_chord_name(name)
    if parsed is None:
        return None
    return _TEMPLATE_BY_KEY[parsed]


def chord_notes(name: str) -> List[str]:
    """Canonical notes of a named chord (empty list if unknown)."""
    template = get_chord_template(name)
    return template.notes if template else []
