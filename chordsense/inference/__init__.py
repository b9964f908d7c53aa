"""Inference layer - Chord understanding from pitch classes.

This layer turns a pitch-class set into named chords:
- Static chord template table and chord-name parsing
- Confidence scoring with semitone-neighbour credit
- Ranked template matching with subset recovery

Pipeline: Pitch classes → Confidence per template → Ranked ChordCandidates
"""

from .templates import (
    ChordQuality,
    ChordTemplate,
    QUALITIES,
    CHORD_TEMPLATES,
    format_chord_name,
    parse_chord_name,
    get_chord_template,
    chord_notes,
)
from .confidence import ConfidenceScorer, confidence
from .chords import (
    MatcherConfig,
    ChordCandidate,
    ChordMatcher,
    match_chords,
    best_chord,
    all_possible_chords,
    matches_expected_chord,
)

__all__ = [
    # Templates
    "ChordQuality",
    "ChordTemplate",
    "QUALITIES",
    "CHORD_TEMPLATES",
    "format_chord_name",
    "parse_chord_name",
    "get_chord_template",
    "chord_notes",
    # Confidence
    "ConfidenceScorer",
    "confidence",
    # Matching
    "MatcherConfig",
    "ChordCandidate",
    "ChordMatcher",
    "match_chords",
    "best_chord",
    "all_possible_chords",
    "matches_expected_chord",
]
