"""Chord matching - Rank chord templates against a pitch-class set.

Implements template matching with:
- Neighbour-tolerant confidence scoring
- A usability floor (enough confidence, few unexplained notes)
- Subset recovery when stray notes spoil the full set
- Deterministic ranking with specificity and root tie-breaks
"""

from dataclasses import asdict, dataclass, field
from itertools import combinations
from typing import Dict, Iterable, List, Optional, Sequence

from ..core import ConfigurationError, MIN_CHORD_NOTES, PITCH_NAMES, normalize_notes
from .confidence import ConfidenceScorer
from .templates import CHORD_TEMPLATES, QUALITIES, ChordTemplate, get_chord_template

_QUALITY_ORDER = {q.label: i for i, q in enumerate(QUALITIES)}


@dataclass
class MatcherConfig:
    """Configuration for chord matching.

    Attributes:
        min_notes: Fewest distinct pitch classes that can form a chord (default: 3)
        max_notes: Input notes beyond this many are ignored (default: 8)
        min_confidence: Lowest confidence a usable candidate may have (default: 0.5)
        min_explained_ratio: Share of matched notes that must be chord tones (default: 0.8)
        neighbor_credit: Credit for a note a semitone off a chord tone (default: 0.4)
        subset_sizes: Subset sizes tried, in order, when the full set fails (default: 4, 3)
    """

    min_notes: int = MIN_CHORD_NOTES
    max_notes: int = 8
    min_confidence: float = 0.5
    min_explained_ratio: float = 0.8
    neighbor_credit: float = 0.4
    subset_sizes: Sequence[int] = (4, 3)

    def validate(self) -> None:
        if self.min_notes < 1:
            raise ConfigurationError(f"min_notes must be >= 1: {self.min_notes}")
        if self.max_notes < self.min_notes:
            raise ConfigurationError(
                f"max_notes ({self.max_notes}) must be >= min_notes ({self.min_notes})"
            )
        for name in ("min_confidence", "min_explained_ratio", "neighbor_credit"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be within [0, 1]: {value}")
        if any(size < 1 for size in self.subset_sizes):
            raise ConfigurationError(f"subset_sizes must be positive: {self.subset_sizes}")


@dataclass
class ChordCandidate:
    """A candidate chord with its confidence score."""

    chord_name: str  # e.g. "C", "Dm7", "G7"
    root: str
    quality: str
    matched_notes: List[str]  # The note set that was matched (full input or subset)
    confidence: float
    template_notes: List[str] = field(default_factory=list)
    missing_notes: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


class ChordMatcher:
    """Match pitch-class sets against the chord template table.

    A candidate is usable when its confidence reaches `min_confidence`
    and at least `min_explained_ratio` of the matched notes are chord
    tones. If nothing is usable, 4-note and then 3-note subsets of the
    input are tried, so a single stray note doesn't hide the chord.
    """

    def __init__(
        self,
        config: Optional[MatcherConfig] = None,
        templates: Sequence[ChordTemplate] = CHORD_TEMPLATES,
    ):
        """
        Initialize ChordMatcher.

        Args:
            config: Matcher configuration (defaults if None)
            templates: Template table to match against
        """
        self.config = config or MatcherConfig()
        self.config.validate()
        self.templates = templates
        self.scorer = ConfidenceScorer(self.config.neighbor_credit)

    def match(self, pitch_classes: Iterable[str], top_n: Optional[int] = 3) -> List[ChordCandidate]:
        """
        Rank chords for a set of pitch classes.

        Args:
            pitch_classes: Note names in any spelling; order matters only
                for the root tie-break (first note preferred)
            top_n: Number of candidates to return (None for all usable)

        Returns:
            Usable candidates, best first; empty if fewer than
            `min_notes` distinct notes or nothing is usable
        """
        if top_n is not None and top_n < 1:
            raise ConfigurationError(f"top_n must be >= 1: {top_n}")

        config = self.config
        notes = normalize_notes(pitch_classes)[:config.max_notes]
        if len(notes) < config.min_notes:
            return []

        first_root = notes[0]
        ranked = self._rank([notes], first_root)

        if not ranked:
            for size in config.subset_sizes:
                if size >= len(notes) or size < config.min_notes:
                    continue
                subsets = [list(subset) for subset in combinations(notes, size)]
                ranked = self._rank(subsets, first_root)
                if ranked:
                    break

        return ranked if top_n is None else ranked[:top_n]

    def _rank(self, note_sets: List[List[str]], first_root: str) -> List[ChordCandidate]:
        """Score every template against every note set; best per chord name, ranked."""
        config = self.config
        best: Dict[str, tuple] = {}

        for notes in note_sets:
            detected = frozenset(PITCH_NAMES.index(n) for n in notes)
            for template in self.templates:
                chord_tones = template.pitch_classes
                score = round(self.scorer.score(detected, chord_tones), 6)
                if score < config.min_confidence:
                    continue
                if self.scorer.explained_ratio(detected, chord_tones) < config.min_explained_ratio:
                    continue

                key = self._sort_key(score, template, first_root)
                current = best.get(template.name)
                if current is None or key < current[0]:
                    best[template.name] = (key, template, notes, score)

        ranked = sorted(best.values(), key=lambda entry: entry[0])
        return [
            self._candidate(template, notes, score)
            for _, template, notes, score in ranked
        ]

    @staticmethod
    def _sort_key(score: float, template: ChordTemplate, first_root: str) -> tuple:
        return (
            -score,
            -len(template),
            0 if template.root == first_root else 1,
            _QUALITY_ORDER.get(template.quality, len(_QUALITY_ORDER)),
            template.root_index,
        )

    @staticmethod
    def _candidate(template: ChordTemplate, notes: List[str], score: float) -> ChordCandidate:
        template_notes = template.notes
        return ChordCandidate(
            chord_name=template.name,
            root=template.root,
            quality=template.quality,
            matched_notes=list(notes),
            confidence=score,
            template_notes=template_notes,
            missing_notes=[n for n in template_notes if n not in notes],
        )


def match_chords(
    pitch_classes: Iterable[str],
    top_n: Optional[int] = 3,
    config: Optional[MatcherConfig] = None,
) -> List[ChordCandidate]:
    """Rank chord candidates for a pitch-class set (see ChordMatcher.match)."""
    return ChordMatcher(config).match(pitch_classes, top_n=top_n)


def best_chord(
    pitch_classes: Iterable[str],
    config: Optional[MatcherConfig] = None,
) -> Optional[ChordCandidate]:
    """The single best chord for a pitch-class set, or None."""
    candidates = match_chords(pitch_classes, top_n=1, config=config)
    return candidates[0] if candidates else None


def all_possible_chords(
    pitch_classes: Iterable[str],
    config: Optional[MatcherConfig] = None,
) -> List[str]:
    """Names of every usable chord for a pitch-class set, best first."""
    return [c.chord_name for c in match_chords(pitch_classes, top_n=None, config=config)]


def matches_expected_chord(candidates: Iterable[ChordCandidate], expected: str) -> bool:
    """
    Check whether any candidate is the expected chord.

    The expected name is parsed like a template name, so "C Major",
    "C" and "Cmaj" are equivalent and "Db" matches a detected "C#".
    """
    template = get_chord_template(expected)
    if template is None:
        return False
    return any(
        c.root == template.root and c.quality == template.quality
        for c in candidates
    )
