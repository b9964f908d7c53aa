"""Chord recognition pipeline.

samples → extractor → harmonic filter → quantizer → matcher

Each stage is a pure function of its input; the recognizer only wires
them together and reports stage sizes at DEBUG level.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .config import PipelineConfig
from .core import FrequencyPeak, SampleBuffer
from .extraction import FrequencyExtractor, create_extractor
from .inference import ChordCandidate, ChordMatcher, matches_expected_chord
from .logging_config import get_logger
from .processing import HarmonicFilter, NoteQuantizer

module_logger = get_logger(__name__)


@dataclass
class AnalysisResult:
    """Everything the pipeline learned about one buffer."""

    candidates: List[ChordCandidate] = field(default_factory=list)
    pitch_classes: List[str] = field(default_factory=list)
    peaks: List[FrequencyPeak] = field(default_factory=list)
    fundamentals: List[FrequencyPeak] = field(default_factory=list)

    @property
    def best(self) -> Optional[ChordCandidate]:
        return self.candidates[0] if self.candidates else None

    @property
    def chord_names(self) -> List[str]:
        return [c.chord_name for c in self.candidates]

    def contains(self, expected: str) -> bool:
        """True if any candidate is the expected chord."""
        return matches_expected_chord(self.candidates, expected)

    def to_dict(self) -> dict:
        return {
            "candidates": [c.to_dict() for c in self.candidates],
            "pitch_classes": list(self.pitch_classes),
            "peaks": [_peak_dict(p) for p in self.peaks],
            "fundamentals": [_peak_dict(p) for p in self.fundamentals],
        }


def _peak_dict(peak: FrequencyPeak) -> dict:
    return {
        "frequency": round(peak.frequency, 3),
        "amplitude": peak.amplitude,
        "prominence": peak.prominence,
    }


class ChordRecognizer:
    """Recognize chords in a short mono recording."""

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        extractor: Optional[FrequencyExtractor] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize ChordRecognizer.

        Args:
            config: Pipeline configuration (defaults if None)
            extractor: Custom extractor; overrides config.strategy
            logger: Logger for stage diagnostics (module logger if None)
        """
        self.config = (config or PipelineConfig()).validate()
        self.extractor = extractor or create_extractor(
            self.config.strategy, self.config.extractor
        )
        self.harmonic_filter = HarmonicFilter(self.config.harmonics)
        self.quantizer = NoteQuantizer()
        self.matcher = ChordMatcher(self.config.matcher)
        self.logger = logger or module_logger

    def analyze(self, samples, sample_rate: int, top_n: Optional[int] = 3) -> AnalysisResult:
        """
        Run the full pipeline on mono samples.

        Args:
            samples: Sequence of float samples, a SampleBuffer, or None
            sample_rate: Sample rate in Hz (ignored for a SampleBuffer)
            top_n: Number of chord candidates to keep (None for all)

        Returns:
            AnalysisResult; silent or too-short input gives empty lists
        """
        if isinstance(samples, SampleBuffer):
            buffer = samples
        else:
            buffer = SampleBuffer.from_samples(samples, sample_rate)

        peaks = self.extractor.extract(buffer)
        self.logger.debug(
            "%s extractor: %d peaks from %d samples @ %d Hz",
            self.extractor.name, len(peaks), len(buffer), buffer.sample_rate,
        )

        fundamentals = self.harmonic_filter.filter(peaks)
        self.logger.debug(
            "Harmonic filter kept %d of %d peaks: %s",
            len(fundamentals), len(peaks),
            ", ".join(f"{p.frequency:.1f}" for p in fundamentals),
        )

        pitch_classes = self.quantizer.to_pitch_classes(fundamentals)
        self.logger.debug("Pitch classes: %s", pitch_classes)

        candidates = self.matcher.match(pitch_classes, top_n=top_n)
        if candidates:
            self.logger.debug(
                "Best chord %s (%.2f) of %d candidates",
                candidates[0].chord_name, candidates[0].confidence, len(candidates),
            )
        else:
            self.logger.debug("No chord matched")

        return AnalysisResult(
            candidates=candidates,
            pitch_classes=pitch_classes,
            peaks=peaks,
            fundamentals=fundamentals,
        )

    def detect_chords(self, samples, sample_rate: int, top_n: Optional[int] = 3) -> List[ChordCandidate]:
        """Ranked chord candidates only."""
        return self.analyze(samples, sample_rate, top_n=top_n).candidates


def recognize_chords(
    samples,
    sample_rate: int,
    config: Optional[PipelineConfig] = None,
    top_n: Optional[int] = 3,
) -> List[ChordCandidate]:
    """
    Recognize chords in mono samples with a one-off recognizer.

    Args:
        samples: Sequence of float samples, or None
        sample_rate: Sample rate in Hz
        config: Pipeline configuration (defaults if None)
        top_n: Number of candidates (None for all usable)

    Returns:
        Ranked ChordCandidate list
    """
    return ChordRecognizer(config).detect_chords(samples, sample_rate, top_n=top_n)
