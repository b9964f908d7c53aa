"""Goertzel scoring over a fixed grid of tempered notes."""

from typing import List

import numpy as np
import librosa

from .base import FrequencyExtractor
from ..analysis import (
    calculate_adaptive_threshold,
    find_local_maxima,
    goertzel_magnitudes,
    hann_window,
    spread_window_starts,
    window_gain,
)
from ..core import FrequencyPeak


class GoertzelGridExtractor(FrequencyExtractor):
    """
    Targeted extractor for short, single-strum recordings.

    Every note of the grid (MIDI grid_min_midi..grid_max_midi) is scored
    with the Goertzel magnitude at its exact tempered frequency, plus
    weighted magnitudes of its 2nd and 3rd harmonics so that notes whose
    overtones are present rank higher. Scores are averaged over several
    overlapping windows spread across the buffer. A note becomes a peak
    when its score is a local maximum against its semitone neighbours and
    clears the adaptive threshold.
    """

    name = "grid"

    @property
    def grid_notes(self) -> np.ndarray:
        """MIDI numbers of the grid whose fundamentals are in range."""
        config = self.config
        notes = np.arange(config.grid_min_midi, config.grid_max_midi + 1)
        freqs = librosa.midi_to_hz(notes)
        keep = (freqs >= config.min_frequency) & (freqs <= config.max_frequency)
        return notes[keep]

    def score_notes(self, samples: np.ndarray, sample_rate: int) -> np.ndarray:
        """
        Harmonic-weighted Goertzel score for each grid note.

        Returns:
            Array aligned with `grid_notes`; zeros when the buffer is
            shorter than one window
        """
        config = self.config
        notes = self.grid_notes
        scores = np.zeros(len(notes))
        starts = spread_window_starts(len(samples), config.window_size, config.window_count)
        if not starts or len(notes) == 0:
            return scores

        fundamentals = librosa.midi_to_hz(notes)
        window = hann_window(config.window_size)
        gain = window_gain(window)

        for start in starts:
            segment = samples[start:start + config.window_size] * window
            scores += goertzel_magnitudes(segment, fundamentals, sample_rate) / gain
            for k, weight in enumerate(config.harmonic_weights, start=2):
                scores += weight * goertzel_magnitudes(segment, fundamentals * k, sample_rate) / gain

        scores /= len(starts)

        if config.bass_emphasis > 0 and len(notes) > 1:
            position = (notes - notes[0]) / (notes[-1] - notes[0])
            scores *= 1.0 + config.bass_emphasis * (1.0 - position)

        return scores

    def _extract(self, samples: np.ndarray, sample_rate: int) -> List[FrequencyPeak]:
        config = self.config
        notes = self.grid_notes
        scores = self.score_notes(samples, sample_rate)
        if len(scores) == 0 or not np.any(scores > 0):
            return []

        threshold = calculate_adaptive_threshold(
            scores,
            min_threshold=config.min_amplitude,
            threshold_ratio=config.threshold_ratio,
        )

        peaks = []
        for i, prominence in find_local_maxima(scores):
            score = float(scores[i])
            if score <= threshold or prominence < config.min_prominence:
                continue
            peaks.append(
                FrequencyPeak(
                    frequency=float(librosa.midi_to_hz(notes[i])),
                    amplitude=score,
                    prominence=prominence,
                )
            )

        return peaks
