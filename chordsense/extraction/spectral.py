"""Spectral peak picking over a Hann-windowed FFT."""

from typing import List

import numpy as np

from .base import FrequencyExtractor
from ..analysis import (
    calculate_adaptive_threshold,
    find_local_maxima,
    frame_signal,
    hann_window,
    window_gain,
)
from ..core import FrequencyPeak


class SpectralExtractor(FrequencyExtractor):
    """
    Full-spectrum frequency extractor.

    The buffer is cut into overlapping Hann-windowed frames whose
    magnitude spectra are averaged. Local maxima inside the frequency
    range that clear the adaptive threshold and minimum prominence become
    peaks at bin * sample_rate / window_size.
    """

    name = "spectral"

    def magnitude_spectrum(self, samples: np.ndarray) -> np.ndarray:
        """Average magnitude spectrum, scaled to sinusoid amplitude."""
        window_size = self.config.window_size
        frames = frame_signal(samples, window_size, self.config.effective_hop_size)
        if len(frames) == 0:
            return np.zeros(window_size // 2 + 1)

        window = hann_window(window_size)
        spectra = np.abs(np.fft.rfft(frames * window, n=window_size, axis=1))
        return np.mean(spectra, axis=0) / window_gain(window)

    def _extract(self, samples: np.ndarray, sample_rate: int) -> List[FrequencyPeak]:
        config = self.config
        spectrum = self.magnitude_spectrum(samples)
        bin_size = sample_rate / config.window_size

        freqs = np.arange(len(spectrum)) * bin_size
        in_range = (freqs >= config.min_frequency) & (freqs <= config.max_frequency)
        if not np.any(in_range):
            return []

        threshold = calculate_adaptive_threshold(
            spectrum[in_range],
            min_threshold=config.min_amplitude,
            threshold_ratio=config.threshold_ratio,
        )

        peaks = []
        for i, prominence in find_local_maxima(spectrum):
            if not in_range[i] or i == 0:
                continue
            amplitude = float(spectrum[i])
            if amplitude <= threshold or prominence < config.min_prominence:
                continue
            peaks.append(
                FrequencyPeak(
                    frequency=float(i * bin_size),
                    amplitude=amplitude,
                    prominence=prominence,
                )
            )

        return peaks
