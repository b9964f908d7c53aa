"""Goertzel single-frequency energy detector.

Computes the spectral magnitude of a segment at one arbitrary target
frequency. Unlike an FFT bin the target is not quantized to
sample_rate / N, which makes it suited to scoring a fixed grid of
tempered note frequencies.
"""

import math
from typing import Iterable

import numpy as np
from scipy.signal import lfilter


def goertzel_magnitude(
    segment: np.ndarray,
    target_freq: float,
    sample_rate: int,
) -> float:
    """
    Magnitude of `segment` at `target_freq`.

    Runs the recurrence s[n] = x[n] + 2cos(w) s[n-1] - s[n-2] over every
    sample and combines the last two states:
        real = s[N-1] - s[N-2] cos(w)
        imag = s[N-2] sin(w)

    Args:
        segment: 1-D samples (already windowed if desired)
        target_freq: Frequency in Hz
        sample_rate: Sample rate in Hz

    Returns:
        sqrt(real^2 + imag^2); 0.0 for segments shorter than two samples or
        targets that are not in (0, Nyquist)
    """
    if len(segment) < 2:
        return 0.0
    if not math.isfinite(target_freq) or target_freq <= 0:
        return 0.0
    if target_freq >= sample_rate / 2:
        return 0.0

    w = 2.0 * math.pi * target_freq / sample_rate
    cos_w = math.cos(w)
    coeff = 2.0 * cos_w

    states = lfilter([1.0], [1.0, -coeff, 1.0], segment)
    s1 = states[-1]
    s2 = states[-2]

    real = s1 - s2 * cos_w
    imag = s2 * math.sin(w)
    magnitude = math.sqrt(real * real + imag * imag)

    return magnitude if math.isfinite(magnitude) else 0.0


def goertzel_magnitudes(
    segment: np.ndarray,
    target_freqs: Iterable[float],
    sample_rate: int,
) -> np.ndarray:
    """Goertzel magnitude for each target frequency."""
    return np.array(
        [goertzel_magnitude(segment, f, sample_rate) for f in target_freqs],
        dtype=np.float64,
    )
