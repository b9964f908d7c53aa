"""Windowing and framing helpers."""

from typing import List

import numpy as np
import librosa
from scipy.signal import get_window


def hann_window(size: int) -> np.ndarray:
    """Periodic Hann window of the given length."""
    return get_window("hann", size, fftbins=True)


def window_gain(window: np.ndarray) -> float:
    """Amplitude normalization for a window.

    Dividing a windowed transform magnitude by this value gives the
    amplitude of a sinusoid centred on the analysed frequency.
    """
    total = float(np.sum(window))
    return total / 2.0 if total > 0 else 1.0


def frame_signal(samples: np.ndarray, window_size: int, hop_size: int) -> np.ndarray:
    """
    Slice a signal into overlapping frames.

    Args:
        samples: 1-D signal
        window_size: Frame length in samples
        hop_size: Step between frame starts

    Returns:
        Array of shape (n_frames, window_size); empty when the signal is
        shorter than one frame
    """
    if len(samples) < window_size:
        return np.zeros((0, window_size))

    frames = librosa.util.frame(
        np.ascontiguousarray(samples),
        frame_length=window_size,
        hop_length=hop_size,
        axis=0,
    )
    return frames


def spread_window_starts(length: int, window_size: int, count: int) -> List[int]:
    """Evenly spread `count` window starts across a signal.

    Windows overlap when the signal is shorter than count * window_size.
    Duplicate starts (very short signals) are collapsed.
    """
    if length < window_size or count <= 0:
        return []

    last_start = length - window_size
    if count == 1 or last_start == 0:
        return [last_start // 2]

    starts = np.linspace(0, last_start, num=count).astype(int)
    return sorted(set(int(s) for s in starts))
