"""Tests for the low-level analysis helpers."""

import numpy as np
import pytest

from chordsense.analysis import (
    calculate_adaptive_threshold,
    find_local_maxima,
    frame_signal,
    goertzel_magnitude,
    goertzel_magnitudes,
    hann_window,
    spread_window_starts,
    window_gain,
)
from generate_test_audio import generate_sine_wave


class TestGoertzel:
    """Goertzel magnitude at arbitrary target frequencies."""

    @pytest.fixture
    def a4_segment(self):
        # 800 samples at 8 kHz hold exactly 44 cycles of 440 Hz
        return generate_sine_wave(440.0, 0.1, sr=8000).astype(np.float64)

    def test_on_target_magnitude(self, a4_segment):
        # Unit sine: |X| = N / 2 at its own frequency
        assert goertzel_magnitude(a4_segment, 440.0, 8000) == pytest.approx(400.0, rel=0.01)

    def test_off_target_is_small(self, a4_segment):
        assert goertzel_magnitude(a4_segment, 1000.0, 8000) < 1.0

    def test_matches_fft_bin(self, a4_segment):
        spectrum = np.abs(np.fft.rfft(a4_segment))
        # 440 Hz lands exactly on bin 44 of an 800-point transform
        assert goertzel_magnitude(a4_segment, 440.0, 8000) == pytest.approx(spectrum[44], rel=1e-6)

    @pytest.mark.parametrize("freq", [0.0, -100.0, float("nan"), float("inf"), 4000.0, 5000.0])
    def test_invalid_targets_score_zero(self, a4_segment, freq):
        assert goertzel_magnitude(a4_segment, freq, 8000) == 0.0

    def test_short_segment_scores_zero(self):
        assert goertzel_magnitude(np.array([1.0]), 440.0, 8000) == 0.0
        assert goertzel_magnitude(np.array([]), 440.0, 8000) == 0.0

    def test_vectorized_helper(self, a4_segment):
        mags = goertzel_magnitudes(a4_segment, [440.0, 1000.0], 8000)
        assert mags.shape == (2,)
        assert mags[0] > 100 * mags[1]


class TestAdaptiveThreshold:
    def test_ratio_of_maximum(self):
        assert calculate_adaptive_threshold([0.1, 1.0, 0.5]) == pytest.approx(0.3)

    def test_floor_for_quiet_input(self):
        assert calculate_adaptive_threshold([0.001, 0.002]) == 0.005

    def test_custom_parameters(self):
        values = np.array([0.2, 2.0])
        assert calculate_adaptive_threshold(values, min_threshold=0.1, threshold_ratio=0.25) == 0.5

    def test_ignores_non_finite(self):
        assert calculate_adaptive_threshold([np.nan, np.inf, 1.0]) == pytest.approx(0.3)

    def test_empty(self):
        assert calculate_adaptive_threshold([], min_threshold=0.01) == 0.01


class TestLocalMaxima:
    def test_simple_peaks(self):
        assert find_local_maxima([0.0, 1.0, 0.0, 2.0, 1.0]) == [(1, 1.0), (3, 1.0)]

    def test_edges_compare_to_single_neighbour(self):
        maxima = find_local_maxima([3.0, 1.0, 2.0])
        assert maxima == [(0, 2.0), (2, 1.0)]

    def test_plateau_counts_both(self):
        assert find_local_maxima([1.0, 1.0]) == [(0, 0.0), (1, 0.0)]

    def test_single_and_empty(self):
        assert find_local_maxima([0.5]) == [(0, 0.5)]
        assert find_local_maxima([]) == []


class TestWindows:
    def test_hann_is_periodic(self):
        window = hann_window(8)
        assert len(window) == 8
        assert window[0] == pytest.approx(0.0)
        assert window[4] == pytest.approx(1.0)

    def test_window_gain(self):
        assert window_gain(np.ones(8)) == 4.0
        assert window_gain(hann_window(4096)) == pytest.approx(1024.0)

    def test_frame_signal(self):
        frames = frame_signal(np.arange(10.0), 4, 2)
        assert frames.shape == (4, 4)
        np.testing.assert_array_equal(frames[1], [2.0, 3.0, 4.0, 5.0])

    def test_frame_signal_too_short(self):
        assert frame_signal(np.arange(3.0), 4, 2).shape == (0, 4)

    def test_spread_window_starts(self):
        assert spread_window_starts(10000, 4096, 4) == [0, 1968, 3936, 5904]

    def test_spread_window_starts_exact_fit(self):
        assert spread_window_starts(4096, 4096, 4) == [0]

    def test_spread_window_starts_too_short(self):
        assert spread_window_starts(100, 4096, 4) == []

    def test_spread_window_starts_single(self):
        assert spread_window_starts(5000, 4096, 1) == [452]
