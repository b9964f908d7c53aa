"""Tests for the frequency extractors."""

import numpy as np
import pytest

from chordsense.analysis import goertzel_magnitude, hann_window, window_gain
from chordsense.core import ConfigurationError, SampleBuffer, frequency_to_midi
from chordsense.extraction import (
    ExtractorConfig,
    GoertzelGridExtractor,
    SpectralExtractor,
    create_extractor,
    extract_frequencies,
)
from generate_test_audio import C_MAJOR, generate_chord, generate_sine_wave

SR = 22050


@pytest.fixture(params=["grid", "spectral"])
def strategy(request):
    return request.param


class TestEdgePolicy:
    """Degenerate input never raises and yields no peaks."""

    def test_none_samples(self, strategy):
        assert extract_frequencies(None, SR, strategy=strategy) == []

    def test_empty_samples(self, strategy):
        assert extract_frequencies(np.zeros(0), SR, strategy=strategy) == []

    def test_shorter_than_window(self, strategy):
        short = generate_sine_wave(440.0, 0.1, SR)  # 2205 samples < 4096
        assert extract_frequencies(short, SR, strategy=strategy) == []

    def test_silence(self, strategy):
        assert extract_frequencies(np.zeros(SR), SR, strategy=strategy) == []

    def test_below_min_rms(self, strategy):
        quiet = 1e-5 * generate_sine_wave(440.0, 1.0, SR)
        assert extract_frequencies(quiet, SR, strategy=strategy) == []

    def test_bad_sample_rate(self, strategy):
        with pytest.raises(ConfigurationError):
            extract_frequencies(np.zeros(SR), 0, strategy=strategy)


class TestSineDetection:
    """A pure tone is found at its own frequency."""

    def test_strongest_peak_is_a4(self, strategy):
        peaks = extract_frequencies(generate_sine_wave(440.0, 1.0, SR), SR, strategy=strategy)
        assert peaks
        assert frequency_to_midi(peaks[0].frequency) == 69

    def test_sorted_and_valid(self, strategy):
        peaks = extract_frequencies(generate_chord(C_MAJOR, 1.0, SR), SR, strategy=strategy)
        amplitudes = [p.amplitude for p in peaks]
        assert amplitudes == sorted(amplitudes, reverse=True)
        assert all(p.is_valid for p in peaks)

    def test_chord_tones_present(self, strategy):
        peaks = extract_frequencies(generate_chord(C_MAJOR, 1.0, SR), SR, strategy=strategy)
        midi = {frequency_to_midi(p.frequency) for p in peaks}
        assert {60, 64, 67} <= midi


class TestProminenceGate:
    """Peaks must stand above their higher neighbour by min_prominence."""

    @pytest.fixture
    def c_major(self):
        return generate_chord(C_MAJOR, 1.0, SR)

    def test_large_prominence_suppresses_peaks(self, strategy, c_major):
        config = ExtractorConfig(min_prominence=10.0)
        assert extract_frequencies(c_major, SR, config=config, strategy=strategy) == []

    def test_zero_prominence_keeps_chord_tones(self, strategy, c_major):
        config = ExtractorConfig(min_prominence=0.0)
        peaks = extract_frequencies(c_major, SR, config=config, strategy=strategy)
        assert {60, 64, 67} <= {frequency_to_midi(p.frequency) for p in peaks}

    def test_kept_peaks_clear_the_gate(self, strategy, c_major):
        config = ExtractorConfig(min_prominence=0.01)
        peaks = extract_frequencies(c_major, SR, config=config, strategy=strategy)
        assert peaks
        assert all(p.prominence >= 0.01 for p in peaks)


class TestSpectralExtractor:
    def test_peak_within_one_bin(self):
        extractor = SpectralExtractor()
        peaks = extractor.extract(SampleBuffer(generate_sine_wave(440.0, 1.0, SR), SR))
        bin_size = SR / extractor.config.window_size
        assert abs(peaks[0].frequency - 440.0) <= bin_size

    def test_amplitude_is_normalized(self):
        # Hann gain correction: a unit sine reads close to 1 (scalloping aside)
        peaks = SpectralExtractor().extract(SampleBuffer(generate_sine_wave(440.0, 1.0, SR), SR))
        assert 0.8 < peaks[0].amplitude <= 1.05

    def test_out_of_range_tone_ignored(self):
        config = ExtractorConfig(min_frequency=80.0, max_frequency=400.0)
        peaks = SpectralExtractor(config).extract(SampleBuffer(generate_sine_wave(1000.0, 1.0, SR), SR))
        assert peaks == []


class TestGridExtractor:
    def test_grid_notes_cover_guitar_range(self):
        notes = GoertzelGridExtractor().grid_notes
        assert notes[0] == 40
        assert notes[-1] == 76

    def test_grid_respects_frequency_range(self):
        config = ExtractorConfig(min_frequency=200.0, max_frequency=500.0)
        notes = GoertzelGridExtractor(config).grid_notes
        assert notes[0] == 56   # G#3, 207.7 Hz
        assert notes[-1] == 71  # B4, 493.9 Hz

    def test_peaks_at_tempered_frequencies(self):
        peaks = extract_frequencies(generate_sine_wave(440.0, 1.0, SR), SR, strategy="grid")
        assert peaks[0].frequency == pytest.approx(440.0)

    def test_scores_align_with_grid(self):
        extractor = GoertzelGridExtractor()
        samples = generate_sine_wave(440.0, 1.0, SR).astype(np.float64)
        scores = extractor.score_notes(samples, SR)
        assert len(scores) == len(extractor.grid_notes)
        assert extractor.grid_notes[int(np.argmax(scores))] == 69

    def test_score_is_harmonic_weighted_goertzel(self):
        extractor = GoertzelGridExtractor(ExtractorConfig(window_count=1))
        samples = generate_chord(C_MAJOR, 1.0, SR).astype(np.float64)[:4096]
        scores = extractor.score_notes(samples, SR)

        window = hann_window(4096)
        segment = samples * window
        gain = window_gain(window)
        f0 = 261.6255653005986  # C4
        expected = (
            goertzel_magnitude(segment, f0, SR)
            + 0.5 * goertzel_magnitude(segment, 2 * f0, SR)
            + 0.25 * goertzel_magnitude(segment, 3 * f0, SR)
        ) / gain
        c4 = list(extractor.grid_notes).index(60)
        assert scores[c4] == pytest.approx(expected, rel=1e-6)

    def test_bass_emphasis_boosts_low_notes(self):
        samples = generate_chord([110.0, 440.0], 1.0, SR).astype(np.float64)
        plain = GoertzelGridExtractor().score_notes(samples, SR)
        boosted = GoertzelGridExtractor(ExtractorConfig(bass_emphasis=0.5)).score_notes(samples, SR)
        notes = list(GoertzelGridExtractor().grid_notes)
        low, high = notes.index(45), notes.index(69)
        assert boosted[low] / plain[low] > boosted[high] / plain[high]


class TestExtractorConfig:
    def test_defaults(self):
        config = ExtractorConfig()
        assert config.window_size == 4096
        assert config.effective_hop_size == 2048
        assert config.threshold_ratio == 0.3

    def test_guitar_profile(self):
        config = ExtractorConfig.guitar()
        assert config.min_frequency == 70.0
        assert config.max_frequency == 1200.0
        assert ExtractorConfig.guitar(window_size=8192).window_size == 8192

    @pytest.mark.parametrize("overrides", [
        {"window_size": 8},
        {"hop_size": 0},
        {"min_frequency": 500.0, "max_frequency": 100.0},
        {"min_frequency": 0.0},
        {"threshold_ratio": 1.5},
        {"min_amplitude": -1.0},
        {"grid_min_midi": 80, "grid_max_midi": 40},
        {"window_count": 0},
        {"bass_emphasis": -0.1},
    ])
    def test_invalid_values(self, overrides):
        with pytest.raises(ConfigurationError):
            create_extractor("grid", ExtractorConfig(**overrides))

    def test_unknown_strategy(self):
        with pytest.raises(ConfigurationError, match="Unknown extraction strategy"):
            create_extractor("wavelet")

    def test_factory_returns_strategies(self):
        assert isinstance(create_extractor("grid"), GoertzelGridExtractor)
        assert isinstance(create_extractor("spectral"), SpectralExtractor)
