"""Base classes for frequency extraction."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

import numpy as np

from ..core import ConfigurationError, FrequencyPeak, SampleBuffer
from ..core.constants import (
    DEFAULT_MAX_FREQUENCY,
    DEFAULT_MIN_FREQUENCY,
    DEFAULT_WINDOW_SIZE,
    GUITAR_MAX,
    GUITAR_MAX_FREQUENCY,
    GUITAR_MIN,
    GUITAR_MIN_FREQUENCY,
    SILENCE_RMS,
)


@dataclass
class ExtractorConfig:
    """Configuration shared by the frequency extractors.

    Attributes:
        window_size: Analysis window / transform size in samples (default: 4096)
        hop_size: Step between spectral frames, None = half a window
        min_frequency: Lowest frequency of interest in Hz (default: 80)
        max_frequency: Highest frequency of interest in Hz (default: 2000)
        min_amplitude: Absolute floor of the adaptive threshold (default: 0.005)
        min_prominence: Minimum peak height above its higher neighbour (default: 0.0005)
        threshold_ratio: Fraction of the strongest peak a peak must exceed (default: 0.3)
        min_rms: Buffers quieter than this RMS are treated as silence (default: 1e-4)
        grid_min_midi: Lowest note of the Goertzel grid (default: 40, E2)
        grid_max_midi: Highest note of the Goertzel grid (default: 76, E5)
        window_count: Overlapping windows averaged by the grid strategy (default: 4)
        harmonic_weights: Weights of the 2nd, 3rd, ... harmonics in grid scores
        bass_emphasis: Extra weight for the lowest grid notes, 0 = off
    """

    window_size: int = DEFAULT_WINDOW_SIZE
    hop_size: Optional[int] = None
    min_frequency: float = DEFAULT_MIN_FREQUENCY
    max_frequency: float = DEFAULT_MAX_FREQUENCY
    min_amplitude: float = 0.005
    min_prominence: float = 0.0005
    threshold_ratio: float = 0.3
    min_rms: float = SILENCE_RMS
    grid_min_midi: int = GUITAR_MIN
    grid_max_midi: int = GUITAR_MAX
    window_count: int = 4
    harmonic_weights: Tuple[float, ...] = (0.5, 0.25)
    bass_emphasis: float = 0.0

    @classmethod
    def guitar(cls, **overrides) -> "ExtractorConfig":
        """Six-string guitar profile (70-1200 Hz, E2-E5 grid)."""
        config = cls(
            min_frequency=GUITAR_MIN_FREQUENCY,
            max_frequency=GUITAR_MAX_FREQUENCY,
            grid_min_midi=GUITAR_MIN,
            grid_max_midi=GUITAR_MAX,
        )
        return replace(config, **overrides)

    @property
    def effective_hop_size(self) -> int:
        if self.hop_size is None:
            return max(1, self.window_size // 2)
        return self.hop_size

    def validate(self) -> None:
        """Raise ConfigurationError for values the extractors can't use."""
        if self.window_size < 16:
            raise ConfigurationError(f"window_size too small: {self.window_size}")
        if self.hop_size is not None and self.hop_size <= 0:
            raise ConfigurationError(f"hop_size must be positive: {self.hop_size}")
        if self.min_frequency <= 0 or self.max_frequency <= self.min_frequency:
            raise ConfigurationError(
                f"Invalid frequency range: {self.min_frequency}-{self.max_frequency} Hz"
            )
        if not 0 <= self.threshold_ratio <= 1:
            raise ConfigurationError(
                f"threshold_ratio must be within [0, 1]: {self.threshold_ratio}"
            )
        if self.min_amplitude < 0 or self.min_prominence < 0 or self.min_rms < 0:
            raise ConfigurationError("Thresholds must be non-negative")
        if not 0 <= self.grid_min_midi < self.grid_max_midi <= 127:
            raise ConfigurationError(
                f"Invalid note grid: {self.grid_min_midi}-{self.grid_max_midi}"
            )
        if self.window_count < 1:
            raise ConfigurationError(f"window_count must be >= 1: {self.window_count}")
        if self.bass_emphasis < 0:
            raise ConfigurationError(f"bass_emphasis must be >= 0: {self.bass_emphasis}")


class FrequencyExtractor(ABC):
    """Abstract base class for frequency extraction strategies."""

    name = "base"

    def __init__(self, config: Optional[ExtractorConfig] = None):
        self.config = config or ExtractorConfig()
        self.config.validate()

    def extract(self, buffer: SampleBuffer) -> List[FrequencyPeak]:
        """
        Extract candidate fundamentals from a sample buffer.

        Args:
            buffer: Mono sample buffer

        Returns:
            Valid peaks sorted by amplitude (strongest first). Empty,
            silent and too-short buffers give an empty list.
        """
        if buffer is None or len(buffer) < self.config.window_size:
            return []
        if buffer.rms < self.config.min_rms:
            return []

        peaks = [p for p in self._extract(buffer.samples, buffer.sample_rate) if p.is_valid]
        peaks.sort(key=lambda p: p.amplitude, reverse=True)
        return peaks

    @abstractmethod
    def _extract(self, samples: np.ndarray, sample_rate: int) -> List[FrequencyPeak]:
        """
        Strategy-specific extraction.

        Args:
            samples: At least one window of non-silent samples
            sample_rate: Sample rate

        Returns:
            Peaks in any order
        """
        pass
