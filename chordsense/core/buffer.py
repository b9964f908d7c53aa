"""Sample buffers and frequency peaks - the data passed between stages."""

import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .errors import ConfigurationError
from .note import frequency_to_midi


@dataclass(frozen=True)
class SampleBuffer:
    """Mono audio samples with their sample rate.

    Samples are stored as a read-only float64 array so a buffer can be
    shared between concurrent analyses without copying.
    """

    samples: np.ndarray = field(repr=False)
    sample_rate: int

    def __post_init__(self):
        if isinstance(self.sample_rate, bool) or not isinstance(
            self.sample_rate, (int, np.integer)
        ):
            raise ConfigurationError(
                f"Sample rate must be an integer, got {self.sample_rate!r}"
            )
        if self.sample_rate <= 0:
            raise ConfigurationError(
                f"Sample rate must be positive, got {self.sample_rate}"
            )

        samples = np.asarray(self.samples, dtype=np.float64)
        if samples.ndim > 1:
            raise ConfigurationError(
                f"Expected mono samples, got array with shape {samples.shape}"
            )
        samples = samples.reshape(-1).copy()
        samples.setflags(write=False)

        object.__setattr__(self, "samples", samples)
        object.__setattr__(self, "sample_rate", int(self.sample_rate))

    @classmethod
    def from_samples(cls, samples, sample_rate: int) -> "SampleBuffer":
        """Build a buffer, treating None as an empty recording."""
        if samples is None:
            samples = np.zeros(0)
        return cls(samples=samples, sample_rate=sample_rate)

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return len(self.samples) / self.sample_rate

    @property
    def is_empty(self) -> bool:
        return len(self.samples) == 0

    @property
    def rms(self) -> float:
        """Root-mean-square level (0 for an empty buffer)."""
        if self.is_empty:
            return 0.0
        return float(np.sqrt(np.mean(self.samples ** 2)))


@dataclass(frozen=True)
class FrequencyPeak:
    """A candidate pitch found by a frequency extractor."""

    frequency: float  # Hz
    amplitude: float  # Magnitude or weighted grid score
    prominence: float = 0.0  # Amplitude above the higher neighbour

    @property
    def is_valid(self) -> bool:
        """True when frequency is positive and finite and amplitude is finite."""
        return (
            math.isfinite(self.frequency)
            and self.frequency > 0
            and math.isfinite(self.amplitude)
        )

    @property
    def midi(self) -> Optional[int]:
        """Nearest MIDI pitch, or None if out of range."""
        return frequency_to_midi(self.frequency)
