"""Extraction layer - Candidate fundamentals from raw samples.

Two interchangeable strategies share one interface:
- spectral: Hann-windowed FFT peak picking over the full spectrum
- grid: Goertzel scoring over a fixed note grid with harmonic reinforcement
"""

from typing import List, Optional

from .base import ExtractorConfig, FrequencyExtractor
from .spectral import SpectralExtractor
from .grid import GoertzelGridExtractor
from ..core import ConfigurationError, FrequencyPeak, SampleBuffer

EXTRACTORS = {
    SpectralExtractor.name: SpectralExtractor,
    GoertzelGridExtractor.name: GoertzelGridExtractor,
}


def create_extractor(
    strategy: str = "grid",
    config: Optional[ExtractorConfig] = None,
) -> FrequencyExtractor:
    """Create an extractor by strategy name ("grid" or "spectral")."""
    try:
        extractor_cls = EXTRACTORS[strategy]
    except KeyError:
        raise ConfigurationError(
            f"Unknown extraction strategy: {strategy!r}. "
            f"Supported: {sorted(EXTRACTORS)}"
        ) from None
    return extractor_cls(config)


def extract_frequencies(
    samples,
    sample_rate: int,
    config: Optional[ExtractorConfig] = None,
    strategy: str = "grid",
) -> List[FrequencyPeak]:
    """
    Extract candidate fundamentals from mono samples.

    Args:
        samples: Sequence of float samples, or None
        sample_rate: Sample rate in Hz
        config: Extractor configuration (defaults if None)
        strategy: "grid" or "spectral"

    Returns:
        Peaks sorted by amplitude, strongest first
    """
    buffer = SampleBuffer.from_samples(samples, sample_rate)
    return create_extractor(strategy, config).extract(buffer)


__all__ = [
    "ExtractorConfig",
    "FrequencyExtractor",
    "SpectralExtractor",
    "GoertzelGridExtractor",
    "EXTRACTORS",
    "create_extractor",
    "extract_frequencies",
]
