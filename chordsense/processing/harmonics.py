"""Harmonic filtering - keep likely fundamentals, drop their overtones.

A plucked or strummed string puts energy at integer multiples of its
fundamental, and extractors report many of those overtones as separate
peaks. Peaks are accepted strongest first; a weaker peak lying within a
few cents of k times an accepted peak is treated as an overtone.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..core import ConfigurationError, FrequencyPeak


@dataclass
class HarmonicFilterConfig:
    """Configuration for harmonic filtering.

    Attributes:
        max_harmonic_multiple: Highest multiple k checked (default: 6)
        tolerance_cents: Distance from k * F still counted as harmonic (default: 35)
        max_fundamentals: Cap on the number of fundamentals kept (default: 8)
        min_fundamentals: Below this the relaxed pass is tried (default: 3)
        relaxed_max_multiple: Highest multiple checked by the relaxed pass (default: 3)
        relaxed_tolerance_factor: Tolerance scale of the relaxed pass (default: 0.5)
    """

    max_harmonic_multiple: int = 6
    tolerance_cents: float = 35.0
    max_fundamentals: int = 8
    min_fundamentals: int = 3
    relaxed_max_multiple: int = 3
    relaxed_tolerance_factor: float = 0.5

    def validate(self) -> None:
        if self.max_harmonic_multiple < 2:
            raise ConfigurationError(
                f"max_harmonic_multiple must be >= 2: {self.max_harmonic_multiple}"
            )
        if self.tolerance_cents <= 0 or self.tolerance_cents >= 600:
            raise ConfigurationError(
                f"tolerance_cents must be within (0, 600): {self.tolerance_cents}"
            )
        if self.max_fundamentals < 1:
            raise ConfigurationError(
                f"max_fundamentals must be >= 1: {self.max_fundamentals}"
            )
        if self.relaxed_max_multiple < 2 or not 0 < self.relaxed_tolerance_factor <= 1:
            raise ConfigurationError("Invalid relaxed harmonic pass settings")


def cents_between(freq: float, reference: float) -> float:
    """Signed distance from reference to freq in cents."""
    return 1200.0 * math.log2(freq / reference)


def is_harmonic_of(
    freq: float,
    fundamental: float,
    max_multiple: int = 6,
    tolerance_cents: float = 35.0,
) -> bool:
    """True if freq is within tolerance of k * fundamental for k in 2..max_multiple."""
    for k in range(2, max_multiple + 1):
        if abs(cents_between(freq, fundamental * k)) <= tolerance_cents:
            return True
    return False


def _greedy_fundamentals(
    ranked: List[FrequencyPeak],
    max_multiple: int,
    tolerance_cents: float,
    limit: int,
) -> List[FrequencyPeak]:
    fundamentals: List[FrequencyPeak] = []
    for peak in ranked:
        if any(
            is_harmonic_of(peak.frequency, base.frequency, max_multiple, tolerance_cents)
            for base in fundamentals
        ):
            continue
        fundamentals.append(peak)
        if len(fundamentals) >= limit:
            break
    return fundamentals


class HarmonicFilter:
    """Reduce extractor peaks to a set of likely fundamentals."""

    def __init__(self, config: Optional[HarmonicFilterConfig] = None):
        self.config = config or HarmonicFilterConfig()
        self.config.validate()

    def filter(self, peaks: Iterable[FrequencyPeak]) -> List[FrequencyPeak]:
        """
        Filter harmonic overtones out of a peak list.

        Args:
            peaks: Peaks in any order; invalid ones are dropped

        Returns:
            Fundamentals, strongest first
        """
        config = self.config
        ranked = sorted(
            (p for p in peaks if p.is_valid),
            key=lambda p: p.amplitude,
            reverse=True,
        )
        if not ranked:
            return []

        strict = _greedy_fundamentals(
            ranked,
            config.max_harmonic_multiple,
            config.tolerance_cents,
            config.max_fundamentals,
        )
        if len(strict) >= config.min_fundamentals or len(strict) == len(ranked):
            return strict

        # Relaxed pass: only octave and twelfth overtones at a tighter tolerance
        relaxed = _greedy_fundamentals(
            ranked,
            min(config.relaxed_max_multiple, config.max_harmonic_multiple),
            config.tolerance_cents * config.relaxed_tolerance_factor,
            config.max_fundamentals,
        )
        return relaxed if len(relaxed) > len(strict) else strict


def filter_fundamentals(
    peaks: Iterable[FrequencyPeak],
    max_harmonic_multiple: int = 6,
    tolerance_cents: float = 35.0,
    max_fundamentals: int = 8,
    min_fundamentals: int = 3,
) -> List[FrequencyPeak]:
    """Functional form of HarmonicFilter.filter."""
    config = HarmonicFilterConfig(
        max_harmonic_multiple=max_harmonic_multiple,
        tolerance_cents=tolerance_cents,
        max_fundamentals=max_fundamentals,
        min_fundamentals=min_fundamentals,
    )
    return HarmonicFilter(config).filter(peaks)
