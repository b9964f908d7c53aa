"""Peak picking shared by the frequency extractors."""

from typing import List, Tuple

import numpy as np


def calculate_adaptive_threshold(
    values: np.ndarray,
    min_threshold: float = 0.005,
    threshold_ratio: float = 0.3,
) -> float:
    """
    Threshold that follows the signal level.

    Returns max(min_threshold, max(values) * threshold_ratio), so quiet
    input falls back to the absolute floor.
    """
    values = np.asarray(values, dtype=np.float64)
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        return float(min_threshold)
    return float(max(min_threshold, float(np.max(finite)) * threshold_ratio))


def find_local_maxima(values: np.ndarray) -> List[Tuple[int, float]]:
    """
    Find local maxima and their prominence.

    An index i is a local maximum when values[i] >= values[i-1] and
    values[i] >= values[i+1]. The first and last index compare against
    their single neighbour only. Prominence is the value minus the higher
    neighbour.

    Returns:
        List of (index, prominence) tuples in index order
    """
    values = np.asarray(values, dtype=np.float64)
    n = len(values)
    if n == 0:
        return []
    if n == 1:
        return [(0, float(values[0]))]

    # Pad with -inf so edges only compare against their real neighbour
    padded = np.concatenate(([-np.inf], values, [-np.inf]))
    current = padded[1:-1]
    previous = padded[:-2]
    following = padded[2:]

    is_peak = (current >= previous) & (current >= following) & np.isfinite(current)
    higher_neighbour = np.maximum(previous, following)

    maxima = []
    for i in np.flatnonzero(is_peak):
        neighbour = higher_neighbour[i]
        if not np.isfinite(neighbour):
            neighbour = 0.0
        maxima.append((int(i), float(current[i] - neighbour)))

    return maxima
