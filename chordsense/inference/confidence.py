"""Confidence scoring - how well a note set fits a chord template."""

from typing import AbstractSet, Iterable

from ..core import pitch_class_index


class ConfidenceScorer:
    """
    Score a detected note set against a template.

    Each detected note earns 1.0 when it is a chord tone, or
    `neighbor_credit` when it sits a semitone away from one (a slightly
    mistuned string). The total is divided by the template size and
    clamped to [0, 1]. With neighbor_credit=0 this is the plain
    fraction of chord tones present.
    """

    def __init__(self, neighbor_credit: float = 0.4):
        self.neighbor_credit = neighbor_credit

    def score(self, detected: AbstractSet[int], template: AbstractSet[int]) -> float:
        """
        Score pitch class numbers against template pitch class numbers.

        Args:
            detected: Distinct detected pitch classes (0-11)
            template: Template pitch classes (0-11)

        Returns:
            Confidence in [0, 1]
        """
        if not detected or not template:
            return 0.0

        total = 0.0
        for pc in detected:
            if pc in template:
                total += 1.0
            elif (pc + 1) % 12 in template or (pc - 1) % 12 in template:
                total += self.neighbor_credit

        return max(0.0, min(1.0, total / len(template)))

    @staticmethod
    def explained_ratio(detected: AbstractSet[int], template: AbstractSet[int]) -> float:
        """Fraction of detected notes that are exact chord tones."""
        if not detected:
            return 0.0
        return len(detected & template) / len(detected)


def _to_indices(notes: Iterable[str]) -> frozenset:
    indices = (pitch_class_index(n) for n in notes)
    return frozenset(i for i in indices if i is not None)


def confidence(
    detected_notes: Iterable[str],
    template_notes: Iterable[str],
    neighbor_credit: float = 0.4,
) -> float:
    """
    Confidence that detected note names form the template chord.

    Notes may use any spelling; duplicates and unparseable names are
    ignored, so the result does not depend on input order.
    """
    scorer = ConfidenceScorer(neighbor_credit)
    return scorer.score(_to_indices(detected_notes), _to_indices(template_notes))
