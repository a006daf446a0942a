"""Speaker verification metrics.

Metrics for evaluating same-speaker decisions on scored trials:
- EER (Equal Error Rate): Verification threshold where FAR = FRR
- FAR / FRR at a fixed decision threshold
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class VerificationResult:
    """
    Verification evaluation result.

    Attributes:
        eer: Equal error rate (%)
        eer_threshold: Detection threshold at the EER
        far: False acceptance rate at the configured threshold (%)
        frr: False rejection rate at the configured threshold (%)
        threshold: The configured detection threshold
        n_scored: Trials that produced a score
        n_undecided: Trials the matcher could not score
    """
    eer: float = 0.0
    eer_threshold: float = 0.0
    far: float = 0.0
    frr: float = 0.0
    threshold: float = 0.0
    n_scored: int = 0
    n_undecided: int = 0

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "eer": round(self.eer, 2),
            "eer_threshold": round(self.eer_threshold, 4),
            "far": round(self.far, 2),
            "frr": round(self.frr, 2),
            "threshold": self.threshold,
            "n_scored": self.n_scored,
            "n_undecided": self.n_undecided,
        }


def compute_eer(
    scores: List[float],
    labels: List[bool],
) -> Tuple[float, float]:
    """
    Compute Equal Error Rate (EER) for speaker verification.

    EER is the point where False Acceptance Rate (FAR) equals
    False Rejection Rate (FRR).

    Args:
        scores: List of detection scores
        labels: List of boolean labels (True = same speaker)

    Returns:
        Tuple of (EER percentage, threshold at EER)
    """
    if not scores or not labels:
        return 0.0, 0.0

    scores = np.asarray(scores, dtype=np.float64)
    labels = np.asarray(labels, dtype=bool)

    n_pos = np.sum(labels)
    n_neg = len(labels) - n_pos

    if n_pos == 0 or n_neg == 0:
        return 0.0, 0.0

    thresholds = np.sort(scores)

    # Accept on score > threshold, as the matcher does
    # FAR: fraction of negatives with score > threshold
    far = np.array([np.sum(~labels & (scores > t)) for t in thresholds]) / n_neg
    # FRR: fraction of positives with score <= threshold
    frr = np.array([np.sum(labels & (scores <= t)) for t in thresholds]) / n_pos

    # Find where FAR and FRR cross
    eer_idx = np.argmin(np.abs(far - frr))

    eer = (far[eer_idx] + frr[eer_idx]) / 2 * 100
    return float(eer), float(thresholds[eer_idx])


def compute_error_rates(
    scores: List[float],
    labels: List[bool],
    threshold: float,
) -> Tuple[float, float]:
    """
    FAR and FRR (%) for decisions ``score > threshold``.

    Uses the same strict comparison as the matcher.
    """
    if not scores or not labels:
        return 0.0, 0.0

    scores = np.asarray(scores, dtype=np.float64)
    labels = np.asarray(labels, dtype=bool)
    accepted = scores > threshold

    n_pos = np.sum(labels)
    n_neg = len(labels) - n_pos

    far = np.sum(accepted & ~labels) / n_neg * 100 if n_neg > 0 else 0.0
    frr = np.sum(~accepted & labels) / n_pos * 100 if n_pos > 0 else 0.0
    return float(far), float(frr)
