"""Evaluation metrics for speaker verification."""

from benchmark.metrics.verification import (
    VerificationResult,
    compute_eer,
    compute_error_rates,
)

__all__ = [
    "VerificationResult",
    "compute_eer",
    "compute_error_rates",
]
