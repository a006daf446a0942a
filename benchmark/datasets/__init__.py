"""Trial lists for benchmark evaluation."""

from benchmark.datasets.base import Trial, TrialList, parse_trials

__all__ = [
    "Trial",
    "TrialList",
    "parse_trials",
]
