"""Verification benchmark for GMM speaker matching.

Scores a list of trials (pairs of stored speaker models labelled as
same-speaker or different-speaker) through the matcher and reports how well
the detection threshold separates them.

Metrics:
- EER (Equal Error Rate): operating point where FAR = FRR
- FAR / FRR at the configured detection threshold
- Undecided rate: trials the likelihood gate or normalization kept out

Usage:
    from benchmark.datasets import TrialList
    from benchmark.runner import BenchmarkRunner

    trials = TrialList("trials.txt", model_dir="models")
    summary = BenchmarkRunner(DiarizationContext()).run(trials)
"""

__version__ = "0.1.0"
