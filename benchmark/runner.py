"""Benchmark runner for the speaker matcher.

This module orchestrates the benchmark evaluation:
1. Load every model the trial list references
2. Score each trial through the matcher
3. Compare decisions with the trial labels
4. Compute metrics and suggest a detection threshold
5. Generate reports
"""

import json
import time
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from diarize.core.context import DiarizationContext
from diarize.core.speaker import Speaker
from diarize.exceptions import DiarizeError

from benchmark.datasets.base import Trial, TrialList
from benchmark.metrics.verification import (
    VerificationResult,
    compute_eer,
    compute_error_rates,
)

logger = logging.getLogger(__name__)


@dataclass
class TrialScore:
    """
    Result of scoring a single trial.
    """
    trial: Trial
    score: Optional[float]
    is_match: Optional[bool]
    reason: Optional[str] = None

    @property
    def decided(self) -> bool:
        return self.score is not None

    def to_dict(self) -> Dict:
        return {
            **self.trial.to_dict(),
            "score": None if self.score is None else round(self.score, 4),
            "is_match": self.is_match,
            "reason": self.reason,
        }


@dataclass
class BenchmarkSummary:
    """
    Summary of benchmark results across all trials.
    """
    trials_name: str
    n_trials: int
    verification: VerificationResult
    processing_time: float
    results: List[TrialScore] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "trials_name": self.trials_name,
            "n_trials": self.n_trials,
            "metrics": self.verification.to_dict(),
            "processing": {
                "total_time": round(self.processing_time, 3),
            },
            "per_trial": [r.to_dict() for r in self.results],
        }


class BenchmarkRunner:
    """
    Runner for benchmarking the speaker matcher on a trial list.
    """

    def __init__(self, context: DiarizationContext):
        """
        Initialize the benchmark runner.

        Args:
            context: Context providing the UBM, thresholds and matcher
        """
        self.context = context

    def run(
        self,
        trials: TrialList,
        output_dir: Optional[str] = None,
    ) -> BenchmarkSummary:
        """
        Run benchmark on a trial list.

        Args:
            trials: Trials to evaluate
            output_dir: Optional directory to save results

        Returns:
            BenchmarkSummary with aggregated results
        """
        logger.info(f"[BENCH] Running benchmark on {trials.name} ({len(trials)} trials)")
        start_time = time.time()

        speakers = self._load_speakers(trials)
        matcher = self.context.matcher

        results = []
        for trial in trials:
            enroll = speakers.get(trial.enroll)
            test = speakers.get(trial.test)
            if enroll is None or test is None:
                results.append(TrialScore(trial, None, None, reason="model not loaded"))
                continue

            result = matcher.compare(enroll, test)
            results.append(TrialScore(
                trial=trial,
                score=result.score,
                is_match=result.is_match if result.decided else None,
                reason=result.reason,
            ))

        summary = BenchmarkSummary(
            trials_name=trials.name,
            n_trials=len(trials),
            verification=self._evaluate(results),
            processing_time=time.time() - start_time,
            results=results,
        )

        if output_dir:
            self._save_results(summary, output_dir)

        return summary

    def _load_speakers(self, trials: TrialList) -> Dict[str, Speaker]:
        """Load each referenced model once; failures only affect their own trials."""
        speakers = {}
        for name in trials.model_names:
            path = trials.model_path(name)
            try:
                speaker = self.context.load_speaker(path, uri=name)
            except DiarizeError as e:
                logger.error(f"[BENCH] Failed to load {path}: {e}")
                continue
            registered = self.context.registry.register(speaker)
            if registered is not speaker:
                logger.warning(
                    f"[BENCH] {name!r} already registered; scoring with the model from {path}"
                )
            speakers[name] = speaker
        return speakers

    def _evaluate(self, results: List[TrialScore]) -> VerificationResult:
        """Compute verification metrics over the decided trials."""
        decided = [r for r in results if r.decided]
        scores = [r.score for r in decided]
        labels = [r.trial.target for r in decided]
        threshold = self.context.settings.detection_threshold

        eer, eer_threshold = compute_eer(scores, labels)
        far, frr = compute_error_rates(scores, labels, threshold)

        return VerificationResult(
            eer=eer,
            eer_threshold=eer_threshold,
            far=far,
            frr=frr,
            threshold=threshold,
            n_scored=len(decided),
            n_undecided=len(results) - len(decided),
        )

    def _save_results(
        self,
        summary: BenchmarkSummary,
        output_dir: str,
    ) -> Path:
        """Save benchmark results to disk."""
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = output_path / f"{summary.trials_name.lower()}_{timestamp}.json"

        with open(filename, "w") as f:
            json.dump(summary.to_dict(), f, indent=2)

        logger.info(f"[BENCH] Results saved to {filename}")
        return filename


def print_benchmark_report(summary: BenchmarkSummary) -> None:
    """Print a formatted benchmark report."""
    v = summary.verification

    print("\n" + "=" * 60)
    print(f"BENCHMARK RESULTS: {summary.trials_name}")
    print("=" * 60)

    print(f"\nTrials: {summary.n_trials} ({v.n_scored} scored, {v.n_undecided} undecided)")

    print("\n--- Verification Metrics ---")
    print(f"EER:            {v.eer:.2f}% (threshold {v.eer_threshold:.4f})")
    print(f"FAR @ {v.threshold}:  {v.far:.2f}%")
    print(f"FRR @ {v.threshold}:  {v.frr:.2f}%")

    print("\n--- Processing ---")
    print(f"Total Time: {summary.processing_time:.2f}s")

    print("\n" + "=" * 60)
