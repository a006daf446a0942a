"""Command-line interface for running benchmarks.

Usage:
    python -m benchmark.cli run trials.txt --model-dir models/
    python -m benchmark.cli report results.json --format markdown
"""

import sys
import json
import logging
from typing import Optional

import click

from diarize.config import Settings
from diarize.core.context import DiarizationContext

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def cli(verbose: bool):
    """Speaker Matching Benchmark Suite"""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@cli.command()
@click.argument("trials_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--model-dir", "-d", default=None, help="Directory containing the models")
@click.option("--output-dir", "-o", default=None, help="Directory to save JSON results")
@click.option("--max-trials", "-n", type=int, default=None, help="Max trials to score")
@click.option("--ubm", type=click.Path(exists=True, dir_okay=False), default=None, help="UBM model file")
@click.option("--detection-threshold", type=float, default=None, help="Threshold to report FAR/FRR at")
def run(
    trials_file: str,
    model_dir: Optional[str],
    output_dir: Optional[str],
    max_trials: Optional[int],
    ubm: Optional[str],
    detection_threshold: Optional[float],
):
    """Score a trial list and report verification metrics."""
    from benchmark.datasets.base import TrialList
    from benchmark.runner import BenchmarkRunner, print_benchmark_report

    trials = TrialList(trials_file, model_dir=model_dir, max_trials=max_trials)
    if len(trials) == 0:
        logger.error("No trials loaded")
        sys.exit(1)

    logger.info(f"Loaded {len(trials)} trials over {len(trials.model_names)} models")

    overrides = {"ubm_path": ubm, "detection_threshold": detection_threshold}
    settings = Settings(**{k: v for k, v in overrides.items() if v is not None})

    runner = BenchmarkRunner(DiarizationContext(settings=settings))
    summary = runner.run(trials, output_dir)

    print_benchmark_report(summary)


@cli.command()
@click.argument("results_file", type=click.Path(exists=True))
@click.option("--format", "-f", type=click.Choice(["text", "markdown", "json"]), default="text")
@click.option("--output", "-o", type=click.Path(), default=None, help="Output file")
def report(results_file: str, format: str, output: Optional[str]):
    """Generate a report from benchmark results."""
    with open(results_file, "r") as f:
        data = json.load(f)

    if format == "text":
        report_content = generate_text_report(data)
    elif format == "markdown":
        report_content = generate_markdown_report(data)
    else:
        report_content = json.dumps(data, indent=2)

    if output:
        with open(output, "w") as f:
            f.write(report_content)
        logger.info(f"Report saved to {output}")
    else:
        click.echo(report_content)


def generate_text_report(data: dict) -> str:
    """Generate a text report from benchmark data."""
    metrics = data.get("metrics", {})
    lines = [
        "=" * 60,
        f"BENCHMARK REPORT: {data.get('trials_name', 'Unknown')}",
        "=" * 60,
        "",
        f"Trials: {data.get('n_trials', 0)}",
        f"Scored: {metrics.get('n_scored', 0)}",
        f"Undecided: {metrics.get('n_undecided', 0)}",
        "",
        "--- Metrics ---",
        f"EER: {metrics.get('eer', 0):.2f}% (threshold {metrics.get('eer_threshold', 0):.4f})",
        f"FAR: {metrics.get('far', 0):.2f}% @ {metrics.get('threshold', 0)}",
        f"FRR: {metrics.get('frr', 0):.2f}% @ {metrics.get('threshold', 0)}",
        "",
        "=" * 60,
    ]
    return "\n".join(lines)


def generate_markdown_report(data: dict) -> str:
    """Generate a Markdown report from benchmark data."""
    metrics = data.get("metrics", {})
    lines = [
        f"# Benchmark Report: {data.get('trials_name', 'Unknown')}",
        "",
        "## Metrics",
        "",
        "| Metric | Value |",
        "|--------|-------|",
        f"| Trials | {data.get('n_trials', 0)} |",
        f"| Scored | {metrics.get('n_scored', 0)} |",
        f"| Undecided | {metrics.get('n_undecided', 0)} |",
        f"| EER | {metrics.get('eer', 0):.2f}% |",
        f"| EER threshold | {metrics.get('eer_threshold', 0):.4f} |",
        f"| FAR @ {metrics.get('threshold', 0)} | {metrics.get('far', 0):.2f}% |",
        f"| FRR @ {metrics.get('threshold', 0)} | {metrics.get('frr', 0):.2f}% |",
    ]

    per_trial = data.get("per_trial", [])
    if per_trial:
        lines.extend([
            "",
            "## Per-Trial Results",
            "",
            "| Enroll | Test | Target | Score | Match |",
            "|--------|------|--------|-------|-------|",
        ])

        for trial in per_trial[:20]:  # Limit to first 20
            score = trial.get("score")
            score_text = "n/a" if score is None else f"{score:.4f}"
            lines.append(
                f"| {trial.get('enroll')} | {trial.get('test')} | {trial.get('target')} "
                f"| {score_text} | {trial.get('is_match')} |"
            )

    return "\n".join(lines)


if __name__ == "__main__":
    cli()
