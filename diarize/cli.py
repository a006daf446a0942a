"""Command-line interface for speaker model matching.

Usage:
    diarize info models/s1.json
    diarize compare models/s1.json models/s2.json --mll-a -20 --mll-b -21
    diarize match models/*.json --json
    diarize speakers show.seg
"""

import json
import logging
from collections import defaultdict
from pathlib import Path
from typing import Optional

import click

from diarize.config import Settings
from diarize.core.context import DiarizationContext
from diarize.exceptions import DiarizeError
from diarize.services.model_store import ModelStore
from diarize.services.segmentation import parse_seg_file, speakers_from_segments

logger = logging.getLogger(__name__)


@click.group()
@click.option("--ubm", type=click.Path(exists=True, dir_okay=False), default=None, help="UBM model file")
@click.option("--detection-threshold", type=float, default=None, help="Override detection threshold")
@click.option("--log-likelihood-threshold", type=float, default=None, help="Override likelihood gate")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(
    ctx: click.Context,
    ubm: Optional[str],
    detection_threshold: Optional[float],
    log_likelihood_threshold: Optional[float],
    verbose: bool,
):
    """GMM speaker matching"""
    overrides = {
        "ubm_path": ubm,
        "detection_threshold": detection_threshold,
        "log_likelihood_threshold": log_likelihood_threshold,
    }
    settings = Settings(**{k: v for k, v in overrides.items() if v is not None})

    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    ctx.obj = DiarizationContext(settings=settings)


@cli.command()
@click.argument("model", type=click.Path(exists=True, dir_okay=False))
def info(model: str):
    """Show a summary of a stored mixture."""
    try:
        mixture = ModelStore().load_model(model)
    except DiarizeError as e:
        raise click.ClickException(str(e))

    click.echo(f"Model: {mixture.name or Path(model).stem}")
    click.echo(f"  Components: {mixture.nb_components}")
    click.echo(f"  Dimension: {mixture.dim}")
    click.echo(f"  Weight sum: {mixture.weights.sum():.4f}")
    click.echo(f"  Mean log-likelihood: {mixture.mean_log_likelihood}")


@cli.command()
@click.argument("model_a", type=click.Path(exists=True, dir_okay=False))
@click.argument("model_b", type=click.Path(exists=True, dir_okay=False))
@click.option("--mll-a", type=float, default=None, help="Mean log-likelihood override for MODEL_A")
@click.option("--mll-b", type=float, default=None, help="Mean log-likelihood override for MODEL_B")
@click.pass_obj
def compare(
    context: DiarizationContext,
    model_a: str,
    model_b: str,
    mll_a: Optional[float],
    mll_b: Optional[float],
):
    """Decide whether two models belong to the same speaker."""
    try:
        speaker_a = context.load_speaker(model_a, uri=Path(model_a).stem)
        speaker_b = context.load_speaker(model_b, uri=Path(model_b).stem)
        speaker_a.mean_log_likelihood = mll_a
        speaker_b.mean_log_likelihood = mll_b
        result = context.matcher.compare(speaker_a, speaker_b)
    except DiarizeError as e:
        raise click.ClickException(str(e))

    if not result.decided:
        click.echo(f"Undecided: {result.reason}")
        return

    click.echo(f"Score: {result.score:.4f} (threshold {context.settings.detection_threshold})")
    click.echo(f"Same speaker: {'yes' if result.is_match else 'no'}")


@cli.command()
@click.argument("models", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print pairs as JSON")
@click.pass_obj
def match(context: DiarizationContext, models: tuple, as_json: bool):
    """List every pair of MODELS judged to be the same speaker."""
    try:
        speakers = [context.load_speaker(m, uri=Path(m).stem) for m in models]
        pairs = context.matcher.match_pairs_within(speakers)
    except DiarizeError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps([[a.uri, b.uri] for a, b in pairs], indent=2))
        return

    if not pairs:
        click.echo("No matching pairs")
    for a, b in pairs:
        click.echo(f"{a.uri} <-> {b.uri}")


@cli.command()
@click.argument("seg_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def speakers(context: DiarizationContext, seg_file: str):
    """List the speakers of a segmentation file."""
    try:
        segments = parse_seg_file(seg_file)
        found = speakers_from_segments(segments, context.registry)
    except DiarizeError as e:
        raise click.ClickException(str(e))

    counts = defaultdict(int)
    durations = defaultdict(float)
    for seg in segments:
        counts[seg.speaker_id] += 1
        durations[seg.speaker_id] += seg.duration

    for speaker in found:
        click.echo(
            f"{speaker.uri}\t{speaker.gender}\t{counts[speaker.uri]} segments\t"
            f"{durations[speaker.uri]:.2f}s"
        )


if __name__ == "__main__":
    cli()
