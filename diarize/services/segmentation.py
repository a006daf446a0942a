"""Segmentation files: time-stamped speaker turns.

LIUM-style ``.seg`` layout, one turn per line, whitespace separated::

    <show> <channel> <start_cs> <duration_cs> <gender> <band> <env> <speaker>

Times are in centiseconds. Lines starting with ``;;`` are comments.
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from diarize.core.registry import SpeakerRegistry
from diarize.core.speaker import Speaker
from diarize.exceptions import SegmentationFormatError

logger = logging.getLogger(__name__)

COMMENT_PREFIX = ";;"
MIN_FIELDS = 8


@dataclass
class Segment:
    """
    One speaker turn.

    Attributes:
        audio: Audio the segment belongs to (path or show name), if known
        start: Start time in seconds
        duration: Duration in seconds
        gender: Gender tag from the segmentation (e.g. "M", "F", "U")
        speaker_id: Speaker identity key
    """
    audio: Optional[str]
    start: float
    duration: float
    gender: Optional[str]
    speaker_id: str

    @property
    def end(self) -> float:
        return self.start + self.duration


def parse_seg_file(
    seg_path: Union[str, os.PathLike],
    audio: Optional[str] = None,
) -> List[Segment]:
    """
    Parse a segmentation file.

    Args:
        seg_path: Path to the ``.seg`` file
        audio: Audio reference stored on every segment

    Returns:
        Segments in file order

    Raises:
        SegmentationFormatError: on a line with too few fields or bad times
    """
    segments = []

    # Decoded line by line so an encoding error can name its line
    with open(seg_path, "rb") as f:
        for line_number, raw in enumerate(f, start=1):
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise SegmentationFormatError(f"{seg_path}:{line_number}: invalid UTF-8: {e}") from e

            if line.startswith(COMMENT_PREFIX) or not line.strip():
                continue

            parts = line.split()
            if len(parts) < MIN_FIELDS:
                raise SegmentationFormatError(
                    f"{seg_path}:{line_number}: expected at least {MIN_FIELDS} fields, got {len(parts)}"
                )

            try:
                start = int(parts[2]) / 100.0
                duration = int(parts[3]) / 100.0
            except ValueError as e:
                raise SegmentationFormatError(f"{seg_path}:{line_number}: {e}") from e

            segments.append(Segment(
                audio=audio,
                start=start,
                duration=duration,
                gender=parts[4],
                speaker_id=parts[7],
            ))

    logger.debug(f"[SEG] Parsed {len(segments)} segments from {seg_path}")
    return segments


def write_seg_file(
    segments: Iterable[Segment],
    output_path: Union[str, os.PathLike],
    show: Optional[str] = None,
) -> None:
    """
    Write segments in the layout ``parse_seg_file`` reads.

    Band and environment fields are written as ``U`` (unknown).
    """
    output_path = Path(output_path)
    show = show or output_path.stem

    with open(output_path, "w", encoding="utf-8") as f:
        for seg in segments:
            start_cs = int(round(seg.start * 100))
            duration_cs = int(round(seg.duration * 100))
            f.write(f"{show} 1 {start_cs} {duration_cs} {seg.gender or 'U'} U U {seg.speaker_id}\n")


def speakers_from_segments(
    segments: Iterable[Segment],
    registry: SpeakerRegistry,
) -> List[Speaker]:
    """
    Find or create one registry speaker per distinct speaker key.

    Speakers come back in order of first appearance; the gender of a
    speaker's first segment wins.
    """
    speakers: Dict[str, Speaker] = {}
    for seg in segments:
        if seg.speaker_id not in speakers:
            speakers[seg.speaker_id] = registry.find_or_create(seg.speaker_id, seg.gender)
    return list(speakers.values())
