"""D-MAP distance normalization of speaker models.

Applies M-Norm from "D-MAP: a Distance-Normalized MAP Estimation of Speaker
Models for Automatic Speaker Verification": every component mean is pulled
along the line towards the matching UBM mean so the model ends up at
divergence one from the UBM. Raw divergences between two speakers only become
comparable across pairs once both models sit on that unit sphere.
"""

import math
import logging

from diarize.core.divergence import DivergenceStrategy, require_divergence
from diarize.core.speaker import Speaker
from diarize.exceptions import DimensionMismatch, NormalizationFailure, UndefinedDivergence

logger = logging.getLogger(__name__)


def normalize(speaker: Speaker, ubm_speaker: Speaker, strategy: DivergenceStrategy) -> bool:
    """
    Normalize ``speaker``'s means in place. Idempotent.

    Args:
        speaker: Speaker to normalize
        ubm_speaker: Anonymous UBM-backed speaker (the sphere centre)
        strategy: Divergence used to measure the distance to the UBM

    Returns:
        True, the speaker's normalized state after the call

    Raises:
        NormalizationFailure: if the divergence to the UBM is undefined or not positive
        DimensionMismatch: if the model and the UBM differ in shape
    """
    if speaker.normalized:
        return True

    try:
        divergence = require_divergence(strategy, speaker, ubm_speaker)
    except UndefinedDivergence as err:
        raise NormalizationFailure(f"Cannot normalize {speaker!r}: {err}") from err

    if not math.isfinite(divergence) or divergence <= 0:
        raise NormalizationFailure(
            f"Cannot normalize {speaker!r}: divergence to UBM is {divergence}"
        )

    model = speaker.model
    ubm = ubm_speaker.model
    if model.nb_components != ubm.nb_components or model.dim != ubm.dim:
        raise DimensionMismatch(
            f"Model {model.name!r} is {model.nb_components}x{model.dim}, "
            f"UBM is {ubm.nb_components}x{ubm.dim}"
        )

    distance_to_ubm = math.sqrt(divergence)
    scale = 1.0 / distance_to_ubm
    for gaussian, ubm_gaussian in zip(model.components, ubm.components):
        gaussian.mean = scale * gaussian.mean + (1.0 - scale) * ubm_gaussian.mean

    speaker.invalidate_supervector()
    speaker.normalized = True
    logger.debug(f"[NORM] Normalized {speaker!r} (distance to UBM was {distance_to_ubm:.4f})")
    return True
