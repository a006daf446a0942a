"""Mixture persistence.

Models are stored as JSON documents validated by ``MixtureDocument``. The
store is the only place that knows about the on-disk format; everything else
works with ``Mixture`` objects.
"""

import os
import json
import math
import logging
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from diarize.core.gmm import Mixture
from diarize.exceptions import DimensionMismatch, ModelFormatError, ModelNotFound
from diarize.models.schemas import GaussianRecord, MixtureDocument

logger = logging.getLogger(__name__)

# Default universal background model shipped with the package
BUNDLED_UBM_PATH = Path(__file__).resolve().parent.parent / "resources" / "ubm.json"

PathLike = Union[str, os.PathLike]


class ModelStore:
    """Loads and saves mixtures from JSON model files."""

    def load_model(self, resource: PathLike) -> Mixture:
        """
        Read one mixture.

        Raises:
            ModelNotFound: if the resource does not exist
            ModelFormatError: if the content is not a valid mixture document
        """
        path = Path(resource)
        if not path.is_file():
            raise ModelNotFound(f"Model not found: {path}")

        try:
            document = MixtureDocument.model_validate_json(path.read_bytes())
        except ValidationError as e:
            raise ModelFormatError(f"Malformed model file {path}: {e}") from e

        try:
            mixture = document_to_mixture(document)
        except DimensionMismatch as e:
            raise ModelFormatError(f"Malformed model file {path}: {e}") from e

        logger.debug(
            f"[STORE] Loaded {mixture.name!r} from {path} "
            f"({mixture.nb_components} components, dim {mixture.dim})"
        )
        return mixture

    def save_model(self, mixture: Mixture, resource: PathLike) -> None:
        """Write one mixture, replacing any existing file."""
        path = Path(resource)
        path.parent.mkdir(parents=True, exist_ok=True)

        document = mixture_to_document(mixture)
        with open(path, "w") as f:
            json.dump(document.model_dump(), f, indent=2)

        logger.debug(f"[STORE] Saved {mixture.name!r} to {path}")


def document_to_mixture(document: MixtureDocument) -> Mixture:
    """Convert a validated document to a mixture."""
    if not document.components:
        return Mixture([], name=document.name, mean_log_likelihood=document.mean_log_likelihood)

    return Mixture.from_arrays(
        [c.weight for c in document.components],
        [c.mean for c in document.components],
        [c.variance for c in document.components],
        name=document.name,
        mean_log_likelihood=document.mean_log_likelihood,
    )


def mixture_to_document(mixture: Mixture) -> MixtureDocument:
    """Convert a mixture to its storable document."""
    mll = mixture.mean_log_likelihood
    return MixtureDocument(
        name=mixture.name,
        mean_log_likelihood=None if math.isnan(mll) else mll,
        components=[
            GaussianRecord(
                weight=c.weight,
                mean=c.mean.tolist(),
                variance=c.variance.tolist(),
            )
            for c in mixture.components
        ],
    )
