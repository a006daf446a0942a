"""Speaker entity: an identity bound to an acoustic model."""

import math
import logging
from typing import Optional

import numpy as np

from diarize.core.gmm import Mixture
from diarize.core.supervector import mean_supervector, supervector_dim
from diarize.exceptions import ModelMissing

logger = logging.getLogger(__name__)


class Speaker:
    """
    A speaker and its Gaussian mixture.

    UBM-backed speakers share the background mixture and are created with
    ``normalized=True`` so the shared mixture is never rewritten. Speakers
    built from a stored model own their mixture and start unnormalized.

    The mean supervector is computed on first access and cached. Anything that
    rewrites the mixture means must call ``invalidate_supervector()``; the
    normalizer does.
    """

    def __init__(
        self,
        uri: Optional[str] = None,
        gender: Optional[str] = None,
        model: Optional[Mixture] = None,
        normalized: bool = False,
        model_uri: Optional[str] = None,
    ):
        self.uri = uri
        self.gender = gender
        self.model = model
        self.model_uri = model_uri
        self.normalized = normalized
        self._mean_log_likelihood: Optional[float] = None
        self._supervector: Optional[np.ndarray] = None

    @property
    def has_model(self) -> bool:
        return self.model is not None and not self.model.is_empty

    @property
    def mean_log_likelihood(self) -> float:
        """Explicit override if set, else the model's own value (NaN when unknown)."""
        if self._mean_log_likelihood is not None:
            return self._mean_log_likelihood
        if self.model is None:
            return math.nan
        return self.model.mean_log_likelihood

    @mean_log_likelihood.setter
    def mean_log_likelihood(self, value: Optional[float]):
        self._mean_log_likelihood = None if value is None else float(value)

    @property
    def supervector_dim(self) -> int:
        return supervector_dim(self._require_model())

    @property
    def supervector(self) -> np.ndarray:
        if self._supervector is None:
            self._supervector = mean_supervector(self._require_model())
        return self._supervector

    def invalidate_supervector(self) -> None:
        self._supervector = None

    def _require_model(self) -> Mixture:
        if self.model is None:
            raise ModelMissing(f"Speaker {self.uri!r} has no model")
        return self.model

    def __repr__(self) -> str:
        model_name = self.model.name if self.model is not None else None
        return (
            f"Speaker(uri={self.uri!r}, gender={self.gender!r}, "
            f"model={model_name!r}, normalized={self.normalized})"
        )
