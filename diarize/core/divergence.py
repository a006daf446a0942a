"""Model-space divergence between two speakers.

Two interchangeable strategies sit behind ``DivergenceStrategy``:

- ``NativeDivergence`` hands both mixtures to an external toolkit's GDMAP
  primitive. It is the accuracy reference when such a toolkit is installed.
- ``FallbackDivergence`` is the MAP Gaussian divergence approximation
  ("A model space framework for efficient speaker detection", Interspeech'05):
  a squared Euclidean distance between mean supervectors, weighted per
  coordinate by the UBM component weight and inverse variance.

The two are not expected to agree numerically.
"""

import math
import logging
import importlib
from abc import ABC, abstractmethod
from typing import Callable, Optional

import numpy as np

from diarize.core.gmm import Mixture
from diarize.core.speaker import Speaker
from diarize.exceptions import DimensionMismatch, ToolkitUnavailable, UndefinedDivergence

logger = logging.getLogger(__name__)

GDMAPPrimitive = Callable[[Mixture, Mixture], float]


class DivergenceStrategy(ABC):
    """Computes a non-negative divergence between two speakers' models."""

    name: str = "abstract"

    def divergence(self, speaker1: Speaker, speaker2: Speaker) -> Optional[float]:
        """
        Divergence from ``speaker1`` to ``speaker2``.

        Returns None when either speaker has no usable model. The metric is
        not assumed to be symmetric, so argument order matters.
        """
        if not (speaker1.has_model and speaker2.has_model):
            logger.debug(f"[DIV] Undefined divergence: {speaker1!r} vs {speaker2!r}")
            return None
        return self._compute(speaker1, speaker2)

    @abstractmethod
    def _compute(self, speaker1: Speaker, speaker2: Speaker) -> Optional[float]:
        """Compute the divergence for two speakers that both have models."""
        pass


class FallbackDivergence(DivergenceStrategy):
    """
    Pure numpy GDMAP approximation.

    d = sum_j w_ubm[j] * (sv1[j] - sv2[j])**2 / cov_ubm[j]
    """

    name = "fallback"

    def __init__(self, ubm_weights: np.ndarray, ubm_covariances: np.ndarray):
        if ubm_weights.shape != ubm_covariances.shape:
            raise DimensionMismatch(
                f"UBM weight supervector has length {ubm_weights.size} "
                f"but covariance supervector has {ubm_covariances.size}"
            )
        self.ubm_weights = ubm_weights
        self.ubm_covariances = ubm_covariances

    def _compute(self, speaker1: Speaker, speaker2: Speaker) -> float:
        sv1 = speaker1.supervector
        sv2 = speaker2.supervector
        if not (sv1.size == sv2.size == self.ubm_weights.size):
            raise DimensionMismatch(
                f"Supervector lengths differ: {sv1.size}, {sv2.size}, UBM {self.ubm_weights.size}"
            )
        return float(np.sum(self.ubm_weights * (sv1 - sv2) ** 2 / self.ubm_covariances))


class NativeDivergence(DivergenceStrategy):
    """Delegates to an external toolkit's GDMAP distance on the raw mixtures."""

    name = "native"

    def __init__(self, primitive: GDMAPPrimitive):
        self.primitive = primitive

    def _compute(self, speaker1: Speaker, speaker2: Speaker) -> Optional[float]:
        if speaker1.model.dim != speaker2.model.dim:
            raise DimensionMismatch(
                f"Cannot compare mixtures of dimension {speaker1.model.dim} and {speaker2.model.dim}"
            )
        value = float(self.primitive(speaker1.model, speaker2.model))
        if not math.isfinite(value) or value < 0:
            logger.warning(f"[DIV] Native toolkit returned {value}, treating divergence as undefined")
            return None
        return value


def load_native_primitive(path: str) -> GDMAPPrimitive:
    """
    Import a GDMAP callable given as ``"package.module:attribute"``.

    Raises:
        ToolkitUnavailable: if the path is empty, malformed or cannot be imported
    """
    module_name, _, attribute = path.partition(":")
    if not module_name or not attribute:
        raise ToolkitUnavailable(
            f"Native GDMAP path must look like 'package.module:callable', got {path!r}"
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as err:
        raise ToolkitUnavailable(
            f"Native modeling toolkit module {module_name!r} is not installed"
        ) from err

    primitive = getattr(module, attribute, None)
    if not callable(primitive):
        raise ToolkitUnavailable(f"{path!r} does not name a callable")
    return primitive


def require_divergence(
    strategy: DivergenceStrategy,
    speaker1: Speaker,
    speaker2: Speaker,
) -> float:
    """Like ``strategy.divergence`` but raises instead of returning None."""
    value = strategy.divergence(speaker1, speaker2)
    if value is None:
        raise UndefinedDivergence(f"No divergence between {speaker1!r} and {speaker2!r}")
    return value
