"""Diagonal-covariance Gaussian mixture models.

A mixture is the unit of acoustic identity: one per speaker, plus the shared
universal background model. Off-diagonal covariance terms are never
represented.
"""

import math
import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

import numpy as np

from diarize.exceptions import DimensionMismatch

logger = logging.getLogger(__name__)


@dataclass
class GaussianComponent:
    """
    One weighted Gaussian with a diagonal covariance.

    Attributes:
        weight: Mixture weight (non-negative)
        mean: Per-dimension mean
        variance: Per-dimension variance (the covariance diagonal)
    """
    weight: float
    mean: np.ndarray
    variance: np.ndarray

    def __post_init__(self):
        self.weight = float(self.weight)
        self.mean = np.asarray(self.mean, dtype=np.float64).reshape(-1)
        self.variance = np.asarray(self.variance, dtype=np.float64).reshape(-1)
        if self.mean.shape != self.variance.shape:
            raise DimensionMismatch(
                f"Mean has {self.mean.size} dimensions but variance has {self.variance.size}"
            )

    @property
    def dim(self) -> int:
        return int(self.mean.size)

    def copy(self) -> "GaussianComponent":
        return GaussianComponent(self.weight, self.mean.copy(), self.variance.copy())


class Mixture:
    """
    Ordered collection of Gaussian components sharing one dimension.

    ``mean_log_likelihood`` is NaN unless the producing toolkit (or a model
    file) supplied it.
    """

    def __init__(
        self,
        components: Sequence[GaussianComponent],
        name: Optional[str] = None,
        mean_log_likelihood: Optional[float] = None,
    ):
        self.components: List[GaussianComponent] = list(components)
        self.name = name
        self.mean_log_likelihood = (
            math.nan if mean_log_likelihood is None else float(mean_log_likelihood)
        )

        dims = {c.dim for c in self.components}
        if len(dims) > 1:
            raise DimensionMismatch(
                f"Mixture {name!r} has components of differing dimension: {sorted(dims)}"
            )

    @classmethod
    def from_arrays(
        cls,
        weights,
        means,
        variances,
        name: Optional[str] = None,
        mean_log_likelihood: Optional[float] = None,
    ) -> "Mixture":
        """Build a mixture from (K,), (K, D) and (K, D) arrays."""
        weights = np.asarray(weights, dtype=np.float64).reshape(-1)
        means = np.atleast_2d(np.asarray(means, dtype=np.float64))
        variances = np.atleast_2d(np.asarray(variances, dtype=np.float64))

        if not (len(weights) == means.shape[0] == variances.shape[0]):
            raise DimensionMismatch(
                f"Got {len(weights)} weights, {means.shape[0]} means and {variances.shape[0]} variances"
            )

        components = [
            GaussianComponent(w, m, v) for w, m, v in zip(weights, means, variances)
        ]
        return cls(components, name=name, mean_log_likelihood=mean_log_likelihood)

    @property
    def nb_components(self) -> int:
        return len(self.components)

    @property
    def dim(self) -> int:
        """Dimension shared by all components (0 for an empty mixture)."""
        return self.components[0].dim if self.components else 0

    @property
    def is_empty(self) -> bool:
        return not self.components

    @property
    def weights(self) -> np.ndarray:
        return np.array([c.weight for c in self.components], dtype=np.float64)

    @property
    def means(self) -> np.ndarray:
        """(K, D) array of component means (a copy)."""
        if not self.components:
            return np.zeros((0, 0))
        return np.vstack([c.mean for c in self.components])

    @property
    def variances(self) -> np.ndarray:
        """(K, D) array of component variances (a copy)."""
        if not self.components:
            return np.zeros((0, 0))
        return np.vstack([c.variance for c in self.components])

    def __len__(self) -> int:
        return len(self.components)

    def __iter__(self) -> Iterator[GaussianComponent]:
        return iter(self.components)

    def __getitem__(self, k: int) -> GaussianComponent:
        return self.components[k]

    def copy(self) -> "Mixture":
        """Deep copy, so the result can be normalized without touching the source."""
        return Mixture(
            [c.copy() for c in self.components],
            name=self.name,
            mean_log_likelihood=self.mean_log_likelihood,
        )

    def __repr__(self) -> str:
        return (
            f"Mixture(name={self.name!r}, nb_components={self.nb_components}, "
            f"dim={self.dim}, mean_log_likelihood={self.mean_log_likelihood})"
        )
