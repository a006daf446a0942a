"""Supervector projection of Gaussian mixtures.

Component ``k``'s value for dimension ``i`` lands at offset ``k * D + i``.
The same layout is used for means, weights and variances so the three
vectors line up coordinate by coordinate.
"""

import numpy as np

from diarize.core.gmm import Mixture


def supervector_dim(mixture: Mixture) -> int:
    """Length of any supervector of ``mixture``: nb_components * dim."""
    return mixture.nb_components * mixture.dim


def mean_supervector(mixture: Mixture) -> np.ndarray:
    """Concatenated component means."""
    if mixture.is_empty:
        return np.zeros(0)
    return np.concatenate([c.mean for c in mixture.components])


def weight_supervector(mixture: Mixture) -> np.ndarray:
    """Each component weight repeated once per dimension."""
    if mixture.is_empty:
        return np.zeros(0)
    return np.repeat(mixture.weights, mixture.dim)


def covariance_supervector(mixture: Mixture) -> np.ndarray:
    """Concatenated covariance diagonals."""
    if mixture.is_empty:
        return np.zeros(0)
    return np.concatenate([c.variance for c in mixture.components])
