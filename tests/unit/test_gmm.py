"""
Tests for Gaussian mixtures and supervector projection.
"""

import math

import numpy as np
import pytest

from diarize.core.gmm import GaussianComponent, Mixture
from diarize.core.supervector import (
    covariance_supervector,
    mean_supervector,
    supervector_dim,
    weight_supervector,
)
from diarize.exceptions import DimensionMismatch


def make_mixture():
    return Mixture.from_arrays(
        [0.6, 0.4],
        [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]],
        [[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]],
        name="two",
    )


class TestMixture:
    """Tests for Mixture construction."""

    def test_shape(self):
        """Should report component count and shared dimension."""
        mixture = make_mixture()
        assert mixture.nb_components == 2
        assert mixture.dim == 3
        assert mixture.name == "two"

    def test_mean_log_likelihood_defaults_to_nan(self):
        """Should be NaN when the producer did not supply it."""
        assert math.isnan(make_mixture().mean_log_likelihood)

    def test_rejects_differing_dimensions(self):
        """Should refuse components of different dimension."""
        with pytest.raises(DimensionMismatch):
            Mixture([
                GaussianComponent(0.5, [0.0, 0.0], [1.0, 1.0]),
                GaussianComponent(0.5, [0.0], [1.0]),
            ])

    def test_rejects_mean_variance_length_mismatch(self):
        """Should refuse a component whose mean and variance disagree."""
        with pytest.raises(DimensionMismatch):
            GaussianComponent(1.0, [0.0, 0.0], [1.0])

    def test_rejects_array_count_mismatch(self):
        """Should refuse more weights than means."""
        with pytest.raises(DimensionMismatch):
            Mixture.from_arrays([0.5, 0.5], [[0.0, 0.0]], [[1.0, 1.0]])

    def test_copy_is_independent(self):
        """Should deep-copy component arrays."""
        mixture = make_mixture()
        clone = mixture.copy()
        clone[0].mean[0] = 99.0
        assert mixture[0].mean[0] == 1.0

    def test_empty(self):
        """Should treat a mixture without components as empty."""
        mixture = Mixture([])
        assert mixture.is_empty
        assert mixture.dim == 0


class TestSupervector:
    """Tests for supervector projection."""

    def test_length_is_components_times_dim(self):
        """Should have nb_components * dim coordinates."""
        mixture = make_mixture()
        assert supervector_dim(mixture) == 6
        assert mean_supervector(mixture).size == 6
        assert weight_supervector(mixture).size == 6
        assert covariance_supervector(mixture).size == 6

    def test_mean_layout(self):
        """Should place component k, dimension i at k * dim + i."""
        np.testing.assert_array_equal(
            mean_supervector(make_mixture()),
            [1.0, 2.0, 3.0, 4.0, 5.0, 6.0],
        )

    def test_weight_layout(self):
        """Should repeat each weight once per dimension."""
        np.testing.assert_array_equal(
            weight_supervector(make_mixture()),
            [0.6, 0.6, 0.6, 0.4, 0.4, 0.4],
        )

    def test_covariance_layout(self):
        """Should concatenate covariance diagonals."""
        np.testing.assert_array_equal(
            covariance_supervector(make_mixture()),
            [0.1, 0.2, 0.3, 0.4, 0.5, 0.6],
        )

    def test_empty_mixture(self):
        """Should give an empty vector for an empty mixture."""
        assert mean_supervector(Mixture([])).size == 0
