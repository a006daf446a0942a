"""
Tests for D-MAP normalization.
"""

import math

import numpy as np
import pytest

from diarize.core.gmm import Mixture
from diarize.core.speaker import Speaker
from diarize.exceptions import DimensionMismatch, NormalizationFailure


def load_s0(context, model_dir):
    return context.load_speaker(model_dir / "S0.json", uri="S0")


class TestNormalize:
    """Tests for normalize()."""

    def test_blends_means_towards_ubm(self, context, model_dir):
        """Should scale the offset from the UBM mean by 1 / distance."""
        s0 = load_s0(context, model_dir)
        assert context.normalize(s0) is True
        expected = 1.0 / math.sqrt(2.0)
        np.testing.assert_allclose(s0.model[0].mean, [expected, expected])

    def test_places_model_at_unit_divergence(self, context, model_dir):
        """Should leave the model at divergence one from the UBM."""
        far = context.load_speaker(model_dir / "far.json", uri="far")
        context.normalize(far)
        assert context.divergence(far, context.ubm_speaker) == pytest.approx(1.0)

    def test_idempotent(self, context, model_dir):
        """Should leave the mixture bit-identical on a second call."""
        s0 = load_s0(context, model_dir)
        context.normalize(s0)
        once = s0.model.means.copy()
        assert context.normalize(s0) is True
        np.testing.assert_array_equal(s0.model.means, once)

    def test_refreshes_cached_supervector(self, context, model_dir):
        """Should drop the supervector cached before normalization."""
        s0 = load_s0(context, model_dir)
        np.testing.assert_array_equal(s0.supervector, [1.0, 1.0])
        context.normalize(s0)
        np.testing.assert_allclose(s0.supervector, s0.model[0].mean)

    def test_ubm_backed_speaker_untouched(self, context):
        """Should never rewrite the shared UBM mixture."""
        speaker = context.new_speaker("S1", "M")
        before = context.ubm_mixture.means.copy()
        assert context.normalize(speaker) is True
        np.testing.assert_array_equal(context.ubm_mixture.means, before)

    def test_zero_distance_fails(self, context):
        """Should fail for an unnormalized model sitting exactly on the UBM."""
        clone = Speaker("clone", model=context.ubm_mixture.copy())
        with pytest.raises(NormalizationFailure):
            context.normalize(clone)
        assert clone.normalized is False

    def test_missing_model_fails(self, context):
        """Should fail when the divergence to the UBM is undefined."""
        with pytest.raises(NormalizationFailure):
            context.normalize(Speaker("nobody"))

    def test_component_count_mismatch(self, context):
        """Should refuse a model whose layout differs from the UBM's."""
        # Same supervector length as the 1x2 UBM, but 2 components of dim 1
        odd = Speaker("odd", model=Mixture.from_arrays([0.5, 0.5], [[1.0], [2.0]], [[1.0], [1.0]]))
        with pytest.raises(DimensionMismatch):
            context.normalize(odd)
