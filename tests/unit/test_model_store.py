"""
Tests for JSON mixture persistence.
"""

import json
import math

import pytest

from diarize.core.gmm import Mixture
from diarize.exceptions import ModelFormatError, ModelNotFound
from diarize.services.model_store import BUNDLED_UBM_PATH, ModelStore


@pytest.fixture
def store():
    return ModelStore()


class TestLoadModel:
    """Tests for ModelStore.load_model()."""

    def test_load(self, store, model_dir):
        """Should read name, components and likelihood."""
        mixture = store.load_model(model_dir / "far.json")
        assert mixture.name == "far"
        assert mixture.nb_components == 1
        assert mixture.dim == 2
        assert mixture.mean_log_likelihood == -18.5
        assert mixture[0].mean.tolist() == [-3.0, 1.0]

    def test_null_likelihood_is_nan(self, store, model_dir):
        """Should map a missing likelihood to NaN."""
        assert math.isnan(store.load_model(model_dir / "S0.json").mean_log_likelihood)

    def test_bundled_ubm_exists(self, store):
        """Should ship a loadable default UBM."""
        assert store.load_model(BUNDLED_UBM_PATH).name == "MSMTFSFT"

    def test_missing(self, store, tmp_path):
        """Should raise ModelNotFound."""
        with pytest.raises(ModelNotFound):
            store.load_model(tmp_path / "nope.json")

    def test_not_json(self, store, tmp_path):
        """Should raise ModelFormatError for unparseable content."""
        path = tmp_path / "bad.json"
        path.write_text("{ not json")
        with pytest.raises(ModelFormatError):
            store.load_model(path)

    def test_non_positive_variance(self, store, tmp_path, write_model):
        """Should refuse a zero variance."""
        path = write_model(tmp_path / "bad.json", "bad", [
            {"weight": 1.0, "mean": [0.0], "variance": [0.0]},
        ])
        with pytest.raises(ModelFormatError):
            store.load_model(path)

    def test_mean_variance_length_mismatch(self, store, tmp_path, write_model):
        """Should refuse a component whose mean and variance lengths differ."""
        path = write_model(tmp_path / "bad.json", "bad", [
            {"weight": 1.0, "mean": [0.0, 1.0], "variance": [1.0]},
        ])
        with pytest.raises(ModelFormatError):
            store.load_model(path)

    def test_differing_dimensions(self, store, tmp_path, write_model):
        """Should refuse components of differing dimension."""
        path = write_model(tmp_path / "bad.json", "bad", [
            {"weight": 0.5, "mean": [0.0, 1.0], "variance": [1.0, 1.0]},
            {"weight": 0.5, "mean": [0.0], "variance": [1.0]},
        ])
        with pytest.raises(ModelFormatError):
            store.load_model(path)

    def test_empty_mixture(self, store, tmp_path, write_model):
        """Should load a document without components as an empty mixture."""
        path = write_model(tmp_path / "empty.json", "empty", [])
        assert store.load_model(path).is_empty


class TestSaveModel:
    """Tests for ModelStore.save_model()."""

    def test_creates_parent_directories(self, store, tmp_path):
        """Should create missing directories and write JSON."""
        mixture = Mixture.from_arrays([1.0], [[1.0, 2.0]], [[0.5, 0.5]], name="S0", mean_log_likelihood=-12.0)
        path = tmp_path / "a" / "b" / "S0.json"
        store.save_model(mixture, path)

        data = json.loads(path.read_text())
        assert data["name"] == "S0"
        assert data["mean_log_likelihood"] == -12.0
        assert data["components"][0]["mean"] == [1.0, 2.0]

    def test_nan_likelihood_saved_as_null(self, store, tmp_path):
        """Should store an unknown likelihood as null."""
        mixture = Mixture.from_arrays([1.0], [[0.0]], [[1.0]])
        store.save_model(mixture, tmp_path / "m.json")
        assert json.loads((tmp_path / "m.json").read_text())["mean_log_likelihood"] is None
