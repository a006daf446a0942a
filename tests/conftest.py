"""
Pytest fixtures for speaker matching tests.
"""

import json
from pathlib import Path

import pytest

from diarize.config import Settings
from diarize.core.context import DiarizationContext
from diarize.core.gmm import Mixture


def write_model(path: Path, name, components, mean_log_likelihood=None) -> Path:
    """Write a model file in the JSON layout the store reads."""
    path.write_text(json.dumps({
        "name": name,
        "mean_log_likelihood": mean_log_likelihood,
        "components": components,
    }))
    return path


@pytest.fixture(name="write_model")
def write_model_fixture():
    """The model writer, for tests that need their own model files."""
    return write_model


@pytest.fixture
def settings():
    """Default settings, ignoring any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def ubm_mixture():
    """Single-component, two-dimensional background model centred on the origin."""
    return Mixture.from_arrays([1.0], [[0.0, 0.0]], [[1.0, 1.0]], name="UBM")


@pytest.fixture
def context(settings, ubm_mixture):
    """Context using the small test UBM and the fallback divergence."""
    return DiarizationContext(settings=settings, ubm=ubm_mixture)


@pytest.fixture
def model_dir(tmp_path):
    """Directory with the test UBM and a few speaker models."""
    write_model(tmp_path / "ubm.json", "UBM", [
        {"weight": 1.0, "mean": [0.0, 0.0], "variance": [1.0, 1.0]},
    ])
    write_model(tmp_path / "S0.json", "S0", [
        {"weight": 1.0, "mean": [1.0, 1.0], "variance": [1.0, 1.0]},
    ])
    write_model(tmp_path / "S0b.json", "S0b", [
        {"weight": 1.0, "mean": [2.0, 2.0], "variance": [1.0, 1.0]},
    ], mean_log_likelihood=-20.0)
    write_model(tmp_path / "far.json", "far", [
        {"weight": 1.0, "mean": [-3.0, 1.0], "variance": [1.0, 1.0]},
    ], mean_log_likelihood=-18.5)
    return tmp_path


@pytest.fixture
def sample_seg_content():
    """Sample segmentation file content."""
    return """;; cluster S0 [ score:FS = -33.5 ] [ score:FT = -34.1 ]
show1 1 0 250 M S U S0
show1 1 250 120 F S U S1
;; cluster S1
show1 1 370 300 M S U S0
show1 1 670 45 F T U S2
"""
