"""
Tests for the diarize and benchmark command-line interfaces.
"""

import json

import pytest
from click.testing import CliRunner

from benchmark.cli import cli as benchmark_cli
from diarize.cli import cli


@pytest.fixture
def runner(monkeypatch):
    for var in ("DIARIZE_UBM_PATH", "DIARIZE_DETECTION_THRESHOLD", "DIARIZE_LOG_LIKELIHOOD_THRESHOLD"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("DIARIZE_LOG_LEVEL", "WARNING")
    return CliRunner()


class TestDiarizeCli:
    """Tests for the diarize command."""

    def test_info(self, runner, model_dir):
        """Should summarize a model file."""
        result = runner.invoke(cli, ["info", str(model_dir / "far.json")])
        assert result.exit_code == 0
        assert "Model: far" in result.output
        assert "Components: 1" in result.output
        assert "Mean log-likelihood: -18.5" in result.output

    def test_compare_same(self, runner, model_dir):
        """Should report a match for a model against itself."""
        result = runner.invoke(cli, [
            "--ubm", str(model_dir / "ubm.json"),
            "compare", str(model_dir / "S0.json"), str(model_dir / "S0.json"),
            "--mll-a", "-10", "--mll-b", "-10",
        ])
        assert result.exit_code == 0
        assert "Same speaker: yes" in result.output

    def test_compare_undecided(self, runner, model_dir):
        """Should report why no decision was taken."""
        result = runner.invoke(cli, [
            "--ubm", str(model_dir / "ubm.json"),
            "compare", str(model_dir / "S0.json"), str(model_dir / "far.json"),
        ])
        assert result.exit_code == 0
        assert "Undecided: likelihood below threshold" in result.output

    def test_match_json(self, runner, model_dir):
        """Should print matching pairs as JSON."""
        result = runner.invoke(cli, [
            "--ubm", str(model_dir / "ubm.json"),
            "match", str(model_dir / "S0b.json"), str(model_dir / "far.json"),
            str(model_dir / "S0b.json"), "--json",
        ])
        assert result.exit_code == 0
        assert json.loads(result.output) == [["S0b", "S0b"]]

    def test_match_dimension_mismatch(self, runner, model_dir):
        """Should fail cleanly when a model does not fit the UBM."""
        result = runner.invoke(cli, [
            "match", str(model_dir / "S0b.json"), str(model_dir / "far.json"),
        ])
        assert result.exit_code != 0
        assert "Error" in result.output

    def test_speakers(self, runner, model_dir, tmp_path, sample_seg_content):
        """Should list speakers with segment counts and speech time."""
        seg = tmp_path / "show1.seg"
        seg.write_text(sample_seg_content)
        result = runner.invoke(cli, ["--ubm", str(model_dir / "ubm.json"), "speakers", str(seg)])
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert lines[0] == "S0\tM\t2 segments\t5.50s"
        assert len(lines) == 3


class TestBenchmarkCli:
    """Tests for the benchmark command."""

    def test_run_and_report(self, runner, model_dir, tmp_path):
        """Should score trials, save results and render a report."""
        trials = model_dir / "trials.txt"
        trials.write_text("S0b S0b target\nS0b far nontarget\n")
        out = tmp_path / "results"

        result = runner.invoke(benchmark_cli, [
            "run", str(trials), "--ubm", str(model_dir / "ubm.json"), "-o", str(out),
        ])
        assert result.exit_code == 0
        assert "EER" in result.output

        saved = list(out.glob("*.json"))
        assert len(saved) == 1

        report = runner.invoke(benchmark_cli, ["report", str(saved[0]), "--format", "markdown"])
        assert report.exit_code == 0
        assert "| EER | 0.00% |" in report.output
