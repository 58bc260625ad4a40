"""
Argon2TheMax Test Suite - CLI Tests
===================================
Tests for command-line interface.

© 2026 Sudheer Ibrahim Daniel Devu. All Rights Reserved.
"""

import json

import pytest
from click.testing import CliRunner
from unittest.mock import patch

from argon2themax import __version__
from argon2themax.cli import cli
from argon2themax.core.schema import SampleSeries
from argon2themax.tuner import ParameterCache, Tuner

from conftest import make_sample


@pytest.fixture
def cli_runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def fake_tuner_class(engine):
    """Stand-in for Tuner that hashes with the fake primitive."""
    created = []

    def factory(config):
        tuner = Tuner(engine=engine, cache=ParameterCache({}), config=config)
        created.append(tuner)
        return tuner

    factory.created = created
    return factory


@pytest.fixture
def series_file(tmp_path):
    series = SampleSeries(budget_ms=100, policy="closest_match")
    series.append(make_sample(50.0, memory_cost=10, time_cost=1))
    series.append(make_sample(90.0, memory_cost=10, time_cost=4))
    series.append(make_sample(120.0, memory_cost=10, time_cost=8))

    path = tmp_path / "series.json"
    series.save(path)
    return path


class TestCLIHelp:
    """Tests for CLI help commands."""

    def test_main_help(self, cli_runner):
        result = cli_runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "Argon2TheMax" in result.output
        for command in ["tune", "calibrate", "select", "limits", "info"]:
            assert command in result.output

    def test_tune_help(self, cli_runner):
        result = cli_runner.invoke(cli, ["tune", "--help"])

        assert result.exit_code == 0
        assert "--budget" in result.output

    def test_version_flag(self, cli_runner):
        result = cli_runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestCLITune:
    """Tests for tune command."""

    def test_tune_prints_parameters(self, cli_runner, fake_tuner_class):
        with patch("argon2themax.cli.Tuner", fake_tuner_class):
            result = cli_runner.invoke(cli, ["tune", "--budget", "99"])

        assert result.exit_code == 0, result.output
        params = json.loads(result.output)
        assert (params["memory_cost"], params["time_cost"]) == (12, 9)
        assert params["variant"] == "argon2id"

    def test_tune_policies_and_variant(self, cli_runner, fake_tuner_class):
        with patch("argon2themax.cli.Tuner", fake_tuner_class):
            result = cli_runner.invoke(cli, [
                "tune", "-b", "99", "-C", "max_memory_march", "-S", "max_memory", "--variant", "argon2i",
            ])

        assert result.exit_code == 0, result.output
        params = json.loads(result.output)
        assert params["memory_cost"] == 13
        assert params["variant"] == "argon2i"

    def test_tune_nothing_fits(self, cli_runner, fake_tuner_class):
        with patch("argon2themax.cli.Tuner", fake_tuner_class):
            result = cli_runner.invoke(cli, ["tune", "-b", "10", "-C", "max_memory_march"])

        assert result.exit_code != 0
        assert "No samples found within 10.0ms" in result.output

    def test_config_file(self, cli_runner, fake_tuner_class, tmp_path):
        """Budget and variant come from the YAML config when not given."""
        config_path = tmp_path / "tuning.yaml"
        config_path.write_text("tuning:\n  default_budget_ms: 99\n  variant: argon2d\n")

        with patch("argon2themax.cli.Tuner", fake_tuner_class):
            result = cli_runner.invoke(cli, ["--config", str(config_path), "tune"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["variant"] == "argon2d"
        assert fake_tuner_class.created[0].config.default_budget_ms == 99

    def test_bad_config_file(self, cli_runner, tmp_path):
        config_path = tmp_path / "tuning.yaml"
        config_path.write_text("tuning:\n  budget: 99\n")

        result = cli_runner.invoke(cli, ["--config", str(config_path), "limits"])

        assert result.exit_code != 0
        assert "budget" in result.output


class TestCLICalibrate:
    """Tests for calibrate command."""

    def test_calibrate_saves_series(self, cli_runner, fake_tuner_class, tmp_path):
        output = tmp_path / "series.json"

        with patch("argon2themax.cli.Tuner", fake_tuner_class):
            result = cli_runner.invoke(cli, [
                "calibrate", "-b", "100", "-p", "max_memory_march", "-o", str(output),
            ])

        assert result.exit_code == 0, result.output
        assert "3 samples" in result.output
        assert "120.00 ms" in result.output

        series = SampleSeries.load(output)
        assert [s.elapsed_ms for s in series] == [30.0, 60.0, 120.0]
        assert series.policy == "max_memory_march"

    def test_calibrate_quiet(self, cli_runner, fake_tuner_class):
        with patch("argon2themax.cli.Tuner", fake_tuner_class):
            result = cli_runner.invoke(cli, ["calibrate", "-b", "100", "-p", "max_memory_march", "-q"])

        assert result.exit_code == 0, result.output
        assert " ms | memory" not in result.output


class TestCLISelect:
    """Tests for select command."""

    def test_select_from_series(self, cli_runner, series_file):
        result = cli_runner.invoke(cli, ["select", str(series_file), "--budget", "100"])

        assert result.exit_code == 0, result.output
        report = json.loads(result.output)
        assert report["policy"] == "max_cost"
        assert report["selected"]["elapsed_ms"] == 90.0

    def test_select_nothing_fits(self, cli_runner, series_file):
        result = cli_runner.invoke(cli, ["select", str(series_file), "-b", "10", "-p", "closest_match"])

        assert result.exit_code != 0
        assert "Fastest sample took 50.00ms" in result.output

    def test_select_empty_series(self, cli_runner, tmp_path):
        path = tmp_path / "empty.json"
        SampleSeries().save(path)

        result = cli_runner.invoke(cli, ["select", str(path), "-b", "100"])

        assert result.exit_code != 0

    def test_select_requires_budget(self, cli_runner, series_file):
        result = cli_runner.invoke(cli, ["select", str(series_file)])
        assert result.exit_code != 0

    @pytest.mark.parametrize("content", ['{"samples": [', '{"samples": [{"elapsed_ms": 5}]}', "[]"])
    def test_select_malformed_series(self, cli_runner, tmp_path, content):
        """Unreadable series files are reported, not dumped as tracebacks."""
        path = tmp_path / "broken.json"
        path.write_text(content)

        result = cli_runner.invoke(cli, ["select", str(path), "-b", "100"])

        assert result.exit_code == 1
        assert "Cannot read series" in result.output
        assert not isinstance(result.exception, (KeyError, ValueError, AttributeError))


class TestCLIBudget:
    """Budgets must be positive."""

    @pytest.mark.parametrize("command", [
        ["calibrate", "-q"],
        ["tune"],
    ])
    @pytest.mark.parametrize("budget", ["0", "-5"])
    def test_non_positive_budget(self, cli_runner, fake_tuner_class, command, budget):
        with patch("argon2themax.cli.Tuner", fake_tuner_class):
            result = cli_runner.invoke(cli, command + ["-b", budget])

        assert result.exit_code == 2
        assert "Invalid value" in result.output
        assert fake_tuner_class.created == []

    def test_select_non_positive_budget(self, cli_runner, series_file):
        result = cli_runner.invoke(cli, ["select", str(series_file), "-b", "0"])

        assert result.exit_code == 2
        assert "Invalid value" in result.output


class TestCLIInfo:
    """Tests for limits and info commands."""

    def test_limits(self, cli_runner):
        result = cli_runner.invoke(cli, ["limits", "--variant", "argon2d"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["defaults"]["variant"] == "argon2d"
        assert data["defaults"]["memory_cost"] == 12
        assert data["limits"]["memory_cost"] == {"min": 3, "max": 31}

    def test_info(self, cli_runner):
        result = cli_runner.invoke(cli, ["info"])

        assert result.exit_code == 0
        assert "CPUs:" in result.output
        assert "Memory cap:" in result.output
