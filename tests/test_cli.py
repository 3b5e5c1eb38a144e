"""Tests for the command-line interface."""
from click.testing import CliRunner

from prreviewer.__main__ import cli
from prreviewer.core.config import PRReviewerConfig


def test_init_writes_default_config(tmp_path):
    path = tmp_path / "prreviewer.yaml"
    runner = CliRunner()

    result = runner.invoke(cli, ["init", "--config-path", str(path)])

    assert result.exit_code == 0
    assert "Created configuration file" in result.output
    assert PRReviewerConfig.from_yaml(path).api_port == 8080


def test_init_refuses_to_overwrite(tmp_path):
    path = tmp_path / "prreviewer.yaml"
    path.write_text("api_port: 9000\n")
    runner = CliRunner()

    result = runner.invoke(cli, ["init", "--config-path", str(path)])

    assert result.exit_code == 0
    assert "already exists" in result.output
    assert PRReviewerConfig.from_yaml(path).api_port == 9000


def test_initdb_and_status(tmp_path):
    """Schema creation followed by a status report on an empty database."""
    config_path = tmp_path / "prreviewer.yaml"
    PRReviewerConfig(db_path=str(tmp_path / "cli.db")).to_yaml(config_path)
    runner = CliRunner()

    result = runner.invoke(cli, ["initdb", "--config", str(config_path)])
    assert result.exit_code == 0, result.output

    result = runner.invoke(cli, ["status", "--config", str(config_path)])
    assert result.exit_code == 0, result.output
    assert "0 open, 0 merged" in result.output
