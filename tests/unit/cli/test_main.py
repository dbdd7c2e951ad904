"""Unit tests for the main CLI application."""

from configward import __version__
from configward.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


class TestMainApp:
    """Tests for global options."""

    def test_version(self) -> None:
        """--version prints the version and exits."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"configward version {__version__}" in result.output

    def test_help_lists_commands(self) -> None:
        """--help lists every command group."""
        result = runner.invoke(app, ["--help"], env={"COLUMNS": "300"})

        assert result.exit_code == 0
        for command in ("doctor", "status", "health", "config", "backups", "gateway"):
            assert command in result.output

    def test_env_config_path(self, config_path, write_json) -> None:
        """CONFIGWARD_CONFIG_PATH selects the config file."""
        write_json(config_path, "{ broken")

        result = runner.invoke(
            app,
            ["health"],
            env={"CONFIGWARD_CONFIG_PATH": str(config_path), "COLUMNS": "300"},
        )

        assert result.exit_code == 1
        assert "Config invalid" in result.output
