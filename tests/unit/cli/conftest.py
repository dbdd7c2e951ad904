"""Fixtures for CLI command tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from configward.cli.main import app
from typer.testing import CliRunner, Result

runner = CliRunner()

Invoke = Callable[..., Result]


@pytest.fixture
def invoke(config_path: Path) -> Invoke:
    """Run the CLI against the test config path with a wide console."""

    def _invoke(*args: str, input: str | None = None) -> Result:
        return runner.invoke(
            app,
            ["--config", str(config_path), *args],
            input=input,
            env={"COLUMNS": "300"},
        )

    return _invoke
