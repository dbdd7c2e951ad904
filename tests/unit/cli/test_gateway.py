"""Unit tests for the gateway status command."""

from pathlib import Path
from typing import Any


class TestGatewayStatus:
    """Tests for configward gateway status."""

    def test_configured_gateway(
        self, invoke, config_path: Path, valid_config: dict[str, Any], write_json
    ) -> None:
        """Mode, port and auth mode are shown."""
        config = {
            **valid_config,
            "gateway": {"mode": "local", "port": 19000, "auth": {"mode": "token"}},
        }
        write_json(config_path, config)

        result = invoke("gateway", "status")

        assert result.exit_code == 0
        assert "Gateway" in result.output
        assert "19000" in result.output
        assert "local" in result.output
        assert "token" in result.output

    def test_no_gateway(self, invoke, config_path: Path, write_json) -> None:
        """A config without a gateway section is reported."""
        write_json(config_path, {"agents": {}})

        result = invoke("gateway", "status")

        assert result.exit_code == 0
        assert "No gateway configured." in result.output

    def test_broken_config(self, invoke, config_path: Path, write_json) -> None:
        """Gateway status runs on a broken config."""
        write_json(config_path, "{ broken")

        result = invoke("gateway", "status")

        assert result.exit_code == 0
        assert "Config invalid" in result.output
        assert "gateway settings cannot be read" in result.output
