"""Tests for session configuration."""

import pytest
from pydantic import ValidationError

from luxconnect.config import SessionConfig


class TestSessionConfig:
    """Tests for SessionConfig model."""

    def test_defaults(self):
        """Test controller defaults."""
        config = SessionConfig(host="192.168.1.20")

        assert config.port == 8214
        assert config.sub_protocol == "Lux_WS"
        assert config.connect_timeout == 30.0
        assert config.send_timeout == 5.0
        assert config.error_threshold == 3
        assert config.error_cooldown_cycles == 100
        assert config.drive_interval == 10.0

    def test_url(self):
        """Test the websocket URL."""
        assert SessionConfig(host="heatpump.local").url == "ws://heatpump.local:8214"
        assert SessionConfig(host="10.0.0.5", port=8080).url == "ws://10.0.0.5:8080"

    def test_host_required(self):
        """Test host must be given."""
        with pytest.raises(ValidationError):
            SessionConfig()

    @pytest.mark.parametrize("host", ["", "   ", "heat pump", "ws://heatpump"])
    def test_invalid_host(self, host):
        """Test malformed hosts are rejected."""
        with pytest.raises(ValidationError):
            SessionConfig(host=host)

    def test_host_trimmed(self):
        """Test surrounding whitespace is removed."""
        assert SessionConfig(host=" heatpump ").host == "heatpump"

    @pytest.mark.parametrize(
        "field,value",
        [
            ("port", 0),
            ("port", 70000),
            ("connect_timeout", 0),
            ("send_timeout", -1),
            ("error_threshold", 0),
            ("error_cooldown_cycles", 0),
            ("drive_interval", 0),
        ],
    )
    def test_out_of_range(self, field, value):
        """Test numeric settings are bounded."""
        with pytest.raises(ValidationError):
            SessionConfig(host="heatpump", **{field: value})

    def test_frozen(self):
        """Test configs are immutable."""
        config = SessionConfig(host="heatpump")
        with pytest.raises(ValidationError):
            config.port = 1

    def test_from_mapping(self):
        """Test building from loaded settings."""
        config = SessionConfig.model_validate({"host": "heatpump", "error_threshold": 5})
        assert config.error_threshold == 5
