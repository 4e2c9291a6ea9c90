"""
Session configuration.

SessionConfig bundles the connection and retry settings of one heat pump
session as an immutable, validated Pydantic model. Only the host is
required; every other setting defaults to the controller's standard values
from ProtocolConstants.

Loading the settings from files or the environment is left to the caller:

    >>> config = SessionConfig(host="192.168.1.20")
    >>> config.url
    'ws://192.168.1.20:8214'
    >>> SessionConfig.model_validate({"host": "heatpump", "error_threshold": 5})
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from luxconnect.protocol.constants import ProtocolConstants


class SessionConfig(BaseModel):
    """
    Settings for a HeatpumpSession.

    Attributes:
        host: Hostname or IP address of the controller.
        port: Websocket port.
        sub_protocol: Websocket sub-protocol offered during the handshake.
        connect_timeout: Seconds to wait for the websocket handshake.
        send_timeout: Seconds to wait for a command to be handed to the socket.
        error_threshold: Consecutive transport errors before entering ERROR.
        error_cooldown_cycles: Drive cycles spent in ERROR before retrying.
        drive_interval: Seconds between drive cycles in ``run()``.
    """

    model_config = ConfigDict(frozen=True)

    host: str = Field(min_length=1, description="Controller hostname or IP address")
    port: int = Field(default=ProtocolConstants.DEFAULT_PORT, ge=1, le=65535)
    sub_protocol: str = Field(default=ProtocolConstants.SUB_PROTOCOL, min_length=1)
    connect_timeout: float = Field(default=ProtocolConstants.DEFAULT_CONNECT_TIMEOUT, gt=0)
    send_timeout: float = Field(default=ProtocolConstants.DEFAULT_SEND_TIMEOUT, gt=0)
    error_threshold: int = Field(default=ProtocolConstants.ERROR_THRESHOLD, ge=1)
    error_cooldown_cycles: int = Field(default=ProtocolConstants.ERROR_COOLDOWN_CYCLES, ge=1)
    drive_interval: float = Field(default=ProtocolConstants.DEFAULT_DRIVE_INTERVAL, gt=0)

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Reject hosts with whitespace or a URL scheme."""
        v = v.strip()
        if not v or any(c.isspace() for c in v):
            raise ValueError(f"Invalid host: {v!r}")
        if "://" in v:
            raise ValueError(f"Host must not include a scheme: {v!r}")
        return v

    @property
    def url(self) -> str:
        """Websocket URL of the controller."""
        return ProtocolConstants.URL_PATTERN.format(host=self.host, port=self.port)
