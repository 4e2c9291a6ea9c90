"""
Heat pump websocket protocol commands and constants.

The controller speaks a plain-text command protocol over a websocket
negotiated with the ``Lux_WS`` sub-protocol. Commands go out as short
strings; replies come back as markup documents told apart by their
opening tag.
"""

from __future__ import annotations

from enum import Enum
from typing import Final


class Command:
    """
    Client-to-device commands.

    Commands are sent as single text frames. Only the data-set selection
    carries a parameter: the address returned in the navigation reply.
    """

    LOGIN: Final[str] = "LOGIN;0"
    """Log in with the default (read-only) password."""

    SELECT_DATA_PATTERN: Final[str] = "GET;{address}"
    """Select a data set by the address found in the navigation reply."""

    REFRESH: Final[str] = "REFRESH"
    """Request fresh values for the selected data set."""

    @classmethod
    def select_data(cls, address: str) -> str:
        """Build the data-set selection command for an address."""
        return cls.SELECT_DATA_PATTERN.format(address=address)


class MessageKind(Enum):
    """Device-to-client message kinds, keyed by opening tag."""

    NAVIGATION = "<Navigation"
    """Navigation menu, answered to LOGIN."""

    CONTENT = "<Content"
    """Full item tree of a data set, answered to GET."""

    VALUES = "<values"
    """Flat value updates, answered to REFRESH."""

    UNKNOWN = ""
    """Anything else; ignored."""

    @classmethod
    def classify(cls, body: str) -> MessageKind:
        """
        Classify a reassembled message by its opening tag.

        Args:
            body: Complete message text.

        Returns:
            Matching MessageKind, or UNKNOWN.
        """
        text = body.lstrip()
        for kind in (cls.NAVIGATION, cls.CONTENT, cls.VALUES):
            if text.startswith(kind.value):
                return kind
        return cls.UNKNOWN


class ProtocolConstants:
    """Protocol timing and framing constants."""

    SUB_PROTOCOL: Final[str] = "Lux_WS"
    """Websocket sub-protocol offered during the handshake."""

    DEFAULT_PORT: Final[int] = 8214
    """Websocket port of the controller."""

    URL_PATTERN: Final[str] = "ws://{host}:{port}"
    """Websocket URL template."""

    DEFAULT_CONNECT_TIMEOUT: Final[float] = 30.0
    """Seconds to wait for the websocket handshake."""

    DEFAULT_SEND_TIMEOUT: Final[float] = 5.0
    """Seconds to wait for a text frame to be handed to the socket."""

    DEFAULT_DRIVE_INTERVAL: Final[float] = 10.0
    """Seconds between two drive cycles."""

    ERROR_THRESHOLD: Final[int] = 3
    """Consecutive transport errors before the session enters ERROR."""

    ERROR_COOLDOWN_CYCLES: Final[int] = 100
    """Drive cycles spent in ERROR before the handshake is retried."""


# Element and attribute names used in device messages

ITEM_TAG: Final[str] = "item"
"""Tag of hierarchy nodes in content and values messages."""

VALUE_TAG: Final[str] = "value"
"""Tag of the element holding a leaf's raw scalar."""

NAVIGATION_TAG: Final[str] = "Navigation"
"""Tag of the navigation container."""

ID_ATTRIBUTE: Final[str] = "id"
"""Attribute holding a node's device id."""
