"""
Transport layer for heat pump communication.

This package provides transport implementations for talking to the
controller, and the events they report.

Available transports:
- WebSocketTransport: Websocket client using aiohttp
- MockTransport: Mock transport for testing without a device

Example:
    >>> from luxconnect.transport import WebSocketTransport
    >>> transport = WebSocketTransport("ws://192.168.1.20:8214")
    >>> transport.set_listener(queue.put_nowait)
    >>> await transport.connect()

Testing Example:
    >>> from luxconnect.transport import MockTransport
    >>> mock = MockTransport()
    >>> mock.inject_message("<values/>")
"""

from luxconnect.transport.abc import (
    AbstractTransport,
    Closed,
    EventListener,
    Failed,
    MessageReceived,
    Opened,
    TransportEvent,
)
from luxconnect.transport.mock import MockTransport
from luxconnect.transport.websocket import WebSocketTransport

__all__ = [
    "AbstractTransport",
    "Closed",
    "EventListener",
    "Failed",
    "MessageReceived",
    "MockTransport",
    "Opened",
    "TransportEvent",
    "WebSocketTransport",
]
