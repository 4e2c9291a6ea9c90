"""
Abstract transport interface for the heat pump websocket protocol.

This module defines the abstract base class for all transport
implementations, plus the events a transport reports back to its owner.

A transport is event driven rather than request/response: the device answers
commands asynchronously, so replies, closes and errors are delivered to a
listener callback as TransportEvent objects. The listener is expected to do
nothing more than enqueue the event; all reactions happen on the owner's
event loop.

The transport layer is responsible for:
- Opening/aborting the websocket connection
- Sending text commands
- Reassembling received frames into complete messages
- Reporting messages, closes and failures as events

Implementations:
- WebSocketTransport: aiohttp based websocket client
- MockTransport: For testing without a device
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from types import TracebackType


@dataclass(frozen=True)
class Opened:
    """The connection is established."""


@dataclass(frozen=True)
class MessageReceived:
    """A complete text message arrived."""

    text: str


@dataclass(frozen=True)
class Failed:
    """The connection failed."""

    error: BaseException


@dataclass(frozen=True)
class Closed:
    """The connection was closed."""

    reason: str = ""


TransportEvent = Union[Opened, MessageReceived, Failed, Closed]

EventListener = Callable[[TransportEvent], None]


class AbstractTransport(ABC):
    """
    Abstract base class for heat pump transports.

    Transports connect to one controller and report everything the device
    sends as events to a single listener. All transport implementations must
    inherit from this class and implement all abstract methods.

    Transports support async context manager protocol for safe resource
    management:

        async with WebSocketTransport("ws://192.168.1.20:8214") as transport:
            await transport.send_text("LOGIN;0")

    Attributes:
        is_open: Whether the transport connection is currently open.
        endpoint: Identifier for the transport (e.g., websocket URL).
    """

    def __init__(self) -> None:
        self._listener: EventListener | None = None

    def set_listener(self, listener: EventListener | None) -> None:
        """
        Set the callback receiving transport events.

        Replaces any previous listener. Events emitted while no listener is
        set are dropped.

        Args:
            listener: Callable taking one TransportEvent, or None.
        """
        self._listener = listener

    def emit(self, event: TransportEvent) -> None:
        """Deliver an event to the current listener."""
        if self._listener is not None:
            self._listener(event)

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """
        Check if the transport connection is currently open.

        Returns:
            True if connected and ready to send, False otherwise.
        """
        ...

    @property
    @abstractmethod
    def endpoint(self) -> str:
        """
        Get the transport identifier.

        Returns:
            URL or identifier string (e.g., "ws://192.168.1.20:8214").
        """
        ...

    @abstractmethod
    async def connect(self) -> None:
        """
        Open the transport connection.

        Emits Opened once the connection is established; received messages,
        the eventual close and read failures are reported as events
        afterwards. A failure to connect is raised, not emitted.

        Raises:
            ConnectionError: If the connection cannot be established.
            TimeoutError: If the handshake does not complete in time.
        """
        ...

    @abstractmethod
    async def send_text(self, text: str) -> None:
        """
        Send one text message.

        Args:
            text: Command to send.

        Raises:
            TransportError: If the transport is not open or the send fails.
        """
        ...

    @abstractmethod
    async def abort(self) -> None:
        """
        Tear down the connection immediately.

        No Closed event is emitted for an abort. Safe to call multiple times
        (idempotent) and while a connect is in progress.
        """
        ...

    async def __aenter__(self) -> AbstractTransport:
        """Async context manager entry - connects the transport."""
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Async context manager exit - aborts the transport."""
        await self.abort()
