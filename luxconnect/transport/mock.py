"""
Mock transport for testing.

This module provides a mock transport implementation that allows testing
the heat pump session without a device. Tests drive the conversation by
injecting the events a real connection would produce, and inspect the
commands the session sent.

Example:
    >>> from luxconnect.transport import MockTransport
    >>> mock = MockTransport()
    >>> session = HeatpumpSession(mock, registry, locale, config)
    >>> await session.drive()             # starts connecting
    >>> await session.process_pending_events()
    >>> mock.sent
    ['LOGIN;0']
    >>> mock.inject_message(NAVIGATION_XML)
"""

from __future__ import annotations

from luxconnect.exceptions import ConnectionError, TransportError
from luxconnect.transport.abc import AbstractTransport, Closed, Failed, MessageReceived, Opened


class MockTransport(AbstractTransport):
    """
    Mock transport for testing without a device.

    By default ``connect()`` succeeds immediately and emits Opened. Set
    ``fail_connect`` to make it raise instead, or ``auto_open`` to False to
    leave the Opened event to the test.

    Attributes:
        sent: All text messages sent through the transport.
        connect_calls: Number of connect() invocations.
        abort_calls: Number of abort() invocations.
    """

    def __init__(
        self,
        endpoint: str = "mock://heatpump",
        auto_open: bool = True,
    ) -> None:
        """
        Initialize the mock transport.

        Args:
            endpoint: Identifier for the mock transport.
            auto_open: Emit Opened as soon as connect() is called.
        """
        super().__init__()
        self._endpoint = endpoint
        self._auto_open = auto_open
        self._is_open = False
        self._sent: list[str] = []
        self.connect_calls = 0
        self.abort_calls = 0
        self.fail_connect: BaseException | None = None
        self.fail_send: BaseException | None = None

    @property
    def is_open(self) -> bool:
        """Check if the mock transport is open."""
        return self._is_open

    @property
    def endpoint(self) -> str:
        """Get the mock endpoint name."""
        return self._endpoint

    @property
    def sent(self) -> list[str]:
        """Get all text sent through the transport."""
        return self._sent.copy()

    @property
    def last_sent(self) -> str | None:
        """Get the most recently sent text."""
        return self._sent[-1] if self._sent else None

    def clear_sent(self) -> None:
        """Clear the sent message history."""
        self._sent.clear()

    async def connect(self) -> None:
        """
        Open the mock transport.

        Raises:
            ConnectionError: If ``fail_connect`` is set (the configured
                exception is raised as-is when it is a LuxConnectError).
        """
        self.connect_calls += 1
        if self.fail_connect is not None:
            error = self.fail_connect
            if isinstance(error, ConnectionError | TransportError):
                raise error
            raise ConnectionError(f"Mock connect failed: {error}") from error

        if self._auto_open:
            self.inject_open()

    async def send_text(self, text: str) -> None:
        """
        Record a sent message.

        Raises:
            TransportError: If the transport is not open or ``fail_send``
                is set.
        """
        if not self._is_open:
            raise TransportError("Mock transport not open")
        if self.fail_send is not None:
            raise TransportError(f"Mock send failed: {self.fail_send}")
        self._sent.append(text)

    async def abort(self) -> None:
        """Close the mock transport without emitting an event."""
        self.abort_calls += 1
        self._is_open = False

    # Event injection

    def inject_open(self) -> None:
        """Mark the transport open and emit Opened."""
        self._is_open = True
        self.emit(Opened())

    def inject_message(self, text: str) -> None:
        """Emit a received message."""
        self.emit(MessageReceived(text))

    def inject_error(self, error: BaseException | None = None) -> None:
        """Mark the transport closed and emit Failed."""
        self._is_open = False
        self.emit(Failed(error or TransportError("Mock transport failure")))

    def inject_close(self, reason: str = "closed by peer") -> None:
        """Mark the transport closed and emit Closed."""
        self._is_open = False
        self.emit(Closed(reason))

    def assert_sent(self, expected: str, index: int = -1) -> None:
        """
        Assert that a specific message was sent.

        Args:
            expected: Expected text.
            index: Index in the sent list (-1 for last).

        Raises:
            AssertionError: If nothing was sent or the text doesn't match.
        """
        if not self._sent:
            raise AssertionError("Nothing sent through mock transport")

        actual = self._sent[index]
        if actual != expected:
            raise AssertionError(f"Sent message mismatch: expected {expected!r}, got {actual!r}")

    def assert_send_count(self, expected: int) -> None:
        """
        Assert number of sent messages.

        Raises:
            AssertionError: If count doesn't match.
        """
        actual = len(self._sent)
        if actual != expected:
            raise AssertionError(f"Send count mismatch: expected {expected}, got {actual}")

    def __repr__(self) -> str:
        return f"MockTransport(endpoint={self._endpoint!r}, open={self._is_open}, sent={len(self._sent)})"
