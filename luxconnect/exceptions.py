"""
Exception hierarchy for luxconnect.

All exceptions inherit from LuxConnectError, providing a clean hierarchy
for error handling. The design follows these principles:

1. Transport failures (connect timeout, abrupt close) are distinct from
   message parsing failures
2. Parse errors carry the kind of message being parsed and a snippet of it
3. Conversion errors are item-scoped and name the offending raw value
4. All exceptions provide meaningful error messages
"""

from __future__ import annotations


class LuxConnectError(Exception):
    """
    Base exception for all luxconnect errors.

    All library-specific exceptions inherit from this class, allowing
    callers to catch all luxconnect errors with a single except clause.
    """

    pass


class ParseError(LuxConnectError):
    """
    Message parsing error.

    Raised when a device message cannot be turned into structured data.
    """

    def __init__(
        self,
        message: str,
        *,
        message_kind: str | None = None,
        raw_data: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message_kind = message_kind
        self.raw_data = raw_data

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.message_kind:
            parts.append(f"kind={self.message_kind}")
        if self.raw_data:
            # Truncate raw data for display
            display_data = self.raw_data[:40] + "..." if len(self.raw_data) > 40 else self.raw_data
            parts.append(f"data={display_data!r}")
        return " ".join(parts) if len(parts) > 1 else parts[0]


class MalformedMessageError(ParseError):
    """
    Message body is not well-formed markup.

    The whole message is skipped; the session stays in its current state
    and retries on the next cycle.
    """

    pass


class ConversionError(ParseError):
    """
    A raw field value could not be converted.

    Item-scoped: only the affected item is dropped.
    """

    pass


class UnparseableValueError(ConversionError):
    """
    Raw value did not parse after stripping its unit marker.
    """

    def __init__(self, raw_value: str, unit: str) -> None:
        super().__init__(f"Cannot parse {raw_value!r} as {unit}", raw_data=raw_value)
        self.raw_value = raw_value
        self.unit = unit


class MissingTranslationError(LuxConnectError, KeyError):
    """
    Locale lookup lacks a required key.

    Raised while building the field registry or decoding locale-dependent
    values (boolean literals, operating mode names).
    """

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Missing translation for key {self.key!r}"


class TimeoutError(LuxConnectError):  # noqa: A001 - intentionally shadows builtin
    """
    Communication timeout.

    Raised when a connection attempt or a send is not confirmed within the
    expected time.
    """

    def __init__(
        self,
        message: str = "Communication timeout",
        *,
        timeout_seconds: float | None = None,
    ) -> None:
        super().__init__(message)
        self.timeout_seconds = timeout_seconds

    def __str__(self) -> str:
        base = super().__str__()
        if self.timeout_seconds is not None:
            return f"{base} (after {self.timeout_seconds:.1f}s)"
        return base


class ConnectionError(LuxConnectError):  # noqa: A001 - intentionally shadows builtin
    """
    Device connection error.

    Raised when:
    - The websocket handshake with the controller fails
    - The connection is unexpectedly lost
    """

    pass


class TransportError(LuxConnectError):
    """
    Transport-level error.

    Raised for low-level transport issues:
    - Writing to a closed socket
    - Websocket protocol errors
    """

    pass
