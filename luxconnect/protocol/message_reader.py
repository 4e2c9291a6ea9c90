"""
Device message reassembly.

The controller may split one markup document over several websocket text
frames. Each frame carries a final-chunk flag; frames are concatenated until
the flag is set, and only then is the complete body handed on for parsing.
The parser never sees partial bodies.

With aiohttp, continuation frames are already joined before a message is
received, so the websocket transport feeds every message as a single final
chunk and the assembler only classifies and wraps the body.

The assembler holds per-connection state and is not shared between
connections, so it needs no locking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from luxconnect.protocol.constants import MessageKind

# Module logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeviceMessage:
    """
    A complete message received from the device.

    Attributes:
        kind: Message kind derived from the opening tag.
        body: Full reassembled text.
        chunks: Number of transport frames the body arrived in.
    """

    kind: MessageKind
    body: str
    chunks: int = 1

    def __repr__(self) -> str:
        return f"DeviceMessage({self.kind.name}, {len(self.body)} chars, chunks={self.chunks})"


class MessageAssembler:
    """
    Reassembles chunked text frames into complete device messages.

    Example:
        >>> assembler = MessageAssembler()
        >>> assembler.feed("<values><item", final=False) is None
        True
        >>> message = assembler.feed(' id="1"/></values>', final=True)
        >>> message.kind
        <MessageKind.VALUES: '<values'>
    """

    def __init__(self) -> None:
        self._parts: list[str] = []

    @property
    def pending(self) -> bool:
        """Check if a partial message is buffered."""
        return bool(self._parts)

    @property
    def pending_size(self) -> int:
        """Number of characters buffered for the current message."""
        return sum(len(part) for part in self._parts)

    def feed(self, chunk: str, final: bool = True) -> DeviceMessage | None:
        """
        Add a chunk to the current message.

        Args:
            chunk: Text of one transport frame.
            final: Whether this frame completes the message.

        Returns:
            The complete DeviceMessage when ``final`` is set, else None.
        """
        self._parts.append(chunk)
        if not final:
            return None

        chunks = len(self._parts)
        body = "".join(self._parts)
        self._parts.clear()

        message = DeviceMessage(kind=MessageKind.classify(body), body=body, chunks=chunks)
        logger.debug("Received %r", message)
        return message

    def reset(self) -> None:
        """Discard any partially assembled message."""
        if self._parts:
            logger.debug("Discarding %d buffered characters", self.pending_size)
        self._parts.clear()
