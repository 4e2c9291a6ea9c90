"""
Protocol layer for heat pump websocket communication.

This module contains the low-level protocol handling:
- Commands, message kinds and protocol constants
- Reassembly of chunked text frames into complete messages
"""

from luxconnect.protocol.constants import (
    ID_ATTRIBUTE,
    ITEM_TAG,
    NAVIGATION_TAG,
    VALUE_TAG,
    Command,
    MessageKind,
    ProtocolConstants,
)
from luxconnect.protocol.message_reader import DeviceMessage, MessageAssembler

__all__ = [
    # Constants
    "Command",
    "MessageKind",
    "ProtocolConstants",
    "ITEM_TAG",
    "VALUE_TAG",
    "NAVIGATION_TAG",
    "ID_ATTRIBUTE",
    # Reassembly
    "DeviceMessage",
    "MessageAssembler",
]
