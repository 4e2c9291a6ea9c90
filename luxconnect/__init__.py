"""
luxconnect - Python library for heat pump controller websockets.

This library keeps a session with a heat pump controller's websocket
interface, logs in, selects the data set and publishes the decoded readings
as a snapshot that other threads can read.

Example:
    >>> from luxconnect import HeatpumpSession, SessionConfig
    >>>
    >>> async def main(locale):
    ...     session = HeatpumpSession.from_config(SessionConfig(host="192.168.1.20"), locale)
    ...     runner = asyncio.create_task(session.run())
    ...     ...
    ...     snapshot = session.store.snapshot()
    ...     if snapshot is not None:
    ...         for reading in snapshot.data:
    ...             print(f"{reading.category}.{reading.id}: {reading.numeric or reading.textual}")
    ...     await session.shutdown()
"""

from luxconnect.client import HeatpumpSession, SessionState
from luxconnect.config import SessionConfig
from luxconnect.exceptions import (
    ConnectionError,
    ConversionError,
    LuxConnectError,
    MalformedMessageError,
    MissingTranslationError,
    ParseError,
    TimeoutError,
    TransportError,
    UnparseableValueError,
)
from luxconnect.models import (
    Item,
    ItemTree,
    Reading,
    Snapshot,
    SnapshotStore,
    UnitKind,
    convert,
)
from luxconnect.parsers import (
    FieldDefinition,
    FieldRegistry,
    create_default_registry,
    parse_content,
    parse_navigation,
    parse_values,
)
from luxconnect.translations import TRANSLATION_KEYS, LocaleLookup

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Session
    "HeatpumpSession",
    "SessionState",
    "SessionConfig",
    # Models
    "Item",
    "ItemTree",
    "Reading",
    "Snapshot",
    "SnapshotStore",
    "UnitKind",
    "convert",
    # Parsers
    "FieldDefinition",
    "FieldRegistry",
    "create_default_registry",
    "parse_content",
    "parse_navigation",
    "parse_values",
    # Locale
    "LocaleLookup",
    "TRANSLATION_KEYS",
    # Exceptions
    "LuxConnectError",
    "ConnectionError",
    "ConversionError",
    "MalformedMessageError",
    "MissingTranslationError",
    "ParseError",
    "TimeoutError",
    "TransportError",
    "UnparseableValueError",
]
