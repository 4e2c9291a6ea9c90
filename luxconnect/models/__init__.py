"""
Data models for heat pump readings.

This module contains the structures the session builds from device
messages, including:

- Unit kinds and raw value conversion
- The item hierarchy (arena of leaves and categories)
- The published snapshot and its store
"""

from luxconnect.models.items import Item, ItemTree, PendingItem
from luxconnect.models.snapshot import Reading, Snapshot, SnapshotStore, flatten
from luxconnect.models.units import UnitKind, Value, convert

__all__ = [
    # Units
    "UnitKind",
    "Value",
    "convert",
    # Items
    "Item",
    "ItemTree",
    "PendingItem",
    # Snapshot
    "Reading",
    "Snapshot",
    "SnapshotStore",
    "flatten",
]
