"""
Published snapshot of the heat pump's item tree.

The session replaces the tree wholesale on every full content reply and
merges refresh values into it in place. Readers (typically an HTTP handler
running on another thread) go through the SnapshotStore, which serializes
them against those mutations with a lock.

Readers get either the live tree or an immutable flattened Snapshot: the
leaves in depth-first order, each with its identifier, dotted category,
display name, unit marker and decoded value.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from luxconnect.models.items import ItemTree
    from luxconnect.translations import LocaleLookup

# Module logger
logger = logging.getLogger(__name__)


class Reading(BaseModel):
    """
    One leaf of the snapshot.

    Exactly one of ``numeric`` and ``textual`` is set, depending on the
    field's unit kind.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Field identifier")
    category: str = Field(description="Dotted identifiers of the enclosing categories")
    name: str = Field(description="Localized display name")
    unit: str | None = Field(default=None, description="Unit marker")
    numeric: int | float | None = Field(default=None, description="Decoded numeric value")
    textual: str | None = Field(default=None, description="Decoded textual value")


class Snapshot(BaseModel):
    """
    Immutable flattened view of the item tree.

    Example:
        >>> snapshot = store.snapshot()
        >>> snapshot.as_dict()["data"][0]
        {'id': 'flow', 'category': 'temperature', 'name': 'Vorlauf', 'unit': '°C', ...}
    """

    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(ge=0, description="Epoch seconds of the last update")
    data: tuple[Reading, ...] = Field(default=(), description="Leaves, depth-first")

    def as_dict(self) -> dict[str, Any]:
        """Serializable form: readings under ``data``, timestamp under ``metadata``."""
        return {
            "data": [reading.model_dump() for reading in self.data],
            "metadata": {"timestamp": self.timestamp},
        }

    def __len__(self) -> int:
        return len(self.data)


def flatten(tree: ItemTree) -> tuple[Reading, ...]:
    """Flatten a tree into readings, leaves only, depth-first left to right."""
    return tuple(
        Reading(
            id=item.identifier,
            category=tree.category(item.index),
            name=item.name,
            unit=item.unit,
            numeric=item.numeric,
            textual=item.textual,
        )
        for item in tree.leaves()
    )


class SnapshotStore:
    """
    Holder of the current item tree and its last-updated timestamp.

    Mutations (publish, merge) and reads are serialized by one lock. A new
    tree is installed by swapping a single reference; merges only overwrite
    leaf values.

    Example:
        >>> store = SnapshotStore()
        >>> store.has_data
        False
        >>> store.publish(tree)
        >>> store.wait_for_data(timeout=1.0)
        True
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        """
        Initialize an empty store.

        Args:
            clock: Source of the current time in epoch seconds.
        """
        self._clock = clock
        self._lock = threading.Lock()
        self._ready = threading.Event()
        self._tree: ItemTree | None = None
        self._last_refresh: int | None = None

    @property
    def has_data(self) -> bool:
        """Check if a tree has been published."""
        return self._ready.is_set()

    @property
    def last_refresh(self) -> int | None:
        """Epoch seconds of the last publish or merge, None before the first."""
        with self._lock:
            return self._last_refresh

    def items(self) -> ItemTree | None:
        """Get the current tree, None before the first publish."""
        with self._lock:
            return self._tree

    def publish(self, tree: ItemTree) -> None:
        """
        Replace the current tree.

        Args:
            tree: Newly parsed tree.
        """
        with self._lock:
            self._tree = tree
            self._touch()
        self._ready.set()
        logger.debug("Published %r", tree)

    def merge(self, values: Mapping[str, str], locale: LocaleLookup) -> int:
        """
        Merge refresh values into the current tree in place.

        Args:
            values: Node id to raw value.
            locale: Translation table for decoding.

        Returns:
            Number of items updated; 0 if nothing is published yet.
        """
        with self._lock:
            if self._tree is None:
                return 0
            updated = self._tree.apply_values(values, locale)
            self._touch()
        logger.debug("Merged %d of %d values", updated, len(values))
        return updated

    def snapshot(self) -> Snapshot | None:
        """Flatten the current tree, None before the first publish."""
        with self._lock:
            if self._tree is None or self._last_refresh is None:
                return None
            return Snapshot(timestamp=self._last_refresh, data=flatten(self._tree))

    def wait_for_data(self, timeout: float | None = None) -> bool:
        """
        Block until the first tree is published.

        Args:
            timeout: Seconds to wait; None waits indefinitely.

        Returns:
            True if data is available.
        """
        return self._ready.wait(timeout)

    def clear(self) -> None:
        """Drop the published tree."""
        with self._lock:
            self._tree = None
            self._last_refresh = None
        self._ready.clear()

    def _touch(self) -> None:
        self._last_refresh = int(self._clock())

    def __repr__(self) -> str:
        return f"SnapshotStore(tree={self._tree!r}, last_refresh={self._last_refresh})"
