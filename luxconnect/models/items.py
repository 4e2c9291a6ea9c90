"""
Item hierarchy reported by the heat pump.

The device describes its data set as a tree: category (branch) nodes such as
"Temperaturen" group value (leaf) nodes such as "Vorlauf 31.2°C". The tree
is held in an arena: items live in one list and refer to their parent and
children by index, so there are no object cycles and a whole tree can be
swapped out by replacing a single reference.

Invariants:
    - A leaf has a raw value and no children.
    - A branch has no raw value and at least one child.
    - The category path of a node is derived from its parent indices each
      time it is asked for; it is never stored.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from luxconnect.exceptions import ConversionError
from luxconnect.models.units import convert

if TYPE_CHECKING:
    from luxconnect.models.units import Value
    from luxconnect.parsers.field_registry import FieldDefinition
    from luxconnect.translations import LocaleLookup

# Module logger
logger = logging.getLogger(__name__)

CATEGORY_SEPARATOR = "."


@dataclass
class Item:
    """
    One node of the item hierarchy.

    Attributes:
        index: Position of the item in its tree's arena.
        node_id: Device node id, stable within a session.
        name: Localized display name.
        definition: Field definition the node was resolved to.
        parent: Arena index of the parent, None for top-level items.
        children: Arena indices of the children, in document order.
        raw: Raw value text; None for branches.
        value: Decoded value; None for branches.
    """

    index: int
    node_id: str
    name: str
    definition: FieldDefinition
    parent: int | None = None
    children: list[int] = field(default_factory=list)
    raw: str | None = None
    value: Value | None = None

    @property
    def identifier(self) -> str:
        """Snapshot identifier of the field."""
        return self.definition.identifier

    @property
    def unit(self) -> str | None:
        """Unit marker of the field, None for branches."""
        return self.definition.marker

    @property
    def is_leaf(self) -> bool:
        """Check if the item carries a value."""
        return self.raw is not None

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def numeric(self) -> int | float | None:
        """Decoded value if the unit kind is numeric."""
        if self.definition.unit is not None and self.definition.unit.is_numeric:
            return self.value  # type: ignore[return-value]
        return None

    @property
    def textual(self) -> str | None:
        """Decoded value if the unit kind is textual."""
        if self.definition.unit is not None and not self.definition.unit.is_numeric:
            return self.value  # type: ignore[return-value]
        return None

    def set_raw_value(self, raw: str, locale: LocaleLookup) -> None:
        """
        Decode and store a raw value.

        The item is only changed if decoding succeeds.

        Args:
            raw: Raw text reported by the device.
            locale: Translation table for locale-dependent decoding.

        Raises:
            ValueError: If the item is a category node.
            ConversionError: If the raw text cannot be decoded.
        """
        if self.definition.unit is None:
            raise ValueError(f"Item {self.node_id} is a category and holds no value")

        value = convert(self.definition.unit, raw, locale)
        self.raw = raw
        self.value = value

    def __repr__(self) -> str:
        if self.is_leaf:
            return f"Item({self.node_id!r}, {self.identifier}={self.value!r})"
        return f"Item({self.node_id!r}, {self.identifier}, children={len(self.children)})"


@dataclass
class PendingItem:
    """
    An item built by a parser before it is placed into a tree.

    Leaves carry ``raw`` and ``value``; branches carry ``children``.
    """

    node_id: str
    name: str
    definition: FieldDefinition
    raw: str | None = None
    value: Value | None = None
    children: list[PendingItem] = field(default_factory=list)


class ItemTree:
    """
    Arena holding an ordered forest of items.

    Example:
        >>> tree = ItemTree.from_pending(pending_items)
        >>> [item.identifier for item in tree.leaves()]
        ['flow', 'return_flow']
        >>> tree.category(tree.leaves()[0].index)
        'temperature'
    """

    def __init__(self) -> None:
        self._items: list[Item] = []
        self._roots: list[int] = []

    @classmethod
    def from_pending(cls, pending: Iterable[PendingItem]) -> ItemTree:
        """
        Build a tree from parser output.

        Items are placed in depth-first pre-order, so arena order matches
        document order.
        """
        tree = cls()
        for node in pending:
            tree._insert(node, None)
        return tree

    def _insert(self, node: PendingItem, parent: int | None) -> int:
        item = self.add(
            node.node_id,
            node.name,
            node.definition,
            parent=parent,
            raw=node.raw,
            value=node.value,
        )
        for child in node.children:
            self._insert(child, item.index)
        return item.index

    def add(
        self,
        node_id: str,
        name: str,
        definition: FieldDefinition,
        *,
        parent: int | None = None,
        raw: str | None = None,
        value: Value | None = None,
    ) -> Item:
        """
        Append an item to the arena.

        Args:
            node_id: Device node id.
            name: Display name.
            definition: Resolved field definition.
            parent: Arena index of the parent, None for a top-level item.
            raw: Raw value for leaves.
            value: Decoded value for leaves.

        Returns:
            The new Item.

        Raises:
            IndexError: If the parent index does not exist.
        """
        if parent is not None and not 0 <= parent < len(self._items):
            raise IndexError(f"Parent index {parent} out of range")

        item = Item(
            index=len(self._items),
            node_id=node_id,
            name=name,
            definition=definition,
            parent=parent,
            raw=raw,
            value=value,
        )
        self._items.append(item)
        if parent is None:
            self._roots.append(item.index)
        else:
            self._items[parent].children.append(item.index)
        return item

    @property
    def roots(self) -> list[Item]:
        """Top-level items in document order."""
        return [self._items[index] for index in self._roots]

    def children(self, index: int) -> list[Item]:
        """Children of an item in document order."""
        return [self._items[child] for child in self._items[index].children]

    def parent(self, index: int) -> Item | None:
        """Parent of an item, None for top-level items."""
        parent = self._items[index].parent
        return self._items[parent] if parent is not None else None

    def walk(self) -> Iterator[Item]:
        """Iterate over every item depth-first, left to right."""
        stack = list(reversed(self._roots))
        while stack:
            item = self._items[stack.pop()]
            yield item
            stack.extend(reversed(item.children))

    def leaves(self) -> list[Item]:
        """
        All leaves, depth-first left to right.

        The result is independent of how deeply leaves are nested.
        """
        return [item for item in self.walk() if item.is_leaf]

    def category_path(self, index: int) -> tuple[str, ...]:
        """
        Identifiers of an item's ancestors, from the root down to its parent.

        Args:
            index: Arena index of the item.

        Returns:
            Tuple of identifiers; empty for top-level items.
        """
        path: list[str] = []
        parent = self._items[index].parent
        while parent is not None:
            ancestor = self._items[parent]
            path.append(ancestor.identifier)
            parent = ancestor.parent
        path.reverse()
        return tuple(path)

    def path(self, index: int) -> tuple[str, ...]:
        """Identifiers from the root down to and including the item itself."""
        return (*self.category_path(index), self._items[index].identifier)

    def category(self, index: int) -> str:
        """Dotted category path of an item."""
        return CATEGORY_SEPARATOR.join(self.category_path(index))

    def find(self, node_id: str) -> Item | None:
        """Find an item by device node id."""
        for item in self._items:
            if item.node_id == node_id:
                return item
        return None

    def apply_values(self, values: Mapping[str, str], locale: LocaleLookup) -> int:
        """
        Merge a flat id to raw value map into the tree in place.

        Every leaf whose node id appears in the map gets its raw and decoded
        value overwritten. Ids with no matching leaf are ignored; no items
        are created or removed. A value that fails to decode leaves that
        item unchanged.

        Args:
            values: Node id to raw text.
            locale: Translation table for locale-dependent decoding.

        Returns:
            Number of items updated.
        """
        updated = 0
        for item in self.walk():
            if item.node_id not in values or item.definition.is_category:
                continue
            raw = values[item.node_id]
            try:
                item.set_raw_value(raw, locale)
            except ConversionError as e:
                logger.debug("Keeping previous value of %s: %s", item.identifier, e)
                continue
            updated += 1
        return updated

    def __getitem__(self, index: int) -> Item:
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"ItemTree(items={len(self._items)}, roots={len(self._roots)})"
