"""
Parsers for device messages.

The controller answers each command with a markup document:

    LOGIN;0   -> <Navigation id="..."><item id="0x4e8e8" .../>...</Navigation>
    GET;<id>  -> <Content><item id="0x..."><name>Temperaturen</name>
                     <item id="0x..."><name>Vorlauf</name><value>31.2°C</value></item>
                 </item>...</Content>
    REFRESH   -> <values><item id="0x..."><value>31.4°C</value></item>...</values>

Hierarchy nodes are ``item`` elements. An item with a ``value`` child is a
leaf; an item without one is a category whose own ``item`` children are its
members. The label of an item is the text of its first child element.

Error scopes:
    - A body that is not well-formed raises MalformedMessageError; the
      caller skips the whole message.
    - An item that is missing its id, has an unknown label or a value that
      fails to convert is dropped; its siblings are kept.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING

from luxconnect.exceptions import ConversionError, MalformedMessageError
from luxconnect.models.items import ItemTree, PendingItem
from luxconnect.models.units import convert
from luxconnect.protocol.constants import (
    ID_ATTRIBUTE,
    ITEM_TAG,
    NAVIGATION_TAG,
    VALUE_TAG,
    MessageKind,
)

if TYPE_CHECKING:
    from luxconnect.parsers.field_registry import FieldRegistry
    from luxconnect.translations import LocaleLookup

# Module logger
logger = logging.getLogger(__name__)


def _parse_document(text: str, kind: MessageKind) -> ET.Element:
    """Parse a message body, converting parser errors to MalformedMessageError."""
    try:
        return ET.fromstring(text)
    except ET.ParseError as e:
        raise MalformedMessageError(
            f"Malformed {kind.name.lower()} message: {e}",
            message_kind=kind.name,
            raw_data=text,
        ) from e


def _is_item(element: ET.Element) -> bool:
    """Check if an element is a hierarchy node with at least one child element."""
    return element.tag == ITEM_TAG and len(element) > 0


def _label_of(element: ET.Element) -> str:
    return (element[0].text or "").strip()


def parse_navigation(text: str) -> str | None:
    """
    Extract the data-set address from a navigation reply.

    The address is the id of the first child of the first Navigation
    element, which may be the document root or nested below it.

    Args:
        text: Complete navigation message body.

    Returns:
        The address, or None if the reply carries none.

    Raises:
        MalformedMessageError: If the body is not well-formed.
    """
    root = _parse_document(text, MessageKind.NAVIGATION)

    navigation = root if root.tag == NAVIGATION_TAG else root.find(f".//{NAVIGATION_TAG}")
    if navigation is None or len(navigation) == 0:
        logger.debug("Navigation reply without entries")
        return None

    address = navigation[0].get(ID_ATTRIBUTE)
    if not address:
        logger.debug("First navigation entry has no %s attribute", ID_ATTRIBUTE)
        return None
    return address


def parse_content(text: str, registry: FieldRegistry, locale: LocaleLookup) -> ItemTree:
    """
    Build an item tree from a content reply.

    Args:
        text: Complete content message body.
        registry: Field registry used to resolve labels.
        locale: Translation table for value decoding.

    Returns:
        New ItemTree with every resolvable item, in document order.

    Raises:
        MalformedMessageError: If the body is not well-formed.
    """
    root = _parse_document(text, MessageKind.CONTENT)
    pending = _collect_items(root, registry, locale)
    tree = ItemTree.from_pending(pending)
    logger.debug("Parsed content into %r", tree)
    return tree


def _collect_items(
    parent: ET.Element,
    registry: FieldRegistry,
    locale: LocaleLookup,
) -> list[PendingItem]:
    result: list[PendingItem] = []

    for element in parent:
        if not _is_item(element):
            continue

        node_id = element.get(ID_ATTRIBUTE)
        if not node_id:
            logger.debug("Skipping %s without %s", ITEM_TAG, ID_ATTRIBUTE)
            continue

        label = _label_of(element)
        value_element = element.find(VALUE_TAG)

        if value_element is not None:
            item = _leaf(node_id, label, "".join(value_element.itertext()), registry, locale)
        else:
            item = _branch(node_id, label, element, registry, locale)

        if item is not None:
            result.append(item)

    return result


def _leaf(
    node_id: str,
    label: str,
    raw: str,
    registry: FieldRegistry,
    locale: LocaleLookup,
) -> PendingItem | None:
    definition = registry.lookup(label, raw)
    if definition is None:
        logger.debug("No field for label %r (%s)", label, node_id)
        return None
    if definition.unit is None:
        logger.debug("Label %r names a category but carries a value (%s)", label, node_id)
        return None

    try:
        value = convert(definition.unit, raw, locale)
    except ConversionError as e:
        logger.debug("Dropping %s (%s): %s", definition.identifier, node_id, e)
        return None

    return PendingItem(node_id=node_id, name=label, definition=definition, raw=raw, value=value)


def _branch(
    node_id: str,
    label: str,
    element: ET.Element,
    registry: FieldRegistry,
    locale: LocaleLookup,
) -> PendingItem | None:
    definition = registry.lookup(label)
    if definition is None:
        logger.debug("No category for label %r (%s), skipping subtree", label, node_id)
        return None
    if not definition.is_category:
        logger.debug("Label %r names a field but carries no value (%s)", label, node_id)
        return None

    children = _collect_items(element, registry, locale)
    if not children:
        logger.debug("Dropping empty category %s (%s)", definition.identifier, node_id)
        return None

    return PendingItem(node_id=node_id, name=label, definition=definition, children=children)


def parse_values(text: str) -> dict[str, str]:
    """
    Extract raw values from a refresh reply.

    Every leaf item contributes its id and raw value text; categories are
    descended into but never recorded.

    Args:
        text: Complete values message body.

    Returns:
        Mapping of node id to raw value text.

    Raises:
        MalformedMessageError: If the body is not well-formed.
    """
    root = _parse_document(text, MessageKind.VALUES)
    values: dict[str, str] = {}
    _collect_values(root, values)
    logger.debug("Parsed %d values", len(values))
    return values


def _collect_values(parent: ET.Element, values: dict[str, str]) -> None:
    for element in parent:
        if not _is_item(element):
            continue

        value_element = element.find(VALUE_TAG)
        if value_element is None:
            _collect_values(element, values)
            continue

        node_id = element.get(ID_ATTRIBUTE)
        if node_id:
            values[node_id] = "".join(value_element.itertext())
