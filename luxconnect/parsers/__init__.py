"""
Parsers for heat pump messages and field labels.

This package turns device markup into structured data:

- FieldRegistry: resolves localized labels to field definitions
- parse_navigation: data-set address from the login reply
- parse_content: full item tree from the data-set reply
- parse_values: flat value updates from the refresh reply
"""

from luxconnect.parsers.field_registry import (
    FieldDefinition,
    FieldRegistry,
    create_default_registry,
)
from luxconnect.parsers.message_parser import (
    parse_content,
    parse_navigation,
    parse_values,
)

__all__ = [
    # Registry
    "FieldDefinition",
    "FieldRegistry",
    "create_default_registry",
    # Messages
    "parse_content",
    "parse_navigation",
    "parse_values",
]
