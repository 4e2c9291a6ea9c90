"""
Unit kinds and raw value conversion.

The controller reports every value as display text: numbers carry their unit
marker (``"21.5°C"``, ``"45%"``, ``"1.4 bar"``), durations are clock strings,
switches and operating modes are localized words. Each field is assigned a
UnitKind that governs how its raw text is decoded.

Numeric kinds decode to int or float after the unit marker is stripped.
Textual kinds decode to str. The set of kinds is closed: the conversion
dispatch below is a single exhaustive match, and adding a kind means
touching both this module and the field registry.

Example:
    >>> convert(UnitKind.DEGREE_CELSIUS, "21.5°C", {})
    21.5
    >>> convert(UnitKind.PERCENT, "45%", {})
    45
    >>> convert(UnitKind.HOUR_MINUTE_SECONDS, "01:02:03", {})
    3723
"""

from __future__ import annotations

import re
from datetime import time
from enum import Enum
from typing import TYPE_CHECKING, Final

from luxconnect.exceptions import UnparseableValueError
from luxconnect.translations import binary_literals, mode_names

if TYPE_CHECKING:
    from luxconnect.translations import LocaleLookup

Value = int | float | str
"""A decoded field value."""

LITRES_PER_HOUR_ZERO: Final[str] = "---"
"""Placeholder the device shows for a stopped flow."""

OPERATING_MODE_DEFAULT: Final[int] = 0
"""Mode index used when the mode text matches no known name."""

_MARKUP_TAG = re.compile(r"<.*?>")


class UnitKind(Enum):
    """
    Value encodings used by the controller.

    Each member carries whether it decodes to a number and the marker
    substring that appears in (and is stripped from) raw values. The marker
    is also what the snapshot reports as the field's unit.
    """

    OPERATING_MODE = ("operating_mode", True, "mode")
    TEXT = ("text", False, "text")
    HTML = ("html", False, "html")
    INTEGER = ("integer", True, "integer")
    PERCENT = ("percent", True, "%")
    DEGREE_CELSIUS = ("degree_celsius", True, "°C")
    HERTZ = ("hertz", True, "Hz")
    KELVIN = ("kelvin", True, "K")
    HOUR_MINUTE = ("hour_minute", True, "s")
    HOUR_MINUTE_SECONDS = ("hour_minute_seconds", True, "s")
    HOURS = ("hours", True, "h")
    BAR = ("bar", True, "bar")
    BOOLEAN = ("boolean", True, "boolean")
    LITRES_PER_HOUR = ("litres_per_hour", True, "l/h")
    KILO_WATTS = ("kilo_watts", True, "kW")
    KILO_WATT_HOURS = ("kilo_watt_hours", True, "kWh")

    def __init__(self, key: str, numeric: bool, marker: str) -> None:
        self.key = key
        self.numeric = numeric
        self.marker = marker

    @property
    def is_numeric(self) -> bool:
        """Check if values of this kind decode to numbers."""
        return self.numeric

    def strip_marker(self, raw: str) -> str:
        """Remove the unit marker and surrounding whitespace from a raw value."""
        return raw.replace(self.marker, "").strip()


def convert(unit: UnitKind, raw: str, locale: LocaleLookup) -> Value:
    """
    Decode a raw device string according to its unit kind.

    Args:
        unit: Unit kind assigned to the field.
        raw: Raw text as reported by the device.
        locale: Translation table for boolean literals and mode names.

    Returns:
        int or float for numeric kinds, str for textual kinds.

    Raises:
        UnparseableValueError: If the text does not parse as the unit kind.
        MissingTranslationError: If a locale-dependent literal is missing.
    """
    try:
        match unit:
            case UnitKind.TEXT:
                return raw
            case UnitKind.HTML:
                return _MARKUP_TAG.sub("", raw).strip()
            case UnitKind.OPERATING_MODE:
                return _convert_operating_mode(raw, locale)
            case UnitKind.BOOLEAN:
                return _convert_boolean(raw, locale)
            case UnitKind.INTEGER | UnitKind.PERCENT | UnitKind.HERTZ | UnitKind.HOURS:
                return int(unit.strip_marker(raw))
            case (
                UnitKind.DEGREE_CELSIUS
                | UnitKind.KELVIN
                | UnitKind.BAR
                | UnitKind.KILO_WATTS
                | UnitKind.KILO_WATT_HOURS
            ):
                return float(unit.strip_marker(raw))
            case UnitKind.LITRES_PER_HOUR:
                return _convert_litres_per_hour(raw)
            case UnitKind.HOUR_MINUTE:
                return _convert_hour_minute(raw)
            case UnitKind.HOUR_MINUTE_SECONDS:
                return _convert_hour_minute_seconds(raw)
    except ValueError as e:
        raise UnparseableValueError(raw, unit.name) from e

    # Unreachable while the match above covers every member
    raise ValueError(f"Unsupported unit kind: {unit!r}")


def _convert_operating_mode(raw: str, locale: LocaleLookup) -> int:
    """Map a localized mode name to its index in the locale's mode list."""
    names = mode_names(locale)
    try:
        return names.index(raw.strip())
    except ValueError:
        return OPERATING_MODE_DEFAULT


def _convert_boolean(raw: str, locale: LocaleLookup) -> int:
    """1 for the localized 'on' literal, 0 for anything else."""
    _, on = binary_literals(locale)
    return 1 if raw.strip() == on else 0


def _convert_litres_per_hour(raw: str) -> int:
    value = UnitKind.LITRES_PER_HOUR.strip_marker(raw)
    if value == LITRES_PER_HOUR_ZERO:
        return 0
    return int(value)


def _convert_hour_minute(raw: str) -> int:
    """Wall-clock time of day to seconds elapsed since midnight."""
    parsed = time.fromisoformat(raw.strip())
    return parsed.hour * 3600 + parsed.minute * 60 + parsed.second


def _convert_hour_minute_seconds(raw: str) -> int:
    """Duration ``h:m:s`` to total seconds; hours are unbounded."""
    parts = raw.strip().split(":")
    if len(parts) != 3:
        raise ValueError(f"Expected h:m:s, got {raw!r}")
    hours, minutes, seconds = (int(part) for part in parts)
    return hours * 3600 + minutes * 60 + seconds
