"""
Field registry mapping localized labels to field definitions.

The controller identifies fields only by their localized display label, and
it reuses the same label for unrelated fields: "HUP" is both the heating
pump switch (a boolean) and its power (a percentage); "VD-Heizung" is both
a temperature and an output. The registry therefore maps one label to an
ordered list of candidate definitions and picks among them using the raw
value the device reported alongside the label.

Lookup rules:
    - One candidate: returned unconditionally.
    - Several candidates: the first whose disambiguation pattern fully
      matches the raw value; if none match, the first registered.
    - Unknown label: None. The caller drops that node, not the message.

Architecture:
    FieldRegistry
        └── label -> [FieldDefinition, ...]  (registration order)

The default registry is built once from the locale at startup and is not
modified afterwards.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from luxconnect.models.units import UnitKind
from luxconnect.translations import binary_literals, mode_names, translate

if TYPE_CHECKING:
    from collections.abc import Iterator

    from luxconnect.translations import LocaleLookup

# Module logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldDefinition:
    """
    Definition of one device field or category.

    Attributes:
        label: Localized label the device shows for the node.
        identifier: Stable identifier used in snapshots.
        unit: Unit kind of the value, or None for a category (branch) node.
        pattern: Optional regex matched against the whole raw value, used
            to choose between definitions sharing a label.
    """

    label: str
    identifier: str
    unit: UnitKind | None = None
    pattern: str | None = None
    _compiled: re.Pattern[str] | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if self.pattern is not None:
            object.__setattr__(self, "_compiled", re.compile(self.pattern))

    @property
    def is_category(self) -> bool:
        """Check if this definition describes a branch node."""
        return self.unit is None

    @property
    def marker(self) -> str | None:
        """Unit marker reported for the field, None for categories."""
        return self.unit.marker if self.unit is not None else None

    def matches(self, raw_value: str) -> bool:
        """
        Check the raw value against the disambiguation pattern.

        Definitions without a pattern never match.
        """
        if self._compiled is None:
            return False
        return self._compiled.fullmatch(raw_value) is not None


class FieldRegistry:
    """
    Registry of field definitions keyed by localized label.

    Example:
        >>> registry = FieldRegistry()
        >>> registry.register(FieldDefinition("HUP", "heating_pump", UnitKind.BOOLEAN, "Aus|Ein"))
        >>> registry.register(FieldDefinition("HUP", "heating_pump_power", UnitKind.PERCENT, ".*%"))
        >>> registry.lookup("HUP", "45%").identifier
        'heating_pump_power'
        >>> registry.lookup("HUP", "Ein").identifier
        'heating_pump'
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._fields: dict[str, list[FieldDefinition]] = {}

    def register(self, definition: FieldDefinition) -> None:
        """
        Register a field definition.

        Definitions sharing a label are kept in registration order; the
        first one is the fallback when no pattern matches.

        Args:
            definition: Definition to add.
        """
        self._fields.setdefault(definition.label, []).append(definition)

    def add_topic(self, label: str, identifier: str) -> None:
        """Register a category (branch) node."""
        self.register(FieldDefinition(label, identifier))

    def add(
        self,
        label: str,
        identifier: str,
        unit: UnitKind,
        pattern: str | None = None,
    ) -> None:
        """Register a value (leaf) field."""
        self.register(FieldDefinition(label, identifier, unit, pattern))

    def candidates(self, label: str) -> tuple[FieldDefinition, ...]:
        """
        Get all definitions registered for a label.

        Args:
            label: Localized label.

        Returns:
            Definitions in registration order; empty if the label is unknown.
        """
        return tuple(self._fields.get(label, ()))

    def lookup(self, label: str, hint: str = "") -> FieldDefinition | None:
        """
        Resolve the definition for a label.

        Args:
            label: Localized label reported by the device.
            hint: Raw value reported with the label, used to disambiguate.

        Returns:
            The resolved definition, or None if the label is unknown.
        """
        candidates = self._fields.get(label)
        if not candidates:
            return None

        if len(candidates) == 1:
            return candidates[0]

        for candidate in candidates:
            if candidate.matches(hint):
                return candidate

        # No pattern matched the value: the first registered definition wins
        return candidates[0]

    @property
    def labels(self) -> frozenset[str]:
        """Get all registered labels."""
        return frozenset(self._fields.keys())

    def __contains__(self, label: object) -> bool:
        return label in self._fields

    def __len__(self) -> int:
        return sum(len(definitions) for definitions in self._fields.values())

    def __iter__(self) -> Iterator[FieldDefinition]:
        for definitions in self._fields.values():
            yield from definitions

    def __repr__(self) -> str:
        return f"FieldRegistry(labels={len(self._fields)}, definitions={len(self)})"


def create_default_registry(locale: LocaleLookup) -> FieldRegistry:
    """
    Create a registry with every field of the heat pump's data set.

    Labels are resolved through the locale, so the registry matches the
    language configured on the controller.

    Args:
        locale: Translation table.

    Returns:
        Populated FieldRegistry.

    Raises:
        MissingTranslationError: If the locale lacks a required key.
    """
    registry = FieldRegistry()
    off, on = binary_literals(locale)
    # Mode names are only read when a value is decoded; check them at build time
    mode_names(locale)
    binary = f"{re.escape(off)}|{re.escape(on)}"
    celsius = ".*" + re.escape(UnitKind.DEGREE_CELSIUS.marker)
    bar = ".*" + re.escape(UnitKind.BAR.marker)
    percent = ".*" + re.escape(UnitKind.PERCENT.marker)

    def topic(key: str, identifier: str) -> None:
        registry.add_topic(translate(locale, key), identifier)

    def add(key: str, identifier: str, unit: UnitKind, pattern: str | None = None) -> None:
        registry.add(translate(locale, key), identifier, unit, pattern)

    # Temperature
    topic("temperature", "temperature")
    add("temperature.flow", "flow", UnitKind.DEGREE_CELSIUS)
    add("temperature.return_flow", "return_flow", UnitKind.DEGREE_CELSIUS)
    add("temperature.return_flow_target", "return_flow_target", UnitKind.DEGREE_CELSIUS)
    add("temperature.hot_gas", "hot_gas", UnitKind.DEGREE_CELSIUS)
    add("temperature.outdoor", "outdoor", UnitKind.DEGREE_CELSIUS)
    add("temperature.outdoor_avg", "outdoor_avg", UnitKind.DEGREE_CELSIUS)
    add("temperature.domestic_hot_water", "domestic_hot_water", UnitKind.DEGREE_CELSIUS)
    add("temperature.domestic_hot_water_target", "domestic_hot_water_target", UnitKind.DEGREE_CELSIUS)
    add("temperature.heat_source_inlet", "heat_source_inlet", UnitKind.DEGREE_CELSIUS)
    add("temperature.heat_source_out", "heat_source_out", UnitKind.DEGREE_CELSIUS)
    add("temperature.flow_max", "flow_max", UnitKind.DEGREE_CELSIUS)
    add("temperature.suction_compressor", "suction_compressor", UnitKind.DEGREE_CELSIUS)
    add("temperature.compressor_heating", "compressor_heating", UnitKind.DEGREE_CELSIUS, celsius)
    add("temperature.overheating", "overheating", UnitKind.KELVIN)

    # Input
    topic("input", "input")
    add("input.defrost_brine_flow", "defrost_brine_flow", UnitKind.BOOLEAN)
    add("input.supplier_off_time", "supplier_off_time", UnitKind.BOOLEAN)
    add("input.high_pressure_pressostat", "high_pressure_pressostat", UnitKind.BOOLEAN, binary)
    add("input.motor_protection", "motor_protection", UnitKind.BOOLEAN)
    add("input.high_pressure_sensor", "high_pressure_sensor", UnitKind.BAR, bar)
    add("input.low_pressure_sensor", "low_pressure_sensor", UnitKind.BAR)
    add("input.pump_flow", "pump_flow", UnitKind.LITRES_PER_HOUR)

    # Output
    topic("output", "output")
    add("output.domestic_hot_water_pump", "domestic_hot_water_pump", UnitKind.BOOLEAN)
    add("output.floor_heating_pump", "floor_heating_pump", UnitKind.BOOLEAN)
    add("output.heating_pump", "heating_pump", UnitKind.BOOLEAN, binary)
    add("output.ventilator_well_brine_pump", "ventilator_well_brine_pump", UnitKind.BOOLEAN, binary)
    add("output.compressor", "compressor", UnitKind.BOOLEAN)
    add("output.circulation_pump", "circulation_pump", UnitKind.BOOLEAN)
    add("output.additional_circulation_pump", "additional_circulation_pump", UnitKind.BOOLEAN)
    add("output.additional_heating_generator_1", "additional_heating_generator_1", UnitKind.BOOLEAN)
    add("output.additional_heating_generator_2", "additional_heating_generator_2", UnitKind.BOOLEAN)
    add("output.compressor_heating", "compressor_heating", UnitKind.BOOLEAN, binary)
    add("output.compressor_speed_target", "compressor_speed_target", UnitKind.HERTZ)
    add("output.compressor_speed", "compressor_speed", UnitKind.HERTZ)
    add("output.ventilator_well_brine_pump_power", "ventilator_well_brine_pump_power", UnitKind.PERCENT, percent)
    add("output.heating_pump_power", "heating_pump_power", UnitKind.PERCENT, percent)

    # Timing
    topic("timing", "timing")
    add("timing.heat_pump_up", "heat_pump_up", UnitKind.HOUR_MINUTE_SECONDS)
    add("timing.additional_heating_1_up", "additional_heating_1_up", UnitKind.HOUR_MINUTE_SECONDS)
    add("timing.additional_heating_2_up", "additional_heating_2_up", UnitKind.HOUR_MINUTE_SECONDS)
    add("timing.net_input_delay", "net_input_delay", UnitKind.HOUR_MINUTE_SECONDS)
    add("timing.off_time_switching_cycle", "off_time_switching_cycle", UnitKind.HOUR_MINUTE_SECONDS)
    add("timing.compressor_down", "compressor_down", UnitKind.HOUR_MINUTE_SECONDS)
    add("timing.heating_control_more", "heating_control_more", UnitKind.HOUR_MINUTE_SECONDS)
    add("timing.heating_control_less", "heating_control_less", UnitKind.HOUR_MINUTE_SECONDS)
    add("timing.thermal_disinfection_up", "thermal_disinfection_up", UnitKind.HOUR_MINUTE_SECONDS)
    add("timing.domestic_hot_water_blockade", "domestic_hot_water_blockade", UnitKind.HOUR_MINUTE_SECONDS)
    add("timing.release_additional_heating", "release_additional_heating", UnitKind.HOUR_MINUTE_SECONDS)
    add("timing.release_cooling", "release_cooling", UnitKind.HOUR_MINUTE_SECONDS)

    # Operating time
    topic("operating_time", "operating_time")
    add("operating_time.compressor_operating_hours", "compressor_operating_hours", UnitKind.HOURS)
    add("operating_time.compressor_impulses", "compressor_impulses", UnitKind.INTEGER)
    add("operating_time.compressor_avg_runtime", "compressor_avg_runtime", UnitKind.HOUR_MINUTE)
    add("operating_time.additional_heating_1_operating_hours", "additional_heating_1_operating_hours", UnitKind.HOURS)
    add("operating_time.additional_heating_2_operating_hours", "additional_heating_2_operating_hours", UnitKind.HOURS)
    add("operating_time.heat_pump_operating_hours", "heat_pump_operating_hours", UnitKind.HOURS)
    add("operating_time.heating_operating_hours", "heating_operating_hours", UnitKind.HOURS)
    add("operating_time.dhw_operating_hours", "dhw_operating_hours", UnitKind.HOURS)

    # Status
    topic("status", "status")
    add("status.heat_pump_type", "heat_pump_type", UnitKind.TEXT)
    add("status.software_version", "software_version", UnitKind.TEXT)
    add("status.processor_version", "processor_version", UnitKind.TEXT)
    add("status.io_version", "io_version", UnitKind.HTML)
    add("status.interface_version", "interface_version", UnitKind.HTML)
    add("status.inverter_version", "inverter_version", UnitKind.TEXT)
    add("status.bivalence_level", "bivalence_level", UnitKind.INTEGER)
    add("status.mode", "mode", UnitKind.OPERATING_MODE)
    add("status.heating_capacity", "heating_capacity", UnitKind.KILO_WATTS)

    # Energy monitor
    topic("monitor", "monitor")
    topic("monitor.heat_quantity", "heat_quantity")
    add("monitor.heat_quantity.heating", "heating", UnitKind.KILO_WATT_HOURS)
    add("monitor.heat_quantity.domestic_hot_water", "domestic_hot_water", UnitKind.KILO_WATT_HOURS)
    add("monitor.heat_quantity.total", "total", UnitKind.KILO_WATT_HOURS)
    topic("monitor.energy_input", "energy_input")
    add("monitor.energy_input.heating", "heating", UnitKind.KILO_WATT_HOURS)
    add("monitor.energy_input.domestic_hot_water", "domestic_hot_water", UnitKind.KILO_WATT_HOURS)
    add("monitor.energy_input.total", "total", UnitKind.KILO_WATT_HOURS)

    logger.debug("Built %r", registry)
    return registry
