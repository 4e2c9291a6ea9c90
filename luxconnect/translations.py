"""
Locale lookup for localized device labels and literals.

The controller reports field labels, boolean states and operating modes as
localized text in the language configured on the device. The translation
table itself is supplied by the caller as any ``Mapping[str, str]``; this
module names the keys the library needs and resolves the locale-dependent
literals used while decoding values.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final

from luxconnect.exceptions import MissingTranslationError

LocaleLookup = Mapping[str, str]
"""Opaque key to localized string lookup."""

BINARY_OFF_KEY: Final[str] = "data.binary.0"
"""Key of the localized 'off' literal."""

BINARY_ON_KEY: Final[str] = "data.binary.1"
"""Key of the localized 'on' literal."""

MODE_LIST_KEY: Final[str] = "data.mode.list"
"""Key of the ';'-separated operating mode names, in index order."""

MODE_LIST_SEPARATOR: Final[str] = ";"

TRANSLATION_KEYS: Final[tuple[str, ...]] = (
    "temperature",
    "temperature.flow",
    "temperature.return_flow",
    "temperature.return_flow_target",
    "temperature.hot_gas",
    "temperature.outdoor",
    "temperature.outdoor_avg",
    "temperature.domestic_hot_water",
    "temperature.domestic_hot_water_target",
    "temperature.heat_source_inlet",
    "temperature.heat_source_out",
    "temperature.flow_max",
    "temperature.suction_compressor",
    "temperature.compressor_heating",
    "temperature.overheating",
    "input",
    "input.defrost_brine_flow",
    "input.supplier_off_time",
    "input.high_pressure_pressostat",
    "input.motor_protection",
    "input.high_pressure_sensor",
    "input.low_pressure_sensor",
    "input.pump_flow",
    "output",
    "output.domestic_hot_water_pump",
    "output.floor_heating_pump",
    "output.heating_pump",
    "output.ventilator_well_brine_pump",
    "output.compressor",
    "output.circulation_pump",
    "output.additional_circulation_pump",
    "output.additional_heating_generator_1",
    "output.additional_heating_generator_2",
    "output.compressor_heating",
    "output.compressor_speed_target",
    "output.compressor_speed",
    "output.ventilator_well_brine_pump_power",
    "output.heating_pump_power",
    "timing",
    "timing.heat_pump_up",
    "timing.additional_heating_1_up",
    "timing.additional_heating_2_up",
    "timing.net_input_delay",
    "timing.off_time_switching_cycle",
    "timing.compressor_down",
    "timing.heating_control_more",
    "timing.heating_control_less",
    "timing.thermal_disinfection_up",
    "timing.domestic_hot_water_blockade",
    "timing.release_additional_heating",
    "timing.release_cooling",
    "operating_time",
    "operating_time.compressor_operating_hours",
    "operating_time.compressor_impulses",
    "operating_time.compressor_avg_runtime",
    "operating_time.additional_heating_1_operating_hours",
    "operating_time.additional_heating_2_operating_hours",
    "operating_time.heat_pump_operating_hours",
    "operating_time.heating_operating_hours",
    "operating_time.dhw_operating_hours",
    "status",
    "status.heat_pump_type",
    "status.software_version",
    "status.processor_version",
    "status.io_version",
    "status.interface_version",
    "status.inverter_version",
    "status.bivalence_level",
    "status.mode",
    "status.heating_capacity",
    "monitor",
    "monitor.heat_quantity",
    "monitor.heat_quantity.heating",
    "monitor.heat_quantity.domestic_hot_water",
    "monitor.heat_quantity.total",
    "monitor.energy_input",
    "monitor.energy_input.heating",
    "monitor.energy_input.domestic_hot_water",
    "monitor.energy_input.total",
    BINARY_OFF_KEY,
    BINARY_ON_KEY,
    MODE_LIST_KEY,
)
"""Every key the default field registry and value decoding read."""


def translate(locale: LocaleLookup, key: str) -> str:
    """
    Look up a localized string.

    Args:
        locale: Translation table.
        key: Translation key.

    Returns:
        The localized string.

    Raises:
        MissingTranslationError: If the key is absent.
    """
    try:
        return locale[key]
    except KeyError:
        raise MissingTranslationError(key) from None


def binary_literals(locale: LocaleLookup) -> tuple[str, str]:
    """Get the localized (off, on) literals."""
    return translate(locale, BINARY_OFF_KEY), translate(locale, BINARY_ON_KEY)


def mode_names(locale: LocaleLookup) -> list[str]:
    """
    Get the localized operating mode names in index order.

    Entries are trimmed; the position of a name is the mode's numeric value.
    """
    names = translate(locale, MODE_LIST_KEY)
    return [name.strip() for name in names.split(MODE_LIST_SEPARATOR)]


def missing_keys(locale: LocaleLookup) -> list[str]:
    """List the required keys absent from a translation table."""
    return [key for key in TRANSLATION_KEYS if key not in locale]
