"""Shared fixtures: German locale table, default registry and device messages."""

import pytest

from luxconnect.config import SessionConfig
from luxconnect.parsers.field_registry import create_default_registry

GERMAN_LOCALE = {
    "temperature": "Temperaturen",
    "temperature.flow": "Vorlauf",
    "temperature.return_flow": "Rücklauf",
    "temperature.return_flow_target": "Rückl.-Soll",
    "temperature.hot_gas": "Heissgas",
    "temperature.outdoor": "Außentemperatur",
    "temperature.outdoor_avg": "Mitteltemperatur",
    "temperature.domestic_hot_water": "Warmwasser-Ist",
    "temperature.domestic_hot_water_target": "Warmwasser-Soll",
    "temperature.heat_source_inlet": "Wärmequelle-Ein",
    "temperature.heat_source_out": "Wärmequelle-Aus",
    "temperature.flow_max": "Vorlauf max.",
    "temperature.suction_compressor": "Ansaug VD",
    "temperature.compressor_heating": "VD-Heizung",
    "temperature.overheating": "Überhitzung",
    "input": "Eingänge",
    "input.defrost_brine_flow": "ASD",
    "input.supplier_off_time": "EVU",
    "input.high_pressure_pressostat": "HD",
    "input.motor_protection": "MOT",
    "input.high_pressure_sensor": "HD",
    "input.low_pressure_sensor": "ND",
    "input.pump_flow": "Durchfluss",
    "output": "Ausgänge",
    "output.domestic_hot_water_pump": "BUP",
    "output.floor_heating_pump": "FUP 1",
    "output.heating_pump": "HUP",
    "output.ventilator_well_brine_pump": "Ventil.-BOSUP",
    "output.compressor": "Verdichter",
    "output.circulation_pump": "ZIP",
    "output.additional_circulation_pump": "ZUP",
    "output.additional_heating_generator_1": "ZWE 1",
    "output.additional_heating_generator_2": "ZWE 2 - SST",
    "output.compressor_heating": "VD-Heizung",
    "output.compressor_speed_target": "Freq. Sollwert",
    "output.compressor_speed": "Freq. aktuell",
    "output.ventilator_well_brine_pump_power": "Ventil.-BOSUP",
    "output.heating_pump_power": "HUP",
    "timing": "Ablaufzeiten",
    "timing.heat_pump_up": "WP Seit",
    "timing.additional_heating_1_up": "ZWE1 seit",
    "timing.additional_heating_2_up": "ZWE2 seit",
    "timing.net_input_delay": "Netzeinschaltv.",
    "timing.off_time_switching_cycle": "SSP-Zeit aus",
    "timing.compressor_down": "VD-Stand",
    "timing.heating_control_more": "HRM-Zeit",
    "timing.heating_control_less": "HRW-Zeit",
    "timing.thermal_disinfection_up": "TDI seit",
    "timing.domestic_hot_water_blockade": "Sperre WW",
    "timing.release_additional_heating": "Freig. ZWE",
    "timing.release_cooling": "Freigabe Kühlung",
    "operating_time": "Betriebsstunden",
    "operating_time.compressor_operating_hours": "Betriebstund. VD1",
    "operating_time.compressor_impulses": "Impulse Verdichter 1",
    "operating_time.compressor_avg_runtime": "Laufzeit Ø VD1",
    "operating_time.additional_heating_1_operating_hours": "Betriebstunden ZWE1",
    "operating_time.additional_heating_2_operating_hours": "Betriebstunden ZWE2",
    "operating_time.heat_pump_operating_hours": "Betriebstunden WP",
    "operating_time.heating_operating_hours": "Betriebstunden Heiz.",
    "operating_time.dhw_operating_hours": "Betriebstunden WW",
    "status": "Anlagenstatus",
    "status.heat_pump_type": "Wärmepumpen Typ",
    "status.software_version": "Softwarestand",
    "status.processor_version": "Revision",
    "status.io_version": "HZ/IO",
    "status.interface_version": "ASB",
    "status.inverter_version": "Inverter SW Version",
    "status.bivalence_level": "Bivalenz Stufe",
    "status.mode": "Betriebszustand",
    "status.heating_capacity": "Heizleistung Ist",
    "monitor": "Energiemonitor",
    "monitor.heat_quantity": "Wärmemenge",
    "monitor.heat_quantity.heating": "Heizung",
    "monitor.heat_quantity.domestic_hot_water": "Brauchwasser",
    "monitor.heat_quantity.total": "Gesamt",
    "monitor.energy_input": "Eingesetzte Energie",
    "monitor.energy_input.heating": "Heizung",
    "monitor.energy_input.domestic_hot_water": "Brauchwasser",
    "monitor.energy_input.total": "Gesamt",
    "data.binary.0": "Aus",
    "data.binary.1": "Ein",
    "data.mode.list": (
        "Heizbetrieb;Warmwasser;Schwimmbad / Photovoltaik;EVU-Sperre;"
        "Abtauen;Keine Anforderung;Heizung ext. En.;Kühlbetrieb"
    ),
}


NAVIGATION_XML = """\
<Navigation id="0x4e8e8">
    <item id="0x4e9b0"><name>Informationen</name></item>
    <item id="0x4ea28"><name>Einstellungen</name></item>
</Navigation>"""

CONTENT_XML = """\
<Content>
    <item id="0x1"><name>Temperaturen</name>
        <item id="0x11"><name>Vorlauf</name><value>31.2°C</value></item>
        <item id="0x12"><name>Rücklauf</name><value>27.9°C</value></item>
        <item id="0x13"><name>VD-Heizung</name><value>35.0°C</value></item>
    </item>
    <item id="0x2"><name>Eingänge</name>
        <item id="0x21"><name>HD</name><value>Ein</value></item>
        <item id="0x22"><name>HD</name><value>18.52 bar</value></item>
        <item id="0x23"><name>Durchfluss</name><value>---</value></item>
    </item>
    <item id="0x3"><name>Ausgänge</name>
        <item id="0x31"><name>HUP</name><value>Ein</value></item>
        <item id="0x32"><name>HUP</name><value>45%</value></item>
        <item id="0x33"><name>VD-Heizung</name><value>Aus</value></item>
    </item>
    <item id="0x4"><name>Ablaufzeiten</name>
        <item id="0x41"><name>WP Seit</name><value>01:02:03</value></item>
    </item>
    <item id="0x5"><name>Anlagenstatus</name>
        <item id="0x51"><name>Betriebszustand</name><value>Warmwasser</value></item>
        <item id="0x52"><name>HZ/IO</name><value><![CDATA[<b>3.88</b>]]></value></item>
    </item>
    <item id="0x6"><name>Energiemonitor</name>
        <item id="0x61"><name>Wärmemenge</name>
            <item id="0x611"><name>Heizung</name><value>1234.5 kWh</value></item>
        </item>
    </item>
</Content>"""

VALUES_XML = """\
<values>
    <item id="0x1">
        <item id="0x11"><value>32.0°C</value></item>
        <item id="0x12"><value>28.1°C</value></item>
    </item>
    <item id="0x31"><value>Aus</value></item>
    <item id="0x99"><value>17</value></item>
</values>"""


@pytest.fixture
def locale():
    """German translation table."""
    return dict(GERMAN_LOCALE)


@pytest.fixture
def registry(locale):
    """Default field registry built from the German locale."""
    return create_default_registry(locale)


@pytest.fixture
def config():
    """Session settings with a short cooldown."""
    return SessionConfig(host="192.168.1.20", error_cooldown_cycles=3, send_timeout=1.0)


@pytest.fixture
def navigation_xml():
    return NAVIGATION_XML


@pytest.fixture
def content_xml():
    return CONTENT_XML


@pytest.fixture
def values_xml():
    return VALUES_XML
