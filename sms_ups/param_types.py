"""
param_types.py

Defines the field definitions for values reported by the UPS status frame.
Analog readings carry their plausible range and units; flags carry their bit position.
"""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class AnalogField:
    """
    Data class describing one analog reading in the status frame.

    Attributes:
        name: Attribute name on StatusSnapshot.
        description: Human-readable label used when printing.
        min_value: Smallest plausible value (inclusive).
        max_value: Largest plausible value (inclusive).
        units: Unit of measure (e.g., "Vac", "%").
    """
    name: str
    description: str
    min_value: Union[int, float]
    max_value: Union[int, float]
    units: Optional[str] = None

    def in_range(self, value: float) -> bool:
        return self.min_value <= value <= self.max_value


@dataclass(frozen=True)
class FlagField:
    """
    Data class describing one state bit of the status byte.

    Attributes:
        bit: Bit position, 0 being the least significant bit.
        name: Attribute name on StatusSnapshot.
        description: Human-readable label used when printing.
    """
    bit: int
    name: str
    description: str


# Order matches the byte pairs of the status frame.
ANALOG_FIELDS = (
    AnalogField("last_input_voltage", "Last Input(Vac)", 0, 270, "Vac"),
    AnalogField("input_voltage", "Input(Vac)", 0, 270, "Vac"),
    AnalogField("output_voltage", "Output(Vac)", 0, 270, "Vac"),
    AnalogField("output_power", "Output Power(%)", 0, 100, "%"),
    AnalogField("output_frequency", "Output(Hz)", 40, 70, "Hz"),
    AnalogField("battery_level", "Battery level(%)", 0, 100, "%"),
    AnalogField("temperature", "Temperature(C)", -20, 70, "C"),
)

FLAG_FIELDS = (
    FlagField(0, "beep_on", "Beep on"),
    FlagField(1, "shutdown_active", "Active shutdown"),
    FlagField(2, "test_active", "Active test"),
    FlagField(3, "ups_ok", "UPS OK"),
    FlagField(4, "boost_on", "Boost ON"),
    FlagField(5, "on_ac_power", "On AC Power"),
    FlagField(6, "low_battery", "Low battery"),
    FlagField(7, "on_battery", "On battery power"),
)
