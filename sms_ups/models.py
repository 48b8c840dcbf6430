"""
models.py

Defines the data models returned to callers: the decoded status snapshot and the
device identification reply. Both are immutable once built.
"""

from dataclasses import dataclass, asdict, field
from typing import Dict, Any, List

from sms_ups.param_types import ANALOG_FIELDS, FLAG_FIELDS


@dataclass(frozen=True)
class StatusSnapshot:
    """
    Decoded reply to the status query.
    """
    last_input_voltage: float  # Vac
    input_voltage: float       # Vac
    output_voltage: float      # Vac
    output_power: float        # % of rated load
    output_frequency: float    # Hz
    battery_level: float       # %
    temperature: float         # Celsius

    beep_on: bool
    shutdown_active: bool
    test_active: bool
    ups_ok: bool
    boost_on: bool
    on_ac_power: bool
    low_battery: bool
    on_battery: bool

    @classmethod
    def from_values(cls, values: List[float], flags: List[bool]) -> "StatusSnapshot":
        """
        Builds a snapshot from the ordered analog values and flags.

        Args:
            values: Seven analog readings in status frame order.
            flags: Eight flags, least significant bit first.

        Raises:
            ValueError: If either list has the wrong length.
        """
        if len(values) != len(ANALOG_FIELDS):
            raise ValueError(f"Expected {len(ANALOG_FIELDS)} analog values, got {len(values)}")
        if len(flags) != len(FLAG_FIELDS):
            raise ValueError(f"Expected {len(FLAG_FIELDS)} flags, got {len(flags)}")
        kwargs: Dict[str, Any] = {}
        for definition, value in zip(ANALOG_FIELDS, values):
            kwargs[definition.name] = value
        for definition, flag in zip(FLAG_FIELDS, flags):
            kwargs[definition.name] = flag
        return cls(**kwargs)

    def analog_values(self) -> List[float]:
        return [getattr(self, definition.name) for definition in ANALOG_FIELDS]

    def flags(self) -> List[bool]:
        return [getattr(self, definition.name) for definition in FLAG_FIELDS]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DeviceInfo:
    """
    Decoded reply to the device information query.
    """
    model: str                              # e.g. "SENOIDAL"
    firmware: str                           # e.g. "7.0b"
    raw: bytes = field(default=b"", repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"model": self.model, "firmware": self.firmware}
