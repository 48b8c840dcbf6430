"""
validator.py

Range checks for the analog readings of a status frame.

The serial link can hand back garbage or a frame assembled from two replies. The
frame carries no checksum we can verify, so plausible ranges are the only integrity
signal available.
"""

from typing import Sequence, List, Tuple

from sms_ups.param_types import ANALOG_FIELDS, AnalogField


def _paired(values: Sequence[float]) -> List[Tuple[AnalogField, float]]:
    if len(values) != len(ANALOG_FIELDS):
        raise ValueError(f"Expected {len(ANALOG_FIELDS)} analog values, got {len(values)}")
    return list(zip(ANALOG_FIELDS, values))


def validate(values: Sequence[float]) -> int:
    """
    Counts the readings outside their plausible range. Bounds are inclusive.

    Args:
        values: The seven analog readings, in status frame order.

    Returns:
        Number of offending readings; 0 means the frame can be trusted.
    """
    return sum(1 for definition, value in _paired(values) if not definition.in_range(value))


def out_of_range_fields(values: Sequence[float]) -> List[str]:
    """
    Lists the offending readings as "name=value" strings, for log messages.
    """
    return [
        f"{definition.name}={value}"
        for definition, value in _paired(values)
        if not definition.in_range(value)
    ]
