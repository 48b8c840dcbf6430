"""
sms_protocol.py

Implements decoding of the 18-byte frames sent by SMS UPS units.

Status frame (reply to 'Q'), sample capture from a SENOIDAL unit:

    Byte0      0x3D '=' marker
    Byte1-2    0x08 0x34  last input voltage   (0x0834 -> 210.0 Vac)
    Byte3-4    0x08 0x34  input voltage
    Byte5-6    0x04 0x38  output voltage       (108.0 Vac)
    Byte7-8    0x01 0x22  output power         (29.0 %)
    Byte9-10   0x02 0x58  output frequency     (60.0 Hz)
    Byte11-12  0x03 0xE8  battery level        (100.0 %)
    Byte13-14  0x01 0x7C  temperature          (38.0 C)
    Byte15     0x29       state bits (beep on, shutdown, test, ups ok,
                          boost, on AC power, low battery, on battery)
    Byte16     0x01       unknown
    Byte17     0x0D       terminator

Device information frame (reply to 'I'):

    Byte0      0x3A ':' marker
    Byte1-16   ASCII model name and firmware version, e.g. "SENOIDAL    7.0b"
    Byte17     0x0D terminator

The checksum-looking bytes are not verified on receipt.
"""

import logging
from typing import List, Optional

from sms_ups.config import RESULT_SIZE, STATUS_MARKER, INFO_MARKER
from sms_ups.models import StatusSnapshot, DeviceInfo
from sms_ups.param_types import ANALOG_FIELDS, FLAG_FIELDS
from sms_ups.protocol.commands import UPSCommand, build_command
from sms_ups.protocol.validator import validate, out_of_range_fields

FLAGS_OFFSET = 15


def _check_length(raw: bytes) -> None:
    if len(raw) < RESULT_SIZE:
        raise ValueError(f"Frame must be {RESULT_SIZE} bytes, got {len(raw)}")


def _pair_value(high: int, low: int) -> float:
    # The firmware sends each reading as two bytes read back as one hex number in tenths.
    return int(f"{high & 0xFF:02x}{low & 0xFF:02x}", 16) / 10


def decode_analog_fields(raw: bytes) -> List[float]:
    """
    Decodes the seven analog readings of a status frame.

    Field i is built from bytes 2*i+1 and 2*i+2, skipping the marker at byte 0.

    Args:
        raw: The 18-byte status frame.

    Returns:
        Seven floats in frame order (see ANALOG_FIELDS).
    """
    _check_length(raw)
    return [_pair_value(raw[2 * i + 1], raw[2 * i + 2]) for i in range(len(ANALOG_FIELDS))]


def decode_flags(raw: bytes) -> List[bool]:
    """
    Decodes the eight state bits at byte 15, least significant bit first.
    """
    _check_length(raw)
    state = raw[FLAGS_OFFSET]
    return [bool(state & (1 << definition.bit)) for definition in FLAG_FIELDS]


def decode(raw: bytes) -> StatusSnapshot:
    """
    Decodes a full status frame into a StatusSnapshot.
    """
    return StatusSnapshot.from_values(decode_analog_fields(raw), decode_flags(raw))


def has_marker(raw: bytes, marker: int = STATUS_MARKER) -> bool:
    return len(raw) > 0 and raw[0] == marker


def decode_device_info(raw: bytes) -> DeviceInfo:
    """
    Decodes the reply to the device information query.

    The text between marker and terminator holds the model name followed by the
    firmware version; the last word is taken as the version.
    """
    _check_length(raw)
    text = raw[1:RESULT_SIZE - 1].decode("ascii", errors="replace")
    words = text.split()
    if not words:
        return DeviceInfo(model="", firmware="", raw=bytes(raw))
    firmware = words[-1] if len(words) > 1 else ""
    model = " ".join(words[:-1]) if len(words) > 1 else words[0]
    return DeviceInfo(model=model, firmware=firmware, raw=bytes(raw))


class SMSProtocol:
    """
    Protocol object used by the communicator: frame selection, reply checks and decoding.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def create_command(self, kind: UPSCommand) -> bytes:
        return build_command(kind)

    def check_status(self, raw: bytes) -> int:
        """
        Counts the problems found in a status frame.

        Each analog reading outside its plausible range counts once, and a missing
        '=' marker counts once more.

        Args:
            raw: The 18-byte status frame.

        Returns:
            The number of problems; 0 means the frame can be trusted.
        """
        values = decode_analog_fields(raw)
        errors = validate(values)
        if errors:
            self.logger.debug(f"Out of range: {', '.join(out_of_range_fields(values))}")
        if not has_marker(raw, STATUS_MARKER):
            self.logger.debug(f"Unexpected status marker 0x{raw[0]:02X}")
            errors += 1
        return errors

    def parse_status(self, raw: bytes) -> StatusSnapshot:
        return decode(raw)

    def check_device_info(self, raw: bytes) -> int:
        if has_marker(raw, INFO_MARKER):
            return 0
        self.logger.debug(f"Unexpected device info marker 0x{raw[0]:02X}")
        return 1

    def parse_device_info(self, raw: bytes) -> DeviceInfo:
        return decode_device_info(raw)
