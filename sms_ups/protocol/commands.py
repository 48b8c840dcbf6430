"""
commands.py

Defines the fixed command set understood by SMS UPS units.
Every command is a constant 7-byte frame:

    Byte0   opcode (ASCII letter)
    Byte1-4 parameters, 0xFF when unused
    Byte5   checksum, makes the sum of bytes 0-5 a multiple of 256
    Byte6   terminator 0x0D
"""

from enum import Enum
from typing import Dict, Union

from sms_ups.config import QUERY_SIZE, TERMINATOR


class UPSCommand(Enum):
    """
    Command kinds, valued by their opcode byte.
    """
    ABORT_TEST = 0x44     # D - interrupt the battery test, no reply
    UNKNOWN_F = 0x46      # F - replies ';' followed by spaces
    UNKNOWN_G = 0x47      # G - sent by the vendor software at startup, no visible effect
    DEVICE_INFO = 0x49    # I - replies ':' + model name and firmware version
    SWITCH_BUZZER = 0x4D  # M - toggle the buzzer, no reply
    QUERY_STATUS = 0x51   # Q - replies '=' + status frame
    START_TEST = 0x54     # T - 10 second battery test, no reply

    @property
    def opcode(self) -> str:
        return chr(self.value)


COMMAND_FRAMES: Dict[UPSCommand, bytes] = {
    UPSCommand.ABORT_TEST: b"\x44\xff\xff\xff\xff\xc0\x0d",
    UPSCommand.UNKNOWN_F: b"\x46\xff\xff\xff\xff\xbe\x0d",
    UPSCommand.UNKNOWN_G: b"\x47\x01\xff\xff\xff\xbb\x0d",
    UPSCommand.DEVICE_INFO: b"\x49\xff\xff\xff\xff\xbb\x0d",
    UPSCommand.SWITCH_BUZZER: b"\x4d\xff\xff\xff\xff\xb7\x0d",
    UPSCommand.QUERY_STATUS: b"\x51\xff\xff\xff\xff\xb3\x0d",
    UPSCommand.START_TEST: b"\x54\x00\x10\x00\x00\x9c\x0d",
}


def build_command(kind: Union[UPSCommand, str]) -> bytes:
    """
    Returns the command frame for a command kind.

    Args:
        kind: A UPSCommand member or its name (case-insensitive, e.g. "query_status").

    Returns:
        The 7-byte frame ready for transmission.

    Raises:
        ValueError: If the name does not match a known command.
    """
    if isinstance(kind, str):
        try:
            kind = UPSCommand[kind.upper()]
        except KeyError:
            raise ValueError(
                f"Unknown command '{kind}'. Valid: {[c.name.lower() for c in UPSCommand]}"
            ) from None
    return COMMAND_FRAMES[kind]


def frame_checksum(body: bytes) -> int:
    """
    Calculates the checksum byte for the first five bytes of a command frame.
    """
    return (-sum(body)) & 0xFF


def is_well_formed(frame: bytes) -> bool:
    """
    Checks the length, checksum and terminator of a command frame.
    """
    return (
        len(frame) == QUERY_SIZE
        and frame[6] == TERMINATOR
        and frame_checksum(frame[:5]) == frame[5]
    )
