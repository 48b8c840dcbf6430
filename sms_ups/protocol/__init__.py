"""
__init__.py

Protocol layer: command frames, status frame decoding and range validation.
"""

from sms_ups.protocol.commands import UPSCommand, build_command, COMMAND_FRAMES
from sms_ups.protocol.sms_protocol import (
    SMSProtocol,
    decode,
    decode_analog_fields,
    decode_flags,
    decode_device_info,
    has_marker,
)
from sms_ups.protocol.validator import validate

__all__ = [
    'UPSCommand',
    'build_command',
    'COMMAND_FRAMES',
    'SMSProtocol',
    'decode',
    'decode_analog_fields',
    'decode_flags',
    'decode_device_info',
    'has_marker',
    'validate',
]
