"""
SMS UPS status tool

Queries an SMS brand UPS ("nobreak") over its serial port, checks the reply against
plausible ranges and decodes it into a StatusSnapshot.
"""

from sms_ups.exceptions import (
    UPSError,
    ConfigurationError,
    ChannelOpenError,
    TransportError,
    ValidationExhaustedError,
)
from sms_ups.models import StatusSnapshot, DeviceInfo
from sms_ups.protocol import UPSCommand, build_command
from sms_ups.communicator import SerialChannel, TransportSession, UPSCommunicator

__version__ = "0.1.0"
