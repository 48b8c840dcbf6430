"""
response_handler.py

Defines the ResponseHandler class for turning decoded UPS replies into text for the user.
"""

import json

from sms_ups.models import StatusSnapshot, DeviceInfo
from sms_ups.param_types import ANALOG_FIELDS, FLAG_FIELDS


class ResponseHandler:
    """
    Formats decoded replies for printing.
    """

    # Last input voltage is not meaningful to users and is left out of the text output.
    HIDDEN_FIELDS = ("last_input_voltage",)

    def format_status(self, snapshot: StatusSnapshot) -> str:
        """
        Renders a snapshot as right-aligned "label:value" lines.

        Args:
            snapshot: The decoded status.

        Returns:
            One line per analog reading (two decimals) followed by one line per flag (0/1).
        """
        lines = []
        for definition in ANALOG_FIELDS:
            if definition.name in self.HIDDEN_FIELDS:
                continue
            lines.append("%20s:%3.2f" % (definition.description, getattr(snapshot, definition.name)))
        for definition in FLAG_FIELDS:
            lines.append("%20s:%d" % (definition.description, getattr(snapshot, definition.name)))
        return "\n".join(lines)

    def format_status_json(self, snapshot: StatusSnapshot) -> str:
        return json.dumps(snapshot.to_dict(), indent=2)

    def format_device_info(self, info: DeviceInfo) -> str:
        return "%20s:%s\n%20s:%s" % ("Model", info.model, "Firmware", info.firmware)

    def format_device_info_json(self, info: DeviceInfo) -> str:
        return json.dumps(info.to_dict(), indent=2)

    @staticmethod
    def format_frame(data: bytes) -> str:
        """
        Renders raw frame bytes as space-separated hex for debug logs.
        """
        if not data:
            return "No response"
        return ' '.join(f'{byte:02x}' for byte in data)

