#!/usr/bin/env python3
"""
device_simulator.py

This module implements the DeviceSimulator class which emulates an SMS UPS on the far end
of the serial line, for testing without physical hardware. It keeps an internal state so
that control commands affect subsequent status replies.

Features:
  - Answers 'Q' with an 18-byte status frame built from the internal state, with optional
    relative noise on the analog readings.
  - Answers 'I' with the model name and firmware version, and 'F' with the filler frame
    observed on real units.
  - 'M' toggles the beeper bit, 'T' sets and 'D' clears the test bit. 'G' is accepted silently.
  - Replies are handed out in configurable chunk sizes to mimic a slow serial line.
  - The first N status replies can be replaced with garbage, and reads or writes can be
    made to fail, to exercise retry and error paths.

Interface:
  Implements connect(), disconnect(), write() and read_nonblocking(), matching the channel
  interface used by TransportSession.

Usage Example:
    simulator = DeviceSimulator(config={"garbage_replies": 1, "chunk_sizes": (4, 4, 10)})
    simulator.connect()
    ups = UPSCommunicator(simulator)
    print(ups.query_status())
"""

import itertools
import logging
import random
from typing import Dict, Any, Optional

import serial

from sms_ups.communicator.response_handler import ResponseHandler
from sms_ups.config import RESULT_SIZE, STATUS_MARKER, INFO_MARKER, TERMINATOR
from sms_ups.param_types import ANALOG_FIELDS, FLAG_FIELDS, AnalogField
from sms_ups.protocol.commands import UPSCommand, is_well_formed

DEFAULT_CONFIG: Dict[str, Any] = {
    "model": "SENOIDAL",
    "firmware": "7.0b",
    "noise_level": 0.01,        # relative noise applied to analog readings
    "chunk_sizes": (RESULT_SIZE,),
    "garbage_replies": 0,       # number of initial status replies replaced by garbage
    "fail_reads": False,
    "fail_writes": False,
    "seed": None,
}

DEFAULT_STATE: Dict[str, Any] = {
    "last_input_voltage": 210.0,
    "input_voltage": 210.0,
    "output_voltage": 108.0,
    "output_power": 29.0,
    "output_frequency": 60.0,
    "battery_level": 100.0,
    "temperature": 38.0,
    "beep_on": True,
    "shutdown_active": False,
    "test_active": False,
    "ups_ok": True,
    "boost_on": False,
    "on_ac_power": True,
    "low_battery": False,
    "on_battery": False,
}


class DeviceSimulator:
    """
    Simulates an SMS UPS behind a serial channel.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 state: Optional[Dict[str, Any]] = None,
                 logger: Optional[logging.Logger] = None):
        self.config = dict(DEFAULT_CONFIG)
        if config:
            self.config.update(config)
        self.state = dict(DEFAULT_STATE)
        if state:
            self.state.update(state)
        self.logger = logger or logging.getLogger(__name__)
        self.rng = random.Random(self.config["seed"])
        self.connected = False
        self.received = []  # every frame written, in order
        self._pending = bytearray()
        self._chunks = itertools.cycle(self.config["chunk_sizes"])
        self._garbage_left = self.config["garbage_replies"]

    def connect(self) -> bool:
        self.connected = True
        self.logger.info("Simulator connected")
        return True

    def disconnect(self) -> bool:
        self.connected = False
        self._pending.clear()
        self.logger.info("Simulator disconnected")
        return True

    def __enter__(self) -> "DeviceSimulator":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.disconnect()

    def write(self, data: bytes) -> int:
        """
        Accepts a command frame and queues the device's reply, if any.
        """
        if not self.connected:
            raise serial.SerialException("Simulator not connected")
        if self.config["fail_writes"]:
            raise serial.SerialException("Simulated write failure")

        frame = bytes(data)
        self.received.append(frame)
        if not is_well_formed(frame):
            self.logger.warning(f"Ignoring malformed frame: {ResponseHandler.format_frame(frame)}")
            return len(data)

        try:
            kind = UPSCommand(frame[0])
        except ValueError:
            self.logger.warning(f"Ignoring unknown opcode 0x{frame[0]:02X}")
            return len(data)

        if kind is UPSCommand.QUERY_STATUS:
            if self._garbage_left > 0:
                self._garbage_left -= 1
                self._pending.extend(self.garbage_frame())
            else:
                self._pending.extend(self.status_frame())
        elif kind is UPSCommand.DEVICE_INFO:
            self._pending.extend(self.info_frame())
        elif kind is UPSCommand.UNKNOWN_F:
            self._pending.extend(b";" + b" " * 15 + b"\xe5\x0d")
        elif kind is UPSCommand.SWITCH_BUZZER:
            self.state["beep_on"] = not self.state["beep_on"]
        elif kind is UPSCommand.START_TEST:
            self.state["test_active"] = True
        elif kind is UPSCommand.ABORT_TEST:
            self.state["test_active"] = False
        self.logger.debug(f"Handled {kind.name}")
        return len(data)

    def read_nonblocking(self, max_len: int) -> bytes:
        if not self.connected:
            raise serial.SerialException("Simulator not connected")
        if self.config["fail_reads"]:
            raise serial.SerialException("Simulated read failure")
        count = min(max_len, next(self._chunks), len(self._pending))
        chunk = bytes(self._pending[:count])
        del self._pending[:count]
        return chunk

    def _reading(self, definition: AnalogField) -> float:
        value = self.state[definition.name]
        noise = self.config["noise_level"]
        if noise and definition.in_range(value):
            # Noise never pushes a plausible reading out of range.
            value *= 1 + self.rng.uniform(-noise, noise)
            value = max(definition.min_value, min(value, definition.max_value))
        return value

    def status_frame(self) -> bytes:
        """
        Builds a status frame from the current state.
        """
        frame = bytearray([STATUS_MARKER])
        for definition in ANALOG_FIELDS:
            tenths = int(round(self._reading(definition) * 10))
            frame.extend(max(0, min(tenths, 0xFFFF)).to_bytes(2, "big"))
        bits = 0
        for definition in FLAG_FIELDS:
            if self.state[definition.name]:
                bits |= 1 << definition.bit
        frame.extend([bits, 0x01, TERMINATOR])
        return bytes(frame)

    def garbage_frame(self) -> bytes:
        return bytes([STATUS_MARKER]) + b"\xff" * (RESULT_SIZE - 2) + bytes([TERMINATOR])

    def info_frame(self) -> bytes:
        # Model and firmware have fixed columns; clip each so the version is never lost.
        model = self.config["model"][:12]
        firmware = self.config["firmware"][:4]
        text = f"{model:<12}{firmware:>4}"
        body = text.encode("ascii", errors="replace").ljust(RESULT_SIZE - 2)[:RESULT_SIZE - 2]
        return bytes([INFO_MARKER]) + body + bytes([TERMINATOR])
