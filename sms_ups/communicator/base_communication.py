"""
base_communication.py

Implements the serial channel to the UPS and the transport session that exchanges
fixed-size frames over it.

A channel is any object providing:
    write(data: bytes) -> int
    read_nonblocking(max_len: int) -> bytes    (returns b"" when nothing is buffered)
and raising serial.SerialException or OSError on I/O failure. SerialChannel is the
pyserial implementation; DeviceSimulator provides the same interface without hardware.
"""

import logging
import time
from typing import Optional, Dict, Any, Callable

import serial

from sms_ups.communicator.response_handler import ResponseHandler
from sms_ups.config import (
    DEFAULT_PORT,
    SERIAL_SETTINGS,
    RESULT_SIZE,
    READ_CHUNK_SIZE,
    READ_POLL_INTERVAL,
)
from sms_ups.exceptions import ChannelOpenError, TransportError


class SerialChannel:
    """
    Non-blocking raw byte channel over a pyserial port, configured 2400 baud 8N1.
    """

    def __init__(self, port: str = DEFAULT_PORT, settings: Optional[Dict[str, Any]] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initializes the channel without opening the port.

        Args:
            port: The serial device path (e.g., "/dev/ttyUSB0").
            settings: Optional overrides for SERIAL_SETTINGS.
            logger: Optional logger instance.
        """
        self.port = port
        self.logger = logger or logging.getLogger(__name__)
        self.ser: Optional[serial.Serial] = None
        self.current_settings = dict(SERIAL_SETTINGS)
        if settings:
            self.current_settings.update(settings)

    @property
    def is_open(self) -> bool:
        return self.ser is not None and self.ser.is_open

    def open(self) -> "SerialChannel":
        """
        Opens and configures the serial port.

        Raises:
            ChannelOpenError: If the port cannot be opened or configured.
        """
        try:
            self.ser = serial.Serial(port=self.port, **self.current_settings)
        except (serial.SerialException, OSError, ValueError) as e:
            raise ChannelOpenError(f"Unable to open {self.port}: {e}") from e
        self.logger.info(f"Opened {self.port} at {self.current_settings['baudrate']} baud")
        return self

    def close(self) -> None:
        if self.is_open:
            self.ser.close()
            self.logger.debug(f"Closed {self.port}")
        self.ser = None

    def __enter__(self) -> "SerialChannel":
        if not self.is_open:
            self.open()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def write(self, data: bytes) -> int:
        if not self.is_open:
            raise serial.SerialException(f"Port {self.port} is not open")
        written = self.ser.write(data)
        self.ser.flush()
        return len(data) if written is None else written

    def read_nonblocking(self, max_len: int) -> bytes:
        if not self.is_open:
            raise serial.SerialException(f"Port {self.port} is not open")
        return self.ser.read(max_len)


class TransportSession:
    """
    Sends command frames and assembles fixed-length replies from a channel.
    """

    def __init__(self, channel, logger: Optional[logging.Logger] = None,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.monotonic,
                 poll_interval: float = READ_POLL_INTERVAL):
        """
        Initializes the session.

        Args:
            channel: The byte channel (see module docstring).
            logger: Optional logger instance.
            sleep: Function used to wait between read attempts.
            clock: Monotonic clock used for the optional read deadline.
            poll_interval: Seconds to wait before each read attempt.
        """
        self.channel = channel
        self.logger = logger or logging.getLogger(__name__)
        self.sleep = sleep
        self.clock = clock
        self.poll_interval = poll_interval

    def send(self, frame: bytes) -> None:
        """
        Writes a command frame verbatim. Does not wait for a reply.

        Raises:
            TransportError: If the write fails or is short.
        """
        self.logger.debug(f"Sending command: {ResponseHandler.format_frame(frame)}")
        try:
            written = self.channel.write(frame)
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Error writing to device: {e}") from e
        if written is not None and written < len(frame):
            raise TransportError(f"Short write: {written} of {len(frame)} bytes")

    def receive_fixed(self, size: int = RESULT_SIZE, timeout: Optional[float] = None) -> bytes:
        """
        Reads until at least `size` bytes have been accumulated.

        Sleeps poll_interval before each read so a non-blocking channel is not spun on.
        Without a timeout this waits for as long as the device takes; pass a timeout
        when bounded latency matters.

        Args:
            size: Number of bytes to assemble.
            timeout: Optional deadline in seconds.

        Returns:
            Exactly `size` bytes; anything received past that is dropped.

        Raises:
            TransportError: On a read failure, or when the deadline passes.
        """
        buffer = bytearray()
        deadline = None if timeout is None else self.clock() + timeout
        while len(buffer) < size:
            self.sleep(self.poll_interval)
            try:
                chunk = self.channel.read_nonblocking(READ_CHUNK_SIZE)
            except (serial.SerialException, OSError) as e:
                raise TransportError(f"Error reading from device: {e}") from e
            if chunk:
                buffer.extend(chunk)
            if len(buffer) < size and deadline is not None and self.clock() >= deadline:
                raise TransportError(
                    f"Device not responding: got {len(buffer)} of {size} bytes in {timeout}s"
                )

        if len(buffer) > size:
            extra = ResponseHandler.format_frame(bytes(buffer[size:]))
            self.logger.debug(f"Dropping {len(buffer) - size} extra bytes: {extra}")
        response = bytes(buffer[:size])
        self.logger.debug(f"Received response: {ResponseHandler.format_frame(response)}")
        return response

    def exchange(self, frame: bytes, size: int = RESULT_SIZE,
                 timeout: Optional[float] = None) -> bytes:
        self.send(frame)
        return self.receive_fixed(size, timeout)
