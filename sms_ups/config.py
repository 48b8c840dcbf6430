"""
config.py

Serial settings, frame geometry, timing constants and logging setup for the SMS UPS tool.
Everything here is a plain module constant; callers override values through constructor
arguments rather than a configuration file.
"""

import logging
from typing import Dict, Any

import serial

# Default serial device the UPS USB-serial adapter shows up as.
DEFAULT_PORT = "/dev/ttyUSB0"

# Line settings for the UPS. timeout=0 makes reads return immediately with whatever is buffered.
SERIAL_SETTINGS: Dict[str, Any] = {
    "baudrate": 2400,
    "bytesize": serial.EIGHTBITS,
    "parity": serial.PARITY_NONE,
    "stopbits": serial.STOPBITS_ONE,
    "timeout": 0,
    "write_timeout": 1.0,
    "xonxoff": False,
    "rtscts": False,
    "dsrdtr": False
}

# Frame geometry
QUERY_SIZE = 7
RESULT_SIZE = 18
READ_CHUNK_SIZE = 64
TERMINATOR = 0x0D

# First byte of each reply kind
STATUS_MARKER = 0x3D  # '='
INFO_MARKER = 0x3A    # ':'

# Timing (seconds)
READ_POLL_INTERVAL = 0.015
RETRY_DELAY = 0.25

# Number of implausible replies tolerated; one more aborts the query.
MAX_VALIDATION_FAILURES = 2

# Process exit codes used by the command line front end
EXIT_OK = 0
EXIT_CONFIGURATION_ERROR = 1
EXIT_CHANNEL_OPEN_ERROR = 2
EXIT_TRANSPORT_ERROR = 3
EXIT_VALIDATION_ERROR = 4


def setup_logging(name: str, debug: bool = False) -> logging.Logger:
    """
    Configures console logging for the application.
    The level is DEBUG when debug is set (frames are dumped as hex), INFO otherwise.
    """
    level = logging.DEBUG if debug else logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    console_handler.setFormatter(formatter)

    # Removes old handlers if any
    if logger.hasHandlers():
        logger.handlers.clear()
    logger.addHandler(console_handler)

    return logger
