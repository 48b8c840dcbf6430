"""
cli.py

Command line front end: parses flags, opens the serial device, runs the requested
commands and prints the UPS status.

Usage:
    sms-ups [-s | -a] [-b] [-i] [-j] [-t /dev/ttyUSB0] [-w SECONDS] [-v] [--simulate]
"""

import argparse
import logging
import sys
from typing import Optional, List

from sms_ups.communicator.base_communication import SerialChannel
from sms_ups.communicator.response_handler import ResponseHandler
from sms_ups.communicator.ups_communicator import UPSCommunicator
from sms_ups.config import (
    DEFAULT_PORT,
    EXIT_OK,
    EXIT_CONFIGURATION_ERROR,
    EXIT_CHANNEL_OPEN_ERROR,
    EXIT_TRANSPORT_ERROR,
    EXIT_VALIDATION_ERROR,
    setup_logging,
)
from sms_ups.device_simulator import DeviceSimulator
from sms_ups.exceptions import (
    ConfigurationError,
    ChannelOpenError,
    TransportError,
    ValidationExhaustedError,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sms-ups",
        description="Read status from an SMS UPS over its serial port"
    )
    parser.add_argument("-s", dest="start_test", action="store_true",
                        help="Start battery test")
    parser.add_argument("-a", dest="abort_test", action="store_true",
                        help="Abort battery test")
    parser.add_argument("-b", dest="switch_buzzer", action="store_true",
                        help="Switch buzzer ON/OFF")
    parser.add_argument("-t", dest="tty", default=DEFAULT_PORT,
                        help=f"Path to TTY (default: {DEFAULT_PORT})")
    parser.add_argument("-i", "--info", action="store_true",
                        help="Also print model name and firmware version")
    parser.add_argument("-j", "--json", action="store_true",
                        help="Print JSON instead of text")
    parser.add_argument("-w", "--timeout", type=float, default=None,
                        help="Give up if a reply takes longer than this many seconds")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log frames and retries")
    parser.add_argument("--simulate", action="store_true",
                        help="Talk to a simulated UPS instead of the serial device")
    return parser


def check_options(args: argparse.Namespace) -> None:
    """
    Rejects option combinations before the device is touched.

    Raises:
        ConfigurationError: If both -s and -a are given.
    """
    if args.start_test and args.abort_test:
        raise ConfigurationError("Can't start and abort battery test at same time.")


def open_channel(args: argparse.Namespace, logger: logging.Logger):
    if args.simulate:
        return DeviceSimulator(logger=logger)
    return SerialChannel(args.tty, logger=logger)


def run(args: argparse.Namespace, logger: logging.Logger) -> None:
    handler = ResponseHandler()
    with open_channel(args, logger) as channel:
        ups = UPSCommunicator(channel, logger=logger)
        info = ups.query_device_info(args.timeout) if args.info else None
        snapshot = ups.run(
            start_test=args.start_test,
            abort_test=args.abort_test,
            switch_buzzer=args.switch_buzzer,
            timeout=args.timeout
        )

    if args.json:
        if info is not None:
            print(handler.format_device_info_json(info))
        print(handler.format_status_json(snapshot))
    else:
        if info is not None:
            print(handler.format_device_info(info))
        print(handler.format_status(snapshot))


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point. Returns the process exit code.
    """
    try:
        args = build_parser().parse_args(argv)
    except SystemExit as e:
        # argparse exits with 2 on bad usage, which would collide with EXIT_CHANNEL_OPEN_ERROR.
        return EXIT_OK if not e.code else EXIT_CONFIGURATION_ERROR
    logger = setup_logging("sms_ups", debug=args.verbose)

    try:
        check_options(args)
        run(args, logger)
    except ConfigurationError as e:
        logger.error(f"ERROR: {e}")
        return EXIT_CONFIGURATION_ERROR
    except ChannelOpenError as e:
        logger.error(f"open_port: {e}")
        return EXIT_CHANNEL_OPEN_ERROR
    except TransportError as e:
        logger.error(f"Error reading tty: {e}")
        return EXIT_TRANSPORT_ERROR
    except ValidationExhaustedError as e:
        logger.error(f"tty was opened but is sending incorrect values: {e}")
        return EXIT_VALIDATION_ERROR
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
