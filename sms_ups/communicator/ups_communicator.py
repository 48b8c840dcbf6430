"""
ups_communicator.py

Implements the UPSCommunicator class that issues commands to an SMS UPS and runs the
query/validate/retry cycle for replies.
"""

import time
import logging
from typing import Optional, Callable

from sms_ups.communicator.base_communication import TransportSession
from sms_ups.config import MAX_VALIDATION_FAILURES, RETRY_DELAY, RESULT_SIZE
from sms_ups.exceptions import ConfigurationError, ValidationExhaustedError
from sms_ups.models import StatusSnapshot, DeviceInfo
from sms_ups.protocol.commands import UPSCommand
from sms_ups.protocol.sms_protocol import SMSProtocol


class UPSCommunicator:
    """
    Drives one UPS over an exclusively owned channel.
    """

    def __init__(self, channel, logger: Optional[logging.Logger] = None,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.monotonic,
                 max_failures: int = MAX_VALIDATION_FAILURES,
                 retry_delay: float = RETRY_DELAY):
        """
        Initializes the UPSCommunicator.

        Args:
            channel: An open byte channel (SerialChannel or DeviceSimulator).
            logger: Optional logger for debugging.
            sleep: Function used for all waits; tests pass a recorder.
            clock: Monotonic clock used for read deadlines.
            max_failures: Implausible replies tolerated before giving up.
            retry_delay: Seconds to wait after an implausible reply.
        """
        self.logger = logger or logging.getLogger(__name__)
        self.sleep = sleep
        self.max_failures = max_failures
        self.retry_delay = retry_delay
        self.protocol = SMSProtocol(logger=self.logger)
        self.transport = TransportSession(channel, logger=self.logger, sleep=sleep, clock=clock)

    def send_command(self, kind: UPSCommand) -> None:
        """
        Sends a command that gets no reply (buzzer, battery test start/abort).
        """
        self.logger.info(f"Sending {kind.name} ({kind.opcode})")
        self.transport.send(self.protocol.create_command(kind))

    def start_battery_test(self) -> None:
        self.send_command(UPSCommand.START_TEST)

    def abort_battery_test(self) -> None:
        self.send_command(UPSCommand.ABORT_TEST)

    def switch_buzzer(self) -> None:
        self.send_command(UPSCommand.SWITCH_BUZZER)

    def _query(self, kind: UPSCommand, check: Callable[[bytes], int],
               timeout: Optional[float]) -> bytes:
        """
        Sends a query until a reply passes `check` or the retry bound is reached.

        A transport error is not retried; it propagates from the first failing exchange.

        Returns:
            The accepted raw reply.

        Raises:
            TransportError: If a read or write fails.
            ValidationExhaustedError: After max_failures + 1 rejected replies.
        """
        frame = self.protocol.create_command(kind)
        failures = 0
        while True:
            raw = self.transport.exchange(frame, RESULT_SIZE, timeout)
            errors = check(raw)
            if errors == 0:
                return raw
            failures += 1
            if failures > self.max_failures:
                raise ValidationExhaustedError(
                    f"Device is responding but sending implausible values "
                    f"({errors} errors in last reply, {failures} attempts)",
                    attempts=failures,
                    error_count=errors
                )
            self.logger.warning(
                f"Implausible {kind.name} reply ({errors} errors), "
                f"retry {failures}/{self.max_failures}"
            )
            self.sleep(self.retry_delay)

    def query_status(self, timeout: Optional[float] = None) -> StatusSnapshot:
        """
        Reads the UPS status.

        Args:
            timeout: Optional per-reply read deadline in seconds; None waits indefinitely.

        Returns:
            The decoded StatusSnapshot of the first plausible reply.
        """
        raw = self._query(UPSCommand.QUERY_STATUS, self.protocol.check_status, timeout)
        return self.protocol.parse_status(raw)

    def query_device_info(self, timeout: Optional[float] = None) -> DeviceInfo:
        raw = self._query(UPSCommand.DEVICE_INFO, self.protocol.check_device_info, timeout)
        return self.protocol.parse_device_info(raw)

    def run(self, start_test: bool = False, abort_test: bool = False,
            switch_buzzer: bool = False, timeout: Optional[float] = None) -> StatusSnapshot:
        """
        Issues the requested control commands, then reads the status.

        Raises:
            ConfigurationError: If both start_test and abort_test are requested. Nothing
                is sent to the device in that case.
        """
        if start_test and abort_test:
            raise ConfigurationError("Can't start and abort battery test at same time.")

        if switch_buzzer:
            self.switch_buzzer()
        if start_test:
            self.start_battery_test()
        if abort_test:
            self.abort_battery_test()

        return self.query_status(timeout)
