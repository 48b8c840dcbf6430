"""
exceptions.py

Error types raised by the SMS UPS tool. Each failure class maps to its own exit code
in the command line front end so a caller can tell a bad link from bad data.
"""


class UPSError(Exception):
    """Base exception for SMS UPS communication errors."""
    pass


class ConfigurationError(UPSError):
    """Requested operations cannot be combined (e.g., start and abort a test)."""
    pass


class ChannelOpenError(UPSError):
    """The serial device could not be opened or configured."""
    pass


class TransportError(UPSError):
    """A byte-level read or write failed during an exchange."""
    pass


class ValidationExhaustedError(UPSError):
    """
    The device answered, but every reply within the retry bound was implausible.
    """

    def __init__(self, message: str, attempts: int = 0, error_count: int = 0):
        super().__init__(message)
        self.attempts = attempts
        self.error_count = error_count
