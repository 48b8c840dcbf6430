"""
__init__.py

Serial channel, frame transport, query orchestration and output formatting.
"""

from sms_ups.communicator.base_communication import SerialChannel, TransportSession
from sms_ups.communicator.ups_communicator import UPSCommunicator
from sms_ups.communicator.response_handler import ResponseHandler

__all__ = ['SerialChannel', 'TransportSession', 'UPSCommunicator', 'ResponseHandler']
