"""Tests for the transport session and the pyserial channel."""

import pytest
import serial

from conftest import ScriptedChannel
from sms_ups.communicator.base_communication import SerialChannel, TransportSession
from sms_ups.exceptions import ChannelOpenError, TransportError
from sms_ups.protocol.commands import UPSCommand, build_command


def make_session(channel, fake_time):
    return TransportSession(channel, sleep=fake_time.sleep, clock=fake_time.clock)


def test_send_writes_frame_verbatim(fake_time):
    channel = ScriptedChannel()
    frame = build_command(UPSCommand.SWITCH_BUZZER)
    make_session(channel, fake_time).send(frame)
    assert channel.writes == [frame]
    assert channel.read_calls == 0


def test_receive_accumulates_partial_reads(fake_time, sample_status):
    channel = ScriptedChannel(reads=[sample_status[:4], sample_status[4:8], sample_status[8:]])
    data = make_session(channel, fake_time).receive_fixed(18)
    assert data == sample_status
    assert channel.read_calls == 3
    assert fake_time.sleeps == [0.015] * 3


def test_receive_waits_through_empty_reads(fake_time, sample_status):
    channel = ScriptedChannel(reads=[b"", b"", sample_status[:10], b"", sample_status[10:]])
    assert make_session(channel, fake_time).receive_fixed(18) == sample_status
    assert channel.read_calls == 5


def test_receive_drops_extra_bytes(fake_time, sample_status):
    channel = ScriptedChannel(reads=[sample_status + b"\x3d\x08"])
    assert make_session(channel, fake_time).receive_fixed(18) == sample_status


def test_read_error_aborts_immediately(fake_time, sample_status):
    channel = ScriptedChannel(reads=[sample_status[:4], serial.SerialException("gone"),
                                     sample_status[4:]])
    with pytest.raises(TransportError, match="gone"):
        make_session(channel, fake_time).receive_fixed(18)
    assert channel.read_calls == 2


def test_os_error_is_transport_error(fake_time):
    channel = ScriptedChannel(reads=[OSError(5, "Input/output error")])
    with pytest.raises(TransportError):
        make_session(channel, fake_time).receive_fixed(18)


def test_write_error_is_transport_error(fake_time):
    channel = ScriptedChannel(write_error=serial.SerialException("write failed"))
    with pytest.raises(TransportError, match="write failed"):
        make_session(channel, fake_time).send(build_command(UPSCommand.QUERY_STATUS))


def test_short_write_is_transport_error(fake_time):
    class ShortChannel(ScriptedChannel):
        def write(self, data):
            return 3

    with pytest.raises(TransportError, match="Short write"):
        make_session(ShortChannel(), fake_time).send(build_command(UPSCommand.QUERY_STATUS))


def test_deadline_stops_waiting(fake_time):
    channel = ScriptedChannel(reads=[b"=\x08"])
    with pytest.raises(TransportError, match="not responding"):
        make_session(channel, fake_time).receive_fixed(18, timeout=0.1)
    assert fake_time.now >= 0.1
    assert channel.read_calls == len(fake_time.sleeps)


def test_exchange_sends_then_reads(fake_time, sample_status):
    channel = ScriptedChannel(replies=[sample_status])
    data = make_session(channel, fake_time).exchange(build_command(UPSCommand.QUERY_STATUS))
    assert data == sample_status
    assert channel.writes == [build_command(UPSCommand.QUERY_STATUS)]


def test_serial_channel_open_failure():
    channel = SerialChannel("/nonexistent/ttyUSB99")
    with pytest.raises(ChannelOpenError, match="/nonexistent/ttyUSB99"):
        channel.open()
    assert not channel.is_open


def test_serial_channel_settings(monkeypatch):
    opened = {}

    class FakeSerial:
        is_open = True

        def __init__(self, port, **kwargs):
            opened["port"] = port
            opened.update(kwargs)
            self.written = []

        def write(self, data):
            self.written.append(data)
            return len(data)

        def flush(self):
            pass

        def read(self, size):
            return b"=" if size else b""

        def close(self):
            self.is_open = False

    monkeypatch.setattr(serial, "Serial", FakeSerial)
    with SerialChannel("/dev/ttyS0") as channel:
        assert channel.write(b"Q") == 1
        assert channel.read_nonblocking(64) == b"="
    assert opened["port"] == "/dev/ttyS0"
    assert opened["baudrate"] == 2400
    assert opened["bytesize"] == serial.EIGHTBITS
    assert opened["parity"] == serial.PARITY_NONE
    assert opened["stopbits"] == serial.STOPBITS_ONE
    assert opened["timeout"] == 0
    assert not channel.is_open


def test_serial_channel_requires_open():
    channel = SerialChannel("/dev/ttyS0")
    with pytest.raises(serial.SerialException):
        channel.write(b"Q")
    with pytest.raises(serial.SerialException):
        channel.read_nonblocking(64)
