"""Tests for status and device information frame decoding."""

import pytest

from conftest import make_status
from sms_ups.models import StatusSnapshot
from sms_ups.protocol.sms_protocol import (
    SMSProtocol,
    decode,
    decode_analog_fields,
    decode_device_info,
    decode_flags,
    has_marker,
)


def test_decode_sample_capture(sample_status):
    assert decode_analog_fields(sample_status) == [210.0, 210.0, 108.0, 29.0, 60.0, 100.0, 38.0]


def test_decode_is_deterministic(sample_status):
    assert decode_analog_fields(sample_status) == decode_analog_fields(bytes(sample_status))
    assert decode(sample_status) == decode(sample_status)


def test_byte_pair_boundaries():
    raw = make_status(pairs=[(0x00, 0x00), (0x00, 0x64)] + [(0x00, 0x00)] * 5)
    values = decode_analog_fields(raw)
    assert values[0] == 0.0
    assert values[1] == 10.0


def test_high_byte_weighs_256():
    raw = make_status(pairs=[(0x01, 0x00)] * 7)
    assert decode_analog_fields(raw) == [25.6] * 7


def test_field_offsets_skip_marker():
    # Each field reads bytes 2*i+1 and 2*i+2; the marker never leaks into field 0.
    raw = make_status(pairs=[(0, i + 1) for i in range(7)], marker=0xFF)
    assert decode_analog_fields(raw) == [0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7]


def test_decode_flags_lsb_first():
    raw = make_status(flags=0b00000101)
    assert decode_flags(raw) == [True, False, True, False, False, False, False, False]


def test_decode_flags_msb_is_on_battery():
    flags = decode_flags(make_status(flags=0b10000000))
    assert flags[-1] is True
    assert not any(flags[:-1])


def test_decode_full_snapshot(sample_status):
    snapshot = decode(sample_status)
    assert isinstance(snapshot, StatusSnapshot)
    assert snapshot.input_voltage == 210.0
    assert snapshot.output_voltage == 108.0
    assert snapshot.output_frequency == 60.0
    assert snapshot.battery_level == 100.0
    assert snapshot.temperature == 38.0
    # 0x29: beeper, UPS OK, on AC power
    assert snapshot.beep_on and snapshot.ups_ok and snapshot.on_ac_power
    assert not (snapshot.shutdown_active or snapshot.test_active or snapshot.boost_on)
    assert not (snapshot.low_battery or snapshot.on_battery)


def test_snapshot_is_immutable(sample_status):
    snapshot = decode(sample_status)
    with pytest.raises(AttributeError):
        snapshot.battery_level = 0.0


def test_short_frame_rejected():
    with pytest.raises(ValueError, match="18 bytes"):
        decode_analog_fields(b"=\x08\x34")
    with pytest.raises(ValueError):
        decode_flags(b"")


def test_has_marker(sample_status):
    assert has_marker(sample_status)
    assert not has_marker(make_status(marker=0x3B))
    assert not has_marker(b"")
    assert has_marker(b":", marker=0x3A)


def test_decode_device_info():
    raw = b":SENOIDAL    7.0b\r"
    info = decode_device_info(raw)
    assert info.model == "SENOIDAL"
    assert info.firmware == "7.0b"
    assert info.raw == raw


def test_decode_device_info_multiword_model():
    info = decode_device_info(b":NET 4+ II   2.1a\r")
    assert info.model == "NET 4+ II"
    assert info.firmware == "2.1a"


def test_decode_device_info_blank():
    info = decode_device_info(b":" + b" " * 16 + b"\r")
    assert info.model == ""
    assert info.firmware == ""


def test_check_status_accepts_sample(sample_status):
    assert SMSProtocol().check_status(sample_status) == 0


def test_check_status_counts_bad_marker():
    raw = make_status(marker=0x00)
    assert SMSProtocol().check_status(raw) == 1


def test_check_status_counts_ranges_and_marker():
    raw = make_status(pairs=[(0xFF, 0xFF)] * 7, marker=0x3B)
    assert SMSProtocol().check_status(raw) == 8


def test_check_device_info():
    protocol = SMSProtocol()
    assert protocol.check_device_info(b":SENOIDAL    7.0b\r") == 0
    assert protocol.check_device_info(b"=" + b"\x00" * 16 + b"\r") == 1


def test_snapshot_round_trips_ordered_values(sample_status):
    snapshot = decode(sample_status)
    assert snapshot.analog_values() == decode_analog_fields(sample_status)
    assert snapshot.flags() == decode_flags(sample_status)
    assert StatusSnapshot.from_values(snapshot.analog_values(), snapshot.flags()) == snapshot


def test_snapshot_rejects_wrong_counts():
    with pytest.raises(ValueError):
        StatusSnapshot.from_values([0.0] * 6, [False] * 8)
    with pytest.raises(ValueError):
        StatusSnapshot.from_values([0.0] * 7, [False] * 7)
