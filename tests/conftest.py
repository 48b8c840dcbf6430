"""Shared fixtures: a scripted channel, a fake clock and a captured status frame."""

import pytest

# Status reply captured from a SENOIDAL 7.0b unit on mains power.
SAMPLE_STATUS = bytes.fromhex("3d 08 34 08 34 04 38 01 22 02 58 03 e8 01 7c 29 01 0d")


def make_status(pairs=None, flags=0x29, marker=0x3D):
    """Build an 18-byte status frame from seven (high, low) byte pairs."""
    frame = bytearray(SAMPLE_STATUS)
    frame[0] = marker
    if pairs is not None:
        for i, (high, low) in enumerate(pairs):
            frame[2 * i + 1] = high
            frame[2 * i + 2] = low
    frame[15] = flags
    return bytes(frame)


def with_value(index, tenths, base=SAMPLE_STATUS):
    """Return a copy of `base` with analog field `index` set to `tenths` / 10."""
    frame = bytearray(base)
    frame[2 * index + 1:2 * index + 3] = tenths.to_bytes(2, "big")
    return bytes(frame)


class FakeTime:
    """Sleep and clock pair; sleeping advances the clock."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds

    def clock(self):
        return self.now


class ScriptedChannel:
    """Channel whose reads come from a script of byte chunks or exceptions.

    Each write of a query frame can optionally append the next reply to the
    script, so retries see a fresh reply per attempt.
    """

    def __init__(self, reads=None, replies=None, write_error=None):
        self.reads = list(reads or [])
        self.replies = list(replies or [])
        self.write_error = write_error
        self.writes = []
        self.read_calls = 0

    def write(self, data):
        if self.write_error is not None:
            raise self.write_error
        self.writes.append(bytes(data))
        if data[0] in (0x51, 0x49, 0x46) and self.replies:
            reply = self.replies.pop(0)
            self.reads.append(reply)
        return len(data)

    def read_nonblocking(self, max_len):
        self.read_calls += 1
        if not self.reads:
            return b""
        item = self.reads.pop(0)
        if isinstance(item, Exception):
            raise item
        if len(item) > max_len:
            self.reads.insert(0, item[max_len:])
            item = item[:max_len]
        return item


@pytest.fixture
def fake_time():
    return FakeTime()


@pytest.fixture
def sample_status():
    return SAMPLE_STATUS
