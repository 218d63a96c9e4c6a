"""Tests for snapshot serialization and the output formatters."""

from __future__ import annotations

import json

import pytest

from vstat.formatter import format_json, format_text, get_formatter, parse_json
from vstat.snapshot import FIELD_KEYS, StatusSnapshot


FULL = StatusSnapshot(
    width=1920,
    height=1080,
    signal="yes",
    timestamp=1_760_000_000_123,
    frame_id=65535,
    colorspace="Y422",
    format="HDMI",
)


class TestStatusSnapshot:
    def test_zero_values(self):
        snap = StatusSnapshot()
        assert snap.to_dict() == {
            "width": 0, "height": 0, "signal": "", "time": 0,
            "fid": 0, "colorspace": "", "format": "",
        }

    def test_key_set(self):
        assert tuple(FULL.to_dict()) == FIELD_KEYS

    def test_from_dict_missing_keys(self):
        assert StatusSnapshot.from_dict({"width": 640}) == StatusSnapshot(width=640)

    def test_stamped_returns_copy(self):
        snap = StatusSnapshot(width=1)
        stamped = snap.stamped(99)
        assert stamped.timestamp == 99
        assert snap.timestamp == 0

    def test_frozen(self):
        with pytest.raises(AttributeError):
            FULL.width = 0

    def test_has_signal(self):
        assert FULL.has_signal
        assert not StatusSnapshot(signal="no").has_signal
        assert not StatusSnapshot(signal="fazantfazantfazant").has_signal


class TestJson:
    def test_all_keys_present(self):
        data = json.loads(format_json(StatusSnapshot(width=1)))
        assert set(data) == set(FIELD_KEYS)

    def test_one_line(self):
        text = format_json(FULL)
        assert text.endswith("\n")
        assert text.count("\n") == 1

    @pytest.mark.parametrize(
        "snap",
        [
            FULL,
            StatusSnapshot(),
            StatusSnapshot(width=42, height=42, signal="fazantfazantfazant"),
            StatusSnapshot(timestamp=2**62, frame_id=2**31),
        ],
    )
    def test_round_trip(self, snap):
        assert parse_json(format_json(snap)) == snap


class TestText:
    def test_exact_layout(self):
        assert format_text(FULL) == (
            "time: 1760000000123\n"
            "width: 1920\n"
            "height: 1080\n"
            "signal: yes\n"
            "frameid: 65535\n"
            "colorspace: Y422\n"
            "format: HDMI\n"
        )

    def test_unset_fields_printed_empty(self):
        text = format_text(StatusSnapshot(width=1280, height=720, signal="no"))
        lines = text.splitlines()
        assert lines == [
            "time: 0",
            "width: 1280",
            "height: 720",
            "signal: no",
            "frameid: 0",
            "colorspace: ",
            "format: ",
        ]


class TestGetFormatter:
    def test_json(self):
        assert get_formatter(True) is format_json

    def test_text(self):
        assert get_formatter(False) is format_text
