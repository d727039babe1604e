from __future__ import annotations

"""
Unit tests for the Log Record model and level handling.

Verifies:
1. Record construction and immutability.
2. Level ranking and per-transport filtering.
3. Level name normalization and write option flags.
"""

import dataclasses
import os
from datetime import datetime

import pytest

from logdispatch.domain.config import WriteOptions, parse_level
from logdispatch.domain.records import create_record, is_level_enabled, level_rank


def test_create_record_defaults_and_tuple_data():
    before = datetime.now()
    record = create_record("info", ["a", 1])

    assert record.data == ("a", 1)
    assert record.process_type == "main"
    assert record.scope is None
    assert record.date >= before


def test_record_is_immutable(make_record):
    record = make_record("info", "x")
    with pytest.raises(dataclasses.FrozenInstanceError):
        record.level = "error"


def test_level_rank_orders_by_severity():
    assert level_rank("error") < level_rank("warn") < level_rank("info")
    assert level_rank("info") < level_rank("verbose") < level_rank("debug") < level_rank("silly")
    assert level_rank("log") == level_rank("info")


@pytest.mark.parametrize("record_level, transport_level, expected", [
    ("error", "warn", True),
    ("warn", "warn", True),
    ("info", "warn", False),
    ("debug", "silly", True),
    ("log", "info", True),
    ("log", "warn", False),
    ("error", False, False),
    ("error", None, False),
])
def test_is_level_enabled(record_level, transport_level, expected):
    assert is_level_enabled(record_level, transport_level) is expected


def test_parse_level_normalizes_spellings():
    assert parse_level("WARNING") == "warn"
    assert parse_level("Debug") == "debug"
    assert parse_level("log") == "log"
    assert parse_level("") == "info"
    assert parse_level("nonsense") == "info"


def test_write_options_defaults():
    opts = WriteOptions()
    assert opts.flag == "a"
    assert opts.mode == 0o666
    assert opts.encoding == "utf-8"
    assert opts.open_flags() & os.O_APPEND
    assert WriteOptions(flag="w").open_flags() & os.O_TRUNC
