from __future__ import annotations

"""
Integration tests for the Logger facade.

Verifies:
1. Level filtering per transport.
2. Isolation of failing transports.
3. Scoped records.
4. Registry injection and release.
"""

import os

from logdispatch.core.files.registry import FileRegistry, get_default_registry
from logdispatch.logger import Logger, create_logger


def build_logger(tmp_path, registry) -> Logger:
    log = create_logger(registry=registry)
    target = str(tmp_path / "main.log")
    log.transports["file"].resolve_path = lambda variables, record=None: target
    log.transports["file"].format = "[{level}] {text}"
    log.transports["console"] = None
    return log


def read_lines(path):
    with open(path, "r", encoding="utf-8") as f:
        return f.read().splitlines()


def test_levels_are_filtered_per_transport(tmp_path, registry):
    log = build_logger(tmp_path, registry)
    log.transports["file"].level = "info"

    log.error("e")
    log.warn("w")
    log.info("i")
    log.log("l")
    log.verbose("v")
    log.debug("d")
    log.silly("s")

    assert read_lines(tmp_path / "main.log") == ["[error] e", "[warn] w", "[info] i", "[log] l"]


def test_disabled_transport_receives_nothing(tmp_path, registry):
    log = build_logger(tmp_path, registry)
    log.transports["file"].level = False

    log.error("nothing")

    assert not os.path.exists(tmp_path / "main.log")


def test_failing_transport_does_not_block_others(tmp_path, registry):
    log = build_logger(tmp_path, registry)
    received = []

    def broken(record):
        raise RuntimeError("sink down")

    log.transports = {"broken": broken, "file": log.transports["file"], "spy": received.append}
    log.info("still logged")

    assert read_lines(tmp_path / "main.log") == ["[info] still logged"]
    assert [r.data for r in received] == [("still logged",)]


def test_scope_is_attached_to_records(tmp_path, registry):
    log = build_logger(tmp_path, registry)
    received = []
    log.transports["spy"] = received.append

    log.scope("db").warning("slow query", 120)

    record = received[0]
    assert record.level == "warn"
    assert record.scope == "db"
    assert record.data == ("slow query", 120)


def test_injected_registry_reaches_file_transport(tmp_path):
    isolated = FileRegistry()
    log = build_logger(tmp_path, isolated)

    log.info("kept apart")

    assert log.transports["file"].registry is isolated
    assert str(tmp_path / "main.log") in isolated
    assert str(tmp_path / "main.log") not in get_default_registry()
    log.close()


def test_close_releases_registry_listener(tmp_path, registry):
    log = build_logger(tmp_path, registry)
    assert registry.listener_count == 1

    log.close()

    assert registry.listener_count == 0
