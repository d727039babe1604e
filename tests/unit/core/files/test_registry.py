from __future__ import annotations

"""
Unit tests for the File Registry.

Verifies:
1. One handle object per canonical path.
2. Isolation between registry instances.
3. Error notification without raising.
"""

import os

from logdispatch.core.files.handle import FileHandle
from logdispatch.core.files.registry import FileRegistry, canonical_path, get_default_registry
from logdispatch.domain.config import WriteOptions


def test_provide_returns_same_handle_for_same_path(tmp_path, registry):
    path = str(tmp_path / "main.log")

    first = registry.provide(path)
    second = registry.provide(path)

    assert isinstance(first, FileHandle)
    assert first is second
    assert len(registry) == 1


def test_relative_and_absolute_paths_share_handle(tmp_path, registry, monkeypatch):
    monkeypatch.chdir(tmp_path)

    relative = registry.provide("logs/main.log")
    absolute = registry.provide(str(tmp_path / "logs" / "main.log"))

    assert relative is absolute
    assert "logs/main.log" in registry


def test_first_provide_fixes_options(tmp_path, registry):
    path = str(tmp_path / "main.log")
    first = registry.provide(path, WriteOptions(encoding="latin-1"), allow_async=False)
    again = registry.provide(path, WriteOptions(), allow_async=True)

    assert again is first
    assert again.write_options.encoding == "latin-1"
    assert again.write_async is False


def test_separate_registries_are_isolated(tmp_path):
    path = str(tmp_path / "main.log")
    assert FileRegistry().provide(path) is not FileRegistry().provide(path)


def test_default_registry_is_shared():
    assert get_default_registry() is get_default_registry()


def test_provide_creates_parent_directories(tmp_path, registry):
    handle = registry.provide(str(tmp_path / "a" / "b" / "main.log"))
    assert os.path.isdir(os.path.dirname(handle.path))


def test_errors_are_broadcast_to_listeners(tmp_path, registry):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    received = []
    registry.on_error(lambda error, handle: received.append((type(error), handle.path)))

    handle = registry.provide(str(blocker / "main.log"))
    handle.write("line")

    assert len(received) == 2
    assert all(issubclass(kind, OSError) for kind, _ in received)
    assert received[0][1] == canonical_path(str(blocker / "main.log"))
    assert handle.bytes_written == 0


def test_remove_listener_stops_notifications(tmp_path, registry):
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    received = []

    def listener(error, handle):
        received.append(error)

    registry.on_error(listener)
    registry.remove_listener(listener)
    registry.provide(str(blocker / "main.log")).write("line")

    assert received == []


def test_failing_listener_does_not_break_others(tmp_path, registry):
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    received = []

    def broken(error, handle):
        raise RuntimeError("listener bug")

    registry.on_error(broken)
    registry.on_error(lambda error, handle: received.append(error))
    registry.provide(str(blocker / "main.log"))

    assert len(received) == 1


def test_empty_registry_is_truthy():
    registry = FileRegistry()

    assert len(registry) == 0
    assert registry


def test_listener_count_tracks_subscriptions(registry):
    def listener(error, handle):
        pass

    registry.on_error(listener)
    registry.on_error(listener)
    assert registry.listener_count == 1

    registry.remove_listener(listener)
    assert registry.listener_count == 0
