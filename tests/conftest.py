from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for records, isolated registries and file transports.
"""

import os
import sys
from datetime import datetime
from typing import Any, Callable, Iterator

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from logdispatch.core.files.registry import FileRegistry  # noqa: E402
from logdispatch.domain.records import LogRecord, create_record  # noqa: E402
from logdispatch.transports.console import ConsoleTransport  # noqa: E402
from logdispatch.transports.file import FileTransport  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def fixed_date() -> datetime:
    """A deterministic timestamp: 2024-01-02 03:04:05.006."""
    return datetime(2024, 1, 2, 3, 4, 5, 6000)


@pytest.fixture
def make_record(fixed_date: datetime) -> Callable[..., LogRecord]:
    """Factory building records at the fixed timestamp."""
    def _make(level: str = "info", *data: Any, **kwargs: Any) -> LogRecord:
        return create_record(level, data, date=kwargs.pop("date", fixed_date), **kwargs)
    return _make


@pytest.fixture
def registry() -> FileRegistry:
    """A private registry so tests never share handles."""
    return FileRegistry()


@pytest.fixture
def console() -> ConsoleTransport:
    """Console transport with styles disabled for stable output."""
    transport = ConsoleTransport()
    transport.use_styles = False
    transport.format = "{text}"
    return transport


@pytest.fixture
def file_transport(tmp_path, registry, console) -> Iterator[FileTransport]:
    """
    File transport writing to ``tmp_path/app.log`` with a plain template.

    Yields:
        FileTransport: Transport bound to the isolated registry.
    """
    transport = FileTransport(console=console, registry=registry)
    target = str(tmp_path / "app.log")
    transport.resolve_path = lambda variables, record=None: target
    transport.format = "{text}"
    yield transport
    transport.close()
