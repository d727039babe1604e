from __future__ import annotations

from logdispatch.core.files.handle import FileHandle
from logdispatch.core.files.registry import FileRegistry, get_default_registry
from logdispatch.core.render.pipeline import render
from logdispatch.core.rotation import RotationPolicy, archive_path
from logdispatch.domain.config import WriteOptions
from logdispatch.domain.records import LogRecord, create_record
from logdispatch.logger import Logger, create_logger
from logdispatch.transports import ConsoleTransport, FileTransport

__version__ = "0.1.0"

__all__ = [
    "ConsoleTransport",
    "FileHandle",
    "FileRegistry",
    "FileTransport",
    "LogRecord",
    "Logger",
    "RotationPolicy",
    "WriteOptions",
    "archive_path",
    "create_logger",
    "create_record",
    "get_default_registry",
    "render",
]
