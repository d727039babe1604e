from __future__ import annotations

"""
File Transport.

Public per-record entry point of the file sink: resolves the target path,
obtains the shared handle from the registry, rotates oversized files,
renders the record into one line and appends it. Nothing raised inside
this transport reaches the logging call site; failures are reported as
warnings through the console transport.
"""

import dataclasses
import logging
import os
import warnings
from datetime import datetime
from typing import Any, Callable, Optional, Set, Union

from logdispatch.core.files.handle import FileHandle
from logdispatch.core.files.registry import FileRegistry, get_default_registry
from logdispatch.core.render import steps
from logdispatch.core.render.pipeline import render
from logdispatch.core.rotation import RotationPolicy
from logdispatch.domain.config import WriteOptions
from logdispatch.domain.constants import (
    DEFAULT_FILE_DEPTH,
    DEFAULT_FILE_FORMAT,
    DEFAULT_MAX_SIZE,
    FILE_TRANSPORT_TAG,
)
from logdispatch.domain.records import LogRecord, create_record
from logdispatch.infra.paths import PathVariables, default_file_name, get_path_variables
from logdispatch.transports.console import ConsoleTransport

logger = logging.getLogger(__name__)

PathResolver = Callable[[PathVariables, Optional[LogRecord]], str]

# Deprecated accessors already announced in this process
_WARNED: Set[str] = set()
_DEPRECATED_TEXT = " is deprecated and will be removed in a future release."


def resolve_default_path(variables: PathVariables, record: Optional[LogRecord] = None) -> str:
    """Place the log file in the platform default log directory."""
    return os.path.join(variables.library_default_dir, variables.file_name)


class FileTransport:
    """
    Append-only file sink with size based rotation.

    Attributes:
        level: Most verbose level accepted, or False to disable.
        format: Template (or callable) for each line.
        max_size: Rotation threshold in bytes; 0 disables rotation.
        sync: Write synchronously; False queues writes on a thread.
        write_options: Flag, permission bits and encoding of the file.
        file_name: Log file name handed to the path resolver.
        resolve_path: ``(variables, record) -> path`` override point.
        archive_log: Rotation action, ``handle -> None``.
    """

    def __init__(
            self,
            console: Optional[ConsoleTransport] = None,
            registry: Optional[FileRegistry] = None,
            process_type: str = "main",
            app_name: Optional[str] = None,
    ) -> None:
        self.console = console if console is not None else ConsoleTransport(process_type)
        self.registry = registry if registry is not None else get_default_registry()
        self.process_type = process_type
        self.path_variables = get_path_variables(app_name=app_name)

        self.level: Union[str, bool, None] = "silly"
        self.format: steps.FormatSpec = DEFAULT_FILE_FORMAT
        self.max_size: int = DEFAULT_MAX_SIZE
        self.sync: bool = True
        self.write_options = WriteOptions()
        self.file_name = default_file_name(process_type)
        self.resolve_path: PathResolver = resolve_default_path
        self.archive_log: Callable[[FileHandle], Any] = self._archive_log

        self.registry.on_error(self._on_registry_error)

    def __call__(self, record: LogRecord) -> None:
        self.handle(record)

    # ==========================================================================
    # PUBLIC API
    # ==========================================================================

    def handle(self, record: LogRecord) -> None:
        """
        Write one record to its log file.

        Args:
            record: The record to persist.
        """
        try:
            file = self.get_file(record)
            line = render(record, [
                steps.remove_styles,
                steps.custom_formatter_factory(self.format),
                steps.concat_first_string_elements,
                steps.max_depth_factory(DEFAULT_FILE_DEPTH),
                steps.to_string,
            ])
            if not isinstance(line, str):
                line = str(line)

            # Check, archive and append as one step per file
            with file.lock:
                if self._needs_rotation(file, line):
                    self.archive_log(file)
                    file.reset()

                file.write(line)
        except Exception as e:
            self._log_console("Can't write log record", e)

    def get_file(self, record: Optional[LogRecord] = None) -> FileHandle:
        """Resolve the path for a record and return its shared handle."""
        variables = dataclasses.replace(self.path_variables, file_name=self.file_name)
        file_path = self.resolve_path(variables, record)
        return self.registry.provide(file_path, self.write_options, not self.sync)

    def close(self) -> None:
        """Stop receiving registry failures. The shared handles stay open."""
        self.registry.remove_listener(self._on_registry_error)

    # ==========================================================================
    # ROTATION
    # ==========================================================================

    def _needs_rotation(self, file: FileHandle, line: str) -> bool:
        if self.max_size <= 0:
            return False
        current = file.size
        if current <= 0:
            return False
        incoming = len((line + os.linesep).encode(self.write_options.encoding, errors="replace"))
        return current + incoming > self.max_size

    def _archive_log(self, file: FileHandle) -> None:
        RotationPolicy(self.max_size, report=self._log_console).archive_log(file)

    # ==========================================================================
    # ERROR CHANNEL
    # ==========================================================================

    def _on_registry_error(self, error: BaseException, file: FileHandle) -> None:
        self._log_console(f"Can't write to {file}", error)

    def _log_console(self, message: str, error: Optional[BaseException] = None) -> None:
        data = [f"{FILE_TRANSPORT_TAG}: {message}"]
        if error is not None:
            data.append(error)
        try:
            self.console(create_record("warn", data, date=datetime.now(), process_type=self.process_type))
        except Exception as e:
            logger.debug(f"FileTransport: console warning failed: {e}")

    # ==========================================================================
    # DEPRECATED API
    # ==========================================================================

    def bytes_written(self) -> int:
        """Deprecated: use ``get_file().bytes_written``."""
        _deprecated("bytes_written()")
        return self.get_file().bytes_written

    def file_size(self) -> int:
        """Deprecated: use ``get_file().size``."""
        _deprecated("file_size()")
        return self.get_file().size

    def get_log_file(self) -> str:
        """Deprecated: use ``get_file().path``."""
        _deprecated("get_log_file()")
        return self.get_file().path

    def find_log_path(self) -> str:
        """Deprecated: use ``get_file().path``."""
        _deprecated("find_log_path()")
        return self.get_file().path

    def set_log_file(self, file_path: str) -> None:
        """Deprecated: assign ``resolve_path`` instead."""
        _deprecated("set_log_file()")
        self.resolve_path = lambda variables, record=None: file_path

    def clear(self) -> None:
        """Deprecated: use ``get_file().clear()``."""
        _deprecated("clear()")
        self.get_file().clear()

    def init(self) -> None:
        """Deprecated: no-op, transports need no initialization."""
        _deprecated("init()")


def _deprecated(name: str) -> None:
    if name in _WARNED:
        return
    _WARNED.add(name)
    warnings.warn(f"FileTransport.{name}{_DEPRECATED_TEXT}", DeprecationWarning, stacklevel=3)
