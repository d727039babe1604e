from __future__ import annotations

"""
Logging Facade.

Turns log calls into records and dispatches them to every enabled
transport. A transport that fails is skipped for that record; the others
still receive it.
"""

import logging
from typing import Any, Callable, Dict, Optional

from logdispatch.core.files.registry import FileRegistry
from logdispatch.domain.records import LogRecord, create_record, is_level_enabled
from logdispatch.transports.console import ConsoleTransport
from logdispatch.transports.file import FileTransport

logger = logging.getLogger(__name__)

Transport = Callable[[LogRecord], None]


class Logger:
    """
    Dispatcher owning a set of named transports.

    Attributes:
        transports: Name to transport mapping; ``console`` and ``file`` by
            default. Set an entry to None to drop it.
    """

    def __init__(
            self,
            process_type: str = "main",
            registry: Optional[FileRegistry] = None,
            app_name: Optional[str] = None,
    ) -> None:
        self.process_type = process_type
        console = ConsoleTransport(process_type)
        self.transports: Dict[str, Optional[Transport]] = {
            "console": console,
            "file": FileTransport(
                console=console,
                registry=registry,
                process_type=process_type,
                app_name=app_name,
            ),
        }

    def log_record(self, record: LogRecord) -> None:
        """Send a prepared record to every transport whose level accepts it."""
        for name, transport in self.transports.items():
            if transport is None:
                continue
            if not is_level_enabled(record.level, getattr(transport, "level", "silly")):
                continue
            try:
                transport(record)
            except Exception as e:
                logger.error(f"Logger: transport '{name}' failed: {e}")

    def _emit(self, level: str, data: Any, scope: Optional[str] = None) -> None:
        self.log_record(create_record(level, data, process_type=self.process_type, scope=scope))

    def error(self, *data: Any) -> None:
        self._emit("error", data)

    def warn(self, *data: Any) -> None:
        self._emit("warn", data)

    warning = warn

    def info(self, *data: Any) -> None:
        self._emit("info", data)

    def verbose(self, *data: Any) -> None:
        self._emit("verbose", data)

    def debug(self, *data: Any) -> None:
        self._emit("debug", data)

    def silly(self, *data: Any) -> None:
        self._emit("silly", data)

    def log(self, *data: Any) -> None:
        self._emit("log", data)

    def scope(self, name: str) -> "ScopedLogger":
        """Return a view whose records carry a subsystem name."""
        return ScopedLogger(self, name)

    def close(self) -> None:
        """Detach every transport that holds outside subscriptions."""
        for transport in self.transports.values():
            close = getattr(transport, "close", None)
            if callable(close):
                close()


class ScopedLogger:
    """Logger view tagging each record with a scope."""

    def __init__(self, parent: Logger, name: str) -> None:
        self.parent = parent
        self.name = name

    def __getattr__(self, level: str) -> Callable[..., None]:
        if level not in ("error", "warn", "warning", "info", "verbose", "debug", "silly", "log"):
            raise AttributeError(level)
        canonical = "warn" if level == "warning" else level

        def _log(*data: Any) -> None:
            self.parent._emit(canonical, data, scope=self.name)
        return _log


def create_logger(
        process_type: str = "main",
        registry: Optional[FileRegistry] = None,
        app_name: Optional[str] = None,
) -> Logger:
    """Build a logger with console and file transports."""
    return Logger(process_type=process_type, registry=registry, app_name=app_name)
