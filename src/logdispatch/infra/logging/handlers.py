from __future__ import annotations

"""
Diagnostics Handlers.

Handler factories and tagging helpers that let configure_logging() tell
its own handlers apart from ones installed by the host application. The
transport handler bridges stdlib records into a logdispatch transport.
"""

import logging
import sys
from datetime import datetime
from typing import Callable, Dict, Optional

from logdispatch.domain.records import LogRecord, create_record

# Internal attribute used to tag and identify our own handlers
_HANDLER_TAG_ATTR: str = "_logdispatch_handler"

_STDLIB_TO_LEVEL: Dict[int, str] = {
    logging.CRITICAL: "error",
    logging.ERROR: "error",
    logging.WARNING: "warn",
    logging.INFO: "info",
    logging.DEBUG: "debug",
}


class TransportHandler(logging.Handler):
    """
    Forward stdlib log records to a logdispatch transport.

    The handler builds a record whose data is the formatted message and
    calls the transport. A reentrancy guard drops records produced while
    the transport itself is logging.
    """

    def __init__(self, transport: Callable[[LogRecord], None], level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.transport = transport
        self._emitting = False

    def emit(self, record: logging.LogRecord) -> None:
        if self._emitting:
            return
        self._emitting = True
        try:
            level = _STDLIB_TO_LEVEL.get(record.levelno, "info")
            message = self.format(record)
            self.transport(create_record(
                level,
                [message],
                date=datetime.fromtimestamp(record.created),
                scope=record.name,
            ))
        except Exception:
            self.handleError(record)
        finally:
            self._emitting = False

    def close(self) -> None:
        close = getattr(self.transport, "close", None)
        if callable(close):
            close()
        super().close()


def _tag_handler(handler: logging.Handler) -> None:
    """Mark a handler as managed by configure_logging()."""
    setattr(handler, _HANDLER_TAG_ATTR, True)


def _is_our_handler(handler: logging.Handler) -> bool:
    """Verify if a handler carries our internal tag."""
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def _create_stream_handler(level_int: int, fmt: str) -> logging.StreamHandler:
    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(level_int)
    sh.setFormatter(logging.Formatter(fmt))
    _tag_handler(sh)
    return sh


def _create_transport_handler(
        transport: Callable[[LogRecord], None],
        level_int: int,
) -> Optional[TransportHandler]:
    """
    Wrap a transport in a tagged handler.

    Returns:
        Optional[TransportHandler]: Configured handler or None if setup fails.
    """
    try:
        th = TransportHandler(transport, level_int)
        th.setFormatter(logging.Formatter("%(message)s"))
        _tag_handler(th)
        return th
    except Exception as e:
        sys.stderr.write(f"WARNING: Diagnostic transport setup failure: {e}\n")
        return None
