from __future__ import annotations

"""
Diagnostics Logging Core.

Idempotent setup of the ``logdispatch`` logger tree. The library never
configures logging on import; entrypoints (the CLI, host applications)
call configure_logging() when they want to see its diagnostics.
"""

import logging
import os
from typing import List, Optional

from logdispatch.core.files.registry import FileRegistry
from logdispatch.infra.logging.config import _LEVEL_MAP, LoggingConfig
from logdispatch.infra.logging.handlers import (
    _create_stream_handler,
    _create_transport_handler,
    _is_our_handler,
)

# Internal state flag for idempotency
_CONFIGURED_FLAG_ATTR: str = "_logdispatch_configured"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logging(
        cfg: LoggingConfig,
        *,
        force: bool = False,
        registry: Optional[FileRegistry] = None,
) -> logging.Logger:
    """
    Attach diagnostic handlers to the library logger, once.

    Args:
        cfg: Structural configuration for diagnostics.
        force: If True, drop previous handlers and configure again.
        registry: File registry used when ``cfg.log_file`` is set.

    Returns:
        logging.Logger: The configured library logger.
    """
    root = logging.getLogger(cfg.logger_name)

    already_configured = bool(getattr(root, _CONFIGURED_FLAG_ATTR, False))
    if already_configured and not force:
        return root

    level_int = _parse_level(cfg.level)
    root.setLevel(level_int)
    _remove_our_handlers(root)

    handlers_list: List[logging.Handler] = []

    if cfg.console:
        handlers_list.append(_create_stream_handler(level_int, cfg.console_fmt))

    if cfg.log_file:
        th = _create_transport_handler(_build_file_transport(cfg, registry), level_int)
        if th:
            handlers_list.append(th)

    for h in handlers_list:
        root.addHandler(h)

    setattr(root, _CONFIGURED_FLAG_ATTR, True)
    return root


def get_logger(name: str) -> logging.Logger:
    """Acquire a named logger (usually ``__name__``)."""
    return logging.getLogger(name)


def get_recent_logs(log_path: str, n_lines: int = 100) -> str:
    """
    Extract the tail of a log file.

    Args:
        log_path: File to read.
        n_lines: Maximum number of lines to return.

    Returns:
        str: The last lines, or a short explanation when unreadable.
    """
    if not os.path.exists(log_path):
        return "Log file not found."

    # errors='replace' tolerates a crop that cut through a character
    try:
        with open(log_path, "r", encoding="utf-8", errors="replace") as f:
            lines = f.readlines()
            return "".join(lines[-n_lines:]) if n_lines > 0 else ""
    except OSError as e:
        return f"Error retrieving logs: {e}"


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _parse_level(level: str) -> int:
    """Convert a string-based logging level to its numeric constant."""
    if not level:
        return logging.WARNING
    return _LEVEL_MAP.get(str(level).strip().upper(), logging.WARNING)


def _remove_our_handlers(root: logging.Logger) -> None:
    """Detach every handler installed by a previous configuration."""
    for h in list(root.handlers):
        if _is_our_handler(h):
            root.removeHandler(h)
            h.close()


def _build_file_transport(cfg: LoggingConfig, registry: Optional[FileRegistry]):
    # Imported here: transports log through this package's loggers
    from logdispatch.transports.file import FileTransport

    transport = FileTransport(registry=registry)
    transport.max_size = cfg.max_size
    transport.format = "[{y}-{m}-{d} {h}:{i}:{s}.{ms}] [{level}] ({scope}) {text}"
    path = os.path.abspath(cfg.log_file)
    transport.resolve_path = lambda variables, record=None: path
    return transport
