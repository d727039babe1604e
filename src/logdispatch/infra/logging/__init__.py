from __future__ import annotations

from .config import LoggingConfig
from .core import (
    _CONFIGURED_FLAG_ATTR,
    configure_logging,
    get_logger,
    get_recent_logs,
)
from .handlers import _HANDLER_TAG_ATTR, TransportHandler

__all__ = [
    "LoggingConfig",
    "TransportHandler",
    "configure_logging",
    "get_logger",
    "get_recent_logs",
]
