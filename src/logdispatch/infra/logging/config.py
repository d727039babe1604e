from __future__ import annotations

"""
Diagnostics Logging Configuration.

Data structures used to initialize the library's own diagnostic output
(the stdlib ``logging`` tree under ``logdispatch``).
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

# Mapping of string identifiers to native logging constants
_LEVEL_MAP: Dict[str, int] = {
    "SILLY": logging.DEBUG,
    "DEBUG": logging.DEBUG,
    "VERBOSE": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Immutable specification for diagnostics initialization.

    Attributes:
        level: Minimum severity level to capture.
        console: Flag to enable stderr stream output.
        log_file: Optional path; diagnostics are then also appended there
            through a file transport (with rotation).
        max_size: Rotation threshold for that file.
        console_fmt: Structural format for terminal output.
        logger_name: Root of the captured logger tree.
    """
    level: str = "WARNING"
    console: bool = True
    log_file: Optional[str] = None

    max_size: int = 1024 * 1024  # Default: 1MB

    console_fmt: str = "%(levelname)s | %(name)s | %(message)s"
    logger_name: str = "logdispatch"
