from __future__ import annotations

"""
Configuration Models.

Immutable write options for file handles and normalization helpers for
user supplied level names.
"""

import os
from dataclasses import dataclass
from typing import Dict, Optional

from logdispatch.domain.constants import LEVEL_ALIASES, LEVELS

# Mapping of accepted spellings to canonical level names
_LEVEL_MAP: Dict[str, str] = {
    "ERROR": "error",
    "CRITICAL": "error",
    "WARN": "warn",
    "WARNING": "warn",
    "INFO": "info",
    "VERBOSE": "verbose",
    "DEBUG": "debug",
    "SILLY": "silly",
    "TRACE": "silly",
}

_OPEN_FLAGS: Dict[str, int] = {
    "a": os.O_WRONLY | os.O_CREAT | os.O_APPEND,
    "w": os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
}


@dataclass(frozen=True)
class WriteOptions:
    """
    How a file handle opens its target on each write.

    Attributes:
        flag: "a" appends, "w" truncates when opened.
        mode: Permission bits used when the file is created.
        encoding: Text encoding of the written lines.
    """
    flag: str = "a"
    mode: int = 0o666
    encoding: str = "utf-8"

    def open_flags(self) -> int:
        """Translate the flag into os.open() flags (binary where relevant)."""
        flags = _OPEN_FLAGS.get(self.flag, _OPEN_FLAGS["a"])
        return flags | getattr(os, "O_BINARY", 0)


def parse_level(level: Optional[str]) -> str:
    """
    Normalize a level name, defaulting to "info" when unknown or empty.

    Args:
        level: Raw level string (any case, stdlib spellings accepted).

    Returns:
        str: Canonical level name.
    """
    if not level:
        return "info"
    raw = str(level).strip()
    if raw.lower() in LEVELS or raw.lower() in LEVEL_ALIASES:
        return raw.lower()
    return _LEVEL_MAP.get(raw.upper(), "info")
