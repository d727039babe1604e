from __future__ import annotations

"""
Domain Constants.

Centralizes the default templates, size thresholds and naming conventions
shared by the transports and the rotation policy.
"""

import sys
from typing import Dict

# -----------------------------------------------------------------------------
# LEVELS
# -----------------------------------------------------------------------------
LEVELS = ("error", "warn", "info", "verbose", "debug", "silly")

# Levels accepted on a record but ranked as another level for filtering
LEVEL_ALIASES: Dict[str, str] = {
    "log": "info",
}

# -----------------------------------------------------------------------------
# FILE TRANSPORT DEFAULTS
# -----------------------------------------------------------------------------
DEFAULT_FILE_FORMAT = "[{y}-{m}-{d} {h}:{i}:{s}.{ms}] [{level}] {text}"
DEFAULT_MAX_SIZE = 1024 * 1024  # 1MB
DEFAULT_FILE_DEPTH = 4

# Rotation fallback never keeps more than this when the rename fails
MAX_CROP_BYTES = 256 * 1024
ARCHIVE_SUFFIX = ".old"
CROP_MARKER = "[log cropped]"

DEFAULT_FILE_NAMES: Dict[str, str] = {
    "main": "main.log",
    "renderer": "renderer.log",
    "worker": "worker.log",
}

# -----------------------------------------------------------------------------
# CONSOLE TRANSPORT DEFAULTS
# -----------------------------------------------------------------------------
CONSOLE_SEPARATOR = ">" if sys.platform == "win32" else "›"
DEFAULT_CONSOLE_FORMAT = "{h}:{i}:{s}.{ms} " + CONSOLE_SEPARATOR + " {text}"
DEFAULT_CONSOLE_DEPTH = 4

FILE_TRANSPORT_TAG = "logdispatch.transports.file"
