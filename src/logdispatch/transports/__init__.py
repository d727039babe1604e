from __future__ import annotations

from .console import ConsoleTransport
from .file import FileTransport, resolve_default_path

__all__ = [
    "ConsoleTransport",
    "FileTransport",
    "resolve_default_path",
]
