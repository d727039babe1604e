from __future__ import annotations

"""
File Handle Registry.

Process-wide cache mapping canonical paths to file handles, so that every
writer of a path shares one handle and one size counter. Failures of the
handles it creates are broadcast to subscribed listeners instead of being
raised.
"""

import logging
import os
import threading
from typing import Callable, Dict, List, Optional

from logdispatch.core.files.handle import FileHandle
from logdispatch.domain.config import WriteOptions

logger = logging.getLogger(__name__)

ErrorListener = Callable[[BaseException, FileHandle], None]


class FileRegistry:
    """
    Service owning the path to handle mapping.

    The default instance is shared process-wide; tests and isolated
    subsystems construct their own.
    """

    def __init__(self) -> None:
        """Initialize an empty registry with thread-safe storage."""
        self._handles: Dict[str, FileHandle] = {}
        self._listeners: List[ErrorListener] = []
        self._lock = threading.Lock()

    def __contains__(self, path: str) -> bool:
        return canonical_path(path) in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def __bool__(self) -> bool:
        # An empty registry is still a registry
        return True

    def provide(
            self,
            path: str,
            write_options: Optional[WriteOptions] = None,
            allow_async: bool = False,
    ) -> FileHandle:
        """
        Return the handle for a path, creating it on first request.

        The first call for a path fixes its write options and write mode.

        Args:
            path: Target log file path.
            write_options: Open flag, permission bits and encoding.
            allow_async: Queue writes on a background thread.

        Returns:
            FileHandle: The shared handle for the canonical path.
        """
        key = canonical_path(path)

        with self._lock:
            handle = self._handles.get(key)
            if handle is not None:
                return handle

            handle = FileHandle(
                key,
                write_options=write_options,
                write_async=allow_async,
                on_error=self._emit_error,
            )
            self._handles[key] = handle

        self._ensure_parent_dir(handle)
        logger.debug(f"Registry: created handle for {key} (async={allow_async})")
        return handle

    def flush_all(self) -> None:
        """Wait for every queued line of every handle."""
        for handle in list(self._handles.values()):
            handle.flush()

    # ==========================================================================
    # ERROR NOTIFICATION
    # ==========================================================================

    def on_error(self, listener: ErrorListener) -> None:
        """Subscribe to handle failures; listeners get (error, handle)."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: ErrorListener) -> None:
        """Unsubscribe a previously registered listener."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _emit_error(self, error: BaseException, handle: FileHandle) -> None:
        if not self._listeners:
            logger.warning(f"Registry: failure on {handle.path} with no listener: {error}")
            return
        for listener in list(self._listeners):
            try:
                listener(error, handle)
            except Exception as e:
                logger.debug(f"Registry: error listener raised: {e}")

    def _ensure_parent_dir(self, handle: FileHandle) -> None:
        parent = os.path.dirname(handle.path)
        if not parent or os.path.isdir(parent):
            return
        try:
            os.makedirs(parent, exist_ok=True)
        except OSError as e:
            self._emit_error(e, handle)

# -----------------------------------------------------------------------------
# DEFAULT INSTANCE
# -----------------------------------------------------------------------------

_default_registry = FileRegistry()


def get_default_registry() -> FileRegistry:
    """Return the registry shared by transports created without one."""
    return _default_registry


def canonical_path(path: str) -> str:
    """Absolute, symlink-resolved form used as the registry key."""
    return os.path.realpath(os.path.expanduser(str(path)))
