from __future__ import annotations

"""
File Handle.

Wraps one on-disk log path. Tracks its size in memory (a single stat on
first use, then the byte count of every append), performs synchronous or
queued appends, and supports cropping and clearing. Failures never raise:
they are handed to the error callback supplied by the registry.

Queued appends run on a ``QueueListener`` so the calling thread never waits
on the disk.
"""

import atexit
import logging
import os
import queue
import threading
from logging.handlers import QueueListener
from typing import Callable, Optional

from logdispatch.domain.config import WriteOptions
from logdispatch.domain.constants import CROP_MARKER

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[BaseException, "FileHandle"], None]


class _PayloadWriter(logging.Handler):
    """Appends the raw bytes carried in ``record.msg`` to the owning handle."""

    def __init__(self, handle: "FileHandle") -> None:
        super().__init__()
        self._handle = handle

    def emit(self, record: logging.LogRecord) -> None:
        self._handle._append(record.msg)


class FileHandle:
    """
    Single writer for one log path.

    Only the registry should construct handles, so that every caller in the
    process shares the same size counter for a given path.

    ``lock`` guards the size counters. Callers that must check the size and
    act on it as one step (rotation) hold it around the whole sequence; it
    is reentrant, so the handle's own methods may be called inside.
    """

    def __init__(
            self,
            path: str,
            write_options: Optional[WriteOptions] = None,
            write_async: bool = False,
            on_error: Optional[ErrorCallback] = None,
    ) -> None:
        self.path = path
        self.write_options = write_options or WriteOptions()
        self.write_async = write_async
        self.bytes_written = 0

        self._on_error = on_error
        self._initial_size: Optional[int] = None
        self.lock = threading.RLock()
        # Taken by the background writer; never held while waiting on it
        self._io_lock = threading.RLock()
        self._count_lock = threading.Lock()

        self._queue: Optional[queue.Queue] = None
        self._listener: Optional[QueueListener] = None

    def __str__(self) -> str:
        return self.path

    def __repr__(self) -> str:
        mode = "async" if self.write_async else "sync"
        return f"FileHandle({self.path!r}, {mode})"

    # ==========================================================================
    # SIZE TRACKING
    # ==========================================================================

    @property
    def size(self) -> int:
        """Bytes in the file as seen by this process."""
        with self.lock:
            if self._initial_size is None:
                self._initial_size = self._stat_size()
            return self._initial_size + self.bytes_written

    def reset(self) -> None:
        """
        Forget the tracked size. The next read of ``size`` stats the file
        again, which after an archive rename finds a fresh, empty path.
        """
        with self.lock:
            self.flush()
            self._initial_size = None
            self._set_written(0)

    def _stat_size(self) -> int:
        # An unreachable path fails again on write, where it is reported
        try:
            return os.stat(self.path).st_size
        except OSError:
            return 0

    def _set_written(self, value: int) -> None:
        with self._count_lock:
            self.bytes_written = value

    def _add_written(self, delta: int) -> None:
        with self._count_lock:
            self.bytes_written += delta

    # ==========================================================================
    # WRITING
    # ==========================================================================

    def write(self, line: str) -> None:
        """
        Append one line followed by the platform newline.

        Args:
            line: Rendered log text.
        """
        try:
            payload = (line + os.linesep).encode(self.write_options.encoding, errors="replace")
        except LookupError as e:
            self._emit_error(e)
            return

        with self.lock:
            # Queued bytes count immediately so rotation checks see them
            if self._initial_size is None:
                self._initial_size = self._stat_size()
            self._add_written(len(payload))

            if self.write_async:
                self._enqueue(payload)
            else:
                self._append(payload)

    def flush(self) -> None:
        """Block until every queued line reached the disk."""
        listener = self._listener
        if self._queue is not None and listener is not None and listener._thread is not None:
            self._queue.join()

    def _append(self, payload: bytes) -> None:
        with self._io_lock:
            try:
                fd = os.open(self.path, self.write_options.open_flags(), self.write_options.mode)
                with os.fdopen(fd, "wb") as f:
                    f.write(payload)
            except OSError as e:
                self._add_written(-len(payload))
                self._emit_error(e)

    def _enqueue(self, payload: bytes) -> None:
        if self._listener is None or self._listener._thread is None:
            self._start_listener()
        self._queue.put_nowait(logging.makeLogRecord({"msg": payload}))

    def _start_listener(self) -> None:
        self._queue = queue.Queue(-1)
        self._listener = QueueListener(self._queue, _PayloadWriter(self))
        self._listener.start()
        atexit.register(self.close)
        logger.debug(f"Handle: async writer started for {self.path}")

    def close(self) -> None:
        """Flush and stop the background writer, if any."""
        listener = self._listener
        if listener is None:
            return
        try:
            if listener._thread is not None:
                listener.stop()
        except RuntimeError as e:
            logger.debug(f"Handle: writer for {self.path} already stopped: {e}")

    # ==========================================================================
    # TRUNCATION
    # ==========================================================================

    def crop(self, bytes_after: int) -> None:
        """
        Keep only the trailing ``bytes_after`` bytes of the file.

        A marker line leads the kept text when it fits. The cut never starts
        inside a UTF-8 multi-byte sequence, so the result may be slightly
        shorter than requested but never longer.
        """
        with self.lock:
            self.flush()
            with self._io_lock:
                try:
                    marker = (CROP_MARKER + os.linesep).encode(self.write_options.encoding)
                    budget = max(int(bytes_after), 0)
                    keep = budget - len(marker) if budget > len(marker) else budget

                    tail = self._read_tail(keep)
                    content = marker + tail if budget > len(marker) else tail

                    with open(self.path, "wb") as f:
                        f.write(content)

                    self._initial_size = len(content)
                    self._set_written(0)
                    logger.debug(f"Handle: cropped {self.path} to {len(content)} bytes")
                except OSError as e:
                    self._emit_error(OSError(f"Couldn't crop file {self.path}. {e}"))

    def _read_tail(self, count: int) -> bytes:
        if count <= 0:
            return b""
        with open(self.path, "rb") as f:
            f.seek(0, os.SEEK_END)
            end = f.tell()
            f.seek(max(end - count, 0))
            data = f.read()

        # Skip UTF-8 continuation bytes left over from the cut
        start = 0
        while start < len(data) and (data[start] & 0xC0) == 0x80:
            start += 1
        return data[start:]

    def clear(self) -> None:
        """Empty the file and zero the tracked size."""
        with self.lock:
            self.flush()
            with self._io_lock:
                try:
                    with open(self.path, "wb"):
                        pass
                    self._initial_size = 0
                    self._set_written(0)
                except OSError as e:
                    self._emit_error(e)

    # ==========================================================================
    # ERROR REPORTING
    # ==========================================================================

    def _emit_error(self, error: BaseException) -> None:
        if self._on_error is None:
            logger.warning(f"Handle: unreported failure on {self.path}: {error}")
            return
        try:
            self._on_error(error, self)
        except Exception as e:
            logger.debug(f"Handle: error listener failed: {e}")
