from __future__ import annotations

"""
Log Rotation Policy.

Archives an oversized log by renaming it next to itself with an ``.old``
marker before the extension. Only one archive generation exists: a later
rotation replaces it. When the rename is impossible, the live file is
cropped instead so it can never grow without bound.
"""

import logging
import os
from typing import Callable, Optional

from logdispatch.core.files.handle import FileHandle
from logdispatch.domain.constants import ARCHIVE_SUFFIX, MAX_CROP_BYTES

logger = logging.getLogger(__name__)

Reporter = Callable[[str, Optional[BaseException]], None]


def archive_path(path: str) -> str:
    """
    Compute the archive location for a log path.

    Example: ``/var/log/app/main.log`` -> ``/var/log/app/main.old.log``.
    """
    directory, file_name = os.path.split(path)
    stem, ext = os.path.splitext(file_name)
    return os.path.join(directory, f"{stem}{ARCHIVE_SUFFIX}{ext}")


def crop_limit(max_size: int) -> int:
    """Bytes kept by the crop fallback for a given rotation threshold."""
    return min(max_size // 4, MAX_CROP_BYTES)


class RotationPolicy:
    """
    Size-bound archival of a file handle.

    Args:
        max_size: Rotation threshold in bytes, used to size the crop fallback.
        report: Receives ``(message, error)`` when the rename fails.
    """

    def __init__(self, max_size: int, report: Optional[Reporter] = None) -> None:
        self.max_size = max_size
        self._report = report

    def archive_log(self, handle: FileHandle) -> bool:
        """
        Move the current file aside, or crop it when that fails.

        The caller resets the handle afterwards so that its size is read
        again from the (new or cropped) file.

        Returns:
            bool: True when the file was renamed to its archive path.
        """
        handle.flush()
        old_path = handle.path
        new_path = archive_path(old_path)

        try:
            os.replace(old_path, new_path)
            logger.debug(f"Rotation: archived {old_path} -> {new_path}")
            return True
        except OSError as e:
            self._notify("Could not rotate log", e)

        try:
            handle.crop(crop_limit(self.max_size))
        except Exception as e:
            logger.debug(f"Rotation: crop fallback failed for {old_path}: {e}")
        return False

    def _notify(self, message: str, error: Optional[BaseException]) -> None:
        if self._report is None:
            logger.warning(f"Rotation: {message}: {error}")
            return
        try:
            self._report(message, error)
        except Exception as e:
            logger.debug(f"Rotation: reporter failed: {e}")
