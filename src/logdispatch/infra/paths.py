from __future__ import annotations

"""
Path Variables.

Resolves the platform-specific directories a log file may be placed in.
Nothing here touches the filesystem; directories are created lazily by
the file registry on first use.
"""

import os
import sys
import tempfile
from dataclasses import dataclass
from typing import Optional

from logdispatch.domain.constants import DEFAULT_FILE_NAMES

# -----------------------------------------------------------------------------
# DATA MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class PathVariables:
    """
    Directory candidates available to a path resolver.

    Attributes:
        app_name: Application identifier used in directory names.
        app_data: Per-user configuration root of the platform.
        home: User home directory.
        library_default_dir: Default log directory for the application.
        library_template: Same directory with ``{app_name}`` left unexpanded.
        temp: System temporary directory.
        user_data: Per-application data directory.
        file_name: Log file name chosen by the transport.
    """
    app_name: str
    app_data: str
    home: str
    library_default_dir: str
    library_template: str
    temp: str
    user_data: str
    file_name: str = DEFAULT_FILE_NAMES["main"]

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def get_path_variables(platform: Optional[str] = None, app_name: Optional[str] = None) -> PathVariables:
    """
    Compute the default log directories for a platform.

    Standards:
    - Linux: $XDG_CONFIG_HOME (or ~/.config)/<app>/logs
    - macOS: ~/Library/Logs/<app>
    - Windows: %APPDATA%/<app>/logs

    Args:
        platform: ``sys.platform`` style identifier, defaults to the current one.
        app_name: Application name, defaults to the running script name.

    Returns:
        PathVariables: Resolved directories.
    """
    platform = platform or sys.platform
    app_name = app_name or get_app_name()
    home = os.path.expanduser("~")
    app_data = _get_app_data(platform, home)

    if platform == "darwin":
        template = os.path.join(home, "Library", "Logs", "{app_name}")
    else:
        template = os.path.join(app_data, "{app_name}", "logs")

    return PathVariables(
        app_name=app_name,
        app_data=app_data,
        home=home,
        library_default_dir=template.replace("{app_name}", app_name),
        library_template=template,
        temp=tempfile.gettempdir(),
        user_data=os.path.join(app_data, app_name),
    )


def get_app_name() -> str:
    """Name of the running program, used when none is configured."""
    script = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else ""
    name = os.path.splitext(script)[0]
    if not name or name in ("-c", "-m", "__main__"):
        return "python"
    return name


def default_file_name(process_type: str) -> str:
    """Log file name for a process role (main.log, renderer.log, worker.log)."""
    return DEFAULT_FILE_NAMES.get(process_type, DEFAULT_FILE_NAMES["main"])

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _get_app_data(platform: str, home: str) -> str:
    if platform == "win32":
        return os.environ.get("APPDATA") or os.path.join(home, "AppData", "Roaming")
    if platform == "darwin":
        return os.path.join(home, "Library", "Application Support")
    return os.environ.get("XDG_CONFIG_HOME") or os.path.join(home, ".config")
