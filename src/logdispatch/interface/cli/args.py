from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates parsed namespaces into
file transport overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

from logdispatch.domain.constants import LEVELS

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the logdispatch CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="logdispatch",
        description="Append a log record through the console and file transports.",
    )

    p.add_argument(
        "message",
        nargs="*",
        help="Words of the log message.",
    )
    p.add_argument(
        "-l", "--level",
        default="info",
        choices=list(LEVELS) + ["log"],
        help="Severity of the record (default: info).",
    )
    p.add_argument(
        "-s", "--scope",
        default=None,
        help="Subsystem name attached to the record.",
    )

    # --- File transport ---
    p.add_argument(
        "-f", "--file",
        dest="file_path",
        default=None,
        help="Explicit log file path (default: platform log directory).",
    )
    p.add_argument(
        "--app-name",
        default=None,
        help="Application name used for the default log directory.",
    )
    p.add_argument(
        "--max-size",
        type=int,
        default=None,
        help="Rotation threshold in bytes, 0 disables rotation.",
    )
    p.add_argument(
        "--format",
        dest="file_format",
        default=None,
        help="Line template, e.g. '{h}:{i}:{s} {level} {text}'.",
    )
    p.add_argument(
        "--async",
        dest="write_async",
        action="store_true",
        help="Queue file writes on a background thread.",
    )
    p.add_argument(
        "--no-console",
        action="store_true",
        help="Do not echo the record to the terminal.",
    )

    # --- Maintenance ---
    p.add_argument(
        "--show-path",
        action="store_true",
        help="Print the resolved log file path and exit.",
    )
    p.add_argument(
        "--tail",
        type=int,
        default=None,
        metavar="N",
        help="Print the last N lines of the log file and exit.",
    )
    p.add_argument(
        "--rotate",
        action="store_true",
        help="Archive the current log file now.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Show internal diagnostics on stderr.",
    )

    return p

# -----------------------------------------------------------------------------
# NAMESPACE MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Map parsed arguments onto file transport attribute overrides.

    Only options explicitly given are returned.
    """
    overrides: Dict[str, Any] = {}

    if args.max_size is not None:
        overrides["max_size"] = max(int(args.max_size), 0)
    if args.file_format:
        overrides["format"] = args.file_format
    if args.write_async:
        overrides["sync"] = False

    return overrides


def message_from_args(words: Optional[List[str]]) -> str:
    """Join the positional words into the message text."""
    return " ".join(words or []).strip()
