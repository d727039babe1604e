from __future__ import annotations

"""
Command Line Interface Application Controller.

Builds a logger from command-line options and either writes one record or
performs a maintenance action (show path, tail, rotate) on the log file.
"""

import argparse
import os
import sys
from typing import List, Optional

from logdispatch.infra.logging import LoggingConfig, configure_logging, get_logger, get_recent_logs
from logdispatch.interface.cli import args as cli_args
from logdispatch.logger import Logger

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 for success, non-zero for failure).
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    configure_logging(LoggingConfig(level="DEBUG" if args.debug else "WARNING"), force=True)

    log = Logger(app_name=args.app_name)
    try:
        return _run(parser, args, log)
    finally:
        log.close()


def _run(parser: argparse.ArgumentParser, args: argparse.Namespace, log: Logger) -> int:
    """Apply option overrides, then run the requested action."""
    file_transport = log.transports["file"]

    for name, value in cli_args.args_to_overrides(args).items():
        setattr(file_transport, name, value)

    if args.file_path:
        path = os.path.abspath(os.path.expanduser(args.file_path))
        file_transport.resolve_path = lambda variables, record=None: path

    if args.no_console:
        log.transports["console"] = None

    handle = file_transport.get_file()
    logger.debug(f"CLI: log file resolved to {handle.path}")

    if args.show_path:
        print(handle.path)
        return 0

    if args.tail is not None:
        sys.stdout.write(get_recent_logs(handle.path, args.tail))
        return 0

    if args.rotate:
        with handle.lock:
            if handle.size > 0:
                file_transport.archive_log(handle)
                handle.reset()
            else:
                logger.debug("CLI: nothing to rotate")

    message = cli_args.message_from_args(args.message)
    if not message:
        if args.rotate:
            return 0
        parser.error("a message is required")

    if args.scope:
        getattr(log.scope(args.scope), args.level)(message)
    else:
        getattr(log, args.level)(message)

    handle.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
