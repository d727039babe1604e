from __future__ import annotations

"""
Log Record Domain Model.

Defines the immutable record handed by the logging facade to every
transport, and the level ranking used for per-transport filtering.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Optional, Tuple, Union

from logdispatch.domain.constants import LEVEL_ALIASES, LEVELS

# -----------------------------------------------------------------------------
# CORE DATA MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class LogRecord:
    """
    Single log event as emitted by application code.

    Attributes:
        level: Severity name (error, warn, info, verbose, debug, silly, log).
        data: Positional arguments passed to the log call.
        date: Local timestamp of the call.
        process_type: Role of the emitting process (main, renderer, worker).
        scope: Optional logical subsystem name.
    """
    level: str
    data: Tuple[Any, ...] = ()
    date: datetime = field(default_factory=datetime.now)
    process_type: str = "main"
    scope: Optional[str] = None


def create_record(
        level: str,
        data: Iterable[Any] = (),
        date: Optional[datetime] = None,
        process_type: str = "main",
        scope: Optional[str] = None,
) -> LogRecord:
    """
    Build a record, defaulting the timestamp to now.

    Args:
        level: Severity name.
        data: Log call arguments, kept in order.
        date: Explicit timestamp (tests, replays).
        process_type: Emitting process role.
        scope: Optional subsystem name.

    Returns:
        LogRecord: The immutable record.
    """
    return LogRecord(
        level=level,
        data=tuple(data),
        date=date or datetime.now(),
        process_type=process_type,
        scope=scope,
    )

# -----------------------------------------------------------------------------
# LEVEL FILTERING
# -----------------------------------------------------------------------------

def level_rank(level: str) -> int:
    """Position of a level in the severity order (0 is most severe)."""
    name = LEVEL_ALIASES.get(level, level)
    try:
        return LEVELS.index(name)
    except ValueError:
        return LEVELS.index("info")


def is_level_enabled(record_level: str, transport_level: Union[str, bool, None]) -> bool:
    """
    Decide whether a transport configured at a level accepts a record.

    A transport level of False or None disables the transport entirely.
    """
    if transport_level is None or transport_level is False:
        return False
    if transport_level is True:
        return True
    return level_rank(record_level) <= level_rank(str(transport_level))
