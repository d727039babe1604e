from __future__ import annotations

"""
Render Pipeline Driver.

Folds an ordered list of pure steps over a record's data. Each step runs
inside a result wrapper so that a failing formatter degrades to a plain
string rendering instead of raising into application code.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

from logdispatch.domain.records import LogRecord

logger = logging.getLogger(__name__)

Step = Callable[[Any, LogRecord], Any]

# -----------------------------------------------------------------------------
# STEP RESULT
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class StepResult:
    """
    Outcome of a single pipeline step.

    Attributes:
        ok: True when the step returned normally.
        value: The step output (or the untouched input on failure).
        error: The captured exception when ok is False.
    """
    ok: bool
    value: Any
    error: Optional[BaseException] = None


def run_step(step: Step, data: Any, record: LogRecord) -> StepResult:
    """Execute one step and capture its outcome."""
    try:
        return StepResult(ok=True, value=step(data, record))
    except Exception as e:
        return StepResult(ok=False, value=data, error=e)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render(record: LogRecord, steps: Sequence[Optional[Step]]) -> Any:
    """
    Transform a record through the given steps, left to right.

    The first step receives a list copy of the record data. None entries
    are skipped so callers can build chains with conditional steps.

    Args:
        record: The record to render.
        steps: Ordered step functions ``(data, record) -> data``.

    Returns:
        Any: Output of the last step, or the raw string rendering of the
        record if any step failed.
    """
    data: Any = list(record.data)

    for step in steps:
        if step is None:
            continue

        result = run_step(step, data, record)
        if not result.ok:
            name = getattr(step, "__name__", repr(step))
            logger.debug(f"Pipeline: step '{name}' failed ({result.error!r}). Using raw rendering.")
            return stringify_raw(record)
        data = result.value

    return data


def stringify_raw(record: LogRecord) -> str:
    """Best-effort conversion of the record data to a single line."""
    parts: List[str] = []
    for item in record.data:
        try:
            parts.append(item if isinstance(item, str) else str(item))
        except Exception:
            parts.append(object.__repr__(item))
    return " ".join(parts)
