from __future__ import annotations

"""
Console Transport.

Thin terminal sink. Renders records with the main or renderer chain and
prints them to stdout, or stderr for errors and warnings. It also serves as
the warning sink of the file transport.
"""

import json
import os
import sys
from typing import Any, List, Optional, TextIO, Union

from logdispatch.core.render import steps
from logdispatch.core.render.pipeline import render
from logdispatch.domain.constants import DEFAULT_CONSOLE_DEPTH, DEFAULT_CONSOLE_FORMAT
from logdispatch.domain.records import LogRecord

_STDERR_LEVELS = ("error", "warn")


class ConsoleTransport:
    """
    Terminal transport.

    Attributes:
        level: Most verbose level accepted, or False to disable.
        use_styles: Force ANSI styles on/off; None decides per stream.
        format: Template or callable for the leading text.
    """

    def __init__(self, process_type: str = "main") -> None:
        self.process_type = process_type
        self.level: Union[str, bool, None] = "silly"
        self.use_styles: Optional[bool] = _env_flag("FORCE_STYLES")
        self.format: steps.FormatSpec = DEFAULT_CONSOLE_FORMAT

    def __call__(self, record: LogRecord) -> None:
        self.handle(record)

    def handle(self, record: LogRecord) -> None:
        """Render and print one record."""
        stream = _stream_for(record.level)
        if self.process_type in ("renderer", "worker"):
            output = render(record, [steps.custom_formatter_factory(self.format)])
        else:
            output = self.transform(record, stream)
        _print(output, stream)

    def transform(self, record: LogRecord, stream: Optional[TextIO] = None) -> Any:
        """Apply the main process chain to a record."""
        stream = stream or _stream_for(record.level)
        styled = self.can_use_styles(stream)
        return render(record, [
            steps.custom_formatter_factory(self.format),
            steps.apply_ansi_styles if styled else steps.remove_styles,
            steps.concat_first_string_elements,
            steps.max_depth_factory(DEFAULT_CONSOLE_DEPTH),
            steps.to_json,
        ])

    def can_use_styles(self, stream: Optional[TextIO]) -> bool:
        """Explicit setting wins, otherwise only TTY streams get colours."""
        if self.use_styles is True or self.use_styles is False:
            return self.use_styles
        isatty = getattr(stream, "isatty", None)
        try:
            return bool(isatty and isatty())
        except ValueError:
            return False


def _stream_for(level: str) -> TextIO:
    return sys.stderr if level in _STDERR_LEVELS else sys.stdout


def _print(output: Any, stream: TextIO) -> None:
    items: List[Any] = [output] if isinstance(output, str) else list(output)
    text = " ".join(
        item if isinstance(item, str)
        else json.dumps(item, ensure_ascii=False, separators=(",", ":"), default=str)
        for item in items
    )
    stream.write(text + "\n")
    stream.flush()


def _env_flag(name: str) -> Optional[bool]:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return None
    return raw.strip().lower() not in ("0", "false", "no", "off")
