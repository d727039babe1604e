from __future__ import annotations

"""
Standard Render Steps.

Pure transforms shared by the console and file transports. Every step has
the signature ``(data, record) -> data`` where data is the list of log
arguments accumulated so far.
"""

import dataclasses
import json
import re
import traceback
from datetime import date, datetime, time
from typing import Any, Callable, Dict, List, Optional, Union

from logdispatch.domain.records import LogRecord

# -----------------------------------------------------------------------------
# CONSTANTS
# -----------------------------------------------------------------------------
_STYLE_DIRECTIVE = re.compile(r"%[1cdfiOos]")
_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")

ANSI_RESET = "\x1b[0m"
_ANSI_COLORS: Dict[str, str] = {
    "unset": ANSI_RESET,
    "black": "\x1b[30m",
    "red": "\x1b[31m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "blue": "\x1b[34m",
    "magenta": "\x1b[35m",
    "cyan": "\x1b[36m",
    "white": "\x1b[37m",
    "gray": "\x1b[90m",
}

CIRCULAR_MARKER = "[Circular]"

FormatSpec = Union[str, Callable[[LogRecord], Any], None]

# -----------------------------------------------------------------------------
# STYLES
# -----------------------------------------------------------------------------

def remove_styles(data: List[Any], record: LogRecord) -> List[Any]:
    """Drop %c directives with their CSS arguments and any raw ANSI codes."""
    cleaned = _transform_styles(data, lambda style: "")
    return [_ANSI_ESCAPE.sub("", item) if isinstance(item, str) else item for item in cleaned]


def apply_ansi_styles(data: List[Any], record: LogRecord) -> List[Any]:
    """Replace %c directives with the ANSI colour of their CSS argument."""
    return _transform_styles(data, _style_to_ansi, lambda text: text + ANSI_RESET)


def _transform_styles(
        data: List[Any],
        on_style_found: Callable[[Any], str],
        on_style_applied: Optional[Callable[[str], str]] = None,
) -> List[Any]:
    """
    Walk the arguments, resolving each %c directive against the argument
    it consumes. Consumed arguments are removed from the output.
    """
    consumed = set()
    result: List[Any] = []

    for index, item in enumerate(data):
        if index in consumed:
            continue

        if isinstance(item, str):
            value_index = index
            applied = False

            def _replace(match: "re.Match[str]") -> str:
                nonlocal value_index, applied
                value_index += 1
                if match.group(0) != "%c":
                    return match.group(0)
                style = data[value_index] if value_index < len(data) else ""
                consumed.add(value_index)
                applied = True
                return on_style_found(style)

            item = _STYLE_DIRECTIVE.sub(_replace, item)
            if applied and on_style_applied:
                item = on_style_applied(item)

        result.append(item)

    return result


def _style_to_ansi(style: Any) -> str:
    match = re.search(r"color:\s*(\w+)", str(style))
    if not match:
        return ""
    return _ANSI_COLORS.get(match.group(1).lower(), "")

# -----------------------------------------------------------------------------
# TEMPLATE FORMATTER
# -----------------------------------------------------------------------------

def custom_formatter_factory(fmt: FormatSpec) -> Callable[[List[Any], LogRecord], List[Any]]:
    """
    Build a step that expands a format template against the record.

    Args:
        fmt: Template string, a callable receiving the record (with the
            current data) or None to leave data untouched.

    Returns:
        Callable: The formatter step.
    """
    if isinstance(fmt, str):
        def custom_string_formatter(data: List[Any], record: LogRecord) -> List[Any]:
            return format_template(fmt, data, record)
        return custom_string_formatter

    if callable(fmt):
        def custom_function_formatter(data: List[Any], record: LogRecord) -> List[Any]:
            result = fmt(dataclasses.replace(record, data=tuple(data)))
            return list(result) if isinstance(result, (list, tuple)) else [result]
        return custom_function_formatter

    def passthrough_formatter(data: List[Any], record: LogRecord) -> List[Any]:
        return list(data)
    return passthrough_formatter


_TOKEN_PATTERN = re.compile(r"\{(y|m|d|h|i|s|ms|z|level|scope|processType)\}")


def format_template(template: str, data: List[Any], record: LogRecord) -> List[Any]:
    """
    Expand the placeholders of a template.

    When the template holds {text}, the log arguments are spliced in its
    place: ``[prefix, *data, suffix]`` with blank parts dropped. Without it
    the expanded template leads the arguments.
    """
    # Split before expanding so values that contain "{text}" stay literal
    if "{text}" not in template:
        return [_expand_tokens(template, record)] + list(data)

    prefix, _, suffix = template.partition("{text}")
    prefix = _expand_tokens(prefix, record).rstrip()
    suffix = _expand_tokens(suffix, record).lstrip()

    result: List[Any] = [prefix] if prefix else []
    result.extend(data)
    if suffix:
        result.append(suffix)
    return result


def _expand_tokens(template: str, record: LogRecord) -> str:
    d = record.date
    tokens = {
        "y": f"{d.year:04d}",
        "m": f"{d.month:02d}",
        "d": f"{d.day:02d}",
        "h": f"{d.hour:02d}",
        "i": f"{d.minute:02d}",
        "s": f"{d.second:02d}",
        "ms": f"{d.microsecond // 1000:03d}",
        "z": _format_offset(d),
        "level": record.level,
        "scope": record.scope or "",
        "processType": record.process_type,
    }
    # One pass: substituted values are never scanned again
    return _TOKEN_PATTERN.sub(lambda m: tokens[m.group(1)], template)


def _format_offset(d: datetime) -> str:
    offset = d.utcoffset()
    if offset is None:
        offset = d.astimezone().utcoffset()
    minutes = int(offset.total_seconds() // 60) if offset is not None else 0
    sign = "-" if minutes < 0 else "+"
    minutes = abs(minutes)
    return f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"

# -----------------------------------------------------------------------------
# CONCATENATION
# -----------------------------------------------------------------------------

def concat_first_string_elements(data: List[Any], record: LogRecord) -> List[Any]:
    """Merge the leading run of string arguments into one, space separated."""
    result = list(data)
    while len(result) > 1 and isinstance(result[0], str) and isinstance(result[1], str):
        result[0:2] = [f"{result[0]} {result[1]}"]
    return result

# -----------------------------------------------------------------------------
# DEPTH LIMITING
# -----------------------------------------------------------------------------

def max_depth_factory(depth: Optional[int] = None) -> Callable[[List[Any], LogRecord], List[Any]]:
    """
    Build a step that turns arguments into bounded JSON-compatible values.

    Args:
        depth: Maximum nesting to expand. None means unlimited.

    Returns:
        Callable: The depth limiting step.
    """
    def max_depth(data: List[Any], record: LogRecord) -> List[Any]:
        return [limit_depth(item, depth) for item in data]
    return max_depth


def limit_depth(value: Any, depth: Optional[int] = None, _ancestors: frozenset = frozenset()) -> Any:
    """
    Recursively convert a value, collapsing nodes past the depth budget and
    replacing references to an enclosing container with a marker.
    """
    if value is None or isinstance(value, (str, bool, int, float)):
        return value

    if isinstance(value, BaseException):
        return _format_exception(value)

    if isinstance(value, (datetime, date, time)):
        return value.isoformat()

    if isinstance(value, (bytes, bytearray)):
        return repr(bytes(value))

    if id(value) in _ancestors:
        return CIRCULAR_MARKER

    if depth is not None and depth <= 0:
        return f"[{type(value).__name__}]"

    ancestors = _ancestors | {id(value)}
    next_depth = None if depth is None else depth - 1

    if isinstance(value, dict):
        return {str(k): limit_depth(v, next_depth, ancestors) for k, v in value.items()}

    if isinstance(value, (list, tuple, set, frozenset)):
        return [limit_depth(v, next_depth, ancestors) for v in value]

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: limit_depth(getattr(value, f.name), next_depth, ancestors)
            for f in dataclasses.fields(value)
        }

    attrs = getattr(value, "__dict__", None)
    if isinstance(attrs, dict) and not isinstance(value, type):
        return {
            k: limit_depth(v, next_depth, ancestors)
            for k, v in attrs.items()
            if not k.startswith("_")
        }

    return str(value)


def _format_exception(error: BaseException) -> str:
    if error.__traceback__ is not None:
        lines = traceback.format_exception(type(error), error, error.__traceback__)
        return "".join(lines).rstrip()
    return f"{type(error).__name__}: {error}"

# -----------------------------------------------------------------------------
# FINAL SERIALIZATION
# -----------------------------------------------------------------------------

def to_string(data: Any, record: LogRecord) -> str:
    """Join the arguments into one line, non-strings as compact JSON."""
    if isinstance(data, str):
        return data
    return " ".join(_serialize(item) for item in data)


def to_json(data: Any, record: LogRecord) -> List[Any]:
    """Keep the argument list, forcing non-string items to plain JSON values."""
    if isinstance(data, str):
        return [data]
    return [item if isinstance(item, str) else json.loads(_serialize(item)) for item in data]


def _serialize(item: Any) -> str:
    if isinstance(item, str):
        return item
    return json.dumps(item, ensure_ascii=False, separators=(",", ":"), default=str)
