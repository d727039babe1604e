from __future__ import annotations

"""
Unit tests for the Render Pipeline driver.

Verifies:
1. Left-to-right composition of steps.
2. Fallback to raw rendering when a step fails.
3. Idempotency of the string output chain.
4. The documented end-to-end line layout.
"""

from logdispatch.core.render import steps
from logdispatch.core.render.pipeline import StepResult, render, run_step, stringify_raw
from logdispatch.domain.records import create_record

STRING_CHAIN = [
    steps.remove_styles,
    steps.concat_first_string_elements,
    steps.max_depth_factory(4),
    steps.to_string,
]


def test_steps_compose_left_to_right(make_record):
    record = make_record("info", "a")
    calls = []

    def first(data, rec):
        calls.append("first")
        return data + ["b"]

    def second(data, rec):
        calls.append("second")
        return data + ["c"]

    assert render(record, [first, None, second]) == ["a", "b", "c"]
    assert calls == ["first", "second"]


def test_failing_step_falls_back_to_raw_string(make_record):
    record = make_record("info", "disk", 42)

    def broken(data, rec):
        raise RuntimeError("formatter exploded")

    assert render(record, [steps.remove_styles, broken, steps.to_string]) == "disk 42"


def test_run_step_captures_failure(make_record):
    record = make_record("info")
    result = run_step(lambda data, rec: 1 / 0, ["x"], record)

    assert isinstance(result, StepResult)
    assert result.ok is False
    assert result.value == ["x"]
    assert isinstance(result.error, ZeroDivisionError)


def test_stringify_raw_survives_broken_str(make_record):
    class Unprintable:
        def __str__(self):
            raise ValueError("no")

    record = make_record("info", "x", Unprintable())
    assert stringify_raw(record).startswith("x <")


def test_string_chain_is_idempotent(make_record, fixed_date):
    record = make_record("info", "%cstyled%c", "color: red", "color: unset", "text", {"a": [1, {"b": 2}]})

    once = render(record, STRING_CHAIN)
    twice = render(create_record("info", [once], date=fixed_date), STRING_CHAIN)

    assert once == 'styled text {"a":[1,{"b":2}]}'
    assert twice == once


def test_self_referencing_record_renders_finite_string(make_record):
    node = {}
    node["child"] = {"parent": node}
    record = make_record("info", "tree", node)

    line = render(record, STRING_CHAIN)

    assert line == 'tree {"child":{"parent":"[Circular]"}}'


def test_documented_line_layout(make_record):
    record = make_record("info", "hello", {"a": 1})
    line = render(record, [
        steps.remove_styles,
        steps.custom_formatter_factory("{h}:{i}:{s}.{ms} › {text}"),
        steps.concat_first_string_elements,
        steps.max_depth_factory(4),
        steps.to_string,
    ])

    assert line == '03:04:05.006 › hello {"a":1}'
