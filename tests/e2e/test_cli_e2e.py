from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Runs the CLI controller in-process for file side effects, and once as a
subprocess (``python -m logdispatch``) to validate the module entry point.
"""

import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import List

import pytest

from logdispatch.core.files.registry import get_default_registry
from logdispatch.infra.logging import _CONFIGURED_FLAG_ATTR
from logdispatch.interface.cli.app import main

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    root = logging.getLogger("logdispatch")
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    if hasattr(root, _CONFIGURED_FLAG_ATTR):
        delattr(root, _CONFIGURED_FLAG_ATTR)


def run_cli(args: List[str]) -> subprocess.CompletedProcess:
    """Execute ``python -m logdispatch`` with ``src`` on PYTHONPATH."""
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    return subprocess.run(
        [sys.executable, "-m", "logdispatch"] + args,
        env=env,
        capture_output=True,
        text=True,
    )


def test_writes_message_to_file(tmp_path, capsys):
    target = tmp_path / "cli.log"

    code = main(["--file", str(target), "--no-console", "--format", "[{level}] {text}", "hello", "world"])

    assert code == 0
    assert target.read_text(encoding="utf-8").splitlines() == ["[info] hello world"]
    assert capsys.readouterr().out == ""


def test_scope_and_level(tmp_path):
    target = tmp_path / "cli.log"

    main(["--file", str(target), "--no-console", "--format", "{level} {scope} {text}",
          "--level", "error", "--scope", "net", "timeout"])

    assert target.read_text(encoding="utf-8").splitlines() == ["error net timeout"]


def test_show_path(tmp_path, capsys):
    target = tmp_path / "cli.log"

    assert main(["--file", str(target), "--show-path"]) == 0
    assert capsys.readouterr().out.strip() == os.path.realpath(str(target))


def test_tail(tmp_path, capsys):
    target = tmp_path / "cli.log"
    target.write_text("a\nb\nc\n", encoding="utf-8")

    main(["--file", str(target), "--tail", "2"])

    assert capsys.readouterr().out == "b\nc\n"


def test_rotate_without_message(tmp_path):
    target = tmp_path / "cli.log"
    target.write_text("old\n", encoding="utf-8")

    assert main(["--file", str(target), "--rotate"]) == 0

    assert (tmp_path / "cli.old.log").read_text(encoding="utf-8") == "old\n"
    assert not target.exists()


def test_missing_message_is_an_error(tmp_path):
    with pytest.raises(SystemExit):
        main(["--file", str(tmp_path / "cli.log")])


def test_module_entry_point(tmp_path):
    target = tmp_path / "sub.log"

    result = run_cli(["--file", str(target), "--format", "{text}", "from", "subprocess"])

    assert result.returncode == 0, result.stderr
    assert target.read_text(encoding="utf-8").splitlines() == ["from subprocess"]
    assert "from subprocess" in result.stdout


def test_repeated_runs_do_not_accumulate_listeners(tmp_path):
    registry = get_default_registry()
    before = registry.listener_count

    for i in range(3):
        main(["--file", str(tmp_path / "cli.log"), "--no-console", f"run {i}"])

    assert registry.listener_count == before
