# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for runtime location, version control and helper processes."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from tests.helpers.fakes import RecordingLogger
from xcompile.errors import RuntimeConfigurationError
from xcompile.process_utils import TIMEOUT_EXIT_CODE, resolve_executable, run_command
from xcompile.runtime import RuntimeLocation, configure_runtime, get_runtime, locate_runtime
from xcompile.vcs import CommandVersionControl, NullVersionControl, build_version_control


def test_locate_runtime_resolves_executable(tmp_path: Path) -> None:
    location = locate_runtime(sys.executable, tmp_path)

    assert location.executable == Path(sys.executable)
    assert location.resource_dir == tmp_path.resolve()
    assert location.script(Path("less/lessc.js")) == tmp_path.resolve() / "less" / "lessc.js"
    assert location.script(tmp_path / "abs.js") == tmp_path / "abs.js"


def test_locate_runtime_missing_executable(tmp_path: Path) -> None:
    with pytest.raises(RuntimeConfigurationError, match="does not exist"):
        locate_runtime(tmp_path / "missing-node")
    with pytest.raises(RuntimeConfigurationError, match="not found on PATH"):
        locate_runtime("definitely-not-a-runtime-xyz")


def test_runtime_is_configured_once(tmp_path: Path) -> None:
    with pytest.raises(RuntimeConfigurationError, match="not been configured"):
        get_runtime()

    first = RuntimeLocation(executable=Path(sys.executable), resource_dir=tmp_path)
    configure_runtime(first)
    configure_runtime(RuntimeLocation(executable=Path(sys.executable), resource_dir=tmp_path))

    assert get_runtime() is first
    with pytest.raises(RuntimeConfigurationError, match="already configured"):
        configure_runtime(RuntimeLocation(executable=Path(sys.executable), resource_dir=tmp_path / "other"))


def test_resolve_executable_prefers_absolute_path() -> None:
    assert resolve_executable(sys.executable) == Path(sys.executable)


def test_run_command_reports_timeout(tmp_path: Path) -> None:
    completed = run_command([sys.executable, "-c", "import time; time.sleep(5)"], cwd=tmp_path, timeout=0.2)

    assert completed.returncode == TIMEOUT_EXIT_CODE
    assert "timed out" in completed.stderr


def test_build_version_control() -> None:
    logger = RecordingLogger()

    assert isinstance(build_version_control((), logger=logger), NullVersionControl)
    assert isinstance(build_version_control(("p4", "edit"), logger=logger), CommandVersionControl)
    with pytest.raises(ValueError):
        CommandVersionControl((), logger=logger)


def test_command_version_control_runs_checkout(tmp_path: Path) -> None:
    logger = RecordingLogger()
    target = tmp_path / "site.css"
    target.write_text("", encoding="utf-8")
    marker = tmp_path / "checked-out.txt"
    script = f"import pathlib, sys; pathlib.Path({str(marker)!r}).write_text(sys.argv[1])"
    vcs = CommandVersionControl((sys.executable, "-c", script), logger=logger)

    vcs.checkout_for_edit(target)

    assert marker.read_text() == str(target)
    assert logger.messages == []


def test_command_version_control_skips_missing_files(tmp_path: Path) -> None:
    logger = RecordingLogger()
    vcs = CommandVersionControl(("definitely-not-a-vcs-xyz",), logger=logger)

    vcs.checkout_for_edit(tmp_path / "absent.css")

    assert logger.messages == []


def test_command_version_control_logs_failures(tmp_path: Path) -> None:
    logger = RecordingLogger()
    target = tmp_path / "site.css"
    target.write_text("", encoding="utf-8")

    CommandVersionControl((sys.executable, "-c", "import sys; sys.exit('locked')"), logger=logger).checkout_for_edit(
        target,
    )
    CommandVersionControl(("definitely-not-a-vcs-xyz",), logger=logger).checkout_for_edit(target)

    assert logger.messages[0] == "Checkout of site.css failed (exit 1): locked"
    assert logger.messages[1].startswith("Unable to check out site.css:")
