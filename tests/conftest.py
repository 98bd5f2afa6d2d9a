# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import sys
import tempfile
from pathlib import Path

import pytest

from tests.helpers.fakes import FAKE_COMPILER, RecordingLogger, RecordingVersionControl
from xcompile.config import ExecutionSettings
from xcompile.runtime import RuntimeLocation


@pytest.fixture(autouse=True)
def _isolated_runtime(monkeypatch: pytest.MonkeyPatch) -> None:
    """Forget any process-wide runtime configured by a previous test."""

    monkeypatch.setattr("xcompile.runtime._ACTIVE_RUNTIME", None)


@pytest.fixture
def capture_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect temporary files into a directory the test can inspect."""

    directory = tmp_path / "tmp"
    directory.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(directory))
    return directory


@pytest.fixture
def resource_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "resources"
    directory.mkdir()
    (directory / "fake_compiler.py").write_text(FAKE_COMPILER, encoding="utf-8")
    return directory


@pytest.fixture
def runtime(resource_dir: Path) -> RuntimeLocation:
    return RuntimeLocation(executable=Path(sys.executable), resource_dir=resource_dir)


@pytest.fixture
def fast_settings() -> ExecutionSettings:
    return ExecutionSettings(
        process_timeout=20.0,
        io_retry_attempts=3,
        io_retry_initial_wait=0.0,
        io_retry_max_wait=0.0,
        use_emoji=False,
    )


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def version_control() -> RecordingVersionControl:
    return RecordingVersionControl()


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    work = tmp_path / "work"
    work.mkdir()
    source = work / "site.less"
    source.write_text("body{color:red}", encoding="utf-8")
    return source
