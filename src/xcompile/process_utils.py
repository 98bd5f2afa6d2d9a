# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shell-free helpers for resolving and running auxiliary commands."""

from __future__ import annotations

import os
import shutil

# Bandit: subprocess usage is intentional; arguments are always passed as a
# vector and ``shell=True`` is never used.
import subprocess  # nosec B404
from collections.abc import Sequence
from pathlib import Path
from typing import Final

TIMEOUT_EXIT_CODE: Final[int] = 124


def resolve_executable(name: str | Path) -> Path:
    """Return an absolute path for the executable ``name``.

    Args:
        name: Absolute path, relative path or bare command name looked up on ``PATH``.

    Returns:
        Path: Absolute path to the executable.

    Raises:
        FileNotFoundError: If ``name`` cannot be located.
    """

    candidate = Path(name)
    if candidate.is_absolute():
        if not candidate.exists():
            raise FileNotFoundError(f"Executable '{candidate}' does not exist")
        return candidate
    resolved = shutil.which(str(name))
    if resolved is None:
        raise FileNotFoundError(f"Executable '{name}' was not found on PATH")
    return Path(resolved)


def hidden_window_flags() -> int:
    """Return ``creationflags`` that keep a console window from appearing on Windows."""

    if os.name == "nt":
        return subprocess.CREATE_NO_WINDOW
    return 0


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    timeout: float | None = None,
) -> subprocess.CompletedProcess[str]:
    """Execute *args* after resolving the executable, capturing text output.

    A timeout is reported as a completed process with exit status
    :data:`TIMEOUT_EXIT_CODE` instead of an exception.
    """

    if not args:
        raise ValueError("subprocess command requires at least one argument")
    head, *rest = args
    normalized = [str(resolve_executable(head)), *rest]
    try:
        # Bandit: commands come from validated configuration and bypass the shell.
        return subprocess.run(  # nosec B603
            normalized,
            cwd=str(cwd) if cwd is not None else None,
            check=False,
            capture_output=True,
            text=True,
            timeout=timeout,
            stdin=subprocess.DEVNULL,
            creationflags=hidden_window_flags(),
        )
    except subprocess.TimeoutExpired:
        return subprocess.CompletedProcess(
            args=normalized,
            returncode=TIMEOUT_EXIT_CODE,
            stdout="",
            stderr=f"Command timed out after {timeout:.1f}s",
        )


__all__ = ["TIMEOUT_EXIT_CODE", "hidden_window_flags", "resolve_executable", "run_command"]
