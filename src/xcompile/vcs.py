# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Version-control integrations used to make compile targets writable."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from .interfaces.collaborators import CompileLogger, VersionControl
from .process_utils import run_command

LOGGER = logging.getLogger(__name__)

_CHECKOUT_TIMEOUT_SECONDS: Final[float] = 30.0


class NullVersionControl(VersionControl):
    """No-op integration for working copies that never lock files."""

    def checkout_for_edit(self, path: Path) -> None:
        del path


class CommandVersionControl(VersionControl):
    """Check files out by running a command such as ``p4 edit`` or ``tf checkout``.

    The configured argument vector is invoked with the file path appended.
    Failures are reported to the compile logger and never interrupt a compile.
    """

    def __init__(
        self,
        command: Sequence[str],
        *,
        logger: CompileLogger,
        timeout: float = _CHECKOUT_TIMEOUT_SECONDS,
    ) -> None:
        if not command:
            raise ValueError("checkout command requires at least one argument")
        self._command = tuple(command)
        self._logger = logger
        self._timeout = timeout

    @property
    def command(self) -> tuple[str, ...]:
        return self._command

    def checkout_for_edit(self, path: Path) -> None:
        if not path.exists():
            return
        args = [*self._command, str(path)]
        LOGGER.debug("checking out %s", path)
        try:
            completed = run_command(args, cwd=path.parent, timeout=self._timeout)
        except OSError as exc:
            self._logger.log(f"Unable to check out {path.name}: {exc}")
            return
        if completed.returncode != 0:
            detail = (completed.stderr or completed.stdout or "").strip()
            self._logger.log(f"Checkout of {path.name} failed (exit {completed.returncode}): {detail}")


def build_version_control(command: Sequence[str], *, logger: CompileLogger) -> VersionControl:
    """Return the integration matching the configured checkout ``command``."""

    if not command:
        return NullVersionControl()
    return CommandVersionControl(command, logger=logger)


__all__ = ["CommandVersionControl", "NullVersionControl", "build_version_control"]
