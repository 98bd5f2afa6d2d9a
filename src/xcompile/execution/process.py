# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Asynchronous launch of the external compiler process."""

from __future__ import annotations

import asyncio
import logging
import shlex

# Bandit: subprocess constants only; processes are spawned from an argument
# vector through asyncio and never through a shell.
import subprocess  # nosec B404
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path

from ..core.models import ProcessExit
from ..errors import ToolLaunchError
from ..process_utils import TIMEOUT_EXIT_CODE, hidden_window_flags
from ..runtime import RuntimeLocation
from ..tools.base import CompilerTool

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProcessInvocation:
    """Everything needed to spawn one compiler process."""

    argv: tuple[str, ...]
    cwd: Path
    output_path: Path
    timeout: float | None = None


def build_command(
    runtime: RuntimeLocation,
    tool: CompilerTool,
    source: Path,
    target: Path | None,
) -> tuple[str, ...]:
    """Return ``[runtime, entry_script, *tool_arguments]`` for a compile.

    Args:
        runtime: Runtime hosting the tool's entry script.
        tool: Tool supplying its entry script and arguments.
        source: Source file being compiled.
        target: Requested output path, if any.

    Returns:
        tuple[str, ...]: Argument vector passed verbatim to the process spawn.
    """

    return (
        str(runtime.executable),
        str(runtime.script(tool.entry_script)),
        *(str(arg) for arg in tool.build_arguments(source, target)),
    )


async def _terminate(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        with suppress(ProcessLookupError):
            process.kill()
    await process.wait()


async def run_process(invocation: ProcessInvocation) -> ProcessExit:
    """Spawn the compiler and wait for it without blocking the event loop.

    Standard output and standard error are both written to
    :attr:`ProcessInvocation.output_path`. When the timeout elapses the process
    is killed and :data:`~xcompile.process_utils.TIMEOUT_EXIT_CODE` is reported.
    Cancelling the awaiting task kills the process before re-raising.

    Args:
        invocation: Command, working directory, capture file and timeout.

    Returns:
        ProcessExit: Exit status of the compiler.

    Raises:
        ToolLaunchError: If the runtime executable could not be started.
    """

    LOGGER.debug("running %s in %s", shlex.join(invocation.argv), invocation.cwd)
    with invocation.output_path.open("wb") as sink:
        try:
            process = await asyncio.create_subprocess_exec(
                *invocation.argv,
                cwd=str(invocation.cwd),
                stdin=subprocess.DEVNULL,
                stdout=sink,
                stderr=subprocess.STDOUT,
                creationflags=hidden_window_flags(),
            )
        except OSError as exc:
            raise ToolLaunchError(invocation.argv, str(exc)) from exc
        try:
            returncode = await asyncio.wait_for(process.wait(), timeout=invocation.timeout)
        except TimeoutError:
            await _terminate(process)
            LOGGER.debug("killed %s after %ss", invocation.argv[0], invocation.timeout)
            return ProcessExit(returncode=TIMEOUT_EXIT_CODE, timed_out=True)
        except asyncio.CancelledError:
            await _terminate(process)
            raise
    return ProcessExit(returncode=returncode)


__all__ = ["ProcessInvocation", "build_command", "run_process"]
