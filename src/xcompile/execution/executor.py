# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Compile orchestration: one external process per call, typed outcome back."""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Final

from ..config import ExecutionSettings
from ..core.models import CompileOutcome, default_map_file
from ..errors import InvalidCompileRequestError
from ..filesystem import RetryPolicy, delete_file_retry, read_text_retry
from ..interfaces.collaborators import CompileLogger, VersionControl
from ..logging import ConsoleCompileLogger
from ..runtime import RuntimeLocation, get_runtime
from ..tools.base import CompilerTool
from ..vcs import NullVersionControl
from .assembler import assemble_outcome
from .post_processing import apply_post_processing
from .process import ProcessInvocation, build_command, run_process
from .validation import validate_result

LOGGER = logging.getLogger(__name__)

_DIAGNOSTIC_FILE_PREFIX: Final[str] = "xcompile-"
_DIAGNOSTIC_FILE_SUFFIX: Final[str] = ".log"


def _optional_path(value: str | Path | None) -> Path | None:
    """Return ``value`` as an absolute path, or ``None`` when it is unset or blank."""

    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return Path(value).absolute()


class CompilerExecutor:
    """Drive a :class:`~xcompile.tools.base.CompilerTool` as an external process.

    Each :meth:`compile` call is independent: it owns its temporary diagnostic
    file and shares nothing mutable with concurrent calls. Overlapping compiles
    of the same target are not synchronised.
    """

    def __init__(
        self,
        tool: CompilerTool,
        *,
        runtime: RuntimeLocation | None = None,
        settings: ExecutionSettings | None = None,
        logger: CompileLogger | None = None,
        version_control: VersionControl | None = None,
    ) -> None:
        """Bind the executor to ``tool`` and its collaborators.

        Args:
            tool: Tool to invoke.
            runtime: Runtime hosting the entry script. Defaults to the
                process-wide runtime from :func:`xcompile.runtime.get_runtime`.
            settings: Timeout and retry settings.
            logger: Sink for failures and parser warnings.
            version_control: Integration asked to check targets out for edit.
        """

        self._tool = tool
        self._runtime = runtime
        self._settings = settings or ExecutionSettings()
        self._logger = logger or ConsoleCompileLogger(use_emoji=self._settings.use_emoji)
        self._version_control = version_control or NullVersionControl()
        self._retry_policy: RetryPolicy = self._settings.retry_policy()

    @property
    def tool(self) -> CompilerTool:
        return self._tool

    @property
    def runtime(self) -> RuntimeLocation:
        return self._runtime or get_runtime()

    async def compile(
        self,
        source_file_name: str | Path,
        target_file_name: str | Path | None,
        *,
        map_file_name: str | Path | None = None,
    ) -> CompileOutcome:
        """Compile ``source_file_name`` into ``target_file_name``.

        Args:
            source_file_name: File handed to the tool.
            target_file_name: File the tool should produce. ``None`` or an
                empty string means the tool writes no output file.
            map_file_name: Source-map path; defaults to ``<target>.map``.

        Returns:
            CompileOutcome: Success with result text, or failure with diagnostics.

        Raises:
            InvalidCompileRequestError: If the tool requires the target to be
                named after the source and it is not. Nothing is spawned.
            ToolLaunchError: If the runtime executable cannot be started.
        """

        source = Path(source_file_name).absolute()
        target = _optional_path(target_file_name)
        capabilities = self._tool.capabilities
        if target is not None and not capabilities.accepts_target_name(source, target):
            raise InvalidCompileRequestError(capabilities.service_name, str(target))

        map_file = _optional_path(map_file_name)
        if map_file is None and target is not None:
            map_file = default_map_file(target)
        runtime = self.runtime

        if target is not None:
            await asyncio.to_thread(self._version_control.checkout_for_edit, target)
        if capabilities.generates_source_map and map_file is not None:
            await asyncio.to_thread(self._version_control.checkout_for_edit, map_file)

        async with self._diagnostic_capture(map_file) as diagnostic_file:
            invocation = ProcessInvocation(
                argv=build_command(runtime, self._tool, source, target),
                cwd=source.parent,
                output_path=diagnostic_file,
                timeout=self._settings.process_timeout,
            )
            process_exit = await run_process(invocation)
            if target is not None:
                await self._relocate_output(source, target)
            diagnostic_text = await self._read_diagnostics(diagnostic_file)
            validation = await validate_result(
                process_exit,
                target,
                diagnostic_text,
                tool=self._tool,
                logger=self._logger,
                retry_policy=self._retry_policy,
            )
            validation = await apply_post_processing(
                validation,
                source,
                target,
                tool=self._tool,
                logger=self._logger,
                retry_policy=self._retry_policy,
            )

        return assemble_outcome(
            validation,
            source=source,
            target=target,
            map_file=map_file,
            service_name=capabilities.service_name,
            logger=self._logger,
        )

    @asynccontextmanager
    async def _diagnostic_capture(self, map_file: Path | None) -> AsyncIterator[Path]:
        """Yield a fresh capture file; always remove it, and the map file when maps are disabled."""

        handle, name = tempfile.mkstemp(prefix=_DIAGNOSTIC_FILE_PREFIX, suffix=_DIAGNOSTIC_FILE_SUFFIX)
        os.close(handle)
        diagnostic_file = Path(name)
        try:
            yield diagnostic_file
        finally:
            await self._discard(diagnostic_file)
            if map_file is not None and not self._tool.capabilities.generates_source_map:
                await self._discard(map_file)

    async def _discard(self, path: Path) -> None:
        try:
            await delete_file_retry(path, policy=self._retry_policy)
        except OSError as exc:
            self._logger.log(f"{self._tool.capabilities.service_name}: unable to delete {path.name}: {exc}")

    async def _relocate_output(self, source: Path, target: Path) -> None:
        try:
            await self._tool.relocate_output(source, target)
        except OSError as exc:
            self._logger.log(f"{self._tool.capabilities.service_name}: unable to move output to {target.name}: {exc}")

    async def _read_diagnostics(self, diagnostic_file: Path) -> str:
        try:
            text = await read_text_retry(diagnostic_file, policy=self._retry_policy, errors="replace")
        except OSError as exc:
            self._logger.log(f"{self._tool.capabilities.service_name}: unable to read compiler output: {exc}")
            return ""
        LOGGER.debug("captured %d characters of compiler output", len(text))
        return text.strip()


__all__ = ["CompilerExecutor"]
