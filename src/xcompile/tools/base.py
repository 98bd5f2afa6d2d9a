# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Definitions for compiler tools and their customisation hooks."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, TypeAlias, runtime_checkable

from ..core.models import Diagnostic, ToolCapabilities
from ..interfaces.collaborators import CompileLogger
from ..parsers import ErrorParser, ParseContext, default_error_parser

ArgumentBuilder: TypeAlias = Callable[[Path, Path | None], Sequence[str]]
PostProcessor: TypeAlias = Callable[[str, Path, Path], Awaitable[str]]
OutputRelocator: TypeAlias = Callable[[Path, Path], Awaitable[None]]


@runtime_checkable
class CompilerTool(Protocol):
    """Contract implemented by every tool the executor can drive."""

    capabilities: ToolCapabilities
    entry_script: Path

    def build_arguments(self, source: Path, target: Path | None) -> Sequence[str]:
        """Return the tool-specific arguments placed after the entry script.

        Args:
            source: Source file being compiled.
            target: Requested output path, ``None`` when the tool writes no file.

        Returns:
            Sequence[str]: Argument vector; never interpreted by a shell.
        """

        raise NotImplementedError

    def parse_errors(self, text: str, *, logger: CompileLogger) -> tuple[Diagnostic, ...] | None:
        """Convert captured diagnostic text into diagnostics."""

        raise NotImplementedError

    async def post_process(self, text: str, source: Path, target: Path) -> str:
        """Return the final artifact text; returning ``text`` unchanged skips the rewrite."""

        raise NotImplementedError

    async def relocate_output(self, source: Path, target: Path) -> None:
        """Move output written elsewhere (e.g. into a directory) onto ``target``."""

        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class ToolDefinition:
    """Compiler tool assembled from capabilities and pluggable behaviours.

    Only the argument builder is mandatory. The error parser defaults to the
    strategy implied by :attr:`ToolCapabilities.error_pattern`, while post
    processing and output relocation default to no-ops.
    """

    capabilities: ToolCapabilities
    entry_script: Path
    arguments: ArgumentBuilder
    parser: ErrorParser | None = None
    post_processor: PostProcessor | None = None
    relocator: OutputRelocator | None = None

    @property
    def service_name(self) -> str:
        return self.capabilities.service_name

    @property
    def target_extension(self) -> str:
        return self.capabilities.target_extension

    @property
    def generates_source_map(self) -> bool:
        return self.capabilities.generates_source_map

    @property
    def require_matching_file_name(self) -> bool:
        return self.capabilities.require_matching_file_name

    def build_arguments(self, source: Path, target: Path | None) -> Sequence[str]:
        return tuple(self.arguments(source, target))

    def parse_errors(self, text: str, *, logger: CompileLogger) -> tuple[Diagnostic, ...] | None:
        parser = self.parser or default_error_parser(self.capabilities)
        return parser.parse(text, context=ParseContext(service_name=self.service_name, logger=logger))

    async def post_process(self, text: str, source: Path, target: Path) -> str:
        if self.post_processor is None:
            return text
        return await self.post_processor(text, source, target)

    async def relocate_output(self, source: Path, target: Path) -> None:
        if self.relocator is not None:
            await self.relocator(source, target)


__all__ = [
    "ArgumentBuilder",
    "CompilerTool",
    "OutputRelocator",
    "PostProcessor",
    "ToolDefinition",
]
