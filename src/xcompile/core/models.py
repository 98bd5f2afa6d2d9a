# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the compile pipeline."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from re import Pattern

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

MAP_FILE_SUFFIX = ".map"
MIN_INFIX = ".min"


class Diagnostic(BaseModel):
    """Single error reported by a compiler tool, with location and message."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    file_name: str = Field(default="", validation_alias=AliasChoices("file_name", "fileName", "FileName"))
    message: str = Field(validation_alias=AliasChoices("message", "Message"))
    line: int = Field(default=0, validation_alias=AliasChoices("line", "Line"))
    column: int = Field(default=1, validation_alias=AliasChoices("column", "Column"))

    @field_validator("file_name", mode="before")
    @classmethod
    def _coerce_file_name(cls, value: str | Path | None) -> str:
        """Accept paths and ``None`` for the file name.

        Args:
            value: Raw file name emitted by the tool.

        Returns:
            str: File name as text, blank when the tool omitted it.
        """

        if value is None:
            return ""
        return str(value)

    @field_validator("column", mode="before")
    @classmethod
    def _default_column(cls, value: int | str | None) -> int | str:
        """Treat missing or blank columns as the first column.

        Args:
            value: Raw column value emitted by the tool.

        Returns:
            int | str: ``1`` for absent input, otherwise the untouched value.
        """

        if value is None or (isinstance(value, str) and not value.strip()):
            return 1
        return value


class ToolCapabilities(BaseModel):
    """Static, read-only description of what a compiler tool supports."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    service_name: str
    target_extension: str
    generates_source_map: bool = False
    require_matching_file_name: bool = False
    error_pattern: Pattern[str] | None = None
    expects_output_file: bool = True

    @field_validator("error_pattern", mode="before")
    @classmethod
    def _compile_pattern(cls, value: str | Pattern[str] | None) -> Pattern[str] | None:
        """Compile string patterns supplied by configuration.

        Args:
            value: Raw pattern or compiled expression.

        Returns:
            Pattern[str] | None: Compiled expression, or ``None`` when absent.
        """

        if isinstance(value, str):
            return re.compile(value, re.MULTILINE)
        return value

    def accepts_target_name(self, source: Path, target: Path) -> bool:
        """Return whether ``target`` satisfies the matching-name contract.

        Args:
            source: Source file being compiled.
            target: Requested output path.

        Returns:
            bool: ``True`` when the tool can write to ``target``.
        """

        if not self.require_matching_file_name:
            return True
        allowed = {
            f"{source.stem}{self.target_extension}",
            f"{source.stem}{MIN_INFIX}{self.target_extension}",
        }
        return target.name in allowed


def default_map_file(target: Path) -> Path:
    """Return the conventional source-map path for ``target``."""

    return target.with_name(f"{target.name}{MAP_FILE_SUFFIX}")


class CompileOutcome(BaseModel):
    """Final, immutable result of one compile invocation."""

    model_config = ConfigDict(frozen=True)

    source_file_name: Path
    target_file_name: Path | None
    map_file_name: Path | None
    is_success: bool
    result_text: str | None = None
    diagnostics: tuple[Diagnostic, ...] = Field(default_factory=tuple)

    @property
    def first_error_message(self) -> str | None:
        """Return the message of the first diagnostic, when any were reported."""

        return self.diagnostics[0].message if self.diagnostics else None


@dataclass(frozen=True, slots=True)
class ProcessExit:
    """Exit information captured once the external process finished."""

    returncode: int
    timed_out: bool = False

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0 and not self.timed_out


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Verdict produced by the result validator."""

    is_success: bool
    result_text: str | None = None
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)

    @classmethod
    def failure(cls, *diagnostics: Diagnostic) -> ValidationResult:
        return cls(is_success=False, diagnostics=diagnostics)


__all__ = [
    "CompileOutcome",
    "Diagnostic",
    "MAP_FILE_SUFFIX",
    "MIN_INFIX",
    "ProcessExit",
    "ToolCapabilities",
    "ValidationResult",
    "default_map_file",
]
