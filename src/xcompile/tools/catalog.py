# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Declarative compiler tool specifications loaded from configuration."""

from __future__ import annotations

import re
import string
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.models import ToolCapabilities, default_map_file
from ..filesystem import move_file_retry
from ..parsers import ErrorParser, JsonErrorParser, RegexErrorParser
from ..parsers.base import LINE_GROUP
from .base import ToolDefinition
from .post_processors import POST_PROCESSORS, chain_post_processors

ARGUMENT_PLACEHOLDERS: Final[frozenset[str]] = frozenset(
    {"source", "target", "map", "source_dir", "target_dir", "source_stem"},
)
DEFAULT_ARGUMENTS: Final[tuple[str, ...]] = ("{source}", "{target}")


@dataclass(frozen=True, slots=True)
class TemplateArguments:
    """Expand argument templates such as ``--out={target}`` for each compile.

    Target placeholders expand to empty strings when the compile has no target.
    """

    templates: tuple[str, ...]

    def __call__(self, source: Path, target: Path | None) -> Sequence[str]:
        values = {
            "source": str(source),
            "target": "" if target is None else str(target),
            "map": "" if target is None else str(default_map_file(target)),
            "source_dir": str(source.parent),
            "target_dir": "" if target is None else str(target.parent),
            "source_stem": source.stem,
        }
        return tuple(template.format(**values) for template in self.templates)


@dataclass(frozen=True, slots=True)
class DirectoryOutputRelocator:
    """Move output from ``<target_dir>/<source_stem><ext>`` onto the requested target.

    Some compilers only accept an output directory and name the output after
    the source file; this relocator renames that file to the target path.
    """

    target_extension: str

    async def __call__(self, source: Path, target: Path) -> None:
        produced = target.parent / f"{source.stem}{self.target_extension}"
        if produced == target or not produced.exists():
            return
        await move_file_retry(produced, target)


def _placeholders(template: str) -> set[str]:
    return {field for _, field, _, _ in string.Formatter().parse(template) if field is not None}


class ToolSpec(BaseModel):
    """Configuration describing how to drive one compiler tool."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    service_name: str
    entry_script: Path
    target_extension: str
    arguments: tuple[str, ...] = Field(default=DEFAULT_ARGUMENTS)
    generates_source_map: bool = False
    require_matching_file_name: bool = False
    expects_output_file: bool = True
    error_format: Literal["pattern", "json"] = "pattern"
    error_pattern: str | None = None
    output_directory: bool = False
    post_processors: tuple[str, ...] = ()

    @field_validator("target_extension")
    @classmethod
    def _require_dot(cls, value: str) -> str:
        """Ensure the extension is usable as a file-name suffix.

        Args:
            value: Configured extension.

        Returns:
            str: Extension prefixed with a dot.
        """

        return value if value.startswith(".") else f".{value}"

    @field_validator("arguments")
    @classmethod
    def _check_placeholders(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """Reject argument templates referencing unknown placeholders.

        Args:
            value: Configured argument templates.

        Returns:
            tuple[str, ...]: The validated templates.

        Raises:
            ValueError: If a template uses an unsupported placeholder.
        """

        for template in value:
            unknown = _placeholders(template) - ARGUMENT_PLACEHOLDERS
            if unknown:
                raise ValueError(f"unknown placeholder(s) {sorted(unknown)} in argument {template!r}")
        return value

    @field_validator("post_processors")
    @classmethod
    def _check_post_processors(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        unknown = [name for name in value if name not in POST_PROCESSORS]
        if unknown:
            raise ValueError(f"unknown post-processor(s): {', '.join(unknown)}")
        return value

    @model_validator(mode="after")
    def _check_error_pattern(self) -> ToolSpec:
        """Ensure pattern-based tools declare a usable pattern.

        Returns:
            ToolSpec: The validated specification.

        Raises:
            ValueError: If the pattern is missing, invalid or lacks a ``line`` group.
        """

        if self.error_format != "pattern":
            return self
        if not self.error_pattern:
            raise ValueError("error_pattern is required when error_format is 'pattern'")
        try:
            compiled = re.compile(self.error_pattern, re.MULTILINE)
        except re.error as exc:
            raise ValueError(f"invalid error_pattern: {exc}") from exc
        if LINE_GROUP not in compiled.groupindex:
            raise ValueError(f"error_pattern must define a '{LINE_GROUP}' named group")
        return self

    def capabilities(self) -> ToolCapabilities:
        """Return the capability flags declared by this specification."""

        return ToolCapabilities(
            service_name=self.service_name,
            target_extension=self.target_extension,
            generates_source_map=self.generates_source_map,
            require_matching_file_name=self.require_matching_file_name,
            error_pattern=self.error_pattern if self.error_format == "pattern" else None,
            expects_output_file=self.expects_output_file,
        )

    def to_tool(self) -> ToolDefinition:
        """Build the executable :class:`ToolDefinition` for this specification."""

        capabilities = self.capabilities()
        parser: ErrorParser
        if capabilities.error_pattern is not None:
            parser = RegexErrorParser(capabilities.error_pattern)
        else:
            parser = JsonErrorParser()
        return ToolDefinition(
            capabilities=capabilities,
            entry_script=self.entry_script,
            arguments=TemplateArguments(self.arguments),
            parser=parser,
            post_processor=chain_post_processors(self.post_processors),
            relocator=DirectoryOutputRelocator(self.target_extension) if self.output_directory else None,
        )


__all__ = [
    "ARGUMENT_PLACEHOLDERS",
    "DEFAULT_ARGUMENTS",
    "DirectoryOutputRelocator",
    "TemplateArguments",
    "ToolSpec",
]
