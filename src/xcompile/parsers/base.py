# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Error parsing strategies turning raw tool output into diagnostics.

Two interchangeable strategies are provided. :class:`RegexErrorParser`
extracts named groups (``fileName``, ``message``, ``line``, ``column``) from
free-text output, while :class:`JsonErrorParser` decodes a JSON array of
diagnostic records. Both share the same fail-soft contract: blank input yields
``None`` and output that cannot be understood is surfaced verbatim as a single
:class:`~xcompile.core.models.Diagnostic` after a warning is logged.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from re import Match, Pattern
from typing import Final, Protocol, runtime_checkable

from pydantic import TypeAdapter, ValidationError

from ..core.models import Diagnostic, ToolCapabilities
from ..interfaces.collaborators import CompileLogger

FILE_NAME_GROUP: Final[str] = "fileName"
MESSAGE_GROUP: Final[str] = "message"
LINE_GROUP: Final[str] = "line"
COLUMN_GROUP: Final[str] = "column"

_DIAGNOSTIC_LIST: Final[TypeAdapter[list[Diagnostic]]] = TypeAdapter(list[Diagnostic])


@dataclass(frozen=True, slots=True)
class ParseContext:
    """Identify the tool whose output is parsed and where warnings go."""

    service_name: str
    logger: CompileLogger


@runtime_checkable
class ErrorParser(Protocol):
    """Strategy converting raw diagnostic text into diagnostics."""

    def parse(self, text: str, *, context: ParseContext) -> tuple[Diagnostic, ...] | None:
        """Return diagnostics extracted from ``text``.

        Args:
            text: Combined stdout/stderr captured from the tool.
            context: Tool identity and warning sink.

        Returns:
            tuple[Diagnostic, ...] | None: Parsed diagnostics, ``None`` for blank input.
        """

        raise NotImplementedError


def wrap_raw_text(text: str) -> tuple[Diagnostic, ...]:
    """Return a single diagnostic carrying ``text`` as its message."""

    return (Diagnostic(message=text),)


def _diagnostic_from_match(match: Match[str]) -> Diagnostic:
    groups: Mapping[str, str | None] = match.groupdict()
    return Diagnostic(
        file_name=groups.get(FILE_NAME_GROUP) or "",
        message=groups.get(MESSAGE_GROUP) or "",
        line=int(groups.get(LINE_GROUP) or 0),
        column=groups.get(COLUMN_GROUP),
    )


@dataclass(frozen=True, slots=True)
class RegexErrorParser(ErrorParser):
    """Extract diagnostics from free text using a pattern with named groups."""

    pattern: Pattern[str]

    def __post_init__(self) -> None:
        if LINE_GROUP not in self.pattern.groupindex:
            raise ValueError(f"error pattern must define a '{LINE_GROUP}' group: {self.pattern.pattern!r}")

    def parse(self, text: str, *, context: ParseContext) -> tuple[Diagnostic, ...] | None:
        if not text or not text.strip():
            return None
        diagnostics = tuple(_diagnostic_from_match(match) for match in self.pattern.finditer(text))
        if not diagnostics:
            context.logger.log(f"{context.service_name}: unparsable compilation error: {text}")
            return wrap_raw_text(text)
        return diagnostics


@dataclass(frozen=True, slots=True)
class DecodedDiagnostics:
    """Outcome of decoding structured output: diagnostics or the decode error."""

    diagnostics: tuple[Diagnostic, ...] | None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.diagnostics is not None


def decode_diagnostics(text: str) -> DecodedDiagnostics:
    """Validate ``text`` against the diagnostic array schema.

    Args:
        text: JSON document expected to hold an array of diagnostic records.

    Returns:
        DecodedDiagnostics: Decoded records, or the validation error when the
        document does not match the schema.
    """

    try:
        records = _DIAGNOSTIC_LIST.validate_json(text)
    except ValidationError as exc:
        return DecodedDiagnostics(diagnostics=None, error=str(exc))
    return DecodedDiagnostics(diagnostics=tuple(records))


@dataclass(frozen=True, slots=True)
class JsonErrorParser(ErrorParser):
    """Decode a machine-readable array of diagnostics emitted by the tool."""

    def parse(self, text: str, *, context: ParseContext) -> tuple[Diagnostic, ...] | None:
        if not text or not text.strip():
            return None
        decoded = decode_diagnostics(text)
        if not decoded.ok:
            context.logger.log(f"{context.service_name} parse error: {text}")
            return wrap_raw_text(text)
        if not decoded.diagnostics:
            context.logger.log(f"{context.service_name} parse error: {text}")
        return decoded.diagnostics


def default_error_parser(capabilities: ToolCapabilities) -> ErrorParser:
    """Select the parsing strategy implied by ``capabilities``.

    Tools declaring an error pattern are parsed with :class:`RegexErrorParser`;
    every other tool is expected to emit structured diagnostics.
    """

    if capabilities.error_pattern is not None:
        return RegexErrorParser(capabilities.error_pattern)
    return JsonErrorParser()


__all__ = [
    "COLUMN_GROUP",
    "DecodedDiagnostics",
    "ErrorParser",
    "FILE_NAME_GROUP",
    "JsonErrorParser",
    "LINE_GROUP",
    "MESSAGE_GROUP",
    "ParseContext",
    "RegexErrorParser",
    "decode_diagnostics",
    "default_error_parser",
    "wrap_raw_text",
]
