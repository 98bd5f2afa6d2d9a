# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests covering the regex and JSON error parsers."""

from __future__ import annotations

import json
import re

import pytest

from tests.helpers.fakes import ERROR_PATTERN, RecordingLogger
from xcompile.core.models import Diagnostic, ToolCapabilities
from xcompile.parsers import (
    JsonErrorParser,
    ParseContext,
    RegexErrorParser,
    decode_diagnostics,
    default_error_parser,
)


@pytest.fixture
def context(logger: RecordingLogger) -> ParseContext:
    return ParseContext(service_name="FakeLess", logger=logger)


def test_regex_parser_yields_one_diagnostic_per_match(context: ParseContext) -> None:
    text = "site.less:3:5: unexpected token\nsite.less:7: missing semicolon"

    diagnostics = RegexErrorParser(ERROR_PATTERN).parse(text, context=context)

    assert diagnostics == (
        Diagnostic(file_name="site.less", message="unexpected token", line=3, column=5),
        Diagnostic(file_name="site.less", message="missing semicolon", line=7, column=1),
    )


def test_regex_parser_wraps_unmatched_text_and_warns(context: ParseContext, logger: RecordingLogger) -> None:
    diagnostics = RegexErrorParser(ERROR_PATTERN).parse("something exploded", context=context)

    assert diagnostics == (Diagnostic(message="something exploded"),)
    assert diagnostics[0].line == 0
    assert logger.messages == ["FakeLess: unparsable compilation error: something exploded"]


@pytest.mark.parametrize("text", ["", "   \n\t"])
def test_parsers_return_none_for_blank_input(context: ParseContext, logger: RecordingLogger, text: str) -> None:
    assert RegexErrorParser(ERROR_PATTERN).parse(text, context=context) is None
    assert JsonErrorParser().parse(text, context=context) is None
    assert logger.messages == []


def test_regex_parser_requires_line_group() -> None:
    with pytest.raises(ValueError, match="line"):
        RegexErrorParser(re.compile(r"(?P<message>.+)"))


def test_regex_parser_tolerates_missing_optional_groups(context: ParseContext) -> None:
    pattern = re.compile(r"^ERR (?P<line>\d+)$", re.MULTILINE)

    diagnostics = RegexErrorParser(pattern).parse("ERR 12", context=context)

    assert diagnostics == (Diagnostic(file_name="", message="", line=12, column=1),)


def test_json_parser_decodes_records(context: ParseContext) -> None:
    payload = json.dumps(
        [
            {"fileName": "a.ts", "message": "bad type", "line": 4, "column": 2},
            {"FileName": "b.ts", "Message": "unused", "Line": 9},
        ],
    )

    diagnostics = JsonErrorParser().parse(payload, context=context)

    assert diagnostics == (
        Diagnostic(file_name="a.ts", message="bad type", line=4, column=2),
        Diagnostic(file_name="b.ts", message="unused", line=9, column=1),
    )


def test_json_parser_wraps_undecodable_text(context: ParseContext, logger: RecordingLogger) -> None:
    diagnostics = JsonErrorParser().parse("TypeError: boom", context=context)

    assert diagnostics == (Diagnostic(message="TypeError: boom"),)
    assert logger.messages == ["FakeLess parse error: TypeError: boom"]


def test_json_parser_empty_array_returns_empty_tuple(context: ParseContext, logger: RecordingLogger) -> None:
    diagnostics = JsonErrorParser().parse("[]", context=context)

    assert diagnostics == ()
    assert len(logger.messages) == 1


def test_decode_diagnostics_reports_schema_errors() -> None:
    decoded = decode_diagnostics('[{"line": 1}]')

    assert not decoded.ok
    assert decoded.error is not None
    assert "message" in decoded.error


def test_default_parser_follows_capabilities() -> None:
    with_pattern = ToolCapabilities(service_name="Less", target_extension=".css", error_pattern=ERROR_PATTERN)
    without_pattern = ToolCapabilities(service_name="TypeScript", target_extension=".js")

    assert isinstance(default_error_parser(with_pattern), RegexErrorParser)
    assert isinstance(default_error_parser(without_pattern), JsonErrorParser)
