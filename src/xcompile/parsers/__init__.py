# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Error parsing strategies for compiler tool output."""

from __future__ import annotations

from .base import (
    DecodedDiagnostics,
    ErrorParser,
    JsonErrorParser,
    ParseContext,
    RegexErrorParser,
    decode_diagnostics,
    default_error_parser,
    wrap_raw_text,
)

__all__ = [
    "DecodedDiagnostics",
    "ErrorParser",
    "JsonErrorParser",
    "ParseContext",
    "RegexErrorParser",
    "decode_diagnostics",
    "default_error_parser",
    "wrap_raw_text",
]
