# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Compiler tool definitions, catalog specifications and built-in hooks."""

from __future__ import annotations

from .base import ArgumentBuilder, CompilerTool, OutputRelocator, PostProcessor, ToolDefinition
from .catalog import DirectoryOutputRelocator, TemplateArguments, ToolSpec

__all__ = [
    "ArgumentBuilder",
    "CompilerTool",
    "DirectoryOutputRelocator",
    "OutputRelocator",
    "PostProcessor",
    "TemplateArguments",
    "ToolDefinition",
    "ToolSpec",
]
