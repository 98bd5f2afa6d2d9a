# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Compile execution pipeline: process launch, validation, post-processing and assembly."""

from __future__ import annotations

from .assembler import assemble_outcome
from .executor import CompilerExecutor
from .factory import executor_from_config, runtime_from_config
from .post_processing import apply_post_processing
from .process import ProcessInvocation, build_command, run_process
from .validation import validate_result

__all__ = [
    "CompilerExecutor",
    "ProcessInvocation",
    "apply_post_processing",
    "assemble_outcome",
    "build_command",
    "executor_from_config",
    "run_process",
    "runtime_from_config",
    "validate_result",
]
