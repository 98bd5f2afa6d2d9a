# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Post-processing of successful compiler output."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from ..core.models import Diagnostic, ValidationResult
from ..filesystem import RetryPolicy, write_text_retry
from ..interfaces.collaborators import CompileLogger
from ..tools.base import CompilerTool


async def apply_post_processing(
    validation: ValidationResult,
    source: Path,
    target: Path | None,
    *,
    tool: CompilerTool,
    logger: CompileLogger,
    retry_policy: RetryPolicy,
) -> ValidationResult:
    """Run the tool's post-processor over successful output.

    Output the hook returns unchanged is left alone. Changed output is written
    back to ``target`` and replaces the result text; a write that still fails
    after retries turns the verdict into a failure.

    Args:
        validation: Verdict produced by the validator.
        source: Source file that was compiled.
        target: Output file holding the compiled text.
        tool: Tool providing the post-processing hook.
        logger: Sink for write failures.
        retry_policy: Bounds for rewriting ``target``.

    Returns:
        ValidationResult: The verdict carrying the final result text.
    """

    if not validation.is_success or validation.result_text is None or target is None:
        return validation
    renewed = await tool.post_process(validation.result_text, source, target)
    if renewed == validation.result_text:
        return validation
    try:
        await write_text_retry(target, renewed, policy=retry_policy)
    except OSError as exc:
        message = f"Unable to write post-processed output: {exc}"
        logger.log(f"{tool.capabilities.service_name}: {target.name} compilation failed. {message}")
        return ValidationResult.failure(Diagnostic(file_name=str(target), message=message))
    return replace(validation, result_text=renewed)


__all__ = ["apply_post_processing"]
