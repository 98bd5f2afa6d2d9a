# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Interpretation of a finished compiler process into a success or failure verdict."""

from __future__ import annotations

from pathlib import Path

from ..core.models import Diagnostic, ProcessExit, ValidationResult
from ..filesystem import RetryPolicy, read_text_retry
from ..interfaces.collaborators import CompileLogger
from ..tools.base import CompilerTool


def _output_missing(target: Path, detail: str, *, service_name: str, logger: CompileLogger) -> ValidationResult:
    logger.log(f"{service_name}: {target.name} compilation failed. {detail}")
    return ValidationResult.failure(Diagnostic(file_name=str(target), message=detail))


def _failure_diagnostics(
    process_exit: ProcessExit,
    diagnostic_text: str,
    *,
    tool: CompilerTool,
    logger: CompileLogger,
) -> tuple[Diagnostic, ...]:
    service_name = tool.capabilities.service_name
    parsed = tool.parse_errors(diagnostic_text, logger=logger) or ()
    if process_exit.timed_out:
        return (Diagnostic(message=f"{service_name} did not finish before the timeout and was stopped"), *parsed)
    if parsed:
        return tuple(parsed)
    return (Diagnostic(message=f"{service_name} exited with code {process_exit.returncode}"),)


async def validate_result(
    process_exit: ProcessExit,
    target: Path | None,
    diagnostic_text: str,
    *,
    tool: CompilerTool,
    logger: CompileLogger,
    retry_policy: RetryPolicy,
) -> ValidationResult:
    """Decide whether a compile succeeded and collect its output or diagnostics.

    A zero exit status is a success. The target file, when present, is read
    as the result text. A missing target is a failure unless the tool reports
    success through its exit status alone
    (:attr:`~xcompile.core.models.ToolCapabilities.expects_output_file`).
    A nonzero status is a failure whose diagnostics come from the tool's
    error parser; when the parser yields nothing a diagnostic naming the exit
    status is produced so failures never come back without diagnostics.

    Args:
        process_exit: Exit information of the compiler process.
        target: Output file requested from the tool, if any.
        diagnostic_text: Stripped stdout/stderr captured from the tool.
        tool: Tool whose capabilities and parser apply.
        logger: Sink for failure messages and parser warnings.
        retry_policy: Bounds for reading the target file.

    Returns:
        ValidationResult: Verdict with result text or diagnostics.
    """

    if not process_exit.succeeded:
        return ValidationResult.failure(*_failure_diagnostics(process_exit, diagnostic_text, tool=tool, logger=logger))

    capabilities = tool.capabilities
    if target is None:
        return ValidationResult(is_success=True)
    if not target.exists():
        if not capabilities.expects_output_file:
            return ValidationResult(is_success=True)
        return _output_missing(
            target,
            f"Expected output file {target} was not created.",
            service_name=capabilities.service_name,
            logger=logger,
        )
    try:
        result_text = await read_text_retry(target, policy=retry_policy)
    except FileNotFoundError as exc:
        return _output_missing(target, str(exc), service_name=capabilities.service_name, logger=logger)
    except UnicodeDecodeError as exc:
        return _output_missing(
            target,
            f"Output file is not valid UTF-8: {exc}",
            service_name=capabilities.service_name,
            logger=logger,
        )
    except OSError as exc:
        return _output_missing(
            target,
            f"Unable to read output file: {exc}",
            service_name=capabilities.service_name,
            logger=logger,
        )
    return ValidationResult(is_success=True, result_text=result_text)


__all__ = ["validate_result"]
