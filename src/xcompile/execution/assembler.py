# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Assembly of the final compile outcome."""

from __future__ import annotations

from pathlib import Path

from ..core.models import CompileOutcome, ValidationResult
from ..interfaces.collaborators import CompileLogger


def assemble_outcome(
    validation: ValidationResult,
    *,
    source: Path,
    target: Path | None,
    map_file: Path | None,
    service_name: str,
    logger: CompileLogger,
) -> CompileOutcome:
    """Combine paths and the validation verdict into a :class:`CompileOutcome`.

    Failures are logged with the tool name, the source file name and, when
    available, the first diagnostic message.
    """

    outcome = CompileOutcome(
        source_file_name=source,
        target_file_name=target,
        map_file_name=map_file,
        is_success=validation.is_success,
        result_text=validation.result_text,
        diagnostics=validation.diagnostics,
    )
    if not outcome.is_success:
        message = f"{service_name}: {source.name} compilation failed"
        if outcome.first_error_message:
            message = f"{message}: {outcome.first_error_message}"
        logger.log(message)
    return outcome


__all__ = ["assemble_outcome"]
