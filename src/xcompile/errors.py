# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy raised by the compile pipeline."""

from __future__ import annotations

from collections.abc import Sequence


class XCompileError(Exception):
    """Base class for errors surfaced to callers of the compile pipeline."""


class InvalidCompileRequestError(XCompileError, ValueError):
    """Raised when a compile request violates the tool's naming contract."""

    def __init__(self, service_name: str, target_file_name: str) -> None:
        """Initialise the error for ``service_name`` and the rejected target.

        Args:
            service_name: Human-readable name of the tool rejecting the request.
            target_file_name: Target path that failed the matching-name check.
        """

        super().__init__(
            f"{service_name} cannot compile to a targetFileName with a different name. "
            "Only the containing directory can be different.",
        )
        self.service_name = service_name
        self.target_file_name = target_file_name


class ToolLaunchError(XCompileError):
    """Raised when the external runtime could not be spawned at all."""

    def __init__(self, command: Sequence[str], reason: str) -> None:
        super().__init__(f"Unable to launch '{command[0]}': {reason}")
        self.command = tuple(command)
        self.reason = reason


class RuntimeConfigurationError(XCompileError):
    """Raised when the process-wide runtime location is missing or conflicting."""


__all__ = [
    "InvalidCompileRequestError",
    "RuntimeConfigurationError",
    "ToolLaunchError",
    "XCompileError",
]
