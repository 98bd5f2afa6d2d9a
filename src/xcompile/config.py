# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for the xcompile pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from .filesystem import RetryPolicy
from .tools.catalog import ToolSpec

DEFAULT_PROCESS_TIMEOUT: Final[float] = 120.0


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class ExecutionSettings(BaseModel):
    """Runtime, timeout and retry settings shared by every compile."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    runtime_executable: str = "node"
    resource_dir: Path | None = None
    process_timeout: float | None = Field(default=DEFAULT_PROCESS_TIMEOUT, gt=0)
    io_retry_attempts: int = Field(default=5, ge=1)
    io_retry_initial_wait: float = Field(default=0.05, ge=0)
    io_retry_max_wait: float = Field(default=1.0, ge=0)
    io_retry_deadline: float | None = Field(default=10.0, gt=0)
    checkout_command: tuple[str, ...] = ()
    use_emoji: bool = True

    def retry_policy(self) -> RetryPolicy:
        """Return the filesystem retry policy described by these settings."""

        return RetryPolicy(
            attempts=self.io_retry_attempts,
            initial_wait=self.io_retry_initial_wait,
            max_wait=self.io_retry_max_wait,
            deadline=self.io_retry_deadline,
        )


class XCompileConfig(BaseModel):
    """Top-level configuration document: execution settings plus the tool catalog."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    execution: ExecutionSettings = Field(default_factory=ExecutionSettings)
    tools: dict[str, ToolSpec] = Field(default_factory=dict)

    def tool(self, name: str) -> ToolSpec:
        """Return the tool registered as ``name``.

        Raises:
            ConfigError: If no such tool is configured.
        """

        try:
            return self.tools[name]
        except KeyError as exc:
            known = ", ".join(sorted(self.tools)) or "<none>"
            raise ConfigError(f"Unknown tool '{name}' (configured: {known})") from exc


__all__ = ["ConfigError", "DEFAULT_PROCESS_TIMEOUT", "ExecutionSettings", "XCompileConfig"]
