# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Build executors for tools declared in configuration."""

from __future__ import annotations

from ..config import XCompileConfig
from ..interfaces.collaborators import CompileLogger
from ..logging import ConsoleCompileLogger
from ..runtime import RuntimeLocation, configure_runtime, locate_runtime
from ..vcs import build_version_control
from .executor import CompilerExecutor


def runtime_from_config(config: XCompileConfig) -> RuntimeLocation:
    """Locate the configured runtime and install it process-wide.

    Raises:
        RuntimeConfigurationError: If the executable is missing or a different
            runtime was configured earlier in this process.
    """

    execution = config.execution
    return configure_runtime(locate_runtime(execution.runtime_executable, execution.resource_dir))


def executor_from_config(
    config: XCompileConfig,
    tool_name: str,
    *,
    logger: CompileLogger | None = None,
    runtime: RuntimeLocation | None = None,
) -> CompilerExecutor:
    """Return an executor for the catalog tool ``tool_name``.

    Args:
        config: Loaded configuration.
        tool_name: Key of the tool in ``config.tools``.
        logger: Sink for compile messages; defaults to console warnings.
        runtime: Runtime override; defaults to :func:`runtime_from_config`.

    Returns:
        CompilerExecutor: Executor wired with the configured settings,
        version-control integration and runtime.

    Raises:
        ConfigError: If ``tool_name`` is not configured.
    """

    spec = config.tool(tool_name)
    settings = config.execution
    sink = logger or ConsoleCompileLogger(use_emoji=settings.use_emoji)
    return CompilerExecutor(
        spec.to_tool(),
        runtime=runtime or runtime_from_config(config),
        settings=settings,
        logger=sink,
        version_control=build_version_control(settings.checkout_command, logger=sink),
    )


__all__ = ["executor_from_config", "runtime_from_config"]
