# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point for running configured compilers."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated, Final

import typer
from rich import box
from rich.table import Table

from ..config import ConfigError, XCompileConfig
from ..config_loader import load_config
from ..core.models import CompileOutcome
from ..errors import InvalidCompileRequestError, RuntimeConfigurationError, ToolLaunchError
from ..execution import executor_from_config
from ..logging import ConsoleCompileLogger, detect_tty, fail, get_console, info, ok

EXIT_COMPILE_FAILED: Final[int] = 1
EXIT_USAGE_ERROR: Final[int] = 2

CONFIG_HELP: Final[str] = "Configuration file (xcompile.toml or pyproject.toml). Defaults to the current directory."

app = typer.Typer(
    name="xcompile",
    help="Run external compilers and report their diagnostics.",
    no_args_is_help=True,
    add_completion=False,
)


def _load(config_path: Path | None, *, use_emoji: bool) -> XCompileConfig:
    try:
        return load_config(config_path)
    except ConfigError as exc:
        fail(str(exc), use_emoji=use_emoji)
        raise typer.Exit(code=EXIT_USAGE_ERROR) from exc


def _render_diagnostics(outcome: CompileOutcome) -> None:
    table = Table(title="Diagnostics", box=box.SIMPLE, expand=True)
    table.add_column("File", overflow="fold")
    table.add_column("Line", justify="right")
    table.add_column("Col", justify="right")
    table.add_column("Message", overflow="fold")
    for diagnostic in outcome.diagnostics:
        table.add_row(diagnostic.file_name, str(diagnostic.line), str(diagnostic.column), diagnostic.message)
    get_console(color=detect_tty(), emoji=False).print(table)


@app.command("compile")
def compile_command(
    source: Annotated[Path, typer.Argument(help="Source file to compile.", exists=True, dir_okay=False)],
    target: Annotated[Path, typer.Argument(help="Output file to produce.", dir_okay=False)],
    tool: Annotated[str, typer.Option("--tool", "-t", help="Name of the configured tool to run.")],
    config_path: Annotated[Path | None, typer.Option("--config", "-c", help=CONFIG_HELP)] = None,
    map_file: Annotated[Path | None, typer.Option("--map-file", help="Source-map path (default: TARGET.map).")] = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", min=0.001, help="Seconds before the compiler process is stopped."),
    ] = None,
    emoji: Annotated[bool, typer.Option("--emoji/--no-emoji", help="Decorate output with emoji.")] = True,
) -> None:
    """Compile SOURCE into TARGET with a configured tool."""

    config = _load(config_path, use_emoji=emoji)
    if timeout is not None:
        execution = config.execution.model_copy(update={"process_timeout": timeout})
        config = config.model_copy(update={"execution": execution})
    try:
        executor = executor_from_config(config, tool, logger=ConsoleCompileLogger(use_emoji=emoji))
    except (ConfigError, RuntimeConfigurationError) as exc:
        fail(str(exc), use_emoji=emoji)
        raise typer.Exit(code=EXIT_USAGE_ERROR) from exc

    try:
        outcome = asyncio.run(executor.compile(source, target, map_file_name=map_file))
    except (InvalidCompileRequestError, ToolLaunchError) as exc:
        fail(str(exc), use_emoji=emoji)
        raise typer.Exit(code=EXIT_USAGE_ERROR) from exc

    service_name = executor.tool.capabilities.service_name
    if outcome.is_success:
        ok(f"{service_name}: compiled {source.name} -> {target.name}", use_emoji=emoji)
        return
    _render_diagnostics(outcome)
    raise typer.Exit(code=EXIT_COMPILE_FAILED)


@app.command("tools")
def tools_command(
    config_path: Annotated[Path | None, typer.Option("--config", "-c", help=CONFIG_HELP)] = None,
) -> None:
    """List the tools declared in the configuration."""

    config = _load(config_path, use_emoji=False)
    if not config.tools:
        info("No tools configured.", use_emoji=False)
        return
    table = Table(title="Configured tools", box=box.SIMPLE, expand=True)
    table.add_column("Name", style="bold")
    table.add_column("Service")
    table.add_column("Extension")
    table.add_column("Errors")
    table.add_column("Source map")
    table.add_column("Entry script", overflow="fold")
    for name, spec in sorted(config.tools.items()):
        table.add_row(
            name,
            spec.service_name,
            spec.target_extension,
            spec.error_format,
            "yes" if spec.generates_source_map else "no",
            str(spec.entry_script),
        )
    get_console(color=detect_tty(), emoji=False).print(table)


def main() -> None:
    """Console-script entry point."""

    app()


__all__ = ["app", "main"]
