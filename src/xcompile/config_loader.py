# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Load xcompile configuration from ``xcompile.toml`` or ``pyproject.toml``."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import ValidationError

from .config import ConfigError, XCompileConfig

CONFIG_FILENAME: Final[str] = "xcompile.toml"
PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "xcompile"


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Unable to read {path}: {exc}") from exc


def _pyproject_section(document: Mapping[str, Any]) -> Mapping[str, Any] | None:
    tool_section = document.get(PYPROJECT_TOOL_KEY)
    if not isinstance(tool_section, Mapping):
        return None
    section = tool_section.get(PYPROJECT_SECTION_KEY)
    return section if isinstance(section, Mapping) else None


def find_config_file(root: Path) -> Path | None:
    """Return the configuration file governing ``root``, if any.

    ``xcompile.toml`` wins over a ``pyproject.toml`` carrying a
    ``[tool.xcompile]`` table.
    """

    dedicated = root / CONFIG_FILENAME
    if dedicated.is_file():
        return dedicated
    pyproject = root / PYPROJECT_FILENAME
    if pyproject.is_file() and _pyproject_section(_read_toml(pyproject)) is not None:
        return pyproject
    return None


def load_config(path: Path | None = None, *, root: Path | None = None) -> XCompileConfig:
    """Load and validate configuration.

    Args:
        path: Explicit configuration file. ``pyproject.toml`` files are read
            from their ``[tool.xcompile]`` table.
        root: Directory searched when ``path`` is omitted. Defaults to the
            current working directory.

    Returns:
        XCompileConfig: Validated configuration; defaults when no file exists.
        A relative ``resource_dir`` is resolved against the file's directory,
        and a missing one defaults to that directory.

    Raises:
        ConfigError: If the file is unreadable, malformed or fails validation.
    """

    if path is None:
        path = find_config_file(root or Path.cwd())
        if path is None:
            return XCompileConfig()
    elif not path.is_file():
        raise ConfigError(f"Configuration file {path} does not exist")

    document: Mapping[str, Any] = _read_toml(path)
    if path.name == PYPROJECT_FILENAME:
        document = _pyproject_section(document) or {}
    try:
        config = XCompileConfig.model_validate(document)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}:\n{exc}") from exc
    return _anchor_resource_dir(config, path.parent.resolve())


def _anchor_resource_dir(config: XCompileConfig, base_dir: Path) -> XCompileConfig:
    resource_dir = config.execution.resource_dir
    if resource_dir is None:
        resource_dir = base_dir
    elif not resource_dir.is_absolute():
        resource_dir = base_dir / resource_dir
    execution = config.execution.model_copy(update={"resource_dir": resource_dir})
    return config.model_copy(update={"execution": execution})


__all__ = ["CONFIG_FILENAME", "PYPROJECT_FILENAME", "find_config_file", "load_config"]
