# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Process-wide location of the runtime that hosts compiler entry scripts.

The runtime (for example ``node``) is located once at startup and never
changes afterwards; every compile call reads it without synchronisation.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .errors import RuntimeConfigurationError
from .process_utils import resolve_executable


@dataclass(frozen=True, slots=True)
class RuntimeLocation:
    """Runtime executable and the directory holding tool entry scripts."""

    executable: Path
    resource_dir: Path

    def script(self, entry_script: Path) -> Path:
        """Return ``entry_script`` resolved against :attr:`resource_dir`.

        Args:
            entry_script: Absolute path, or path relative to the resource directory.

        Returns:
            Path: Absolute path of the script handed to the runtime.
        """

        if entry_script.is_absolute():
            return entry_script
        return self.resource_dir / entry_script


_ACTIVE_RUNTIME: RuntimeLocation | None = None


def locate_runtime(executable: str | Path, resource_dir: Path | None = None) -> RuntimeLocation:
    """Build a :class:`RuntimeLocation` for ``executable``.

    Args:
        executable: Absolute path or command name resolved through ``PATH``.
        resource_dir: Directory containing entry scripts. Defaults to the
            current working directory.

    Returns:
        RuntimeLocation: Resolved runtime location.

    Raises:
        RuntimeConfigurationError: If the executable cannot be found.
    """

    try:
        resolved = resolve_executable(executable)
    except FileNotFoundError as exc:
        raise RuntimeConfigurationError(str(exc)) from exc
    base = (resource_dir or Path.cwd()).expanduser().resolve()
    return RuntimeLocation(executable=resolved, resource_dir=base)


def configure_runtime(location: RuntimeLocation) -> RuntimeLocation:
    """Install ``location`` as the process-wide runtime.

    Configuring the same location twice is a no-op; attempting to switch to a
    different runtime raises.

    Raises:
        RuntimeConfigurationError: If another runtime is already configured.
    """

    global _ACTIVE_RUNTIME  # pylint: disable=global-statement
    if _ACTIVE_RUNTIME == location:
        return _ACTIVE_RUNTIME
    if _ACTIVE_RUNTIME is not None:
        raise RuntimeConfigurationError(
            f"runtime already configured as {_ACTIVE_RUNTIME.executable}; refusing to switch to {location.executable}",
        )
    _ACTIVE_RUNTIME = location
    return location


def get_runtime() -> RuntimeLocation:
    """Return the configured runtime.

    Raises:
        RuntimeConfigurationError: If :func:`configure_runtime` was never called.
    """

    if _ACTIVE_RUNTIME is None:
        raise RuntimeConfigurationError("runtime location has not been configured")
    return _ACTIVE_RUNTIME


__all__ = ["RuntimeLocation", "configure_runtime", "get_runtime", "locate_runtime"]
