# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Protocols for the host services the compile pipeline relies on."""

# pylint: disable=too-few-public-methods

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class CompileLogger(Protocol):
    """Fire-and-forget sink for failure and parser warning messages.

    Implementations must tolerate concurrent calls from overlapping compiles.
    """

    def log(self, message: str) -> None:
        """Record ``message``."""

        raise NotImplementedError


@runtime_checkable
class VersionControl(Protocol):
    """Source-control integration asked to make files writable before a compile."""

    def checkout_for_edit(self, path: Path) -> None:
        """Best-effort request to check ``path`` out for editing."""

        raise NotImplementedError
