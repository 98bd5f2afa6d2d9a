# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Built-in post-processors applied to successful compiler output."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Final

from ..core.models import default_map_file
from .base import PostProcessor

_SOURCE_MAP_MARKER: Final[str] = "sourceMappingURL="
_BLOCK_COMMENT_SUFFIXES: Final[frozenset[str]] = frozenset({".css"})


async def normalize_newlines(text: str, source: Path, target: Path) -> str:
    """Convert CRLF and lone CR line endings to LF."""

    del source, target
    return text.replace("\r\n", "\n").replace("\r", "\n")


async def append_source_map_url(text: str, source: Path, target: Path) -> str:
    """Reference the conventional map file from the end of the compiled output.

    CSS targets receive a block comment, everything else a line comment.
    Output that already carries a ``sourceMappingURL`` is returned untouched.
    """

    del source
    if _SOURCE_MAP_MARKER in text:
        return text
    map_name = default_map_file(target).name
    if target.suffix.lower() in _BLOCK_COMMENT_SUFFIXES:
        comment = f"/*# {_SOURCE_MAP_MARKER}{map_name} */"
    else:
        comment = f"//# {_SOURCE_MAP_MARKER}{map_name}"
    separator = "" if not text or text.endswith("\n") else "\n"
    return f"{text}{separator}{comment}\n"


POST_PROCESSORS: Final[Mapping[str, PostProcessor]] = {
    "normalize-newlines": normalize_newlines,
    "append-source-map-url": append_source_map_url,
}


def chain_post_processors(names: Sequence[str]) -> PostProcessor | None:
    """Compose the named built-in post-processors in order.

    Args:
        names: Keys of :data:`POST_PROCESSORS`.

    Returns:
        PostProcessor | None: Composite hook, or ``None`` when ``names`` is empty.

    Raises:
        KeyError: If a name is not a known post-processor.
    """

    if not names:
        return None
    steps = [POST_PROCESSORS[name] for name in names]

    async def _chained(text: str, source: Path, target: Path) -> str:
        for step in steps:
            text = await step(text, source, target)
        return text

    return _chained


__all__ = ["POST_PROCESSORS", "append_source_map_url", "chain_post_processors", "normalize_newlines"]
