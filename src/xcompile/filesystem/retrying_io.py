# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Text file access with bounded retries on transient lock errors.

Editors and freshly exited compiler processes can hold a handle on a file for
a short while after the compile finished. Reads, writes and deletes issued by
the pipeline therefore retry with exponential backoff until either the
attempt budget or the wall-clock deadline of the :class:`RetryPolicy` runs
out, at which point the last error is re-raised to the caller.
"""

from __future__ import annotations

import asyncio
import errno
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Final, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
)

LOGGER = logging.getLogger(__name__)

_TRANSIENT_ERRNOS: Final[frozenset[int]] = frozenset({errno.EACCES, errno.EAGAIN, errno.EBUSY, errno.ETXTBSY})
# ERROR_SHARING_VIOLATION and ERROR_LOCK_VIOLATION
_TRANSIENT_WINERRORS: Final[frozenset[int]] = frozenset({32, 33})
_PERMANENT_ERRORS: Final[tuple[type[OSError], ...]] = (FileNotFoundError, IsADirectoryError, NotADirectoryError)

T = TypeVar("T")


def is_transient_io_error(exc: BaseException) -> bool:
    """Return whether ``exc`` looks like a short-lived lock rather than a real failure.

    Args:
        exc: Exception raised by a filesystem operation.

    Returns:
        bool: ``True`` when retrying the operation may succeed.
    """

    if not isinstance(exc, OSError) or isinstance(exc, _PERMANENT_ERRORS):
        return False
    if isinstance(exc, (PermissionError, BlockingIOError)):
        return True
    if getattr(exc, "winerror", None) in _TRANSIENT_WINERRORS:
        return True
    return exc.errno in _TRANSIENT_ERRNOS


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Bound the retry loop used for every filesystem operation."""

    attempts: int = 5
    initial_wait: float = 0.05
    max_wait: float = 1.0
    deadline: float | None = 10.0

    def retrying(self) -> AsyncRetrying:
        """Return a fresh tenacity controller implementing this policy.

        Returns:
            AsyncRetrying: Controller retrying transient errors and re-raising the last one.
        """

        stop = stop_after_attempt(max(1, self.attempts))
        if self.deadline is not None:
            stop = stop | stop_after_delay(self.deadline)
        return AsyncRetrying(
            retry=retry_if_exception(is_transient_io_error),
            stop=stop,
            wait=wait_exponential(multiplier=self.initial_wait, max=self.max_wait),
            before_sleep=before_sleep_log(LOGGER, logging.DEBUG),
            reraise=True,
        )


DEFAULT_RETRY_POLICY: Final[RetryPolicy] = RetryPolicy()


async def _run_with_retry(operation: Callable[[], T], policy: RetryPolicy) -> T:
    async for attempt in policy.retrying():
        with attempt:
            result = await asyncio.to_thread(operation)
    return result


async def read_text_retry(
    path: Path,
    *,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    errors: str = "strict",
) -> str:
    """Read ``path`` as UTF-8 text, retrying while the file is locked.

    Args:
        path: File to read.
        policy: Retry bounds applied to the read.
        errors: Decoding error handler forwarded to :meth:`Path.read_text`.

    Returns:
        str: File contents.

    Raises:
        FileNotFoundError: If ``path`` does not exist; never retried.
        OSError: If the file stayed locked for the whole retry budget.
    """

    return await _run_with_retry(lambda: path.read_text(encoding="utf-8", errors=errors), policy)


async def write_text_retry(path: Path, text: str, *, policy: RetryPolicy = DEFAULT_RETRY_POLICY) -> None:
    """Write ``text`` to ``path`` as UTF-8, retrying while the file is locked.

    Args:
        path: Destination file, created when missing.
        text: Contents to write.
        policy: Retry bounds applied to the write.
    """

    await _run_with_retry(lambda: path.write_text(text, encoding="utf-8"), policy)


async def delete_file_retry(path: Path, *, policy: RetryPolicy = DEFAULT_RETRY_POLICY) -> None:
    """Delete ``path`` if present, retrying while the file is locked."""

    await _run_with_retry(lambda: path.unlink(missing_ok=True), policy)


async def move_file_retry(source: Path, destination: Path, *, policy: RetryPolicy = DEFAULT_RETRY_POLICY) -> None:
    """Move ``source`` onto ``destination``, replacing it, retrying while either is locked."""

    await _run_with_retry(lambda: os.replace(source, destination), policy)


__all__ = [
    "DEFAULT_RETRY_POLICY",
    "RetryPolicy",
    "delete_file_retry",
    "move_file_retry",
    "is_transient_io_error",
    "read_text_retry",
    "write_text_retry",
]
