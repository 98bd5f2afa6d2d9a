# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Filesystem helpers tolerant of transient lock contention."""

from __future__ import annotations

from .retrying_io import RetryPolicy, delete_file_retry, move_file_retry, read_text_retry, write_text_retry

__all__ = ["RetryPolicy", "delete_file_retry", "move_file_retry", "read_text_retry", "write_text_retry"]
