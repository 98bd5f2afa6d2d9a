# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Interface modules describing the collaborators of the compile pipeline.

Import the specific interface modules (e.g. ``xcompile.interfaces.collaborators``)
directly; this package does not re-export concrete implementations.
"""

__all__: tuple[str, ...] = ()
