# Copyright (C) 2026 Linuxfabrik <info@linuxfabrik.ch>
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# On Debian systems, the complete text of the GNU General Public License
# version 2 can be found in /usr/share/common-licenses/GPL-2.
#
# SPDX-License-Identifier: GPL-2.0-or-later

"""BaseCompiler: warning tracking for all pipeline stages."""

from __future__ import annotations

import logging
from enum import IntEnum

logger = logging.getLogger(__name__)


class CompilerStatus(IntEnum):
    """Stage completion status."""

    SUCCESS = 0
    WARNING = 1


class BaseCompiler:
    """Base class providing warning tracking for pipeline stages.

    Fatal conditions raise a ``SplitNatError``; anything the user should
    know about but that does not stop the run is recorded here and later
    embedded as a comment in the generated anchor.
    """

    def __init__(self) -> None:
        self._status: CompilerStatus = CompilerStatus.SUCCESS
        self._warnings: list[str] = []

    @property
    def status(self) -> CompilerStatus:
        return self._status

    def warning(self, msg: str) -> None:
        logger.warning(msg)
        self._warnings.append(msg)
        self._status = CompilerStatus.WARNING

    def get_warnings(self) -> list[str]:
        return list(self._warnings)

    def reset(self) -> None:
        self._status = CompilerStatus.SUCCESS
        self._warnings = []
