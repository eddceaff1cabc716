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

"""Thin wrapper around subprocess for the OS tools SplitNAT calls."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Sequence

from splitnat.core._errors import CommandFailed

logger = logging.getLogger(__name__)


def is_root() -> bool:
    return hasattr(os, 'geteuid') and os.geteuid() == 0


class CommandRunner:
    """Run external commands, optionally through sudo.

    Tests substitute an object with the same ``run`` signature.
    """

    def __init__(self, sudo: bool = False, sudo_path: str = 'sudo') -> None:
        self.sudo = sudo
        self.sudo_path = sudo_path

    def run(
        self,
        cmd: Sequence[str],
        *,
        check: bool = True,
        privileged: bool = False,
        input: str | None = None,
    ) -> subprocess.CompletedProcess:
        argv = list(cmd)
        if privileged and self.sudo:
            argv = [self.sudo_path, *argv]
        logger.debug('Running command: %s', ' '.join(argv))
        try:
            proc = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                input=input,
                check=False,
            )
        except FileNotFoundError as e:
            raise CommandFailed(argv, 127, f'{argv[0]}: command not found') from e
        if check and proc.returncode != 0:
            raise CommandFailed(argv, proc.returncode, proc.stderr)
        return proc

    def output(self, cmd: Sequence[str], **kwargs) -> str:
        return self.run(cmd, **kwargs).stdout
