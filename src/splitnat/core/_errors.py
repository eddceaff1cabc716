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

"""Exception hierarchy.

Every pipeline failure is fatal.  Each class carries a one-line message,
a multi-line hint telling the user what to fix before re-running, and
the process exit code the CLI uses for it.
"""

from __future__ import annotations


class SplitNatError(Exception):
    """Base class for all SplitNAT failures."""

    exit_code: int = 1
    default_message: str = 'SplitNAT failed'

    def __init__(self, message: str | None = None, hint: str = '') -> None:
        self.message = message or self.default_message
        self.hint = hint
        super().__init__(self.message)


class ConfigError(SplitNatError):
    default_message = 'Invalid SplitNAT settings'


class CommandFailed(SplitNatError):
    """An OS command exited non-zero where success was required."""

    default_message = 'Command failed'

    def __init__(
        self,
        cmd: list[str],
        returncode: int,
        stderr: str = '',
    ) -> None:
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(
            f"Command '{' '.join(cmd)}' exited with status {returncode}",
            hint=stderr.strip(),
        )


class NoBridgeFound(SplitNatError):
    exit_code = 2
    default_message = 'Cannot find the VM bridge interface'


class NoDefaultRoute(SplitNatError):
    exit_code = 3
    default_message = 'Cannot determine the WAN interface: no default route found'


class NoVPNInterface(SplitNatError):
    exit_code = 4
    default_message = 'Cannot find the VPN tunnel interface'


class NoVPNRoutes(SplitNatError):
    exit_code = 5
    default_message = 'No VPN routes found'


class ConfigValidationFailed(SplitNatError):
    exit_code = 6
    default_message = 'pf rejected the generated configuration'

    def __init__(self, message: str | None = None, hint: str = '', output: str = '') -> None:
        super().__init__(message, hint)
        self.output = output
