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

"""macOS packet filter (pf) backend."""

from ._installer import (
    FileWriter,
    InstallResult,
    LocalFileWriter,
    Pfctl,
    PfInstaller,
    SudoFileWriter,
    use_sudo,
)
from ._os_configurator import OSConfigurator_pf
from ._print_rule import PrintRule_pf
from ._renderer import AnchorRenderer

__all__ = [
    'AnchorRenderer',
    'FileWriter',
    'InstallResult',
    'LocalFileWriter',
    'OSConfigurator_pf',
    'Pfctl',
    'PfInstaller',
    'PrintRule_pf',
    'SudoFileWriter',
    'use_sudo',
]
