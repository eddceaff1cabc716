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

"""Canonical settings key definitions using StrEnum.

The keys are the top-level names accepted in the YAML settings file.
Using StrEnum catches typos at import time and lets the keys be used
directly as dict keys.

Example:
    from splitnat.core.options import SettingKey

    data[SettingKey.GUEST_MEMBER] = 'vmenet1'
"""

from enum import StrEnum


class SettingKey(StrEnum):
    """Top-level keys of the settings file."""

    # Discovery
    GUEST_MEMBER = 'guest_member'
    BRIDGE_PREFIXES = 'bridge_prefixes'
    TUNNEL_PREFIXES = 'tunnel_prefixes'
    LOOPBACK_PREFIXES = 'loopback_prefixes'

    # pf anchor installation
    ANCHOR_NAME = 'anchor_name'
    ANCHOR_PATH = 'anchor_path'
    PF_CONF = 'pf_conf'
    PF_CONF_BACKUP = 'pf_conf_backup'
    IP_FORWARDING = 'ip_forwarding'
    USE_SUDO = 'use_sudo'

    # Tool paths
    PFCTL = 'pfctl'
    SYSCTL = 'sysctl'
    IFCONFIG = 'ifconfig'
    NETSTAT = 'netstat'
    ROUTE = 'route'


class SudoMode(StrEnum):
    """When to prefix privileged commands with sudo."""

    AUTO = 'auto'
    ALWAYS = 'always'
    NEVER = 'never'
