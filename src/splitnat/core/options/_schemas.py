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

"""Typed settings schema with shared defaults.

The dataclass below is the single source of truth for:

1. What settings exist and their types
2. Their default values
3. Documentation of their semantics

Defaults match a stock macOS host running Multipass VMs with the AWS
VPN Client.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    """SplitNAT runtime settings."""

    # Name of the guest's virtual adapter inside the bridge
    guest_member: str = 'vmenet0'

    # Interface name prefixes used to classify interfaces
    bridge_prefixes: tuple[str, ...] = ('bridge',)
    tunnel_prefixes: tuple[str, ...] = ('utun', 'ipsec', 'ppp')
    loopback_prefixes: tuple[str, ...] = ('lo',)

    # pf anchor
    anchor_name: str = 'multipass_vpn'
    anchor_path: str = '/etc/pf.anchors/multipass_vpn'
    pf_conf: str = '/etc/pf.conf'
    # Written once, never overwritten, so it always holds the pre-SplitNAT file
    pf_conf_backup: str = '/etc/pf.conf.backup'
    ip_forwarding: bool = True

    # 'auto' = only when not running as root
    use_sudo: str = 'auto'

    # Tool paths
    pfctl: str = '/sbin/pfctl'
    sysctl: str = '/usr/sbin/sysctl'
    ifconfig: str = '/sbin/ifconfig'
    netstat: str = '/usr/sbin/netstat'
    route: str = '/sbin/route'


DEFAULT_SETTINGS = Settings()
