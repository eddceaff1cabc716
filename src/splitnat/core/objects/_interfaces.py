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

"""Interface value objects."""

from __future__ import annotations

import dataclasses
import enum


class InterfaceKind(enum.StrEnum):
    BRIDGE = 'bridge'
    PHYSICAL = 'physical'
    TUNNEL = 'tunnel'
    LOOPBACK = 'loopback'


@dataclasses.dataclass(frozen=True)
class InterfaceRef:
    """A network interface as seen in one snapshot.

    Interface names are reassigned across reboots and VPN reconnects,
    so these are never persisted.
    """

    name: str
    kind: InterfaceKind = InterfaceKind.PHYSICAL
    members: tuple[str, ...] = ()

    def __str__(self) -> str:
        return self.name

    def is_bridge(self) -> bool:
        return self.kind == InterfaceKind.BRIDGE

    def is_tunnel(self) -> bool:
        return self.kind == InterfaceKind.TUNNEL

    def has_member(self, name: str) -> bool:
        return name in self.members
