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

"""Bridge and WAN interface selection."""

from __future__ import annotations

import logging

from splitnat.core._errors import NoBridgeFound, NoDefaultRoute
from splitnat.core.objects import InterfaceKind, InterfaceRef
from splitnat.core.options import DEFAULT_SETTINGS, Settings
from splitnat.inspector import NetworkSnapshot, classify_interface

from ._base import BaseCompiler

logger = logging.getLogger(__name__)


class InterfaceResolver(BaseCompiler):
    """Pick the guest bridge and the internet egress interface."""

    def __init__(self, settings: Settings = DEFAULT_SETTINGS) -> None:
        super().__init__()
        self.settings = settings

    def resolve(self, snapshot: NetworkSnapshot) -> tuple[InterfaceRef, InterfaceRef]:
        return self.resolve_bridge(snapshot), self.resolve_wan(snapshot)

    def resolve_bridge(self, snapshot: NetworkSnapshot) -> InterfaceRef:
        """Return the bridge holding the guest's virtual adapter.

        When several bridges carry it, the first one in interface order
        wins and the rest are reported as a warning.
        """
        member = self.settings.guest_member
        bridges = snapshot.interfaces_of_kind(InterfaceKind.BRIDGE)
        matches = [b for b in bridges if b.has_member(member)]

        if not matches:
            names = ', '.join(b.name for b in bridges) or '(none found)'
            raise NoBridgeFound(
                hint=(
                    f'Expected a bridge interface with {member} as a member.\n'
                    'Make sure:\n'
                    '  1. Multipass is installed\n'
                    '  2. At least one VM is running\n'
                    '  3. The VM was created with bridge networking\n'
                    f'Current bridges: {names}'
                ),
            )

        bridge = matches[0]
        if len(matches) > 1:
            others = ', '.join(b.name for b in matches[1:])
            self.warning(
                f'{member} is a member of several bridges; using {bridge.name}, ignoring {others}',
            )
        logger.info('Guest bridge: %s', bridge.name)
        return bridge

    def resolve_wan(self, snapshot: NetworkSnapshot) -> InterfaceRef:
        """Return the interface carrying the default route.

        Falls back to the first default route entry whose interface is
        neither a tunnel nor a bridge.
        """
        wan = snapshot.default_route_interface()
        if wan is None:
            for route in snapshot.default_routes():
                iface = snapshot.interface(route.interface) or InterfaceRef(
                    route.interface,
                    kind=classify_interface(route.interface, self.settings),
                )
                if iface.is_tunnel() or iface.is_bridge():
                    continue
                wan = iface
                break

        if wan is None:
            raise NoDefaultRoute(hint='Connect the host to a network and try again.')

        logger.info('WAN interface: %s', wan.name)
        return wan
