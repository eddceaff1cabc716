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

"""VPN tunnel and split-tunnel route discovery."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from splitnat.core._errors import NoVPNInterface, NoVPNRoutes
from splitnat.core.objects import InterfaceKind, InterfaceRef, RouteEntry
from splitnat.inspector import NetworkSnapshot

from ._base import BaseCompiler

logger = logging.getLogger(__name__)

# 10.0.0.0/8 and 172.16.0.0/12 in any netstat shorthand:
# 10/8, 10.9, 10.110.1/27, 172.16, 172.20.1/24, ...
PRIVATE_ROUTE_PATTERNS = (
    re.compile(r'^10[./]'),
    re.compile(r'^172\.(?:1[6-9]|2\d|3[01])(?:[./]|$)'),
)

_VPN_HINT = (
    'The VPN client must be connected before running SplitNAT.\n'
    'Please:\n'
    '  1. Open the VPN client\n'
    '  2. Connect to your VPN\n'
    '  3. Run SplitNAT again'
)


def is_private_destination(destination: str) -> bool:
    return any(p.match(destination) for p in PRIVATE_ROUTE_PATTERNS)


def is_vpn_route(route: RouteEntry) -> bool:
    """A private-network route that is not a host route."""
    return not route.is_host_route and is_private_destination(route.destination)


class RouteExtractor(BaseCompiler):
    """Find the split-tunnel VPN interface and its advertised routes."""

    def extract(
        self,
        snapshot: NetworkSnapshot,
        tunnels: Sequence[InterfaceRef] | None = None,
    ) -> tuple[InterfaceRef, list[str]]:
        """Return ``(vpn_interface, raw_destinations)``.

        Tunnels are tried in snapshot order and the first one owning at
        least one private network route wins.  Raw destinations are
        deduplicated, first occurrence kept.
        """
        if tunnels is None:
            tunnels = snapshot.interfaces_of_kind(InterfaceKind.TUNNEL)

        selected: tuple[InterfaceRef, list[str]] | None = None
        also_qualifying: list[str] = []

        for tunnel in tunnels:
            routes = self.routes_for(snapshot, tunnel)
            if not routes:
                logger.debug('%s: no VPN routes', tunnel.name)
                continue
            if selected is None:
                logger.info('Found %d VPN route(s) on %s', len(routes), tunnel.name)
                selected = (tunnel, routes)
            else:
                also_qualifying.append(tunnel.name)

        if selected is None:
            names = ', '.join(t.name for t in tunnels) or '(none found)'
            raise NoVPNInterface(
                hint=f'{_VPN_HINT}\nTunnel interfaces without VPN routes: {names}',
            )

        vpn, routes = selected
        if also_qualifying:
            self.warning(
                f'Several tunnels carry private routes; using {vpn.name}, '
                f'ignoring {", ".join(also_qualifying)}',
            )
        self.check_routes(vpn, routes)
        return vpn, routes

    @staticmethod
    def routes_for(snapshot: NetworkSnapshot, tunnel: InterfaceRef) -> list[str]:
        seen: dict[str, None] = {}
        for route in snapshot.routes_for(tunnel.name):
            if is_vpn_route(route):
                seen.setdefault(route.destination, None)
        return list(seen)

    @staticmethod
    def check_routes(vpn: InterfaceRef, routes: Sequence[str]) -> None:
        if not routes:
            raise NoVPNRoutes(
                f'No VPN routes found on {vpn.name}',
                hint='The VPN may not be connected or not configured for split tunneling.',
            )
